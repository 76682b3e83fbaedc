import re

import pytest

from sqlforge import (
    Alias,
    BuilderMisuseError,
    CustomPlaceholderError,
    Expr,
    Func,
    PgFunc,
    Query,
    UnsupportedFeatureError,
    Value,
    backend,
)


def _select(expr, dialect="postgres"):
    return Query.select().expr(expr).to_string(dialect)


def test_logical_precedence():
    e = Expr.col("a").eq(1).and_(Expr.col("b").eq(2)).or_(Expr.col("c").eq(3))
    assert _select(e) == 'SELECT ("a" = 1 AND "b" = 2) OR "c" = 3'

    chained = Expr.col("a").eq(1).and_(Expr.col("b").eq(2)).and_(Expr.col("c").eq(3))
    assert _select(chained) == 'SELECT "a" = 1 AND "b" = 2 AND "c" = 3'


def test_arithmetic_precedence():
    assert _select(Expr.col("a").add(1).mul(2)) == 'SELECT ("a" + 1) * 2'
    assert _select(Expr.col("a").add(1).add(2)) == 'SELECT "a" + 1 + 2'
    assert _select(Expr.col("a").sub(Expr.col("b").sub(1))) == 'SELECT "a" - ("b" - 1)'
    assert _select(Expr.col("a").add(1).gt(2)) == 'SELECT "a" + 1 > 2'


def test_not_binds_per_precedence():
    assert _select(Expr.col("a").eq(1).not_()) == 'SELECT NOT "a" = 1'
    assert _select(Expr.col("a").eq(1).or_(Expr.col("b").eq(2)).not_()) == 'SELECT NOT ("a" = 1 OR "b" = 2)'


def test_between_and_like():
    assert _select(Expr.col("a").between(1, 10)) == 'SELECT "a" BETWEEN 1 AND 10'
    assert _select(Expr.col("a").not_like("x%")) == "SELECT \"a\" NOT LIKE 'x%'"


def test_is_null():
    assert _select(Expr.col("a").is_null()) == 'SELECT "a" IS NULL'
    assert _select(Expr.col("a").is_not_null()) == 'SELECT "a" IS NOT NULL'


def test_in_tuples():
    e = Expr.tuple([Expr.col("a"), Expr.col("b")]).in_tuples([(1, "x"), (2, "y")])
    assert _select(e) == "SELECT (\"a\", \"b\") IN ((1, 'x'), (2, 'y'))"


def test_custom_placeholders_are_one_based():
    e = Expr.cust_with_exprs("a $2 b $1 c", [Expr.col("x"), Expr.col("y")])
    assert _select(e) == 'SELECT a "y" b "x" c'


def test_custom_placeholders_bind_in_render_order():
    sql, values = Query.select().expr(Expr.cust_with_values("$2 > $1", [1, 2])).build("postgres")
    assert sql == "SELECT $1 > $2"
    assert values == [Value.int(2), Value.int(1)]


def test_question_mark_placeholders():
    sql, values = Query.select().expr(Expr.cust_with_values("? + ?", [1, 2])).build("sqlite")
    assert sql == "SELECT ? + ?"
    assert values == [Value.int(1), Value.int(2)]
    assert _select(Expr.cust_with_values("?? = ?", ["x"]), "sqlite") == "SELECT ? = 'x'"
    # '?' is only a placeholder where it is also the bind marker
    assert _select(Expr.cust_with_values("a ? $1", [1])) == "SELECT a ? 1"


def test_custom_placeholder_escapes_and_quotes():
    assert _select(Expr.cust_with_values("$$ $1", [1])) == "SELECT $ 1"
    assert _select(Expr.cust_with_values("'$1' = $1", [5])) == "SELECT '$1' = 5"


def test_custom_placeholder_out_of_range():
    with pytest.raises(CustomPlaceholderError, match="outside"):
        _select(Expr.cust_with_values("$3", [1]))
    with pytest.raises(CustomPlaceholderError):
        _select(Expr.cust_with_values("? ?", [1]), "sqlite")


def test_markers_line_up_with_inline_rendering():
    q = (
        Query.select()
        .columns(["a", "b"])
        .from_("t")
        .and_where(Expr.col("a").is_in([1, 2, 3]))
        .and_where(Expr.col("b").like("x%"))
        .and_where(Expr.col("c").between(4.5, 10))
        .limit(20)
    )
    pg = backend.get("postgres")
    sql, values = q.build(pg)
    inlined = re.sub(r"\$(\d+)", lambda m: pg.value_to_string(values[int(m.group(1)) - 1]), sql)
    assert inlined == q.to_string(pg)

    mysql = backend.get("mysql")
    sql, values = q.build(mysql)
    it = iter(values)
    assert re.sub(r"\?", lambda m: mysql.value_to_string(next(it)), sql) == q.to_string(mysql)


def test_case_expression():
    e = Expr.case(Expr.col("a").gt(0), "pos").case(Expr.col("a").lt(0), "neg").finally_("zero")
    assert _select(e) == (
        "SELECT (CASE WHEN (\"a\" > 0) THEN 'pos' WHEN (\"a\" < 0) THEN 'neg' ELSE 'zero' END)"
    )


def test_empty_case_is_rejected():
    from sqlforge import CaseStatement

    with pytest.raises(BuilderMisuseError):
        _select(CaseStatement())


def test_function_spellings():
    if_null = Func.if_null(Expr.col("a"), 0)
    assert _select(if_null) == 'SELECT COALESCE("a", 0)'
    assert _select(if_null, "mysql") == "SELECT IFNULL(`a`, 0)"
    assert _select(if_null, "mssql") == "SELECT ISNULL([a], 0)"
    assert _select(Func.char_length(Expr.col("a")), "sqlite") == 'SELECT LENGTH("a")'
    assert _select(Func.random(), "mysql") == "SELECT RAND()"
    assert _select(Expr.col("a").count_distinct()) == 'SELECT COUNT(DISTINCT "a")'
    assert _select(Func.cust("my_fn").with_args([1, "x"])) == "SELECT my_fn(1, 'x')"


def test_cast_and_enum():
    assert _select(Expr.col("a").cast_as("text")) == 'SELECT CAST("a" AS text)'
    assert _select(Expr.col("a").as_enum("mood")) == 'SELECT CAST("a" AS "mood")'
    assert _select(Expr.col("a").as_enum("mood"), "mysql") == "SELECT `a`"


def test_postgres_only_functions():
    assert _select(PgFunc.to_tsquery("x")) == "SELECT TO_TSQUERY('x')"
    with pytest.raises(UnsupportedFeatureError, match="ANY"):
        _select(PgFunc.any(Expr.col("a")), "mysql")


def test_non_portable_operators():
    assert _select(Expr.col("a").ilike("x%")) == "SELECT \"a\" ILIKE 'x%'"
    assert _select(Expr.col("a").ilike("x%"), "mysql") == "SELECT `a` LIKE 'x%'"
    assert _select(Expr.col("a").get_json_field("k"), "mysql") == "SELECT `a` -> 'k'"
    assert _select(Expr.col("a").concat("x")) == "SELECT \"a\" || 'x'"
    with pytest.raises(UnsupportedFeatureError, match="@@"):
        _select(Expr.col("a").matches(Expr.col("b")), "mysql")
    with pytest.raises(UnsupportedFeatureError, match="GLOB"):
        _select(Expr.col("a").glob("x*"), "postgres")


def test_keywords():
    assert _select(Expr.current_timestamp()) == "SELECT CURRENT_TIMESTAMP"
    assert _select(Expr.custom_keyword("LOCALTIME")) == "SELECT LOCALTIME"


def test_unsupported_value_coercion():
    from sqlforge import ValueTypeMismatchError

    with pytest.raises(ValueTypeMismatchError):
        Expr.val(object())


def test_literal_nodes_have_required_fields():
    from dataclasses import MISSING, fields

    from sqlforge.expr import AsEnumExpr, ConstantExpr, TruthExpr, ValueExpr, ValuesExpr

    for node in (ValueExpr, ValuesExpr, ConstantExpr, AsEnumExpr, TruthExpr):
        assert all(f.default is MISSING for f in fields(node)), node.__name__

    assert ValueExpr(Value.int(1)).literal == Value.int(1)
    assert ConstantExpr(Value.int(2)).literal == Value.int(2)
    assert ValuesExpr((Value.int(1),)).literals == (Value.int(1),)
    assert AsEnumExpr(Alias("mood"), Expr.col("b")).enum_name == Alias("mood")
    assert _select(Expr.val(3)) == "SELECT 3"
    assert _select(Expr.values([1, "a"])) == "SELECT (1, 'a')"
    assert _select(Expr.constant(2)) == "SELECT 2"
