import pytest

from sqlforge import (
    ArityMismatchError,
    BuilderMisuseError,
    CommonTableExpression,
    Expr,
    IdenEnum,
    OnConflict,
    Order,
    Query,
    UnsupportedFeatureError,
    Value,
    WithClause,
)


class Glyph(IdenEnum):
    Table = "glyph"
    Id = "id"
    Aspect = "aspect"
    Image = "image"


def _insert(**overrides):
    q = Query.insert().into_table(overrides.get("table", "t")).columns(overrides.get("columns", ["a"]))
    for row in overrides.get("rows", [[1]]):
        q.values(row)
    return q


def test_upsert_postgres():
    q = (
        Query.insert()
        .into_table(Glyph.Table)
        .columns([Glyph.Aspect, Glyph.Image])
        .values_panic([3.1415, "hex"])
        .on_conflict(OnConflict.column(Glyph.Id).update_column(Glyph.Aspect))
    )
    assert q.to_string("postgres") == (
        'INSERT INTO "glyph" ("aspect", "image") VALUES (3.1415, \'hex\') '
        'ON CONFLICT ("id") DO UPDATE SET "aspect" = "excluded"."aspect"'
    )


def test_update_mysql_binds_in_order():
    sql, values = (
        Query.update()
        .table(Glyph.Table)
        .values([(Glyph.Aspect, 2.1345), (Glyph.Image, "X")])
        .and_where(Expr.col(Glyph.Id).eq(1))
        .build("mysql")
    )
    assert sql == "UPDATE `glyph` SET `aspect` = ?, `image` = ? WHERE `id` = ?"
    assert values == [Value.double(2.1345), Value.string("X"), Value.int(1)]


def test_insert_multiple_rows():
    sql, values = _insert(columns=["a", "b"], rows=[[1, "x"], [2, "y"]]).build("sqlite")
    assert sql == 'INSERT INTO "t" ("a", "b") VALUES (?, ?), (?, ?)'
    assert values == [Value.int(1), Value.string("x"), Value.int(2), Value.string("y")]


def test_insert_row_arity_is_checked():
    with pytest.raises(ArityMismatchError, match="2 values but 1 columns"):
        _insert(rows=[[1, 2]])


def test_insert_sources_are_exclusive():
    with pytest.raises(BuilderMisuseError):
        _insert().select_from(Query.select().column("a").from_("s"))
    q = Query.insert().into_table("t").columns(["a"]).select_from(Query.select().column("a").from_("s"))
    with pytest.raises(BuilderMisuseError):
        q.values([1])


def test_insert_from_select():
    q = Query.insert().into_table("t").columns(["a"]).select_from(Query.select().column("a").from_("s"))
    assert q.to_string("postgres") == 'INSERT INTO "t" ("a") SELECT "a" FROM "s"'
    with pytest.raises(ArityMismatchError):
        Query.insert().into_table("t").columns(["a"]).select_from(Query.select().columns(["a", "b"]).from_("s"))


def test_insert_without_rows_is_rejected():
    with pytest.raises(BuilderMisuseError, match="no rows"):
        Query.insert().into_table("t").columns(["a"]).to_string("postgres")
    with pytest.raises(BuilderMisuseError, match="target table"):
        Query.insert().columns(["a"]).values([1]).to_string("postgres")


def test_default_values():
    q = Query.insert().into_table("t").or_default_values()
    assert q.to_string("postgres") == 'INSERT INTO "t" DEFAULT VALUES'
    assert q.to_string("mysql") == "INSERT INTO `t` () VALUES ()"
    with pytest.raises(UnsupportedFeatureError):
        q.to_string("oracle")


def test_replace_into():
    q = _insert().replace()
    assert q.to_string("mysql") == "REPLACE INTO `t` (`a`) VALUES (1)"
    assert q.to_string("sqlite") == 'REPLACE INTO "t" ("a") VALUES (1)'
    with pytest.raises(UnsupportedFeatureError, match="REPLACE INTO"):
        q.to_string("postgres")


def test_on_conflict_do_nothing():
    q = _insert().on_conflict(OnConflict.column("a").do_nothing())
    assert q.to_string("postgres") == 'INSERT INTO "t" ("a") VALUES (1) ON CONFLICT ("a") DO NOTHING'
    assert q.to_string("mysql") == "INSERT IGNORE INTO `t` (`a`) VALUES (1)"


def test_on_conflict_on_duplicate_key_mysql():
    q = _insert().on_conflict(OnConflict.new().update_column("a"))
    assert q.to_string("mysql") == "INSERT INTO `t` (`a`) VALUES (1) ON DUPLICATE KEY UPDATE `a` = VALUES(`a`)"


def test_on_conflict_with_where_clauses():
    oc = (
        OnConflict.column("a")
        .target_and_where(Expr.col("b").is_not_null())
        .update_column("c")
        .action_and_where(Expr.col("d").gt(0))
    )
    q = _insert().on_conflict(oc)
    assert q.to_string("postgres") == (
        'INSERT INTO "t" ("a") VALUES (1) ON CONFLICT ("a") WHERE "b" IS NOT NULL '
        'DO UPDATE SET "c" = "excluded"."c" WHERE "d" > 0'
    )
    with pytest.raises(UnsupportedFeatureError):
        q.to_string("mysql")


def test_on_conflict_value_override_and_constraint():
    oc = OnConflict.on_constraint("uq_a").value("n", Expr.col("n").add(1))
    assert _insert().on_conflict(oc).to_string("postgres") == (
        'INSERT INTO "t" ("a") VALUES (1) ON CONFLICT ON CONSTRAINT "uq_a" DO UPDATE SET "n" = "n" + 1'
    )


def test_on_conflict_needs_an_action():
    with pytest.raises(BuilderMisuseError, match="needs an action"):
        _insert().on_conflict(OnConflict.column("a")).to_string("postgres")


def test_on_conflict_unsupported_dialects():
    q = _insert().on_conflict(OnConflict.column("a").do_nothing())
    for dialect in ("mssql", "oracle", "bigquery"):
        with pytest.raises(UnsupportedFeatureError, match="ON CONFLICT"):
            q.to_string(dialect)


def test_returning():
    sql, values = _insert().returning_col("id").build("postgres")
    assert sql == 'INSERT INTO "t" ("a") VALUES ($1) RETURNING "id"'
    assert values == [Value.int(1)]
    assert _insert().returning_all().to_string("sqlite") == 'INSERT INTO "t" ("a") VALUES (1) RETURNING *'
    with pytest.raises(UnsupportedFeatureError, match="RETURNING"):
        _insert().returning_all().to_string("mysql")


def test_mssql_output_clause():
    sql, _ = _insert().returning_col("id").build("mssql")
    assert sql == "INSERT INTO [t] ([a]) OUTPUT INSERTED.[id] VALUES (@P1)"

    delete = Query.delete().from_table("t").and_where(Expr.col("id").eq(1)).returning_all()
    assert delete.build("mssql")[0] == "DELETE FROM [t] OUTPUT DELETED.* WHERE [id] = @P1"

    update = Query.update().table("t").value("a", 2).returning_col("a")
    assert update.to_string("mssql") == "UPDATE [t] SET [a] = 2 OUTPUT INSERTED.[a]"


def test_update_from():
    q = (
        Query.update()
        .table("t")
        .value("a", Expr.col(("s", "a")))
        .from_("s")
        .and_where(Expr.col(("t", "id")).equals(("s", "id")))
    )
    assert q.to_string("postgres") == 'UPDATE "t" SET "a" = "s"."a" FROM "s" WHERE "t"."id" = "s"."id"'
    with pytest.raises(UnsupportedFeatureError, match="UPDATE ... FROM"):
        q.to_string("mysql")


def test_update_order_and_limit():
    q = Query.update().table("t").value("a", 1).order_by("id", Order.ASC).limit(1)
    assert q.to_string("mysql") == "UPDATE `t` SET `a` = 1 ORDER BY `id` ASC LIMIT 1"
    with pytest.raises(UnsupportedFeatureError):
        q.to_string("postgres")


def test_update_needs_assignments():
    with pytest.raises(BuilderMisuseError, match="assignment"):
        Query.update().table("t").to_string("postgres")


def test_delete():
    q = Query.delete().from_table("t").and_where(Expr.col("id").eq(1))
    assert q.to_string("postgres") == 'DELETE FROM "t" WHERE "id" = 1'
    limited = Query.delete().from_table("t").order_by("id").limit(10)
    assert limited.to_string("mysql") == "DELETE FROM `t` ORDER BY `id` ASC LIMIT 10"
    with pytest.raises(BuilderMisuseError, match="DELETE needs a table"):
        Query.delete().to_string("postgres")


def test_insert_with_cte():
    cte = CommonTableExpression.new().table_name("src").query(Query.select().column("a").from_("s"))
    q = (
        Query.insert()
        .into_table("t")
        .columns(["a"])
        .select_from(Query.select().column("a").from_("src"))
        .with_cte(WithClause.new().cte(cte))
    )
    assert q.to_string("postgres") == (
        'WITH "src" AS (SELECT "a" FROM "s") INSERT INTO "t" ("a") SELECT "a" FROM "src"'
    )
