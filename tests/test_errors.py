import pytest

from sqlforge import (
    ArityMismatchError,
    BuilderMisuseError,
    CustomPlaceholderError,
    ErrorCode,
    Query,
    SqlForgeError,
    UnsupportedFeatureError,
    ValueTypeMismatchError,
    problem_to_dict,
)


def test_unsupported_feature_problem():
    err = UnsupportedFeatureError("mysql", "RETURNING")
    assert str(err) == "mysql does not support RETURNING"
    assert err.dialect == "mysql"
    assert err.feature == "RETURNING"
    assert problem_to_dict(err.problem) == {
        "code": "SQLFORGE_UNSUPPORTED_FEATURE",
        "category": "dialect",
        "message": "mysql does not support RETURNING",
        "details": {"dialect": "mysql", "feature": "RETURNING"},
    }


def test_remediation_is_kept_when_set():
    err = BuilderMisuseError("bad", remediation="Call table()")
    d = problem_to_dict(err.problem)
    assert d["remediation"] == "Call table()"
    assert d["code"] == "SQLFORGE_BUILDER_MISUSE"
    assert d["category"] == "builder"


def test_error_hierarchy_and_codes():
    assert issubclass(ArityMismatchError, BuilderMisuseError)
    assert issubclass(UnsupportedFeatureError, BuilderMisuseError)
    assert issubclass(ValueTypeMismatchError, TypeError)
    assert ArityMismatchError("x").code is ErrorCode.ARITY_MISMATCH
    assert CustomPlaceholderError("x").problem.category == "template"
    assert ValueTypeMismatchError("x").problem.category == "value"


def test_cause_is_chained():
    cause = KeyError("k")
    err = SqlForgeError("wrapped", cause=cause)
    assert err.__cause__ is cause
    assert err.cause is cause


def test_rendering_errors_carry_structured_details():
    with pytest.raises(UnsupportedFeatureError) as excinfo:
        Query.insert().into_table("t").columns(["a"]).values([1]).returning_all().to_string("mysql")
    assert excinfo.value.problem.details == {"dialect": "mysql", "feature": "RETURNING"}
    assert excinfo.value.problem.remediation is not None


def test_incomplete_nodes_raise_library_errors():
    from sqlforge import ColumnDef, Table, Value, ValueKind
    from sqlforge.expr import Function, FunctionCall, KeywordExpr
    from sqlforge.schema.column import ColumnType, ColumnTypeKind
    from sqlforge.types import Keyword, KeywordKind

    tags = ColumnDef("tags")
    tags.types = ColumnType(ColumnTypeKind.ARRAY)
    for dialect in ("postgres", "bigquery", "databend"):
        with pytest.raises(BuilderMisuseError, match="element type"):
            Table.create().table("t").col(tags).to_string(dialect)

    with pytest.raises(BuilderMisuseError, match="custom function needs a name"):
        Query.select().expr(FunctionCall(Function.CUSTOM)).to_string("postgres")
    with pytest.raises(BuilderMisuseError, match="custom keyword"):
        Query.select().expr(KeywordExpr(Keyword(KeywordKind.CUSTOM))).to_string("postgres")
    with pytest.raises(ValueTypeMismatchError, match="element type"):
        hash(Value(ValueKind.ARRAY, (1,)))
