import datetime as dt
import math
import uuid
from decimal import Decimal

import pytest

from sqlforge import (
    ArrayType,
    RangeValue,
    UnsupportedFeatureError,
    Value,
    ValueKind,
    Values,
    ValueTypeMismatchError,
    backend,
)
from sqlforge.value import into_value

PLUS_TWO = dt.timezone(dt.timedelta(hours=2))


def _lit(value, dialect="postgres"):
    return backend.get(dialect).value_to_string(value)


def test_into_value_picks_kinds():
    assert into_value(True).kind is ValueKind.BOOL
    assert into_value(5).kind is ValueKind.INT
    assert into_value(2 ** 31).kind is ValueKind.BIG_INT
    assert into_value(2 ** 63).kind is ValueKind.BIG_UNSIGNED
    assert into_value(1.5).kind is ValueKind.DOUBLE
    assert into_value("x").kind is ValueKind.STRING
    assert into_value(b"x").kind is ValueKind.BYTES
    assert into_value(dt.date(2020, 1, 2)).kind is ValueKind.DATE
    assert into_value(dt.time(3, 4)).kind is ValueKind.TIME
    assert into_value(dt.datetime(2020, 1, 2)).kind is ValueKind.DATE_TIME
    assert into_value(dt.datetime(2020, 1, 2, tzinfo=dt.timezone.utc)).kind is ValueKind.DATE_TIME_UTC
    assert into_value(dt.datetime(2020, 1, 2, tzinfo=PLUS_TWO)).kind is ValueKind.DATE_TIME_WITH_TZ
    assert into_value(Decimal("1.5")).kind is ValueKind.DECIMAL
    assert into_value(uuid.UUID(int=1)).kind is ValueKind.UUID
    assert into_value({"a": 1}).kind is ValueKind.JSON
    assert into_value(RangeValue(1, 10)).kind is ValueKind.RANGE


def test_into_value_rejects():
    with pytest.raises(ValueError):
        into_value(2 ** 64)
    with pytest.raises(ValueError):
        into_value(-(2 ** 63) - 1)
    with pytest.raises(ValueTypeMismatchError, match="bare None"):
        into_value(None)
    with pytest.raises(TypeError):
        into_value(object())


def test_integer_bounds_and_types():
    assert Value.tiny_int(127).payload == 127
    with pytest.raises(ValueError, match="out of range"):
        Value.tiny_int(128)
    with pytest.raises(ValueError):
        Value.unsigned(-1)
    with pytest.raises(ValueTypeMismatchError):
        Value.int(True)
    with pytest.raises(ValueTypeMismatchError):
        Value.int("3")


def test_constructor_validation():
    with pytest.raises(ValueError):
        Value.char("ab")
    with pytest.raises(ValueError):
        Value.date_time(dt.datetime(2020, 1, 1, tzinfo=dt.timezone.utc))
    with pytest.raises(ValueError):
        Value.date_time_utc(dt.datetime(2020, 1, 1))
    with pytest.raises(ValueError):
        Value.mac_address("not-a-mac")
    assert Value.mac_address("AA-BB-CC-DD-EE-FF").payload == "aa:bb:cc:dd:ee:ff"
    with pytest.raises(ValueError):
        ValueKind.ARRAY.null()


def test_typed_nulls():
    assert Value.int(None) == ValueKind.INT.null()
    assert Value.int(None) != Value.string(None)
    assert Value.int(None).is_null
    assert _lit(ValueKind.STRING.null()) == "NULL"


def test_float_equality_folds_zero_and_nan():
    assert len({Value.float(0.0), Value.float(-0.0)}) == 1
    assert len({Value.double(math.nan), Value.double(math.nan)}) == 1
    assert Value.double(1.0) != Value.float(1.0)


def test_json_equality_ignores_key_order():
    assert Value.json({"a": 1, "b": 2}) == Value.json({"b": 2, "a": 1})
    assert hash(Value.json({"a": 1, "b": 2})) == hash(Value.json({"b": 2, "a": 1}))


def test_values_are_immutable():
    v = Value.int(1)
    with pytest.raises(AttributeError):
        v.payload = 2


def test_repr():
    assert repr(Value.int(3)) == "Int(3)"
    assert repr(Value.string(None)) == "String(None)"
    assert repr(Value.big_unsigned(1)) == "BigUnsigned(1)"
    assert repr(Values([Value.int(1)])) == "Values([Int(1)])"


def test_extract_and_unwrap():
    assert Value.int(3).extract(ValueKind.INT) == 3
    assert Value.int(None).extract(ValueKind.INT) is None
    with pytest.raises(ValueTypeMismatchError, match="Expected a string value, got int"):
        Value.int(3).extract(ValueKind.STRING)
    with pytest.raises(ValueTypeMismatchError, match="NULL"):
        Value.int(None).unwrap(ValueKind.INT)
    assert Value.array(ArrayType.INT, [1, 2]).extract(ValueKind.ARRAY) == [1, 2]


def test_arrays():
    arr = Value.array(ArrayType.STRING, ["a", None])
    assert arr.element_values() == [Value.string("a"), Value.string(None)]
    assert Value.array(ArrayType.INT, [Value.int(1)]).payload == (1,)
    with pytest.raises(ValueTypeMismatchError):
        Value.array(ArrayType.INT, [Value.string("x")])
    assert Value.array(ArrayType.INT, None) == ArrayType.INT.null()


def test_into_value_infers_arrays_from_lists():
    assert into_value([1, 2]) == Value.array(ArrayType.INT, [1, 2])
    assert into_value(["a", None]) == Value.array(ArrayType.STRING, ["a", None])
    assert into_value([1, 2 ** 40]).element_type is ArrayType.BIG_INT
    assert into_value([dt.date(2024, 1, 2)]).element_type is ArrayType.DATE
    assert _lit(into_value([1, 2])) == "ARRAY[1,2]"


def test_into_value_rejects_ambiguous_lists():
    with pytest.raises(ValueTypeMismatchError, match="empty list"):
        into_value([])
    with pytest.raises(ValueTypeMismatchError, match="empty list"):
        into_value([None])
    with pytest.raises(ValueTypeMismatchError, match="mixed kinds: int, string"):
        into_value([1, "a"])
    with pytest.raises(ValueTypeMismatchError, match="cannot be an array element"):
        into_value([[1], [2]])


def test_numeric_literals():
    assert _lit(Value.int(-5)) == "-5"
    assert _lit(Value.double(2.5)) == "2.5"
    assert _lit(Value.double(3.0)) == "3"
    assert _lit(Value.double(-0.0)) == "0"
    assert _lit(Value.double(1e20)) == "100000000000000000000"
    assert _lit(Value.float(0.1)) == "0.1"
    assert _lit(Value.decimal(Decimal("1.50"))) == "1.50"


def test_bool_literals():
    assert _lit(Value.bool(True)) == "TRUE"
    assert _lit(Value.bool(False), "sqlite") == "FALSE"
    assert _lit(Value.bool(True), "mssql") == "1"
    assert _lit(Value.bool(False), "oracle") == "0"


def test_string_literals():
    assert _lit(Value.string("it's")) == "'it''s'"
    assert _lit(Value.string("a\nb")) == "E'a\\nb'"
    assert _lit(Value.string("it's"), "mysql") == "'it\\'s'"
    assert _lit(Value.string("a\\b"), "mysql") == "'a\\\\b'"
    assert _lit(Value.string("a\nb"), "sqlite") == "'a\nb'"
    assert _lit(Value.string("it's"), "mssql") == "'it''s'"


@pytest.mark.parametrize("dialect", ["postgres", "mysql", "sqlite", "mssql", "oracle", "bigquery", "databend"])
def test_escape_round_trip(dialect):
    d = backend.get(dialect)
    for s in ["plain", "it's", "back\\slash", "line\nbreak\ttab", "quote\"s", "\x1a\0\r\b", "''", "\\'"]:
        assert d.unescape_string(d.escape_string(s)) == s


def test_bytes_literals():
    b = Value.bytes(b"\x0a\x0b")
    assert _lit(b) == "'\\x0A0B'"
    assert _lit(b, "mysql") == "X'0A0B'"
    assert _lit(b, "mssql") == "0x0A0B"
    assert _lit(b, "oracle") == "HEXTORAW('0A0B')"
    assert _lit(b, "bigquery") == "FROM_HEX('0a0b')"


def test_temporal_literals():
    assert _lit(Value.date(dt.date(2020, 1, 2))) == "'2020-01-02'"
    assert _lit(Value.time(dt.time(3, 4, 5, 123))) == "'03:04:05.000123'"
    assert _lit(Value.date_time(dt.datetime(2020, 1, 2, 3, 4, 5))) == "'2020-01-02 03:04:05'"
    aware = Value.date_time_with_tz(dt.datetime(2020, 1, 2, 3, 4, 5, tzinfo=PLUS_TWO))
    assert _lit(aware) == "'2020-01-02 03:04:05 +02:00'"
    assert _lit(aware, "sqlite") == "'2020-01-02 03:04:05+02:00'"
    utc = Value.date_time_utc(dt.datetime(2020, 1, 2, 5, 4, 5, tzinfo=PLUS_TWO))
    assert _lit(utc) == "'2020-01-02 03:04:05 +00:00'"


def test_other_scalar_literals():
    assert _lit(Value.json({"a": 1})) == "'{\"a\":1}'"
    assert _lit(Value.uuid(uuid.UUID(int=1))) == "'00000000-0000-0000-0000-000000000001'"
    assert _lit(Value.enum("mood", "happy")) == "'happy'"
    assert _lit(Value.ip_network("10.0.0.0/8")) == "'10.0.0.0/8'"


def test_array_literals():
    assert _lit(Value.array(ArrayType.INT, [1, 2])) == "ARRAY[1,2]"
    assert _lit(Value.array(ArrayType.STRING, ["a", None])) == "ARRAY['a',NULL]"
    assert _lit(Value.array(ArrayType.INT, [])) == "'{}'"
    assert _lit(Value.array(ArrayType.INT, [1, 2]), "bigquery") == "[1, 2]"
    with pytest.raises(UnsupportedFeatureError, match="array values"):
        _lit(Value.array(ArrayType.INT, [1]), "mysql")


def test_vector_and_range_literals():
    assert _lit(Value.vector([1.0, 2.5])) == "'[1,2.5]'"
    assert _lit(Value.range(RangeValue(1, 10))) == "'[1,10)'"
    assert _lit(Value.range(RangeValue(None, 10, upper_inclusive=True))) == "'(,10]'"
    assert _lit(Value.range(RangeValue(empty=True))) == "'empty'"
    with pytest.raises(UnsupportedFeatureError):
        _lit(Value.vector([1.0]), "sqlite")


def test_unbindable_values_fail_at_build():
    from sqlforge import Expr, Query

    q = Query.select().column("a").from_("t").and_where(Expr.col("a").eq(Value.array(ArrayType.INT, [1])))
    sql, values = q.build("postgres")
    assert sql == 'SELECT "a" FROM "t" WHERE "a" = $1'
    assert values == [Value.array(ArrayType.INT, [1])]
    with pytest.raises(UnsupportedFeatureError):
        q.build("mysql")
