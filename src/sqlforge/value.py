"""
Runtime values.

A ``Value`` is a ``(kind, payload)`` pair. A payload of ``None`` is the SQL
NULL of that kind; ``Value.int(None)`` and ``ValueKind.INT.null()`` are the
same value. Values are immutable, compare structurally and are hashable,
so they can be used as set members and dict keys.
"""

from __future__ import annotations

import datetime as dt
import ipaddress
import json
import math
import re
import uuid
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, List, Optional, Sequence, Tuple

from .errors import ValueTypeMismatchError


class ValueKind(str, Enum):
    BOOL = "bool"
    TINY_INT = "tiny_int"
    SMALL_INT = "small_int"
    INT = "int"
    BIG_INT = "big_int"
    TINY_UNSIGNED = "tiny_unsigned"
    SMALL_UNSIGNED = "small_unsigned"
    UNSIGNED = "unsigned"
    BIG_UNSIGNED = "big_unsigned"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    STRING = "string"
    BYTES = "bytes"
    JSON = "json"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"
    DATE_TIME_UTC = "date_time_utc"
    DATE_TIME_LOCAL = "date_time_local"
    DATE_TIME_WITH_TZ = "date_time_with_tz"
    UUID = "uuid"
    DECIMAL = "decimal"
    BIG_DECIMAL = "big_decimal"
    IP_NETWORK = "ip_network"
    MAC_ADDRESS = "mac_address"
    ENUM = "enum"
    ARRAY = "array"
    VECTOR = "vector"
    RANGE = "range"

    def null(self, element_type: Optional[ArrayType] = None, type_name: Optional[str] = None) -> Value:
        if self is ValueKind.ARRAY:
            if element_type is None:
                raise ValueError("A NULL array needs its element type")
            return Value(ValueKind.ARRAY, None, element_type, type_name)
        return Value(self, None, None, type_name)

    @property
    def is_temporal(self) -> bool:
        return self in _TEMPORAL_KINDS

    @property
    def is_integer(self) -> bool:
        return self in INTEGER_BOUNDS


class ArrayType(str, Enum):
    BOOL = "bool"
    TINY_INT = "tiny_int"
    SMALL_INT = "small_int"
    INT = "int"
    BIG_INT = "big_int"
    TINY_UNSIGNED = "tiny_unsigned"
    SMALL_UNSIGNED = "small_unsigned"
    UNSIGNED = "unsigned"
    BIG_UNSIGNED = "big_unsigned"
    FLOAT = "float"
    DOUBLE = "double"
    CHAR = "char"
    STRING = "string"
    BYTES = "bytes"
    JSON = "json"
    DATE = "date"
    TIME = "time"
    DATE_TIME = "date_time"
    DATE_TIME_UTC = "date_time_utc"
    DATE_TIME_LOCAL = "date_time_local"
    DATE_TIME_WITH_TZ = "date_time_with_tz"
    UUID = "uuid"
    DECIMAL = "decimal"
    BIG_DECIMAL = "big_decimal"
    IP_NETWORK = "ip_network"
    MAC_ADDRESS = "mac_address"
    ENUM = "enum"

    @property
    def element_kind(self) -> ValueKind:
        return ValueKind(self.value)

    def null(self, type_name: Optional[str] = None) -> Value:
        return Value(ValueKind.ARRAY, None, self, type_name)


_TEMPORAL_KINDS = frozenset(
    {
        ValueKind.DATE,
        ValueKind.TIME,
        ValueKind.DATE_TIME,
        ValueKind.DATE_TIME_UTC,
        ValueKind.DATE_TIME_LOCAL,
        ValueKind.DATE_TIME_WITH_TZ,
    }
)

INTEGER_BOUNDS = {
    ValueKind.TINY_INT: (-(2 ** 7), 2 ** 7 - 1),
    ValueKind.SMALL_INT: (-(2 ** 15), 2 ** 15 - 1),
    ValueKind.INT: (-(2 ** 31), 2 ** 31 - 1),
    ValueKind.BIG_INT: (-(2 ** 63), 2 ** 63 - 1),
    ValueKind.TINY_UNSIGNED: (0, 2 ** 8 - 1),
    ValueKind.SMALL_UNSIGNED: (0, 2 ** 16 - 1),
    ValueKind.UNSIGNED: (0, 2 ** 32 - 1),
    ValueKind.BIG_UNSIGNED: (0, 2 ** 64 - 1),
}

_MAC_RE = re.compile(r"^[0-9A-Fa-f]{2}([:-])[0-9A-Fa-f]{2}(\1[0-9A-Fa-f]{2}){4}$")


@dataclass(frozen=True)
class RangeValue:
    """A Postgres range literal such as ``[1,10)``. Unbounded ends are None."""

    lower: Any = None
    upper: Any = None
    lower_inclusive: bool = True
    upper_inclusive: bool = False
    empty: bool = False

    def literal(self) -> str:
        if self.empty:
            return "empty"
        lo = "" if self.lower is None else _range_bound(self.lower)
        hi = "" if self.upper is None else _range_bound(self.upper)
        left = "[" if self.lower_inclusive and self.lower is not None else "("
        right = "]" if self.upper_inclusive and self.upper is not None else ")"
        return f"{left}{lo},{hi}{right}"


def _range_bound(v: Any) -> str:
    if isinstance(v, dt.datetime):
        return v.isoformat(sep=" ")
    if isinstance(v, (dt.date, Decimal, int, float)):
        return str(v)
    raise ValueTypeMismatchError(f"Unsupported range bound {type(v).__name__}")


def canonical_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _norm(kind: ValueKind, payload: Any) -> Any:
    if payload is None:
        return None
    if kind in (ValueKind.FLOAT, ValueKind.DOUBLE):
        if math.isnan(payload):
            return ("nan",)
        return payload + 0.0  # folds -0.0 into +0.0
    if kind is ValueKind.JSON:
        return canonical_json(payload)
    if kind is ValueKind.VECTOR:
        return tuple(_norm(ValueKind.FLOAT, f) for f in payload)
    return payload


class Value:
    __slots__ = ("kind", "payload", "element_type", "type_name")

    kind: ValueKind
    payload: Any
    element_type: Optional[ArrayType]
    type_name: Optional[str]

    def __init__(
        self,
        kind: ValueKind,
        payload: Any,
        element_type: Optional[ArrayType] = None,
        type_name: Optional[str] = None,
    ) -> None:
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "payload", payload)
        object.__setattr__(self, "element_type", element_type)
        object.__setattr__(self, "type_name", type_name)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Value is immutable")

    def __reduce__(self) -> Tuple[Any, ...]:
        return (Value, (self.kind, self.payload, self.element_type, self.type_name))

    def __copy__(self) -> Value:
        return self

    def __deepcopy__(self, memo: Any) -> Value:
        return self

    def _key(self) -> Tuple[Any, ...]:
        if self.kind is ValueKind.ARRAY and self.payload is not None:
            if self.element_type is None:
                raise ValueTypeMismatchError("An array value needs its element type")
            ek = self.element_type.element_kind
            payload: Any = tuple(_norm(ek, item) for item in self.payload)
        else:
            payload = _norm(self.kind, self.payload)
        return (self.kind, self.element_type, self.type_name, payload)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        name = "".join(p.capitalize() for p in self.kind.value.split("_"))
        if self.payload is None:
            return f"{name}(None)"
        return f"{name}({self.payload!r})"

    @property
    def is_null(self) -> bool:
        return self.payload is None

    # -- constructors -------------------------------------------------------

    @classmethod
    def _integer(cls, kind: ValueKind, v: Optional[int]) -> Value:
        if v is not None:
            if isinstance(v, bool) or not isinstance(v, int):
                raise ValueTypeMismatchError(f"{kind.value} expects an int, got {type(v).__name__}")
            lo, hi = INTEGER_BOUNDS[kind]
            if not lo <= v <= hi:
                raise ValueError(f"{v} is out of range for {kind.value}")
        return cls(kind, v)

    @classmethod
    def bool(cls, v: Optional[bool]) -> Value:
        return cls(ValueKind.BOOL, None if v is None else bool(v))

    @classmethod
    def tiny_int(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.TINY_INT, v)

    @classmethod
    def small_int(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.SMALL_INT, v)

    @classmethod
    def int(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.INT, v)

    @classmethod
    def big_int(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.BIG_INT, v)

    @classmethod
    def tiny_unsigned(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.TINY_UNSIGNED, v)

    @classmethod
    def small_unsigned(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.SMALL_UNSIGNED, v)

    @classmethod
    def unsigned(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.UNSIGNED, v)

    @classmethod
    def big_unsigned(cls, v: Optional[int]) -> Value:
        return cls._integer(ValueKind.BIG_UNSIGNED, v)

    @classmethod
    def float(cls, v: Optional[float]) -> Value:
        return cls(ValueKind.FLOAT, None if v is None else float(v))

    @classmethod
    def double(cls, v: Optional[float]) -> Value:
        return cls(ValueKind.DOUBLE, None if v is None else float(v))

    @classmethod
    def char(cls, v: Optional[str]) -> Value:
        if v is not None and len(v) != 1:
            raise ValueError(f"char expects a single character, got {v!r}")
        return cls(ValueKind.CHAR, v)

    @classmethod
    def string(cls, v: Optional[str]) -> Value:
        return cls(ValueKind.STRING, v)

    @classmethod
    def bytes(cls, v: Optional[bytes]) -> Value:
        return cls(ValueKind.BYTES, None if v is None else bytes(v))

    @classmethod
    def json(cls, v: Any) -> Value:
        return cls(ValueKind.JSON, v)

    @classmethod
    def date(cls, v: Optional[dt.date]) -> Value:
        return cls(ValueKind.DATE, v)

    @classmethod
    def time(cls, v: Optional[dt.time]) -> Value:
        return cls(ValueKind.TIME, v)

    @classmethod
    def date_time(cls, v: Optional[dt.datetime]) -> Value:
        if v is not None and v.tzinfo is not None:
            raise ValueError("date_time expects a naive datetime")
        return cls(ValueKind.DATE_TIME, v)

    @classmethod
    def date_time_utc(cls, v: Optional[dt.datetime]) -> Value:
        if v is not None:
            if v.tzinfo is None:
                raise ValueError("date_time_utc expects an aware datetime")
            v = v.astimezone(dt.timezone.utc)
        return cls(ValueKind.DATE_TIME_UTC, v)

    @classmethod
    def date_time_local(cls, v: Optional[dt.datetime]) -> Value:
        if v is not None:
            v = v.astimezone()
        return cls(ValueKind.DATE_TIME_LOCAL, v)

    @classmethod
    def date_time_with_tz(cls, v: Optional[dt.datetime]) -> Value:
        if v is not None and v.tzinfo is None:
            raise ValueError("date_time_with_tz expects an aware datetime")
        return cls(ValueKind.DATE_TIME_WITH_TZ, v)

    @classmethod
    def uuid(cls, v: Optional[uuid.UUID]) -> Value:
        return cls(ValueKind.UUID, v)

    @classmethod
    def decimal(cls, v: Optional[Decimal]) -> Value:
        return cls(ValueKind.DECIMAL, None if v is None else Decimal(v))

    @classmethod
    def big_decimal(cls, v: Optional[Decimal]) -> Value:
        return cls(ValueKind.BIG_DECIMAL, None if v is None else Decimal(v))

    @classmethod
    def ip_network(cls, v: Any) -> Value:
        if v is not None and not isinstance(v, (ipaddress.IPv4Network, ipaddress.IPv6Network, ipaddress.IPv4Interface, ipaddress.IPv6Interface)):
            v = ipaddress.ip_interface(v)
        return cls(ValueKind.IP_NETWORK, v)

    @classmethod
    def mac_address(cls, v: Optional[str]) -> Value:
        if v is not None:
            if not _MAC_RE.match(v):
                raise ValueError(f"Not a MAC address: {v!r}")
            v = v.replace("-", ":").lower()
        return cls(ValueKind.MAC_ADDRESS, v)

    @classmethod
    def enum(cls, type_name: Optional[str], label: Optional[str]) -> Value:
        return cls(ValueKind.ENUM, label, None, type_name)

    @classmethod
    def array(cls, element_type: ArrayType, items: Optional[Iterable[Any]], type_name: Optional[str] = None) -> Value:
        if items is None:
            return element_type.null(type_name)
        ek = element_type.element_kind
        payload = []
        for item in items:
            if isinstance(item, Value):
                if item.kind is not ek:
                    raise ValueTypeMismatchError(
                        f"Array of {element_type.value} cannot hold {item.kind.value}",
                        details={"expected": element_type.value, "actual": item.kind.value},
                    )
                item = item.payload
            payload.append(item)
        return cls(ValueKind.ARRAY, tuple(payload), element_type, type_name)

    @classmethod
    def vector(cls, v: Optional[Sequence[float]]) -> Value:
        return cls(ValueKind.VECTOR, None if v is None else tuple(float(f) for f in v))

    @classmethod
    def range(cls, v: Optional[RangeValue]) -> Value:
        return cls(ValueKind.RANGE, v)

    # -- extraction ---------------------------------------------------------

    def extract(self, kind: ValueKind) -> Any:
        """Return the payload (None for NULL), failing when the kind disagrees."""
        if self.kind is not kind:
            raise ValueTypeMismatchError(
                f"Expected a {kind.value} value, got {self.kind.value}",
                details={"expected": kind.value, "actual": self.kind.value},
            )
        if self.kind is ValueKind.ARRAY and self.payload is not None:
            return list(self.payload)
        return self.payload

    def unwrap(self, kind: ValueKind) -> Any:
        """Like ``extract`` but NULL is also a mismatch."""
        out = self.extract(kind)
        if out is None:
            raise ValueTypeMismatchError(
                f"Expected a {kind.value} value, got NULL",
                details={"expected": kind.value, "actual": "null"},
            )
        return out

    def element_values(self) -> List[Value]:
        """Array items as Values; NULL items become typed NULLs."""
        if self.kind is not ValueKind.ARRAY or self.element_type is None:
            raise ValueTypeMismatchError(f"Expected an array value, got {self.kind.value}")
        ek = self.element_type.element_kind
        return [Value(ek, item, None, self.type_name) for item in (self.payload or ())]


class Values(List[Value]):
    """Ordered parameter list produced by ``build``."""

    def __repr__(self) -> str:
        return f"Values({list.__repr__(self)})"


def into_value(obj: Any) -> Value:
    """Convert a host object into a Value. Bare None is rejected: NULLs must be typed."""
    if isinstance(obj, Value):
        return obj
    if obj is None:
        raise ValueTypeMismatchError(
            "Cannot infer the kind of a bare None",
            remediation="Use ValueKind.<KIND>.null() or Value.<kind>(None)",
        )
    if isinstance(obj, bool):
        return Value.bool(obj)
    if isinstance(obj, int):
        for kind in (ValueKind.INT, ValueKind.BIG_INT, ValueKind.BIG_UNSIGNED):
            lo, hi = INTEGER_BOUNDS[kind]
            if lo <= obj <= hi:
                return Value(kind, obj)
        raise ValueError(f"{obj} does not fit any integer kind")
    if isinstance(obj, float):
        return Value.double(obj)
    if isinstance(obj, str):
        return Value.string(obj)
    if isinstance(obj, (bytes, bytearray, memoryview)):
        return Value.bytes(bytes(obj))
    if isinstance(obj, dt.datetime):
        if obj.tzinfo is None:
            return Value.date_time(obj)
        if obj.utcoffset() == dt.timedelta(0) and obj.tzinfo is dt.timezone.utc:
            return Value.date_time_utc(obj)
        return Value.date_time_with_tz(obj)
    if isinstance(obj, dt.date):
        return Value.date(obj)
    if isinstance(obj, dt.time):
        return Value.time(obj)
    if isinstance(obj, Decimal):
        return Value.decimal(obj)
    if isinstance(obj, uuid.UUID):
        return Value.uuid(obj)
    if isinstance(obj, (ipaddress.IPv4Network, ipaddress.IPv6Network, ipaddress.IPv4Interface, ipaddress.IPv6Interface)):
        return Value.ip_network(obj)
    if isinstance(obj, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return Value.ip_network(ipaddress.ip_interface(obj))
    if isinstance(obj, RangeValue):
        return Value.range(obj)
    if isinstance(obj, dict):
        return Value.json(obj)
    if isinstance(obj, list):
        return _into_array(obj)
    raise ValueTypeMismatchError(
        f"Cannot convert {type(obj).__name__} into a Value",
        details={"type": type(obj).__name__},
    )


_INFERRED_INTEGER_KINDS = (ValueKind.INT, ValueKind.BIG_INT, ValueKind.BIG_UNSIGNED)


def _into_array(items: List[Any]) -> Value:
    """Infer an array Value from a homogeneous list; None items are typed NULLs."""
    present = [into_value(item) for item in items if item is not None]
    if not present:
        raise ValueTypeMismatchError(
            "Cannot infer the element type of an empty list",
            remediation="Use Value.array(ArrayType.<TYPE>, [...])",
        )
    kinds = {v.kind for v in present}
    if kinds <= set(_INFERRED_INTEGER_KINDS):
        # Widen to the smallest kind that holds every item.
        payloads = [v.payload for v in present]
        for kind in _INFERRED_INTEGER_KINDS:
            lo, hi = INTEGER_BOUNDS[kind]
            if all(lo <= p <= hi for p in payloads):
                kinds = {kind}
                break
        else:
            raise ValueTypeMismatchError("List mixes integers no single kind can hold")
    if len(kinds) != 1:
        names = sorted(k.value for k in kinds)
        raise ValueTypeMismatchError(
            f"Cannot build an array from mixed kinds: {', '.join(names)}",
            details={"kinds": names},
        )
    kind = kinds.pop()
    try:
        element_type = ArrayType(kind.value)
    except ValueError:
        raise ValueTypeMismatchError(
            f"A {kind.value} value cannot be an array element",
            details={"kind": kind.value},
        ) from None
    remaining = iter(present)
    return Value.array(element_type, [None if item is None else next(remaining).payload for item in items])


def into_value_tuple(obj: Any) -> Tuple[Value, ...]:
    """Flatten a scalar or a tuple of scalars into a tuple of Values."""
    if isinstance(obj, tuple):
        return tuple(into_value(o) for o in obj)
    return (into_value(obj),)
