from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional, Tuple

from ..expr import Expr, into_expr
from ..iden import Iden, IntoIden, into_iden


class ColumnTypeKind(str, Enum):
    CHAR = "char"
    STRING = "string"
    TEXT = "text"
    TINY_INTEGER = "tiny_integer"
    SMALL_INTEGER = "small_integer"
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    TINY_UNSIGNED = "tiny_unsigned"
    SMALL_UNSIGNED = "small_unsigned"
    UNSIGNED = "unsigned"
    BIG_UNSIGNED = "big_unsigned"
    FLOAT = "float"
    DOUBLE = "double"
    DECIMAL = "decimal"
    DATE_TIME = "date_time"
    TIMESTAMP = "timestamp"
    TIMESTAMP_WITH_TIME_ZONE = "timestamp_with_time_zone"
    TIME = "time"
    DATE = "date"
    YEAR = "year"
    INTERVAL = "interval"
    BINARY = "binary"
    VAR_BINARY = "var_binary"
    BLOB = "blob"
    BIT = "bit"
    VAR_BIT = "var_bit"
    BOOLEAN = "boolean"
    MONEY = "money"
    JSON = "json"
    JSON_BINARY = "json_binary"
    UUID = "uuid"
    CUSTOM = "custom"
    ENUM = "enum"
    ARRAY = "array"
    VECTOR = "vector"
    CIDR = "cidr"
    INET = "inet"
    MAC_ADDR = "mac_addr"


@dataclass(frozen=True)
class ColumnType:
    kind: ColumnTypeKind
    length: Optional[int] = None
    precision: Optional[Tuple[int, int]] = None
    name: Optional[Iden] = None  # custom and enum type name
    variants: Tuple[Iden, ...] = ()
    element: Optional["ColumnType"] = None

    @property
    def is_integer(self) -> bool:
        return self.kind in (
            ColumnTypeKind.TINY_INTEGER,
            ColumnTypeKind.SMALL_INTEGER,
            ColumnTypeKind.INTEGER,
            ColumnTypeKind.BIG_INTEGER,
            ColumnTypeKind.TINY_UNSIGNED,
            ColumnTypeKind.SMALL_UNSIGNED,
            ColumnTypeKind.UNSIGNED,
            ColumnTypeKind.BIG_UNSIGNED,
        )


_K = ColumnTypeKind


class ColumnDef:
    """
    A column definition: a name, an optional type, and a set of column specs.

    Specs render in a fixed order (nullability, default, auto-increment,
    primary key, unique, check, generated, comment, extra), whatever order
    the builder methods were called in.
    """

    def __init__(self, name: IntoIden) -> None:
        self.name: Iden = into_iden(name)
        self.types: Optional[ColumnType] = None
        self.nullable: Optional[bool] = None
        self.default_: Optional[Expr] = None
        self.auto_increment_ = False
        self.primary_key_ = False
        self.unique_ = False
        self.check_: Optional[Expr] = None
        self.generated_: Optional[Tuple[Expr, bool]] = None
        self.comment_: Optional[str] = None
        self.extra_: Optional[str] = None

    @classmethod
    def new_with_type(cls, name: IntoIden, types: ColumnType) -> ColumnDef:
        return cls(name).col_type(types)

    def col_type(self, types: ColumnType) -> ColumnDef:
        self.types = types
        return self

    def _t(self, kind: ColumnTypeKind, **kw: Any) -> ColumnDef:
        self.types = ColumnType(kind, **kw)
        return self

    # -- types --------------------------------------------------------------

    def char(self) -> ColumnDef:
        return self._t(_K.CHAR)

    def char_len(self, length: int) -> ColumnDef:
        return self._t(_K.CHAR, length=length)

    def string(self) -> ColumnDef:
        return self._t(_K.STRING)

    def string_len(self, length: int) -> ColumnDef:
        return self._t(_K.STRING, length=length)

    def text(self) -> ColumnDef:
        return self._t(_K.TEXT)

    def tiny_integer(self) -> ColumnDef:
        return self._t(_K.TINY_INTEGER)

    def small_integer(self) -> ColumnDef:
        return self._t(_K.SMALL_INTEGER)

    def integer(self) -> ColumnDef:
        return self._t(_K.INTEGER)

    def big_integer(self) -> ColumnDef:
        return self._t(_K.BIG_INTEGER)

    def tiny_unsigned(self) -> ColumnDef:
        return self._t(_K.TINY_UNSIGNED)

    def small_unsigned(self) -> ColumnDef:
        return self._t(_K.SMALL_UNSIGNED)

    def unsigned(self) -> ColumnDef:
        return self._t(_K.UNSIGNED)

    def big_unsigned(self) -> ColumnDef:
        return self._t(_K.BIG_UNSIGNED)

    def float(self) -> ColumnDef:
        return self._t(_K.FLOAT)

    def double(self) -> ColumnDef:
        return self._t(_K.DOUBLE)

    def decimal(self) -> ColumnDef:
        return self._t(_K.DECIMAL)

    def decimal_len(self, precision: int, scale: int) -> ColumnDef:
        return self._t(_K.DECIMAL, precision=(precision, scale))

    def date_time(self) -> ColumnDef:
        return self._t(_K.DATE_TIME)

    def timestamp(self) -> ColumnDef:
        return self._t(_K.TIMESTAMP)

    def timestamp_with_time_zone(self) -> ColumnDef:
        return self._t(_K.TIMESTAMP_WITH_TIME_ZONE)

    def time(self) -> ColumnDef:
        return self._t(_K.TIME)

    def date(self) -> ColumnDef:
        return self._t(_K.DATE)

    def year(self) -> ColumnDef:
        return self._t(_K.YEAR)

    def interval(self) -> ColumnDef:
        return self._t(_K.INTERVAL)

    def binary(self) -> ColumnDef:
        return self._t(_K.BINARY)

    def binary_len(self, length: int) -> ColumnDef:
        return self._t(_K.BINARY, length=length)

    def var_binary(self, length: int) -> ColumnDef:
        return self._t(_K.VAR_BINARY, length=length)

    def blob(self) -> ColumnDef:
        return self._t(_K.BLOB)

    def bit(self, length: Optional[int] = None) -> ColumnDef:
        return self._t(_K.BIT, length=length)

    def varbit(self, length: int) -> ColumnDef:
        return self._t(_K.VAR_BIT, length=length)

    def boolean(self) -> ColumnDef:
        return self._t(_K.BOOLEAN)

    def money(self) -> ColumnDef:
        return self._t(_K.MONEY)

    def money_len(self, precision: int, scale: int) -> ColumnDef:
        return self._t(_K.MONEY, precision=(precision, scale))

    def json(self) -> ColumnDef:
        return self._t(_K.JSON)

    def json_binary(self) -> ColumnDef:
        return self._t(_K.JSON_BINARY)

    def uuid(self) -> ColumnDef:
        return self._t(_K.UUID)

    def custom(self, name: IntoIden) -> ColumnDef:
        return self._t(_K.CUSTOM, name=into_iden(name))

    def enumeration(self, name: IntoIden, variants: Iterable[IntoIden]) -> ColumnDef:
        return self._t(_K.ENUM, name=into_iden(name), variants=tuple(into_iden(v) for v in variants))

    def array(self, element: ColumnType) -> ColumnDef:
        return self._t(_K.ARRAY, element=element)

    def vector(self, dimensions: Optional[int] = None) -> ColumnDef:
        return self._t(_K.VECTOR, length=dimensions)

    def cidr(self) -> ColumnDef:
        return self._t(_K.CIDR)

    def inet(self) -> ColumnDef:
        return self._t(_K.INET)

    def mac_address(self) -> ColumnDef:
        return self._t(_K.MAC_ADDR)

    # -- specs --------------------------------------------------------------

    def not_null(self) -> ColumnDef:
        self.nullable = False
        return self

    def null(self) -> ColumnDef:
        self.nullable = True
        return self

    def default(self, value: Any) -> ColumnDef:
        self.default_ = into_expr(value)
        return self

    def auto_increment(self) -> ColumnDef:
        self.auto_increment_ = True
        return self

    def primary_key(self) -> ColumnDef:
        self.primary_key_ = True
        return self

    def unique_key(self) -> ColumnDef:
        self.unique_ = True
        return self

    def check(self, expr: Any) -> ColumnDef:
        self.check_ = into_expr(expr)
        return self

    def generated(self, expr: Any, stored: bool) -> ColumnDef:
        self.generated_ = (into_expr(expr), stored)
        return self

    def comment(self, comment: str) -> ColumnDef:
        self.comment_ = comment
        return self

    def extra(self, extra: str) -> ColumnDef:
        self.extra_ = extra
        return self

    @property
    def effective_not_null(self) -> bool:
        """Primary keys and auto-increment columns are NOT NULL unless ``null()`` was asked for."""
        if self.nullable is not None:
            return not self.nullable
        return self.primary_key_ or self.auto_increment_


class ColumnTypes:
    """Shorthands for ``ColumnType`` values, e.g. for array element types."""

    @staticmethod
    def of(kind: ColumnTypeKind, **kw: Any) -> ColumnType:
        return ColumnType(kind, **kw)

    @staticmethod
    def integer() -> ColumnType:
        return ColumnType(_K.INTEGER)

    @staticmethod
    def big_integer() -> ColumnType:
        return ColumnType(_K.BIG_INTEGER)

    @staticmethod
    def string(length: Optional[int] = None) -> ColumnType:
        return ColumnType(_K.STRING, length=length)

    @staticmethod
    def text() -> ColumnType:
        return ColumnType(_K.TEXT)

    @staticmethod
    def custom(name: IntoIden) -> ColumnType:
        return ColumnType(_K.CUSTOM, name=into_iden(name))
