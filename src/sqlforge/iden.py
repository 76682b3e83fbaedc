"""
Identifier model.

An identifier is a name token (table, column, schema, type) that is written
between the dialect's quote pair. Plain strings, ``Alias`` values, and
``IdenEnum`` members are all accepted wherever an identifier is expected.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Sequence, Tuple, Union


class Iden:
    """Capability: write an unquoted spelling."""

    def unquoted(self) -> str:
        raise NotImplementedError

    def static_spelling(self) -> Optional[str]:
        # Identifiers built from a fixed label can hand it out without rebuilding.
        return None

    def __str__(self) -> str:
        return self.unquoted()


class IdenEnum(Iden, str, Enum):
    """
    Enum whose members are identifiers.

    Each member's value is its spelling. A member named ``Table`` names the
    table by convention::

        class Character(IdenEnum):
            Table = "character"
            Id = "id"
            SizeW = "size_w"
    """

    def unquoted(self) -> str:
        return self.value

    def static_spelling(self) -> Optional[str]:
        return self.value

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Alias(Iden):
    name: str

    def unquoted(self) -> str:
        return self.name

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class NullAlias(Iden):
    def unquoted(self) -> str:
        return ""

    def static_spelling(self) -> Optional[str]:
        return ""

    def __str__(self) -> str:
        return ""


class Asterisk:
    """The ``*`` marker. Never quoted."""

    _instance: Optional["Asterisk"] = None

    def __new__(cls) -> "Asterisk":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "Asterisk"


ASTERISK = Asterisk()

IntoIden = Union[Iden, str]


def is_literal_safe(spelling: str) -> bool:
    """True iff ``spelling`` matches ``[A-Za-z_][A-Za-z0-9_]*`` (empty counts as safe)."""
    for i, ch in enumerate(spelling):
        if ch == "_" or ("a" <= ch <= "z") or ("A" <= ch <= "Z"):
            continue
        if i > 0 and "0" <= ch <= "9":
            continue
        return False
    return True


def into_iden(value: IntoIden) -> Iden:
    if isinstance(value, Iden):
        return value
    if isinstance(value, str):
        return Alias(value)
    raise TypeError(f"Cannot use {type(value).__name__} as an identifier")


def unquoted(value: IntoIden) -> str:
    return into_iden(value).unquoted()


@dataclass(frozen=True)
class Quote:
    left: str
    right: str

    def escape(self, spelling: str) -> str:
        """Double every closing quote character inside ``spelling``."""
        if is_literal_safe(spelling):
            return spelling
        return spelling.replace(self.right, self.right * 2)

    def unescape(self, escaped: str) -> str:
        return escaped.replace(self.right * 2, self.right)

    def wrap(self, spelling: str) -> str:
        return f"{self.left}{self.escape(spelling)}{self.right}"


# Qualified names. Qualification is left-contiguous: each level only
# carries a reference to the level directly above it.


@dataclass(frozen=True)
class DatabaseName:
    name: Iden


@dataclass(frozen=True)
class SchemaName:
    name: Iden
    database: Optional[DatabaseName] = None


@dataclass(frozen=True)
class TableName:
    name: Iden
    schema: Optional[SchemaName] = None

    def parts(self) -> Tuple[Iden, ...]:
        out: Tuple[Iden, ...] = (self.name,)
        if self.schema is not None:
            out = (self.schema.name,) + out
            if self.schema.database is not None:
                out = (self.schema.database.name,) + out
        return out


@dataclass(frozen=True)
class ColumnName:
    name: Iden
    table: Optional[TableName] = None


@dataclass(frozen=True)
class TypeRef:
    name: Iden
    schema: Optional[SchemaName] = None

    def parts(self) -> Tuple[Iden, ...]:
        out: Tuple[Iden, ...] = (self.name,)
        if self.schema is not None:
            out = (self.schema.name,) + out
            if self.schema.database is not None:
                out = (self.schema.database.name,) + out
        return out


def _qualify(parts: Sequence[IntoIden]) -> Tuple[Optional[SchemaName], Iden]:
    idens = [into_iden(p) for p in parts]
    if not 1 <= len(idens) <= 3:
        raise ValueError(f"A qualified name has one to three parts, got {len(idens)}")
    name = idens[-1]
    if len(idens) == 1:
        return None, name
    if len(idens) == 2:
        return SchemaName(idens[0]), name
    return SchemaName(idens[1], DatabaseName(idens[0])), name


def into_table_name(value: Any) -> TableName:
    """Accepts a name, a TableName, or a tuple ``(schema, table)`` / ``(db, schema, table)``."""
    if isinstance(value, TableName):
        return value
    if isinstance(value, tuple):
        schema, name = _qualify(value)
        return TableName(name, schema)
    return TableName(into_iden(value))


def into_type_ref(value: Any) -> TypeRef:
    if isinstance(value, TypeRef):
        return value
    if isinstance(value, tuple):
        schema, name = _qualify(value)
        return TypeRef(name, schema)
    return TypeRef(into_iden(value))


@dataclass(frozen=True)
class ColumnRef:
    """
    A column reference.

    ``column`` is None for an asterisk. ``pseudo`` is one of ``NEW``,
    ``OLD`` or ``excluded`` for the trigger and upsert pseudo-tables.
    """

    column: Optional[Iden]
    table: Optional[TableName] = None
    pseudo: Optional[str] = None

    @classmethod
    def col(cls, column: IntoIden, table: Any = None) -> ColumnRef:
        return cls(into_iden(column), into_table_name(table) if table is not None else None)

    @classmethod
    def asterisk(cls, table: Any = None) -> ColumnRef:
        return cls(None, into_table_name(table) if table is not None else None)

    @classmethod
    def new(cls, column: IntoIden) -> ColumnRef:
        return cls(into_iden(column), pseudo="NEW")

    @classmethod
    def old(cls, column: IntoIden) -> ColumnRef:
        return cls(into_iden(column), pseudo="OLD")

    @classmethod
    def excluded(cls, column: IntoIden) -> ColumnRef:
        return cls(into_iden(column), pseudo="excluded")

    @property
    def is_asterisk(self) -> bool:
        return self.column is None


def into_column_ref(value: Any) -> ColumnRef:
    """
    Accepts a column name, ``ASTERISK``, a ColumnRef, or a tuple whose last
    element is the column and whose leading elements qualify its table.
    """
    if isinstance(value, ColumnRef):
        return value
    if isinstance(value, Asterisk):
        return ColumnRef.asterisk()
    if isinstance(value, tuple):
        if len(value) < 2:
            raise ValueError("A qualified column needs at least a table and a column")
        table = into_table_name(tuple(value[:-1]) if len(value) > 2 else value[0])
        last = value[-1]
        if isinstance(last, Asterisk):
            return ColumnRef(None, table)
        return ColumnRef(into_iden(last), table)
    return ColumnRef(into_iden(value))


class TableRef:
    """Something usable in a FROM list."""

    alias: Optional[Iden] = None

    def with_alias(self, alias: IntoIden) -> TableRef:
        raise NotImplementedError


@dataclass(frozen=True)
class TableRefName(TableRef):
    name: TableName
    alias: Optional[Iden] = None

    def with_alias(self, alias: IntoIden) -> TableRefName:
        return TableRefName(self.name, into_iden(alias))


@dataclass(frozen=True)
class SubQueryTable(TableRef):
    query: Any  # SelectStatement
    alias: Optional[Iden] = None

    def with_alias(self, alias: IntoIden) -> SubQueryTable:
        return SubQueryTable(self.query, into_iden(alias))


@dataclass(frozen=True)
class ValuesListTable(TableRef):
    rows: Tuple[Any, ...]  # Tuple[ValueTuple, ...]
    alias: Optional[Iden] = None

    def with_alias(self, alias: IntoIden) -> ValuesListTable:
        return ValuesListTable(self.rows, into_iden(alias))


@dataclass(frozen=True)
class FunctionTable(TableRef):
    call: Any  # FunctionCall
    alias: Optional[Iden] = None

    def with_alias(self, alias: IntoIden) -> FunctionTable:
        return FunctionTable(self.call, into_iden(alias))


def into_table_ref(value: Any) -> TableRef:
    if isinstance(value, TableRef):
        return value
    return TableRefName(into_table_name(value))
