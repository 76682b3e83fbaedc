from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Union

from ..condition import ConditionHolder
from ..expr import Expr
from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement
from ..types import Order

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class IndexType(str, Enum):
    BTREE = "BTREE"
    FULL_TEXT = "FULL TEXT"
    HASH = "HASH"
    GIN = "GIN"
    GIST = "GIST"


@dataclass(frozen=True)
class IndexColumn:
    """An indexed column or expression, with an optional prefix length and order."""

    target: Union[Iden, Expr]
    prefix: Optional[int] = None
    order: Optional[Order] = None


def into_index_column(value: Any) -> IndexColumn:
    """Accepts a column, an expression, ``(col, Order)``, ``(col, prefix)`` or ``(col, prefix, Order)``."""
    if isinstance(value, IndexColumn):
        return value
    if isinstance(value, Expr):
        return IndexColumn(value)
    if isinstance(value, tuple):
        head = value[0] if isinstance(value[0], Expr) else into_iden(value[0])
        prefix: Optional[int] = None
        order: Optional[Order] = None
        for part in value[1:]:
            if isinstance(part, Order):
                order = part
            elif isinstance(part, int):
                prefix = part
            else:
                raise TypeError(f"Unexpected index column part {part!r}")
        return IndexColumn(head, prefix, order)
    return IndexColumn(into_iden(value))


class IndexCreateStatement(SchemaStatement):
    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.name_: Optional[Iden] = None
        self.columns: List[IndexColumn] = []
        self.primary_ = False
        self.unique_ = False
        self.nulls_not_distinct_ = False
        self.index_type_: Optional[Union[IndexType, str]] = None
        self.if_not_exists_ = False
        self.concurrently_ = False
        self.include_columns: List[Iden] = []
        self.where = ConditionHolder()

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_index_create_statement(self, sql)

    def name(self, name: IntoIden) -> IndexCreateStatement:
        self.name_ = into_iden(name)
        return self

    def table(self, table: Any) -> IndexCreateStatement:
        self.table_ = into_table_name(table)
        return self

    def col(self, column: Any) -> IndexCreateStatement:
        self.columns.append(into_index_column(column))
        return self

    def primary(self) -> IndexCreateStatement:
        self.primary_ = True
        return self

    def unique(self) -> IndexCreateStatement:
        self.unique_ = True
        return self

    def nulls_not_distinct(self) -> IndexCreateStatement:
        self.nulls_not_distinct_ = True
        return self

    def full_text(self) -> IndexCreateStatement:
        return self.index_type(IndexType.FULL_TEXT)

    def index_type(self, index_type: Union[IndexType, str]) -> IndexCreateStatement:
        self.index_type_ = index_type
        return self

    def if_not_exists(self) -> IndexCreateStatement:
        self.if_not_exists_ = True
        return self

    def concurrently(self) -> IndexCreateStatement:
        self.concurrently_ = True
        return self

    def include(self, column: IntoIden) -> IndexCreateStatement:
        self.include_columns.append(into_iden(column))
        return self

    def and_where(self, expr: Any) -> IndexCreateStatement:
        self.where.add_and(expr)
        return self


class IndexDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.name_: Optional[TableName] = None  # may be schema-qualified
        self.if_exists_ = False
        self.concurrently_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_index_drop_statement(self, sql)

    def name(self, name: Any) -> IndexDropStatement:
        self.name_ = into_table_name(name)
        return self

    def table(self, table: Any) -> IndexDropStatement:
        self.table_ = into_table_name(table)
        return self

    def if_exists(self) -> IndexDropStatement:
        self.if_exists_ = True
        return self

    def concurrently(self) -> IndexDropStatement:
        self.concurrently_ = True
        return self


class Index:
    """Entry points for index statements."""

    @staticmethod
    def create() -> IndexCreateStatement:
        return IndexCreateStatement()

    @staticmethod
    def drop() -> IndexDropStatement:
        return IndexDropStatement()
