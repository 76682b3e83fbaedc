from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from ..expr import Expr, into_expr
from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement
from .index import IndexColumn, into_index_column

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class ConstraintKind(str, Enum):
    PRIMARY_KEY = "PRIMARY KEY"
    UNIQUE = "UNIQUE"
    CHECK = "CHECK"


class ConstraintCreateStatement(SchemaStatement):
    """
    ``ALTER TABLE ... ADD [CONSTRAINT name]`` for a primary key, a unique
    key or a check.

    A key takes its columns from ``col()`` or, on postgres, an existing
    index via ``using_index()``; a check takes one boolean expression.
    """

    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.name_: Optional[Iden] = None
        self.kind: Optional[ConstraintKind] = None
        self.columns: List[IndexColumn] = []
        self.check_: Optional[Expr] = None
        self.nulls_not_distinct_ = False
        self.include_columns: List[Iden] = []
        self.using_index_: Optional[Iden] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_constraint_create_statement(self, sql)

    def table(self, table: Any) -> ConstraintCreateStatement:
        self.table_ = into_table_name(table)
        return self

    def name(self, name: IntoIden) -> ConstraintCreateStatement:
        self.name_ = into_iden(name)
        return self

    def primary(self) -> ConstraintCreateStatement:
        self.kind = ConstraintKind.PRIMARY_KEY
        return self

    def unique(self) -> ConstraintCreateStatement:
        self.kind = ConstraintKind.UNIQUE
        return self

    def check(self, expr: Any) -> ConstraintCreateStatement:
        self.kind = ConstraintKind.CHECK
        self.check_ = into_expr(expr)
        return self

    def col(self, column: Any) -> ConstraintCreateStatement:
        self.columns.append(into_index_column(column))
        return self

    def nulls_not_distinct(self) -> ConstraintCreateStatement:
        self.nulls_not_distinct_ = True
        return self

    def include(self, column: IntoIden) -> ConstraintCreateStatement:
        self.include_columns.append(into_iden(column))
        return self

    def using_index(self, index: IntoIden) -> ConstraintCreateStatement:
        self.using_index_ = into_iden(index)
        return self


class ConstraintDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.name_: Optional[Iden] = None
        self.if_exists_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_constraint_drop_statement(self, sql)

    def table(self, table: Any) -> ConstraintDropStatement:
        self.table_ = into_table_name(table)
        return self

    def name(self, name: IntoIden) -> ConstraintDropStatement:
        self.name_ = into_iden(name)
        return self

    def if_exists(self) -> ConstraintDropStatement:
        self.if_exists_ = True
        return self


class Constraint:
    """Entry points for table constraint statements."""

    @staticmethod
    def create() -> ConstraintCreateStatement:
        return ConstraintCreateStatement()

    @staticmethod
    def drop() -> ConstraintDropStatement:
        return ConstraintDropStatement()
