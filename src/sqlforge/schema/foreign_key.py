from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class ForeignKeyAction(str, Enum):
    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"
    SET_NULL = "SET NULL"
    NO_ACTION = "NO ACTION"
    SET_DEFAULT = "SET DEFAULT"


class TableForeignKey:
    """A foreign key, usable inline in CREATE TABLE or through ALTER TABLE."""

    def __init__(self) -> None:
        self.name_: Optional[Iden] = None
        self.from_table: Optional[TableName] = None
        self.from_columns: List[Iden] = []
        self.to_table: Optional[TableName] = None
        self.to_columns: List[Iden] = []
        self.on_delete_: Optional[ForeignKeyAction] = None
        self.on_update_: Optional[ForeignKeyAction] = None

    def name(self, name: IntoIden) -> TableForeignKey:
        self.name_ = into_iden(name)
        return self

    def from_tbl(self, table: Any) -> TableForeignKey:
        self.from_table = into_table_name(table)
        return self

    def from_col(self, column: IntoIden) -> TableForeignKey:
        self.from_columns.append(into_iden(column))
        return self

    def to_tbl(self, table: Any) -> TableForeignKey:
        self.to_table = into_table_name(table)
        return self

    def to_col(self, column: IntoIden) -> TableForeignKey:
        self.to_columns.append(into_iden(column))
        return self

    def on_delete(self, action: ForeignKeyAction) -> TableForeignKey:
        self.on_delete_ = action
        return self

    def on_update(self, action: ForeignKeyAction) -> TableForeignKey:
        self.on_update_ = action
        return self


class ForeignKeyCreateStatement(SchemaStatement):
    def __init__(self) -> None:
        self.foreign_key = TableForeignKey()

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_foreign_key_create_statement(self, sql)

    def name(self, name: IntoIden) -> ForeignKeyCreateStatement:
        self.foreign_key.name(name)
        return self

    def from_(self, table: Any, *columns: IntoIden) -> ForeignKeyCreateStatement:
        self.foreign_key.from_tbl(table)
        for c in columns:
            self.foreign_key.from_col(c)
        return self

    def to(self, table: Any, *columns: IntoIden) -> ForeignKeyCreateStatement:
        self.foreign_key.to_tbl(table)
        for c in columns:
            self.foreign_key.to_col(c)
        return self

    def on_delete(self, action: ForeignKeyAction) -> ForeignKeyCreateStatement:
        self.foreign_key.on_delete(action)
        return self

    def on_update(self, action: ForeignKeyAction) -> ForeignKeyCreateStatement:
        self.foreign_key.on_update(action)
        return self


class ForeignKeyDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.name_: Optional[Iden] = None
        self.table_: Optional[TableName] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_foreign_key_drop_statement(self, sql)

    def name(self, name: IntoIden) -> ForeignKeyDropStatement:
        self.name_ = into_iden(name)
        return self

    def table(self, table: Any) -> ForeignKeyDropStatement:
        self.table_ = into_table_name(table)
        return self


class ForeignKey:
    """Entry points for foreign key statements."""

    @staticmethod
    def create() -> ForeignKeyCreateStatement:
        return ForeignKeyCreateStatement()

    @staticmethod
    def drop() -> ForeignKeyDropStatement:
        return ForeignKeyDropStatement()
