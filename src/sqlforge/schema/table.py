from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Union

from ..expr import Expr, into_expr
from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement
from .column import ColumnDef
from .foreign_key import ForeignKeyCreateStatement, TableForeignKey
from .index import IndexCreateStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class TableCreateStatement(SchemaStatement):
    """CREATE TABLE. Columns, indexes, foreign keys and checks render in that order."""

    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.columns: List[ColumnDef] = []
        self.indexes: List[IndexCreateStatement] = []
        self.foreign_keys: List[TableForeignKey] = []
        self.checks: List[Expr] = []
        self.if_not_exists_ = False
        self.temporary_ = False
        self.engine_: Optional[str] = None
        self.collate_: Optional[str] = None
        self.character_set_: Optional[str] = None
        self.comment_: Optional[str] = None
        self.extra_: Optional[str] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_table_create_statement(self, sql)

    def table(self, table: Any) -> TableCreateStatement:
        self.table_ = into_table_name(table)
        return self

    def col(self, column: ColumnDef) -> TableCreateStatement:
        self.columns.append(column)
        return self

    def if_not_exists(self) -> TableCreateStatement:
        self.if_not_exists_ = True
        return self

    def temporary(self) -> TableCreateStatement:
        self.temporary_ = True
        return self

    def index(self, index: IndexCreateStatement) -> TableCreateStatement:
        self.indexes.append(index)
        return self

    def primary_key(self, index: IndexCreateStatement) -> TableCreateStatement:
        index.primary()
        self.indexes.append(index)
        return self

    def foreign_key(self, fk: Union[ForeignKeyCreateStatement, TableForeignKey]) -> TableCreateStatement:
        if isinstance(fk, ForeignKeyCreateStatement):
            fk = fk.foreign_key
        self.foreign_keys.append(fk)
        return self

    def check(self, expr: Any) -> TableCreateStatement:
        self.checks.append(into_expr(expr))
        return self

    def engine(self, engine: str) -> TableCreateStatement:
        self.engine_ = engine
        return self

    def collate(self, collate: str) -> TableCreateStatement:
        self.collate_ = collate
        return self

    def character_set(self, charset: str) -> TableCreateStatement:
        self.character_set_ = charset
        return self

    def comment(self, comment: str) -> TableCreateStatement:
        self.comment_ = comment
        return self

    def extra(self, extra: str) -> TableCreateStatement:
        self.extra_ = extra
        return self


class AlterKind(str, Enum):
    ADD_COLUMN = "add_column"
    MODIFY_COLUMN = "modify_column"
    RENAME_COLUMN = "rename_column"
    DROP_COLUMN = "drop_column"
    ADD_FOREIGN_KEY = "add_foreign_key"
    DROP_FOREIGN_KEY = "drop_foreign_key"


@dataclass
class TableAlterOption:
    kind: AlterKind
    column: Optional[ColumnDef] = None
    name: Optional[Iden] = None
    new_name: Optional[Iden] = None
    foreign_key: Optional[TableForeignKey] = None
    if_exists: bool = False  # IF NOT EXISTS for additions


class TableAlterStatement(SchemaStatement):
    def __init__(self) -> None:
        self.table_: Optional[TableName] = None
        self.options: List[TableAlterOption] = []

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_table_alter_statement(self, sql)

    def table(self, table: Any) -> TableAlterStatement:
        self.table_ = into_table_name(table)
        return self

    def add_column(self, column: ColumnDef) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.ADD_COLUMN, column=column))
        return self

    def add_column_if_not_exists(self, column: ColumnDef) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.ADD_COLUMN, column=column, if_exists=True))
        return self

    def modify_column(self, column: ColumnDef) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.MODIFY_COLUMN, column=column))
        return self

    def rename_column(self, from_name: IntoIden, to_name: IntoIden) -> TableAlterStatement:
        self.options.append(
            TableAlterOption(AlterKind.RENAME_COLUMN, name=into_iden(from_name), new_name=into_iden(to_name))
        )
        return self

    def drop_column(self, name: IntoIden) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.DROP_COLUMN, name=into_iden(name)))
        return self

    def drop_column_if_exists(self, name: IntoIden) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.DROP_COLUMN, name=into_iden(name), if_exists=True))
        return self

    def add_foreign_key(self, fk: TableForeignKey) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.ADD_FOREIGN_KEY, foreign_key=fk))
        return self

    def drop_foreign_key(self, name: IntoIden) -> TableAlterStatement:
        self.options.append(TableAlterOption(AlterKind.DROP_FOREIGN_KEY, name=into_iden(name)))
        return self


class TableRenameStatement(SchemaStatement):
    def __init__(self) -> None:
        self.from_name: Optional[TableName] = None
        self.to_name: Optional[TableName] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_table_rename_statement(self, sql)

    def table(self, from_name: Any, to_name: Any) -> TableRenameStatement:
        self.from_name = into_table_name(from_name)
        self.to_name = into_table_name(to_name)
        return self


class TableDropOption(str, Enum):
    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"


class TableDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.tables: List[TableName] = []
        self.if_exists_ = False
        self.options: List[TableDropOption] = []

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_table_drop_statement(self, sql)

    def table(self, table: Any) -> TableDropStatement:
        self.tables.append(into_table_name(table))
        return self

    def if_exists(self) -> TableDropStatement:
        self.if_exists_ = True
        return self

    def restrict(self) -> TableDropStatement:
        self.options.append(TableDropOption.RESTRICT)
        return self

    def cascade(self) -> TableDropStatement:
        self.options.append(TableDropOption.CASCADE)
        return self


class TableTruncateStatement(SchemaStatement):
    def __init__(self) -> None:
        self.table_: Optional[TableName] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_table_truncate_statement(self, sql)

    def table(self, table: Any) -> TableTruncateStatement:
        self.table_ = into_table_name(table)
        return self


class Table:
    """Entry points for table statements."""

    @staticmethod
    def create() -> TableCreateStatement:
        return TableCreateStatement()

    @staticmethod
    def alter() -> TableAlterStatement:
        return TableAlterStatement()

    @staticmethod
    def rename() -> TableRenameStatement:
        return TableRenameStatement()

    @staticmethod
    def drop() -> TableDropStatement:
        return TableDropStatement()

    @staticmethod
    def truncate() -> TableTruncateStatement:
        return TableTruncateStatement()
