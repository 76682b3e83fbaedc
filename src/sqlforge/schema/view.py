from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement
from .table import TableDropOption

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from ..query.select import SelectStatement


class ViewCheckOption(str, Enum):
    CASCADED = "CASCADED"
    LOCAL = "LOCAL"


class ViewCreateStatement(SchemaStatement):
    """
    CREATE VIEW over a SELECT.

    The query is always rendered with inline literals, so a view never
    carries bound parameters.
    """

    def __init__(self) -> None:
        self.view_: Optional[TableName] = None
        self.columns_: List[Iden] = []
        self.query_: Optional["SelectStatement"] = None
        self.or_replace_ = False
        self.if_not_exists_ = False
        self.temporary_ = False
        self.recursive_ = False
        self.check_option_: Optional[ViewCheckOption] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_view_create_statement(self, sql)

    def view(self, view: Any) -> ViewCreateStatement:
        self.view_ = into_table_name(view)
        return self

    def column(self, column: IntoIden) -> ViewCreateStatement:
        self.columns_.append(into_iden(column))
        return self

    def columns(self, columns: Any) -> ViewCreateStatement:
        self.columns_.extend(into_iden(c) for c in columns)
        return self

    def query(self, query: "SelectStatement") -> ViewCreateStatement:
        self.query_ = query
        return self

    def or_replace(self) -> ViewCreateStatement:
        self.or_replace_ = True
        return self

    def if_not_exists(self) -> ViewCreateStatement:
        self.if_not_exists_ = True
        return self

    def temporary(self) -> ViewCreateStatement:
        self.temporary_ = True
        return self

    def recursive(self) -> ViewCreateStatement:
        self.recursive_ = True
        return self

    def with_check_option(self, option: ViewCheckOption = ViewCheckOption.CASCADED) -> ViewCreateStatement:
        self.check_option_ = option
        return self


class ViewDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.views: List[TableName] = []
        self.if_exists_ = False
        self.options: List[TableDropOption] = []

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_view_drop_statement(self, sql)

    def view(self, view: Any) -> ViewDropStatement:
        self.views.append(into_table_name(view))
        return self

    def if_exists(self) -> ViewDropStatement:
        self.if_exists_ = True
        return self

    def restrict(self) -> ViewDropStatement:
        self.options.append(TableDropOption.RESTRICT)
        return self

    def cascade(self) -> ViewDropStatement:
        self.options.append(TableDropOption.CASCADE)
        return self


class ViewRenameStatement(SchemaStatement):
    def __init__(self) -> None:
        self.from_name: Optional[TableName] = None
        self.to_name: Optional[TableName] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_view_rename_statement(self, sql)

    def view(self, from_name: Any, to_name: Any) -> ViewRenameStatement:
        self.from_name = into_table_name(from_name)
        self.to_name = into_table_name(to_name)
        return self


class View:
    """Entry points for view statements."""

    @staticmethod
    def create() -> ViewCreateStatement:
        return ViewCreateStatement()

    @staticmethod
    def drop() -> ViewDropStatement:
        return ViewDropStatement()

    @staticmethod
    def rename() -> ViewRenameStatement:
        return ViewRenameStatement()
