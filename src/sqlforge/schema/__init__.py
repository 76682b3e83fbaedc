from __future__ import annotations

from .column import ColumnDef, ColumnType, ColumnTypeKind, ColumnTypes
from .constraint import Constraint, ConstraintCreateStatement, ConstraintDropStatement, ConstraintKind
from .extension import Extension, ExtensionCreateStatement, ExtensionDropStatement
from .foreign_key import (
    ForeignKey,
    ForeignKeyAction,
    ForeignKeyCreateStatement,
    ForeignKeyDropStatement,
    TableForeignKey,
)
from .index import Index, IndexColumn, IndexCreateStatement, IndexDropStatement, IndexType
from .pg_type import PgType, TypeAlterStatement, TypeCreateStatement, TypeDropStatement
from .table import (
    Table,
    TableAlterStatement,
    TableCreateStatement,
    TableDropStatement,
    TableRenameStatement,
    TableTruncateStatement,
)
from .trigger import Trigger, TriggerCreateStatement, TriggerDropStatement, TriggerEvent, TriggerTiming
from .view import View, ViewCheckOption, ViewCreateStatement, ViewDropStatement, ViewRenameStatement

__all__ = [
    "ColumnDef",
    "ColumnType",
    "ColumnTypeKind",
    "ColumnTypes",
    "Table",
    "TableCreateStatement",
    "TableAlterStatement",
    "TableRenameStatement",
    "TableDropStatement",
    "TableTruncateStatement",
    "Index",
    "IndexColumn",
    "IndexType",
    "IndexCreateStatement",
    "IndexDropStatement",
    "ForeignKey",
    "ForeignKeyAction",
    "ForeignKeyCreateStatement",
    "ForeignKeyDropStatement",
    "TableForeignKey",
    "PgType",
    "TypeCreateStatement",
    "TypeDropStatement",
    "TypeAlterStatement",
    "Extension",
    "ExtensionCreateStatement",
    "ExtensionDropStatement",
    "Trigger",
    "TriggerCreateStatement",
    "TriggerDropStatement",
    "TriggerTiming",
    "TriggerEvent",
    "View",
    "ViewCreateStatement",
    "ViewDropStatement",
    "ViewRenameStatement",
    "ViewCheckOption",
    "Constraint",
    "ConstraintCreateStatement",
    "ConstraintDropStatement",
    "ConstraintKind",
]
