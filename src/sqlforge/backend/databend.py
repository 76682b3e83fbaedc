from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import BuilderMisuseError
from ..iden import Quote
from ..schema.column import ColumnDef, ColumnType, ColumnTypeKind
from ..value import Value, ValueKind
from .base import Dialect
from .registry import register
from .table_builder import GENERIC_TYPES
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..query.insert import InsertStatement
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import LockClause
    from ..schema.index import IndexCreateStatement, IndexDropStatement
    from .writer import SqlWriter

_K = ColumnTypeKind

_UNSUPPORTED = (_K.TIME, _K.INTERVAL, _K.BIT, _K.VAR_BIT, _K.MONEY)

DATABEND_TYPES = {k: v for k, v in GENERIC_TYPES.items() if k not in _UNSUPPORTED}
DATABEND_TYPES.update(
    {
        _K.CHAR: ("varchar", None),
        _K.STRING: ("varchar", None),
        _K.TEXT: ("varchar", None),
        _K.INTEGER: ("int", None),
        _K.TINY_UNSIGNED: ("tinyint unsigned", None),
        _K.SMALL_UNSIGNED: ("smallint unsigned", None),
        _K.UNSIGNED: ("int unsigned", None),
        _K.BIG_UNSIGNED: ("bigint unsigned", None),
        _K.DATE_TIME: ("timestamp", None),
        _K.TIMESTAMP_WITH_TIME_ZONE: ("timestamp", None),
        _K.BINARY: ("binary", None),
        _K.VAR_BINARY: ("binary", None),
        _K.BLOB: ("binary", None),
        _K.JSON: ("variant", None),
        _K.JSON_BINARY: ("variant", None),
        _K.UUID: ("varchar", None),
    }
)


class DatabendDialect(Dialect):
    name = "databend"
    paramstyle = "qmark"
    quote = Quote("`", "`")
    string_escape = StringEscape.BACKSLASH

    type_spellings = DATABEND_TYPES
    supports_drop_table_options = False
    supports_foreign_key_alter = False
    supports_triggers = False
    supports_constraint_alter = False

    supports_view_if_not_exists = True
    supports_view_check_option = False
    supports_view_drop_options = False
    supports_view_drop_many = False
    supports_view_rename = False

    explain_options = frozenset({"ANALYZE"})

    def array_literal(self, v: Value) -> str:
        return "[" + ", ".join(self.array_items(v)) + "]"

    def check_bindable(self, v: Value) -> None:
        if v.kind is not ValueKind.ARRAY:
            super().check_bindable(v)

    def prepare_insert_keyword(self, insert: "InsertStatement", sql: "SqlWriter") -> None:
        if insert.replace_:
            self.unsupported("REPLACE INTO without an ON (...) key list")
        sql.write("INSERT")

    def prepare_select_lock(self, lock: "LockClause", sql: "SqlWriter") -> None:
        self.unsupported("row lock clauses")

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is not None:
            self.unsupported("ON CONFLICT", remediation="Use REPLACE INTO ... ON (keys) or MERGE")

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        if returning is not None:
            self.unsupported("RETURNING")

    # -- DDL -------------------------------------------------------------------------

    def array_type_sql(self, t: ColumnType) -> str:
        if t.element is None:
            raise BuilderMisuseError("An array column type needs its element type")
        return f"array({self.column_type_sql(t.element)})"

    def auto_increment_spec(self) -> str:
        self.unsupported("auto-increment columns")

    def primary_key_spec(self, column: ColumnDef) -> str:
        self.unsupported("primary keys", remediation="Use CLUSTER BY for data layout")

    def prepare_index_create_statement(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        self.unsupported("CREATE INDEX")

    def prepare_index_drop_statement(self, drop: "IndexDropStatement", sql: "SqlWriter") -> None:
        self.unsupported("DROP INDEX")


register(DatabendDialect())
