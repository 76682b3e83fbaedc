from __future__ import annotations

from typing import TYPE_CHECKING

from ..expr import BinOper, Function, FunctionCall
from ..iden import Quote
from ..schema.column import ColumnDef, ColumnTypeKind
from ..schema.table import AlterKind
from .base import Dialect
from .registry import register
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..iden import TableName
    from ..query.explain import ExplainStatement
    from ..query.insert import InsertStatement
    from ..query.select import LockClause, SelectStatement
    from ..schema.table import TableAlterOption, TableAlterStatement
    from .table_builder import TypeSpellings
    from .writer import SqlWriter

_K = ColumnTypeKind

# SQLite stores by type affinity; the spellings only pick the affinity.
SQLITE_TYPES: "TypeSpellings" = {
    _K.CHAR: ("text", "text({n})"),
    _K.STRING: ("text", "text({n})"),
    _K.TEXT: ("text", None),
    _K.TINY_INTEGER: ("integer", None),
    _K.SMALL_INTEGER: ("integer", None),
    _K.INTEGER: ("integer", None),
    _K.BIG_INTEGER: ("integer", None),
    _K.TINY_UNSIGNED: ("integer", None),
    _K.SMALL_UNSIGNED: ("integer", None),
    _K.UNSIGNED: ("integer", None),
    _K.BIG_UNSIGNED: ("integer", None),
    _K.FLOAT: ("real", None),
    _K.DOUBLE: ("real", None),
    _K.DECIMAL: ("real", "real({p}, {s})"),
    _K.DATE_TIME: ("text", None),
    _K.TIMESTAMP: ("text", None),
    _K.TIMESTAMP_WITH_TIME_ZONE: ("text", None),
    _K.TIME: ("text", None),
    _K.DATE: ("text", None),
    _K.BINARY: ("blob", "blob({n})"),
    _K.VAR_BINARY: ("blob", "blob({n})"),
    _K.BLOB: ("blob", None),
    _K.BOOLEAN: ("boolean", None),
    _K.MONEY: ("integer", None),
    _K.JSON: ("text", None),
    _K.JSON_BINARY: ("text", None),
    _K.UUID: ("text(36)", None),
}


class SqliteDialect(Dialect):
    name = "sqlite"
    aliases = ("sqlite3",)
    paramstyle = "qmark"
    quote = Quote('"', '"')
    string_escape = StringEscape.DOUBLE_QUOTE
    offset_separator = ""

    operators = frozenset({BinOper.GLOB, BinOper.MATCH, BinOper.GET_JSON_FIELD, BinOper.CAST_JSON_FIELD})
    union_parenthesised = False
    supports_update_order_limit = True
    supports_update_from = True
    supports_cte_materialized = True

    type_spellings = SQLITE_TYPES
    supports_drop_table_options = False
    supports_truncate = False
    supports_foreign_key_alter = False
    supports_constraint_alter = False

    supports_view_or_replace = False
    supports_view_if_not_exists = True
    supports_view_temporary = True
    supports_view_check_option = False
    supports_view_drop_options = False
    supports_view_drop_many = False
    supports_view_rename = False

    explain_options = frozenset({"QUERY PLAN"})

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.CHAR_LENGTH:
            return "LENGTH"
        return super().function_name(call)

    def prepare_select_limit_offset(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        # OFFSET is only valid after a LIMIT; -1 means no limit.
        if select.limit_ is None and select.offset_ is not None:
            sql.write(" LIMIT -1 OFFSET ")
            self.prepare_value(select.offset_, sql)
            return
        super().prepare_select_limit_offset(select, sql)

    def prepare_select_lock(self, lock: "LockClause", sql: "SqlWriter") -> None:
        # SQLite locks the whole database; row locks have no spelling.
        pass

    def prepare_insert_keyword(self, insert: "InsertStatement", sql: "SqlWriter") -> None:
        sql.write("REPLACE" if insert.replace_ else "INSERT")

    # -- DDL -------------------------------------------------------------------------

    def auto_increment_spec(self) -> str:
        return ""

    def primary_key_spec(self, column: ColumnDef) -> str:
        return " PRIMARY KEY AUTOINCREMENT" if column.auto_increment_ else " PRIMARY KEY"

    def prepare_table_alter_statement(self, alter: "TableAlterStatement", sql: "SqlWriter") -> None:
        if len(alter.options) > 1:
            self.unsupported("more than one change per ALTER TABLE", remediation="Issue one ALTER TABLE per change")
        super().prepare_table_alter_statement(alter, sql)

    def prepare_table_alter_option(self, table: "TableName", option: "TableAlterOption", sql: "SqlWriter") -> None:
        if option.kind is AlterKind.MODIFY_COLUMN:
            self.unsupported("MODIFY COLUMN", remediation="Recreate the table")
        if option.kind in (AlterKind.ADD_FOREIGN_KEY, AlterKind.DROP_FOREIGN_KEY):
            self.unsupported("changing foreign keys on an existing table", remediation="Recreate the table")
        if option.kind is AlterKind.ADD_COLUMN and option.if_exists:
            self.unsupported("ADD COLUMN IF NOT EXISTS")
        if option.kind is AlterKind.DROP_COLUMN and option.if_exists:
            self.unsupported("DROP COLUMN IF EXISTS")
        super().prepare_table_alter_option(table, option, sql)


    def prepare_explain_options(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        if explain.query_plan_:
            sql.write(" QUERY PLAN")


register(SqliteDialect())
