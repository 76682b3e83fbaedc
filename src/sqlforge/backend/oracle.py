from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Optional

from ..expr import Function, FunctionCall
from ..iden import Quote
from ..schema.column import ColumnTypeKind
from ..types import LockType
from .base import Dialect
from .registry import register
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import SelectStatement
    from ..schema.view import ViewRenameStatement
    from .table_builder import TypeSpellings
    from .writer import SqlWriter

_K = ColumnTypeKind

ORACLE_TYPES: "TypeSpellings" = {
    _K.CHAR: ("char", "char({n})"),
    _K.STRING: ("varchar2(255)", "varchar2({n})"),
    _K.TEXT: ("clob", None),
    _K.TINY_INTEGER: ("number(3)", None),
    _K.SMALL_INTEGER: ("number(5)", None),
    _K.INTEGER: ("number(10)", None),
    _K.BIG_INTEGER: ("number(19)", None),
    _K.TINY_UNSIGNED: ("number(3)", None),
    _K.SMALL_UNSIGNED: ("number(5)", None),
    _K.UNSIGNED: ("number(10)", None),
    _K.BIG_UNSIGNED: ("number(20)", None),
    _K.FLOAT: ("binary_float", None),
    _K.DOUBLE: ("binary_double", None),
    _K.DECIMAL: ("number", "number({p}, {s})"),
    _K.DATE_TIME: ("timestamp", None),
    _K.TIMESTAMP: ("timestamp", None),
    _K.TIMESTAMP_WITH_TIME_ZONE: ("timestamp with time zone", None),
    _K.DATE: ("date", None),
    _K.BINARY: ("raw(1)", "raw({n})"),
    _K.VAR_BINARY: ("raw(2000)", "raw({n})"),
    _K.BLOB: ("blob", None),
    _K.BOOLEAN: ("number(1)", None),
    _K.MONEY: ("number(19, 4)", None),
    _K.JSON: ("clob", None),
    _K.JSON_BINARY: ("blob", None),
    _K.UUID: ("raw(16)", None),
}


class OracleDialect(Dialect):
    name = "oracle"
    paramstyle = "numeric"
    quote = Quote('"', '"')
    string_escape = StringEscape.DOUBLE_QUOTE
    # Oracle rejects AS between a table and its alias.
    table_alias_keyword = " "

    type_spellings = ORACLE_TYPES
    supports_drop_table_options = False
    supports_index_if_not_exists = False
    supports_partial_index = False

    view_check_option_levels = False
    supports_view_drop_options = False
    supports_view_drop_many = False

    explain_keyword = "EXPLAIN PLAN FOR"

    def positional_marker(self, n: int) -> str:
        return f":{n}"

    def bool_literal(self, b: bool) -> str:
        return "1" if b else "0"

    def truth_predicate(self, holds: bool) -> str:
        # No boolean type; a bare 1 is not a predicate.
        return "1 = 1" if holds else "1 = 0"

    def bytes_literal(self, b: bytes) -> str:
        return f"HEXTORAW('{b.hex().upper()}')"

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.IF_NULL:
            return "COALESCE"
        if call.func is Function.CHAR_LENGTH:
            return "LENGTH"
        if call.func is Function.RANDOM:
            return "DBMS_RANDOM.VALUE"
        return super().function_name(call)

    def prepare_select_limit_offset(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        if select.limit_ is None and select.offset_ is None:
            return
        sql.write(" OFFSET ")
        if select.offset_ is None:
            sql.write("0")
        else:
            self.prepare_value(select.offset_, sql)
        sql.write(" ROWS")
        if select.limit_ is not None:
            sql.write(" FETCH NEXT ")
            self.prepare_value(select.limit_, sql)
            sql.write(" ROWS ONLY")

    def supported_lock_types(self) -> FrozenSet[LockType]:
        return frozenset({LockType.UPDATE})

    def prepare_default_values(self, sql: "SqlWriter") -> None:
        self.unsupported("DEFAULT VALUES", remediation="List the columns with DEFAULT")

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is not None:
            self.unsupported("ON CONFLICT", remediation="Use a MERGE statement")

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        if returning is not None:
            self.unsupported("RETURNING")

    def prepare_view_rename(self, rename: "ViewRenameStatement", sql: "SqlWriter") -> None:
        sql.write("RENAME ")
        self.prepare_table_name(rename.from_name, sql)
        sql.write(" TO ")
        self.prepare_table_name(rename.to_name, sql)


register(OracleDialect())
