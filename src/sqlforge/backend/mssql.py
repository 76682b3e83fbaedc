from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import BuilderMisuseError
from ..expr import ColumnExpr, Expr, Function, FunctionCall
from ..iden import Quote
from ..schema.column import ColumnDef, ColumnTypeKind
from ..schema.table import AlterKind
from ..types import NullOrdering
from .base import Dialect
from .registry import register
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..iden import TableName
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import LockClause, SelectStatement
    from ..schema.table import TableAlterOption, TableRenameStatement
    from ..schema.view import ViewRenameStatement
    from .table_builder import TypeSpellings
    from .writer import SqlWriter

_K = ColumnTypeKind

MSSQL_TYPES: "TypeSpellings" = {
    _K.CHAR: ("nchar", "nchar({n})"),
    _K.STRING: ("nvarchar(255)", "nvarchar({n})"),
    _K.TEXT: ("nvarchar(max)", None),
    _K.TINY_INTEGER: ("tinyint", None),
    _K.SMALL_INTEGER: ("smallint", None),
    _K.INTEGER: ("int", None),
    _K.BIG_INTEGER: ("bigint", None),
    _K.TINY_UNSIGNED: ("tinyint", None),
    _K.SMALL_UNSIGNED: ("int", None),
    _K.UNSIGNED: ("bigint", None),
    _K.BIG_UNSIGNED: ("decimal(20, 0)", None),
    _K.FLOAT: ("real", None),
    _K.DOUBLE: ("float", None),
    _K.DECIMAL: ("decimal", "decimal({p}, {s})"),
    _K.DATE_TIME: ("datetime2", None),
    _K.TIMESTAMP: ("datetime2", None),
    _K.TIMESTAMP_WITH_TIME_ZONE: ("datetimeoffset", None),
    _K.TIME: ("time", None),
    _K.DATE: ("date", None),
    _K.BINARY: ("binary", "binary({n})"),
    _K.VAR_BINARY: ("varbinary", "varbinary({n})"),
    _K.BLOB: ("varbinary(max)", None),
    _K.BIT: ("bit", None),
    _K.BOOLEAN: ("bit", None),
    _K.MONEY: ("money", None),
    _K.JSON: ("nvarchar(max)", None),
    _K.JSON_BINARY: ("nvarchar(max)", None),
    _K.UUID: ("uniqueidentifier", None),
}


class MsSqlDialect(Dialect):
    """
    SQL Server (T-SQL).

    Differences from the base dialect worth knowing:

    * markers are ``@P1``, ``@P2``, ... and identifiers use ``[...]``;
    * row limits use ``OFFSET m ROWS FETCH NEXT n ROWS ONLY``, which needs an
      ORDER BY, so ``ORDER BY (SELECT NULL)`` is added when none is given;
    * RETURNING becomes an ``OUTPUT INSERTED.*`` / ``OUTPUT DELETED.*`` clause
      placed before VALUES, WHERE or FROM;
    * there is no ON CONFLICT, row lock clause or trigger support here.
    """

    name = "mssql"
    aliases = ("sqlserver", "tsql")
    paramstyle = "named_at"
    quote = Quote("[", "]")
    string_escape = StringEscape.DOUBLE_QUOTE

    supports_update_from = True

    type_spellings = MSSQL_TYPES
    supports_drop_table_options = False
    supports_index_if_not_exists = False
    supports_index_include = True
    index_drop_needs_table = True
    supports_triggers = False
    supports_constraint_drop_if_exists = True

    supports_view_or_replace = False
    view_check_option_levels = False
    supports_view_drop_options = False

    supports_explain = False

    def positional_marker(self, n: int) -> str:
        return f"@P{n}"

    # -- literals --------------------------------------------------------------------

    def bool_literal(self, b: bool) -> str:
        return "1" if b else "0"

    def truth_predicate(self, holds: bool) -> str:
        # No boolean type; a bare 1 is not a predicate.
        return "1 = 1" if holds else "1 = 0"

    def bytes_literal(self, b: bytes) -> str:
        return "0x" + b.hex().upper()

    # -- expressions ---------------------------------------------------------------

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.IF_NULL:
            return "ISNULL"
        if call.func is Function.CHAR_LENGTH:
            return "LEN"
        if call.func is Function.RANDOM:
            return "RAND"
        return super().function_name(call)

    def native_nulls_ordering(self) -> bool:
        return False

    def prepare_nulls_emulation(self, expr: Expr, nulls: NullOrdering, sql: "SqlWriter") -> None:
        sql.write("CASE WHEN ")
        self.prepare_expr(expr, sql)
        sql.write(" IS NULL THEN 0 ELSE 1 END " + ("ASC" if nulls is NullOrdering.FIRST else "DESC"))

    # -- SELECT --------------------------------------------------------------------

    def prepare_select_limit_offset(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        if select.limit_ is None and select.offset_ is None:
            return
        if not select.orders:
            sql.write(" ORDER BY (SELECT NULL)")
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

    def prepare_select_lock(self, lock: "LockClause", sql: "SqlWriter") -> None:
        self.unsupported("row lock clauses", remediation="Use table hints such as WITH (UPDLOCK)")

    # -- RETURNING as OUTPUT -----------------------------------------------------------

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        pass

    def prepare_output(self, returning: Optional["ReturningClause"], pseudo: str, sql: "SqlWriter") -> None:
        if returning is None:
            return
        sql.write(" OUTPUT ")
        if returning.all or not returning.exprs:
            sql.write(pseudo + ".*")
            return
        for i, expr in enumerate(returning.exprs):
            if i:
                sql.write(", ")
            if isinstance(expr, ColumnExpr) and expr.ref.table is None and expr.ref.pseudo is None:
                sql.write(pseudo + ".")
                if expr.ref.column is None:
                    sql.write("*")
                else:
                    self.prepare_iden(expr.ref.column, sql)
            else:
                self.prepare_expr(expr, sql)

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is not None:
            self.unsupported("ON CONFLICT", remediation="Use a MERGE statement")

    # -- DDL -------------------------------------------------------------------------

    def auto_increment_spec(self) -> str:
        return " IDENTITY(1,1)"

    def prepare_table_alter_option(self, table: "TableName", option: "TableAlterOption", sql: "SqlWriter") -> None:
        if option.kind is AlterKind.ADD_COLUMN:
            if option.column is None:
                raise BuilderMisuseError("ADD COLUMN needs a column definition")
            if option.if_exists:
                self.unsupported("ADD COLUMN IF NOT EXISTS")
            sql.write("ADD ")
            self.prepare_column_def(option.column, sql)
        elif option.kind is AlterKind.RENAME_COLUMN:
            self.unsupported("RENAME COLUMN", remediation="Use EXEC sp_rename 'table.old', 'new', 'COLUMN'")
        else:
            super().prepare_table_alter_option(table, option, sql)

    def prepare_modify_column(self, column: ColumnDef, sql: "SqlWriter") -> None:
        if column.types is None:
            raise BuilderMisuseError(
                f"ALTER COLUMN on mssql needs the column type for {column.name.unquoted()!r}",
                remediation="Give the column a type",
            )
        if column.default_ is not None or column.unique_ or column.primary_key_ or column.auto_increment_:
            self.unsupported("changing defaults, keys or identity with ALTER COLUMN")
        sql.write("ALTER COLUMN ")
        self.prepare_iden(column.name, sql)
        sql.write(" " + self.column_def_type_sql(column))
        if column.nullable is not None:
            sql.write(" NULL" if column.nullable else " NOT NULL")

    def prepare_table_rename_statement(self, rename: "TableRenameStatement", sql: "SqlWriter") -> None:
        if rename.from_name is None or rename.to_name is None:
            raise BuilderMisuseError("RENAME needs both table names", remediation="Call table(from, to)")
        self._sp_rename(rename.from_name, rename.to_name, sql)

    def prepare_view_rename(self, rename: "ViewRenameStatement", sql: "SqlWriter") -> None:
        self._sp_rename(rename.from_name, rename.to_name, sql)

    def _sp_rename(self, from_name: "TableName", to_name: "TableName", sql: "SqlWriter") -> None:
        # sp_rename takes the qualified old name and the bare new one
        old = ".".join(p.unquoted() for p in from_name.parts())
        sql.write("EXEC sp_rename " + self.quote_string(old) + ", " + self.quote_string(to_name.name.unquoted()))


register(MsSqlDialect())
