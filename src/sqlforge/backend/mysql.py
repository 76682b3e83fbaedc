from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Optional

from ..errors import BuilderMisuseError
from ..expr import BinOper, Expr, Function, FunctionCall
from ..iden import ColumnRef, Iden, Quote
from ..query.explain import ExplainFormat
from ..query.on_conflict import OnConflictActionKind
from ..schema.column import ColumnDef, ColumnType, ColumnTypeKind
from ..schema.index import IndexType
from ..types import LockType
from .base import Dialect
from .index_builder import index_type_name
from .registry import register
from .table_builder import GENERIC_TYPES
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..query.explain import ExplainStatement
    from ..query.insert import InsertStatement
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import SelectStatement
    from ..query.traits import FieldOrder
    from ..schema.index import IndexCreateStatement
    from ..schema.table import TableCreateStatement, TableRenameStatement
    from ..schema.view import ViewRenameStatement
    from .writer import SqlWriter

_K = ColumnTypeKind

MYSQL_TYPES = {k: v for k, v in GENERIC_TYPES.items() if k not in (_K.INTERVAL, _K.VAR_BIT)}
MYSQL_TYPES.update(
    {
        _K.TINY_UNSIGNED: ("tinyint UNSIGNED", None),
        _K.SMALL_UNSIGNED: ("smallint UNSIGNED", None),
        _K.UNSIGNED: ("integer UNSIGNED", None),
        _K.BIG_UNSIGNED: ("bigint UNSIGNED", None),
        _K.TIMESTAMP_WITH_TIME_ZONE: ("timestamp", None),
        _K.YEAR: ("year", None),
        _K.BINARY: ("binary(1)", "binary({n})"),
        _K.BOOLEAN: ("bool", None),
        _K.MONEY: ("decimal", "decimal({p}, {s})"),
        _K.UUID: ("binary(16)", None),
    }
)

# Largest LIMIT MySQL accepts; used when only OFFSET is given.
_NO_LIMIT = "18446744073709551615"


class MySqlDialect(Dialect):
    name = "mysql"
    aliases = ("mariadb",)
    paramstyle = "qmark"
    quote = Quote("`", "`")
    string_escape = StringEscape.BACKSLASH

    operators = frozenset({BinOper.GET_JSON_FIELD, BinOper.CAST_JSON_FIELD})
    supports_update_order_limit = True

    type_spellings = MYSQL_TYPES
    supports_column_comment = True

    supports_index_prefix = True
    supports_index_if_not_exists = False
    supports_partial_index = False
    supports_index_drop_if_exists = False
    index_drop_needs_table = True
    unique_constraint_keyword = "UNIQUE KEY"

    explain_options = frozenset({"ANALYZE", "FORMAT", "INTO", "FOR SCHEMA", "FOR DATABASE", "TABLE", "FOR CONNECTION"})
    explain_formats = frozenset({ExplainFormat.JSON, ExplainFormat.TREE, ExplainFormat.TRADITIONAL})

    def __init__(self, default_string_length: int = 255) -> None:
        if default_string_length <= 0:
            raise ValueError("default_string_length must be positive")
        self.default_string_length = default_string_length

    def __repr__(self) -> str:
        return f"{type(self).__name__}(default_string_length={self.default_string_length})"

    # -- expressions ---------------------------------------------------------------

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.RANDOM:
            return "RAND"
        return super().function_name(call)

    def prepare_column_ref(self, ref: ColumnRef, sql: "SqlWriter") -> None:
        # The row that failed to insert is read through VALUES(col).
        if ref.pseudo == "excluded" and ref.column is not None:
            sql.write("VALUES(")
            self.prepare_iden(ref.column, sql)
            sql.write(")")
            return
        super().prepare_column_ref(ref, sql)

    def values_row_prefix(self) -> str:
        return "ROW"

    # -- ordering ------------------------------------------------------------------

    def native_nulls_ordering(self) -> bool:
        return False

    def prepare_field_order(self, expr: Expr, field: "FieldOrder", sql: "SqlWriter") -> None:
        sql.write("FIELD(")
        self.prepare_expr(expr, sql)
        for v in field.values:
            sql.write(", ")
            self.prepare_value(v, sql)
        sql.write(")")

    # -- SELECT --------------------------------------------------------------------

    def prepare_select_limit_offset(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        if select.limit_ is None and select.offset_ is not None:
            sql.write(" LIMIT " + _NO_LIMIT + " OFFSET ")
            self.prepare_value(select.offset_, sql)
            return
        super().prepare_select_limit_offset(select, sql)

    def supported_lock_types(self) -> FrozenSet[LockType]:
        return frozenset({LockType.UPDATE, LockType.SHARE})

    # -- INSERT ----------------------------------------------------------------------

    def prepare_insert_keyword(self, insert: "InsertStatement", sql: "SqlWriter") -> None:
        if insert.replace_:
            sql.write("REPLACE")
        elif insert.on_conflict_ is not None and insert.on_conflict_.action is OnConflictActionKind.DO_NOTHING:
            sql.write("INSERT IGNORE")
        else:
            sql.write("INSERT")

    def prepare_default_values(self, sql: "SqlWriter") -> None:
        sql.write(" () VALUES ()")

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is None:
            return
        if not on_conflict.target_where.is_empty() or not on_conflict.action_where.is_empty():
            self.unsupported("WHERE clauses on ON DUPLICATE KEY UPDATE")
        action = on_conflict.action
        if action is None:
            raise BuilderMisuseError(
                "ON CONFLICT needs an action",
                remediation="Call do_nothing(), update_column() or value()",
            )
        if action is OnConflictActionKind.DO_NOTHING:
            return
        sql.write(" ON DUPLICATE KEY UPDATE ")
        if action is OnConflictActionKind.DO_NOTHING_ON:
            for i, column in enumerate(on_conflict.do_nothing_columns):
                if i:
                    sql.write(", ")
                self.prepare_iden(column, sql)
                sql.write(" = ")
                self.prepare_iden(column, sql)
            return
        for i, update in enumerate(on_conflict.updates):
            if i:
                sql.write(", ")
            self.prepare_iden(update.column, sql)
            sql.write(" = ")
            if update.value is None:
                self.prepare_column_ref(ColumnRef.excluded(update.column), sql)
            else:
                self.prepare_expr(update.value, sql)

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        if returning is not None:
            self.unsupported("RETURNING", remediation="Read LAST_INSERT_ID() or select the rows again")

    # -- DDL -------------------------------------------------------------------------

    def column_type_sql(self, t: ColumnType) -> str:
        if t.kind is _K.STRING and t.length is None:
            return f"varchar({self.default_string_length})"
        return super().column_type_sql(t)

    def enum_type_sql(self, t: ColumnType) -> str:
        return "ENUM(" + ", ".join(self.quote_string(v.unquoted()) for v in t.variants) + ")"

    def auto_increment_spec(self) -> str:
        return " AUTO_INCREMENT"

    def prepare_table_index(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        if index.primary_ or index.unique_:
            super().prepare_table_index(index, sql)
            return
        if not index.columns:
            raise BuilderMisuseError("An index needs at least one column", remediation="Call col()")
        if index.index_type_ is IndexType.FULL_TEXT:
            sql.write("FULLTEXT ")
        sql.write("KEY ")
        if index.name_ is not None:
            self.prepare_iden(index.name_, sql)
            sql.write(" ")
        self.prepare_index_columns(index.columns, sql)
        self.prepare_index_suffix(index, sql)

    def prepare_table_options(self, create: "TableCreateStatement", sql: "SqlWriter") -> None:
        if create.engine_ is not None:
            sql.write(" ENGINE=" + create.engine_)
        if create.character_set_ is not None:
            sql.write(" DEFAULT CHARSET=" + create.character_set_)
        if create.collate_ is not None:
            sql.write(" COLLATE=" + create.collate_)
        if create.comment_ is not None:
            sql.write(" COMMENT " + self.quote_string(create.comment_))

    def prepare_modify_column(self, column: ColumnDef, sql: "SqlWriter") -> None:
        if column.types is None:
            raise BuilderMisuseError(
                f"MODIFY COLUMN on mysql needs the full column type for {column.name.unquoted()!r}",
                remediation="Give the column a type",
            )
        sql.write("MODIFY COLUMN ")
        self.prepare_column_def(column, sql)

    def prepare_drop_foreign_key_option(self, name: Iden, sql: "SqlWriter") -> None:
        sql.write("DROP FOREIGN KEY ")
        self.prepare_iden(name, sql)

    def prepare_table_rename_statement(self, rename: "TableRenameStatement", sql: "SqlWriter") -> None:
        if rename.from_name is None or rename.to_name is None:
            raise BuilderMisuseError("RENAME needs both table names", remediation="Call table(from, to)")
        sql.write("RENAME TABLE ")
        self.prepare_table_name(rename.from_name, sql)
        sql.write(" TO ")
        self.prepare_table_name(rename.to_name, sql)

    def index_kind_prefix(self, index: "IndexCreateStatement") -> str:
        if index.index_type_ is IndexType.FULL_TEXT:
            return "FULLTEXT "
        return super().index_kind_prefix(index)

    def prepare_index_type(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        # MySQL names the index method after the column list.
        pass

    def prepare_index_suffix(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        kind = index.index_type_
        if kind is None or kind is IndexType.FULL_TEXT:
            return
        if kind in (IndexType.GIN, IndexType.GIST):
            self.unsupported(f"index type {kind.value}")
        sql.write(" USING " + index_type_name(kind))

    def prepare_view_rename(self, rename: "ViewRenameStatement", sql: "SqlWriter") -> None:
        sql.write("RENAME TABLE ")
        self.prepare_table_name(rename.from_name, sql)
        sql.write(" TO ")
        self.prepare_table_name(rename.to_name, sql)

    # -- EXPLAIN ------------------------------------------------------------------

    def prepare_explain_options(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        super().prepare_explain_options(explain, sql)
        if explain.format_ is not None:
            sql.write(" FORMAT = " + explain.format_.value)
        if explain.into_variable_ is not None:
            if explain.format_ is not ExplainFormat.JSON:
                raise BuilderMisuseError(
                    "EXPLAIN INTO needs FORMAT = JSON", remediation="Call format(ExplainFormat.JSON)"
                )
            sql.write(" INTO @" + explain.into_variable_)
        if explain.schema_spec is not None:
            if explain.statement_ is None:
                raise BuilderMisuseError(f"EXPLAIN FOR {explain.schema_spec[0]} needs a statement")
            sql.write(f" FOR {explain.schema_spec[0]} ")
            self.prepare_iden(explain.schema_spec[1], sql)

    def prepare_explain_target(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        targets = [explain.statement_, explain.table_, explain.for_connection_]
        if sum(t is not None for t in targets) > 1:
            raise BuilderMisuseError("EXPLAIN takes one of a statement, a table or a connection")
        if explain.table_target is not None and explain.table_ is None:
            raise BuilderMisuseError("EXPLAIN of a column needs a table", remediation="Call table()")
        if explain.table_ is not None:
            sql.write(" ")
            self.prepare_table_name(explain.table_, sql)
            # an Iden names a column; a plain string is a LIKE pattern
            if isinstance(explain.table_target, Iden):
                sql.write(" ")
                self.prepare_iden(explain.table_target, sql)
            elif explain.table_target is not None:
                sql.write(" " + self.quote_string(explain.table_target))
        elif explain.for_connection_ is not None:
            sql.write(f" FOR CONNECTION {explain.for_connection_}")
        else:
            super().prepare_explain_target(explain, sql)


register(MySqlDialect())
