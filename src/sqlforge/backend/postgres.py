from __future__ import annotations

from typing import TYPE_CHECKING, List

from ..errors import BuilderMisuseError
from ..expr import AsEnumExpr, BinOper, Expr, Function, FunctionCall
from ..iden import Quote
from ..query.explain import PG_OPTION_ORDER, ExplainFormat, ExplainSerialize
from ..schema.column import ColumnDef, ColumnType, ColumnTypeKind
from ..schema.index import IndexType
from ..value import Value
from .base import Dialect
from .index_builder import index_type_name
from .registry import register
from .table_builder import GENERIC_TYPES
from .value_encoder import StringEscape, format_float

if TYPE_CHECKING:
    from ..query.explain import ExplainStatement
    from ..query.with_clause import WithClause
    from ..schema.index import IndexCreateStatement
    from ..schema.trigger import TriggerCreateStatement, TriggerDropStatement
    from .writer import SqlWriter

_K = ColumnTypeKind

POSTGRES_TYPES = dict(GENERIC_TYPES)
POSTGRES_TYPES.update(
    {
        _K.TINY_INTEGER: ("smallint", None),
        _K.TINY_UNSIGNED: ("smallint", None),
        _K.FLOAT: ("real", None),
        _K.DOUBLE: ("double precision", None),
        _K.DATE_TIME: ("timestamp without time zone", None),
        _K.BINARY: ("bytea", None),
        _K.VAR_BINARY: ("bytea", None),
        _K.BLOB: ("bytea", None),
        _K.BOOLEAN: ("bool", None),
        _K.JSON_BINARY: ("jsonb", None),
        _K.VECTOR: ("vector", "vector({n})"),
        _K.CIDR: ("cidr", None),
        _K.INET: ("inet", None),
        _K.MAC_ADDR: ("macaddr", None),
    }
)

_SERIAL = {
    _K.SMALL_INTEGER: "smallserial",
    _K.INTEGER: "serial",
    _K.BIG_INTEGER: "bigserial",
}

_INDEX_METHODS = {IndexType.FULL_TEXT: "GIN"}


class PostgresDialect(Dialect):
    name = "postgres"
    aliases = ("postgresql", "pg")
    paramstyle = "numeric_dollar"
    quote = Quote('"', '"')
    string_escape = StringEscape.POSTGRES

    operators = frozenset(
        {
            BinOper.ILIKE,
            BinOper.NOT_ILIKE,
            BinOper.MATCHES,
            BinOper.CONTAINS,
            BinOper.CONTAINED,
            BinOper.OVERLAP,
            BinOper.CONCATENATE,
            BinOper.REGEX,
            BinOper.REGEX_CASE_INSENSITIVE,
            BinOper.GET_JSON_FIELD,
            BinOper.CAST_JSON_FIELD,
        }
    )
    supports_update_from = True
    supports_cte_materialized = True

    type_spellings = POSTGRES_TYPES
    supports_index_include = True
    supports_types = True
    supports_extensions = True
    supports_trigger_if_not_exists = False
    supports_view_temporary = True
    supports_view_recursive = True
    supports_constraint_drop_if_exists = True
    supports_constraint_using_index = True

    explain_options = frozenset(PG_OPTION_ORDER + ("FORMAT",))
    explain_formats = frozenset({ExplainFormat.TEXT, ExplainFormat.XML, ExplainFormat.JSON, ExplainFormat.YAML})

    def positional_marker(self, n: int) -> str:
        return f"${n}"

    # -- expressions ---------------------------------------------------------------

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.IF_NULL:
            return "COALESCE"
        if call.func is Function.CUSTOM:
            return super().function_name(call)
        return call.func.value

    def prepare_as_enum(self, expr: AsEnumExpr, sql: "SqlWriter") -> None:
        sql.write("CAST(")
        self.prepare_expr(expr.expr, sql)
        sql.write(" AS ")
        self.prepare_iden(expr.enum_name, sql)
        sql.write(")")

    # -- literals --------------------------------------------------------------------

    def bytes_literal(self, b: bytes) -> str:
        return f"'\\x{b.hex().upper()}'"

    def array_literal(self, v: Value) -> str:
        items = self.array_items(v)
        if not items:
            return "'{}'"
        return "ARRAY[" + ",".join(items) + "]"

    def vector_literal(self, v: Value) -> str:
        return "'[" + ",".join(format_float(f) for f in v.payload) + "]'"

    def range_literal(self, v: Value) -> str:
        return self.quote_string(v.payload.literal())

    def check_bindable(self, v: Value) -> None:
        """Arrays, vectors and ranges all bind natively."""

    # -- SELECT / WITH ------------------------------------------------------------------

    def prepare_distinct_on(self, exprs: List[Expr], sql: "SqlWriter") -> None:
        sql.write("DISTINCT ON (")
        self.prepare_exprs(exprs, sql)
        sql.write(") ")

    def prepare_with_search_cycle(self, with_clause: "WithClause", sql: "SqlWriter") -> None:
        if not with_clause.recursive_:
            raise BuilderMisuseError("SEARCH and CYCLE need a recursive WITH", remediation="Call recursive(True)")
        search = with_clause.search_
        if search is not None:
            sql.write(f" SEARCH {search.order.value} FIRST BY ")
            self.prepare_expr(search.expr, sql)
            sql.write(" SET ")
            self.prepare_iden(search.set_as, sql)
        cycle = with_clause.cycle_
        if cycle is not None:
            sql.write(" CYCLE ")
            self.prepare_expr(cycle.expr, sql)
            sql.write(" SET ")
            self.prepare_iden(cycle.set_as, sql)
            sql.write(" USING ")
            self.prepare_iden(cycle.using, sql)

    # -- DDL -------------------------------------------------------------------------

    def column_def_type_sql(self, column: ColumnDef) -> str:
        if column.types is None:
            raise BuilderMisuseError("A column definition needs a type")
        if column.auto_increment_:
            serial = _SERIAL.get(column.types.kind)
            if serial is None:
                self.unsupported(f"auto-increment on a {column.types.kind.value} column")
            return serial
        return super().column_def_type_sql(column)

    def auto_increment_spec(self) -> str:
        return ""

    def enum_type_sql(self, t: ColumnType) -> str:
        if t.name is None:
            raise BuilderMisuseError("An enum column type needs a name")
        return self.quote.wrap(t.name.unquoted())

    def array_type_sql(self, t: ColumnType) -> str:
        if t.element is None:
            raise BuilderMisuseError("An array column needs an element type")
        return self.column_type_sql(t.element) + "[]"

    def prepare_nulls_not_distinct(self, sql: "SqlWriter") -> None:
        sql.write("NULLS NOT DISTINCT")

    def prepare_index_concurrently(self, sql: "SqlWriter") -> None:
        sql.write("CONCURRENTLY ")

    def prepare_index_type(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        kind = index.index_type_
        if kind is not None:
            sql.write("USING " + _INDEX_METHODS.get(kind, index_type_name(kind)) + " ")

    def prepare_trigger_body(self, create: "TriggerCreateStatement", sql: "SqlWriter") -> None:
        if create.function_ is None:
            self.unsupported("trigger bodies", remediation="Create a trigger function and call execute_function()")
        sql.write(f"EXECUTE FUNCTION {create.function_}()")

    def prepare_trigger_drop_target(self, drop: "TriggerDropStatement", sql: "SqlWriter") -> None:
        if drop.table_ is None:
            raise BuilderMisuseError("DROP TRIGGER on postgres needs a table", remediation="Call table()")
        sql.write(" ON ")
        self.prepare_table_name(drop.table_, sql)

    # -- EXPLAIN ------------------------------------------------------------------

    def prepare_explain_options(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        parts = []
        for name in PG_OPTION_ORDER:
            value = explain.flags.get(name)
            if value is None:
                continue
            if isinstance(value, ExplainSerialize):
                parts.append(f"{name} {value.value}")
            else:
                parts.append(name if value else f"{name} 0")
        if explain.format_ is not None:
            parts.append("FORMAT " + explain.format_.value)
        if parts:
            sql.write(" (" + ", ".join(parts) + ")")


register(PostgresDialect())
