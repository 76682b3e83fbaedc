from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from ..errors import BuilderMisuseError
from ..expr import SubQueryOper
from ..iden import Quote
from ..schema.column import ColumnDef, ColumnType, ColumnTypeKind
from ..schema.constraint import ConstraintKind
from ..types import UnionType
from ..value import Value, ValueKind
from .base import Dialect
from .registry import register
from .value_encoder import StringEscape

if TYPE_CHECKING:
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import LockClause
    from ..schema.constraint import ConstraintCreateStatement
    from ..schema.index import IndexCreateStatement, IndexDropStatement
    from .table_builder import TypeSpellings
    from .writer import SqlWriter

_K = ColumnTypeKind

BIGQUERY_TYPES: "TypeSpellings" = {
    _K.CHAR: ("STRING", "STRING({n})"),
    _K.STRING: ("STRING", "STRING({n})"),
    _K.TEXT: ("STRING", None),
    _K.TINY_INTEGER: ("INT64", None),
    _K.SMALL_INTEGER: ("INT64", None),
    _K.INTEGER: ("INT64", None),
    _K.BIG_INTEGER: ("INT64", None),
    _K.TINY_UNSIGNED: ("INT64", None),
    _K.SMALL_UNSIGNED: ("INT64", None),
    _K.UNSIGNED: ("INT64", None),
    _K.BIG_UNSIGNED: ("NUMERIC", None),
    _K.FLOAT: ("FLOAT64", None),
    _K.DOUBLE: ("FLOAT64", None),
    _K.DECIMAL: ("NUMERIC", "NUMERIC({p}, {s})"),
    _K.DATE_TIME: ("DATETIME", None),
    _K.TIMESTAMP: ("TIMESTAMP", None),
    _K.TIMESTAMP_WITH_TIME_ZONE: ("TIMESTAMP", None),
    _K.TIME: ("TIME", None),
    _K.DATE: ("DATE", None),
    _K.INTERVAL: ("INTERVAL", None),
    _K.BINARY: ("BYTES", "BYTES({n})"),
    _K.VAR_BINARY: ("BYTES", "BYTES({n})"),
    _K.BLOB: ("BYTES", None),
    _K.BOOLEAN: ("BOOL", None),
    _K.MONEY: ("NUMERIC", "NUMERIC({p}, {s})"),
    _K.JSON: ("JSON", None),
    _K.JSON_BINARY: ("JSON", None),
    _K.UUID: ("STRING", None),
}

_DISTINCT_SET_OPERATORS = {
    UnionType.DISTINCT: "UNION DISTINCT",
    UnionType.INTERSECT: "INTERSECT DISTINCT",
    UnionType.EXCEPT: "EXCEPT DISTINCT",
}


class BigQueryDialect(Dialect):
    name = "bigquery"
    aliases = ("bq",)
    paramstyle = "qmark"
    quote = Quote("`", "`")
    string_escape = StringEscape.BACKSLASH

    type_spellings = BIGQUERY_TYPES
    supports_drop_table_options = False
    supports_foreign_key_alter = False
    supports_triggers = False
    constraint_kinds = frozenset({ConstraintKind.PRIMARY_KEY})
    supports_constraint_drop_if_exists = True

    supports_view_if_not_exists = True
    supports_view_check_option = False
    supports_view_drop_options = False
    supports_view_drop_many = False
    supports_view_rename = False

    supports_explain = False

    def bytes_literal(self, b: bytes) -> str:
        return f"FROM_HEX('{b.hex()}')"

    def array_literal(self, v: Value) -> str:
        return "[" + ", ".join(self.array_items(v)) + "]"

    def check_bindable(self, v: Value) -> None:
        if v.kind is not ValueKind.ARRAY:
            super().check_bindable(v)

    def prepare_sub_query_oper(self, oper: SubQueryOper, sql: "SqlWriter") -> None:
        if oper in (SubQueryOper.ANY, SubQueryOper.SOME, SubQueryOper.ALL):
            self.unsupported(f"{oper.value} sub-queries", remediation="Rewrite with EXISTS or IN")
        super().prepare_sub_query_oper(oper, sql)

    def union_keyword(self, union_type: UnionType) -> str:
        # A bare UNION is a syntax error; the DISTINCT form must be spelled out.
        return _DISTINCT_SET_OPERATORS.get(union_type, union_type.value)

    def prepare_select_lock(self, lock: "LockClause", sql: "SqlWriter") -> None:
        self.unsupported("row lock clauses")

    def prepare_default_values(self, sql: "SqlWriter") -> None:
        self.unsupported("DEFAULT VALUES")

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is not None:
            self.unsupported("ON CONFLICT", remediation="Use a MERGE statement")

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        if returning is not None:
            self.unsupported("RETURNING")

    # -- DDL -------------------------------------------------------------------------

    def array_type_sql(self, t: ColumnType) -> str:
        if t.element is None:
            raise BuilderMisuseError("An array column type needs its element type")
        return f"ARRAY<{self.column_type_sql(t.element)}>"

    def auto_increment_spec(self) -> str:
        self.unsupported("auto-increment columns", remediation="Generate keys with GENERATE_UUID()")

    def primary_key_spec(self, column: ColumnDef) -> str:
        return " PRIMARY KEY NOT ENFORCED"

    def prepare_index_create_statement(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        self.unsupported("CREATE INDEX", remediation="Use clustering or search indexes")

    def prepare_index_drop_statement(self, drop: "IndexDropStatement", sql: "SqlWriter") -> None:
        self.unsupported("DROP INDEX")

    def prepare_constraint_create_statement(self, create: "ConstraintCreateStatement", sql: "SqlWriter") -> None:
        if create.name_ is not None:
            self.unsupported("named primary key constraints")
        super().prepare_constraint_create_statement(create, sql)

    def prepare_key_constraint_suffix(self, create: "ConstraintCreateStatement", sql: "SqlWriter") -> None:
        # keys are metadata for the planner only
        sql.write(" NOT ENFORCED")


register(BigQueryDialect())
