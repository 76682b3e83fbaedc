from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple, Union

from ..errors import BuilderMisuseError
from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import QueryStatement
from .delete import DeleteStatement
from .insert import InsertStatement
from .select import SelectStatement
from .update import UpdateStatement
from .with_clause import WithQuery

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter

_EXPLAINABLE = (SelectStatement, InsertStatement, UpdateStatement, DeleteStatement, WithQuery)

# postgres writes its parenthesised options in this order
PG_OPTION_ORDER = (
    "ANALYZE",
    "VERBOSE",
    "COSTS",
    "SETTINGS",
    "GENERIC_PLAN",
    "BUFFERS",
    "SERIALIZE",
    "WAL",
    "TIMING",
    "SUMMARY",
    "MEMORY",
)


class ExplainFormat(str, Enum):
    TEXT = "TEXT"
    XML = "XML"
    JSON = "JSON"
    YAML = "YAML"
    TREE = "TREE"
    TRADITIONAL = "TRADITIONAL"


class ExplainSerialize(str, Enum):
    NONE = "NONE"
    TEXT = "TEXT"
    BINARY = "BINARY"


class ExplainStatement(QueryStatement):
    """
    EXPLAIN of a query, or on MySQL of a table or a running connection.

    Options are recorded under their SQL spelling; a dialect that does not
    know an option rejects the statement instead of dropping it. Values in
    the explained statement bind like they do in the statement itself.
    """

    def __init__(self) -> None:
        self.statement_: Optional[QueryStatement] = None
        self.format_: Optional[ExplainFormat] = None
        self.flags: Dict[str, Union[bool, ExplainSerialize]] = {}
        self.into_variable_: Optional[str] = None
        self.schema_spec: Optional[Tuple[str, Iden]] = None
        self.table_: Optional[TableName] = None
        self.table_target: Optional[Union[Iden, str]] = None
        self.for_connection_: Optional[int] = None
        self.query_plan_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_explain_statement(self, sql)

    def statement(self, statement: QueryStatement) -> ExplainStatement:
        if not isinstance(statement, _EXPLAINABLE):
            raise BuilderMisuseError(
                f"Cannot explain a {type(statement).__name__}",
                remediation="Explain a SELECT, INSERT, UPDATE, DELETE or WITH statement",
            )
        self.statement_ = statement
        return self

    def _flag(self, name: str, value: Union[bool, ExplainSerialize]) -> ExplainStatement:
        self.flags[name] = value
        return self

    def analyze(self, analyze: bool = True) -> ExplainStatement:
        return self._flag("ANALYZE", analyze)

    def format(self, explain_format: ExplainFormat) -> ExplainStatement:
        self.format_ = explain_format
        return self

    def verbose(self, verbose: bool = True) -> ExplainStatement:
        return self._flag("VERBOSE", verbose)

    def costs(self, costs: bool = True) -> ExplainStatement:
        return self._flag("COSTS", costs)

    def settings(self, settings: bool = True) -> ExplainStatement:
        return self._flag("SETTINGS", settings)

    def generic_plan(self, generic_plan: bool = True) -> ExplainStatement:
        return self._flag("GENERIC_PLAN", generic_plan)

    def buffers(self, buffers: bool = True) -> ExplainStatement:
        return self._flag("BUFFERS", buffers)

    def serialize(self, serialize: ExplainSerialize = ExplainSerialize.TEXT) -> ExplainStatement:
        return self._flag("SERIALIZE", serialize)

    def wal(self, wal: bool = True) -> ExplainStatement:
        return self._flag("WAL", wal)

    def timing(self, timing: bool = True) -> ExplainStatement:
        return self._flag("TIMING", timing)

    def summary(self, summary: bool = True) -> ExplainStatement:
        return self._flag("SUMMARY", summary)

    def memory(self, memory: bool = True) -> ExplainStatement:
        return self._flag("MEMORY", memory)

    def table(self, table: Any, column: Optional[IntoIden] = None) -> ExplainStatement:
        """``EXPLAIN tbl_name [col_name]``: MySQL's column listing."""
        self.table_ = into_table_name(table)
        self.table_target = into_iden(column) if column is not None else None
        return self

    def wildcard(self, pattern: str) -> ExplainStatement:
        """Restrict a table listing to columns matching a LIKE pattern."""
        self.table_target = pattern
        return self

    def into_variable(self, variable: str) -> ExplainStatement:
        self.into_variable_ = variable.lstrip("@")
        return self

    def for_connection(self, connection_id: int) -> ExplainStatement:
        self.for_connection_ = int(connection_id)
        return self

    def for_schema(self, schema: IntoIden) -> ExplainStatement:
        self.schema_spec = ("SCHEMA", into_iden(schema))
        return self

    def for_database(self, database: IntoIden) -> ExplainStatement:
        self.schema_spec = ("DATABASE", into_iden(database))
        return self

    def query_plan(self) -> ExplainStatement:
        self.query_plan_ = True
        return self

    def options_used(self) -> List[str]:
        """SQL spellings of the options set on this statement."""
        used = list(self.flags)
        if self.format_ is not None:
            used.append("FORMAT")
        if self.into_variable_ is not None:
            used.append("INTO")
        if self.schema_spec is not None:
            used.append("FOR " + self.schema_spec[0])
        if self.table_ is not None or self.table_target is not None:
            used.append("TABLE")
        if self.for_connection_ is not None:
            used.append("FOR CONNECTION")
        if self.query_plan_:
            used.append("QUERY PLAN")
        return used
