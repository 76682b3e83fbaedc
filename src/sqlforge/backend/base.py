from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, NoReturn, Optional, Protocol, Tuple

from ..errors import UnsupportedFeatureError
from ..iden import Quote
from ..statement import SchemaStatement, Statement
from ..value import Values
from .constraint_builder import ConstraintBuilder
from .explain_builder import ExplainBuilder
from .foreign_key_builder import ForeignKeyBuilder
from .index_builder import IndexBuilder
from .query_builder import QueryBuilder
from .table_builder import TableBuilder
from .trigger_builder import TriggerBuilder
from .type_builder import TypeBuilder
from .value_encoder import ValueEncoder
from .view_builder import ViewBuilder
from .writer import SqlWriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RenderResult:
    sql: str
    values: Values
    metadata: Dict[str, Any]  # e.g. {"dialect": "...", "paramstyle": "numeric"}


class SqlDialect(Protocol):
    name: str
    paramstyle: str  # DB-API style: "qmark" | "numeric" | "named" ...

    def quote_ident(self, ident: str) -> str: ...
    def build(self, statement: Statement) -> Tuple[str, Values]: ...
    def to_string(self, statement: Statement) -> str: ...
    def render(self, statement: Statement, inline: bool = False) -> RenderResult: ...


class Dialect(
    QueryBuilder,
    ExplainBuilder,
    ValueEncoder,
    TableBuilder,
    IndexBuilder,
    ConstraintBuilder,
    ForeignKeyBuilder,
    ViewBuilder,
    TypeBuilder,
    TriggerBuilder,
):
    """
    Base dialect: generic SQL with ``"`` quotes and ``?`` markers.

    Concrete dialects subclass this and override only the ``prepare_*``
    hooks and class attributes where they differ. Instances hold no
    per-render state, so one instance can render from many threads.
    """

    name = "common"
    # extra lookup names for the registry
    aliases: Tuple[str, ...] = ()
    paramstyle = "qmark"
    quote = Quote('"', '"')

    def configure(self, **options: Any) -> "Dialect":
        """Return a new instance of this dialect built with ``options``."""
        return type(self)(**options)

    def positional_marker(self, n: int) -> str:
        return "?"

    def quote_ident(self, ident: str) -> str:
        return self.quote.wrap(ident)

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        logger.debug("dialect %s rejected %s", self.name, feature)
        raise UnsupportedFeatureError(self.name, feature, remediation=remediation)

    def _render(self, statement: Statement, inline: bool) -> SqlWriter:
        # A fresh writer per call; on error it is dropped with the exception.
        sql = SqlWriter(inline=inline or isinstance(statement, SchemaStatement))
        statement.prepare(self, sql)
        return sql

    def build(self, statement: Statement) -> Tuple[str, Values]:
        """Render with positional markers. DDL statements always render inline."""
        return self._render(statement, inline=False).result()

    def to_string(self, statement: Statement) -> str:
        """Render with inline literals."""
        return self._render(statement, inline=True).getvalue()

    def render(self, statement: Statement, inline: bool = False) -> RenderResult:
        sql, values = self._render(statement, inline).result()
        meta = {
            "dialect": self.name,
            "paramstyle": self.paramstyle,
            "statement": type(statement).__name__,
        }
        return RenderResult(sql=sql, values=values, metadata=meta)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
