from __future__ import annotations

import copy
from typing import TYPE_CHECKING, Any, Tuple, Union

if TYPE_CHECKING:
    from .audit import QueryAccessAudit
    from .backend.base import Dialect
    from .backend.writer import SqlWriter
    from .value import Values

IntoDialect = Union["Dialect", str]


def resolve_dialect(dialect: IntoDialect) -> "Dialect":
    # Imported here: the backend package imports every AST module.
    from .backend.registry import get

    if isinstance(dialect, str):
        return get(dialect)
    return dialect


class Statement:
    """Terminal rendering methods shared by every statement."""

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        raise NotImplementedError

    def to_owned(self) -> Any:
        return copy.deepcopy(self)

    def build(self, dialect: IntoDialect) -> Tuple[str, "Values"]:
        return resolve_dialect(dialect).build(self)

    def build_any(self, dialect: "Dialect") -> Tuple[str, "Values"]:
        return dialect.build(self)

    def to_string(self, dialect: IntoDialect) -> str:
        return resolve_dialect(dialect).to_string(self)


class QueryStatement(Statement):
    """SELECT, INSERT, UPDATE, DELETE and WITH statements."""

    def audit(self) -> "QueryAccessAudit":
        """Tables this statement reads and writes; see ``sqlforge.audit``."""
        from .audit import audit

        return audit(self)


class SchemaStatement(Statement):
    """DDL statements."""
