from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, Optional, Tuple

from ..expr import Expr, into_expr


@dataclass(frozen=True)
class ReturningClause:
    """``RETURNING *`` when ``exprs`` is empty and ``all`` is set, else the listed expressions."""

    exprs: Tuple[Expr, ...] = ()
    all: bool = False


class Returning:
    @staticmethod
    def all() -> ReturningClause:
        return ReturningClause(all=True)

    @staticmethod
    def column(column: Any) -> ReturningClause:
        return ReturningClause((Expr.col(column),))

    @staticmethod
    def columns(columns: Iterable[Any]) -> ReturningClause:
        return ReturningClause(tuple(Expr.col(c) for c in columns))

    @staticmethod
    def expr(expr: Any) -> ReturningClause:
        return ReturningClause((into_expr(expr),))

    @staticmethod
    def exprs(exprs: Iterable[Any]) -> ReturningClause:
        return ReturningClause(tuple(into_expr(e) for e in exprs))


class ReturningStatement:
    returning_: Optional[ReturningClause]

    def returning(self, clause: ReturningClause) -> Any:
        self.returning_ = clause
        return self

    def returning_all(self) -> Any:
        return self.returning(Returning.all())

    def returning_col(self, column: Any) -> Any:
        return self.returning(Returning.column(column))
