from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from ..errors import ArityMismatchError, BuilderMisuseError
from ..expr import Expr, ColumnExpr, into_expr
from ..iden import Iden, IntoIden, TableRef, into_iden, into_table_ref
from ..statement import QueryStatement
from .on_conflict import OnConflict
from .returning import ReturningClause, ReturningStatement
from .select import SelectStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from .with_clause import WithClause, WithQuery


class InsertStatement(QueryStatement, ReturningStatement):
    """
    INSERT builder.

    The source is explicit rows (``values``), a sub-select (``select_from``)
    or ``DEFAULT VALUES``; the modes are exclusive.
    """

    def __init__(self) -> None:
        self.replace_ = False
        self.table: Optional[TableRef] = None
        self.columns_: List[Iden] = []
        self.rows: List[Tuple[Expr, ...]] = []
        self.select: Optional[SelectStatement] = None
        self.default_values = False
        self.on_conflict_: Optional[OnConflict] = None
        self.returning_: Optional[ReturningClause] = None
        self.with_clause: Optional["WithClause"] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_insert_statement(self, sql)

    def into_table(self, table: Any) -> InsertStatement:
        self.table = into_table_ref(table)
        return self

    def replace(self) -> InsertStatement:
        """``REPLACE INTO`` (MySQL and SQLite)."""
        self.replace_ = True
        return self

    def columns(self, columns: Iterable[IntoIden]) -> InsertStatement:
        self.columns_ = [into_iden(c) for c in columns]
        return self

    def values(self, row: Iterable[Any]) -> InsertStatement:
        exprs = tuple(into_expr(v) for v in row)
        if self.select is not None:
            raise BuilderMisuseError(
                "Cannot add value rows to an INSERT that selects from a query",
                remediation="Use either values() or select_from(), not both",
            )
        if len(exprs) != len(self.columns_):
            raise ArityMismatchError(
                f"Row has {len(exprs)} values but {len(self.columns_)} columns were declared",
                details={"values": len(exprs), "columns": len(self.columns_)},
            )
        self.rows.append(exprs)
        self.default_values = False
        return self

    values_panic = values

    def select_from(self, select: SelectStatement) -> InsertStatement:
        if self.rows:
            raise BuilderMisuseError(
                "Cannot select from a query when explicit value rows were supplied",
                remediation="Use either values() or select_from(), not both",
            )
        selected = select.selects
        has_asterisk = any(
            isinstance(s.expr, ColumnExpr) and s.expr.ref.is_asterisk for s in selected
        )
        if self.columns_ and selected and not has_asterisk and len(selected) != len(self.columns_):
            raise ArityMismatchError(
                f"Sub-select yields {len(selected)} columns but {len(self.columns_)} were declared",
                details={"select": len(selected), "columns": len(self.columns_)},
            )
        self.select = select
        self.default_values = False
        return self

    def or_default_values(self) -> InsertStatement:
        self.default_values = True
        return self

    def on_conflict(self, on_conflict: OnConflict) -> InsertStatement:
        self.on_conflict_ = on_conflict
        return self

    def with_cte(self, clause: "WithClause") -> InsertStatement:
        self.with_clause = clause
        return self

    def with_(self, clause: "WithClause") -> "WithQuery":
        return clause.query(self)
