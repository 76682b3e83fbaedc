from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple

from ..condition import ConditionHolder
from ..expr import Expr, into_expr
from ..iden import Iden, IntoIden, TableRef, into_iden, into_table_ref
from ..statement import QueryStatement
from ..value import Value, into_value
from .returning import ReturningClause, ReturningStatement
from .traits import ConditionalStatement, OrderExpr, OrderedStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from .with_clause import WithClause, WithQuery


class UpdateStatement(QueryStatement, OrderedStatement, ConditionalStatement, ReturningStatement):
    """UPDATE builder. Assignments render in the order they were added."""

    def __init__(self) -> None:
        self.table_: Optional[TableRef] = None
        self.from_tables: List[TableRef] = []
        self.assignments: List[Tuple[Iden, Expr]] = []
        self.where = ConditionHolder()
        self.orders: List[OrderExpr] = []
        self.limit_: Optional[Value] = None
        self.returning_: Optional[ReturningClause] = None
        self.with_clause: Optional["WithClause"] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_update_statement(self, sql)

    def table(self, table: Any) -> UpdateStatement:
        self.table_ = into_table_ref(table)
        return self

    def from_(self, table: Any) -> UpdateStatement:
        self.from_tables.append(into_table_ref(table))
        return self

    def value(self, column: IntoIden, value: Any) -> UpdateStatement:
        self.assignments.append((into_iden(column), into_expr(value)))
        return self

    def values(self, pairs: Iterable[Tuple[IntoIden, Any]]) -> UpdateStatement:
        for column, value in pairs:
            self.value(column, value)
        return self

    def limit(self, n: int) -> UpdateStatement:
        self.limit_ = into_value(n)
        return self

    def with_cte(self, clause: "WithClause") -> UpdateStatement:
        self.with_clause = clause
        return self

    def with_(self, clause: "WithClause") -> "WithQuery":
        return clause.query(self)
