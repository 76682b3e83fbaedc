from __future__ import annotations

from typing import TYPE_CHECKING, Any, List, Optional

from ..condition import ConditionHolder
from ..iden import TableRef, into_table_ref
from ..statement import QueryStatement
from ..value import Value, into_value
from .returning import ReturningClause, ReturningStatement
from .traits import ConditionalStatement, OrderExpr, OrderedStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from .with_clause import WithClause, WithQuery


class DeleteStatement(QueryStatement, OrderedStatement, ConditionalStatement, ReturningStatement):
    def __init__(self) -> None:
        self.table: Optional[TableRef] = None
        self.where = ConditionHolder()
        self.orders: List[OrderExpr] = []
        self.limit_: Optional[Value] = None
        self.returning_: Optional[ReturningClause] = None
        self.with_clause: Optional["WithClause"] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_delete_statement(self, sql)

    def from_table(self, table: Any) -> DeleteStatement:
        self.table = into_table_ref(table)
        return self

    def limit(self, n: int) -> DeleteStatement:
        self.limit_ = into_value(n)
        return self

    def with_cte(self, clause: "WithClause") -> DeleteStatement:
        self.with_clause = clause
        return self

    def with_(self, clause: "WithClause") -> "WithQuery":
        return clause.query(self)
