from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..errors import BuilderMisuseError
from ..expr import ColumnExpr, Expr, into_expr
from ..iden import Iden, IntoIden, into_iden
from ..statement import QueryStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from .select import SelectStatement


class CommonTableExpression:
    """``name (cols) AS [NOT] [MATERIALIZED] (query)``."""

    def __init__(self) -> None:
        self.name: Optional[Iden] = None
        self.cols: List[Iden] = []
        self.query_: Optional[QueryStatement] = None
        self.materialized_: Optional[bool] = None

    @classmethod
    def new(cls) -> CommonTableExpression:
        return cls()

    @classmethod
    def from_select(cls, select: "SelectStatement") -> CommonTableExpression:
        """Take the column list from the select's aliases and plain column names."""
        cte = cls()
        for s in select.selects:
            if s.alias is not None:
                cte.cols.append(s.alias)
            elif isinstance(s.expr, ColumnExpr) and s.expr.ref.column is not None:
                cte.cols.append(s.expr.ref.column)
            else:
                raise BuilderMisuseError(
                    "Cannot derive a CTE column name from an unaliased expression",
                    remediation="Alias the expression with expr_as()",
                )
        cte.query_ = select
        return cte

    def table_name(self, name: IntoIden) -> CommonTableExpression:
        self.name = into_iden(name)
        return self

    def column(self, column: IntoIden) -> CommonTableExpression:
        self.cols.append(into_iden(column))
        return self

    def columns(self, columns: Iterable[IntoIden]) -> CommonTableExpression:
        self.cols.extend(into_iden(c) for c in columns)
        return self

    def query(self, query: QueryStatement) -> CommonTableExpression:
        self.query_ = query
        return self

    def materialized(self, materialized: bool) -> CommonTableExpression:
        self.materialized_ = materialized
        return self


class SearchOrder(str, Enum):
    BREADTH = "BREADTH"
    DEPTH = "DEPTH"


@dataclass
class Search:
    """``SEARCH BREADTH|DEPTH FIRST BY expr SET alias``."""

    order: SearchOrder
    expr: Expr
    set_as: Iden

    @classmethod
    def new(cls, order: SearchOrder, expr: Any, set_as: IntoIden) -> Search:
        return cls(order, into_expr(expr), into_iden(set_as))


@dataclass
class Cycle:
    """``CYCLE expr SET set_as USING using``."""

    expr: Expr
    set_as: Iden
    using: Iden

    @classmethod
    def new(cls, expr: Any, set_as: IntoIden, using: IntoIden) -> Cycle:
        return cls(into_expr(expr), into_iden(set_as), into_iden(using))


class WithClause:
    def __init__(self) -> None:
        self.recursive_ = False
        self.search_: Optional[Search] = None
        self.cycle_: Optional[Cycle] = None
        self.cte_expressions: List[CommonTableExpression] = []

    @classmethod
    def new(cls) -> WithClause:
        return cls()

    def recursive(self, recursive: bool) -> WithClause:
        self.recursive_ = recursive
        return self

    def search(self, search: Search) -> WithClause:
        self.search_ = search
        return self

    def cycle(self, cycle: Cycle) -> WithClause:
        self.cycle_ = cycle
        return self

    def cte(self, cte: CommonTableExpression) -> WithClause:
        self.cte_expressions.append(cte)
        return self

    def query(self, query: QueryStatement) -> WithQuery:
        return WithQuery(self, query)


class WithQuery(QueryStatement):
    """A WITH clause followed by the statement that uses it."""

    def __init__(self, with_clause: Optional[WithClause] = None, query: Optional[QueryStatement] = None) -> None:
        self.with_clause = with_clause or WithClause()
        self.query_ = query

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_with_query(self, sql)

    def cte(self, cte: CommonTableExpression) -> WithQuery:
        self.with_clause.cte(cte)
        return self

    def query(self, query: QueryStatement) -> WithQuery:
        self.query_ = query
        return self
