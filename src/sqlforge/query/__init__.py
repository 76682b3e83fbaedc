from __future__ import annotations

from .delete import DeleteStatement
from .explain import ExplainFormat, ExplainSerialize, ExplainStatement
from .insert import InsertStatement
from .on_conflict import OnConflict
from .returning import Returning, ReturningClause
from .select import JoinExpr, LockClause, SelectExpr, SelectStatement
from .traits import FieldOrder, OrderExpr, field_order
from .update import UpdateStatement
from .window import Frame, FrameClause, WindowStatement
from .with_clause import CommonTableExpression, Cycle, Search, SearchOrder, WithClause, WithQuery


class Query:
    """Entry points for query statements."""

    @staticmethod
    def select() -> SelectStatement:
        return SelectStatement()

    @staticmethod
    def insert() -> InsertStatement:
        return InsertStatement()

    @staticmethod
    def update() -> UpdateStatement:
        return UpdateStatement()

    @staticmethod
    def delete() -> DeleteStatement:
        return DeleteStatement()

    @staticmethod
    def with_() -> WithClause:
        return WithClause()

    @staticmethod
    def explain() -> ExplainStatement:
        return ExplainStatement()


__all__ = [
    "Query",
    "SelectStatement",
    "SelectExpr",
    "JoinExpr",
    "LockClause",
    "InsertStatement",
    "UpdateStatement",
    "DeleteStatement",
    "ExplainStatement",
    "ExplainFormat",
    "ExplainSerialize",
    "OnConflict",
    "Returning",
    "ReturningClause",
    "OrderExpr",
    "FieldOrder",
    "field_order",
    "WindowStatement",
    "Frame",
    "FrameClause",
    "WithClause",
    "WithQuery",
    "CommonTableExpression",
    "Search",
    "SearchOrder",
    "Cycle",
]
