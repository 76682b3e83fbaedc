"""
Which tables a query statement reads and writes.

``audit(statement)`` walks a SELECT, INSERT, UPDATE, DELETE or WITH
statement and lists one ``QueryAccessRequest`` per table reference, in the
order they are met. Sub-queries anywhere in the tree count as reads.
Names introduced by a WITH clause are not tables and are dropped from the
result, as are VALUES lists and table functions.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from .condition import Condition, ConditionHolder
from .errors import BuilderMisuseError
from .expr import (
    AsEnumExpr,
    BinaryExpr,
    CaseStatement,
    CustomWithExpr,
    Expr,
    FunctionCall,
    SubQueryExpr,
    TupleExpr,
    UnaryExpr,
)
from .iden import FunctionTable, Iden, SubQueryTable, TableName, TableRef, TableRefName
from .query.delete import DeleteStatement
from .query.insert import InsertStatement
from .query.select import SelectStatement
from .query.update import UpdateStatement
from .query.with_clause import WithClause, WithQuery

logger = logging.getLogger(__name__)


class AccessType(str, Enum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


@dataclass(frozen=True)
class QueryAccessRequest:
    access_type: AccessType
    table: TableName


@dataclass
class QueryAccessAudit:
    requests: List[QueryAccessRequest] = field(default_factory=list)

    def tables(self, access_type: AccessType) -> List[TableName]:
        return [r.table for r in self.requests if r.access_type is access_type]

    def _names(self, access_type: AccessType) -> List[Iden]:
        return [t.name for t in self.tables(access_type)]

    def selected_tables(self) -> List[Iden]:
        return self._names(AccessType.SELECT)

    def inserted_tables(self) -> List[Iden]:
        return self._names(AccessType.INSERT)

    def updated_tables(self) -> List[Iden]:
        return self._names(AccessType.UPDATE)

    def deleted_tables(self) -> List[Iden]:
        return self._names(AccessType.DELETE)


class _Walker:
    """Collects read accesses; writes are appended by ``_walk``."""

    def __init__(self) -> None:
        self.requests: List[QueryAccessRequest] = []

    def read(self, table: TableName) -> None:
        self.requests.append(QueryAccessRequest(AccessType.SELECT, table))

    def select(self, select: SelectStatement) -> None:
        for s in select.selects:
            self.expr(s.expr)
        for table in select.from_tables:
            self.table_ref(table)
        for join in select.joins:
            self.table_ref(join.table)
            if join.on is not None:
                self.condition(join.on)
        self.holder(select.where)
        for group in select.groups:
            self.expr(group)
        self.holder(select.having)
        for _, arm in select.unions:
            self.select(arm)

    def table_ref(self, table: TableRef) -> None:
        if isinstance(table, TableRefName):
            self.read(table.name)
        elif isinstance(table, SubQueryTable):
            self.statement(table.query)
        elif isinstance(table, FunctionTable):
            self.expr(table.call)
        # a VALUES list reads nothing

    def statement(self, statement: Any) -> None:
        if isinstance(statement, SelectStatement):
            self.select(statement)
        elif isinstance(statement, WithQuery):
            _walk(statement, self)

    def with_clause(self, clause: WithClause) -> None:
        if clause.search_ is not None:
            self.expr(clause.search_.expr)
        if clause.cycle_ is not None:
            self.expr(clause.cycle_.expr)
        for cte in clause.cte_expressions:
            if cte.query_ is not None:
                self.statement(cte.query_)

    def forget_ctes(self, clause: WithClause) -> None:
        names = {cte.name.unquoted() for cte in clause.cte_expressions if cte.name is not None}
        self.requests[:] = [
            r for r in self.requests if r.table.schema is not None or r.table.name.unquoted() not in names
        ]

    def holder(self, holder: ConditionHolder) -> None:
        if holder.condition is not None:
            self.condition(holder.condition)

    def condition(self, condition: Condition) -> None:
        for item in condition.conditions:
            if isinstance(item, Condition):
                self.condition(item)
            else:
                self.expr(item)

    def expr(self, expr: Expr) -> None:
        if isinstance(expr, (UnaryExpr, AsEnumExpr)):
            self.expr(expr.expr)
        elif isinstance(expr, BinaryExpr):
            self.expr(expr.left)
            self.expr(expr.right)
        elif isinstance(expr, FunctionCall):
            for arg in expr.args:
                self.expr(arg)
        elif isinstance(expr, SubQueryExpr):
            self.statement(expr.query)
        elif isinstance(expr, (CustomWithExpr, TupleExpr)):
            for e in expr.exprs:
                self.expr(e)
        elif isinstance(expr, CaseStatement):
            for when, then in expr.when:
                self.expr(when)
                self.expr(then)
            if expr.else_ is not None:
                self.expr(expr.else_)


def _target(table: Optional[TableRef], verb: str) -> TableName:
    if not isinstance(table, TableRefName):
        raise BuilderMisuseError(
            f"Cannot audit {verb} without a plain target table",
            details={"statement": verb},
            remediation="Give the statement a table name",
        )
    return table.name


def _write(walker: _Walker, access_type: AccessType, target: TableName, returning: bool) -> None:
    # RETURNING reads the written rows back
    if returning:
        walker.read(target)
    walker.requests.append(QueryAccessRequest(access_type, target))


def _walk(statement: Any, walker: _Walker) -> None:
    if isinstance(statement, SelectStatement):
        walker.select(statement)
        return
    if isinstance(statement, WithQuery):
        walker.with_clause(statement.with_clause)
        if statement.query_ is not None:
            _walk(statement.query_, walker)
        walker.forget_ctes(statement.with_clause)
        return
    if isinstance(statement, InsertStatement):
        _write(walker, AccessType.INSERT, _target(statement.table, "INSERT"), statement.returning_ is not None)
        for row in statement.rows:
            for e in row:
                walker.expr(e)
        if statement.select is not None:
            walker.select(statement.select)
    elif isinstance(statement, UpdateStatement):
        _write(walker, AccessType.UPDATE, _target(statement.table_, "UPDATE"), statement.returning_ is not None)
        for table in statement.from_tables:
            walker.table_ref(table)
        for _, value in statement.assignments:
            walker.expr(value)
        walker.holder(statement.where)
    elif isinstance(statement, DeleteStatement):
        _write(walker, AccessType.DELETE, _target(statement.table, "DELETE"), statement.returning_ is not None)
        walker.holder(statement.where)
    else:
        raise BuilderMisuseError(
            f"Cannot audit a {type(statement).__name__}",
            remediation="Audit a SELECT, INSERT, UPDATE, DELETE or WITH statement",
        )
    if statement.with_clause is not None:
        walker.with_clause(statement.with_clause)
        walker.forget_ctes(statement.with_clause)


def audit(statement: Any) -> QueryAccessAudit:
    """List the tables ``statement`` reads and writes."""
    walker = _Walker()
    _walk(statement, walker)
    logger.debug("audited %s: %d table accesses", type(statement).__name__, len(walker.requests))
    return QueryAccessAudit(walker.requests)
