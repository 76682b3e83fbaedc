from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Iterable, List, Optional, Tuple, Union

from ..condition import Condition, ConditionHolder, into_condition
from ..expr import Expr, FunctionCall, into_expr
from ..iden import (
    Iden,
    IntoIden,
    SubQueryTable,
    TableRef,
    FunctionTable,
    ValuesListTable,
    into_iden,
    into_table_ref,
)
from ..statement import QueryStatement
from ..types import JoinType, LockBehavior, LockType, SelectDistinct, UnionType
from ..value import Value, into_value, into_value_tuple
from .traits import ConditionalStatement, OrderExpr, OrderedStatement
from .window import WindowStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter
    from .with_clause import WithClause, WithQuery


@dataclass
class SelectExpr:
    expr: Expr
    alias: Optional[Iden] = None
    window: Optional[Union[Iden, WindowStatement]] = None


@dataclass
class JoinExpr:
    join: JoinType
    table: TableRef
    on: Optional[Condition] = None
    using: Tuple[Iden, ...] = ()
    lateral: bool = False


@dataclass
class LockClause:
    lock_type: LockType
    tables: List[TableRef] = field(default_factory=list)
    behavior: Optional[LockBehavior] = None


class SelectStatement(QueryStatement, OrderedStatement, ConditionalStatement):
    """
    SELECT builder.

    Every setter mutates the statement and returns it, so calls chain::

        Query.select().columns([Char.Id]).from_(Char.Table).and_where(Expr.col(Char.Id).eq(1))

    Clauses are always rendered in canonical order regardless of call order.
    """

    def __init__(self) -> None:
        self.distinct_: Optional[SelectDistinct] = None
        self.distinct_on_: List[Expr] = []
        self.selects: List[SelectExpr] = []
        self.from_tables: List[TableRef] = []
        self.joins: List[JoinExpr] = []
        self.where = ConditionHolder()
        self.groups: List[Expr] = []
        self.having = ConditionHolder()
        self.unions: List[Tuple[UnionType, SelectStatement]] = []
        self.orders: List[OrderExpr] = []
        self.limit_: Optional[Value] = None
        self.offset_: Optional[Value] = None
        self.lock_: Optional[LockClause] = None
        self.window_: Optional[Tuple[Iden, WindowStatement]] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_select_statement(self, sql)

    # -- selection ----------------------------------------------------------

    def column(self, column: Any) -> SelectStatement:
        return self.expr(Expr.col(column))

    def columns(self, columns: Iterable[Any]) -> SelectStatement:
        for c in columns:
            self.column(c)
        return self

    def expr(self, expr: Any) -> SelectStatement:
        if isinstance(expr, SelectExpr):
            self.selects.append(expr)
        else:
            self.selects.append(SelectExpr(into_expr(expr)))
        return self

    def exprs(self, exprs: Iterable[Any]) -> SelectStatement:
        for e in exprs:
            self.expr(e)
        return self

    def expr_as(self, expr: Any, alias: IntoIden) -> SelectStatement:
        self.selects.append(SelectExpr(into_expr(expr), into_iden(alias)))
        return self

    def expr_window(self, expr: Any, window: WindowStatement) -> SelectStatement:
        self.selects.append(SelectExpr(into_expr(expr), None, window))
        return self

    def expr_window_as(self, expr: Any, window: WindowStatement, alias: IntoIden) -> SelectStatement:
        self.selects.append(SelectExpr(into_expr(expr), into_iden(alias), window))
        return self

    def expr_window_name(self, expr: Any, name: IntoIden) -> SelectStatement:
        self.selects.append(SelectExpr(into_expr(expr), None, into_iden(name)))
        return self

    def expr_window_name_as(self, expr: Any, name: IntoIden, alias: IntoIden) -> SelectStatement:
        self.selects.append(SelectExpr(into_expr(expr), into_iden(alias), into_iden(name)))
        return self

    def clear_selects(self) -> SelectStatement:
        self.selects = []
        return self

    def distinct(self) -> SelectStatement:
        self.distinct_ = SelectDistinct.DISTINCT
        return self

    def distinct_on(self, columns: Iterable[Any]) -> SelectStatement:
        self.distinct_on_ = [Expr.col(c) for c in columns]
        return self

    # -- sources ------------------------------------------------------------

    def from_(self, table: Any) -> SelectStatement:
        self.from_tables.append(into_table_ref(table))
        return self

    def from_as(self, table: Any, alias: IntoIden) -> SelectStatement:
        self.from_tables.append(into_table_ref(table).with_alias(alias))
        return self

    def from_subquery(self, query: SelectStatement, alias: IntoIden) -> SelectStatement:
        self.from_tables.append(SubQueryTable(query, into_iden(alias)))
        return self

    def from_values(self, rows: Iterable[Any], alias: IntoIden) -> SelectStatement:
        self.from_tables.append(ValuesListTable(tuple(into_value_tuple(r) for r in rows), into_iden(alias)))
        return self

    def from_function(self, call: FunctionCall, alias: IntoIden) -> SelectStatement:
        self.from_tables.append(FunctionTable(call, into_iden(alias)))
        return self

    def join(self, join: JoinType, table: Any, condition: Any) -> SelectStatement:
        self.joins.append(JoinExpr(join, into_table_ref(table), into_condition(condition)))
        return self

    def join_as(self, join: JoinType, table: Any, alias: IntoIden, condition: Any) -> SelectStatement:
        self.joins.append(JoinExpr(join, into_table_ref(table).with_alias(alias), into_condition(condition)))
        return self

    def join_subquery(self, join: JoinType, query: SelectStatement, alias: IntoIden, condition: Any) -> SelectStatement:
        self.joins.append(JoinExpr(join, SubQueryTable(query, into_iden(alias)), into_condition(condition)))
        return self

    def join_lateral(self, join: JoinType, query: SelectStatement, alias: IntoIden, condition: Any) -> SelectStatement:
        self.joins.append(
            JoinExpr(join, SubQueryTable(query, into_iden(alias)), into_condition(condition), lateral=True)
        )
        return self

    def join_using(self, join: JoinType, table: Any, columns: Iterable[IntoIden]) -> SelectStatement:
        self.joins.append(JoinExpr(join, into_table_ref(table), None, tuple(into_iden(c) for c in columns)))
        return self

    def left_join(self, table: Any, condition: Any) -> SelectStatement:
        return self.join(JoinType.LEFT_JOIN, table, condition)

    def right_join(self, table: Any, condition: Any) -> SelectStatement:
        return self.join(JoinType.RIGHT_JOIN, table, condition)

    def inner_join(self, table: Any, condition: Any) -> SelectStatement:
        return self.join(JoinType.INNER_JOIN, table, condition)

    def full_outer_join(self, table: Any, condition: Any) -> SelectStatement:
        return self.join(JoinType.FULL_OUTER_JOIN, table, condition)

    def cross_join(self, table: Any) -> SelectStatement:
        self.joins.append(JoinExpr(JoinType.CROSS_JOIN, into_table_ref(table)))
        return self

    # -- grouping -----------------------------------------------------------

    def group_by_col(self, column: Any) -> SelectStatement:
        self.groups.append(Expr.col(column))
        return self

    def group_by_columns(self, columns: Iterable[Any]) -> SelectStatement:
        for c in columns:
            self.group_by_col(c)
        return self

    def add_group_by(self, exprs: Iterable[Any]) -> SelectStatement:
        self.groups.extend(into_expr(e) for e in exprs)
        return self

    def and_having(self, expr: Any) -> SelectStatement:
        self.having.add_and(expr)
        return self

    def or_having(self, expr: Any) -> SelectStatement:
        self.having.add_or(expr)
        return self

    def cond_having(self, condition: Any) -> SelectStatement:
        self.having.add_condition(into_condition(condition))
        return self

    # -- set operations, paging, locking --------------------------------------

    def union(self, union_type: UnionType, query: SelectStatement) -> SelectStatement:
        self.unions.append((union_type, query))
        return self

    def add_unions(self, unions: Iterable[Tuple[UnionType, SelectStatement]]) -> SelectStatement:
        self.unions.extend(unions)
        return self

    def limit(self, n: int) -> SelectStatement:
        self.limit_ = into_value(n)
        return self

    def offset(self, n: int) -> SelectStatement:
        self.offset_ = into_value(n)
        return self

    def reset_limit(self) -> SelectStatement:
        self.limit_ = None
        return self

    def reset_offset(self) -> SelectStatement:
        self.offset_ = None
        return self

    def lock(self, lock_type: LockType) -> SelectStatement:
        self.lock_ = LockClause(lock_type)
        return self

    def lock_shared(self) -> SelectStatement:
        return self.lock(LockType.SHARE)

    def lock_exclusive(self) -> SelectStatement:
        return self.lock(LockType.UPDATE)

    def lock_with_tables(self, lock_type: LockType, tables: Iterable[Any]) -> SelectStatement:
        self.lock_ = LockClause(lock_type, [into_table_ref(t) for t in tables])
        return self

    def lock_with_behavior(self, lock_type: LockType, behavior: LockBehavior) -> SelectStatement:
        self.lock_ = LockClause(lock_type, [], behavior)
        return self

    def lock_with_tables_behavior(
        self, lock_type: LockType, tables: Iterable[Any], behavior: LockBehavior
    ) -> SelectStatement:
        self.lock_ = LockClause(lock_type, [into_table_ref(t) for t in tables], behavior)
        return self

    def window(self, name: IntoIden, window: WindowStatement) -> SelectStatement:
        self.window_ = (into_iden(name), window)
        return self

    def with_(self, clause: "WithClause") -> "WithQuery":
        return clause.query(self)
