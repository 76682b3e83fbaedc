from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..condition import Condition, ConditionHolder
from ..expr import Expr, into_expr
from ..types import NullOrdering, Order
from ..value import Value, into_value


@dataclass(frozen=True)
class FieldOrder:
    """Order by position in a value list: MySQL ``FIELD()``, a CASE ladder elsewhere."""

    values: Tuple[Value, ...]


OrderKind = Union[Order, FieldOrder]


@dataclass
class OrderExpr:
    expr: Expr
    order: OrderKind = Order.ASC
    nulls: Optional[NullOrdering] = None


def field_order(values: Iterable[Any]) -> FieldOrder:
    return FieldOrder(tuple(into_value(v) for v in values))


class OrderedStatement:
    """ORDER BY builders. Calls append in order."""

    orders: List[OrderExpr]

    def order_by(self, column: Any, order: OrderKind = Order.ASC) -> Any:
        return self.order_by_expr(Expr.col(column), order)

    def order_by_expr(self, expr: Any, order: OrderKind = Order.ASC) -> Any:
        self.orders.append(OrderExpr(into_expr(expr), order))
        return self

    def order_by_columns(self, columns: Iterable[Tuple[Any, OrderKind]]) -> Any:
        for column, order in columns:
            self.order_by(column, order)
        return self

    def order_by_with_nulls(self, column: Any, order: OrderKind, nulls: NullOrdering) -> Any:
        return self.order_by_expr_with_nulls(Expr.col(column), order, nulls)

    def order_by_expr_with_nulls(self, expr: Any, order: OrderKind, nulls: NullOrdering) -> Any:
        self.orders.append(OrderExpr(into_expr(expr), order, nulls))
        return self

    def order_by_field(self, column: Any, values: Iterable[Any]) -> Any:
        return self.order_by(column, field_order(values))

    def clear_order_by(self) -> Any:
        self.orders = []
        return self


class ConditionalStatement:
    """WHERE builders over a ``ConditionHolder``."""

    where: ConditionHolder

    def and_where(self, expr: Any) -> Any:
        self.where.add_and(expr)
        return self

    def and_where_option(self, expr: Optional[Any]) -> Any:
        if expr is not None:
            self.where.add_and(expr)
        return self

    def or_where(self, expr: Any) -> Any:
        self.where.add_or(expr)
        return self

    def cond_where(self, condition: Any) -> Any:
        if not isinstance(condition, Condition):
            condition = Condition.all().add(condition)
        self.where.add_condition(condition)
        return self
