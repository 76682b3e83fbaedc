"""
Condition trees for WHERE and HAVING.

A ``Condition`` is an n-ary ``All`` (AND) or ``Any`` (OR) node with a
negation flag. The empty ``All`` is ``TRUE`` and the empty ``Any`` is
``FALSE``. ``Condition.add`` returns a new tree and drops empty,
un-negated children.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Optional, Tuple, Union

from .expr import BinOper, BinaryExpr, Expr, TruthExpr, TupleExpr, UnOper, UnaryExpr, into_expr


class ConditionType(str, Enum):
    ALL = "AND"
    ANY = "OR"


ConditionItem = Union["Condition", Expr]


@dataclass(frozen=True)
class Condition:
    condition_type: ConditionType
    conditions: Tuple[ConditionItem, ...] = field(default_factory=tuple)
    negate: bool = False

    @classmethod
    def all(cls) -> Condition:
        return cls(ConditionType.ALL)

    @classmethod
    def any(cls) -> Condition:
        return cls(ConditionType.ANY)

    def add(self, item: Any) -> Condition:
        item = into_condition_item(item)
        if isinstance(item, Condition) and not item.negate:
            if not item.conditions:
                return self
            # A single child needs no junction of its own.
            if len(item.conditions) == 1:
                item = item.conditions[0]
            elif item.condition_type is self.condition_type:
                return replace(self, conditions=self.conditions + item.conditions)
        return replace(self, conditions=self.conditions + (item,))

    def add_option(self, item: Optional[Any]) -> Condition:
        if item is None:
            return self
        return self.add(item)

    def not_(self) -> Condition:
        return replace(self, negate=not self.negate)

    def is_empty(self) -> bool:
        return not self.conditions

    def __len__(self) -> int:
        return len(self.conditions)

    def to_expr(self) -> Expr:
        """Fold into binary AND/OR nodes; the renderer adds parentheses by precedence."""
        oper = BinOper.AND if self.condition_type is ConditionType.ALL else BinOper.OR
        exprs = [c.to_expr() if isinstance(c, Condition) else c for c in self.conditions]
        if exprs:
            out = exprs[0]
            for e in exprs[1:]:
                out = BinaryExpr(out, oper, e)
        else:
            out = TruthExpr(self.condition_type is ConditionType.ALL)
        if self.negate:
            # A negated tree is always parenthesised.
            return UnaryExpr(UnOper.NOT, TupleExpr((out,)))
        return out


class Cond:
    @staticmethod
    def all() -> Condition:
        return Condition.all()

    @staticmethod
    def any() -> Condition:
        return Condition.any()


def any_(*items: Any) -> Condition:
    c = Condition.any()
    for item in items:
        c = c.add(item)
    return c


def all_(*items: Any) -> Condition:
    c = Condition.all()
    for item in items:
        c = c.add(item)
    return c


def into_condition_item(obj: Any) -> ConditionItem:
    if isinstance(obj, Condition):
        return obj
    return into_expr(obj)


def into_condition(obj: Any) -> Condition:
    if isinstance(obj, Condition):
        return obj
    return Condition.all().add(obj)


class ConditionHolder:
    """The WHERE or HAVING slot of a statement."""

    def __init__(self) -> None:
        self.condition: Optional[Condition] = None

    def is_empty(self) -> bool:
        return self.condition is None

    def add_and(self, item: Any) -> None:
        self.add_condition(Condition.all().add(item))

    def add_or(self, item: Any) -> None:
        current = self.condition
        if current is None:
            self.condition = Condition.any().add(item)
        elif current.negate:
            self.condition = Condition.any().add(current).add(item)
        elif current.condition_type is ConditionType.ANY or len(current.conditions) <= 1:
            self.condition = Condition(ConditionType.ANY, current.conditions).add(item)
        else:
            self.condition = Condition.any().add(current).add(item)

    def add_condition(self, addition: Condition) -> None:
        current = self.condition
        if current is None:
            self.condition = addition
        elif current.condition_type is ConditionType.ALL and not current.negate:
            if addition.condition_type is ConditionType.ALL and not addition.negate:
                self.condition = replace(current, conditions=current.conditions + addition.conditions)
            else:
                self.condition = current.add(addition)
        else:
            self.condition = Condition.all().add(current).add(addition)

    def to_expr(self) -> Optional[Expr]:
        if self.condition is None:
            return None
        return self.condition.to_expr()
