from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union

from ..condition import Condition, ConditionHolder
from ..expr import Expr, into_expr
from ..iden import Iden, IntoIden, into_iden


class OnConflictActionKind(str, Enum):
    DO_NOTHING = "DO_NOTHING"
    DO_NOTHING_ON = "DO_NOTHING_ON"
    UPDATE = "UPDATE"


@dataclass
class OnConflictUpdate:
    """``value`` None copies the column from the excluded row."""

    column: Iden
    value: Optional[Expr] = None


class OnConflict:
    """
    Upsert descriptor. The target is a list of columns or expressions, or a
    constraint name, or nothing (MySQL). The action is one of DO NOTHING,
    DO NOTHING on specific columns, or UPDATE with entries rendered in the
    order they were added.
    """

    def __init__(self) -> None:
        self.targets: List[Union[Iden, Expr]] = []
        self.constraint: Optional[Iden] = None
        self.target_where = ConditionHolder()
        self.action: Optional[OnConflictActionKind] = None
        self.do_nothing_columns: List[Iden] = []
        self.updates: List[OnConflictUpdate] = []
        self.action_where = ConditionHolder()

    @classmethod
    def new(cls) -> OnConflict:
        return cls()

    @classmethod
    def column(cls, column: IntoIden) -> OnConflict:
        return cls.columns([column])

    @classmethod
    def columns(cls, columns: Iterable[IntoIden]) -> OnConflict:
        oc = cls()
        oc.targets = [into_iden(c) for c in columns]
        return oc

    @classmethod
    def expr(cls, expr: Any) -> OnConflict:
        return cls.exprs([expr])

    @classmethod
    def exprs(cls, exprs: Iterable[Any]) -> OnConflict:
        oc = cls()
        oc.targets = [into_expr(e) for e in exprs]
        return oc

    @classmethod
    def on_constraint(cls, name: IntoIden) -> OnConflict:
        oc = cls()
        oc.constraint = into_iden(name)
        return oc

    def do_nothing(self) -> OnConflict:
        self.action = OnConflictActionKind.DO_NOTHING
        self.do_nothing_columns = []
        self.updates = []
        return self

    def do_nothing_on(self, columns: Iterable[IntoIden]) -> OnConflict:
        self.action = OnConflictActionKind.DO_NOTHING_ON
        self.do_nothing_columns = [into_iden(c) for c in columns]
        self.updates = []
        return self

    def _update(self, entry: OnConflictUpdate) -> OnConflict:
        if self.action is not OnConflictActionKind.UPDATE:
            self.action = OnConflictActionKind.UPDATE
            self.do_nothing_columns = []
            self.updates = []
        self.updates.append(entry)
        return self

    def update_column(self, column: IntoIden) -> OnConflict:
        return self._update(OnConflictUpdate(into_iden(column)))

    def update_columns(self, columns: Iterable[IntoIden]) -> OnConflict:
        for c in columns:
            self.update_column(c)
        return self

    def value(self, column: IntoIden, expr: Any) -> OnConflict:
        return self._update(OnConflictUpdate(into_iden(column), into_expr(expr)))

    def values(self, pairs: Iterable[Tuple[IntoIden, Any]]) -> OnConflict:
        for column, expr in pairs:
            self.value(column, expr)
        return self

    def target_and_where(self, expr: Any) -> OnConflict:
        self.target_where.add_and(expr)
        return self

    def target_cond_where(self, condition: Condition) -> OnConflict:
        self.target_where.add_condition(condition)
        return self

    def action_and_where(self, expr: Any) -> OnConflict:
        self.action_where.add_and(expr)
        return self

    def action_cond_where(self, condition: Condition) -> OnConflict:
        self.action_where.add_condition(condition)
        return self
