from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, List, Optional

from ..expr import Expr, into_expr
from ..types import FrameType
from .traits import OrderExpr, OrderedStatement


class FrameKind(str, Enum):
    UNBOUNDED_PRECEDING = "UNBOUNDED PRECEDING"
    PRECEDING = "PRECEDING"
    CURRENT_ROW = "CURRENT ROW"
    FOLLOWING = "FOLLOWING"
    UNBOUNDED_FOLLOWING = "UNBOUNDED FOLLOWING"


@dataclass(frozen=True)
class Frame:
    kind: FrameKind
    offset: Optional[int] = None

    @classmethod
    def unbounded_preceding(cls) -> Frame:
        return cls(FrameKind.UNBOUNDED_PRECEDING)

    @classmethod
    def preceding(cls, n: int) -> Frame:
        return cls(FrameKind.PRECEDING, n)

    @classmethod
    def current_row(cls) -> Frame:
        return cls(FrameKind.CURRENT_ROW)

    @classmethod
    def following(cls, n: int) -> Frame:
        return cls(FrameKind.FOLLOWING, n)

    @classmethod
    def unbounded_following(cls) -> Frame:
        return cls(FrameKind.UNBOUNDED_FOLLOWING)


@dataclass(frozen=True)
class FrameClause:
    frame_type: FrameType
    start: Frame
    end: Optional[Frame] = None


class WindowStatement(OrderedStatement):
    """``PARTITION BY ... ORDER BY ... <frame>``, used by ``OVER (...)`` and ``WINDOW``."""

    def __init__(self) -> None:
        self.partition_by_: List[Expr] = []
        self.orders: List[OrderExpr] = []
        self.frame: Optional[FrameClause] = None

    @classmethod
    def partition_by(cls, column: Any) -> WindowStatement:
        return cls().add_partition_by(Expr.col(column))

    def add_partition_by(self, expr: Any) -> WindowStatement:
        self.partition_by_.append(into_expr(expr))
        return self

    def partition_by_columns(self, columns: Iterable[Any]) -> WindowStatement:
        for c in columns:
            self.add_partition_by(Expr.col(c))
        return self

    def frame_start(self, frame_type: FrameType, start: Frame) -> WindowStatement:
        self.frame = FrameClause(frame_type, start)
        return self

    def frame_between(self, frame_type: FrameType, start: Frame, end: Frame) -> WindowStatement:
        self.frame = FrameClause(frame_type, start, end)
        return self
