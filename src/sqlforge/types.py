from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .iden import Iden


class Order(str, Enum):
    ASC = "ASC"
    DESC = "DESC"


class NullOrdering(str, Enum):
    FIRST = "FIRST"
    LAST = "LAST"


class JoinType(str, Enum):
    JOIN = "JOIN"
    CROSS_JOIN = "CROSS JOIN"
    INNER_JOIN = "INNER JOIN"
    LEFT_JOIN = "LEFT JOIN"
    RIGHT_JOIN = "RIGHT JOIN"
    FULL_OUTER_JOIN = "FULL OUTER JOIN"
    STRAIGHT_JOIN = "STRAIGHT_JOIN"


class UnionType(str, Enum):
    DISTINCT = "UNION"
    ALL = "UNION ALL"
    INTERSECT = "INTERSECT"
    EXCEPT = "EXCEPT"


class SelectDistinct(str, Enum):
    ALL = "ALL"
    DISTINCT = "DISTINCT"
    DISTINCT_ROW = "DISTINCTROW"


class LockType(str, Enum):
    UPDATE = "UPDATE"
    NO_KEY_UPDATE = "NO KEY UPDATE"
    SHARE = "SHARE"
    KEY_SHARE = "KEY SHARE"


class LockBehavior(str, Enum):
    NOWAIT = "NOWAIT"
    SKIP_LOCKED = "SKIP LOCKED"


class FrameType(str, Enum):
    ROWS = "ROWS"
    RANGE = "RANGE"


class KeywordKind(str, Enum):
    NULL = "NULL"
    CURRENT_DATE = "CURRENT_DATE"
    CURRENT_TIME = "CURRENT_TIME"
    CURRENT_TIMESTAMP = "CURRENT_TIMESTAMP"
    DEFAULT = "DEFAULT"
    CUSTOM = "CUSTOM"


@dataclass(frozen=True)
class Keyword:
    kind: KeywordKind
    custom: Optional[Iden] = None

    @classmethod
    def null(cls) -> Keyword:
        return cls(KeywordKind.NULL)

    @classmethod
    def current_date(cls) -> Keyword:
        return cls(KeywordKind.CURRENT_DATE)

    @classmethod
    def current_time(cls) -> Keyword:
        return cls(KeywordKind.CURRENT_TIME)

    @classmethod
    def current_timestamp(cls) -> Keyword:
        return cls(KeywordKind.CURRENT_TIMESTAMP)

    @classmethod
    def default(cls) -> Keyword:
        return cls(KeywordKind.DEFAULT)

    @classmethod
    def custom_keyword(cls, iden: Iden) -> Keyword:
        return cls(KeywordKind.CUSTOM, iden)
