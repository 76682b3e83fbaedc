"""
Expression AST.

Every node is an ``Expr``. Nodes are immutable; the fluent methods on
``Expr`` (``eq``, ``is_in``, ``and_`` ...) return new nodes. Arguments are
coerced with ``into_expr``: expressions pass through, conditions become
their expression form, ``None`` becomes the ``NULL`` keyword, statements
become sub-queries, and anything else is converted with ``into_value``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, Union

from .iden import Iden, IntoIden, TypeRef, ColumnRef, into_column_ref, into_iden, into_type_ref
from .statement import Statement
from .types import Keyword, KeywordKind
from .value import Value, into_value, into_value_tuple


class BinOper(str, Enum):
    AND = "AND"
    OR = "OR"
    LIKE = "LIKE"
    NOT_LIKE = "NOT LIKE"
    IS = "IS"
    IS_NOT = "IS NOT"
    IN = "IN"
    NOT_IN = "NOT IN"
    BETWEEN = "BETWEEN"
    NOT_BETWEEN = "NOT BETWEEN"
    EQUAL = "="
    NOT_EQUAL = "<>"
    SMALLER_THAN = "<"
    GREATER_THAN = ">"
    SMALLER_THAN_OR_EQUAL = "<="
    GREATER_THAN_OR_EQUAL = ">="
    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"
    MOD = "%"
    BIT_AND = "&"
    BIT_OR = "|"
    LSHIFT = "<<"
    RSHIFT = ">>"
    AS = "AS"
    ESCAPE = "ESCAPE"
    # Postgres
    ILIKE = "ILIKE"
    NOT_ILIKE = "NOT ILIKE"
    MATCHES = "@@"
    CONTAINS = "@>"
    CONTAINED = "<@"
    OVERLAP = "&&"
    CONCATENATE = "||"
    REGEX = "~"
    REGEX_CASE_INSENSITIVE = "~*"
    # Postgres, MySQL, SQLite
    GET_JSON_FIELD = "->"
    CAST_JSON_FIELD = "->>"
    # SQLite
    GLOB = "GLOB"
    MATCH = "MATCH"


@dataclass(frozen=True)
class CustomOper:
    """An operator spelled verbatim, for dialect-specific syntax."""

    text: str

    @property
    def value(self) -> str:
        return self.text


Oper = Union[BinOper, CustomOper]


class UnOper(str, Enum):
    NOT = "NOT"
    NEG = "-"


class SubQueryOper(str, Enum):
    EXISTS = "EXISTS"
    NOT_EXISTS = "NOT EXISTS"
    ANY = "ANY"
    SOME = "SOME"
    ALL = "ALL"
    IN = "IN"
    NOT_IN = "NOT IN"


_COMPARISON = frozenset(
    {
        BinOper.EQUAL,
        BinOper.NOT_EQUAL,
        BinOper.SMALLER_THAN,
        BinOper.GREATER_THAN,
        BinOper.SMALLER_THAN_OR_EQUAL,
        BinOper.GREATER_THAN_OR_EQUAL,
    }
)
_ARITHMETIC = frozenset({BinOper.ADD, BinOper.SUB, BinOper.MUL, BinOper.DIV, BinOper.MOD})
_LIKE = frozenset({BinOper.LIKE, BinOper.NOT_LIKE, BinOper.ILIKE, BinOper.NOT_ILIKE})


def is_logical(op: Any) -> bool:
    return op in (BinOper.AND, BinOper.OR, UnOper.NOT)


def is_comparison(op: Any) -> bool:
    return op in _COMPARISON


def is_arithmetic(op: Any) -> bool:
    return op in _ARITHMETIC


def is_shift(op: Any) -> bool:
    return op in (BinOper.LSHIFT, BinOper.RSHIFT)


def is_between(op: Any) -> bool:
    return op in (BinOper.BETWEEN, BinOper.NOT_BETWEEN)


def is_like(op: Any) -> bool:
    return op in _LIKE


def is_in(op: Any) -> bool:
    return op in (BinOper.IN, BinOper.NOT_IN)


def is_is(op: Any) -> bool:
    return op in (BinOper.IS, BinOper.IS_NOT)


class Function(str, Enum):
    MAX = "MAX"
    MIN = "MIN"
    SUM = "SUM"
    AVG = "AVG"
    ABS = "ABS"
    COUNT = "COUNT"
    IF_NULL = "IFNULL"
    GREATEST = "GREATEST"
    LEAST = "LEAST"
    CHAR_LENGTH = "CHAR_LENGTH"
    CAST = "CAST"
    COALESCE = "COALESCE"
    LOWER = "LOWER"
    UPPER = "UPPER"
    BIT_AND = "BIT_AND"
    BIT_OR = "BIT_OR"
    RANDOM = "RANDOM"
    ROUND = "ROUND"
    MD5 = "MD5"
    CUSTOM = "CUSTOM"
    # Postgres
    ANY = "ANY"
    SOME = "SOME"
    ALL = "ALL"
    UNNEST = "unnest"
    TO_TSVECTOR = "TO_TSVECTOR"
    TO_TSQUERY = "TO_TSQUERY"
    TS_RANK = "TS_RANK"
    STARTS_WITH = "STARTS_WITH"
    GEN_RANDOM_UUID = "GEN_RANDOM_UUID"


class Expr:
    """Base of every expression node, carrying the fluent operations."""

    # -- constructors -------------------------------------------------------

    @staticmethod
    def col(column: Any) -> ColumnExpr:
        return ColumnExpr(into_column_ref(column))

    column = col

    @staticmethod
    def asterisk() -> ColumnExpr:
        return ColumnExpr(ColumnRef.asterisk())

    @staticmethod
    def val(value: Any) -> ValueExpr:
        return ValueExpr(into_value(value))

    @staticmethod
    def value(value: Any) -> Expr:
        return into_expr(value)

    @staticmethod
    def values(values: Iterable[Any]) -> ValuesExpr:
        return ValuesExpr(tuple(into_value(v) for v in values))

    @staticmethod
    def tuple(exprs: Iterable[Any]) -> TupleExpr:
        return TupleExpr(tuple(into_expr(e) for e in exprs))

    @staticmethod
    def cust(fragment: str) -> CustomExpr:
        return CustomExpr(fragment)

    @staticmethod
    def cust_with_values(template: str, values: Iterable[Any]) -> CustomWithExpr:
        return CustomWithExpr(template, tuple(ValueExpr(into_value(v)) for v in values))

    @staticmethod
    def cust_with_exprs(template: str, exprs: Iterable[Any]) -> CustomWithExpr:
        return CustomWithExpr(template, tuple(into_expr(e) for e in exprs))

    @staticmethod
    def cust_with_expr(template: str, expr: Any) -> CustomWithExpr:
        return CustomWithExpr(template, (into_expr(expr),))

    @staticmethod
    def constant(value: Any) -> ConstantExpr:
        return ConstantExpr(into_value(value))

    @staticmethod
    def keyword_null() -> KeywordExpr:
        return KeywordExpr(Keyword.null())

    @staticmethod
    def keyword_default() -> KeywordExpr:
        return KeywordExpr(Keyword.default())

    @staticmethod
    def current_date() -> KeywordExpr:
        return KeywordExpr(Keyword.current_date())

    @staticmethod
    def current_time() -> KeywordExpr:
        return KeywordExpr(Keyword.current_time())

    @staticmethod
    def current_timestamp() -> KeywordExpr:
        return KeywordExpr(Keyword.current_timestamp())

    @staticmethod
    def custom_keyword(iden: IntoIden) -> KeywordExpr:
        return KeywordExpr(Keyword.custom_keyword(into_iden(iden)))

    @staticmethod
    def type_name(type_ref: Any) -> TypeNameExpr:
        return TypeNameExpr(into_type_ref(type_ref))

    @staticmethod
    def sub_query(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(None, query)

    @staticmethod
    def exists(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(SubQueryOper.EXISTS, query)

    @staticmethod
    def not_exists(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(SubQueryOper.NOT_EXISTS, query)

    @staticmethod
    def any(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(SubQueryOper.ANY, query)

    @staticmethod
    def some(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(SubQueryOper.SOME, query)

    @staticmethod
    def all(query: Statement) -> SubQueryExpr:
        return SubQueryExpr(SubQueryOper.ALL, query)

    @staticmethod
    def case(condition: Any, then: Any) -> CaseStatement:
        return CaseStatement().case(condition, then)

    # -- binary operators ---------------------------------------------------

    def binary(self, op: Oper, right: Any) -> BinaryExpr:
        return BinaryExpr(self, op, into_expr(right))

    def eq(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.EQUAL, v)

    def ne(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.NOT_EQUAL, v)

    def lt(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.SMALLER_THAN, v)

    def lte(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.SMALLER_THAN_OR_EQUAL, v)

    def gt(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.GREATER_THAN, v)

    def gte(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.GREATER_THAN_OR_EQUAL, v)

    def equals(self, column: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.EQUAL, Expr.col(column))

    def not_equals(self, column: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_EQUAL, Expr.col(column))

    def is_(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.IS, v)

    def is_not(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.IS_NOT, v)

    def is_null(self) -> BinaryExpr:
        return BinaryExpr(self, BinOper.IS, Expr.keyword_null())

    def is_not_null(self) -> BinaryExpr:
        return BinaryExpr(self, BinOper.IS_NOT, Expr.keyword_null())

    def between(self, a: Any, b: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.BETWEEN, BinaryExpr(into_expr(a), BinOper.AND, into_expr(b)))

    def not_between(self, a: Any, b: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_BETWEEN, BinaryExpr(into_expr(a), BinOper.AND, into_expr(b)))

    def like(self, pattern: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.LIKE, _like_rhs(pattern))

    def not_like(self, pattern: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_LIKE, _like_rhs(pattern))

    def ilike(self, pattern: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.ILIKE, _like_rhs(pattern))

    def not_ilike(self, pattern: Any) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_ILIKE, _like_rhs(pattern))

    def is_in(self, values: Iterable[Any]) -> BinaryExpr:
        return BinaryExpr(self, BinOper.IN, TupleExpr(tuple(into_expr(v) for v in values)))

    def is_not_in(self, values: Iterable[Any]) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_IN, TupleExpr(tuple(into_expr(v) for v in values)))

    def in_tuples(self, rows: Iterable[Any]) -> BinaryExpr:
        return BinaryExpr(self, BinOper.IN, TupleExpr(tuple(ValuesExpr(into_value_tuple(r)) for r in rows)))

    def in_subquery(self, query: Statement) -> BinaryExpr:
        return BinaryExpr(self, BinOper.IN, SubQueryExpr(None, query))

    def not_in_subquery(self, query: Statement) -> BinaryExpr:
        return BinaryExpr(self, BinOper.NOT_IN, SubQueryExpr(None, query))

    def and_(self, right: Any) -> BinaryExpr:
        return self.binary(BinOper.AND, right)

    def or_(self, right: Any) -> BinaryExpr:
        return self.binary(BinOper.OR, right)

    def add(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.ADD, v)

    def sub(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.SUB, v)

    def mul(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.MUL, v)

    def div(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.DIV, v)

    def mod(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.MOD, v)

    def bit_and(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.BIT_AND, v)

    def bit_or(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.BIT_OR, v)

    def left_shift(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.LSHIFT, v)

    def right_shift(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.RSHIFT, v)

    # Postgres
    def matches(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.MATCHES, v)

    def contains(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.CONTAINS, v)

    def contained(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.CONTAINED, v)

    def overlap(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.OVERLAP, v)

    def concat(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.CONCATENATE, v)

    def regex(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.REGEX, v)

    def iregex(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.REGEX_CASE_INSENSITIVE, v)

    def get_json_field(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.GET_JSON_FIELD, v)

    def cast_json_field(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.CAST_JSON_FIELD, v)

    # SQLite
    def glob(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.GLOB, v)

    def match_(self, v: Any) -> BinaryExpr:
        return self.binary(BinOper.MATCH, v)

    # -- unary, casts, functions --------------------------------------------

    def not_(self) -> UnaryExpr:
        return UnaryExpr(UnOper.NOT, self)

    def neg(self) -> UnaryExpr:
        return UnaryExpr(UnOper.NEG, self)

    def cast_as(self, type_name: IntoIden) -> FunctionCall:
        return FunctionCall(
            Function.CAST,
            (BinaryExpr(self, BinOper.AS, CustomExpr(into_iden(type_name).unquoted())),),
        )

    def as_enum(self, type_name: IntoIden) -> AsEnumExpr:
        return AsEnumExpr(into_iden(type_name), self)

    def max(self) -> FunctionCall:
        return FunctionCall(Function.MAX, (self,))

    def min(self) -> FunctionCall:
        return FunctionCall(Function.MIN, (self,))

    def sum(self) -> FunctionCall:
        return FunctionCall(Function.SUM, (self,))

    def avg(self) -> FunctionCall:
        return FunctionCall(Function.AVG, (self,))

    def count(self) -> FunctionCall:
        return FunctionCall(Function.COUNT, (self,))

    def count_distinct(self) -> FunctionCall:
        return FunctionCall(Function.COUNT, (self,), distinct=True)

    def if_null(self, v: Any) -> FunctionCall:
        return FunctionCall(Function.IF_NULL, (self, into_expr(v)))

    # -- shape helpers used by renderers -------------------------------------

    @property
    def bin_oper(self) -> Optional[Oper]:
        return None

    @property
    def is_binary(self) -> bool:
        return False


@dataclass(frozen=True)
class ColumnExpr(Expr):
    ref: ColumnRef


@dataclass(frozen=True)
class TupleExpr(Expr):
    exprs: Tuple[Expr, ...]


@dataclass(frozen=True)
class UnaryExpr(Expr):
    op: UnOper
    expr: Expr


@dataclass(frozen=True)
class BinaryExpr(Expr):
    left: Expr
    op: Oper
    right: Expr

    @property
    def bin_oper(self) -> Optional[Oper]:
        return self.op

    @property
    def is_binary(self) -> bool:
        return True


@dataclass(frozen=True)
class FunctionCall(Expr):
    func: Function
    args: Tuple[Expr, ...] = ()
    distinct: bool = False
    name: Optional[Iden] = None  # spelling of a CUSTOM function

    def arg(self, a: Any) -> FunctionCall:
        return FunctionCall(self.func, self.args + (into_expr(a),), self.distinct, self.name)

    def with_args(self, args: Iterable[Any]) -> FunctionCall:
        return FunctionCall(self.func, self.args + tuple(into_expr(a) for a in args), self.distinct, self.name)


@dataclass(frozen=True)
class SubQueryExpr(Expr):
    oper: Optional[SubQueryOper]
    query: Statement


@dataclass(frozen=True)
class ValueExpr(Expr):
    literal: Value


@dataclass(frozen=True)
class ValuesExpr(Expr):
    literals: Tuple[Value, ...]


@dataclass(frozen=True)
class CustomExpr(Expr):
    fragment: str


@dataclass(frozen=True)
class CustomWithExpr(Expr):
    template: str
    exprs: Tuple[Expr, ...]


@dataclass(frozen=True)
class KeywordExpr(Expr):
    keyword: Keyword


@dataclass(frozen=True)
class AsEnumExpr(Expr):
    enum_name: Iden
    expr: Expr


@dataclass(frozen=True)
class ConstantExpr(Expr):
    literal: Value


@dataclass(frozen=True)
class TruthExpr(Expr):
    """The always-true or always-false predicate of an empty condition tree."""

    holds: bool


@dataclass(frozen=True)
class TypeNameExpr(Expr):
    type_ref: TypeRef


@dataclass
class CaseStatement(Expr):
    """``(CASE WHEN (c) THEN x ... [ELSE y] END)``; ``case`` and ``finally_`` mutate and return self."""

    when: List[Tuple[Expr, Expr]] = field(default_factory=list)
    else_: Optional[Expr] = None

    def case(self, condition: Any, then: Any) -> CaseStatement:
        self.when.append((into_expr(condition), into_expr(then)))
        return self

    def finally_(self, then: Any) -> CaseStatement:
        self.else_ = into_expr(then)
        return self


@dataclass(frozen=True)
class LikeExpr:
    pattern: str
    escape_char: Optional[str] = None

    def escape(self, c: str) -> LikeExpr:
        if len(c) != 1:
            raise ValueError("escape expects a single character")
        return LikeExpr(self.pattern, c)


def _like_rhs(pattern: Any) -> Expr:
    like = pattern if isinstance(pattern, LikeExpr) else LikeExpr(pattern)
    rhs: Expr = ValueExpr(Value.string(like.pattern))
    if like.escape_char is not None:
        rhs = BinaryExpr(rhs, BinOper.ESCAPE, ConstantExpr(Value.char(like.escape_char)))
    return rhs


def into_expr(obj: Any) -> Expr:
    if isinstance(obj, Expr):
        return obj
    if obj is None:
        return KeywordExpr(Keyword(KeywordKind.NULL))
    if isinstance(obj, Keyword):
        return KeywordExpr(obj)
    if isinstance(obj, ColumnRef):
        return ColumnExpr(obj)
    if isinstance(obj, Statement):
        return SubQueryExpr(None, obj)
    to_expr = getattr(obj, "to_expr", None)
    if to_expr is not None:
        return to_expr()
    return ValueExpr(into_value(obj))
