from __future__ import annotations

from typing import Any, Iterable

from .expr import BinOper, BinaryExpr, CustomExpr, Function, FunctionCall, into_expr
from .iden import IntoIden, into_iden


def _call(func: Function, *args: Any) -> FunctionCall:
    return FunctionCall(func, tuple(into_expr(a) for a in args))


class Func:
    """Constructors for function calls. Dialects choose the spelling."""

    @staticmethod
    def cust(name: IntoIden) -> FunctionCall:
        return FunctionCall(Function.CUSTOM, (), name=into_iden(name))

    @staticmethod
    def max(expr: Any) -> FunctionCall:
        return _call(Function.MAX, expr)

    @staticmethod
    def min(expr: Any) -> FunctionCall:
        return _call(Function.MIN, expr)

    @staticmethod
    def sum(expr: Any) -> FunctionCall:
        return _call(Function.SUM, expr)

    @staticmethod
    def avg(expr: Any) -> FunctionCall:
        return _call(Function.AVG, expr)

    @staticmethod
    def abs(expr: Any) -> FunctionCall:
        return _call(Function.ABS, expr)

    @staticmethod
    def count(expr: Any) -> FunctionCall:
        return _call(Function.COUNT, expr)

    @staticmethod
    def count_distinct(expr: Any) -> FunctionCall:
        return FunctionCall(Function.COUNT, (into_expr(expr),), distinct=True)

    @staticmethod
    def if_null(a: Any, b: Any) -> FunctionCall:
        return _call(Function.IF_NULL, a, b)

    @staticmethod
    def greatest(exprs: Iterable[Any]) -> FunctionCall:
        return _call(Function.GREATEST, *exprs)

    @staticmethod
    def least(exprs: Iterable[Any]) -> FunctionCall:
        return _call(Function.LEAST, *exprs)

    @staticmethod
    def char_length(expr: Any) -> FunctionCall:
        return _call(Function.CHAR_LENGTH, expr)

    @staticmethod
    def coalesce(exprs: Iterable[Any]) -> FunctionCall:
        return _call(Function.COALESCE, *exprs)

    @staticmethod
    def lower(expr: Any) -> FunctionCall:
        return _call(Function.LOWER, expr)

    @staticmethod
    def upper(expr: Any) -> FunctionCall:
        return _call(Function.UPPER, expr)

    @staticmethod
    def bit_and(expr: Any) -> FunctionCall:
        return _call(Function.BIT_AND, expr)

    @staticmethod
    def bit_or(expr: Any) -> FunctionCall:
        return _call(Function.BIT_OR, expr)

    @staticmethod
    def random() -> FunctionCall:
        return FunctionCall(Function.RANDOM)

    @staticmethod
    def round(expr: Any) -> FunctionCall:
        return _call(Function.ROUND, expr)

    @staticmethod
    def round_with_precision(expr: Any, precision: Any) -> FunctionCall:
        return _call(Function.ROUND, expr, precision)

    @staticmethod
    def md5(expr: Any) -> FunctionCall:
        return _call(Function.MD5, expr)

    @staticmethod
    def cast_as(expr: Any, type_name: IntoIden) -> FunctionCall:
        return FunctionCall(
            Function.CAST,
            (BinaryExpr(into_expr(expr), BinOper.AS, CustomExpr(into_iden(type_name).unquoted())),),
        )


class PgFunc:
    """Postgres-only functions."""

    @staticmethod
    def any(expr: Any) -> FunctionCall:
        return _call(Function.ANY, expr)

    @staticmethod
    def some(expr: Any) -> FunctionCall:
        return _call(Function.SOME, expr)

    @staticmethod
    def all(expr: Any) -> FunctionCall:
        return _call(Function.ALL, expr)

    @staticmethod
    def unnest(expr: Any) -> FunctionCall:
        return _call(Function.UNNEST, expr)

    @staticmethod
    def to_tsvector(expr: Any, regconfig: Any = None) -> FunctionCall:
        if regconfig is None:
            return _call(Function.TO_TSVECTOR, expr)
        return _call(Function.TO_TSVECTOR, regconfig, expr)

    @staticmethod
    def to_tsquery(expr: Any, regconfig: Any = None) -> FunctionCall:
        if regconfig is None:
            return _call(Function.TO_TSQUERY, expr)
        return _call(Function.TO_TSQUERY, regconfig, expr)

    @staticmethod
    def ts_rank(vector: Any, query: Any) -> FunctionCall:
        return _call(Function.TS_RANK, vector, query)

    @staticmethod
    def starts_with(text: Any, prefix: Any) -> FunctionCall:
        return _call(Function.STARTS_WITH, text, prefix)

    @staticmethod
    def gen_random_uuid() -> FunctionCall:
        return FunctionCall(Function.GEN_RANDOM_UUID)
