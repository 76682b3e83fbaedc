"""
Expression and DML rendering.

``QueryBuilder`` walks expression trees and query statements into a
``SqlWriter``. Parentheses are inserted by operator precedence: a child
expression is wrapped unless it is atomic, or its operator binds tighter
than the parent's, or it sits on the left of a left-associative operator
of the same kind.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, Iterable, List, NoReturn, Optional, Sequence

from ..condition import ConditionHolder
from ..errors import BuilderMisuseError, CustomPlaceholderError
from ..expr import (
    AsEnumExpr,
    BinOper,
    BinaryExpr,
    CaseStatement,
    ColumnExpr,
    ConstantExpr,
    CustomExpr,
    CustomOper,
    CustomWithExpr,
    Expr,
    Function,
    FunctionCall,
    KeywordExpr,
    Oper,
    SubQueryExpr,
    SubQueryOper,
    TruthExpr,
    TupleExpr,
    TypeNameExpr,
    UnaryExpr,
    UnOper,
    ValueExpr,
    ValuesExpr,
    is_arithmetic,
    is_between,
    is_comparison,
    is_in,
    is_is,
    is_like,
    is_logical,
    is_shift,
)
from ..iden import (
    ColumnRef,
    FunctionTable,
    Iden,
    Quote,
    SubQueryTable,
    TableName,
    TableRef,
    TableRefName,
    TypeRef,
    ValuesListTable,
)
from ..query.on_conflict import OnConflictActionKind
from ..query.traits import FieldOrder, OrderExpr
from ..types import KeywordKind, LockType, NullOrdering, UnionType
from ..value import Value

if TYPE_CHECKING:
    from ..query.delete import DeleteStatement
    from ..query.insert import InsertStatement
    from ..query.on_conflict import OnConflict
    from ..query.returning import ReturningClause
    from ..query.select import JoinExpr, LockClause, SelectExpr, SelectStatement
    from ..query.update import UpdateStatement
    from ..query.window import Frame, WindowStatement
    from ..query.with_clause import CommonTableExpression, WithClause, WithQuery
    from .writer import SqlWriter

_ATOMIC = (
    ColumnExpr,
    TupleExpr,
    ConstantExpr,
    FunctionCall,
    ValueExpr,
    ValuesExpr,
    KeywordExpr,
    CaseStatement,
    SubQueryExpr,
    TypeNameExpr,
)

_LEFT_ASSOCIATIVE = frozenset({BinOper.AND, BinOper.OR, BinOper.ADD, BinOper.SUB, BinOper.MUL, BinOper.MOD})

# Operators outside the portable core; a dialect lists the ones it speaks.
_NON_PORTABLE_OPERATORS = frozenset(
    {
        BinOper.ILIKE,
        BinOper.NOT_ILIKE,
        BinOper.MATCHES,
        BinOper.CONTAINS,
        BinOper.CONTAINED,
        BinOper.OVERLAP,
        BinOper.CONCATENATE,
        BinOper.REGEX,
        BinOper.REGEX_CASE_INSENSITIVE,
        BinOper.GET_JSON_FIELD,
        BinOper.CAST_JSON_FIELD,
        BinOper.GLOB,
        BinOper.MATCH,
    }
)

_POSTGRES_FUNCTIONS = frozenset(
    {
        Function.ANY,
        Function.SOME,
        Function.ALL,
        Function.UNNEST,
        Function.TO_TSVECTOR,
        Function.TO_TSQUERY,
        Function.TS_RANK,
        Function.STARTS_WITH,
        Function.GEN_RANDOM_UUID,
    }
)


def well_known_higher_precedence(inner: Expr, outer_op: object) -> bool:
    """True when ``inner`` never needs parentheses under ``outer_op``."""
    if isinstance(inner, _ATOMIC):
        return True
    if isinstance(inner, TruthExpr):
        return is_logical(outer_op)
    if isinstance(inner, BinaryExpr):
        op = inner.op
        if is_arithmetic(op) or is_shift(op):
            return (
                is_comparison(outer_op)
                or is_between(outer_op)
                or is_in(outer_op)
                or is_like(outer_op)
                or is_logical(outer_op)
            )
        if is_comparison(op) or is_in(op) or is_like(op) or is_is(op) or is_between(op):
            return is_logical(outer_op)
    return False


class QueryBuilder:
    quote: Quote
    name: str

    # Non-portable binary operators this dialect renders natively.
    operators: FrozenSet[BinOper] = frozenset()
    union_parenthesised = True
    supports_update_order_limit = False
    supports_update_from = False
    supports_cte_materialized = False
    table_alias_keyword = " AS "

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def positional_marker(self, n: int) -> str:
        raise NotImplementedError

    # -- identifiers -----------------------------------------------------------

    def prepare_iden(self, iden: Iden, sql: "SqlWriter") -> None:
        sql.write(self.quote.wrap(iden.unquoted()))

    def prepare_idens(self, idens: Iterable[Iden], sql: "SqlWriter") -> None:
        for i, iden in enumerate(idens):
            if i:
                sql.write(", ")
            self.prepare_iden(iden, sql)

    def prepare_table_name(self, name: TableName, sql: "SqlWriter") -> None:
        for i, part in enumerate(name.parts()):
            if i:
                sql.write(".")
            self.prepare_iden(part, sql)

    def prepare_type_ref(self, ref: TypeRef, sql: "SqlWriter") -> None:
        for i, part in enumerate(ref.parts()):
            if i:
                sql.write(".")
            self.prepare_iden(part, sql)

    def prepare_column_ref(self, ref: ColumnRef, sql: "SqlWriter") -> None:
        if ref.pseudo == "excluded":
            sql.write(self.quote.wrap("excluded") + ".")
        elif ref.pseudo is not None:
            sql.write(ref.pseudo + ".")
        elif ref.table is not None:
            self.prepare_table_name(ref.table, sql)
            sql.write(".")
        if ref.column is None:
            sql.write("*")
        else:
            self.prepare_iden(ref.column, sql)

    # -- expressions ------------------------------------------------------------

    def prepare_expr(self, expr: Expr, sql: "SqlWriter") -> None:
        if isinstance(expr, ColumnExpr):
            self.prepare_column_ref(expr.ref, sql)
        elif isinstance(expr, BinaryExpr):
            self.prepare_binary_expr(expr, sql)
        elif isinstance(expr, ValueExpr):
            self.prepare_value(expr.literal, sql)
        elif isinstance(expr, UnaryExpr):
            self.prepare_unary_expr(expr, sql)
        elif isinstance(expr, FunctionCall):
            self.prepare_function_call(expr, sql)
        elif isinstance(expr, TupleExpr):
            sql.write("(")
            self.prepare_exprs(expr.exprs, sql)
            sql.write(")")
        elif isinstance(expr, ValuesExpr):
            sql.write("(")
            for i, v in enumerate(expr.literals):
                if i:
                    sql.write(", ")
                self.prepare_value(v, sql)
            sql.write(")")
        elif isinstance(expr, SubQueryExpr):
            self.prepare_sub_query_expr(expr, sql)
        elif isinstance(expr, CustomExpr):
            sql.write(expr.fragment)
        elif isinstance(expr, CustomWithExpr):
            self.prepare_custom_with_expr(expr, sql)
        elif isinstance(expr, KeywordExpr):
            self.prepare_keyword(expr, sql)
        elif isinstance(expr, ConstantExpr):
            sql.write(self.value_to_string(expr.literal))
        elif isinstance(expr, TruthExpr):
            sql.write(self.truth_predicate(expr.holds))
        elif isinstance(expr, CaseStatement):
            self.prepare_case_statement(expr, sql)
        elif isinstance(expr, AsEnumExpr):
            self.prepare_as_enum(expr, sql)
        elif isinstance(expr, TypeNameExpr):
            self.prepare_type_ref(expr.type_ref, sql)
        else:
            raise TypeError(f"Cannot render {type(expr).__name__}")

    def prepare_exprs(self, exprs: Sequence[Expr], sql: "SqlWriter") -> None:
        for i, e in enumerate(exprs):
            if i:
                sql.write(", ")
            self.prepare_expr(e, sql)

    def bin_oper_text(self, op: Oper) -> str:
        if isinstance(op, CustomOper):
            return op.text
        if op in _NON_PORTABLE_OPERATORS and op not in self.operators:
            if op is BinOper.ILIKE:
                return BinOper.LIKE.value
            if op is BinOper.NOT_ILIKE:
                return BinOper.NOT_LIKE.value
            self.unsupported(f"the {op.value} operator")
        return op.value

    def prepare_binary_expr(self, expr: BinaryExpr, sql: "SqlWriter") -> None:
        op = expr.op
        if is_in(op) and isinstance(expr.right, TupleExpr) and not expr.right.exprs:
            # x IN () is always false, x NOT IN () always true.
            sql.write("1 = 2" if op is BinOper.IN else "1 = 1")
            return
        text = self.bin_oper_text(op)

        left_paren = not well_known_higher_precedence(expr.left, op) and not (
            isinstance(expr.left, BinaryExpr) and expr.left.op == op and op in _LEFT_ASSOCIATIVE
        )
        self._prepare_operand(expr.left, left_paren, sql)
        sql.write(f" {text} ")

        right = expr.right
        right_paren = not well_known_higher_precedence(right, op)
        if isinstance(right, BinaryExpr):
            if is_between(op) and right.op is BinOper.AND:
                right_paren = False
            elif is_like(op) and right.op is BinOper.ESCAPE:
                right_paren = False
        elif op is BinOper.AS and isinstance(right, CustomExpr):
            right_paren = False
        self._prepare_operand(right, right_paren, sql)

    def _prepare_operand(self, expr: Expr, paren: bool, sql: "SqlWriter") -> None:
        if paren:
            sql.write("(")
        self.prepare_expr(expr, sql)
        if paren:
            sql.write(")")

    def prepare_unary_expr(self, expr: UnaryExpr, sql: "SqlWriter") -> None:
        sql.write("NOT " if expr.op is UnOper.NOT else "-")
        self._prepare_operand(expr.expr, not well_known_higher_precedence(expr.expr, expr.op), sql)

    def function_name(self, call: FunctionCall) -> str:
        if call.func is Function.CUSTOM:
            if call.name is None:
                raise BuilderMisuseError("A custom function needs a name")
            return call.name.unquoted()
        if call.func in _POSTGRES_FUNCTIONS:
            self.unsupported(f"the {call.func.value} function")
        return call.func.value

    def prepare_function_call(self, call: FunctionCall, sql: "SqlWriter") -> None:
        sql.write(self.function_name(call))
        sql.write("(")
        if call.distinct:
            sql.write("DISTINCT ")
        self.prepare_exprs(call.args, sql)
        sql.write(")")

    def prepare_sub_query_oper(self, oper: SubQueryOper, sql: "SqlWriter") -> None:
        sql.write(oper.value)

    def prepare_sub_query_expr(self, expr: SubQueryExpr, sql: "SqlWriter") -> None:
        if expr.oper is not None:
            self.prepare_sub_query_oper(expr.oper, sql)
        sql.write("(")
        expr.query.prepare(self, sql)  # type: ignore[arg-type]
        sql.write(")")

    def truth_predicate(self, holds: bool) -> str:
        return self.bool_literal(holds)

    def prepare_keyword(self, expr: KeywordExpr, sql: "SqlWriter") -> None:
        kw = expr.keyword
        if kw.kind is KeywordKind.CUSTOM:
            if kw.custom is None:
                raise BuilderMisuseError("A custom keyword needs its spelling")
            sql.write(kw.custom.unquoted())
        else:
            sql.write(kw.kind.value)

    def prepare_as_enum(self, expr: AsEnumExpr, sql: "SqlWriter") -> None:
        self.prepare_expr(expr.expr, sql)

    def prepare_case_statement(self, case: CaseStatement, sql: "SqlWriter") -> None:
        if not case.when:
            raise BuilderMisuseError("CASE needs at least one WHEN arm")
        sql.write("(CASE")
        for condition, then in case.when:
            sql.write(" WHEN (")
            self.prepare_expr(condition, sql)
            sql.write(") THEN ")
            self.prepare_expr(then, sql)
        if case.else_ is not None:
            sql.write(" ELSE ")
            self.prepare_expr(case.else_, sql)
        sql.write(" END)")

    def _marker_is_question(self) -> bool:
        return self.positional_marker(1) == "?"

    def prepare_custom_with_expr(self, expr: CustomWithExpr, sql: "SqlWriter") -> None:
        """
        Expand ``$n`` (1-based) and, where ``?`` is the dialect marker,
        sequential ``?``. ``$$`` and ``??`` write a literal character.
        Text inside single-quoted literals is copied verbatim.
        """
        template = expr.template
        question = self._marker_is_question()
        sequential = 0
        in_quote = False
        i = 0
        n = len(template)
        while i < n:
            ch = template[i]
            if ch == "'":
                in_quote = not in_quote
                sql.write(ch)
                i += 1
            elif in_quote:
                sql.write(ch)
                i += 1
            elif ch == "$" and i + 1 < n and template[i + 1] == "$":
                sql.write("$")
                i += 2
            elif ch == "$" and i + 1 < n and template[i + 1].isdigit():
                j = i + 1
                while j < n and template[j].isdigit():
                    j += 1
                self._prepare_placeholder(expr, int(template[i + 1 : j]) - 1, template[i:j], sql)
                i = j
            elif ch == "?" and question:
                if i + 1 < n and template[i + 1] == "?":
                    sql.write("?")
                    i += 2
                else:
                    self._prepare_placeholder(expr, sequential, "?", sql)
                    sequential += 1
                    i += 1
            else:
                sql.write(ch)
                i += 1

    def _prepare_placeholder(self, expr: CustomWithExpr, index: int, marker: str, sql: "SqlWriter") -> None:
        if not 0 <= index < len(expr.exprs):
            raise CustomPlaceholderError(
                f"Placeholder {marker} is outside the {len(expr.exprs)} supplied expression(s)",
                details={"template": expr.template, "marker": marker, "supplied": len(expr.exprs)},
            )
        self.prepare_expr(expr.exprs[index], sql)

    # -- shared clauses ----------------------------------------------------------

    def prepare_condition(self, holder: ConditionHolder, keyword: str, sql: "SqlWriter") -> None:
        expr = holder.to_expr()
        if expr is None:
            return
        sql.write(f" {keyword} ")
        self.prepare_expr(expr, sql)

    def prepare_table_ref(self, table: TableRef, sql: "SqlWriter") -> None:
        if isinstance(table, TableRefName):
            self.prepare_table_name(table.name, sql)
        elif isinstance(table, SubQueryTable):
            sql.write("(")
            table.query.prepare(self, sql)
            sql.write(")")
        elif isinstance(table, ValuesListTable):
            self.prepare_values_list(table, sql)
        elif isinstance(table, FunctionTable):
            self.prepare_function_call(table.call, sql)
        else:
            raise TypeError(f"Cannot render table reference {type(table).__name__}")
        if table.alias is not None:
            sql.write(self.table_alias_keyword)
            self.prepare_iden(table.alias, sql)

    def values_row_prefix(self) -> str:
        return ""

    def prepare_values_list(self, table: ValuesListTable, sql: "SqlWriter") -> None:
        prefix = self.values_row_prefix()
        sql.write("(VALUES ")
        for i, row in enumerate(table.rows):
            if i:
                sql.write(", ")
            sql.write(prefix + "(")
            for j, v in enumerate(row):
                if j:
                    sql.write(", ")
                self.prepare_value(v, sql)
            sql.write(")")
        sql.write(")")

    def prepare_order_expr(self, order: OrderExpr, sql: "SqlWriter") -> None:
        if isinstance(order.order, FieldOrder):
            self.prepare_field_order(order.expr, order.order, sql)
            return
        if order.nulls is not None and not self.native_nulls_ordering():
            self.prepare_nulls_emulation(order.expr, order.nulls, sql)
            sql.write(", ")
        self.prepare_expr(order.expr, sql)
        sql.write(" " + order.order.value)
        if order.nulls is not None and self.native_nulls_ordering():
            sql.write(" NULLS " + order.nulls.value)

    def prepare_order_exprs(self, orders: Sequence[OrderExpr], sql: "SqlWriter") -> None:
        sql.write(" ORDER BY ")
        for i, o in enumerate(orders):
            if i:
                sql.write(", ")
            self.prepare_order_expr(o, sql)

    def native_nulls_ordering(self) -> bool:
        return True

    def prepare_nulls_emulation(self, expr: Expr, nulls: NullOrdering, sql: "SqlWriter") -> None:
        # NULL sorts as 1 under IS NULL; DESC puts NULLs first.
        self.prepare_expr(expr, sql)
        sql.write(" IS NULL " + ("DESC" if nulls is NullOrdering.FIRST else "ASC"))

    def prepare_field_order(self, expr: Expr, field: FieldOrder, sql: "SqlWriter") -> None:
        sql.write("CASE")
        for i, v in enumerate(field.values):
            sql.write(" WHEN ")
            self.prepare_expr(expr, sql)
            sql.write("=")
            self.prepare_value(v, sql)
            sql.write(f" THEN {i}")
        sql.write(f" ELSE {len(field.values)} END")

    def prepare_returning(self, returning: Optional["ReturningClause"], sql: "SqlWriter") -> None:
        if returning is None:
            return
        sql.write(" RETURNING ")
        if returning.all or not returning.exprs:
            sql.write("*")
        else:
            self.prepare_exprs(returning.exprs, sql)

    def prepare_output(self, returning: Optional["ReturningClause"], pseudo: str, sql: "SqlWriter") -> None:
        """MSSQL places its OUTPUT clause inside the statement; other dialects write nothing here."""

    # -- SELECT -------------------------------------------------------------------

    def prepare_select_statement(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        sql.write("SELECT ")
        if select.distinct_ is not None:
            sql.write(select.distinct_.value + " ")
        if select.distinct_on_:
            self.prepare_distinct_on(select.distinct_on_, sql)
        for i, s in enumerate(select.selects):
            if i:
                sql.write(", ")
            self.prepare_select_expr(s, sql)
        if select.from_tables:
            sql.write(" FROM ")
            for i, t in enumerate(select.from_tables):
                if i:
                    sql.write(", ")
                self.prepare_table_ref(t, sql)
        for join in select.joins:
            sql.write(" ")
            self.prepare_join_expr(join, sql)
        self.prepare_condition(select.where, "WHERE", sql)
        if select.groups:
            sql.write(" GROUP BY ")
            self.prepare_exprs(select.groups, sql)
        self.prepare_condition(select.having, "HAVING", sql)
        if select.window_ is not None:
            name, window = select.window_
            sql.write(" WINDOW ")
            self.prepare_iden(name, sql)
            sql.write(" AS (")
            self.prepare_window_statement(window, sql)
            sql.write(")")
        for union_type, query in select.unions:
            sql.write(f" {self.union_keyword(union_type)} ")
            self.prepare_union_arm(query, sql)
        if select.orders:
            self.prepare_order_exprs(select.orders, sql)
        self.prepare_select_limit_offset(select, sql)
        if select.lock_ is not None:
            self.prepare_select_lock(select.lock_, sql)

    def prepare_distinct_on(self, exprs: List[Expr], sql: "SqlWriter") -> None:
        self.unsupported("DISTINCT ON")

    def prepare_select_expr(self, s: "SelectExpr", sql: "SqlWriter") -> None:
        self.prepare_expr(s.expr, sql)
        if s.window is not None:
            sql.write(" OVER ")
            if isinstance(s.window, Iden):
                self.prepare_iden(s.window, sql)
            else:
                sql.write("(")
                self.prepare_window_statement(s.window, sql)
                sql.write(")")
        if s.alias is not None:
            sql.write(" AS ")
            self.prepare_iden(s.alias, sql)

    def prepare_window_statement(self, window: "WindowStatement", sql: "SqlWriter") -> None:
        parts = 0
        if window.partition_by_:
            sql.write("PARTITION BY ")
            self.prepare_exprs(window.partition_by_, sql)
            parts += 1
        if window.orders:
            if parts:
                sql.write(" ")
            sql.write("ORDER BY ")
            for i, o in enumerate(window.orders):
                if i:
                    sql.write(", ")
                self.prepare_order_expr(o, sql)
            parts += 1
        if window.frame is not None:
            if parts:
                sql.write(" ")
            frame = window.frame
            sql.write(frame.frame_type.value + " ")
            if frame.end is None:
                self.prepare_frame(frame.start, sql)
            else:
                sql.write("BETWEEN ")
                self.prepare_frame(frame.start, sql)
                sql.write(" AND ")
                self.prepare_frame(frame.end, sql)

    def prepare_frame(self, frame: "Frame", sql: "SqlWriter") -> None:
        if frame.offset is not None:
            sql.write(f"{frame.offset} ")
        sql.write(frame.kind.value)

    def prepare_join_expr(self, join: "JoinExpr", sql: "SqlWriter") -> None:
        sql.write(join.join.value + " ")
        if join.lateral:
            sql.write("LATERAL ")
        self.prepare_table_ref(join.table, sql)
        if join.on is not None:
            sql.write(" ON ")
            self.prepare_expr(join.on.to_expr(), sql)
        elif join.using:
            sql.write(" USING (")
            self.prepare_idens(join.using, sql)
            sql.write(")")

    def union_keyword(self, union_type: UnionType) -> str:
        return union_type.value

    def prepare_union_arm(self, query: "SelectStatement", sql: "SqlWriter") -> None:
        if self.union_parenthesised:
            sql.write("(")
        self.prepare_select_statement(query, sql)
        if self.union_parenthesised:
            sql.write(")")

    def prepare_select_limit_offset(self, select: "SelectStatement", sql: "SqlWriter") -> None:
        if select.limit_ is not None:
            sql.write(" LIMIT ")
            self.prepare_value(select.limit_, sql)
        if select.offset_ is not None:
            sql.write(" OFFSET ")
            self.prepare_value(select.offset_, sql)

    def supported_lock_types(self) -> FrozenSet[LockType]:
        return frozenset(LockType)

    def prepare_select_lock(self, lock: "LockClause", sql: "SqlWriter") -> None:
        if lock.lock_type not in self.supported_lock_types():
            self.unsupported(f"FOR {lock.lock_type.value}")
        sql.write(" FOR " + lock.lock_type.value)
        if lock.tables:
            sql.write(" OF ")
            for i, t in enumerate(lock.tables):
                if i:
                    sql.write(", ")
                self.prepare_table_ref(t, sql)
        if lock.behavior is not None:
            sql.write(" " + lock.behavior.value)

    # -- INSERT -------------------------------------------------------------------

    def prepare_insert_keyword(self, insert: "InsertStatement", sql: "SqlWriter") -> None:
        if insert.replace_:
            self.unsupported("REPLACE INTO")
        sql.write("INSERT")

    def prepare_default_values(self, sql: "SqlWriter") -> None:
        sql.write(" DEFAULT VALUES")

    def prepare_insert_statement(self, insert: "InsertStatement", sql: "SqlWriter") -> None:
        if insert.table is None:
            raise BuilderMisuseError("INSERT needs a target table", remediation="Call into_table()")
        if insert.with_clause is not None:
            self.prepare_with_clause(insert.with_clause, sql)
        self.prepare_insert_keyword(insert, sql)
        sql.write(" INTO ")
        self.prepare_table_ref(insert.table, sql)

        use_default = insert.default_values and not insert.rows and insert.select is None
        if insert.columns_ and not use_default:
            sql.write(" (")
            self.prepare_idens(insert.columns_, sql)
            sql.write(")")
        self.prepare_output(insert.returning_, "INSERTED", sql)
        if insert.select is not None:
            sql.write(" ")
            self.prepare_select_statement(insert.select, sql)
        elif insert.rows:
            sql.write(" VALUES ")
            for i, row in enumerate(insert.rows):
                if i:
                    sql.write(", ")
                sql.write("(")
                self.prepare_exprs(row, sql)
                sql.write(")")
        elif use_default:
            self.prepare_default_values(sql)
        else:
            raise BuilderMisuseError(
                "INSERT has no rows",
                remediation="Add values(), select_from() or or_default_values()",
            )
        self.prepare_on_conflict(insert.on_conflict_, sql)
        self.prepare_returning(insert.returning_, sql)

    def prepare_on_conflict(self, on_conflict: Optional["OnConflict"], sql: "SqlWriter") -> None:
        if on_conflict is None:
            return
        sql.write(" ON CONFLICT")
        self.prepare_on_conflict_target(on_conflict, sql)
        self.prepare_condition(on_conflict.target_where, "WHERE", sql)
        self.prepare_on_conflict_action(on_conflict, sql)
        self.prepare_condition(on_conflict.action_where, "WHERE", sql)

    def prepare_on_conflict_target(self, on_conflict: "OnConflict", sql: "SqlWriter") -> None:
        if on_conflict.targets:
            sql.write(" (")
            for i, target in enumerate(on_conflict.targets):
                if i:
                    sql.write(", ")
                if isinstance(target, Iden):
                    self.prepare_iden(target, sql)
                else:
                    self.prepare_expr(target, sql)
            sql.write(")")
        elif on_conflict.constraint is not None:
            sql.write(" ON CONSTRAINT ")
            self.prepare_iden(on_conflict.constraint, sql)

    def prepare_on_conflict_action(self, on_conflict: "OnConflict", sql: "SqlWriter") -> None:
        if on_conflict.action is None:
            raise BuilderMisuseError(
                "ON CONFLICT needs an action",
                remediation="Call do_nothing(), update_column() or value()",
            )
        if on_conflict.action is not OnConflictActionKind.UPDATE:
            sql.write(" DO NOTHING")
            return
        sql.write(" DO UPDATE SET ")
        for i, update in enumerate(on_conflict.updates):
            if i:
                sql.write(", ")
            self.prepare_iden(update.column, sql)
            sql.write(" = ")
            if update.value is None:
                self.prepare_column_ref(ColumnRef.excluded(update.column), sql)
            else:
                self.prepare_expr(update.value, sql)

    # -- UPDATE / DELETE ------------------------------------------------------------

    def prepare_update_statement(self, update: "UpdateStatement", sql: "SqlWriter") -> None:
        if update.table_ is None:
            raise BuilderMisuseError("UPDATE needs a table", remediation="Call table()")
        if not update.assignments:
            raise BuilderMisuseError("UPDATE needs at least one assignment", remediation="Call value()")
        if update.with_clause is not None:
            self.prepare_with_clause(update.with_clause, sql)
        sql.write("UPDATE ")
        self.prepare_table_ref(update.table_, sql)
        sql.write(" SET ")
        for i, (column, value) in enumerate(update.assignments):
            if i:
                sql.write(", ")
            self.prepare_iden(column, sql)
            sql.write(" = ")
            self.prepare_expr(value, sql)
        self.prepare_output(update.returning_, "INSERTED", sql)
        if update.from_tables:
            if not self.supports_update_from:
                self.unsupported("UPDATE ... FROM")
            sql.write(" FROM ")
            for i, t in enumerate(update.from_tables):
                if i:
                    sql.write(", ")
                self.prepare_table_ref(t, sql)
        self.prepare_condition(update.where, "WHERE", sql)
        self._prepare_order_limit(update.orders, update.limit_, "UPDATE", sql)
        self.prepare_returning(update.returning_, sql)

    def prepare_delete_statement(self, delete: "DeleteStatement", sql: "SqlWriter") -> None:
        if delete.table is None:
            raise BuilderMisuseError("DELETE needs a table", remediation="Call from_table()")
        if delete.with_clause is not None:
            self.prepare_with_clause(delete.with_clause, sql)
        sql.write("DELETE FROM ")
        self.prepare_table_ref(delete.table, sql)
        self.prepare_output(delete.returning_, "DELETED", sql)
        self.prepare_condition(delete.where, "WHERE", sql)
        self._prepare_order_limit(delete.orders, delete.limit_, "DELETE", sql)
        self.prepare_returning(delete.returning_, sql)

    def _prepare_order_limit(
        self, orders: Sequence[OrderExpr], limit: Optional[Value], verb: str, sql: "SqlWriter"
    ) -> None:
        if (orders or limit is not None) and not self.supports_update_order_limit:
            self.unsupported(f"ORDER BY or LIMIT on {verb}")
        if orders:
            self.prepare_order_exprs(orders, sql)
        if limit is not None:
            sql.write(" LIMIT ")
            self.prepare_value(limit, sql)

    # -- WITH ---------------------------------------------------------------------

    def prepare_with_clause(self, with_clause: "WithClause", sql: "SqlWriter") -> None:
        if not with_clause.cte_expressions:
            raise BuilderMisuseError("WITH needs at least one common table expression", remediation="Call cte()")
        sql.write("WITH ")
        if with_clause.recursive_:
            sql.write("RECURSIVE ")
        for i, cte in enumerate(with_clause.cte_expressions):
            if i:
                sql.write(", ")
            self.prepare_cte(cte, sql)
        if with_clause.search_ is not None or with_clause.cycle_ is not None:
            self.prepare_with_search_cycle(with_clause, sql)
        sql.write(" ")

    def prepare_cte(self, cte: "CommonTableExpression", sql: "SqlWriter") -> None:
        if cte.name is None or cte.query_ is None:
            raise BuilderMisuseError(
                "A common table expression needs a name and a query",
                remediation="Call table_name() and query()",
            )
        self.prepare_iden(cte.name, sql)
        if cte.cols:
            sql.write(" (")
            self.prepare_idens(cte.cols, sql)
            sql.write(")")
        sql.write(" AS ")
        if cte.materialized_ is not None:
            if not self.supports_cte_materialized:
                self.unsupported("MATERIALIZED hints on common table expressions")
            sql.write("MATERIALIZED " if cte.materialized_ else "NOT MATERIALIZED ")
        sql.write("(")
        cte.query_.prepare(self, sql)  # type: ignore[arg-type]
        sql.write(")")

    def prepare_with_search_cycle(self, with_clause: "WithClause", sql: "SqlWriter") -> None:
        self.unsupported("SEARCH and CYCLE clauses")

    def prepare_with_query(self, query: "WithQuery", sql: "SqlWriter") -> None:
        if query.query_ is None:
            raise BuilderMisuseError("WITH needs a statement to run", remediation="Call query()")
        self.prepare_with_clause(query.with_clause, sql)
        query.query_.prepare(self, sql)  # type: ignore[arg-type]
