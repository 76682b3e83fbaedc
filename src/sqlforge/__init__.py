"""
sqlforge: build SQL statements as trees and render them for a dialect.

    >>> from sqlforge import Expr, Query
    >>> q = Query.select().column("id").from_("users").and_where(Expr.col("id").eq(1))
    >>> q.build("postgres")
    ('SELECT "id" FROM "users" WHERE "id" = $1', Values([Int(1)]))
"""

from __future__ import annotations

from . import backend
from .audit import AccessType, QueryAccessAudit, QueryAccessRequest, audit
from .backend import (
    BigQueryDialect,
    CommonDialect,
    DatabendDialect,
    Dialect,
    MsSqlDialect,
    MySqlDialect,
    OracleDialect,
    PostgresDialect,
    RenderResult,
    SqliteDialect,
    emit,
)
from .condition import Cond, Condition, ConditionHolder, all_, any_
from .config import RenderConfig, load_render_config
from .errors import (
    ArityMismatchError,
    BuilderMisuseError,
    CustomPlaceholderError,
    ErrorCode,
    SqlForgeError,
    SqlProblem,
    UnsupportedFeatureError,
    ValueTypeMismatchError,
    problem_to_dict,
)
from .expr import BinOper, CaseStatement, Expr, LikeExpr, SubQueryOper, UnOper
from .func import Func, PgFunc
from .iden import ASTERISK, Alias, Iden, IdenEnum, NullAlias
from .query import (
    CommonTableExpression,
    Cycle,
    ExplainFormat,
    ExplainSerialize,
    ExplainStatement,
    OnConflict,
    Query,
    Returning,
    ReturningClause,
    Search,
    SearchOrder,
    WindowStatement,
    WithClause,
)
from .schema import (
    ColumnDef,
    ColumnType,
    ColumnTypes,
    Constraint,
    Extension,
    ForeignKey,
    ForeignKeyAction,
    Index,
    IndexType,
    PgType,
    Table,
    Trigger,
    View,
    ViewCheckOption,
)
from .types import JoinType, LockBehavior, LockType, NullOrdering, Order, UnionType
from .value import ArrayType, RangeValue, Value, ValueKind, Values

__all__ = [
    "backend",
    "Dialect",
    "CommonDialect",
    "MySqlDialect",
    "PostgresDialect",
    "SqliteDialect",
    "MsSqlDialect",
    "OracleDialect",
    "BigQueryDialect",
    "DatabendDialect",
    "RenderResult",
    "emit",
    "RenderConfig",
    "load_render_config",
    "Cond",
    "Condition",
    "ConditionHolder",
    "all_",
    "any_",
    "ErrorCode",
    "SqlProblem",
    "SqlForgeError",
    "BuilderMisuseError",
    "ArityMismatchError",
    "UnsupportedFeatureError",
    "CustomPlaceholderError",
    "ValueTypeMismatchError",
    "problem_to_dict",
    "Expr",
    "BinOper",
    "UnOper",
    "SubQueryOper",
    "CaseStatement",
    "LikeExpr",
    "Func",
    "PgFunc",
    "Iden",
    "IdenEnum",
    "Alias",
    "NullAlias",
    "ASTERISK",
    "Query",
    "OnConflict",
    "Returning",
    "ReturningClause",
    "WindowStatement",
    "WithClause",
    "CommonTableExpression",
    "Search",
    "SearchOrder",
    "Cycle",
    "ExplainStatement",
    "ExplainFormat",
    "ExplainSerialize",
    "audit",
    "AccessType",
    "QueryAccessAudit",
    "QueryAccessRequest",
    "Table",
    "ColumnDef",
    "ColumnType",
    "ColumnTypes",
    "Index",
    "IndexType",
    "ForeignKey",
    "ForeignKeyAction",
    "PgType",
    "Extension",
    "Trigger",
    "View",
    "ViewCheckOption",
    "Constraint",
    "Order",
    "NullOrdering",
    "JoinType",
    "UnionType",
    "LockType",
    "LockBehavior",
    "Value",
    "ValueKind",
    "ArrayType",
    "RangeValue",
    "Values",
]
