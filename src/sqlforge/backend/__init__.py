from __future__ import annotations

from .base import Dialect, RenderResult, SqlDialect
from .bigquery import BigQueryDialect
from .common import CommonDialect
from .databend import DatabendDialect
from .emitter import emit
from .mssql import MsSqlDialect
from .mysql import MySqlDialect
from .oracle import OracleDialect
from .postgres import PostgresDialect
from .registry import aliases, available, get, register, resolve
from .sqlite import SqliteDialect
from .value_encoder import StringEscape
from .writer import SqlWriter

__all__ = [
    "Dialect",
    "SqlDialect",
    "RenderResult",
    "SqlWriter",
    "StringEscape",
    "CommonDialect",
    "MySqlDialect",
    "PostgresDialect",
    "SqliteDialect",
    "MsSqlDialect",
    "OracleDialect",
    "BigQueryDialect",
    "DatabendDialect",
    "register",
    "get",
    "resolve",
    "available",
    "aliases",
    "emit",
]
