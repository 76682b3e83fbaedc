from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional, Sequence

from ..errors import BuilderMisuseError
from ..iden import Iden
from ..schema.index import IndexType

if TYPE_CHECKING:
    from ..schema.index import IndexColumn, IndexCreateStatement, IndexDropStatement
    from .writer import SqlWriter


class IndexBuilder:
    """CREATE INDEX / DROP INDEX and the column list shared with CREATE TABLE."""

    supports_index_prefix = False
    supports_index_if_not_exists = True
    supports_index_include = False
    supports_partial_index = True
    supports_index_drop_if_exists = True
    index_drop_needs_table = False

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_nulls_not_distinct(self, sql: "SqlWriter") -> None:
        self.unsupported("NULLS NOT DISTINCT")

    def prepare_index_columns(self, columns: Sequence["IndexColumn"], sql: "SqlWriter") -> None:
        sql.write("(")
        for i, column in enumerate(columns):
            if i:
                sql.write(", ")
            if isinstance(column.target, Iden):
                self.prepare_iden(column.target, sql)
            else:
                sql.write("(")
                self.prepare_expr(column.target, sql)
                sql.write(")")
            if column.prefix is not None and self.supports_index_prefix:
                sql.write(f" ({column.prefix})")
            if column.order is not None:
                sql.write(" " + column.order.value)
        sql.write(")")

    def index_kind_prefix(self, index: "IndexCreateStatement") -> str:
        """Words between CREATE and INDEX."""
        return "UNIQUE " if index.unique_ else ""

    def prepare_index_type(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        """Written after the table name, before the column list."""
        if index.index_type_ is not None:
            self.unsupported(f"index type {index_type_name(index.index_type_)}")

    def prepare_index_suffix(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        """Written after the column list and INCLUDE."""

    def prepare_index_create_statement(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        if index.table_ is None:
            raise BuilderMisuseError("CREATE INDEX needs a table", remediation="Call table()")
        if not index.columns:
            raise BuilderMisuseError("An index needs at least one column", remediation="Call col()")
        if index.primary_:
            self.prepare_primary_key_create(index, sql)
            return
        if index.name_ is None:
            raise BuilderMisuseError("CREATE INDEX needs a name", remediation="Call name()")
        sql.write("CREATE " + self.index_kind_prefix(index) + "INDEX ")
        if index.concurrently_:
            self.prepare_index_concurrently(sql)
        if index.if_not_exists_:
            if not self.supports_index_if_not_exists:
                self.unsupported("CREATE INDEX IF NOT EXISTS")
            sql.write("IF NOT EXISTS ")
        self.prepare_iden(index.name_, sql)
        sql.write(" ON ")
        self.prepare_table_name(index.table_, sql)
        sql.write(" ")
        self.prepare_index_type(index, sql)
        self.prepare_index_columns(index.columns, sql)
        if index.include_columns:
            if not self.supports_index_include:
                self.unsupported("INCLUDE columns on an index")
            sql.write(" INCLUDE (")
            self.prepare_idens(index.include_columns, sql)
            sql.write(")")
        if index.nulls_not_distinct_:
            sql.write(" ")
            self.prepare_nulls_not_distinct(sql)
        self.prepare_index_suffix(index, sql)
        if not index.where.is_empty():
            if not self.supports_partial_index:
                self.unsupported("partial indexes")
            self.prepare_condition(index.where, "WHERE", sql)

    def prepare_index_concurrently(self, sql: "SqlWriter") -> None:
        self.unsupported("CREATE INDEX CONCURRENTLY")

    def prepare_primary_key_create(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        if index.table_ is None:
            raise BuilderMisuseError("A primary key index needs a table")
        sql.write("ALTER TABLE ")
        self.prepare_table_name(index.table_, sql)
        sql.write(" ADD ")
        if index.name_ is not None:
            sql.write("CONSTRAINT ")
            self.prepare_iden(index.name_, sql)
            sql.write(" ")
        sql.write("PRIMARY KEY ")
        self.prepare_index_columns(index.columns, sql)

    def prepare_index_drop_statement(self, drop: "IndexDropStatement", sql: "SqlWriter") -> None:
        if drop.name_ is None:
            raise BuilderMisuseError("DROP INDEX needs a name", remediation="Call name()")
        sql.write("DROP INDEX ")
        if drop.concurrently_:
            self.prepare_index_concurrently(sql)
        if drop.if_exists_:
            if not self.supports_index_drop_if_exists:
                self.unsupported("DROP INDEX IF EXISTS")
            sql.write("IF EXISTS ")
        self.prepare_table_name(drop.name_, sql)
        if self.index_drop_needs_table:
            if drop.table_ is None:
                raise BuilderMisuseError(f"DROP INDEX on {self.name} needs a table", remediation="Call table()")
            sql.write(" ON ")
            self.prepare_table_name(drop.table_, sql)


def index_type_name(index_type: object) -> str:
    return index_type.value if isinstance(index_type, IndexType) else str(index_type)
