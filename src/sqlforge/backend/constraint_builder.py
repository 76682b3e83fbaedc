from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from ..errors import BuilderMisuseError
from ..iden import Iden
from ..schema.constraint import ConstraintKind

if TYPE_CHECKING:
    from ..schema.constraint import ConstraintCreateStatement, ConstraintDropStatement
    from .writer import SqlWriter


class ConstraintBuilder:
    """ALTER TABLE ... ADD / DROP CONSTRAINT."""

    supports_constraint_alter = True
    constraint_kinds = frozenset(ConstraintKind)
    supports_constraint_drop_if_exists = False
    supports_constraint_using_index = False
    unique_constraint_keyword = "UNIQUE"

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_constraint_create_statement(self, create: "ConstraintCreateStatement", sql: "SqlWriter") -> None:
        if not self.supports_constraint_alter:
            self.unsupported("adding a constraint to a table", remediation="Declare it in CREATE TABLE")
        if create.table_ is None or create.kind is None:
            raise BuilderMisuseError(
                "Adding a constraint needs a table and a kind",
                remediation="Call table() and one of primary(), unique() or check()",
            )
        if create.kind not in self.constraint_kinds:
            self.unsupported(f"adding a {create.kind.value} constraint")
        sql.write("ALTER TABLE ")
        self.prepare_table_name(create.table_, sql)
        sql.write(" ADD ")
        if create.name_ is not None:
            sql.write("CONSTRAINT ")
            self.prepare_iden(create.name_, sql)
            sql.write(" ")
        if create.kind is ConstraintKind.CHECK:
            sql.write("CHECK (")
            self.prepare_expr(create.check_, sql)
            sql.write(")")
            return
        self.prepare_key_constraint(create, sql)

    def prepare_key_constraint(self, create: "ConstraintCreateStatement", sql: "SqlWriter") -> None:
        if create.kind is ConstraintKind.PRIMARY_KEY:
            sql.write("PRIMARY KEY")
        else:
            sql.write(self.unique_constraint_keyword)
            if create.nulls_not_distinct_:
                sql.write(" ")
                self.prepare_nulls_not_distinct(sql)
        if create.using_index_ is not None:
            if not self.supports_constraint_using_index:
                self.unsupported("constraints built on an existing index")
            if create.columns:
                raise BuilderMisuseError(
                    "A constraint built on an index takes its columns from the index",
                    remediation="Drop the col() calls or the using_index() call",
                )
            sql.write(" USING INDEX ")
            self.prepare_iden(create.using_index_, sql)
            return
        if not create.columns:
            raise BuilderMisuseError("A key constraint needs at least one column", remediation="Call col()")
        if any(not isinstance(c.target, Iden) for c in create.columns):
            raise BuilderMisuseError("A key constraint takes column names, not expressions")
        sql.write(" ")
        self.prepare_index_columns(create.columns, sql)
        if create.include_columns:
            if not self.supports_index_include:
                self.unsupported("INCLUDE columns on a constraint")
            sql.write(" INCLUDE (")
            self.prepare_idens(create.include_columns, sql)
            sql.write(")")
        self.prepare_key_constraint_suffix(create, sql)

    def prepare_key_constraint_suffix(self, create: "ConstraintCreateStatement", sql: "SqlWriter") -> None:
        """Written after the key's column list."""

    def prepare_constraint_drop_statement(self, drop: "ConstraintDropStatement", sql: "SqlWriter") -> None:
        if not self.supports_constraint_alter:
            self.unsupported("dropping a constraint", remediation="Recreate the table")
        if drop.table_ is None or drop.name_ is None:
            raise BuilderMisuseError(
                "Dropping a constraint needs a table and a name", remediation="Call table() and name()"
            )
        sql.write("ALTER TABLE ")
        self.prepare_table_name(drop.table_, sql)
        sql.write(" DROP CONSTRAINT ")
        if drop.if_exists_:
            if not self.supports_constraint_drop_if_exists:
                self.unsupported("DROP CONSTRAINT IF EXISTS")
            sql.write("IF EXISTS ")
        self.prepare_iden(drop.name_, sql)
