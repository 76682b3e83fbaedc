"""
PostgreSQL-only schema objects: enum types and extensions.

The statements render only on dialects that set ``supports_types`` or
``supports_extensions``; everywhere else they raise
``UnsupportedFeatureError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from ..errors import BuilderMisuseError
from ..schema.pg_type import TypeAlterKind

if TYPE_CHECKING:
    from ..schema.extension import ExtensionCreateStatement, ExtensionDropStatement
    from ..schema.pg_type import TypeAlterStatement, TypeCreateStatement, TypeDropStatement
    from .writer import SqlWriter


class TypeBuilder:
    supports_types = False
    supports_extensions = False

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def _require_types(self, what: str) -> None:
        if not self.supports_types:
            self.unsupported(what, remediation="Use a CHECK constraint or a lookup table")

    def prepare_type_create_statement(self, create: "TypeCreateStatement", sql: "SqlWriter") -> None:
        self._require_types("CREATE TYPE")
        if create.name_ is None:
            raise BuilderMisuseError("CREATE TYPE needs a name", remediation="Call as_enum()")
        sql.write("CREATE TYPE ")
        self.prepare_type_ref(create.name_, sql)
        sql.write(" AS ENUM (")
        for i, value in enumerate(create.values_):
            if i:
                sql.write(", ")
            sql.write(self.quote_string(value.unquoted()))
        sql.write(")")

    def prepare_type_drop_statement(self, drop: "TypeDropStatement", sql: "SqlWriter") -> None:
        self._require_types("DROP TYPE")
        if not drop.names:
            raise BuilderMisuseError("DROP TYPE needs at least one name", remediation="Call name()")
        sql.write("DROP TYPE ")
        if drop.if_exists_:
            sql.write("IF EXISTS ")
        for i, name in enumerate(drop.names):
            if i:
                sql.write(", ")
            self.prepare_type_ref(name, sql)
        if drop.option is not None:
            sql.write(" " + drop.option.value)

    def prepare_type_alter_statement(self, alter: "TypeAlterStatement", sql: "SqlWriter") -> None:
        self._require_types("ALTER TYPE")
        if alter.name_ is None or alter.option is None:
            raise BuilderMisuseError("ALTER TYPE needs a name and one change")
        sql.write("ALTER TYPE ")
        self.prepare_type_ref(alter.name_, sql)
        option = alter.option
        if option.kind is TypeAlterKind.ADD_VALUE:
            if option.value is None:
                raise BuilderMisuseError("ADD VALUE needs a label")
            sql.write(" ADD VALUE ")
            if option.if_not_exists:
                sql.write("IF NOT EXISTS ")
            sql.write(self.quote_string(option.value.unquoted()))
            if option.placement is not None and option.anchor is not None:
                sql.write(f" {option.placement} " + self.quote_string(option.anchor.unquoted()))
        elif option.kind is TypeAlterKind.RENAME_VALUE:
            if option.value is None or option.new_value is None:
                raise BuilderMisuseError("RENAME VALUE needs the old and new labels")
            sql.write(" RENAME VALUE ")
            sql.write(self.quote_string(option.value.unquoted()))
            sql.write(" TO " + self.quote_string(option.new_value.unquoted()))
        elif option.kind is TypeAlterKind.RENAME_TO:
            if option.new_value is None:
                raise BuilderMisuseError("RENAME TO needs a new name")
            sql.write(" RENAME TO ")
            self.prepare_iden(option.new_value, sql)
        elif option.kind is TypeAlterKind.DROP_VALUE:
            if option.value is None:
                raise BuilderMisuseError("DROP VALUE needs a label")
            sql.write(" DROP VALUE " + self.quote_string(option.value.unquoted()))

    def prepare_extension_create_statement(self, create: "ExtensionCreateStatement", sql: "SqlWriter") -> None:
        if not self.supports_extensions:
            self.unsupported("CREATE EXTENSION")
        if not create.name_:
            raise BuilderMisuseError("CREATE EXTENSION needs a name", remediation="Call name()")
        sql.write("CREATE EXTENSION ")
        if create.if_not_exists_:
            sql.write("IF NOT EXISTS ")
        sql.write(create.name_)
        if create.schema_ is not None:
            sql.write(" WITH SCHEMA " + create.schema_)
        if create.version_ is not None:
            sql.write(" VERSION " + create.version_)
        if create.cascade_:
            sql.write(" CASCADE")

    def prepare_extension_drop_statement(self, drop: "ExtensionDropStatement", sql: "SqlWriter") -> None:
        if not self.supports_extensions:
            self.unsupported("DROP EXTENSION")
        if not drop.names:
            raise BuilderMisuseError("DROP EXTENSION needs at least one name", remediation="Call name()")
        if drop.cascade_ and drop.restrict_:
            raise BuilderMisuseError("DROP EXTENSION takes CASCADE or RESTRICT, not both")
        sql.write("DROP EXTENSION ")
        if drop.if_exists_:
            sql.write("IF EXISTS ")
        sql.write(", ".join(drop.names))
        if drop.cascade_:
            sql.write(" CASCADE")
        elif drop.restrict_:
            sql.write(" RESTRICT")
