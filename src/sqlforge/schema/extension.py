from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional

from ..statement import SchemaStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class ExtensionCreateStatement(SchemaStatement):
    def __init__(self) -> None:
        self.name_: Optional[str] = None
        self.schema_: Optional[str] = None
        self.version_: Optional[str] = None
        self.cascade_ = False
        self.if_not_exists_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_extension_create_statement(self, sql)

    def name(self, name: str) -> ExtensionCreateStatement:
        self.name_ = name
        return self

    def schema(self, schema: str) -> ExtensionCreateStatement:
        self.schema_ = schema
        return self

    def version(self, version: str) -> ExtensionCreateStatement:
        self.version_ = version
        return self

    def cascade(self) -> ExtensionCreateStatement:
        self.cascade_ = True
        return self

    def if_not_exists(self) -> ExtensionCreateStatement:
        self.if_not_exists_ = True
        return self


class ExtensionDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.names: List[str] = []
        self.if_exists_ = False
        self.cascade_ = False
        self.restrict_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_extension_drop_statement(self, sql)

    def name(self, name: str) -> ExtensionDropStatement:
        self.names.append(name)
        return self

    def if_exists(self) -> ExtensionDropStatement:
        self.if_exists_ = True
        return self

    def cascade(self) -> ExtensionDropStatement:
        self.cascade_ = True
        return self

    def restrict(self) -> ExtensionDropStatement:
        self.restrict_ = True
        return self


class Extension:
    """Entry points for PostgreSQL extension statements."""

    @staticmethod
    def create() -> ExtensionCreateStatement:
        return ExtensionCreateStatement()

    @staticmethod
    def drop() -> ExtensionDropStatement:
        return ExtensionDropStatement()
