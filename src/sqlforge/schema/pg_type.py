"""PostgreSQL user-defined types (``CREATE TYPE ... AS ENUM``)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from ..errors import BuilderMisuseError
from ..iden import Iden, IntoIden, TypeRef, into_iden, into_type_ref
from ..statement import SchemaStatement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class TypeCreateStatement(SchemaStatement):
    def __init__(self) -> None:
        self.name_: Optional[TypeRef] = None
        self.values_: List[Iden] = []

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_type_create_statement(self, sql)

    def as_enum(self, name: Any) -> TypeCreateStatement:
        self.name_ = into_type_ref(name)
        return self

    def values(self, values: Iterable[IntoIden]) -> TypeCreateStatement:
        self.values_.extend(into_iden(v) for v in values)
        return self


class TypeDropOption(str, Enum):
    RESTRICT = "RESTRICT"
    CASCADE = "CASCADE"


class TypeDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.names: List[TypeRef] = []
        self.if_exists_ = False
        self.option: Optional[TypeDropOption] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_type_drop_statement(self, sql)

    def name(self, name: Any) -> TypeDropStatement:
        self.names.append(into_type_ref(name))
        return self

    def if_exists(self) -> TypeDropStatement:
        self.if_exists_ = True
        return self

    def restrict(self) -> TypeDropStatement:
        self.option = TypeDropOption.RESTRICT
        return self

    def cascade(self) -> TypeDropStatement:
        self.option = TypeDropOption.CASCADE
        return self


class TypeAlterKind(str, Enum):
    ADD_VALUE = "add_value"
    RENAME_VALUE = "rename_value"
    RENAME_TO = "rename_to"
    DROP_VALUE = "drop_value"


@dataclass
class TypeAlterOption:
    kind: TypeAlterKind
    value: Optional[Iden] = None
    new_value: Optional[Iden] = None
    if_not_exists: bool = False
    placement: Optional[str] = None  # BEFORE | AFTER
    anchor: Optional[Iden] = None


class TypeAlterStatement(SchemaStatement):
    def __init__(self) -> None:
        self.name_: Optional[TypeRef] = None
        self.option: Optional[TypeAlterOption] = None

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_type_alter_statement(self, sql)

    def name(self, name: Any) -> TypeAlterStatement:
        self.name_ = into_type_ref(name)
        return self

    def add_value(self, value: IntoIden) -> TypeAlterStatement:
        self.option = TypeAlterOption(TypeAlterKind.ADD_VALUE, value=into_iden(value))
        return self

    def if_not_exists(self) -> TypeAlterStatement:
        self._require(TypeAlterKind.ADD_VALUE, "if_not_exists").if_not_exists = True
        return self

    def before(self, anchor: IntoIden) -> TypeAlterStatement:
        option = self._require(TypeAlterKind.ADD_VALUE, "before")
        option.placement, option.anchor = "BEFORE", into_iden(anchor)
        return self

    def after(self, anchor: IntoIden) -> TypeAlterStatement:
        option = self._require(TypeAlterKind.ADD_VALUE, "after")
        option.placement, option.anchor = "AFTER", into_iden(anchor)
        return self

    def rename_value(self, existing: IntoIden, new_name: IntoIden) -> TypeAlterStatement:
        self.option = TypeAlterOption(
            TypeAlterKind.RENAME_VALUE, value=into_iden(existing), new_value=into_iden(new_name)
        )
        return self

    def rename_to(self, new_name: IntoIden) -> TypeAlterStatement:
        self.option = TypeAlterOption(TypeAlterKind.RENAME_TO, new_value=into_iden(new_name))
        return self

    def drop_value(self, value: IntoIden) -> TypeAlterStatement:
        self.option = TypeAlterOption(TypeAlterKind.DROP_VALUE, value=into_iden(value))
        return self

    def _require(self, kind: TypeAlterKind, method: str) -> TypeAlterOption:
        if self.option is None or self.option.kind is not kind:
            raise BuilderMisuseError(
                f"{method}() only applies after add_value()",
                details={"method": method},
            )
        return self.option


class PgType:
    """Entry points for PostgreSQL type statements."""

    @staticmethod
    def create() -> TypeCreateStatement:
        return TypeCreateStatement()

    @staticmethod
    def drop() -> TypeDropStatement:
        return TypeDropStatement()

    @staticmethod
    def alter() -> TypeAlterStatement:
        return TypeAlterStatement()
