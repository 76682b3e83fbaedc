from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional

from ..iden import Iden, IntoIden, TableName, into_iden, into_table_name
from ..statement import SchemaStatement, Statement

if TYPE_CHECKING:
    from ..backend.base import Dialect
    from ..backend.writer import SqlWriter


class TriggerTiming(str, Enum):
    BEFORE = "BEFORE"
    AFTER = "AFTER"


class TriggerEvent(str, Enum):
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class TriggerCreateStatement(SchemaStatement):
    """
    Row-level trigger.

    The body is a list of statements (MySQL, SQLite) or, on PostgreSQL, a
    trigger function run with ``EXECUTE FUNCTION``. An unnamed trigger is
    called ``t_<table>_<timing>_<event>``.
    """

    def __init__(self) -> None:
        self.name_: Optional[Iden] = None
        self.table_: Optional[TableName] = None
        self.timing: Optional[TriggerTiming] = None
        self.event: Optional[TriggerEvent] = None
        self.actions: List[Statement] = []
        self.function_: Optional[str] = None
        self.if_not_exists_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_trigger_create_statement(self, sql)

    def name(self, name: IntoIden) -> TriggerCreateStatement:
        self.name_ = into_iden(name)
        return self

    def on(self, timing: TriggerTiming, event: TriggerEvent, table: Any) -> TriggerCreateStatement:
        self.timing = timing
        self.event = event
        self.table_ = into_table_name(table)
        return self

    def before_insert(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.BEFORE, TriggerEvent.INSERT, table)

    def before_update(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.BEFORE, TriggerEvent.UPDATE, table)

    def before_delete(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.BEFORE, TriggerEvent.DELETE, table)

    def after_insert(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.AFTER, TriggerEvent.INSERT, table)

    def after_update(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.AFTER, TriggerEvent.UPDATE, table)

    def after_delete(self, table: Any) -> TriggerCreateStatement:
        return self.on(TriggerTiming.AFTER, TriggerEvent.DELETE, table)

    def action(self, statement: Statement) -> TriggerCreateStatement:
        self.actions.append(statement)
        return self

    def execute_function(self, function: str) -> TriggerCreateStatement:
        self.function_ = function
        return self

    def if_not_exists(self) -> TriggerCreateStatement:
        self.if_not_exists_ = True
        return self

    def trigger_name(self) -> Iden:
        if self.name_ is not None:
            return self.name_
        table = self.table_.name.unquoted() if self.table_ is not None else ""
        timing = self.timing.value.lower() if self.timing is not None else ""
        event = self.event.value.lower() if self.event is not None else ""
        return into_iden(f"t_{table}_{timing}_{event}")


class TriggerDropStatement(SchemaStatement):
    def __init__(self) -> None:
        self.name_: Optional[Iden] = None
        self.table_: Optional[TableName] = None
        self.if_exists_ = False

    def prepare(self, dialect: "Dialect", sql: "SqlWriter") -> None:
        dialect.prepare_trigger_drop_statement(self, sql)

    def name(self, name: IntoIden) -> TriggerDropStatement:
        self.name_ = into_iden(name)
        return self

    def table(self, table: Any) -> TriggerDropStatement:
        self.table_ = into_table_name(table)
        return self

    def if_exists(self) -> TriggerDropStatement:
        self.if_exists_ = True
        return self


class Trigger:
    """Entry points for trigger statements."""

    @staticmethod
    def create() -> TriggerCreateStatement:
        return TriggerCreateStatement()

    @staticmethod
    def drop() -> TriggerDropStatement:
        return TriggerDropStatement()
