from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from ..errors import BuilderMisuseError

if TYPE_CHECKING:
    from ..schema.trigger import TriggerCreateStatement, TriggerDropStatement
    from .writer import SqlWriter


class TriggerBuilder:
    supports_triggers = True
    supports_trigger_if_not_exists = True

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_trigger_create_statement(self, create: "TriggerCreateStatement", sql: "SqlWriter") -> None:
        if not self.supports_triggers:
            self.unsupported("triggers")
        if create.table_ is None or create.timing is None or create.event is None:
            raise BuilderMisuseError(
                "CREATE TRIGGER needs a timing, an event and a table",
                remediation="Call on() or one of before_insert() ... after_delete()",
            )
        sql.write("CREATE TRIGGER ")
        if create.if_not_exists_:
            if not self.supports_trigger_if_not_exists:
                self.unsupported("CREATE TRIGGER IF NOT EXISTS")
            sql.write("IF NOT EXISTS ")
        self.prepare_iden(create.trigger_name(), sql)
        sql.write(f" {create.timing.value} {create.event.value} ON ")
        self.prepare_table_name(create.table_, sql)
        sql.write(" FOR EACH ROW ")
        self.prepare_trigger_body(create, sql)

    def prepare_trigger_body(self, create: "TriggerCreateStatement", sql: "SqlWriter") -> None:
        if create.function_ is not None:
            self.unsupported("trigger functions", remediation="Use action() to give the trigger a body")
        sql.write("BEGIN ")
        for action in create.actions:
            action.prepare(self, sql)
            sql.write("; ")
        sql.write("END")

    def prepare_trigger_drop_statement(self, drop: "TriggerDropStatement", sql: "SqlWriter") -> None:
        if not self.supports_triggers:
            self.unsupported("triggers")
        if drop.name_ is None:
            raise BuilderMisuseError("DROP TRIGGER needs a name", remediation="Call name()")
        sql.write("DROP TRIGGER ")
        if drop.if_exists_:
            sql.write("IF EXISTS ")
        self.prepare_iden(drop.name_, sql)
        self.prepare_trigger_drop_target(drop, sql)

    def prepare_trigger_drop_target(self, drop: "TriggerDropStatement", sql: "SqlWriter") -> None:
        """Postgres needs ``ON table``; other dialects name the trigger alone."""
