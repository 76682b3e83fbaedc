from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from ..errors import BuilderMisuseError

if TYPE_CHECKING:
    from ..schema.foreign_key import (
        ForeignKeyCreateStatement,
        ForeignKeyDropStatement,
        TableForeignKey,
    )
    from .writer import SqlWriter


class ForeignKeyBuilder:
    supports_foreign_key_alter = True

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_foreign_key_def(self, fk: "TableForeignKey", sql: "SqlWriter") -> None:
        """``[CONSTRAINT name] FOREIGN KEY (cols) REFERENCES t (cols) [ON DELETE ..] [ON UPDATE ..]``"""
        if fk.to_table is None:
            raise BuilderMisuseError("A foreign key needs a referenced table", remediation="Call to_tbl()")
        if not fk.from_columns or not fk.to_columns:
            raise BuilderMisuseError("A foreign key needs columns on both sides")
        if len(fk.from_columns) != len(fk.to_columns):
            raise BuilderMisuseError(
                "Foreign key column lists differ in length",
                details={"from": len(fk.from_columns), "to": len(fk.to_columns)},
            )
        if fk.name_ is not None:
            sql.write("CONSTRAINT ")
            self.prepare_iden(fk.name_, sql)
            sql.write(" ")
        sql.write("FOREIGN KEY (")
        self.prepare_idens(fk.from_columns, sql)
        sql.write(") REFERENCES ")
        self.prepare_table_name(fk.to_table, sql)
        sql.write(" (")
        self.prepare_idens(fk.to_columns, sql)
        sql.write(")")
        if fk.on_delete_ is not None:
            sql.write(" ON DELETE " + fk.on_delete_.value)
        if fk.on_update_ is not None:
            sql.write(" ON UPDATE " + fk.on_update_.value)

    def prepare_foreign_key_create_statement(self, create: "ForeignKeyCreateStatement", sql: "SqlWriter") -> None:
        if not self.supports_foreign_key_alter:
            self.unsupported("adding a foreign key to an existing table", remediation="Declare it in CREATE TABLE")
        fk = create.foreign_key
        if fk.from_table is None:
            raise BuilderMisuseError("A foreign key needs a source table", remediation="Call from_()")
        sql.write("ALTER TABLE ")
        self.prepare_table_name(fk.from_table, sql)
        sql.write(" ADD ")
        self.prepare_foreign_key_def(fk, sql)

    def prepare_foreign_key_drop_statement(self, drop: "ForeignKeyDropStatement", sql: "SqlWriter") -> None:
        if not self.supports_foreign_key_alter:
            self.unsupported("dropping a foreign key", remediation="Recreate the table")
        if drop.table_ is None or drop.name_ is None:
            raise BuilderMisuseError("Dropping a foreign key needs a table and a name")
        sql.write("ALTER TABLE ")
        self.prepare_table_name(drop.table_, sql)
        sql.write(" ")
        self.prepare_drop_foreign_key_option(drop.name_, sql)
