from __future__ import annotations

from typing import TYPE_CHECKING, Dict, NoReturn, Optional, Tuple

from ..errors import BuilderMisuseError
from ..schema.column import ColumnDef, ColumnType, ColumnTypeKind
from ..schema.table import AlterKind

if TYPE_CHECKING:
    from ..iden import Iden, TableName
    from ..schema.index import IndexCreateStatement
    from ..schema.table import (
        TableAlterOption,
        TableAlterStatement,
        TableCreateStatement,
        TableDropStatement,
        TableRenameStatement,
        TableTruncateStatement,
    )
    from .writer import SqlWriter

_K = ColumnTypeKind

# kind -> (bare spelling, sized spelling). The sized form takes ``{n}`` for a
# length, or ``{p}`` and ``{s}`` for precision and scale.
TypeSpellings = Dict[ColumnTypeKind, Tuple[str, Optional[str]]]

GENERIC_TYPES: TypeSpellings = {
    _K.CHAR: ("char", "char({n})"),
    _K.STRING: ("varchar", "varchar({n})"),
    _K.TEXT: ("text", None),
    _K.TINY_INTEGER: ("tinyint", None),
    _K.SMALL_INTEGER: ("smallint", None),
    _K.INTEGER: ("integer", None),
    _K.BIG_INTEGER: ("bigint", None),
    _K.TINY_UNSIGNED: ("tinyint", None),
    _K.SMALL_UNSIGNED: ("smallint", None),
    _K.UNSIGNED: ("integer", None),
    _K.BIG_UNSIGNED: ("bigint", None),
    _K.FLOAT: ("float", None),
    _K.DOUBLE: ("double", None),
    _K.DECIMAL: ("decimal", "decimal({p}, {s})"),
    _K.DATE_TIME: ("datetime", None),
    _K.TIMESTAMP: ("timestamp", None),
    _K.TIMESTAMP_WITH_TIME_ZONE: ("timestamp with time zone", None),
    _K.TIME: ("time", None),
    _K.DATE: ("date", None),
    _K.INTERVAL: ("interval", None),
    _K.BINARY: ("binary", "binary({n})"),
    _K.VAR_BINARY: ("varbinary", "varbinary({n})"),
    _K.BLOB: ("blob", None),
    _K.BIT: ("bit", "bit({n})"),
    _K.VAR_BIT: ("varbit", "varbit({n})"),
    _K.BOOLEAN: ("boolean", None),
    _K.MONEY: ("money", None),
    _K.JSON: ("json", None),
    _K.JSON_BINARY: ("json", None),
    _K.UUID: ("uuid", None),
}


class TableBuilder:
    """CREATE / ALTER / RENAME / DROP / TRUNCATE TABLE and column definitions."""

    type_spellings: TypeSpellings = GENERIC_TYPES
    supports_drop_table_options = True
    supports_truncate = True
    supports_column_comment = False

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    # -- column types ------------------------------------------------------------

    def column_type_sql(self, t: ColumnType) -> str:
        if t.kind is _K.CUSTOM:
            if t.name is None:
                raise BuilderMisuseError("A custom column type needs a name")
            return t.name.unquoted()
        if t.kind is _K.ENUM:
            return self.enum_type_sql(t)
        if t.kind is _K.ARRAY:
            return self.array_type_sql(t)
        spelling = self.type_spellings.get(t.kind)
        if spelling is None:
            self.unsupported(f"the {t.kind.value} column type")
        bare, sized = spelling
        if sized is not None:
            if "{n}" in sized and t.length is not None:
                return sized.format(n=t.length)
            if "{p}" in sized and t.precision is not None:
                return sized.format(p=t.precision[0], s=t.precision[1])
        return bare

    def enum_type_sql(self, t: ColumnType) -> str:
        # Without native enums the labels are stored as text.
        return self.column_type_sql(ColumnType(_K.STRING))

    def array_type_sql(self, t: ColumnType) -> str:
        self.unsupported("array columns")

    def column_def_type_sql(self, column: ColumnDef) -> str:
        if column.types is None:
            raise BuilderMisuseError("A column definition needs a type")
        return self.column_type_sql(column.types)

    # -- column definitions --------------------------------------------------------

    def auto_increment_spec(self) -> str:
        return " GENERATED BY DEFAULT AS IDENTITY"

    def primary_key_spec(self, column: ColumnDef) -> str:
        return " PRIMARY KEY"

    def prepare_column_def(self, column: ColumnDef, sql: "SqlWriter") -> None:
        self.prepare_iden(column.name, sql)
        if column.types is not None:
            sql.write(" " + self.column_def_type_sql(column))
        self.prepare_column_specs(column, sql)

    def prepare_column_specs(self, column: ColumnDef, sql: "SqlWriter") -> None:
        if column.effective_not_null:
            sql.write(" NOT NULL")
        elif column.nullable:
            sql.write(" NULL")
        if column.default_ is not None:
            sql.write(" DEFAULT ")
            self.prepare_expr(column.default_, sql)
        if column.auto_increment_:
            sql.write(self.auto_increment_spec())
        if column.primary_key_:
            sql.write(self.primary_key_spec(column))
        if column.unique_:
            sql.write(" UNIQUE")
        if column.check_ is not None:
            sql.write(" CHECK (")
            self.prepare_expr(column.check_, sql)
            sql.write(")")
        if column.generated_ is not None:
            expr, stored = column.generated_
            sql.write(" GENERATED ALWAYS AS (")
            self.prepare_expr(expr, sql)
            sql.write(") STORED" if stored else ") VIRTUAL")
        if column.comment_ is not None:
            if not self.supports_column_comment:
                self.unsupported("column comments")
            sql.write(" COMMENT " + self.quote_string(column.comment_))
        if column.extra_ is not None:
            sql.write(" " + column.extra_)

    # -- CREATE TABLE ------------------------------------------------------------

    def prepare_table_create_statement(self, create: "TableCreateStatement", sql: "SqlWriter") -> None:
        if create.table_ is None:
            raise BuilderMisuseError("CREATE TABLE needs a table name", remediation="Call table()")
        sql.write("CREATE ")
        if create.temporary_:
            sql.write("TEMPORARY ")
        sql.write("TABLE ")
        if create.if_not_exists_:
            sql.write("IF NOT EXISTS ")
        self.prepare_table_name(create.table_, sql)
        sql.write(" ( ")
        first = True
        for column in create.columns:
            first = self._sep(first, sql)
            self.prepare_column_def(column, sql)
        for index in create.indexes:
            first = self._sep(first, sql)
            self.prepare_table_index(index, sql)
        for fk in create.foreign_keys:
            first = self._sep(first, sql)
            self.prepare_foreign_key_def(fk, sql)
        for check in create.checks:
            first = self._sep(first, sql)
            sql.write("CHECK (")
            self.prepare_expr(check, sql)
            sql.write(")")
        sql.write(" )")
        self.prepare_table_options(create, sql)
        if create.extra_ is not None:
            sql.write(" " + create.extra_)

    @staticmethod
    def _sep(first: bool, sql: "SqlWriter") -> bool:
        if not first:
            sql.write(", ")
        return False

    def prepare_table_index(self, index: "IndexCreateStatement", sql: "SqlWriter") -> None:
        """An index declared inside CREATE TABLE: a primary key or a unique constraint."""
        if not index.columns:
            raise BuilderMisuseError("An index needs at least one column", remediation="Call col()")
        if index.primary_:
            if index.name_ is not None:
                sql.write("CONSTRAINT ")
                self.prepare_iden(index.name_, sql)
                sql.write(" ")
            sql.write("PRIMARY KEY ")
        elif index.unique_:
            if index.name_ is not None:
                sql.write("CONSTRAINT ")
                self.prepare_iden(index.name_, sql)
                sql.write(" ")
            sql.write("UNIQUE ")
            if index.nulls_not_distinct_:
                self.prepare_nulls_not_distinct(sql)
                sql.write(" ")
        else:
            self.unsupported("a plain index inside CREATE TABLE", remediation="Use Index.create()")
        self.prepare_index_columns(index.columns, sql)

    def prepare_table_options(self, create: "TableCreateStatement", sql: "SqlWriter") -> None:
        if any(o is not None for o in (create.engine_, create.collate_, create.character_set_, create.comment_)):
            self.unsupported("table options")

    # -- ALTER TABLE ---------------------------------------------------------------

    def prepare_table_alter_statement(self, alter: "TableAlterStatement", sql: "SqlWriter") -> None:
        if alter.table_ is None:
            raise BuilderMisuseError("ALTER TABLE needs a table name", remediation="Call table()")
        if not alter.options:
            raise BuilderMisuseError(
                "ALTER TABLE needs at least one option",
                remediation="Call add_column(), modify_column(), rename_column() or drop_column()",
            )
        sql.write("ALTER TABLE ")
        self.prepare_table_name(alter.table_, sql)
        sql.write(" ")
        for i, option in enumerate(alter.options):
            if i:
                sql.write(", ")
            self.prepare_table_alter_option(alter.table_, option, sql)

    def prepare_table_alter_option(self, table: "TableName", option: "TableAlterOption", sql: "SqlWriter") -> None:
        kind = option.kind
        if kind is AlterKind.ADD_COLUMN:
            if option.column is None:
                raise BuilderMisuseError("ADD COLUMN needs a column definition")
            sql.write("ADD COLUMN ")
            if option.if_exists:
                sql.write("IF NOT EXISTS ")
            self.prepare_column_def(option.column, sql)
        elif kind is AlterKind.MODIFY_COLUMN:
            if option.column is None:
                raise BuilderMisuseError("MODIFY COLUMN needs a column definition")
            self.prepare_modify_column(option.column, sql)
        elif kind is AlterKind.RENAME_COLUMN:
            if option.name is None or option.new_name is None:
                raise BuilderMisuseError("RENAME COLUMN needs the old and new names")
            sql.write("RENAME COLUMN ")
            self.prepare_iden(option.name, sql)
            sql.write(" TO ")
            self.prepare_iden(option.new_name, sql)
        elif kind is AlterKind.DROP_COLUMN:
            if option.name is None:
                raise BuilderMisuseError("DROP COLUMN needs a column name")
            sql.write("DROP COLUMN ")
            if option.if_exists:
                sql.write("IF EXISTS ")
            self.prepare_iden(option.name, sql)
        elif kind is AlterKind.ADD_FOREIGN_KEY:
            if option.foreign_key is None:
                raise BuilderMisuseError("ADD FOREIGN KEY needs a foreign key definition")
            sql.write("ADD ")
            self.prepare_foreign_key_def(option.foreign_key, sql)
        elif kind is AlterKind.DROP_FOREIGN_KEY:
            if option.name is None:
                raise BuilderMisuseError("DROP FOREIGN KEY needs a constraint name")
            self.prepare_drop_foreign_key_option(option.name, sql)

    def prepare_modify_column(self, column: ColumnDef, sql: "SqlWriter") -> None:
        """ALTER COLUMN form: one sub-clause per changed property."""
        if column.auto_increment_ or column.generated_ is not None or column.comment_ is not None:
            self.unsupported("changing auto-increment, generated or comment specs with ALTER COLUMN")
        parts = 0

        def begin() -> None:
            nonlocal parts
            if parts:
                sql.write(", ")
            parts += 1
            sql.write("ALTER COLUMN ")
            self.prepare_iden(column.name, sql)

        if column.types is not None:
            begin()
            sql.write(" TYPE " + self.column_def_type_sql(column))
        if column.nullable is not None or column.primary_key_:
            begin()
            sql.write(" SET NOT NULL" if column.effective_not_null else " DROP NOT NULL")
        if column.default_ is not None:
            begin()
            sql.write(" SET DEFAULT ")
            self.prepare_expr(column.default_, sql)
        for flag, clause in ((column.unique_, "ADD UNIQUE ("), (column.primary_key_, "ADD PRIMARY KEY (")):
            if flag:
                if parts:
                    sql.write(", ")
                parts += 1
                sql.write(clause)
                self.prepare_iden(column.name, sql)
                sql.write(")")
        if column.check_ is not None:
            if parts:
                sql.write(", ")
            parts += 1
            sql.write("ADD CHECK (")
            self.prepare_expr(column.check_, sql)
            sql.write(")")
        if not parts:
            raise BuilderMisuseError(f"Nothing to modify on column {column.name.unquoted()!r}")

    def prepare_drop_foreign_key_option(self, name: "Iden", sql: "SqlWriter") -> None:
        sql.write("DROP CONSTRAINT ")
        self.prepare_iden(name, sql)

    # -- RENAME / DROP / TRUNCATE -----------------------------------------------------

    def prepare_table_rename_statement(self, rename: "TableRenameStatement", sql: "SqlWriter") -> None:
        if rename.from_name is None or rename.to_name is None:
            raise BuilderMisuseError("RENAME needs both table names", remediation="Call table(from, to)")
        sql.write("ALTER TABLE ")
        self.prepare_table_name(rename.from_name, sql)
        sql.write(" RENAME TO ")
        self.prepare_table_name(rename.to_name, sql)

    def prepare_table_drop_statement(self, drop: "TableDropStatement", sql: "SqlWriter") -> None:
        if not drop.tables:
            raise BuilderMisuseError("DROP TABLE needs at least one table", remediation="Call table()")
        sql.write("DROP TABLE ")
        if drop.if_exists_:
            sql.write("IF EXISTS ")
        for i, table in enumerate(drop.tables):
            if i:
                sql.write(", ")
            self.prepare_table_name(table, sql)
        if drop.options:
            if not self.supports_drop_table_options:
                self.unsupported("DROP TABLE options")
            for option in drop.options:
                sql.write(" " + option.value)

    def prepare_table_truncate_statement(self, truncate: "TableTruncateStatement", sql: "SqlWriter") -> None:
        if not self.supports_truncate:
            self.unsupported("TRUNCATE TABLE", remediation="Use DELETE FROM without a WHERE clause")
        if truncate.table_ is None:
            raise BuilderMisuseError("TRUNCATE needs a table name", remediation="Call table()")
        sql.write("TRUNCATE TABLE ")
        self.prepare_table_name(truncate.table_, sql)
