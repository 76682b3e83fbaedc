from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, Optional

from ..errors import BuilderMisuseError
from ..schema.view import ViewCheckOption

if TYPE_CHECKING:
    from ..schema.view import ViewCreateStatement, ViewDropStatement, ViewRenameStatement
    from .writer import SqlWriter


class ViewBuilder:
    """CREATE VIEW, DROP VIEW and view renames."""

    supports_views = True
    supports_view_or_replace = True
    supports_view_if_not_exists = False
    supports_view_temporary = False
    supports_view_recursive = False
    supports_view_check_option = True
    # CASCADED and LOCAL spelled out; without them only CASCADED is expressible
    view_check_option_levels = True
    supports_view_drop_options = True
    supports_view_drop_many = True
    supports_view_rename = True

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_view_create_statement(self, create: "ViewCreateStatement", sql: "SqlWriter") -> None:
        if not self.supports_views:
            self.unsupported("views")
        if create.view_ is None or create.query_ is None:
            raise BuilderMisuseError("CREATE VIEW needs a name and a query", remediation="Call view() and query()")
        sql.write("CREATE ")
        if create.or_replace_:
            if not self.supports_view_or_replace:
                self.unsupported("CREATE OR REPLACE VIEW", remediation="Drop the view first")
            sql.write("OR REPLACE ")
        if create.temporary_:
            if not self.supports_view_temporary:
                self.unsupported("temporary views")
            sql.write("TEMPORARY ")
        if create.recursive_:
            if not self.supports_view_recursive:
                self.unsupported("recursive views", remediation="Use a recursive WITH clause inside the query")
            if not create.columns_:
                raise BuilderMisuseError("A recursive view needs a column list", remediation="Call columns()")
            sql.write("RECURSIVE ")
        sql.write("VIEW ")
        if create.if_not_exists_:
            if not self.supports_view_if_not_exists:
                self.unsupported("CREATE VIEW IF NOT EXISTS")
            sql.write("IF NOT EXISTS ")
        self.prepare_table_name(create.view_, sql)
        if create.columns_:
            sql.write(" (")
            self.prepare_idens(create.columns_, sql)
            sql.write(")")
        sql.write(" AS ")
        create.query_.prepare(self, sql)  # type: ignore[arg-type]
        if create.check_option_ is not None:
            self.prepare_view_check_option(create.check_option_, sql)

    def prepare_view_check_option(self, option: ViewCheckOption, sql: "SqlWriter") -> None:
        if not self.supports_view_check_option:
            self.unsupported("WITH CHECK OPTION")
        if self.view_check_option_levels:
            sql.write(f" WITH {option.value} CHECK OPTION")
        elif option is ViewCheckOption.CASCADED:
            sql.write(" WITH CHECK OPTION")
        else:
            self.unsupported("WITH LOCAL CHECK OPTION")

    def prepare_view_drop_statement(self, drop: "ViewDropStatement", sql: "SqlWriter") -> None:
        if not self.supports_views:
            self.unsupported("views")
        if not drop.views:
            raise BuilderMisuseError("DROP VIEW needs at least one view", remediation="Call view()")
        if len(drop.views) > 1 and not self.supports_view_drop_many:
            self.unsupported("dropping several views at once", remediation="Issue one DROP VIEW per view")
        sql.write("DROP VIEW ")
        if drop.if_exists_:
            sql.write("IF EXISTS ")
        for i, view in enumerate(drop.views):
            if i:
                sql.write(", ")
            self.prepare_table_name(view, sql)
        if drop.options:
            if not self.supports_view_drop_options:
                self.unsupported("DROP VIEW options")
            for option in drop.options:
                sql.write(" " + option.value)

    def prepare_view_rename_statement(self, rename: "ViewRenameStatement", sql: "SqlWriter") -> None:
        if not self.supports_views or not self.supports_view_rename:
            self.unsupported("renaming a view", remediation="Drop the view and create it under the new name")
        if rename.from_name is None or rename.to_name is None:
            raise BuilderMisuseError("A view rename needs both names", remediation="Call view(from, to)")
        self.prepare_view_rename(rename, sql)

    def prepare_view_rename(self, rename: "ViewRenameStatement", sql: "SqlWriter") -> None:
        sql.write("ALTER VIEW ")
        self.prepare_table_name(rename.from_name, sql)
        sql.write(" RENAME TO ")
        self.prepare_table_name(rename.to_name, sql)
