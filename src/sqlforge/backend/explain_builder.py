from __future__ import annotations

from typing import TYPE_CHECKING, FrozenSet, NoReturn, Optional

from ..errors import BuilderMisuseError
from ..query.explain import ExplainFormat

if TYPE_CHECKING:
    from ..query.explain import ExplainStatement
    from .writer import SqlWriter


class ExplainBuilder:
    """
    EXPLAIN rendering.

    A dialect lists the options it accepts in ``explain_options`` (by SQL
    spelling, as ``ExplainStatement.options_used`` reports them) and the
    output formats in ``explain_formats``. Anything else is rejected before
    a word is written.
    """

    supports_explain = True
    explain_keyword = "EXPLAIN"
    explain_options: FrozenSet[str] = frozenset()
    explain_formats: FrozenSet[ExplainFormat] = frozenset()

    def unsupported(self, feature: str, remediation: Optional[str] = None) -> NoReturn:
        raise NotImplementedError

    def prepare_explain_statement(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        if not self.supports_explain:
            self.unsupported("EXPLAIN")
        for option in explain.options_used():
            if option not in self.explain_options:
                self.unsupported(f"EXPLAIN {option}")
        if explain.format_ is not None and explain.format_ not in self.explain_formats:
            self.unsupported(f"EXPLAIN FORMAT {explain.format_.value}")
        sql.write(self.explain_keyword)
        self.prepare_explain_options(explain, sql)
        self.prepare_explain_target(explain, sql)

    def prepare_explain_options(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        if explain.flags.get("ANALYZE"):
            sql.write(" ANALYZE")

    def prepare_explain_target(self, explain: "ExplainStatement", sql: "SqlWriter") -> None:
        if explain.statement_ is None:
            raise BuilderMisuseError("EXPLAIN needs a statement", remediation="Call statement()")
        sql.write(" ")
        explain.statement_.prepare(self, sql)  # type: ignore[arg-type]
