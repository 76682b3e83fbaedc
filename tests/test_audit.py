import logging

import pytest

from sqlforge import (
    ASTERISK,
    AccessType,
    BuilderMisuseError,
    CommonTableExpression,
    Expr,
    Query,
    Table,
    UnionType,
    WithClause,
    audit,
)


def _names(idens):
    return [i.unquoted() for i in idens]


def _accesses(result):
    return [(r.access_type, r.table.name.unquoted()) for r in result.requests]


def test_select_reads_joins_and_subqueries():
    select = (
        Query.select()
        .column(("font", "name"))
        .from_("font")
        .inner_join("glyph", Expr.col(("glyph", "font_id")).equals(("font", "id")))
        .and_where(Expr.col("id").in_subquery(Query.select().column("font_id").from_("usage")))
    )
    assert _names(audit(select).selected_tables()) == ["font", "glyph", "usage"]


def test_schema_qualified_tables_keep_their_schema():
    result = audit(Query.select().column("id").from_(("archive", "font")))
    (table,) = result.tables(AccessType.SELECT)
    assert table.name.unquoted() == "font"
    assert table.schema.name.unquoted() == "archive"


def test_insert_from_select_with_returning():
    insert = (
        Query.insert()
        .into_table("glyph")
        .columns(["id"])
        .select_from(Query.select().column("id").from_("font"))
        .returning_all()
    )
    assert _accesses(audit(insert)) == [
        (AccessType.SELECT, "glyph"),
        (AccessType.INSERT, "glyph"),
        (AccessType.SELECT, "font"),
    ]
    assert _names(audit(insert).inserted_tables()) == ["glyph"]


def test_update_reads_from_tables_and_where():
    update = (
        Query.update()
        .table("glyph")
        .value("size", Expr.col(("font", "size")))
        .from_("font")
        .and_where(Expr.col("font_id").in_subquery(Query.select().column("font_id").from_("usage")))
    )
    assert _accesses(audit(update)) == [
        (AccessType.UPDATE, "glyph"),
        (AccessType.SELECT, "font"),
        (AccessType.SELECT, "usage"),
    ]
    assert _names(audit(update).updated_tables()) == ["glyph"]


def test_delete_drops_cte_names():
    stale = Query.select().column("id").from_("glyph").and_where(Expr.col("size").eq(0))
    delete = (
        Query.delete()
        .from_table("glyph")
        .and_where(Expr.col("id").in_subquery(Query.select().column("id").from_("stale")))
        .with_cte(WithClause.new().cte(CommonTableExpression.new().table_name("stale").query(stale)))
    )
    assert _accesses(audit(delete)) == [
        (AccessType.DELETE, "glyph"),
        (AccessType.SELECT, "glyph"),
    ]
    assert _names(audit(delete).deleted_tables()) == ["glyph"]


def test_recursive_cte_reads_only_real_tables():
    base = Query.select().columns(["id", "parent"]).from_("tree").and_where(Expr.col("parent").is_null())
    step = (
        Query.select()
        .columns([("tree", "id"), ("tree", "parent")])
        .from_("tree")
        .inner_join("cte", Expr.col(("cte", "id")).equals(("tree", "parent")))
    )
    base.union(UnionType.ALL, step)
    cte = CommonTableExpression.new().table_name("cte").columns(["id", "parent"]).query(base)
    query = WithClause.new().recursive(True).cte(cte).query(Query.select().column(ASTERISK).from_("cte"))
    assert _names(audit(query).selected_tables()) == ["tree", "tree"]


def test_audit_misuse():
    with pytest.raises(BuilderMisuseError, match="without a plain target table"):
        audit(Query.insert().columns(["id"]).values([1]))
    with pytest.raises(BuilderMisuseError, match="Cannot audit a TableCreateStatement"):
        audit(Table.create().table("t"))


def test_statement_audit_method():
    result = Query.select().column("id").from_("font").audit()
    assert _names(result.selected_tables()) == ["font"]
    assert result.inserted_tables() == []


def test_audit_logs_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlforge")
    audit(Query.select().column("id").from_("font"))
    assert "audited SelectStatement: 1 table accesses" in caplog.text
