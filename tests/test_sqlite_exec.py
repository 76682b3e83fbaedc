import sqlite3

import pytest

from sqlforge import ColumnDef, Expr, Order, Query, Table, View


def _params(values):
    return [v.payload for v in values]


@pytest.fixture
def conn():
    c = sqlite3.connect(":memory:")
    c.execute(
        Table.create()
        .table("font")
        .col(ColumnDef("id").integer().not_null().auto_increment().primary_key())
        .col(ColumnDef("name").string().not_null())
        .col(ColumnDef("size").integer().default(12))
        .to_string("sqlite")
    )
    yield c
    c.close()


def test_rendered_statements_execute(conn):
    sql, values = (
        Query.insert()
        .into_table("font")
        .columns(["name", "size"])
        .values(["mono", 10])
        .values(["it's serif", 14])
        .build("sqlite")
    )
    conn.execute(sql, _params(values))

    sql, values = (
        Query.select()
        .columns(["name", "size"])
        .from_("font")
        .and_where(Expr.col("size").gt(11))
        .order_by("id", Order.ASC)
        .build("sqlite")
    )
    assert conn.execute(sql, _params(values)).fetchall() == [("it's serif", 14)]


def test_inline_rendering_executes(conn):
    conn.execute(Query.insert().into_table("font").columns(["name"]).values(["a\nb"]).to_string("sqlite"))
    sql = Query.update().table("font").value("size", Expr.col("size").add(1)).to_string("sqlite")
    conn.execute(sql)
    assert conn.execute('SELECT "name", "size" FROM "font"').fetchall() == [("a\nb", 13)]


def test_offset_without_limit_executes(conn):
    for name in ("a", "b", "c"):
        sql, values = Query.insert().into_table("font").columns(["name"]).values([name]).build("sqlite")
        conn.execute(sql, _params(values))
    sql, values = Query.select().column("name").from_("font").order_by("id", Order.ASC).offset(1).build("sqlite")
    assert conn.execute(sql, _params(values)).fetchall() == [("b",), ("c",)]


def test_view_and_explain_execute(conn):
    conn.execute(Query.insert().into_table("font").columns(["name", "size"]).values(["big", 20]).to_string("sqlite"))
    big = Query.select().column("name").from_("font").and_where(Expr.col("size").gt(15))
    conn.execute(View.create().if_not_exists().view("big_font").query(big).to_string("sqlite"))
    assert conn.execute('SELECT "name" FROM "big_font"').fetchall() == [("big",)]

    sql, values = Query.explain().statement(big).query_plan().build("sqlite")
    assert conn.execute(sql, _params(values)).fetchall()
