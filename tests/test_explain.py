import pytest

from sqlforge import (
    BuilderMisuseError,
    ExplainFormat,
    ExplainSerialize,
    Expr,
    Query,
    Table,
    UnsupportedFeatureError,
    Value,
)


def _select():
    return Query.select().column("character").from_("character")


def test_explain_postgres_options():
    explain = (
        Query.explain()
        .statement(_select())
        .format(ExplainFormat.JSON)
        .memory()
        .summary()
        .timing(False)
        .wal()
        .serialize(ExplainSerialize.TEXT)
        .buffers()
        .generic_plan()
        .settings(False)
        .costs()
        .verbose(False)
        .analyze()
    )
    assert explain.to_string("postgres") == (
        "EXPLAIN (ANALYZE, VERBOSE 0, COSTS, SETTINGS 0, GENERIC_PLAN, BUFFERS, SERIALIZE TEXT, "
        'WAL, TIMING 0, SUMMARY, MEMORY, FORMAT JSON) SELECT "character" FROM "character"'
    )
    assert Query.explain().statement(_select()).serialize(ExplainSerialize.BINARY).to_string("postgres") == (
        'EXPLAIN (SERIALIZE BINARY) SELECT "character" FROM "character"'
    )
    assert Query.explain().statement(_select()).to_string("postgres") == (
        'EXPLAIN SELECT "character" FROM "character"'
    )


def test_explain_binds_statement_values():
    select = Query.select().column("a").from_("t").and_where(Expr.col("a").eq(1))
    sql, values = Query.explain().statement(select).analyze().build("postgres")
    assert sql == 'EXPLAIN (ANALYZE) SELECT "a" FROM "t" WHERE "a" = $1'
    assert values == [Value.int(1)]


def test_explain_writes():
    insert = Query.insert().into_table("t").columns(["a"]).values([1])
    assert Query.explain().statement(insert).to_string("postgres") == 'EXPLAIN INSERT INTO "t" ("a") VALUES (1)'
    with pytest.raises(BuilderMisuseError, match="Cannot explain a TableCreateStatement"):
        Query.explain().statement(Table.create().table("t"))


def test_explain_mysql_statement_forms():
    assert Query.explain().statement(_select()).format(ExplainFormat.JSON).to_string("mysql") == (
        "EXPLAIN FORMAT = JSON SELECT `character` FROM `character`"
    )
    assert Query.explain().statement(_select()).analyze().format(ExplainFormat.TREE).to_string("mysql") == (
        "EXPLAIN ANALYZE FORMAT = TREE SELECT `character` FROM `character`"
    )
    assert Query.explain().statement(_select()).for_schema("s1").to_string("mysql") == (
        "EXPLAIN FOR SCHEMA `s1` SELECT `character` FROM `character`"
    )
    assert Query.explain().statement(_select()).for_database("db1").to_string("mysql") == (
        "EXPLAIN FOR DATABASE `db1` SELECT `character` FROM `character`"
    )
    into = Query.explain().statement(_select()).format(ExplainFormat.JSON).into_variable("@plan")
    assert into.to_string("mysql") == "EXPLAIN FORMAT = JSON INTO @plan SELECT `character` FROM `character`"


def test_explain_mysql_tables_and_connections():
    assert Query.explain().table("character", "size_w").to_string("mysql") == "EXPLAIN `character` `size_w`"
    assert Query.explain().table("glyph").wildcard("size_%").to_string("mysql") == "EXPLAIN `glyph` 'size_%'"
    assert Query.explain().table("glyph").to_string("mysql") == "EXPLAIN `glyph`"
    assert Query.explain().for_connection(123).to_string("mysql") == "EXPLAIN FOR CONNECTION 123"
    json = Query.explain().format(ExplainFormat.JSON).into_variable("foo").for_connection(123)
    assert json.to_string("mysql") == "EXPLAIN FORMAT = JSON INTO @foo FOR CONNECTION 123"


def test_explain_mysql_misuse():
    with pytest.raises(BuilderMisuseError, match="FORMAT = JSON"):
        Query.explain().statement(_select()).into_variable("v").to_string("mysql")
    with pytest.raises(BuilderMisuseError, match="one of a statement, a table or a connection"):
        Query.explain().statement(_select()).table("t").to_string("mysql")
    with pytest.raises(BuilderMisuseError, match="needs a table"):
        Query.explain().wildcard("a%").for_connection(1).to_string("mysql")
    with pytest.raises(UnsupportedFeatureError, match="FORMAT YAML"):
        Query.explain().statement(_select()).format(ExplainFormat.YAML).to_string("mysql")


def test_explain_sqlite_oracle_databend():
    assert Query.explain().statement(_select()).query_plan().to_string("sqlite") == (
        'EXPLAIN QUERY PLAN SELECT "character" FROM "character"'
    )
    assert Query.explain().statement(_select()).to_string("sqlite") == (
        'EXPLAIN SELECT "character" FROM "character"'
    )
    assert Query.explain().statement(_select()).to_string("oracle") == (
        'EXPLAIN PLAN FOR SELECT "character" FROM "character"'
    )
    assert Query.explain().statement(_select()).analyze().to_string("databend") == (
        "EXPLAIN ANALYZE SELECT `character` FROM `character`"
    )


def test_explain_rejects_unknown_options():
    with pytest.raises(UnsupportedFeatureError, match="EXPLAIN ANALYZE"):
        Query.explain().statement(_select()).analyze().to_string("sqlite")
    with pytest.raises(UnsupportedFeatureError, match="EXPLAIN QUERY PLAN"):
        Query.explain().statement(_select()).query_plan().to_string("postgres")
    with pytest.raises(UnsupportedFeatureError, match="EXPLAIN TABLE"):
        Query.explain().table("t").to_string("postgres")
    for dialect in ("mssql", "bigquery"):
        with pytest.raises(UnsupportedFeatureError, match="does not support EXPLAIN"):
            Query.explain().statement(_select()).to_string(dialect)


def test_explain_needs_a_statement():
    with pytest.raises(BuilderMisuseError, match="EXPLAIN needs a statement"):
        Query.explain().analyze().to_string("postgres")
