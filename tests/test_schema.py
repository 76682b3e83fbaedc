import pytest

from sqlforge import (
    BuilderMisuseError,
    ColumnDef,
    ColumnTypes,
    Expr,
    Extension,
    ForeignKey,
    ForeignKeyAction,
    Index,
    IndexType,
    PgType,
    Query,
    Table,
    Trigger,
    UnsupportedFeatureError,
)
from sqlforge.schema import TableForeignKey


def _font_table():
    return (
        Table.create()
        .table("font")
        .col(ColumnDef("id").integer().not_null().auto_increment().primary_key())
        .col(ColumnDef("name").string().not_null())
    )


def test_create_table_per_dialect():
    t = _font_table()
    assert t.to_string("postgres") == (
        'CREATE TABLE "font" ( "id" serial NOT NULL PRIMARY KEY, "name" varchar NOT NULL )'
    )
    assert t.to_string("mysql") == (
        "CREATE TABLE `font` ( `id` integer NOT NULL AUTO_INCREMENT PRIMARY KEY, `name` varchar(255) NOT NULL )"
    )
    assert t.to_string("sqlite") == (
        'CREATE TABLE "font" ( "id" integer NOT NULL PRIMARY KEY AUTOINCREMENT, "name" text NOT NULL )'
    )


def test_schema_statements_render_inline_under_build():
    sql, values = Table.create().table("t").col(ColumnDef("a").integer().default(7)).build("postgres")
    assert sql == 'CREATE TABLE "t" ( "a" integer DEFAULT 7 )'
    assert len(values) == 0


def test_primary_key_columns_are_not_null_by_default():
    t = Table.create().table("t").col(ColumnDef("id").integer().primary_key())
    assert t.to_string("postgres") == 'CREATE TABLE "t" ( "id" integer NOT NULL PRIMARY KEY )'
    nullable = Table.create().table("t").col(ColumnDef("id").integer().null().primary_key())
    assert nullable.to_string("postgres") == 'CREATE TABLE "t" ( "id" integer NULL PRIMARY KEY )'


def test_create_table_with_constraints_and_options_mysql():
    t = (
        Table.create()
        .table("t")
        .if_not_exists()
        .col(ColumnDef("id").integer().not_null().primary_key())
        .col(ColumnDef("font_id").integer())
        .index(Index.create().name("uq").col("font_id").unique())
        .foreign_key(TableForeignKey().name("fk").from_col("font_id").to_tbl("font").to_col("id"))
        .check(Expr.col("id").gt(0))
        .engine("InnoDB")
        .character_set("utf8mb4")
        .collate("utf8mb4_unicode_ci")
        .comment("fonts")
    )
    assert t.to_string("mysql") == (
        "CREATE TABLE IF NOT EXISTS `t` ( `id` integer NOT NULL PRIMARY KEY, `font_id` integer, "
        "CONSTRAINT `uq` UNIQUE (`font_id`), "
        "CONSTRAINT `fk` FOREIGN KEY (`font_id`) REFERENCES `font` (`id`), "
        "CHECK (`id` > 0) ) ENGINE=InnoDB DEFAULT CHARSET=utf8mb4 COLLATE=utf8mb4_unicode_ci COMMENT 'fonts'"
    )
    with pytest.raises(UnsupportedFeatureError, match="table options"):
        t.to_string("postgres")


def test_create_table_needs_a_name():
    with pytest.raises(BuilderMisuseError, match="table name"):
        Table.create().col(ColumnDef("a").integer()).to_string("postgres")


def test_temporary_table_with_composite_primary_key():
    t = (
        Table.create()
        .table("t")
        .temporary()
        .col(ColumnDef("a").integer())
        .col(ColumnDef("b").integer())
        .primary_key(Index.create().col("a").col("b"))
    )
    assert t.to_string("postgres") == (
        'CREATE TEMPORARY TABLE "t" ( "a" integer, "b" integer, PRIMARY KEY ("a", "b") )'
    )


def test_column_types():
    def col(c, dialect="postgres"):
        return Table.create().table("t").col(c).to_string(dialect)

    assert col(ColumnDef("a").string_len(20)) == 'CREATE TABLE "t" ( "a" varchar(20) )'
    assert col(ColumnDef("a").double()) == 'CREATE TABLE "t" ( "a" double precision )'
    assert col(ColumnDef("a").decimal_len(10, 2), "mysql") == "CREATE TABLE `t` ( `a` decimal(10, 2) )"
    assert col(ColumnDef("a").big_unsigned(), "mysql") == "CREATE TABLE `t` ( `a` bigint UNSIGNED )"
    assert col(ColumnDef("a").json_binary()) == 'CREATE TABLE "t" ( "a" jsonb )'
    assert col(ColumnDef("a").custom("citext")) == 'CREATE TABLE "t" ( "a" citext )'
    assert col(ColumnDef("a").array(ColumnTypes.string())) == 'CREATE TABLE "t" ( "a" varchar[] )'
    with pytest.raises(UnsupportedFeatureError, match="array columns"):
        col(ColumnDef("a").array(ColumnTypes.integer()), "mysql")


def test_enum_columns():
    c = ColumnDef("mood").enumeration("mood", ["happy", "sad"])
    t = Table.create().table("t").col(c)
    assert t.to_string("postgres") == 'CREATE TABLE "t" ( "mood" "mood" )'
    assert t.to_string("mysql") == "CREATE TABLE `t` ( `mood` ENUM('happy', 'sad') )"
    assert t.to_string("sqlite") == 'CREATE TABLE "t" ( "mood" text )'


def test_generated_column_and_comment():
    c = ColumnDef("b").integer().generated(Expr.col("a").add(1), True)
    assert Table.create().table("t").col(c).to_string("postgres") == (
        'CREATE TABLE "t" ( "b" integer GENERATED ALWAYS AS ("a" + 1) STORED )'
    )
    commented = Table.create().table("t").col(ColumnDef("a").integer().comment("x"))
    assert commented.to_string("mysql") == "CREATE TABLE `t` ( `a` integer COMMENT 'x' )"
    with pytest.raises(UnsupportedFeatureError, match="column comments"):
        commented.to_string("postgres")


def test_alter_table_add_column():
    q = Table.alter().table("t").add_column(ColumnDef("c").integer().not_null().default(0))
    assert q.to_string("postgres") == 'ALTER TABLE "t" ADD COLUMN "c" integer NOT NULL DEFAULT 0'
    guarded = Table.alter().table("t").add_column_if_not_exists(ColumnDef("c").integer())
    assert guarded.to_string("postgres") == 'ALTER TABLE "t" ADD COLUMN IF NOT EXISTS "c" integer'
    with pytest.raises(UnsupportedFeatureError):
        guarded.to_string("sqlite")


def test_alter_table_modify_column():
    q = Table.alter().table("t").modify_column(ColumnDef("c").big_integer().null())
    assert q.to_string("postgres") == (
        'ALTER TABLE "t" ALTER COLUMN "c" TYPE bigint, ALTER COLUMN "c" DROP NOT NULL'
    )
    assert q.to_string("mysql") == "ALTER TABLE `t` MODIFY COLUMN `c` bigint NULL"
    with pytest.raises(UnsupportedFeatureError, match="MODIFY COLUMN"):
        q.to_string("sqlite")


def test_alter_table_rename_and_drop_columns():
    q = Table.alter().table("t").rename_column("a", "b").drop_column_if_exists("c")
    assert q.to_string("postgres") == 'ALTER TABLE "t" RENAME COLUMN "a" TO "b", DROP COLUMN IF EXISTS "c"'
    with pytest.raises(UnsupportedFeatureError, match="more than one change"):
        q.to_string("sqlite")
    assert Table.alter().table("t").drop_column("c").to_string("sqlite") == 'ALTER TABLE "t" DROP COLUMN "c"'


def test_alter_table_needs_options():
    with pytest.raises(BuilderMisuseError, match="at least one option"):
        Table.alter().table("t").to_string("postgres")


def test_alter_table_foreign_keys():
    fk = TableForeignKey().name("fk").from_col("a").to_tbl("p").to_col("id").on_update(ForeignKeyAction.SET_NULL)
    q = Table.alter().table("t").add_foreign_key(fk)
    assert q.to_string("postgres") == (
        'ALTER TABLE "t" ADD CONSTRAINT "fk" FOREIGN KEY ("a") REFERENCES "p" ("id") ON UPDATE SET NULL'
    )
    drop = Table.alter().table("t").drop_foreign_key("fk")
    assert drop.to_string("postgres") == 'ALTER TABLE "t" DROP CONSTRAINT "fk"'
    assert drop.to_string("mysql") == "ALTER TABLE `t` DROP FOREIGN KEY `fk`"


def test_rename_drop_truncate():
    rename = Table.rename().table("a", "b")
    assert rename.to_string("postgres") == 'ALTER TABLE "a" RENAME TO "b"'
    assert rename.to_string("mysql") == "RENAME TABLE `a` TO `b`"
    assert rename.to_string("mssql") == "EXEC sp_rename 'a', 'b'"

    drop = Table.drop().table("a").table("b").if_exists().cascade()
    assert drop.to_string("postgres") == 'DROP TABLE IF EXISTS "a", "b" CASCADE'
    with pytest.raises(UnsupportedFeatureError, match="DROP TABLE options"):
        drop.to_string("sqlite")

    truncate = Table.truncate().table("t")
    assert truncate.to_string("postgres") == 'TRUNCATE TABLE "t"'
    with pytest.raises(UnsupportedFeatureError, match="TRUNCATE"):
        truncate.to_string("sqlite")


def test_create_index_postgres():
    idx = (
        Index.create()
        .name("idx")
        .table("t")
        .col("a")
        .unique()
        .concurrently()
        .include("b")
        .and_where(Expr.col("b").is_not_null())
    )
    assert idx.to_string("postgres") == (
        'CREATE UNIQUE INDEX CONCURRENTLY "idx" ON "t" ("a") INCLUDE ("b") WHERE "b" IS NOT NULL'
    )
    with pytest.raises(UnsupportedFeatureError):
        idx.to_string("mysql")


def test_index_types():
    ft = Index.create().name("ft").table("t").col("body").full_text()
    assert ft.to_string("postgres") == 'CREATE INDEX "ft" ON "t" USING GIN ("body")'
    assert ft.to_string("mysql") == "CREATE FULLTEXT INDEX `ft` ON `t` (`body`)"

    btree = Index.create().name("i").table("t").col("a").index_type(IndexType.BTREE)
    assert btree.to_string("mysql") == "CREATE INDEX `i` ON `t` (`a`) USING BTREE"
    assert btree.to_string("postgres") == 'CREATE INDEX "i" ON "t" USING BTREE ("a")'


def test_index_prefix_and_if_not_exists():
    idx = Index.create().name("i").table("t").col(("name", 10)).if_not_exists()
    assert idx.to_string("postgres") == 'CREATE INDEX IF NOT EXISTS "i" ON "t" ("name")'
    with pytest.raises(UnsupportedFeatureError, match="IF NOT EXISTS"):
        idx.to_string("mysql")
    prefixed = Index.create().name("i").table("t").col(("name", 10))
    assert prefixed.to_string("mysql") == "CREATE INDEX `i` ON `t` (`name` (10))"


def test_index_misuse():
    with pytest.raises(BuilderMisuseError, match="at least one column"):
        Index.create().name("i").table("t").to_string("postgres")
    with pytest.raises(BuilderMisuseError, match="needs a name"):
        Index.create().table("t").col("a").to_string("postgres")


def test_primary_key_index_alters_the_table():
    idx = Index.create().table("t").col("a").primary()
    assert idx.to_string("postgres") == 'ALTER TABLE "t" ADD PRIMARY KEY ("a")'


def test_drop_index():
    assert Index.drop().name("i").if_exists().to_string("postgres") == 'DROP INDEX IF EXISTS "i"'
    assert Index.drop().name("i").table("t").to_string("mysql") == "DROP INDEX `i` ON `t`"
    with pytest.raises(BuilderMisuseError, match="needs a table"):
        Index.drop().name("i").to_string("mysql")


def test_foreign_key_statements():
    fk = (
        ForeignKey.create()
        .name("fk")
        .from_("character", "font_id")
        .to("font", "id")
        .on_delete(ForeignKeyAction.CASCADE)
    )
    assert fk.to_string("postgres") == (
        'ALTER TABLE "character" ADD CONSTRAINT "fk" FOREIGN KEY ("font_id") REFERENCES "font" ("id") '
        "ON DELETE CASCADE"
    )
    with pytest.raises(UnsupportedFeatureError):
        fk.to_string("sqlite")

    drop = ForeignKey.drop().name("fk").table("character")
    assert drop.to_string("mysql") == "ALTER TABLE `character` DROP FOREIGN KEY `fk`"


def test_foreign_key_column_lists_must_match():
    fk = ForeignKey.create().from_("a", "x", "y").to("b", "id")
    with pytest.raises(BuilderMisuseError, match="differ in length"):
        fk.to_string("postgres")


def test_foreign_key_inline_in_create_table():
    fk = ForeignKey.create().from_("t", "p_id").to("p", "id")
    t = Table.create().table("t").col(ColumnDef("p_id").integer()).foreign_key(fk)
    assert t.to_string("sqlite") == (
        'CREATE TABLE "t" ( "p_id" integer, FOREIGN KEY ("p_id") REFERENCES "p" ("id") )'
    )


def test_postgres_enum_types():
    create = PgType.create().as_enum("mood").values(["happy", "sad"])
    assert create.to_string("postgres") == "CREATE TYPE \"mood\" AS ENUM ('happy', 'sad')"
    with pytest.raises(UnsupportedFeatureError, match="CREATE TYPE"):
        create.to_string("mysql")

    add = PgType.alter().name("mood").add_value("ok").if_not_exists().before("sad")
    assert add.to_string("postgres") == "ALTER TYPE \"mood\" ADD VALUE IF NOT EXISTS 'ok' BEFORE 'sad'"
    rename = PgType.alter().name("mood").rename_value("sad", "blue")
    assert rename.to_string("postgres") == "ALTER TYPE \"mood\" RENAME VALUE 'sad' TO 'blue'"
    assert PgType.alter().name("mood").rename_to("feeling").to_string("postgres") == (
        'ALTER TYPE "mood" RENAME TO "feeling"'
    )

    drop = PgType.drop().name("mood").if_exists().cascade()
    assert drop.to_string("postgres") == 'DROP TYPE IF EXISTS "mood" CASCADE'


def test_type_alter_placement_needs_add_value():
    with pytest.raises(BuilderMisuseError, match="only applies after add_value"):
        PgType.alter().name("mood").before("sad")


def test_extensions():
    create = Extension.create().name("ltree").if_not_exists().schema("public").version("1.0").cascade()
    assert create.to_string("postgres") == (
        "CREATE EXTENSION IF NOT EXISTS ltree WITH SCHEMA public VERSION 1.0 CASCADE"
    )
    with pytest.raises(UnsupportedFeatureError, match="CREATE EXTENSION"):
        create.to_string("mysql")

    assert Extension.drop().name("ltree").if_exists().to_string("postgres") == "DROP EXTENSION IF EXISTS ltree"
    with pytest.raises(BuilderMisuseError, match="not both"):
        Extension.drop().name("ltree").cascade().restrict().to_string("postgres")


def test_trigger_with_body_sqlite():
    trg = Trigger.create().after_insert("t").action(
        Query.delete().from_table("log").and_where(Expr.col("id").eq(1))
    )
    assert trg.to_string("sqlite") == (
        'CREATE TRIGGER "t_t_after_insert" AFTER INSERT ON "t" FOR EACH ROW '
        'BEGIN DELETE FROM "log" WHERE "id" = 1; END'
    )
    with pytest.raises(UnsupportedFeatureError, match="trigger bodies"):
        trg.to_string("postgres")


def test_trigger_function_postgres():
    trg = Trigger.create().name("trg").before_update("t").execute_function("touch")
    assert trg.to_string("postgres") == (
        'CREATE TRIGGER "trg" BEFORE UPDATE ON "t" FOR EACH ROW EXECUTE FUNCTION touch()'
    )
    with pytest.raises(UnsupportedFeatureError, match="IF NOT EXISTS"):
        trg.if_not_exists().to_string("postgres")


def test_drop_trigger():
    drop = Trigger.drop().name("trg").table("t").if_exists()
    assert drop.to_string("postgres") == 'DROP TRIGGER IF EXISTS "trg" ON "t"'
    assert Trigger.drop().name("trg").to_string("sqlite") == 'DROP TRIGGER "trg"'
    with pytest.raises(BuilderMisuseError, match="needs a table"):
        Trigger.drop().name("trg").to_string("postgres")


def test_triggers_unsupported_in_mssql():
    with pytest.raises(UnsupportedFeatureError, match="triggers"):
        Trigger.create().after_delete("t").action(Query.delete().from_table("x")).to_string("mssql")
