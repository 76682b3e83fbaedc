import json
import logging

import pytest

from sqlforge import (
    ColumnDef,
    Dialect,
    Expr,
    Query,
    RenderConfig,
    Table,
    UnsupportedFeatureError,
    Value,
    emit,
    load_render_config,
)
from sqlforge.backend import registry


def _query():
    return Query.select().column("a").from_("t").and_where(Expr.col("a").eq(1))


def _write(tmp_path, text, name="render.yaml"):
    p = tmp_path / name
    p.write_text(text, encoding="utf-8")
    return str(p)


def test_load_yaml_config(tmp_path):
    path = _write(
        tmp_path,
        "default_dialect: MySQL\n"
        "inline_values: true\n"
        "dialect_options:\n"
        "  mysql:\n"
        "    default_string_length: 191\n",
    )
    cfg = load_render_config(path)
    assert cfg.default_dialect == "mysql"
    assert cfg.inline_values is True
    assert cfg.annotate is False
    assert cfg.options_for("MYSQL") == {"default_string_length": 191}
    assert cfg.options_for("postgres") == {}


def test_load_json_config(tmp_path):
    path = _write(tmp_path, json.dumps({"default_dialect": "sqlite", "annotate": True}), "render.json")
    cfg = load_render_config(path)
    assert cfg.default_dialect == "sqlite"
    assert cfg.annotate is True


def test_config_must_be_a_mapping(tmp_path):
    with pytest.raises(ValueError, match="got list"):
        load_render_config(_write(tmp_path, "- a\n- b\n"))


def test_dialect_options_must_be_mappings(tmp_path):
    with pytest.raises(ValueError, match="dialect_options"):
        load_render_config(_write(tmp_path, "dialect_options:\n  mysql: 3\n"))


def test_load_logs_at_info(tmp_path, caplog):
    caplog.set_level(logging.INFO, logger="sqlforge")
    load_render_config(_write(tmp_path, "default_dialect: postgres\n"))
    assert "loaded render config" in caplog.text


def test_emit_defaults_to_postgres_with_markers():
    result = emit(_query())
    assert result.sql == 'SELECT "a" FROM "t" WHERE "a" = $1'
    assert result.values == [Value.int(1)]
    assert result.metadata == {
        "dialect": "postgres",
        "paramstyle": "numeric_dollar",
        "statement": "SelectStatement",
    }


def test_emit_uses_named_dialect_over_default():
    result = emit(_query(), "sqlite", RenderConfig(default_dialect="mysql"))
    assert result.sql == 'SELECT "a" FROM "t" WHERE "a" = ?'
    assert result.metadata["dialect"] == "sqlite"


def test_emit_inline_values():
    result = emit(_query(), config=RenderConfig(inline_values=True))
    assert result.sql == 'SELECT "a" FROM "t" WHERE "a" = 1'
    assert len(result.values) == 0


def test_emit_annotates():
    result = emit(_query(), config=RenderConfig(annotate=True))
    header, sql = result.sql.split("\n")
    assert sql == 'SELECT "a" FROM "t" WHERE "a" = $1'
    assert header == (
        '-- sqlforge:{"dialect":"postgres","param_count":1,'
        '"paramstyle":"numeric_dollar","statement":"SelectStatement"}'
    )


def test_emit_configures_dialect_options():
    create = Table.create().table("t").col(ColumnDef("n").string())
    cfg = RenderConfig(dialect_options={"mysql": {"default_string_length": 191}})
    assert emit(create, "mysql", cfg).sql == "CREATE TABLE `t` ( `n` varchar(191) )"
    # the registered instance keeps its own default
    assert emit(create, "mysql").sql == "CREATE TABLE `t` ( `n` varchar(255) )"


def test_emit_rejects_bad_dialect_options():
    cfg = RenderConfig(dialect_options={"mysql": {"default_string_length": 0}})
    with pytest.raises(ValueError, match="default_string_length"):
        emit(_query(), "mysql", cfg)


def test_emit_logs_renders(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlforge")
    emit(_query())
    assert "rendered SelectStatement with postgres (1 params)" in caplog.text


def test_rejections_are_logged(caplog):
    caplog.set_level(logging.DEBUG, logger="sqlforge")
    with pytest.raises(UnsupportedFeatureError):
        Query.insert().into_table("t").columns(["a"]).values([1]).returning_all().to_string("mysql")
    assert "dialect mysql rejected RETURNING" in caplog.text


def test_registry_lookup_is_case_insensitive():
    assert registry.get("PostgreS") is registry.get("postgres")
    assert set(registry.available()) == {
        "common",
        "mysql",
        "postgres",
        "sqlite",
        "mssql",
        "oracle",
        "bigquery",
        "databend",
    }


def test_registry_unknown_dialect():
    with pytest.raises(KeyError, match="Unknown dialect 'nope'. Available: bigquery, common"):
        registry.get("nope")


def test_available_returns_a_copy():
    snapshot = registry.available()
    snapshot.clear()
    assert registry.available()


def test_register_custom_dialect(monkeypatch):
    monkeypatch.setattr(registry, "_REGISTRY", registry.available())
    monkeypatch.setattr(registry, "_ALIASES", registry.aliases())

    class Shouty(Dialect):
        name = "Shouty"

    registry.register(Shouty())
    assert registry.get("shouty").name == "Shouty"
    assert emit(_query(), "shouty").sql == 'SELECT "a" FROM "t" WHERE "a" = ?'


def test_register_needs_a_name(monkeypatch):
    monkeypatch.setattr(registry, "_REGISTRY", {})
    monkeypatch.setattr(registry, "_ALIASES", {})

    class Nameless(Dialect):
        name = ""

    with pytest.raises(ValueError, match="non-empty .name"):
        registry.register(Nameless())


def test_dialects_resolve_by_alias():
    assert registry.get("PostgreSQL") is registry.get("postgres")
    assert registry.resolve("pg") == "postgres"
    assert registry.resolve("TSQL") == "mssql"
    assert registry.aliases()["sqlite3"] == "sqlite"
    assert "pg" not in registry.available()
    assert Query.select().column("a").from_("t").to_string("sqlserver") == "SELECT [a] FROM [t]"


def test_emit_options_follow_aliases():
    create = Table.create().table("t").col(ColumnDef("n").string())
    cfg = RenderConfig(dialect_options={"mysql": {"default_string_length": 64}})
    assert emit(create, "mariadb", cfg).sql == "CREATE TABLE `t` ( `n` varchar(64) )"


def test_alias_conflicts_are_rejected(monkeypatch):
    monkeypatch.setattr(registry, "_REGISTRY", registry.available())
    monkeypatch.setattr(registry, "_ALIASES", registry.aliases())

    class Impostor(Dialect):
        name = "impostor"
        aliases = ("pg",)

    class ShadowsAlias(Dialect):
        name = "postgresql"

    with pytest.raises(ValueError, match="'pg' of 'impostor' is already taken by 'postgres'"):
        registry.register(Impostor())
    with pytest.raises(ValueError, match="already an alias of 'postgres'"):
        registry.register(ShadowsAlias())


def test_reregistering_replaces_aliases(monkeypatch):
    monkeypatch.setattr(registry, "_REGISTRY", registry.available())
    monkeypatch.setattr(registry, "_ALIASES", registry.aliases())

    class Lite(Dialect):
        name = "sqlite"
        aliases = ("lite",)

    replacement = registry.register(Lite())
    assert registry.get("lite") is replacement
    with pytest.raises(KeyError):
        registry.get("sqlite3")
