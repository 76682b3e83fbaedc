import pytest

from sqlforge import Alias, IdenEnum, Query
from sqlforge.iden import into_iden, into_table_name, is_literal_safe


class Font(IdenEnum):
    Table = "font"
    Name = "name"


def _select(column, dialect):
    return Query.select().column(column).from_("t").to_string(dialect)


def test_quotes_are_doubled_per_dialect():
    assert _select('a"b', "postgres") == 'SELECT "a""b" FROM "t"'
    assert _select("a`b", "mysql") == "SELECT `a``b` FROM `t`"
    assert _select("a]b", "mssql") == "SELECT [a]]b] FROM [t]"


def test_safe_spellings_are_left_alone():
    assert is_literal_safe("size_w2")
    assert is_literal_safe("")
    assert not is_literal_safe("2col")
    assert not is_literal_safe("a b")


def test_qualified_names():
    q = Query.select().column(("f", "name")).from_(("public", "font"))
    assert q.to_string("postgres") == 'SELECT "f"."name" FROM "public"."font"'
    with pytest.raises(ValueError, match="one to three parts"):
        into_table_name(("a", "b", "c", "d"))


def test_iden_enum_members_spell_their_values():
    assert str(Font.Name) == "name"
    assert Query.select().column(Font.Name).from_(Font.Table).to_string("sqlite") == 'SELECT "name" FROM "font"'


def test_into_iden():
    assert into_iden("x") == Alias("x")
    assert into_iden(Font.Name) is Font.Name
    with pytest.raises(TypeError, match="identifier"):
        into_iden(3)
