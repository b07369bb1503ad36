"""Tests for placeholder-style classification."""

import pytest

from sqlite3_vec.core.parameters import ParameterStyle, SqlMeta, bare_parameter_name, classify_sql, null_parameters


@pytest.mark.parametrize(
    ("sql", "count"),
    [
        ("SELECT ?", 1),
        ("INSERT INTO t VALUES (?, ?, ?)", 3),
        ("UPDATE t SET a = ? WHERE b = ? AND c = ?", 3),
        ("SELECT ?,?,?,?,?,?,?,?,?,?", 10),
    ],
)
def test_anonymous_placeholders_count_occurrences(sql: str, count: int) -> None:
    meta = classify_sql(sql)
    assert meta.style is ParameterStyle.QMARK
    assert meta.param_count == count
    assert not meta.mixed


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT ?3",
        "SELECT ?1, ?3",
        "SELECT ?3, ?1, ?2, ?3",
        "INSERT INTO t VALUES (?2, ?3, ?1)",
    ],
)
def test_numeric_placeholders_use_highest_number(sql: str) -> None:
    meta = classify_sql(sql)
    assert meta.style is ParameterStyle.NUMERIC
    assert meta.param_count == 3


@pytest.mark.parametrize("sigil", [":", "@", "$"])
def test_named_placeholders(sigil: str) -> None:
    meta = classify_sql(f"SELECT * FROM t WHERE a = {sigil}first AND b = {sigil}second_2 OR c = {sigil}first")
    assert meta.style is ParameterStyle.NAMED
    assert meta.param_count == 0
    assert meta.names == ("first", "second_2")


@pytest.mark.parametrize("sql", ["SELECT :a, ?1", "SELECT ?, @a", "SELECT $a, ?2, ?"])
def test_named_wins_over_positional(sql: str) -> None:
    meta = classify_sql(sql)
    assert meta.style is ParameterStyle.NAMED
    assert meta.mixed


def test_numeric_wins_over_anonymous() -> None:
    meta = classify_sql("SELECT ?, ?2")
    assert meta.style is ParameterStyle.NUMERIC
    assert meta.param_count == 2
    assert meta.styles == frozenset({ParameterStyle.NUMERIC, ParameterStyle.QMARK})


def test_no_placeholders() -> None:
    meta = classify_sql("CREATE TABLE t(a, b)")
    assert meta == SqlMeta(ParameterStyle.NONE)
    assert not meta.has_parameters


@pytest.mark.parametrize(
    "sql",
    [
        "SELECT '?' , 'it''s :not @a $param'",
        'SELECT "col?" FROM "t:x"',
        "SELECT [a?b] FROM `t?`",
        "SELECT 1 -- where a = ?\n",
        "SELECT 1 /* :named ?1 */",
    ],
)
def test_literals_and_comments_are_skipped(sql: str) -> None:
    assert classify_sql(sql).style is ParameterStyle.NONE


def test_placeholder_after_literal_is_found() -> None:
    meta = classify_sql("SELECT 'a?b' WHERE x = ? -- ?\n AND y = ?")
    assert meta.style is ParameterStyle.QMARK
    assert meta.param_count == 2


def test_named_token_requires_identifier_start() -> None:
    assert classify_sql("SELECT :1").style is ParameterStyle.NONE
    assert classify_sql("SELECT :_a1").names == ("_a1",)


def test_sql_meta_is_immutable() -> None:
    meta = classify_sql("SELECT ?")
    with pytest.raises(AttributeError):
        meta.param_count = 5  # type: ignore[misc]


def test_classification_is_cached() -> None:
    sql = "SELECT ?, ? FROM cached_table"
    assert classify_sql(sql) is classify_sql(sql)


@pytest.mark.parametrize(("key", "expected"), [(":a", "a"), ("@a", "a"), ("$a", "a"), ("a", "a"), (1, 1)])
def test_bare_parameter_name(key: "str | int", expected: "str | int") -> None:
    assert bare_parameter_name(key) == expected


def test_null_parameters_shapes() -> None:
    assert null_parameters("SELECT ?, ?") == [None, None]
    assert null_parameters("SELECT ?3") == [None, None, None]
    assert null_parameters("SELECT :a, :b") == {"a": None, "b": None}
    assert null_parameters("SELECT 1") == []
    assert null_parameters("SELECT :a, ?") is None
