import sqlite3

import pytest

from websql.classify import (
    StatementKind,
    classify_error,
    classify_statement,
    is_control_statement,
    is_write_statement,
    to_sql_error,
)
from websql.exception import ErrorCode, ReadOnlyViolation, SQLError


@pytest.mark.parametrize(
    "sql",
    (
        "SELECT * FROM t",
        "  select 1",
        "PRAGMA user_version",
        "EXPLAIN QUERY PLAN SELECT 1",
        "WITH c AS (SELECT 1) SELECT * FROM c",
        "\n\tSelect\n1",
        "SELECT;",
    ),
)
def test_queries(sql):
    assert classify_statement(sql) is StatementKind.QUERY


@pytest.mark.parametrize(
    "sql",
    (
        "INSERT INTO t (x) VALUES (1)",
        "update t set x = 1",
        "DELETE FROM t",
        "CREATE TABLE t (id INTEGER)",
        "DROP TABLE t",
        "",
        "SELECTED",
        "SELECT*FROM t",
        "SELECT(1)",
    ),
)
def test_mutations(sql):
    assert classify_statement(sql) is StatementKind.MUTATION


def test_multi_statement_classified_by_leading_keyword():
    sql = "SELECT 1; DELETE FROM t"
    assert classify_statement(sql) is StatementKind.QUERY
    sql = "CREATE TABLE t (id INTEGER); SELECT 1"
    assert classify_statement(sql) is StatementKind.MUTATION


@pytest.mark.parametrize(
    "sql,expected",
    (
        ("SELECT 1", False),
        ("PRAGMA user_version", False),
        ("PRAGMA table_info(t)", False),
        ("PRAGMA user_version = 123", True),
        ("pragma journal_mode=WAL", True),
        ("REPLACE INTO t VALUES (1)", True),
        ("ALTER TABLE t ADD COLUMN y", True),
    ),
)
def test_write_statements(sql, expected):
    assert is_write_statement(sql) is expected


def test_control_statements():
    assert is_control_statement("BEGIN TRANSACTION")
    assert is_control_statement("commit;")
    assert is_control_statement("END")
    assert is_control_statement("ROLLBACK")
    assert not is_control_statement("SELECT 1")


@pytest.mark.parametrize(
    "text,code",
    (
        ('near "INSRT": syntax error', ErrorCode.SYNTAX),
        (
            "Incorrect number of bindings supplied. The current statement "
            "uses 1, and there are 0 supplied.",
            ErrorCode.SYNTAX,
        ),
        ("You can only execute one statement at a time.", ErrorCode.SYNTAX),
        ("UNIQUE constraint failed: t.id", ErrorCode.CONSTRAINT),
        ("NOT NULL constraint failed: t.x", ErrorCode.CONSTRAINT),
        ("database is locked", ErrorCode.TIMEOUT),
        ("database or disk is full", ErrorCode.QUOTA),
        ("string or blob too big", ErrorCode.TOO_LARGE),
        ("no such table: missing", ErrorCode.DATABASE),
        ('relation "missing" does not exist', ErrorCode.DATABASE),
        ("attempt to write a readonly database", ErrorCode.DATABASE),
        ("something odd happened", ErrorCode.UNKNOWN),
        ("", ErrorCode.UNKNOWN),
    ),
)
def test_classify_error(text, code):
    assert classify_error(text) is code


def test_to_sql_error_wraps_engine_errors():
    original = sqlite3.OperationalError("no such table: missing")
    error = to_sql_error(original)

    assert isinstance(error, SQLError)
    assert error.code is ErrorCode.DATABASE
    assert error.code == SQLError.DATABASE_ERR == 1
    assert error.message == "no such table: missing"
    assert error.__cause__ is original


def test_to_sql_error_passes_sql_errors_through():
    error = ReadOnlyViolation("DROP TABLE t")
    assert to_sql_error(error) is error
    assert error.code is ErrorCode.SYNTAX
    assert "DROP TABLE t" in error.message


def test_to_sql_error_without_message():
    error = to_sql_error(ValueError())
    assert error.code is ErrorCode.UNKNOWN
    assert error.message == "ValueError"
