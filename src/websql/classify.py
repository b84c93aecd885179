import re
from enum import Enum
from typing import List, Pattern, Tuple

from websql.exception import ErrorCode, SQLError

FIRST_TOKEN = re.compile(r"^\s*(\S+)")
PRAGMA_ASSIGNMENT = re.compile(r"^\s*PRAGMA\s+[^=;]+=", re.IGNORECASE)

QUERY_KEYWORDS = frozenset(("SELECT", "PRAGMA", "EXPLAIN", "WITH"))
CONTROL_KEYWORDS = frozenset(("BEGIN", "COMMIT", "END", "ROLLBACK"))

# Order matters: the first matching pattern wins.
ERROR_PATTERNS: List[Tuple[Pattern[str], ErrorCode]] = [
    (
        re.compile(
            r"syntax error|incomplete input|unrecognized token"
            r"|incorrect number of bindings|one statement at a time"
            r"|wrong number of (arguments|parameters)"
            r"|the query has \d+ placeholder",
            re.IGNORECASE,
        ),
        ErrorCode.SYNTAX,
    ),
    (
        re.compile(
            r"constraint|unique|not null|foreign key|duplicate (key|entry)",
            re.IGNORECASE,
        ),
        ErrorCode.CONSTRAINT,
    ),
    (
        re.compile(
            r"database is locked|database table is locked|busy|timed? ?out"
            r"|lock wait timeout",
            re.IGNORECASE,
        ),
        ErrorCode.TIMEOUT,
    ),
    (
        re.compile(r"disk is full|disk full|quota", re.IGNORECASE),
        ErrorCode.QUOTA,
    ),
    (
        re.compile(r"too big|too large|too many", re.IGNORECASE),
        ErrorCode.TOO_LARGE,
    ),
    (
        re.compile(r"version", re.IGNORECASE),
        ErrorCode.VERSION,
    ),
    (
        re.compile(
            r"no such (table|column|function|index)|does not exist"
            r"|doesn't exist|unknown column|read-?only|malformed"
            r"|unable to open|not a database|cannot open|attempt to write",
            re.IGNORECASE,
        ),
        ErrorCode.DATABASE,
    ),
]


class StatementKind(Enum):
    QUERY = "query"
    MUTATION = "mutation"


def first_keyword(sql: str) -> str:
    """The first whitespace-delimited token, upper-cased, without a
    trailing ``;``. ``SELECT*FROM t`` yields ``SELECT*FROM``."""
    match = FIRST_TOKEN.match(sql)
    return match.group(1).rstrip(";").upper() if match else ""


def classify_statement(sql: str) -> StatementKind:
    """Classify a statement by its first keyword.

    Multi-statement strings are classified as a single unit by the leading
    keyword. Nothing beyond the first keyword is inspected.
    """
    if first_keyword(sql) in QUERY_KEYWORDS:
        return StatementKind.QUERY
    return StatementKind.MUTATION


def is_write_statement(sql: str) -> bool:
    """Whether a statement is disallowed inside a read transaction"""
    if classify_statement(sql) is StatementKind.MUTATION:
        return True
    return bool(PRAGMA_ASSIGNMENT.match(sql))


def is_control_statement(sql: str) -> bool:
    return first_keyword(sql) in CONTROL_KEYWORDS


def classify_error(text: str) -> ErrorCode:
    """Map engine error text to a legacy error code.

    This is best effort. The codes are not guaranteed to match what any
    particular browser or driver reported for the same failure.
    """
    for pattern, code in ERROR_PATTERNS:
        if pattern.search(text):
            return code
    return ErrorCode.UNKNOWN


def to_sql_error(error: BaseException) -> SQLError:
    if isinstance(error, SQLError):
        return error
    message = str(error) or error.__class__.__name__
    sql_error = SQLError(classify_error(message), message)
    sql_error.__cause__ = error
    return sql_error
