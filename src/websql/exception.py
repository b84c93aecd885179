from __future__ import annotations

from enum import IntEnum


class WebSQLError(Exception):
    """Base exception for all errors raised by websql"""

    pass


class ErrorCode(IntEnum):
    """Legacy WebSQL error codes"""

    UNKNOWN = 0
    DATABASE = 1
    VERSION = 2
    TOO_LARGE = 3
    QUOTA = 4
    SYNTAX = 5
    CONSTRAINT = 6
    TIMEOUT = 7


class SQLError(WebSQLError):
    """A failed statement, shaped like the legacy ``SQLError`` object.

    Callers written against the legacy API branch on ``error.code`` and read
    ``error.message``. The numeric constants are also exposed on the class:

    ```python
    def on_error(tx, error):
        if error.code == SQLError.CONSTRAINT_ERR:
            return False
    ```
    """

    UNKNOWN_ERR = ErrorCode.UNKNOWN
    DATABASE_ERR = ErrorCode.DATABASE
    VERSION_ERR = ErrorCode.VERSION
    TOO_LARGE_ERR = ErrorCode.TOO_LARGE
    QUOTA_ERR = ErrorCode.QUOTA
    SYNTAX_ERR = ErrorCode.SYNTAX
    CONSTRAINT_ERR = ErrorCode.CONSTRAINT
    TIMEOUT_ERR = ErrorCode.TIMEOUT

    def __init__(self, code: ErrorCode, message: str) -> None:
        super().__init__(message)
        self.code = ErrorCode(code)
        self.message = message

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.code.name}: {self.message}>"


class ReadOnlyViolation(SQLError):
    """Raised in place of a write statement queued on a read transaction"""

    def __init__(self, sql: str) -> None:
        super().__init__(
            ErrorCode.SYNTAX,
            "Invalid attempt to execute a write statement in "
            f'read_transaction: "{sql}"',
        )
        self.sql = sql


class TransactionError(WebSQLError):
    """Raised when a transaction is used in an invalid state"""

    pass


class CallbackError(WebSQLError):
    """A lifecycle callback raised.

    These are never raised to the caller. They are logged and handed to the
    ``on_unhandled_error`` hook of the database, if one was given.
    """

    def __init__(self, callback: str, error: BaseException) -> None:
        super().__init__(f"{callback} callback raised: {error!r}")
        self.callback = callback
        self.error = error
