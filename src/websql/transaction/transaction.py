from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from websql.classify import is_control_statement, is_write_statement
from websql.exception import (
    ErrorCode,
    ReadOnlyViolation,
    SQLError,
    TransactionError,
)
from websql.statement import (
    ResultCallback,
    StatementDescriptor,
    StatementErrorCallback,
)

logger = logging.getLogger(__name__)


class Transaction:
    """The object handed to a transaction builder.

    During the build phase ``execute_sql`` only records intent; statements run
    once the builder has returned. Statements may also be queued from a
    statement callback while the transaction is executing: they are appended
    to the same queue and run inside the same atomic boundary. Once the
    transaction has committed or rolled back, queueing raises
    ``TransactionError``.

    Example:

    ```python
    def build(tx):
        tx.execute_sql("INSERT INTO items (name) VALUES (?)", ["foo"])
        tx.execute_sql(
            "SELECT * FROM items",
            on_result=lambda tx, rs: print(rs.rows.item(0)),
        )

    db.transaction(build)
    ```
    """

    def __init__(self, read_only: bool = False) -> None:
        self._read_only = read_only
        self._statements: List[StatementDescriptor] = []
        self._finished = False
        self.last_error: Optional[SQLError] = None

    @property
    def read_only(self) -> bool:
        return self._read_only

    @property
    def finished(self) -> bool:
        return self._finished

    @property
    def statements(self) -> List[StatementDescriptor]:
        return self._statements

    def execute_sql(
        self,
        sql: str,
        params: Optional[Iterable[Any]] = None,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[StatementErrorCallback] = None,
    ) -> None:
        """Queue a statement on this transaction.

        Args:
            sql (str): The statement, using ``?`` placeholders
            params (Iterable[Any], optional): Values bound to the
                placeholders. Defaults to `None`.
            on_result (Callable, optional): Called with
                ``(transaction, result_set)`` when the statement succeeds.
                Defaults to `None`.
            on_error (Callable, optional): Called with
                ``(transaction, error)`` when the statement fails. Returning
                exactly ``False`` keeps the transaction going; anything else
                rolls it back. Defaults to `None`.

        Raises:
            TransactionError: When the transaction has already finished
        """
        if self._finished:
            raise TransactionError(
                "Transaction already completed - cannot add new statements"
            )
        if not isinstance(sql, str):
            raise TypeError(f"sql: expected str, got {type(sql).__name__}")

        forced_error: Optional[SQLError] = None
        if is_control_statement(sql):
            forced_error = SQLError(
                ErrorCode.SYNTAX,
                f'Transaction control statements are not allowed: "{sql}"',
            )
        elif self._read_only and is_write_statement(sql):
            forced_error = ReadOnlyViolation(sql)

        statement = StatementDescriptor.create(
            sql, params, on_result, on_error, forced_error
        )
        self._statements.append(statement)
        logger.debug("Queued %s", statement)

    executeSql = execute_sql

    def _finish(self) -> None:
        self._finished = True

    def __repr__(self) -> str:
        mode = "read" if self._read_only else "read-write"
        status = "finished" if self._finished else "open"
        return (
            f"<{self.__class__.__name__} {mode} {status} "
            f"statements={len(self._statements)}>"
        )
