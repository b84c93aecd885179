from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from websql.classify import StatementKind, to_sql_error
from websql.exception import CallbackError, SQLError
from websql.interface.base import BaseInterface
from websql.result import ResultSet, shape_mutation, shape_query
from websql.statement import StatementDescriptor

from .interfaces import Outcome

if TYPE_CHECKING:
    from .transaction import Transaction

logger = logging.getLogger(__name__)


class StatementExecutor:
    """Drains a transaction's queue against an engine interface.

    Statements run strictly in queue order. A failure is first offered to the
    statement's own error callback: if it returns exactly ``False`` the
    failure is suppressed and the next statement runs. Any other return
    value, an exception from that callback, or the absence of a callback
    stops processing and the transaction is rolled back. So does a
    suppressed failure after which the engine no longer holds the
    transaction open, since later statements would otherwise autocommit.
    """

    def __init__(
        self,
        interface: BaseInterface,
        report: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.interface = interface
        self._report = report

    async def execute(self, transaction: Transaction) -> Outcome:
        # The queue may grow while it is drained, from statement callbacks.
        index = 0
        while index < len(transaction.statements):
            statement = transaction.statements[index]
            index += 1
            error = await self.execute_statement(transaction, statement)
            if error is None:
                continue
            transaction.last_error = error
            if not self._recover(transaction, statement, error):
                logger.debug(
                    "Statement %d failed without recovery: %r", index, error
                )
                return Outcome.ROLLBACK
            if not self.interface.in_transaction():
                logger.debug(
                    "Engine ended the transaction at statement %d: %r",
                    index,
                    error,
                )
                return Outcome.ROLLBACK
            logger.debug("Statement %d failure suppressed: %r", index, error)
        return Outcome.COMMIT

    async def execute_statement(
        self, transaction: Transaction, statement: StatementDescriptor
    ) -> Optional[SQLError]:
        """Run one statement and its success callback.

        Returns:
            Optional[SQLError]: The classified failure, or `None` on success
        """
        try:
            result = await self._run(statement)
        except Exception as e:
            return to_sql_error(e)

        if statement.on_result is not None:
            try:
                statement.on_result(transaction, result)
            except Exception as e:
                logger.debug("Result callback raised: %r", e)
                return to_sql_error(e)
        return None

    async def _run(self, statement: StatementDescriptor) -> ResultSet:
        if statement.forced_error is not None:
            raise statement.forced_error

        kind = statement.kind
        logger.debug("Executing %s %s", kind.value, statement.sql)
        if kind is StatementKind.QUERY:
            rows = await self.interface.fetch_all(
                statement.sql, statement.params
            )
            return shape_query(rows)
        outcome = await self.interface.run(statement.sql, statement.params)
        return shape_mutation(outcome)

    def _recover(
        self,
        transaction: Transaction,
        statement: StatementDescriptor,
        error: SQLError,
    ) -> bool:
        if statement.on_error is None:
            return False
        try:
            verdict = statement.on_error(transaction, error)
        except Exception as e:
            logger.debug("Statement error callback raised: %r", e)
            if self._report is not None:
                self._report(CallbackError("statement on_error", e))
            return False
        return verdict is False
