from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Optional
from uuid import uuid4

from websql.classify import to_sql_error
from websql.exception import CallbackError

from .executor import StatementExecutor
from .interfaces import Outcome, TransactionState
from .transaction import Transaction

if TYPE_CHECKING:
    from websql.database import Database

logger = logging.getLogger(__name__)

Builder = Callable[[Transaction], Any]
TransactionErrorCallback = Callable[[BaseException], Any]
CompleteCallback = Callable[[], Any]


class TransactionScheduler:
    """Drives one transaction through its life cycle.

    ``BUILDING``: the builder runs synchronously and fills the queue; no engine
    work happens. ``EXECUTING``: the connection is opened if needed, the
    engine transaction begins, and the statements run in order. The
    transaction then settles as ``COMMITTED`` or ``ROLLED_BACK`` and the
    matching transaction callback fires.

    Errors that reach a transaction without an ``on_error`` callback are
    swallowed, as the legacy API did. They are still logged at debug level
    and passed to the database's ``on_unhandled_error`` hook.
    """

    def __init__(
        self,
        database: Database,
        builder: Builder,
        on_error: Optional[TransactionErrorCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
        read_only: bool = False,
    ) -> None:
        self.transaction_id = f"txn_{uuid4().hex[:8]}"
        self.database = database
        self.read_only = read_only
        self.state = TransactionState.BUILDING
        self.transaction = Transaction(read_only=read_only)
        self.error: Optional[BaseException] = None
        self._builder = builder
        self._on_error = on_error
        self._on_complete = on_complete

    async def run(self) -> TransactionState:
        logger.debug(
            "Building %s transaction %s",
            "read" if self.read_only else "read-write",
            self.transaction_id,
        )
        try:
            self._builder(self.transaction)
        except Exception as e:
            logger.debug(
                "Builder for transaction %s raised: %r", self.transaction_id, e
            )
            self._rolled_back(e)
            return self.state

        self.state = TransactionState.EXECUTING
        interface = self.database.interface
        try:
            await self.database.ensure_open()
        except Exception as e:
            logger.debug(
                "Failed to open %s for transaction %s: %r",
                self.database.name,
                self.transaction_id,
                e,
            )
            self._rolled_back(to_sql_error(e))
            return self.state

        try:
            await interface.begin(read_only=self.read_only)
        except Exception as e:
            logger.debug(
                "Failed to begin transaction %s: %r", self.transaction_id, e
            )
            # begin may have opened the engine transaction before failing
            await self._guaranteed_rollback()
            self._rolled_back(to_sql_error(e))
            return self.state

        executor = StatementExecutor(interface, report=self.database.report)
        outcome = await executor.execute(self.transaction)

        if outcome is Outcome.COMMIT:
            try:
                await interface.commit()
            except Exception as e:
                logger.debug(
                    "Commit failed for %s, rolling back: %r",
                    self.transaction_id,
                    e,
                )
                await self._guaranteed_rollback()
                self._rolled_back(to_sql_error(e))
            else:
                self._committed()
        else:
            await self._guaranteed_rollback()
            self._rolled_back(self.transaction.last_error)
        return self.state

    async def _guaranteed_rollback(self) -> None:
        try:
            await self.database.interface.rollback()
        except Exception as e:
            logger.warning(
                "Rollback failed for transaction %s: %s",
                self.transaction_id,
                e,
            )

    def _committed(self) -> None:
        self.state = TransactionState.COMMITTED
        self.transaction._finish()
        logger.debug("Transaction %s committed", self.transaction_id)
        if self._on_complete is not None:
            self._invoke("on_complete", self._on_complete)

    def _rolled_back(self, error: Optional[BaseException]) -> None:
        self.state = TransactionState.ROLLED_BACK
        self.transaction._finish()
        self.error = error
        logger.debug("Transaction %s rolled back", self.transaction_id)
        if self._on_error is not None:
            self._invoke("on_error", self._on_error, error)
        elif error is not None:
            logger.debug(
                "Unhandled error in transaction %s: %r",
                self.transaction_id,
                error,
            )
            self.database.report(error)

    def _invoke(self, name: str, callback: Callable[..., Any], *args) -> None:
        try:
            callback(*args)
        except Exception as e:
            logger.warning(
                "Transaction %s %s callback raised: %r",
                self.transaction_id,
                name,
                e,
            )
            self.database.report(CallbackError(name, e))
