from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from websql.exception import TransactionError
from websql.interface.base import BaseInterface
from websql.registry import DatabaseRegistry
from websql.transaction.scheduler import (
    Builder,
    CompleteCallback,
    TransactionErrorCallback,
    TransactionScheduler,
)

logger = logging.getLogger(__name__)

DiagnosticHook = Callable[[BaseException], None]


class Database:
    """Handle on one database, emulating the legacy WebSQL ``Database``.

    The handle owns its engine interface exclusively and a chain of
    transactions: each transaction starts only once the previous one has
    committed or rolled back, so statements from two transactions never
    interleave on the connection. A transaction that never settles (for
    example because the engine hangs) blocks every transaction behind it.

    Transactions must be enqueued from code running inside an asyncio event
    loop. Their outcomes are only ever reported through callbacks.

    Example:

    ```python
    async def run():
        db = open_database("app")
        db.transaction(
            lambda tx: tx.execute_sql("CREATE TABLE items (name TEXT)"),
            on_error=lambda error: print("failed", error),
            on_complete=lambda: print("done"),
        )
        await db.drain()
    ```
    """

    def __init__(
        self,
        name: str,
        interface: BaseInterface,
        version: str = "1.0",
        on_unhandled_error: Optional[DiagnosticHook] = None,
    ) -> None:
        self.name = name
        self.version = version
        self.interface = interface
        self.on_unhandled_error = on_unhandled_error
        self._tail: Optional[asyncio.Task] = None
        self._closed = False

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.name} {self.interface}>"

    @property
    def closed(self) -> bool:
        return self._closed

    def transaction(
        self,
        builder: Builder,
        on_error: Optional[TransactionErrorCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        """Enqueue a read-write transaction.

        Args:
            builder (Callable): Called with the `Transaction` to queue
                statements on
            on_error (Callable, optional): Called with the error when the
                transaction rolls back. Defaults to `None`.
            on_complete (Callable, optional): Called without arguments when
                the transaction commits. Defaults to `None`.
        """
        self._enqueue(builder, on_error, on_complete, read_only=False)

    def read_transaction(
        self,
        builder: Builder,
        on_error: Optional[TransactionErrorCallback] = None,
        on_complete: Optional[CompleteCallback] = None,
    ) -> None:
        """Enqueue a read-only transaction.

        Write statements queued on it fail with a `ReadOnlyViolation` when
        they are reached, through the same callbacks as any statement error.
        """
        self._enqueue(builder, on_error, on_complete, read_only=True)

    readTransaction = read_transaction

    def _enqueue(
        self,
        builder: Builder,
        on_error: Optional[TransactionErrorCallback],
        on_complete: Optional[CompleteCallback],
        read_only: bool,
    ) -> None:
        if self._closed:
            raise TransactionError(f"Database {self.name} is closed")
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError as e:
            raise TransactionError(
                "Transactions must be enqueued from a running event loop"
            ) from e

        scheduler = TransactionScheduler(
            self, builder, on_error, on_complete, read_only=read_only
        )
        previous = self._tail
        self._tail = loop.create_task(self._run_after(previous, scheduler))
        logger.debug(
            "Enqueued transaction %s on %s", scheduler.transaction_id, self
        )

    async def _run_after(
        self, previous: Optional[asyncio.Task], scheduler: TransactionScheduler
    ) -> None:
        if previous is not None and not previous.done():
            await asyncio.wait((previous,))
        try:
            await scheduler.run()
        except Exception as e:
            logger.exception(
                "Unhandled transaction error in %s", scheduler.transaction_id
            )
            self.report(e)

    async def ensure_open(self) -> None:
        if not self.interface.is_open:
            await self.interface.open()

    async def drain(self) -> None:
        """Wait until every enqueued transaction has settled"""
        while self._tail is not None and not self._tail.done():
            await asyncio.wait((self._tail,))

    async def close(self) -> None:
        """Settle pending transactions and close the engine connection"""
        if self._closed:
            return
        await self.drain()
        self._closed = True
        DatabaseRegistry.remove(self)
        await self.interface.close()

    def report(self, error: BaseException) -> None:
        """Pass an error that was not handled by any callback to the
        diagnostic hook"""
        if self.on_unhandled_error is None:
            return
        try:
            self.on_unhandled_error(error)
        except Exception as e:
            logger.warning("on_unhandled_error hook raised: %r", e)
