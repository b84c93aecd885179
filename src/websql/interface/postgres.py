from __future__ import annotations

import logging
from typing import Any, Dict, List, Sequence

from websql.convert import convert_qmark_params
from websql.interface.base import NetworkInterface, RunResult

try:
    from psycopg import AsyncConnection
    from psycopg.rows import dict_row

    POSTGRES_ENABLED = True
except ModuleNotFoundError:
    POSTGRES_ENABLED = False
    AsyncConnection = type("AsyncConnection", (), {})  # type: ignore
    dict_row = None  # type: ignore

logger = logging.getLogger(__name__)

STATEMENT_SAVEPOINT = "websql_statement"


class PostgresInterface(NetworkInterface):
    """Interface for a single Postgres connection.

    Statements use ``?`` placeholders like every other adapter; they are
    rewritten to ``%s`` before reaching psycopg. Postgres has no notion of a
    last inserted row id, so ``run`` never reports one.

    Inside a transaction every statement runs under a savepoint, so that a
    failure whose error callback returns ``False`` leaves the rest of the
    transaction usable, as it is on SQLite.
    """

    scheme = "postgres"
    extra = "postgres"
    ENABLED = POSTGRES_ENABLED
    default_port = 5432
    READ_ONLY_BEGIN_STATEMENT = "BEGIN READ ONLY"

    async def open(self) -> None:
        self._connection = await AsyncConnection.connect(
            self.dsn, autocommit=True, row_factory=dict_row
        )
        logger.info("Opened %s", self)

    async def close(self) -> None:
        if self._connection is None:
            return
        await self._connection.close()
        self._connection = None
        logger.info("Closed %s", self)

    async def exec(self, statement: str) -> None:
        await self._connection.execute(statement)

    async def fetch_all(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        cursor = await self._execute(sql, params)
        if cursor.description is None:
            return []
        return list(await cursor.fetchall())

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        cursor = await self._execute(sql, params)
        return RunResult(cursor.rowcount)

    async def _execute(self, sql: str, params: Sequence[Any]):
        if not self.in_transaction():
            return await self._send(sql, params)

        # A failed statement aborts the whole Postgres transaction unless the
        # work since a savepoint taken just before it is rolled back.
        await self._connection.execute(f"SAVEPOINT {STATEMENT_SAVEPOINT}")
        try:
            cursor = await self._send(sql, params)
        except Exception:
            logger.debug("Rolling back to savepoint after: %s", sql)
            await self._connection.execute(
                f"ROLLBACK TO SAVEPOINT {STATEMENT_SAVEPOINT}"
            )
            await self._connection.execute(
                f"RELEASE SAVEPOINT {STATEMENT_SAVEPOINT}"
            )
            raise
        await self._connection.execute(
            f"RELEASE SAVEPOINT {STATEMENT_SAVEPOINT}"
        )
        return cursor

    async def _send(self, sql: str, params: Sequence[Any]):
        if params:
            return await self._connection.execute(
                convert_qmark_params(sql), list(params)
            )
        return await self._connection.execute(sql)
