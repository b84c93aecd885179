from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Sequence

from websql.convert import convert_qmark_params
from websql.interface.base import NetworkInterface, RunResult

try:
    from asyncmy import connect
    from asyncmy.cursors import DictCursor

    MYSQL_ENABLED = True
except ModuleNotFoundError:
    MYSQL_ENABLED = False
    connect = None  # type: ignore
    DictCursor = None  # type: ignore

logger = logging.getLogger(__name__)


class MysqlInterface(NetworkInterface):
    """Interface for a single MySQL connection"""

    scheme = "mysql"
    extra = "mysql"
    ENABLED = MYSQL_ENABLED
    default_port = 3306
    BEGIN_STATEMENT = "START TRANSACTION"
    READ_ONLY_BEGIN_STATEMENT = "START TRANSACTION READ ONLY"

    async def open(self) -> None:
        self._connection = await connect(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password or "",
            database=self.db,
            autocommit=True,
        )
        logger.info("Opened %s", self)

    async def close(self) -> None:
        if self._connection is None:
            return
        await self._connection.ensure_closed()
        self._connection = None
        logger.info("Closed %s", self)

    async def exec(self, statement: str) -> None:
        async with self._connection.cursor() as cursor:
            await cursor.execute(statement)

    async def fetch_all(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        async with self._connection.cursor(cursor=DictCursor) as cursor:
            await cursor.execute(*self._prepare(sql, params))
            return list(await cursor.fetchall() or [])

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        async with self._connection.cursor() as cursor:
            await cursor.execute(*self._prepare(sql, params))
            last_insert_row_id: Optional[int] = cursor.lastrowid or None
            return RunResult(cursor.rowcount, last_insert_row_id)

    @staticmethod
    def _prepare(sql: str, params: Sequence[Any]):
        if params:
            return convert_qmark_params(sql), list(params)
        return sql, None
