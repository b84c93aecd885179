from __future__ import annotations

import logging
import re
from sqlite3 import Cursor
from typing import Any, Dict, List, Sequence, Tuple

from websql.classify import first_keyword
from websql.interface.base import BaseInterface, RunResult

try:
    import aiosqlite

    AIOSQLITE_ENABLED = True
except ModuleNotFoundError:
    AIOSQLITE_ENABLED = False

logger = logging.getLogger(__name__)

MEMORY = ":memory:"
UNSAFE_NAME_CHARACTERS = re.compile(r"[^A-Za-z0-9._-]")
ROW_ID_KEYWORDS = frozenset(("INSERT", "REPLACE"))


def sanitize_name(name: str) -> str:
    """Turn a legacy database name into a safe file name.

    Empty names become ``database``, anything outside ``[A-Za-z0-9._-]`` is
    replaced with ``_``, and ``.db`` is appended when missing. ``:memory:`` is
    passed through untouched.
    """
    if name == MEMORY:
        return name
    if not name or not name.strip():
        name = "database"
    name = UNSAFE_NAME_CHARACTERS.sub("_", name)
    if not name.endswith(".db"):
        name += ".db"
    return name


class SQLiteInterface(BaseInterface):
    """Interface for a single SQLite connection"""

    scheme = "sqlite"
    extra = "sqlite"
    ENABLED = AIOSQLITE_ENABLED

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path
        self._query_only = False
        super().__init__()

    @property
    def db_path(self) -> str:
        return self._db_path

    async def open(self) -> None:
        """Open the connection.

        The connection runs in autocommit mode (``isolation_level=None``) so
        that the explicit ``BEGIN``/``COMMIT`` issued around each transaction
        is the only transaction control.
        """
        self._connection = await aiosqlite.connect(
            self._db_path, isolation_level=None
        )
        self._connection.row_factory = self._dict_factory
        logger.info("Opened SQLite database %s", self._db_path)

    async def close(self) -> None:
        if self._connection is None:
            return
        await self._connection.close()
        self._connection = None
        logger.info("Closed SQLite database %s", self._db_path)

    async def exec(self, statement: str) -> None:
        async with self._connection.execute(statement):
            pass

    async def fetch_all(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        async with self._connection.execute(sql, tuple(params)) as cursor:
            return list(await cursor.fetchall())

    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult:
        async with self._connection.execute(sql, tuple(params)) as cursor:
            # SQLite keeps the last inserted row id across statements, so it
            # only describes this statement when it inserted.
            last_insert_row_id = (
                cursor.lastrowid
                if first_keyword(sql) in ROW_ID_KEYWORDS
                else None
            )
            return RunResult(cursor.rowcount, last_insert_row_id)

    def in_transaction(self) -> bool:
        """Whether SQLite still has a transaction open.

        SQLite ends a transaction on its own for some failures (``OR
        ROLLBACK`` conflicts, a full disk, out of memory), so this asks the
        connection rather than trusting ``begin``.
        """
        return self.is_open and self._connection.in_transaction

    async def begin(self, read_only: bool = False) -> None:
        await super().begin(read_only)
        if read_only:
            await self.exec("PRAGMA query_only = ON")
            self._query_only = True

    async def commit(self) -> None:
        try:
            await super().commit()
        finally:
            await self._reset_query_only()

    async def rollback(self) -> None:
        try:
            await super().rollback()
        finally:
            await self._reset_query_only()

    async def _reset_query_only(self) -> None:
        if self._query_only:
            self._query_only = False
            await self.exec("PRAGMA query_only = OFF")

    @staticmethod
    def _dict_factory(cursor: Cursor, row: Tuple[Any, ...]) -> Dict[str, Any]:
        return {val[0]: row[idx] for idx, val in enumerate(cursor.description)}
