from __future__ import annotations

from abc import ABC, abstractmethod
from typing import (
    Any,
    Dict,
    List,
    NamedTuple,
    Optional,
    Sequence,
    Set,
    Type,
)
from urllib.parse import urlparse

from websql.exception import WebSQLError


class RunResult(NamedTuple):
    changes: int
    last_insert_row_id: Optional[int] = None


class BaseInterface(ABC):
    """Capability interface every engine adapter provides.

    The transaction machinery only ever calls ``open``, ``close``, ``exec``,
    ``fetch_all`` and ``run`` (plus the ``begin``/``commit``/``rollback``
    helpers built on ``exec``, and ``in_transaction``). Each adapter owns
    exactly one connection.
    """

    scheme = "dummy"
    extra = ""
    ENABLED: bool = True
    registered_interfaces: Set[Type[BaseInterface]] = set()

    BEGIN_STATEMENT = "BEGIN"
    READ_ONLY_BEGIN_STATEMENT = "BEGIN"
    COMMIT_STATEMENT = "COMMIT"
    ROLLBACK_STATEMENT = "ROLLBACK"

    def __init_subclass__(cls) -> None:
        BaseInterface.registered_interfaces.add(cls)

    def __init__(self) -> None:
        self._connection: Any = None
        self._in_transaction = False
        self._setup_driver()

    def _setup_driver(self) -> None:
        if not self.ENABLED:
            raise WebSQLError(
                f"{self.__class__.__name__} driver not found. Try "
                f"reinstalling websql: pip install websql[{self.extra}]"
            )

    @abstractmethod
    async def open(self) -> None: ...

    @abstractmethod
    async def close(self) -> None: ...

    @abstractmethod
    async def exec(self, statement: str) -> None: ...

    @abstractmethod
    async def fetch_all(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]: ...

    @abstractmethod
    async def run(self, sql: str, params: Sequence[Any] = ()) -> RunResult: ...

    @property
    def is_open(self) -> bool:
        return self._connection is not None

    def in_transaction(self) -> bool:
        """Whether the engine transaction opened by ``begin`` is still open"""
        return self.is_open and self._in_transaction

    async def begin(self, read_only: bool = False) -> None:
        await self.exec(
            self.READ_ONLY_BEGIN_STATEMENT
            if read_only
            else self.BEGIN_STATEMENT
        )
        self._in_transaction = True

    async def commit(self) -> None:
        await self.exec(self.COMMIT_STATEMENT)
        self._in_transaction = False

    async def rollback(self) -> None:
        """Roll back the open transaction, if the engine still has one"""
        if not self.in_transaction():
            return
        try:
            await self.exec(self.ROLLBACK_STATEMENT)
        finally:
            self._in_transaction = False

    def __str__(self) -> str:
        return f"<{self.__class__.__name__} {self.scheme}>"


class NetworkInterface(BaseInterface):
    """Adapter for a database server reached through a DSN"""

    default_port: Optional[int] = None

    def __init__(self, dsn: str) -> None:
        if not dsn:
            raise WebSQLError("dsn: must be a non-empty string")
        self._full_dsn = dsn
        parts = urlparse(dsn)
        self._host = parts.hostname or "localhost"
        self._port = parts.port or self.default_port
        self._user = parts.username
        self._password = parts.password
        self._db = parts.path.replace("/", "") or None
        super().__init__()

    def __str__(self) -> str:
        password = ":..." if self._password else ""
        return (
            f"<{self.__class__.__name__} {self.scheme}://{self._user}"
            f"{password}@{self._host}:{self._port}/{self._db}>"
        )

    @property
    def dsn(self) -> str:
        return self._full_dsn

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> Optional[int]:
        return self._port

    @property
    def user(self) -> Optional[str]:
        return self._user

    @property
    def password(self) -> Optional[str]:
        return self._password

    @property
    def db(self) -> Optional[str]:
        return self._db
