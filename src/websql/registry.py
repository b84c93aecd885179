from __future__ import annotations

from typing import TYPE_CHECKING, Iterator, List

if TYPE_CHECKING:
    from websql.database import Database


class DatabaseRegistry:
    """Keeps track of the handles created by ``open_database``"""

    _singleton = None
    _databases: List[Database]

    def __new__(cls, *args, **kwargs):
        if cls._singleton is None:
            cls.reset()
        return cls._singleton

    @classmethod
    def add(cls, database: Database) -> None:
        instance = cls()
        if database not in instance._databases:
            instance._databases.append(database)

    @classmethod
    def remove(cls, database: Database) -> None:
        instance = cls()
        if database in instance._databases:
            instance._databases.remove(database)

    def __iter__(self) -> Iterator[Database]:
        return iter(list(self._databases))

    def __len__(self) -> int:
        return len(self._databases)

    @classmethod
    def reset(cls):
        cls._singleton = super().__new__(cls)
        cls._singleton._databases = []
