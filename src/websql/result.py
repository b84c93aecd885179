from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator, List, Mapping, Optional

from websql.interface.base import RunResult

Row = Mapping[str, Any]


class RowList(Sequence):
    """Read-only, 0-indexed view over the rows returned by a query.

    ``item(index)`` follows the legacy contract and returns ``None`` for any
    index outside the list instead of raising. Plain indexing behaves like any
    other Python sequence.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[Row] = ()) -> None:
        self._rows = tuple(rows)

    def item(self, index: int) -> Optional[Row]:
        if 0 <= index < len(self._rows):
            return self._rows[index]
        return None

    @property
    def length(self) -> int:
        return len(self._rows)

    @property
    def array(self) -> List[Row]:
        return list(self._rows)

    # expo-sqlite exposed the backing list as ``rows._array``
    _array = array

    def __getitem__(self, index):
        return self._rows[index]

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[Row]:
        return iter(self._rows)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, RowList):
            return self._rows == other._rows
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._rows)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({list(self._rows)!r})"


EMPTY_ROWS = RowList()


@dataclass(frozen=True)
class ResultSet:
    rows_affected: int = 0
    insert_id: Optional[int] = None
    rows: RowList = field(default=EMPTY_ROWS)

    @property
    def rowsAffected(self) -> int:
        return self.rows_affected

    @property
    def insertId(self) -> Optional[int]:
        return self.insert_id


def shape_query(rows: Iterable[Row]) -> ResultSet:
    return ResultSet(rows_affected=0, insert_id=None, rows=RowList(rows))


def shape_mutation(outcome: RunResult) -> ResultSet:
    changes = max(outcome.changes or 0, 0)
    insert_id = outcome.last_insert_row_id
    if not (
        changes > 0
        and isinstance(insert_id, int)
        and not isinstance(insert_id, bool)
        and insert_id > 0
    ):
        insert_id = None
    return ResultSet(rows_affected=changes, insert_id=insert_id)
