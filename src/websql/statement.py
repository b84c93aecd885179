from __future__ import annotations

from dataclasses import dataclass
from typing import (
    TYPE_CHECKING,
    Any,
    Callable,
    Iterable,
    Optional,
    Tuple,
)

from websql.classify import StatementKind, classify_statement
from websql.exception import SQLError

if TYPE_CHECKING:
    from websql.result import ResultSet
    from websql.transaction.transaction import Transaction

ResultCallback = Callable[["Transaction", "ResultSet"], Any]
StatementErrorCallback = Callable[["Transaction", SQLError], Any]


@dataclass(frozen=True)
class StatementDescriptor:
    """One queued statement with its parameters and callbacks.

    ``forced_error`` is raised in place of running the statement against the
    engine, e.g. for a write queued on a read transaction.
    """

    sql: str
    params: Tuple[Any, ...] = ()
    on_result: Optional[ResultCallback] = None
    on_error: Optional[StatementErrorCallback] = None
    forced_error: Optional[SQLError] = None

    @classmethod
    def create(
        cls,
        sql: str,
        params: Optional[Iterable[Any]] = None,
        on_result: Optional[ResultCallback] = None,
        on_error: Optional[StatementErrorCallback] = None,
        forced_error: Optional[SQLError] = None,
    ) -> StatementDescriptor:
        return cls(
            sql=sql,
            params=tuple(params) if params is not None else (),
            on_result=on_result,
            on_error=on_error,
            forced_error=forced_error,
        )

    @property
    def kind(self) -> StatementKind:
        return classify_statement(self.sql)

    def __str__(self) -> str:
        return (
            f"<{self.__class__.__name__} kind={self.kind.value} "
            f"sql={self.sql[:20]}...>"
        )
