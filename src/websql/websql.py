from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional, Union

from websql.database import Database, DiagnosticHook
from websql.exception import CallbackError
from websql.interface.base import BaseInterface
from websql.interface.sqlite import MEMORY, SQLiteInterface, sanitize_name
from websql.registry import DatabaseRegistry

logger = logging.getLogger(__name__)


def open_database(
    name: str,
    version: str = "1.0",
    description: str = "",
    size: int = 1,
    callback: Optional[Callable[[Database], None]] = None,
    *,
    interface: Optional[BaseInterface] = None,
    directory: Optional[Union[str, Path]] = None,
    on_unhandled_error: Optional[DiagnosticHook] = None,
) -> Database:
    """Open a database, like the legacy ``window.openDatabase``.

    The handle is returned immediately; the connection itself is opened by
    the first transaction that runs. ``version``, ``description`` and ``size``
    are accepted for signature compatibility only.

    Example:

    ```python
    db = open_database("notes")
    db = open_database(
        "notes", interface=PostgresInterface("postgres://app@localhost/notes")
    )
    ```

    Args:
        name (str): Name of the database. Without an ``interface``, it is
            sanitized into a SQLite file name.
        version (str, optional): Unused. Defaults to `"1.0"`.
        description (str, optional): Unused. Defaults to `""`.
        size (int, optional): Unused. Defaults to `1`.
        callback (Callable, optional): Called with the new handle. If it
            raises, the error is logged and the handle is still returned.
            Defaults to `None`.
        interface (BaseInterface, optional): Engine interface to use instead
            of a SQLite file. Defaults to `None`.
        directory (Union[str, Path], optional): Directory for the SQLite
            file. Defaults to the current working directory.
        on_unhandled_error (Callable, optional): Diagnostic hook receiving
            errors that no callback handled, and errors raised by callbacks.
            Defaults to `None`.

    Returns:
        Database: The database handle
    """
    if interface is None:
        db_path = sanitize_name(name)
        if db_path != MEMORY and directory is not None:
            db_path = str(Path(directory) / db_path)
        interface = SQLiteInterface(db_path)

    database = Database(
        name,
        interface,
        version=version,
        on_unhandled_error=on_unhandled_error,
    )
    DatabaseRegistry.add(database)

    if callback is not None:
        try:
            callback(database)
        except Exception as e:
            logger.warning("open_database callback raised: %r", e)
            database.report(CallbackError("open_database", e))
    return database


openDatabase = open_database


async def close_all() -> None:
    """Close every database opened with ``open_database``"""
    registry = DatabaseRegistry()
    for database in registry:
        await database.close()
