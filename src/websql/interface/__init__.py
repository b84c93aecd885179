from .base import BaseInterface, NetworkInterface, RunResult
from .mysql import MysqlInterface
from .postgres import PostgresInterface
from .sqlite import SQLiteInterface, sanitize_name

__all__ = (
    "BaseInterface",
    "NetworkInterface",
    "RunResult",
    "MysqlInterface",
    "PostgresInterface",
    "SQLiteInterface",
    "sanitize_name",
)
