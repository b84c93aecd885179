from importlib.metadata import version

from .database import Database
from .exception import (
    CallbackError,
    ErrorCode,
    ReadOnlyViolation,
    SQLError,
    TransactionError,
    WebSQLError,
)
from .interface.mysql import MysqlInterface
from .interface.postgres import PostgresInterface
from .interface.sqlite import SQLiteInterface
from .result import ResultSet, RowList
from .transaction import Transaction
from .websql import close_all, open_database, openDatabase

__version__ = version("websql")

__all__ = (
    "open_database",
    "openDatabase",
    "close_all",
    "CallbackError",
    "Database",
    "ErrorCode",
    "MysqlInterface",
    "PostgresInterface",
    "ReadOnlyViolation",
    "ResultSet",
    "RowList",
    "SQLError",
    "SQLiteInterface",
    "Transaction",
    "TransactionError",
    "WebSQLError",
)
