from unittest.mock import AsyncMock, MagicMock

import pytest

from websql import open_database
from websql.database import Database
from websql.interface.base import RunResult
from websql.registry import DatabaseRegistry


@pytest.fixture(autouse=True)
def reset_registry():
    DatabaseRegistry().reset()


@pytest.fixture
def interface():
    interface = AsyncMock()
    interface.is_open = True
    interface.in_transaction = MagicMock(return_value=True)
    interface.fetch_all.return_value = [{"id": 1, "name": "foo"}]
    interface.run.return_value = RunResult(1, 7)
    return interface


@pytest.fixture
def diagnostics():
    return []


@pytest.fixture
def mock_db(interface, diagnostics):
    return Database("mock", interface, on_unhandled_error=diagnostics.append)


@pytest.fixture
async def db(diagnostics):
    database = open_database(":memory:", on_unhandled_error=diagnostics.append)
    yield database
    await database.close()


@pytest.fixture
def settle():
    """Run one transaction to completion and report how it settled"""

    async def _settle(database, builder, read_only=False):
        outcome = {"complete": 0, "errors": []}

        def on_complete():
            outcome["complete"] += 1

        method = (
            database.read_transaction if read_only else database.transaction
        )
        method(builder, outcome["errors"].append, on_complete)
        await database.drain()
        return outcome

    return _settle


@pytest.fixture
def create_table(db, settle):
    async def _create_table():
        outcome = await settle(
            db,
            lambda tx: tx.execute_sql(
                "CREATE TABLE t (id INTEGER PRIMARY KEY, x INTEGER)"
            ),
        )
        assert outcome["complete"] == 1

    return _create_table
