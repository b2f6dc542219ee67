import pytest_asyncio

from tests.fakes import FakeConnection, FakePool
from todokit.db_context import DatabaseManager


@pytest_asyncio.fixture
async def fake_pool():
    """A recording pool registered as the default database."""
    pool = FakePool()
    await DatabaseManager.add_pool("default", pool)
    yield pool
    await DatabaseManager.remove_pool("default")


@pytest_asyncio.fixture
async def fake_conn(fake_pool) -> FakeConnection:
    return fake_pool.connection
