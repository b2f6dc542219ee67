import os

import asyncpg
import pytest
import pytest_asyncio

from todokit.db_context import DatabaseManager
from todokit.todo.models import CREATE_TABLE_SQL


@pytest.fixture(scope="session")
def postgres_dsn():
    """DSN of the test database.

    TODOKIT_TEST_DSN points at an existing server; otherwise a PostgreSQL
    test container is started for the session.
    """
    dsn = os.environ.get("TODOKIT_TEST_DSN")
    if dsn:
        yield dsn
        return

    postgres = pytest.importorskip("testcontainers.postgres")
    try:
        container = postgres.PostgresContainer("postgres:17").start()
    except Exception as e:
        pytest.skip(f"PostgreSQL test container unavailable: {e}")

    try:
        host = container.get_container_host_ip()
        port = container.get_exposed_port(5432)
        yield (
            f"postgresql://{container.username}:{container.password}"
            f"@{host}:{port}/{container.dbname}"
        )
    finally:
        container.stop()


@pytest_asyncio.fixture
async def test_db_pool(postgres_dsn):
    """Create a database pool connected to the test database for each test."""
    # A new pool per test avoids event loop issues
    pool = await asyncpg.create_pool(postgres_dsn, min_size=1, max_size=5)

    async with pool.acquire() as conn:
        await conn.execute(CREATE_TABLE_SQL)

    await DatabaseManager.add_pool("test_db", pool)

    yield pool

    async with pool.acquire() as conn:
        await conn.execute("TRUNCATE TABLE todos;")

    await DatabaseManager.remove_pool("test_db")
    await pool.close()
