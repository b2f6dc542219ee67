import logging
from collections.abc import Awaitable, Callable
from typing import Any

import asyncpg
from asyncpg.exceptions import QueryCanceledError

from todokit.db_context import DatabaseManager
from todokit.exceptions import OperationCancelledError

logger = logging.getLogger(__name__)


class DatabaseOperations:
    """Composition class for database operations.

    Each call runs on the connection resolved by
    `DatabaseManager.connection()`. A call that exceeds its timeout, or a
    statement the server cancels, raises `OperationCancelledError`; every
    other driver error propagates unchanged.
    """

    def __init__(
        self,
        db_name: str = "default",
        timeout: float | None = None,
        debug: bool = False,
    ):
        self.db_name = db_name
        self.timeout = timeout
        self.debug = debug

    async def _run(
        self,
        method: Callable[[asyncpg.Connection], Callable[..., Awaitable[Any]]],
        query: str,
        params: list[Any],
        conn: asyncpg.Connection | None,
        timeout: float | None,
    ) -> Any:
        effective_timeout = self.timeout if timeout is None else timeout
        DatabaseManager.log_query(query, params)
        if self.debug:
            logger.debug("SQL: %s | params=%r", query, params)

        try:
            async with DatabaseManager.connection(self.db_name, conn) as active:
                return await method(active)(query, *params, timeout=effective_timeout)
        except TimeoutError as e:
            logger.warning("Query timed out after %ss: %s", effective_timeout, query)
            raise OperationCancelledError(
                "Database operation timed out",
                detail=f"timeout={effective_timeout}s",
            ) from e
        except QueryCanceledError as e:
            logger.warning("Query cancelled by server: %s", query)
            raise OperationCancelledError(detail=str(e)) from e

    async def fetch_all(
        self,
        query: str,
        params: list[Any],
        *,
        conn: asyncpg.Connection | None = None,
        timeout: float | None = None,
    ) -> list[Any]:
        """Execute query and fetch all rows"""
        return await self._run(lambda c: c.fetch, query, params, conn, timeout)

    async def fetch_one(
        self,
        query: str,
        params: list[Any],
        *,
        conn: asyncpg.Connection | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute a query and fetch one row, or None"""
        return await self._run(lambda c: c.fetchrow, query, params, conn, timeout)

    async def fetch_value(
        self,
        query: str,
        params: list[Any],
        *,
        conn: asyncpg.Connection | None = None,
        timeout: float | None = None,
    ) -> Any:
        """Execute query and fetch single value"""
        return await self._run(lambda c: c.fetchval, query, params, conn, timeout)

    async def execute_query(
        self,
        query: str,
        params: list[Any],
        *,
        conn: asyncpg.Connection | None = None,
        timeout: float | None = None,
    ) -> str:
        """Execute query and return the status string (e.g. "UPDATE 1")"""
        return await self._run(lambda c: c.execute, query, params, conn, timeout)
