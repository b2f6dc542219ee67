import logging
import traceback
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from datetime import UTC, datetime
from functools import wraps
from typing import Any

import asyncpg

from todokit.exceptions import PoolNotFoundError

logger = logging.getLogger(__name__)

# Connection of the transaction open on the current task, if any
_current_connection: ContextVar[asyncpg.Connection | None] = ContextVar(
    "current_connection", default=None
)
_db_pools: dict[str, asyncpg.Pool] = {}


@dataclass
class QueryLog:
    """Represents a logged query"""

    query: str
    params: list[Any]
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    stack_trace: str | None = None


class QueryTracker:
    """Tracks queries executed during a context"""

    def __init__(self):
        self.queries: list[QueryLog] = []
        self._enabled: bool = False

    def enable(self):
        self._enabled = True

    def disable(self):
        self._enabled = False

    def is_enabled(self) -> bool:
        return self._enabled

    def log_query(self, query: str, params: list[Any], stack_trace: str | None = None):
        """Log a query with its parameters and optional stack trace"""
        if self._enabled:
            self.queries.append(
                QueryLog(query=query, params=list(params), stack_trace=stack_trace)
            )

    def get_queries(self) -> list[QueryLog]:
        """Get all logged queries"""
        return self.queries.copy()

    def clear(self):
        self.queries.clear()

    def count(self) -> int:
        return len(self.queries)

    def to_dict(self) -> list[dict[str, Any]]:
        """Convert logged queries to a list of dictionaries"""
        return [
            {
                "query": log.query,
                "params": log.params,
                "timestamp": log.timestamp.isoformat(),
                "stack_trace": log.stack_trace,
            }
            for log in self.queries
        ]


_query_tracker: ContextVar[QueryTracker | None] = ContextVar(
    "query_tracker", default=None
)


class DatabaseManager:
    """Registry of named pools plus the task-scoped transaction connection"""

    @classmethod
    async def add_pool(cls, name: str, pool: asyncpg.Pool):
        """Add a database pool with a name"""
        _db_pools[name] = pool
        logger.info("Registered database pool %r", name)

    @classmethod
    async def remove_pool(cls, name: str) -> asyncpg.Pool | None:
        """Unregister a pool without closing it"""
        return _db_pools.pop(name, None)

    @classmethod
    async def get_pool(cls, name: str = "default") -> asyncpg.Pool:
        """Get a database pool by name"""
        if name not in _db_pools:
            raise PoolNotFoundError(name)
        return _db_pools[name]

    @classmethod
    def get_current_connection(cls) -> asyncpg.Connection | None:
        """Get the connection of the transaction open on this task, if any"""
        return _current_connection.get()

    @classmethod
    def get_query_tracker(cls) -> QueryTracker | None:
        return _query_tracker.get()

    @classmethod
    def log_query(cls, query: str, params: list[Any]):
        """Log a query to the current query tracker if available"""
        tracker = _query_tracker.get()
        if tracker and tracker.is_enabled():
            # Skip this frame and the DatabaseOperations frame
            stack = traceback.extract_stack()[:-2]
            tracker.log_query(query, params, "".join(traceback.format_list(stack)))

    @classmethod
    @asynccontextmanager
    async def connection(
        cls, db_name: str = "default", conn: asyncpg.Connection | None = None
    ) -> AsyncIterator[asyncpg.Connection]:
        """Resolve the connection a single statement should run on.

        Order: the explicit `conn`, then the transaction open on this task,
        then a connection borrowed from the named pool for the duration of
        the block.
        """
        if conn is not None:
            yield conn
            return

        current_conn = _current_connection.get()
        if current_conn is not None:
            yield current_conn
            return

        pool = await cls.get_pool(db_name)
        async with pool.acquire() as acquired:
            yield acquired

    @classmethod
    @asynccontextmanager
    async def transaction(cls, db_name: str = "default", track_queries: bool = False):
        """Context manager for database transactions.

        Behavior:
        - Within an existing transaction it opens a nested transaction
          (savepoint) on the same connection.
        - Otherwise it acquires a connection from the named pool, starts a
          transaction and publishes the connection to this task so
          repository calls inside the block use it.
        - The acquired connection is always released back to the pool when
          the block exits, normally or through an exception.

        Args:
            db_name: Name of the database pool to use
            track_queries: Whether to enable query tracking for this transaction
        """
        current_conn = _current_connection.get()
        current_tracker = _query_tracker.get()

        if current_conn:
            async with current_conn.transaction():
                yield current_conn
        else:
            pool = await cls.get_pool(db_name)
            async with pool.acquire() as conn, conn.transaction():
                conn_token = _current_connection.set(conn)

                tracker_token = None
                if track_queries and not current_tracker:
                    tracker = QueryTracker()
                    tracker.enable()
                    tracker_token = _query_tracker.set(tracker)

                try:
                    yield conn
                finally:
                    _current_connection.reset(conn_token)
                    if tracker_token:
                        _query_tracker.reset(tracker_token)

    @classmethod
    @asynccontextmanager
    async def track_queries(cls):
        """Context manager for query tracking.

        async with DatabaseManager.track_queries() as tracker:
            await todo_repo.view(todo_id)
            queries = tracker.get_queries()
        """
        current_tracker = _query_tracker.get()

        if current_tracker:
            was_enabled = current_tracker.is_enabled()
            current_tracker.enable()
            try:
                yield current_tracker
            finally:
                if not was_enabled:
                    current_tracker.disable()
        else:
            tracker = QueryTracker()
            tracker.enable()
            token = _query_tracker.set(tracker)
            try:
                yield tracker
            finally:
                _query_tracker.reset(token)


def transactional(db_name: str = "default", query_logs: bool = False):
    """Decorator to run a coroutine function within a database transaction.

    Args:
        db_name: Name of the database pool to use
        query_logs: Whether to enable query tracking for this transaction

    Example:
        @transactional()
        async def complete_all(ids):
            for todo_id in ids:
                await service.update(UpdateReq(id=todo_id, status="completed"))
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            async with DatabaseManager.transaction(db_name, track_queries=query_logs):
                return await func(*args, **kwargs)

        return wrapper

    return decorator
