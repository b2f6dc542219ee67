"""Dependency container built once at startup and passed down explicitly."""

import logging
from dataclasses import dataclass

import asyncpg

from todokit.config import Settings
from todokit.db_context import DatabaseManager
from todokit.logging_config import configure_logging
from todokit.repository import RepositoryConfig
from todokit.request_context import RequestContext
from todokit.todo import TodoRepository, TodoService

logger = logging.getLogger(__name__)

__all__ = ["Dependencies", "RequestContext"]


@dataclass
class Dependencies:
    settings: Settings
    pool: asyncpg.Pool
    todo_repo: TodoRepository
    todo_service: TodoService
    db_name: str = "default"

    @classmethod
    async def up(cls, settings: Settings, db_name: str = "default") -> "Dependencies":
        """Create the pool, register it and wire repositories and services."""
        configure_logging(settings.log_level)
        db = settings.db
        pool = await asyncpg.create_pool(
            db.dsn(), min_size=db.min_pool_size, max_size=db.max_pool_size
        )
        await DatabaseManager.add_pool(db_name, pool)
        logger.info("Connected to %s:%s/%s", db.host, db.port, db.name)

        repo_config = RepositoryConfig(
            db_name=db_name,
            timeout=db.statement_timeout,
            debug=db.debug,
            max_page_size=settings.pagination_max_size,
        )
        todo_repo = TodoRepository(repo_config)
        return cls(
            settings=settings,
            pool=pool,
            todo_repo=todo_repo,
            todo_service=TodoService(todo_repo),
            db_name=db_name,
        )

    async def shutdown(self) -> None:
        await DatabaseManager.remove_pool(self.db_name)
        await self.pool.close()
        logger.info("Database pool closed")
