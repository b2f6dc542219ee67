"""Generic repository over BaseEntity subclasses"""

import logging
from typing import Any, Generic, TypeVar
from uuid import UUID

import asyncpg
from pydantic import BaseModel, Field

from todokit.conditions import AND, Condition
from todokit.database_operations import DatabaseOperations
from todokit.db_context import DatabaseManager, QueryTracker
from todokit.entities import BaseEntity
from todokit.entity_mapper import EntityMapper
from todokit.pagination import PaginationRequest
from todokit.query_builder import QueryBuilder
from todokit.sort import SortCond

logger = logging.getLogger(__name__)

_NOT_DELETED = Condition("deleted_at IS NULL")


class RepositoryConfig(BaseModel):
    """Configuration options for Repository"""

    db_schema: str | None = Field(default=None, description="Database schema name")
    db_name: str = Field(default="default", description="Registered pool name")
    timeout: float | None = Field(
        default=None, description="Per-statement timeout in seconds"
    )
    debug: bool = Field(default=False, description="Log every statement at DEBUG")
    max_page_size: int | None = Field(
        default=None, description="Stricter page size ceiling for this repository"
    )


T = TypeVar("T", bound=BaseEntity)


class Repository(Generic[T]):
    """Entity-agnostic persistence operations.

    Domain modules subclass it (or hold one) and translate their filter
    models into `Condition` lists:

        class TodoRepository(Repository[Todo]):
            def __init__(self, config=None):
                super().__init__(Todo, "todos", config)

    Every operation accepts an explicit `conn`. Without one it runs on the
    transaction open on the current task (see DatabaseManager.transaction),
    and otherwise on a connection borrowed from the configured pool.

    Rows with a `deleted_at` timestamp are hidden unless the caller passes
    `include_deleted=True`.
    """

    def __init__(
        self,
        entity_class: type[T],
        table_name: str,
        config: RepositoryConfig | None = None,
    ):
        if entity_class is None:
            raise ValueError("entity_class is required")
        if not table_name:
            raise ValueError("table_name is required")

        self.entity_class = entity_class
        self.table_name = table_name
        self.config = config or RepositoryConfig()
        self._qualified_table_name = (
            f"{self.config.db_schema}.{table_name}"
            if self.config.db_schema
            else table_name
        )

        # Composition: Inject dependencies
        self.db_ops = DatabaseOperations(
            db_name=self.config.db_name,
            timeout=self.config.timeout,
            debug=self.config.debug,
        )
        self.entity_mapper = EntityMapper(entity_class)

    @property
    def qualified_table_name(self) -> str:
        return self._qualified_table_name

    @staticmethod
    def get_query_tracker() -> QueryTracker | None:
        """Get the current query tracker if query tracking is enabled."""
        return DatabaseManager.get_query_tracker()

    def query(self, include_deleted: bool = False) -> QueryBuilder:
        """A builder for this table with the soft-delete filter applied"""
        builder = QueryBuilder(self._qualified_table_name)
        if not include_deleted:
            builder = builder.where(_NOT_DELETED)
        return builder

    def _window(self, pagination: PaginationRequest) -> tuple[int, int]:
        if self.config.max_page_size is not None:
            pagination = pagination.capped(self.config.max_page_size)
        return pagination.window()

    async def save(self, entity: T, *, conn: asyncpg.Connection | None = None) -> None:
        """Insert a new entity or write every field of an existing one.

        An entity without an id gets one (and a creation time) and is
        inserted. An entity with an id is upserted on that id with a fresh
        `updated_at`. The entity is updated in place.
        """
        if entity.is_new:
            entity.before_create()
            fields = self.entity_mapper.map_entity_to_row(entity)
            columns = ", ".join(fields.keys())
            placeholders = ", ".join(f"${i + 1}" for i in range(len(fields)))
            await self.db_ops.execute_query(
                f"INSERT INTO {self._qualified_table_name} ({columns}) VALUES ({placeholders})",
                list(fields.values()),
                conn=conn,
            )
            logger.debug("Inserted %s %s", self.entity_class.__name__, entity.id)
            return

        if entity.created_at is None:
            entity.before_create()
        entity.before_update()
        fields = self.entity_mapper.map_entity_to_row(entity)
        columns = ", ".join(fields.keys())
        placeholders = ", ".join(f"${i + 1}" for i in range(len(fields)))
        set_clause = ", ".join(
            f"{column} = EXCLUDED.{column}"
            for column in fields
            if column not in ("id", "created_at")
        )
        await self.db_ops.execute_query(
            f"INSERT INTO {self._qualified_table_name} ({columns}) VALUES ({placeholders}) "
            f"ON CONFLICT (id) DO UPDATE SET {set_clause}",
            list(fields.values()),
            conn=conn,
        )
        logger.debug("Saved %s %s", self.entity_class.__name__, entity.id)

    async def view_by_id(
        self,
        entity_id: UUID,
        *,
        include_deleted: bool = False,
        conn: asyncpg.Connection | None = None,
    ) -> T | None:
        """Point lookup by primary key.

        A missing row returns None; storage failures raise.
        """
        query, params = (
            self.query(include_deleted).where(Condition("id = ?", (entity_id,))).limit(1).build()
        )
        row = await self.db_ops.fetch_one(query, params, conn=conn)
        if row is None:
            return None
        return self.entity_mapper.map_row_to_entity(row)

    async def find(
        self,
        conditions: list[Condition] | None = None,
        sort: list[SortCond] | None = None,
        pagination: PaginationRequest | None = None,
        *,
        opr: str = AND,
        include_deleted: bool = False,
        conn: asyncpg.Connection | None = None,
    ) -> list[T]:
        """Filtered, ordered, windowed list. Always returns a list."""
        builder = self.query(include_deleted).where(conditions or [], opr).sort(sort)
        if pagination is not None:
            offset, limit = self._window(pagination)
            builder = builder.limit(limit).offset(offset)

        query, params = builder.build()
        rows = await self.db_ops.fetch_all(query, params, conn=conn)
        return self.entity_mapper.map_rows_to_entities(rows)

    async def count(
        self,
        conditions: list[Condition] | None = None,
        *,
        opr: str = AND,
        include_deleted: bool = False,
        conn: asyncpg.Connection | None = None,
    ) -> int:
        """Number of rows matching the conditions"""
        query, params = (
            self.query(include_deleted).select("COUNT(*)").where(conditions or [], opr).build()
        )
        result = await self.db_ops.fetch_value(query, params, conn=conn)
        return result or 0

    async def exists(self, conditions: list[Condition] | None = None, **kwargs: Any) -> bool:
        return await self.count(conditions, **kwargs) > 0
