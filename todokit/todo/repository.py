from uuid import UUID

from todokit.conditions import Condition, eq, ilike
from todokit.pagination import PaginationRequest
from todokit.repository import Repository, RepositoryConfig
from todokit.sort import SortCond, sort_basic
from todokit.todo.models import TABLE_NAME, Todo, TodoSchema
from todokit.todo.schemas import TodoFilters


class TodoRepository(Repository[Todo]):
    def __init__(self, config: RepositoryConfig | None = None):
        super().__init__(Todo, TABLE_NAME, config)

    async def view(self, todo_id: UUID) -> Todo | None:
        return await self.view_by_id(todo_id)

    async def find_todos(
        self, filters: TodoFilters, pagination: PaginationRequest
    ) -> list[Todo]:
        return await self.find(self.conds(filters), self.sorts(), pagination)

    @staticmethod
    def conds(filters: TodoFilters) -> list[Condition]:
        return [
            ilike(TodoSchema.title, filters.q),
            eq(TodoSchema.status, filters.status, skip=not filters.status),
        ]

    @staticmethod
    def sorts() -> list[SortCond]:
        return [sort_basic(TodoSchema.created_at, "DESC", skip=True, is_default=True)]
