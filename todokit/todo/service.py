import logging
from uuid import UUID

from todokit.exceptions import NotFoundError
from todokit.request_context import RequestContext
from todokit.todo.models import Status, Todo
from todokit.todo.repository import TodoRepository
from todokit.todo.schemas import CreateReq, ListReq, UpdateReq, ViewReq

logger = logging.getLogger(__name__)


class TodoNotFoundError(NotFoundError):
    def __init__(self, todo_id: UUID) -> None:
        super().__init__(
            "Todo not found",
            detail=f"id={todo_id}",
            suggestion="List todos to find a valid id",
        )
        self.todo_id = todo_id


_NO_CONTEXT = RequestContext()


class TodoService:
    """Todo use cases.

    Write operations take an optional `RequestContext`; its fields are
    attached to the log records they emit.
    """

    def __init__(self, repo: TodoRepository):
        self.repo = repo

    async def create(self, req: CreateReq, ctx: RequestContext | None = None) -> Todo:
        todo = Todo(title=req.title, description=req.description, status=Status.PENDING)
        await self.repo.save(todo)
        logger.info("Created todo %s", todo.id, extra=(ctx or _NO_CONTEXT).log_extra())
        return todo

    async def update(self, req: UpdateReq, ctx: RequestContext | None = None) -> Todo:
        todo = await self._get(req.id)
        if req.title is not None:
            todo.title = req.title
        if req.description is not None:
            todo.description = req.description
        if req.status is not None:
            todo.status = req.status
        await self.repo.save(todo)
        logger.info("Updated todo %s", todo.id, extra=(ctx or _NO_CONTEXT).log_extra())
        return todo

    async def view(self, req: ViewReq) -> Todo | None:
        return await self.repo.view(req.id)

    async def find(self, req: ListReq) -> list[Todo]:
        return await self.repo.find_todos(req.filters, req.pagination)

    async def delete(self, todo_id: UUID, ctx: RequestContext | None = None) -> None:
        """Archive the todo and mark it soft-deleted."""
        todo = await self._get(todo_id)
        todo.status = Status.ARCHIVED
        todo.delete_now()
        await self.repo.save(todo)
        logger.info("Deleted todo %s", todo_id, extra=(ctx or _NO_CONTEXT).log_extra())

    async def _get(self, todo_id: UUID) -> Todo:
        todo = await self.repo.view(todo_id)
        if todo is None:
            raise TodoNotFoundError(todo_id)
        return todo
