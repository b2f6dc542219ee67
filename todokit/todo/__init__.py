"""Todo domain module"""

from todokit.todo.models import Status, Todo, TodoSchema
from todokit.todo.repository import TodoRepository
from todokit.todo.schemas import CreateReq, ListReq, TodoFilters, UpdateReq, ViewReq
from todokit.todo.service import TodoNotFoundError, TodoService

__all__ = [
    "CreateReq",
    "ListReq",
    "Status",
    "Todo",
    "TodoFilters",
    "TodoNotFoundError",
    "TodoRepository",
    "TodoSchema",
    "TodoService",
    "UpdateReq",
    "ViewReq",
]
