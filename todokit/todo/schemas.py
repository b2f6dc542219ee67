"""Request models for the todo service."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from todokit.pagination import PaginationRequest
from todokit.todo.models import Status


class TodoFilters(BaseModel):
    """Filters a todo listing supports. Blank values mean "any"."""

    model_config = ConfigDict(use_enum_values=True)

    q: str = ""
    status: Status | None = None


class CreateReq(BaseModel):
    title: str = Field(min_length=3, max_length=255)
    description: str = Field(default="", max_length=5000)


class UpdateReq(BaseModel):
    """Partial update; fields left as None are not touched."""

    id: UUID
    title: str | None = Field(default=None, min_length=3, max_length=255)
    description: str | None = Field(default=None, max_length=5000)
    status: Status | None = None


class ViewReq(BaseModel):
    id: UUID


class ListReq(BaseModel):
    filters: TodoFilters = TodoFilters()
    pagination: PaginationRequest = PaginationRequest()
