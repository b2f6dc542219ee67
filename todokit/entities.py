from datetime import UTC, datetime
from enum import Enum
from typing import ClassVar, Generic, TypeVar
from uuid import UUID, uuid4

from pydantic import BaseModel
from pydantic.config import ConfigDict


T = TypeVar("T")


class Field(Generic[T]):
    """Type-safe column reference for schema classes.

    Usage:
        class TodoSchema(SchemaBase):
            title = Field[str]("title")
            status = Field[str]("status")

    Condition factories accept a Field wherever they accept a column name:
        ilike(TodoSchema.title, "milk")
    """

    def __init__(self, column_name: str):
        """
        Args:
            column_name: The actual database column name
        """
        self._column_name = column_name

    @property
    def column(self) -> str:
        """Return the underlying database column name."""
        return self._column_name

    def __str__(self) -> str:
        """Return the column name when used in queries"""
        return self._column_name

    def __repr__(self) -> str:
        return f"Field({self._column_name})"


class SchemaBase:
    """Base class for schema definitions with type-safe fields."""

    id = Field[UUID]("id")
    created_at = Field[datetime]("created_at")
    updated_at = Field[datetime]("updated_at")
    deleted_at = Field[datetime]("deleted_at")


def utc_now() -> datetime:
    return datetime.now(UTC)


class BaseEntity(BaseModel):
    """Identity, audit and soft-delete fields shared by persisted entities.

    `id` stays None until the first save assigns one. A soft-deleted
    entity carries a `deleted_at` timestamp; restoring clears it.
    """

    model_config: ClassVar[ConfigDict] = ConfigDict(
        use_enum_values=True, validate_assignment=True, validate_default=True
    )

    id: UUID | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    deleted_at: datetime | None = None

    @property
    def is_new(self) -> bool:
        return self.id is None or self.id.int == 0

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def before_create(self) -> None:
        """Assign identity and creation time if they are still unset."""
        if self.is_new:
            self.id = uuid4()
        if self.created_at is None:
            self.created_at = utc_now()

    def before_update(self) -> None:
        self.updated_at = utc_now()

    def delete_now(self) -> None:
        """Mark the entity soft-deleted."""
        self.deleted_at = utc_now()

    def restore(self) -> None:
        self.deleted_at = None


class SortOrder(str, Enum):
    ASC = "ASC"
    DESC = "DESC"
