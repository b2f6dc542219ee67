from enum import Enum

from todokit.entities import BaseEntity, Field, SchemaBase


class Status(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    ARCHIVED = "archived"


class Todo(BaseEntity):
    title: str
    description: str = ""
    status: Status = Status.PENDING


class TodoSchema(SchemaBase):
    """Column references for the todos table."""

    title = Field[str]("title")
    description = Field[str]("description")
    status = Field[str]("status")


TABLE_NAME = "todos"

CREATE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS todos (
    id UUID PRIMARY KEY,
    title VARCHAR(255) NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    status VARCHAR(32) NOT NULL DEFAULT 'pending',
    created_at TIMESTAMPTZ NOT NULL,
    updated_at TIMESTAMPTZ,
    deleted_at TIMESTAMPTZ
);
CREATE INDEX IF NOT EXISTS idx_todos_deleted_at ON todos (deleted_at);
"""
