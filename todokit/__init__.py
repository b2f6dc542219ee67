"""todokit: condition-driven repositories over asyncpg"""

from todokit.conditions import Condition
from todokit.db_context import DatabaseManager, transactional
from todokit.entities import BaseEntity, Field, SchemaBase, SortOrder
from todokit.pagination import PaginationRequest
from todokit.query_builder import QueryBuilder, build_clause, replace_placeholders
from todokit.repository import Repository, RepositoryConfig
from todokit.sort import SortCond, select_sort

__all__ = [
    "BaseEntity",
    "Condition",
    "DatabaseManager",
    "Field",
    "PaginationRequest",
    "QueryBuilder",
    "Repository",
    "RepositoryConfig",
    "SchemaBase",
    "SortCond",
    "SortOrder",
    "build_clause",
    "replace_placeholders",
    "select_sort",
    "transactional",
]
