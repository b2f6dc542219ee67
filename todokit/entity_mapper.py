from typing import Any, Generic, TypeVar

from pydantic import BaseModel


T = TypeVar("T", bound=BaseModel)


class EntityMapper(Generic[T]):
    """Composition class for mapping between rows and entities"""

    def __init__(self, entity_class: type[T]):
        self.entity_class = entity_class
        self.columns: list[str] = list(entity_class.model_fields.keys())

    def map_row_to_entity(self, row: Any) -> T:
        """Map database row to entity"""
        return self.entity_class(**dict(row))

    def map_rows_to_entities(self, rows: list[Any]) -> list[T]:
        """Map database rows to entities"""
        return [self.map_row_to_entity(row) for row in rows]

    def map_entity_to_row(self, entity: T) -> dict[str, Any]:
        """Column/value pairs for every persisted field, in declaration order"""
        data = entity.model_dump(mode="python")
        return {column: data.get(column) for column in self.columns}
