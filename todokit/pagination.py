"""Page/size to offset/limit mapping."""

from typing import Any

from pydantic import BaseModel, field_validator

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
# Keeps (page - 1) * MAX_PAGE_SIZE within a Postgres bigint OFFSET
MAX_PAGE = (2**63 - 1) // MAX_PAGE_SIZE + 1


def _to_int(value: Any, default: int) -> int:
    if isinstance(value, bool):
        return default
    try:
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return default


def clamp_page(page: Any) -> int:
    return min(max(1, _to_int(page, DEFAULT_PAGE)), MAX_PAGE)


def clamp_size(size: Any, max_size: int = MAX_PAGE_SIZE) -> int:
    return min(max(1, _to_int(size, DEFAULT_PAGE_SIZE)), max_size)


class PaginationRequest(BaseModel):
    """A page request. Out-of-range input is clamped, never rejected.

    >>> PaginationRequest(page=3, size=20).window()
    (40, 20)
    """

    page: int = DEFAULT_PAGE
    size: int = DEFAULT_PAGE_SIZE

    @field_validator("page", mode="before")
    @classmethod
    def _clamp_page(cls, value: Any) -> int:
        return clamp_page(value)

    @field_validator("size", mode="before")
    @classmethod
    def _clamp_size(cls, value: Any) -> int:
        return clamp_size(value)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.size

    @property
    def limit(self) -> int:
        return self.size

    def window(self) -> tuple[int, int]:
        """Return (offset, limit)."""
        return self.offset, self.limit

    def capped(self, max_size: int) -> "PaginationRequest":
        """Copy with size limited to a stricter ceiling."""
        return PaginationRequest(page=self.page, size=min(self.size, max(1, max_size)))
