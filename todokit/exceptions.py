"""Exception hierarchy.

Every error carries a message (what happened), an optional detail
(technical context) and an optional suggestion (what to do next).
"""


class TodokitError(Exception):
    """Base exception for all todokit errors."""

    def __init__(
        self,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.detail:
            parts.append(f"Detail: {self.detail}")
        if self.suggestion:
            parts.append(f"Suggestion: {self.suggestion}")
        return " | ".join(parts)


class QueryBuildError(TodokitError):
    """Raised when a condition list cannot be compiled into one clause."""

    def __init__(
        self,
        message: str = "Conditions could not be compiled",
        detail: str | None = None,
        suggestion: str | None = "Pass at most one trailing directive per list",
    ) -> None:
        super().__init__(message, detail, suggestion)


class OperationCancelledError(TodokitError):
    """Raised when a storage call hits its deadline or is cancelled server-side."""

    def __init__(
        self,
        message: str = "Database operation was cancelled",
        detail: str | None = None,
        suggestion: str | None = "Retry with a longer timeout or a narrower query",
    ) -> None:
        super().__init__(message, detail, suggestion)


class PoolNotFoundError(TodokitError, ValueError):
    """Raised when no pool is registered under the requested name."""

    def __init__(self, name: str) -> None:
        super().__init__(
            f"Database pool '{name}' not found",
            suggestion="Register the pool with DatabaseManager.add_pool() at startup",
        )
        self.name = name


class NotFoundError(TodokitError):
    """Raised by services when a referenced entity does not exist."""

    def __init__(
        self,
        message: str = "Entity not found",
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> None:
        super().__init__(message, detail, suggestion)
