"""In-memory stand-ins for asyncpg connections and pools."""

from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any


@dataclass
class Call:
    method: str
    query: str
    params: list[Any]
    timeout: float | None


@dataclass
class FakeConnection:
    """Records every statement and answers with queued results.

    `results` is consumed in order; an Exception instance in the queue is
    raised instead of returned.
    """

    results: list[Any] = field(default_factory=list)
    calls: list[Call] = field(default_factory=list)
    transactions: int = 0

    def _next(self, method: str, query: str, args: tuple, timeout: float | None, default: Any):
        self.calls.append(Call(method, query, list(args), timeout))
        if not self.results:
            return default
        result = self.results.pop(0)
        if isinstance(result, BaseException):
            raise result
        return result

    async def fetch(self, query: str, *args: Any, timeout: float | None = None):
        return self._next("fetch", query, args, timeout, [])

    async def fetchrow(self, query: str, *args: Any, timeout: float | None = None):
        return self._next("fetchrow", query, args, timeout, None)

    async def fetchval(self, query: str, *args: Any, timeout: float | None = None):
        return self._next("fetchval", query, args, timeout, None)

    async def execute(self, query: str, *args: Any, timeout: float | None = None):
        return self._next("execute", query, args, timeout, "INSERT 0 1")

    @asynccontextmanager
    async def transaction(self):
        self.transactions += 1
        yield self

    @property
    def last(self) -> Call:
        return self.calls[-1]


@dataclass
class FakePool:
    connection: FakeConnection = field(default_factory=FakeConnection)
    acquired: int = 0
    released: int = 0
    closed: bool = False

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        try:
            yield self.connection
        finally:
            self.released += 1

    async def close(self):
        self.closed = True
