"""
Clause compiler and a SELECT builder on top of it.
The goal is to produce SQL queries without execution.

Fragments use `?` placeholders while being assembled; `build()` renumbers
them into asyncpg's `$1, $2, ...` form in one pass.
"""

from typing import Any, NamedTuple

from todokit.conditions import AND, OR, Condition, count_placeholders
from todokit.exceptions import QueryBuildError
from todokit.pagination import clamp_page, clamp_size
from todokit.sort import SortCond, select_sort


class CompiledClause(NamedTuple):
    predicate: str
    values: list[Any]
    trailing: str
    trailing_values: list[Any]


def _operator(opr: str | None) -> str:
    if opr and opr.strip().upper() == OR:
        return OR
    return AND


def _needs_group(key: str) -> bool:
    """Whether `key` has an OR outside any parentheses or quoted literal."""
    upper = key.upper()
    if " OR " not in upper:
        return False
    depth = 0
    in_quote = False
    for i, char in enumerate(upper):
        if char == "'":
            in_quote = not in_quote
        elif in_quote:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        elif depth == 0 and upper.startswith(" OR ", i):
            return True
    return False


def compile_conditions(conds: list[Condition] | None, opr: str | None = AND) -> CompiledClause:
    """Merge conditions into one predicate and a flat value list.

    Skipped conditions and empty keys contribute nothing. A condition with
    placeholders but no values is dropped so the placeholder count always
    matches the value count. When several parts are joined, a part that is
    itself an OR chain is parenthesized.
    """
    if not conds:
        return CompiledClause("", [], "", [])

    op = _operator(opr)
    parts: list[str] = []
    values: list[Any] = []
    trailer: Condition | None = None

    for cond in conds:
        if cond.skip or not cond.key:
            continue
        if cond.trailing:
            if trailer is not None:
                raise QueryBuildError(
                    detail=f"Found {trailer.key!r} and {cond.key!r} in one condition list"
                )
            trailer = cond
            continue
        if cond.values:
            parts.append(cond.key)
            values.extend(cond.values)
        elif count_placeholders(cond.key) == 0:
            parts.append(cond.key)

    if len(parts) > 1:
        parts = [f"({part})" if _needs_group(part) else part for part in parts]

    predicate = f" {op} ".join(parts)
    if trailer is None:
        return CompiledClause(predicate, values, "", [])
    return CompiledClause(predicate, values, trailer.key, list(trailer.values))


def build_clause(conds: list[Condition] | None, opr: str | None = AND) -> tuple[str, list[Any]]:
    """Return (fragment, values) for a condition list.

    An empty fragment means "no filtering". A trailing directive is
    appended only after a non-empty predicate.

        build_clause([eq("a", 1), eq("b", None), eq("c", 3)])
        -> ("a = ? AND c = ?", [1, 3])
    """
    compiled = compile_conditions(conds, opr)
    if not compiled.predicate:
        return "", []
    if not compiled.trailing:
        return compiled.predicate, compiled.values
    return (
        f"{compiled.predicate} {compiled.trailing}",
        compiled.values + compiled.trailing_values,
    )


def replace_placeholders(query: str, start: int = 0) -> str:
    """Renumber `?` placeholders to `$n`, the first one becoming `$start+1`.

    Quoted literals and the jsonb `?|` / `?&` operators are left alone.
    """
    out: list[str] = []
    index = start
    in_quote = False
    length = len(query)
    for i, char in enumerate(query):
        if char == "'":
            in_quote = not in_quote
        elif char == "?" and not in_quote:
            if not (i + 1 < length and query[i + 1] in "|&"):
                index += 1
                out.append(f"${index}")
                continue
        out.append(char)
    return "".join(out)


class QueryBuilder:
    """
    Immutable builder for SELECT statements over condition lists.

    Usage:
        builder = QueryBuilder("todos")
        query, params = (
            builder.where([ilike("title", "milk"), eq("status", None)])
            .sort([sort_basic("created_at", "DESC", skip=False)])
            .paginate(1, 10)
            .build()
        )
        # SELECT * FROM todos WHERE title ILIKE $1 ORDER BY created_at DESC LIMIT 10 OFFSET 0
    """

    def __init__(self, table_name: str):
        self.table_name = table_name
        self.select_fields = "*"
        self.where_conditions: list[str] = []
        self.params: list[Any] = []
        self.order_by_parts: list[str] = []
        self.trailing_clause = ""
        self.trailing_params: list[Any] = []
        self.limit_count: int | None = None
        self.offset_count: int | None = None

    def _clone(self) -> "QueryBuilder":
        """Create a copy of the current QueryBuilder instance"""
        new_builder = QueryBuilder(self.table_name)
        new_builder.select_fields = self.select_fields
        new_builder.where_conditions = self.where_conditions.copy()
        new_builder.params = self.params.copy()
        new_builder.order_by_parts = self.order_by_parts.copy()
        new_builder.trailing_clause = self.trailing_clause
        new_builder.trailing_params = self.trailing_params.copy()
        new_builder.limit_count = self.limit_count
        new_builder.offset_count = self.offset_count
        return new_builder

    def select(self, *fields: str) -> "QueryBuilder":
        """Set the SELECT fields. Defaults to * when none are given."""
        new_builder = self._clone()
        new_builder.select_fields = ", ".join(fields) if fields else "*"
        return new_builder

    def where(self, conds: list[Condition] | Condition, opr: str | None = AND) -> "QueryBuilder":
        """AND a compiled condition list onto the WHERE clause.

        Conditions inside the list are joined with `opr`. An all-skipped
        list leaves the builder unchanged.
        """
        if isinstance(conds, Condition):
            conds = [conds]
        compiled = compile_conditions(conds, opr)
        if not compiled.predicate and not compiled.trailing:
            return self

        new_builder = self._clone()
        if compiled.predicate:
            new_builder.where_conditions.append(compiled.predicate)
            new_builder.params.extend(compiled.values)
        if compiled.trailing:
            if new_builder.trailing_clause:
                raise QueryBuildError(
                    detail=f"Builder already has trailing clause {new_builder.trailing_clause!r}"
                )
            new_builder.trailing_clause = compiled.trailing
            new_builder.trailing_params = compiled.trailing_values
        return new_builder

    def where_any(self, conds: list[Condition]) -> "QueryBuilder":
        """Add a group of conditions joined with OR."""
        return self.where(conds, OR)

    def order_by(self, expr: str) -> "QueryBuilder":
        """Append a raw ORDER BY expression."""
        new_builder = self._clone()
        new_builder.order_by_parts.append(expr)
        return new_builder

    def order_by_desc(self, field: str) -> "QueryBuilder":
        return self.order_by(f"{field} DESC")

    def sort(self, conds: list[SortCond] | None) -> "QueryBuilder":
        """Apply the single active sort candidate, if any."""
        expr = select_sort(conds)
        if expr is None:
            return self
        return self.order_by(expr)

    def limit(self, count: int) -> "QueryBuilder":
        """Set the LIMIT clause"""
        new_builder = self._clone()
        new_builder.limit_count = count
        return new_builder

    def offset(self, count: int) -> "QueryBuilder":
        """Set the OFFSET clause"""
        new_builder = self._clone()
        new_builder.offset_count = count
        return new_builder

    def paginate(self, page: int, per_page: int = 10) -> "QueryBuilder":
        """
        Set pagination parameters using a page-based interface

        Args:
            page: Page number (1-based), clamped to at least 1
            per_page: Number of records per page, clamped to 1..MAX_PAGE_SIZE

        Returns:
            QueryBuilder with LIMIT and OFFSET set for the specified page
        """
        page = clamp_page(page)
        per_page = clamp_size(per_page)
        return self.limit(per_page).offset((page - 1) * per_page)

    def build(self) -> tuple[str, list[Any]]:
        """Build the final SQL query and parameters"""
        query_parts = [f"SELECT {self.select_fields} FROM {self.table_name}"]

        if self.where_conditions:
            if len(self.where_conditions) == 1:
                query_parts.append(f"WHERE {self.where_conditions[0]}")
            else:
                grouped = [
                    f"({cond})" if _needs_group(cond) else cond
                    for cond in self.where_conditions
                ]
                query_parts.append(f"WHERE {' AND '.join(grouped)}")

        if self.order_by_parts:
            query_parts.append(f"ORDER BY {', '.join(self.order_by_parts)}")

        if self.limit_count is not None:
            query_parts.append(f"LIMIT {self.limit_count}")

        if self.offset_count is not None:
            query_parts.append(f"OFFSET {self.offset_count}")

        if self.trailing_clause:
            query_parts.append(self.trailing_clause)

        query = replace_placeholders(" ".join(query_parts))
        return query, self.params + self.trailing_params

    def to_sql(self) -> str:
        """Return only the SQL query string without parameters"""
        query, _ = self.build()
        return query

    def __str__(self) -> str:
        """String representation showing the built query"""
        query, params = self.build()
        return f"Query: {query}\nParams: {params}"
