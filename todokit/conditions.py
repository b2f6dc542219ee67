"""
Condition factories for building filter clauses.

Each factory returns a `Condition`: a predicate fragment with `?`
placeholders, the values that fill them (in order) and a skip flag.
Factories never raise. Empty input produces a skipped condition, so a
domain module can list every filter it supports and let the empty ones
fall away:

    conds = [
        ilike("title", filters.q),
        eq("status", filters.status, skip=not filters.status),
    ]
    fragment, values = build_clause(conds)

Every factory accepts a keyword `skip` that overrides the default policy.
"""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from todokit.entities import Field

Column = str | Field[Any]

AND = "AND"
OR = "OR"


@dataclass(frozen=True, slots=True)
class Condition:
    """A predicate fragment plus its ordered parameter values.

    Attributes:
        key: SQL fragment, may contain `?` placeholders
        values: Parameter values in placeholder order
        skip: Excluded from compiled output when True
        trailing: Rendered after the predicate instead of joined into it
    """

    key: str
    values: tuple[Any, ...] = ()
    skip: bool = False
    trailing: bool = False

    @property
    def placeholder_count(self) -> int:
        return count_placeholders(self.key)


def count_placeholders(fragment: str) -> int:
    """Count `?` placeholders outside quoted literals and jsonb `?|`/`?&` operators."""
    count = 0
    in_quote = False
    length = len(fragment)
    for i, char in enumerate(fragment):
        if char == "'":
            in_quote = not in_quote
        elif char == "?" and not in_quote:
            if i + 1 < length and fragment[i + 1] in "|&":
                continue
            count += 1
    return count


def skip_cond() -> Condition:
    """A no-op condition that compiles to nothing."""
    return Condition(key="", values=(), skip=True)


def skip_option(default: bool, skip: bool | None) -> bool:
    return default if skip is None else skip


def column_name(k: Column) -> str:
    return str(k)


def is_empty(value: Any) -> bool:
    """Whether a value is its type's empty sentinel.

    None, blank strings, empty collections and the nil UUID are empty.
    Numbers and booleans are never empty here; the numeric factories that
    treat zero as "unset" check for it themselves.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return value == ""
    if isinstance(value, UUID):
        return value.int == 0
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


def skip_str(value: str | None) -> bool:
    return value is None or value == ""


def skip_uuid(value: UUID | None) -> bool:
    return value is None or value.int == 0


def contains_pattern(value: str) -> str:
    return f"%{value}%"


def _placeholders(count: int) -> str:
    return ",".join("?" * count)


# Comparison


def eq(k: Column, v: Any, *, skip: bool | None = None) -> Condition:
    return Condition(f"{column_name(k)} = ?", (v,), skip_option(v is None, skip))


def not_eq(k: Column, v: Any, *, skip: bool | None = None) -> Condition:
    return Condition(f"{column_name(k)} != ?", (v,), skip_option(v is None, skip))


def min_(k: Column, v: Any, *, skip: bool | None = None) -> Condition:
    """Lower bound, inclusive."""
    return Condition(f"{column_name(k)} >= ?", (v,), skip_option(v is None, skip))


def max_(k: Column, v: Any, *, skip: bool | None = None) -> Condition:
    """Upper bound, inclusive."""
    return Condition(f"{column_name(k)} <= ?", (v,), skip_option(v is None, skip))


def int_gte(k: Column, i: int | None, *, skip: bool | None = None) -> Condition:
    """Lower bound where zero means unset."""
    return Condition(f"{column_name(k)} >= ?", (i,), skip_option(not i, skip))


def int_to_bool(k: Column, i: int | None, *, skip: bool | None = None) -> Condition:
    """Tri-state flag: 0 is unset, 1 is true, anything else is false."""
    return Condition(f"{column_name(k)} = ?", (i == 1,), skip_option(not i, skip))


def not_null(k: Column, skip: bool = False) -> Condition:
    return Condition(f"{column_name(k)} IS NOT NULL", (), skip)


def custom(key: str, *values: Any, skip: bool | None = None) -> Condition:
    """A caller-written fragment taken verbatim."""
    return Condition(key, tuple(values), skip_option(False, skip))


def trailing(key: str, *values: Any, skip: bool | None = None) -> Condition:
    """A directive placed after the predicate (e.g. `FOR UPDATE`).

    At most one active trailing condition may appear in a list.
    """
    return Condition(key, tuple(values), skip_option(False, skip), trailing=True)


# Pattern matching


def like(k: Column, v: str | None, *, skip: bool | None = None) -> Condition:
    """Case-sensitive substring match."""
    return Condition(f"{column_name(k)} LIKE ?", (contains_pattern(v or ""),), skip_option(skip_str(v), skip))


def ilike(k: Column, v: str | None, *, skip: bool | None = None) -> Condition:
    """Case-insensitive substring match."""
    return Condition(
        f"{column_name(k)} ILIKE ?", (contains_pattern(v or ""),), skip_option(skip_str(v), skip)
    )


def ilike_multi(fields: list[Column], value: str | None) -> Condition:
    """Match one value against several columns, OR-ed together.

    ilike_multi(["title", "description"], "test") gives
    "title ILIKE ? OR description ILIKE ?" with ["%test%", "%test%"].
    """
    if not fields or skip_str(value):
        return skip_cond()

    conditions = [f"{column_name(field)} ILIKE ?" for field in fields]
    values = tuple(contains_pattern(value) for _ in fields)  # type: ignore[arg-type]
    return Condition(" OR ".join(conditions), values)


def ilike_multi_values(fields: list[Column], values: list[str] | None) -> Condition:
    """Match every value against every column, OR-ed together.

    Iterates fields first, then values. Blank values are dropped.
    """
    if not fields or not values:
        return skip_cond()

    conditions: list[str] = []
    query_values: list[str] = []
    for field in fields:
        for value in values:
            if value != "":
                conditions.append(f"{column_name(field)} ILIKE ?")
                query_values.append(contains_pattern(value))

    if not conditions:
        return skip_cond()
    return Condition(" OR ".join(conditions), tuple(query_values))


# Set membership


def in_(k: Column, v: list[Any] | None, *, skip: bool | None = None) -> Condition:
    """`k IN (...)`.

    An empty list becomes `k IS NULL`, skipped unless the caller passes
    skip=False to get a filter that matches rows with no value.
    """
    if not v:
        return Condition(f"{column_name(k)} IS NULL", (), skip_option(True, skip))
    return Condition(
        f"{column_name(k)} IN ({_placeholders(len(v))})", tuple(v), skip_option(False, skip)
    )


def in_separated(k: Column, v: str | None, sep: str = ",", *, skip: bool | None = None) -> Condition:
    """`k IN (...)` from a delimited string such as a query parameter."""
    items = [item.strip() for item in (v or "").split(sep) if item.strip()]
    return in_(k, items, skip=skip)


def not_in(k: Column, v: list[Any] | None, *, skip: bool | None = None) -> Condition:
    if not v:
        return skip_cond()
    return Condition(
        f"{column_name(k)} NOT IN ({_placeholders(len(v))})", tuple(v), skip_option(False, skip)
    )


def not_in_separated(k: Column, v: str | None, sep: str = ",", *, skip: bool | None = None) -> Condition:
    items = [item.strip() for item in (v or "").split(sep) if item.strip()]
    return not_in(k, items, skip=skip)


# Array columns


def array_contains(k: Column, v: Any, *, skip: bool | None = None) -> Condition:
    """Whether a single value is an element of an array column."""
    return Condition(f"? = ANY({column_name(k)})", (v,), skip_option(is_empty(v), skip))


def array_overlap(k: Column, v: list[str] | None, *, skip: bool | None = None) -> Condition:
    """Whether an array column shares any element with the given values."""
    if not v:
        return skip_cond()
    return Condition(f"{column_name(k)} && ?::text[]", (list(v),), skip_option(False, skip))


def array_overlap_prefixed(
    k: Column, v: list[str] | None, prefix: str, *, skip: bool | None = None
) -> Condition:
    """Array overlap where stored elements carry a prefix the input lacks.

    array_overlap_prefixed("tags", ["sapanca"], "#") matches ['#sapanca'].
    """
    if not v:
        return skip_cond()
    return Condition(
        f"{column_name(k)} && ?::text[]",
        ([prefix + item for item in v],),
        skip_option(False, skip),
    )


def array_equals(k: Column, v: list[str] | None, *, skip: bool | None = None) -> Condition:
    if not v:
        return skip_cond()
    return Condition(f"{column_name(k)} = ?::text[]", (list(v),), skip_option(False, skip))


# Full-text search

_TS_MATCH = "to_tsvector('simple', {k}) @@ to_tsquery('simple', ?)"


def text_search(k: Column, v: str | None, *, skip: bool | None = None) -> Condition:
    """Full-text match requiring every whitespace-separated term."""
    terms = (v or "").split()
    return Condition(
        _TS_MATCH.format(k=column_name(k)), (" & ".join(terms),), skip_option(not terms, skip)
    )


def text_search_prefix(k: Column, v: str | None, *, skip: bool | None = None) -> Condition:
    """Full-text match where each term may be a word prefix ("vil" finds "villa")."""
    terms = (v or "").split()
    if not terms and skip is None:
        return skip_cond()
    return Condition(
        _TS_MATCH.format(k=column_name(k)),
        (" & ".join(f"{term}:*" for term in terms),),
        skip_option(False, skip),
    )


# Geospatial


def geo_within(
    k: Column,
    lng: float | None,
    lat: float | None,
    radius: float | None,
    *,
    skip: bool | None = None,
) -> Condition:
    """Whether a geography column lies within `radius` metres of a point."""
    return Condition(
        f"ST_DWithin({column_name(k)}, ST_Point(?, ?)::geography, ?)",
        (lng, lat, radius),
        skip_option(not lng or not lat or not radius, skip),
    )


def order_geo(k: Column, lng: float, lat: float) -> str:
    """Distance expression for ordering by proximity to a point."""
    return f"ST_Distance({column_name(k)}, ST_Point({float(lng)}, {float(lat)}))"
