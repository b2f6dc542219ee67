"""
Condition factories for JSONB columns.

All path-based factories share one rendering rule: intermediate segments
use `->` (JSON navigation) and the last segment uses `->>` (text
extraction), so

    json_path("config", ["translation", "tr", "title"])

renders `config->'translation'->'tr'->>'title'`.
"""

from dataclasses import dataclass
from typing import Any

from todokit.conditions import (
    Column,
    Condition,
    column_name,
    contains_pattern,
    is_empty,
    skip_cond,
    skip_option,
)


def _quote(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def json_path(k: Column, path: list[str]) -> str:
    """Render a JSONB path expression whose final step yields text."""
    parts = [column_name(k)]
    last = len(path) - 1
    for i, segment in enumerate(path):
        operator = "->>" if i == last else "->"
        parts.append(f"{operator}{_quote(segment)}")
    return "".join(parts)


def jsonb_field(k: Column, field: str, v: Any, *, skip: bool | None = None) -> Condition:
    return Condition(f"{json_path(k, [field])} = ?", (v,), skip_option(is_empty(v), skip))


def jsonb_field_null_safe(k: Column, field: str, v: Any, *, skip: bool | None = None) -> Condition:
    """Like jsonb_field, but guards against a NULL column."""
    return Condition(
        f"({column_name(k)} IS NOT NULL AND {json_path(k, [field])} = ?)",
        (v,),
        skip_option(is_empty(v), skip),
    )


def jsonb_field_ilike(k: Column, field: str, v: str | None, *, skip: bool | None = None) -> Condition:
    return Condition(
        f"{json_path(k, [field])} ILIKE ?", (contains_pattern(v or ""),), skip_option(not v, skip)
    )


def jsonb_field_ilike_null_safe(
    k: Column, field: str, v: str | None, *, skip: bool | None = None
) -> Condition:
    return Condition(
        f"({column_name(k)} IS NOT NULL AND {json_path(k, [field])} ILIKE ?)",
        (contains_pattern(v or ""),),
        skip_option(not v, skip),
    )


def jsonb_nested_field(k: Column, path: list[str], v: Any, *, skip: bool | None = None) -> Condition:
    if not path:
        return skip_cond()
    return Condition(f"{json_path(k, path)} = ?", (v,), skip_option(is_empty(v), skip))


def jsonb_nested_field_ilike(
    k: Column, path: list[str], v: str | None, *, skip: bool | None = None
) -> Condition:
    if not path:
        return skip_cond()
    return Condition(
        f"{json_path(k, path)} ILIKE ?", (contains_pattern(v or ""),), skip_option(not v, skip)
    )


def jsonb_multi_fields_ilike(
    k: Column, paths: list[list[str]], v: str | None, *, skip: bool | None = None
) -> Condition:
    """Substring match across several JSONB paths, OR-ed and parenthesized.

    Empty paths are ignored; with none left the condition is skipped.
    """
    if not paths or not v:
        return skip_cond()

    conditions = [f"{json_path(k, path)} ILIKE ?" for path in paths if path]
    if not conditions:
        return skip_cond()

    return Condition(
        "(" + " OR ".join(conditions) + ")",
        tuple(contains_pattern(v) for _ in conditions),
        skip_option(False, skip),
    )


def jsonb_numeric_min(k: Column, field: str, v: float | None, *, skip: bool | None = None) -> Condition:
    return Condition(
        f"({json_path(k, [field])})::float >= ?", (v,), skip_option(v is None, skip)
    )


def jsonb_numeric_max(k: Column, field: str, v: float | None, *, skip: bool | None = None) -> Condition:
    return Condition(
        f"({json_path(k, [field])})::float <= ?", (v,), skip_option(v is None, skip)
    )


def jsonb_array_overlap(
    k: Column, field: str, values: list[str] | None, *, skip: bool | None = None
) -> Condition:
    """Whether a JSONB array at `field` holds any of the given strings."""
    if not values:
        return skip_cond()
    return Condition(
        f"{column_name(k)}->{_quote(field)} ?| ?::text[]", (list(values),), skip_option(False, skip)
    )


def _age_range(k: Column) -> str:
    return f"({column_name(k)}->'age_range'->>0)::int <= ? AND ({column_name(k)}->'age_range'->>1)::int >= ?"


def jsonb_age_range(k: Column, age: int | None, *, skip: bool | None = None) -> Condition:
    """Whether `age` falls inside the `[low, high]` array stored at `k->'age_range'`."""
    return Condition(f"({_age_range(k)})", (age, age), skip_option(not age, skip))


@dataclass(frozen=True, slots=True)
class ScoreField:
    """One scoring rule.

    Attributes:
        type: "interest", "badges", "gender" or "age"
        value: list of strings for interest/badges, str for gender, int for age
        points: awarded when the rule matches
    """

    type: str
    value: Any
    points: int


def build_score(column: Column, fields: list[ScoreField]) -> str:
    """Sum of conditional point awards, for ranking rather than filtering.

    Values are inlined as escaped literals so the expression can be used
    directly as an ORDER BY key. Descriptors with an unknown type, an
    empty value or non-numeric points add nothing; when nothing
    contributes the result is "0".
    """
    k = column_name(column)
    expressions: list[str] = []

    for field in fields:
        try:
            points = int(field.points)
        except (TypeError, ValueError, OverflowError):
            continue
        match field.type:
            case "interest" | "badges":
                values = field.value
                if isinstance(values, (list, tuple)) and values:
                    quoted = ",".join(_quote(str(v)) for v in values)
                    expressions.append(
                        f"CASE WHEN {k}->{_quote(field.type)} ?| ARRAY[{quoted}]::text[] "
                        f"THEN {points} ELSE 0 END"
                    )
            case "gender":
                if isinstance(field.value, str) and field.value:
                    expressions.append(
                        f"CASE WHEN {k}->>'gender' = {_quote(field.value)} "
                        f"THEN {points} ELSE 0 END"
                    )
            case "age":
                age = field.value
                if isinstance(age, int) and not isinstance(age, bool) and age > 0:
                    expressions.append(
                        f"CASE WHEN ({k}->'age_range'->>0)::int <= {age} "
                        f"AND ({k}->'age_range'->>1)::int >= {age} "
                        f"THEN {points} ELSE 0 END"
                    )

    if not expressions:
        return "0"
    return "(" + " + ".join(expressions) + ")"
