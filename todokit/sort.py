"""Single-key sort selection.

A domain module lists every ordering it supports as a `SortCond`; only
the first active one is applied. When all are skipped the candidate
flagged `is_default` is used instead.
"""

from dataclasses import dataclass

from todokit.conditions import Column, column_name, order_geo
from todokit.entities import SortOrder


def get_order(is_asc: bool) -> SortOrder:
    return SortOrder.ASC if is_asc else SortOrder.DESC


def to_direction(direction: SortOrder | str | None) -> SortOrder | None:
    """Normalize a direction; blank or unknown input means no direction."""
    if isinstance(direction, SortOrder):
        return direction
    if not direction:
        return None
    try:
        return SortOrder(direction.strip().upper())
    except ValueError:
        return None


def sort_expr(key: str, direction: SortOrder | str | None) -> str:
    normalized = to_direction(direction)
    if normalized is None:
        return key
    return f"{key} {normalized.value}"


@dataclass(frozen=True, slots=True)
class SortCond:
    key: str
    direction: SortOrder | None = None
    skip: bool = False
    is_default: bool = False

    def expr(self) -> str:
        return sort_expr(self.key, self.direction)


def select_sort(conds: list[SortCond] | None) -> str | None:
    """Return the ORDER BY expression to apply, or None for no ordering."""
    if not conds:
        return None

    default_sort: str | None = None
    for cond in conds:
        if cond.is_default:
            default_sort = cond.expr()
        if cond.skip:
            continue
        return cond.expr()
    return default_sort


def sort_basic(
    key: Column, direction: SortOrder | str | None, skip: bool, is_default: bool = False
) -> SortCond:
    return SortCond(
        key=column_name(key),
        direction=to_direction(direction),
        skip=skip,
        is_default=is_default,
    )


def sort_direct(key: Column, is_asc: bool = False) -> SortCond:
    """An always-active sort on `key`."""
    return SortCond(key=column_name(key), direction=get_order(is_asc))


def sort_geo(
    k: Column,
    lng: float | None,
    lat: float | None,
    skip: bool,
    is_default: bool = False,
) -> SortCond:
    """Nearest-first ordering; skipped when the point is incomplete."""
    incomplete = lng is None or lat is None
    return SortCond(
        key=order_geo(k, lng or 0.0, lat or 0.0),
        skip=skip or incomplete,
        is_default=is_default and not incomplete,
    )
