"""
Search contracts shared by every searchable entity.

Repositories turn raw `SearchParams` into a `FilterClause` and an `OrderBy`
with the helpers below, hand those to their record store and wrap the rows
in a `SearchResult`.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from pydantic import BaseModel

DEFAULT_PAGE = 1
DEFAULT_PER_PAGE = 15

T = TypeVar("T")


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class FilterClause:
    """
    Case-insensitive substring match of `contains` against any of `fields`.
    """

    contains: str
    fields: tuple[str, ...]


@dataclass(frozen=True)
class OrderBy:
    field: str
    direction: SortDirection = SortDirection.ASC


class SearchParams(BaseModel):
    # Raw caller input; sanitized by the repository, not here.
    page: int | None = None
    per_page: int | None = None
    filter: str | None = None
    sort: str | None = None
    sort_dir: str | None = None


class SearchResult(BaseModel, Generic[T]):
    items: list[T]
    total: int
    current_page: int
    per_page: int
    last_page: int


def resolve_paging(page: int | None, per_page: int | None) -> tuple[int, int]:
    """
    Return (page, per_page) with unset, zero or negative values replaced by defaults.
    """
    resolved_page = page if page and page > 0 else DEFAULT_PAGE
    resolved_per_page = per_page if per_page and per_page > 0 else DEFAULT_PER_PAGE
    return resolved_page, resolved_per_page


def parse_direction(raw: str | SortDirection | None) -> SortDirection:
    if isinstance(raw, SortDirection):
        return raw
    value = (raw or "").strip().lower()
    if value == SortDirection.DESC.value:
        return SortDirection.DESC
    return SortDirection.ASC


def resolve_order(
    sort: str | None,
    sort_dir: str | SortDirection | None,
    *,
    sortable: tuple[str, ...],
    fallback: OrderBy,
) -> OrderBy:
    """
    Pick the ordering for a search.

    A whitelisted `sort` keeps the caller's direction (ascending when missing).
    Anything else silently falls back, ignoring `sort_dir`.
    """
    if sort and sort in sortable:
        return OrderBy(field=sort, direction=parse_direction(sort_dir))
    return fallback


def build_filter(text: str | None, fields: tuple[str, ...]) -> FilterClause | None:
    if not text:
        return None
    return FilterClause(contains=text, fields=fields)


def last_page(total: int, per_page: int) -> int:
    if total <= 0:
        return 0
    return (total + per_page - 1) // per_page


def skip_for(page: int, per_page: int) -> int:
    return max((page - 1) * per_page, 0)
