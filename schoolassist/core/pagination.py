"""
Core pagination helpers.

This module provides:
- `normalize_pagination` to clean up page/limit inputs using defaults
  and clamping.
- `paginate_items` to map and wrap results in a `PaginatedResponse` schema.
"""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence, TypeVar

from schoolassist.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
    MIN_PAGE_SIZE,
)
from schoolassist.schemas.common import PaginatedResponse, PaginationParams

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema")


def normalize_pagination(
    page: Optional[int] = None,
    limit: Optional[int] = None,
    default_limit: int = DEFAULT_PAGE_SIZE,
    max_limit: int = MAX_PAGE_SIZE,
) -> PaginationParams:
    """
    Normalize raw page & limit inputs into a PaginationParams object.

    Rules:
        - page None -> DEFAULT_PAGE; page < 1 -> 1
        - limit None -> default_limit
        - limit clamped to [MIN_PAGE_SIZE, max_limit]
    """
    page = DEFAULT_PAGE if page is None else max(1, int(page))

    if limit is None:
        limit = default_limit
    limit = min(max(int(limit), MIN_PAGE_SIZE), max_limit)

    return PaginationParams(page=page, limit=limit)


def paginate_items(
    *,
    items: Sequence[TModel],
    total: int,
    params: PaginationParams,
    mapper: Callable[[TModel], TSchema],
) -> PaginatedResponse[TSchema]:
    """
    Map and wrap items into a PaginatedResponse.

    Args:
        items: Rows of the current page.
        total: Number of rows matching the filter across all pages.
        params: Pagination parameters (page, limit).
        mapper: Converts each row into its response schema.
    """
    mapped: List[TSchema] = [mapper(obj) for obj in items]
    return PaginatedResponse[TSchema].create(
        items=mapped,
        total=total,
        page=params.page,
        limit=params.limit,
    )
