# gym_billing/core/pagination.py
from __future__ import annotations

"""
Core pagination helpers.

- `normalize_pagination` cleans up page/page_size inputs using defaults
  and clamping.
- `paginate_items` maps and wraps results in a `PaginatedResponse` schema.
"""

from typing import Callable, List, Optional, Sequence, TypeVar

from gym_billing.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from gym_billing.schemas.common.pagination import PaginatedResponse, PaginationParams

TModel = TypeVar("TModel")
TSchema = TypeVar("TSchema")


def normalize_pagination(
    page: Optional[int],
    page_size: Optional[int],
) -> PaginationParams:
    """
    Normalize raw page & page_size inputs into a PaginationParams object
    with sane defaults and a clamped max page size.

    Rules:
        - page < 1 or None -> DEFAULT_PAGE
        - page_size < 1 or None -> DEFAULT_PAGE_SIZE
        - page_size > MAX_PAGE_SIZE -> MAX_PAGE_SIZE
    """
    if page is None or page < 1:
        page = DEFAULT_PAGE

    if page_size is None or page_size < 1:
        page_size = DEFAULT_PAGE_SIZE

    if page_size > MAX_PAGE_SIZE:
        page_size = MAX_PAGE_SIZE

    return PaginationParams(page=page, page_size=page_size)


def paginate_items(
    *,
    items: Sequence[TModel],
    total_items: int,
    params: PaginationParams,
    mapper: Callable[[TModel], TSchema],
) -> PaginatedResponse[TSchema]:
    """
    Map and wrap items into a PaginatedResponse.

    Args:
        items: Sequence of model instances for the current page.
        total_items: Total number of items across all pages.
        params: Pagination parameters (page, page_size).
        mapper: Function to convert each model instance into a schema instance.
    """
    mapped: List[TSchema] = [mapper(obj) for obj in items]
    return PaginatedResponse[TSchema].create(
        items=mapped,
        total_items=total_items,
        page=params.page,
        page_size=params.page_size,
    )
