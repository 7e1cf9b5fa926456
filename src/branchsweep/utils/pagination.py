"""Client-side paging of already fetched listings for display."""

import math
from typing import List, Sequence, TypeVar

T = TypeVar("T")

ITEMS_PER_PAGE = 10


def page_count(total: int, per_page: int = ITEMS_PER_PAGE) -> int:
    """Number of display pages needed for ``total`` items."""
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    return math.ceil(total / per_page)


def paginate(items: Sequence[T], page: int, per_page: int = ITEMS_PER_PAGE) -> List[T]:
    """Return the 1-based ``page`` of ``items``.

    Pages outside the valid range are clamped to the first or last page.
    """
    pages = page_count(len(items), per_page)
    if pages == 0:
        return []
    page = max(1, min(page, pages))
    start = (page - 1) * per_page
    return list(items[start : start + per_page])
