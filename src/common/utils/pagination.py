# File: common/utils/pagination.py

from math import ceil
from typing import Any, Dict, List, Tuple

MAX_PAGE_SIZE = 100


def clamp_page(page: int, page_size: int) -> Tuple[int, int]:
    """Pages start at 1; page size is kept between 1 and MAX_PAGE_SIZE."""
    return max(page, 1), min(max(page_size, 1), MAX_PAGE_SIZE)


def page_offset(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def paginate_response(items: List[Any], total: int, page: int = 1, page_size: int = 20) -> Dict[str, Any]:
    """
    Wrap one page of results with the counters a client needs to page further.

    Args:
        items (List[Any]): Already-serialized results of this page.
        total (int): Number of matches across all pages.
        page (int): 1-based page number that produced ``items``.
        page_size (int): Requested page size.

    Returns:
        Dict[str, Any]: ``{"items": [...], "meta": {total, page, page_size, pages, has_next}}``.
    """
    pages = ceil(total / page_size) if page_size else 0
    meta = {"total": total, "page": page, "page_size": page_size, "pages": pages, "has_next": page < pages}
    return {"items": items, "meta": meta}
