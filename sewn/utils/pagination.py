import math
from typing import Sequence

from ..constants import PAGINATION


def normalize_page(page: int, limit: int) -> tuple[int, int]:
    """Clamp page/limit into the supported range"""
    page = max(page or PAGINATION["DEFAULT_PAGE"], 1)
    limit = min(max(limit or PAGINATION["DEFAULT_LIMIT"], 1), PAGINATION["MAX_LIMIT"])
    return page, limit


def paginate(items: Sequence, page: int, limit: int) -> dict:
    """Slice an already filtered and ordered sequence into a page payload"""
    page, limit = normalize_page(page, limit)
    count = len(items)
    start = (page - 1) * limit
    return {
        "data": list(items[start : start + limit]),
        "count": count,
        "page": page,
        "limit": limit,
        "totalPages": math.ceil(count / limit),
    }
