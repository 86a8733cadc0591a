import math
from enum import Enum
from typing import Iterable, List, Optional, Sequence

from leaseright.core.config import settings
from leaseright.models.status import Status


def _searchable(value) -> str:
    if isinstance(value, Enum):
        value = value.value
    return "" if value is None else str(value).lower()


def filter_items(items: Iterable, status: Optional[str] = None, search: Optional[str] = None,
                 fields: Sequence[str] = ("id",)) -> List:
    """Status filter (``all`` or one status) plus case-insensitive search over ``fields``."""
    wanted = None if not status or status == "all" else Status.coerce(status)
    term = (search or "").strip().lower()

    result = []
    for item in items:
        if wanted is not None and Status.read(getattr(item, "status", None)) is not wanted:
            continue
        if term and not any(term in _searchable(getattr(item, field, None)) for field in fields):
            continue
        result.append(item)
    return result


def paginate(items: Sequence, page: int = 1, per_page: Optional[int] = None) -> dict:
    per_page = per_page or settings.DEFAULT_PAGE_SIZE
    if per_page < 1:
        raise ValueError("per_page must be at least 1")
    total = len(items)
    total_pages = max(1, math.ceil(total / per_page))
    page = min(max(page, 1), total_pages)
    start = (page - 1) * per_page
    return {
        "items": list(items[start:start + per_page]),
        "page": page,
        "per_page": per_page,
        "total": total,
        "total_pages": total_pages,
    }
