"""Page-number pagination for service-layer list operations."""

from typing import Any, Dict, Optional

from django.conf import settings
from django.core.paginator import Paginator


def marketplace_setting(name: str, default):
    return getattr(settings, "MARKETPLACE", {}).get(name, default)


def clamp_page_size(page_size: Optional[int], default: int) -> int:
    max_size = marketplace_setting("MAX_PAGE_SIZE", 100)
    if not page_size or page_size < 1:
        return default
    return min(page_size, max_size)


def paginate(queryset, page: int = 1, page_size: Optional[int] = None, default_size: int = 20) -> Dict[str, Any]:
    """
    Slice a queryset into one page.

    Out-of-range or malformed page numbers fall back to the nearest valid page
    (``Paginator.get_page`` semantics).
    """
    page_size = clamp_page_size(page_size, default_size)
    paginator = Paginator(queryset, page_size)
    page_obj = paginator.get_page(page)
    return {
        "results": list(page_obj.object_list),
        "count": paginator.count,
        "page": page_obj.number,
        "page_size": page_size,
        "num_pages": paginator.num_pages,
        "has_next": page_obj.has_next(),
        "has_previous": page_obj.has_previous(),
    }
