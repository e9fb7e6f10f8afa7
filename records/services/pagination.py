import math
from typing import Tuple

from django.conf import settings


def _int(value, default: int) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def page_params(params) -> Tuple[int, int]:
    """Read ``page`` and ``limit`` (or its ``per_page``/``pageSize`` aliases)."""
    page = max(1, _int(params.get('page'), 1))
    raw_limit = params.get('limit') or params.get('per_page') or params.get('pageSize')
    limit = min(settings.MAX_PAGE_SIZE, max(1, _int(raw_limit, settings.DEFAULT_PAGE_SIZE)))
    return page, limit


def paginate(qs, params):
    """Slice a queryset; returns the page items and the pagination block."""
    page, limit = page_params(params)
    total = qs.count()
    start = (page - 1) * limit
    items = list(qs[start:start + limit])
    return items, {
        'page': page,
        'limit': limit,
        'totalItems': total,
        'totalPages': max(1, math.ceil(total / limit)),
    }
