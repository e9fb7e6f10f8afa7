"""
Cached statistics payloads.

Keys look like ``stats:<module>:all`` for state-wide figures and
``stats:<module>:f<facility id>`` for one facility.  Any write to a module
drops its keys together with the cross-module report keys.
"""
import logging
from typing import Callable, Iterable, Optional

from django.conf import settings
from django.core.cache import cache

logger = logging.getLogger(__name__)

MODULES = (
    'facilities', 'patients', 'births', 'deaths', 'antenatal',
    'immunizations', 'diseases', 'family-planning', 'reports',
)


def cache_key(module: str, facility_id: Optional[int] = None) -> str:
    scope = 'all' if facility_id is None else f'f{facility_id}'
    return f'stats:{module}:{scope}'


def cached_stats(module: str, facility_id: Optional[int], builder: Callable[[], dict]) -> dict:
    ck = cache_key(module, facility_id)
    cached = cache.get(ck)
    if cached is not None:
        return cached
    payload = builder()
    cache.set(ck, payload, settings.STATS_CACHE_SECONDS)
    return payload


def invalidate(module: str, facility_ids: Iterable[Optional[int]] = ()) -> None:
    ids = {f for f in facility_ids if f}
    keys = []
    for name in (module, 'reports'):
        keys.append(cache_key(name))
        keys.extend(cache_key(name, f) for f in ids)
    cache.delete_many(keys)
    logger.debug("Dropped stats keys %s", keys)
