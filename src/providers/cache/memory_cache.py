"""Per-request artist metadata cache on top of ``cachetools.TTLCache``.

A recommendation request touches at most a few dozen artists, so the store
is small and short-lived: one instance per request, bounded by *max_size*,
with entries expiring after *ttl* seconds in case a request stalls.
"""

from __future__ import annotations

from typing import Any

import structlog
from cachetools import TTLCache

from src.interfaces.cache_provider import ICacheProvider

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_MAX_ARTISTS = 256
_DEFAULT_LIFETIME_SECONDS = 300


class MemoryCacheProvider(ICacheProvider):
    """Holds ``artist:<id>`` entries for the graph currently being built.

    Parameters
    ----------
    max_size:
        Number of artists kept before the oldest entries are evicted.
    ttl:
        Seconds an entry stays valid.
    """

    def __init__(
        self,
        max_size: int = _DEFAULT_MAX_ARTISTS,
        ttl: int = _DEFAULT_LIFETIME_SECONDS,
    ) -> None:
        self._entries: TTLCache[str, Any] = TTLCache(maxsize=max_size, ttl=ttl)

    async def get(self, key: str) -> Any | None:
        found = self._entries.get(key)
        if found is None:
            logger.debug("artist_cache_miss", key=key)
        else:
            logger.debug("artist_cache_hit", key=key)
        return found

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        # TTLCache has one lifetime for every entry; *ttl* is not applied.
        self._entries[key] = value
        logger.debug("artist_cached", key=key)

    async def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    async def exists(self, key: str) -> bool:
        return key in self._entries

    async def clear(self) -> None:
        dropped = len(self._entries)
        self._entries.clear()
        logger.debug("artist_cache_cleared", entries=dropped)

    def __len__(self) -> int:
        return len(self._entries)
