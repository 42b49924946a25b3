"""Key-value store contract for per-request artist metadata.

The Recommendation Service creates one cache per call and hands it to the
Relation Fetcher inside a FetchContext.  Entries are keyed ``artist:<id>``
and hold :class:`~src.models.artist.ArtistNode` values, so an artist whose
metadata arrived with a related-artists payload is not fetched again while
the graph for that request is being built.  When the request ends the cache
is cleared; nothing leaks into the next user's request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ICacheProvider(ABC):
    """Async key-value store scoped to a single recommendation request."""

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Look up *key*; ``None`` means the artist has not been seen yet."""

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Record *value* for *key*.

        *ttl* (seconds) is a hint; implementations with a fixed lifetime
        may ignore it.
        """

    @abstractmethod
    async def delete(self, key: str) -> None:
        """Forget *key*.  Missing keys are ignored."""

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Whether metadata for *key* is currently held."""

    @abstractmethod
    async def clear(self) -> None:
        """Empty the store when the owning request finishes."""
