"""Relation Fetcher - related artists for one artist, with a fallback ladder.

The artist source is rate-limited and occasionally inconsistent: Spotify
returns an empty related-artists list for some artists, and any call can
fail.  Rather than nesting exception handlers, the fetcher walks an ordered
tuple of *strategies*, all sharing one signature::

    async def strategy(source, artist_id, context, limit) -> list[ArtistNode]

and stops at the first one that yields a non-empty result:

    1. related_artists_strategy   -- direct related-artists lookup
    2. genre_search_strategy      -- artists sharing the artist's primary genre
    3. affinity_artists_strategy  -- the requester's own top artists

A strategy that raises a collaborator error counts as zero results.  If
every strategy comes up empty the fetcher returns ``[]``; the Graph Builder
treats that as a node with no outbound edges, never as a failure.

Artist metadata looked up along the way goes through the request-scoped
cache carried by :class:`FetchContext`, which the caller creates per
request and discards afterwards.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass, field

import httpx

from src.interfaces.artist_source_provider import IArtistSourceProvider
from src.interfaces.cache_provider import ICacheProvider
from src.models.artist import ArtistNode
from src.utils.errors import ArtistSourceError
from src.utils.logging import get_logger

_logger = get_logger(__name__)

DEFAULT_MAX_RELATED = 10

# Errors that mean "this strategy produced nothing usable".
_RECOVERABLE_ERRORS = (ArtistSourceError, httpx.HTTPError)


# ---------------------------------------------------------------------------
# Request-scoped context
# ---------------------------------------------------------------------------


@dataclass
class FetchContext:
    """Per-request state shared by every fetch of one graph build.

    Attributes
    ----------
    cache:
        Request-scoped artist-metadata cache.  Never shared across requests.
    user_token:
        Token of the requesting user, needed to load their top artists for
        the affinity fallback.  ``None`` disables that fallback unless
        ``affinity_artists`` is supplied directly.
    affinity_artists:
        The requester's "current affinity" artists.  Loaded lazily from the
        source on first use when left as ``None``.
    """

    cache: ICacheProvider
    user_token: str | None = None
    affinity_artists: list[ArtistNode] | None = None
    _affinity_lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False)

    async def get_artist(self, source: IArtistSourceProvider, artist_id: str) -> ArtistNode | None:
        """Return artist metadata through the request cache."""
        key = f"artist:{artist_id}"
        cached = await self.cache.get(key)
        if cached is not None:
            return cached
        artist = await source.get_artist(artist_id)
        if artist is not None:
            await self.cache.set(key, artist)
        return artist

    async def remember(self, artists: Sequence[ArtistNode]) -> None:
        """Prime the cache with metadata the source already returned."""
        for artist in artists:
            key = f"artist:{artist.artist_id}"
            if not await self.cache.exists(key):
                await self.cache.set(key, artist)

    async def get_affinity_artists(self, source: IArtistSourceProvider) -> list[ArtistNode]:
        """Return the requester's affinity artists, loading them at most once."""
        async with self._affinity_lock:
            if self.affinity_artists is None:
                loaded: list[ArtistNode] = []
                try:
                    if self.user_token:
                        loaded = await source.get_top_artists(self.user_token)
                finally:
                    # A failed load is not repeated for later artists.
                    self.affinity_artists = loaded
            return self.affinity_artists


Strategy = Callable[
    [IArtistSourceProvider, str, FetchContext, int],
    Awaitable[list[ArtistNode]],
]


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


async def related_artists_strategy(
    source: IArtistSourceProvider, artist_id: str, context: FetchContext, limit: int
) -> list[ArtistNode]:
    """Direct related-artists lookup."""
    related = await source.get_related_artists(artist_id)
    await context.remember(related)
    # The fetcher drops self and duplicates before applying the cap.
    return related


async def genre_search_strategy(
    source: IArtistSourceProvider, artist_id: str, context: FetchContext, limit: int
) -> list[ArtistNode]:
    """Artists sharing the primary genre of *artist_id*.

    Yields nothing when the artist is unknown or exposes no genre tag.
    """
    artist = await context.get_artist(source, artist_id)
    if artist is None or artist.primary_genre is None:
        return []
    found = await source.search_artists_by_genre(artist.primary_genre, artist_id, limit)
    await context.remember(found)
    return found


async def affinity_artists_strategy(
    source: IArtistSourceProvider, artist_id: str, context: FetchContext, limit: int
) -> list[ArtistNode]:
    """The requester's own top artists, minus *artist_id*."""
    affinity = await context.get_affinity_artists(source)
    return [a for a in affinity if a.artist_id != artist_id][:limit]


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    related_artists_strategy,
    genre_search_strategy,
    affinity_artists_strategy,
)


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class RelationFetcher:
    """Fetches related artists through an ordered ladder of strategies.

    Holds no state between calls; everything request-specific travels in
    the :class:`FetchContext` argument.
    """

    def __init__(
        self,
        source: IArtistSourceProvider,
        strategies: Sequence[Strategy] = DEFAULT_STRATEGIES,
        max_related: int = DEFAULT_MAX_RELATED,
    ) -> None:
        if max_related < 1:
            raise ValueError("max_related must be at least 1")
        self._source = source
        self._strategies = tuple(strategies)
        self._max_related = max_related

    @property
    def max_related(self) -> int:
        return self._max_related

    async def fetch_related(self, artist_id: str, context: FetchContext) -> list[ArtistNode]:
        """Return up to ``max_related`` artists related to *artist_id*.

        Each strategy is tried in order until one yields a usable result.
        Returns ``[]`` when every strategy is exhausted.
        """
        for strategy in self._strategies:
            name = getattr(strategy, "__name__", repr(strategy))
            try:
                candidates = await strategy(self._source, artist_id, context, self._max_related)
            except _RECOVERABLE_ERRORS as exc:
                _logger.warning(
                    "related_fetch_strategy_failed",
                    artist_id=artist_id,
                    strategy=name,
                    error=str(exc),
                )
                continue

            usable = self._clean(artist_id, candidates)
            if usable:
                if strategy is not self._strategies[0]:
                    _logger.info(
                        "related_fetch_fallback",
                        artist_id=artist_id,
                        strategy=name,
                        count=len(usable),
                    )
                return usable

            _logger.debug("related_fetch_strategy_empty", artist_id=artist_id, strategy=name)

        _logger.warning("related_fetch_exhausted", artist_id=artist_id)
        return []

    def _clean(self, artist_id: str, candidates: Sequence[ArtistNode]) -> list[ArtistNode]:
        """Drop the artist itself and duplicate ids, then cap the list."""
        seen: set[str] = {artist_id}
        usable: list[ArtistNode] = []
        for candidate in candidates:
            if candidate.artist_id in seen:
                continue
            seen.add(candidate.artist_id)
            usable.append(candidate)
            if len(usable) >= self._max_related:
                break
        return usable
