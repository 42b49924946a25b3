"""Shared pytest fixtures for the tastegraph test suite."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio

from src.interfaces.artist_source_provider import IArtistSourceProvider
from src.models.artist import ArtistKind, ArtistNode
from src.providers.artist_store.sqlite_artist_store import SQLiteArtistStore
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.relation_fetcher import FetchContext


# ---------------------------------------------------------------------------
# Artist helpers
# ---------------------------------------------------------------------------


def make_artist(
    artist_id: str,
    name: str | None = None,
    genres: Iterable[str] = (),
    kind: ArtistKind = ArtistKind.RELATED,
) -> ArtistNode:
    """Build an ArtistNode with a readable default display name."""
    return ArtistNode(
        artist_id=artist_id,
        display_name=name or artist_id.upper(),
        image_url=f"https://img.example/{artist_id}.jpg",
        kind=kind,
        genres=tuple(genres),
    )


def build_artist_source(
    related: Mapping[str, list[str]] | None = None,
    artists: Mapping[str, ArtistNode] | None = None,
    genre_results: Mapping[str, list[str]] | None = None,
    top_artists: list[str] | None = None,
) -> MagicMock:
    """Return a mock IArtistSourceProvider driven by plain dictionaries.

    ``related`` maps an artist id to the ids its related-artists lookup
    returns; ids in ``related`` values are turned into ArtistNodes via
    ``artists`` or :func:`make_artist`.  Unknown ids get an empty list.
    """
    related = related or {}
    artists = dict(artists or {})
    genre_results = genre_results or {}

    def _node(artist_id: str) -> ArtistNode:
        return artists.get(artist_id) or make_artist(artist_id)

    async def _get_artist(artist_id: str) -> ArtistNode | None:
        if artist_id in artists:
            return artists[artist_id]
        if artist_id in related:
            return make_artist(artist_id)
        return None

    async def _get_related(artist_id: str) -> list[ArtistNode]:
        return [_node(i) for i in related.get(artist_id, [])]

    async def _search(genre: str, exclude_id: str, limit: int) -> list[ArtistNode]:
        return [_node(i) for i in genre_results.get(genre, []) if i != exclude_id][:limit]

    async def _top(user_token: str) -> list[ArtistNode]:
        return [_node(i) for i in (top_artists or [])]

    source = MagicMock(spec=IArtistSourceProvider)
    source.get_artist = AsyncMock(side_effect=_get_artist)
    source.get_related_artists = AsyncMock(side_effect=_get_related)
    source.search_artists_by_genre = AsyncMock(side_effect=_search)
    source.get_top_artists = AsyncMock(side_effect=_top)
    source.get_provider_name.return_value = "mock_source"
    source.is_available.return_value = True
    return source


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_config() -> dict[str, Any]:
    """Return a minimal engine configuration for testing."""
    return {
        "graph": {"max_hops": 1, "max_related": 10, "fetch_concurrency": 3},
        "ranking": {"damping": 0.85, "max_iter": 100, "tol": 1.0e-6},
        "recommendations": {"top_n": 5, "timeout": 5.0},
    }


@pytest.fixture
def fetch_context() -> FetchContext:
    """A fresh request-scoped fetch context with no user token."""
    return FetchContext(cache=MemoryCacheProvider())


@pytest_asyncio.fixture
async def artist_store(tmp_path: Path) -> SQLiteArtistStore:
    """An initialised SQLite artist store in a temp directory."""
    store = SQLiteArtistStore(db_path=tmp_path / "tastegraph.db")
    await store.initialize()
    return store
