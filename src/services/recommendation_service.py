"""Recommendation engine entry point: seeds in, ranked artists out.

Architecture overview
---------------------
``compute_recommendations`` runs one unit of work per request:

    validate seeds ──► resolve seed metadata ──► build graph ──► PageRank
        │                                                          │
        └─ InvalidSeedSetError (before any fetch)      select top N ◄┘
                                                            │
                                       persist seeds + computed set (one txn)

Failure semantics:
    - invalid input is rejected before the relation source is touched
    - a relation fetch that fails degrades through the fetcher's fallback
      ladder; the affected seed just contributes no edges
    - a graph with no non-seed nodes yields an empty, successful result
    - a persistence failure propagates as PersistenceError; the store's
      transaction guarantees no partial seed/computed state is visible
    - cancellation (e.g. request timeout) aborts the in-flight fetches;
      nothing is ranked or persisted for a partial graph

Every request gets a fresh request-scoped metadata cache, cleared when the
request finishes.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime, timezone

from src.interfaces.artist_source_provider import IArtistSourceProvider
from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.models.artist import ArtistKind, ArtistNode
from src.models.recommendation import RecommendationResult, UserArtists
from src.providers.cache.memory_cache import MemoryCacheProvider
from src.services.centrality_ranker import CentralityRanker
from src.services.graph_builder import GraphBuilder
from src.services.relation_fetcher import FetchContext
from src.services.top_n_selector import DEFAULT_TOP_N, select_top
from src.utils.errors import ArtistSourceError, InvalidSeedSetError
from src.utils.logging import get_logger

MIN_SEEDS = 1
MAX_SEEDS = 3


def validate_seed_ids(seed_artist_ids: Sequence[str]) -> list[str]:
    """Normalise and validate a submitted seed id list.

    Ids are stripped and de-duplicated (first occurrence kept).  The result
    must hold between ``MIN_SEEDS`` and ``MAX_SEEDS`` ids.

    Raises
    ------
    InvalidSeedSetError
        On blank ids or a seed count outside the allowed range.
    """
    if isinstance(seed_artist_ids, str):
        raise InvalidSeedSetError(message="Seed artist ids must be a list, not a string")

    cleaned: list[str] = []
    for raw in seed_artist_ids:
        artist_id = (raw or "").strip() if isinstance(raw, str) else ""
        if not artist_id:
            raise InvalidSeedSetError(message="Seed artist ids must be non-empty strings")
        if artist_id not in cleaned:
            cleaned.append(artist_id)

    if not MIN_SEEDS <= len(cleaned) <= MAX_SEEDS:
        raise InvalidSeedSetError(
            message=(
                f"You must select between {MIN_SEEDS} and {MAX_SEEDS} artists "
                f"(got {len(cleaned)})"
            )
        )
    return cleaned


class RecommendationService:
    """Computes, stores and reads back artist recommendations for users."""

    def __init__(
        self,
        source: IArtistSourceProvider,
        store: IArtistStoreProvider,
        graph_builder: GraphBuilder,
        ranker: CentralityRanker,
        top_n: int = DEFAULT_TOP_N,
    ) -> None:
        """Initialise the service with injected dependencies.

        Parameters
        ----------
        source:
            Artist-relation source, used here to resolve seed metadata.
        store:
            Persistence adapter for seed and computed sets.
        graph_builder:
            Builds the affinity graph (wraps the Relation Fetcher).
        ranker:
            PageRank implementation.
        top_n:
            Size cap of the computed set.
        """
        self._source = source
        self._store = store
        self._graph_builder = graph_builder
        self._ranker = ranker
        self._top_n = top_n
        self._logger = get_logger(__name__)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def compute_recommendations(
        self,
        user_id: str,
        seed_artist_ids: Sequence[str],
        user_token: str | None = None,
    ) -> RecommendationResult:
        """Build, rank and persist recommendations for *user_id*.

        Parameters
        ----------
        user_id:
            The requesting user.
        seed_artist_ids:
            1–3 artist ids chosen by the user.
        user_token:
            Optional token of the requesting user, enabling the
            top-artists fallback of the Relation Fetcher.

        Returns
        -------
        RecommendationResult
            Up to ``top_n`` ranked artists (possibly none) and graph size.
        """
        seed_ids = validate_seed_ids(seed_artist_ids)

        cache = MemoryCacheProvider()
        context = FetchContext(cache=cache, user_token=user_token)
        try:
            seeds = [await self._resolve_seed(artist_id, context) for artist_id in seed_ids]
            graph = await self._graph_builder.build_graph(seeds, context)
        finally:
            await cache.clear()

        scores = self._ranker.rank(graph)
        if not scores:
            self._logger.info("no_recommendations_producible", user_id=user_id)

        recommendations = select_top(graph, scores, seed_ids, n=self._top_n)

        await self._store.replace_user_artists(user_id, seeds, recommendations)

        self._logger.info(
            "recommendations_computed",
            user_id=user_id,
            seeds=len(seeds),
            graph_nodes=graph.node_count,
            graph_edges=graph.edge_count,
            results=len(recommendations),
        )

        return RecommendationResult(
            user_id=user_id,
            seed_artists=seeds,
            recommendations=recommendations,
            graph_nodes=graph.node_count,
            graph_edges=graph.edge_count,
            generated_at=datetime.now(timezone.utc),
        )

    async def get_user_artists(self, user_id: str) -> UserArtists:
        """Return the stored seed set and computed set for *user_id*."""
        seeds = await self._store.load_seed_set(user_id)
        computed = await self._store.load_computed_set(user_id)
        return UserArtists(user_id=user_id, seed_artists=seeds, computed_artists=computed)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _resolve_seed(self, artist_id: str, context: FetchContext) -> ArtistNode:
        """Look up seed metadata; fall back to the bare id as display name."""
        try:
            artist = await context.get_artist(self._source, artist_id)
        except ArtistSourceError as exc:
            self._logger.warning("seed_metadata_unavailable", artist_id=artist_id, error=str(exc))
            artist = None

        if artist is None:
            return ArtistNode(artist_id=artist_id, display_name=artist_id, kind=ArtistKind.SEED)
        return artist.as_seed()
