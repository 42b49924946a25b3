"""Graph Builder - expands a seed set into an undirected affinity graph.

Architecture:
    - Depends on RelationFetcher for per-artist related-artist lists.
    - Produces an ArtistGraph consumed by the Centrality Ranker.

Every seed is inserted first, tagged ``seed``.  Expansion then proceeds one
frontier level at a time (single-hop by default: the frontier is just the
seeds).  For each frontier artist the fetcher is called and every returned
artist is inserted as a ``related`` node if absent, then joined to the
originating artist by a unit-weight edge if absent.

Fetches within one level are independent and run concurrently, bounded by
the seed count so at most three calls hit the source at once.  Results are
merged into the graph under a lock, in frontier order, so the node discovery
order (and hence tie-breaking downstream) does not depend on which call
finished first.

A failed or empty fetch never aborts the build: the artist simply keeps
degree zero.  If the surrounding task is cancelled, in-flight fetches are
cancelled with it and the partial graph is dropped.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from src.models.artist import ArtistKind, ArtistNode
from src.models.graph import DEFAULT_EDGE_WEIGHT, ArtistGraph
from src.services.relation_fetcher import FetchContext, RelationFetcher
from src.utils.concurrency import throttled_gather
from src.utils.logging import get_logger

_DEFAULT_MAX_HOPS = 1
_DEFAULT_FETCH_CONCURRENCY = 3


class GraphBuilder:
    """Builds one ArtistGraph per call; holds no per-request state."""

    def __init__(
        self,
        fetcher: RelationFetcher,
        max_hops: int = _DEFAULT_MAX_HOPS,
        fetch_concurrency: int = _DEFAULT_FETCH_CONCURRENCY,
    ) -> None:
        if max_hops < 1:
            raise ValueError("max_hops must be at least 1")
        if fetch_concurrency < 1:
            raise ValueError("fetch_concurrency must be at least 1")
        self._fetcher = fetcher
        self._max_hops = max_hops
        self._fetch_concurrency = fetch_concurrency
        self._logger = get_logger(__name__)

    async def build_graph(
        self, seed_artists: Sequence[ArtistNode], context: FetchContext
    ) -> ArtistGraph:
        """Expand *seed_artists* into an affinity graph.

        Parameters
        ----------
        seed_artists:
            The caller's seeds.  Their ``kind`` is forced to ``seed``.
        context:
            Request-scoped fetch context (metadata cache, requester token).

        Returns
        -------
        ArtistGraph
            Seeds plus every related artist discovered within ``max_hops``.
        """
        graph = ArtistGraph()
        merge_lock = asyncio.Lock()

        frontier: list[str] = []
        for seed in seed_artists:
            if graph.add_node(seed.as_seed()):
                frontier.append(seed.artist_id)

        # Bounded by seed count to respect the source's rate limit.
        semaphore = asyncio.Semaphore(max(1, min(len(frontier), self._fetch_concurrency)))
        expanded: set[str] = set()

        for hop in range(1, self._max_hops + 1):
            frontier = [artist_id for artist_id in frontier if artist_id not in expanded]
            if not frontier:
                break
            expanded.update(frontier)

            results = await throttled_gather(
                [self._fetcher.fetch_related(artist_id, context) for artist_id in frontier],
                semaphore,
                return_exceptions=True,
            )

            next_frontier: list[str] = []
            for origin_id, related in zip(frontier, results):
                if isinstance(related, BaseException):
                    if not isinstance(related, Exception):
                        raise related
                    self._logger.warning(
                        "graph_expansion_fetch_failed",
                        artist_id=origin_id,
                        hop=hop,
                        error=str(related),
                    )
                    continue
                async with merge_lock:
                    next_frontier.extend(self._merge(graph, origin_id, related))

            self._logger.debug(
                "graph_hop_complete",
                hop=hop,
                frontier=len(frontier),
                nodes=graph.node_count,
                edges=graph.edge_count,
            )
            frontier = next_frontier

        self._logger.info(
            "graph_built",
            seeds=len(seed_artists),
            nodes=graph.node_count,
            edges=graph.edge_count,
            max_hops=self._max_hops,
        )
        return graph

    @staticmethod
    def _merge(graph: ArtistGraph, origin_id: str, related: Sequence[ArtistNode]) -> list[str]:
        """Insert *related* around *origin_id*; return ids of newly added nodes."""
        added: list[str] = []
        for artist in related:
            if artist.artist_id == origin_id:
                continue
            node = artist if artist.kind == ArtistKind.RELATED else artist.model_copy(
                update={"kind": ArtistKind.RELATED}
            )
            if graph.add_node(node):
                added.append(artist.artist_id)
            graph.add_edge(origin_id, artist.artist_id, weight=DEFAULT_EDGE_WEIGHT)
        return added
