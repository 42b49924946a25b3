"""Centrality Ranker - PageRank over an artist affinity graph.

Runs standard PageRank on the undirected, unit-weight graph::

    score'(v) = (1 - d) / N + d * sum(score(u) / degree(u) for u adjacent to v)

starting from uniform mass 1/N, with damping ``d = 0.85`` by default, until
the L1 change drops below ``tol * N`` or ``max_iter`` is reached.  The
computation is delegated to ``networkx.pagerank``; an undirected edge counts
in both directions, so "out-degree" is plain degree.

A degree-zero node passes no mass to neighbours.  Its dangling mass is
spread uniformly over all nodes, which keeps the scores a probability
distribution: they are non-negative and sum to 1.

Edge cases:
    - single node -> ``{id: 1.0}``
    - empty graph -> ``{}``; the caller reports "no recommendations
      producible" rather than an error

Pure and deterministic for a fixed graph; no suspension points.
"""

from __future__ import annotations

import networkx as nx

from src.models.graph import ArtistGraph
from src.utils.errors import RankingError
from src.utils.logging import get_logger

_logger = get_logger(__name__)

DEFAULT_DAMPING = 0.85
DEFAULT_MAX_ITER = 100
DEFAULT_TOL = 1.0e-6


class CentralityRanker:
    """Computes a PageRank stationary distribution for an ArtistGraph."""

    def __init__(
        self,
        damping: float = DEFAULT_DAMPING,
        max_iter: int = DEFAULT_MAX_ITER,
        tol: float = DEFAULT_TOL,
    ) -> None:
        if not 0.0 <= damping < 1.0:
            raise ValueError("damping must be in [0, 1)")
        if max_iter < 1:
            raise ValueError("max_iter must be at least 1")
        self._damping = damping
        self._max_iter = max_iter
        self._tol = tol

    @property
    def damping(self) -> float:
        return self._damping

    def rank(self, graph: ArtistGraph) -> dict[str, float]:
        """Return ``{artist_id: score}`` for every node of *graph*.

        Raises
        ------
        RankingError
            If the power iteration fails to converge within ``max_iter``.
        """
        if graph.node_count == 0:
            return {}
        if graph.node_count == 1:
            return {graph.node_ids()[0]: 1.0}

        try:
            scores = nx.pagerank(
                graph.to_networkx(),
                alpha=self._damping,
                max_iter=self._max_iter,
                tol=self._tol,
                weight="weight",
            )
        except nx.PowerIterationFailedConvergence as exc:
            raise RankingError(
                message=f"PageRank did not converge in {self._max_iter} iterations",
            ) from exc

        ranked = {artist_id: max(float(score), 0.0) for artist_id, score in scores.items()}
        _logger.debug(
            "pagerank_complete",
            nodes=len(ranked),
            damping=self._damping,
            total=round(sum(ranked.values()), 9),
        )
        return ranked
