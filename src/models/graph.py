"""Undirected artist affinity graph used by one recommendation computation.

The graph is a thin wrapper over ``networkx.Graph`` that enforces the
invariants the ranking step relies on:

    - nodes are keyed by ``artist_id``; the first insertion wins for
      display attributes (name, image, kind)
    - no self-loops, and at most one edge per unordered pair, so inserting
      the same relation twice is a no-op
    - every edge references two nodes already in the node set
    - node insertion order is remembered; the Top-N Selector uses it to
      break score ties (first-discovered first)

One instance is built and discarded per request.  It is not safe for
unsynchronised concurrent mutation; the Graph Builder serialises merges
behind an ``asyncio.Lock``.
"""

from __future__ import annotations

from collections.abc import Iterator

import networkx as nx
from pydantic import BaseModel, ConfigDict

from src.models.artist import ArtistKind, ArtistNode

DEFAULT_EDGE_WEIGHT = 1.0


class Edge(BaseModel):
    """An unordered pair of artist ids with a weight."""

    model_config = ConfigDict(frozen=True)

    source: str
    target: str
    weight: float = DEFAULT_EDGE_WEIGHT

    def key(self) -> frozenset[str]:
        return frozenset((self.source, self.target))


class ArtistGraph:
    """Set of ArtistNode keyed by id plus a set of undirected edges."""

    def __init__(self) -> None:
        self._graph = nx.Graph()
        self._order: dict[str, int] = {}

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add_node(self, node: ArtistNode) -> bool:
        """Insert *node* if its id is absent.  Returns True when inserted."""
        if node.artist_id in self._order:
            return False
        self._order[node.artist_id] = len(self._order)
        self._graph.add_node(node.artist_id, artist=node)
        return True

    def add_edge(self, source_id: str, target_id: str, weight: float = DEFAULT_EDGE_WEIGHT) -> bool:
        """Insert an undirected edge if absent.  Returns True when inserted.

        Raises
        ------
        ValueError
            If the edge would be a self-loop or either endpoint is missing.
        """
        if source_id == target_id:
            raise ValueError(f"Self-loop rejected for artist {source_id!r}")
        for artist_id in (source_id, target_id):
            if artist_id not in self._order:
                raise ValueError(f"Edge endpoint {artist_id!r} is not a graph node")
        if self._graph.has_edge(source_id, target_id):
            return False
        self._graph.add_edge(source_id, target_id, weight=weight)
        return True

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def has_node(self, artist_id: str) -> bool:
        return artist_id in self._order

    def has_edge(self, source_id: str, target_id: str) -> bool:
        return self._graph.has_edge(source_id, target_id)

    def get_node(self, artist_id: str) -> ArtistNode:
        return self._graph.nodes[artist_id]["artist"]

    def nodes(self) -> list[ArtistNode]:
        """All nodes in first-discovery order."""
        return [self._graph.nodes[artist_id]["artist"] for artist_id in self._order]

    def node_ids(self) -> list[str]:
        return list(self._order)

    def seed_ids(self) -> set[str]:
        return {n.artist_id for n in self.nodes() if n.kind == ArtistKind.SEED}

    def edges(self) -> list[Edge]:
        return [
            Edge(source=u, target=v, weight=data.get("weight", DEFAULT_EDGE_WEIGHT))
            for u, v, data in self._graph.edges(data=True)
        ]

    def degree(self, artist_id: str) -> int:
        return self._graph.degree(artist_id)

    def neighbors(self, artist_id: str) -> list[str]:
        return list(self._graph.neighbors(artist_id))

    def insertion_index(self, artist_id: str) -> int:
        return self._order[artist_id]

    @property
    def node_count(self) -> int:
        return self._graph.number_of_nodes()

    @property
    def edge_count(self) -> int:
        return self._graph.number_of_edges()

    def to_networkx(self) -> nx.Graph:
        """Return the backing graph.  Callers must treat it as read-only."""
        return self._graph

    def __len__(self) -> int:
        return self.node_count

    def __contains__(self, artist_id: object) -> bool:
        return artist_id in self._order

    def __iter__(self) -> Iterator[ArtistNode]:
        return iter(self.nodes())
