"""Top-N Selector - the highest-ranked non-seed artists of a graph."""

from __future__ import annotations

import math
from collections.abc import Collection, Mapping

from src.models.artist import ArtistNode, RankedArtist
from src.models.graph import ArtistGraph

DEFAULT_TOP_N = 5

# Scores this close to the first score of a run are one tie group, so float
# noise from the power iteration cannot reorder symmetric nodes.
_TIE_REL_TOL = 1e-9
_TIE_ABS_TOL = 1e-12


def _group_ties(
    graph: ArtistGraph, ordered: list[ArtistNode], scores: Mapping[str, float]
) -> list[ArtistNode]:
    """Reorder each run of near-equal scores by discovery order."""
    result: list[ArtistNode] = []
    group: list[ArtistNode] = []
    anchor = 0.0
    for node in ordered:
        score = scores.get(node.artist_id, 0.0)
        if group and math.isclose(score, anchor, rel_tol=_TIE_REL_TOL, abs_tol=_TIE_ABS_TOL):
            group.append(node)
            continue
        result.extend(sorted(group, key=lambda n: graph.insertion_index(n.artist_id)))
        group = [node]
        anchor = score
    result.extend(sorted(group, key=lambda n: graph.insertion_index(n.artist_id)))
    return result


def select_top(
    graph: ArtistGraph,
    scores: Mapping[str, float],
    seed_ids: Collection[str],
    n: int = DEFAULT_TOP_N,
) -> list[RankedArtist]:
    """Return up to *n* non-seed artists, highest score first.

    Ties are broken by first-discovery order in *graph*.  Fewer than *n*
    non-seed nodes simply yields a shorter list.

    Raises
    ------
    ValueError
        If *n* is negative.
    """
    if n < 0:
        raise ValueError("n must be non-negative")

    excluded = set(seed_ids)
    candidates = [node for node in graph.nodes() if node.artist_id not in excluded]
    candidates.sort(key=lambda node: scores.get(node.artist_id, 0.0), reverse=True)
    candidates = _group_ties(graph, candidates, scores)

    return [
        RankedArtist(
            artist_id=node.artist_id,
            display_name=node.display_name,
            image_url=node.image_url,
            score=scores.get(node.artist_id, 0.0),
        )
        for node in candidates[:n]
    ]
