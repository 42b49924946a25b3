"""tastegraph domain models - re-exports all public model classes.

Import from ``src.models`` rather than the individual submodules:

    - artist.py          - ArtistNode, ArtistKind, RankedArtist, UserProfile
    - graph.py           - ArtistGraph (networkx-backed) and Edge
    - recommendation.py  - RecommendationResult, MatchCandidate, UserArtists

If you add a new model class, remember to add it to ``__all__`` too.
"""

from __future__ import annotations

from src.models.artist import ArtistKind, ArtistNode, RankedArtist, UserProfile
from src.models.graph import ArtistGraph, Edge
from src.models.recommendation import MatchCandidate, RecommendationResult, UserArtists

__all__ = [
    "ArtistGraph",
    "ArtistKind",
    "ArtistNode",
    "Edge",
    "MatchCandidate",
    "RankedArtist",
    "RecommendationResult",
    "UserArtists",
    "UserProfile",
]
