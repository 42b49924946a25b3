"""Recommendation and match result models.

Defines Pydantic v2 models for the outputs of the two engine entry points:

    1. compute_recommendations - a RecommendationResult holding up to N
       RankedArtist objects plus the size of the graph they came from.
    2. compute_matches - a list of MatchCandidate objects, one per other
       user whose seed set overlaps the requester's.

UserArtists is the read-side view of what the persistence store holds for
one user (their latest seed set and computed set).

See src/services/recommendation_service.py and src/services/match_service.py.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from src.models.artist import ArtistNode, RankedArtist, UserProfile


# ---------------------------------------------------------------------------
# RecommendationResult - output of one build → rank → select run.
# ---------------------------------------------------------------------------
class RecommendationResult(BaseModel):
    """Recommendations computed for one user's seed set.

    An empty ``recommendations`` list is a valid outcome (no non-seed node
    was discovered), not a failure.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    seed_artists: list[ArtistNode] = Field(default_factory=list)
    # Highest score first; ties in first-discovery order.
    recommendations: list[RankedArtist] = Field(default_factory=list)
    graph_nodes: int = 0
    graph_edges: int = 0
    generated_at: datetime | None = None


# ---------------------------------------------------------------------------
# MatchCandidate - another user whose seeds overlap the requester's.
# ---------------------------------------------------------------------------
class MatchCandidate(BaseModel):
    """A candidate match scored by seed-artist overlap.

    ``score`` is always ``len(shared_artists)`` and always > 0; zero-overlap
    pairs and the requester themself are never emitted.
    """

    model_config = ConfigDict(frozen=True)

    user_id: str
    score: int = Field(gt=0)
    shared_artists: list[str] = Field(default_factory=list)
    profile: UserProfile | None = None


# ---------------------------------------------------------------------------
# UserArtists - persisted seed and computed sets for one user.
# ---------------------------------------------------------------------------
class UserArtists(BaseModel):
    """The latest seed set and computed set stored for a user."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    seed_artists: list[ArtistNode] = Field(default_factory=list)
    computed_artists: list[RankedArtist] = Field(default_factory=list)
