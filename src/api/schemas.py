"""Pydantic request/response schemas for the TasteGraph API.

Defines the public contract for the REST endpoints: recommendation
computation, stored user artists, matches, profiles and health.

# ─── HOW SCHEMAS WORK ─────────────────────────────────────────────────
#
# FastAPI validates incoming JSON against the Request models (invalid
# bodies get a 422) and serialises Response models via response_model=...
# Domain models from src/models are converted here so the wire format can
# evolve independently of the engine.
#
# Convention: Request schemas end with "Request", response schemas
# end with "Response".
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from src.models.artist import ArtistNode, RankedArtist, UserProfile
from src.models.recommendation import MatchCandidate


class RecommendationsRequest(BaseModel):
    """Seed artists submitted by a user.

    Count and content are validated by the recommendation service, so a
    bad seed list yields a 400 with a readable message instead of a 422.
    """

    seed_artist_ids: list[str]
    user_token: str | None = Field(
        default=None,
        description="Caller's Spotify access token; enables the top-artists fallback",
    )


class ArtistResponse(BaseModel):
    """An artist as shown to the client."""

    artist_id: str
    display_name: str
    image_url: str | None = None

    @classmethod
    def from_node(cls, node: ArtistNode) -> ArtistResponse:
        return cls(artist_id=node.artist_id, display_name=node.display_name, image_url=node.image_url)


class RankedArtistResponse(ArtistResponse):
    """A recommended artist with its centrality score."""

    score: float = Field(ge=0.0)

    @classmethod
    def from_ranked(cls, artist: RankedArtist) -> RankedArtistResponse:
        return cls(
            artist_id=artist.artist_id,
            display_name=artist.display_name,
            image_url=artist.image_url,
            score=artist.score,
        )


class RecommendationsResponse(BaseModel):
    """Result of one recommendation run.  ``recommendations`` may be empty."""

    user_id: str
    seed_artists: list[ArtistResponse] = Field(default_factory=list)
    recommendations: list[RankedArtistResponse] = Field(default_factory=list)
    graph_nodes: int = 0
    graph_edges: int = 0
    generated_at: datetime | None = None


class UserArtistsResponse(BaseModel):
    """Stored seed set plus computed set, computed artists by score desc."""

    user_id: str
    seed_artists: list[ArtistResponse] = Field(default_factory=list)
    computed_artists: list[RankedArtistResponse] = Field(default_factory=list)


class ProfileRequest(BaseModel):
    """Profile fields a user can set."""

    nickname: str = Field(min_length=1, max_length=64)
    profile_image_url: str | None = None
    bio: str | None = Field(default=None, max_length=500)


class ProfileResponse(BaseModel):
    user_id: str
    nickname: str
    profile_image_url: str | None = None
    bio: str | None = None

    @classmethod
    def from_profile(cls, profile: UserProfile) -> ProfileResponse:
        return cls(
            user_id=profile.user_id,
            nickname=profile.nickname,
            profile_image_url=profile.profile_image_url,
            bio=profile.bio,
        )


class MatchResponse(BaseModel):
    """A user whose seed artists overlap the requester's."""

    matched_user_id: str
    score: int
    shared_artists: list[str] = Field(default_factory=list)
    profile: ProfileResponse | None = None

    @classmethod
    def from_candidate(cls, candidate: MatchCandidate) -> MatchResponse:
        return cls(
            matched_user_id=candidate.user_id,
            score=candidate.score,
            shared_artists=list(candidate.shared_artists),
            profile=ProfileResponse.from_profile(candidate.profile) if candidate.profile else None,
        )


class MatchesResponse(BaseModel):
    """Matches for a user, highest overlap first.  May be empty."""

    user_id: str
    matches: list[MatchResponse] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Application health check response."""

    status: str
    version: str
    providers: dict[str, Any]


class ErrorResponse(BaseModel):
    """Standard error response body."""

    error: str
    detail: str | None = None
