"""Artist and user models for the tastegraph engine.

Defines Pydantic v2 models for the artists that flow through one
recommendation computation and for the per-user rows the persistence
store hands back.  All models use frozen config so a node's display
attributes cannot drift once it has entered a graph.

Key relationships:
    - ArtistNode is what the relation source returns and what the graph holds.
    - RankedArtist is an ArtistNode after centrality ranking (adds ``score``).
    - UserProfile is attached to match candidates for display.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class ArtistKind(str, Enum):  # noqa: UP042 - StrEnum requires Python 3.11+
    """How an artist entered the graph.

    SEED nodes are supplied by the caller; RELATED nodes are discovered
    while the Graph Builder expands the seeds.
    """

    SEED = "seed"
    RELATED = "related"


# ---------------------------------------------------------------------------
# ArtistNode - a single artist as known to one computation.
# ---------------------------------------------------------------------------
class ArtistNode(BaseModel):
    """An artist identified by an externally issued, opaque id."""

    model_config = ConfigDict(frozen=True)

    artist_id: str = Field(min_length=1)
    display_name: str
    image_url: str | None = None
    kind: ArtistKind = ArtistKind.RELATED
    # Genre tags from the relation source.  Only the genre fallback reads
    # these; they are not persisted.
    genres: tuple[str, ...] = ()

    @property
    def primary_genre(self) -> str | None:
        """First genre tag, or ``None`` when the source exposed none."""
        return self.genres[0] if self.genres else None

    def as_seed(self) -> ArtistNode:
        """Return a copy tagged as a seed."""
        return self.model_copy(update={"kind": ArtistKind.SEED})


# ---------------------------------------------------------------------------
# RankedArtist - an artist with its PageRank score.
# ---------------------------------------------------------------------------
class RankedArtist(BaseModel):
    """A recommended artist with its centrality score.

    Scores are non-negative and, across every node of the graph they came
    from, sum to 1.  Lists of RankedArtist are ordered by score descending.
    """

    model_config = ConfigDict(frozen=True)

    artist_id: str
    display_name: str
    image_url: str | None = None
    score: float = Field(ge=0.0)


# ---------------------------------------------------------------------------
# UserProfile - display data shown next to a match.
# ---------------------------------------------------------------------------
class UserProfile(BaseModel):
    """Public profile of a user, as stored by the persistence adapter."""

    model_config = ConfigDict(frozen=True)

    user_id: str
    nickname: str
    profile_image_url: str | None = None
    bio: str | None = None
