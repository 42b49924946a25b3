"""Abstract base class for artist persistence providers.

Defines the contract for storing each user's seed set and computed set and
for reading the snapshot the match scorer operates on.  Implementations may
use SQLite (local), PostgreSQL, or any other transactional backend.

Seed and computed sets are never partially updated: every write replaces a
user's set wholesale (delete-then-insert) inside one transaction owned by
the provider.  Callers never sequence the delete and the insert themselves.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable

from src.models.artist import ArtistNode, RankedArtist, UserProfile


# Concrete implementation: SQLiteArtistStore (src/providers/artist_store/)
class IArtistStoreProvider(ABC):
    """Contract for seed-set / computed-set / profile persistence.

    All operations are async.  Every failure raises
    :class:`src.utils.errors.PersistenceError`.
    """

    @abstractmethod
    async def initialize(self) -> None:
        """Create tables/indices if they don't exist.  Called at startup."""

    @abstractmethod
    async def load_seed_sets_for_all_users(self) -> dict[str, list[str]]:
        """Return every user's seed artist ids.

        Users without a seed set are absent from the mapping.  Iteration
        order is stable (order in which users first saved a seed set);
        artist ids keep their seed order.
        """

    @abstractmethod
    async def load_seed_set(self, user_id: str) -> list[ArtistNode]:
        """Return the user's seed artists in seed order (empty if none)."""

    @abstractmethod
    async def load_computed_set(self, user_id: str) -> list[RankedArtist]:
        """Return the user's computed artists, highest score first."""

    @abstractmethod
    async def replace_seed_set(self, user_id: str, seeds: list[ArtistNode]) -> None:
        """Atomically replace the user's seed set with *seeds*."""

    @abstractmethod
    async def replace_computed_set(self, user_id: str, computed: list[RankedArtist]) -> None:
        """Atomically replace the user's computed set with *computed*."""

    @abstractmethod
    async def replace_user_artists(
        self,
        user_id: str,
        seeds: list[ArtistNode],
        computed: list[RankedArtist],
    ) -> None:
        """Replace both sets in a single transaction.

        Either both replacements become visible or neither does.
        """

    @abstractmethod
    async def upsert_profile(self, profile: UserProfile) -> UserProfile:
        """Insert or update a user's profile and return the stored row."""

    @abstractmethod
    async def load_profiles(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        """Return profiles for the given ids; missing users are omitted."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""
