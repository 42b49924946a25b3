"""Match service - finds users whose seed artists overlap the requester's.

Pulls every user's seed set from the artist store, scores them with
:func:`src.services.match_scorer.score_matches`, and attaches each
candidate's profile for display.  A requester without a seed set, or with
no overlapping users, gets an empty list; that is a normal outcome.

Design pattern: Service (stateless, receives dependencies via constructor).
"""

from __future__ import annotations

from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.models.recommendation import MatchCandidate
from src.services.match_scorer import score_matches
from src.utils.logging import get_logger


class MatchService:
    """Computes seed-overlap matches for a user."""

    def __init__(self, store: IArtistStoreProvider) -> None:
        self._store = store
        self._logger = get_logger(__name__)

    async def compute_matches(self, user_id: str) -> list[MatchCandidate]:
        """Return match candidates for *user_id*, highest overlap first."""
        seed_sets = await self._store.load_seed_sets_for_all_users()
        candidates = score_matches(user_id, seed_sets)

        if candidates:
            profiles = await self._store.load_profiles(c.user_id for c in candidates)
            candidates = [
                c.model_copy(update={"profile": profiles.get(c.user_id)}) for c in candidates
            ]

        self._logger.info(
            "matches_computed",
            user_id=user_id,
            users_considered=len(seed_sets),
            matches=len(candidates),
        )
        return candidates
