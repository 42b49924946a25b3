"""Pairwise Match Scorer - ranks other users by seed-artist overlap.

For the requesting user with seed set S and every other user with seed set
T, the score is ``|S ∩ T|``.  Only users with a positive score become
candidates; the requester is always excluded.  Candidates are sorted by
score descending with a stable sort, so equal scores keep the iteration
order of the input mapping.
"""

from __future__ import annotations

from collections.abc import Collection, Mapping

from src.models.recommendation import MatchCandidate


def score_matches(
    self_user_id: str,
    all_seed_sets: Mapping[str, Collection[str]],
) -> list[MatchCandidate]:
    """Return overlap-scored candidates for *self_user_id*, best first.

    ``shared_artists`` lists the overlap in the requester's seed order.  A
    requester absent from *all_seed_sets* has nothing to share and gets an
    empty list.
    """
    own_seeds = list(dict.fromkeys(all_seed_sets.get(self_user_id, ())))
    if not own_seeds:
        return []

    candidates: list[MatchCandidate] = []
    for user_id, seeds in all_seed_sets.items():
        if user_id == self_user_id:
            continue
        other = set(seeds)
        shared = [artist_id for artist_id in own_seeds if artist_id in other]
        if shared:
            candidates.append(
                MatchCandidate(user_id=user_id, score=len(shared), shared_artists=shared)
            )

    candidates.sort(key=lambda c: c.score, reverse=True)
    return candidates
