"""Abstract base class for artist-relation source providers.

Defines the contract the Relation Fetcher uses to discover artists adjacent
to a given artist (e.g. Spotify's related-artists endpoint).  The adapter
pattern keeps the engine independent of any one catalogue.

Sources are rate-limited and occasionally inconsistent: an artist may have
no related artists, or a lookup may fail outright.  Implementations report
"nothing found" with ``None`` / ``[]`` and reserve exceptions for failed
calls, so the Relation Fetcher can tell the two apart in its logs.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.artist import ArtistNode


class IArtistSourceProvider(ABC):
    """Contract for artist-relation data sources.

    All returned nodes are tagged ``ArtistKind.RELATED``; the Graph Builder
    decides which ones are seeds.
    """

    @abstractmethod
    async def get_artist(self, artist_id: str) -> ArtistNode | None:
        """Look up metadata (name, image, genres) for one artist.

        Returns
        -------
        ArtistNode or None
            The artist, or ``None`` if the source does not know the id.

        Raises
        ------
        src.utils.errors.ArtistSourceError
            If the call fails.
        """

    @abstractmethod
    async def get_related_artists(self, artist_id: str) -> list[ArtistNode]:
        """Return artists the source considers related to *artist_id*.

        An empty list is a legitimate answer and must not be treated as
        fatal.

        Raises
        ------
        src.utils.errors.ArtistSourceError
            If the call fails.
        """

    @abstractmethod
    async def search_artists_by_genre(
        self, genre: str, exclude_id: str, limit: int
    ) -> list[ArtistNode]:
        """Search for up to *limit* artists tagged with *genre*.

        Parameters
        ----------
        genre:
            Genre tag to search for (e.g. ``"detroit techno"``).
        exclude_id:
            Artist id to leave out of the results (the artist whose
            genre is being searched).
        limit:
            Maximum number of artists to return.
        """

    @abstractmethod
    async def get_top_artists(self, user_token: str) -> list[ArtistNode]:
        """Return the top artists of the user who owns *user_token*.

        The token is issued to the caller by the surrounding application;
        this interface does not obtain or refresh it.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"spotify"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the source is configured (credentials present)."""
