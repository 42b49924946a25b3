"""Artist-relation source implementations.

    SpotifyArtistProvider - Spotify Web API (related artists, genre search,
    the requesting user's top artists).  Requires SPOTIFY_CLIENT_ID and
    SPOTIFY_CLIENT_SECRET for catalogue calls.
"""

from src.providers.artist_source.spotify_provider import SpotifyArtistProvider

__all__ = ["SpotifyArtistProvider"]
