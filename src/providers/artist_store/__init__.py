"""Artist store implementations.

    SQLiteArtistStore - aiosqlite-backed seed sets, computed sets and user
    profiles.  Seed and computed sets are replaced together in a single
    transaction.
"""

from src.providers.artist_store.sqlite_artist_store import SQLiteArtistStore

__all__ = ["SQLiteArtistStore"]
