"""Public interface definitions for the external systems TasteGraph talks to.

The recommendation engine reaches artist data and persistence only through
the abstract base classes in this package.  Concrete adapters implement
them and are wired together in ``src/main.py``, so unit tests can inject
mocks instead of calling Spotify or touching a database.

CONCRETE PROVIDER MAP:
    Interface                  →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────────
    IArtistSourceProvider      →  SpotifyArtistProvider
    IArtistStoreProvider       →  SQLiteArtistStore
    ICacheProvider             →  MemoryCacheProvider
"""

from src.interfaces.artist_source_provider import IArtistSourceProvider
from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.interfaces.cache_provider import ICacheProvider

__all__ = [
    "IArtistSourceProvider",
    "IArtistStoreProvider",
    "ICacheProvider",
]
