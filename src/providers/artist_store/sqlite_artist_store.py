"""SQLite-backed artist store.

Persists each user's seed set, computed set and profile to a local SQLite
database (default ``data/tastegraph.db``).  Uses ``aiosqlite`` for async I/O.

Seed and computed sets are replaced wholesale: the delete of the previous
rows and the insert of the new rows run in one transaction, committed only
when every statement succeeded.  On any error the transaction is rolled
back, so later reads see either the old set or the new set, never a mix.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable
from contextlib import asynccontextmanager
from pathlib import Path

import aiosqlite
import structlog

from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.models.artist import ArtistKind, ArtistNode, RankedArtist, UserProfile
from src.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER_NAME = "sqlite_artist_store"
_DEFAULT_DB_PATH = Path("data/tastegraph.db")

_CREATE_USERS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS users (
    user_id           TEXT PRIMARY KEY,
    nickname          TEXT NOT NULL,
    profile_image_url TEXT,
    bio               TEXT,
    updated_at        TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_SEED_ARTISTS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS seed_artists (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT    NOT NULL,
    position    INTEGER NOT NULL,
    artist_id   TEXT    NOT NULL,
    artist_name TEXT    NOT NULL,
    image_url   TEXT,
    UNIQUE (user_id, artist_id)
);
"""

_CREATE_COMPUTED_ARTISTS_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS computed_artists (
    id          INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id     TEXT    NOT NULL,
    position    INTEGER NOT NULL,
    artist_id   TEXT    NOT NULL,
    artist_name TEXT    NOT NULL,
    image_url   TEXT,
    score       REAL    NOT NULL CHECK (score >= 0),
    UNIQUE (user_id, artist_id)
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_seed_artists_user ON seed_artists(user_id);",
    "CREATE INDEX IF NOT EXISTS idx_computed_artists_user ON computed_artists(user_id);",
]

_DELETE_SEEDS_SQL = "DELETE FROM seed_artists WHERE user_id = ?;"
_DELETE_COMPUTED_SQL = "DELETE FROM computed_artists WHERE user_id = ?;"

_INSERT_SEED_SQL = """\
INSERT INTO seed_artists (user_id, position, artist_id, artist_name, image_url)
VALUES (?, ?, ?, ?, ?);
"""

_INSERT_COMPUTED_SQL = """\
INSERT INTO computed_artists (user_id, position, artist_id, artist_name, image_url, score)
VALUES (?, ?, ?, ?, ?, ?);
"""

_SELECT_ALL_SEEDS_SQL = """\
SELECT user_id, artist_id
FROM seed_artists
ORDER BY id;
"""

_SELECT_SEEDS_SQL = """\
SELECT artist_id, artist_name, image_url
FROM seed_artists
WHERE user_id = ?
ORDER BY position;
"""

_SELECT_COMPUTED_SQL = """\
SELECT artist_id, artist_name, image_url, score
FROM computed_artists
WHERE user_id = ?
ORDER BY score DESC, position;
"""

_UPSERT_PROFILE_SQL = """\
INSERT INTO users (user_id, nickname, profile_image_url, bio)
VALUES (?, ?, ?, ?)
ON CONFLICT(user_id) DO UPDATE SET
    nickname = excluded.nickname,
    profile_image_url = excluded.profile_image_url,
    bio = excluded.bio,
    updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_PROFILES_SQL = """\
SELECT user_id, nickname, profile_image_url, bio
FROM users
WHERE user_id IN ({placeholders});
"""


class SQLiteArtistStore(IArtistStoreProvider):
    """SQLite-backed seed/computed set and profile persistence."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    # ------------------------------------------------------------------
    # Connection helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        """Open a connection and translate driver errors to PersistenceError."""
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                db.row_factory = aiosqlite.Row
                yield db
        except aiosqlite.Error as exc:
            raise PersistenceError(
                message=f"SQLite operation failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

    @asynccontextmanager
    async def _transaction(self) -> AsyncIterator[aiosqlite.Connection]:
        """Yield a connection inside a transaction; commit or roll back as a unit."""
        async with self._connect() as db:
            await db.execute("BEGIN")
            try:
                yield db
            except BaseException:
                await db.rollback()
                raise
            await db.commit()

    @staticmethod
    async def _write_seeds(db: aiosqlite.Connection, user_id: str, seeds: list[ArtistNode]) -> None:
        await db.execute(_DELETE_SEEDS_SQL, (user_id,))
        for position, seed in enumerate(seeds):
            await db.execute(
                _INSERT_SEED_SQL,
                (user_id, position, seed.artist_id, seed.display_name, seed.image_url),
            )

    @staticmethod
    async def _write_computed(
        db: aiosqlite.Connection, user_id: str, computed: list[RankedArtist]
    ) -> None:
        await db.execute(_DELETE_COMPUTED_SQL, (user_id,))
        for position, artist in enumerate(computed):
            await db.execute(
                _INSERT_COMPUTED_SQL,
                (
                    user_id,
                    position,
                    artist.artist_id,
                    artist.display_name,
                    artist.image_url,
                    artist.score,
                ),
            )

    # ------------------------------------------------------------------
    # IArtistStoreProvider implementation
    # ------------------------------------------------------------------

    async def initialize(self) -> None:
        """Create the users, seed_artists and computed_artists tables."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise PersistenceError(
                message=f"Cannot create database directory: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        async with self._connect() as db:
            await db.execute(_CREATE_USERS_TABLE_SQL)
            await db.execute(_CREATE_SEED_ARTISTS_TABLE_SQL)
            await db.execute(_CREATE_COMPUTED_ARTISTS_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("artist_store_initialized", path=str(self._db_path))

    async def load_seed_sets_for_all_users(self) -> dict[str, list[str]]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_ALL_SEEDS_SQL)
            rows = await cursor.fetchall()

        seed_sets: dict[str, list[str]] = {}
        for row in rows:
            seed_sets.setdefault(row["user_id"], []).append(row["artist_id"])
        return seed_sets

    async def load_seed_set(self, user_id: str) -> list[ArtistNode]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_SEEDS_SQL, (user_id,))
            rows = await cursor.fetchall()

        return [
            ArtistNode(
                artist_id=row["artist_id"],
                display_name=row["artist_name"],
                image_url=row["image_url"],
                kind=ArtistKind.SEED,
            )
            for row in rows
        ]

    async def load_computed_set(self, user_id: str) -> list[RankedArtist]:
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_COMPUTED_SQL, (user_id,))
            rows = await cursor.fetchall()

        return [
            RankedArtist(
                artist_id=row["artist_id"],
                display_name=row["artist_name"],
                image_url=row["image_url"],
                score=row["score"],
            )
            for row in rows
        ]

    async def replace_seed_set(self, user_id: str, seeds: list[ArtistNode]) -> None:
        async with self._transaction() as db:
            await self._write_seeds(db, user_id, seeds)
        logger.info("seed_set_replaced", user_id=user_id, seed_count=len(seeds))

    async def replace_computed_set(self, user_id: str, computed: list[RankedArtist]) -> None:
        async with self._transaction() as db:
            await self._write_computed(db, user_id, computed)
        logger.info("computed_set_replaced", user_id=user_id, computed_count=len(computed))

    async def replace_user_artists(
        self,
        user_id: str,
        seeds: list[ArtistNode],
        computed: list[RankedArtist],
    ) -> None:
        async with self._transaction() as db:
            await self._write_seeds(db, user_id, seeds)
            await self._write_computed(db, user_id, computed)
        logger.info(
            "user_artists_replaced",
            user_id=user_id,
            seed_count=len(seeds),
            computed_count=len(computed),
        )

    async def upsert_profile(self, profile: UserProfile) -> UserProfile:
        async with self._transaction() as db:
            await db.execute(
                _UPSERT_PROFILE_SQL,
                (profile.user_id, profile.nickname, profile.profile_image_url, profile.bio),
            )
        logger.info("profile_saved", user_id=profile.user_id)
        return profile

    async def load_profiles(self, user_ids: Iterable[str]) -> dict[str, UserProfile]:
        ids = list(dict.fromkeys(user_ids))
        if not ids:
            return {}

        placeholders = ", ".join("?" for _ in ids)
        async with self._connect() as db:
            cursor = await db.execute(_SELECT_PROFILES_SQL.format(placeholders=placeholders), ids)
            rows = await cursor.fetchall()

        return {
            row["user_id"]: UserProfile(
                user_id=row["user_id"],
                nickname=row["nickname"],
                profile_image_url=row["profile_image_url"],
                bio=row["bio"],
            )
            for row in rows
        }

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME
