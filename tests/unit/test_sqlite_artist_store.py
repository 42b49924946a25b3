"""Unit tests for SQLiteArtistStore."""

from __future__ import annotations

from pathlib import Path

import pytest

from src.models.artist import ArtistKind, RankedArtist, UserProfile
from src.providers.artist_store.sqlite_artist_store import SQLiteArtistStore
from src.utils.errors import PersistenceError
from tests.conftest import make_artist


def _ranked(artist_id: str, score: float) -> RankedArtist:
    return RankedArtist(artist_id=artist_id, display_name=artist_id.upper(), score=score)


class TestSeedSets:
    @pytest.mark.asyncio
    async def test_replace_and_load_seed_set(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_seed_set("u1", [make_artist("b"), make_artist("a")])

        seeds = await artist_store.load_seed_set("u1")

        assert [s.artist_id for s in seeds] == ["b", "a"]
        assert all(s.kind == ArtistKind.SEED for s in seeds)
        assert seeds[0].image_url == "https://img.example/b.jpg"

    @pytest.mark.asyncio
    async def test_replace_overwrites_previous_set(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_seed_set("u1", [make_artist("a"), make_artist("b")])
        await artist_store.replace_seed_set("u1", [make_artist("c")])

        seeds = await artist_store.load_seed_set("u1")

        assert [s.artist_id for s in seeds] == ["c"]

    @pytest.mark.asyncio
    async def test_load_all_seed_sets(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_seed_set("u1", [make_artist("x"), make_artist("y")])
        await artist_store.replace_seed_set("u2", [make_artist("y")])

        seed_sets = await artist_store.load_seed_sets_for_all_users()

        assert seed_sets == {"u1": ["x", "y"], "u2": ["y"]}

    @pytest.mark.asyncio
    async def test_unknown_user_empty(self, artist_store: SQLiteArtistStore) -> None:
        assert await artist_store.load_seed_set("nobody") == []
        assert await artist_store.load_computed_set("nobody") == []


class TestComputedSets:
    @pytest.mark.asyncio
    async def test_loaded_by_score_descending(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_computed_set(
            "u1", [_ranked("low", 0.1), _ranked("high", 0.4), _ranked("mid", 0.2)]
        )

        computed = await artist_store.load_computed_set("u1")

        assert [c.artist_id for c in computed] == ["high", "mid", "low"]
        assert computed[0].score == pytest.approx(0.4)

    @pytest.mark.asyncio
    async def test_equal_scores_keep_stored_order(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_computed_set("u1", [_ranked("first", 0.2), _ranked("second", 0.2)])

        computed = await artist_store.load_computed_set("u1")

        assert [c.artist_id for c in computed] == ["first", "second"]


class TestReplaceUserArtists:
    @pytest.mark.asyncio
    async def test_replaces_both_sets(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_user_artists("u1", [make_artist("s")], [_ranked("r", 0.3)])

        assert [s.artist_id for s in await artist_store.load_seed_set("u1")] == ["s"]
        assert [c.artist_id for c in await artist_store.load_computed_set("u1")] == ["r"]

    @pytest.mark.asyncio
    async def test_failure_leaves_prior_state_intact(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_user_artists("u1", [make_artist("old")], [_ranked("kept", 0.5)])
        # Bypasses validation so the score CHECK constraint fails mid-transaction.
        bad = RankedArtist.model_construct(
            artist_id="bad", display_name="Bad", image_url=None, score=-1.0
        )

        with pytest.raises(PersistenceError):
            await artist_store.replace_user_artists(
                "u1", [make_artist("new")], [_ranked("fine", 0.2), bad]
            )

        assert [s.artist_id for s in await artist_store.load_seed_set("u1")] == ["old"]
        assert [c.artist_id for c in await artist_store.load_computed_set("u1")] == ["kept"]

    @pytest.mark.asyncio
    async def test_users_are_isolated(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.replace_user_artists("u1", [make_artist("a")], [])
        await artist_store.replace_user_artists("u2", [make_artist("b")], [])

        assert [s.artist_id for s in await artist_store.load_seed_set("u1")] == ["a"]


class TestProfiles:
    @pytest.mark.asyncio
    async def test_upsert_and_load(self, artist_store: SQLiteArtistStore) -> None:
        await artist_store.upsert_profile(UserProfile(user_id="u1", nickname="first"))
        await artist_store.upsert_profile(
            UserProfile(user_id="u1", nickname="second", bio="hello")
        )

        profiles = await artist_store.load_profiles(["u1", "missing"])

        assert set(profiles) == {"u1"}
        assert profiles["u1"].nickname == "second"
        assert profiles["u1"].bio == "hello"

    @pytest.mark.asyncio
    async def test_load_profiles_empty_input(self, artist_store: SQLiteArtistStore) -> None:
        assert await artist_store.load_profiles([]) == {}


class TestErrors:
    @pytest.mark.asyncio
    async def test_uninitialised_database_raises_persistence_error(self, tmp_path: Path) -> None:
        store = SQLiteArtistStore(db_path=tmp_path / "empty.db")

        with pytest.raises(PersistenceError) as exc_info:
            await store.load_seed_set("u1")

        assert exc_info.value.provider_name == "sqlite_artist_store"

    @pytest.mark.asyncio
    async def test_initialize_creates_parent_directory(self, tmp_path: Path) -> None:
        store = SQLiteArtistStore(db_path=tmp_path / "nested" / "dir" / "db.sqlite")

        await store.initialize()

        assert (tmp_path / "nested" / "dir" / "db.sqlite").exists()
        assert store.get_provider_name() == "sqlite_artist_store"
