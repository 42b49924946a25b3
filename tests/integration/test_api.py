"""Integration tests for FastAPI API endpoints using TestClient.

The app is assembled the way ``src.main.create_app`` does it (router plus
middleware), with real services, a temp SQLite store and a mocked artist
source.
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.api.middleware import ErrorHandlingMiddleware, RequestLoggingMiddleware
from src.api.routes import router as api_router
from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.providers.artist_store.sqlite_artist_store import SQLiteArtistStore
from src.services.centrality_ranker import CentralityRanker
from src.services.graph_builder import GraphBuilder
from src.services.match_service import MatchService
from src.services.recommendation_service import RecommendationService
from src.services.relation_fetcher import RelationFetcher
from src.utils.errors import PersistenceError, RankingError
from tests.conftest import build_artist_source

_RELATED = {
    "A": ["B", "C"],
    "X": ["Y"],
    "Q": [],
}


def _build_app(source, store, timeout: float = 5.0) -> FastAPI:  # noqa: ANN001
    app = FastAPI()
    app.add_middleware(ErrorHandlingMiddleware)
    app.add_middleware(RequestLoggingMiddleware)
    app.include_router(api_router)

    app.state.artist_store = store
    app.state.recommendation_service = RecommendationService(
        source=source,
        store=store,
        graph_builder=GraphBuilder(RelationFetcher(source)),
        ranker=CentralityRanker(),
    )
    app.state.match_service = MatchService(store)
    app.state.recommendation_timeout = timeout
    app.state.provider_registry = {"artist_source": True, "artist_store": True, "cache": True}
    return app


@pytest.fixture
def store(tmp_path: Path) -> SQLiteArtistStore:
    store = SQLiteArtistStore(db_path=tmp_path / "api.db")
    asyncio.run(store.initialize())
    return store


@pytest.fixture
def client(store: SQLiteArtistStore) -> TestClient:
    return TestClient(_build_app(build_artist_source(related=_RELATED), store))


# ---------------------------------------------------------------------------
# Recommendations
# ---------------------------------------------------------------------------


class TestRecommendations:
    def test_returns_ranked_artists(self, client: TestClient) -> None:
        resp = client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A"]})

        assert resp.status_code == 200
        body = resp.json()
        assert [r["artist_id"] for r in body["recommendations"]] == ["B", "C"]
        assert body["seed_artists"][0]["artist_id"] == "A"
        assert body["graph_nodes"] == 3

    def test_no_relations_is_empty_200(self, client: TestClient) -> None:
        resp = client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["Q"]})

        assert resp.status_code == 200
        assert resp.json()["recommendations"] == []

    def test_too_many_seeds_is_400(self, client: TestClient) -> None:
        resp = client.post(
            "/api/v1/users/u1/recommendations",
            json={"seed_artist_ids": ["A", "B", "C", "D"]},
        )

        assert resp.status_code == 400
        assert "between 1 and 3" in resp.json()["detail"]

    def test_no_seeds_is_400(self, client: TestClient) -> None:
        resp = client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": []})
        assert resp.status_code == 400

    def test_malformed_body_is_422(self, client: TestClient) -> None:
        resp = client.post("/api/v1/users/u1/recommendations", json={"seeds": "A"})
        assert resp.status_code == 422

    def test_persistence_failure_is_503(self) -> None:
        failing = MagicMock(spec=IArtistStoreProvider)
        failing.replace_user_artists = AsyncMock(side_effect=PersistenceError("locked"))
        client = TestClient(_build_app(build_artist_source(related=_RELATED), failing))

        resp = client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A"]})

        assert resp.status_code == 503

    def test_timeout_is_503(self, store: SQLiteArtistStore) -> None:
        source = build_artist_source(related=_RELATED)

        async def _slow(artist_id: str):  # noqa: ANN202
            await asyncio.sleep(5)
            return []

        source.get_related_artists = AsyncMock(side_effect=_slow)
        client = TestClient(_build_app(source, store, timeout=0.05))

        resp = client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A"]})

        assert resp.status_code == 503
        assert "timed out" in resp.json()["detail"]

    def test_ranking_error_is_500_error_response(self, store: SQLiteArtistStore) -> None:
        app = _build_app(build_artist_source(related=_RELATED), store)
        ranker = MagicMock(spec=CentralityRanker)
        ranker.rank.side_effect = RankingError("did not converge")
        app.state.recommendation_service._ranker = ranker

        resp = TestClient(app).post(
            "/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A"]}
        )

        assert resp.status_code == 500
        assert resp.json() == {"error": "RankingError", "detail": "did not converge"}


# ---------------------------------------------------------------------------
# Stored artists, profiles and matches
# ---------------------------------------------------------------------------


class TestUserArtists:
    def test_stored_after_compute(self, client: TestClient) -> None:
        client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A"]})

        resp = client.get("/api/v1/users/u1/artists")

        assert resp.status_code == 200
        body = resp.json()
        assert [s["artist_id"] for s in body["seed_artists"]] == ["A"]
        assert [c["artist_id"] for c in body["computed_artists"]] == ["B", "C"]

    def test_unknown_user_is_empty(self, client: TestClient) -> None:
        resp = client.get("/api/v1/users/nobody/artists")
        assert resp.status_code == 200
        assert resp.json()["seed_artists"] == []

    def test_store_failure_is_503_error_response(self) -> None:
        failing = MagicMock(spec=IArtistStoreProvider)
        failing.load_seed_set = AsyncMock(side_effect=PersistenceError("gone"))
        client = TestClient(_build_app(build_artist_source(), failing))

        resp = client.get("/api/v1/users/u1/artists")

        assert resp.status_code == 503
        assert resp.json()["error"] == "PersistenceError"


class TestMatches:
    def test_matches_with_profile(self, client: TestClient) -> None:
        client.post("/api/v1/users/u1/recommendations", json={"seed_artist_ids": ["A", "X"]})
        client.post("/api/v1/users/u2/recommendations", json={"seed_artist_ids": ["X"]})
        client.post("/api/v1/users/u3/recommendations", json={"seed_artist_ids": ["Q"]})
        profile = client.put("/api/v1/users/u2/profile", json={"nickname": "Dub Techno Fan"})
        assert profile.status_code == 200

        resp = client.get("/api/v1/users/u1/matches")

        assert resp.status_code == 200
        matches = resp.json()["matches"]
        assert len(matches) == 1
        assert matches[0]["matched_user_id"] == "u2"
        assert matches[0]["score"] == 1
        assert matches[0]["shared_artists"] == ["X"]
        assert matches[0]["profile"]["nickname"] == "Dub Techno Fan"

    def test_no_matches_is_empty_200(self, client: TestClient) -> None:
        resp = client.get("/api/v1/users/loner/matches")
        assert resp.status_code == 200
        assert resp.json()["matches"] == []

    def test_profile_validation(self, client: TestClient) -> None:
        resp = client.put("/api/v1/users/u1/profile", json={"nickname": ""})
        assert resp.status_code == 422


class TestHealth:
    def test_healthy(self, client: TestClient) -> None:
        resp = client.get("/api/v1/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "healthy"

    def test_degraded_without_source(self, store: SQLiteArtistStore) -> None:
        app = _build_app(build_artist_source(), store)
        app.state.provider_registry["artist_source"] = False

        resp = TestClient(app).get("/api/v1/health")

        assert resp.json()["status"] == "degraded"
