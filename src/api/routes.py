"""FastAPI API routes for TasteGraph.

Provides REST endpoints for computing recommendations from seed artists,
reading a user's stored artists, finding users with overlapping taste,
maintaining the profile shown on matches, and a health check.  Service
dependencies are resolved from ``app.state`` via FastAPI's ``Depends``
using the ``Annotated`` pattern.

# ─── API ROUTE MAP ────────────────────────────────────────────────────
#
# Endpoint                                  Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/v1/users/{uid}/recommendations       POST    Seeds → graph → top 5
# /api/v1/users/{uid}/artists               GET     Stored seed + computed sets
# /api/v1/users/{uid}/matches               GET     Users with shared seeds
# /api/v1/users/{uid}/profile               PUT     Nickname / image / bio
# /api/v1/health                            GET     Health check
#
# Status codes: an empty recommendation or match list is a normal 200.
# Invalid seeds → 400.  Storage failure or timeout → 503.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import asyncio
from typing import Annotated, Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request

from src.api.schemas import (
    ArtistResponse,
    HealthResponse,
    MatchesResponse,
    MatchResponse,
    ProfileRequest,
    ProfileResponse,
    RankedArtistResponse,
    RecommendationsRequest,
    RecommendationsResponse,
    UserArtistsResponse,
)
from src.interfaces.artist_store_provider import IArtistStoreProvider
from src.models.artist import UserProfile
from src.services.match_service import MatchService
from src.services.recommendation_service import RecommendationService
from src.utils.errors import InvalidSeedSetError, PersistenceError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

router = APIRouter(prefix="/api/v1")

_VERSION = "0.1.0"
_DEFAULT_RECO_TIMEOUT = 60.0  # seconds


# ---------------------------------------------------------------------------
# Dependency helpers
#
#   1. A helper extracts a service from app.state (populated in main.py)
#   2. An Annotated alias binds it: XDep = Annotated[XType, Depends(helper)]
#   3. Routes declare XDep params; tests override via app.state
# ---------------------------------------------------------------------------


def _get_recommendation_service(request: Request) -> RecommendationService:
    """Return the recommendation service from application state."""
    return request.app.state.recommendation_service


def _get_match_service(request: Request) -> MatchService:
    """Return the match service from application state."""
    return request.app.state.match_service


def _get_artist_store(request: Request) -> IArtistStoreProvider:
    """Return the artist store from application state."""
    return request.app.state.artist_store


def _get_recommendation_timeout(request: Request) -> float:
    return float(getattr(request.app.state, "recommendation_timeout", _DEFAULT_RECO_TIMEOUT))


RecommendationServiceDep = Annotated[RecommendationService, Depends(_get_recommendation_service)]
MatchServiceDep = Annotated[MatchService, Depends(_get_match_service)]
ArtistStoreDep = Annotated[IArtistStoreProvider, Depends(_get_artist_store)]
TimeoutDep = Annotated[float, Depends(_get_recommendation_timeout)]


# ---------------------------------------------------------------------------
# User endpoints
# ---------------------------------------------------------------------------


@router.post(
    "/users/{user_id}/recommendations",
    response_model=RecommendationsResponse,
    summary="Compute recommendations from 1-3 seed artists",
)
async def create_recommendations(
    user_id: str,
    body: RecommendationsRequest,
    service: RecommendationServiceDep,
    timeout: TimeoutDep,
) -> RecommendationsResponse:
    """Build the affinity graph for the seeds, rank it, store the top artists.

    Replaces the user's stored seed and computed sets.  Returns 200 with an
    empty list when the seeds have no discoverable relations.
    """
    try:
        result = await asyncio.wait_for(
            service.compute_recommendations(
                user_id,
                body.seed_artist_ids,
                user_token=body.user_token,
            ),
            timeout=timeout,
        )
    except InvalidSeedSetError as exc:
        raise HTTPException(status_code=400, detail=exc.message) from exc
    except asyncio.TimeoutError as exc:
        _logger.warning("recommendation_timeout", user_id=user_id, timeout=timeout)
        raise HTTPException(
            status_code=503,
            detail=f"Recommendations timed out after {timeout:.0f} seconds",
        ) from exc
    except PersistenceError as exc:
        _logger.error("recommendation_persist_failed", user_id=user_id, error=exc.message)
        raise HTTPException(status_code=503, detail="Failed to store recommendations") from exc

    return RecommendationsResponse(
        user_id=result.user_id,
        seed_artists=[ArtistResponse.from_node(a) for a in result.seed_artists],
        recommendations=[RankedArtistResponse.from_ranked(a) for a in result.recommendations],
        graph_nodes=result.graph_nodes,
        graph_edges=result.graph_edges,
        generated_at=result.generated_at,
    )


@router.get(
    "/users/{user_id}/artists",
    response_model=UserArtistsResponse,
    summary="Stored seed artists and computed recommendations",
)
async def get_user_artists(
    user_id: str,
    service: RecommendationServiceDep,
) -> UserArtistsResponse:
    stored = await service.get_user_artists(user_id)
    return UserArtistsResponse(
        user_id=stored.user_id,
        seed_artists=[ArtistResponse.from_node(a) for a in stored.seed_artists],
        computed_artists=[RankedArtistResponse.from_ranked(a) for a in stored.computed_artists],
    )


@router.get(
    "/users/{user_id}/matches",
    response_model=MatchesResponse,
    summary="Users sharing seed artists, highest overlap first",
)
async def get_matches(user_id: str, service: MatchServiceDep) -> MatchesResponse:
    candidates = await service.compute_matches(user_id)
    return MatchesResponse(
        user_id=user_id,
        matches=[MatchResponse.from_candidate(c) for c in candidates],
    )


@router.put(
    "/users/{user_id}/profile",
    response_model=ProfileResponse,
    summary="Create or update the profile shown on matches",
)
async def put_profile(
    user_id: str,
    body: ProfileRequest,
    store: ArtistStoreDep,
) -> ProfileResponse:
    profile = UserProfile(
        user_id=user_id,
        nickname=body.nickname.strip() or user_id,
        profile_image_url=body.profile_image_url,
        bio=body.bio,
    )
    await store.upsert_profile(profile)
    _logger.info("profile_updated", user_id=user_id)
    return ProfileResponse.from_profile(profile)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Return application health, version, and provider availability."""
    providers: dict[str, Any] = {}
    if hasattr(request.app.state, "provider_registry"):
        providers = dict(request.app.state.provider_registry)

    # The engine still answers without Spotify credentials (only the
    # user-token fallback works), so a missing source is "degraded".
    if not providers.get("artist_store", False):
        status = "unhealthy"
    elif providers.get("artist_source", False):
        status = "healthy"
    else:
        status = "degraded"

    return HealthResponse(status=status, version=_VERSION, providers=providers)
