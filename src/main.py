"""TasteGraph FastAPI application entry point.

Wires together providers, services, and routes via dependency injection.
Loads configuration from ``.env`` and ``config/config.yaml`` and configures
structured logging.

``build_engine`` is also used by the CLI to get the same object graph
outside the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
)
from src.api.routes import router as api_router
from src.config.loader import load_config
from src.config.settings import Settings
from src.providers.artist_source.spotify_provider import SpotifyArtistProvider
from src.providers.artist_store.sqlite_artist_store import SQLiteArtistStore
from src.services.centrality_ranker import CentralityRanker
from src.services.graph_builder import GraphBuilder
from src.services.match_service import MatchService
from src.services.recommendation_service import RecommendationService
from src.services.relation_fetcher import RelationFetcher
from src.utils.logging import configure_logging, get_logger

_VERSION = "0.1.0"

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component construction
# ---------------------------------------------------------------------------


def build_engine(
    app_settings: Settings,
    engine_config: dict[str, Any],
    http_client: httpx.AsyncClient,
) -> dict[str, Any]:
    """Construct providers and services around an existing HTTP client.

    Returns a flat dict of named components.
    """
    graph_cfg = engine_config.get("graph", {})
    ranking_cfg = engine_config.get("ranking", {})
    reco_cfg = engine_config.get("recommendations", {})

    # -- Providers --
    artist_source = SpotifyArtistProvider(settings=app_settings, http_client=http_client)
    artist_store = SQLiteArtistStore(db_path=app_settings.artist_db_path)

    # -- Engine --
    fetcher = RelationFetcher(
        source=artist_source,
        max_related=int(graph_cfg.get("max_related", 10)),
    )
    graph_builder = GraphBuilder(
        fetcher=fetcher,
        max_hops=int(graph_cfg.get("max_hops", 1)),
        fetch_concurrency=int(graph_cfg.get("fetch_concurrency", 3)),
    )
    ranker = CentralityRanker(
        damping=float(ranking_cfg.get("damping", 0.85)),
        max_iter=int(ranking_cfg.get("max_iter", 100)),
        tol=float(ranking_cfg.get("tol", 1.0e-6)),
    )

    # -- Services --
    recommendation_service = RecommendationService(
        source=artist_source,
        store=artist_store,
        graph_builder=graph_builder,
        ranker=ranker,
        top_n=int(reco_cfg.get("top_n", 5)),
    )
    match_service = MatchService(store=artist_store)

    return {
        "artist_source": artist_source,
        "artist_store": artist_store,
        "recommendation_service": recommendation_service,
        "match_service": match_service,
        "recommendation_timeout": float(reco_cfg.get("timeout", 60.0)),
    }


def _build_all(app_settings: Settings, engine_config: dict[str, Any]) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    """
    http_client = httpx.AsyncClient(timeout=app_settings.spotify_timeout)
    components = build_engine(app_settings, engine_config, http_client)

    components["http_client"] = http_client
    components["provider_registry"] = {
        "artist_source": components["artist_source"].is_available(),
        "artist_store": True,
        "cache": True,
    }
    return components


# ---------------------------------------------------------------------------
# Application lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise all providers and services on startup, clean up on shutdown."""
    components = _build_all(settings, config)

    for key, value in components.items():
        setattr(application.state, key, value)

    # Creates tables if needed
    await application.state.artist_store.initialize()

    _logger.info(
        "app_startup",
        version=_VERSION,
        environment=settings.app_env,
        artist_source=components["artist_source"].get_provider_name(),
        spotify_configured=settings.has_spotify_credentials(),
        artist_store=components["artist_store"].get_provider_name(),
    )

    yield

    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="TasteGraph API",
        version=_VERSION,
        description=(
            "Pick up to three artists you like; TasteGraph expands them into an "
            "affinity graph, ranks it with PageRank and recommends the most "
            "central artists.  Users who share seed artists are matched."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
