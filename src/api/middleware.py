"""API middleware - CORS, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, structured request logging (via structlog), and automatic
conversion of ``TasteGraphError`` subclasses into JSON ``ErrorResponse``
bodies.

# ─── MIDDLEWARE EXECUTION ORDER ───────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)    # inner
#     app.add_middleware(RequestLoggingMiddleware)   # outermost
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → route handler
#
# So RequestLoggingMiddleware sees the *final* status code, including the
# one ErrorHandlingMiddleware chose for an application error.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import InvalidSeedSetError, PersistenceError, TasteGraphError
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

# Application errors that are not a server fault map to specific statuses;
# everything else under TasteGraphError is a 500.
_STATUS_BY_ERROR: dict[type[TasteGraphError], int] = {
    InvalidSeedSetError: 400,
    PersistenceError: 503,
}


def status_for_error(exc: TasteGraphError) -> int:
    """Return the HTTP status code for an application error."""
    for error_type, status_code in _STATUS_BY_ERROR.items():
        if isinstance(exc, error_type):
            return status_code
    return 500


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Let browser front-ends on *allowed_origins* call the API (all origins when unset)."""
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Emit one ``http_request`` event per call with its final status and latency."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            return response
        finally:
            _logger.info(
                "http_request",
                method=request.method,
                path=str(request.url.path),
                status=response.status_code if response else 500,
                duration_ms=round((time.perf_counter() - start) * 1000, 2),
            )


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Catch ``TasteGraphError`` subclasses and return structured JSON errors.

    The client only sees the exception class name and its message; stack
    traces stay in the server log.  Generic Python exceptions bubble up to
    FastAPI's default 500 handler.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except TasteGraphError as exc:
            status_code = status_for_error(exc)
            log = _logger.warning if status_code < 500 else _logger.error
            log(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                path=str(request.url.path),
                status=status_code,
            )
            body = ErrorResponse(error=type(exc).__name__, detail=exc.message)
            return JSONResponse(status_code=status_code, content=body.model_dump())
