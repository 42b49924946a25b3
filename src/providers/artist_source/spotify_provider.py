"""Spotify Web API provider implementing IArtistSourceProvider.

Talks to the Spotify Web API over a shared ``httpx.AsyncClient``.  Catalogue
calls (artist lookup, related artists, genre search) authenticate with an
app token obtained through the client-credentials flow and cached until it
expires.  The top-artists call uses the token of the requesting user, which
the surrounding application supplies; this provider never runs the user
OAuth flow itself.

Requests are throttled to a minimum interval so a burst of concurrent
relation fetches does not trip Spotify's rolling rate limit.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any

import httpx

from src.config.settings import Settings
from src.interfaces.artist_source_provider import IArtistSourceProvider
from src.models.artist import ArtistKind, ArtistNode
from src.utils.errors import ArtistSourceError, RateLimitError
from src.utils.logging import get_logger

_PROVIDER_NAME = "spotify"
# Refresh the app token this many seconds before Spotify says it expires.
_TOKEN_EXPIRY_MARGIN = 30.0
_MAX_SEARCH_LIMIT = 50


def artist_from_payload(data: dict[str, Any]) -> ArtistNode:
    """Build an ``ArtistNode`` from a Spotify artist object."""
    images = data.get("images") or []
    image_url = images[0].get("url") if images else None
    artist_id = data.get("id") or ""
    return ArtistNode(
        artist_id=artist_id,
        display_name=data.get("name") or artist_id,
        image_url=image_url,
        kind=ArtistKind.RELATED,
        genres=tuple(data.get("genres") or ()),
    )


def _artists_from_list(items: list[dict[str, Any]]) -> list[ArtistNode]:
    # Spotify occasionally returns null entries in artist arrays.
    return [artist_from_payload(item) for item in items if item and item.get("id")]


class SpotifyArtistProvider(IArtistSourceProvider):
    """Artist-relation source backed by the Spotify Web API.

    Parameters
    ----------
    settings:
        Application settings carrying client credentials, base URLs and
        the minimum request interval.
    http_client:
        Shared async HTTP client.  The caller owns its lifecycle.
    """

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient) -> None:
        self._settings = settings
        self._http = http_client
        self._base_url = settings.spotify_api_base_url.rstrip("/")
        self._access_token: str | None = None
        self._token_expires_at: float = 0.0
        self._token_lock = asyncio.Lock()
        self._throttle_lock = asyncio.Lock()
        self._last_request_time: float = 0.0
        self._logger = get_logger(__name__)

    # -- Private helpers -------------------------------------------------------

    async def _throttle(self) -> None:
        """Enforce the minimum interval between consecutive API requests."""
        async with self._throttle_lock:
            interval = self._settings.spotify_min_request_interval
            elapsed = time.monotonic() - self._last_request_time
            if self._last_request_time > 0 and elapsed < interval:
                await asyncio.sleep(interval - elapsed)
            self._last_request_time = time.monotonic()

    async def _get_app_token(self) -> str:
        """Return a valid client-credentials token, fetching a new one if needed."""
        async with self._token_lock:
            if self._access_token and time.monotonic() < self._token_expires_at:
                return self._access_token

            if not self.is_available():
                raise ArtistSourceError(
                    message="Spotify client credentials are not configured",
                    provider_name=_PROVIDER_NAME,
                )

            try:
                response = await self._http.post(
                    self._settings.spotify_token_url,
                    data={"grant_type": "client_credentials"},
                    auth=(self._settings.spotify_client_id, self._settings.spotify_client_secret),
                    timeout=self._settings.spotify_timeout,
                )
                response.raise_for_status()
            except httpx.HTTPError as exc:
                raise ArtistSourceError(
                    message=f"Spotify token request failed: {exc}",
                    provider_name=_PROVIDER_NAME,
                ) from exc

            try:
                payload = response.json()
                self._access_token = payload["access_token"]
                expires_in = float(payload.get("expires_in", 3600))
            except (ValueError, KeyError, TypeError, AttributeError) as exc:
                raise ArtistSourceError(
                    message="Spotify token response was malformed",
                    provider_name=_PROVIDER_NAME,
                ) from exc
            self._token_expires_at = time.monotonic() + max(expires_in - _TOKEN_EXPIRY_MARGIN, 0.0)
            self._logger.debug("spotify_token_refreshed", expires_in=expires_in)
            return self._access_token

    async def _get_json(
        self,
        path: str,
        params: dict[str, Any] | None = None,
        user_token: str | None = None,
    ) -> dict[str, Any] | None:
        """GET *path* and return the decoded body, or ``None`` on HTTP 404.

        Raises ``RateLimitError`` on HTTP 429 and ``ArtistSourceError`` on
        any other HTTP or transport failure, or when the body is not a JSON
        object.
        """
        token = user_token or await self._get_app_token()
        if self._settings.spotify_market:
            params = {**(params or {}), "market": self._settings.spotify_market}

        await self._throttle()
        url = f"{self._base_url}{path}"
        try:
            response = await self._http.get(
                url,
                params=params,
                headers={"Authorization": f"Bearer {token}"},
                timeout=self._settings.spotify_timeout,
            )
        except httpx.HTTPError as exc:
            raise ArtistSourceError(
                message=f"Spotify request to {path} failed: {exc}",
                provider_name=_PROVIDER_NAME,
            ) from exc

        if response.status_code == 404:
            return None
        if response.status_code == 429:
            retry_after = response.headers.get("Retry-After")
            raise RateLimitError(
                message=f"Spotify rate limit hit on {path}",
                provider_name=_PROVIDER_NAME,
                retry_after=float(retry_after) if retry_after else None,
            )
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise ArtistSourceError(
                message=f"Spotify returned HTTP {response.status_code} for {path}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        try:
            payload = response.json()
        except ValueError as exc:
            raise ArtistSourceError(
                message=f"Spotify returned a non-JSON body for {path}",
                provider_name=_PROVIDER_NAME,
            ) from exc
        if not isinstance(payload, dict):
            raise ArtistSourceError(
                message=f"Spotify returned an unexpected payload for {path}",
                provider_name=_PROVIDER_NAME,
            )
        return payload

    # -- IArtistSourceProvider implementation ---------------------------------

    async def get_artist(self, artist_id: str) -> ArtistNode | None:
        data = await self._get_json(f"/artists/{artist_id}")
        if not data or not data.get("id"):
            return None
        return artist_from_payload(data)

    async def get_related_artists(self, artist_id: str) -> list[ArtistNode]:
        data = await self._get_json(f"/artists/{artist_id}/related-artists")
        if not data:
            return []
        related = _artists_from_list(data.get("artists") or [])
        self._logger.debug("spotify_related_artists", artist_id=artist_id, count=len(related))
        return related

    async def search_artists_by_genre(
        self, genre: str, exclude_id: str, limit: int
    ) -> list[ArtistNode]:
        if limit <= 0:
            return []
        # Ask for one extra so dropping exclude_id still leaves `limit` results.
        request_limit = min(limit + 1, _MAX_SEARCH_LIMIT)
        data = await self._get_json(
            "/search",
            params={"q": f'genre:"{genre}"', "type": "artist", "limit": request_limit},
        )
        if not data:
            return []
        items = (data.get("artists") or {}).get("items") or []
        found = [a for a in _artists_from_list(items) if a.artist_id != exclude_id]
        return found[:limit]

    async def get_top_artists(self, user_token: str) -> list[ArtistNode]:
        data = await self._get_json(
            "/me/top/artists",
            params={"limit": _MAX_SEARCH_LIMIT},
            user_token=user_token,
        )
        if not data:
            return []
        return _artists_from_list(data.get("items") or [])

    def get_provider_name(self) -> str:
        return _PROVIDER_NAME

    def is_available(self) -> bool:
        return self._settings.has_spotify_credentials()
