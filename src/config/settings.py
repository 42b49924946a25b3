"""Application settings loaded from environment variables via pydantic-settings.

# ─── HOW SETTINGS WORK ────────────────────────────────────────────────
#
# pydantic-settings reads configuration from two sources, in priority order:
#
#   1. **Environment variables** - e.g. SPOTIFY_CLIENT_ID=abc123
#   2. **.env file** - key=value lines in the project root .env file
#
# Field ``spotify_client_id`` maps to env var ``SPOTIFY_CLIENT_ID``.
# Defaults apply when neither source sets a field.
#
# Engine tuning (damping factor, hop depth, result cap) lives in
# config/config.yaml instead; see src/config/loader.py.
# ──────────────────────────────────────────────────────────────────────
"""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """tastegraph application settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8")

    # === Artist relation source (Spotify Web API) ===
    # Empty credentials = "not configured": the source reports itself
    # unavailable and every relation fetch degrades to an empty list.
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_api_base_url: str = "https://api.spotify.com/v1"
    spotify_token_url: str = "https://accounts.spotify.com/api/token"
    spotify_market: str = ""
    spotify_min_request_interval: float = 0.1  # seconds between API calls
    spotify_timeout: float = 10.0

    # === Persistence ===
    artist_db_path: str = "data/tastegraph.db"

    # === App Config ===
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_env: str = "development"
    log_level: str = "INFO"

    def has_spotify_credentials(self) -> bool:
        """Return True when both Spotify client credentials are configured."""
        return bool(self.spotify_client_id and self.spotify_client_secret)
