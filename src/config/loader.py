"""YAML configuration loader with environment variable overrides.

# ─── CONFIGURATION HIERARCHY ──────────────────────────────────────────
#
# Configuration is loaded in layers (later layers override earlier):
#
#   1. config/config.yaml  - Engine defaults checked into the repo
#   2. .env file           - Local developer overrides (not committed)
#   3. Environment vars    - Set at deploy time
#
# load_config() reads the YAML file first, then deep-merges the
# Settings-derived values on top:
#   base = {"graph": {"max_hops": 1}}
#   overrides = {"app": {"env": "production"}}
#   result = {"graph": {"max_hops": 1}, "app": {"env": "production"}}
# ──────────────────────────────────────────────────────────────────────
"""

from pathlib import Path
from typing import Any

import yaml

from src.config.settings import Settings
from src.utils.errors import ConfigurationError

# Engine defaults used when config.yaml is missing or omits a key.
DEFAULT_ENGINE_CONFIG: dict[str, Any] = {
    "graph": {
        "max_hops": 1,
        "max_related": 10,
        "fetch_concurrency": 3,
    },
    "ranking": {
        "damping": 0.85,
        "max_iter": 100,
        "tol": 1.0e-6,
    },
    "recommendations": {
        "top_n": 5,
        "timeout": 60.0,
    },
}


def load_config(path: str = "config/config.yaml", settings: Settings | None = None) -> dict:
    """Load YAML config and merge with environment-based Settings.

    Args:
        path: Path to the YAML configuration file.
        settings: Settings instance to read overrides from.  A fresh
            ``Settings()`` is built when omitted.

    Returns:
        Fully resolved configuration dictionary.

    Raises:
        ConfigurationError: If the YAML file is malformed or not a mapping.
    """
    config: dict[str, Any] = {}
    _deep_merge(config, _copy_defaults())

    config_path = Path(path)
    if config_path.exists():
        try:
            with open(config_path) as f:
                yaml_config = yaml.safe_load(f) or {}
        except yaml.YAMLError as exc:
            raise ConfigurationError(message=f"Invalid YAML in {config_path}: {exc}") from exc
        if not isinstance(yaml_config, dict):
            raise ConfigurationError(message=f"{config_path} must contain a mapping")
        _deep_merge(config, yaml_config)

    settings = settings or Settings()
    env_overrides = {
        "app": {
            "host": settings.app_host,
            "port": settings.app_port,
            "env": settings.app_env,
        },
        "spotify": {
            "configured": settings.has_spotify_credentials(),
            "api_base_url": settings.spotify_api_base_url,
            "market": settings.spotify_market,
        },
        "storage": {
            "artist_db_path": settings.artist_db_path,
        },
        "logging": {
            "level": settings.log_level,
        },
    }

    _deep_merge(config, env_overrides)
    return config


def _copy_defaults() -> dict[str, Any]:
    return {section: dict(values) for section, values in DEFAULT_ENGINE_CONFIG.items()}


def _deep_merge(base: dict, overrides: dict) -> None:
    """Recursively merge overrides into base dict, mutating base in place."""
    for key, value in overrides.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
