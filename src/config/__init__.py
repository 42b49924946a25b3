"""Engine configuration: environment-backed Settings plus the layered YAML loader."""

from src.config.loader import DEFAULT_ENGINE_CONFIG, load_config
from src.config.settings import Settings

settings = Settings()

__all__ = ["DEFAULT_ENGINE_CONFIG", "Settings", "load_config", "settings"]
