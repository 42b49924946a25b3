"""Utility modules for tastegraph.

- **errors** -- Domain exception hierarchy rooted at TasteGraphError; each
  layer raises its own subclass so callers can tell degraded fetches,
  rejected input and failed persistence apart.
- **concurrency** -- semaphore-bounded fan-out used by the Graph Builder to
  keep parallel relation fetches under the source's rate limit.
- **logging** -- structlog setup with a dual renderer: coloured console
  output in development, structured JSON in production.
"""

# -- Domain exception hierarchy --------------------------------------------
from src.utils.errors import (
    ArtistSourceError,
    ConfigurationError,
    InvalidSeedSetError,
    PersistenceError,
    RankingError,
    RateLimitError,
    TasteGraphError,
)

# -- Async concurrency helpers ---------------------------------------------
from src.utils.concurrency import throttled_gather

# -- Structured logging setup ----------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ArtistSourceError",
    "ConfigurationError",
    "InvalidSeedSetError",
    "PersistenceError",
    "RankingError",
    "RateLimitError",
    "TasteGraphError",
    "configure_logging",
    "get_logger",
    "throttled_gather",
]
