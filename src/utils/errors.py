"""Custom exception hierarchy for tastegraph.

All application exceptions inherit from :class:`TasteGraphError`, which
carries an optional ``provider_name`` so error handlers can identify which
collaborator (e.g. "spotify", "sqlite_artist_store") caused the failure.

The hierarchy follows the engine's error taxonomy:

    TasteGraphError  (base -- catch-all for any tastegraph error)
    +-- ArtistSourceError    (relation source call failed; degraded locally)
    |   +-- RateLimitError   (relation source rate limit exceeded)
    +-- InvalidSeedSetError  (seed set rejected before any graph work)
    +-- RankingError         (PageRank did not converge)
    +-- PersistenceError     (store read/write failed; surfaced to caller)
    +-- ConfigurationError   (startup / missing config)

Collaborator errors are recovered inside the Relation Fetcher's fallback
ladder and never reach the caller.  Invalid input and persistence failures
are surfaced, and the API maps them to distinct HTTP statuses so a failed
operation is never reported as an empty result.
"""


class TasteGraphError(Exception):
    """Base exception for all tastegraph errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which external service triggered the
    error.  ``__str__`` prefixes the provider name in brackets for log
    output, e.g. ``[spotify] Rate limit exceeded``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Relation source errors
# ---------------------------------------------------------------------------

class ArtistSourceError(TasteGraphError):
    """Raised when an artist-relation source call fails or times out.

    The Relation Fetcher catches this and moves on to the next strategy
    in its fallback ladder.
    """

    def __init__(
        self,
        message: str = "Artist source request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RateLimitError(ArtistSourceError):
    """Raised when the artist source answers with HTTP 429."""

    def __init__(
        self,
        message: str = "Rate limit exceeded",
        provider_name: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
        self.retry_after = retry_after


# ---------------------------------------------------------------------------
# Engine errors
# ---------------------------------------------------------------------------

class InvalidSeedSetError(TasteGraphError):
    """Raised when a seed set is empty, too large, or holds blank ids."""

    def __init__(
        self,
        message: str = "Seed set must contain between 1 and 3 artists",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class RankingError(TasteGraphError):
    """Raised when the centrality computation fails to converge."""

    def __init__(
        self,
        message: str = "Centrality ranking failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Persistence / configuration errors
# ---------------------------------------------------------------------------

class PersistenceError(TasteGraphError):
    """Raised when the artist store cannot complete a read or write.

    Writes are transactional, so when this is raised no partial seed or
    computed set is visible to later reads.
    """

    def __init__(
        self,
        message: str = "Persistence operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ConfigurationError(TasteGraphError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
