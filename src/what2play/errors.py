"""
Exception hierarchy for the catalog pipeline.

Provider and store failures carry enough context (endpoint, offending
identifier, underlying error) for callers to retry or report them.
Category resolution failures additionally carry every entry that was
resolved before the failure happened.
"""

from datetime import datetime, timezone


class What2PlayError(Exception):
    """Base exception for all pipeline errors."""


class ProviderError(What2PlayError):
    """Raised when the remote catalog provider cannot serve a request."""

    def __init__(
        self,
        message: str,
        *,
        source: str | None = None,
        endpoint: str | None = None,
        status_code: int | None = None,
        app_id: int | None = None,
        steam_id: str | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.source = source
        self.endpoint = endpoint
        self.status_code = status_code
        self.app_id = app_id
        self.steam_id = steam_id
        self.original_error = original_error
        self.timestamp = datetime.now(timezone.utc)


class RateLimitError(ProviderError):
    """Raised when the provider answers with HTTP 429."""

    pass


class APIError(ProviderError):
    """Raised when the provider returns an error response."""

    pass


class ValidationError(ProviderError):
    """Raised when a provider payload doesn't match the expected contract."""

    pass


class StoreError(What2PlayError):
    """Raised when a persistent store transaction fails and is rolled back."""

    def __init__(self, message: str, *, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class CategoryResolutionError(What2PlayError):
    """
    Base exception for failed category resolution.

    Attributes:
        resolved: Every app_id -> categories pair resolved (from any tier)
            before the failure. These entries are already cached.
    """

    def __init__(
        self,
        message: str,
        *,
        resolved: dict[int, list[int]] | None = None,
        app_id: int | None = None,
        original_error: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.resolved = resolved if resolved is not None else {}
        self.app_id = app_id
        self.original_error = original_error


class ProviderExhaustedError(CategoryResolutionError):
    """The lead category request failed: the provider quota is most likely exhausted."""

    pass


class CategoryFetchError(CategoryResolutionError):
    """A concurrent category fetch failed and cancelled its siblings."""

    pass


class CategoryPersistenceError(CategoryResolutionError):
    """Newly fetched categories could not be saved to the persistent store."""

    pass


class InvalidRequestError(What2PlayError):
    """Raised when a caller passes malformed input."""

    pass


class CodecError(ValueError):
    """Raised when category data can't be encoded or decoded."""

    pass
