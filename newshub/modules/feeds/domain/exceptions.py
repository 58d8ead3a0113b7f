"""Feed domain exceptions.

Transport and parser errors are local to one endpoint attempt; the source
resolver turns them into a SourceFailure instead of letting them escape.
"""

from fastapi import status

from newshub.core.domain.exceptions import (
    DomainException,
    DuplicateEntityError,
    EntityNotFoundError,
)


class FeedError(DomainException):
    """Base class for every fetch/parse failure."""

    http_status_code = status.HTTP_502_BAD_GATEWAY
    error_code = "FEED_ERROR"


class FeedTimeoutError(FeedError):
    """No response within the per-request timeout."""

    error_code = "FEED_TIMEOUT"

    def __init__(self, url: str, timeout_ms: int):
        self.url = url
        self.timeout_ms = timeout_ms
        super().__init__(f"Timeout after {timeout_ms}ms: {url}")


class FeedHttpError(FeedError):
    """Response status was not 2xx."""

    error_code = "FEED_HTTP_ERROR"

    def __init__(self, url: str, status_code: int):
        self.url = url
        self.status = status_code
        super().__init__(f"HTTP error! status: {status_code}")


class FeedNetworkError(FeedError):
    """Transport level failure (DNS, connection reset, TLS...)."""

    error_code = "FEED_NETWORK_ERROR"

    def __init__(self, url: str, detail: str):
        self.url = url
        super().__init__(f"Network error for {url}: {detail}")


class AllStrategiesExhaustedError(FeedError):
    """Every access strategy failed for one endpoint."""

    error_code = "FEED_STRATEGIES_EXHAUSTED"

    def __init__(self, url: str, last_error: Exception | None):
        self.url = url
        self.last_error = last_error
        detail = str(last_error) if last_error else "no strategy configured"
        super().__init__(f"All access strategies failed for {url}: {detail}")


class MalformedFeedError(FeedError):
    """Payload is not parseable markup."""

    error_code = "FEED_MALFORMED"

    def __init__(self, detail: str = "Failed to parse feed XML"):
        super().__init__(detail)


class EmptyFeedError(FeedError):
    """Feed parsed but no entry survived filtering."""

    error_code = "FEED_EMPTY"

    def __init__(self, detail: str = "No items found in feed"):
        super().__init__(detail)


class SourceNotFoundError(EntityNotFoundError):
    """Raised when source_id is not in the registry."""

    def __init__(self, source_id: str):
        self.source_id = source_id
        super().__init__("Source", source_id)


class DuplicateSourceError(DuplicateEntityError):
    """Raised when two registry entries share an id."""

    def __init__(self, source_id: str):
        super().__init__("Source", "id", source_id)
