"""Search-sync exceptions.

Transport-level failures keep the request that produced them.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from searchsync.transport.http import RequestSpec


class SearchSyncError(Exception):
    """Base exception for search-sync errors."""


class ConfigurationError(SearchSyncError):
    """Raised when connection or query options are invalid or contradictory."""


class TransportError(SearchSyncError):
    """Raised when a request could not be delivered to the search engine."""

    def __init__(self, message: str, *, attempts: int, request: RequestSpec) -> None:
        super().__init__(message)
        self.attempts = attempts
        self.request = request


class MalformedReplyError(SearchSyncError):
    """Raised when the search engine does not send back valid JSON."""

    def __init__(self, message: str, *, raw_body: str, request: RequestSpec) -> None:
        super().__init__(message)
        self.raw_body = raw_body
        self.request = request


class EngineError(SearchSyncError):
    """Raised when the search engine reports an error in its reply."""

    def __init__(
        self,
        message: str,
        *,
        error: Any,
        status_code: int | None = None,
        request: RequestSpec | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.status_code = status_code
        self.request = request


class UnexpectedReplyError(SearchSyncError):
    """Raised when a reply parses but does not have the expected shape."""

    def __init__(self, message: str, *, reply: Any) -> None:
        super().__init__(message)
        self.reply = reply


class UpstreamError(SearchSyncError):
    """Raised when a search or aggregation fails below the normalizer.

    The underlying failure is available as ``__cause__``.
    """
