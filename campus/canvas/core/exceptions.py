"""Custom exception hierarchy.

Every failure surfaced by the Canvas runtime is a ``CanvasError`` variant
carrying an HTTP-like ``status_code``, a stable ``kind`` tag, the URL that
failed and, once the paginator has seen it, the partial traversal progress.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..models.page import PaginationProgress


class CanvasError(Exception):
    """Base exception for all library errors."""

    kind: str = "CanvasError"
    default_status: int = 500

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
        details: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code if status_code is not None else self.default_status
        self.url = url
        self.details = details
        self.pagination: PaginationProgress | None = None

    def to_dict(self) -> dict[str, Any]:
        """Render the JSON error body a route handler would return."""
        payload: dict[str, Any] = {
            "statusCode": self.status_code,
            "error": self.message,
            "kind": self.kind,
        }
        if self.details is not None:
            payload["details"] = self.details
        if self.url is not None:
            payload["url"] = self.url
        if self.pagination is not None:
            payload["pagination"] = self.pagination.model_dump(by_alias=True)
        return payload


class ConfigurationError(CanvasError):
    """Settings are missing or invalid."""

    kind = "ConfigurationError"


class ParseError(CanvasError):
    """Response body was not valid JSON."""

    kind = "ParseError"

    def __init__(self, url: str, details: str) -> None:
        super().__init__("Failed to parse Canvas API response", url=url, details=details)


class RequestTimeoutError(CanvasError):
    """No response arrived within the configured window."""

    kind = "Timeout"
    default_status = 504

    def __init__(self, url: str, timeout_ms: int) -> None:
        super().__init__(
            "Request timeout", url=url, details=f"No response after {timeout_ms}ms"
        )
        self.timeout_ms = timeout_ms

    def to_dict(self) -> dict[str, Any]:
        payload = super().to_dict()
        payload["timeout"] = self.timeout_ms
        return payload


class CanvasConnectionError(CanvasError):
    """Transport-level failure (DNS, refused connection, reset)."""

    kind = "ConnectionError"

    def __init__(self, url: str, details: str) -> None:
        super().__init__("Failed to connect to Canvas API", url=url, details=details)


class UpstreamError(CanvasError):
    """Canvas answered with a non-success status."""

    kind = "UpstreamError"

    def __init__(self, url: str, status_code: int, body: Any) -> None:
        super().__init__("Canvas API error", status_code=status_code, url=url, details=body)

    @property
    def body(self) -> Any:
        return self.details


class PageLimitExceededError(CanvasError):
    """Traversal wanted more pages than ``max_pages`` allows."""

    kind = "PageLimitExceeded"
    default_status = 502

    def __init__(self, url: str, max_pages: int) -> None:
        super().__init__(
            "Pagination page limit exceeded",
            url=url,
            details=f"Upstream still had a next page after {max_pages} pages",
        )
        self.max_pages = max_pages


class PaginationCancelledError(CanvasError):
    """Caller cancelled a traversal before it finished."""

    kind = "Cancelled"
    default_status = 499

    def __init__(self, url: str | None = None) -> None:
        super().__init__("Pagination cancelled", url=url)


#: Errors a retry can plausibly fix.
TRANSIENT_ERRORS: tuple[type[CanvasError], ...] = (RequestTimeoutError, CanvasConnectionError)
