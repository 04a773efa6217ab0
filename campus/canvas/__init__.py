"""Campus Canvas - async Canvas LMS REST client with Link-header pagination."""

from .clients import CanvasClient
from .core import (
    CanvasConnectionError,
    CanvasError,
    CanvasSettings,
    ConfigurationError,
    HTTPMethod,
    LinkRel,
    LogLevel,
    PageLimitExceededError,
    PaginationCancelledError,
    ParseError,
    RequestConfig,
    RequestTimeoutError,
    UpstreamError,
    configure_logging,
)
from .models import (
    MutationResult,
    PageResponse,
    PaginatedResult,
    PaginationProgress,
    PaginationStats,
)
from .runtime.rest import (
    CanvasTransport,
    HTTPClient,
    Paginator,
    fetch_all_pages,
    parse_link_header,
)

__version__ = "0.1.0"

__all__ = [
    "CanvasClient",
    "CanvasTransport",
    "HTTPClient",
    "Paginator",
    "fetch_all_pages",
    "parse_link_header",
    "CanvasSettings",
    "RequestConfig",
    "configure_logging",
    "HTTPMethod",
    "LinkRel",
    "LogLevel",
    "CanvasError",
    "ConfigurationError",
    "ParseError",
    "RequestTimeoutError",
    "CanvasConnectionError",
    "UpstreamError",
    "PageLimitExceededError",
    "PaginationCancelledError",
    "MutationResult",
    "PageResponse",
    "PaginatedResult",
    "PaginationProgress",
    "PaginationStats",
]
