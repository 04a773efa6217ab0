"""Core components."""

from .config import API_PREFIX, USER_AGENT, CanvasSettings, RequestConfig
from .enums import HTTPMethod, LinkRel, LogLevel
from .exceptions import (
    TRANSIENT_ERRORS,
    CanvasConnectionError,
    CanvasError,
    ConfigurationError,
    PageLimitExceededError,
    PaginationCancelledError,
    ParseError,
    RequestTimeoutError,
    UpstreamError,
)
from .logging_config import configure_logging

__all__ = [
    "API_PREFIX",
    "USER_AGENT",
    "CanvasSettings",
    "RequestConfig",
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
    "TRANSIENT_ERRORS",
    "configure_logging",
]
