"""Structured logging for Canvas requests and pagination.

Events are emitted as a short event name with an ``extra`` payload. The
per-call ``RequestConfig.log_level`` decides whether request and page events
are emitted at all; errors are always logged.
"""

from __future__ import annotations

import logging

from ...core.config import RequestConfig
from ...core.enums import LogLevel
from ...models.page import PaginationProgress, PaginationStats

logger = logging.getLogger(__name__)


def log_request(*, config: RequestConfig, method: str, url: str, has_body: bool) -> None:
    """Log an outgoing request (debug verbosity only).

    Args:
        config: Request configuration carrying the verbosity
        method: HTTP method
        url: Absolute request URL
        has_body: Whether a JSON body is sent
    """
    if not config.log_level.allows(LogLevel.DEBUG):
        return
    logger.debug(
        "canvas_request",
        extra={"method": method, "url": url, "has_body": has_body},
    )


def log_request_error(*, kind: str, url: str, error_message: str) -> None:
    """Log a failed single request.

    Args:
        kind: Error kind (e.g., "Timeout", "ParseError")
        url: URL that failed
        error_message: Underlying error text
    """
    logger.error(
        "canvas_request_error",
        extra={"kind": kind, "url": url, "error_message": error_message},
    )


def log_page_fetched(
    *,
    config: RequestConfig,
    url: str,
    page: int,
    page_items: int,
    total_items: int,
    latency_ms: float | None = None,
) -> None:
    """Log one page appended to the accumulator.

    Args:
        config: Request configuration carrying the verbosity
        url: Page URL
        page: One-based page number
        page_items: Items on this page
        total_items: Items accumulated so far
        latency_ms: Request latency in milliseconds (optional)
    """
    if not config.log_level.allows(LogLevel.INFO):
        return
    logger.info(
        "canvas_page_fetched",
        extra={
            "url": url,
            "page": page,
            "page_items": page_items,
            "total_items": total_items,
            "latency_ms": latency_ms,
        },
    )


def log_pagination_complete(*, config: RequestConfig, path: str, stats: PaginationStats) -> None:
    """Log a finished traversal."""
    if not config.log_level.allows(LogLevel.INFO):
        return
    logger.info(
        "canvas_pagination_complete",
        extra={
            "path": path,
            "total_pages": stats.total_pages,
            "total_items": stats.total_items,
            "duration_ms": stats.duration_ms,
        },
    )


def log_pagination_error(*, path: str, kind: str, progress: PaginationProgress) -> None:
    """Log an aborted traversal with the progress made before it failed."""
    logger.error(
        "canvas_pagination_error",
        extra={
            "path": path,
            "kind": kind,
            "pages_fetched": progress.pages_fetched,
            "items_fetched": progress.items_fetched,
            "duration_ms": progress.duration_ms,
        },
    )


def log_retry(*, url: str, attempt: int, delay_s: float, kind: str) -> None:
    """Log a retried request."""
    logger.warning(
        "canvas_retry",
        extra={"url": url, "attempt": attempt, "delay_s": delay_s, "kind": kind},
    )
