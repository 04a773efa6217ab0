"""Link-header pagination: fetch every page of a Canvas collection.

Architecture:
    Pages are fetched strictly one after another, since each page's URL is
    only known once the previous response's ``Link`` header is parsed. The
    loop ends when a response has no ``next`` relation or an error is raised.

    Each call owns its accumulator; nothing is shared between traversals, so
    independent callers can paginate concurrently through one HTTPClient.

Error Handling:
    Any failure aborts the whole traversal. No partial result is returned;
    instead the raised CanvasError gets a ``pagination`` attribute
    (PaginationProgress) describing how far it got.
"""

from __future__ import annotations

import asyncio
from time import perf_counter
from typing import Any, Protocol

from ...core.config import RequestConfig
from ...core.exceptions import (
    TRANSIENT_ERRORS,
    CanvasError,
    PageLimitExceededError,
    PaginationCancelledError,
    UpstreamError,
)
from ...models.page import PageResponse, PaginatedResult, PaginationProgress, PaginationStats
from ...utils.retry import retry_async
from .http_client import HTTPClient
from .link_header import next_link
from .telemetry import log_page_fetched, log_pagination_complete, log_pagination_error, log_retry


class PageFetcher(Protocol):
    """Anything that can GET a single page (HTTPClient, or a fake in tests)."""

    async def fetch_page(
        self, url: str, credential: str, config: RequestConfig
    ) -> PageResponse: ...


class Paginator:
    """Follows ``rel="next"`` links and accumulates every page's items."""

    def __init__(self, client: PageFetcher) -> None:
        self._client = client

    async def fetch_all(
        self,
        path: str,
        credential: str,
        config: RequestConfig,
        *,
        cancel_event: asyncio.Event | None = None,
    ) -> PaginatedResult:
        """Fetch all pages of a resource path under the configured API root.

        Args:
            path: Resource path relative to ``/api/v1`` (e.g. ``/courses``)
            credential: Bearer token
            config: Request configuration, not modified
            cancel_event: Optional event; once set, the traversal stops before
                the next page request or during the inter-page delay

        Returns:
            PaginatedResult with items in page order and traversal stats

        Raises:
            CanvasError: Any variant, with ``pagination`` progress attached
        """
        return await self.fetch_all_from_url(
            config.api_url(path), credential, config, cancel_event=cancel_event, label=path
        )

    async def fetch_all_from_url(
        self,
        url: str,
        credential: str,
        config: RequestConfig,
        *,
        cancel_event: asyncio.Event | None = None,
        label: str | None = None,
    ) -> PaginatedResult:
        """Same as fetch_all, starting from an absolute URL."""
        label = label or url
        started = perf_counter()
        items: list[Any] = []
        pages = 0
        current_url = url

        try:
            while True:
                if pages > 0:
                    await self._pause(config.page_delay_seconds, cancel_event, current_url)
                if cancel_event is not None and cancel_event.is_set():
                    raise PaginationCancelledError(current_url)
                if config.max_pages is not None and pages >= config.max_pages:
                    raise PageLimitExceededError(current_url, config.max_pages)

                page_started = perf_counter()
                response = await self._fetch(current_url, credential, config)
                if response.status_code != 200:
                    raise UpstreamError(current_url, response.status_code, response.body)

                page_items = response.items()
                items.extend(page_items)
                pages += 1
                log_page_fetched(
                    config=config,
                    url=current_url,
                    page=pages,
                    page_items=len(page_items),
                    total_items=len(items),
                    latency_ms=(perf_counter() - page_started) * 1000.0,
                )

                next_url = next_link(response.link_header)
                if next_url is None:
                    break
                current_url = next_url
        except CanvasError as exc:
            exc.pagination = PaginationProgress(
                pages_fetched=pages,
                items_fetched=len(items),
                duration_ms=_elapsed_ms(started),
            )
            log_pagination_error(path=label, kind=exc.kind, progress=exc.pagination)
            raise

        stats = PaginationStats(
            total_pages=pages,
            total_items=len(items),
            duration_ms=_elapsed_ms(started),
        )
        log_pagination_complete(config=config, path=label, stats=stats)
        return PaginatedResult(data=tuple(items), pagination=stats)

    async def _fetch(self, url: str, credential: str, config: RequestConfig) -> PageResponse:
        if config.max_retries == 0:
            return await self._client.fetch_page(url, credential, config)

        def on_retry(attempt: int, delay: float, error: BaseException) -> None:
            log_retry(url=url, attempt=attempt, delay_s=delay, kind=getattr(error, "kind", ""))

        return await retry_async(
            lambda: self._client.fetch_page(url, credential, config),
            retries=config.max_retries,
            base_delay=config.retry_backoff_ms / 1000.0,
            retry_on=TRANSIENT_ERRORS,
            on_retry=on_retry,
        )

    @staticmethod
    async def _pause(delay: float, cancel_event: asyncio.Event | None, url: str) -> None:
        """Sleep between pages; a set cancel event cuts the sleep short."""
        if cancel_event is None:
            await asyncio.sleep(delay)
            return
        try:
            await asyncio.wait_for(cancel_event.wait(), timeout=delay)
        except asyncio.TimeoutError:
            return
        raise PaginationCancelledError(url)


async def fetch_all_pages(
    path: str,
    credential: str,
    config: RequestConfig,
    *,
    client: PageFetcher | None = None,
    cancel_event: asyncio.Event | None = None,
) -> PaginatedResult:
    """Fetch and accumulate every page of ``path``.

    Uses ``client`` when given; otherwise a short-lived HTTPClient is opened
    and closed around the traversal.
    """
    if client is not None:
        return await Paginator(client).fetch_all(
            path, credential, config, cancel_event=cancel_event
        )
    async with HTTPClient() as http:
        return await Paginator(http).fetch_all(path, credential, config, cancel_event=cancel_event)


def _elapsed_ms(started: float) -> float:
    return (perf_counter() - started) * 1000.0
