"""Canvas transport: an HTTPClient bound to one credential and configuration."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from ...core.config import CanvasSettings, RequestConfig
from ...core.enums import HTTPMethod
from ...core.exceptions import UpstreamError
from ...models.page import MutationResult, PaginatedResult
from .http_client import HTTPClient
from .paginator import Paginator

logger = logging.getLogger(__name__)


class CanvasTransport:
    """Thin wrapper over HTTPClient for Canvas GET pagination and mutations.

    GET requests walk every page; other methods are sent once. At most
    ``max_concurrent`` requests run at a time through one transport.
    """

    def __init__(
        self,
        credential: str,
        config: RequestConfig,
        *,
        max_concurrent: int = 10,
        http: HTTPClient | None = None,
    ) -> None:
        self._credential = credential
        self._config = config
        self._http = http or HTTPClient()
        self._paginator = Paginator(self._http)
        self._limit = asyncio.Semaphore(max_concurrent)

    @classmethod
    def from_settings(cls, settings: CanvasSettings) -> CanvasTransport:
        return cls(
            settings.access_token,
            settings.request_config(),
            max_concurrent=settings.max_concurrent_requests,
        )

    @property
    def config(self) -> RequestConfig:
        return self._config

    async def get_all(
        self, path: str, *, cancel_event: asyncio.Event | None = None
    ) -> PaginatedResult:
        """Fetch every page of ``path``."""
        async with self._limit:
            return await self._paginator.fetch_all(
                path, self._credential, self._config, cancel_event=cancel_event
            )

    async def send(
        self, method: HTTPMethod | str, path: str, body: Any = None
    ) -> MutationResult:
        """Send a single non-paginated request.

        Raises:
            UpstreamError: Status outside 200-299
            CanvasError: Transport, timeout or parse failures from HTTPClient
        """
        url = self._config.api_url(path)
        async with self._limit:
            response = await self._http.send(method, url, self._credential, self._config, body)
        if not 200 <= response.status_code < 300:
            logger.error(
                "canvas_mutation_error",
                extra={
                    "method": getattr(method, "value", method),
                    "url": url,
                    "status_code": response.status_code,
                },
            )
            raise UpstreamError(url, response.status_code, response.body)
        return MutationResult(status_code=response.status_code, data=response.body)

    async def request(
        self, path: str, method: HTTPMethod | str = HTTPMethod.GET, body: Any = None
    ) -> PaginatedResult | MutationResult:
        """Dispatch on method: GET paginates, everything else is sent once."""
        method = method if isinstance(method, HTTPMethod) else HTTPMethod(method.upper())
        if method.paginates:
            return await self.get_all(path)
        return await self.send(method, path, body)

    async def close(self) -> None:
        await self._http.close()
