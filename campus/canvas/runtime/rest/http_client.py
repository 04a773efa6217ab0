"""Single-request HTTP primitive for the Canvas REST API."""

from __future__ import annotations

import asyncio
import json
from typing import Any

import aiohttp

from ...core.config import RequestConfig
from ...core.enums import HTTPMethod
from ...core.exceptions import (
    CanvasConnectionError,
    CanvasError,
    ParseError,
    RequestTimeoutError,
)
from ...models.page import PageResponse
from .telemetry import log_request, log_request_error


class HTTPClient:
    """Async HTTP client wrapper.

    Owns one ``aiohttp.ClientSession``; the timeout is applied per request from
    the RequestConfig, so one client can serve callers with different settings.
    No retries happen here.
    """

    def __init__(self, connection_limit: int = 100) -> None:
        self.connection_limit = connection_limit
        self._session: aiohttp.ClientSession | None = None

    @property
    def session(self) -> aiohttp.ClientSession:
        """Get or create session."""
        if self._session is None or self._session.closed:
            connector = aiohttp.TCPConnector(limit=self.connection_limit)
            self._session = aiohttp.ClientSession(connector=connector)
        return self._session

    async def fetch_page(self, url: str, credential: str, config: RequestConfig) -> PageResponse:
        """GET one page and parse its JSON body.

        Args:
            url: Absolute page URL
            credential: Bearer token
            config: Request configuration (timeout, verbosity, user agent)

        Returns:
            PageResponse with status, parsed body, lower-cased headers and URL

        Raises:
            ParseError: Body was not valid JSON
            RequestTimeoutError: No response within ``config.timeout_ms``
            CanvasConnectionError: Transport failure
        """
        return await self.send(HTTPMethod.GET, url, credential, config)

    async def send(
        self,
        method: HTTPMethod | str,
        url: str,
        credential: str,
        config: RequestConfig,
        body: Any = None,
    ) -> PageResponse:
        """Issue one request of any method; the body is JSON-encoded for non-GET calls."""
        if not isinstance(method, HTTPMethod):
            method = HTTPMethod(method.upper())
        headers = {
            "Authorization": f"Bearer {credential}",
            "Content-Type": "application/json",
            "User-Agent": config.user_agent,
        }
        data: bytes | None = None
        if body is not None and method is not HTTPMethod.GET:
            data = json.dumps(body).encode("utf-8")
            headers["Content-Length"] = str(len(data))

        log_request(config=config, method=method.value, url=url, has_body=data is not None)

        timeout = aiohttp.ClientTimeout(total=config.timeout_seconds)
        try:
            async with self.session.request(
                method.value, url, headers=headers, data=data, timeout=timeout
            ) as response:
                raw = await response.read()
                status = response.status
                response_headers = _lower_headers(response.headers)
        except asyncio.TimeoutError as exc:
            raise self._fail(RequestTimeoutError(url, config.timeout_ms)) from exc
        except aiohttp.ClientError as exc:
            raise self._fail(CanvasConnectionError(url, str(exc) or type(exc).__name__)) from exc

        try:
            payload = json.loads(raw.decode("utf-8")) if raw else {}
        except ValueError as exc:
            raise self._fail(ParseError(url, str(exc))) from exc

        return PageResponse(status_code=status, body=payload, headers=response_headers, url=url)

    @staticmethod
    def _fail(error: CanvasError) -> CanvasError:
        log_request_error(kind=error.kind, url=error.url or "", error_message=str(error.details))
        return error

    async def close(self) -> None:
        """Close session."""
        if self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> HTTPClient:
        """Context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        await self.close()


def _lower_headers(headers: Any) -> dict[str, str]:
    """Lower-case header names, joining repeated headers with a comma."""
    merged: dict[str, str] = {}
    for name, value in headers.items():
        key = name.lower()
        merged[key] = f"{merged[key]}, {value}" if key in merged else value
    return merged
