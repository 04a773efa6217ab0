"""Unit tests for Link-header pagination with a fake page fetcher."""

from __future__ import annotations

import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from campus.canvas.core import (
    CanvasConnectionError,
    PageLimitExceededError,
    PaginationCancelledError,
    ParseError,
    RequestConfig,
    RequestTimeoutError,
    UpstreamError,
)
from campus.canvas.models import PageResponse
from campus.canvas.runtime.rest import HTTPClient, Paginator, fetch_all_pages
from campus.canvas.runtime.rest import paginator as paginator_module

BASE = "https://canvas.test/api/v1"
CONFIG = RequestConfig(host="canvas.test", page_delay_ms=0)


def page(url: str, body, next_url: str | None = None, status: int = 200) -> PageResponse:
    headers = {}
    if next_url:
        headers["link"] = f'<{next_url}>; rel="next", <{BASE}/courses>; rel="first"'
    return PageResponse(status_code=status, body=body, headers=headers, url=url)


class FakeCanvas:
    """Serves canned responses (or raises canned errors) per URL, in order."""

    def __init__(self, responses: dict[str, list]) -> None:
        self._responses = {url: list(items) for url, items in responses.items()}
        self.calls: list[str] = []

    async def fetch_page(self, url: str, credential: str, config: RequestConfig) -> PageResponse:
        self.calls.append(url)
        queue = self._responses[url]
        outcome = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def chain(*bodies) -> dict[str, list]:
    """Pages linked via rel="next"; the first page is /courses."""
    urls = [f"{BASE}/courses"] + [f"{BASE}/courses?page={i + 1}" for i in range(1, len(bodies))]
    responses = {}
    for i, body in enumerate(bodies):
        next_url = urls[i + 1] if i + 1 < len(urls) else None
        responses[urls[i]] = [page(urls[i], body, next_url)]
    return responses


class TestPaginationAccumulation:
    @pytest.mark.asyncio
    async def test_two_page_scenario(self):
        fake = FakeCanvas(chain([{"id": 1}, {"id": 2}], [{"id": 3}]))

        result = await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert list(result.data) == [{"id": 1}, {"id": 2}, {"id": 3}]
        assert result.pagination.total_pages == 2
        assert result.pagination.total_items == 3
        assert result.status_code == 200

    @pytest.mark.asyncio
    async def test_single_page_without_link_header(self):
        fake = FakeCanvas(chain([{"id": 1}, {"id": 2}]))

        result = await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert result.pagination.total_pages == 1
        assert len(result) == 2
        assert fake.calls == [f"{BASE}/courses"]

    @pytest.mark.asyncio
    async def test_three_pages_preserve_order(self):
        fake = FakeCanvas(
            chain([{"id": 1}, {"id": 2}], [{"id": 3}, {"id": 4}, {"id": 5}], [{"id": 6}])
        )

        result = await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert [item["id"] for item in result.data] == [1, 2, 3, 4, 5, 6]
        assert result.pagination.total_pages == 3
        assert result.pagination.total_items == 6
        assert result.pagination.duration_ms >= 0

    @pytest.mark.asyncio
    async def test_bare_object_becomes_single_item(self):
        fake = FakeCanvas({f"{BASE}/courses/42": [page(f"{BASE}/courses/42", {"id": 42})]})

        result = await Paginator(fake).fetch_all("/courses/42", "tok", CONFIG)

        assert list(result.data) == [{"id": 42}]
        assert result.first() == {"id": 42}

    @pytest.mark.asyncio
    async def test_empty_array_page(self):
        fake = FakeCanvas(chain([]))
        result = await Paginator(fake).fetch_all("/courses", "tok", CONFIG)
        assert result.data == ()
        assert result.pagination.total_pages == 1
        assert result.pagination.total_items == 0

    @pytest.mark.asyncio
    async def test_link_without_next_stops(self):
        url = f"{BASE}/courses"
        response = PageResponse(
            status_code=200,
            body=[{"id": 1}],
            headers={"link": f'<{url}?page=1>; rel="first", <{url}?page=1>; rel="last"'},
            url=url,
        )
        fake = FakeCanvas({url: [response]})

        result = await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert result.pagination.total_pages == 1
        assert fake.calls == [url]

    @pytest.mark.asyncio
    async def test_starting_url_is_composed_from_host_and_prefix(self):
        url = f"{BASE}/courses?enrollment_state=active&per_page=100"
        fake = FakeCanvas({url: [page(url, [])]})

        await Paginator(fake).fetch_all(
            "/courses?enrollment_state=active&per_page=100", "tok", CONFIG
        )

        assert fake.calls == [url]

    @pytest.mark.asyncio
    async def test_repeated_runs_are_identical(self):
        responses = chain([{"id": 1}], [{"id": 2}], [{"id": 3}])
        first = await Paginator(FakeCanvas(responses)).fetch_all("/courses", "tok", CONFIG)
        second = await Paginator(FakeCanvas(responses)).fetch_all("/courses", "tok", CONFIG)
        assert first.data == second.data
        assert first.pagination.total_pages == second.pagination.total_pages

    @pytest.mark.asyncio
    async def test_fetch_all_pages_uses_given_client(self):
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}]))
        result = await fetch_all_pages("/courses", "tok", CONFIG, client=fake)
        assert [item["id"] for item in result.data] == [1, 2]


class TestPaginationErrors:
    @pytest.mark.asyncio
    async def test_non_200_aborts_with_upstream_error_and_progress(self):
        responses = chain([{"id": 1}, {"id": 2}], [{"id": 3}], [{"id": 4}])
        failing_url = f"{BASE}/courses?page=3"
        responses[failing_url] = [page(failing_url, {"errors": "boom"}, status=500)]
        fake = FakeCanvas(responses)

        with pytest.raises(UpstreamError) as exc_info:
            await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        error = exc_info.value
        assert error.status_code == 500
        assert error.url == failing_url
        assert error.body == {"errors": "boom"}
        assert error.pagination.pages_fetched == 2
        assert error.pagination.items_fetched == 3

    @pytest.mark.asyncio
    async def test_first_page_error_reports_zero_progress(self):
        url = f"{BASE}/courses"
        fake = FakeCanvas({url: [page(url, {"message": "not found"}, status=404)]})

        with pytest.raises(UpstreamError) as exc_info:
            await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert exc_info.value.status_code == 404
        assert exc_info.value.pagination.pages_fetched == 0
        assert exc_info.value.pagination.items_fetched == 0

    @pytest.mark.asyncio
    async def test_timeout_propagates_with_progress(self):
        responses = chain([{"id": 1}], [{"id": 2}])
        second = f"{BASE}/courses?page=2"
        responses[second] = [RequestTimeoutError(second, 30000)]
        fake = FakeCanvas(responses)

        with pytest.raises(RequestTimeoutError) as exc_info:
            await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert exc_info.value.status_code == 504
        assert exc_info.value.pagination.pages_fetched == 1
        assert exc_info.value.to_dict()["pagination"]["pagesFetched"] == 1

    @pytest.mark.asyncio
    async def test_undecodable_body_aborts_with_parse_error_and_progress(self, caplog):
        response = AsyncMock()
        response.status = 200
        response.headers = {}
        response.read = AsyncMock(return_value=b"\xff\xfe[1]")
        response.__aenter__ = AsyncMock(return_value=response)
        response.__aexit__ = AsyncMock(return_value=None)
        http = HTTPClient()
        http._session = MagicMock(closed=False)
        http._session.request = MagicMock(return_value=response)

        caplog.set_level(logging.ERROR, logger="campus.canvas")
        with pytest.raises(ParseError) as exc_info:
            await Paginator(http).fetch_all("/courses", "tok", CONFIG)

        assert exc_info.value.status_code == 500
        assert exc_info.value.pagination.pages_fetched == 0
        assert exc_info.value.to_dict()["pagination"]["itemsFetched"] == 0
        assert any(r.getMessage() == "canvas_pagination_error" for r in caplog.records)

    @pytest.mark.asyncio
    async def test_page_cap_raises_distinct_error(self):
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}], [{"id": 3}]))
        config = RequestConfig(host="canvas.test", page_delay_ms=0, max_pages=2)

        with pytest.raises(PageLimitExceededError) as exc_info:
            await Paginator(fake).fetch_all("/courses", "tok", config)

        assert exc_info.value.max_pages == 2
        assert exc_info.value.pagination.pages_fetched == 2
        assert len(fake.calls) == 2

    @pytest.mark.asyncio
    async def test_page_cap_equal_to_chain_length_succeeds(self):
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}], [{"id": 3}]))
        config = RequestConfig(host="canvas.test", page_delay_ms=0, max_pages=3)

        result = await Paginator(fake).fetch_all("/courses", "tok", config)

        assert result.pagination.total_pages == 3


class TestPaginationTiming:
    @pytest.mark.asyncio
    async def test_delay_only_between_pages(self, monkeypatch):
        delays: list[float] = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr(paginator_module.asyncio, "sleep", fake_sleep)
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}], [{"id": 3}]))

        await Paginator(fake).fetch_all("/courses", "tok", RequestConfig(host="canvas.test"))

        assert delays == [0.1, 0.1]

    @pytest.mark.asyncio
    async def test_single_page_never_sleeps(self, monkeypatch):
        delays: list[float] = []

        async def fake_sleep(delay):
            delays.append(delay)

        monkeypatch.setattr(paginator_module.asyncio, "sleep", fake_sleep)
        fake = FakeCanvas(chain([{"id": 1}]))

        await Paginator(fake).fetch_all("/courses", "tok", RequestConfig(host="canvas.test"))

        assert delays == []


class TestCancellation:
    @pytest.mark.asyncio
    async def test_cancelled_before_start(self):
        fake = FakeCanvas(chain([{"id": 1}]))
        cancel = asyncio.Event()
        cancel.set()

        with pytest.raises(PaginationCancelledError) as exc_info:
            await Paginator(fake).fetch_all("/courses", "tok", CONFIG, cancel_event=cancel)

        assert fake.calls == []
        assert exc_info.value.pagination.pages_fetched == 0

    @pytest.mark.asyncio
    async def test_cancel_interrupts_inter_page_delay(self):
        cancel = asyncio.Event()

        class CancellingCanvas(FakeCanvas):
            async def fetch_page(self, url, credential, config):
                response = await super().fetch_page(url, credential, config)
                asyncio.get_running_loop().call_later(0.01, cancel.set)
                return response

        fake = CancellingCanvas(chain([{"id": 1}], [{"id": 2}]))
        config = RequestConfig(host="canvas.test", page_delay_ms=10_000)

        with pytest.raises(PaginationCancelledError) as exc_info:
            await asyncio.wait_for(
                Paginator(fake).fetch_all("/courses", "tok", config, cancel_event=cancel),
                timeout=5,
            )

        assert len(fake.calls) == 1
        assert exc_info.value.pagination.pages_fetched == 1
        assert exc_info.value.pagination.items_fetched == 1


class TestRetry:
    @pytest.mark.asyncio
    async def test_transient_errors_retried_when_enabled(self):
        url = f"{BASE}/courses"
        fake = FakeCanvas(
            {url: [CanvasConnectionError(url, "reset"), page(url, [{"id": 1}])]}
        )
        config = RequestConfig(
            host="canvas.test", page_delay_ms=0, max_retries=2, retry_backoff_ms=0
        )

        result = await Paginator(fake).fetch_all("/courses", "tok", config)

        assert list(result.data) == [{"id": 1}]
        assert result.pagination.total_pages == 1
        assert fake.calls == [url, url]

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self):
        url = f"{BASE}/courses"
        fake = FakeCanvas({url: [CanvasConnectionError(url, "reset"), page(url, [])]})

        with pytest.raises(CanvasConnectionError):
            await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        assert fake.calls == [url]

    @pytest.mark.asyncio
    async def test_parse_errors_are_not_retried(self):
        url = f"{BASE}/courses"
        fake = FakeCanvas({url: [ParseError(url, "bad json"), page(url, [])]})
        config = RequestConfig(
            host="canvas.test", page_delay_ms=0, max_retries=3, retry_backoff_ms=0
        )

        with pytest.raises(ParseError):
            await Paginator(fake).fetch_all("/courses", "tok", config)

        assert fake.calls == [url]


class TestPaginationLogging:
    @pytest.mark.asyncio
    async def test_page_events_logged_at_info(self, caplog):
        caplog.set_level(logging.INFO, logger="campus.canvas")
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}]))

        await Paginator(fake).fetch_all("/courses", "tok", CONFIG)

        messages = [record.getMessage() for record in caplog.records]
        assert messages.count("canvas_page_fetched") == 2
        assert "canvas_pagination_complete" in messages

    @pytest.mark.asyncio
    async def test_quiet_log_level_suppresses_page_events(self, caplog):
        caplog.set_level(logging.DEBUG, logger="campus.canvas")
        fake = FakeCanvas(chain([{"id": 1}], [{"id": 2}]))
        config = RequestConfig(host="canvas.test", page_delay_ms=0, log_level="error")

        await Paginator(fake).fetch_all("/courses", "tok", config)

        assert not [r for r in caplog.records if r.getMessage() == "canvas_page_fetched"]

    @pytest.mark.asyncio
    async def test_errors_always_logged(self, caplog):
        caplog.set_level(logging.INFO, logger="campus.canvas")
        url = f"{BASE}/courses"
        fake = FakeCanvas({url: [page(url, {}, status=403)]})
        config = RequestConfig(host="canvas.test", page_delay_ms=0, log_level="error")

        with pytest.raises(UpstreamError):
            await Paginator(fake).fetch_all("/courses", "tok", config)

        errors = [r for r in caplog.records if r.getMessage() == "canvas_pagination_error"]
        assert len(errors) == 1
        assert errors[0].kind == "UpstreamError"
