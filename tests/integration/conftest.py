"""Shared fixtures for integration tests."""

import os

import pytest
import pytest_asyncio

from campus.canvas import CanvasClient, CanvasSettings

# Skip all integration tests unless RUN_CAMPUS_CANVAS_NETWORK_TESTS=1
pytestmark = pytest.mark.skipif(
    os.environ.get("RUN_CAMPUS_CANVAS_NETWORK_TESTS") != "1",
    reason="Requires network access. Set RUN_CAMPUS_CANVAS_NETWORK_TESTS=1 to run",
)


@pytest.fixture
def settings() -> CanvasSettings:
    return CanvasSettings.load()


@pytest_asyncio.fixture
async def canvas(settings):
    async with CanvasClient.from_settings(settings) as client:
        yield client
