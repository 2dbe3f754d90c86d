"""Shared test fixtures for the dicebox test suite.

scripted_source
    A deterministic RandomSource that returns queued values in order and
    records every (low, high) range it was asked for. Use it whenever a test
    needs specific die faces.

async_client
    An AsyncClient wired to the FastAPI app. Tests that also request
    scripted_source get it installed as the route's random source through
    dependency_overrides; the override is removed afterwards.

Tests that exercise the real CSPRNG need no fixture.
"""

from __future__ import annotations

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from dicebox.dependencies import get_random_source
from dicebox.main import app


class ScriptedSource:
    """RandomSource returning pre-queued values, for predictable dice."""

    def __init__(self, values: list[int] | None = None) -> None:
        self.values = list(values or [])
        self.calls: list[tuple[int, int]] = []

    def queue(self, *values: int) -> None:
        self.values.extend(values)

    def draw(self, low: int, high: int) -> int:
        self.calls.append((low, high))
        if not self.values:
            raise AssertionError(f"ScriptedSource exhausted on draw({low}, {high})")
        return self.values.pop(0)


@pytest.fixture
def scripted_source() -> ScriptedSource:
    return ScriptedSource()


@pytest_asyncio.fixture
async def async_client(request):
    if "scripted_source" in request.fixturenames:
        source = request.getfixturevalue("scripted_source")
        app.dependency_overrides[get_random_source] = lambda: source

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.pop(get_random_source, None)
