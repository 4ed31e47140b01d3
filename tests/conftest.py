"""Shared fixtures: a fake upstream feed and an in-process ASGI client."""

import asyncio

import pytest
from httpx import ASGITransport, AsyncClient

from app import create_app
from services.cache import RefreshCache
from services.station_feed import StationFeed

SAMPLE_FEED = {
    "executionTime": "2017-03-01 10:15:01 AM",
    "stationBeanList": [
        {"id": 2, "stationName": "San Jose Diridon Caltrain Station", "longitude": -121.901782, "latitude": 37.329732, "availableDocks": 11},
        {"id": 3, "stationName": "San Jose Civic Center", "longitude": -121.888979, "latitude": 37.330698, "availableDocks": 7},
        {"id": 4, "stationName": "Santa Clara at Almaden", "longitude": -121.894902, "latitude": 37.333988, "availableDocks": 9},
    ],
}


class FakeUpstream:
    """Async stand-in for fetch_feed that counts calls.

    Set ``gate`` to hold fetches open until the test releases it, and
    ``error`` to make the next fetches raise.
    """

    def __init__(self, payload=None):
        self.payload = SAMPLE_FEED if payload is None else payload
        self.calls = 0
        self.gate: asyncio.Event | None = None
        self.error: Exception | None = None

    async def __call__(self):
        self.calls += 1
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


@pytest.fixture
def upstream() -> FakeUpstream:
    return FakeUpstream()


@pytest.fixture
def clock():
    """Settable millisecond clock."""

    class Clock:
        now = 1000

        def __call__(self) -> int:
            return self.now

    return Clock()


@pytest.fixture
def station_feed(upstream, clock) -> StationFeed:
    return StationFeed(fetch=upstream, cache=RefreshCache(refetch_interval_ms=30_000), clock=clock)


@pytest.fixture
async def client(station_feed):
    app = create_app(station_feed=station_feed)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
