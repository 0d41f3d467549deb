"""
Shared test fixtures for the Skycast API test suite.

Provides:
- payload factories for OpenWeatherMap / Geoapify / BBC responses
- in-memory cache store with a controllable clock
- httpx clients backed by httpx.MockTransport (no network)
- async FastAPI test client with services wired onto app.state
"""

import json
import os
from typing import Any, Callable
from unittest.mock import AsyncMock

import httpx
import pytest
from httpx import ASGITransport, AsyncClient

# Ensure test env vars before any app imports
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("REDIS_URL", "")
os.environ.setdefault("DATABASE_URL", "")


# ---------------------------------------------------------------------------
# Payload factories
# ---------------------------------------------------------------------------

def make_owm_interval(
    dt_txt: str = "2026-02-20 12:00:00",
    temp: float = 20.0,
    feels_like: float | None = None,
    description: str = "clear sky",
    icon: str = "01d",
    humidity: float = 60,
    pressure: float = 1013,
    wind_speed: float = 3.5,
    wind_deg: float = 90,
    pop: float = 0.0,
) -> dict[str, Any]:
    """One 3-hour interval of an OpenWeatherMap /forecast response."""
    return {
        "dt_txt": dt_txt,
        "main": {
            "temp": temp,
            "feels_like": temp - 1 if feels_like is None else feels_like,
            "humidity": humidity,
            "pressure": pressure,
        },
        "weather": [{"description": description, "icon": icon}],
        "wind": {"speed": wind_speed, "deg": wind_deg},
        "pop": pop,
    }


def make_owm_forecast(
    city: str = "Tokyo",
    intervals: list[dict[str, Any]] | None = None,
    sunrise: int | None = 1771538400,
    sunset: int | None = 1771578000,
) -> dict[str, Any]:
    """OpenWeatherMap /forecast response."""
    return {
        "cod": "200",
        "city": {"name": city, "sunrise": sunrise, "sunset": sunset},
        "list": [make_owm_interval()] if intervals is None else intervals,
    }


def make_geoapify_place(**overrides: Any) -> dict[str, Any]:
    defaults = {
        "city": "London",
        "state": "England",
        "country": "United Kingdom",
        "lat": 51.5074,
        "lon": -0.1278,
        "formatted": "London, ENG, United Kingdom",
    }
    defaults.update(overrides)
    return defaults


def make_bbc_response(locations: list[dict[str, Any]]) -> dict[str, Any]:
    return {"response": {"results": {"results": locations}}}


# ---------------------------------------------------------------------------
# Cache + HTTP fixtures
# ---------------------------------------------------------------------------

class FakeClock:
    """Monotonic clock that only moves when told to."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_cache(clock):
    from services.api.cache.store import MemoryCacheStore

    return MemoryCacheStore(clock=clock)


@pytest.fixture
def mock_redis():
    """AsyncMock standing in for a redis.asyncio client."""
    redis = AsyncMock()
    redis.get = AsyncMock(return_value=None)
    redis.set = AsyncMock(return_value=True)
    redis.delete = AsyncMock(return_value=1)
    redis.ping = AsyncMock()
    return redis


class RecordingTransport(httpx.MockTransport):
    """MockTransport that keeps every request it served."""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    @property
    def calls(self) -> int:
        return len(self.requests)


def json_response(payload: Any, status_code: int = 200, **kwargs: Any) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode(), **kwargs)


@pytest.fixture
def make_http():
    """Factory: handler -> (httpx.AsyncClient, RecordingTransport)."""
    def _make(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        client = httpx.AsyncClient(transport=transport)
        return client, transport

    return _make


# ---------------------------------------------------------------------------
# FastAPI test client, services wired against mock transports
# ---------------------------------------------------------------------------

@pytest.fixture
def provider_routes():
    """Mutable URL-host -> handler map used by the app's mock transport."""
    return {}


@pytest.fixture
async def app(memory_cache, provider_routes):
    """Test FastAPI app with real services over an in-memory cache and mocked HTTP."""
    from services.api.config import Settings
    from services.api.main import app as _app, build_services
    from services.api.preferences.store import MemoryPreferenceStore

    cfg = Settings(
        redis_url="",
        database_url="",
        openweathermap_api_key="owm-test-key",
        openweathermap_url="https://owm.test/forecast",
        geoapify_api_key="geo-test-key",
        geoapify_url="https://geo.test/autocomplete",
        city_search_provider="geoapify",
    )

    def _dispatch(request: httpx.Request) -> httpx.Response:
        handler = provider_routes.get(request.url.host)
        if handler is None:
            return httpx.Response(503)
        return handler(request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(_dispatch))
    preferences = MemoryPreferenceStore({"session-1": ["tokyo", "paris"]})

    _app.state.settings = cfg
    _app.state.cache = memory_cache
    _app.state.preferences = preferences
    build_services(_app, cfg, http, memory_cache, preferences)

    yield _app

    await http.aclose()


@pytest.fixture
async def client(app):
    """Async HTTP client bound to the test app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
