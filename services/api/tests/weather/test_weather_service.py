"""
Tests for WeatherService: OpenWeatherMap over a mocked transport, cached in
an in-memory store.
"""

import httpx
import pytest
from pydantic import TypeAdapter

from services.api.cache.resolver import CacheAsideResolver
from services.api.errors import NotFoundError, UpstreamTimeoutError
from services.api.providers.openweather import OpenWeatherClient
from services.api.tests.conftest import json_response, make_owm_forecast, make_owm_interval
from services.api.weather.models import WeatherSnapshot
from services.api.weather.service import WeatherService


@pytest.fixture
def build_service(memory_cache, make_http):
    def _build(handler, ttl_seconds=600):
        http, transport = make_http(handler)
        client = OpenWeatherClient(http, "https://owm.test/forecast", "secret")
        resolver = CacheAsideResolver(memory_cache, "weather", TypeAdapter(WeatherSnapshot))
        return WeatherService(client, resolver, ttl_seconds), transport

    return _build


class TestGetForecast:
    @pytest.mark.asyncio
    async def test_returns_transformed_snapshot(self, build_service):
        service, _ = build_service(lambda req: json_response(make_owm_forecast(city="Tokyo")))
        snapshot = await service.get_forecast("Tokyo")
        assert snapshot.city == "Tokyo"
        assert snapshot.current is not None
        assert len(snapshot.hourly) == 1

    @pytest.mark.asyncio
    async def test_second_call_served_from_cache(self, build_service):
        service, transport = build_service(lambda req: json_response(make_owm_forecast()))
        first = await service.get_forecast("Tokyo")
        second = await service.get_forecast(" tokyo ")
        assert transport.calls == 1
        assert first == second

    @pytest.mark.asyncio
    async def test_cache_entry_uses_weather_namespace_and_ttl(self, build_service, memory_cache, clock):
        service, transport = build_service(lambda req: json_response(make_owm_forecast()), ttl_seconds=600)
        await service.get_forecast("Tokyo")
        assert await memory_cache.get("weather:tokyo") is not None

        clock.advance(600)
        assert await memory_cache.get("weather:tokyo") is None
        await service.get_forecast("Tokyo")
        assert transport.calls == 2

    @pytest.mark.asyncio
    async def test_sends_trimmed_city_to_provider(self, build_service):
        service, transport = build_service(lambda req: json_response(make_owm_forecast()))
        await service.get_forecast("  New York ")
        assert transport.requests[0].url.params["q"] == "New York"

    @pytest.mark.asyncio
    async def test_unknown_city_propagates_not_found(self, build_service, memory_cache):
        service, _ = build_service(lambda req: json_response({"cod": "404"}, 404))
        with pytest.raises(NotFoundError):
            await service.get_forecast("Atlantis")
        assert await memory_cache.get("weather:atlantis") is None

    @pytest.mark.asyncio
    async def test_timeout_propagates(self, build_service):
        def _timeout(request):
            raise httpx.ConnectTimeout("slow", request=request)

        service, _ = build_service(_timeout)
        with pytest.raises(UpstreamTimeoutError):
            await service.get_forecast("Tokyo")


class TestGetCurrent:
    @pytest.mark.asyncio
    async def test_returns_current_block(self, build_service):
        payload = make_owm_forecast(intervals=[make_owm_interval(temp=31.0)])
        service, _ = build_service(lambda req: json_response(payload))
        current = await service.get_current("Chennai")
        assert current.temperature == 31.0

    @pytest.mark.asyncio
    async def test_empty_forecast_is_not_found(self, build_service):
        service, _ = build_service(lambda req: json_response(make_owm_forecast(intervals=[])))
        with pytest.raises(NotFoundError):
            await service.get_current("Tokyo")
