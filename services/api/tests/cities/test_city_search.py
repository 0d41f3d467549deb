"""
Tests for CitySearchService.

Coverage targets:
  - blank query -> [] with zero network calls
  - over-length / markup-only query -> ValidationError with zero network calls
  - cache-aside on city-search:{normalised query}
  - provider failure -> gazetteer matches (not cached)
  - provider success with zero results is NOT replaced by the gazetteer
  - provider variant chosen at construction (Geoapify / BBC)
"""

import httpx
import pytest
from pydantic import TypeAdapter

from services.api.cache.keys import normalize_query
from services.api.cache.resolver import CacheAsideResolver
from services.api.cities.gazetteer import FallbackGazetteer
from services.api.cities.service import CitySearchService
from services.api.errors import ValidationError
from services.api.providers.bbc import BBCLocatorClient
from services.api.providers.geoapify import GeoapifyClient
from services.api.providers.openweather import OpenWeatherClient
from services.api.tests.conftest import json_response, make_bbc_response, make_geoapify_place
from services.api.weather.models import CitySearchResult


@pytest.fixture
def city_resolver(memory_cache):
    return CacheAsideResolver(
        memory_cache, "city-search", TypeAdapter(list[CitySearchResult]), normalize_query
    )


@pytest.fixture
def build_service(make_http, city_resolver):
    def _build(handler, client_cls=GeoapifyClient):
        http, transport = make_http(handler)
        client = client_cls(http, "https://provider.test/search", "key")
        return CitySearchService(client, city_resolver, FallbackGazetteer()), transport

    return _build


def _geo_ok(request):
    return json_response({"results": [make_geoapify_place()]})


class TestQueryValidation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("query", ["", "   "])
    async def test_blank_query_returns_empty_without_network(self, build_service, query):
        service, transport = build_service(_geo_ok)
        assert await service.search(query) == []
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_101_chars_rejected_without_network(self, build_service):
        service, transport = build_service(_geo_ok)
        with pytest.raises(ValidationError):
            await service.search("a" * 101)
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_100_chars_accepted(self, build_service):
        service, transport = build_service(_geo_ok)
        await service.search("a" * 100)
        assert transport.calls == 1

    @pytest.mark.asyncio
    async def test_markup_only_query_rejected(self, build_service):
        service, transport = build_service(_geo_ok)
        with pytest.raises(ValidationError):
            await service.search("<>&")
        assert transport.calls == 0

    @pytest.mark.asyncio
    async def test_disallowed_characters_stripped_before_provider(self, build_service):
        service, transport = build_service(_geo_ok)
        await service.search('<b>Lon"')
        assert transport.requests[0].url.params["text"] == "blon"


class TestCaching:
    @pytest.mark.asyncio
    async def test_results_cached_per_normalised_query(self, build_service, memory_cache):
        service, transport = build_service(_geo_ok)
        first = await service.search("London")
        second = await service.search("  LONDON ")

        assert transport.calls == 1
        assert first == second
        assert await memory_cache.get("city-search:london") is not None

    @pytest.mark.asyncio
    async def test_cache_ttl_defaults_to_twelve_hours(self, build_service, clock):
        service, transport = build_service(_geo_ok)
        await service.search("london")
        clock.advance(12 * 3600 - 1)
        await service.search("london")
        assert transport.calls == 1
        clock.advance(1)
        await service.search("london")
        assert transport.calls == 2


class TestFallback:
    @pytest.mark.asyncio
    async def test_provider_failure_serves_gazetteer(self, build_service):
        service, _ = build_service(lambda req: httpx.Response(500))
        results = await service.search("lon")
        assert any("London" in r.name for r in results)

    @pytest.mark.asyncio
    async def test_provider_timeout_serves_gazetteer(self, build_service):
        def _timeout(request):
            raise httpx.ReadTimeout("slow", request=request)

        service, _ = build_service(_timeout)
        results = await service.search("tokyo")
        assert [r.name for r in results] == ["Tokyo"]

    @pytest.mark.asyncio
    async def test_fallback_results_not_cached(self, build_service, memory_cache):
        service, transport = build_service(lambda req: httpx.Response(503))
        await service.search("lon")
        assert await memory_cache.get("city-search:lon") is None
        await service.search("lon")
        assert transport.calls == 2

    @pytest.mark.asyncio
    async def test_zero_results_not_overridden(self, build_service):
        service, _ = build_service(lambda req: json_response({"results": []}))
        assert await service.search("lon") == []

    @pytest.mark.asyncio
    async def test_cached_results_preferred_over_fallback(self, build_service, memory_cache):
        cached = [CitySearchResult(name="Cached", country="X", display_name="Cached, X")]
        await memory_cache.set(
            "city-search:lon",
            TypeAdapter(list[CitySearchResult]).dump_json(cached, by_alias=True).decode(),
            60,
        )
        service, transport = build_service(lambda req: httpx.Response(500))
        assert await service.search("lon") == cached
        assert transport.calls == 0


class TestProviderVariants:
    @pytest.mark.asyncio
    async def test_bbc_variant(self, build_service):
        body = make_bbc_response([{"name": "London", "container": "Greater London, United Kingdom"}])
        service, transport = build_service(lambda req: json_response(body), client_cls=BBCLocatorClient)

        results = await service.search("lon")

        assert service.provider == "bbc"
        assert transport.requests[0].url.params["s"] == "lon"
        assert results[0].country == "United Kingdom"

    def test_weather_client_rejected(self, city_resolver):
        client = OpenWeatherClient(httpx.AsyncClient(), "https://owm.test", "key")
        with pytest.raises(ValueError):
            CitySearchService(client, city_resolver, FallbackGazetteer())
