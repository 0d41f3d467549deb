"""
WeatherService — OpenWeatherMap forecast lookups behind the cache-aside resolver.

Cache strategy: one entry per normalised city (key weather:{city}), holding
the canonical WeatherSnapshot as JSON, TTL 600s by default. Every request for
the same city within the TTL is served without calling OpenWeatherMap.

Errors from the provider (unknown city, bad key, quota, timeout) propagate to
the caller as typed ProviderError subclasses.
"""

from __future__ import annotations

import logging

from services.api.cache.resolver import CacheAsideResolver
from services.api.errors import NotFoundError
from services.api.providers.openweather import OpenWeatherClient
from services.api.weather.models import CurrentWeather, WeatherSnapshot
from services.api.weather.transform import to_weather_snapshot

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 600


class WeatherService:
    """
    Usage:
        service = WeatherService(client, resolver, ttl_seconds=600)
        snapshot = await service.get_forecast("Tokyo")
    """

    def __init__(
        self,
        client: OpenWeatherClient,
        resolver: CacheAsideResolver[WeatherSnapshot],
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        self._client = client
        self._resolver = resolver
        self._ttl_seconds = ttl_seconds

    async def get_forecast(self, city: str) -> WeatherSnapshot:
        """Current conditions, 3-hourly and daily forecast for one city."""
        query = city.strip()

        async def fetch() -> WeatherSnapshot:
            logger.debug("Fetching forecast from %s for %r", self._client.provider, query)
            forecast = await self._client.fetch_forecast(query)
            return to_weather_snapshot(forecast)

        return await self._resolver.resolve(city, fetch, self._ttl_seconds)

    async def get_current(self, city: str) -> CurrentWeather:
        """Current conditions only; shares the forecast cache entry."""
        snapshot = await self.get_forecast(city)
        if snapshot.current is None:
            raise NotFoundError(f'No forecast data for city "{city}"', provider=self._client.provider)
        return snapshot.current
