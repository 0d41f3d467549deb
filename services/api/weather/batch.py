"""
BatchAggregator — resolve many keys, isolate per-key failures.

Output has exactly one BatchResult per input key, in input order. A key that
fails produces {key, error} at its own position; it never aborts, delays or
poisons the other keys. Keys run concurrently, bounded by a semaphore.

Session lookups read the session's saved cities from the PreferenceStore;
an unknown session resolves to an empty batch.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Generic, Sequence, TypeVar

from services.api.preferences.store import PreferenceStore
from services.api.weather.models import BatchResult, CurrentWeather, WeatherSnapshot

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_CONCURRENCY = 5


class BatchAggregator(Generic[T]):
    """
    Usage:
        aggregator = BatchAggregator(weather_service.get_forecast, preference_store)
        results = await aggregator.resolve_batch(["Tokyo", "Paris", "Nowhere"])
        # [BatchResult(key="Tokyo", value=...), ..., BatchResult(key="Nowhere", error="...")]
    """

    def __init__(
        self,
        resolve_one: Callable[[str], Awaitable[T]],
        preferences: PreferenceStore,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._resolve_one = resolve_one
        self._preferences = preferences
        self._max_concurrency = max_concurrency

    async def resolve_batch(self, keys: Sequence[str]) -> list[BatchResult[T]]:
        if not keys:
            return []

        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await asyncio.gather(*(self._resolve_item(semaphore, key) for key in keys))

        failed = sum(1 for r in results if not r.succeeded)
        logger.info("Batch resolved: keys=%d failed=%d", len(results), failed)
        return list(results)

    async def _resolve_item(self, semaphore: asyncio.Semaphore, key: str) -> BatchResult[T]:
        async with semaphore:
            try:
                return BatchResult.ok(key, await self._resolve_one(key))
            except Exception as exc:
                logger.warning("Batch item failed for key=%r: %s", key, exc)
                return BatchResult.failed(key, str(exc) or type(exc).__name__)

    async def session_keys(self, session_id: str) -> list[str]:
        prefs = await self._preferences.get_user_preferences(session_id)
        if prefs is None:
            return []
        return list(prefs.cities)

    async def resolve_for_session(self, session_id: str) -> list[BatchResult[T]]:
        return await self.resolve_batch(await self.session_keys(session_id))


class WeatherBatchAggregator(BatchAggregator[WeatherSnapshot]):
    """Batch forecasts for the cities saved by a session."""

    async def get_weather_forecasts_for_session(
        self, session_id: str
    ) -> list[BatchResult[WeatherSnapshot]]:
        return await self.resolve_for_session(session_id)

    async def get_current_weather_for_session(
        self, session_id: str
    ) -> list[BatchResult[CurrentWeather]]:
        """Same batch, trimmed to current conditions per city."""
        current: list[BatchResult[CurrentWeather]] = []
        for result in await self.resolve_for_session(session_id):
            if result.succeeded and result.value.current is not None:
                current.append(BatchResult[CurrentWeather].ok(result.key, result.value.current))
            else:
                error = result.error or f'No forecast data for city "{result.key}"'
                current.append(BatchResult[CurrentWeather].failed(result.key, error))
        return current
