"""
CacheAsideResolver — check cache, fetch on miss, populate cache.

Flow for one key:
  1. Normalise the raw key (ValidationError if empty or > 100 chars)
  2. GET {namespace}:{key} — on hit, deserialise and return without fetching
  3. On miss (or cache unavailable, or unreadable cached value): await fetch()
  4. Serialise the result and SET it with the caller's TTL (best-effort)

Fetch errors propagate unchanged. Falling back to something else when a
provider is down is the caller's decision, not the resolver's.

Two overlapping resolves for the same uncached key may both call fetch; the
last write wins. No locking.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Generic, TypeVar

from pydantic import TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from services.api.cache.keys import cache_key, normalize_key, validate_key
from services.api.cache.store import CacheStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class CacheAsideResolver(Generic[T]):
    """
    Usage:
        resolver = CacheAsideResolver(store, "weather", TypeAdapter(WeatherSnapshot))
        snapshot = await resolver.resolve("Tokyo", fetch_tokyo, ttl_seconds=600)
    """

    def __init__(
        self,
        cache: CacheStore,
        namespace: str,
        adapter: TypeAdapter[T],
        normalizer: Callable[[str], str] = normalize_key,
    ) -> None:
        self._cache = cache
        self._namespace = namespace
        self._adapter = adapter
        self._normalizer = normalizer

    def normalized_key(self, raw_key: str) -> str:
        """Normalise and validate; raises ValidationError."""
        return validate_key(self._normalizer(raw_key))

    async def resolve(
        self,
        raw_key: str,
        fetch: Callable[[], Awaitable[T]],
        ttl_seconds: int,
    ) -> T:
        key = cache_key(self._namespace, self.normalized_key(raw_key))

        cached = await self._read(key)
        if cached is not None:
            return cached

        value = await fetch()
        await self._write(key, value, ttl_seconds)
        return value

    async def invalidate(self, raw_key: str) -> bool:
        """Explicitly drop one entry. Not part of the normal resolve flow."""
        key = cache_key(self._namespace, self.normalized_key(raw_key))
        return await self._cache.delete(key)

    async def _read(self, key: str) -> T | None:
        try:
            raw = await self._cache.get(key)
        except Exception:
            # Fail open: a broken cache behaves like an empty one.
            logger.warning("Cache read failed for key=%s; treating as miss", key, exc_info=True)
            return None
        if raw is None:
            return None

        try:
            return self._adapter.validate_json(raw)
        except PydanticValidationError:
            logger.warning("Discarding undecodable cache entry for key=%s", key)
            return None

    async def _write(self, key: str, value: T, ttl_seconds: int) -> None:
        try:
            payload = self._adapter.dump_json(value, by_alias=True)
            stored = await self._cache.set(key, payload.decode("utf-8"), ttl_seconds)
        except Exception:
            logger.warning("Cache write failed for key=%s; result not cached", key, exc_info=True)
            return
        if not stored:
            logger.debug("Cache write dropped for key=%s", key)
