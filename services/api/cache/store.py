"""
Key/value cache stores with per-entry TTL.

Two implementations of the same CacheStore contract:

  RedisCacheStore   redis.asyncio client, SET ... EX ttl. Every command is
                    bounded by a command timeout. Any failure (timeout,
                    connection error, client not configured) degrades to a
                    miss on read and False on write/delete — callers never
                    see an exception from the cache.
  MemoryCacheStore  in-process dict used when no Redis URL is configured and
                    in tests. Expiry is checked lazily on read.

Values are opaque strings; serialisation belongs to the caller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class CacheStore(Protocol):
    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool: ...

    async def delete(self, key: str) -> bool: ...


class RedisCacheStore:
    """
    Redis-backed cache store.

    Usage:
        store = RedisCacheStore(redis_client, command_timeout_s=1.0)
        raw = await store.get("weather:tokyo")
        if raw is None:
            await store.set("weather:tokyo", payload_json, ttl_seconds=600)
    """

    def __init__(self, redis, command_timeout_s: float = 1.0) -> None:
        """
        Args:
            redis:             An async Redis client (redis.asyncio compatible,
                               decode_responses=True). May be None — all
                               operations degrade gracefully to cache misses.
            command_timeout_s: Upper bound for a single Redis command.
        """
        self._redis = redis
        self._timeout = command_timeout_s

    async def get(self, key: str) -> str | None:
        """Return the cached string for key, or None on miss / unavailable."""
        if self._redis is None:
            return None

        try:
            raw = await asyncio.wait_for(self._redis.get(key), timeout=self._timeout)
        except Exception:
            logger.warning("Cache GET failed for key=%s", key, exc_info=True)
            return None

        if raw is None:
            logger.debug("Cache miss: %s", key)
            return None
        logger.debug("Cache hit: %s", key)
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        return raw

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Write value with a TTL. Returns False if the write was dropped."""
        if self._redis is None:
            return False

        try:
            await asyncio.wait_for(
                self._redis.set(key, value, ex=ttl_seconds),
                timeout=self._timeout,
            )
        except Exception:
            logger.warning("Cache SET failed for key=%s", key, exc_info=True)
            return False

        logger.debug("Cached: key=%s ttl=%ds", key, ttl_seconds)
        return True

    async def delete(self, key: str) -> bool:
        """Evict key. Returns True only if an entry was actually removed."""
        if self._redis is None:
            return False

        try:
            removed = await asyncio.wait_for(self._redis.delete(key), timeout=self._timeout)
        except Exception:
            logger.warning("Cache DELETE failed for key=%s", key, exc_info=True)
            return False

        logger.debug("Cache invalidated: %s", key)
        return bool(removed)


@dataclass
class CacheEntry:
    key: str
    value: str
    ttl_seconds: int
    written_at: float

    def expired(self, now: float) -> bool:
        return now - self.written_at >= self.ttl_seconds


class MemoryCacheStore:
    """
    Process-local cache store.

    Not shared between workers — only suitable for local dev and tests.
    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    async def get(self, key: str) -> str | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if entry.expired(self._clock()):
            del self._entries[key]
            return None
        return entry.value

    async def set(self, key: str, value: str, ttl_seconds: int) -> bool:
        if ttl_seconds <= 0:
            raise ValueError(f"ttl_seconds must be positive, got {ttl_seconds}")
        # Overwrite, never merge.
        self._entries[key] = CacheEntry(
            key=key,
            value=value,
            ttl_seconds=ttl_seconds,
            written_at=self._clock(),
        )
        return True

    async def delete(self, key: str) -> bool:
        return self._entries.pop(key, None) is not None

    def __len__(self) -> int:
        return len(self._entries)
