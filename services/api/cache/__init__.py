"""
Cache package.

Cache-aside retrieval over a TTL key/value store (Redis in production,
in-process memory for local dev and tests).
"""

from services.api.cache.resolver import CacheAsideResolver
from services.api.cache.store import CacheStore, MemoryCacheStore, RedisCacheStore

__all__ = ["CacheAsideResolver", "CacheStore", "MemoryCacheStore", "RedisCacheStore"]
