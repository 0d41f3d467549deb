"""
CitySearchService — place autocomplete behind the cache-aside resolver.

Provider (Geoapify or BBC locator) is chosen once at construction; the
matching payload transform is picked from the client's kind.

Flow:
  - blank query                  -> [] (no cache, no network)
  - query normalises to nothing  -> ValidationError (e.g. "<>&")
  - query longer than 100 chars  -> ValidationError
  - cache hit city-search:{q}    -> cached results
  - provider answers             -> transformed results, cached 12h
                                    (an empty list is a valid answer)
  - provider call fails          -> FallbackGazetteer matches, NOT cached
"""

from __future__ import annotations

import logging
from typing import Callable, Union

from services.api.cache.resolver import CacheAsideResolver
from services.api.cities.gazetteer import FallbackGazetteer
from services.api.errors import ProviderError
from services.api.providers.base import ProviderKind
from services.api.providers.bbc import BBCLocatorClient
from services.api.providers.geoapify import GeoapifyClient
from services.api.weather.models import CitySearchResult
from services.api.weather.transform import bbc_to_results, geoapify_to_results

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 12 * 3600

CitySearchClient = Union[GeoapifyClient, BBCLocatorClient]

_TRANSFORMS: dict[ProviderKind, Callable] = {
    ProviderKind.GEOAPIFY: geoapify_to_results,
    ProviderKind.BBC: bbc_to_results,
}


class CitySearchService:
    """
    Usage:
        service = CitySearchService(client, resolver, FallbackGazetteer())
        results = await service.search("coimb")
    """

    def __init__(
        self,
        client: CitySearchClient,
        resolver: CacheAsideResolver[list[CitySearchResult]],
        gazetteer: FallbackGazetteer,
        ttl_seconds: int = DEFAULT_TTL_SECONDS,
    ) -> None:
        if client.kind not in _TRANSFORMS:
            raise ValueError(f"{client.provider} is not a city search provider")
        self._client = client
        self._transform = _TRANSFORMS[client.kind]
        self._resolver = resolver
        self._gazetteer = gazetteer
        self._ttl_seconds = ttl_seconds

    @property
    def provider(self) -> str:
        return self._client.provider

    async def search(self, query: str) -> list[CitySearchResult]:
        if not query or not query.strip():
            return []

        # Raises ValidationError before anything touches the cache or network.
        normalized = self._resolver.normalized_key(query)

        async def fetch() -> list[CitySearchResult]:
            payload = await self._client.search(normalized)
            return self._transform(payload)

        try:
            return await self._resolver.resolve(query, fetch, self._ttl_seconds)
        except ProviderError as exc:
            matches = self._gazetteer.search(normalized)
            logger.warning(
                "%s search failed for %r (%s); serving %d gazetteer matches",
                self.provider,
                normalized,
                exc.code,
                len(matches),
            )
            return matches
