"""
Provider clients for third-party weather and geocoding APIs.

One client per provider; the city-search variant is chosen once at startup
via build_city_search_client().
"""

from __future__ import annotations

import httpx

from services.api.providers.base import ProviderClient, ProviderKind
from services.api.providers.bbc import BBCLocatorClient
from services.api.providers.geoapify import GeoapifyClient
from services.api.providers.openweather import OpenWeatherClient


def build_city_search_client(
    kind: ProviderKind | str,
    http: httpx.AsyncClient,
    *,
    geoapify_url: str,
    geoapify_api_key: str,
    bbc_url: str,
    bbc_api_key: str,
    timeout_s: float,
    geoapify_limit: int = 40,
) -> GeoapifyClient | BBCLocatorClient:
    kind = ProviderKind(kind)
    if kind is ProviderKind.GEOAPIFY:
        return GeoapifyClient(http, geoapify_url, geoapify_api_key, timeout_s, limit=geoapify_limit)
    if kind is ProviderKind.BBC:
        return BBCLocatorClient(http, bbc_url, bbc_api_key, timeout_s)
    raise ValueError(f"{kind.value} is not a city search provider")


__all__ = [
    "ProviderClient",
    "ProviderKind",
    "OpenWeatherClient",
    "GeoapifyClient",
    "BBCLocatorClient",
    "build_city_search_client",
]
