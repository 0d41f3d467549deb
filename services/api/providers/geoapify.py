"""
Geoapify autocomplete client (city search, variant A).

GET {base}?text={query}&format=json&apiKey={key}&limit=40 returns:
  {"results": [
     {"city": "London", "state": "England", "country": "United Kingdom",
      "lat": 51.5, "lon": -0.12, "formatted": "London, ENG, United Kingdom"},
     {"county": "Greater London", "state_district": "...", ...},
     {"address_line1": "London Road", ...}
  ]}

Every field is optional on Geoapify's side; the transformer decides which
records are usable.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from services.api.providers.base import ProviderClient, ProviderKind


class GeoapifyPlace(BaseModel):
    city: Optional[str] = None
    county: Optional[str] = None
    address_line1: Optional[str] = None
    state: Optional[str] = None
    state_district: Optional[str] = None
    country: Optional[str] = None
    lat: Optional[float] = None
    lon: Optional[float] = None
    formatted: Optional[str] = None


class GeoapifyResponse(BaseModel):
    results: list[GeoapifyPlace] = []


class GeoapifyClient(ProviderClient):
    kind = ProviderKind.GEOAPIFY

    def __init__(self, *args, limit: int = 40, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._limit = limit

    async def search(self, query: str) -> GeoapifyResponse:
        params = {
            "text": query,
            "format": "json",
            "apiKey": self._api_key,
            "limit": self._limit,
        }
        return await self._get_json(params, GeoapifyResponse, subject=query)
