"""
BBC locator client (city search, variant B).

GET {base}?api_key={key}&s={query}&format=json&... returns:
  {"response": {"results": {"results": [
     {"id": "2643743", "name": "London", "container": "Greater London, United Kingdom"},
     ...
  ]}}}

No coordinates are provided.
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from services.api.providers.base import ProviderClient, ProviderKind


class BBCLocation(BaseModel):
    name: Optional[str] = None
    container: Optional[str] = None


class BBCResultPage(BaseModel):
    results: list[BBCLocation] = []


class BBCResponseBody(BaseModel):
    results: BBCResultPage = BBCResultPage()


class BBCResponse(BaseModel):
    response: BBCResponseBody = BBCResponseBody()

    @property
    def locations(self) -> list[BBCLocation]:
        return self.response.results.results


class BBCLocatorClient(ProviderClient):
    kind = ProviderKind.BBC

    async def search(self, query: str) -> BBCResponse:
        params = {
            "api_key": self._api_key,
            "s": query,
            "format": "json",
            "stack": "aws",
            "locale": "en",
            "filter": "international",
            "place-types": "settlement,airport,district",
            "order": "importance",
        }
        return await self._get_json(params, BBCResponse, subject=query)
