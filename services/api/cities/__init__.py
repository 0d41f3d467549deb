"""
City search package.

Place autocomplete via Geoapify or the BBC locator, cached per normalised
query, with a static gazetteer as last resort when the provider is down.
"""

from services.api.cities.gazetteer import DEFAULT_CITIES, FallbackGazetteer
from services.api.cities.service import CitySearchService

__all__ = ["CitySearchService", "DEFAULT_CITIES", "FallbackGazetteer"]
