"""
FallbackGazetteer — static last-resort city list.

Consulted by CitySearchService only when the search provider call itself
fails (timeout, bad key, 5xx, ...). A provider that answers with zero
results is believed; the gazetteer never overrides it.

Matching is a case-insensitive substring test against name, state and
country, in dataset order.
"""

from __future__ import annotations

from typing import Iterable

from services.api.weather.models import CitySearchResult


def _city(name: str, state: str | None, country: str, lat: float, lon: float) -> CitySearchResult:
    display = ", ".join(p for p in (name, state, country) if p)
    return CitySearchResult(
        name=name,
        state=state,
        country=country,
        latitude=lat,
        longitude=lon,
        display_name=display,
    )


DEFAULT_CITIES: tuple[CitySearchResult, ...] = (
    _city("London", "England", "United Kingdom", 51.5074, -0.1278),
    _city("London", "Ontario", "Canada", 42.9849, -81.2453),
    _city("Manchester", "England", "United Kingdom", 53.4808, -2.2426),
    _city("Edinburgh", "Scotland", "United Kingdom", 55.9533, -3.1883),
    _city("Dublin", "Leinster", "Ireland", 53.3498, -6.2603),
    _city("Paris", "Île-de-France", "France", 48.8566, 2.3522),
    _city("Berlin", "Berlin", "Germany", 52.5200, 13.4050),
    _city("Madrid", "Community of Madrid", "Spain", 40.4168, -3.7038),
    _city("Rome", "Lazio", "Italy", 41.9028, 12.4964),
    _city("Amsterdam", "North Holland", "Netherlands", 52.3676, 4.9041),
    _city("New York", "New York", "United States", 40.7128, -74.0060),
    _city("Los Angeles", "California", "United States", 34.0522, -118.2437),
    _city("San Francisco", "California", "United States", 37.7749, -122.4194),
    _city("Chicago", "Illinois", "United States", 41.8781, -87.6298),
    _city("Toronto", "Ontario", "Canada", 43.6532, -79.3832),
    _city("Mexico City", None, "Mexico", 19.4326, -99.1332),
    _city("São Paulo", "São Paulo", "Brazil", -23.5505, -46.6333),
    _city("Cape Town", "Western Cape", "South Africa", -33.9249, 18.4241),
    _city("Cairo", None, "Egypt", 30.0444, 31.2357),
    _city("Dubai", None, "United Arab Emirates", 25.2048, 55.2708),
    _city("Mumbai", "Maharashtra", "India", 19.0760, 72.8777),
    _city("New Delhi", "Delhi", "India", 28.6139, 77.2090),
    _city("Bengaluru", "Karnataka", "India", 12.9716, 77.5946),
    _city("Chennai", "Tamil Nadu", "India", 13.0827, 80.2707),
    _city("Coimbatore", "Tamil Nadu", "India", 11.0168, 76.9558),
    _city("Singapore", None, "Singapore", 1.3521, 103.8198),
    _city("Tokyo", None, "Japan", 35.6762, 139.6503),
    _city("Seoul", None, "South Korea", 37.5665, 126.9780),
    _city("Sydney", "New South Wales", "Australia", -33.8688, 151.2093),
    _city("Auckland", None, "New Zealand", -36.8485, 174.7633),
)


class FallbackGazetteer:
    def __init__(self, entries: Iterable[CitySearchResult] = DEFAULT_CITIES) -> None:
        self._entries = tuple(entries)

    def search(self, query: str) -> list[CitySearchResult]:
        needle = query.strip().lower()
        if not needle:
            return []
        return [
            entry
            for entry in self._entries
            if needle in entry.name.lower()
            or (entry.state and needle in entry.state.lower())
            or needle in entry.country.lower()
        ]

    def __len__(self) -> int:
        return len(self._entries)
