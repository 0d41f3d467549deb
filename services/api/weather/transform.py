"""
Provider payload -> canonical DTO mappings. Pure functions, no I/O.

Weather (OpenWeatherMap 3-hour intervals):
  current  first interval, plus sunrise/sunset from the city block
  hourly   every interval, pop (0-1) converted to a whole percent
  daily    intervals grouped by calendar day of dt_txt:
             min/max temp       extrema of the group
             precipitation      mean pop of the group, whole percent
             condition/icon/wind taken from the middle interval,
                                index len(group) // 2

Wind degrees map to 8 compass points: round(deg / 45) % 8 over
N, NE, E, SE, S, SW, W, NW. Rounding is half-up (22.5 -> NE), not
Python's banker's rounding.

City search:
  Geoapify  name = city | county | address_line1, records with none of those
            are dropped; results with neither lat nor lon are dropped.
  BBC       name + "Region, Country" container string; no coordinates.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Optional

from services.api.providers.bbc import BBCResponse
from services.api.providers.geoapify import GeoapifyResponse
from services.api.providers.openweather import OpenWeatherForecast, OWMInterval
from services.api.weather.models import (
    CitySearchResult,
    CurrentWeather,
    DailyWeather,
    HourlyWeather,
    WeatherSnapshot,
)

_COMPASS = ("N", "NE", "E", "SE", "S", "SW", "W", "NW")


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def wind_direction(deg: float) -> str:
    return _COMPASS[_round_half_up(deg / 45) % 8]


def precipitation_percent(pop: float) -> int:
    return _round_half_up(pop * 100)


def _iso_utc(unix_seconds: Optional[int]) -> Optional[str]:
    if unix_seconds is None:
        return None
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _hourly(interval: OWMInterval) -> HourlyWeather:
    condition = interval.weather[0]
    return HourlyWeather(
        time=interval.dt_txt,
        temperature=interval.main.temp,
        feels_like=interval.main.feels_like,
        condition=condition.description,
        icon=condition.icon,
        humidity=interval.main.humidity,
        wind_speed=interval.wind.speed,
        wind_direction=wind_direction(interval.wind.deg),
        pressure=interval.main.pressure,
        precipitation_chance=precipitation_percent(interval.pop),
    )


def _daily(date: str, group: list[OWMInterval]) -> DailyWeather:
    temps = [i.main.temp for i in group]
    mid = group[len(group) // 2]
    mean_pop = sum(i.pop for i in group) / len(group)
    return DailyWeather(
        date=date,
        min_temp=min(temps),
        max_temp=max(temps),
        condition=mid.weather[0].description,
        icon=mid.weather[0].icon,
        precipitation_chance=precipitation_percent(mean_pop),
        wind_speed=mid.wind.speed,
    )


def to_weather_snapshot(forecast: OpenWeatherForecast) -> WeatherSnapshot:
    intervals = forecast.intervals

    current = None
    if intervals:
        first = intervals[0]
        current = CurrentWeather(
            temperature=first.main.temp,
            feels_like=first.main.feels_like,
            condition=first.weather[0].description,
            icon=first.weather[0].icon,
            humidity=first.main.humidity,
            wind_speed=first.wind.speed,
            wind_direction=wind_direction(first.wind.deg),
            pressure=first.main.pressure,
            sunrise=_iso_utc(forecast.city.sunrise),
            sunset=_iso_utc(forecast.city.sunset),
        )

    # dict keeps first-seen order, so days come out chronologically
    by_date: dict[str, list[OWMInterval]] = {}
    for interval in intervals:
        by_date.setdefault(interval.date, []).append(interval)

    return WeatherSnapshot(
        city=forecast.city.name,
        current=current,
        hourly=[_hourly(i) for i in intervals],
        daily=[_daily(date, group) for date, group in by_date.items()],
    )


def geoapify_to_results(payload: GeoapifyResponse) -> list[CitySearchResult]:
    results = []
    for place in payload.results:
        name = place.city or place.county or place.address_line1
        if not name:
            continue
        if place.lat is None and place.lon is None:
            continue
        state = place.state or place.state_district
        country = place.country or ""
        display_name = place.formatted or ", ".join(p for p in (name, state, country) if p)
        results.append(
            CitySearchResult(
                name=name,
                state=state,
                country=country,
                latitude=place.lat,
                longitude=place.lon,
                display_name=display_name,
            )
        )
    return results


def bbc_to_results(payload: BBCResponse) -> list[CitySearchResult]:
    results = []
    for location in payload.locations:
        if not location.name:
            continue
        parts = [p.strip() for p in (location.container or "").split(",") if p.strip()]
        country = parts[-1] if parts else ""
        state = ", ".join(parts[:-1]) or None
        display_name = f"{location.name}, {location.container}" if location.container else location.name
        results.append(
            CitySearchResult(
                name=location.name,
                state=state,
                country=country,
                display_name=display_name,
            )
        )
    return results
