"""
Canonical weather and place DTOs.

These are the only shapes that leave the service and the only shapes written
to the cache. Field names are snake_case in Python and camelCase on the wire
(feelsLike, windSpeed, precipitationChance, ...).
"""

from __future__ import annotations

from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class CurrentWeather(_CamelModel):
    temperature: float
    feels_like: float
    condition: str
    icon: str
    humidity: float
    wind_speed: float
    wind_direction: str
    pressure: float
    sunrise: Optional[str] = None  # ISO-8601 UTC
    sunset: Optional[str] = None


class HourlyWeather(_CamelModel):
    time: str
    temperature: float
    feels_like: float
    condition: str
    icon: str
    humidity: float
    wind_speed: float
    wind_direction: str
    pressure: float
    precipitation_chance: int  # percent, 0-100


class DailyWeather(_CamelModel):
    date: str  # YYYY-MM-DD
    min_temp: float
    max_temp: float
    condition: str
    icon: str
    precipitation_chance: int
    wind_speed: float


class WeatherSnapshot(_CamelModel):
    city: str
    current: Optional[CurrentWeather] = None
    hourly: list[HourlyWeather] = []
    daily: list[DailyWeather] = []


class CitySearchResult(_CamelModel):
    name: str
    state: Optional[str] = None
    country: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    display_name: str


class BatchResult(_CamelModel, Generic[T]):
    """Outcome for one key of a batch: exactly one of value / error is set."""

    key: str
    value: Optional[T] = None
    error: Optional[str] = None

    @model_validator(mode="after")
    def _exactly_one_outcome(self) -> "BatchResult[T]":
        if (self.value is None) == (self.error is None):
            raise ValueError("BatchResult needs exactly one of value or error")
        return self

    @classmethod
    def ok(cls, key: str, value: T) -> "BatchResult[T]":
        return cls(key=key, value=value)

    @classmethod
    def failed(cls, key: str, error: str) -> "BatchResult[T]":
        return cls(key=key, error=error)

    @property
    def succeeded(self) -> bool:
        return self.error is None
