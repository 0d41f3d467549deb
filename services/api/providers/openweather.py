"""
OpenWeatherMap 5 day / 3 hour forecast client.

GET {base}?q={city}&appid={key}&units=metric returns:
  {
    "city": {"name": "Tokyo", "sunrise": 1708380000, "sunset": 1708420000, ...},
    "list": [
      {
        "dt_txt": "2026-02-20 12:00:00",
        "main":    {"temp": 11.2, "feels_like": 9.8, "humidity": 60, "pressure": 1015},
        "weather": [{"description": "light rain", "icon": "10d"}],
        "wind":    {"speed": 3.1, "deg": 200},
        "pop":     0.4
      },
      ...
    ]
  }

Unknown cities come back as HTTP 404 ({"cod": "404", "message": "city not found"}).
"""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field

from services.api.providers.base import ProviderClient, ProviderKind


class OWMMain(BaseModel):
    temp: float
    feels_like: float
    humidity: float
    pressure: float


class OWMCondition(BaseModel):
    description: str
    icon: str


class OWMWind(BaseModel):
    speed: float
    deg: float = 0.0


class OWMInterval(BaseModel):
    dt_txt: str
    main: OWMMain
    weather: list[OWMCondition] = Field(min_length=1)
    wind: OWMWind
    pop: float = Field(default=0.0, ge=0.0, le=1.0)

    @property
    def date(self) -> str:
        """Calendar day part of dt_txt ("2026-02-20 12:00:00" -> "2026-02-20")."""
        return self.dt_txt.split(" ")[0]


class OWMCity(BaseModel):
    name: str
    sunrise: Optional[int] = None  # unix seconds, UTC
    sunset: Optional[int] = None


class OpenWeatherForecast(BaseModel):
    city: OWMCity
    intervals: list[OWMInterval] = Field(default_factory=list, alias="list")


class OpenWeatherClient(ProviderClient):
    kind = ProviderKind.OPENWEATHER
    not_found_label = "City"

    async def fetch_forecast(self, city: str) -> OpenWeatherForecast:
        params = {
            "q": city,
            "appid": self._api_key,
            "units": "metric",
        }
        return await self._get_json(params, OpenWeatherForecast, subject=city)
