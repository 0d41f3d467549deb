"""
Weather service package.

Provides OpenWeatherMap forecasts behind a cache-aside resolver and batch
lookups for the cities saved by a session.
"""

from services.api.weather.batch import BatchAggregator, WeatherBatchAggregator
from services.api.weather.service import WeatherService

__all__ = ["BatchAggregator", "WeatherBatchAggregator", "WeatherService"]
