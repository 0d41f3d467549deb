"""
Skycast FastAPI service — weather forecasts and city search.

Entrypoint: uvicorn services.api.main:app --host 0.0.0.0 --port 8000
"""

import logging
import uuid
from contextlib import asynccontextmanager

import httpx
import redis.asyncio as aioredis
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from pydantic import TypeAdapter
from sqlalchemy.ext.asyncio import async_sessionmaker
from starlette.responses import JSONResponse

from services.api.cache.keys import CITY_SEARCH_NAMESPACE, WEATHER_NAMESPACE, normalize_key, normalize_query
from services.api.cache.resolver import CacheAsideResolver
from services.api.cache.store import MemoryCacheStore, RedisCacheStore
from services.api.cities.gazetteer import FallbackGazetteer
from services.api.cities.service import CitySearchService
from services.api.config import Settings, settings
from services.api.db.engine import create_engine
from services.api.errors import WeatherServiceError
from services.api.preferences.store import MemoryPreferenceStore, SqlPreferenceStore
from services.api.providers import OpenWeatherClient, build_city_search_client
from services.api.routers import cities, health, weather
from services.api.weather.batch import WeatherBatchAggregator
from services.api.weather.models import CitySearchResult, WeatherSnapshot
from services.api.weather.service import WeatherService

logger = logging.getLogger(__name__)


def build_services(app: FastAPI, cfg: Settings, http: httpx.AsyncClient, cache, preferences) -> None:
    """Wire clients, resolvers and services once and hang them off app.state."""
    weather_resolver = CacheAsideResolver(
        cache, WEATHER_NAMESPACE, TypeAdapter(WeatherSnapshot), normalize_key
    )
    city_resolver = CacheAsideResolver(
        cache, CITY_SEARCH_NAMESPACE, TypeAdapter(list[CitySearchResult]), normalize_query
    )

    weather_client = OpenWeatherClient(
        http, cfg.openweathermap_url, cfg.openweathermap_api_key, cfg.provider_timeout_s
    )
    city_client = build_city_search_client(
        cfg.city_search_provider,
        http,
        geoapify_url=cfg.geoapify_url,
        geoapify_api_key=cfg.geoapify_api_key,
        bbc_url=cfg.bbc_url,
        bbc_api_key=cfg.bbc_api_key,
        timeout_s=cfg.provider_timeout_s,
        geoapify_limit=cfg.geoapify_limit,
    )

    weather_service = WeatherService(weather_client, weather_resolver, cfg.weather_cache_ttl_s)
    app.state.weather_service = weather_service
    app.state.weather_batch = WeatherBatchAggregator(
        weather_service.get_forecast, preferences, cfg.batch_max_concurrency
    )
    app.state.city_search_service = CitySearchService(
        city_client, city_resolver, FallbackGazetteer(), cfg.city_search_cache_ttl_s
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    app.state.settings = settings

    # Redis: cache degrades to misses if unreachable
    redis_client = None
    if settings.redis_url:
        try:
            redis_client = aioredis.from_url(
                settings.redis_url,
                decode_responses=True,
                socket_connect_timeout=5,
                socket_timeout=settings.redis_command_timeout_s,
            )
            await redis_client.ping()
        except Exception as e:
            logger.warning(f"Redis unavailable, caching disabled: {e}")
            redis_client = None
        cache = RedisCacheStore(redis_client, settings.redis_command_timeout_s)
    else:
        logger.info("REDIS_URL not set; using in-process cache")
        cache = MemoryCacheStore()
    app.state.redis = redis_client
    app.state.cache = cache

    # Preferences: read-only SA session factory
    sa_engine = None
    preferences = MemoryPreferenceStore()
    if settings.database_url:
        try:
            sa_engine = create_engine(
                settings.database_url,
                echo=settings.debug and settings.environment == "development",
            )
            preferences = SqlPreferenceStore(async_sessionmaker(sa_engine, expire_on_commit=False))
        except Exception as e:
            logger.warning(f"SA engine failed to init: {e}")
    app.state.preferences = preferences

    http = httpx.AsyncClient(timeout=settings.provider_timeout_s)
    build_services(app, settings, http, cache, preferences)

    yield

    await http.aclose()
    if sa_engine:
        await sa_engine.dispose()
    if redis_client:
        await redis_client.aclose()


app = FastAPI(
    title="Skycast API",
    version=settings.app_version,
    docs_url="/docs" if settings.environment == "development" else None,
    redoc_url=None,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(weather.router)
app.include_router(cities.router)


# Request ID injection
@app.middleware("http")
async def request_id_middleware(request: Request, call_next) -> Response:
    request_id = request.headers.get("x-request-id", str(uuid.uuid4()))
    request.state.request_id = request_id

    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


def _error_response(request: Request, status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "success": False,
            "error": {"code": code, "message": message},
            "requestId": getattr(request.state, "request_id", str(uuid.uuid4())),
        },
    )


# -- Exception Handlers --

@app.exception_handler(WeatherServiceError)
async def service_error_handler(request: Request, exc: WeatherServiceError) -> JSONResponse:
    response = _error_response(request, exc.status_code, exc.code, exc.message)
    retry_after = getattr(exc, "retry_after_s", None)
    if retry_after is not None:
        response.headers["Retry-After"] = str(int(retry_after))
    return response


@app.exception_handler(404)
async def not_found_handler(request: Request, exc) -> JSONResponse:
    return _error_response(request, 404, "NOT_FOUND", "Resource not found.")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    message = errors[0].get("msg", "Validation error.") if errors else "Validation error."
    return _error_response(request, 422, "VALIDATION_ERROR", message)


@app.exception_handler(500)
async def internal_error_handler(request: Request, exc) -> JSONResponse:
    return _error_response(request, 500, "INTERNAL_ERROR", "An unexpected error occurred.")
