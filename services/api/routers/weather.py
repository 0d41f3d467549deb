"""
Weather endpoints.

  GET /weather/{city}/forecast                 one city, full snapshot
  GET /weather/session/{session_id}            every saved city, full snapshot
  GET /weather/session/{session_id}/current    every saved city, current only

Session endpoints always answer 200; per-city failures are reported inside
the list as {"key": ..., "error": ...}.
"""

from fastapi import APIRouter, Path, Request

router = APIRouter(prefix="/weather", tags=["weather"])


def _envelope(request: Request, data) -> dict:
    return {"success": True, "data": data, "requestId": request.state.request_id}


@router.get("/{city}/forecast")
async def get_forecast(
    request: Request,
    city: str = Path(..., min_length=1, max_length=100, description="City name"),
) -> dict:
    snapshot = await request.app.state.weather_service.get_forecast(city)
    return _envelope(request, snapshot.model_dump(by_alias=True))


@router.get("/session/{session_id}")
async def get_session_forecasts(
    request: Request,
    session_id: str = Path(..., min_length=1, max_length=100),
) -> dict:
    aggregator = request.app.state.weather_batch
    results = await aggregator.get_weather_forecasts_for_session(session_id)
    return _envelope(request, [r.model_dump(by_alias=True) for r in results])


@router.get("/session/{session_id}/current")
async def get_session_current(
    request: Request,
    session_id: str = Path(..., min_length=1, max_length=100),
) -> dict:
    aggregator = request.app.state.weather_batch
    results = await aggregator.get_current_weather_for_session(session_id)
    return _envelope(request, [r.model_dump(by_alias=True) for r in results])
