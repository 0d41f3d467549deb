"""
Health endpoint — GET /health

Liveness only: reports version, environment and process uptime. Cache and
provider reachability are not checked here (both degrade gracefully).
"""

import time

from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

_STARTED_AT = time.monotonic()


@router.get("/health")
async def health(request: Request) -> dict:
    settings = request.app.state.settings
    return {
        "success": True,
        "data": {
            "status": "healthy",
            "name": settings.app_name,
            "version": settings.app_version,
            "environment": settings.environment,
            "uptimeS": round(time.monotonic() - _STARTED_AT, 1),
        },
        "requestId": request.state.request_id,
    }
