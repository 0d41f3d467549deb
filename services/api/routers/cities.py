"""
City search endpoint — GET /cities/search?q=

Empty q answers an empty list. Length and character checks happen in
CitySearchService so they apply to every caller, not just HTTP.
"""

from fastapi import APIRouter, Query, Request

router = APIRouter(prefix="/cities", tags=["cities"])


@router.get("/search")
async def search_cities(
    request: Request,
    q: str = Query("", description="Partial city name"),
) -> dict:
    results = await request.app.state.city_search_service.search(q)
    return {
        "success": True,
        "data": {
            "results": [r.model_dump(by_alias=True) for r in results],
            "count": len(results),
        },
        "requestId": request.state.request_id,
    }
