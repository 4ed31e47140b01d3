"""Station route — the relay's only endpoint."""

import json
from typing import Any

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

from services.station_feed import StationFeed

router = APIRouter()


class PrettyJSONResponse(JSONResponse):
    """JSON body indented by three spaces."""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=3).encode("utf-8")


async def stations(request: Request) -> PrettyJSONResponse:
    """Current stations as a GeoJSON FeatureCollection (null before the first fetch)."""
    feed: StationFeed = request.app.state.station_feed
    collection = await feed.handle_request()

    return PrettyJSONResponse(
        collection,
        headers={"Access-Control-Allow-Origin": request.headers.get("origin") or "*"},
    )


# Plain Starlette route without a method list: every HTTP method is served.
router.add_route("/", stations)
