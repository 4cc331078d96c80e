"""Quakeview API - FastAPI surface for the map UI.

Exposes the visible set, status line and viewport to the map widget, and
maps the UI controls (filters, time range, refresh, retry) onto the poll
controller. The controller and its timer live for the lifetime of the app.
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import Response
from pydantic import BaseModel, Field

from quakeview.controller import create_controller
from quakeview.core.config import Config
from quakeview.core.encoding import LEGEND
from quakeview.core.event import TimeRange
from quakeview.core.formatter import (
    FEED_ATTRIBUTION,
    TIME_RANGE_LABELS,
    format_status,
    to_feature_collection,
)
from quakeview.shell.feed_client import FeedClient
from quakeview.shell.map_renderer import StaticMapRenderer


logger = logging.getLogger(__name__)


# Range of the minimum-magnitude control
MAX_MIN_MAGNITUDE = 7.0


# ===== Request Models =====

class FiltersUpdate(BaseModel):
    min_magnitude: float | None = Field(default=None, ge=0, le=MAX_MIN_MAGNITUDE)
    place_substring: str | None = None


class TimeRangeUpdate(BaseModel):
    time_range: TimeRange


# ===== Helpers =====

def _status_response(request: Request) -> dict:
    """Build the status payload shown above the map."""
    state = request.app.state.controller.state
    visible = state.visible
    view = format_status(state.feed, len(visible))

    return {
        "status": state.feed.status.value,
        "status_line": view.status_line,
        "overlay": view.overlay,
        "show_retry": view.show_retry,
        "error_message": state.feed.error_message,
        "visible_count": view.visible_count,
        "total_count": view.total_count,
        "time_range": state.feed.time_range.value,
        "time_range_label": TIME_RANGE_LABELS[state.feed.time_range],
        "filters": {
            "min_magnitude": state.criteria.min_magnitude,
            "place_substring": state.criteria.place_substring,
        },
        "attribution": FEED_ATTRIBUTION,
    }


def create_app(
    config: Config | None = None,
    feed_client: FeedClient | None = None,
    renderer: StaticMapRenderer | None = None,
) -> FastAPI:
    """Create the API app with its own controller.

    Args:
        config: Application configuration (defaults if not provided)
        feed_client: Feed client (created if not provided)
        renderer: Render collaborator (created if not provided)

    Returns:
        FastAPI application
    """
    config = config or Config()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        controller, map_renderer, fitter = create_controller(
            config,
            feed_client=feed_client,
            renderer=renderer,
        )
        app.state.controller = controller
        app.state.renderer = map_renderer
        app.state.fitter = fitter
        controller.start()
        try:
            yield
        finally:
            await controller.stop()

    app = FastAPI(
        title="Quakeview API",
        description="Live USGS earthquake map data",
        version="1.0.0",
        lifespan=lifespan,
    )

    # ===== Read Endpoints =====

    @app.get("/api/status")
    async def get_status(request: Request):
        """Status line, overlay and counts."""
        return _status_response(request)

    @app.get("/api/events")
    async def get_events(request: Request):
        """Visible set as a GeoJSON FeatureCollection with marker styles."""
        state = request.app.state.controller.state
        collection = to_feature_collection(state.visible)
        collection["metadata"] = {
            "count": len(collection["features"]),
            "total": len(state.feed.events),
            "time_range": state.feed.time_range.value,
            "generated_at": datetime.now(timezone.utc).isoformat(),
        }
        return collection

    @app.get("/api/viewport")
    async def get_viewport(request: Request):
        """Last fit request, or null before the first non-empty set."""
        last = request.app.state.fitter.last_request
        return {"fit": last.to_dict() if last else None}

    @app.get("/api/legend")
    async def get_legend():
        """Magnitude color bands, highest first."""
        return {"bands": [{"label": label, "color": color} for label, color in LEGEND]}

    @app.get("/map.png")
    async def get_map(request: Request):
        """Static map image of the visible set."""
        visible = request.app.state.controller.state.visible
        map_renderer = request.app.state.renderer

        loop = asyncio.get_running_loop()
        result = await loop.run_in_executor(None, map_renderer.render, visible)

        if not result.success:
            raise HTTPException(status_code=502, detail=f"Failed to render map: {result.error}")

        return Response(content=result.image_bytes, media_type="image/png")

    # ===== Control Endpoints =====

    @app.put("/api/filters")
    async def put_filters(update: FiltersUpdate, request: Request):
        """Update minimum magnitude and/or place filter."""
        state = request.app.state.controller.state
        state.update_filters(
            min_magnitude=update.min_magnitude,
            place_substring=update.place_substring,
        )
        return _status_response(request)

    @app.put("/api/time-range")
    async def put_time_range(update: TimeRangeUpdate, request: Request):
        """Switch time range and fetch it."""
        await asyncio.shield(request.app.state.controller.set_time_range(update.time_range))
        return _status_response(request)

    @app.post("/api/refresh")
    async def post_refresh(request: Request):
        """Manually re-fetch the current time range."""
        await asyncio.shield(request.app.state.controller.refresh())
        return _status_response(request)

    @app.post("/api/retry")
    async def post_retry(request: Request):
        """Re-fetch after a failed fetch."""
        controller = request.app.state.controller
        if not controller.state.feed.has_error:
            raise HTTPException(status_code=409, detail="Retry is only offered after a failed fetch")
        await asyncio.shield(controller.retry())
        return _status_response(request)

    return app
