"""Static Map Renderer - Imperative Shell.

This module draws the visible set onto a static map image using
OpenStreetMap tiles. Marker styles and viewport bounds come from the
core module; fetching tiles and rasterizing is the I/O handled here.
"""

import io
import logging
from collections.abc import Sequence
from dataclasses import dataclass

from staticmap import StaticMap, CircleMarker

from quakeview.core.config import DEFAULT_TILE_URL
from quakeview.core.encoding import marker_style
from quakeview.core.errors import CoordinateError
from quakeview.core.event import SeismicEvent
from quakeview.core.viewport import FitRequest, LatLng, zoom_for_bounds


logger = logging.getLogger(__name__)


# World overview used before the first fit
DEFAULT_CENTER = LatLng(latitude=20.0, longitude=0.0)
DEFAULT_ZOOM = 2

# Zoom used when every visible point shares one location
MAX_FIT_ZOOM = 10


@dataclass
class MapImageResult:
    """Result of map image generation.

    Attributes:
        success: Whether the image was generated successfully
        image_bytes: PNG image data if successful
        error: Error message if failed
    """
    success: bool
    image_bytes: bytes | None = None
    error: str | None = None


class StaticMapRenderer:
    """Render collaborator producing PNG snapshots of the map.

    Keeps the last fit request as its current view; an empty visible set
    leaves that view unchanged.
    """

    def __init__(
        self,
        width: int = 800,
        height: int = 400,
        tile_url: str | None = None,
    ) -> None:
        """Initialize static map renderer.

        Args:
            width: Image width in pixels
            height: Image height in pixels
            tile_url: Custom tile URL template. Defaults to OpenStreetMap.
        """
        self.width = width
        self.height = height
        self.tile_url = tile_url or DEFAULT_TILE_URL
        self.center = DEFAULT_CENTER
        self.zoom = DEFAULT_ZOOM

    def fit_bounds(self, request: FitRequest) -> None:
        """Pan/zoom so the requested bounds fill the image minus padding."""
        self.center = request.bounds.center
        self.zoom = zoom_for_bounds(
            request.bounds,
            self.width,
            self.height,
            padding=request.padding,
            max_zoom=MAX_FIT_ZOOM,
        )
        logger.debug(
            "Viewport set to (%.4f, %.4f) at zoom %d",
            self.center.latitude,
            self.center.longitude,
            self.zoom,
        )

    def build_markers(self, events: Sequence[SeismicEvent]) -> list[CircleMarker]:
        """Build circle markers, dropping events without coordinates."""
        markers = []
        for event in events:
            try:
                latitude, longitude = event.coordinates
            except CoordinateError as e:
                logger.debug("Skipping marker: %s", e)
                continue

            style = marker_style(event)
            markers.append(CircleMarker(
                (longitude, latitude),  # (lon, lat) order for staticmap
                style.fill_color,
                max(1, round(style.radius)),
            ))
        return markers

    def render(self, events: Sequence[SeismicEvent]) -> MapImageResult:
        """Render the visible set at the current viewport.

        This method performs I/O (fetches map tiles from tile server).

        Args:
            events: Visible set to draw

        Returns:
            MapImageResult with image bytes or error
        """
        logger.info(
            "Rendering %d events at (%.4f, %.4f) zoom %d",
            len(events),
            self.center.latitude,
            self.center.longitude,
            self.zoom,
        )

        try:
            static_map = StaticMap(
                self.width,
                self.height,
                url_template=self.tile_url,
            )

            for marker in self.build_markers(events):
                static_map.add_marker(marker)

            image = static_map.render(
                zoom=self.zoom,
                center=(self.center.longitude, self.center.latitude),
            )

            buffer = io.BytesIO()
            image.save(buffer, format="PNG")
            image_bytes = buffer.getvalue()

            logger.info(
                "Rendered map image: %d bytes",
                len(image_bytes),
            )

            return MapImageResult(
                success=True,
                image_bytes=image_bytes,
            )

        except Exception as e:
            logger.error("Failed to render map: %s", str(e))
            return MapImageResult(
                success=False,
                error=str(e),
            )
