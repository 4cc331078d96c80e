"""Viewport fitting - Pure geographic calculations plus the fitter.

Computes the bounding rectangle of the visible set and asks the render
collaborator to pan/zoom onto it. The rendering itself lives in the shell.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol

from quakeview.core.event import SeismicEvent


DEFAULT_PADDING = (50, 50)

# Web Mercator tile size in pixels
TILE_SIZE = 256

# Web Mercator is undefined at the poles
MAX_MERCATOR_LATITUDE = 85.0511287798


@dataclass(frozen=True)
class LatLng:
    """A geographic point in degrees."""
    latitude: float
    longitude: float


@dataclass(frozen=True)
class LatLngBounds:
    """Geographic bounding rectangle.

    Attributes:
        southwest: Minimum latitude/longitude corner
        northeast: Maximum latitude/longitude corner
    """
    southwest: LatLng
    northeast: LatLng

    def contains(self, latitude: float, longitude: float) -> bool:
        """Check if a point is within these bounds."""
        return (
            self.southwest.latitude <= latitude <= self.northeast.latitude
            and self.southwest.longitude <= longitude <= self.northeast.longitude
        )

    @property
    def center(self) -> LatLng:
        """Center of the bounds in Web Mercator space."""
        south = _mercator_y(self.southwest.latitude)
        north = _mercator_y(self.northeast.latitude)
        return LatLng(
            latitude=_inverse_mercator_y((south + north) / 2),
            longitude=(self.southwest.longitude + self.northeast.longitude) / 2,
        )


@dataclass(frozen=True)
class FitRequest:
    """Request for the render collaborator to fit bounds in view.

    Attributes:
        southwest: Southwest corner of the rectangle
        northeast: Northeast corner of the rectangle
        padding: (x, y) margin in pixels kept around the rectangle
    """
    southwest: LatLng
    northeast: LatLng
    padding: tuple[int, int] = DEFAULT_PADDING

    @property
    def bounds(self) -> LatLngBounds:
        return LatLngBounds(southwest=self.southwest, northeast=self.northeast)

    def to_dict(self) -> dict:
        return {
            "southwest": [self.southwest.latitude, self.southwest.longitude],
            "northeast": [self.northeast.latitude, self.northeast.longitude],
            "padding": list(self.padding),
        }


class BoundsTarget(Protocol):
    """Anything that can be asked to fit a viewport."""

    def fit_bounds(self, request: FitRequest) -> None:
        ...


def bounds_for_events(events: Sequence[SeismicEvent]) -> LatLngBounds | None:
    """Compute the minimal rectangle covering all drawable events.

    Pure function. Events without usable coordinates are ignored.

    Args:
        events: Events to cover

    Returns:
        LatLngBounds, or None if no event has coordinates
    """
    points = [(e.latitude, e.longitude) for e in events if e.has_coordinates]
    if not points:
        return None

    latitudes = [p[0] for p in points]
    longitudes = [p[1] for p in points]
    return LatLngBounds(
        southwest=LatLng(min(latitudes), min(longitudes)),
        northeast=LatLng(max(latitudes), max(longitudes)),
    )


def _mercator_y(latitude: float) -> float:
    lat = max(-MAX_MERCATOR_LATITUDE, min(MAX_MERCATOR_LATITUDE, latitude))
    return math.log(math.tan(math.pi / 4 + math.radians(lat) / 2))


def _inverse_mercator_y(y: float) -> float:
    return math.degrees(2 * math.atan(math.exp(y)) - math.pi / 2)


def zoom_for_bounds(
    bounds: LatLngBounds,
    width: int,
    height: int,
    padding: tuple[int, int] = DEFAULT_PADDING,
    min_zoom: int = 0,
    max_zoom: int = 18,
) -> int:
    """Find the largest integer zoom that fits bounds in an image.

    Pure function. Uses Web Mercator tiles of TILE_SIZE pixels.

    Args:
        bounds: Rectangle to fit
        width: Image width in pixels
        height: Image height in pixels
        padding: (x, y) margin kept on each side
        min_zoom: Lowest zoom returned
        max_zoom: Highest zoom returned (used for single points)

    Returns:
        Zoom level in [min_zoom, max_zoom]
    """
    usable_width = max(1, width - 2 * padding[0])
    usable_height = max(1, height - 2 * padding[1])

    lon_fraction = (bounds.northeast.longitude - bounds.southwest.longitude) / 360
    lat_fraction = (
        _mercator_y(bounds.northeast.latitude) - _mercator_y(bounds.southwest.latitude)
    ) / (2 * math.pi)

    candidates = [float(max_zoom)]
    if lon_fraction > 0:
        candidates.append(math.log2(usable_width / (TILE_SIZE * lon_fraction)))
    if lat_fraction > 0:
        candidates.append(math.log2(usable_height / (TILE_SIZE * lat_fraction)))

    zoom = math.floor(min(candidates))
    return max(min_zoom, min(max_zoom, zoom))


class ViewportFitter:
    """Issues a fit request whenever the visible set changes.

    An empty visible set never issues a request, so the last fitted
    view persists.
    """

    def __init__(
        self,
        target: BoundsTarget,
        padding: tuple[int, int] = DEFAULT_PADDING,
    ) -> None:
        self.target = target
        self.padding = padding
        self.last_request: FitRequest | None = None
        self._last_visible: tuple[SeismicEvent, ...] | None = None

    def update(self, visible: Sequence[SeismicEvent]) -> FitRequest | None:
        """Fit the viewport to a new visible set.

        Args:
            visible: Current visible set

        Returns:
            The issued FitRequest, or None if nothing was requested
        """
        visible = tuple(visible)
        if visible == self._last_visible:
            return None
        self._last_visible = visible

        bounds = bounds_for_events(visible)
        if bounds is None:
            return None

        request = FitRequest(
            southwest=bounds.southwest,
            northeast=bounds.northeast,
            padding=self.padding,
        )
        self.target.fit_bounds(request)
        self.last_request = request
        return request
