"""Seismic event data model and parsing - Pure functions.

This module turns USGS GeoJSON feature collections into typed SeismicEvent
objects. Individual records are parsed leniently: absent or malformed
numeric fields become None instead of failing the whole batch.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from quakeview.core.errors import CoordinateError, ParseError


class TimeRange(str, Enum):
    """Window of the feed to display."""
    DAY = "day"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class SeismicEvent:
    """Immutable seismic event as fetched from the feed.

    Attributes:
        id: Opaque event ID, stable across refreshes
        latitude: Epicenter latitude in degrees, None if absent
        longitude: Epicenter longitude in degrees, None if absent
        depth_km: Depth in kilometers, None if absent
        magnitude: Event magnitude, None if absent
        place: Free-text location description (may be empty)
        occurred_at_ms: Epoch milliseconds of occurrence, None if absent
        detail_url: Link to the source record, None if absent
    """
    id: str
    latitude: float | None
    longitude: float | None
    depth_km: float | None = None
    magnitude: float | None = None
    place: str = ""
    occurred_at_ms: int | None = None
    detail_url: str | None = None

    @property
    def has_coordinates(self) -> bool:
        """True if latitude and longitude are usable for drawing."""
        if self.latitude is None or self.longitude is None:
            return False
        return -90 <= self.latitude <= 90 and -180 <= self.longitude <= 180

    @property
    def coordinates(self) -> tuple[float, float]:
        """Return (latitude, longitude) tuple.

        Raises:
            CoordinateError: If the event has no usable coordinates
        """
        require_coordinates(self)
        return (self.latitude, self.longitude)

    @property
    def occurred_at(self) -> datetime | None:
        """Occurrence time as an aware UTC datetime."""
        if self.occurred_at_ms is None:
            return None
        return datetime.fromtimestamp(self.occurred_at_ms / 1000, tz=timezone.utc)

    @property
    def effective_magnitude(self) -> float:
        """Magnitude used for filtering and encoding (absent counts as 0)."""
        if self.magnitude is None or math.isnan(self.magnitude):
            return 0.0
        return self.magnitude


def require_coordinates(event: SeismicEvent) -> None:
    """Raise CoordinateError if the event cannot be placed on a map.

    Pure function.
    """
    if not event.has_coordinates:
        raise CoordinateError(event.id)


def _to_float(value: Any) -> float | None:
    """Coerce a JSON value to float, None if absent or malformed."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if math.isnan(result) or math.isinf(result):
        return None
    return result


def _to_int(value: Any) -> int | None:
    number = _to_float(value)
    return int(number) if number is not None else None


def parse_event(feature: dict[str, Any]) -> SeismicEvent:
    """Parse a single GeoJSON feature into a SeismicEvent.

    Pure function. Never fails on missing fields; they become None.

    Args:
        feature: GeoJSON feature dict from the USGS feed

    Returns:
        SeismicEvent with absent fields coerced to None
    """
    props = feature.get("properties")
    if not isinstance(props, dict):
        props = {}
    geometry = feature.get("geometry")
    if not isinstance(geometry, dict):
        geometry = {}
    coords = geometry.get("coordinates")
    if not isinstance(coords, (list, tuple)):
        coords = []

    # GeoJSON order is [longitude, latitude, depth]
    padded = list(coords[:3]) + [None] * (3 - len(coords[:3]))
    longitude, latitude, depth = (_to_float(v) for v in padded)

    place = props.get("place")
    url = props.get("url")

    return SeismicEvent(
        id=str(feature.get("id") or ""),
        latitude=latitude,
        longitude=longitude,
        depth_km=depth,
        magnitude=_to_float(props.get("mag")),
        place=place if isinstance(place, str) else "",
        occurred_at_ms=_to_int(props.get("time")),
        detail_url=url if isinstance(url, str) and url else None,
    )


def parse_events(geojson: Any) -> list[SeismicEvent]:
    """Parse a USGS GeoJSON FeatureCollection into SeismicEvents.

    Pure function. Order of the feed is preserved. Features that are not
    JSON objects are skipped.

    Args:
        geojson: Decoded JSON body of a feed response

    Returns:
        List of SeismicEvent objects in feed order

    Raises:
        ParseError: If the body is not a feature collection
    """
    if not isinstance(geojson, dict):
        raise ParseError("Feed response is not a JSON object")

    features = geojson.get("features")
    if not isinstance(features, list):
        raise ParseError("Feed response has no feature collection")

    return [parse_event(f) for f in features if isinstance(f, dict)]
