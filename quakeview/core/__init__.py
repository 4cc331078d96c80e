"""Functional Core - Pure functions with no side effects.

This module contains all display logic as pure functions:
- Seismic event parsing
- Feed state transitions
- Visible set filtering
- Magnitude color/radius encoding
- Viewport bounds fitting
- Popup and status formatting

All functions here are deterministic and have no I/O.
"""

from quakeview.core.event import SeismicEvent, TimeRange, parse_events
from quakeview.core.errors import CoordinateError, FeedError, NetworkError, ParseError
from quakeview.core.state import FeedState, FeedStatus
from quakeview.core.filters import FilterCriteria, FilterEngine, visible_events
from quakeview.core.encoding import color_for_magnitude, radius_for_magnitude
from quakeview.core.viewport import FitRequest, LatLngBounds, ViewportFitter, bounds_for_events
from quakeview.core.formatter import format_popup, format_status

__all__ = [
    # Event
    "SeismicEvent",
    "TimeRange",
    "parse_events",
    # Errors
    "CoordinateError",
    "FeedError",
    "NetworkError",
    "ParseError",
    # State
    "FeedState",
    "FeedStatus",
    # Filters
    "FilterCriteria",
    "FilterEngine",
    "visible_events",
    # Encoding
    "color_for_magnitude",
    "radius_for_magnitude",
    # Viewport
    "FitRequest",
    "LatLngBounds",
    "ViewportFitter",
    "bounds_for_events",
    # Formatter
    "format_popup",
    "format_status",
]
