"""Display text formatting - Pure functions.

This module formats events and feed state into the text shown by the
render collaborator: marker popups, the status line and overlays.
"""

from dataclasses import dataclass
from datetime import timezone, tzinfo
from typing import Any

from quakeview.core.encoding import marker_style
from quakeview.core.errors import CoordinateError
from quakeview.core.event import SeismicEvent, TimeRange, require_coordinates
from quakeview.core.state import FeedState


UNKNOWN_PLACE = "Unknown location"
FEED_ATTRIBUTION = "Data: USGS feed"

TIME_RANGE_LABELS = {
    TimeRange.DAY: "Last 24 Hours",
    TimeRange.WEEK: "Last 7 Days",
    TimeRange.MONTH: "Last 30 Days",
}


@dataclass(frozen=True)
class Popup:
    """Click-through detail payload for a marker.

    Attributes:
        title: Magnitude and place line
        time_text: Formatted occurrence time, empty if unknown
        depth_text: Formatted depth, empty if unknown
        link: Source record URL, None if absent
    """
    title: str
    time_text: str
    depth_text: str
    link: str | None = None


@dataclass(frozen=True)
class StatusView:
    """What the status line and overlay should show.

    Attributes:
        status_line: Persistent status text
        overlay: "error", "empty" or None
        show_retry: Whether a retry control is offered
        visible_count: Size of the visible set
        total_count: Size of the fetched collection
    """
    status_line: str
    overlay: str | None
    show_retry: bool
    visible_count: int
    total_count: int


def format_time(event: SeismicEvent, tz: tzinfo = timezone.utc) -> str:
    """Format occurrence time, empty string if unknown.

    Pure function.
    """
    occurred = event.occurred_at
    if occurred is None:
        return ""
    return occurred.astimezone(tz).strftime("%Y-%m-%d %H:%M:%S %Z")


def format_popup(event: SeismicEvent, tz: tzinfo = timezone.utc) -> Popup:
    """Format the popup shown when a marker is clicked.

    Pure function.

    Args:
        event: Event behind the marker
        tz: Timezone used for the time line

    Returns:
        Popup payload
    """
    place = event.place or UNKNOWN_PLACE
    depth_text = ""
    if event.depth_km is not None:
        depth_text = f"Depth: {event.depth_km:.1f} km"

    return Popup(
        title=f"Mag {event.effective_magnitude:.1f} - {place}",
        time_text=format_time(event, tz),
        depth_text=depth_text,
        link=event.detail_url,
    )


def format_status(state: FeedState, visible_count: int) -> StatusView:
    """Decide status line and overlay for the current state.

    Pure function. Loading hides both overlays; an error overlay offers
    retry while stale events stay drawn underneath.
    """
    total = len(state.events)

    if state.is_loading:
        return StatusView(
            status_line="Loading latest earthquakes...",
            overlay=None,
            show_retry=False,
            visible_count=visible_count,
            total_count=total,
        )

    if state.has_error:
        return StatusView(
            status_line=state.error_message,
            overlay="error",
            show_retry=True,
            visible_count=visible_count,
            total_count=total,
        )

    return StatusView(
        status_line=f"Showing {visible_count} of {total} events",
        overlay="empty" if visible_count == 0 else None,
        show_retry=False,
        visible_count=visible_count,
        total_count=total,
    )


def event_to_feature(
    event: SeismicEvent,
    tz: tzinfo = timezone.utc,
) -> dict[str, Any]:
    """Convert an event into a GeoJSON feature for the map widget.

    Pure function. The feature carries marker style and popup payload.

    Raises:
        CoordinateError: If the event has no usable coordinates
    """
    require_coordinates(event)
    style = marker_style(event)
    popup = format_popup(event, tz)

    return {
        "type": "Feature",
        "id": event.id,
        "geometry": {
            "type": "Point",
            "coordinates": [event.longitude, event.latitude],
        },
        "properties": {
            "magnitude": event.magnitude,
            "place": event.place,
            "time": event.occurred_at_ms,
            "depth_km": event.depth_km,
            "url": event.detail_url,
            "style": {
                "color": style.color,
                "fillColor": style.fill_color,
                "fillOpacity": style.fill_opacity,
                "weight": style.weight,
                "radius": style.radius,
            },
            "popup": {
                "title": popup.title,
                "time": popup.time_text,
                "depth": popup.depth_text,
                "link": popup.link,
            },
        },
    }


def to_feature_collection(
    events: tuple[SeismicEvent, ...],
    tz: tzinfo = timezone.utc,
) -> dict[str, Any]:
    """Convert the visible set into a FeatureCollection.

    Pure function. Events without coordinates are dropped silently.
    """
    features = []
    for event in events:
        try:
            features.append(event_to_feature(event, tz))
        except CoordinateError:
            continue

    return {"type": "FeatureCollection", "features": features}
