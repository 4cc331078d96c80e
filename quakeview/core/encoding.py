"""Visual encoding of magnitude - Pure functions.

Maps a magnitude to a marker color and radius. The actual drawing is
handled by the render collaborator in the shell layer.
"""

import math
from dataclasses import dataclass

from quakeview.core.event import SeismicEvent


# Ordered from highest to lowest severity; first match wins.
COLOR_BANDS: tuple[tuple[float, str], ...] = (
    (6.0, "#b10026"),  # deep red
    (5.0, "#e31a1c"),  # red
    (4.0, "#fc4e2a"),  # orange-red
    (3.0, "#fd8d3c"),  # orange
    (2.0, "#feb24c"),  # amber
    (1.0, "#fed976"),  # pale yellow
)
PALEST_COLOR = "#ffffb2"

LEGEND: tuple[tuple[str, str], ...] = (
    (">=6.0", "#b10026"),
    ("5.0-5.9", "#e31a1c"),
    ("4.0-4.9", "#fc4e2a"),
    ("3.0-3.9", "#fd8d3c"),
    ("2.0-2.9", "#feb24c"),
    ("1.0-1.9", "#fed976"),
    ("<1.0", PALEST_COLOR),
)

MIN_RADIUS = 3.0
RADIUS_SCALE = 3.5
FILL_OPACITY = 0.75
STROKE_WEIGHT = 1


@dataclass(frozen=True)
class MarkerStyle:
    """Style of a single circle marker.

    Attributes:
        color: Stroke color (hex)
        fill_color: Fill color (hex)
        radius: Radius in display pixels
        fill_opacity: Fill opacity in [0, 1]
        weight: Stroke width in pixels
    """
    color: str
    fill_color: str
    radius: float
    fill_opacity: float = FILL_OPACITY
    weight: int = STROKE_WEIGHT


def _is_missing(magnitude: float | None) -> bool:
    return magnitude is None or math.isnan(magnitude)


def color_for_magnitude(magnitude: float | None) -> str:
    """Get hex fill color for a magnitude.

    Pure function. Band lower bounds are inclusive; None and NaN fall to
    the palest band.

    Args:
        magnitude: Event magnitude

    Returns:
        Hex color string (e.g., "#b10026")
    """
    if _is_missing(magnitude):
        return PALEST_COLOR
    for threshold, color in COLOR_BANDS:
        if magnitude >= threshold:
            return color
    return PALEST_COLOR


def radius_for_magnitude(magnitude: float | None) -> float:
    """Get marker radius in pixels for a magnitude.

    Pure function. Never smaller than MIN_RADIUS.
    """
    if _is_missing(magnitude):
        return MIN_RADIUS
    return max(MIN_RADIUS, magnitude * RADIUS_SCALE)


def marker_style(event: SeismicEvent) -> MarkerStyle:
    """Build the marker style for an event.

    Pure function. Absent magnitude is encoded as 0.
    """
    magnitude = event.effective_magnitude
    fill = color_for_magnitude(magnitude)
    return MarkerStyle(
        color=fill,
        fill_color=fill,
        radius=radius_for_magnitude(magnitude),
    )
