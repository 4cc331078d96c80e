"""Visible set filtering - Pure functions.

The visible set is always derived from (events, criteria) and never
stored as independent state.
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass

from quakeview.core.event import SeismicEvent


@dataclass(frozen=True)
class FilterCriteria:
    """User-controlled filter criteria.

    Attributes:
        min_magnitude: Minimum magnitude (inclusive), never negative or NaN
        place_substring: Case-insensitive place match, empty matches all
    """
    min_magnitude: float = 0.0
    place_substring: str = ""

    def __post_init__(self) -> None:
        if math.isnan(self.min_magnitude) or self.min_magnitude < 0:
            raise ValueError(f"min_magnitude must be >= 0, got {self.min_magnitude}")

    @property
    def normalized_place(self) -> str:
        """Trimmed, lower-cased place substring."""
        return self.place_substring.strip().lower()


def matches_magnitude(event: SeismicEvent, min_magnitude: float) -> bool:
    """Check an event against the minimum magnitude.

    Pure function. Absent magnitude counts as 0.
    """
    return event.effective_magnitude >= min_magnitude


def matches_place(event: SeismicEvent, needle: str) -> bool:
    """Check an event's place against a normalized substring.

    Pure function.
    """
    if not needle:
        return True
    return needle in event.place.lower()


def visible_events(
    events: Sequence[SeismicEvent],
    criteria: FilterCriteria,
) -> tuple[SeismicEvent, ...]:
    """Compute the visible subset of events.

    Pure function. Order is preserved from the input.

    Args:
        events: Events from the feed state
        criteria: Current filter criteria

    Returns:
        Events passing both the magnitude and the place filter
    """
    needle = criteria.normalized_place
    return tuple(
        e for e in events
        if matches_magnitude(e, criteria.min_magnitude) and matches_place(e, needle)
    )


class FilterEngine:
    """Memoizing wrapper around visible_events.

    Recomputes only when the identity of either input changes.
    """

    def __init__(self) -> None:
        self._events: Sequence[SeismicEvent] | None = None
        self._criteria: FilterCriteria | None = None
        self._result: tuple[SeismicEvent, ...] = ()
        self.computations = 0

    def compute(
        self,
        events: Sequence[SeismicEvent],
        criteria: FilterCriteria,
    ) -> tuple[SeismicEvent, ...]:
        if events is self._events and criteria is self._criteria:
            return self._result

        self._result = visible_events(events, criteria)
        self._events = events
        self._criteria = criteria
        self.computations += 1
        return self._result
