"""Feed state model and transitions - Pure functions.

FeedState is immutable; every transition returns a new state. The poll
controller swaps the current state in one assignment, so readers never
see a half-applied update.
"""

from dataclasses import dataclass, replace
from enum import Enum

from quakeview.core.event import SeismicEvent, TimeRange


class FeedStatus(str, Enum):
    """Request status of the feed."""
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"


@dataclass(frozen=True)
class FeedState:
    """Latest fetched collection plus request status.

    Attributes:
        events: Events from the last successful fetch, in feed order
        status: Exactly one of idle, loading or error
        error_message: Display message, empty unless status is error
        time_range: Window used for the next fetch
    """
    events: tuple[SeismicEvent, ...] = ()
    status: FeedStatus = FeedStatus.IDLE
    error_message: str = ""
    time_range: TimeRange = TimeRange.DAY

    @property
    def is_loading(self) -> bool:
        return self.status is FeedStatus.LOADING

    @property
    def has_error(self) -> bool:
        return self.status is FeedStatus.ERROR


def begin_loading(state: FeedState) -> FeedState:
    """Enter Loading. Events are kept for display while the request runs.

    Pure function. The previous error message is cleared.
    """
    return replace(state, status=FeedStatus.LOADING, error_message="")


def apply_success(state: FeedState, events: list[SeismicEvent]) -> FeedState:
    """Replace events wholesale and return to Idle.

    Pure function.
    """
    return replace(
        state,
        events=tuple(events),
        status=FeedStatus.IDLE,
        error_message="",
    )


def apply_failure(state: FeedState, message: str) -> FeedState:
    """Enter Error, keeping the stale events.

    Pure function.
    """
    return replace(
        state,
        status=FeedStatus.ERROR,
        error_message=message or "Failed to load earthquakes.",
    )


def with_time_range(state: FeedState, time_range: TimeRange) -> FeedState:
    """Switch the window used for subsequent fetches.

    Pure function.
    """
    return replace(state, time_range=TimeRange(time_range))
