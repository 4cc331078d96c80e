"""Error taxonomy for the live feed pipeline.

Feed errors are raised by the shell and caught by the poll controller.
CoordinateError is local: it marks a single record that cannot be drawn.
"""


class FeedError(Exception):
    """Base class for failures fetching or decoding a feed."""


class NetworkError(FeedError):
    """The feed request failed at the HTTP or transport level.

    Attributes:
        status_code: HTTP status of the response, None for transport failures
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ParseError(FeedError):
    """The feed response was not a usable feature collection."""


class CoordinateError(ValueError):
    """A record has no usable latitude/longitude."""

    def __init__(self, event_id: str) -> None:
        super().__init__(f"Event {event_id or '<unknown>'} has no usable coordinates")
        self.event_id = event_id
