"""USGS Feed Client - Imperative Shell.

This module handles HTTP communication with the USGS summary feeds.
All I/O is contained here; parsing is in the core module.
"""

import logging
from typing import Any

import requests

from quakeview.core.config import DEFAULT_FEED_URLS
from quakeview.core.errors import NetworkError, ParseError
from quakeview.core.event import SeismicEvent, TimeRange, parse_events


logger = logging.getLogger(__name__)


# Default timeout for feed requests (seconds)
DEFAULT_TIMEOUT = 30


class FeedClient:
    """Client for fetching seismic events from the USGS summary feeds.

    This is part of the imperative shell - it handles HTTP I/O.
    """

    def __init__(
        self,
        feed_urls: dict[TimeRange, str] | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize feed client.

        Args:
            feed_urls: Endpoint per time range (defaults to USGS all_* feeds)
            timeout: Request timeout in seconds
            session: Optional requests session to reuse connections
        """
        self.feed_urls = dict(feed_urls or DEFAULT_FEED_URLS)
        self.timeout = timeout
        self.session = session or requests.Session()

    def url_for(self, time_range: TimeRange) -> str:
        """Get the feed endpoint for a time range.

        Raises:
            ValueError: If the time range has no configured endpoint
        """
        time_range = TimeRange(time_range)
        url = self.feed_urls.get(time_range)
        if not url:
            raise ValueError(f"No feed URL configured for '{time_range.value}'")
        return url

    def fetch_raw(self, time_range: TimeRange) -> Any:
        """Fetch the decoded JSON body of a feed.

        This method performs HTTP I/O.

        Raises:
            NetworkError: On a non-success status or transport failure
            ParseError: If the body is not JSON
        """
        url = self.url_for(time_range)

        logger.info("Fetching %s feed from %s", TimeRange(time_range).value, url)

        try:
            response = self.session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Feed request failed: %s", e)
            raise NetworkError(f"Network error: {e}") from e

        if not response.ok:
            logger.error("Feed returned HTTP %d", response.status_code)
            raise NetworkError(
                f"Network error: {response.status_code}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("Feed response is not JSON: %s", e)
            raise ParseError("Feed response is not valid JSON") from e

    def fetch_events(self, time_range: TimeRange) -> list[SeismicEvent]:
        """Fetch and parse the events of a feed.

        Args:
            time_range: Window to fetch (day, week or month)

        Returns:
            Parsed events in feed order

        Raises:
            NetworkError: On a non-success status or transport failure
            ParseError: If the body is not a feature collection
        """
        data = self.fetch_raw(time_range)
        events = parse_events(data)

        skipped = len(data["features"]) - len(events)
        if skipped:
            logger.debug("Skipped %d features that are not objects", skipped)

        logger.info(
            "Fetched %d events from %s feed",
            len(events),
            TimeRange(time_range).value,
        )

        return events

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self.session.close()

