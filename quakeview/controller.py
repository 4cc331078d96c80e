"""Poll Controller - Wires Functional Core and Imperative Shell.

This module owns the application state and the refresh lifecycle. It
coordinates the feed client (shell) with the pure state transitions,
filtering and viewport fitting (core).

All state changes happen on the event loop thread. The blocking feed
request runs in the loop's executor; awaiting it is the only suspension
point of a fetch cycle.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import replace

from quakeview.core.config import Config
from quakeview.core.errors import FeedError
from quakeview.core.event import SeismicEvent, TimeRange
from quakeview.core.filters import FilterCriteria, FilterEngine
from quakeview.core.state import (
    FeedState,
    apply_failure,
    apply_success,
    begin_loading,
    with_time_range,
)
from quakeview.core.viewport import ViewportFitter
from quakeview.shell.feed_client import FeedClient
from quakeview.shell.map_renderer import StaticMapRenderer


logger = logging.getLogger(__name__)


GENERIC_FAILURE_MESSAGE = "Failed to load earthquakes."

Listener = Callable[["AppState"], None]


class AppState:
    """Explicit application state: feed state plus filter criteria.

    Created at startup, mutated only through update_feed/update_filters,
    discarded at shutdown. Listeners run after every change, once the new
    state is fully in place.
    """

    def __init__(
        self,
        feed: FeedState | None = None,
        criteria: FilterCriteria | None = None,
    ) -> None:
        self.feed = feed or FeedState()
        self.criteria = criteria or FilterCriteria()
        self._engine = FilterEngine()
        self._listeners: list[Listener] = []

    @property
    def visible(self) -> tuple[SeismicEvent, ...]:
        """Events passing the current filter criteria."""
        return self._engine.compute(self.feed.events, self.criteria)

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in self._listeners:
            try:
                listener(self)
            except Exception:
                logger.exception("State listener %r failed", listener)

    def update_feed(self, feed: FeedState) -> None:
        self.feed = feed
        self._notify()

    def update_filters(
        self,
        min_magnitude: float | None = None,
        place_substring: str | None = None,
    ) -> FilterCriteria:
        """Apply user filter input; omitted fields keep their value.

        Raises:
            ValueError: If min_magnitude is negative
        """
        changes = {}
        if min_magnitude is not None:
            changes["min_magnitude"] = float(min_magnitude)
        if place_substring is not None:
            changes["place_substring"] = place_substring

        criteria = replace(self.criteria, **changes)
        if criteria != self.criteria:
            self.criteria = criteria
            self._notify()
        return self.criteria


class PollController:
    """Owns the refresh lifecycle of the feed.

    Every fetch intent (startup, timer, manual refresh, retry, time-range
    change) gets a sequence number. When discard_stale_responses is set,
    only the response to the newest intent is applied; otherwise whichever
    response arrives last wins.
    """

    def __init__(
        self,
        config: Config,
        feed_client: FeedClient | None = None,
        state: AppState | None = None,
    ) -> None:
        """Initialize controller with configuration.

        Args:
            config: Application configuration
            feed_client: Feed client (created if not provided)
            state: Application state (created if not provided)

        Raises:
            ValueError: If the poll interval is not positive
        """
        if config.poll_interval_seconds <= 0:
            raise ValueError(
                f"poll_interval_seconds must be positive, got {config.poll_interval_seconds}"
            )
        self.config = config
        self._owns_client = feed_client is None
        self.feed_client = feed_client or FeedClient(
            feed_urls=config.feed_urls,
            timeout=config.request_timeout_seconds,
        )
        self.state = state or AppState(
            feed=FeedState(time_range=config.initial_time_range),
        )
        self._sequence = 0
        self._pending: set[asyncio.Task] = set()
        self._timer: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._timer is not None and not self._timer.done()

    def start(self) -> asyncio.Task:
        """Fetch the current time range and start the refresh timer.

        Must be called from a running event loop.

        Returns:
            Task of the initial fetch
        """
        logger.info(
            "Starting poll controller (every %ss, range %s)",
            self.config.poll_interval_seconds,
            self.state.feed.time_range.value,
        )
        task = self._spawn("startup")
        if not self.running:
            self._timer = asyncio.create_task(self._run_timer())
        return task

    async def stop(self) -> None:
        """Cancel the timer and wait for in-flight fetches to finish.

        A feed client created by the controller is closed afterwards.
        """
        if self._timer is not None:
            self._timer.cancel()
            try:
                await self._timer
            except asyncio.CancelledError:
                pass
            self._timer = None

        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)

        if self._owns_client:
            self.feed_client.close()

        logger.info("Poll controller stopped")

    def refresh(self) -> asyncio.Task:
        """Manually re-fetch the current time range.

        Does not reset or reschedule the timer.
        """
        return self._spawn("manual")

    def retry(self) -> asyncio.Task:
        """Re-fetch after a failure. Same transition as refresh."""
        return self._spawn("retry")

    def set_time_range(self, time_range: TimeRange) -> asyncio.Task:
        """Switch time range and fetch it immediately.

        Later timer ticks use the new range. Filters are left alone.
        """
        time_range = TimeRange(time_range)
        self.state.update_feed(with_time_range(self.state.feed, time_range))
        return self._spawn(f"range:{time_range.value}")

    def tick(self) -> asyncio.Task | None:
        """Handle one timer tick; skipped while a fetch is in flight."""
        if self.state.feed.is_loading:
            logger.info("Skipping timer refresh, fetch already in flight")
            return None
        return self._spawn("timer")

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self.config.poll_interval_seconds)
            self.tick()

    def _is_stale(self, sequence: int) -> bool:
        return self.config.discard_stale_responses and sequence != self._sequence

    def _spawn(self, trigger: str) -> asyncio.Task:
        self._sequence += 1
        task = asyncio.create_task(self._fetch_cycle(self._sequence, trigger))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _fetch_cycle(self, sequence: int, trigger: str) -> None:
        """Run one Loading -> Idle/Error cycle.

        Never raises: every feed failure becomes the Error state. If the
        cycle is cancelled while waiting, the Error state is applied before
        the cancellation propagates so the status never stays Loading.
        """
        time_range = self.state.feed.time_range
        self.state.update_feed(begin_loading(self.state.feed))

        logger.info(
            "Fetch #%d (%s) for %s feed",
            sequence,
            trigger,
            time_range.value,
        )

        loop = asyncio.get_running_loop()
        events: list[SeismicEvent] | None = None
        error_message = ""

        try:
            events = await loop.run_in_executor(
                None,
                self.feed_client.fetch_events,
                time_range,
            )
        except asyncio.CancelledError:
            logger.warning("Fetch #%d (%s) cancelled before a response", sequence, trigger)
            if not self._is_stale(sequence):
                self.state.update_feed(
                    apply_failure(self.state.feed, GENERIC_FAILURE_MESSAGE)
                )
            raise
        except FeedError as e:
            error_message = str(e) or GENERIC_FAILURE_MESSAGE
            logger.error("Fetch #%d failed: %s", sequence, error_message)
        except Exception:
            error_message = GENERIC_FAILURE_MESSAGE
            logger.exception("Fetch #%d failed unexpectedly", sequence)

        if self._is_stale(sequence):
            logger.info(
                "Discarding response to fetch #%d, superseded by #%d",
                sequence,
                self._sequence,
            )
            return

        if events is not None:
            self.state.update_feed(apply_success(self.state.feed, events))
            logger.info(
                "Fetch #%d applied: %d events, %d visible",
                sequence,
                len(events),
                len(self.state.visible),
            )
        else:
            self.state.update_feed(apply_failure(self.state.feed, error_message))


def create_controller(
    config: Config,
    feed_client: FeedClient | None = None,
    renderer: StaticMapRenderer | None = None,
) -> tuple[PollController, StaticMapRenderer, ViewportFitter]:
    """Build a controller with its renderer and viewport fitter wired in.

    Args:
        config: Application configuration
        feed_client: Feed client (created if not provided)
        renderer: Render collaborator (created if not provided)

    Returns:
        Tuple of (controller, renderer, fitter)
    """
    controller = PollController(config, feed_client=feed_client)
    renderer = renderer or StaticMapRenderer(
        width=config.map_width,
        height=config.map_height,
        tile_url=config.tile_url,
    )
    fitter = ViewportFitter(renderer, padding=config.fit_padding)
    controller.state.subscribe(lambda state: fitter.update(state.visible))
    return controller, renderer, fitter
