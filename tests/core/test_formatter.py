"""Unit tests for display formatting."""

from datetime import timedelta, timezone

from quakeview.core.event import SeismicEvent
from quakeview.core.formatter import (
    UNKNOWN_PLACE,
    event_to_feature,
    format_popup,
    format_status,
    format_time,
    to_feature_collection,
)
from quakeview.core.state import FeedState, FeedStatus


EVENT = SeismicEvent(
    id="us1",
    latitude=35.7,
    longitude=139.7,
    depth_km=10.0,
    magnitude=4.56,
    place="50km E of Tokyo, Japan",
    occurred_at_ms=1700000000000,
    detail_url="https://earthquake.usgs.gov/earthquakes/eventpage/us1",
)


class TestFormatPopup:
    """Tests for format_popup()."""

    def test_title_has_magnitude_and_place(self):
        """Title shows one-decimal magnitude and place."""
        assert format_popup(EVENT).title == "Mag 4.6 - 50km E of Tokyo, Japan"

    def test_unknown_place(self):
        """Empty place falls back to a placeholder."""
        event = SeismicEvent(id="x", latitude=0.0, longitude=0.0, magnitude=1.0)
        assert UNKNOWN_PLACE in format_popup(event).title

    def test_absent_magnitude_shown_as_zero(self):
        """Absent magnitude is shown as 0.0."""
        event = SeismicEvent(id="x", latitude=0.0, longitude=0.0, place="Here")
        assert format_popup(event).title == "Mag 0.0 - Here"

    def test_depth_text(self):
        """Depth is shown in km with one decimal."""
        assert format_popup(EVENT).depth_text == "Depth: 10.0 km"

    def test_missing_depth_is_empty(self):
        """Absent depth produces no depth line."""
        event = SeismicEvent(id="x", latitude=0.0, longitude=0.0)
        assert format_popup(event).depth_text == ""

    def test_link(self):
        """Detail URL is the popup link."""
        assert format_popup(EVENT).link == EVENT.detail_url


class TestFormatTime:
    """Tests for format_time()."""

    def test_utc_by_default(self):
        """Times are shown in UTC unless a zone is given."""
        assert format_time(EVENT) == "2023-11-14 22:13:20 UTC"

    def test_custom_timezone(self):
        """A given timezone shifts the display time."""
        jst = timezone(timedelta(hours=9), name="JST")
        assert format_time(EVENT, jst) == "2023-11-15 07:13:20 JST"

    def test_unknown_time_is_empty(self):
        """Absent time gives empty text."""
        assert format_time(SeismicEvent(id="x", latitude=0.0, longitude=0.0)) == ""


class TestFormatStatus:
    """Tests for format_status()."""

    def test_loading(self):
        """Loading hides overlays."""
        view = format_status(FeedState(status=FeedStatus.LOADING), 0)
        assert view.status_line == "Loading latest earthquakes..."
        assert view.overlay is None
        assert not view.show_retry

    def test_error_offers_retry_over_stale_data(self):
        """Error shows the message and a retry overlay."""
        state = FeedState(
            events=(EVENT,),
            status=FeedStatus.ERROR,
            error_message="Network error: 503",
        )
        view = format_status(state, 1)

        assert view.status_line == "Network error: 503"
        assert view.overlay == "error"
        assert view.show_retry
        assert view.visible_count == 1

    def test_normal_count(self):
        """Idle shows visible and total counts."""
        view = format_status(FeedState(events=(EVENT, EVENT)), 1)
        assert view.status_line == "Showing 1 of 2 events"
        assert view.overlay is None

    def test_empty_overlay_when_filtered_out(self):
        """No visible events without error shows the empty overlay."""
        view = format_status(FeedState(events=(EVENT,)), 0)
        assert view.overlay == "empty"

    def test_empty_overlay_when_no_data(self):
        """Zero fetched records also shows the empty overlay."""
        assert format_status(FeedState(), 0).overlay == "empty"


class TestFeatureCollection:
    """Tests for event_to_feature() and to_feature_collection()."""

    def test_feature_geometry_is_lon_lat(self):
        """GeoJSON geometry uses [lon, lat] order."""
        feature = event_to_feature(EVENT)
        assert feature["geometry"]["coordinates"] == [139.7, 35.7]

    def test_feature_carries_style_and_popup(self):
        """Feature properties include marker style and popup."""
        props = event_to_feature(EVENT)["properties"]

        assert props["style"]["fillColor"] == "#fc4e2a"
        assert props["style"]["radius"] > 3
        assert props["popup"]["title"].startswith("Mag 4.6")
        assert props["popup"]["link"] == EVENT.detail_url

    def test_drops_events_without_coordinates(self):
        """Undrawable events are silently left out."""
        broken = SeismicEvent(id="broken", latitude=None, longitude=1.0)
        collection = to_feature_collection((EVENT, broken))

        assert collection["type"] == "FeatureCollection"
        assert [f["id"] for f in collection["features"]] == ["us1"]
