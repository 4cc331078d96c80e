"""Tests for the FastAPI surface.

Uses FastAPI's TestClient with a mocked feed client and renderer.
"""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from quakeview.api import create_app
from quakeview.core.config import Config
from quakeview.core.errors import NetworkError
from quakeview.core.event import SeismicEvent, TimeRange
from quakeview.shell.map_renderer import MapImageResult


TOKYO = SeismicEvent(
    id="tokyo",
    latitude=35.0,
    longitude=139.0,
    depth_km=10.0,
    magnitude=6.2,
    place="50km E of Tokyo, Japan",
    occurred_at_ms=1700000000000,
    detail_url="https://earthquake.usgs.gov/earthquakes/eventpage/tokyo",
)
RIDGECREST = SeismicEvent(
    id="ridgecrest",
    latitude=34.0,
    longitude=-118.0,
    magnitude=3.1,
    place="Ridgecrest, CA",
)
NOWHERE = SeismicEvent(id="nowhere", latitude=None, longitude=None, magnitude=None)


@pytest.fixture
def feed_client():
    client = Mock()
    client.fetch_events.return_value = [TOKYO, RIDGECREST, NOWHERE]
    return client


@pytest.fixture
def renderer():
    renderer = Mock()
    renderer.render.return_value = MapImageResult(success=True, image_bytes=b"PNG_DATA")
    return renderer


@pytest.fixture
def api(feed_client, renderer):
    app = create_app(
        Config(poll_interval_seconds=3600),
        feed_client=feed_client,
        renderer=renderer,
    )
    with TestClient(app) as client:
        client.post("/api/refresh")
        yield client


class TestStatus:
    """Tests for GET /api/status."""

    def test_counts_after_fetch(self, api):
        """Status line shows visible and total counts."""
        body = api.get("/api/status").json()

        assert body["status"] == "idle"
        assert body["status_line"] == "Showing 3 of 3 events"
        assert body["overlay"] is None
        assert body["time_range"] == "day"
        assert body["time_range_label"] == "Last 24 Hours"

    def test_error_state(self, api, feed_client):
        """Failed refresh shows the error and offers retry."""
        feed_client.fetch_events.side_effect = NetworkError("Network error: 503", 503)

        body = api.post("/api/refresh").json()

        assert body["status"] == "error"
        assert body["error_message"] == "Network error: 503"
        assert body["overlay"] == "error"
        assert body["show_retry"] is True
        assert body["total_count"] == 3


class TestEvents:
    """Tests for GET /api/events."""

    def test_feature_collection(self, api):
        """Visible set is served as GeoJSON with styles."""
        body = api.get("/api/events").json()

        assert body["type"] == "FeatureCollection"
        ids = [f["id"] for f in body["features"]]
        assert ids == ["tokyo", "ridgecrest"]
        assert body["features"][0]["properties"]["style"]["fillColor"] == "#b10026"
        assert body["metadata"]["total"] == 3

    def test_filters_apply(self, api):
        """Filter updates narrow the served events."""
        api.put("/api/filters", json={"place_substring": "japan"})

        body = api.get("/api/events").json()

        assert [f["id"] for f in body["features"]] == ["tokyo"]


class TestFilters:
    """Tests for PUT /api/filters."""

    def test_min_magnitude(self, api):
        """Minimum magnitude narrows the visible count."""
        body = api.put("/api/filters", json={"min_magnitude": 4.0}).json()

        assert body["visible_count"] == 1
        assert body["filters"]["min_magnitude"] == 4.0

    def test_empty_overlay(self, api):
        """Filtering everything out shows the empty overlay."""
        body = api.put("/api/filters", json={"min_magnitude": 7.0}).json()

        assert body["visible_count"] == 0
        assert body["overlay"] == "empty"

    @pytest.mark.parametrize("value", [-0.5, 7.5])
    def test_out_of_range_rejected(self, api, value):
        """Minimum magnitude outside [0, 7] is rejected."""
        response = api.put("/api/filters", json={"min_magnitude": value})
        assert response.status_code == 422


class TestTimeRange:
    """Tests for PUT /api/time-range."""

    def test_switch_fetches_new_range(self, api, feed_client):
        """Switching range fetches that feed."""
        body = api.put("/api/time-range", json={"time_range": "week"}).json()

        assert body["time_range"] == "week"
        feed_client.fetch_events.assert_called_with(TimeRange.WEEK)

    def test_unknown_range_rejected(self, api):
        """Unknown ranges are rejected."""
        response = api.put("/api/time-range", json={"time_range": "year"})
        assert response.status_code == 422


class TestRetry:
    """Tests for POST /api/retry."""

    def test_retry_only_after_error(self, api):
        """Retry is refused when there is no error."""
        assert api.post("/api/retry").status_code == 409

    def test_retry_recovers(self, api, feed_client):
        """Retry after an error returns to idle."""
        feed_client.fetch_events.side_effect = NetworkError("Network error: 500", 500)
        api.post("/api/refresh")

        feed_client.fetch_events.side_effect = None
        feed_client.fetch_events.return_value = [TOKYO]
        body = api.post("/api/retry").json()

        assert body["status"] == "idle"
        assert body["total_count"] == 1


class TestViewport:
    """Tests for GET /api/viewport."""

    def test_fit_covers_visible_set(self, api, renderer):
        """Viewport fit covers both drawable events."""
        fit = api.get("/api/viewport").json()["fit"]

        assert fit["southwest"] == [34.0, -118.0]
        assert fit["northeast"] == [35.0, 139.0]
        assert fit["padding"] == [50, 50]
        assert renderer.fit_bounds.called

    def test_empty_filter_keeps_last_fit(self, api):
        """Filtering to nothing leaves the last fit in place."""
        before = api.get("/api/viewport").json()["fit"]
        api.put("/api/filters", json={"place_substring": "atlantis"})

        assert api.get("/api/viewport").json()["fit"] == before


class TestMapImage:
    """Tests for GET /map.png."""

    def test_returns_png(self, api, renderer):
        """Rendered image is served as PNG."""
        response = api.get("/map.png")

        assert response.status_code == 200
        assert response.headers["content-type"] == "image/png"
        assert response.content == b"PNG_DATA"

    def test_render_failure_is_502(self, api, renderer):
        """Renderer failure maps to 502."""
        renderer.render.return_value = MapImageResult(success=False, error="tiles down")

        assert api.get("/map.png").status_code == 502


class TestLegend:
    """Tests for GET /api/legend."""

    def test_bands(self, api):
        """Legend lists seven bands, highest first."""
        bands = api.get("/api/legend").json()["bands"]

        assert len(bands) == 7
        assert bands[0] == {"label": ">=6.0", "color": "#b10026"}
