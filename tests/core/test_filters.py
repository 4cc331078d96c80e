"""Unit tests for visible set filtering.

Pure function tests - no mocks needed, fast execution.
"""

import pytest

from quakeview.core.event import SeismicEvent
from quakeview.core.filters import (
    FilterCriteria,
    FilterEngine,
    matches_place,
    visible_events,
)


def make_event(id: str, magnitude: float | None = 1.0, place: str = "") -> SeismicEvent:
    return SeismicEvent(
        id=id,
        latitude=10.0,
        longitude=20.0,
        magnitude=magnitude,
        place=place,
    )


@pytest.fixture
def sample_events():
    """Events with a spread of magnitudes and places."""
    return (
        make_event("big", 6.2, "50km E of Tokyo, Japan"),
        make_event("mid", 3.1, "Ridgecrest, CA"),
        make_event("none", None, "10km N of Anchorage, Alaska"),
    )


class TestFilterCriteria:
    """Tests for FilterCriteria."""

    def test_defaults(self):
        """Defaults show everything."""
        criteria = FilterCriteria()
        assert criteria.min_magnitude == 0.0
        assert criteria.place_substring == ""

    def test_negative_minimum_rejected(self):
        """Minimum magnitude must not be negative."""
        with pytest.raises(ValueError):
            FilterCriteria(min_magnitude=-0.1)

    def test_nan_minimum_rejected(self):
        """NaN minimum magnitude would hide every event."""
        with pytest.raises(ValueError):
            FilterCriteria(min_magnitude=float("nan"))

    def test_normalized_place(self):
        """Place substring is trimmed and lower-cased."""
        assert FilterCriteria(place_substring="  JaPan ").normalized_place == "japan"


class TestVisibleEvents:
    """Tests for visible_events()."""

    def test_min_magnitude(self, sample_events):
        """Only events at or above the minimum are visible."""
        visible = visible_events(sample_events, FilterCriteria(min_magnitude=4.0))
        assert [e.id for e in visible] == ["big"]

    def test_min_magnitude_is_inclusive(self, sample_events):
        """An event exactly at the minimum is visible."""
        visible = visible_events(sample_events, FilterCriteria(min_magnitude=3.1))
        assert [e.id for e in visible] == ["big", "mid"]

    def test_absent_magnitude_counts_as_zero(self, sample_events):
        """Absent magnitude passes a zero minimum only."""
        assert "none" in [e.id for e in visible_events(sample_events, FilterCriteria())]
        assert "none" not in [
            e.id for e in visible_events(sample_events, FilterCriteria(min_magnitude=0.1))
        ]

    def test_place_substring_case_insensitive(self, sample_events):
        """'japan' matches 'Tokyo, Japan' but not 'Ridgecrest, CA'."""
        visible = visible_events(sample_events, FilterCriteria(place_substring="japan"))
        assert [e.id for e in visible] == ["big"]

    def test_empty_place_matches_all(self, sample_events):
        """Empty place substring does not filter."""
        assert visible_events(sample_events, FilterCriteria()) == sample_events

    def test_whitespace_place_matches_all(self, sample_events):
        """Whitespace-only place substring does not filter."""
        visible = visible_events(sample_events, FilterCriteria(place_substring="   "))
        assert visible == sample_events

    def test_empty_place_never_matches_substring(self):
        """Event with empty place fails a non-empty substring."""
        assert matches_place(make_event("x", place=""), "ca") is False

    def test_both_filters_combine(self, sample_events):
        """Magnitude and place filters are both applied."""
        criteria = FilterCriteria(min_magnitude=4.0, place_substring="ca")
        assert visible_events(sample_events, criteria) == ()

    def test_preserves_order_and_subset(self, sample_events):
        """Visible set is an ordered subset of the events."""
        visible = visible_events(sample_events, FilterCriteria(min_magnitude=1.0))
        assert all(e in sample_events for e in visible)
        assert list(visible) == [e for e in sample_events if e in visible]

    def test_deterministic(self, sample_events):
        """Same inputs give the same output twice."""
        criteria = FilterCriteria(min_magnitude=2.0, place_substring="a")
        assert visible_events(sample_events, criteria) == visible_events(sample_events, criteria)

    def test_no_events(self):
        """Empty feed gives an empty visible set."""
        assert visible_events((), FilterCriteria()) == ()


class TestFilterEngine:
    """Tests for FilterEngine memoization."""

    def test_reuses_result_for_same_inputs(self, sample_events):
        """Unchanged inputs do not recompute."""
        engine = FilterEngine()
        criteria = FilterCriteria(min_magnitude=1.0)

        first = engine.compute(sample_events, criteria)
        second = engine.compute(sample_events, criteria)

        assert first is second
        assert engine.computations == 1

    def test_recomputes_when_criteria_change(self, sample_events):
        """New criteria object triggers recomputation."""
        engine = FilterEngine()
        engine.compute(sample_events, FilterCriteria())
        visible = engine.compute(sample_events, FilterCriteria(min_magnitude=4.0))

        assert [e.id for e in visible] == ["big"]
        assert engine.computations == 2

    def test_recomputes_when_events_change(self, sample_events):
        """New events object triggers recomputation."""
        engine = FilterEngine()
        criteria = FilterCriteria()
        engine.compute(sample_events, criteria)
        visible = engine.compute(sample_events[:1], criteria)

        assert [e.id for e in visible] == ["big"]
        assert engine.computations == 2

    def test_matches_pure_function(self, sample_events):
        """Memoized output equals the pure computation."""
        engine = FilterEngine()
        criteria = FilterCriteria(place_substring="ALASKA")
        assert engine.compute(sample_events, criteria) == visible_events(sample_events, criteria)
