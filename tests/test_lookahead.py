"""Tests for the lookahead window filter."""

from datetime import date, timedelta

from contracts import Activity
from recovery import filter_lookahead


WINDOW_START = date(2025, 3, 1)


def span(activity_id, start_offset, duration):
    start = WINDOW_START + timedelta(days=start_offset)
    return Activity(
        activity_id=activity_id,
        name=activity_id,
        duration_days=duration,
        start_date=start,
        finish_date=start + timedelta(days=duration),
    )


class TestFilterLookahead:
    """Test overlap with the [start, start + days] window."""

    def test_overlapping_activities_kept_in_order(self):
        activities = [
            span("inside", 2, 3),
            span("before", -20, 5),
            span("straddles-start", -3, 5),
            span("after", 30, 2),
            span("straddles-end", 18, 10),
        ]
        kept = filter_lookahead(activities, WINDOW_START, 21)
        assert [a.activity_id for a in kept] == ["inside", "straddles-start", "straddles-end"]

    def test_window_edges_are_inclusive(self):
        activities = [span("ends-on-start", -4, 4), span("starts-on-end", 21, 3)]
        kept = filter_lookahead(activities, WINDOW_START, 21)
        assert [a.activity_id for a in kept] == ["ends-on-start", "starts-on-end"]

    def test_default_window_length(self):
        activities = [span("day-21", 21, 1), span("day-22", 22, 1)]
        kept = filter_lookahead(activities, WINDOW_START)
        assert [a.activity_id for a in kept] == ["day-21"]

    def test_empty_input(self):
        assert filter_lookahead([], WINDOW_START, 7) == []

    def test_window_past_calendar_end(self):
        last = date(9999, 12, 30)
        activity = Activity(activity_id="A001", name="A001", duration_days=1, start_date=last, finish_date=date.max)
        assert filter_lookahead([activity], last, 21) == [activity]
