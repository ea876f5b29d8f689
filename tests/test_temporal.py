"""Tests for date-range bucket classification."""

from datetime import date, datetime, timedelta

import pytest

from galleryboard.models.tokens import RangeToken
from galleryboard.temporal import NEXT_DAYS, RangeWindow, as_calendar_date, classify, matches

# Wednesday; its week runs Sunday 2025-09-07 .. Saturday 2025-09-13
TODAY = date(2025, 9, 10)


def _periods(today: date, span: int = 40):
    """Every (start, end) pair with both ends within ``span`` days of today."""
    days = [today + timedelta(days=d) for d in range(-span, span + 1, 3)]
    return [(s, e) for s in days for e in days if e >= s]


class TestRangeWindow:
    """Tests for boundary computation."""

    def test_week_starts_on_sunday(self):
        window = RangeWindow.for_day(TODAY)
        assert window.week_start == date(2025, 9, 7)
        assert window.week_end == date(2025, 9, 13)

    def test_sunday_is_first_day_of_its_week(self):
        window = RangeWindow.for_day(date(2025, 9, 7))
        assert window.week_start == date(2025, 9, 7)
        assert window.week_end == date(2025, 9, 13)

    def test_saturday_is_last_day_of_its_week(self):
        window = RangeWindow.for_day(date(2025, 9, 13))
        assert window.week_start == date(2025, 9, 7)

    def test_week_crossing_month_boundary(self):
        window = RangeWindow.for_day(date(2025, 10, 1))  # Wednesday
        assert window.week_start == date(2025, 9, 28)
        assert window.week_end == date(2025, 10, 4)

    def test_month_bounds(self):
        window = RangeWindow.for_day(TODAY)
        assert window.month_start == date(2025, 9, 1)
        assert window.month_end == date(2025, 9, 30)

    def test_leap_february(self):
        window = RangeWindow.for_day(date(2024, 2, 10))
        assert window.month_end == date(2024, 2, 29)

    def test_next_end_is_thirty_days_ahead(self):
        window = RangeWindow.for_day(TODAY)
        assert window.next_end == date(2025, 10, 10)
        assert NEXT_DAYS == 30

    def test_datetime_is_truncated(self):
        window = RangeWindow.for_day(datetime(2025, 9, 10, 23, 59))
        assert window.today == TODAY

    def test_as_calendar_date(self):
        assert as_calendar_date(datetime(2025, 9, 10, 8, 30)) == TODAY
        assert as_calendar_date(TODAY) is TODAY


class TestScenario:
    """Reference scenario with today = 2025-09-10."""

    def test_event_in_progress(self):
        start, end = date(2025, 9, 1), date(2025, 9, 14)
        assert matches(RangeToken.UPCOMING, TODAY, start, end) is True
        assert matches(RangeToken.ONGOING, TODAY, start, end) is True
        assert matches(RangeToken.THIS_MONTH, TODAY, start, end) is True
        assert matches(RangeToken.THIS_WEEK, TODAY, start, end) is True
        assert matches(RangeToken.NEXT_30, TODAY, start, end) is False

    def test_event_starting_later_this_month(self):
        start, end = date(2025, 9, 20), date(2025, 9, 25)
        assert matches(RangeToken.UPCOMING, TODAY, start, end) is True
        assert matches(RangeToken.ONGOING, TODAY, start, end) is False
        assert matches(RangeToken.NEXT_30, TODAY, start, end) is True
        assert matches(RangeToken.THIS_MONTH, TODAY, start, end) is True
        assert matches(RangeToken.THIS_WEEK, TODAY, start, end) is False

    def test_finished_event(self):
        start, end = date(2025, 8, 1), date(2025, 9, 5)
        assert matches(RangeToken.UPCOMING, TODAY, start, end) is False
        assert classify(TODAY, start, end) == set()

    def test_classify_returns_all_buckets(self):
        assert classify(TODAY, date(2025, 9, 1), date(2025, 9, 14)) == {
            RangeToken.UPCOMING,
            RangeToken.ONGOING,
            RangeToken.THIS_WEEK,
            RangeToken.THIS_MONTH,
        }


class TestBucketRules:
    """Edge cases of the individual bucket rules."""

    @pytest.fixture
    def window(self):
        return RangeWindow.for_day(TODAY)

    def test_single_day_event_today(self, window):
        assert window.classify(TODAY, TODAY) == set(RangeToken)

    def test_event_ending_today_is_upcoming_and_ongoing(self, window):
        start = date(2025, 9, 1)
        assert window.matches(RangeToken.UPCOMING, start, TODAY) is True
        assert window.matches(RangeToken.ONGOING, start, TODAY) is True

    def test_event_ended_yesterday_in_this_week(self, window):
        """Overlapping the week is not enough once the event has ended."""
        start, end = date(2025, 9, 7), date(2025, 9, 9)
        assert window.matches(RangeToken.THIS_WEEK, start, end) is False
        assert window.matches(RangeToken.THIS_MONTH, start, end) is False

    def test_event_from_last_month_ending_this_week(self, window):
        start, end = date(2025, 8, 20), date(2025, 9, 11)
        assert window.matches(RangeToken.THIS_MONTH, start, end) is True
        assert window.matches(RangeToken.THIS_WEEK, start, end) is True

    def test_event_starting_on_saturday(self, window):
        start = date(2025, 9, 13)
        assert window.matches(RangeToken.THIS_WEEK, start, start) is True

    def test_event_starting_next_sunday(self, window):
        start = date(2025, 9, 14)
        assert window.matches(RangeToken.THIS_WEEK, start, start) is False

    def test_event_next_month(self, window):
        start, end = date(2025, 10, 1), date(2025, 10, 5)
        assert window.matches(RangeToken.THIS_MONTH, start, end) is False
        assert window.matches(RangeToken.NEXT_30, start, end) is True

    def test_long_event_spanning_the_month(self, window):
        start, end = date(2025, 8, 1), date(2025, 11, 30)
        assert window.matches(RangeToken.THIS_MONTH, start, end) is True
        assert window.matches(RangeToken.THIS_WEEK, start, end) is True

    @pytest.mark.parametrize(
        "offset,expected",
        [(-1, False), (0, True), (1, True), (29, True), (30, True), (31, False)],
    )
    def test_next30_bounds(self, window, offset, expected):
        start = TODAY + timedelta(days=offset)
        end = start + timedelta(days=3)
        assert window.matches(RangeToken.NEXT_30, start, end) is expected

    def test_year_end(self):
        window = RangeWindow.for_day(date(2025, 12, 31))
        start = date(2026, 1, 1)
        assert window.matches(RangeToken.THIS_MONTH, start, start) is False
        assert window.matches(RangeToken.NEXT_30, start, start) is True
        # Wednesday 2025-12-31: week runs to Saturday 2026-01-03
        assert window.matches(RangeToken.THIS_WEEK, start, start) is True

    def test_accepts_token_value_strings(self, window):
        assert window.matches("thisMonth", date(2025, 9, 20), date(2025, 9, 25)) is True

    def test_unknown_token_raises(self, window):
        with pytest.raises(ValueError):
            window.matches("lastYear", TODAY, TODAY)


class TestProperties:
    """Relations between buckets that must hold for any period."""

    @pytest.fixture
    def window(self):
        return RangeWindow.for_day(TODAY)

    def test_upcoming_means_not_finished(self, window):
        for start, end in _periods(TODAY):
            assert window.matches(RangeToken.UPCOMING, start, end) is (end >= TODAY)

    def test_ongoing_means_today_within_period(self, window):
        for start, end in _periods(TODAY):
            assert window.matches(RangeToken.ONGOING, start, end) is (start <= TODAY <= end)

    def test_week_and_month_are_subsets_of_upcoming(self, window):
        for start, end in _periods(TODAY):
            buckets = window.classify(start, end)
            if RangeToken.THIS_WEEK in buckets or RangeToken.THIS_MONTH in buckets:
                assert RangeToken.UPCOMING in buckets

    def test_next30_start_within_window(self, window):
        for start, end in _periods(TODAY):
            if window.matches(RangeToken.NEXT_30, start, end):
                assert TODAY <= start <= TODAY + timedelta(days=30)

    def test_this_week_implies_this_month_mid_month(self, window):
        # Week of 2025-09-10 lies entirely inside September
        for start, end in _periods(TODAY):
            if window.matches(RangeToken.THIS_WEEK, start, end):
                assert window.matches(RangeToken.THIS_MONTH, start, end)

    def test_module_functions_agree_with_window(self, window):
        for start, end in _periods(TODAY, span=10):
            assert classify(TODAY, start, end) == window.classify(start, end)
