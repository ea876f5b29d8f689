"""Date-range bucket classification for exhibition periods."""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from .logger import get_logger
from .models.tokens import RangeToken

logger = get_logger(__name__)

# Inclusive look-ahead for the next30 bucket
NEXT_DAYS = 30


def as_calendar_date(today: date | datetime) -> date:
    """Drop any time component so comparisons are on calendar dates."""
    if isinstance(today, datetime):
        return today.date()
    return today


def _overlaps(start: date, end: date, period_start: date, period_end: date) -> bool:
    """Inclusive interval overlap test."""
    return start <= period_end and end >= period_start


@dataclass(frozen=True)
class RangeWindow:
    """
    Period boundaries derived from a single "today".

    The week and month depend only on ``today``, so one window is built per
    query and reused for every candidate event.
    """

    today: date
    week_start: date
    week_end: date
    month_start: date
    month_end: date
    next_end: date

    @classmethod
    def for_day(cls, today: date | datetime) -> "RangeWindow":
        """Build the window for ``today``. Weeks start on Sunday."""
        today = as_calendar_date(today)

        # date.weekday(): Monday=0 ... Sunday=6
        days_since_sunday = (today.weekday() + 1) % 7
        week_start = today - timedelta(days=days_since_sunday)

        last_day = calendar.monthrange(today.year, today.month)[1]

        return cls(
            today=today,
            week_start=week_start,
            week_end=week_start + timedelta(days=6),
            month_start=today.replace(day=1),
            month_end=today.replace(day=last_day),
            next_end=today + timedelta(days=NEXT_DAYS),
        )

    def matches(self, token: RangeToken, start: date, end: date) -> bool:
        """Check whether ``[start, end]`` belongs to the ``token`` bucket."""
        token = RangeToken(token)
        today = self.today

        if token is RangeToken.UPCOMING:
            return end >= today
        if token is RangeToken.ONGOING:
            return start <= today <= end
        if token is RangeToken.THIS_WEEK:
            return end >= today and _overlaps(start, end, self.week_start, self.week_end)
        if token is RangeToken.THIS_MONTH:
            return end >= today and _overlaps(start, end, self.month_start, self.month_end)
        # RangeToken.NEXT_30
        return today <= start <= self.next_end

    def classify(self, start: date, end: date) -> set[RangeToken]:
        """Return every bucket ``[start, end]`` belongs to (possibly none)."""
        return {token for token in RangeToken if self.matches(token, start, end)}


def classify(today: date | datetime, start: date, end: date) -> set[RangeToken]:
    """
    Compute the range buckets of an event period.

    Args:
        today: Reference day (a datetime is truncated to its date)
        start: First day of the exhibition
        end: Last day of the exhibition (inclusive)

    Returns:
        Set of matching RangeToken values
    """
    buckets = RangeWindow.for_day(today).classify(start, end)
    logger.debug(
        f"Buckets for {start.isoformat()}..{end.isoformat()}: "
        f"{sorted(t.value for t in buckets)}"
    )
    return buckets


def matches(token: RangeToken, today: date | datetime, start: date, end: date) -> bool:
    """Single-bucket form of :func:`classify`, used for filtering."""
    return RangeWindow.for_day(today).matches(token, start, end)
