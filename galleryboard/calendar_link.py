"""Google Calendar "add event" links for exhibitions."""

from datetime import timedelta
from urllib.parse import urlencode

from .models.event import Event

GOOGLE_CALENDAR_URL = "https://calendar.google.com/calendar/render"


def event_details(event: Event) -> str:
    """Build the description text shown in the calendar entry."""
    lines = []
    if event.venue:
        lines.append(f"会場: {event.venue}")
    if event.host_name:
        lines.append(f"主催: {event.host_name}")
    if event.price:
        lines.append(f"料金: {event.price}")

    details = "\n".join(lines) + "\n" if lines else ""
    if event.notes:
        details += f"\n{event.notes}\n"
    if event.announce_url:
        details += f"\n詳細情報: {event.announce_url}"
    return details


def google_calendar_url(event: Event) -> str:
    """
    Build a Google Calendar template URL for an all-day exhibition.

    Google treats the end of an all-day range as exclusive, so the day after
    ``end_date`` is sent.
    """
    end_exclusive = event.end_date + timedelta(days=1)
    params = {
        "action": "TEMPLATE",
        "text": event.title,
        "dates": f"{event.start_date:%Y%m%d}/{end_exclusive:%Y%m%d}",
        "details": event_details(event),
        "location": event.address or event.venue,
    }
    return f"{GOOGLE_CALENDAR_URL}?{urlencode(params)}"
