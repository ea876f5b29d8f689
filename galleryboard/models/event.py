"""Exhibition event record as supplied by the listing store."""

from dataclasses import dataclass
from datetime import date, datetime


def parse_date(value: date | datetime | str | None) -> date | None:
    """Coerce a storage value (ISO string, date or datetime) to a calendar date."""
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).strip()[:10])


@dataclass(frozen=True)
class Event:
    """
    A published exhibition announcement.

    Only ``title``, ``host_name``, ``venue``, ``prefecture``, ``start_date``
    and ``end_date`` are read by the classifiers. The remaining fields are
    carried through untouched for the presentation layer.

    ``end_date >= start_date`` is guaranteed by the submission validator and
    is not re-checked here.
    """

    # Fields read by the engine
    title: str
    venue: str
    prefecture: str
    start_date: date
    end_date: date
    host_name: str | None = None

    # Pass-through fields
    id: str | None = None
    address: str | None = None
    price: str | None = None
    notes: str | None = None
    announce_url: str | None = None
    x_url: str | None = None
    ig_url: str | None = None
    threads_url: str | None = None
    status: str = "published"

    def __post_init__(self):
        if not self.title:
            raise ValueError("Event title is required")
        if self.start_date is None or self.end_date is None:
            raise ValueError("Event start_date and end_date are required")

    @property
    def duration_days(self) -> int:
        """Number of calendar days the exhibition is open (inclusive)."""
        return (self.end_date - self.start_date).days + 1

    def to_dict(self) -> dict:
        """Convert to a JSON-friendly dictionary (dates as ISO strings)."""
        d = {
            "id": self.id,
            "title": self.title,
            "host_name": self.host_name,
            "venue": self.venue,
            "address": self.address,
            "prefecture": self.prefecture,
            "price": self.price,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat(),
            "announce_url": self.announce_url,
            "x_url": self.x_url,
            "ig_url": self.ig_url,
            "threads_url": self.threads_url,
            "notes": self.notes,
            "status": self.status,
        }
        return {k: v for k, v in d.items() if v is not None}

    @classmethod
    def from_dict(cls, data: dict) -> "Event":
        """Create an Event from a storage row or a parsed YAML/JSON record."""
        return cls(
            title=data.get("title", ""),
            venue=data.get("venue") or "",
            prefecture=data.get("prefecture") or "",
            start_date=parse_date(data.get("start_date")),
            end_date=parse_date(data.get("end_date")),
            host_name=data.get("host_name"),
            id=None if data.get("id") is None else str(data["id"]),
            address=data.get("address"),
            price=data.get("price"),
            notes=data.get("notes"),
            announce_url=data.get("announce_url"),
            x_url=data.get("x_url"),
            ig_url=data.get("ig_url"),
            threads_url=data.get("threads_url"),
            status=data.get("status") or "published",
        )
