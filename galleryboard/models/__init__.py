"""Data model for exhibition listings."""

from .event import Event, parse_date
from .tokens import (
    ALL_PREFECTURES,
    ALL_TIME,
    DEFAULT_RANGE,
    PREFECTURES,
    RangeToken,
    VenueType,
)

__all__ = [
    "ALL_PREFECTURES",
    "ALL_TIME",
    "DEFAULT_RANGE",
    "Event",
    "PREFECTURES",
    "RangeToken",
    "VenueType",
    "parse_date",
]
