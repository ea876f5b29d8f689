"""Gallery Board - exhibition listing classification and date-range filtering."""

from .aliases import AliasCluster, AliasTables, load_alias_tables
from .filters import FilterOrchestrator, FilterRequest
from .models import ALL_PREFECTURES, ALL_TIME, Event, RangeToken, VenueType
from .temporal import RangeWindow
from .venue_classifier import VenueClassification, VenueClassifier

__version__ = "1.0.0"

__all__ = [
    "ALL_PREFECTURES",
    "ALL_TIME",
    "AliasCluster",
    "AliasTables",
    "Event",
    "FilterOrchestrator",
    "FilterRequest",
    "RangeToken",
    "RangeWindow",
    "VenueClassification",
    "VenueClassifier",
    "VenueType",
    "load_alias_tables",
]
