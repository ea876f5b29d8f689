"""Request parsing and filtering of exhibition listings."""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date, datetime
from zoneinfo import ZoneInfo

from .config import DEFAULT_TIMEZONE, Settings
from .logger import get_logger
from .models.event import Event
from .models.tokens import (
    ALL_PREFECTURES,
    ALL_TIME,
    DEFAULT_RANGE,
    PREFECTURES,
    RangeToken,
    VenueType,
)
from .temporal import RangeWindow, as_calendar_date
from .venue_classifier import VenueClassifier

logger = get_logger(__name__)


def _parse_range(value: str | None, default: RangeToken | str) -> RangeToken | str:
    if value is None or value == "":
        return default
    if value == ALL_TIME:
        return ALL_TIME
    try:
        return RangeToken(value)
    except ValueError:
        logger.warning(f"Ignoring unknown range token: {value!r}")
        return default


def _parse_prefecture(value: str | None) -> str:
    if value is None or value == "" or value == ALL_PREFECTURES:
        return ALL_PREFECTURES
    if value not in PREFECTURES:
        logger.warning(f"Ignoring unknown prefecture: {value!r}")
        return ALL_PREFECTURES
    return value


def _parse_venue_type(value: str | None) -> VenueType:
    if value is None or value == "":
        return VenueType.ALL
    try:
        return VenueType(value)
    except ValueError:
        logger.warning(f"Ignoring unknown venue type: {value!r}")
        return VenueType.ALL


@dataclass(frozen=True)
class FilterRequest:
    """
    A validated listing query.

    ``range`` is a RangeToken or the ``ALL_TIME`` sentinel; it is never
    None, so expired listings only appear when explicitly asked for.
    """

    range: RangeToken | str = DEFAULT_RANGE
    prefecture: str = ALL_PREFECTURES
    venue_type: VenueType = VenueType.ALL

    @classmethod
    def from_params(
        cls,
        params: Mapping[str, str | None],
        default_range: RangeToken | str = DEFAULT_RANGE,
    ) -> "FilterRequest":
        """
        Build a request from raw query parameters.

        Reads ``range``, ``prefecture`` and ``venueType`` (``venue_type`` is
        accepted too). Unrecognized values fall back to the defaults instead
        of failing the request.

        Args:
            params: Query string parameters
            default_range: Range used when ``range`` is absent or invalid

        Returns:
            FilterRequest
        """
        if default_range != ALL_TIME:
            default_range = RangeToken(default_range)

        venue_type = params.get("venueType")
        if venue_type is None:
            venue_type = params.get("venue_type")

        return cls(
            range=_parse_range(params.get("range"), default_range),
            prefecture=_parse_prefecture(params.get("prefecture")),
            venue_type=_parse_venue_type(venue_type),
        )


class FilterOrchestrator:
    """
    Apply range, prefecture and venue-type filters to a listing.

    Each step is an independent, stable filter pass, applied in a fixed
    order:
    1. Range bucket (defaults to ``upcoming``; ``ALL_TIME`` disables it)
    2. Exact prefecture equality (unless ``"all"``)
    3. Venue type (unless ``all``)

    Input order is preserved; the store is expected to deliver events
    sorted by start date.
    """

    def __init__(
        self,
        classifier: VenueClassifier | None = None,
        timezone: str = DEFAULT_TIMEZONE,
    ):
        """
        Initialize the orchestrator.

        Args:
            classifier: Venue classifier (bundled alias tables by default)
            timezone: Timezone used to determine "today" when not supplied
        """
        self.classifier = classifier if classifier is not None else VenueClassifier()
        self.tz = ZoneInfo(timezone)

    @classmethod
    def from_settings(cls, settings: Settings) -> "FilterOrchestrator":
        return cls(
            classifier=VenueClassifier.from_file(settings.aliases_file),
            timezone=settings.timezone,
        )

    def today(self) -> date:
        return datetime.now(self.tz).date()

    def apply(
        self,
        events: Iterable[Event],
        range_token: RangeToken | str | None = None,
        prefecture: str | None = None,
        venue_type: VenueType | str | None = None,
        today: date | datetime | None = None,
    ) -> list[Event]:
        """
        Filter events.

        Args:
            events: Candidate events, already sorted by the store
            range_token: Range bucket; None means ``upcoming``, ``ALL_TIME``
                disables the date filter
            prefecture: Exact prefecture name, or None/``"all"``
            venue_type: VenueType (or its value), or None/``all``
            today: Reference day; defaults to the current date in the
                configured timezone

        Returns:
            Subsequence of ``events`` in the original order
        """
        result = list(events)
        total = len(result)

        if range_token is None:
            range_token = DEFAULT_RANGE

        if range_token != ALL_TIME:
            token = RangeToken(range_token)
            window = RangeWindow.for_day(as_calendar_date(today) if today else self.today())
            result = [e for e in result if window.matches(token, e.start_date, e.end_date)]
            logger.debug(f"Range '{token.value}' (today={window.today}): {len(result)} left")

        if prefecture and prefecture != ALL_PREFECTURES:
            result = [e for e in result if e.prefecture == prefecture]
            logger.debug(f"Prefecture '{prefecture}': {len(result)} left")

        if venue_type is not None:
            venue_type = VenueType(venue_type)
            if venue_type is not VenueType.ALL:
                result = [
                    e for e in result if self.classifier.classify_event(e) is venue_type
                ]
                logger.debug(f"Venue type '{venue_type.value}': {len(result)} left")

        logger.info(f"Filtered {total} events down to {len(result)}")
        return result

    def apply_request(
        self,
        events: Iterable[Event],
        request: FilterRequest,
        today: date | datetime | None = None,
    ) -> list[Event]:
        """Filter events with a parsed :class:`FilterRequest`."""
        return self.apply(
            events,
            range_token=request.range,
            prefecture=request.prefecture,
            venue_type=request.venue_type,
            today=today,
        )

    def annotate(
        self,
        events: Iterable[Event],
        request: FilterRequest | None = None,
        today: date | datetime | None = None,
    ) -> list[tuple[Event, VenueType]]:
        """Filter, then pair each remaining event with its venue badge."""
        request = request or FilterRequest()
        return [
            (event, self.classifier.classify_event(event))
            for event in self.apply_request(events, request, today=today)
        ]
