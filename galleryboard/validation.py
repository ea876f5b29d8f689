"""Validation of submitted exhibition records before they are stored.

The filtering engine assumes well-formed records (valid dates,
``end_date >= start_date``); this module is where those guarantees are
established.
"""

from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date
from urllib.parse import urlparse

from .config import DEFAULT_ANNOUNCE_DOMAINS
from .logger import get_logger
from .models.event import parse_date
from .models.tokens import PREFECTURES

logger = get_logger(__name__)

REQUIRED_FIELDS = ["title", "venue", "prefecture", "start_date", "end_date", "announce_url"]

MAX_LENGTHS: dict[str, int] = {
    "title": 100,
    "host_name": 50,
    "venue": 100,
    "address": 200,
    "price": 50,
    "notes": 500,
}

URL_FIELDS = ["x_url", "ig_url", "threads_url", "announce_url"]


class EventValidationError(ValueError):
    """Raised by :meth:`EventValidator.validate_or_raise` for invalid records."""

    def __init__(self, issues: list["ValidationIssue"]):
        self.issues = issues
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid event: {summary}")


@dataclass(frozen=True)
class ValidationIssue:
    """One problem with one field."""

    field: str
    message: str


@dataclass
class ValidationResult:
    """Outcome of validating a record."""

    issues: list[ValidationIssue] = field(default_factory=list)

    @property
    def valid(self) -> bool:
        return not self.issues

    @property
    def fields(self) -> set[str]:
        return {issue.field for issue in self.issues}

    def add(self, field_name: str, message: str) -> None:
        self.issues.append(ValidationIssue(field_name, message))


def _is_http_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _host_allowed(host: str, allowed: Iterable[str]) -> bool:
    host = host.lower().rstrip(".")
    if host.startswith("www."):
        host = host[4:]
    return any(host == domain or host.endswith("." + domain) for domain in allowed)


class EventValidator:
    """
    Check a raw submission (a dict as received from the form or API).

    All problems are collected rather than stopping at the first one, so a
    form can highlight every offending field at once.

    The announce URL must point at one of ``announce_domains`` (or a
    subdomain of one); other URL fields only need to be http(s) URLs.
    """

    def __init__(self, announce_domains: Iterable[str] | None = None):
        domains = DEFAULT_ANNOUNCE_DOMAINS if announce_domains is None else announce_domains
        self.announce_domains = tuple(d.lower() for d in domains)

    def validate(self, data: dict) -> ValidationResult:
        result = ValidationResult()

        for name in REQUIRED_FIELDS:
            value = data.get(name)
            if value is None or (isinstance(value, str) and not value.strip()):
                result.add(name, "required")

        for name, limit in MAX_LENGTHS.items():
            value = data.get(name)
            if isinstance(value, str) and len(value) > limit:
                result.add(name, f"must be at most {limit} characters")

        prefecture = data.get("prefecture")
        if prefecture and prefecture not in PREFECTURES:
            result.add("prefecture", f"unknown prefecture: {prefecture}")

        start = self._check_date(data, "start_date", result)
        end = self._check_date(data, "end_date", result)
        if start and end and end < start:
            result.add("end_date", "must be on or after start_date")

        for name in URL_FIELDS:
            value = data.get(name)
            if not value:
                continue
            if not isinstance(value, str) or not _is_http_url(value):
                result.add(name, "must be an http(s) URL")
            elif name == "announce_url" and not _host_allowed(
                urlparse(value).hostname or "", self.announce_domains
            ):
                result.add(name, "domain is not accepted for announcements")

        if not result.valid:
            logger.debug(
                f"Rejected submission '{data.get('title', '')}': "
                f"{', '.join(sorted(result.fields))}"
            )
        return result

    def validate_or_raise(self, data: dict) -> None:
        result = self.validate(data)
        if not result.valid:
            raise EventValidationError(result.issues)

    @staticmethod
    def _check_date(data: dict, name: str, result: ValidationResult) -> date | None:
        value = data.get(name)
        if value is None or value == "":
            return None
        try:
            return parse_date(value)
        except (TypeError, ValueError):
            result.add(name, "must be a calendar date (YYYY-MM-DD)")
            return None
