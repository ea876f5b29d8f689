#!/usr/bin/env python3
"""
Gallery Board
=============

Command-line interface for the exhibition classification and filtering
engine.

Usage:
    python board.py filter events.yaml                      # Upcoming events
    python board.py filter events.yaml --range thisWeek     # This week only
    python board.py filter events.yaml --venue-type major   # Major venues only
    python board.py classify "ニコンサロン"                   # Explain a venue
    python board.py buckets 2025-09-01 2025-09-14           # Range buckets
    python board.py validate events.yaml                    # Check submissions
    python board.py check-aliases                           # Check alias data
"""

import json
import sys
from datetime import date, datetime
from pathlib import Path

import click
import yaml

from galleryboard.aliases import AliasConfigError, load_alias_tables
from galleryboard.calendar_link import google_calendar_url
from galleryboard.config import ConfigurationError, Settings, load_settings
from galleryboard.filters import FilterOrchestrator, FilterRequest
from galleryboard.logger import get_logger, setup_logging
from galleryboard.models import Event, RangeToken, VenueType
from galleryboard.temporal import RangeWindow
from galleryboard.validation import EventValidator
from galleryboard.venue_classifier import VenueClassifier

DATE_FORMATS = ["%Y-%m-%d"]

BADGE_COLORS = {
    VenueType.MAJOR: "magenta",
    VenueType.INDEPENDENT: "cyan",
}


def load_records(events_path: Path) -> list[dict]:
    """
    Load raw event records from a YAML or JSON file.

    The file holds either a list of records or a mapping with an
    ``events`` list.
    """
    with open(events_path, encoding="utf-8") as f:
        if events_path.suffix.lower() == ".json":
            data = json.load(f)
        else:
            data = yaml.safe_load(f)

    if isinstance(data, dict):
        data = data.get("events", [])
    if not isinstance(data, list):
        raise click.ClickException(f"{events_path} does not contain a list of events")
    return data


def load_events(events_path: Path) -> list[Event]:
    """Load events, skipping (and logging) records that cannot be built."""
    logger = get_logger(__name__)
    events = []
    for i, record in enumerate(load_records(events_path)):
        try:
            events.append(Event.from_dict(record))
        except (TypeError, ValueError, AttributeError) as e:
            logger.warning(f"Skipping record #{i + 1} in {events_path.name}: {e}")
    logger.debug(f"Loaded {len(events)} events from {events_path}")
    return events


def setup_logging_from_settings(
    settings: Settings,
    config_dir: Path,
    log_level_override: str | None = None,
    log_file_override: Path | None = None,
) -> None:
    """Configure logging from settings, with CLI flags taking precedence."""
    logging_cfg = settings.logging
    effective_log_file = log_file_override or logging_cfg.log_file

    setup_logging(
        level=log_level_override or logging_cfg.log_level,
        log_file=str(effective_log_file) if effective_log_file else None,
        log_dir=config_dir if effective_log_file else None,
        log_format=logging_cfg.log_format,
        max_bytes=logging_cfg.max_file_size,
        backup_count=logging_cfg.backup_count,
    )


def _as_date(value: datetime | None) -> date | None:
    return value.date() if value else None


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "-c",
    type=click.Path(dir_okay=False, path_type=Path),
    default=Path(__file__).parent / "config.yaml",
    help="Path to configuration file",
)
@click.option(
    "--log-level",
    "-l",
    type=click.Choice(
        ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"], case_sensitive=False
    ),
    default=None,
    help="Override log level from config",
)
@click.option(
    "--log-file",
    type=click.Path(path_type=Path),
    default=None,
    help="Override log file path from config",
)
@click.version_option(version="1.0.0", prog_name="galleryboard")
@click.pass_context
def cli(ctx, config: Path, log_level: str | None, log_file: Path | None):
    """
    Gallery Board - classify and filter exhibition listings.

    Decides which date ranges an exhibition falls into and whether it is
    held at a major/corporate venue or an independent one.
    """
    ctx.ensure_object(dict)

    try:
        settings = load_settings(config)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    ctx.obj["settings"] = settings
    ctx.obj["config_dir"] = config.parent
    setup_logging_from_settings(settings, config.parent, log_level, log_file)

    if ctx.invoked_subcommand is None:
        click.echo(ctx.get_help())


@cli.command("filter")
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--range", "-r", "range_", default=None, help="upcoming, ongoing, thisWeek, thisMonth, next30 or all")
@click.option("--prefecture", "-p", default=None, help="Prefecture name, or 'all'")
@click.option("--venue-type", "-v", default=None, help="all, major or independent")
@click.option("--today", "-t", type=click.DateTime(formats=DATE_FORMATS), default=None, help="Reference date (default: today)")
@click.option("--links", is_flag=True, default=False, help="Print a Google Calendar link per event")
@click.option("--json", "as_json", is_flag=True, default=False, help="Output JSON instead of text")
@click.pass_context
def filter_events(
    ctx,
    events_file: Path,
    range_: str | None,
    prefecture: str | None,
    venue_type: str | None,
    today: datetime | None,
    links: bool,
    as_json: bool,
):
    """
    Filter a listing file.

    Unknown range, prefecture or venue-type values fall back to the
    defaults (upcoming, all prefectures, all venue types).
    """
    settings = ctx.obj["settings"]
    logger = get_logger(__name__)

    try:
        orchestrator = FilterOrchestrator.from_settings(settings)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    request = FilterRequest.from_params(
        {"range": range_, "prefecture": prefecture, "venueType": venue_type},
        default_range=settings.default_range,
    )
    events = load_events(events_file)
    annotated = orchestrator.annotate(events, request, today=_as_date(today))

    if as_json:
        payload = []
        for event, badge in annotated:
            item = event.to_dict()
            item["venue_type"] = badge.value
            if links:
                item["calendar_url"] = google_calendar_url(event)
            payload.append(item)
        click.echo(json.dumps(payload, ensure_ascii=False, indent=2))
        return

    range_label = request.range.value if isinstance(request.range, RangeToken) else request.range
    click.echo(
        f"\nRange: {range_label}  Prefecture: {request.prefecture}  "
        f"Venue type: {request.venue_type.value}"
    )
    click.echo("-" * 70)
    for event, badge in annotated:
        badge_text = click.style(f"{badge.value:<11}", fg=BADGE_COLORS[badge])
        click.echo(
            f"{event.start_date:%Y-%m-%d} - {event.end_date:%Y-%m-%d}  {badge_text}  "
            f"{event.title} @ {event.venue} ({event.prefecture})"
        )
        if links:
            click.echo(f"    {google_calendar_url(event)}")
    click.echo("-" * 70)
    click.echo(f"Total: {len(annotated)} of {len(events)} events")


@cli.command()
@click.argument("venue")
@click.option("--title", default=None, help="Exhibition title")
@click.option("--host", default=None, help="Organizer name")
@click.pass_context
def classify(ctx, venue: str, title: str | None, host: str | None):
    """Explain how a venue (and optional title/host) is classified."""
    settings = ctx.obj["settings"]

    try:
        classifier = VenueClassifier.from_file(settings.aliases_file)
    except ConfigurationError as e:
        click.echo(click.style(f"Error: {e}", fg="red"), err=True)
        sys.exit(1)

    result = classifier.explain(venue, title, host)

    click.echo(f"  Venue:          {venue}")
    click.echo(f"  Normalized:     {result.normalized_venue}")
    if title or host:
        click.echo(f"  Title + host:   {result.normalized_exhibition}")
    click.echo(f"  Venue cluster:  {result.venue_cluster or '-'}")
    click.echo(f"  Event cluster:  {result.exhibition_cluster or '-'}")
    click.echo(
        "  Classification: "
        + click.style(result.venue_type.value, fg=BADGE_COLORS[result.venue_type], bold=True)
    )


@cli.command()
@click.argument("start", type=click.DateTime(formats=DATE_FORMATS))
@click.argument("end", type=click.DateTime(formats=DATE_FORMATS))
@click.option("--today", "-t", type=click.DateTime(formats=DATE_FORMATS), default=None, help="Reference date (default: today)")
@click.pass_context
def buckets(ctx, start: datetime, end: datetime, today: datetime | None):
    """Show the range buckets of an exhibition period."""
    settings = ctx.obj["settings"]

    if end < start:
        raise click.BadParameter("END must not be before START", param_hint="END")

    window = RangeWindow.for_day(_as_date(today) or settings.today())
    matched = window.classify(start.date(), end.date())

    click.echo(f"  Today: {window.today:%Y-%m-%d}")
    click.echo(f"  Week:  {window.week_start:%Y-%m-%d} - {window.week_end:%Y-%m-%d}")
    click.echo(f"  Month: {window.month_start:%Y-%m-%d} - {window.month_end:%Y-%m-%d}")
    for token in RangeToken:
        mark = click.style("✓", fg="green") if token in matched else click.style("✗", fg="red")
        click.echo(f"    {mark} {token.value}")


@cli.command()
@click.argument("events_file", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def validate(ctx, events_file: Path):
    """
    Validate submission records.

    Exits with status 1 when at least one record is invalid.
    """
    settings = ctx.obj["settings"]
    validator = EventValidator(settings.validation.announce_domains)

    records = load_records(events_file)
    invalid = 0
    for i, record in enumerate(records, start=1):
        if not isinstance(record, dict):
            invalid += 1
            click.echo(click.style(f"  ✗ #{i}: not a mapping", fg="red"))
            continue
        result = validator.validate(record)
        label = record.get("title") or f"#{i}"
        if result.valid:
            click.echo(click.style(f"  ✓ {label}", fg="green"))
            continue
        invalid += 1
        click.echo(click.style(f"  ✗ {label}", fg="red"))
        for issue in result.issues:
            click.echo(f"      {issue.field}: {issue.message}")

    click.echo(f"\n{len(records) - invalid} valid, {invalid} invalid")
    if invalid:
        sys.exit(1)


@cli.command("check-aliases")
@click.option(
    "--aliases",
    "-a",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Alias file (default: from config, else bundled data)",
)
@click.pass_context
def check_aliases(ctx, aliases: Path | None):
    """Load and schema-validate an alias file."""
    settings = ctx.obj["settings"]

    try:
        tables = load_alias_tables(aliases or settings.aliases_file)
    except AliasConfigError as e:
        click.echo(click.style(f"  ✗ {e}", fg="red"), err=True)
        sys.exit(1)

    click.echo(click.style(f"  ✓ Alias tables v{tables.version} are valid", fg="green"))
    click.echo(f"    Venue clusters:      {len(tables.venues)}")
    click.echo(f"    Exhibition clusters: {len(tables.exhibitions)}")
    click.echo(f"    Corrections:         {len(tables.corrections)}")


if __name__ == "__main__":
    cli()
