"""Configuration loading for the gallery board engine."""

import os
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .logger import DEFAULT_BACKUP_COUNT, DEFAULT_LOG_LEVEL, DEFAULT_MAX_BYTES, get_logger
from .models.tokens import ALL_TIME, RangeToken

logger = get_logger(__name__)

ENV_PREFIX = "GALLERYBOARD"

DEFAULT_TIMEZONE = "Asia/Tokyo"

# Hosts accepted for announce URLs (subdomains included)
DEFAULT_ANNOUNCE_DOMAINS = [
    "x.com",
    "twitter.com",
    "instagram.com",
    "threads.net",
    "facebook.com",
    "note.com",
]


class ConfigurationError(Exception):
    """Raised when configuration is invalid."""

    pass


@dataclass
class LoggingSettings:
    """Logging configuration, passed straight to ``setup_logging``."""

    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str | None = None
    log_format: str = "text"
    max_file_size: int = DEFAULT_MAX_BYTES
    backup_count: int = DEFAULT_BACKUP_COUNT


@dataclass
class ValidationSettings:
    """Submission validation configuration."""

    announce_domains: list[str] = field(
        default_factory=lambda: list(DEFAULT_ANNOUNCE_DOMAINS)
    )


@dataclass
class Settings:
    """
    Top-level settings.

    ``timezone`` decides which calendar day counts as "today" when the
    caller does not supply one. ``aliases_file`` is resolved relative to
    the configuration file; ``None`` means the bundled alias data.
    """

    timezone: str = DEFAULT_TIMEZONE
    default_range: str = "upcoming"
    aliases_file: Path | None = None
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    validation: ValidationSettings = field(default_factory=ValidationSettings)

    def __post_init__(self):
        """Apply environment variable overrides."""
        tz_override = os.environ.get(f"{ENV_PREFIX}_TIMEZONE")
        if tz_override:
            logger.debug(f"Overriding timezone from environment: {tz_override}")
            self.timezone = tz_override

        aliases_override = os.environ.get(f"{ENV_PREFIX}_ALIASES_FILE")
        if aliases_override:
            logger.debug(f"Overriding aliases file from environment: {aliases_override}")
            self.aliases_file = Path(aliases_override)

    @property
    def tzinfo(self) -> ZoneInfo:
        try:
            return ZoneInfo(self.timezone)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone: {self.timezone}") from e

    def today(self) -> date:
        """Current calendar date in the configured timezone."""
        return datetime.now(self.tzinfo).date()


def load_settings(config_path: Path) -> Settings:
    """
    Load settings from a YAML file.

    Args:
        config_path: Path to config.yaml

    Returns:
        Settings; defaults when the file does not exist

    Raises:
        ConfigurationError: If the YAML is invalid or a value has the wrong shape
    """
    config_path = Path(config_path)
    if not config_path.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return Settings()

    logger.debug(f"Loading settings from {config_path}")

    try:
        with open(config_path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config: {e}") from e

    if not raw:
        logger.warning("Config file is empty, using defaults")
        return Settings()

    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config root must be a mapping, got {type(raw).__name__}")

    logging_raw = raw.get("logging") or {}
    logging_settings = LoggingSettings(
        log_level=logging_raw.get("log_level", DEFAULT_LOG_LEVEL),
        log_file=logging_raw.get("log_file"),
        log_format=logging_raw.get("log_format", "text"),
        max_file_size=logging_raw.get("max_file_size", DEFAULT_MAX_BYTES),
        backup_count=logging_raw.get("backup_count", DEFAULT_BACKUP_COUNT),
    )

    validation_raw = raw.get("validation") or {}
    domains = validation_raw.get("announce_domains", DEFAULT_ANNOUNCE_DOMAINS)
    if not isinstance(domains, list):
        raise ConfigurationError("validation.announce_domains must be a list")

    default_range = raw.get("default_range", RangeToken.UPCOMING.value)
    valid_ranges = {t.value for t in RangeToken} | {ALL_TIME}
    if default_range not in valid_ranges:
        raise ConfigurationError(
            f"default_range must be one of {sorted(valid_ranges)}, got {default_range!r}"
        )

    aliases_file = raw.get("aliases_file")

    settings = Settings(
        timezone=raw.get("timezone", DEFAULT_TIMEZONE),
        default_range=default_range,
        aliases_file=config_path.parent / aliases_file if aliases_file else None,
        logging=logging_settings,
        validation=ValidationSettings(announce_domains=[d.lower() for d in domains]),
    )

    # Fail early on a bad timezone rather than on the first query
    settings.tzinfo

    return settings
