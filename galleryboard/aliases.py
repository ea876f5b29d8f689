"""Alias tables for venue and exhibition matching.

Loads ``data/aliases.yaml`` (or a replacement file), validates it against
``data/aliases.schema.json`` and builds an immutable :class:`AliasTables`.
Aliases are normalized once at load time; the tables are never mutated
afterwards and can be shared freely between callers.
"""

import json
import re
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

import jsonschema
import yaml

from .config import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

DATA_DIR = Path(__file__).parent / "data"
DEFAULT_ALIASES_PATH = DATA_DIR / "aliases.yaml"
ALIASES_SCHEMA_PATH = DATA_DIR / "aliases.schema.json"

# \s also matches the full-width space (U+3000)
_WHITESPACE_RE = re.compile(r"\s+")


class AliasConfigError(ConfigurationError):
    """Raised when an alias file is missing, malformed or fails the schema."""

    pass


@dataclass(frozen=True)
class Correction:
    """A known-misspelling replacement applied during normalization."""

    pattern: str
    replacement: str
    ignore_case: bool = False
    _regex: re.Pattern = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        flags = re.IGNORECASE if self.ignore_case else 0
        object.__setattr__(self, "_regex", re.compile(re.escape(self.pattern), flags))

    def apply(self, text: str) -> str:
        return self._regex.sub(self.replacement, text)


def normalize_text(text: str | None, corrections: tuple[Correction, ...] = ()) -> str:
    """
    Normalize text for alias comparison.

    Removes every whitespace character (including the full-width space),
    applies the misspelling corrections in order, then lower-cases.

    Args:
        text: Raw venue/title/host text, may be None
        corrections: Replacement table

    Returns:
        Normalized text ("" for empty input)
    """
    if not text:
        return ""
    text = _WHITESPACE_RE.sub("", text)
    for correction in corrections:
        text = correction.apply(text)
    return text.lower()


@dataclass(frozen=True)
class AliasCluster:
    """Text variants that all name the same venue, brand or programme."""

    name: str
    aliases: tuple[str, ...]
    normalized: tuple[str, ...] = ()

    def __post_init__(self):
        if len(self.normalized) != len(self.aliases):
            raise ValueError(
                f"Cluster {self.name!r}: aliases and normalized forms differ in length"
            )

    def match(self, normalized_text: str) -> str | None:
        """
        Return the raw alias that matches ``normalized_text``, if any.

        Containment is checked in both directions so that partial official
        names ("ニコンサロン銀座" vs "ニコンサロン") still match.
        """
        if not normalized_text:
            return None
        for raw, alias in zip(self.aliases, self.normalized):
            if alias and (alias in normalized_text or normalized_text in alias):
                return raw
        return None


@dataclass(frozen=True)
class AliasTables:
    """Immutable set of correction, venue and exhibition tables."""

    corrections: tuple[Correction, ...] = ()
    venues: tuple[AliasCluster, ...] = ()
    exhibitions: tuple[AliasCluster, ...] = ()
    version: str = "1.0"

    def normalize(self, text: str | None) -> str:
        return normalize_text(text, self.corrections)

    def cluster(self, name: str, aliases) -> AliasCluster:
        """Build a cluster whose aliases are normalized with these corrections."""
        raw = tuple(aliases)
        return AliasCluster(
            name=name,
            aliases=raw,
            normalized=tuple(self.normalize(a) for a in raw),
        )

    @classmethod
    def build(
        cls,
        venues: dict[str, list[str]],
        exhibitions: dict[str, list[str]],
        corrections: list[Correction] | None = None,
        version: str = "1.0",
    ) -> "AliasTables":
        """
        Create tables from plain name -> aliases mappings.

        Args:
            venues: Venue cluster name to alias list
            exhibitions: Exhibition/programme cluster name to alias list
            corrections: Misspelling corrections (applied to aliases too)
            version: Data version label

        Returns:
            AliasTables with every alias pre-normalized
        """
        base = cls(corrections=tuple(corrections or ()), version=version)
        return cls(
            corrections=base.corrections,
            venues=tuple(base.cluster(n, a) for n, a in venues.items()),
            exhibitions=tuple(base.cluster(n, a) for n, a in exhibitions.items()),
            version=version,
        )


def validate_alias_data(data: dict, schema_path: Path = ALIASES_SCHEMA_PATH) -> None:
    """
    Validate raw alias data against the JSON Schema.

    Raises:
        AliasConfigError: If the data does not conform
    """
    try:
        with open(schema_path, encoding="utf-8") as f:
            schema = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise AliasConfigError(f"Cannot read alias schema {schema_path}: {e}") from e

    try:
        jsonschema.validate(instance=data, schema=schema)
    except jsonschema.ValidationError as e:
        path = " -> ".join(str(p) for p in e.absolute_path) if e.absolute_path else "root"
        raise AliasConfigError(f"Alias validation failed at '{path}': {e.message}") from e


def load_alias_tables(path: Path | str | None = None) -> AliasTables:
    """
    Load alias tables from a YAML file.

    Args:
        path: Alias file; defaults to the bundled ``data/aliases.yaml``

    Returns:
        Immutable AliasTables

    Raises:
        AliasConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(path) if path else DEFAULT_ALIASES_PATH

    if not path.exists():
        raise AliasConfigError(f"Alias file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise AliasConfigError(f"Invalid YAML in alias file: {e}") from e

    if not raw:
        raise AliasConfigError(f"Alias file is empty: {path}")

    validate_alias_data(raw)

    corrections = [
        Correction(
            pattern=c["pattern"],
            replacement=c["replacement"],
            ignore_case=c.get("ignore_case", False),
        )
        for c in raw.get("corrections", [])
    ]

    tables = AliasTables.build(
        venues=_clusters_by_name(raw["venues"], "venues"),
        exhibitions=_clusters_by_name(raw["exhibitions"], "exhibitions"),
        corrections=corrections,
        version=str(raw.get("version", "1.0")),
    )

    logger.info(
        f"Loaded alias tables v{tables.version} from {path.name}: "
        f"{len(tables.venues)} venue clusters, "
        f"{len(tables.exhibitions)} exhibition clusters, "
        f"{len(tables.corrections)} corrections"
    )
    return tables


def _clusters_by_name(entries: list[dict], section: str) -> dict[str, list[str]]:
    """Map cluster names to aliases, rejecting names used twice in a section."""
    clusters: dict[str, list[str]] = {}
    for entry in entries:
        name = entry["name"]
        if name in clusters:
            raise AliasConfigError(f"Duplicate cluster name in {section}: '{name}'")
        clusters[name] = entry["aliases"]
    return clusters


@lru_cache(maxsize=1)
def default_alias_tables() -> AliasTables:
    """Process-wide tables from the bundled data file, loaded on first use."""
    return load_alias_tables(DEFAULT_ALIASES_PATH)
