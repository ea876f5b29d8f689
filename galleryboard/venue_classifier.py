"""Major / independent venue classification using alias clusters."""

from dataclasses import dataclass
from pathlib import Path

from .aliases import AliasCluster, AliasTables, default_alias_tables, load_alias_tables
from .logger import get_logger
from .models.tokens import VenueType

logger = get_logger(__name__)


@dataclass(frozen=True)
class VenueClassification:
    """
    Detailed result of classifying one event.

    Holds the normalized texts that were compared and the clusters that
    matched, which is what the ``classify`` CLI command prints.
    """

    venue_type: VenueType
    normalized_venue: str
    normalized_exhibition: str
    venue_cluster: str | None = None
    venue_alias: str | None = None
    exhibition_cluster: str | None = None
    exhibition_alias: str | None = None

    @property
    def is_major(self) -> bool:
        return self.venue_type is VenueType.MAJOR

    @property
    def reason(self) -> str:
        reasons = []
        if self.venue_cluster:
            reasons.append(f"venue '{self.venue_alias}' ({self.venue_cluster})")
        if self.exhibition_cluster:
            reasons.append(
                f"exhibition '{self.exhibition_alias}' ({self.exhibition_cluster})"
            )
        if not reasons:
            return "No alias matched"
        return "Matched " + ", ".join(reasons)


class VenueClassifier:
    """
    Decide whether an exhibition is a major/corporate one or independent.

    Signals, either of which is sufficient for ``major``:
    1. The venue name matches a venue cluster (camera makers' galleries,
       photography museums).
    2. The title and host together match an exhibition cluster (recurring
       nationwide photography programmes).

    Empty or missing text never matches and never raises; anything that is
    not recognized is ``independent``.
    """

    def __init__(self, tables: AliasTables | None = None):
        """
        Initialize the classifier.

        Args:
            tables: Alias tables; defaults to the process-wide bundled tables
        """
        self.tables = tables if tables is not None else default_alias_tables()

    def normalize(self, text: str | None) -> str:
        return self.tables.normalize(text)

    def _find(
        self, normalized: str, clusters: tuple[AliasCluster, ...]
    ) -> tuple[str, str] | tuple[None, None]:
        for cluster in clusters:
            alias = cluster.match(normalized)
            if alias is not None:
                return cluster.name, alias
        return None, None

    def match_venue(self, venue_name: str | None) -> tuple[str, str] | tuple[None, None]:
        """Return ``(cluster name, alias)`` for the first matching venue cluster."""
        normalized = self.normalize(venue_name)
        cluster, alias = self._find(normalized, self.tables.venues)
        if cluster:
            logger.debug(f"Venue match: '{venue_name}' -> {cluster} via '{alias}'")
        return cluster, alias

    def match_exhibition(
        self, title: str | None, host_name: str | None
    ) -> tuple[str, str] | tuple[None, None]:
        """Return ``(cluster name, alias)`` for the first matching exhibition cluster."""
        normalized = self.normalize(_exhibition_text(title, host_name))
        cluster, alias = self._find(normalized, self.tables.exhibitions)
        if cluster:
            logger.debug(f"Exhibition match: '{title}' -> {cluster} via '{alias}'")
        return cluster, alias

    def is_major_venue(self, venue_name: str | None) -> bool:
        return self.match_venue(venue_name)[0] is not None

    def is_major_exhibition(self, title: str | None = None, host_name: str | None = None) -> bool:
        return self.match_exhibition(title, host_name)[0] is not None

    def is_major_event(
        self,
        venue_name: str | None,
        title: str | None = None,
        host_name: str | None = None,
    ) -> bool:
        return self.is_major_venue(venue_name) or self.is_major_exhibition(title, host_name)

    def classify(
        self,
        venue_name: str | None,
        title: str | None = None,
        host_name: str | None = None,
    ) -> VenueType:
        """
        Classify an exhibition.

        Args:
            venue_name: Venue name as submitted
            title: Exhibition title
            host_name: Organizer name

        Returns:
            VenueType.MAJOR or VenueType.INDEPENDENT
        """
        if self.is_major_event(venue_name, title, host_name):
            return VenueType.MAJOR
        return VenueType.INDEPENDENT

    def classify_event(self, event) -> VenueType:
        """Classify an Event model instance."""
        return self.classify(event.venue, event.title, event.host_name)

    def explain(
        self,
        venue_name: str | None,
        title: str | None = None,
        host_name: str | None = None,
    ) -> VenueClassification:
        """Classify and report which clusters and aliases were involved."""
        venue_cluster, venue_alias = self.match_venue(venue_name)
        exhibition_cluster, exhibition_alias = self.match_exhibition(title, host_name)

        major = venue_cluster is not None or exhibition_cluster is not None
        return VenueClassification(
            venue_type=VenueType.MAJOR if major else VenueType.INDEPENDENT,
            normalized_venue=self.normalize(venue_name),
            normalized_exhibition=self.normalize(_exhibition_text(title, host_name)),
            venue_cluster=venue_cluster,
            venue_alias=venue_alias,
            exhibition_cluster=exhibition_cluster,
            exhibition_alias=exhibition_alias,
        )

    @classmethod
    def from_file(cls, aliases_path: Path | str | None) -> "VenueClassifier":
        """Create a classifier from an alias file (bundled tables for ``None``)."""
        if aliases_path is None:
            return cls()
        return cls(load_alias_tables(aliases_path))


def _exhibition_text(title: str | None, host_name: str | None) -> str:
    return f"{title or ''} {host_name or ''}"
