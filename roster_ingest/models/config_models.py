from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

"""Config dataclasses for the roster ingestion tool.

These are the typed form of config/roster.yml after schema validation in
roster_ingest.config.loader.
"""

DEFAULT_SENTINEL_ALIASES = ("not assigned", "to be assigned", "tba")


@dataclass(frozen=True)
class FieldOverride:
    """Per-field override from the ``fields`` section.

    Any attribute left as None keeps the profile's value. A name that does
    not exist in the profile adds a new (extra, optional) field.
    """
    name: str
    patterns: tuple[str, ...] | None = None
    excludes: tuple[str, ...] | None = None
    required: bool | None = None
    advisory: bool | None = None


@dataclass(frozen=True)
class IngestConfig:
    """Root configuration object for a batch ingestion run."""
    source_directory: str  # Directory scanned for uploaded rosters
    output_directory: str  # Normalized roster JSON is written here
    profile: str = "team"  # team | student | faculty
    sentinel: str = "unassigned"
    sentinel_aliases: tuple[str, ...] = DEFAULT_SENTINEL_ALIASES
    keep_na_strings: tuple[str, ...] = ()
    fields: dict[str, FieldOverride] = field(default_factory=dict)

    def ingest_options(self) -> dict[str, Any]:
        """Keyword arguments for services.pipeline.ingest()."""
        return {
            "sentinel": self.sentinel,
            "sentinel_aliases": self.sentinel_aliases,
        }
