from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

from ..models.config_models import DEFAULT_SENTINEL_ALIASES
from ..models.field_spec import FieldSpec
from ..models.roster import UNASSIGNED, NormalizedRoster
from .assembler import assemble
from .header_resolver import resolve
from .profiles import TEAM_FIELDS
from .row_grouper import group
from .validator import validate

"""Ingestion pipeline: resolve -> group -> validate -> assemble.

``ingest`` is a pure function of its arguments. No state survives between
calls, so a newer upload can simply replace an unfinished one.
"""

__all__ = [
    "collect_columns",
    "ingest",
]

logger = logging.getLogger(__name__)


def collect_columns(rows: Sequence[Mapping[str, Any]]) -> list[str]:
    """Union of row keys in first-seen order.

    Readers that drop blank cells (JSON-ish row dicts) may omit a column from
    the first row, so every row is looked at.
    """
    seen: dict[str, None] = {}
    for row in rows:
        for col in row:
            seen.setdefault(col, None)
    return list(seen)


def ingest(
    rows: Sequence[Mapping[str, Any]],
    specs: Sequence[FieldSpec] = TEAM_FIELDS,
    *,
    columns: Sequence[str] | None = None,
    sentinel: str = UNASSIGNED,
    sentinel_aliases: Sequence[str] = DEFAULT_SENTINEL_ALIASES,
) -> NormalizedRoster:
    """Normalize raw roster rows.

    Raises:
        MissingColumnsError: If a required field has no matching column.
            No partial roster is produced in that case.
    """
    if columns is None:
        columns = collect_columns(rows)
    binding = resolve(columns, specs)
    groups = group(rows, binding, sentinel=sentinel, sentinel_aliases=sentinel_aliases)
    warnings = validate(groups, binding)
    roster = assemble(groups, warnings, binding.unresolved_advisory, sentinel=sentinel)
    logger.debug(
        "ingested rows=%d groups=%d members=%d warnings=%d",
        len(rows),
        len(roster.groups),
        roster.member_count,
        len(roster.warnings),
    )
    return roster
