from __future__ import annotations

import logging
import re
from collections.abc import Sequence

from ..models.field_spec import ColumnBinding, FieldSpec

"""Header resolution: map arbitrary spreadsheet headers onto FieldSpecs.

Column names are compared in normalized form (lower-case, alphanumerics
only), so "Team No.", "team_no" and "TEAM NO" are the same column to the
resolver. FieldSpecs are resolved in declaration order; each one takes the
first still-unbound column (in source column order) that matches one of its
patterns. A column consumed by one field is never offered to a later field.
"""

__all__ = [
    "MissingColumnsError",
    "normalize_column_name",
    "resolve",
]

logger = logging.getLogger(__name__)

_NON_ALNUM = re.compile(r"[^a-z0-9]")


class MissingColumnsError(Exception):
    """Raised when a required FieldSpec matches no column (the only fatal ingestion error)."""

    def __init__(self, missing: Sequence[str], columns: Sequence[str] = ()) -> None:
        self.missing = list(missing)
        self.columns = list(columns)
        super().__init__(f"required columns missing: {', '.join(self.missing)}")


def normalize_column_name(column: object) -> str:
    return _NON_ALNUM.sub("", str(column).lower())


def resolve(columns: Sequence[str], specs: Sequence[FieldSpec]) -> ColumnBinding:
    """Bind each FieldSpec to at most one source column.

    Args:
        columns: Column names as they appear in the source, in source order
        specs: FieldSpecs in declaration (priority) order

    Returns:
        ColumnBinding with None for unresolved optional fields

    Raises:
        MissingColumnsError: If any required FieldSpec stays unresolved
    """
    unbound = [(col, normalize_column_name(col)) for col in columns]
    bound: dict[str, str | None] = {}

    for spec in specs:
        match = next((pair for pair in unbound if spec.matches(pair[1])), None)
        if match is None:
            bound[spec.name] = None
            continue
        bound[spec.name] = match[0]
        unbound.remove(match)

    binding = ColumnBinding(columns=bound, specs=tuple(specs))
    logger.debug("header binding: %s", bound)

    missing = [s.name for s in specs if s.required and bound[s.name] is None]
    if missing:
        raise MissingColumnsError(missing, columns)
    return binding
