from __future__ import annotations

import re
from collections.abc import Iterable, Sequence

from ..models.roster import UNASSIGNED, GroupRecord, NormalizedRoster
from ..models.validation_warning import ValidationWarning

"""Normalized roster assembly (group ordering)."""

__all__ = [
    "assemble",
    "group_sort_key",
]

_NON_DIGIT = re.compile(r"\D")


def group_sort_key(key: str) -> tuple[int, int]:
    """Numeric key with non-digits stripped; keys without digits sort last.

    "Team 10" -> 10, "T-2" -> 2, "A" -> after every numeric key.
    """
    digits = _NON_DIGIT.sub("", key)
    if not digits:
        return (1, 0)
    return (0, int(digits))


def assemble(
    groups: Iterable[GroupRecord],
    warnings: Sequence[ValidationWarning],
    unresolved_fields: Sequence[str] = (),
    *,
    sentinel: str = UNASSIGNED,
) -> NormalizedRoster:
    """Build the NormalizedRoster; sorting is stable, so ties keep first-seen order."""
    ordered = sorted(groups, key=lambda g: group_sort_key(g.key))
    return NormalizedRoster(
        groups=ordered,
        warnings=list(warnings),
        unresolved_fields=tuple(unresolved_fields),
        sentinel=sentinel,
    )
