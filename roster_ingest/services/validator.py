from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence

from ..models.field_spec import ColumnBinding
from ..models.roster import GroupRecord
from ..models.validation_warning import ValidationWarning, WarningKind

"""Consistency validation over grouped rosters.

Pure and never fatal: every finding is a ValidationWarning. The intent is to
warn, not block. Roster spreadsheets are routinely imperfect and operators
fix them interactively after ingestion.

Group size: the majority size is the most frequent member count among
non-empty groups (ties go to the smaller size). Any variance warns, even a
single leftover member.
"""

__all__ = [
    "majority_size",
    "missing_column_warnings",
    "validate",
    "validate_group",
]


def majority_size(groups: Iterable[GroupRecord]) -> int | None:
    """Most frequent non-zero member count; ties broken by the smallest size."""
    counts = Counter(g.member_count for g in groups if g.member_count > 0)
    if not counts:
        return None
    return min(counts, key=lambda size: (-counts[size], size))


def missing_column_warnings(field_names: Iterable[str]) -> list[ValidationWarning]:
    return [
        ValidationWarning(
            kind=WarningKind.MISSING_REQUIRED_COLUMN,
            detail=f"no column found for optional field '{name}'; default value used for every group",
        )
        for name in field_names
    ]


def validate(groups: Sequence[GroupRecord], binding: ColumnBinding | None = None) -> list[ValidationWarning]:
    """Inspect grouped records for structural anomalies.

    Args:
        groups: Grouped records (not modified)
        binding: Header binding; when given, unresolved advisory fields warn

    Returns:
        Warnings in order: size inconsistency, empty groups, missing columns
    """
    warnings: list[ValidationWarning] = []

    non_empty = [g for g in groups if g.member_count > 0]
    sizes = sorted({g.member_count for g in non_empty})
    if len(sizes) > 1:
        majority = majority_size(non_empty)
        deviating = tuple(g.key for g in non_empty if g.member_count != majority)
        warnings.append(
            ValidationWarning(
                kind=WarningKind.INCONSISTENT_GROUP_SIZE,
                detail=(
                    f"groups have different sizes ({', '.join(str(s) for s in sizes)} members); "
                    f"majority size is {majority}"
                ),
                affected_keys=deviating,
            )
        )

    for g in groups:
        if g.member_count == 0:
            warnings.append(
                ValidationWarning(
                    kind=WarningKind.EMPTY_GROUP,
                    detail=f"group '{g.key}' has no members",
                    affected_keys=(g.key,),
                )
            )

    if binding is not None:
        warnings.extend(missing_column_warnings(binding.unresolved_advisory))
    return warnings


def validate_group(group: GroupRecord, groups: Sequence[GroupRecord]) -> list[ValidationWarning]:
    """Size check for a single group after an edit.

    Compares the group against the majority size of all non-empty groups in
    ``groups``; the full cross-group check is not re-run.
    """
    if group.member_count == 0:
        return [
            ValidationWarning(
                kind=WarningKind.EMPTY_GROUP,
                detail=f"group '{group.key}' has no members",
                affected_keys=(group.key,),
            )
        ]
    majority = majority_size(groups)
    if majority is not None and group.member_count != majority:
        return [
            ValidationWarning(
                kind=WarningKind.INCONSISTENT_GROUP_SIZE,
                detail=f"group '{group.key}' has {group.member_count} members; majority size is {majority}",
                affected_keys=(group.key,),
            )
        ]
    return []
