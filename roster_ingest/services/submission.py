from __future__ import annotations

from typing import Any

from ..models.roster import NormalizedRoster
from ..models.validation_warning import ValidationWarning, WarningKind

"""Pre-submission checks and payload serialization.

The persistence API owns the wire schema; the payload here is the
group-keyed shape it accepts:

    {group_key: {"members": [{"id", "name"}], "title", "supervisor"}}
"""

__all__ = [
    "check_submission",
    "to_payload",
]


def check_submission(roster: NormalizedRoster) -> list[ValidationWarning]:
    """Advisory checks run before submitting an edited roster.

    - every member needs a non-empty id and name (placeholders added during
      editing often don't have them yet): one IncompleteMember per group
    - groups still on the sentinel supervisor: one UnassignedSupervisor
    """
    warnings: list[ValidationWarning] = []
    for g in roster.groups:
        incomplete = [i for i, m in enumerate(g.members) if not m.id.strip() or not m.display_name.strip()]
        if incomplete:
            positions = ", ".join(str(i + 1) for i in incomplete)
            warnings.append(
                ValidationWarning(
                    kind=WarningKind.INCOMPLETE_MEMBER,
                    detail=f"group '{g.key}' has members missing an id or name (positions {positions})",
                    affected_keys=(g.key,),
                )
            )

    unassigned = tuple(g.key for g in roster.groups if g.supervisor == roster.sentinel)
    if unassigned:
        warnings.append(
            ValidationWarning(
                kind=WarningKind.UNASSIGNED_SUPERVISOR,
                detail=f"{len(unassigned)} group(s) have no supervisor assigned",
                affected_keys=unassigned,
            )
        )
    return warnings


def to_payload(roster: NormalizedRoster) -> dict[str, Any]:
    payload: dict[str, Any] = {}
    for g in roster.groups:
        members = []
        for m in g.members:
            entry: dict[str, Any] = {"id": m.id, "name": m.display_name}
            for field_name, value in m.extra.items():
                entry.setdefault(field_name, value)
            members.append(entry)
        payload[g.key] = {
            "members": members,
            "title": g.title,
            "supervisor": g.supervisor,
        }
    return payload
