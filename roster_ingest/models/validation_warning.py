from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

"""ValidationWarning model and WarningKind enum.

Warnings are advisory: ingestion still returns a usable roster and the
operator fixes the data afterwards through the roster edit operations.
"""

__all__ = [
    "ValidationWarning",
    "WarningKind",
]


class WarningKind(Enum):
    """Warning classification.

    - INCONSISTENT_GROUP_SIZE: groups do not all have the same member count
    - MISSING_REQUIRED_COLUMN: an advisory optional column was not found (soft)
    - EMPTY_GROUP: a group ended up with zero members
    - INCOMPLETE_MEMBER: a member still lacks an id or a name (pre-submit check)
    - UNASSIGNED_SUPERVISOR: groups still carry the sentinel supervisor (pre-submit check)
    """
    INCONSISTENT_GROUP_SIZE = "InconsistentGroupSize"
    MISSING_REQUIRED_COLUMN = "MissingRequiredColumn"
    EMPTY_GROUP = "EmptyGroup"
    INCOMPLETE_MEMBER = "IncompleteMember"
    UNASSIGNED_SUPERVISOR = "UnassignedSupervisor"


@dataclass(frozen=True)
class ValidationWarning:
    kind: WarningKind
    detail: str
    affected_keys: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "kind": self.kind.value,
            "detail": self.detail,
            "affected_keys": list(self.affected_keys),
        }
