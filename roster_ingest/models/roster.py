from __future__ import annotations

import copy
from dataclasses import dataclass, field, replace
from typing import Any

from .validation_warning import ValidationWarning

"""Normalized roster models: Member, GroupRecord, NormalizedRoster.

The pipeline produces a NormalizedRoster and hands it over; the editing layer
works on ``editable_copy()`` and applies the edit operations below before the
roster is serialized for submission.

Edit operations re-check only the size of the group they touched. The
cross-group consistency check is re-run explicitly via ``revalidate()``.
"""

__all__ = [
    "GroupRecord",
    "Member",
    "NormalizedRoster",
    "RosterEditError",
    "UNASSIGNED",
]

UNASSIGNED = "unassigned"


class RosterEditError(Exception):
    """Raised when an edit addresses an unknown group/member or breaks member uniqueness."""


@dataclass(frozen=True)
class Member:
    id: str
    display_name: str
    extra: dict[str, str] = field(default_factory=dict)
    placeholder: bool = False  # add_member() で追加された編集用エントリ

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"id": self.id, "name": self.display_name}
        if self.extra:
            data["extra"] = dict(self.extra)
        if self.placeholder:
            data["placeholder"] = True
        return data


@dataclass
class GroupRecord:
    key: str
    members: list[Member] = field(default_factory=list)
    title: str = UNASSIGNED
    supervisor: str = UNASSIGNED

    @property
    def member_count(self) -> int:
        return len(self.members)

    def is_duplicate(self, member_id: str, display_name: str) -> bool:
        """True if a member with the same id OR the same display name exists."""
        return any(m.id == member_id or m.display_name == display_name for m in self.members)

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "title": self.title,
            "supervisor": self.supervisor,
            "members": [m.to_dict() for m in self.members],
        }


@dataclass
class NormalizedRoster:
    groups: list[GroupRecord]
    warnings: list[ValidationWarning] = field(default_factory=list)
    unresolved_fields: tuple[str, ...] = ()  # 未解決 advisory 列 (revalidate 用)
    sentinel: str = UNASSIGNED

    @property
    def keys(self) -> list[str]:
        return [g.key for g in self.groups]

    @property
    def member_count(self) -> int:
        return sum(g.member_count for g in self.groups)

    def get_group(self, group_key: str) -> GroupRecord:
        for g in self.groups:
            if g.key == group_key:
                return g
        raise RosterEditError(f"unknown group: {group_key!r}")

    def editable_copy(self) -> NormalizedRoster:
        return copy.deepcopy(self)

    # ---- edit operations -------------------------------------------------

    def rename_member(self, group_key: str, member_id: str, new_name: str) -> list[ValidationWarning]:
        group = self.get_group(group_key)
        index = self._index_of(group, member_id)
        new_name = new_name.strip()
        self._ensure_unique(group, index, display_name=new_name)
        group.members[index] = replace(group.members[index], display_name=new_name)
        return self._check_group(group)

    def add_member(self, group_key: str) -> list[ValidationWarning]:
        group = self.get_group(group_key)
        group.members.append(Member(id="", display_name="", placeholder=True))
        return self._check_group(group)

    def update_member(
        self,
        group_key: str,
        index: int,
        *,
        member_id: str | None = None,
        display_name: str | None = None,
    ) -> list[ValidationWarning]:
        """Edit a member by position (placeholders have no usable id yet)."""
        group = self.get_group(group_key)
        if not 0 <= index < len(group.members):
            raise RosterEditError(f"group {group_key!r} has no member at index {index}")
        changes: dict[str, str] = {}
        if member_id is not None:
            changes["id"] = member_id.strip()
        if display_name is not None:
            changes["display_name"] = display_name.strip()
        self._ensure_unique(group, index, member_id=changes.get("id"), display_name=changes.get("display_name"))
        group.members[index] = replace(group.members[index], **changes)
        return self._check_group(group)

    def remove_member(self, group_key: str, member_id: str) -> list[ValidationWarning]:
        group = self.get_group(group_key)
        del group.members[self._index_of(group, member_id)]
        return self._check_group(group)

    def set_title(self, group_key: str, value: str) -> list[ValidationWarning]:
        group = self.get_group(group_key)
        group.title = value.strip() or self.sentinel
        return self._check_group(group)

    def set_supervisor(self, group_key: str, value: str) -> list[ValidationWarning]:
        group = self.get_group(group_key)
        group.supervisor = value.strip() or self.sentinel
        return self._check_group(group)

    def revalidate(self) -> list[ValidationWarning]:
        """Re-run the full cross-group check and replace ``warnings``."""
        from ..services.validator import missing_column_warnings, validate

        self.warnings = validate(self.groups) + missing_column_warnings(self.unresolved_fields)
        return self.warnings

    def to_dict(self) -> dict[str, Any]:
        return {
            "groups": [g.to_dict() for g in self.groups],
            "warnings": [w.to_dict() for w in self.warnings],
        }

    # ---- helpers ---------------------------------------------------------

    def _check_group(self, group: GroupRecord) -> list[ValidationWarning]:
        from ..services.validator import validate_group

        return validate_group(group, self.groups)

    @staticmethod
    def _index_of(group: GroupRecord, member_id: str) -> int:
        for i, m in enumerate(group.members):
            if m.id == member_id:
                return i
        raise RosterEditError(f"group {group.key!r} has no member with id {member_id!r}")

    @staticmethod
    def _ensure_unique(
        group: GroupRecord,
        index: int,
        *,
        member_id: str | None = None,
        display_name: str | None = None,
    ) -> None:
        # 空値は未入力プレースホルダなので重複判定しない
        for i, m in enumerate(group.members):
            if i == index:
                continue
            if member_id and m.id == member_id:
                raise RosterEditError(f"group {group.key!r} already has a member with id {member_id!r}")
            if display_name and m.display_name == display_name:
                raise RosterEditError(
                    f"group {group.key!r} already has a member named {display_name!r}"
                )
