from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Mapping, Sequence
from typing import Any

from ..models.field_spec import GROUP_KEY, MEMBER_ID, MEMBER_NAME, SUPERVISOR, TITLE, ColumnBinding
from ..models.roster import UNASSIGNED, GroupRecord, Member

"""Row grouping: fold flat roster rows into GroupRecords.

Single forward pass over the rows in file order.

Carry-forward rule: a blank group-key cell means "same group as the row
above". Spreadsheets express this with merged or simply empty cells, so the
grouper keeps the last non-empty key and attributes following rows to it.
Rows seen before any key at all cannot be attributed and are skipped.

Membership rule: a row contributes a member only when both the member name
and the member id are present. A member whose id OR display name already
exists in the group is a duplicate and is dropped (first occurrence wins).

Title/supervisor: any row of the group may supply them; the last
non-sentinel value wins, even on rows that contribute no member.
"""

__all__ = [
    "cell_to_str",
    "group",
]

logger = logging.getLogger(__name__)


def cell_to_str(value: Any) -> str | None:
    """Normalize a raw cell to a stripped string, or None when absent.

    None, NaN and whitespace-only strings are absent. Integral floats lose
    their fraction (Excel hands numeric team numbers over as 1.0, 2.0, ...).
    """
    if value is None:
        return None
    if isinstance(value, float):
        if math.isnan(value):
            return None
        if value.is_integer():
            return str(int(value))
    text = str(value).strip()
    return text or None


def _cell(row: Mapping[str, Any], column: str | None) -> str | None:
    if column is None:
        return None
    return cell_to_str(row.get(column))


def _meaningful(value: str | None, sentinels: set[str]) -> str | None:
    if value is None or value.casefold() in sentinels:
        return None
    return value


def group(
    rows: Iterable[Mapping[str, Any]],
    binding: ColumnBinding,
    *,
    sentinel: str = UNASSIGNED,
    sentinel_aliases: Sequence[str] = (),
) -> list[GroupRecord]:
    """Group rows into GroupRecords in first-seen key order.

    Args:
        rows: RawRows in source order
        binding: Resolved header binding
        sentinel: Default title/supervisor for groups that never get one
        sentinel_aliases: Cell values treated like the sentinel (case-insensitive)

    Returns:
        GroupRecords in first-seen order (numeric ordering happens at assembly)
    """
    key_col = binding.column_for(GROUP_KEY)
    name_col = binding.column_for(MEMBER_NAME)
    id_col = binding.column_for(MEMBER_ID)
    title_col = binding.column_for(TITLE)
    supervisor_col = binding.column_for(SUPERVISOR)
    extra_cols = {name: binding.column_for(name) for name in binding.extra_fields}
    sentinels = {sentinel.casefold(), *(a.casefold() for a in sentinel_aliases)}

    current_key: str | None = None
    groups_by_key: dict[str, GroupRecord] = {}

    for row_number, row in enumerate(rows, start=1):
        key = _cell(row, key_col)
        if key is not None:
            current_key = key
        if current_key is None:
            logger.debug("row=%d skipped: no group key seen yet", row_number)
            continue

        record = groups_by_key.get(current_key)
        if record is None:
            record = GroupRecord(key=current_key, title=sentinel, supervisor=sentinel)
            groups_by_key[current_key] = record

        name = _cell(row, name_col)
        member_id = _cell(row, id_col)
        if name is None or member_id is None:
            logger.debug("row=%d group=%s no member (name=%r id=%r)", row_number, current_key, name, member_id)
        elif record.is_duplicate(member_id, name):
            logger.debug("row=%d group=%s duplicate member id=%r name=%r", row_number, current_key, member_id, name)
        else:
            extra = {}
            for field_name, column in extra_cols.items():
                value = _cell(row, column)
                if value is not None:
                    extra[field_name] = value
            record.members.append(Member(id=member_id, display_name=name, extra=extra))

        title = _meaningful(_cell(row, title_col), sentinels)
        if title is not None:
            record.title = title
        supervisor = _meaningful(_cell(row, supervisor_col), sentinels)
        if supervisor is not None:
            record.supervisor = supervisor

    return list(groups_by_key.values())
