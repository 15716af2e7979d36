from __future__ import annotations

import pytest

from roster_ingest.models.roster import GroupRecord, Member, NormalizedRoster, RosterEditError
from roster_ingest.models.validation_warning import WarningKind


@pytest.fixture()
def roster() -> NormalizedRoster:
    return NormalizedRoster(
        groups=[
            GroupRecord("1", [Member("R1", "Alice"), Member("R2", "Bob")], title="Library App", supervisor="Dr. Rao"),
            GroupRecord("2", [Member("R3", "Cara"), Member("R4", "Dev")]),
        ]
    )


def test_editable_copy_is_independent(roster):
    copy = roster.editable_copy()
    copy.rename_member("1", "R1", "Alicia")
    assert roster.groups[0].members[0].display_name == "Alice"
    assert copy.groups[0].members[0].display_name == "Alicia"


def test_rename_member(roster):
    assert roster.rename_member("1", "R2", "  Bobby ") == []
    assert roster.groups[0].members[1] == Member("R2", "Bobby")


def test_rename_member_rejects_duplicate_name(roster):
    with pytest.raises(RosterEditError, match="already has a member named 'Alice'"):
        roster.rename_member("1", "R2", "Alice")


def test_rename_unknown_member_or_group(roster):
    with pytest.raises(RosterEditError, match="no member with id 'R9'"):
        roster.rename_member("1", "R9", "X")
    with pytest.raises(RosterEditError, match="unknown group"):
        roster.rename_member("7", "R1", "X")


def test_add_member_appends_placeholder_and_warns_size(roster):
    warnings = roster.add_member("2")
    assert roster.groups[1].members[-1] == Member("", "", placeholder=True)
    # majority is now a tie between 2 and 3 -> 2, so group 2 deviates
    assert [w.kind for w in warnings] == [WarningKind.INCONSISTENT_GROUP_SIZE]
    assert warnings[0].affected_keys == ("2",)


def test_multiple_placeholders_are_allowed(roster):
    roster.add_member("1")
    roster.add_member("1")
    assert [m.placeholder for m in roster.groups[0].members] == [False, False, True, True]


def test_update_member_fills_placeholder(roster):
    roster.add_member("2")
    roster.update_member("2", 2, member_id="R5", display_name="Eve")
    assert roster.groups[1].members[2] == Member("R5", "Eve", placeholder=True)


def test_update_member_rejects_existing_id(roster):
    roster.add_member("2")
    with pytest.raises(RosterEditError, match="id 'R3'"):
        roster.update_member("2", 2, member_id="R3")


def test_update_member_index_out_of_range(roster):
    with pytest.raises(RosterEditError, match="no member at index 5"):
        roster.update_member("1", 5, display_name="X")


def test_remove_member_can_empty_a_group(roster):
    roster.remove_member("1", "R1")
    warnings = roster.remove_member("1", "R2")
    assert roster.groups[0].members == []
    assert [w.kind for w in warnings] == [WarningKind.EMPTY_GROUP]


def test_set_title_and_supervisor_blank_falls_back_to_sentinel(roster):
    roster.set_title("1", "  Smart Library ")
    roster.set_supervisor("1", "")
    assert roster.groups[0].title == "Smart Library"
    assert roster.groups[0].supervisor == "unassigned"


def test_edits_do_not_touch_roster_warnings_until_revalidate(roster):
    roster.remove_member("2", "R4")
    assert roster.warnings == []
    warnings = roster.revalidate()
    assert [w.kind for w in warnings] == [WarningKind.INCONSISTENT_GROUP_SIZE]
    assert roster.warnings == warnings


def test_revalidate_keeps_missing_column_warnings():
    roster = NormalizedRoster(groups=[GroupRecord("1", [Member("R1", "A")])], unresolved_fields=("title",))
    assert [w.kind for w in roster.revalidate()] == [WarningKind.MISSING_REQUIRED_COLUMN]


def test_to_dict_shape(roster):
    data = roster.to_dict()
    assert data["groups"][0] == {
        "key": "1",
        "title": "Library App",
        "supervisor": "Dr. Rao",
        "members": [{"id": "R1", "name": "Alice"}, {"id": "R2", "name": "Bob"}],
    }
    assert data["warnings"] == []
