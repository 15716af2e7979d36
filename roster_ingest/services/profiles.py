from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import replace

from ..models.config_models import FieldOverride
from ..models.field_spec import CORE_FIELDS, GROUP_KEY, MEMBER_ID, MEMBER_NAME, SUPERVISOR, TITLE, FieldSpec

"""Built-in FieldSpec profiles, one per upload flow.

Declaration order is resolution priority. Patterns are normalized substrings
(see header_resolver.normalize_column_name). ``excludes`` keeps loose
patterns like "name" or "id" from grabbing the guide/faculty columns. Excludes
are whole tokens ("studentid", not "id"): a bare "id" would also veto
"Candidate Name" or "Student Name (Provided)".
"""

__all__ = [
    "FACULTY_FIELDS",
    "PROFILES",
    "STUDENT_FIELDS",
    "TEAM_FIELDS",
    "build_field_specs",
    "get_profile",
]

logger = logging.getLogger(__name__)

_STAFF_WORDS = ("guide", "faculty", "mentor", "supervisor")

# Project team upload (team no / student / roll no / title / guide)
TEAM_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(GROUP_KEY, True, ("teamno", "groupno", "batchno", "team", "group")),
    FieldSpec(
        MEMBER_NAME,
        True,
        ("studentname", "name", "student"),
        excludes=("studentid", "rollno", "regno", *_STAFF_WORDS, "project"),
    ),
    FieldSpec(MEMBER_ID, True, ("rollno", "regno", "studentid", "roll", "id"), excludes=_STAFF_WORDS),
    FieldSpec(TITLE, False, ("projecttitle", "title", "project", "topic", "projectname"), advisory=True),
    FieldSpec(
        SUPERVISOR,
        False,
        ("guidename", "guide", "faculty", "mentor", "supervisor", "facultyname", "mentorname"),
    ),
)

# Student accounts, grouped by batch / department
STUDENT_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(GROUP_KEY, True, ("batch", "year", "department", "dept", "branch")),
    FieldSpec(MEMBER_ID, True, ("studentid", "rollno", "regno", "id"), excludes=_STAFF_WORDS),
    FieldSpec(MEMBER_NAME, True, ("studentname", "name"), excludes=_STAFF_WORDS),
    FieldSpec("email", False, ("email", "mail")),
    FieldSpec("mobile", False, ("mobile", "phone", "contact")),
)

# Faculty accounts, grouped by department
FACULTY_FIELDS: tuple[FieldSpec, ...] = (
    FieldSpec(GROUP_KEY, True, ("department", "dept", "branch")),
    FieldSpec(MEMBER_ID, True, ("facultyid", "empid", "employeeid", "staffid", "id")),
    FieldSpec(MEMBER_NAME, True, ("facultyname", "name")),
    FieldSpec("email", False, ("email", "mail")),
    FieldSpec("mobile", False, ("mobile", "phone", "contact")),
)

PROFILES: dict[str, tuple[FieldSpec, ...]] = {
    "team": TEAM_FIELDS,
    "student": STUDENT_FIELDS,
    "faculty": FACULTY_FIELDS,
}


def get_profile(name: str) -> tuple[FieldSpec, ...]:
    try:
        return PROFILES[name]
    except KeyError:
        raise KeyError(f"unknown roster profile: {name!r} (expected one of {sorted(PROFILES)})") from None


def build_field_specs(
    profile: Sequence[FieldSpec] | str,
    overrides: Mapping[str, FieldOverride] | None = None,
) -> tuple[FieldSpec, ...]:
    """Apply config overrides to a profile.

    Existing fields keep their position and only change the attributes the
    override sets; unknown names are appended as optional extra fields.
    Overrides naming a core field the profile does not have (e.g. a team
    "title" override applied to the student profile) are skipped with a
    warning.
    """
    specs = list(get_profile(profile) if isinstance(profile, str) else profile)
    if not overrides:
        return tuple(specs)

    index = {s.name: i for i, s in enumerate(specs)}
    for name, ov in overrides.items():
        changes = {
            attr: value
            for attr, value in (
                ("patterns", ov.patterns),
                ("excludes", ov.excludes),
                ("required", ov.required),
                ("advisory", ov.advisory),
            )
            if value is not None
        }
        if name in index:
            specs[index[name]] = replace(specs[index[name]], **changes)
        elif name in CORE_FIELDS:
            logger.warning(f"field override '{name}' ignored: profile has no such field")
        else:
            specs.append(
                FieldSpec(
                    name=name,
                    required=changes.get("required", False),
                    patterns=changes.get("patterns", (name.lower(),)),
                    excludes=changes.get("excludes", ()),
                    advisory=changes.get("advisory", False),
                )
            )
            index[name] = len(specs) - 1
    return tuple(specs)
