"""Roster ingestion & team normalization engine.

Turns loosely structured roster spreadsheets into normalized team records:
header resolution, carry-forward grouping, member de-duplication and
consistency warnings, followed by an editable NormalizedRoster.
"""

from .models import FieldSpec, GroupRecord, Member, NormalizedRoster, ValidationWarning, WarningKind
from .services.header_resolver import MissingColumnsError
from .services.pipeline import ingest
from .services.profiles import FACULTY_FIELDS, STUDENT_FIELDS, TEAM_FIELDS

__version__ = "0.1.0"

__all__ = [
    "FACULTY_FIELDS",
    "FieldSpec",
    "GroupRecord",
    "Member",
    "MissingColumnsError",
    "NormalizedRoster",
    "STUDENT_FIELDS",
    "TEAM_FIELDS",
    "ValidationWarning",
    "WarningKind",
    "ingest",
]
