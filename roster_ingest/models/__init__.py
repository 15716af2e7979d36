"""Domain models for the roster ingestion engine.

This package contains the data model shared by the pipeline stages
(FieldSpec, ColumnBinding, Member, GroupRecord, NormalizedRoster,
ValidationWarning) and the batch-run bookkeeping models.
"""

from .config_models import FieldOverride, IngestConfig
from .field_spec import ColumnBinding, FieldSpec
from .roster import UNASSIGNED, GroupRecord, Member, NormalizedRoster, RosterEditError
from .validation_warning import ValidationWarning, WarningKind

__all__ = [
    # Configuration models
    "FieldOverride",
    "IngestConfig",
    # Field resolution
    "ColumnBinding",
    "FieldSpec",
    # Roster
    "GroupRecord",
    "Member",
    "NormalizedRoster",
    "RosterEditError",
    "UNASSIGNED",
    "ValidationWarning",
    "WarningKind",
]
