from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from pathlib import Path

from .roster import NormalizedRoster

"""UploadFile domain model and UploadStatus enum.

An UploadFile is the processing context of one roster spreadsheet in a batch
run, tracking it from discovery until it is normalized (or has failed).
"""


class UploadStatus(Enum):
    """Status of a single upload.

    State transitions: pending → (success | failed)

    - PENDING: File discovered but not yet processed
    - SUCCESS: Roster normalized and written out (warnings allowed)
    - FAILED: Unreadable file or required columns missing
    """
    PENDING = "pending"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class UploadFile:
    path: Path                               # Full path to the uploaded file
    name: str                                # File name
    start_time: datetime | None = None       # Processing start (UTC)
    end_time: datetime | None = None         # Processing end (UTC)
    status: UploadStatus = UploadStatus.PENDING
    roster: NormalizedRoster | None = None   # Set on success
    output_path: Path | None = None          # Written roster JSON
    error: str | None = None                 # Failure reason summary

    @property
    def elapsed_seconds(self) -> float:
        if self.start_time is None or self.end_time is None:
            return 0.0
        return (self.end_time - self.start_time).total_seconds()
