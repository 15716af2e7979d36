from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Processing result models for a batch roster ingestion run.

ProcessingResult aggregates per-file outcomes into the numbers printed on the
SUMMARY line; FileStat keeps the per-file detail.
"""


@dataclass(frozen=True)
class FileStat:
    """Per-file statistics."""
    file_name: str
    status: str  # success/failed
    groups: int
    members: int
    warnings: int
    elapsed_seconds: float


@dataclass(frozen=True)
class ProcessingResult:
    """Aggregated results for one batch run."""
    success_files: int
    failed_files: int
    total_groups: int  # 成功ファイルのみ集計
    total_members: int
    total_warnings: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    file_stats: list[FileStat] | None = None

    @property
    def total_files(self) -> int:
        return self.success_files + self.failed_files
