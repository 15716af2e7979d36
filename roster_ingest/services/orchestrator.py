from __future__ import annotations

import json
import logging
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..excel.reader import SUPPORTED_SUFFIXES, TableReadError, read_table
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..logging.init import log_roster_warnings
from ..models.config_models import IngestConfig
from ..models.field_spec import FieldSpec
from ..models.processing_result import FileStat, ProcessingResult
from ..models.roster import NormalizedRoster
from ..models.upload_file import UploadFile, UploadStatus
from .header_resolver import MissingColumnsError
from .pipeline import ingest
from .profiles import build_field_specs
from .progress import ProgressTracker
from .submission import check_submission, to_payload

"""Batch orchestration: every uploaded roster in a directory -> roster JSON.

Each file is independent. A file that cannot be read, or that lacks a
required column, is recorded in the error log and counted as failed; the run
carries on with the next file. Advisory warnings never fail a file.
"""

__all__ = [
    "ProcessingError",
    "process_all",
    "scan_roster_files",
]

logger = logging.getLogger(__name__)


class ProcessingError(Exception):
    """Fatal error that prevents the batch from running at all."""


def scan_roster_files(directory: Path) -> list[Path]:
    """Supported roster files in ``directory`` (non-recursive, sorted by name).

    Raises:
        ProcessingError: If the directory doesn't exist or can't be read
    """
    if not directory.exists():
        raise ProcessingError(f"Directory not found: {directory}")
    if not directory.is_dir():
        raise ProcessingError(f"Path is not a directory: {directory}")
    try:
        return sorted(
            p
            for p in directory.iterdir()
            # "~$" は Excel のロックファイル
            if p.is_file() and p.suffix.lower() in SUPPORTED_SUFFIXES and not p.name.startswith("~$")
        )
    except OSError as e:
        raise ProcessingError(f"Error reading directory {directory}: {e}") from e


def _output_document(upload_name: str, config: IngestConfig, roster: NormalizedRoster) -> dict[str, Any]:
    return {
        "source": upload_name,
        "profile": config.profile,
        "groups": [g.to_dict() for g in roster.groups],
        "warnings": [w.to_dict() for w in roster.warnings],
        "submission_warnings": [w.to_dict() for w in check_submission(roster)],
        "payload": to_payload(roster),
    }


def _process_single_file(
    file_path: Path,
    specs: tuple[FieldSpec, ...],
    config: IngestConfig,
    output_dir: Path,
    error_log: ErrorLogBuffer,
) -> UploadFile:
    start_time = datetime.now(UTC)

    def failed(error_type: str, message: str) -> UploadFile:
        error_log.append(ErrorRecord.create(file=file_path.name, row=-1, error_type=error_type, message=message))
        logger.error(f"{file_path.name}: {message}")
        return UploadFile(
            path=file_path,
            name=file_path.name,
            start_time=start_time,
            end_time=datetime.now(UTC),
            status=UploadStatus.FAILED,
            error=message,
        )

    try:
        table = read_table(file_path, keep_na_strings=config.keep_na_strings)
        roster = ingest(table.rows, specs, columns=table.columns, **config.ingest_options())
    except TableReadError as e:
        return failed("READ_ERROR", str(e))
    except MissingColumnsError as e:
        return failed("MISSING_REQUIRED_COLUMNS", f"{e} (columns found: {e.columns})")
    except Exception as e:
        return failed("UNEXPECTED_ERROR", str(e))

    log_roster_warnings(logger, file_path.name, roster.warnings)

    output_path = output_dir / f"{file_path.stem}.roster.json"
    try:
        output_path.write_text(
            json.dumps(_output_document(file_path.name, config, roster), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
    except OSError as e:
        return failed("WRITE_ERROR", f"cannot write {output_path}: {e}")

    logger.info(
        f"{file_path.name}: groups={len(roster.groups)} members={roster.member_count} "
        f"warnings={len(roster.warnings)} -> {output_path}"
    )
    return UploadFile(
        path=file_path,
        name=file_path.name,
        start_time=start_time,
        end_time=datetime.now(UTC),
        status=UploadStatus.SUCCESS,
        roster=roster,
        output_path=output_path,
    )


def process_all(config: IngestConfig, error_log: ErrorLogBuffer | None = None) -> ProcessingResult:
    """Ingest every roster file in the configured source directory.

    Raises:
        ProcessingError: For fatal errors that prevent processing (bad
            profile, missing source directory, unwritable output directory)
    """
    start_time = datetime.now(UTC)
    error_log = error_log if error_log is not None else ErrorLogBuffer()

    try:
        specs = build_field_specs(config.profile, config.fields)
    except KeyError as e:
        raise ProcessingError(f"Invalid configuration: {e.args[0]}") from e

    file_paths = scan_roster_files(Path(config.source_directory))

    output_dir = Path(config.output_directory)
    if file_paths:
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ProcessingError(f"Cannot create output directory {output_dir}: {e}") from e

    file_stats: list[FileStat] = []
    success_count = failed_count = 0
    total_groups = total_members = total_warnings = 0

    with ProgressTracker(len(file_paths)) as progress:
        for file_path in file_paths:
            progress.start_file(file_path)
            upload = _process_single_file(file_path, specs, config, output_dir, error_log)

            groups = members = warnings = 0
            if upload.status == UploadStatus.SUCCESS and upload.roster is not None:
                success_count += 1
                groups = len(upload.roster.groups)
                members = upload.roster.member_count
                warnings = len(upload.roster.warnings)
                total_groups += groups
                total_members += members
                total_warnings += warnings
            else:
                failed_count += 1

            progress.finish_file(groups=groups, warnings=warnings)
            file_stats.append(
                FileStat(
                    file_name=upload.name,
                    status=upload.status.value,
                    groups=groups,
                    members=members,
                    warnings=warnings,
                    elapsed_seconds=upload.elapsed_seconds,
                )
            )

    try:
        log_path = error_log.flush()
    except OSError as e:
        # エラーログ書き出し失敗で全体を失敗にはしない
        logger.warning(f"failed to write error log: {e}")
    else:
        if log_path is not None:
            logger.info(f"error log written: {log_path}")

    end_time = datetime.now(UTC)
    return ProcessingResult(
        success_files=success_count,
        failed_files=failed_count,
        total_groups=total_groups,
        total_members=total_members,
        total_warnings=total_warnings,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        file_stats=file_stats,
    )
