from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest

from roster_ingest.logging.error_log import ErrorLogBuffer
from roster_ingest.models.config_models import IngestConfig
from roster_ingest.services.orchestrator import ProcessingError, process_all, scan_roster_files

TEAM_SHEET = [
    ["Team No", "Student Name", "Roll No", "Guide"],
    [1, "Alice", "R1", "Dr. Rao"],
    [None, "Bob", "R2", None],
    [2, "Cara", "R3", None],
]


def _config(temp_workdir: Path, **kwargs) -> IngestConfig:
    return IngestConfig(
        source_directory=str(temp_workdir / "uploads"),
        output_directory=str(temp_workdir / "out"),
        **kwargs,
    )


def test_scan_roster_files_filters_and_sorts(tmp_path: Path):
    for name in ["b.csv", "a.xlsx", "notes.txt", "~$a.xlsx", "c.XLSX", "old.xls"]:
        (tmp_path / name).write_text("", encoding="utf-8")
    (tmp_path / "sub.xlsx").mkdir()
    assert [p.name for p in scan_roster_files(tmp_path)] == ["a.xlsx", "b.csv", "c.XLSX"]


def test_scan_roster_files_missing_directory(tmp_path: Path):
    with pytest.raises(ProcessingError, match="Directory not found"):
        scan_roster_files(tmp_path / "missing")


def test_process_all_no_files(temp_workdir: Path):
    result = process_all(_config(temp_workdir), ErrorLogBuffer(temp_workdir / "logs"))
    assert (result.success_files, result.failed_files) == (0, 0)
    assert not (temp_workdir / "out").exists()
    assert not (temp_workdir / "logs").exists()


def test_process_all_writes_roster_json(temp_workdir: Path, make_xlsx):
    make_xlsx(temp_workdir / "uploads" / "teams.xlsx", TEAM_SHEET)
    result = process_all(_config(temp_workdir), ErrorLogBuffer(temp_workdir / "logs"))

    assert (result.success_files, result.failed_files) == (1, 0)
    assert (result.total_groups, result.total_members) == (2, 3)
    # size 2 vs 1 and no title column
    assert result.total_warnings == 2
    assert result.file_stats[0].status == "success"

    doc = json.loads((temp_workdir / "out" / "teams.roster.json").read_text(encoding="utf-8"))
    assert doc["source"] == "teams.xlsx"
    assert doc["profile"] == "team"
    assert [g["key"] for g in doc["groups"]] == ["1", "2"]
    assert doc["groups"][0]["supervisor"] == "Dr. Rao"
    assert [w["kind"] for w in doc["warnings"]] == ["InconsistentGroupSize", "MissingRequiredColumn"]
    assert [w["kind"] for w in doc["submission_warnings"]] == ["UnassignedSupervisor"]
    assert doc["payload"]["2"]["members"] == [{"id": "R3", "name": "Cara"}]


def test_process_all_logs_advisory_warnings(temp_workdir: Path, make_xlsx, capsys):
    from roster_ingest.logging.init import setup_logging

    setup_logging()
    make_xlsx(temp_workdir / "uploads" / "teams.xlsx", TEAM_SHEET)
    process_all(_config(temp_workdir), ErrorLogBuffer(temp_workdir / "logs"))
    out = capsys.readouterr().out
    assert "WARN teams.xlsx: InconsistentGroupSize" in out
    assert "majority size is 1 [1]" in out
    assert "INFO teams.xlsx: groups=2 members=3 warnings=2" in out


def test_missing_columns_fails_only_that_file(temp_workdir: Path, make_xlsx):
    make_xlsx(temp_workdir / "uploads" / "a_good.xlsx", TEAM_SHEET)
    make_xlsx(temp_workdir / "uploads" / "b_bad.xlsx", [["X", "Y", "Z"], [1, 2, 3]])
    logs = temp_workdir / "logs"

    result = process_all(_config(temp_workdir), ErrorLogBuffer(logs))

    assert (result.success_files, result.failed_files) == (1, 1)
    assert [s.status for s in result.file_stats] == ["success", "failed"]
    assert not (temp_workdir / "out" / "b_bad.roster.json").exists()
    [log_file] = list(logs.glob("errors-*.log"))
    [record] = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    assert record["file"] == "b_bad.xlsx"
    assert record["row"] == -1
    assert record["error_type"] == "MISSING_REQUIRED_COLUMNS"
    assert "groupKey, memberName, memberId" in record["message"]


def test_unreadable_file_is_read_error(temp_workdir: Path):
    (temp_workdir / "uploads" / "broken.xlsx").write_bytes(b"not a workbook")
    buf = ErrorLogBuffer(temp_workdir / "logs")
    with patch.object(buf, "flush", return_value=None):
        result = process_all(_config(temp_workdir), buf)
    assert result.failed_files == 1
    assert [r.error_type for r in buf.records] == ["READ_ERROR"]


def test_unexpected_error_is_recorded(temp_workdir: Path, make_xlsx):
    make_xlsx(temp_workdir / "uploads" / "teams.xlsx", TEAM_SHEET)
    buf = ErrorLogBuffer(temp_workdir / "logs")
    with patch("roster_ingest.services.orchestrator.ingest", side_effect=RuntimeError("boom")), \
         patch.object(buf, "flush", return_value=None):
        result = process_all(_config(temp_workdir), buf)
    assert result.failed_files == 1
    [record] = buf.records
    assert (record.error_type, record.message) == ("UNEXPECTED_ERROR", "boom")


def test_profile_changes_resolution(temp_workdir: Path, make_xlsx):
    make_xlsx(
        temp_workdir / "uploads" / "faculty.xlsx",
        [["Faculty ID", "Name", "Department"], ["F1", "Dr. Rao", "CSE"], ["F2", "Dr. Iyer", None]],
    )
    result = process_all(_config(temp_workdir, profile="faculty"), ErrorLogBuffer(temp_workdir / "logs"))
    assert (result.success_files, result.total_groups, result.total_members) == (1, 1, 2)


def test_invalid_profile_is_fatal(temp_workdir: Path):
    with pytest.raises(ProcessingError, match="Invalid configuration"):
        process_all(_config(temp_workdir, profile="alumni"))
