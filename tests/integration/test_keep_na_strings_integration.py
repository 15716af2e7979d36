"""Integration test for keep_na_strings: a member literally named 'NA'."""
from pathlib import Path

from roster_ingest.config.loader import load_config
from roster_ingest.logging.error_log import ErrorLogBuffer
from roster_ingest.models.processing_result import ProcessingResult
from roster_ingest.services.orchestrator import process_all

SHEET = [
    ["Team", "Name", "Roll"],
    [1, "NA", "R1"],
    [None, "Bob", "R2"],
    [None, "Cara", "N/A"],
]


def _run(temp_workdir: Path, make_xlsx, keep_na: str) -> ProcessingResult:
    config_file = temp_workdir / "config" / "roster.yml"
    config_file.write_text(f"source_directory: uploads\noutput_directory: out\n{keep_na}", encoding="utf-8")
    make_xlsx(temp_workdir / "uploads" / "teams.xlsx", SHEET)

    config = load_config(config_file)
    result = process_all(config, ErrorLogBuffer(temp_workdir / "logs"))
    assert result.success_files == 1
    return result


def test_keep_na_strings_preserves_member(temp_workdir: Path, make_xlsx) -> None:
    result = _run(temp_workdir, make_xlsx, "keep_na_strings: [NA]\n")
    # "N/A" is still blank, so Cara has no id and is not a member
    assert result.total_members == 2


def test_default_na_handling_drops_member(temp_workdir: Path, make_xlsx) -> None:
    result = _run(temp_workdir, make_xlsx, "")
    assert result.total_members == 1
