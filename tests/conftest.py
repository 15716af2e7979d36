# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from roster_ingest.logging.init import reset_logging


@pytest.fixture(autouse=True)
def _fresh_logging():
    # handler は setup 時点の sys.stdout を掴むので、capsys と併用するため毎回作り直す
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "uploads").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("ROSTER_CONFIG", raising=False)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./uploads
output_directory: ./out
profile: team
sentinel: unassigned
keep_na_strings: [NA]
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "roster.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def write_xlsx(path: Path, rows: list[list[object]]) -> Path:
    """Write ``rows`` (first row = header) to the first sheet of an .xlsx file."""
    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        pd.DataFrame(rows).to_excel(writer, sheet_name="Sheet1", header=False, index=False)
    return path


@pytest.fixture()
def make_xlsx() -> Callable[[Path, list[list[object]]], Path]:
    return write_xlsx


@pytest.fixture()
def team_rows() -> list[dict[str, object]]:
    """A typical team upload: merged team cells, a duplicate row, a blank separator."""
    return [
        {"Team No.": 1, "Student Name": "Alice", "Roll No": "R1", "Project Title": "Library App", "Guide": "Dr. Rao"},
        {"Team No.": None, "Student Name": "Bob", "Roll No": "R2", "Project Title": None, "Guide": None},
        {"Team No.": None, "Student Name": "Bob", "Roll No": "R2", "Project Title": None, "Guide": None},
        {"Team No.": None, "Student Name": None, "Roll No": None, "Project Title": None, "Guide": None},
        {"Team No.": 2, "Student Name": "Cara", "Roll No": "R3", "Project Title": "", "Guide": "Not Assigned"},
        {"Team No.": None, "Student Name": "Dev", "Roll No": "R4", "Project Title": "Canteen Orders", "Guide": None},
    ]
