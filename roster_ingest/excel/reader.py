from __future__ import annotations

import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

"""Tabular file reader: uploaded roster file -> RawRows.

First sheet (Excel) or the whole file (CSV); the first row is the header and
every following row becomes a {column: cell} dict. Rows whose cells are all
blank are dropped. NaN cells become None; everything else is passed through
as pandas read it (the pipeline normalizes cells to strings itself).

CSV is read as text so that roll numbers like "007" keep their zeros.
"""

__all__ = [
    "SUPPORTED_SUFFIXES",
    "TableData",
    "TableReadError",
    "read_table",
    "rows_from_frame",
]

SUPPORTED_SUFFIXES = (".xlsx", ".csv")


class TableReadError(Exception):
    """Raised when an uploaded file cannot be read into rows."""


@dataclass
class TableData:
    source: str
    columns: list[str]
    rows: list[dict[str, Any]]


def _na_options(keep_na_strings: Iterable[str] | None) -> dict[str, Any]:
    # pandas 既定の NaN 文字列集合から keep_na_strings を除外 (例: 'NA' という氏名の頭文字)
    if not keep_na_strings:
        return {"keep_default_na": True, "na_values": None}
    import pandas._libs.parsers as parsers

    custom_na = parsers.STR_NA_VALUES - set(keep_na_strings)
    return {"keep_default_na": False, "na_values": list(custom_na)}


def _header_names(values: list[Any]) -> list[str]:
    """Stringify header cells; blank headers get a placeholder, duplicates a suffix."""
    names: list[str] = []
    seen: dict[str, int] = {}
    for i, value in enumerate(values):
        name = "" if pd.isna(value) else str(value).strip()
        if not name:
            name = f"Unnamed: {i}"
        if name in seen:
            seen[name] += 1
            name = f"{name}.{seen[name]}"
        else:
            seen[name] = 0
        names.append(name)
    return names


def rows_from_frame(df: pd.DataFrame, source: str = "<frame>") -> TableData:
    """Convert a header-less raw DataFrame (row 0 = header) into TableData."""
    if df.shape[0] == 0:
        return TableData(source=source, columns=[], rows=[])
    columns = _header_names(df.iloc[0].tolist())
    rows: list[dict[str, Any]] = []
    for _, raw in df.iloc[1:].iterrows():
        if raw.isna().all():
            continue
        rows.append({col: (None if pd.isna(val) else val) for col, val in zip(columns, raw.tolist(), strict=False)})
    return TableData(source=source, columns=columns, rows=rows)


def read_table(path: Path, keep_na_strings: Iterable[str] | None = None) -> TableData:
    """Read an uploaded roster file.

    Parameters
    ----------
    path: .xlsx / .csv file
    keep_na_strings: strings that must NOT be turned into NaN (e.g. ['NA'])
    """
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise TableReadError(f"unsupported file type '{suffix}': {path.name}")
    na = _na_options(keep_na_strings)
    try:
        if suffix == ".csv":
            df = pd.read_csv(path, header=None, dtype=str, skip_blank_lines=True, **na)
        else:
            df = pd.read_excel(path, sheet_name=0, header=None, **na)
    except pd.errors.EmptyDataError:
        return TableData(source=path.name, columns=[], rows=[])
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise TableReadError(f"cannot read {path.name}: {e}") from e
    return rows_from_frame(df, source=path.name)
