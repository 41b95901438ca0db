from __future__ import annotations

import csv
import io
from pathlib import Path
from typing import Any

import pandas as pd

from ..models.fields import CURRENT_ROLE, JD_LINK, KEY_SKILLS, NAME, PHONE, PROFILE_SUMMARY

"""Input adapters: spreadsheet / pasted text -> RawRow list.

CSV cells are read as text (``dtype=str``, ``keep_default_na=False``) so that
phone numbers keep their formatting and "NA" style strings are not turned
into NaN. Excel cells keep their native type. The first row of every input
is the header row. Rows whose cells are all blank are skipped.
"""

__all__ = [
    "SourceReadError",
    "UnsupportedFileError",
    "CSV_SUFFIXES",
    "EXCEL_SUFFIXES",
    "read_rows",
    "parse_pasted_table",
    "rows_from_frame",
    "SAMPLE_ROWS",
    "TEMPLATE_ROWS",
]

CSV_SUFFIXES = {".csv", ".tsv", ".txt"}
EXCEL_SUFFIXES = {".xlsx", ".xls"}


class SourceReadError(Exception):
    """Raised when an input cannot be decoded into rows."""


class UnsupportedFileError(SourceReadError):
    """Raised for file types other than CSV/TSV or Excel."""


SAMPLE_ROWS: list[dict[str, str]] = [
    {
        NAME: "Aarav Mehta",
        PHONE: "+91 9876543210",
        CURRENT_ROLE: "Frontend Engineer",
        KEY_SKILLS: "React, JS, UI",
        PROFILE_SUMMARY: "3+ yrs, product UI",
        JD_LINK: "ikf.co.in/careers/frontend",
    },
    {
        NAME: "Riya Sharma",
        PHONE: "9876501234",
        CURRENT_ROLE: "UX Designer",
        KEY_SKILLS: "Figma, UX",
        PROFILE_SUMMARY: "5+ yrs, SaaS",
        JD_LINK: "https://www.ikf.co.in/careers/ux-designer",
    },
]

TEMPLATE_ROWS: list[dict[str, str]] = [
    {
        NAME: "John Doe",
        PHONE: "+91 98765 43210",
        CURRENT_ROLE: "Senior Designer",
        KEY_SKILLS: "Figma, UX, UI",
        PROFILE_SUMMARY: "7+ years in product design",
        JD_LINK: "https://www.ikf.co.in/careers/example-role",
    },
]


def rows_from_frame(df: pd.DataFrame) -> list[dict[str, Any]]:
    """Convert a header-applied DataFrame into RawRows (blank rows skipped)."""
    df = df.fillna("")
    # header text is kept verbatim; aliasing ignores whitespace anyway
    columns = [str(c) for c in df.columns]
    rows: list[dict[str, Any]] = []
    for values in df.itertuples(index=False, name=None):
        if all(str(v).strip() == "" for v in values):
            continue
        rows.append(dict(zip(columns, values, strict=False)))
    return rows


def _guess_separator(header_line: str) -> str:
    if "\t" in header_line:
        return "\t"
    if ";" in header_line and "," not in header_line:
        return ";"
    return ","


def _parse_text(text: str, source: str) -> list[dict[str, Any]]:
    # only blank lines are trimmed; tabs at the edges are empty cells
    stripped = (text or "").strip("\r\n")
    if not stripped.strip():
        return []
    sep = _guess_separator(stripped.splitlines()[0])
    try:
        df = _read_csv(io.StringIO(stripped), sep=sep)
    except pd.errors.EmptyDataError:
        return []
    except (ValueError, pd.errors.ParserError, csv.Error) as e:
        raise SourceReadError(f"{source}: {e}") from e
    return rows_from_frame(df)


def _read_csv(source: Any, sep: str) -> pd.DataFrame:
    return pd.read_csv(
        source,
        sep=sep,
        dtype=str,
        keep_default_na=False,
        skip_blank_lines=True,
    )


def read_rows(path: Path) -> list[dict[str, Any]]:
    """Read a CSV/TSV or Excel (first sheet) file into RawRows.

    Raises:
        UnsupportedFileError: unknown suffix
        SourceReadError: the file exists but could not be decoded
    """
    suffix = path.suffix.lower()
    if suffix not in CSV_SUFFIXES | EXCEL_SUFFIXES:
        raise UnsupportedFileError(f"Unsupported file type: {path.name}. Use .csv or .xlsx")
    if not path.exists():
        raise SourceReadError(f"file not found: {path}")
    if suffix in CSV_SUFFIXES:
        try:
            text = path.read_text(encoding="utf-8-sig")
        except (OSError, UnicodeDecodeError) as e:
            raise SourceReadError(f"{path.name}: {e}") from e
        return _parse_text(text, path.name)
    try:
        # numeric cells stay numeric here; canonicalize_row renders 9876543210.0 as "9876543210"
        df = pd.read_excel(path, sheet_name=0, keep_default_na=False)
    except Exception as e:
        # engine errors (openpyxl / xlrd, missing engine) share no common base
        raise SourceReadError(f"{path.name}: {e}") from e
    return rows_from_frame(df)


def parse_pasted_table(text: str) -> list[dict[str, Any]]:
    """Parse pasted CSV/TSV text (header line first)."""
    return _parse_text(text, "pasted data")
