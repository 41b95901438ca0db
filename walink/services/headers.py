from __future__ import annotations

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from ..models.fields import (
    CURRENT_ROLE,
    JD_LINK,
    KEY_SKILLS,
    NAME,
    PHONE,
    PROFILE_SUMMARY,
    REQUIRED_COLUMNS,
)

"""Header canonicalization.

Maps arbitrary spreadsheet headers onto the six canonical keys:

1. compact the header (lowercase, keep only a-z and 0-9)
2. look the compact form up in HEADER_ALIASES
3. unknown headers pass through verbatim

An operator-supplied column mapping (canonical key -> source header) wins over
the alias table. When two source headers resolve to the same canonical key the
later one in row order wins.
"""

__all__ = [
    "HEADER_ALIASES",
    "compact_header",
    "canonical_key_for",
    "resolve_headers",
    "canonicalize_row",
    "canonicalize_rows",
    "missing_required_columns",
    "format_missing_columns",
]

HEADER_ALIASES: dict[str, str] = {
    "name": NAME,
    "fullname": NAME,
    "candidate": NAME,
    "candidatename": NAME,

    "phone": PHONE,
    "phonenumber": PHONE,
    "mobilenumber": PHONE,
    "mobile": PHONE,
    "contact": PHONE,

    "currentrole": CURRENT_ROLE,
    "role": CURRENT_ROLE,
    "designation": CURRENT_ROLE,

    "keyskills": KEY_SKILLS,
    "skills": KEY_SKILLS,

    "profilesummary": PROFILE_SUMMARY,
    "summary": PROFILE_SUMMARY,

    "jd": JD_LINK,
    "jdlink": JD_LINK,
    "jobdescription": JD_LINK,
    "joblink": JD_LINK,
    "link": JD_LINK,
}

_NON_ALNUM = re.compile(r"[^a-z0-9]")


def compact_header(header: Any) -> str:
    return _NON_ALNUM.sub("", str(header).lower())


def canonical_key_for(header: Any) -> str:
    """Return the canonical key for ``header`` or the header itself."""
    return HEADER_ALIASES.get(compact_header(header), str(header))


def _cell_text(value: Any) -> str:
    # None / NaN -> "" ; 9876543210.0 (Excel numeric cell) -> "9876543210"
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return str(value)


def resolve_headers(
    headers: Iterable[Any], column_mapping: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Return source header -> canonical key for every header.

    Headers chosen explicitly in ``column_mapping`` resolve to their canonical
    key; the rest go through the alias table.
    """
    explicit = {str(src): key for key, src in (column_mapping or {}).items() if src}
    resolved: dict[str, str] = {}
    for header in headers:
        h = str(header)
        resolved[h] = explicit.get(h) or canonical_key_for(h)
    return resolved


def canonicalize_row(
    raw_row: Mapping[Any, Any], column_mapping: Mapping[str, str] | None = None
) -> dict[str, str]:
    """Produce a CanonicalRow from a RawRow.

    All six canonical keys are always present; non canonical headers are kept
    as extra keys. Explicitly mapped headers are applied after the alias pass
    so they win over an alias collision regardless of column order.
    """
    header_map = resolve_headers(raw_row.keys(), column_mapping)
    explicit_headers = {str(src) for src in (column_mapping or {}).values() if src}

    row: dict[str, str] = {}
    for header, value in raw_row.items():
        h = str(header)
        if h in explicit_headers:
            continue
        row[header_map[h]] = _cell_text(value)
    for header, value in raw_row.items():
        h = str(header)
        if h in explicit_headers:
            row[header_map[h]] = _cell_text(value)

    for key in REQUIRED_COLUMNS:
        if key not in row:
            row[key] = ""
    return row


def canonicalize_rows(
    raw_rows: Iterable[Mapping[Any, Any]], column_mapping: Mapping[str, str] | None = None
) -> list[dict[str, str]]:
    return [canonicalize_row(r, column_mapping) for r in raw_rows]


def missing_required_columns(
    raw_rows: list[Mapping[Any, Any]],
    column_mapping: Mapping[str, str] | None = None,
    check_all_rows: bool = False,
) -> list[str]:
    """List canonical keys that the source headers do not provide.

    Only the first row's headers are checked unless ``check_all_rows`` is set,
    in which case a key missing from any row is reported. Result keeps the
    REQUIRED_COLUMNS order. An empty input reports every column.
    """
    if not raw_rows:
        return list(REQUIRED_COLUMNS)
    rows = raw_rows if check_all_rows else raw_rows[:1]
    missing: set[str] = set()
    for raw in rows:
        present = set(resolve_headers(raw.keys(), column_mapping).values())
        missing.update(k for k in REQUIRED_COLUMNS if k not in present)
    return [k for k in REQUIRED_COLUMNS if k in missing]


def format_missing_columns(missing: Iterable[str]) -> str:
    return f"Missing required columns: {', '.join(missing)}"
