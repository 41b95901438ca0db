from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.output_record import OutputRecord

__all__ = [
    "filter_records",
]


def filter_records(records: Sequence[OutputRecord], query: str | None) -> Sequence[OutputRecord]:
    """Case-insensitive substring filter on name and current role.

    An empty (or whitespace only) query returns ``records`` itself.
    """
    q = (query or "").strip().lower()
    if not q:
        return records
    return [
        r for r in records
        if q in (r.name or "").lower() or q in (r.current_role or "").lower()
    ]
