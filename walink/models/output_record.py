from __future__ import annotations

from dataclasses import dataclass

from .fields import CURRENT_ROLE, JD_LINK, MESSAGE_LINK, NAME, PHONE

"""OutputRecord and ClassificationResult models.

Both are created fresh on every run and never mutated afterwards.
"""

__all__ = [
    "OutputRecord",
    "ClassificationResult",
]


@dataclass(frozen=True)
class OutputRecord:
    """One classified candidate row.

    ``phone`` is the normalized phone (empty when it could not be normalized),
    ``message_link`` is empty for every record in the invalid phone bucket.
    """
    row_number: int  # 1-based position in the combined input
    name: str
    current_role: str
    phone: str
    jd_link: str
    message: str = ""
    message_link: str = ""

    def to_export_dict(self) -> dict[str, str]:
        return {
            NAME: self.name,
            CURRENT_ROLE: self.current_role,
            PHONE: self.phone,
            JD_LINK: self.jd_link,
            MESSAGE_LINK: self.message_link,
        }


@dataclass(frozen=True)
class ClassificationResult:
    """Three ordered bucket views over the classified records.

    A usable record without a JD link also appears in ``missing_link``; an
    invalid phone record without a JD link appears in both ``invalid_phone``
    and ``missing_link``.
    """
    usable: tuple[OutputRecord, ...] = ()
    missing_link: tuple[OutputRecord, ...] = ()
    invalid_phone: tuple[OutputRecord, ...] = ()
    duplicates_dropped: int = 0

    @property
    def total_rows(self) -> int:
        # missing_link overlaps the other two buckets
        return len(self.usable) + len(self.invalid_phone) + self.duplicates_dropped

    def filtered(self, query: str | None) -> ClassificationResult:
        from ..services.query import filter_records

        if not (query or "").strip():
            return self
        return ClassificationResult(
            usable=tuple(filter_records(self.usable, query)),
            missing_link=tuple(filter_records(self.missing_link, query)),
            invalid_phone=tuple(filter_records(self.invalid_phone, query)),
            duplicates_dropped=self.duplicates_dropped,
        )

    def links(self) -> list[str]:
        return [r.message_link for r in self.usable if r.message_link]

