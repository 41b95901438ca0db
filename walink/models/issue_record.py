from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""IssueRecord model for the JSON Lines issue log.

row=-1 marks a source-level issue where no specific row applies (unreadable
file, missing header columns).
"""

__all__ = [
    "IssueRecord",
]


@dataclass(frozen=True)
class IssueRecord:
    """Structured issue record.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        source: input name the issue belongs to
        row: 1-based row number, -1 for source-level issues
        issue_type: classification in UPPER_SNAKE_CASE (INVALID_PHONE, ...)
        message: human readable description
    """
    timestamp: str
    source: str
    row: int
    issue_type: str
    message: str

    @staticmethod
    def create(source: str, row: int, issue_type: str, message: str) -> IssueRecord:
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return IssueRecord(
            timestamp=ts,
            source=source,
            row=row,
            issue_type=issue_type,
            message=message,
        )

    def to_json_line(self) -> str:
        return json.dumps(asdict(self), ensure_ascii=False)
