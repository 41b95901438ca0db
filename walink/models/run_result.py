from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from .output_record import ClassificationResult

"""Run result models for the link generator.

RunResult aggregates what the CLI needs for the SUMMARY line and the exports:
per-source read statistics plus the (filtered) classification buckets.
"""

__all__ = [
    "SourceStatus",
    "SourceStat",
    "RunResult",
]


class SourceStatus:
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class SourceStat:
    """Per-input read statistics."""
    source: str  # file name, "<stdin>", "<sample>" or "<project>"
    status: str  # success/failed
    rows: int  # rows read from this source
    missing_columns: tuple[str, ...] = ()  # canonical keys absent from the header
    error: str | None = None  # read failure reason


@dataclass(frozen=True)
class RunResult:
    """Aggregated result of one pipeline run over all inputs."""
    sources: list[SourceStat]
    rows: list[dict[str, str]]  # canonical rows, input order
    raw_rows: list[dict[str, Any]]  # rows as read, for the project bundle
    result: ClassificationResult  # query filter already applied
    unfiltered: ClassificationResult
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float

    @property
    def failed_sources(self) -> int:
        return sum(1 for s in self.sources if s.status == SourceStatus.FAILED)

    @property
    def success_sources(self) -> int:
        return len(self.sources) - self.failed_sources

    @property
    def missing_columns(self) -> bool:
        return any(s.missing_columns for s in self.sources)
