from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

from ..logging.issue_log import IssueLogBuffer
from ..models.fields import PHONE
from ..models.output_record import ClassificationResult
from ..models.run_result import RunResult, SourceStat, SourceStatus
from ..models.settings import Settings
from ..sheets.reader import SourceReadError, UnsupportedFileError, parse_pasted_table, read_rows
from .classifier import classify_rows
from .headers import canonicalize_rows, format_missing_columns, missing_required_columns
from .progress import ProgressTracker
from .template import unknown_placeholders

logger = logging.getLogger(__name__)

"""Run orchestration.

Coordinates one whole-pipeline run:
1. read every input (progress bar, per-input failure isolation)
2. check required columns per input and canonicalize its rows
3. classify all rows in one pass (phone dedup spans every input)
4. apply the query filter and record issues for the issue log
"""

__all__ = [
    "InputSource",
    "process_sources",
]


@dataclass(frozen=True)
class InputSource:
    """One input: a file path, pasted text, or rows decoded upstream (sample, project)."""
    name: str
    path: Path | None = None
    text: str | None = field(default=None, compare=False)
    rows: list[dict[str, Any]] | None = field(default=None, compare=False)

    @staticmethod
    def from_path(path: Path) -> InputSource:
        return InputSource(name=path.name, path=path)

    def load(self) -> list[dict[str, Any]]:
        if self.rows is not None:
            return list(self.rows)
        if self.text is not None:
            return parse_pasted_table(self.text)
        if self.path is None:
            raise SourceReadError(f"{self.name}: nothing to read")
        return read_rows(self.path)


def process_sources(
    sources: Iterable[InputSource],
    settings: Settings,
    *,
    query: str = "",
    issue_log: IssueLogBuffer | None = None,
) -> RunResult:
    """Read, canonicalize and classify every source.

    Unreadable sources are reported (SourceStat FAILED + issue record) and
    skipped; the remaining sources still run. Missing required columns are
    reported but the rows are still processed.
    """
    start_time = datetime.now(UTC)
    issue_log = issue_log if issue_log is not None else IssueLogBuffer()
    sources = list(sources)

    for placeholder in unknown_placeholders(settings.template):
        logger.warning("template placeholder %s is not recognized and will stay literal", placeholder)

    stats: list[SourceStat] = []
    raw_rows: list[dict[str, Any]] = []
    canonical_rows: list[dict[str, str]] = []
    origins: list[tuple[str, int]] = []  # combined index -> (source, row within source)

    with ProgressTracker(len(sources)) as progress:
        for source in sources:
            progress.start_source(source.name)
            try:
                rows = source.load()
            except SourceReadError as e:
                logger.error("read: %s", e)
                issue_type = "UNSUPPORTED_FILE" if isinstance(e, UnsupportedFileError) else "READ_ERROR"
                issue_log.add(source.name, -1, issue_type, str(e))
                stats.append(SourceStat(source=source.name, status=SourceStatus.FAILED, rows=0, error=str(e)))
                progress.finish_source()
                continue

            missing: list[str] = []
            if rows:
                missing = missing_required_columns(
                    rows, settings.column_mapping, check_all_rows=settings.strict_required_columns
                )
            else:
                logger.warning("%s: no data rows", source.name)
            if missing:
                message = format_missing_columns(missing)
                logger.error("%s: %s", source.name, message)
                issue_log.add(source.name, -1, "MISSING_COLUMNS", message)

            raw_rows.extend(rows)
            canonical_rows.extend(canonicalize_rows(rows, settings.column_mapping))
            origins.extend((source.name, i) for i in range(1, len(rows) + 1))
            stats.append(
                SourceStat(
                    source=source.name,
                    status=SourceStatus.SUCCESS,
                    rows=len(rows),
                    missing_columns=tuple(missing),
                )
            )
            progress.set_postfix(rows=len(canonical_rows))
            progress.finish_source(rows=len(rows))

    unfiltered = classify_rows(canonical_rows, settings)
    logger.debug(
        "classified rows=%d usable=%d missing_link=%d invalid_phone=%d duplicates=%d",
        len(canonical_rows),
        len(unfiltered.usable),
        len(unfiltered.missing_link),
        len(unfiltered.invalid_phone),
        unfiltered.duplicates_dropped,
    )

    _record_row_issues(unfiltered, canonical_rows, origins, issue_log)
    result = unfiltered.filtered(query)

    end_time = datetime.now(UTC)
    return RunResult(
        sources=stats,
        rows=canonical_rows,
        raw_rows=raw_rows,
        result=result,
        unfiltered=unfiltered,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
    )


def _record_row_issues(
    unfiltered: ClassificationResult,
    canonical_rows: list[dict[str, str]],
    origins: list[tuple[str, int]],
    issue_log: IssueLogBuffer,
) -> None:
    for record in unfiltered.invalid_phone:
        source, row = origins[record.row_number - 1]
        raw_phone = canonical_rows[record.row_number - 1].get(PHONE, "")
        issue_log.add(source, row, "INVALID_PHONE", f"could not normalize phone {raw_phone!r}")

    kept = {r.row_number for r in unfiltered.usable} | {r.row_number for r in unfiltered.invalid_phone}
    for index in range(1, len(canonical_rows) + 1):
        if index in kept:
            continue
        source, row = origins[index - 1]
        issue_log.add(source, row, "DUPLICATE_PHONE", "duplicate phone dropped (first occurrence kept)")
