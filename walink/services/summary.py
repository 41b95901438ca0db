from __future__ import annotations

from ..models.run_result import RunResult

"""SUMMARY line rendering.

Format::

    SUMMARY sources=<ok>/<total> rows=<n> usable=<n> missing_link=<n>
    invalid_phone=<n> duplicates=<n> elapsed_sec=<x>

Counts are taken from the unfiltered buckets; a search query only narrows
what gets exported.
"""


def _format_seconds(seconds: float) -> str:
    if seconds == 0:
        return "0"
    if seconds == int(seconds):
        return str(int(seconds))
    if seconds < 0.01:
        # avoid scientific notation for very small numbers
        return f"{seconds:.6f}".rstrip("0").rstrip(".")
    return f"{seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(result: RunResult) -> str:
    """Render the SUMMARY line for a run.

    >>> from datetime import datetime, timezone
    >>> from walink.models.output_record import ClassificationResult
    >>> t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    >>> r = RunResult(sources=[], rows=[], raw_rows=[], result=ClassificationResult(),
    ...               unfiltered=ClassificationResult(), start_time=t, end_time=t,
    ...               elapsed_seconds=0.0)
    >>> render_summary_line(r)
    'SUMMARY sources=0/0 rows=0 usable=0 missing_link=0 invalid_phone=0 duplicates=0 elapsed_sec=0'
    """
    buckets = result.unfiltered
    return (
        f"SUMMARY sources={result.success_sources}/{len(result.sources)} "
        f"rows={len(result.rows)} "
        f"usable={len(buckets.usable)} "
        f"missing_link={len(buckets.missing_link)} "
        f"invalid_phone={len(buckets.invalid_phone)} "
        f"duplicates={buckets.duplicates_dropped} "
        f"elapsed_sec={_format_seconds(result.elapsed_seconds)}"
    )
