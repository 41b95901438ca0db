from __future__ import annotations

from datetime import datetime, timezone

from walink.models.output_record import ClassificationResult, OutputRecord
from walink.models.run_result import RunResult, SourceStat, SourceStatus
from walink.services.summary import render_summary_line


def _run(elapsed: float, sources=None, unfiltered=None, result=None, rows=0) -> RunResult:
    t = datetime(2025, 1, 1, tzinfo=timezone.utc)
    unfiltered = unfiltered or ClassificationResult()
    return RunResult(
        sources=sources or [],
        rows=[{}] * rows,
        raw_rows=[],
        result=result or unfiltered,
        unfiltered=unfiltered,
        start_time=t,
        end_time=t,
        elapsed_seconds=elapsed,
    )


def _rec(n, phone="919876543210", link="https://wa.me/x"):
    return OutputRecord(row_number=n, name=f"r{n}", current_role="", phone=phone, jd_link="", message_link=link)


def test_counts_and_sources():
    a, b, c = _rec(1), _rec(2), _rec(3, phone="", link="")
    unfiltered = ClassificationResult(usable=(a, b), missing_link=(b, c), invalid_phone=(c,), duplicates_dropped=1)
    sources = [
        SourceStat(source="a.csv", status=SourceStatus.SUCCESS, rows=4),
        SourceStat(source="b.csv", status=SourceStatus.FAILED, rows=0, error="boom"),
    ]
    line = render_summary_line(_run(2.0, sources, unfiltered, result=ClassificationResult(), rows=4))
    assert line == (
        "SUMMARY sources=1/2 rows=4 usable=2 missing_link=2 invalid_phone=1 duplicates=1 elapsed_sec=2"
    )


def test_elapsed_formatting():
    assert render_summary_line(_run(0.0)).endswith("elapsed_sec=0")
    assert render_summary_line(_run(1.25)).endswith("elapsed_sec=1.25")
    assert render_summary_line(_run(0.000123)).endswith("elapsed_sec=0.000123")
    assert "e-" not in render_summary_line(_run(0.0000042))
