from __future__ import annotations

from collections.abc import Iterable, Sequence
from pathlib import Path

import pandas as pd

from ..models.fields import EXPORT_COLUMNS, REQUIRED_COLUMNS
from ..models.output_record import ClassificationResult, OutputRecord
from ..sheets.reader import TEMPLATE_ROWS

"""CSV exports of the classified buckets."""

__all__ = [
    "BUCKET_FILES",
    "write_bucket_csv",
    "write_result_csvs",
    "write_links_txt",
    "write_template_csv",
]

# bucket attribute -> export file name
BUCKET_FILES: dict[str, str] = {
    "usable": "whatsapp_links.csv",
    "missing_link": "missing_jd_links.csv",
    "invalid_phone": "invalid_phone_rows.csv",
}


def write_bucket_csv(records: Iterable[OutputRecord], path: Path) -> Path:
    df = pd.DataFrame([r.to_export_dict() for r in records], columns=list(EXPORT_COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    return path


def write_result_csvs(result: ClassificationResult, out_dir: Path) -> dict[str, Path]:
    """Write one CSV per non-empty bucket; returns bucket -> written path.

    The file of an empty bucket is removed so a previous run into the same
    directory leaves nothing stale behind.
    """
    written: dict[str, Path] = {}
    for bucket, file_name in BUCKET_FILES.items():
        records: Sequence[OutputRecord] = getattr(result, bucket)
        if not records:
            (out_dir / file_name).unlink(missing_ok=True)
            continue
        written[bucket] = write_bucket_csv(records, out_dir / file_name)
    return written


def write_links_txt(records: Iterable[OutputRecord], path: Path) -> int:
    """Write every non-empty deep link, one per line. Returns the count."""
    links = [r.message_link for r in records if r.message_link]
    if not links:
        path.unlink(missing_ok=True)
        return 0
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text("\n".join(links) + "\n", encoding="utf-8")
    return len(links)


def write_template_csv(path: Path) -> Path:
    """Write the candidate template (required headers + one example row)."""
    df = pd.DataFrame(TEMPLATE_ROWS, columns=list(REQUIRED_COLUMNS))
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False, encoding="utf-8")
    return path
