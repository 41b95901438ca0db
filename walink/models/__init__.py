"""Domain models for the candidate link generator.

Settings, canonical field names, classified output records and run results.
"""

from .fields import EXPORT_COLUMNS, REQUIRED_COLUMNS
from .issue_record import IssueRecord
from .output_record import ClassificationResult, OutputRecord
from .run_result import RunResult, SourceStat, SourceStatus
from .settings import Settings

__all__ = [
    # Configuration
    "Settings",
    # Schema
    "REQUIRED_COLUMNS",
    "EXPORT_COLUMNS",
    # Pipeline output
    "OutputRecord",
    "ClassificationResult",
    # Run bookkeeping
    "IssueRecord",
    "RunResult",
    "SourceStat",
    "SourceStatus",
]
