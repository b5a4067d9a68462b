"""Detection report: models and serialization."""

from catalogdedupe.report.emitter import format_summary, write_clusters_jsonl, write_report
from catalogdedupe.report.models import (
    REPORT_VERSION,
    DetectionReport,
    DetectionStats,
    DetectionWarning,
    WarningCode,
)

__all__ = [
    "REPORT_VERSION",
    "DetectionReport",
    "DetectionStats",
    "DetectionWarning",
    "WarningCode",
    "format_summary",
    "write_clusters_jsonl",
    "write_report",
]
