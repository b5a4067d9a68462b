"""Structured audit logger for JSONL event logging.

Provides append-only structured event logging to JSONL files with
a persistent file handle. The engine never logs through a global; a
logger is passed in explicitly, or nothing is logged.
"""

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from catalogdedupe.audit.helpers import get_package_version
from catalogdedupe.audit.models import LogEvent
from catalogdedupe.utils.timestamps import get_iso_timestamp

__all__ = ["AuditLogger"]


class AuditLogger:
    """JSONL audit logger with persistent file handle.

    Writes structured log events to a JSONL file (one JSON object per line).
    Events are append-only and flushed after each write.

    Attributes
    ----------
    run_id : str
        Unique run identifier.
    log_path : Path
        Path to JSONL log file.
    current_stage : str | None
        Current stage name for context.
    """

    def __init__(self, run_id: str, log_path: Path) -> None:
        """Initialize audit logger and open file handle.

        Parameters
        ----------
        run_id : str
            Unique run identifier.
        log_path : Path
            Path to JSONL log file.
        """
        self.run_id = run_id
        self.log_path = Path(log_path)
        self.current_stage: str | None = None

        self.log_path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self.log_path.open("a", encoding="utf-8")

    def __enter__(self) -> "AuditLogger":
        """Enter context manager."""
        return self

    def __exit__(self, *args: Any) -> None:
        """Exit context manager and close file."""
        self.close()

    def close(self) -> None:
        """Flush and close the log file handle."""
        if not self._file.closed:
            self._file.flush()
            self._file.close()

    def set_stage(self, stage: str | None) -> None:
        """Set current stage context.

        Parameters
        ----------
        stage : str | None
            Stage name or None to clear.
        """
        self.current_stage = stage

    def event(
        self,
        event_type: str,
        data: dict[str, Any] | None = None,
        level: str = "INFO",
        stage: str | None = None,
        item_id: str | None = None,
    ) -> None:
        """Write structured event to log.

        Parameters
        ----------
        event_type : str
            Event type identifier (e.g., "stage_started").
        data : dict[str, Any] | None, optional
            Event-specific data payload.
        level : str, optional
            Log level ("DEBUG", "INFO", "WARN", "ERROR").
        stage : str | None, optional
            Stage identifier, uses current_stage if not provided.
        item_id : str | None, optional
            Catalog item identifier if event is item-specific.
        """
        if data is None:
            data = {}

        if stage is None:
            stage = self.current_stage

        log_event = LogEvent(
            ts=get_iso_timestamp(),
            run_id=self.run_id,
            level=level,
            event=event_type,
            data=data,
            stage=stage,
            item_id=item_id,
        )

        self._write_event(log_event)

    def _write_event(self, event: LogEvent) -> None:
        """Write event to JSONL file and flush."""
        json.dump(asdict(event), self._file, ensure_ascii=False, separators=(",", ":"))
        self._file.write("\n")
        self._file.flush()

    def run_started(self, parameters: dict[str, Any], items_total: int) -> None:
        """Log run_started event.

        Parameters
        ----------
        parameters : dict[str, Any]
            Effective configuration.
        items_total : int
            Number of input items.
        """
        self.event(
            "run_started",
            data={
                "parameters": parameters,
                "items_total": items_total,
                "package_version": get_package_version(),
            },
        )

    def run_finished(
        self,
        status: str,
        duration_seconds: float,
        clusters_total: int | None = None,
    ) -> None:
        """Log run_finished event.

        Parameters
        ----------
        status : str
            Run status ("success", "partial").
        duration_seconds : float
            Total execution time in seconds.
        clusters_total : int | None, optional
            Number of clusters reported.
        """
        data: dict[str, Any] = {
            "status": status,
            "duration_seconds": duration_seconds,
        }
        if clusters_total is not None:
            data["clusters_total"] = clusters_total

        self.event("run_finished", data=data, stage=None)

    def stage_started(self, stage: str, expected_items: int | None = None) -> None:
        """Log stage_started event.

        Parameters
        ----------
        stage : str
            Stage identifier.
        expected_items : int | None, optional
            Expected number of items (or buckets) to process.
        """
        self.set_stage(stage)

        data: dict[str, Any] = {}
        if expected_items is not None:
            data["expected_items"] = expected_items

        self.event("stage_started", data=data, stage=stage)

    def stage_finished(
        self,
        stage: str,
        duration_seconds: float,
        counters: dict[str, int] | None = None,
    ) -> None:
        """Log stage_finished event.

        Parameters
        ----------
        stage : str
            Stage identifier.
        duration_seconds : float
            Stage execution time in seconds.
        counters : dict[str, int] | None, optional
            Stage-specific counters.
        """
        data: dict[str, Any] = {"duration_seconds": duration_seconds}
        if counters:
            data["counters"] = counters

        self.event("stage_finished", data=data, stage=stage)

    def item_skipped(
        self,
        item_id: str,
        reason_code: str,
        message: str,
        stage: str | None = None,
    ) -> None:
        """Log item_skipped event.

        Parameters
        ----------
        item_id : str
            Catalog item identifier.
        reason_code : str
            Warning code (e.g., "missing_title").
        message : str
            Human-readable reason.
        stage : str | None, optional
            Stage identifier.
        """
        self.event(
            "item_skipped",
            data={"reason_code": reason_code, "message": message},
            level="WARN",
            stage=stage,
            item_id=item_id,
        )

    def run_cancelled(
        self,
        buckets_processed: int,
        buckets_total: int,
        stage: str | None = None,
    ) -> None:
        """Log run_cancelled event.

        Parameters
        ----------
        buckets_processed : int
            Buckets committed before cancellation was observed.
        buckets_total : int
            Buckets scheduled for the run.
        stage : str | None, optional
            Stage identifier.
        """
        self.event(
            "run_cancelled",
            data={"buckets_processed": buckets_processed, "buckets_total": buckets_total},
            level="WARN",
            stage=stage,
        )

    def artifact_written(
        self,
        path: str,
        sha256: str,
        bytes_written: int | None = None,
        record_count: int | None = None,
    ) -> None:
        """Log artifact_written event.

        Parameters
        ----------
        path : str
            Path of the written file.
        sha256 : str
            SHA256 hash of the file.
        bytes_written : int | None, optional
            File size in bytes.
        record_count : int | None, optional
            Number of records (clusters or items) in the file.
        """
        data: dict[str, Any] = {"path": path, "sha256": sha256}
        if bytes_written is not None:
            data["bytes"] = bytes_written
        if record_count is not None:
            data["record_count"] = record_count

        self.event("artifact_written", data=data, stage=None)

    def error(
        self,
        exception_class: str,
        message: str,
        stage: str | None = None,
        item_id: str | None = None,
    ) -> None:
        """Log error event.

        Parameters
        ----------
        exception_class : str
            Exception class name.
        message : str
            Error message.
        stage : str | None, optional
            Stage where error occurred.
        item_id : str | None, optional
            Item identifier if error is item-specific.
        """
        self.event(
            "error",
            data={"exception_class": exception_class, "message": message},
            stage=stage,
            level="ERROR",
            item_id=item_id,
        )
