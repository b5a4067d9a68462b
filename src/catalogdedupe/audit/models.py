"""Data models for audit logging."""

from dataclasses import dataclass
from typing import Any

__all__ = ["LogEvent"]


@dataclass
class LogEvent:
    """Structured log event.

    Attributes
    ----------
    ts : str
        ISO8601 timestamp with microseconds (UTC).
    run_id : str
        Unique run identifier.
    level : str
        Log level ("DEBUG", "INFO", "WARN", "ERROR").
    event : str
        Event type identifier.
    data : dict[str, Any]
        Event-specific data payload.
    stage : str | None
        Current stage identifier.
    item_id : str | None
        Catalog item identifier if the event concerns a single item.
    """

    ts: str
    run_id: str
    level: str
    event: str
    data: dict[str, Any]
    stage: str | None = None
    item_id: str | None = None
