"""Audit logging subsystem for catalogdedupe.

Main Components
---------------
- AuditLogger: JSONL event logger
- LogEvent: structured event record
"""

from catalogdedupe.audit.helpers import generate_run_id, get_package_version
from catalogdedupe.audit.logger import AuditLogger
from catalogdedupe.audit.models import LogEvent

__all__ = [
    "AuditLogger",
    "LogEvent",
    "generate_run_id",
    "get_package_version",
]
