"""Tests for audit logger, helpers and hashing utilities."""

import hashlib
import json
from collections.abc import Iterator
from pathlib import Path

import jsonschema
import pytest

from catalogdedupe.audit import AuditLogger, LogEvent, generate_run_id, get_package_version
from catalogdedupe.engine import detect_duplicates
from catalogdedupe.models import CatalogItem
from catalogdedupe.utils import (
    calculate_file_sha256,
    calculate_string_sha256,
    format_sha256,
    get_iso_timestamp,
)

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture
def logger(tmp_path: Path) -> Iterator[AuditLogger]:
    """Create a logger that auto-closes after test."""
    lg = AuditLogger(run_id="test_run", log_path=tmp_path / "events.jsonl")
    yield lg
    lg.close()


@pytest.fixture(scope="module")
def event_schema() -> dict:
    """Load log event JSON schema."""
    with (_SCHEMAS_DIR / "log_event.schema.json").open() as f:
        return json.load(f)


def _read_events(path: Path) -> list[dict]:
    """Read all JSONL events from file."""
    with path.open() as f:
        return [json.loads(line) for line in f if line.strip()]


# ---------------------------------------------------------------------------
# AuditLogger
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_logger_init_creates_file(tmp_path: Path) -> None:
    """Test logger creates parent directories and the log file."""
    with AuditLogger(run_id="r", log_path=tmp_path / "logs" / "events.jsonl") as lg:
        assert lg.log_path.exists()
        assert lg.current_stage is None


@pytest.mark.unit
def test_logger_event_envelope(logger: AuditLogger) -> None:
    """Test event() writes a valid JSONL line with the full envelope."""
    logger.event("item_skipped", data={"key": "value"}, level="WARN", item_id="b1")

    (evt,) = _read_events(logger.log_path)

    assert evt["run_id"] == "test_run"
    assert evt["event"] == "item_skipped"
    assert evt["level"] == "WARN"
    assert evt["data"] == {"key": "value"}
    assert evt["item_id"] == "b1"
    assert evt["stage"] is None
    assert evt["ts"].endswith("Z")


@pytest.mark.unit
def test_logger_stage_context_inheritance(logger: AuditLogger) -> None:
    """Test stage set via set_stage propagates to events."""
    logger.stage_started("scoring", expected_items=4)
    logger.event("oversized_bucket")
    logger.event("oversized_bucket", stage="bucketing")
    logger.set_stage(None)
    logger.event("oversized_bucket")

    events = _read_events(logger.log_path)

    assert [e["stage"] for e in events] == ["scoring", "scoring", "bucketing", None]
    assert events[0]["data"] == {"expected_items": 4}


@pytest.mark.unit
@pytest.mark.parametrize(
    ("method", "kwargs", "expected_event", "expected_level"),
    [
        ("run_started", {"parameters": {"k": 1}, "items_total": 3}, "run_started", "INFO"),
        ("run_finished", {"status": "success", "duration_seconds": 1.5}, "run_finished", "INFO"),
        ("stage_started", {"stage": "normalize"}, "stage_started", "INFO"),
        (
            "stage_finished",
            {"stage": "normalize", "duration_seconds": 2.0, "counters": {"n": 5}},
            "stage_finished",
            "INFO",
        ),
        (
            "item_skipped",
            {"item_id": "x1", "reason_code": "missing_title", "message": "blank"},
            "item_skipped",
            "WARN",
        ),
        (
            "run_cancelled",
            {"buckets_processed": 1, "buckets_total": 3},
            "run_cancelled",
            "WARN",
        ),
        (
            "artifact_written",
            {"path": "report.json", "sha256": "sha256:abc", "bytes_written": 10},
            "artifact_written",
            "INFO",
        ),
        ("error", {"exception_class": "ValueError", "message": "bad"}, "error", "ERROR"),
    ],
)
def test_logger_convenience_methods(
    logger: AuditLogger,
    event_schema: dict,
    method: str,
    kwargs: dict,
    expected_event: str,
    expected_level: str,
) -> None:
    """Test all convenience methods produce schema-valid events."""
    getattr(logger, method)(**kwargs)

    (evt,) = _read_events(logger.log_path)

    assert evt["event"] == expected_event
    assert evt["level"] == expected_level
    jsonschema.validate(instance=evt, schema=event_schema)


@pytest.mark.unit
def test_logger_run_finished_optional_clusters(logger: AuditLogger) -> None:
    """Test clusters_total is only written when known."""
    logger.run_finished(status="partial", duration_seconds=0.1)
    logger.run_finished(status="success", duration_seconds=0.2, clusters_total=4)

    first, second = _read_events(logger.log_path)

    assert "clusters_total" not in first["data"]
    assert second["data"]["clusters_total"] == 4


@pytest.mark.unit
def test_logger_close_is_idempotent(logger: AuditLogger) -> None:
    """Test closing twice does not raise."""
    logger.close()
    logger.close()


@pytest.mark.unit
def test_full_run_events_match_schema(
    sample_catalog: list[CatalogItem], tmp_path: Path, event_schema: dict
) -> None:
    """Test every event of a real run validates against the schema."""
    log_path = tmp_path / "events.jsonl"
    with AuditLogger(run_id=generate_run_id(), log_path=log_path) as lg:
        detect_duplicates(sample_catalog, logger=lg)

    events = _read_events(log_path)

    assert len(events) > 10
    for evt in events:
        jsonschema.validate(instance=evt, schema=event_schema)


@pytest.mark.unit
def test_log_event_defaults() -> None:
    """Test optional envelope fields default to None."""
    evt = LogEvent(ts="t", run_id="r", level="INFO", event="run_started", data={})

    assert evt.stage is None
    assert evt.item_id is None


# ---------------------------------------------------------------------------
# Helpers and utilities
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_generate_run_id_unique() -> None:
    """Test run ids carry a timestamp and a random suffix."""
    first = generate_run_id()
    second = generate_run_id()

    assert first != second
    timestamp, suffix = first.split("__")
    assert timestamp.endswith("Z")
    assert len(suffix) == 8


@pytest.mark.unit
def test_get_package_version() -> None:
    """Test a version string is always returned."""
    assert isinstance(get_package_version(), str)
    assert get_package_version()


@pytest.mark.unit
def test_get_iso_timestamp_format() -> None:
    """Test timestamps are UTC with a Z suffix."""
    ts = get_iso_timestamp()

    assert ts.endswith("Z")
    assert "+00:00" not in ts


@pytest.mark.unit
def test_sha256_helpers(tmp_path: Path) -> None:
    """Test file and string hashes agree with hashlib."""
    path = tmp_path / "data.txt"
    path.write_bytes(b"catalog")
    digest = hashlib.sha256(b"catalog").hexdigest()

    assert calculate_string_sha256("catalog") == digest
    assert calculate_file_sha256(path) == format_sha256(digest) == f"sha256:{digest}"


@pytest.mark.unit
def test_calculate_file_sha256_missing(tmp_path: Path) -> None:
    """Test hashing a missing file raises."""
    with pytest.raises(FileNotFoundError):
        calculate_file_sha256(tmp_path / "absent")
