"""Tests for report models and serialization."""

import json
from pathlib import Path
from typing import Any

import jsonschema
import pytest

from catalogdedupe.engine import detect_duplicates
from catalogdedupe.models import CatalogItem
from catalogdedupe.report import (
    REPORT_VERSION,
    DetectionReport,
    DetectionStats,
    DetectionWarning,
    WarningCode,
    format_summary,
    write_clusters_jsonl,
    write_report,
)
from catalogdedupe.scoring import Tier

_SCHEMAS_DIR = Path(__file__).parent.parent.parent / "schemas"


@pytest.fixture
def report_schema() -> dict[str, Any]:
    """Duplicate report JSON schema."""
    schema: dict[str, Any] = json.loads(
        (_SCHEMAS_DIR / "duplicate_report.schema.json").read_text(encoding="utf-8")
    )
    return schema


@pytest.fixture
def report(sample_catalog: list[CatalogItem]) -> DetectionReport:
    """Report for the shared sample catalog."""
    return detect_duplicates(sample_catalog)


@pytest.mark.unit
def test_write_report_matches_schema(
    report: DetectionReport, report_schema: dict[str, Any], tmp_path: Path
) -> None:
    """Test the written report validates against the schema."""
    path = write_report(report, tmp_path / "nested" / "report.json")

    data = json.loads(path.read_text(encoding="utf-8"))

    jsonschema.validate(instance=data, schema=report_schema)
    assert data["report_version"] == REPORT_VERSION
    assert data["clusters"][0]["edges"][0]["pair_id"] == "g1|g2"
    assert [w["code"] for w in data["warnings"]] == [
        "missing_title",
        "empty_normalized_title",
        "duplicate_id",
    ]


@pytest.mark.unit
def test_write_report_without_edges(
    report: DetectionReport, report_schema: dict[str, Any], tmp_path: Path
) -> None:
    """Test edges can be left out of the report."""
    path = write_report(report, tmp_path / "report.json", include_edges=False)

    data = json.loads(path.read_text(encoding="utf-8"))

    jsonschema.validate(instance=data, schema=report_schema)
    assert "edges" not in data["clusters"][0]


@pytest.mark.unit
def test_write_report_is_deterministic(report: DetectionReport, tmp_path: Path) -> None:
    """Test writing the same report twice gives identical bytes."""
    first = write_report(report, tmp_path / "a.json")
    second = write_report(report, tmp_path / "b.json")

    assert first.read_bytes() == second.read_bytes()


@pytest.mark.unit
def test_empty_report_matches_schema(report_schema: dict[str, Any]) -> None:
    """Test a default report is schema-valid."""
    jsonschema.validate(instance=DetectionReport().to_dict(), schema=report_schema)


@pytest.mark.unit
def test_write_clusters_jsonl(report: DetectionReport, tmp_path: Path) -> None:
    """Test one cluster per line, without edges."""
    path = tmp_path / "clusters.jsonl"

    count = write_clusters_jsonl(report, path)

    lines = path.read_text(encoding="utf-8").splitlines()
    assert count == len(lines) == 1
    cluster = json.loads(lines[0])
    assert cluster["members"] == ["g1", "g2"]
    assert cluster["representative"] == "g1"
    assert "edges" not in cluster


@pytest.mark.unit
def test_clusters_by_tier(report: DetectionReport) -> None:
    """Test filtering clusters by tier."""
    assert len(report.clusters_by_tier(Tier.HIGH_CONFIDENCE)) == 1
    assert report.clusters_by_tier(Tier.REVIEW) == []


@pytest.mark.unit
def test_stats_count_tier() -> None:
    """Test per-tier counters."""
    stats = DetectionStats()
    for tier in (Tier.HIGH_CONFIDENCE, Tier.REVIEW, Tier.REVIEW, Tier.NOT_DUPLICATE):
        stats.count_tier(tier)

    assert stats.pairs_scored == 4
    assert stats.pairs_high_confidence == 1
    assert stats.pairs_review == 2
    assert stats.pairs_not_duplicate == 1


@pytest.mark.unit
def test_warning_to_dict() -> None:
    """Test warnings serialize their code as a string."""
    warning = DetectionWarning("x1", WarningCode.MISSING_TITLE, "Title is missing or blank")

    assert warning.to_dict() == {
        "item_id": "x1",
        "code": "missing_title",
        "message": "Title is missing or blank",
    }


@pytest.mark.unit
def test_format_summary(report: DetectionReport) -> None:
    """Test the summary lists items, buckets, pairs and clusters."""
    summary = format_summary(report)

    assert "Items:     8 total, 5 compared, 3 skipped" in summary
    assert "Buckets:   2/2 processed" in summary
    assert "1 series-guarded" in summary
    assert "Clusters:  1 (1 high confidence, 0 review)" in summary
    assert "Warnings:  3" in summary
    assert "PARTIAL" not in summary


@pytest.mark.unit
def test_format_summary_partial() -> None:
    """Test a partial run is flagged."""
    assert "PARTIAL (run cancelled)" in format_summary(DetectionReport(partial=True))
