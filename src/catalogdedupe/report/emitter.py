"""Serialization of detection reports.

Reports are written as deterministic JSON (sorted keys, UTF-8) so two
runs over the same input produce byte-identical files apart from
``duration_seconds``.
"""

import json
from pathlib import Path

from catalogdedupe.report.models import DetectionReport
from catalogdedupe.scoring.models import Tier


def write_report(report: DetectionReport, path: Path, *, include_edges: bool = True) -> Path:
    """Write the full report as JSON.

    Parameters
    ----------
    report : DetectionReport
        Report to write.
    path : Path
        Destination file (parent directories are created).
    include_edges : bool, optional
        Include per-pair explanations inside clusters.

    Returns
    -------
    Path
        The written path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        json.dump(
            report.to_dict(include_edges=include_edges),
            fh,
            ensure_ascii=False,
            sort_keys=True,
            indent=2,
        )
        fh.write("\n")
    return path


def write_clusters_jsonl(report: DetectionReport, path: Path) -> int:
    """Write one cluster per line, without edges.

    Parameters
    ----------
    report : DetectionReport
        Report whose clusters to write.
    path : Path
        Destination file.

    Returns
    -------
    int
        Number of clusters written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as fh:
        for cluster in report.clusters:
            json.dump(
                cluster.to_dict(include_edges=False),
                fh,
                ensure_ascii=False,
                sort_keys=True,
                separators=(",", ":"),
            )
            fh.write("\n")
    return len(report.clusters)


def format_summary(report: DetectionReport) -> str:
    """Human-readable multi-line summary of a report."""
    stats = report.stats
    high = len(report.clusters_by_tier(Tier.HIGH_CONFIDENCE))
    review = len(report.clusters_by_tier(Tier.REVIEW))

    lines = [
        f"Items:     {stats.items_total} total, {stats.items_compared} compared, "
        f"{stats.items_skipped} skipped",
        f"Buckets:   {stats.buckets_processed}/{stats.buckets_total} processed",
        f"Pairs:     {stats.pairs_scored} scored "
        f"({stats.pairs_high_confidence} high, {stats.pairs_review} review, "
        f"{stats.series_guard_triggered} series-guarded)",
        f"Clusters:  {stats.clusters_total} ({high} high confidence, {review} review)",
    ]
    if report.warnings:
        lines.append(f"Warnings:  {len(report.warnings)}")
    if report.partial:
        lines.append("Status:    PARTIAL (run cancelled)")
    return "\n".join(lines)
