"""Data models for the detection report."""

from dataclasses import asdict, dataclass, field
from enum import StrEnum
from typing import Any

from catalogdedupe.clustering.models import DuplicateCluster
from catalogdedupe.scoring.models import Tier

REPORT_VERSION = "1.0"


class WarningCode(StrEnum):
    """Reason an item was excluded from comparison."""

    MISSING_TITLE = "missing_title"
    EMPTY_NORMALIZED_TITLE = "empty_normalized_title"
    DUPLICATE_ID = "duplicate_id"
    INVALID_RECORD = "invalid_record"


@dataclass(frozen=True)
class DetectionWarning:
    """A non-fatal problem with one input item.

    Attributes
    ----------
    item_id : str
        Offending item.
    code : WarningCode
        Machine-readable reason.
    message : str
        Human-readable explanation.
    """

    item_id: str
    code: WarningCode
    message: str

    def to_dict(self) -> dict[str, str]:
        """Convert to dictionary for JSON serialization."""
        return {"item_id": self.item_id, "code": self.code.value, "message": self.message}


@dataclass
class DetectionStats:
    """Run counters.

    Attributes
    ----------
    items_total : int
        Items supplied by the caller.
    items_compared : int
        Items that survived normalization.
    items_skipped : int
        Items excluded with a warning.
    buckets_total : int
        Buckets owning at least one pair.
    buckets_processed : int
        Buckets committed before completion or cancellation.
    pairs_scored : int
        Pairs scored in committed buckets.
    pairs_high_confidence : int
        Committed pairs in the HighConfidence tier.
    pairs_review : int
        Committed pairs in the Review tier.
    pairs_not_duplicate : int
        Committed pairs below the review threshold.
    series_guard_triggered : int
        Committed pairs capped by the series guard.
    clusters_total : int
        Clusters reported.
    duration_seconds : float
        Wall-clock time of the run.
    """

    items_total: int = 0
    items_compared: int = 0
    items_skipped: int = 0
    buckets_total: int = 0
    buckets_processed: int = 0
    pairs_scored: int = 0
    pairs_high_confidence: int = 0
    pairs_review: int = 0
    pairs_not_duplicate: int = 0
    series_guard_triggered: int = 0
    clusters_total: int = 0
    duration_seconds: float = 0.0

    def count_tier(self, tier: Tier) -> None:
        """Increment the counter for one scored pair of *tier*."""
        self.pairs_scored += 1
        if tier == Tier.HIGH_CONFIDENCE:
            self.pairs_high_confidence += 1
        elif tier == Tier.REVIEW:
            self.pairs_review += 1
        else:
            self.pairs_not_duplicate += 1

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["duration_seconds"] = round(self.duration_seconds, 6)
        return data


@dataclass
class DetectionReport:
    """Outcome of one detection run.

    Attributes
    ----------
    clusters : list[DuplicateCluster]
        Duplicate groups, sorted by cluster_id.
    warnings : list[DetectionWarning]
        Items excluded from comparison, in input order.
    partial : bool
        True if the run was cancelled before every bucket was committed.
    stats : DetectionStats
        Run counters.
    config : dict[str, Any]
        Effective configuration.
    """

    clusters: list[DuplicateCluster] = field(default_factory=list)
    warnings: list[DetectionWarning] = field(default_factory=list)
    partial: bool = False
    stats: DetectionStats = field(default_factory=DetectionStats)
    config: dict[str, Any] = field(default_factory=dict)

    def clusters_by_tier(self, tier: Tier) -> list[DuplicateCluster]:
        """Clusters of a single tier."""
        return [cluster for cluster in self.clusters if cluster.tier == tier]

    def to_dict(self, include_edges: bool = True) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Parameters
        ----------
        include_edges : bool, optional
            Include per-pair explanations inside clusters.

        Returns
        -------
        dict
            Dictionary representation.
        """
        return {
            "report_version": REPORT_VERSION,
            "partial": self.partial,
            "clusters": [c.to_dict(include_edges=include_edges) for c in self.clusters],
            "warnings": [w.to_dict() for w in self.warnings],
            "stats": self.stats.to_dict(),
            "config": self.config,
        }
