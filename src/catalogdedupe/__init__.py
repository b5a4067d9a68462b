"""Fuzzy duplicate detection for catalog entries.

This package provides:
- Data models (catalogdedupe.models) — catalog and normalized items
- Normalization (catalogdedupe.normalize) — title/author folding
- Similarity (catalogdedupe.similarity) — string metrics and Soundex
- Series (catalogdedupe.series) — volume marker detection and guard
- Scoring (catalogdedupe.scoring) — weighted pair scores and tiers
- Candidates (catalogdedupe.candidates) — bucketing strategies
- Clustering (catalogdedupe.clustering) — union-find duplicate groups
- Engine (catalogdedupe.engine) — configuration and run orchestration
- Report (catalogdedupe.report) — report models and serialization
- Audit (catalogdedupe.audit) — JSONL event logging
- CLI (catalogdedupe.cli) — command-line interface
- Public API (catalogdedupe.api) — file-level convenience functions
"""

__version__ = "0.3.0"
__license__ = "MIT"

from catalogdedupe.api import CatalogLoadError, detect_file, load_catalog, write_jsonl
from catalogdedupe.engine import DetectionConfig, detect_duplicates, load_config
from catalogdedupe.models import CatalogItem, InvariantViolationError, NormalizedItem
from catalogdedupe.normalize import normalize_item
from catalogdedupe.report import DetectionReport, write_report
from catalogdedupe.scoring import PairScore, Tier, score_pair

__all__ = [
    "__version__",
    "__license__",
    "CatalogItem",
    "CatalogLoadError",
    "DetectionConfig",
    "DetectionReport",
    "InvariantViolationError",
    "NormalizedItem",
    "PairScore",
    "Tier",
    "detect_duplicates",
    "detect_file",
    "load_catalog",
    "load_config",
    "normalize_item",
    "score_pair",
    "write_jsonl",
    "write_report",
]
