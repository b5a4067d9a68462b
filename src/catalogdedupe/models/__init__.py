"""Shared data types for catalogdedupe.

Domain-specific types live closer to their consumers:
- Pair scores → catalogdedupe.scoring.models
- Clusters → catalogdedupe.clustering.models
- Reports and warnings → catalogdedupe.report.models
"""

from catalogdedupe.models.errors import InvariantViolationError
from catalogdedupe.models.records import (
    CatalogItem,
    NormalizedItem,
    SeriesToken,
    SourceRef,
)

__all__ = [
    "CatalogItem",
    "NormalizedItem",
    "SeriesToken",
    "SourceRef",
    "InvariantViolationError",
]
