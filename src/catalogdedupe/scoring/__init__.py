"""Pairwise scoring: weighted blend of similarity signals into a tiered score."""

from catalogdedupe.scoring.models import PairScore, Tier
from catalogdedupe.scoring.scorer import (
    MISSING_AUTHOR_SCORE,
    author_score,
    category_match,
    classify_tier,
    score_pair,
    title_score,
)

__all__ = [
    # Models
    "PairScore",
    "Tier",
    # Scorer
    "MISSING_AUTHOR_SCORE",
    "author_score",
    "category_match",
    "classify_tier",
    "score_pair",
    "title_score",
]
