"""Data models for pairwise scoring.

This module defines the confidence tiers and the explainable pair score
produced by the weighted scorer.
"""

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

ROUND_DECIMALS = 6


class Tier(StrEnum):
    """Confidence tier of a pair or cluster.

    Attributes
    ----------
    NOT_DUPLICATE : str
        Below the review threshold.
    REVIEW : str
        Likely duplicate; an operator should confirm.
    HIGH_CONFIDENCE : str
        Duplicate with high confidence.
    """

    NOT_DUPLICATE = "NotDuplicate"
    REVIEW = "Review"
    HIGH_CONFIDENCE = "HighConfidence"


@dataclass(frozen=True, slots=True)
class PairScore:
    """Pairwise duplicate score with explainability.

    Attributes
    ----------
    a : str
        First item ID (lexicographically smaller).
    b : str
        Second item ID (lexicographically larger).
    metric_scores : dict[str, float]
        Title similarity per metric, always all four.
    title_score : float
        Weighted blend of the metric scores.
    author_score : float
        Author agreement (0.5 when either side is missing).
    category_match : bool
        Categories equal or both absent.
    exact_title : bool
        Normalized titles are identical.
    final_score : float
        Combined score after the series guard (0.0-1.0).
    tier : Tier
        Discrete classification of final_score.
    series_guard_triggered : bool
        Whether the items were recognized as different series volumes.
    """

    a: str
    b: str
    metric_scores: dict[str, float]
    title_score: float
    author_score: float
    category_match: bool
    exact_title: bool
    final_score: float
    tier: Tier
    series_guard_triggered: bool

    @property
    def pair_id(self) -> str:
        """Deterministic pair identifier (format: "a|b")."""
        return f"{self.a}|{self.b}"

    @property
    def is_match(self) -> bool:
        """Whether the pair qualifies as a clustering edge."""
        return self.tier != Tier.NOT_DUPLICATE

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Returns
        -------
        dict
            Complete dictionary representation, scores rounded.
        """
        return {
            "pair_id": self.pair_id,
            "a": self.a,
            "b": self.b,
            "metric_scores": {
                name: round(value, ROUND_DECIMALS) for name, value in self.metric_scores.items()
            },
            "title_score": round(self.title_score, ROUND_DECIMALS),
            "author_score": round(self.author_score, ROUND_DECIMALS),
            "category_match": self.category_match,
            "exact_title": self.exact_title,
            "final_score": round(self.final_score, ROUND_DECIMALS),
            "tier": self.tier.value,
            "series_guard_triggered": self.series_guard_triggered,
        }
