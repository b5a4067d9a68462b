"""Weighted combination of similarity signals into a pair score.

The final score blends the title metrics, author agreement, category
agreement and an exact-title bonus; the series guard caps it regardless
of the blend.
"""

from typing import TYPE_CHECKING

from catalogdedupe.models.errors import InvariantViolationError
from catalogdedupe.models.records import NormalizedItem
from catalogdedupe.scoring.models import PairScore, Tier
from catalogdedupe.series.detector import detect_series_conflict
from catalogdedupe.similarity.metrics import compute_metrics, edit_ratio

if TYPE_CHECKING:
    from catalogdedupe.engine.config import DetectionConfig

MISSING_AUTHOR_SCORE = 0.5


def title_score(metric_scores: dict[str, float], weights: dict[str, float]) -> float:
    """Weighted mean of the title metrics.

    Parameters
    ----------
    metric_scores : dict[str, float]
        Metric name → score.
    weights : dict[str, float]
        Metric name → non-negative weight (need not sum to 1).

    Returns
    -------
    float
        Blended title score (0.0-1.0).
    """
    total = sum(weights.values())
    if total <= 0:
        return 0.0
    blended = sum(metric_scores[name] * weight for name, weight in weights.items())
    return blended / total


def author_score(author_a: str | None, author_b: str | None) -> float:
    """Compare normalized authors.

    Parameters
    ----------
    author_a : str | None
        First normalized author.
    author_b : str | None
        Second normalized author.

    Returns
    -------
    float
        1.0 on exact match, edit ratio when both present and different,
        0.5 when either is missing.

    Notes
    -----
    A missing author is not evidence of a different author, so it scores
    neutral rather than as a mismatch.
    """
    if not author_a or not author_b:
        return MISSING_AUTHOR_SCORE
    if author_a == author_b:
        return 1.0
    return edit_ratio(author_a, author_b)


def category_match(category_a: str | None, category_b: str | None) -> bool:
    """Categories are equal, or both absent."""
    return category_a == category_b


def classify_tier(score: float, high_threshold: float, review_threshold: float) -> Tier:
    """Map a final score to its confidence tier.

    Parameters
    ----------
    score : float
        Final score.
    high_threshold : float
        Minimum score for HighConfidence.
    review_threshold : float
        Minimum score for Review.

    Returns
    -------
    Tier
        Confidence tier.
    """
    if score >= high_threshold:
        return Tier.HIGH_CONFIDENCE
    if score >= review_threshold:
        return Tier.REVIEW
    return Tier.NOT_DUPLICATE


def score_pair(
    item_a: NormalizedItem,
    item_b: NormalizedItem,
    config: "DetectionConfig | None" = None,
) -> PairScore:
    """Score a candidate pair.

    The pair is put in canonical order (smaller id first) before any
    computation, so ``score_pair(a, b) == score_pair(b, a)``.

    Parameters
    ----------
    item_a : NormalizedItem
        First item.
    item_b : NormalizedItem
        Second item.
    config : DetectionConfig | None, optional
        Weights and thresholds. If None, uses defaults.

    Returns
    -------
    PairScore
        Explainable score with tier.

    Raises
    ------
    InvariantViolationError
        If both items have the same id.
    """
    if item_a.item_id == item_b.item_id:
        raise InvariantViolationError(
            f"Self-pair scored for item {item_a.item_id!r}",
            pair=(item_a.item_id, item_b.item_id),
        )

    if config is None:
        from catalogdedupe.engine.config import DetectionConfig

        config = DetectionConfig()

    if item_b.item_id < item_a.item_id:
        item_a, item_b = item_b, item_a

    metrics = compute_metrics(item_a.normalized_title, item_b.normalized_title)
    t_score = title_score(metrics, config.title_metric_weights)
    a_score = author_score(item_a.normalized_author, item_b.normalized_author)
    same_category = category_match(item_a.normalized_category, item_b.normalized_category)
    exact = item_a.normalized_title == item_b.normalized_title

    final = (
        config.title_weight * t_score
        + config.author_weight * a_score
        + config.category_weight * float(same_category)
        + config.exact_title_weight * float(exact)
    )
    final = min(max(final, 0.0), 1.0)

    guard = detect_series_conflict(item_a, item_b, config.series_base_threshold)
    if guard:
        final = min(final, config.series_guard_cap)

    return PairScore(
        a=item_a.item_id,
        b=item_b.item_id,
        metric_scores=metrics,
        title_score=t_score,
        author_score=a_score,
        category_match=same_category,
        exact_title=exact,
        final_score=final,
        tier=classify_tier(
            final,
            config.high_confidence_threshold,
            config.review_threshold,
        ),
        series_guard_triggered=guard,
    )
