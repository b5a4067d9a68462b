"""Detection configuration and its JSON loader."""

import json
import math
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import jsonschema

from catalogdedupe.candidates.factory import BucketingStrategy
from catalogdedupe.candidates.generator import DEFAULT_MAX_BUCKET_SIZE
from catalogdedupe.series.detector import DEFAULT_BASE_THRESHOLD
from catalogdedupe.similarity.metrics import (
    METRIC_EDIT_RATIO,
    METRIC_JARO_WINKLER,
    METRIC_NAMES,
    METRIC_NGRAM,
    METRIC_PHONETIC,
)

CONFIG_SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "detection_config.schema.json"

_WEIGHT_TOLERANCE = 1e-6


def default_title_metric_weights() -> dict[str, float]:
    """Default blend of the four title metrics."""
    return {
        METRIC_EDIT_RATIO: 0.35,
        METRIC_JARO_WINKLER: 0.35,
        METRIC_NGRAM: 0.20,
        METRIC_PHONETIC: 0.10,
    }


def _check_unit(name: str, value: float) -> None:
    if not 0.0 <= value <= 1.0:
        raise ValueError(f"{name} must be in [0, 1], got {value}")


@dataclass
class DetectionConfig:
    """Configuration for a detection run.

    Attributes
    ----------
    title_metric_weights : dict[str, float]
        Weight of each title metric in the title score. All four metrics
        must be present; weights are normalized by their sum.
    title_weight : float
        Share of the title score in the final score (default: 0.60).
    author_weight : float
        Share of the author score (default: 0.25).
    category_weight : float
        Share of the category match (default: 0.05).
    exact_title_weight : float
        Bonus for identical normalized titles (default: 0.10).
    high_confidence_threshold : float
        Minimum final score for HighConfidence (default: 0.92).
    review_threshold : float
        Minimum final score for Review (default: 0.75).
    series_guard_cap : float
        Ceiling on the final score of different volumes of one series
        (default: 0.3).
    series_base_threshold : float
        Minimum edit ratio between series bases for the guard to apply
        (default: 0.85).
    bucketing_strategy : BucketingStrategy
        How items are grouped before scoring (default: phonetic_first_word).
    max_bucket_size : int
        Buckets larger than this are logged as warnings (default: 1000).
    max_workers : int
        Worker processes for bucket scoring; 1 scores sequentially.

    Notes
    -----
    The four final-score weights must sum to 1 so the final score stays
    in [0, 1]. Defaults are a starting calibration.
    """

    title_metric_weights: dict[str, float] = field(default_factory=default_title_metric_weights)
    title_weight: float = 0.60
    author_weight: float = 0.25
    category_weight: float = 0.05
    exact_title_weight: float = 0.10
    high_confidence_threshold: float = 0.92
    review_threshold: float = 0.75
    series_guard_cap: float = 0.3
    series_base_threshold: float = DEFAULT_BASE_THRESHOLD
    bucketing_strategy: BucketingStrategy = BucketingStrategy.PHONETIC_FIRST_WORD
    max_bucket_size: int = DEFAULT_MAX_BUCKET_SIZE
    max_workers: int = 1

    def __post_init__(self) -> None:
        """Coerce and validate."""
        self.title_metric_weights = dict(self.title_metric_weights)
        if set(self.title_metric_weights) != set(METRIC_NAMES):
            raise ValueError(
                f"title_metric_weights must have exactly the keys {sorted(METRIC_NAMES)}, "
                f"got {sorted(self.title_metric_weights)}"
            )
        for name, weight in self.title_metric_weights.items():
            if weight < 0:
                raise ValueError(f"title metric weight {name!r} must be >= 0, got {weight}")
        if sum(self.title_metric_weights.values()) <= 0:
            raise ValueError("title_metric_weights must not all be zero")

        final_weights = {
            "title_weight": self.title_weight,
            "author_weight": self.author_weight,
            "category_weight": self.category_weight,
            "exact_title_weight": self.exact_title_weight,
        }
        for name, value in final_weights.items():
            _check_unit(name, value)
        total = sum(final_weights.values())
        if not math.isclose(total, 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ValueError(f"final score weights must sum to 1, got {total}")

        _check_unit("high_confidence_threshold", self.high_confidence_threshold)
        _check_unit("review_threshold", self.review_threshold)
        if self.review_threshold >= self.high_confidence_threshold:
            raise ValueError(
                f"review_threshold ({self.review_threshold}) must be less than "
                f"high_confidence_threshold ({self.high_confidence_threshold})"
            )

        _check_unit("series_guard_cap", self.series_guard_cap)
        _check_unit("series_base_threshold", self.series_base_threshold)

        try:
            self.bucketing_strategy = BucketingStrategy(self.bucketing_strategy)
        except ValueError:
            valid = ", ".join(s.value for s in BucketingStrategy)
            raise ValueError(
                f"Unknown bucketing_strategy: {self.bucketing_strategy!r}. Valid: {valid}"
            ) from None

        if self.max_bucket_size < 2:
            raise ValueError(f"max_bucket_size must be >= 2, got {self.max_bucket_size}")
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = asdict(self)
        data["bucketing_strategy"] = self.bucketing_strategy.value
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DetectionConfig":
        """Build a config from a dict; missing keys take defaults.

        Raises
        ------
        ValueError
            If a key is unknown or a value is invalid.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")
        return cls(**data)

    def with_overrides(self, **changes: Any) -> "DetectionConfig":
        """Copy with some fields replaced; None values are ignored."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def load_config_schema() -> dict[str, Any]:
    """Load the bundled configuration JSON schema."""
    with CONFIG_SCHEMA_PATH.open(encoding="utf-8") as f:
        schema: dict[str, Any] = json.load(f)
    return schema


def load_config(path: Path) -> DetectionConfig:
    """Load a configuration JSON file.

    Parameters
    ----------
    path : Path
        JSON file with a subset of DetectionConfig fields.

    Returns
    -------
    DetectionConfig
        Validated configuration.

    Raises
    ------
    jsonschema.ValidationError
        If the file does not match the configuration schema.
    ValueError
        If the values violate cross-field rules (e.g. weight sum).
    """
    with Path(path).open(encoding="utf-8") as f:
        data = json.load(f)

    jsonschema.validate(instance=data, schema=load_config_schema())
    return DetectionConfig.from_dict(data)
