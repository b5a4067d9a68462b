"""Detection engine: configuration and the staged runner."""

from catalogdedupe.engine.config import (
    CONFIG_SCHEMA_PATH,
    DetectionConfig,
    default_title_metric_weights,
    load_config,
    load_config_schema,
)
from catalogdedupe.engine.runner import (
    BucketTask,
    CancelToken,
    detect_duplicates,
    normalize_catalog,
    score_bucket,
)

__all__ = [
    "BucketTask",
    "CONFIG_SCHEMA_PATH",
    "CancelToken",
    "DetectionConfig",
    "default_title_metric_weights",
    "detect_duplicates",
    "load_config",
    "load_config_schema",
    "normalize_catalog",
    "score_bucket",
]
