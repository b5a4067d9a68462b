"""Bucketing: group normalized items so only plausible pairs are scored."""

from catalogdedupe.candidates.blockers import (
    AllItemsBlocker,
    Blocker,
    FirstWordBlocker,
    MinHashTitleBlocker,
    PhoneticBlocker,
)
from catalogdedupe.candidates.factory import (
    STRATEGY_REGISTRY,
    BucketingStrategy,
    create_blockers,
)
from catalogdedupe.candidates.generator import DEFAULT_MAX_BUCKET_SIZE, build_buckets
from catalogdedupe.candidates.models import Bucket, BucketStats

__all__ = [
    "AllItemsBlocker",
    "Blocker",
    "Bucket",
    "BucketStats",
    "BucketingStrategy",
    "DEFAULT_MAX_BUCKET_SIZE",
    "FirstWordBlocker",
    "MinHashTitleBlocker",
    "PhoneticBlocker",
    "STRATEGY_REGISTRY",
    "build_buckets",
    "create_blockers",
]
