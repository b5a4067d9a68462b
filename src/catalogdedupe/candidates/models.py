"""Data models for bucket representation.

This module defines the buckets produced by the bucketing stage and the
counters collected while building them.
"""

from dataclasses import asdict, dataclass, field
from typing import Any


@dataclass(frozen=True)
class Bucket:
    """A group of items sharing a bucket key, with the pairs it owns.

    Attributes
    ----------
    key : str
        Bucket key (prefixed by blocker, e.g. ``"ph:G320"``).
    blocker : str
        Name of the blocker that produced the key.
    item_ids : tuple[str, ...]
        Sorted ids of every item carrying the key.
    pairs : tuple[tuple[str, str], ...]
        Sorted (a, b) pairs with ``a < b`` assigned to this bucket. A pair
        is owned by the first bucket (in key order) that contains it.

    Notes
    -----
    ``pairs`` may be shorter than all combinations of ``item_ids`` when an
    earlier bucket already owns some of them.
    """

    key: str
    blocker: str
    item_ids: tuple[str, ...]
    pairs: tuple[tuple[str, str], ...]

    @property
    def size(self) -> int:
        """Number of items in the bucket."""
        return len(self.item_ids)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "key": self.key,
            "blocker": self.blocker,
            "item_ids": list(self.item_ids),
            "pairs": [list(pair) for pair in self.pairs],
        }


@dataclass
class BucketStats:
    """Counters collected while building buckets.

    Attributes
    ----------
    items_seen : int
        Total items processed.
    items_keyed : int
        Items that produced at least one bucket key.
    unique_keys : int
        Distinct bucket keys generated.
    buckets_gt1 : int
        Keys shared by two or more items.
    buckets_with_pairs : int
        Buckets that own at least one pair.
    pairs_raw : int
        Pairs across all buckets before cross-bucket dedup.
    pairs_unique : int
        Distinct pairs to score.
    max_bucket : int
        Largest bucket size encountered.
    oversized_buckets : list[str]
        Keys of buckets larger than the configured maximum.
    """

    items_seen: int = 0
    items_keyed: int = 0
    unique_keys: int = 0
    buckets_gt1: int = 0
    buckets_with_pairs: int = 0
    pairs_raw: int = 0
    pairs_unique: int = 0
    max_bucket: int = 0
    oversized_buckets: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Serialise to a plain dict."""
        return asdict(self)
