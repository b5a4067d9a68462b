"""Bucket building.

Runs blocker plug-ins over normalized items and groups them into buckets.
Every unordered pair is owned by exactly one bucket, so no pair is
scored twice.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from itertools import combinations

from catalogdedupe.audit.logger import AuditLogger
from catalogdedupe.candidates.blockers import Blocker
from catalogdedupe.candidates.models import Bucket, BucketStats
from catalogdedupe.models.records import NormalizedItem

DEFAULT_MAX_BUCKET_SIZE = 1000
STAGE_NAME = "bucketing"


def build_buckets(
    items: Iterable[NormalizedItem],
    blockers: list[Blocker],
    *,
    logger: AuditLogger | None = None,
    max_bucket_size: int = DEFAULT_MAX_BUCKET_SIZE,
) -> tuple[list[Bucket], BucketStats]:
    """Group items into buckets and assign each pair to one bucket.

    Parameters
    ----------
    items : Iterable[NormalizedItem]
        Normalized items (materialised once).
    blockers : list[Blocker]
        Blocker plug-ins to apply.
    logger : AuditLogger | None, optional
        Audit logger for oversized bucket warnings.
    max_bucket_size : int, optional
        Log a warning when a bucket exceeds this size. The bucket is
        still processed.

    Returns
    -------
    tuple[list[Bucket], BucketStats]
        Buckets owning at least one pair, in key order, and counters.

    Notes
    -----
    Keys are visited in sorted order and a pair goes to the first bucket
    containing it, so the output depends only on the item set.
    """
    stats = BucketStats()

    # Phase 1: inverted index, key → {item_id, …}
    index: dict[str, set[str]] = defaultdict(set)
    key_blocker: dict[str, str] = {}

    for item in items:
        stats.items_seen += 1
        keyed = False
        for blocker in blockers:
            for key in blocker.block_keys(item):
                index[key].add(item.item_id)
                key_blocker.setdefault(key, blocker.name)
                keyed = True
        if keyed:
            stats.items_keyed += 1

    stats.unique_keys = len(index)

    # Phase 2: assign pairs to the first bucket containing them
    seen_pairs: set[tuple[str, str]] = set()
    buckets: list[Bucket] = []

    for key in sorted(index):
        item_ids = tuple(sorted(index[key]))
        size = len(item_ids)
        if size < 2:
            continue

        stats.buckets_gt1 += 1
        stats.max_bucket = max(stats.max_bucket, size)

        if size > max_bucket_size:
            stats.oversized_buckets.append(key)
            if logger:
                logger.event(
                    "oversized_bucket",
                    data={
                        "blocker": key_blocker[key],
                        "bucket_key": key[:100],
                        "bucket_size": size,
                        "max_bucket_size": max_bucket_size,
                    },
                    level="WARN",
                    stage=STAGE_NAME,
                )

        owned: list[tuple[str, str]] = []
        for pair in combinations(item_ids, 2):  # ids already sorted
            stats.pairs_raw += 1
            if pair not in seen_pairs:
                seen_pairs.add(pair)
                owned.append(pair)

        if owned:
            buckets.append(
                Bucket(
                    key=key,
                    blocker=key_blocker[key],
                    item_ids=item_ids,
                    pairs=tuple(owned),
                )
            )

    stats.buckets_with_pairs = len(buckets)
    stats.pairs_unique = len(seen_pairs)
    return buckets, stats
