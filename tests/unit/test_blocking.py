"""Tests for blockers, the strategy factory and bucket building."""

from __future__ import annotations

import json
from collections.abc import Callable
from pathlib import Path

import pytest

from catalogdedupe.audit import AuditLogger
from catalogdedupe.candidates import (
    STRATEGY_REGISTRY,
    AllItemsBlocker,
    Blocker,
    BucketingStrategy,
    FirstWordBlocker,
    MinHashTitleBlocker,
    PhoneticBlocker,
    build_buckets,
    create_blockers,
)
from catalogdedupe.models import NormalizedItem

# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def items(make_normalized: Callable[..., NormalizedItem]) -> list[NormalizedItem]:
    """Two Gatsby editions, a sound-alike title and an unrelated one."""
    return [
        make_normalized("g1", "The Great Gatsby"),
        make_normalized("g2", "Great Gatsby (Penguin)"),
        make_normalized("g3", "Grate Expectations"),
        make_normalized("w1", "Moby Dick"),
    ]


# ============================================================================
# Blockers
# ============================================================================


@pytest.mark.unit
def test_key_blockers(make_normalized: Callable[..., NormalizedItem]) -> None:
    """Test key blockers emit prefixed keys."""
    item = make_normalized("g1", "The Great Gatsby")

    assert list(PhoneticBlocker().block_keys(item)) == ["ph:G630"]
    assert list(FirstWordBlocker().block_keys(item)) == ["fw:great"]
    assert list(AllItemsBlocker().block_keys(item)) == ["all"]


@pytest.mark.unit
def test_blockers_satisfy_protocol() -> None:
    """Test every registered blocker matches the Blocker protocol."""
    for strategy in BucketingStrategy:
        for blocker in create_blockers(strategy):
            assert isinstance(blocker, Blocker)
            assert blocker.name
            assert blocker.match_key


@pytest.mark.unit
def test_minhash_identical_titles_share_every_band(
    make_normalized: Callable[..., NormalizedItem],
) -> None:
    """Test identical titles produce identical band keys."""
    blocker = MinHashTitleBlocker()
    first = list(blocker.block_keys(make_normalized("a", "Moby Dick")))
    second = list(blocker.block_keys(make_normalized("b", "Moby-Dick!")))

    assert len(first) == 16
    assert first == second
    assert all(key.startswith("mh:b") for key in first)


@pytest.mark.unit
def test_minhash_unrelated_titles_share_no_band(
    make_normalized: Callable[..., NormalizedItem],
) -> None:
    """Test disjoint titles land in different buckets."""
    blocker = MinHashTitleBlocker()
    first = set(blocker.block_keys(make_normalized("a", "Moby Dick")))
    second = set(blocker.block_keys(make_normalized("b", "Great Gatsby")))

    assert not first & second


@pytest.mark.unit
def test_minhash_short_title(make_normalized: Callable[..., NormalizedItem]) -> None:
    """Test titles shorter than a shingle still get keys."""
    keys = list(MinHashTitleBlocker().block_keys(make_normalized("a", "It")))

    assert len(keys) == 16


@pytest.mark.unit
def test_minhash_rejects_uneven_bands() -> None:
    """Test permutations must divide evenly into bands."""
    with pytest.raises(ValueError, match="multiple of bands"):
        MinHashTitleBlocker(num_perm=100, bands=16)


# ============================================================================
# Factory
# ============================================================================


@pytest.mark.unit
def test_registry_covers_every_strategy() -> None:
    """Test each strategy has at least one blocker."""
    assert set(STRATEGY_REGISTRY) == set(BucketingStrategy)


@pytest.mark.unit
def test_create_blockers_default_strategy() -> None:
    """Test the combined strategy puts the phonetic blocker first."""
    blockers = create_blockers("phonetic_first_word")

    assert [b.name for b in blockers] == ["phonetic", "first_word"]


@pytest.mark.unit
def test_create_blockers_unknown_strategy() -> None:
    """Test unknown strategies are rejected with the valid list."""
    with pytest.raises(ValueError, match="Unknown bucketing strategy"):
        create_blockers("by_isbn")


# ============================================================================
# build_buckets
# ============================================================================


@pytest.mark.unit
def test_build_buckets_assigns_pairs_once(items: list[NormalizedItem]) -> None:
    """Test a pair shared by two buckets is owned by the first key."""
    buckets, stats = build_buckets(items, create_blockers("phonetic_first_word"))

    assert [b.key for b in buckets] == ["fw:great", "ph:G630"]
    assert buckets[0].pairs == (("g1", "g2"),)
    assert buckets[1].item_ids == ("g1", "g2", "g3")
    assert buckets[1].pairs == (("g1", "g3"), ("g2", "g3"))

    assert stats.items_seen == 4
    assert stats.items_keyed == 4
    assert stats.unique_keys == 5
    assert stats.buckets_gt1 == 2
    assert stats.buckets_with_pairs == 2
    assert stats.pairs_raw == 4
    assert stats.pairs_unique == 3
    assert stats.max_bucket == 3
    assert stats.oversized_buckets == []


@pytest.mark.unit
def test_build_buckets_pairs_are_unique_and_ordered(items: list[NormalizedItem]) -> None:
    """Test every pair appears once with a < b."""
    buckets, stats = build_buckets(items, create_blockers("none"))

    pairs = [pair for bucket in buckets for pair in bucket.pairs]
    assert len(pairs) == len(set(pairs)) == stats.pairs_unique == 6
    assert all(a < b for a, b in pairs)


@pytest.mark.unit
def test_build_buckets_single_item_buckets_are_dropped(
    make_normalized: Callable[..., NormalizedItem],
) -> None:
    """Test items alone in their bucket produce nothing to score."""
    items = [make_normalized("w1", "Moby Dick"), make_normalized("g1", "The Great Gatsby")]

    buckets, stats = build_buckets(items, create_blockers("first_word"))

    assert buckets == []
    assert stats.pairs_unique == 0


@pytest.mark.unit
def test_build_buckets_is_order_independent(items: list[NormalizedItem]) -> None:
    """Test input order does not change the buckets."""
    blockers = create_blockers("phonetic_first_word")

    forward, _ = build_buckets(items, blockers)
    backward, _ = build_buckets(list(reversed(items)), blockers)

    assert forward == backward


@pytest.mark.unit
def test_build_buckets_logs_oversized_bucket(
    items: list[NormalizedItem], tmp_path: Path
) -> None:
    """Test oversized buckets are logged and still processed."""
    log_path = tmp_path / "events.jsonl"
    with AuditLogger(run_id="test", log_path=log_path) as logger:
        buckets, stats = build_buckets(
            items, create_blockers("none"), logger=logger, max_bucket_size=3
        )

    events = [json.loads(line) for line in log_path.read_text().splitlines()]

    assert stats.oversized_buckets == ["all"]
    assert len(buckets[0].pairs) == 6
    assert len(events) == 1
    assert events[0]["event"] == "oversized_bucket"
    assert events[0]["level"] == "WARN"
    assert events[0]["stage"] == "bucketing"
    assert events[0]["data"] == {
        "blocker": "none",
        "bucket_key": "all",
        "bucket_size": 4,
        "max_bucket_size": 3,
    }


@pytest.mark.unit
def test_bucket_to_dict(items: list[NormalizedItem]) -> None:
    """Test bucket serialization uses plain lists."""
    buckets, stats = build_buckets(items, create_blockers("first_word"))

    assert buckets[0].to_dict() == {
        "key": "fw:great",
        "blocker": "first_word",
        "item_ids": ["g1", "g2"],
        "pairs": [["g1", "g2"]],
    }
    assert stats.to_dict()["pairs_unique"] == 1
