"""Blocker plug-ins for bucketing.

Each blocker maps a normalized item to bucket keys. Items sharing a key
land in the same bucket and every pair inside a bucket is scored. The
design prioritises *recall*: precision is left to the scorer.

Architecture
------------
* ``Blocker``: structural protocol (two attributes + one method).
* Pure functions for hashing / shingling (no hidden state).
* Key prefixes keep the keys of different blockers disjoint.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable
from typing import Protocol, runtime_checkable

from datasketch import MinHash

from catalogdedupe.models.records import NormalizedItem
from catalogdedupe.similarity.metrics import char_ngrams

# ============================================================================
# Constants
# ============================================================================

MINHASH_NUM_PERM = 128
MINHASH_BANDS = 16
MINHASH_SHINGLE_SIZE = 3
MINHASH_SEED = 42

ALL_ITEMS_KEY = "all"


# ============================================================================
# Protocol
# ============================================================================


@runtime_checkable
class Blocker(Protocol):
    """Structural protocol every blocker must satisfy.

    Attributes
    ----------
    name : str
        Stable identifier used in audit logs and bucket stats.
    match_key : str
        Semantic label for the field this blocker relies on.
    """

    name: str
    match_key: str

    def block_keys(self, item: NormalizedItem) -> Iterable[str]:
        """Yield zero or more bucket keys for *item*.

        Returns an empty iterable when the item lacks the data this
        blocker needs.
        """
        ...


# ============================================================================
# Key blockers
# ============================================================================


class PhoneticBlocker:
    """Bucket by Soundex code of the first significant title word."""

    name: str = "phonetic"
    match_key: str = "phonetic_key"

    def block_keys(self, item: NormalizedItem) -> Iterable[str]:
        """Yield the phonetic key if present."""
        if item.phonetic_key:
            yield f"ph:{item.phonetic_key}"


class FirstWordBlocker:
    """Bucket by the first significant title word."""

    name: str = "first_word"
    match_key: str = "first_word"

    def block_keys(self, item: NormalizedItem) -> Iterable[str]:
        """Yield the first significant word if present."""
        if item.first_word:
            yield f"fw:{item.first_word}"


class AllItemsBlocker:
    """Put every item into one bucket (full pairwise comparison)."""

    name: str = "none"
    match_key: str = "item_id"

    def block_keys(self, item: NormalizedItem) -> Iterable[str]:
        """Yield the single shared key."""
        yield ALL_ITEMS_KEY


# ============================================================================
# Fuzzy blockers
# ============================================================================


class MinHashTitleBlocker:
    """LSH banding over MinHash signatures of title character shingles.

    Attributes
    ----------
    num_perm : int
        Number of MinHash permutations.
    bands : int
        Number of LSH bands.
    shingle_size : int
        Character n-gram length.
    """

    name: str = "minhash"
    match_key: str = "normalized_title"

    def __init__(
        self,
        num_perm: int = MINHASH_NUM_PERM,
        bands: int = MINHASH_BANDS,
        shingle_size: int = MINHASH_SHINGLE_SIZE,
    ) -> None:
        if bands <= 0 or num_perm % bands != 0:
            raise ValueError(f"num_perm ({num_perm}) must be a multiple of bands ({bands})")
        self.num_perm = num_perm
        self.bands = bands
        self.rows_per_band = num_perm // bands
        self.shingle_size = shingle_size

    def block_keys(self, item: NormalizedItem) -> Iterable[str]:
        """Yield one band-hash key per LSH band."""
        title = item.normalized_title
        if not title:
            return

        # Titles shorter than one shingle hash as a single token
        shingles = sorted(char_ngrams(title, self.shingle_size)) or [title]

        mh = MinHash(num_perm=self.num_perm, seed=MINHASH_SEED)
        for shingle in shingles:
            mh.update(shingle.encode("utf-8"))

        hv = mh.hashvalues
        for band in range(self.bands):
            start = band * self.rows_per_band
            band_bytes = ",".join(map(str, hv[start : start + self.rows_per_band]))
            band_hash = hashlib.sha256(band_bytes.encode("utf-8")).hexdigest()[:16]
            yield f"mh:b{band:02d}:{band_hash}"
