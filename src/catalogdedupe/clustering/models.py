"""Data models for duplicate clusters."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

from catalogdedupe.scoring.models import ROUND_DECIMALS, PairScore, Tier
from catalogdedupe.utils.hashing import calculate_string_sha256


@dataclass(frozen=True)
class DuplicateCluster:
    """A group of items believed to describe the same work.

    Attributes
    ----------
    cluster_id : str
        Deterministic hash of the members (``c:<12 hex>``).
    members : tuple[str, ...]
        Sorted item ids (at least two).
    representative : str
        Item suggested to keep when merging.
    min_pairwise_score : float
        Weakest edge holding the cluster together.
    tier : Tier
        HighConfidence if every edge clears the high threshold, else Review.
    edges : tuple[PairScore, ...]
        Qualifying pair scores inside the cluster, sorted by pair.

    Notes
    -----
    Members are connected through chains of edges at or above the review
    threshold; two members need not have been compared directly.
    """

    cluster_id: str
    members: tuple[str, ...]
    representative: str
    min_pairwise_score: float
    tier: Tier
    edges: tuple[PairScore, ...]

    @property
    def size(self) -> int:
        """Number of members."""
        return len(self.members)

    def to_dict(self, include_edges: bool = True) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization.

        Parameters
        ----------
        include_edges : bool, optional
            Include the per-pair explanations.

        Returns
        -------
        dict
            Dictionary representation.
        """
        data: dict[str, Any] = {
            "cluster_id": self.cluster_id,
            "members": list(self.members),
            "representative": self.representative,
            "min_pairwise_score": round(self.min_pairwise_score, ROUND_DECIMALS),
            "tier": self.tier.value,
            "size": self.size,
        }
        if include_edges:
            data["edges"] = [edge.to_dict() for edge in self.edges]
        return data


def compute_cluster_id(item_ids: Sequence[str]) -> str:
    """Compute deterministic cluster ID from member ids.

    Parameters
    ----------
    item_ids : Sequence[str]
        Item IDs in cluster (any order).

    Returns
    -------
    str
        Cluster ID in format "c:{sha256_prefix}".
    """
    content = "\n".join(sorted(item_ids))
    return f"c:{calculate_string_sha256(content)[:12]}"
