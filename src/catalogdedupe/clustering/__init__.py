"""Clustering of scored pairs into duplicate groups via Union-Find."""

from catalogdedupe.clustering.cluster_builder import (
    ClusterAccumulator,
    build_clusters,
    select_representative,
    source_ref_key,
)
from catalogdedupe.clustering.models import DuplicateCluster, compute_cluster_id
from catalogdedupe.clustering.union_find import UnionFind

__all__ = [
    "ClusterAccumulator",
    "DuplicateCluster",
    "UnionFind",
    "build_clusters",
    "compute_cluster_id",
    "select_representative",
    "source_ref_key",
]
