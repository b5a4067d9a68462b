"""Build duplicate clusters from scored pairs."""

from collections import defaultdict
from collections.abc import Iterable, Mapping

from catalogdedupe.clustering.models import DuplicateCluster, compute_cluster_id
from catalogdedupe.clustering.union_find import UnionFind
from catalogdedupe.models.errors import InvariantViolationError
from catalogdedupe.models.records import NormalizedItem, SourceRef
from catalogdedupe.scoring.models import PairScore, Tier


def source_ref_key(source_ref: SourceRef) -> tuple[int, int | str]:
    """Ordering key for source references.

    Integers sort before strings; a missing reference sorts last.
    """
    if source_ref is None:
        return (2, "")
    if isinstance(source_ref, int):
        return (0, source_ref)
    return (1, source_ref)


def select_representative(members: Iterable[str], items: Mapping[str, NormalizedItem]) -> str:
    """Pick the member to keep when a cluster is merged.

    Parameters
    ----------
    members : Iterable[str]
        Member item ids.
    items : Mapping[str, NormalizedItem]
        Normalized items by id.

    Returns
    -------
    str
        Member with the longest description, then the earliest source
        reference, then the smallest id.
    """

    def rank(item_id: str) -> tuple[int, tuple[int, int | str], str]:
        item = items[item_id]
        return (-item.description_length, source_ref_key(item.source_ref), item_id)

    return min(members, key=rank)


class ClusterAccumulator:
    """Incrementally commit scored buckets and build clusters on demand.

    Each call to :meth:`commit` adds the qualifying pairs of one bucket to
    the union-find. Clusters reflect exactly the committed buckets, which
    is what a cancelled run reports.

    Parameters
    ----------
    items : Mapping[str, NormalizedItem]
        Normalized items by id; every edge must reference known items.
    high_threshold : float
        Minimum edge score for a cluster to be HighConfidence.
    """

    def __init__(self, items: Mapping[str, NormalizedItem], high_threshold: float) -> None:
        self.items = items
        self.high_threshold = high_threshold
        self.uf = UnionFind()
        self.edges: list[PairScore] = []
        self._scored: set[tuple[str, str]] = set()

    def commit(self, scores: Iterable[PairScore]) -> int:
        """Add one bucket's scores.

        Parameters
        ----------
        scores : Iterable[PairScore]
            All pair scores of the bucket (non-qualifying ones included).

        Returns
        -------
        int
            Number of qualifying edges added.

        Raises
        ------
        InvariantViolationError
            If a pair was already committed, is a self-pair, or references
            an unknown item.
        """
        added = 0
        for score in scores:
            pair = (score.a, score.b)
            if score.a == score.b:
                raise InvariantViolationError(f"Self-pair in results: {score.a!r}", pair=pair)
            if pair in self._scored:
                raise InvariantViolationError(f"Pair scored twice: {score.pair_id}", pair=pair)
            for item_id in pair:
                if item_id not in self.items:
                    raise InvariantViolationError(
                        f"Edge references unknown item {item_id!r}", pair=pair
                    )
            self._scored.add(pair)

            if score.is_match:
                self.uf.union(score.a, score.b)
                self.edges.append(score)
                added += 1
        return added

    def build(self) -> list[DuplicateCluster]:
        """Build clusters from the committed edges.

        Returns
        -------
        list[DuplicateCluster]
            Clusters with two or more members, sorted by cluster_id.
        """
        root_edges: dict[str, list[PairScore]] = defaultdict(list)
        for edge in self.edges:
            root_edges[self.uf.find(edge.a)].append(edge)

        clusters: list[DuplicateCluster] = []
        for members in self.uf.components(min_size=2):
            edges = sorted(root_edges[self.uf.find(members[0])], key=lambda e: (e.a, e.b))
            min_score = min(edge.final_score for edge in edges)
            tier = Tier.HIGH_CONFIDENCE if min_score >= self.high_threshold else Tier.REVIEW
            clusters.append(
                DuplicateCluster(
                    cluster_id=compute_cluster_id(members),
                    members=members,
                    representative=select_representative(members, self.items),
                    min_pairwise_score=min_score,
                    tier=tier,
                    edges=tuple(edges),
                )
            )

        clusters.sort(key=lambda c: c.cluster_id)
        return clusters


def build_clusters(
    scores: Iterable[PairScore],
    items: Mapping[str, NormalizedItem],
    high_threshold: float,
) -> list[DuplicateCluster]:
    """Build clusters from a complete set of pair scores.

    Parameters
    ----------
    scores : Iterable[PairScore]
        Pair scores; pairs below the review tier are ignored.
    items : Mapping[str, NormalizedItem]
        Normalized items by id.
    high_threshold : float
        Minimum edge score for a cluster to be HighConfidence.

    Returns
    -------
    list[DuplicateCluster]
        Clusters sorted by cluster_id.
    """
    accumulator = ClusterAccumulator(items, high_threshold)
    accumulator.commit(scores)
    return accumulator.build()
