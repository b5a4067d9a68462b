"""Duplicate detection runner.

This module chains the detection stages into a single deterministic run.

Architecture Flow:
    Stage 1: Normalization (invalid items become warnings)
    Stage 2: Bucketing (each pair owned by exactly one bucket)
    Stage 3: Scoring (buckets scored independently, committed in order)
    Stage 4: Clustering (union-find over Review-or-better pairs)

Buckets may be scored concurrently, but their results are always
committed to the union-find in bucket order, so the report does not
depend on the executor.
"""

import time
from collections.abc import Iterable, Mapping
from concurrent.futures import Executor, Future, ProcessPoolExecutor
from dataclasses import dataclass
from typing import Any, Protocol

from catalogdedupe.audit.logger import AuditLogger
from catalogdedupe.candidates.factory import create_blockers
from catalogdedupe.candidates.generator import STAGE_NAME as STAGE_BUCKETING
from catalogdedupe.candidates.generator import build_buckets
from catalogdedupe.candidates.models import Bucket
from catalogdedupe.clustering.cluster_builder import ClusterAccumulator
from catalogdedupe.engine.config import DetectionConfig
from catalogdedupe.models.errors import InvariantViolationError
from catalogdedupe.models.records import CatalogItem, NormalizedItem
from catalogdedupe.normalize import normalize_item
from catalogdedupe.report.models import (
    DetectionReport,
    DetectionStats,
    DetectionWarning,
    WarningCode,
)
from catalogdedupe.scoring.models import PairScore
from catalogdedupe.scoring.scorer import score_pair

STAGE_NORMALIZE = "normalize"
STAGE_SCORING = "scoring"
STAGE_CLUSTERING = "clustering"


class CancelToken(Protocol):
    """Anything with an ``is_set()`` method, e.g. ``threading.Event``."""

    def is_set(self) -> bool:
        """Return True once cancellation is requested."""
        ...


@dataclass(frozen=True)
class BucketTask:
    """Self-contained unit of scoring work.

    Attributes
    ----------
    key : str
        Bucket key.
    pairs : tuple[tuple[str, str], ...]
        Pairs owned by the bucket.
    items : dict[str, NormalizedItem]
        Normalized bucket members by id.
    """

    key: str
    pairs: tuple[tuple[str, str], ...]
    items: dict[str, NormalizedItem]

    @classmethod
    def from_bucket(cls, bucket: Bucket, items: Mapping[str, NormalizedItem]) -> "BucketTask":
        """Attach the member items a bucket needs."""
        return cls(
            key=bucket.key,
            pairs=bucket.pairs,
            items={item_id: items[item_id] for item_id in bucket.item_ids},
        )


def score_bucket(task: BucketTask, config: DetectionConfig) -> list[PairScore]:
    """Score every pair owned by one bucket.

    Pure function of its arguments, so it can run in a worker process.

    Parameters
    ----------
    task : BucketTask
        Bucket to score.
    config : DetectionConfig
        Weights and thresholds.

    Returns
    -------
    list[PairScore]
        One score per pair, in pair order.
    """
    return [score_pair(task.items[a], task.items[b], config) for a, b in task.pairs]


# ---------------------------------------------------------------------------
# Stage functions
# ---------------------------------------------------------------------------


def normalize_catalog(
    items: Iterable[CatalogItem | Mapping[str, Any]],
    logger: AuditLogger | None = None,
) -> tuple[list[NormalizedItem], list[DetectionWarning]]:
    """Stage 1: Normalize items, turning unusable ones into warnings.

    Parameters
    ----------
    items : Iterable[CatalogItem | Mapping[str, Any]]
        Input items; mappings are converted with ``CatalogItem.from_dict``.
    logger : AuditLogger | None, optional
        Audit logger for item_skipped events.

    Returns
    -------
    tuple[list[NormalizedItem], list[DetectionWarning]]
        Normalized items and warnings, both in input order.

    Notes
    -----
    When an id repeats, the first occurrence is kept and later ones are
    reported as ``duplicate_id``. Mappings that cannot be turned into a
    CatalogItem are reported as ``invalid_record``; a record without an id
    is labelled by its position (``record:<index>``).
    """
    normalized: list[NormalizedItem] = []
    warnings: list[DetectionWarning] = []
    seen_ids: set[str] = set()

    def skip(item_id: str, code: WarningCode, message: str) -> None:
        warnings.append(DetectionWarning(item_id=item_id, code=code, message=message))
        if logger:
            logger.item_skipped(item_id, code.value, message, stage=STAGE_NORMALIZE)

    for index, raw in enumerate(items):
        if isinstance(raw, CatalogItem):
            item = raw
        else:
            try:
                item = CatalogItem.from_dict(dict(raw))
            except (TypeError, ValueError) as e:
                skip(_record_label(raw, index), WarningCode.INVALID_RECORD, str(e))
                continue

        if item.item_id in seen_ids:
            skip(item.item_id, WarningCode.DUPLICATE_ID, "Item id already seen; later item skipped")
            continue
        seen_ids.add(item.item_id)

        if not item.title or not item.title.strip():
            skip(item.item_id, WarningCode.MISSING_TITLE, "Title is missing or blank")
            continue

        result = normalize_item(item)
        if result is None:
            skip(
                item.item_id,
                WarningCode.EMPTY_NORMALIZED_TITLE,
                f"Title {item.title!r} is empty after normalization",
            )
            continue
        normalized.append(result)

    return normalized, warnings


def _record_label(raw: Any, index: int) -> str:
    if isinstance(raw, Mapping):
        for key in ("item_id", "id", "itemId"):
            value = raw.get(key)
            if isinstance(value, str | int) and not isinstance(value, bool) and str(value).strip():
                return str(value)
    return f"record:{index}"


def _is_cancelled(cancel: CancelToken | None) -> bool:
    return cancel is not None and cancel.is_set()


def _score_and_commit(
    tasks: list[BucketTask],
    config: DetectionConfig,
    accumulator: ClusterAccumulator,
    stats: DetectionStats,
    *,
    cancel: CancelToken | None,
    executor: Executor | None,
) -> bool:
    """Stage 3: Score buckets and commit them in order.

    Returns
    -------
    bool
        True if the run was cancelled before every bucket was committed.
    """
    own_executor: Executor | None = None
    if executor is None and config.max_workers > 1 and len(tasks) > 1:
        own_executor = ProcessPoolExecutor(max_workers=config.max_workers)
        executor = own_executor

    futures: list[Future[list[PairScore]]] = []
    try:
        if executor is not None:
            futures = [executor.submit(score_bucket, task, config) for task in tasks]

        for index, task in enumerate(tasks):
            if _is_cancelled(cancel):
                for future in futures[index:]:
                    future.cancel()
                return True

            scores = futures[index].result() if futures else score_bucket(task, config)
            accumulator.commit(scores)

            for score in scores:
                stats.count_tier(score.tier)
                if score.series_guard_triggered:
                    stats.series_guard_triggered += 1
            stats.buckets_processed += 1
    finally:
        if own_executor is not None:
            own_executor.shutdown(wait=True, cancel_futures=True)

    return False


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------


def detect_duplicates(
    items: Iterable[CatalogItem | Mapping[str, Any]],
    config: DetectionConfig | None = None,
    *,
    logger: AuditLogger | None = None,
    cancel: CancelToken | None = None,
    executor: Executor | None = None,
) -> DetectionReport:
    """Find groups of catalog items that likely describe the same work.

    Parameters
    ----------
    items : Iterable[CatalogItem | Mapping[str, Any]]
        Catalog items (never mutated).
    config : DetectionConfig | None, optional
        Weights, thresholds and bucketing. If None, uses defaults.
    logger : AuditLogger | None, optional
        Audit logger for stage events.
    cancel : CancelToken | None, optional
        Checked before each bucket commit; once set, the run stops and the
        report is marked partial.
    executor : Executor | None, optional
        Executor used to score buckets. If None, buckets are scored
        sequentially, or on a process pool when ``config.max_workers > 1``.

    Returns
    -------
    DetectionReport
        Clusters, warnings, stats and the effective configuration.

    Raises
    ------
    InvariantViolationError
        If an internal consistency check fails; the run is aborted.

    Examples
    --------
    >>> from catalogdedupe import CatalogItem, detect_duplicates
    >>> report = detect_duplicates([
    ...     CatalogItem("1", title="The Great Gatsby", author="F. Scott Fitzgerald"),
    ...     CatalogItem("2", title="Great Gatsby, The", author="Fitzgerald, F. Scott"),
    ... ])
    """
    if config is None:
        config = DetectionConfig()

    start_time = time.perf_counter()
    items_list = list(items)
    stats = DetectionStats(items_total=len(items_list))

    if logger:
        logger.run_started(config.to_dict(), items_total=len(items_list))

    try:
        # Stage 1: normalization
        stage_start = time.perf_counter()
        if logger:
            logger.stage_started(STAGE_NORMALIZE, expected_items=len(items_list))

        normalized, warnings = normalize_catalog(items_list, logger)
        stats.items_compared = len(normalized)
        stats.items_skipped = len(warnings)

        if logger:
            logger.stage_finished(
                STAGE_NORMALIZE,
                duration_seconds=time.perf_counter() - stage_start,
                counters={
                    "items_compared": stats.items_compared,
                    "items_skipped": stats.items_skipped,
                },
            )

        # Stage 2: bucketing
        stage_start = time.perf_counter()
        if logger:
            logger.stage_started(STAGE_BUCKETING, expected_items=len(normalized))

        buckets, bucket_stats = build_buckets(
            normalized,
            create_blockers(config.bucketing_strategy),
            logger=logger,
            max_bucket_size=config.max_bucket_size,
        )
        stats.buckets_total = len(buckets)

        if logger:
            counters = bucket_stats.to_dict()
            counters["oversized_buckets"] = len(bucket_stats.oversized_buckets)
            logger.stage_finished(
                STAGE_BUCKETING,
                duration_seconds=time.perf_counter() - stage_start,
                counters=counters,
            )

        # Stage 3: scoring
        stage_start = time.perf_counter()
        if logger:
            logger.stage_started(STAGE_SCORING, expected_items=len(buckets))

        by_id = {item.item_id: item for item in normalized}
        tasks = [BucketTask.from_bucket(bucket, by_id) for bucket in buckets]
        accumulator = ClusterAccumulator(by_id, config.high_confidence_threshold)

        partial = _score_and_commit(
            tasks,
            config,
            accumulator,
            stats,
            cancel=cancel,
            executor=executor,
        )

        if partial and logger:
            logger.run_cancelled(stats.buckets_processed, stats.buckets_total, stage=STAGE_SCORING)
        if logger:
            logger.stage_finished(
                STAGE_SCORING,
                duration_seconds=time.perf_counter() - stage_start,
                counters={
                    "buckets_processed": stats.buckets_processed,
                    "pairs_scored": stats.pairs_scored,
                    "pairs_high_confidence": stats.pairs_high_confidence,
                    "pairs_review": stats.pairs_review,
                    "series_guard_triggered": stats.series_guard_triggered,
                },
            )

        # Stage 4: clustering
        stage_start = time.perf_counter()
        if logger:
            logger.stage_started(STAGE_CLUSTERING, expected_items=len(accumulator.edges))

        clusters = accumulator.build()
        stats.clusters_total = len(clusters)

        if logger:
            logger.stage_finished(
                STAGE_CLUSTERING,
                duration_seconds=time.perf_counter() - stage_start,
                counters={"edges": len(accumulator.edges), "clusters_total": len(clusters)},
            )

    except InvariantViolationError as e:
        if logger:
            logger.error(type(e).__name__, str(e), stage=logger.current_stage)
        raise

    stats.duration_seconds = time.perf_counter() - start_time

    if logger:
        logger.run_finished(
            status="partial" if partial else "success",
            duration_seconds=stats.duration_seconds,
            clusters_total=stats.clusters_total,
        )

    return DetectionReport(
        clusters=clusters,
        warnings=warnings,
        partial=partial,
        stats=stats,
        config=config.to_dict(),
    )
