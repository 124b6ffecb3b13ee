"""Concurrent queue runner for disambiguation batches.

A batch is resolved by a bounded pool of worker threads that pull requests
from a shared work queue. Every outcome is persisted and published as a
``result`` event as soon as it is produced; the batch ends with a single
``complete`` or ``cancelled`` event.
"""

from __future__ import annotations

import dataclasses
import logging
import queue
import threading
import time
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from reelmatch.config.loader import get_config
from reelmatch.config.models import Settings
from reelmatch.core.disambiguation.cancellation import CancellationToken
from reelmatch.core.disambiguation.engine import DisambiguationEngine
from reelmatch.core.disambiguation.models import BatchSummary, MatchRequest, MatchResult
from reelmatch.core.events.channel import EventChannel
from reelmatch.shared.constants import EventNames, QueueDefaults
from reelmatch.shared.errors import (
    DomainError,
    ErrorCode,
    ErrorContext,
    InfrastructureError,
    create_validation_error,
)
from reelmatch.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from reelmatch.shared.protocols.services import CatalogSnapshotProvider, MatchOutcomeSink

logger = logging.getLogger(__name__)


class _BatchCounters:
    """Lock-guarded running totals for one batch."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.total = 0
        self.ambiguous = 0
        self.persist_failures = 0
        self.cancel_observed = False

    def record(self, *, ambiguous: bool, persisted: bool) -> None:
        with self._lock:
            self.total += 1
            if ambiguous:
                self.ambiguous += 1
            if not persisted:
                self.persist_failures += 1

    def mark_cancelled(self) -> None:
        with self._lock:
            self.cancel_observed = True


def run_disambiguation_queue(  # pylint: disable=too-many-arguments
    batch_id: str,
    requests: Sequence[MatchRequest],
    catalog_provider: CatalogSnapshotProvider,
    persistence_sink: MatchOutcomeSink,
    *,
    channel: EventChannel,
    concurrency: int | None = None,
    cancellation: CancellationToken | None = None,
    settings: Settings | None = None,
) -> BatchSummary:
    """Resolve a batch of requests with a bounded worker pool.

    Args:
        batch_id: Identifier recorded with every persisted outcome
        requests: Requests to resolve
        catalog_provider: Source of the catalog snapshot, read once
        persistence_sink: Destination for each outcome
        channel: Channel receiving result/complete/cancelled events
        concurrency: Worker count, defaults to the configured queue width
        cancellation: Token polled by workers between items
        settings: Settings override, defaults to the global configuration

    Returns:
        BatchSummary with totals for the items actually processed

    Raises:
        DomainError: If concurrency is less than 1
        InfrastructureError: If the catalog snapshot cannot be loaded
    """
    settings = settings or get_config()
    if concurrency is None:
        concurrency = settings.queue.concurrency
    if concurrency < 1:
        raise create_validation_error(
            f"concurrency must be at least 1, got {concurrency}",
            field="concurrency",
            operation="run_disambiguation_queue",
        )

    token = cancellation or CancellationToken()
    operation = "run_disambiguation_queue"
    log_operation_start(
        logger,
        operation,
        {"batch_id": batch_id, "requests": len(requests), "concurrency": concurrency},
    )
    started = time.perf_counter()

    try:
        entries = catalog_provider.load_catalog_snapshot()
    except Exception as e:
        raise InfrastructureError(
            code=ErrorCode.CATALOG_LOAD_FAILED,
            message=f"Failed to load catalog snapshot: {e}",
            context=ErrorContext(
                operation=operation,
                batch_id=batch_id,
            ),
            original_error=e,
        ) from e

    counters = _BatchCounters()

    if requests:
        engine = DisambiguationEngine(entries, settings=settings.matching)
        work: queue.Queue[MatchRequest] = queue.Queue()
        for request in requests:
            work.put(request)

        def worker() -> None:
            while True:
                if token.is_cancelled:
                    counters.mark_cancelled()
                    return
                try:
                    request = work.get_nowait()
                except queue.Empty:
                    return
                _process_one(
                    request,
                    engine=engine,
                    batch_id=batch_id,
                    sink=persistence_sink,
                    channel=channel,
                    counters=counters,
                )

        workers = min(concurrency, len(requests))
        with ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix=QueueDefaults.THREAD_NAME_PREFIX,
        ) as executor:
            futures = [executor.submit(worker) for _ in range(workers)]
        for future in futures:
            future.result()

    summary = BatchSummary(
        batch_id=batch_id,
        total=counters.total,
        ambiguous=counters.ambiguous,
        persist_failures=counters.persist_failures,
        cancelled=counters.cancel_observed,
    )

    if summary.cancelled:
        channel.publish(EventNames.CANCELLED, {"reason": token.reason})
        logger.info(
            "Batch %s cancelled after %d of %d requests",
            batch_id,
            summary.total,
            len(requests),
        )
    else:
        channel.publish(
            EventNames.COMPLETE,
            {"batch_id": batch_id, "total": summary.total, "ambiguous": summary.ambiguous},
        )

    log_operation_success(
        logger,
        operation,
        (time.perf_counter() - started) * 1000,
        result_info=summary.to_dict(),
    )
    return summary


def _process_one(  # pylint: disable=too-many-arguments
    request: MatchRequest,
    *,
    engine: DisambiguationEngine,
    batch_id: str,
    sink: MatchOutcomeSink,
    channel: EventChannel,
    counters: _BatchCounters,
) -> None:
    try:
        result = engine.resolve(request)
    except Exception as e:  # noqa: BLE001
        log_operation_error(
            logger,
            DomainError(
                code=ErrorCode.RESOLUTION_FAILED,
                message=f"Failed to resolve request {request.id}: {e}",
                context=ErrorContext(
                    operation="resolve_request",
                    batch_id=batch_id,
                    request_id=request.id,
                    folder_path=request.folder_path_hint,
                ),
                original_error=e,
            ),
        )
        result = MatchResult.no_match(request.id)

    try:
        sink.record_match_outcome(result, batch_id, request.title, request.year)
    except Exception as e:  # noqa: BLE001
        error = InfrastructureError(
            code=ErrorCode.PERSISTENCE_FAILED,
            message=f"Failed to persist outcome for request {request.id}: {e}",
            context=ErrorContext(
                operation="record_match_outcome",
                batch_id=batch_id,
                request_id=request.id,
            ),
            original_error=e,
        )
        log_operation_error(logger, error)
        result = dataclasses.replace(result, persist_error=str(e) or type(e).__name__)

    counters.record(ambiguous=result.ambiguous, persisted=result.persisted)
    channel.publish(EventNames.RESULT, result)
