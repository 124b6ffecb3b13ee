"""Background batch job manager.

Composes the queue runner with an event channel: one batch at a time runs
on a background thread, observers follow it through the channel, and the
channel always receives a terminal event.
"""

from __future__ import annotations

import logging
import threading
import uuid
from collections.abc import Sequence

from reelmatch.config.loader import get_config
from reelmatch.config.models import Settings
from reelmatch.core.disambiguation.cancellation import CancellationToken
from reelmatch.core.disambiguation.models import BatchSummary, MatchRequest
from reelmatch.core.disambiguation.queue import run_disambiguation_queue
from reelmatch.core.events.channel import EventChannel
from reelmatch.shared.constants import EventChannelDefaults, EventNames
from reelmatch.shared.errors import (
    ApplicationError,
    ErrorCode,
    ErrorContext,
    ReelMatchError,
    create_validation_error,
)
from reelmatch.shared.logging import log_operation_error
from reelmatch.shared.protocols.services import CatalogSnapshotProvider, MatchOutcomeSink

logger = logging.getLogger(__name__)


class DisambiguationJobManager:
    """Run disambiguation batches in the background, one at a time.

    Args:
        channel: Channel the batches publish to
        catalog_provider: Catalog snapshot source
        persistence_sink: Outcome sink
        settings: Settings override, defaults to the global configuration

    Example:
        >>> manager = DisambiguationJobManager(channel, store, store)
        >>> job_id = manager.submit(requests)
        >>> summary = manager.wait(timeout=30)
    """

    def __init__(
        self,
        channel: EventChannel,
        catalog_provider: CatalogSnapshotProvider,
        persistence_sink: MatchOutcomeSink,
        settings: Settings | None = None,
    ) -> None:
        self.channel = channel
        self._catalog_provider = catalog_provider
        self._persistence_sink = persistence_sink
        self._settings = settings or get_config()
        self._lock = threading.Lock()
        self._thread: threading.Thread | None = None
        self._job_id: str | None = None
        self._summary: BatchSummary | None = None
        self._last_error: Exception | None = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    @property
    def job_id(self) -> str | None:
        return self._job_id

    @property
    def last_error(self) -> Exception | None:
        """Error raised by the most recent batch, if any."""
        return self._last_error

    def submit(
        self,
        requests: Sequence[MatchRequest],
        *,
        concurrency: int | None = None,
        batch_id: str | None = None,
    ) -> str:
        """Start a batch on a background thread.

        Args:
            requests: Non-empty list of requests
            concurrency: Worker count override
            batch_id: Caller-chosen id, a uuid4 is generated when omitted

        Returns:
            Job id (also used as the batch id)

        Raises:
            DomainError: If requests is empty
            ApplicationError: If a batch is already running
        """
        if not requests:
            raise create_validation_error(
                "requests must be a non-empty list",
                field="requests",
                operation="submit_batch",
            )

        with self._lock:
            if (self._thread is not None and self._thread.is_alive()) or self.channel.running:
                raise ApplicationError(
                    code=ErrorCode.JOB_ALREADY_RUNNING,
                    message="Disambiguation job already running",
                    context=ErrorContext(
                        operation="submit_batch",
                        additional_data={"running_job_id": self._job_id or ""},
                    ),
                )

            job_id = batch_id or str(uuid.uuid4())
            token = self.channel.start()
            self._job_id = job_id
            self._summary = None
            self._last_error = None
            self._thread = threading.Thread(
                target=self._run,
                args=(job_id, list(requests), concurrency, token),
                name=f"disambiguation-job-{job_id[:8]}",
                daemon=True,
            )
            self._thread.start()

        logger.info("Queued disambiguation job %s with %d requests", job_id, len(requests))
        return job_id

    def cancel(self, reason: str = EventChannelDefaults.CANCEL_REASON) -> bool:
        """Request cancellation of the running batch.

        Returns:
            False when nothing is running
        """
        return self.channel.cancel(reason)

    def wait(self, timeout: float | None = None) -> BatchSummary | None:
        """Block until the current batch ends.

        Returns:
            The batch summary, or None if the batch failed or is still
            running when the timeout expires
        """
        thread = self._thread
        if thread is not None:
            thread.join(timeout)
            if thread.is_alive():
                return None
        return self._summary

    def _run(
        self,
        job_id: str,
        requests: list[MatchRequest],
        concurrency: int | None,
        token: CancellationToken,
    ) -> None:
        try:
            self._summary = run_disambiguation_queue(
                job_id,
                requests,
                self._catalog_provider,
                self._persistence_sink,
                channel=self.channel,
                concurrency=concurrency,
                cancellation=token,
                settings=self._settings,
            )
        except ReelMatchError as e:
            self._last_error = e
            log_operation_error(logger, e, operation="run_disambiguation_job")
            self.channel.publish(EventNames.ERROR, {"message": e.message})
        except Exception as e:  # noqa: BLE001
            self._last_error = e
            logger.exception("Disambiguation job %s failed", job_id)
            self.channel.publish(EventNames.ERROR, {"message": str(e)})
        finally:
            self.channel.finish()
