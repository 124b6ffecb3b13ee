"""Publish/subscribe event channel with replay for late subscribers.

One channel instance carries the events of one kind of long-running job.
Events published while a batch runs are buffered so that an observer that
subscribes after a fast batch has already finished still sees every event,
as long as it subscribes within the grace period.
"""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

from reelmatch.core.disambiguation.cancellation import CancellationToken
from reelmatch.shared.constants import EventChannelDefaults
from reelmatch.shared.errors import ErrorCode, ErrorContext, InfrastructureError
from reelmatch.shared.logging import log_operation_error

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChannelEvent:
    """A single published event."""

    event: str
    data: Any


EventHandler = Callable[[ChannelEvent], None]


class EventChannel:
    """Thread-safe event channel.

    Publishing and subscribing are serialized on one re-entrant lock, so a
    new subscriber receives the replay buffer and is registered before any
    concurrent publish can deliver, and never sees an event twice.

    Args:
        name: Channel name used in logs
        replay_limit: Maximum number of buffered events
        grace_period: Seconds the buffer survives after finish()

    Example:
        >>> channel = EventChannel("disambiguation")
        >>> unsubscribe = channel.subscribe(lambda ev: print(ev.event))
        >>> channel.publish("complete", {"total": 0})
        complete
        >>> unsubscribe()
    """

    def __init__(
        self,
        name: str,
        *,
        replay_limit: int = EventChannelDefaults.REPLAY_LIMIT,
        grace_period: float = EventChannelDefaults.GRACE_PERIOD_SECONDS,
    ) -> None:
        if replay_limit < 1:
            msg = f"replay_limit must be at least 1, got {replay_limit}"
            raise ValueError(msg)
        if grace_period < 0:
            msg = f"grace_period must be non-negative, got {grace_period}"
            raise ValueError(msg)

        self.name = name
        self._grace_period = grace_period
        self._buffer: deque[ChannelEvent] = deque(maxlen=replay_limit)
        self._subscribers: list[EventHandler] = []
        self._lock = threading.RLock()
        self._clear_timer: threading.Timer | None = None
        self._token: CancellationToken | None = None
        self._running = False

    @property
    def running(self) -> bool:
        with self._lock:
            return self._running

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def recent_events(self) -> list[ChannelEvent]:
        """Snapshot of the replay buffer, oldest first."""
        with self._lock:
            return list(self._buffer)

    def publish(self, event: str, data: Any = None) -> None:
        """Buffer an event and deliver it to every subscriber.

        A failing handler is logged and skipped; it never affects other
        subscribers or the publisher.
        """
        channel_event = ChannelEvent(event=event, data=data)
        with self._lock:
            self._buffer.append(channel_event)
            for handler in list(self._subscribers):
                self._deliver(handler, channel_event)

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        """Replay buffered events to the handler, then register it.

        Returns:
            Callable that removes the subscription. Calling it twice is a no-op.
        """
        with self._lock:
            for channel_event in list(self._buffer):
                self._deliver(handler, channel_event)
            self._subscribers.append(handler)

        def unsubscribe() -> None:
            with self._lock:
                if handler in self._subscribers:
                    self._subscribers.remove(handler)

        return unsubscribe

    def reset(self) -> None:
        """Clear the replay buffer and cancel any pending clear."""
        with self._lock:
            self._cancel_timer()
            self._buffer.clear()

    def start(self) -> CancellationToken:
        """Begin a batch: reset the buffer and hand out a fresh token."""
        with self._lock:
            self.reset()
            self._running = True
            self._token = CancellationToken()
            logger.debug("Channel %s started", self.name)
            return self._token

    def cancel(self, reason: str = EventChannelDefaults.CANCEL_REASON) -> bool:
        """Request cancellation of the running batch.

        Returns:
            False when no batch is running
        """
        with self._lock:
            if not self._running or self._token is None:
                return False
            self._token.cancel(reason)
            logger.info("Channel %s cancellation requested: %s", self.name, reason)
            return True

    def finish(self) -> None:
        """End a batch and schedule the buffer to clear after the grace period."""
        with self._lock:
            self._running = False
            self._token = None
            self._cancel_timer()
            timer = threading.Timer(self._grace_period, self._expire_buffer)
            timer.daemon = True
            self._clear_timer = timer
            timer.start()
            logger.debug(
                "Channel %s finished, replay buffer kept for %.1fs",
                self.name,
                self._grace_period,
            )

    def close(self) -> None:
        """Cancel pending timers and drop all subscribers."""
        with self._lock:
            self._cancel_timer()
            self._subscribers.clear()

    def _expire_buffer(self) -> None:
        with self._lock:
            # A new batch may have started since the timer was scheduled
            if self._clear_timer is not None and threading.current_thread() is self._clear_timer:
                self._buffer.clear()
                self._clear_timer = None

    def _cancel_timer(self) -> None:
        if self._clear_timer is not None:
            self._clear_timer.cancel()
            self._clear_timer = None

    def _deliver(self, handler: EventHandler, channel_event: ChannelEvent) -> None:
        try:
            handler(channel_event)
        except Exception as e:  # noqa: BLE001
            log_operation_error(
                logger,
                InfrastructureError(
                    code=ErrorCode.EVENT_HANDLER_FAILED,
                    message=f"Event handler failed on channel {self.name}: {e}",
                    context=ErrorContext(
                        operation="publish_event",
                        additional_data={"channel": self.name, "event": channel_event.event},
                    ),
                    original_error=e,
                ),
                operation="publish_event",
            )
