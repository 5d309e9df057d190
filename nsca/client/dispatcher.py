"""
NSCA Dispatcher Module
Fire-and-forget scheduling of alerts on a worker pool.
"""

import logging
import threading

from dataclasses import dataclass, asdict
from typing import Callable, Dict, Optional

from ..common.constants import DEFAULT_REDELIVERY_INTERVAL, DEFAULT_REDELIVERY_IDLE_PASSES
from ..common.proto import Alert, Severity
from ..exceptions import PoolClosedError, QueueRejectedError

from .channel import Channel
from .pool import WorkerPool
from .redelivery import RetryBuffer, RedeliveryWorker
from .sender import ErrorKind, SendResult, send_alert


logger = logging.getLogger(__name__)


@dataclass
class DispatchStats:
    """Counters of dispatcher activity."""

    submitted: int = 0
    rejected: int = 0
    delivered: int = 0
    failed: int = 0
    buffered: int = 0


class Dispatcher:
    """
    Schedules alert delivery on a shared WorkerPool.

    Best effort, at most once: submit() never blocks beyond queue insertion
    and never raises for delivery problems. Queue rejections and failed
    sends are logged, counted and passed to on_result. No ordering is
    guaranteed between sends, even to the same channel.

    When a retry_buffer is given, rejected submissions (and, with
    buffer_failed_sends, sends that could not connect) are parked and
    replayed later by a background RedeliveryWorker.

    Example usage:
        pool = WorkerPool(core_workers=4, max_workers=8, queue_capacity=100)
        dispatcher = Dispatcher(pool)
        dispatcher.submit(channel, Severity.CRITICAL, "Disk full")
    """

    def __init__(
        self,
        pool: WorkerPool,
        sender: Callable[[Channel, Alert], SendResult] = send_alert,
        on_result: Optional[Callable[[SendResult], None]] = None,
        retry_buffer: Optional[RetryBuffer] = None,
        buffer_failed_sends: bool = False,
        redelivery_interval: float = DEFAULT_REDELIVERY_INTERVAL,
        redelivery_idle_passes: int = DEFAULT_REDELIVERY_IDLE_PASSES,
    ):
        self.pool = pool
        self._sender = sender
        self._on_result = on_result
        self._buffer_failed_sends = buffer_failed_sends
        self._stats = DispatchStats()
        self._stats_lock = threading.Lock()

        self._redelivery: Optional[RedeliveryWorker] = None
        if retry_buffer is not None:
            self._redelivery = RedeliveryWorker(
                retry_buffer,
                self._enqueue,
                interval=redelivery_interval,
                idle_passes=redelivery_idle_passes,
            )

    @property
    def retry_buffer(self) -> Optional[RetryBuffer]:
        return self._redelivery.buffer if self._redelivery is not None else None

    def stats(self) -> Dict[str, int]:
        """Snapshot of the dispatch counters."""
        with self._stats_lock:
            return asdict(self._stats)

    def _count(self, field: str) -> None:
        with self._stats_lock:
            setattr(self._stats, field, getattr(self._stats, field) + 1)

    def submit(self, channel: Channel, severity, message: Optional[str]) -> bool:
        """
        Enqueue an alert for delivery.

        None or empty messages and Severity.NO_MESSAGE are ignored.

        Returns:
            True if the alert was handed to the pool

        Raises:
            InvalidSeverityError: If severity is not a known level
        """
        if not message:
            logger.debug(f"Empty message for '{channel.service_name}', nothing to send")
            return False

        severity = Severity.parse(severity)
        if severity == Severity.NO_MESSAGE:
            logger.debug(f"Nothing to send for '{channel.service_name}'")
            return False

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Preparing to send level {severity.name} message '{message}' to "
                f"'{channel.service_name}' service monitor on {channel.address}"
            )

        return self._enqueue(channel, Alert(severity, message))

    def _enqueue(self, channel: Channel, alert: Alert) -> bool:
        try:
            self.pool.submit(self._deliver, channel, alert)

        except PoolClosedError:
            logger.warning(f"Dispatcher is closed, dropping alert for '{channel.service_name}'")
            return False

        except QueueRejectedError as e:
            self._count("rejected")
            buffered = self._park(channel, alert)
            logger.warning(
                f"Alert for '{channel.service_name}' rejected: {e}"
                f"{' (buffered for redelivery)' if buffered else ''}"
            )
            self._report(SendResult(channel, alert, ErrorKind.QUEUE_REJECTED, str(e)))
            return False

        self._count("submitted")
        return True

    def _deliver(self, channel: Channel, alert: Alert) -> None:
        try:
            result = self._sender(channel, alert)
        except Exception as e:
            logger.error(f"Sender raised for {channel.address}: {e}", exc_info=True)
            result = SendResult(channel, alert, ErrorKind.INTERNAL, str(e))

        if not isinstance(result, SendResult):
            result = SendResult(
                channel, alert, ErrorKind.INTERNAL,
                f"Sender returned {type(result).__name__}, expected SendResult"
            )

        if result.success:
            self._count("delivered")
            logger.debug(f"Alert delivered to {channel.address} ({channel.service_name})")
        else:
            self._count("failed")
            logger.warning(
                f"Alert to {channel.address} ({channel.service_name}) abandoned: "
                f"{result.error_kind.value} error: {result.error}"
            )
            if self._buffer_failed_sends and result.error_kind == ErrorKind.CONNECTION:
                self._park(channel, alert)

        self._report(result)

    def _park(self, channel: Channel, alert: Alert) -> bool:
        if self._redelivery is None:
            return False

        if not self._redelivery.buffer.offer(channel, alert):
            logger.debug(f"Retry buffer full, abandoning alert '{alert.message}'")
            return False

        self._count("buffered")
        self._redelivery.ensure_running()
        return True

    def _report(self, result: SendResult) -> None:
        if self._on_result is None:
            return
        try:
            self._on_result(result)
        except Exception as e:
            logger.error(f"Result callback failed: {e}")

    def flush(self) -> int:
        """Replay buffered alerts immediately."""
        if self._redelivery is None:
            return 0
        return self._redelivery.flush()

    def close(self, wait: bool = True) -> None:
        """Stop redelivery and shut the pool down."""
        if self._redelivery is not None:
            self._redelivery.stop()
        self.pool.shutdown(wait=wait)
