"""
NSCA Redelivery Module
Best-effort replay of alerts the dispatcher could not hand to a worker.
"""

import logging
import threading

from collections import deque
from typing import Callable, List, Optional, Tuple

from ..common.constants import (
    DEFAULT_RETRY_BUFFER_SIZE,
    DEFAULT_REDELIVERY_INTERVAL,
    DEFAULT_REDELIVERY_IDLE_PASSES,
)
from ..common.proto import Alert

from .channel import Channel


logger = logging.getLogger(__name__)

Entry = Tuple[Channel, Alert]


class RetryBuffer:
    """Thread-safe bounded FIFO of (channel, alert) pairs."""

    def __init__(self, capacity: int = DEFAULT_RETRY_BUFFER_SIZE):
        if capacity < 1:
            raise ValueError(f"capacity must be >= 1, got {capacity}")
        self.capacity = capacity
        self._entries: deque = deque()
        self._lock = threading.Lock()

    def offer(self, channel: Channel, alert: Alert) -> bool:
        """Append an entry; returns False (entry dropped) when full."""
        with self._lock:
            if len(self._entries) >= self.capacity:
                return False
            self._entries.append((channel, alert))
            return True

    def drain(self, limit: Optional[int] = None) -> List[Entry]:
        """Remove and return up to limit entries, oldest first."""
        with self._lock:
            count = len(self._entries) if limit is None else min(limit, len(self._entries))
            return [self._entries.popleft() for _ in range(count)]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class RedeliveryWorker:
    """
    Background thread replaying a RetryBuffer.

    Every interval seconds the buffer is drained (at most capacity entries
    per pass) into replay. After idle_passes consecutive empty passes the
    thread exits; ensure_running() restarts it when new entries arrive.
    """

    def __init__(
        self,
        buffer: RetryBuffer,
        replay: Callable[[Channel, Alert], object],
        interval: float = DEFAULT_REDELIVERY_INTERVAL,
        idle_passes: int = DEFAULT_REDELIVERY_IDLE_PASSES,
    ):
        self.buffer = buffer
        self.interval = interval
        self.idle_passes = idle_passes
        self._replay = replay
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def ensure_running(self) -> None:
        with self._lock:
            if self._stop.is_set():
                return
            if self._thread is not None and self._thread.is_alive():
                return
            self._thread = threading.Thread(
                target=self._run,
                name="nsca-redelivery",
                daemon=True,
            )
            self._thread.start()

    def flush(self) -> int:
        """Replay buffered entries now; returns how many were replayed."""
        entries = self.buffer.drain(self.buffer.capacity)
        for channel, alert in entries:
            try:
                self._replay(channel, alert)
            except Exception as e:
                logger.warning(f"Redelivery attempt failed ... {e}")
        if entries:
            logger.debug(f"Replayed {len(entries)} buffered alerts")
        return len(entries)

    def _run(self) -> None:
        idle = 0
        while idle < self.idle_passes:
            if self._stop.wait(self.interval):
                return
            if self.flush():
                idle = 0
            else:
                idle += 1

        logger.debug("Redelivery thread idle, exiting")

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        with self._lock:
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)
