"""
NSCA Worker Pool Module
Bounded thread pool used to deliver alerts in the background.
"""

import itertools
import logging
import queue
import threading

from typing import Callable, Optional, Set

from ..common.constants import (
    DEFAULT_CORE_WORKERS,
    DEFAULT_MAX_WORKERS,
    DEFAULT_QUEUE_CAPACITY,
    DEFAULT_KEEP_ALIVE,
)
from ..exceptions import InvalidConfigurationError, PoolClosedError, QueueRejectedError


logger = logging.getLogger(__name__)

_STOP = object()


class WorkerPool:
    """
    Fixed-size worker pool draining a bounded FIFO queue.

    Core workers are started on demand and live until shutdown. When the
    queue is full, extra workers (up to max_workers) are started and exit
    after keep_alive idle seconds. Beyond that, submissions are rejected
    without blocking.

    Thread-safe: can be shared by any number of channels and threads.
    """

    def __init__(
        self,
        core_workers: int = DEFAULT_CORE_WORKERS,
        max_workers: int = DEFAULT_MAX_WORKERS,
        queue_capacity: int = DEFAULT_QUEUE_CAPACITY,
        keep_alive: float = DEFAULT_KEEP_ALIVE,
        name: str = "nsca-worker",
    ):
        if core_workers < 1:
            raise InvalidConfigurationError(f"core_workers must be >= 1, got {core_workers}")
        if max_workers < core_workers:
            raise InvalidConfigurationError(
                f"max_workers ({max_workers}) must be >= core_workers ({core_workers})"
            )
        if queue_capacity < 1:
            raise InvalidConfigurationError(f"queue_capacity must be >= 1, got {queue_capacity}")

        self.core_workers = core_workers
        self.max_workers = max_workers
        self.queue_capacity = queue_capacity
        self.keep_alive = keep_alive
        self.name = name

        self._queue: queue.Queue = queue.Queue(maxsize=queue_capacity)
        self._lock = threading.Lock()
        self._workers: Set[threading.Thread] = set()
        self._core_running = 0
        self._shutdown = False
        self._ids = itertools.count(1)

        # Tasks submitted but not yet finished
        self._pending = 0
        self._idle = threading.Condition(self._lock)

    @property
    def closed(self) -> bool:
        with self._lock:
            return self._shutdown

    @property
    def size(self) -> int:
        """Number of live worker threads."""
        with self._lock:
            return len(self._workers)

    @property
    def queued(self) -> int:
        return self._queue.qsize()

    def submit(self, fn: Callable, *args) -> None:
        """
        Schedule fn(*args) on a worker.

        Raises:
            QueueRejectedError: If the queue is full and no worker can be added
            PoolClosedError: If the pool was shut down
        """
        task = (fn, args)

        with self._lock:
            if self._shutdown:
                raise PoolClosedError(self.name)

            if self._core_running < self.core_workers:
                self._start_worker(core=True)

            try:
                self._queue.put_nowait(task)
            except queue.Full:
                if len(self._workers) >= self.max_workers:
                    raise QueueRejectedError(self.queue_capacity)
                self._start_worker(core=False, first_task=task)

            self._pending += 1

    def _start_worker(self, core: bool, first_task=None) -> None:
        # Caller holds self._lock
        thread = threading.Thread(
            target=self._worker_loop,
            args=(core, first_task),
            name=f"{self.name}-{next(self._ids)}",
            daemon=True,
        )
        self._workers.add(thread)
        if core:
            self._core_running += 1
        thread.start()

    def _worker_loop(self, core: bool, task) -> None:
        current = threading.current_thread()
        timeout = None if core else self.keep_alive

        try:
            while True:
                if task is None:
                    try:
                        task = self._queue.get(timeout=timeout)
                    except queue.Empty:
                        return

                if task is _STOP:
                    return

                fn, args = task
                task = None
                try:
                    fn(*args)
                except Exception as e:
                    logger.error(f"Unhandled error in {current.name}: {e}", exc_info=True)
                finally:
                    with self._lock:
                        self._pending -= 1
                        if self._pending == 0:
                            self._idle.notify_all()
        finally:
            with self._lock:
                self._workers.discard(current)
                if core:
                    self._core_running -= 1

    def join(self, timeout: Optional[float] = None) -> bool:
        """
        Wait until every submitted task has finished.

        Returns:
            True if the pool is idle, False on timeout
        """
        with self._lock:
            return self._idle.wait_for(lambda: self._pending == 0, timeout=timeout)

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting tasks; queued tasks are still executed."""
        with self._lock:
            first_call = not self._shutdown
            self._shutdown = True
            workers = list(self._workers)

        if first_call:
            logger.debug(f"Shutting down worker pool '{self.name}' ({len(workers)} workers)")
            for _ in workers:
                self._queue.put(_STOP)

        if wait:
            for thread in workers:
                if thread is not threading.current_thread():
                    thread.join()

    def __enter__(self) -> 'WorkerPool':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)

    def __repr__(self) -> str:
        return (
            f"WorkerPool({self.name!r}, workers={self.size}/{self.max_workers}, "
            f"queued={self.queued}/{self.queue_capacity})"
        )
