"""
NSCA Client Module
Public entry point for sending passive check results.
"""

import logging

from typing import Callable, Optional

from ..common.proto import Severity

from .channel import Channel
from .dispatcher import Dispatcher
from .pool import WorkerPool
from .redelivery import RetryBuffer
from .sender import SendResult


class Client:
    """
    NSCA Client.

    Sends alerts for one channel through a Dispatcher. Sends are
    asynchronous: send() returns as soon as the alert is queued, and
    delivery failures are logged rather than raised.

    Several clients can share one Dispatcher (and so one worker pool);
    a client only shuts down a dispatcher it created itself.

    Example usage:
        channel = Channel(host="localhost", port=5667, service_name="domainBus")
        with Client(channel) as client:
            client.send(Severity.OK, "Everything is peachy-keen")
    """

    def __init__(
        self,
        channel: Channel,
        dispatcher: Optional[Dispatcher] = None,
        startup_message: str = "",
        startup_level=Severity.OK,
        logger: Optional[logging.Logger] = None,
    ):
        self.channel = channel
        self.logger = logger or logging.getLogger(__name__)

        self._owns_dispatcher = dispatcher is None
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher(WorkerPool())

        self._startup_message = startup_message or ""
        self._startup_level = Severity.parse(startup_level)

    @property
    def dispatcher(self) -> Dispatcher:
        return self._dispatcher

    def set_startup_message(self, level, message: str) -> None:
        """Message sent once by start()."""
        self._startup_level = Severity.parse(level)
        self._startup_message = message or ""

    def start(self) -> None:
        """Send the optional startup message, then forget it."""
        if self._startup_message:
            self.logger.info(
                f"Sending startup message to '{self.channel.service_name}' on {self.channel.address}"
            )
            self.send(self._startup_level, self._startup_message)
        self._startup_level = Severity.NO_MESSAGE
        self._startup_message = ""

    def send(self, severity, message: Optional[str]) -> bool:
        """
        Queue an alert for delivery.

        Args:
            severity: Severity, its int code or its name
            message: Free text; None or empty is a no-op

        Returns:
            True if the alert was queued
        """
        queued = self._dispatcher.submit(self.channel, severity, message)

        if self.logger.isEnabledFor(logging.DEBUG):
            if queued:
                self.logger.debug(f"Queued alert for '{self.channel.service_name}'")
            else:
                self.logger.debug(f"Alert for '{self.channel.service_name}' not queued")

        return queued

    def close(self, wait: bool = True) -> None:
        """Shut down the dispatcher if this client created it."""
        if self._owns_dispatcher:
            self._dispatcher.close(wait=wait)
            self.logger.info(f"Closed client for {self.channel.address}")

    @classmethod
    def from_settings(
        cls,
        settings,
        owner: Optional[type] = None,
        on_result: Optional[Callable[[SendResult], None]] = None,
    ) -> 'Client':
        """
        Build channel, worker pool and dispatcher from application settings.

        Raises:
            InvalidConfigurationError: If the settings describe an invalid channel
        """
        channel = Channel.from_settings(settings, owner)

        pool = WorkerPool(
            core_workers=settings.core_workers,
            max_workers=settings.max_workers,
            queue_capacity=settings.queue_capacity,
            keep_alive=settings.keep_alive_seconds,
        )

        retry_buffer = None
        if settings.retry_buffer_size > 0:
            retry_buffer = RetryBuffer(settings.retry_buffer_size)

        dispatcher = Dispatcher(
            pool,
            on_result=on_result,
            retry_buffer=retry_buffer,
            buffer_failed_sends=settings.buffer_failed_sends,
            redelivery_interval=settings.redelivery_interval_seconds,
        )

        client = cls(
            channel,
            dispatcher,
            startup_message=settings.startup_message,
            startup_level=settings.startup_message_level,
        )
        client._owns_dispatcher = True
        return client

    def __enter__(self) -> 'Client':
        """Context manager entry."""
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    def __repr__(self) -> str:
        return f"Client({self.channel!r})"
