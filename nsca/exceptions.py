"""
NSCA Exceptions Module
Exception hierarchy for the NSCA sender.
"""


class NSCAError(Exception):
    """Base exception for all NSCA errors."""
    pass


class InvalidConfigurationError(NSCAError, ValueError):
    """Channel or sender configuration is invalid."""
    pass


class UnsupportedObfuscationMethodError(InvalidConfigurationError):
    """Obfuscation method is not one of the supported methods."""

    def __init__(self, method):
        self.method = method
        super().__init__(f"Unsupported obfuscation method: {method!r}")


class InvalidSeverityError(NSCAError, ValueError):
    """Severity value does not map to a transmittable alert level."""

    def __init__(self, value):
        self.value = value
        super().__init__(f"Invalid severity: {value!r}")


class ConnectionError(NSCAError):
    """Connection-related errors."""
    pass


class HandshakeError(ConnectionError):
    """Server handshake (IV + timestamp) could not be read."""
    pass


class TransmissionError(ConnectionError):
    """Packet could not be written to the server."""
    pass


class PoolClosedError(NSCAError, RuntimeError):
    """Worker pool no longer accepts tasks."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Worker pool '{name}' is shut down")


class QueueRejectedError(NSCAError):
    """Worker pool queue is saturated."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"Worker queue is full (capacity {capacity})")
