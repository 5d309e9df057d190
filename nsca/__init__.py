"""
NSCA - Passive check sender for Python

Builds NSCA protocol packets, optionally XOR-obfuscates them and
delivers them to a Nagios NSCA daemon from a bounded worker pool.
"""

from .common.proto import Severity, ObfuscationMethod, Alert, HandshakeInfo
from .client import (
    Channel,
    Client,
    Dispatcher,
    WorkerPool,
    RetryBuffer,
    ErrorKind,
    SendResult,
    send_alert,
)
from .exceptions import (
    NSCAError,
    InvalidConfigurationError,
    UnsupportedObfuscationMethodError,
    InvalidSeverityError,
    ConnectionError,
    HandshakeError,
    TransmissionError,
    QueueRejectedError,
)

__version__ = "0.3.0"
__all__ = [
    # Protocol
    'Severity',
    'ObfuscationMethod',
    'Alert',
    'HandshakeInfo',
    # Client
    'Channel',
    'Client',
    'Dispatcher',
    'WorkerPool',
    'RetryBuffer',
    'ErrorKind',
    'SendResult',
    'send_alert',
    # Exceptions
    'NSCAError',
    'InvalidConfigurationError',
    'UnsupportedObfuscationMethodError',
    'InvalidSeverityError',
    'ConnectionError',
    'HandshakeError',
    'TransmissionError',
    'QueueRejectedError',
]
