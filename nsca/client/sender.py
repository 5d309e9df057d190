"""
NSCA Sender Module
Delivers one alert over one connection.
"""

import logging

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from ..common.obfuscation import transform
from ..common.proto import Alert, encode_alert
from ..exceptions import HandshakeError, TransmissionError, ConnectionError as NSCAConnectionError

from .channel import Channel
from .connection import ClientConnection


logger = logging.getLogger(__name__)


class ErrorKind(Enum):
    """Outcome of a single send."""
    NONE = "none"
    CONNECTION = "connection"
    HANDSHAKE = "handshake"
    TRANSMISSION = "transmission"
    QUEUE_REJECTED = "queue_rejected"
    INTERNAL = "internal"


@dataclass(frozen=True)
class SendResult:
    """Per-send outcome reported by the dispatcher."""

    channel: Channel
    alert: Alert
    error_kind: ErrorKind = ErrorKind.NONE
    error: Optional[str] = None
    attempts: int = 0

    @property
    def success(self) -> bool:
        return self.error_kind == ErrorKind.NONE


def send_alert(channel: Channel, alert: Alert) -> SendResult:
    """
    Connect, read the handshake, encode, obfuscate, write and close.

    Delivery failures are returned as a SendResult, not raised.
    UnsupportedObfuscationMethodError is a defect and propagates.
    """
    connection = ClientConnection(channel.host, channel.port, timeout=channel.timeout)

    try:
        connection.connect()
    except NSCAConnectionError as e:
        return SendResult(channel, alert, ErrorKind.CONNECTION, str(e), connection.connect_attempts)

    try:
        handshake = connection.read_handshake()

        packet = encode_alert(channel, handshake, alert)
        packet = transform(channel.obfuscation_method, packet, handshake.iv, channel.shared_secret)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                f"Writing {len(packet)} bytes to {channel.address} "
                f"(timestamp={handshake.timestamp}, obfuscation={channel.obfuscation_method.name})"
            )
        connection.write(packet)

    except HandshakeError as e:
        return SendResult(channel, alert, ErrorKind.HANDSHAKE, str(e), connection.connect_attempts)

    except TransmissionError as e:
        return SendResult(channel, alert, ErrorKind.TRANSMISSION, str(e), connection.connect_attempts)

    finally:
        connection.close()

    return SendResult(channel, alert, attempts=connection.connect_attempts)
