"""
NSCA Protocol Module
Defines the binary packet format sent to the NSCA daemon.
"""

import struct
import zlib

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Optional

from .constants import (
    PROTOCOL_VERSION,
    IV_SIZE,
    CRC_OFFSET,
    TIMESTAMP_OFFSET,
    SEVERITY_OFFSET,
    HOST_OFFSET,
    HOST_FIELD_SIZE,
    SERVICE_OFFSET,
    SERVICE_FIELD_SIZE,
    MESSAGE_OFFSET,
    MESSAGE_FIELD_SIZE,
    PACKET_SIZE,
    UNKNOWN_VALUE,
    NULL_MESSAGE,
)
from ..exceptions import (
    HandshakeError,
    InvalidSeverityError,
    UnsupportedObfuscationMethodError,
)


class Severity(IntEnum):
    """Nagios return codes."""
    NO_MESSAGE = -1  # nothing queued, never transmitted
    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @classmethod
    def parse(cls, value: Any) -> 'Severity':
        """
        Convert an int code or a level name to a Severity.

        Raises:
            InvalidSeverityError: If the value is not a known level
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            name = value.strip().upper()
            if name == "WARN":
                name = "WARNING"
            if name in cls.__members__:
                return cls[name]
            try:
                value = int(name)
            except ValueError:
                raise InvalidSeverityError(value) from None

        if isinstance(value, bool) or not isinstance(value, int):
            raise InvalidSeverityError(value)

        try:
            return cls(value)
        except ValueError:
            raise InvalidSeverityError(value) from None


class ObfuscationMethod(IntEnum):
    """Packet obfuscation methods understood by the daemon."""
    NONE = 0
    XOR = 1

    @classmethod
    def parse(cls, value: Any) -> 'ObfuscationMethod':
        """
        Convert a configured value to an ObfuscationMethod.

        Raises:
            UnsupportedObfuscationMethodError: For any unknown value
        """
        if isinstance(value, cls):
            return value

        if isinstance(value, str):
            name = value.strip().upper()
            if name in cls.__members__:
                return cls[name]
            try:
                value = int(name)
            except ValueError:
                raise UnsupportedObfuscationMethodError(value) from None

        if isinstance(value, bool) or not isinstance(value, int):
            raise UnsupportedObfuscationMethodError(value)

        try:
            return cls(value)
        except ValueError:
            raise UnsupportedObfuscationMethodError(value) from None


@dataclass(frozen=True)
class HandshakeInfo:
    """Initialization vector and timestamp sent by the server on connect."""

    iv: bytes
    timestamp: int

    def __post_init__(self):
        if len(self.iv) != IV_SIZE:
            raise HandshakeError(f"IV must be {IV_SIZE} bytes, got {len(self.iv)}")


@dataclass(frozen=True)
class Alert:
    """A single passive check result."""

    severity: Severity
    message: Optional[str]


@dataclass(frozen=True)
class DecodedAlert:
    """Fields parsed back out of a clear-text packet."""

    version: int
    crc: int
    timestamp: int
    severity: int
    host: str
    service: str
    message: str


def _fixed_field(value: bytes, size: int) -> bytes:
    """Truncate or zero-pad to exactly size bytes."""
    return value[:size].ljust(size, b'\x00')


def _strip_newlines(message: str) -> str:
    return message.replace("\r", "").replace("\n", "")


def compute_crc(buffer: bytes) -> int:
    """CRC-32 of the buffer with the checksum field zeroed."""
    data = bytearray(buffer)
    data[CRC_OFFSET:CRC_OFFSET + 4] = b'\x00\x00\x00\x00'
    return zlib.crc32(bytes(data)) & 0xFFFFFFFF


def encode_alert(channel, handshake: HandshakeInfo, alert: Alert) -> bytes:
    """
    Build the clear-text packet for an alert.

    Binary format (big-endian):
    +---------+--------+-----------+----------+---------+----------+----------+
    | VERSION | CRC32  | TIMESTAMP | SEVERITY | HOST    | SERVICE  | MESSAGE  |
    | 4 bytes | 4 bytes| 4 bytes   | 4 bytes  | 64 bytes| 128 bytes| 512 bytes|
    +---------+--------+-----------+----------+---------+----------+----------+

    VERSION and SEVERITY only use their first 2 bytes.

    Args:
        channel: Channel supplying reporting host and service name
        handshake: Handshake read from the server
        alert: Alert to encode

    Returns:
        PACKET_SIZE bytes with the checksum filled in

    Raises:
        InvalidSeverityError: If the severity is not transmittable
    """
    severity = Severity.parse(alert.severity)
    if severity == Severity.NO_MESSAGE:
        raise InvalidSeverityError(severity)

    host = channel.reporting_host or UNKNOWN_VALUE
    service = channel.service_name or UNKNOWN_VALUE
    message = NULL_MESSAGE if alert.message is None else _strip_newlines(alert.message)

    buffer = bytearray(PACKET_SIZE)
    struct.pack_into('>H', buffer, 0, PROTOCOL_VERSION)
    struct.pack_into('>i', buffer, TIMESTAMP_OFFSET, handshake.timestamp)
    struct.pack_into('>H', buffer, SEVERITY_OFFSET, int(severity))
    buffer[HOST_OFFSET:SERVICE_OFFSET] = _fixed_field(host.encode('utf-8'), HOST_FIELD_SIZE)
    buffer[SERVICE_OFFSET:MESSAGE_OFFSET] = _fixed_field(service.encode('utf-8'), SERVICE_FIELD_SIZE)
    buffer[MESSAGE_OFFSET:PACKET_SIZE] = _fixed_field(message.encode('utf-8'), MESSAGE_FIELD_SIZE)

    # Checksum field is still zero at this point
    crc = zlib.crc32(bytes(buffer)) & 0xFFFFFFFF
    struct.pack_into('>I', buffer, CRC_OFFSET, crc)

    return bytes(buffer)


def _text_field(buffer: bytes, start: int, size: int) -> str:
    return buffer[start:start + size].split(b'\x00', 1)[0].decode('utf-8', errors='replace')


def decode_alert(buffer: bytes) -> DecodedAlert:
    """Parse a clear-text packet."""
    if len(buffer) != PACKET_SIZE:
        raise ValueError(f"Packet must be {PACKET_SIZE} bytes, got {len(buffer)}")

    return DecodedAlert(
        version=struct.unpack_from('>H', buffer, 0)[0],
        crc=struct.unpack_from('>I', buffer, CRC_OFFSET)[0],
        timestamp=struct.unpack_from('>i', buffer, TIMESTAMP_OFFSET)[0],
        severity=struct.unpack_from('>H', buffer, SEVERITY_OFFSET)[0],
        host=_text_field(buffer, HOST_OFFSET, HOST_FIELD_SIZE),
        service=_text_field(buffer, SERVICE_OFFSET, SERVICE_FIELD_SIZE),
        message=_text_field(buffer, MESSAGE_OFFSET, MESSAGE_FIELD_SIZE),
    )


def verify_checksum(buffer: bytes) -> bool:
    """Check the embedded CRC-32 of a clear-text packet."""
    if len(buffer) != PACKET_SIZE:
        return False
    return struct.unpack_from('>I', buffer, CRC_OFFSET)[0] == compute_crc(buffer)
