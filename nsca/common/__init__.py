"""NSCA Common Package - shared utilities and protocol definitions."""

from .constants import (
    PROTOCOL_VERSION,
    IV_SIZE,
    PACKET_SIZE,
    DEFAULT_PORT,
    DEFAULT_SERVICE_NAME,
    DEFAULT_SOCKET_TIMEOUT_MS,
    MAX_CONNECT_ATTEMPTS,
)
from .proto import (
    Severity,
    ObfuscationMethod,
    HandshakeInfo,
    Alert,
    DecodedAlert,
    encode_alert,
    decode_alert,
    verify_checksum,
    compute_crc,
)
from .obfuscation import transform
from .transport import recv_exact, recv_handshake, send_packet
from .utils import resolve_reporting_host, substitute_names

__all__ = [
    # Constants
    'PROTOCOL_VERSION', 'IV_SIZE', 'PACKET_SIZE', 'DEFAULT_PORT',
    'DEFAULT_SERVICE_NAME', 'DEFAULT_SOCKET_TIMEOUT_MS', 'MAX_CONNECT_ATTEMPTS',
    # Protocol
    'Severity', 'ObfuscationMethod', 'HandshakeInfo', 'Alert', 'DecodedAlert',
    'encode_alert', 'decode_alert', 'verify_checksum', 'compute_crc',
    # Obfuscation
    'transform',
    # Transport
    'recv_exact', 'recv_handshake', 'send_packet',
    # Utils
    'resolve_reporting_host', 'substitute_names',
]
