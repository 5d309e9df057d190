"""
NSCA Transport Module
Synchronous socket I/O operations for the NSCA protocol.
"""

import socket
import struct

from .constants import IV_SIZE, TIMESTAMP_SIZE
from .proto import HandshakeInfo
from ..exceptions import (
    ConnectionError as NSCAConnectionError,
    HandshakeError,
    TransmissionError,
)


def recv_exact(sock: socket.socket, size: int) -> bytes:
    """
    Receive exact number of bytes from socket.

    Args:
        sock: Socket to read from
        size: Exact number of bytes to receive

    Returns:
        Received bytes

    Raises:
        NSCAConnectionError: If connection is closed before receiving all bytes
    """
    buffer = bytearray(size)
    view = memoryview(buffer)
    received = 0

    while received < size:
        chunk_size = sock.recv_into(view[received:], size - received)
        if chunk_size == 0:
            raise NSCAConnectionError(
                f"Connection closed while reading (got {received}/{size} bytes)"
            )
        received += chunk_size

    return bytes(buffer)


def recv_handshake(sock: socket.socket) -> HandshakeInfo:
    """
    Read the server handshake: 128 byte IV then a signed 32-bit timestamp.

    Raises:
        HandshakeError: On a short read or timeout
    """
    try:
        iv = recv_exact(sock, IV_SIZE)
        timestamp = struct.unpack('>i', recv_exact(sock, TIMESTAMP_SIZE))[0]
    except socket.timeout as e:
        raise HandshakeError(f"Timed out reading handshake: {e}") from e
    except (NSCAConnectionError, OSError) as e:
        raise HandshakeError(f"Failed to read handshake: {e}") from e

    return HandshakeInfo(iv=iv, timestamp=timestamp)


def send_packet(sock: socket.socket, data: bytes) -> None:
    """
    Send a packet over socket in a single write.

    Raises:
        TransmissionError: If the write fails
    """
    try:
        sock.sendall(data)
    except (BrokenPipeError, OSError) as e:
        raise TransmissionError(f"Failed to send packet: {e}") from e
