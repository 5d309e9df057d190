"""
NSCA Client Connection Module
Single-use connection to the NSCA daemon.
"""

import logging
import socket

from enum import Enum
from typing import Optional

from ..common.constants import DEFAULT_PORT, MAX_CONNECT_ATTEMPTS
from ..common.proto import HandshakeInfo
from ..common.transport import recv_handshake, send_packet
from ..exceptions import ConnectionError as NSCAConnectionError, HandshakeError


logger = logging.getLogger(__name__)


class ConnectionState(Enum):
    """Lifecycle of a single delivery connection."""
    IDLE = "idle"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    HANDSHAKE_READ = "handshake_read"
    SENDING = "sending"
    CLOSED = "closed"
    FAILED = "failed"


class ClientConnection:
    """
    One TCP connection carrying exactly one packet.

    IDLE -> CONNECTING -> CONNECTED -> HANDSHAKE_READ -> SENDING -> CLOSED,
    with FAILED reachable from any non-terminal state. The socket is closed
    on every exit path when used as a context manager.

    Example usage:
        with ClientConnection("nagios.local", 5667, timeout=5.0) as conn:
            handshake = conn.read_handshake()
            conn.write(build_packet(handshake))
    """

    def __init__(
        self,
        host: str,
        port: int = DEFAULT_PORT,
        timeout: Optional[float] = None,
        max_attempts: int = MAX_CONNECT_ATTEMPTS,
    ):
        self._host = host
        self._port = port
        self._timeout = timeout
        self._max_attempts = max_attempts

        self._socket: Optional[socket.socket] = None
        self._state = ConnectionState.IDLE
        self._sent = False
        self.connect_attempts = 0

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def state(self) -> ConnectionState:
        return self._state

    def _open_socket(self) -> socket.socket:
        """Connect to the first reachable address (IPv4 or IPv6) of the host."""
        last_error: Optional[OSError] = None

        for family, sock_type, proto, _, address in socket.getaddrinfo(
            self._host, self._port, socket.AF_UNSPEC, socket.SOCK_STREAM
        ):
            sock = socket.socket(family, sock_type, proto)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1)
                sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
                sock.settimeout(self._timeout)
                sock.connect(address)
                return sock
            except OSError as e:
                sock.close()
                last_error = e

        raise last_error or OSError(f"No addresses found for {self._host}")

    def connect(self) -> None:
        """
        Establish connection to the daemon.

        Raises:
            NSCAConnectionError: If every attempt fails
        """
        if self._state != ConnectionState.IDLE:
            raise NSCAConnectionError(f"Cannot connect from state {self._state.value}")

        self._state = ConnectionState.CONNECTING
        last_error: Optional[Exception] = None

        while self.connect_attempts < self._max_attempts:
            self.connect_attempts += 1
            try:
                self._socket = self._open_socket()
                self._state = ConnectionState.CONNECTED
                return
            except OSError as e:
                last_error = e
                logger.debug(
                    f"Connect attempt {self.connect_attempts}/{self._max_attempts} "
                    f"to {self._host}:{self._port} failed: {e}"
                )

        self._state = ConnectionState.FAILED
        raise NSCAConnectionError(
            f"Failed to connect to {self._host}:{self._port} "
            f"after {self.connect_attempts} attempts: {last_error}"
        )

    def read_handshake(self) -> HandshakeInfo:
        """
        Read the IV and server timestamp.

        Raises:
            HandshakeError: On a short read or timeout
        """
        if self._state != ConnectionState.CONNECTED or self._socket is None:
            raise HandshakeError(f"Cannot read handshake from state {self._state.value}")

        try:
            handshake = recv_handshake(self._socket)
        except HandshakeError:
            self._state = ConnectionState.FAILED
            raise

        self._state = ConnectionState.HANDSHAKE_READ
        return handshake

    def write(self, data: bytes) -> None:
        """
        Write the final packet in a single write.

        Raises:
            TransmissionError: If the write fails
        """
        if self._state != ConnectionState.HANDSHAKE_READ or self._socket is None:
            raise NSCAConnectionError(f"Cannot send from state {self._state.value}")

        self._state = ConnectionState.SENDING
        try:
            send_packet(self._socket, data)
        except NSCAConnectionError:
            self._state = ConnectionState.FAILED
            raise

        self._sent = True

    def close(self) -> None:
        """Release the socket."""
        if self._socket is not None:
            try:
                self._socket.close()
            except OSError as e:
                logger.debug(f"Error while closing socket: {e}")
            self._socket = None

        if self._sent:
            self._state = ConnectionState.CLOSED
        elif self._state != ConnectionState.IDLE:
            self._state = ConnectionState.FAILED

    def __enter__(self) -> 'ClientConnection':
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"ClientConnection({self._host}:{self._port}, state={self._state.value})"
