"""Shared fixtures: a threaded fake NSCA daemon and an unused port."""

import socket
import struct
import threading

from typing import List, Optional

import pytest

from nsca.common.constants import IV_SIZE, PACKET_SIZE


DEFAULT_IV = bytes((i * 7 + 3) % 256 for i in range(IV_SIZE))
DEFAULT_TIMESTAMP = 1_700_000_000


class FakeNSCAServer:
    """
    Minimal NSCA daemon.

    Sends `handshake` on every connection, then reads one packet of
    PACKET_SIZE bytes (unless read_packet is False) and records it.
    With hold=True the connection is kept open without reading until
    the server is closed.
    """

    def __init__(
        self,
        iv: bytes = DEFAULT_IV,
        timestamp: int = DEFAULT_TIMESTAMP,
        handshake: Optional[bytes] = None,
        read_packet: bool = True,
        hold: bool = False,
        family: int = socket.AF_INET,
    ):
        self.iv = iv
        self.timestamp = timestamp
        self.handshake = handshake if handshake is not None else iv + struct.pack('>i', timestamp)
        self.read_packet = read_packet
        self.hold = hold

        self.packets: List[bytes] = []
        self.connections = 0

        self._sock = socket.socket(family, socket.SOCK_STREAM)
        self._sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        self._sock.bind(("::1" if family == socket.AF_INET6 else "127.0.0.1", 0))
        self._sock.listen(64)
        self._sock.settimeout(0.1)

        self.host, self.port = self._sock.getsockname()[:2]

        self._running = threading.Event()
        self._stopped = threading.Event()
        self._cond = threading.Condition()
        self._thread = threading.Thread(target=self._accept_loop, daemon=True)

    def start(self) -> 'FakeNSCAServer':
        self._running.set()
        self._thread.start()
        return self

    def _accept_loop(self) -> None:
        while self._running.is_set():
            try:
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError:
                break
            threading.Thread(target=self._handle, args=(conn,), daemon=True).start()

    def _handle(self, conn: socket.socket) -> None:
        with conn:
            conn.settimeout(5.0)
            with self._cond:
                self.connections += 1

            if self.handshake:
                conn.sendall(self.handshake)

            if self.hold:
                self._stopped.wait(5.0)
                return

            if not self.read_packet:
                return

            data = bytearray()
            try:
                while len(data) < PACKET_SIZE:
                    chunk = conn.recv(PACKET_SIZE - len(data))
                    if not chunk:
                        break
                    data.extend(chunk)
            except OSError:
                pass

            with self._cond:
                if data:
                    self.packets.append(bytes(data))
                self._cond.notify_all()

    def wait_for_packets(self, count: int, timeout: float = 5.0) -> bool:
        with self._cond:
            return self._cond.wait_for(lambda: len(self.packets) >= count, timeout=timeout)

    def close(self) -> None:
        self._stopped.set()
        self._running.clear()
        self._sock.close()
        if self._thread.is_alive():
            self._thread.join(2.0)


@pytest.fixture
def make_server():
    """Factory for fake daemons; all are closed after the test."""
    servers = []

    def factory(**kwargs) -> FakeNSCAServer:
        server = FakeNSCAServer(**kwargs).start()
        servers.append(server)
        return server

    yield factory

    for server in servers:
        server.close()


@pytest.fixture
def nsca_server(make_server) -> FakeNSCAServer:
    return make_server()


@pytest.fixture
def refused_port() -> int:
    """A local port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port
