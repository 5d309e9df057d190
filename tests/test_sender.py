"""Tests for end-to-end delivery of a single alert."""

from nsca.client.channel import Channel
from nsca.client.sender import ErrorKind, send_alert
from nsca.common.obfuscation import transform
from nsca.common.proto import Alert, ObfuscationMethod, Severity, decode_alert, verify_checksum


def _channel(server, **kwargs) -> Channel:
    return Channel(
        host=server.host,
        port=server.port,
        service_name=kwargs.pop("service_name", "domainBus"),
        reporting_host="192.0.2.7",
        socket_timeout_ms=2000,
        **kwargs,
    )


def test_clear_text_delivery(nsca_server):
    result = send_alert(_channel(nsca_server), Alert(Severity.OK, "Everything is peachy-keen"))

    assert result.success
    assert result.error_kind is ErrorKind.NONE
    assert result.attempts == 1
    assert nsca_server.wait_for_packets(1)

    packet = nsca_server.packets[0]
    assert len(packet) == 720
    assert verify_checksum(packet)

    decoded = decode_alert(packet)
    assert decoded.severity == 0
    assert decoded.message == "Everything is peachy-keen"
    assert decoded.service == "domainBus"
    assert decoded.host == "192.0.2.7"
    assert decoded.timestamp == nsca_server.timestamp


def test_xor_delivery(nsca_server):
    channel = _channel(nsca_server, obfuscation_method=ObfuscationMethod.XOR, shared_secret="asdf")

    result = send_alert(channel, Alert(Severity.CRITICAL, "Test critical message"))

    assert result.success
    assert nsca_server.wait_for_packets(1)

    received = nsca_server.packets[0]
    assert not verify_checksum(received)

    packet = transform(ObfuscationMethod.XOR, received, nsca_server.iv, "asdf")
    assert verify_checksum(packet)
    assert decode_alert(packet).message == "Test critical message"
    assert decode_alert(packet).severity == 2


def test_connection_refused(refused_port):
    channel = Channel(host="127.0.0.1", port=refused_port, service_name="svc", socket_timeout_ms=1000)

    result = send_alert(channel, Alert(Severity.WARNING, "unreachable"))

    assert not result.success
    assert result.error_kind is ErrorKind.CONNECTION
    assert result.attempts == 3
    assert result.error


def test_short_handshake_writes_nothing(make_server):
    server = make_server(handshake=b'\x01' * 10)

    result = send_alert(_channel(server), Alert(Severity.OK, "never sent"))

    assert result.error_kind is ErrorKind.HANDSHAKE
    server.wait_for_packets(1, timeout=0.5)
    assert server.packets == []
