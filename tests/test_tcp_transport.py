from __future__ import annotations

import socket
import threading

import pytest

from brotherlink.domain import (
    Command,
    ConnectError,
    ConnectionClosedError,
    ConnectionTarget,
    ResponseTimeoutError,
    ResponseTooLargeError,
)
from brotherlink.infrastructure import TcpTransport
from brotherlink.settings import TransportSettings

TARGET = ConnectionTarget(host="10.0.0.25", port=10000)
LOD_MSRRSC = Command(name="LOD", arguments="MSRRSC")


def _transport(connector, log, sleeps=None, clock=lambda: 0.0, **config) -> TcpTransport:
    return TcpTransport(
        TARGET,
        config=TransportSettings(**config),
        connector=connector,
        sleep=(sleeps.append if sleeps is not None else lambda _s: None),
        clock=clock,
        logger=log,
    )


def test_send_writes_frame_and_returns_response(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%LOD MSRRSC\r\nC01,1\r\n\r\n05%"])
    connector = fake_connector_cls(sock)

    response = _transport(connector, log).send(LOD_MSRRSC)

    assert response == "%LOD MSRRSC\r\nC01,1\r\n\r\n05%"
    assert sock.sent == b"%CLOD    MSRRSC    \r\n\r\n03%\r\n"
    assert connector.calls == [(("10.0.0.25", 10000), None)]
    assert sock.closed is True


def test_send_sets_nodelay_and_write_timeout_only(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%X\r\n05%"])
    _transport(fake_connector_cls(sock), log, read_timeout_ms=0).send(LOD_MSRRSC)

    assert sock.options[(socket.IPPROTO_TCP, socket.TCP_NODELAY)] == 1
    assert sock.timeouts == [2.0, None]


def test_send_applies_read_deadline(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%X\r\n05%"])
    _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC)

    assert sock.timeouts == [2.0, 30.0]


def test_send_accumulates_partial_reads(fake_socket_cls, fake_connector_cls, log) -> None:
    chunks = [b"%LO", b"D MSRRSC\r\n", b"C01,0\r\n", b"\r\n0", b"5%"]
    sock = fake_socket_cls(chunks)

    response = _transport(fake_connector_cls(sock), log, recv_buffer_size=512).send(LOD_MSRRSC)

    assert response == "%LOD MSRRSC\r\nC01,0\r\n\r\n05%"
    assert sock.recv_sizes == [512] * 5


def test_send_evaluates_terminator_on_whole_response(fake_socket_cls, fake_connector_cls, log) -> None:
    # the chunk "05" does not start with % on its own
    sock = fake_socket_cls([b"%LOD\r\nC01,0\r\n", b"05", b"%"])

    response = _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC)

    assert response == "%LOD\r\nC01,0\r\n05%"


def test_lone_percent_satisfies_terminator(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%", b"LOD\r\n05%"])

    assert _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC) == "%"


def test_trailing_line_end_is_not_a_terminator(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%LOD\r\nC01,0\r\n05%\r\n"])

    with pytest.raises(ConnectionClosedError):
        _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC)
    assert sock.closed is True


def test_connect_gives_up_after_ten_attempts(fake_connector_cls, log) -> None:
    sleeps: list[float] = []
    connector = fake_connector_cls(failures=100)

    with pytest.raises(ConnectError) as excinfo:
        _transport(connector, log, sleeps).send(LOD_MSRRSC)

    assert len(connector.calls) == 10
    assert sleeps == [0.02] * 9
    assert excinfo.value.attempts == 10
    assert excinfo.value.target == TARGET
    assert isinstance(excinfo.value.__cause__, ConnectionRefusedError)
    assert any("Cannot connect to CNC machine at 10.0.0.25:10000" in m for m in log.messages(0))


@pytest.mark.parametrize("k", [1, 3, 10])
def test_connect_succeeds_on_attempt_k(fake_socket_cls, fake_connector_cls, log, k: int) -> None:
    sleeps: list[float] = []
    sock = fake_socket_cls([b"%X\r\n05%"])
    connector = fake_connector_cls(sock, failures=k - 1)

    assert _transport(connector, log, sleeps).send(LOD_MSRRSC) == "%X\r\n05%"
    assert len(connector.calls) == k
    assert len(sleeps) == k - 1


def test_connect_timeout_is_passed_to_connector(fake_socket_cls, fake_connector_cls, log) -> None:
    connector = fake_connector_cls(fake_socket_cls([b"%X\r\n05%"]))
    _transport(connector, log, connect_timeout_ms=1500).send(LOD_MSRRSC)

    assert connector.calls[0][1] == 1.5


def test_read_error_is_not_retried(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([ConnectionResetError("reset by peer")])
    connector = fake_connector_cls(sock)

    with pytest.raises(ConnectionResetError):
        _transport(connector, log).send(LOD_MSRRSC)

    assert len(connector.calls) == 1
    assert sock.closed is True


def test_write_error_is_not_retried(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls()
    sock.send_error = BrokenPipeError("broken pipe")
    connector = fake_connector_cls(sock)

    with pytest.raises(BrokenPipeError):
        _transport(connector, log).send(LOD_MSRRSC)

    assert len(connector.calls) == 1
    assert sock.closed is True


def test_peer_close_raises(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%LOD\r\nC01"])

    with pytest.raises(ConnectionClosedError):
        _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC)


def test_read_timeout_raises(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%LOD\r\n", socket.timeout("timed out")])

    with pytest.raises(ResponseTimeoutError):
        _transport(fake_connector_cls(sock), log).send(LOD_MSRRSC)
    assert sock.closed is True


def test_read_deadline_spans_trickling_chunks(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%L", b"O", b"D", b"\r\n", b"C01"])
    ticks = iter(range(0, 1000, 10))

    with pytest.raises(ResponseTimeoutError):
        _transport(
            fake_connector_cls(sock), log, clock=lambda: float(next(ticks))
        ).send(LOD_MSRRSC)

    # deadline at 30 s; reads at 10 s and 20 s remaining, then it expires
    assert sock.timeouts == [2.0, 20.0, 10.0]
    assert sock.recv_sizes == [8192, 8192]
    assert sock.closed is True


def test_response_size_limit(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%" + b"A" * 20, b"%"])

    with pytest.raises(ResponseTooLargeError):
        _transport(fake_connector_cls(sock), log, max_response_bytes=10).send(LOD_MSRRSC)
    assert sock.closed is True


def test_response_size_limit_disabled(fake_socket_cls, fake_connector_cls, log) -> None:
    sock = fake_socket_cls([b"%" + b"A" * 20, b"%"])

    response = _transport(fake_connector_cls(sock), log, max_response_bytes=0).send(LOD_MSRRSC)
    assert len(response) == 22


def test_target_resolved_from_environment(monkeypatch, fake_socket_cls, fake_connector_cls, log) -> None:
    monkeypatch.setenv("CNC_IP_ADDRESS", "192.168.1.50")
    monkeypatch.setenv("CNC_PORT", "10001")
    connector = fake_connector_cls(fake_socket_cls([b"%X\r\n05%"]))

    transport = TcpTransport(config=TransportSettings(), connector=connector, logger=log)
    transport.send(LOD_MSRRSC)

    assert connector.calls[0][0] == ("192.168.1.50", 10001)


def test_send_over_loopback() -> None:
    server = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    server.bind(("127.0.0.1", 0))
    server.listen(1)
    port = server.getsockname()[1]
    received: dict[str, bytes] = {}

    def serve() -> None:
        conn, _ = server.accept()
        with conn:
            data = b""
            while not data.endswith(b"%\r\n"):
                chunk = conn.recv(1024)
                if not chunk:
                    break
                data += chunk
            received["frame"] = data
            conn.sendall(b"%LOD MSRRSC\r\n")
            conn.sendall(b"C01,1\r\nC02,0\r\n05%")

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    try:
        transport = TcpTransport(
            ConnectionTarget(host="127.0.0.1", port=port),
            config=TransportSettings(read_timeout_ms=5000),
        )
        response = transport.send(LOD_MSRRSC)
    finally:
        thread.join(timeout=5)
        server.close()

    assert response == "%LOD MSRRSC\r\nC01,1\r\nC02,0\r\n05%"
    assert received["frame"] == b"%CLOD    MSRRSC    \r\n\r\n03%\r\n"
