"""Shared pytest fixtures for the brotherlink test suite.

Copyright BINGO Collaboration
Last Modified: 2026-10-18
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence, Union

import pytest

from brotherlink.domain import Command

_ENV_VARS = (
    "CNC_IP_ADDRESS",
    "CNC_PORT",
    "BROTHERLINK_CONNECT_ATTEMPTS",
    "BROTHERLINK_RETRY_DELAY_MS",
    "BROTHERLINK_CONNECT_TIMEOUT_MS",
    "BROTHERLINK_WRITE_TIMEOUT_MS",
    "BROTHERLINK_READ_TIMEOUT_MS",
    "BROTHERLINK_MAX_RESPONSE_BYTES",
    "BROTHERLINK_RECV_BUFFER_SIZE",
    "BROTHERLINK_DEBUG",
    "BROTHERLINK_LOG_DIR",
)

Reply = Union[str, BaseException]


class FakeSocket:
    """Socket double replaying scripted ``recv`` results."""

    def __init__(self, chunks: Iterable[Union[bytes, BaseException]] = ()) -> None:
        self.chunks = list(chunks)
        self.sent = b""
        self.send_error: BaseException | None = None
        self.timeouts: list[float | None] = []
        self.options: dict[tuple[int, int], int] = {}
        self.recv_sizes: list[int] = []
        self.closed = False

    def setsockopt(self, level: int, option: int, value: int) -> None:
        self.options[(level, option)] = value

    def settimeout(self, value: float | None) -> None:
        self.timeouts.append(value)

    def sendall(self, data: bytes) -> None:
        if self.send_error is not None:
            raise self.send_error
        self.sent += data

    def recv(self, size: int) -> bytes:
        self.recv_sizes.append(size)
        if not self.chunks:
            return b""
        item = self.chunks.pop(0)
        if isinstance(item, BaseException):
            raise item
        return item

    def close(self) -> None:
        self.closed = True


class FakeConnector:
    """Connector double failing ``failures`` times before handing out ``sock``."""

    def __init__(
        self,
        sock: FakeSocket | None = None,
        failures: int = 0,
        error: BaseException | None = None,
    ) -> None:
        self.sock = sock or FakeSocket()
        self.failures = failures
        self.error = error or ConnectionRefusedError("Connection refused")
        self.calls: list[tuple[tuple[str, int], float | None]] = []

    def __call__(self, address: tuple[str, int], timeout: float | None) -> FakeSocket:
        self.calls.append((address, timeout))
        if len(self.calls) <= self.failures:
            raise self.error
        return self.sock


class ScriptedTransport:
    """Transport double answering ``LOD`` requests from a script.

    ``script`` maps a file name to a reply or to a sequence of replies
    consumed one per call. A reply that is an exception is raised.
    """

    def __init__(self, script: Mapping[str, Union[Reply, Sequence[Reply]]]) -> None:
        self._script = {
            name: [value] if isinstance(value, (str, BaseException)) else list(value)
            for name, value in script.items()
        }
        self.commands: list[Command] = []

    def send(self, command: Command) -> str:
        self.commands.append(command)
        replies = self._script.get(command.arguments)
        if not replies:
            raise ConnectionRefusedError(f"no scripted reply for {command.arguments}")
        reply = replies.pop(0) if len(replies) > 1 else replies[0]
        if isinstance(reply, BaseException):
            raise reply
        return reply


def wrap(payload: str, echo: str = "LOD") -> str:
    """Wrap ``payload`` the way the control answers a ``LOD`` request."""
    return f"%{echo}\r\n{payload}\r\n05%"


class LogRecorder:
    """``logprintf``-compatible sink keeping ``(level, message)`` pairs."""

    def __init__(self) -> None:
        self.records: list[tuple[int, str]] = []

    def __call__(self, level: int, fmt: str, *args: object) -> None:
        self.records.append((level, fmt % args if args else fmt))

    def messages(self, level: int | None = None) -> list[str]:
        return [msg for lvl, msg in self.records if level is None or lvl == level]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep the host environment out of settings resolution."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def log():
    return LogRecorder()


@pytest.fixture
def fake_socket_cls():
    return FakeSocket


@pytest.fixture
def fake_connector_cls():
    return FakeConnector


@pytest.fixture
def scripted_transport():
    return ScriptedTransport


@pytest.fixture
def wrap_payload():
    return wrap
