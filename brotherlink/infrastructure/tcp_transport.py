"""brotherlink/infrastructure/tcp_transport.py

Blocking TCP transport for the Brother CNC file protocol.

Each :meth:`TcpTransport.send` call owns a fresh socket: connect with a
bounded retry, write one frame, read until the response is complete and
close. Nothing is kept between calls.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

import socket
import time
from typing import Callable, Optional

from ..domain import (
    Command,
    ConnectError,
    ConnectionClosedError,
    ConnectionTarget,
    ResponseTimeoutError,
    ResponseTooLargeError,
    RetryExhaustedError,
)
from ..logging_utils import LogFn, logprintf
from ..protocol.framing import decode_response, encode_frame, is_complete_response
from ..settings import CncSettings, TransportSettings
from .retry import RetryPolicy

Connector = Callable[[tuple[str, int], Optional[float]], socket.socket]


def create_connection(address: tuple[str, int], timeout: Optional[float]) -> socket.socket:
    """Open a TCP connection; ``timeout=None`` blocks until the OS gives up."""
    return socket.create_connection(address, timeout=timeout)


class TcpTransport:
    """Send single commands to the control over TCP.

    Parameters
    ----------
    target:
        Control address. When omitted it is read from the environment
        (``CNC_IP_ADDRESS``/``CNC_PORT``) on every call.
    config:
        Retry, timeout and size limits; defaults to
        :class:`~brotherlink.settings.TransportSettings` from the environment.
    connector:
        Callable opening the socket, replaceable in tests.
    sleep:
        Sleep function used between connect attempts.
    clock:
        Monotonic clock the read deadline is measured against.
    logger:
        Diagnostic sink with the :func:`~brotherlink.logging_utils.logprintf`
        signature.
    """

    def __init__(
        self,
        target: ConnectionTarget | None = None,
        *,
        config: TransportSettings | None = None,
        connector: Connector = create_connection,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
        logger: LogFn = logprintf,
    ) -> None:
        self._target = target
        self._config = config or TransportSettings()
        self._connector = connector
        self._sleep = sleep
        self._clock = clock
        self._logger = logger

    @property
    def config(self) -> TransportSettings:
        return self._config

    def resolve_target(self) -> ConnectionTarget:
        if self._target is not None:
            return self._target
        return CncSettings().target()

    def send(self, command: Command) -> str:
        """Exchange ``command`` with the control and return the raw response.

        Connection failures are retried; anything that fails after the
        connection is up propagates at once, since the control may already
        have acted on the command.

        Raises
        ------
        ConnectError
            The connect attempt budget was exhausted.
        ConnectionClosedError, ResponseTimeoutError, ResponseTooLargeError
            The response could not be completed.
        OSError
            Any other socket failure after connecting.
        """
        target = self.resolve_target()
        frame = encode_frame(command)
        sock = self._connect(target)
        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            sock.settimeout(self._config.write_timeout)
            sock.sendall(frame)
            self._logger(3, "Sent %s %s to %s", command.name, command.arguments, target)

            response = self._receive(sock)
        finally:
            sock.close()

        self._logger(3, "Received %d characters from %s", len(response), target)
        return response

    def _connect(self, target: ConnectionTarget) -> socket.socket:
        policy = RetryPolicy(
            attempts=self._config.connect_attempts,
            delay=self._config.retry_delay,
            retry_on=(OSError,),
        )
        address = (target.host, target.port)

        def _attempt() -> socket.socket:
            return self._connector(address, self._config.connect_timeout)

        def _on_failure(attempt: int, exc: BaseException) -> None:
            self._logger(
                3, "Connect attempt %d/%d to %s failed: %s",
                attempt, policy.attempts, target, exc,
            )

        try:
            return policy.call(_attempt, sleep=self._sleep, on_failure=_on_failure)
        except RetryExhaustedError as exc:
            self._logger(0, "Cannot connect to CNC machine at %s: %s", target, exc.last_error)
            raise ConnectError(target, exc.attempts, exc.last_error) from exc.last_error

    def _receive(self, sock: socket.socket) -> str:
        response = ""
        received = 0
        limit = self._config.response_limit
        read_timeout = self._config.read_timeout
        if read_timeout is None:
            sock.settimeout(None)
            deadline = None
        else:
            deadline = self._clock() + read_timeout
        while not is_complete_response(response):
            if deadline is not None:
                remaining = deadline - self._clock()
                if remaining <= 0:
                    raise ResponseTimeoutError(
                        f"Response incomplete after {self._config.read_timeout_ms} ms "
                        f"({received} bytes received)"
                    )
                # The deadline covers the whole response, not each read.
                sock.settimeout(remaining)
            try:
                chunk = sock.recv(self._config.recv_buffer_size)
            except socket.timeout as exc:
                raise ResponseTimeoutError(
                    f"No data within {self._config.read_timeout_ms} ms "
                    f"({received} bytes received)"
                ) from exc
            if not chunk:
                raise ConnectionClosedError(
                    f"Connection closed after {received} bytes without a complete response"
                )
            received += len(chunk)
            if limit is not None and received > limit:
                raise ResponseTooLargeError(
                    f"Response exceeded {limit} bytes without completing"
                )
            response += decode_response(chunk)
        return response


__all__ = ["TcpTransport", "create_connection"]
