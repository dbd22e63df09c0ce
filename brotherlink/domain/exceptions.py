"""brotherlink/domain/exceptions.py

Exceptions raised by the framing and transport layers.

Transport errors are strict: they reach the caller of
:meth:`brotherlink.infrastructure.TcpTransport.send` unchanged. The
interpreters in :mod:`brotherlink.application` catch them and fall back to
their documented defaults.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import ConnectionTarget


class BrotherLinkError(Exception):
    """Base class for every error raised by brotherlink."""


class FrameError(BrotherLinkError):
    """A wire frame does not follow the ``%...%`` command layout."""


class RetryExhaustedError(BrotherLinkError):
    """A bounded retry ran out of attempts.

    Attributes
    ----------
    attempts:
        Number of calls made before giving up.
    last_error:
        Exception raised by the final attempt.
    """

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        super().__init__(f"gave up after {attempts} attempts: {last_error}")
        self.attempts = attempts
        self.last_error = last_error


class TransportError(BrotherLinkError):
    """Failure while exchanging a command with the control."""


class ConnectError(TransportError):
    """The control did not accept a connection within the attempt budget."""

    def __init__(
        self,
        target: "ConnectionTarget",
        attempts: int,
        last_error: BaseException,
    ) -> None:
        super().__init__(
            f"Cannot connect to CNC at {target.host}:{target.port} "
            f"after {attempts} attempts: {last_error}"
        )
        self.target = target
        self.attempts = attempts
        self.last_error = last_error


class ConnectionClosedError(TransportError):
    """The control closed the socket before a complete response arrived."""


class ResponseTimeoutError(TransportError):
    """No data arrived within the configured read deadline."""


class ResponseTooLargeError(TransportError):
    """The accumulated response grew past the configured size limit."""


__all__ = [
    "BrotherLinkError",
    "FrameError",
    "RetryExhaustedError",
    "TransportError",
    "ConnectError",
    "ConnectionClosedError",
    "ResponseTimeoutError",
    "ResponseTooLargeError",
]
