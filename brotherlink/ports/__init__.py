"""brotherlink/ports/__init__.py

Abstract interfaces used by the application layer.

The interpreters in :mod:`brotherlink.application` only depend on
:class:`TransportPort`, so tests can substitute a double that returns
scripted raw responses.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..domain import Command


@runtime_checkable
class TransportPort(Protocol):
    """One command/response exchange with the control.

    Concrete implementation: :class:`brotherlink.infrastructure.TcpTransport`.
    """

    def send(self, command: Command) -> str:  # pragma: no cover - structural
        """Send ``command`` and return the raw ``%``-delimited response."""


__all__ = ["TransportPort"]
