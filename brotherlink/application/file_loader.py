"""brotherlink/application/file_loader.py

Load stored files from the control as lists of records.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

from typing import Optional

from ..constants import LOAD_COMMAND
from ..domain import Command
from ..infrastructure import TcpTransport
from ..logging_utils import LogFn, logprintf
from ..ports import TransportPort
from ..protocol.framing import split_records, strip_envelope


class FileLoader:
    """Fetch files with ``LOD`` and strip the protocol envelope."""

    def __init__(
        self,
        transport: TransportPort | None = None,
        *,
        logger: LogFn = logprintf,
    ) -> None:
        self._transport = transport if transport is not None else TcpTransport(logger=logger)
        self._logger = logger

    def load_payload(self, filename: str) -> str:
        """Return the data portion of ``filename``.

        A response that cannot be unwrapped is returned as received.
        Transport errors propagate.
        """
        response = self._transport.send(Command(name=LOAD_COMMAND, arguments=filename))
        return strip_envelope(response)

    def load_lines(self, filename: str) -> Optional[list[str]]:
        """Return the CR LF separated records of ``filename``, or ``None`` on error."""
        try:
            payload = self.load_payload(filename)
        except Exception as exc:
            self._logger(0, "Failed to load file %s: %s", filename, exc)
            return None
        return split_records(payload)


__all__ = ["FileLoader"]
