"""brotherlink/application/control_version.py

Control version detection by probing ``PRD`` files.

Each control generation stores a ``PRD<x>2`` file; the one that loads
with real content identifies the generation.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

from ..constants import (
    LOAD_COMMAND,
    PRD_A00,
    PRD_B00,
    PRD_C00,
    PRD_D00,
    PRD_NEGATIVE_MARKERS,
)
from ..domain import Command, ControlVersion
from ..infrastructure import TcpTransport
from ..logging_utils import LogFn, logprintf
from ..ports import TransportPort
from ..protocol.framing import unwrap_envelope

_PRD_FILES: tuple[tuple[ControlVersion, str], ...] = (
    (ControlVersion.C00, PRD_C00),
    (ControlVersion.D00, PRD_D00),
    (ControlVersion.A00, PRD_A00),
    (ControlVersion.B00, PRD_B00),
)

# Preferred order when several PRD files are present
_PRECEDENCE = (
    ControlVersion.D00,
    ControlVersion.C00,
    ControlVersion.A00,
    ControlVersion.B00,
)

_UNSUPPORTED = (ControlVersion.A00, ControlVersion.B00)


def prd_file_present(response: str) -> bool:
    """Return ``True`` when a ``LOD PRD*`` response carries file content."""
    payload = unwrap_envelope(response)
    if payload is None or not payload.strip():
        return False
    upper = payload.upper()
    return not any(marker in upper for marker in PRD_NEGATIVE_MARKERS)


class ControlVersionDetector:
    """Detect the control generation of the machine."""

    def __init__(
        self,
        transport: TransportPort | None = None,
        *,
        logger: LogFn = logprintf,
    ) -> None:
        self._transport = transport if transport is not None else TcpTransport(logger=logger)
        self._logger = logger

    def has_file(self, filename: str) -> bool:
        """Load ``filename`` and report whether it exists on the control."""
        try:
            response = self._transport.send(Command(name=LOAD_COMMAND, arguments=filename))
        except Exception as exc:
            self._logger(3, "%s.nc not found or error loading: %s", filename, exc)
            return False
        return prd_file_present(response)

    def detect(self) -> ControlVersion:
        """Check every ``PRD`` file and pick a version.

        Falls back to C00 when nothing conclusive was found.
        """
        self._logger(2, "Attempting to detect control version...")
        self._logger(
            2, "Checking for PRD files: %s",
            ", ".join(filename for _, filename in _PRD_FILES),
        )

        found: set[ControlVersion] = set()
        for version, filename in _PRD_FILES:
            if self.has_file(filename):
                found.add(version)
                if version in _UNSUPPORTED:
                    self._logger(
                        2, "%s.nc found (%s control version - not currently supported)",
                        filename, version.value,
                    )
                else:
                    self._logger(
                        2, "%s.nc found - indicates %s control version",
                        filename, version.value,
                    )

        for version in _PRECEDENCE:
            if version in found:
                self._logger(2, "Control version detected: %s", version.value)
                return version

        self._logger(
            1, "Could not detect control version - neither %s.nc nor %s.nc found",
            PRD_C00, PRD_D00,
        )
        self._logger(
            1, "Defaulting to C00 (this may cause parsing errors if machine is D00)"
        )
        return ControlVersion.C00


__all__ = ["prd_file_present", "ControlVersionDetector"]
