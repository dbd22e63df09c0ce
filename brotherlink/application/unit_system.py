"""brotherlink/application/unit_system.py

Unit-system detection from the machine's ``MSRRS`` configuration file.

The first record of ``MSRRSC``/``MSRRSD`` is ``C01,<value>`` where ``0``
means metric and ``1`` means inch. Detection is advisory: every failure,
including transport errors, resolves to :attr:`UnitSystem.METRIC`.

The parsing stages are pure and return a :class:`UnitSystemResult`;
:class:`UnitSystemDetector` adds the network query and the logging.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

import re
from typing import Optional

from ..constants import LOAD_COMMAND, MSRRS_C00, MSRRS_D00, UNIT_RECORD_TAG
from ..domain import (
    Command,
    ControlVersion,
    DetectionStage,
    UnitSystem,
    UnitSystemResult,
)
from ..infrastructure import TcpTransport
from ..logging_utils import LogFn, logprintf
from ..ports import TransportPort
from ..protocol.framing import split_records, unwrap_envelope

_INTEGER_RE = re.compile(r"[+-]?[0-9]+")

_UNIT_VALUES: dict[int, UnitSystem] = {
    0: UnitSystem.METRIC,
    1: UnitSystem.INCH,
}


def select_msrrs_file(control_version: ControlVersion) -> str:
    """Return the ``MSRRS`` file holding the unit flag for ``control_version``.

    Every version maps to a file; versions without a file of their own
    fall back to ``MSRRSC``.
    """
    if control_version == ControlVersion.D00:
        return MSRRS_D00
    return MSRRS_C00


def describe_fallback(control_version: ControlVersion) -> Optional[str]:
    """Explain why :func:`select_msrrs_file` guessed, or ``None`` if it did not."""
    if control_version in (ControlVersion.C00, ControlVersion.D00):
        return None
    if control_version == ControlVersion.UNKNOWN:
        return f"Control version unknown, attempting {MSRRS_C00}"
    return (
        f"Control version {control_version.value} not fully supported, "
        f"attempting {MSRRS_C00}"
    )


def _default(stage: DetectionStage, reason: str, source_file: str) -> UnitSystemResult:
    return UnitSystemResult(
        unit_system=UnitSystem.METRIC,
        defaulted=True,
        stage=stage,
        reason=reason,
        source_file=source_file,
    )


def interpret_payload(payload: Optional[str], source_file: str = "") -> UnitSystemResult:
    """Decode the unit system from the data portion of an ``MSRRS`` file."""
    if payload is None or not payload.strip():
        return _default(
            DetectionStage.UNWRAP_ENVELOPE,
            f"{source_file or 'MSRRS'} file appears to be empty or invalid",
            source_file,
        )

    first_line = split_records(payload)[0].strip()
    if not first_line:
        return _default(
            DetectionStage.EXTRACT_FIRST_LINE,
            f"First line of {source_file or 'MSRRS'} is blank",
            source_file,
        )

    if not first_line.upper().startswith(UNIT_RECORD_TAG):
        return _default(
            DetectionStage.MATCH_RECORD_TAG,
            f"First line does not start with {UNIT_RECORD_TAG}: {first_line!r}",
            source_file,
        )

    fields = first_line.split(",")
    if len(fields) < 2:
        return _default(
            DetectionStage.PARSE_VALUE,
            f"{UNIT_RECORD_TAG} line format unexpected: {first_line!r} "
            f"(expected {UNIT_RECORD_TAG},<value>)",
            source_file,
        )

    value_text = fields[1].strip()
    if not _INTEGER_RE.fullmatch(value_text):
        return _default(
            DetectionStage.PARSE_VALUE,
            f"Could not parse unit system value: {value_text!r}",
            source_file,
        )
    value = int(value_text)

    unit_system = _UNIT_VALUES.get(value)
    if unit_system is None:
        result = _default(
            DetectionStage.MAP_VALUE,
            f"Unexpected unit system value: {value} (expected 0 or 1)",
            source_file,
        )
        return result.model_copy(update={"raw_value": value})

    return UnitSystemResult(
        unit_system=unit_system,
        defaulted=False,
        stage=DetectionStage.MAP_VALUE,
        source_file=source_file,
        raw_value=value,
    )


def interpret_response(response: str, source_file: str = "") -> UnitSystemResult:
    """Unwrap a raw ``LOD`` response and decode its unit system."""
    return interpret_payload(unwrap_envelope(response), source_file)


class UnitSystemDetector:
    """Query the control for its configured unit system.

    Parameters
    ----------
    transport:
        Transport used for the ``LOD`` request; defaults to a
        :class:`~brotherlink.infrastructure.TcpTransport` configured from
        the environment.
    logger:
        Diagnostic sink with the :func:`~brotherlink.logging_utils.logprintf`
        signature.
    """

    def __init__(
        self,
        transport: TransportPort | None = None,
        *,
        logger: LogFn = logprintf,
    ) -> None:
        self._transport = transport if transport is not None else TcpTransport(logger=logger)
        self._logger = logger

    def detect_result(self, control_version: ControlVersion) -> UnitSystemResult:
        """Run the detection pipeline; never raises."""
        source_file = select_msrrs_file(control_version)
        note = describe_fallback(control_version)
        if note:
            self._logger(1, "%s", note)

        self._logger(2, "Loading %s to detect unit system...", source_file)
        try:
            response = self._transport.send(
                Command(name=LOAD_COMMAND, arguments=source_file)
            )
            result = interpret_response(response, source_file)
        except Exception as exc:
            return _default(
                DetectionStage.QUERY,
                f"Failed to detect unit system from {source_file}: {exc}",
                source_file,
            )
        return result

    def detect(self, control_version: ControlVersion) -> UnitSystem:
        """Return the machine's unit system, :attr:`UnitSystem.METRIC` on any failure."""
        self._logger(2, "Attempting to detect unit system...")
        result = self.detect_result(control_version)
        self._report(result)
        return result.unit_system

    def _report(self, result: UnitSystemResult) -> None:
        if not result.defaulted:
            self._logger(
                2, "Unit system detected: %s (from %s, value: %s)",
                result.unit_system.value, result.source_file, result.raw_value,
            )
            return
        level = 0 if result.stage == DetectionStage.QUERY else 1
        self._logger(level, "%s", result.reason)
        self._logger(1, "Defaulting to %s unit system", result.unit_system.value)


__all__ = [
    "select_msrrs_file",
    "describe_fallback",
    "interpret_payload",
    "interpret_response",
    "UnitSystemDetector",
]
