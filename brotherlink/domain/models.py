"""brotherlink/domain/models.py

Pydantic domain models for the Brother CNC protocol.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class ControlVersion(str, Enum):
    """Firmware/control generation of the machine.

    The generation decides which stored configuration files exist, e.g.
    ``MSRRSC`` on C00 controls and ``MSRRSD`` on D00 controls.
    """

    A00 = "A00"
    B00 = "B00"
    C00 = "C00"
    D00 = "D00"
    UNKNOWN = "Unknown"


class UnitSystem(str, Enum):
    """Measurement convention configured on the machine."""

    METRIC = "Metric"
    INCH = "Inch"


class DetectionStage(str, Enum):
    """Stage of the unit-system pipeline that produced a result."""

    SELECT_FILE = "select_file"
    QUERY = "query"
    UNWRAP_ENVELOPE = "unwrap_envelope"
    EXTRACT_FIRST_LINE = "extract_first_line"
    MATCH_RECORD_TAG = "match_record_tag"
    PARSE_VALUE = "parse_value"
    MAP_VALUE = "map_value"


class Command(BaseModel):
    """A single protocol command such as ``LOD MSRRSC``.

    Attributes
    ----------
    name:
        Command identifier, padded to 7 characters on the wire.
    arguments:
        Command argument, padded to 8 characters on the wire.
    """

    name: str
    arguments: str = ""

    model_config = {"frozen": True}


class ConnectionTarget(BaseModel):
    """Host and port of the control, fixed for one exchange."""

    host: str
    port: int

    model_config = {"frozen": True}

    def __str__(self) -> str:
        return f"{self.host}:{self.port}"


class UnitSystemResult(BaseModel):
    """Outcome of unit-system detection.

    Attributes
    ----------
    unit_system:
        The detected or defaulted unit system.
    defaulted:
        ``True`` when ``unit_system`` is the fallback rather than a value
        read from the machine.
    stage:
        Pipeline stage that decided the result.
    reason:
        Why the default was applied, or why the value is suspicious.
        ``None`` for a clean read.
    source_file:
        Stored file the value was read from.
    raw_value:
        Integer parsed from the ``C01`` record, when parsing got that far.
    """

    unit_system: UnitSystem = UnitSystem.METRIC
    defaulted: bool = False
    stage: DetectionStage = DetectionStage.MAP_VALUE
    reason: Optional[str] = None
    source_file: str = ""
    raw_value: Optional[int] = Field(default=None)


__all__ = [
    "ControlVersion",
    "UnitSystem",
    "DetectionStage",
    "Command",
    "ConnectionTarget",
    "UnitSystemResult",
]
