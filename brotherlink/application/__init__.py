"""brotherlink/application/__init__.py

Application services built on top of the transport: unit-system and
control-version detection and raw file loading.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from .control_version import ControlVersionDetector, prd_file_present
from .file_loader import FileLoader
from .unit_system import (
    UnitSystemDetector,
    describe_fallback,
    interpret_payload,
    interpret_response,
    select_msrrs_file,
)

__all__ = [
    "ControlVersionDetector",
    "prd_file_present",
    "FileLoader",
    "UnitSystemDetector",
    "describe_fallback",
    "interpret_payload",
    "interpret_response",
    "select_msrrs_file",
]
