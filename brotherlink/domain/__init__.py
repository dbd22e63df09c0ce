"""brotherlink/domain/__init__.py

Domain models and exceptions for the Brother CNC client.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from .exceptions import (
    BrotherLinkError,
    ConnectError,
    ConnectionClosedError,
    FrameError,
    ResponseTimeoutError,
    ResponseTooLargeError,
    RetryExhaustedError,
    TransportError,
)
from .models import (
    Command,
    ConnectionTarget,
    ControlVersion,
    DetectionStage,
    UnitSystem,
    UnitSystemResult,
)

__all__ = [
    "Command",
    "ConnectionTarget",
    "ControlVersion",
    "DetectionStage",
    "UnitSystem",
    "UnitSystemResult",
    "BrotherLinkError",
    "FrameError",
    "RetryExhaustedError",
    "TransportError",
    "ConnectError",
    "ConnectionClosedError",
    "ResponseTimeoutError",
    "ResponseTooLargeError",
]
