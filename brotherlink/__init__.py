"""brotherlink: client for the Brother CNC file protocol.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from .application import ControlVersionDetector, FileLoader, UnitSystemDetector
from .domain import Command, ConnectionTarget, ControlVersion, UnitSystem
from .infrastructure import TcpTransport

__version__ = "0.1.0"

__all__ = [
    "Command",
    "ConnectionTarget",
    "ControlVersion",
    "UnitSystem",
    "TcpTransport",
    "UnitSystemDetector",
    "ControlVersionDetector",
    "FileLoader",
]
