"""brotherlink/infrastructure/__init__.py

Infrastructure layer: concrete adapters connecting the application layer
to the CNC control over the network.

Copyright BINGO Collaboration
Last modified: 2026-10-18
"""

from .retry import RetryPolicy, call_with_retry  # noqa: F401
from .tcp_transport import TcpTransport, create_connection  # noqa: F401

__all__ = [
    "RetryPolicy",
    "call_with_retry",
    "TcpTransport",
    "create_connection",
]
