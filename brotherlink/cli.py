"""Command-line interface for brotherlink.

This thin wrapper parses CLI options, builds a transport from the
environment (``CNC_IP_ADDRESS``/``CNC_PORT``) or the ``--host``/``--port``
overrides and delegates to :mod:`brotherlink.application`.

Examples::

    brotherlink unit-system --control-version C00
    brotherlink control-version
    brotherlink load MSRRSC
"""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from .application import ControlVersionDetector, FileLoader, UnitSystemDetector
from .domain import ControlVersion
from .infrastructure import TcpTransport
from .logging_utils import configure_logging, set_debug
from .settings import Settings

_AUTO = "auto"


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="brotherlink", description="Brother CNC file protocol client"
    )
    parser.add_argument("--host", default=None, help="Control address (default: $CNC_IP_ADDRESS)")
    parser.add_argument("--port", type=int, default=None, help="Control port (default: $CNC_PORT)")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    unit = sub.add_parser("unit-system", help="Detect the configured unit system")
    unit.add_argument(
        "--control-version",
        choices=[v.value for v in ControlVersion] + [_AUTO],
        default=_AUTO,
        help="Control version selecting the MSRRS file (default: detect)",
    )

    sub.add_parser("control-version", help="Detect the control version")

    load = sub.add_parser("load", help="Load a stored file and print its records")
    load.add_argument("filename", help="File name on the control, e.g. MSRRSC")
    return parser


def _build_transport(args: argparse.Namespace, settings: Settings) -> TcpTransport:
    cnc = settings.cnc
    if args.host is not None or args.port is not None:
        cnc = cnc.model_copy(
            update={
                "ip_address": args.host if args.host is not None else cnc.ip_address,
                "port": args.port if args.port is not None else cnc.port,
            }
        )
    return TcpTransport(cnc.target(), config=settings.transport)


def main(argv: Sequence[str] | None = None) -> int:
    """CLI entry point used by the ``brotherlink`` script."""

    parser = _build_arg_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    settings = Settings()
    configure_logging(settings.logging)
    if args.debug:
        set_debug(True)

    transport = _build_transport(args, settings)

    if args.command == "control-version":
        version = ControlVersionDetector(transport).detect()
        print(version.value)
        return 0

    if args.command == "unit-system":
        if args.control_version == _AUTO:
            version = ControlVersionDetector(transport).detect()
        else:
            version = ControlVersion(args.control_version)
        print(UnitSystemDetector(transport).detect(version).value)
        return 0

    lines = FileLoader(transport).load_lines(args.filename)
    if lines is None:
        return 1
    sys.stdout.write("\n".join(lines) + "\n")
    return 0
