"""Shared logging infrastructure for brotherlink.

Components never talk to :mod:`logging` directly; they receive a ``logger``
callable with the :func:`logprintf` signature so tests can capture the
diagnostic stream without touching the global logger.

Levels follow the legacy console tags: ``0`` error, ``1`` warning,
``2`` info and ``3`` debug.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .settings import LoggingSettings

LogFn = Callable[..., None]

ERROR = 0
WARNING = 1
INFO = 2
DEBUG = 3

_FORMAT = "%(asctime)s %(levelname)s: %(message)s"
_LEVELS = {
    ERROR: logging.ERROR,
    WARNING: logging.WARNING,
    INFO: logging.INFO,
    DEBUG: logging.DEBUG,
}

logger = logging.getLogger("brotherlink")
logger.setLevel(logging.INFO)
_handler = logging.StreamHandler(sys.stderr)
_handler.setFormatter(logging.Formatter(_FORMAT))
if not logger.handlers:
    logger.addHandler(_handler)


def set_debug(enabled: bool) -> None:
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)


def logprintf(level: int, fmt: str, *args: object) -> None:
    """Log ``fmt % args`` at one of the numeric levels above.

    Unknown levels are logged as info.
    """
    msg = fmt % args if args else fmt
    logger.log(_LEVELS.get(level, logging.INFO), msg)


def null_logger(level: int, fmt: str, *args: object) -> None:
    """Discard a diagnostic message."""


def setup_file_logging(logdir: str, log_filename: str = "brotherlink.log") -> str:
    os.makedirs(logdir, exist_ok=True)
    if not os.access(logdir, os.W_OK):
        raise PermissionError(f"Cannot write to log directory: {logdir}")

    logfile = os.path.join(logdir, log_filename)
    fh = logging.FileHandler(logfile)
    fh.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(fh)
    return logfile


def configure_logging(config: "LoggingSettings") -> str | None:
    """Apply :class:`~brotherlink.settings.LoggingSettings` to the logger.

    Returns the log file path when file logging was enabled.
    """
    set_debug(config.debug)
    if not config.log_dir:
        return None
    try:
        logfile = setup_file_logging(config.log_dir)
    except OSError as exc:
        logprintf(WARNING, "File logging disabled: %s", exc)
        return None
    logprintf(DEBUG, "File logging initialised at %s", logfile)
    return logfile
