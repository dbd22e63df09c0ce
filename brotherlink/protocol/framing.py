"""Command framing and response envelope handling.

Outbound frame layout::

    % C <name:7> <args:8> ␣␣ CR LF   CR LF  <checksum:2>  % CR LF
      |<----------- command ---------->|

- ``name`` and ``args`` are left-justified and space-padded. Longer values
  are sent as-is; they are never truncated.
- ``checksum`` is the sum of the character codes of *command* modulo 16,
  written as two decimal digits.

Inbound responses are accumulated until the text both starts and ends with
``%``. The data portion sits between the first CR LF and the last CR LF
before the closing ``%``::

    %<echo>\\r\\n<data>\\r\\n<checksum>%\\r\\n
"""

from __future__ import annotations

from typing import Optional

from ..constants import (
    ARGUMENTS_WIDTH,
    CHECKSUM_DIGITS,
    CHECKSUM_MODULUS,
    COMMAND_PREFIX,
    COMMAND_SUFFIX,
    FRAME_MARKER,
    LINE_END,
    NAME_WIDTH,
)
from ..domain import Command, FrameError

_COMMAND_LENGTH = len(COMMAND_PREFIX) + NAME_WIDTH + ARGUMENTS_WIDTH + len(COMMAND_SUFFIX)
_FRAME_TRAILER = FRAME_MARKER + LINE_END


def pad_field(value: str, width: int) -> str:
    """Left-justify ``value`` to ``width`` characters without truncating."""
    return value.ljust(width)


def build_command(command: Command) -> str:
    """Return the unwrapped command string the checksum is computed over."""
    return (
        COMMAND_PREFIX
        + pad_field(command.name, NAME_WIDTH)
        + pad_field(command.arguments, ARGUMENTS_WIDTH)
        + COMMAND_SUFFIX
    )


def compute_checksum(text: str) -> int:
    return sum(ord(ch) for ch in text) % CHECKSUM_MODULUS


def format_checksum(value: int) -> str:
    return f"{value:0{CHECKSUM_DIGITS}d}"


def build_frame(command: Command) -> str:
    """Wrap ``command`` in the ``%`` envelope with its checksum.

    Parameters
    ----------
    command:
        Command to frame.

    Returns
    -------
    str
        The complete frame, e.g. ``"%CLOD    MSRRSC    \\r\\n\\r\\n03%\\r\\n"``.
    """
    body = build_command(command)
    checksum = format_checksum(compute_checksum(body))
    return f"{FRAME_MARKER}{body}{LINE_END}{checksum}{FRAME_MARKER}{LINE_END}"


def encode_frame(command: Command) -> bytes:
    """Return :func:`build_frame` as ASCII bytes, with ``?`` for other characters."""
    return build_frame(command).encode("ascii", errors="replace")


def decode_response(data: bytes) -> str:
    return data.decode("ascii", errors="replace")


def parse_frame(frame: str | bytes) -> Command:
    """Recover the :class:`Command` carried by an outbound frame.

    Trailing spaces inside a field are indistinguishable from padding and
    are dropped.

    Raises
    ------
    FrameError
        If the envelope, command layout or checksum is wrong.
    """
    if isinstance(frame, bytes):
        frame = decode_response(frame)

    if not frame.startswith(FRAME_MARKER) or not frame.endswith(_FRAME_TRAILER):
        raise FrameError(f"Missing % envelope: {frame!r}")

    inner = frame[len(FRAME_MARKER) : -len(_FRAME_TRAILER)]
    split_at = inner.rfind(LINE_END)
    if split_at < 0:
        raise FrameError(f"Missing checksum line: {frame!r}")
    body = inner[:split_at]
    checksum_text = inner[split_at + len(LINE_END) :]

    if len(body) != _COMMAND_LENGTH:
        raise FrameError(
            f"Command is {len(body)} characters, expected {_COMMAND_LENGTH}: {body!r}"
        )
    if not body.startswith(COMMAND_PREFIX) or not body.endswith(COMMAND_SUFFIX):
        raise FrameError(f"Malformed command body: {body!r}")
    if len(checksum_text) != CHECKSUM_DIGITS or not checksum_text.isdigit():
        raise FrameError(f"Malformed checksum: {checksum_text!r}")

    expected = format_checksum(compute_checksum(body))
    if checksum_text != expected:
        raise FrameError(f"Checksum mismatch: got {checksum_text}, expected {expected}")

    name_start = len(COMMAND_PREFIX)
    args_start = name_start + NAME_WIDTH
    return Command(
        name=body[name_start:args_start].rstrip(" "),
        arguments=body[args_start : args_start + ARGUMENTS_WIDTH].rstrip(" "),
    )


def is_complete_response(text: str) -> bool:
    """Return ``True`` once ``text`` starts and ends with ``%``.

    The control terminates responses with ``%\\r\\n`` but only the ``%`` is
    checked, so a response whose final CR LF arrives in the same read as
    the ``%`` is not recognised as complete.
    """
    return text.startswith(FRAME_MARKER) and text.endswith(FRAME_MARKER)


def unwrap_envelope(response: str) -> Optional[str]:
    """Extract the data portion of a ``%``-wrapped response.

    Returns
    -------
    str | None
        The text between the first CR LF and the last CR LF preceding the
        final ``%``, or ``None`` when ``response`` is not wrapped or the
        span cannot be located.
    """
    if not response.startswith(FRAME_MARKER):
        return None
    first_newline = response.find(LINE_END)
    if first_newline <= 0:
        return None
    last_marker = response.rfind(FRAME_MARKER)
    last_newline = response.rfind(LINE_END, 0, last_marker)
    if last_newline <= first_newline:
        return None
    return response[first_newline + len(LINE_END) : last_newline]


def strip_envelope(response: str) -> str:
    """Lenient :func:`unwrap_envelope`: unwrapped text is returned unchanged."""
    payload = unwrap_envelope(response)
    return response if payload is None else payload


def split_records(payload: str) -> list[str]:
    return payload.split(LINE_END)


__all__ = [
    "pad_field",
    "build_command",
    "compute_checksum",
    "format_checksum",
    "build_frame",
    "encode_frame",
    "decode_response",
    "parse_frame",
    "is_complete_response",
    "unwrap_envelope",
    "strip_envelope",
    "split_records",
]
