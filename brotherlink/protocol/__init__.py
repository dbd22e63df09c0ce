"""Protocol layer: command framing, checksum and response envelopes."""

from .framing import (
    build_frame,
    compute_checksum,
    encode_frame,
    is_complete_response,
    parse_frame,
    split_records,
    strip_envelope,
    unwrap_envelope,
)
