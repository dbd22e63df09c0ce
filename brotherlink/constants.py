"""Protocol constants for the Brother CNC file protocol.

The values here mirror what the control expects on the wire so that the
framing and transport modules agree on a single definition.
"""

# Envelope markers
FRAME_MARKER: str = "%"
LINE_END: str = "\r\n"
COMMAND_PREFIX: str = "C"
COMMAND_SUFFIX: str = "  \r\n"

# Fixed field widths of the unwrapped command
NAME_WIDTH: int = 7
ARGUMENTS_WIDTH: int = 8

CHECKSUM_MODULUS: int = 16
CHECKSUM_DIGITS: int = 2

# Commands
LOAD_COMMAND: str = "LOD"

# Connection defaults
DEFAULT_CNC_HOST: str = "10.0.0.25"
DEFAULT_CNC_PORT: int = 10000

CONNECT_ATTEMPTS: int = 10
RETRY_DELAY_MS: int = 20
WRITE_TIMEOUT_MS: int = 2000
READ_TIMEOUT_MS: int = 30000
MAX_RESPONSE_BYTES: int = 4 * 1024 * 1024
RECV_BUFFER_SIZE: int = 8192

# Stored files
MSRRS_C00: str = "MSRRSC"
MSRRS_D00: str = "MSRRSD"
UNIT_RECORD_TAG: str = "C01"

PRD_A00: str = "PRDA2"
PRD_B00: str = "PRDB2"
PRD_C00: str = "PRDC2"
PRD_D00: str = "PRDD2"
PRD_NEGATIVE_MARKERS: tuple[str, ...] = ("ERROR", "NOT FOUND")
