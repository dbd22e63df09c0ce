"""
Configuration settings for brotherlink.
Path: brotherlink/settings.py
Copyright BINGO Collaboration
Last Modified: 2026-10-18
"""

from __future__ import annotations

from typing import Any, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from .constants import (
    CONNECT_ATTEMPTS,
    DEFAULT_CNC_HOST,
    DEFAULT_CNC_PORT,
    MAX_RESPONSE_BYTES,
    READ_TIMEOUT_MS,
    RECV_BUFFER_SIZE,
    RETRY_DELAY_MS,
    WRITE_TIMEOUT_MS,
)
from .domain import ConnectionTarget


def _ms_to_seconds(value: Optional[int]) -> Optional[float]:
    if not value:
        return None
    return value / 1000.0


class CncSettings(BaseSettings):
    """Address of the CNC control.

    Blank or unparseable environment values fall back to the defaults
    without raising.
    """

    ip_address: str = Field(
        default=DEFAULT_CNC_HOST,
        description="Host name or IP address of the control (CNC_IP_ADDRESS)",
    )
    port: int = Field(
        default=DEFAULT_CNC_PORT,
        description="TCP port of the control's file protocol (CNC_PORT)",
    )

    model_config = {"env_prefix": "CNC_", "env_file": ".env", "extra": "ignore"}

    @field_validator("ip_address", mode="before")
    @classmethod
    def _blank_host_uses_default(cls, value: Any) -> Any:
        if value is None or not str(value).strip():
            return DEFAULT_CNC_HOST
        return value

    @field_validator("port", mode="before")
    @classmethod
    def _bad_port_uses_default(cls, value: Any) -> int:
        try:
            return int(str(value).strip())
        except (TypeError, ValueError):
            return DEFAULT_CNC_PORT

    def target(self) -> ConnectionTarget:
        return ConnectionTarget(host=self.ip_address, port=self.port)


class TransportSettings(BaseSettings):
    """Timing and size limits of a single command/response exchange.

    ``read_timeout_ms`` and ``max_response_bytes`` guard the receive loop.
    Setting either to ``0`` disables the guard and restores an unbounded
    blocking read. The read timeout is one deadline for the whole response,
    not a per-read limit.
    """

    connect_attempts: int = Field(default=CONNECT_ATTEMPTS, ge=1)
    retry_delay_ms: int = Field(default=RETRY_DELAY_MS, ge=0)
    connect_timeout_ms: Optional[int] = Field(
        default=None,
        ge=0,
        description="Per-attempt connect timeout; unset uses the OS default",
    )
    write_timeout_ms: int = Field(default=WRITE_TIMEOUT_MS, ge=1)
    read_timeout_ms: Optional[int] = Field(default=READ_TIMEOUT_MS, ge=0)
    max_response_bytes: Optional[int] = Field(default=MAX_RESPONSE_BYTES, ge=0)
    recv_buffer_size: int = Field(default=RECV_BUFFER_SIZE, ge=1)

    model_config = {"env_prefix": "BROTHERLINK_", "env_file": ".env", "extra": "ignore"}

    @property
    def retry_delay(self) -> float:
        return self.retry_delay_ms / 1000.0

    @property
    def connect_timeout(self) -> Optional[float]:
        return _ms_to_seconds(self.connect_timeout_ms)

    @property
    def write_timeout(self) -> float:
        return self.write_timeout_ms / 1000.0

    @property
    def read_timeout(self) -> Optional[float]:
        return _ms_to_seconds(self.read_timeout_ms)

    @property
    def response_limit(self) -> Optional[int]:
        return self.max_response_bytes or None


class LoggingSettings(BaseSettings):
    """Diagnostic output configuration."""

    debug: bool = Field(default=False)
    log_dir: Optional[str] = Field(
        default=None,
        description="Directory for brotherlink.log; unset logs to stderr only",
    )

    model_config = {"env_prefix": "BROTHERLINK_", "env_file": ".env", "extra": "ignore"}


class Settings(BaseSettings):
    """Main settings container."""

    cnc: CncSettings = Field(default_factory=CncSettings)
    transport: TransportSettings = Field(default_factory=TransportSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)

    model_config = {
        "env_file": ".env",
        "env_nested_delimiter": "__",
        "case_sensitive": False,
        "extra": "ignore",
    }


__all__ = ["CncSettings", "TransportSettings", "LoggingSettings", "Settings"]
