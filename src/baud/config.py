"""
Client configuration (pydantic-settings).

Every field can be overridden through a ``BAUD_``-prefixed environment
variable, e.g. ``BAUD_CONNECT_TIMEOUT=10`` or ``BAUD_LOG_LEVEL=DEBUG``.

Usage:
    >>> from baud.config import get_settings
    >>> get_settings().input_poll_interval
    0.1
"""

from __future__ import annotations

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaudSettings(BaseSettings):
    """Runtime settings for a telnet session."""

    model_config = SettingsConfigDict(
        env_prefix="BAUD_",
        extra="ignore",
    )

    # Connection
    connect_timeout: float = Field(default=30.0, ge=1.0, le=300.0)
    default_port: int = Field(default=23, ge=1, le=65535)
    terminal_type: str = "VT100"

    # Session loop
    read_chunk_size: int = Field(default=4096, ge=1, le=65536)
    input_poll_interval: float = Field(default=0.1, ge=0.01, le=5.0)
    shutdown_timeout: float = Field(default=1.0, ge=0.1, le=30.0)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "WARNING"
    log_json: bool = False
    log_file: str | None = None


_settings: BaudSettings | None = None


def get_settings() -> BaudSettings:
    """Return the process-wide settings, creating them on first use."""
    global _settings
    if _settings is None:
        _settings = BaudSettings()
    return _settings


def configure_settings(**overrides: object) -> BaudSettings:
    """
    Replace the process-wide settings.

    Args:
        **overrides: Field values taking precedence over the environment.

    Returns:
        The new settings instance.
    """
    global _settings
    _settings = BaudSettings(**overrides)  # type: ignore[arg-type]
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next access re-reads the environment."""
    global _settings
    _settings = None


__all__ = ["BaudSettings", "get_settings", "configure_settings", "reset_settings"]
