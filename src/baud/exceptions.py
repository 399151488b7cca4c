"""
Exceptions raised by the baud client.

All errors derive from BaudError so callers can catch one type at the
session boundary. The original low-level exception is kept on the
instance but not chained into the traceback display.
"""

from __future__ import annotations


class BaudError(Exception):
    """Base exception for all baud errors."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        super().__init__(message)
        self.message = message
        self._original_cause = cause
        self.__suppress_context__ = True

    def __str__(self) -> str:
        return self.message


# =============================================================================
# Transport Errors
# =============================================================================


class TransportError(BaudError):
    """Connection to the remote host failed or broke."""


class ConnectionTimeoutError(TransportError):
    """Connecting to the remote host took too long."""

    def __init__(
        self,
        host: str,
        port: int,
        timeout_seconds: float,
        cause: BaseException | None = None,
    ) -> None:
        self.host = host
        self.port = port
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Connection to {host}:{port} timed out after {timeout_seconds:g}s",
            cause=cause,
        )


class NotConnectedError(TransportError):
    """Operation attempted on a transport that is not connected."""

    def __init__(self, message: str = "Not connected to telnet server") -> None:
        super().__init__(message)


# =============================================================================
# Terminal Errors
# =============================================================================


class TerminalModeError(BaudError):
    """Local terminal could not be switched into raw mode."""


# =============================================================================
# Configuration File Errors
# =============================================================================


class ConfigFileError(BaudError):
    """Expansion, pattern or script file could not be read."""

    def __init__(
        self,
        path: str,
        reason: str,
        cause: BaseException | None = None,
    ) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}", cause=cause)


# =============================================================================
# Automation Errors
# =============================================================================


class ScriptError(BaudError):
    """An automation script raised while executing."""

    def __init__(
        self,
        script_name: str,
        message: str,
        cause: BaseException | None = None,
    ) -> None:
        self.script_name = script_name
        super().__init__(f"Error in {script_name}: {message}", cause=cause)


class ScriptNotFoundError(ScriptError):
    """A trigger referenced a script that was never loaded."""

    def __init__(self, script_name: str) -> None:
        super().__init__(script_name, "script not found")
        self.message = f"Script not found: {script_name}"


__all__ = [
    "BaudError",
    "TransportError",
    "ConnectionTimeoutError",
    "NotConnectedError",
    "TerminalModeError",
    "ConfigFileError",
    "ScriptError",
    "ScriptNotFoundError",
]
