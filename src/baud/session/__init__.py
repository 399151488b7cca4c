"""
Session layer: telnet transport, session coordinator and the
interactive connect entry point.
"""

from baud.session.connect import telnet_connect
from baud.session.coordinator import (
    COMMAND_PROMPT,
    ESCAPE_CHAR,
    QUIT_COMMANDS,
    SessionCoordinator,
    SessionMode,
    SessionResult,
)
from baud.session.transport import TelnetTransport, Transport

__all__ = [
    "telnet_connect",
    "SessionCoordinator",
    "SessionMode",
    "SessionResult",
    "ESCAPE_CHAR",
    "COMMAND_PROMPT",
    "QUIT_COMMANDS",
    "TelnetTransport",
    "Transport",
]
