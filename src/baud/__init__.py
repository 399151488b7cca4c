"""
baud - telnet client for BBS systems.

Connects a raw local terminal to a remote BBS, decodes CP437 output,
offers line editing with cursor keys and Emacs-style control codes, and
can expand typed shortcuts or answer prompts automatically through
pattern-triggered scripts.

Quick start:
    >>> import asyncio
    >>> from baud import telnet_connect
    >>> asyncio.run(telnet_connect("bbs.example.com", 23))
"""

from baud.automation import Automation, StateStore
from baud.config import BaudSettings, configure_settings, get_settings
from baud.exceptions import (
    BaudError,
    ConfigFileError,
    ConnectionTimeoutError,
    NotConnectedError,
    ScriptError,
    ScriptNotFoundError,
    TerminalModeError,
    TransportError,
)
from baud.expansions import ExpansionTable
from baud.session import (
    SessionCoordinator,
    SessionMode,
    SessionResult,
    TelnetTransport,
    telnet_connect,
)
from baud.terminal import LineEditor, RawTerminal

__version__ = "1.0.0"

__all__ = [
    "__version__",
    "telnet_connect",
    "SessionCoordinator",
    "SessionMode",
    "SessionResult",
    "TelnetTransport",
    "RawTerminal",
    "LineEditor",
    "ExpansionTable",
    "Automation",
    "StateStore",
    "BaudSettings",
    "get_settings",
    "configure_settings",
    "BaudError",
    "TransportError",
    "ConnectionTimeoutError",
    "NotConnectedError",
    "TerminalModeError",
    "ConfigFileError",
    "ScriptError",
    "ScriptNotFoundError",
]
