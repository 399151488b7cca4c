"""
Local terminal support.

Provides the CP437 wire codec, the local line editor and raw-mode
access to the user's terminal.

Usage:
    >>> from baud.terminal import LineEditor, decode
    >>> decode(b"\\xc9\\xcd\\xbb")
    '╔═╗'

    >>> async with RawTerminal() as term:
    ...     term.write("ready> ")
"""

from baud.terminal.adapter import RawTerminal, Terminal
from baud.terminal.codec import CP437_TABLE, decode, encode
from baud.terminal.editor import END_OF_INPUT, LineEditor, ParseState
from baud.terminal.modes import (
    TerminalMode,
    get_terminal_size,
    is_tty,
)

__all__ = [
    # Codec
    "CP437_TABLE",
    "decode",
    "encode",
    # Editor
    "END_OF_INPUT",
    "LineEditor",
    "ParseState",
    # Modes
    "TerminalMode",
    "get_terminal_size",
    "is_tty",
    # Adapter
    "RawTerminal",
    "Terminal",
]
