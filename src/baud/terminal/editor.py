"""
Local line editor.

Keeps one in-progress input line and echoes exactly the display updates
needed to keep the visible line in sync with the buffer. Nothing is sent
to the remote until the line is complete, so the user gets emacs-style
editing even on systems that only understand whole lines.

Supported keys:
    Ctrl+A / Ctrl+E     beginning / end of line
    Ctrl+B / Left       backward one character
    Ctrl+F / Right      forward one character
    Ctrl+D              delete character under cursor
    Ctrl+K              kill to end of line
    Backspace / Ctrl+H  delete character before cursor
    Enter               complete the line
"""

from __future__ import annotations

from enum import Enum
from typing import Final, Protocol

from baud.logging import get_logger

logger = get_logger(__name__)

# Marker delivered by the terminal once local input is exhausted.
END_OF_INPUT: Final = ""

# Cursor control
CURSOR_LEFT: Final = "\x1b[D"
CURSOR_RIGHT: Final = "\x1b[C"
CLEAR_TO_EOL: Final = "\x1b[K"

# Control characters
CTRL_A: Final = "\x01"
CTRL_B: Final = "\x02"
CTRL_D: Final = "\x04"
CTRL_E: Final = "\x05"
CTRL_F: Final = "\x06"
CTRL_K: Final = "\x0b"
BACKSPACE: Final = "\x7f"
BACKSPACE_ALT: Final = "\x08"
CR: Final = "\r"
LF: Final = "\n"
ESC: Final = "\x1b"


def is_printable(unit: str) -> bool:
    """True for a single character in the printable ASCII range."""
    return len(unit) == 1 and " " <= unit <= "~"


class Display(Protocol):
    """Anything the editor can echo to."""

    def write(self, text: str) -> None: ...


class ParseState(Enum):
    """Escape sequence parser state."""

    NORMAL = "normal"
    ESC_SEEN = "esc_seen"  # ESC received, waiting for '['
    CSI_SEEN = "csi_seen"  # ESC [ received, waiting for final byte


class LineEditor:
    """
    Character-level editor for a single input line.

    Example:
        >>> editor = LineEditor(display)
        >>> for ch in "hello\\r":
        ...     ready = editor.process_input(ch)
        >>> ready, editor.get_line()
        (True, 'hello')
    """

    def __init__(self, display: Display) -> None:
        self._display = display
        self._buffer: list[str] = []
        self._cursor = 0
        self._state = ParseState.NORMAL

    @property
    def cursor(self) -> int:
        """Cursor position within the line."""
        return self._cursor

    @property
    def state(self) -> ParseState:
        """Current escape parser state."""
        return self._state

    def get_line(self) -> str:
        """Return the whole line regardless of cursor position."""
        return "".join(self._buffer)

    def reset(self) -> None:
        """Clear the line for the next input."""
        self._buffer.clear()
        self._cursor = 0
        self._state = ParseState.NORMAL

    def process_input(self, unit: str) -> bool:
        """
        Process one decoded input unit.

        Args:
            unit: A single character or control code, or END_OF_INPUT.

        Returns:
            True when the line is complete and ready to send.
        """
        if unit == END_OF_INPUT:
            return False

        if self._state is ParseState.ESC_SEEN:
            return self._process_esc_seen(unit)
        if self._state is ParseState.CSI_SEEN:
            return self._process_csi_seen(unit)
        return self._process_normal(unit)

    # =========================================================================
    # Parser states
    # =========================================================================

    def _process_normal(self, unit: str) -> bool:
        if unit == ESC:
            self._state = ParseState.ESC_SEEN
            return False

        if unit in (CR, LF):
            self._write("\r\n")
            return True

        action = self._actions.get(unit)
        if action is not None:
            action(self)
        elif is_printable(unit):
            self._insert(unit)
        else:
            logger.debug(f"Ignoring control char: {ord(unit[0])}")
        return False

    def _process_esc_seen(self, unit: str) -> bool:
        if unit == "[":
            self._state = ParseState.CSI_SEEN
            return False

        # Malformed sequence: drop both the ESC and this unit.
        logger.debug(f"Discarding invalid escape sequence: ESC {unit!r}")
        self._state = ParseState.NORMAL
        return False

    def _process_csi_seen(self, unit: str) -> bool:
        self._state = ParseState.NORMAL

        if unit == "C":
            self._forward_char()
        elif unit == "D":
            self._backward_char()
        elif unit in ("A", "B"):
            logger.debug("History navigation not implemented")
        else:
            logger.debug(f"Unknown CSI sequence: {unit!r}")
        return False

    # =========================================================================
    # Editing actions
    # =========================================================================

    def _insert(self, ch: str) -> None:
        if self._cursor == len(self._buffer):
            self._buffer.append(ch)
            self._cursor += 1
            self._write(ch)
            return

        self._buffer.insert(self._cursor, ch)
        self._cursor += 1
        self._write(self._text_from(self._cursor - 1))
        self._move_left(len(self._buffer) - self._cursor)

    def _backspace(self) -> None:
        if self._cursor == 0:
            return

        del self._buffer[self._cursor - 1]
        self._cursor -= 1
        self._write(CURSOR_LEFT)
        self._redraw_tail()

    def _forward_delete(self) -> None:
        if self._cursor == len(self._buffer):
            return

        del self._buffer[self._cursor]
        self._redraw_tail()

    def _kill_line(self) -> None:
        if self._cursor == len(self._buffer):
            return

        del self._buffer[self._cursor:]
        self._write(CLEAR_TO_EOL)

    def _beginning_of_line(self) -> None:
        self._move_left(self._cursor)
        self._cursor = 0

    def _end_of_line(self) -> None:
        steps = len(self._buffer) - self._cursor
        if steps:
            self._write(CURSOR_RIGHT * steps)
        self._cursor = len(self._buffer)

    def _backward_char(self) -> None:
        if self._cursor > 0:
            self._write(CURSOR_LEFT)
            self._cursor -= 1

    def _forward_char(self) -> None:
        if self._cursor < len(self._buffer):
            self._write(CURSOR_RIGHT)
            self._cursor += 1

    _actions = {
        BACKSPACE: _backspace,
        BACKSPACE_ALT: _backspace,
        CTRL_A: _beginning_of_line,
        CTRL_E: _end_of_line,
        CTRL_B: _backward_char,
        CTRL_F: _forward_char,
        CTRL_K: _kill_line,
        CTRL_D: _forward_delete,
    }

    # =========================================================================
    # Display helpers
    # =========================================================================

    def _redraw_tail(self) -> None:
        """Rewrite from the cursor to the end and clear the freed column."""
        tail = self._text_from(self._cursor)
        if tail:
            self._write(tail)
        self._write(CLEAR_TO_EOL)
        self._move_left(len(tail))

    def _text_from(self, pos: int) -> str:
        return "".join(self._buffer[pos:])

    def _move_left(self, count: int) -> None:
        if count > 0:
            self._write(CURSOR_LEFT * count)

    def _write(self, text: str) -> None:
        self._display.write(text)

    def __repr__(self) -> str:
        return f"LineEditor(line={self.get_line()!r}, cursor={self._cursor})"


__all__ = [
    "END_OF_INPUT",
    "CURSOR_LEFT",
    "CURSOR_RIGHT",
    "CLEAR_TO_EOL",
    "Display",
    "ParseState",
    "LineEditor",
    "is_printable",
]
