"""
Terminal mode management utilities.

Provides TTY state management for raw mode terminal operations.
Supports Unix (Linux, macOS) systems via termios.

Raw mode here differs from ``tty.setraw``: output post-processing is
left on, so remote text that relies on the local terminal translating
LF keeps rendering as before.
"""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass
from typing import Any

from baud.exceptions import TerminalModeError


@dataclass
class TerminalMode:
    """
    Saved terminal state for one file descriptor.

    Stores the original terminal settings for restoration.
    """

    fd: int
    original_settings: Any | None = None
    is_raw: bool = False

    @staticmethod
    def detect_platform() -> str:
        """Detect current platform."""
        if sys.platform == "darwin":
            return "macos"
        elif sys.platform.startswith("linux"):
            return "linux"
        elif sys.platform == "win32":
            return "windows"
        return "unknown"


def is_tty() -> bool:
    """Check if stdin is a TTY."""
    return sys.stdin.isatty()


def get_terminal_size() -> tuple[int, int]:
    """
    Get current terminal size.

    Returns:
        Tuple of (columns, rows).
    """
    try:
        size = os.get_terminal_size()
        return size.columns, size.lines
    except OSError:
        return 80, 24  # Default fallback


def restore_tty_state(fd: int, state: Any) -> bool:
    """
    Restore TTY state from saved state.

    Args:
        fd: File descriptor of the terminal.
        state: termios attributes captured by make_raw().

    Returns:
        True if successful.
    """
    if state is None:
        return False

    try:
        import termios
    except ImportError:
        return False

    try:
        termios.tcsetattr(fd, termios.TCSADRAIN, state)
        return True
    except (OSError, termios.error):
        return False


def make_raw(fd: int) -> TerminalMode:
    """
    Put the terminal into raw input mode.

    Disables line buffering, local echo, signal keys (Ctrl+C, Ctrl+Z),
    flow control and CR/NL translation on input; reads return after
    a single byte.

    Args:
        fd: File descriptor of the terminal.

    Returns:
        TerminalMode holding the settings to restore.

    Raises:
        TerminalModeError: If the terminal cannot be switched.
    """
    if TerminalMode.detect_platform() == "windows":
        raise TerminalModeError("Raw terminal mode is not supported on Windows")

    try:
        import termios
    except ImportError as e:
        raise TerminalModeError("termios is not available", cause=e) from e

    try:
        original = termios.tcgetattr(fd)
        attrs = termios.tcgetattr(fd)

        attrs[0] &= ~(termios.ICRNL | termios.INLCR | termios.IXON)  # iflag
        attrs[3] &= ~(termios.ICANON | termios.ECHO | termios.ISIG | termios.IEXTEN)  # lflag
        attrs[6][termios.VMIN] = 1
        attrs[6][termios.VTIME] = 0

        termios.tcsetattr(fd, termios.TCSAFLUSH, attrs)
    except (OSError, termios.error) as e:
        raise TerminalModeError(f"Could not enter raw mode: {e}", cause=e) from e

    return TerminalMode(fd=fd, original_settings=original, is_raw=True)


def restore_mode(mode: TerminalMode) -> bool:
    """
    Restore the settings captured by make_raw().

    Returns:
        True if the terminal was restored, False if it was not raw.
    """
    if not mode.is_raw:
        return False

    restored = restore_tty_state(mode.fd, mode.original_settings)
    mode.is_raw = False
    mode.original_settings = None
    return restored


__all__ = [
    "TerminalMode",
    "is_tty",
    "get_terminal_size",
    "restore_tty_state",
    "make_raw",
    "restore_mode",
]
