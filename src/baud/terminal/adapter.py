"""
Raw-mode terminal for the session loop.

RawTerminal owns the local terminal for the lifetime of a session:
entering the async context switches stdin to raw mode and starts
watching it on the event loop; leaving the context always restores
the original mode, whether the session ended normally, raised, or
was cancelled.

Input is delivered one decoded unit (character or control code) at a
time. Keyboard bytes are decoded incrementally as UTF-8 so that a
multibyte key press is never split.
"""

from __future__ import annotations

import asyncio
import codecs
import os
import sys
from typing import IO, Protocol

from baud.exceptions import TerminalModeError
from baud.logging import get_logger
from baud.terminal.editor import END_OF_INPUT
from baud.terminal.modes import TerminalMode, get_terminal_size, make_raw, restore_mode

logger = get_logger(__name__)

READ_SIZE = 1024


class Terminal(Protocol):
    """What the session loop needs from the local terminal."""

    async def read(self, timeout: float | None = None) -> str | None: ...

    def write(self, text: str) -> None: ...


class RawTerminal:
    """
    Scoped raw-mode access to the local terminal.

    Usage:
        >>> async with RawTerminal() as term:
        ...     unit = await term.read(timeout=0.1)
        ...     term.write("hello")
    """

    def __init__(
        self,
        stdin: IO[bytes] | IO[str] | None = None,
        stdout: IO[str] | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._fd = self._stdin.fileno()
        self._mode: TerminalMode | None = None
        self._units: asyncio.Queue[str] = asyncio.Queue()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._loop: asyncio.AbstractEventLoop | None = None
        self._eof = False

    @property
    def is_raw(self) -> bool:
        """True while the terminal is in raw mode."""
        return self._mode is not None and self._mode.is_raw

    def size(self) -> tuple[int, int]:
        """Current (columns, rows) of the local terminal."""
        return get_terminal_size()

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def __aenter__(self) -> RawTerminal:
        self.open()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.close()

    def open(self) -> None:
        """
        Enter raw mode and start watching stdin.

        Raises:
            TerminalModeError: If stdin is not a TTY or cannot be switched.
        """
        if not self._stdin.isatty():
            raise TerminalModeError("Interactive sessions require a terminal (TTY)")

        self._mode = make_raw(self._fd)
        try:
            self._loop = asyncio.get_running_loop()
            self._loop.add_reader(self._fd, self._on_readable)
        except (OSError, ValueError, NotImplementedError) as e:
            restore_mode(self._mode)
            self._mode = None
            raise TerminalModeError(f"Cannot watch terminal input: {e}", cause=e) from e

        logger.debug(f"Terminal fd {self._fd} in raw mode")

    def close(self) -> None:
        """Stop watching stdin and restore the original terminal mode."""
        if self._loop is not None:
            try:
                self._loop.remove_reader(self._fd)
            except (ValueError, OSError):
                pass
            self._loop = None

        if self._mode is not None:
            if not restore_mode(self._mode):
                logger.warning(f"Could not restore terminal mode on fd {self._fd}")
            self._mode = None
            logger.debug("Terminal mode restored")

    # =========================================================================
    # I/O
    # =========================================================================

    async def read(self, timeout: float | None = None) -> str | None:
        """
        Wait for the next input unit.

        Args:
            timeout: Seconds to wait, or None to wait indefinitely.

        Returns:
            One character or control code, None on timeout, or
            END_OF_INPUT once stdin is closed.
        """
        if self._eof and self._units.empty():
            return END_OF_INPUT

        try:
            return await asyncio.wait_for(self._units.get(), timeout=timeout)
        except asyncio.TimeoutError:
            return None

    def write(self, text: str) -> None:
        """Write display text and flush immediately."""
        if not text:
            return

        buffer = getattr(self._stdout, "buffer", None)
        if buffer is None:
            self._stdout.write(text)
            self._stdout.flush()
            return

        # Text layer may hold output printed before the session started.
        self._stdout.flush()
        encoding = getattr(self._stdout, "encoding", None) or "utf-8"
        buffer.write(text.encode(encoding, errors="replace"))
        buffer.flush()

    def _on_readable(self) -> None:
        """Event loop callback: move available keyboard bytes into the queue."""
        try:
            data = os.read(self._fd, READ_SIZE)
        except BlockingIOError:
            return
        except OSError as e:
            logger.warning(f"Terminal read failed: {e}")
            data = b""

        if not data:
            self._feed_eof()
            return

        for unit in self._decoder.decode(data):
            self._units.put_nowait(unit)

    def _feed_eof(self) -> None:
        tail = self._decoder.decode(b"", final=True)
        for unit in tail:
            self._units.put_nowait(unit)

        self._eof = True
        self._units.put_nowait(END_OF_INPUT)
        if self._loop is not None:
            self._loop.remove_reader(self._fd)


__all__ = ["Terminal", "RawTerminal", "READ_SIZE"]
