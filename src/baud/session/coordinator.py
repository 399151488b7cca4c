"""
Session coordinator.

Runs the two flows of an interactive session:

    inbound   remote bytes -> CP437 decode -> display, plus the decoded
              text handed to automation on a worker thread
    outbound  keyboard units -> line editor or command mode -> remote

Both flows share one shutdown event. Whichever flow sees the end of the
session sets it; the outbound flow, which owns the session, then waits a
bounded time for the inbound flow to finish before returning.

Pressing Ctrl+] switches to command mode with a ``telnet>`` prompt.
``quit`` (or ``q``) ends the session; anything else is reported and the
session continues.
"""

from __future__ import annotations

import asyncio
import contextlib
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import TYPE_CHECKING, Final, Protocol

from pydantic import BaseModel

from baud.exceptions import TransportError
from baud.logging import get_logger
from baud.terminal.codec import decode, encode
from baud.terminal.editor import (
    BACKSPACE,
    BACKSPACE_ALT,
    CR,
    END_OF_INPUT,
    LF,
    LineEditor,
    is_printable,
)

if TYPE_CHECKING:
    from baud.session.transport import Transport
    from baud.terminal.adapter import Terminal

logger = get_logger(__name__)

# Ctrl+]
ESCAPE_CHAR: Final = "\x1d"
COMMAND_PROMPT: Final = "\r\ntelnet> "
QUIT_COMMANDS: Final = frozenset({"quit", "q"})
LINE_ENDING: Final = "\r\n"


class Expander(Protocol):
    def expand(self, text: str) -> str: ...


class AutomationHook(Protocol):
    def process_text(self, text: str) -> None: ...

    def poll_auto_response(self) -> str | None: ...


class SessionMode(str, Enum):
    """Where keyboard input is routed."""

    SESSION = "session"
    COMMAND = "command"
    SHUTTING_DOWN = "shutting_down"


class SessionResult(BaseModel):
    """Outcome of a finished session."""

    mode: SessionMode
    reason: str
    error: str | None = None
    lines_sent: int = 0
    bytes_received: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class SessionCoordinator:
    """
    Interactive session between a transport and the local terminal.

    Example:
        >>> async with RawTerminal() as term, transport:
        ...     result = await SessionCoordinator(transport, term).run()
        >>> result.reason
        'quit'
    """

    def __init__(
        self,
        transport: Transport,
        terminal: Terminal,
        *,
        expander: Expander | None = None,
        automation: AutomationHook | None = None,
        poll_interval: float = 0.1,
        shutdown_timeout: float = 1.0,
        chunk_size: int = 4096,
    ) -> None:
        self._transport = transport
        self._terminal = terminal
        self._expander = expander
        self._automation = automation
        self._poll_interval = poll_interval
        self._shutdown_timeout = shutdown_timeout
        self._chunk_size = chunk_size

        self._editor = LineEditor(terminal)
        self._mode = SessionMode.SESSION
        self._command: list[str] = []

        self._shutdown = asyncio.Event()
        self._reason = ""
        self._error: str | None = None
        self._executor: ThreadPoolExecutor | None = None

        self._lines_sent = 0
        self._bytes_received = 0

    @property
    def mode(self) -> SessionMode:
        return self._mode

    @property
    def editor(self) -> LineEditor:
        return self._editor

    @property
    def command_text(self) -> str:
        """Text typed so far at the command prompt."""
        return "".join(self._command)

    @property
    def is_shutting_down(self) -> bool:
        return self._shutdown.is_set()

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def run(self) -> SessionResult:
        """
        Run both flows until the session ends.

        Returns:
            SessionResult describing why the session ended.
        """
        if self._automation is not None:
            self._executor = ThreadPoolExecutor(
                max_workers=1, thread_name_prefix="baud-automation"
            )

        inbound = asyncio.create_task(self._inbound_loop(), name="bbs-to-terminal")
        try:
            await self._outbound_loop()
        finally:
            self._shutdown.set()
            await self._wait_inbound(inbound)
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None

        logger.info(
            f"Session ended: {self._reason}",
            lines_sent=self._lines_sent,
            bytes_received=self._bytes_received,
        )
        return SessionResult(
            mode=self._mode,
            reason=self._reason,
            error=self._error,
            lines_sent=self._lines_sent,
            bytes_received=self._bytes_received,
        )

    def stop(self, reason: str, error: str | None = None) -> None:
        """Request the end of the session. Only the first reason is kept."""
        if self._shutdown.is_set():
            return

        logger.debug(f"Shutting down: {reason}")
        self._reason = reason
        self._error = error
        self._mode = SessionMode.SHUTTING_DOWN
        self._shutdown.set()

    async def _wait_inbound(self, task: asyncio.Task[None]) -> None:
        try:
            await asyncio.wait_for(asyncio.shield(task), timeout=self._shutdown_timeout)
        except asyncio.TimeoutError:
            logger.debug("Inbound flow still blocked after shutdown timeout, cancelling")
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    # =========================================================================
    # Inbound: remote -> display
    # =========================================================================

    async def _inbound_loop(self) -> None:
        while not self._shutdown.is_set():
            try:
                data = await self._transport.read_chunk(self._chunk_size)
            except TransportError as e:
                if not self._shutdown.is_set():
                    logger.warning(f"Transport read failed: {e}")
                    self.stop("transport_error", str(e))
                return

            if not data:
                self.stop("remote_closed")
                return

            self._bytes_received += len(data)
            text = decode(data)
            try:
                self._terminal.write(text)
            except OSError as e:
                self.stop("terminal_error", f"Error writing to terminal: {e}")
                return

            self._submit_automation(text)

    def _submit_automation(self, text: str) -> None:
        if self._executor is None or self._automation is None:
            return
        self._executor.submit(self._automation.process_text, text)

    # =========================================================================
    # Outbound: keyboard -> remote
    # =========================================================================

    async def _outbound_loop(self) -> None:
        while not self._shutdown.is_set():
            if not self._transport.is_connected:
                self.stop("remote_closed")
                break

            unit = await self._terminal.read(self._poll_interval)
            if unit == END_OF_INPUT:
                self.stop("local_eof")
                break

            try:
                if unit is not None:
                    await self.dispatch(unit)
                if not self._shutdown.is_set():
                    await self._send_auto_response()
            except TransportError as e:
                logger.warning(f"Transport write failed: {e}")
                self.stop("transport_error", str(e))
            except OSError as e:
                logger.warning(f"Terminal write failed: {e}")
                self.stop("terminal_error", f"Error writing to terminal: {e}")

    async def dispatch(self, unit: str) -> None:
        """Route one keyboard unit according to the current mode."""
        if self._mode is SessionMode.SHUTTING_DOWN:
            return

        if self._mode is SessionMode.COMMAND:
            self._handle_command_input(unit)
            return

        if unit == ESCAPE_CHAR:
            self._enter_command_mode()
            return

        if self._editor.process_input(unit):
            line = self._editor.get_line()
            if self._expander is not None:
                line = self._expander.expand(line)
            try:
                await self._send_line(line)
            finally:
                self._editor.reset()

    async def _send_auto_response(self) -> None:
        if self._automation is None:
            return

        response = self._automation.poll_auto_response()
        if response is not None:
            logger.debug(f"Sending auto-response: {response!r}")
            await self._send_line(response)

    async def _send_line(self, text: str) -> None:
        await self._transport.write(encode(text + LINE_ENDING))
        self._lines_sent += 1

    # =========================================================================
    # Command mode
    # =========================================================================

    def _enter_command_mode(self) -> None:
        self._mode = SessionMode.COMMAND
        self._command.clear()
        self._terminal.write(COMMAND_PROMPT)
        logger.debug("Entered command mode")

    def _handle_command_input(self, unit: str) -> None:
        if unit in (CR, LF):
            command = "".join(self._command).strip()
            self._command.clear()
            self._run_command(command)
        elif unit in (BACKSPACE, BACKSPACE_ALT):
            if self._command:
                self._command.pop()
                self._terminal.write("\b \b")
        elif is_printable(unit):
            self._command.append(unit)
            self._terminal.write(unit)

    def _run_command(self, command: str) -> None:
        if command.lower() in QUIT_COMMANDS:
            self.stop("quit")
            return

        self._terminal.write(f"\r\nUnknown command: {command}\r\n")
        self._mode = SessionMode.SESSION
        logger.debug(f"Unknown command {command!r}, back to session mode")


__all__ = [
    "ESCAPE_CHAR",
    "COMMAND_PROMPT",
    "QUIT_COMMANDS",
    "SessionMode",
    "SessionResult",
    "SessionCoordinator",
]
