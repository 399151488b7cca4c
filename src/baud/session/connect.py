"""
Interactive telnet connection.

Ties the pieces of a session together: optional expansions and
automation, the telnet transport, the raw local terminal and the
session coordinator. Every failure ends up as a printed line and an
exit code so the CLI only has to pass the code on.
"""

from __future__ import annotations

from pathlib import Path

from rich.console import Console

from baud.automation import Automation
from baud.config import get_settings
from baud.exceptions import BaudError, ConfigFileError
from baud.expansions import ExpansionTable
from baud.logging import get_logger
from baud.session.coordinator import SessionCoordinator
from baud.session.transport import TelnetTransport
from baud.terminal.adapter import RawTerminal
from baud.terminal.modes import get_terminal_size, is_tty

logger = get_logger(__name__)

console = Console()


def load_expansions(path: str | Path | None) -> ExpansionTable | None:
    """Load the expansions file, or warn and return None."""
    if path is None:
        return None

    try:
        table = ExpansionTable.from_file(path)
    except ConfigFileError as e:
        console.print(f"[yellow]Warning:[/] Could not load expansions: {e}")
        return None

    console.print(f"[dim]Loaded {len(table)} expansions from {path}[/]")
    return table


def load_automation(
    scripts_dir: str | Path | None,
    patterns_path: str | Path | None,
) -> Automation | None:
    """Load scripts and trigger patterns, or warn and return None."""
    if scripts_dir is None and patterns_path is None:
        return None

    try:
        automation = Automation.from_paths(scripts_dir, patterns_path)
    except ConfigFileError as e:
        console.print(f"[yellow]Warning:[/] Could not load automation: {e}")
        return None

    engine = automation.engine
    scripts = engine.script_count if engine is not None else 0
    console.print(
        f"[dim]Loaded {scripts} scripts and {automation.trigger_count} trigger patterns[/]"
    )
    return automation


async def telnet_connect(
    host: str,
    port: int = 23,
    *,
    timeout: float | None = None,
    expansions_path: str | Path | None = None,
    scripts_dir: str | Path | None = None,
    patterns_path: str | Path | None = None,
) -> int:
    """
    Connect to a BBS and run an interactive session.

    Args:
        host: Hostname or IP address.
        port: Telnet port.
        timeout: Connect timeout in seconds, defaults to the configured one.
        expansions_path: Optional ``key=value`` shortcuts file.
        scripts_dir: Optional directory of automation scripts.
        patterns_path: Optional ``regex | script | comment`` trigger file.

    Returns:
        Exit code (0 on a normal end, 1 on error, 130 on interrupt).

    Example:
        >>> import asyncio
        >>> asyncio.run(telnet_connect("bbs.example.com"))

    Note:
        Requires a TTY. Press Ctrl+] and type ``quit`` to disconnect.
    """
    settings = get_settings()
    if timeout is None:
        timeout = settings.connect_timeout

    expander = load_expansions(expansions_path)
    automation = load_automation(scripts_dir, patterns_path)

    if not is_tty():
        console.print("[red]Error:[/] baud requires an interactive terminal (TTY)")
        return 1

    try:
        console.print(f"Connecting to {host}:{port}...")
        cols, rows = get_terminal_size()
        transport = await TelnetTransport.connect(
            host,
            port,
            timeout=timeout,
            term=settings.terminal_type,
            cols=cols,
            rows=rows,
        )
        console.print("[green]Connected![/] Press Ctrl+] followed by 'quit' to disconnect.")

        async with transport, RawTerminal() as terminal:
            coordinator = SessionCoordinator(
                transport,
                terminal,
                expander=expander,
                automation=automation,
                poll_interval=settings.input_poll_interval,
                shutdown_timeout=settings.shutdown_timeout,
                chunk_size=settings.read_chunk_size,
            )
            result = await coordinator.run()

    except KeyboardInterrupt:
        console.print("\n[yellow]Session interrupted.[/]")
        return 130

    except BaudError as e:
        logger.debug(f"Session failed: {e}")
        console.print(f"\n[red]Error:[/] {e}")
        return 1

    if result.error is not None:
        console.print(f"\n[red]Error:[/] {result.error}")
        return 1

    console.print(f"\n[dim]Disconnected from {host}[/]")
    return 0


__all__ = ["telnet_connect", "load_expansions", "load_automation"]
