"""
Logging setup for baud.

Log records go through structlog on top of the standard library so that
third-party loggers (telnetlib3, asyncio) share one destination. While a
session is running the terminal is in raw mode, so logs should normally
be sent to a file rather than stderr.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

_configured = False
_handler: logging.Handler | None = None


def setup_logging(
    level: str = "WARNING",
    json_output: bool = False,
    log_file: str | None = None,
) -> None:
    """
    Configure structlog and the standard library root logger.

    Calling it again replaces the handler installed by the previous call.

    Args:
        level: Minimum level name (DEBUG, INFO, WARNING, ERROR).
        json_output: Render records as JSON lines instead of console text.
        log_file: Append records to this file instead of stderr.
    """
    global _configured, _handler

    if log_file:
        handler: logging.Handler = logging.FileHandler(log_file, encoding="utf-8")
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    if _handler is not None:
        root.removeHandler(_handler)
        _handler.close()
    root.addHandler(handler)
    root.setLevel(level.upper())
    _handler = handler

    if json_output:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=log_file is None and sys.stderr.isatty())

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    _configured = True


def is_configured() -> bool:
    """True once setup_logging() has run."""
    return _configured


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Return a structlog logger bound to ``name``.

    Installs the default configuration (warnings to stderr) on first
    use so library callers never get structlog's print-to-stdout default.
    """
    if not _configured:
        setup_logging()
    return structlog.get_logger(name)


__all__ = ["setup_logging", "get_logger", "is_configured"]
