"""
Pattern triggers.

A trigger runs an automation script whenever its regular expression is
found in text received from the remote.

File format::

    # REGEX | SCRIPT | COMMENT
    Your health: (\\d+)/(\\d+) | health_monitor.lua | Auto-heal when low
    You are in (.+) | location_tracker.lua

The comment column is optional.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from baud.exceptions import ConfigFileError
from baud.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class PatternTrigger:
    """Compiled pattern and the script it runs."""

    pattern: re.Pattern[str]
    script_name: str
    comment: str = ""

    def search(self, text: str) -> tuple[str | None, ...] | None:
        """Capture groups of the first match in ``text``, or None."""
        match = self.pattern.search(text)
        if match is None:
            return None
        return match.groups()


def parse_triggers(text: str, source: str = "<string>") -> list[PatternTrigger]:
    """
    Parse trigger definitions.

    Lines without a separator, with an empty regex or script, or with an
    invalid regex are skipped.
    """
    triggers: list[PatternTrigger] = []

    for line_number, line in enumerate(text.splitlines(), start=1):
        stripped = line.strip()
        if not stripped or stripped.startswith("#"):
            continue

        parts = stripped.split("|")
        if len(parts) < 2:
            logger.debug(f"{source}:{line_number} missing separator, skipping: {line}")
            continue

        regex = parts[0].strip()
        script_name = parts[1].strip()
        comment = parts[2].strip() if len(parts) > 2 else ""

        if not regex or not script_name:
            logger.debug(f"{source}:{line_number} has empty regex or script, skipping: {line}")
            continue

        try:
            pattern = re.compile(regex)
        except re.error as e:
            logger.warning(f"{source}:{line_number} has invalid regex: {regex} - {e}")
            continue

        triggers.append(PatternTrigger(pattern, script_name, comment))
        logger.debug(f"Loaded pattern: {regex!r} -> {script_name} ({comment})")

    return triggers


def load_triggers(path: str | Path) -> list[PatternTrigger]:
    """
    Load trigger definitions from a file.

    Raises:
        ConfigFileError: If the file cannot be read.
    """
    try:
        text = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigFileError(str(path), e.strerror or str(e), cause=e) from e

    triggers = parse_triggers(text, source=str(path))
    logger.debug(f"Loaded {len(triggers)} patterns from {path}")
    return triggers


__all__ = ["PatternTrigger", "parse_triggers", "load_triggers"]
