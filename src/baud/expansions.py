"""
Text expansions.

Shortcuts typed as a whole line are replaced by their expansion before
the line is sent, e.g. ``tp`` becomes ``teleport``.

File format::

    # Comments start with #
    shortcut=expansion text
    scapl1=sca pl 1
    tp=teleport

Keys and values are trimmed, the first ``=`` separates them, empty
values are allowed and later duplicates win.
"""

from __future__ import annotations

from pathlib import Path

from baud.exceptions import ConfigFileError
from baud.logging import get_logger

logger = get_logger(__name__)


class ExpansionTable:
    """Exact-match shortcut table."""

    def __init__(self, expansions: dict[str, str] | None = None) -> None:
        self._expansions: dict[str, str] = dict(expansions or {})

    @classmethod
    def from_file(cls, path: str | Path) -> ExpansionTable:
        """Create a table populated from ``path``."""
        table = cls()
        table.load(path)
        return table

    def load(self, path: str | Path) -> int:
        """
        Load expansions from a file.

        Args:
            path: Path to the expansions file.

        Returns:
            Number of entries loaded from this file.

        Raises:
            ConfigFileError: If the file cannot be read.
        """
        logger.debug(f"Loading expansions from: {path}")
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigFileError(str(path), e.strerror or str(e), cause=e) from e

        loaded = 0
        for line_number, line in enumerate(text.splitlines(), start=1):
            stripped = line.strip()
            if not stripped or stripped.startswith("#"):
                continue

            key, sep, value = stripped.partition("=")
            if not sep:
                logger.debug(f"Line {line_number} has no '=' separator, skipping: {line}")
                continue

            key = key.strip()
            if not key:
                logger.debug(f"Line {line_number} has empty key, skipping: {line}")
                continue

            self._expansions[key] = value.strip()
            loaded += 1

        logger.debug(f"Loaded {loaded} expansions from {path}")
        return loaded

    def expand(self, text: str) -> str:
        """Return the expansion for ``text``, or ``text`` unchanged."""
        expanded = self._expansions.get(text, text)
        if expanded != text:
            logger.debug(f"Expanded {text!r} -> {expanded!r}")
        return expanded

    def has_expansion(self, text: str) -> bool:
        return text in self._expansions

    def clear(self) -> None:
        self._expansions.clear()

    def __len__(self) -> int:
        return len(self._expansions)

    def __contains__(self, text: object) -> bool:
        return text in self._expansions

    def __repr__(self) -> str:
        return f"ExpansionTable({len(self)} entries)"


__all__ = ["ExpansionTable"]
