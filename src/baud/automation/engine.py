"""
Automation facade used by the session engine.

Received text is matched against every trigger; each match runs the
trigger's script with the capture groups. Whatever a script queues with
``send()`` is picked up by the session loop through
``poll_auto_response()``.

Failures never leave this class: a broken script is logged and the
session keeps running.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from baud.automation.scripts import ScriptEngine
from baud.automation.store import StateStore
from baud.automation.triggers import PatternTrigger, load_triggers
from baud.exceptions import ScriptError
from baud.logging import get_logger

logger = get_logger(__name__)


class Automation:
    """Pattern-triggered scripts plus their auto-response queue."""

    def __init__(
        self,
        store: StateStore | None = None,
        engine: ScriptEngine | None = None,
        triggers: Iterable[PatternTrigger] = (),
    ) -> None:
        self._store = store if store is not None else StateStore()
        self._engine = engine
        self._triggers: list[PatternTrigger] = list(triggers)

    @classmethod
    def from_paths(
        cls,
        scripts_dir: str | Path | None = None,
        patterns_path: str | Path | None = None,
    ) -> Automation:
        """
        Build an automation from a scripts directory and a patterns file.

        Raises:
            ConfigFileError: If either path cannot be read.
        """
        store = StateStore()
        engine = ScriptEngine(scripts_dir, store)
        engine.load_all()
        triggers = load_triggers(patterns_path) if patterns_path is not None else []
        return cls(store, engine, triggers)

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def engine(self) -> ScriptEngine | None:
        return self._engine

    @property
    def trigger_count(self) -> int:
        return len(self._triggers)

    def add_triggers(self, triggers: Iterable[PatternTrigger]) -> None:
        self._triggers.extend(triggers)

    def process_text(self, text: str) -> None:
        """
        Run the scripts of every trigger found in ``text``.

        Never raises.
        """
        if self._engine is None or not self._triggers:
            return

        for trigger in self._triggers:
            try:
                captures = trigger.search(text)
                if captures is None:
                    continue

                logger.debug(
                    f"Pattern matched: {trigger.pattern.pattern} -> {trigger.script_name}"
                )
                self._engine.execute(trigger.script_name, captures)
            except ScriptError as e:
                logger.warning(f"Error executing script {trigger.script_name}: {e}")
            except Exception:
                logger.exception(f"Unexpected error in trigger {trigger.script_name}")

    def poll_auto_response(self) -> str | None:
        """Next queued auto-response without blocking."""
        return self._store.poll_response()

    def __repr__(self) -> str:
        return f"Automation({len(self._triggers)} triggers, engine={self._engine!r})"


__all__ = ["Automation"]
