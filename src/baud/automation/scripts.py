"""
Automation script engine.

Scripts are Lua files run in one embedded Lua runtime each time a
trigger fires. The runtime exposes these globals:

    match       table of the trigger's regex captures (1-indexed)
    setState    setState(key, value) - store a value
    getState    getState(key) - read a stored value, nil if unset
    send        send(text) - queue text to be sent as if typed

Example (``health_monitor.lua``)::

    local current = tonumber(match[1])
    local maximum = tonumber(match[2])
    setState("hp_current", current)
    if current / maximum < 0.3 then
        send("use healing potion")
    end
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from lupa import lua54

from baud.automation.store import StateStore
from baud.exceptions import ConfigFileError, ScriptError, ScriptNotFoundError
from baud.logging import get_logger

logger = get_logger(__name__)

SCRIPT_SUFFIX = ".lua"


class ScriptEngine:
    """Loads Lua automation scripts and runs them against a StateStore."""

    def __init__(self, scripts_dir: str | Path | None, store: StateStore) -> None:
        self._scripts_dir = Path(scripts_dir) if scripts_dir is not None else None
        self._store = store
        self._scripts: dict[str, Any] = {}
        self._lock = threading.Lock()

        self._lua = lua54.LuaRuntime(unpack_returned_tuples=True)
        lua_globals = self._lua.globals()
        lua_globals.setState = self._set_state
        lua_globals.getState = self._get_state
        lua_globals.send = self._send

    @property
    def store(self) -> StateStore:
        return self._store

    @property
    def script_count(self) -> int:
        return len(self._scripts)

    def has_script(self, name: str) -> bool:
        return name in self._scripts

    def load_all(self) -> int:
        """
        Load every script under the scripts directory (recursively).

        Scripts that cannot be read or compiled are skipped with a warning.

        Returns:
            Number of scripts loaded.

        Raises:
            ConfigFileError: If the directory does not exist.
        """
        if self._scripts_dir is None:
            return 0

        if not self._scripts_dir.is_dir():
            raise ConfigFileError(str(self._scripts_dir), "scripts directory does not exist")

        logger.debug(f"Loading scripts from: {self._scripts_dir}")
        for path in sorted(self._scripts_dir.rglob(f"*{SCRIPT_SUFFIX}")):
            if not path.is_file():
                continue
            try:
                self.add_script(path.name, path.read_text(encoding="utf-8"))
            except OSError as e:
                logger.warning(f"Could not load script {path.name}: {e}")
            except ScriptError as e:
                logger.warning(str(e))

        logger.debug(f"Loaded {len(self._scripts)} scripts")
        return len(self._scripts)

    def add_script(self, name: str, source: str) -> None:
        """
        Compile and register a script under ``name``.

        Raises:
            ScriptError: If the source does not compile.
        """
        self._scripts[name] = self._compile(source, name)
        logger.debug(f"Loaded script: {name}")

    def execute(self, name: str, captures: tuple[str | None, ...] = ()) -> None:
        """
        Run a loaded script.

        Args:
            name: Script file name, e.g. ``health_monitor.lua``.
            captures: Regex capture groups exposed as ``match``.

        Raises:
            ScriptNotFoundError: If no script with that name was loaded.
            ScriptError: If the script raises a Lua error.
        """
        chunk = self._scripts.get(name)
        if chunk is None:
            raise ScriptNotFoundError(name)

        logger.debug(f"Executing script: {name} with {len(captures)} captures")
        self._run(chunk, name, captures)

    def execute_code(self, source: str) -> None:
        """
        Run inline Lua code with the same globals as scripts.

        Raises:
            ScriptError: If the code does not compile or raises.
        """
        self._run(self._compile(source, "inline"), "inline", ())

    def _compile(self, source: str, name: str) -> Any:
        with self._lock:
            try:
                return self._lua.compile(source, name=name)
            except lua54.LuaError as e:
                raise ScriptError(name, str(e), cause=e) from e

    def _run(self, chunk: Any, name: str, captures: tuple[str | None, ...]) -> None:
        with self._lock:
            self._lua.globals().match = self._lua.table_from(list(captures))
            try:
                chunk()
            except lua54.LuaError as e:
                raise ScriptError(name, str(e), cause=e) from e

    # =========================================================================
    # Lua globals
    # =========================================================================

    def _set_state(self, key: Any, value: Any) -> None:
        self._store.set(str(key), self._from_lua(value))

    def _get_state(self, key: Any) -> Any:
        return self._store.get(str(key))

    def _send(self, text: Any) -> None:
        if text is not None:
            self._store.queue_response(str(text))

    @staticmethod
    def _from_lua(value: Any) -> Any:
        if value is None or isinstance(value, (bool, int, str)):
            return value
        if isinstance(value, float):
            return int(value) if value.is_integer() else value
        # Tables and functions only live inside the runtime.
        return str(value)

    def __repr__(self) -> str:
        return f"ScriptEngine({self._scripts_dir}, {len(self._scripts)} scripts)"


__all__ = ["ScriptEngine", "SCRIPT_SUFFIX"]
