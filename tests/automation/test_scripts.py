"""
Tests for the Lua automation script engine.
"""

import pytest

from baud.automation.scripts import ScriptEngine
from baud.automation.store import StateStore
from baud.exceptions import ConfigFileError, ScriptError, ScriptNotFoundError

HEALTH_MONITOR = """\
local current = tonumber(match[1])
local maximum = tonumber(match[2])
setState("hp_current", current)
setState("hp_max", maximum)
if current / maximum < 0.3 then
    send("use healing potion")
end
"""


@pytest.fixture
def store():
    return StateStore()


@pytest.fixture
def engine(store):
    return ScriptEngine(None, store)


@pytest.fixture
def scripts_dir(tmp_path):
    root = tmp_path / "scripts"
    (root / "combat").mkdir(parents=True)
    (root / "health_monitor.lua").write_text(HEALTH_MONITOR)
    (root / "combat" / "flee.lua").write_text("send('flee')\n")
    (root / "broken.lua").write_text("this is not lua !!!\n")
    (root / "notes.txt").write_text("not a script")
    return root


class TestLoadAll:
    """Tests for ScriptEngine.load_all()."""

    def test_loads_recursively(self, scripts_dir, store):
        """Scripts in subdirectories are loaded by file name."""
        engine = ScriptEngine(scripts_dir, store)

        assert engine.load_all() == 2
        assert engine.has_script("health_monitor.lua")
        assert engine.has_script("flee.lua")
        assert engine.script_count == 2

    def test_broken_script_skipped(self, scripts_dir, store):
        """A script that does not compile is skipped."""
        engine = ScriptEngine(scripts_dir, store)
        engine.load_all()
        assert not engine.has_script("broken.lua")

    def test_no_directory(self, engine):
        """No directory means no scripts."""
        assert engine.load_all() == 0

    def test_missing_directory(self, tmp_path, store):
        """A missing directory raises ConfigFileError."""
        with pytest.raises(ConfigFileError, match="does not exist"):
            ScriptEngine(tmp_path / "nope", store).load_all()


class TestExecute:
    """Tests for running scripts."""

    def test_captures_and_state(self, engine, store):
        """Scripts see captures as a 1-indexed match table and update the store."""
        engine.add_script("health_monitor.lua", HEALTH_MONITOR)

        engine.execute("health_monitor.lua", ("25", "100"))

        assert store.get("hp_current") == 25
        assert store.get("hp_max") == 100
        assert store.poll_response() == "use healing potion"

    def test_no_response_when_healthy(self, engine, store):
        """send is only called when the script decides to."""
        engine.add_script("health_monitor.lua", HEALTH_MONITOR)

        engine.execute("health_monitor.lua", ("90", "100"))

        assert store.poll_response() is None

    def test_match_values_are_strings(self, engine, store):
        """Captures reach Lua as strings."""
        engine.add_script("who.lua", "setState('name', match[3]); setState('n', #match)")

        engine.execute("who.lua", ("100", "200", "John"))

        assert store.get("name") == "John"
        assert store.get("n") == 3

    @pytest.mark.parametrize(
        "code, expected",
        [
            ("setState('v', 'hello')", "hello"),
            ("setState('v', 42)", 42),
            ("setState('v', 3.14)", 3.14),
            ("setState('v', 10 / 2)", 5),
            ("setState('v', true)", True),
            ("setState('v', nil)", None),
        ],
    )
    def test_state_value_types(self, engine, store, code, expected):
        """Lua values are stored as the matching Python type."""
        engine.execute_code(code)
        assert store.get("v") == expected
        assert type(store.get("v")) is type(expected)

    def test_get_state(self, engine, store):
        """Scripts can read earlier state."""
        store.set("visits", 1)

        engine.execute_code("setState('visits', getState('visits') + 1)")

        assert store.get("visits") == 2

    def test_get_state_missing_is_nil(self, engine, store):
        """Unset keys read as nil."""
        engine.execute_code("setState('result', getState('nonexistent') == nil)")
        assert store.get("result") is True

    def test_send_order(self, engine, store):
        """Several sends are queued in order."""
        engine.execute_code("send('cmd1'); send('cmd2'); send('cmd3')")

        assert store.poll_response() == "cmd1"
        assert store.poll_response() == "cmd2"
        assert store.poll_response() == "cmd3"
        assert store.poll_response() is None

    def test_match_replaced_each_run(self, engine, store):
        """match only holds the captures of the current run."""
        engine.add_script("count.lua", "setState('n', #match)")

        engine.execute("count.lua", ("a", "b"))
        engine.execute("count.lua")

        assert store.get("n") == 0

    def test_unknown_script(self, engine):
        """Running an unknown script raises ScriptNotFoundError."""
        with pytest.raises(ScriptNotFoundError, match="not found"):
            engine.execute("missing.lua")

    def test_runtime_error(self, engine):
        """A Lua error while running becomes ScriptError."""
        engine.add_script("bad.lua", "local x = nil; x.field = 1")

        with pytest.raises(ScriptError) as exc_info:
            engine.execute("bad.lua")
        assert exc_info.value.script_name == "bad.lua"

    def test_explicit_error(self, engine):
        """error() in a script surfaces its message."""
        with pytest.raises(ScriptError, match="boom"):
            engine.execute_code("error('boom')")

    def test_syntax_error(self, engine):
        """add_script rejects code that does not compile."""
        with pytest.raises(ScriptError, match="bad.lua"):
            engine.add_script("bad.lua", "this is invalid lua syntax !!!!")

    def test_execute_code_error(self, engine):
        """Inline failures raise ScriptError named inline."""
        with pytest.raises(ScriptError) as exc_info:
            engine.execute_code("if then")
        assert exc_info.value.script_name == "inline"
