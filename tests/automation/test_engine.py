"""
Tests for the automation facade.
"""

import re

from baud.automation import Automation, PatternTrigger, ScriptEngine, StateStore


def make_automation(scripts: dict[str, str], triggers: list[tuple[str, str]]) -> Automation:
    store = StateStore()
    engine = ScriptEngine(None, store)
    for name, source in scripts.items():
        engine.add_script(name, source)
    return Automation(
        store,
        engine,
        [PatternTrigger(re.compile(regex), name) for regex, name in triggers],
    )


class TestProcessText:
    """Tests for Automation.process_text()."""

    def test_matching_trigger_runs_script(self):
        """A match runs the script with its captures."""
        automation = make_automation(
            {"loc.lua": "setState('room', match[1])"},
            [(r"You are in (.+)\.", "loc.lua")],
        )

        automation.process_text("You are in the Tavern.")

        assert automation.store.get("room") == "the Tavern"

    def test_every_trigger_checked(self):
        """All matching triggers fire in order."""
        automation = make_automation(
            {"a.lua": "send('a')", "b.lua": "send('b')"},
            [("Menu", "a.lua"), ("Menu", "b.lua"), ("Nope", "a.lua")],
        )

        automation.process_text("Main Menu")

        assert automation.poll_auto_response() == "a"
        assert automation.poll_auto_response() == "b"
        assert automation.poll_auto_response() is None

    def test_no_match(self):
        """Text without matches runs nothing."""
        automation = make_automation({"a.lua": "send('a')"}, [("Menu", "a.lua")])
        automation.process_text("Welcome")
        assert automation.poll_auto_response() is None

    def test_failing_script_does_not_raise(self):
        """A script error is logged and later triggers still run."""
        automation = make_automation(
            {"bad.lua": "error('broken')", "good.lua": "send('ok')"},
            [("x", "bad.lua"), ("x", "good.lua")],
        )

        automation.process_text("x")

        assert automation.poll_auto_response() == "ok"

    def test_missing_script_does_not_raise(self):
        """A trigger naming an unknown script is logged."""
        automation = make_automation({}, [("x", "missing.lua")])
        automation.process_text("x")
        assert automation.poll_auto_response() is None

    def test_without_engine(self):
        """Without an engine nothing happens."""
        automation = Automation(triggers=[PatternTrigger(re.compile("x"), "a.lua")])
        automation.process_text("x")
        assert automation.poll_auto_response() is None

    def test_add_triggers(self):
        """Triggers can be added after construction."""
        automation = make_automation({"a.lua": "send('a')"}, [])
        automation.add_triggers([PatternTrigger(re.compile("x"), "a.lua")])

        automation.process_text("x")

        assert automation.trigger_count == 1
        assert automation.poll_auto_response() == "a"


class TestFromPaths:
    """Tests for Automation.from_paths()."""

    def test_load(self, tmp_path):
        """Scripts and patterns are loaded from disk."""
        scripts = tmp_path / "scripts"
        scripts.mkdir()
        (scripts / "ret.lua").write_text("send('')\nsend('\\r')\n")
        patterns = tmp_path / "patterns.txt"
        patterns.write_text("Press RETURN | ret.lua | Continue\n")

        automation = Automation.from_paths(scripts, patterns)

        assert automation.engine.script_count == 1
        assert automation.trigger_count == 1
        automation.process_text("-- Press RETURN --")
        assert automation.poll_auto_response() == "\r"

    def test_patterns_without_scripts(self, tmp_path):
        """Patterns alone load but never run anything."""
        patterns = tmp_path / "patterns.txt"
        patterns.write_text("x | a.lua\n")

        automation = Automation.from_paths(None, patterns)
        automation.process_text("x")

        assert automation.trigger_count == 1
        assert automation.poll_auto_response() is None
