"""
Tests for the sample automation files shipped in examples/.
"""

from pathlib import Path

import pytest

from baud.automation import Automation
from baud.expansions import ExpansionTable

EXAMPLES = Path(__file__).resolve().parents[2] / "examples"


@pytest.fixture
def automation():
    return Automation.from_paths(EXAMPLES / "scripts", EXAMPLES / "patterns.txt")


class TestSampleAutomation:
    """Run the sample scripts through their patterns."""

    def test_loaded(self, automation):
        """All sample scripts and patterns load."""
        assert automation.engine.script_count == 3
        assert automation.trigger_count == 3

    def test_low_health_heals(self, automation):
        """Low health queues a potion."""
        automation.process_text("Your health: 20/100\r\n")

        assert automation.store.get("hp_current") == 20
        assert automation.poll_auto_response() == "use healing potion"

    def test_location_visits_counted(self, automation):
        """Visits to a location are counted."""
        automation.process_text("You are in Tavern")
        automation.process_text("You are in Tavern")

        assert automation.store.get("current_location") == "Tavern"
        assert automation.store.get("visits_Tavern") == 2

    def test_lands_on_target_planet(self, automation):
        """Scanning the target planet sends land."""
        automation.store.set("target_planet", 7)

        automation.process_text("Planet 3")
        assert automation.poll_auto_response() is None

        automation.process_text("Planet 7")
        assert automation.poll_auto_response() == "land"


def test_sample_expansions():
    """The sample expansions file loads."""
    table = ExpansionTable.from_file(EXAMPLES / "expansions.txt")
    assert table.expand("tp") == "teleport"
    assert len(table) == 3
