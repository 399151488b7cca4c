"""
Pattern-triggered automation.

Usage:
    >>> from baud.automation import Automation
    >>> automation = Automation.from_paths("scripts/", "patterns.txt")
    >>> automation.process_text("Your health: 10/100")
    >>> automation.poll_auto_response()
    'use healing potion'
"""

from baud.automation.engine import Automation
from baud.automation.scripts import ScriptEngine
from baud.automation.store import StateStore
from baud.automation.triggers import PatternTrigger, load_triggers, parse_triggers

__all__ = [
    "Automation",
    "ScriptEngine",
    "StateStore",
    "PatternTrigger",
    "load_triggers",
    "parse_triggers",
]
