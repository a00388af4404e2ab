"""
Tests for the rules adapter and loader
"""
import pytest
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import Mock

from rtt_fuzzer.models import DescriptorKind
from rtt_fuzzer.rules_engine import RulesEngine, RulesNotFoundError, load_rules

from conftest import make_rules


EXAMPLE_RULES = Path(__file__).parent.parent / "examples" / "nim_rules.py"


class TestRulesEngine:
    """Test the RulesEngine adapter"""

    def test_missing_attributes_rejected(self):
        with pytest.raises(ValueError, match="setup, view, action"):
            RulesEngine(SimpleNamespace(roles=[], scenarios=[]), name="broken")

    def test_roles_and_scenarios(self):
        engine = RulesEngine(make_rules(roles=("A", "B", "C"), scenarios=("X",)))

        assert engine.roles == ["A", "B", "C"]
        assert engine.scenarios == ["X"]

    def test_view_is_classified(self):
        engine = RulesEngine(make_rules(actions={"move": [1, 2], "undo": 0}))

        view = engine.view(engine.setup(1, "Standard", {}), "White")

        assert view.actions["move"].kind == DescriptorKind.ARGUMENT_POOL
        assert view.actions["undo"].kind == DescriptorKind.DISABLED
        assert view.raw["count"] == 0

    def test_can_resign(self):
        assert RulesEngine(make_rules(resign=True)).can_resign
        assert not RulesEngine(make_rules(resign=False)).can_resign

    def test_resign_without_support(self):
        engine = RulesEngine(make_rules(resign=False))

        with pytest.raises(NotImplementedError):
            engine.resign({}, "White")

    def test_fuzz_log_forwarded(self):
        fuzz_log = Mock()
        engine = RulesEngine(make_rules(fuzz_log=fuzz_log))

        engine.fuzz_log({"chosen_action": "next"})

        fuzz_log.assert_called_once_with({"chosen_action": "next"})

    def test_fuzz_log_optional(self):
        engine = RulesEngine(make_rules())

        assert not engine.has_fuzz_log
        engine.fuzz_log({"chosen_action": "next"})


class TestLoadRules:
    """Test loading rules modules"""

    def test_load_from_file(self):
        engine = load_rules(EXAMPLE_RULES)

        assert engine.name == "nim_rules.py"
        assert engine.roles == ["First", "Second"]
        assert engine.scenarios == ["Standard", "Long"]
        assert engine.can_resign

    def test_loaded_rules_play(self):
        engine = load_rules(str(EXAMPLE_RULES))
        state = engine.setup(3, "Standard", {})

        state = engine.action(state, "First", "take", 2)

        assert state["pile"] == 13
        assert state["active"] == "Second"

    def test_missing_file(self, tmp_path):
        with pytest.raises(RulesNotFoundError, match="RTT_RULES"):
            load_rules(tmp_path / "missing_rules.py")

    def test_load_by_module_name(self, tmp_path, monkeypatch):
        (tmp_path / "tiny_rules.py").write_text(
            "roles = ['Solo']\n"
            "scenarios = ['Only']\n"
            "def setup(seed, scenario, options):\n"
            "    return {'active': 'Solo', 'state': 'game_over'}\n"
            "def view(state, role):\n"
            "    return {}\n"
            "def action(state, role, name, arg):\n"
            "    return state\n"
        )
        monkeypatch.syspath_prepend(str(tmp_path))

        engine = load_rules("tiny_rules")

        assert engine.name == "tiny_rules"
        assert engine.roles == ["Solo"]
        assert not engine.can_resign

    def test_missing_module(self):
        with pytest.raises(RulesNotFoundError):
            load_rules("no_such_rules_module_xyz")
