"""
Tests for Crash Reporter
"""
import json
import logging
import pytest

from rtt_fuzzer.fuzzer_engine.crash_reporter import CrashReporter, load_crash_state
from rtt_fuzzer.models import GameSetup, View


@pytest.fixture
def reporter(tmp_path):
    """Create a crash reporter writing under a temporary directory"""
    return CrashReporter(tmp_path / "crash-state.json")


@pytest.fixture
def game_setup():
    return GameSetup(seed=12345, scenario="Standard")


@pytest.fixture
def sample_view():
    return View.from_raw({"active": "White", "actions": {"move": [1, 2]}})


def test_state_written_as_json(reporter, game_setup, sample_view):
    state = {"active": "White", "board": [1, 2, 3]}

    reporter.log_crash(game_setup, state, sample_view, 4, "White")

    assert json.loads(reporter.crash_state_path.read_text()) == state


def test_snapshot_overwritten(reporter, game_setup, sample_view):
    reporter.log_crash(game_setup, {"turn": 1}, sample_view, 1, "White")
    reporter.log_crash(game_setup, {"turn": 2}, sample_view, 2, "Black")

    assert load_crash_state(reporter.crash_state_path) == {"turn": 2}


def test_summary_without_action(reporter, game_setup, sample_view, caplog):
    caplog.set_level(logging.INFO)

    reporter.log_crash(game_setup, {}, sample_view, 7, "Black")

    assert "VIEW {'actions': {'move': [1, 2]}, 'active': 'White'}" in caplog.text
    assert "STEP=7 ACTIVE=Black" in caplog.text
    assert "ACTION" not in caplog.text
    assert f"STATE dumped to '{reporter.crash_state_path}'" in caplog.text


def test_summary_with_action(reporter, game_setup, sample_view, caplog):
    caplog.set_level(logging.INFO)

    reporter.log_crash(game_setup, {}, sample_view, 3, "White", "move", 2)

    assert "STEP=3 ACTIVE=White ACTION: move 2" in caplog.text


def test_last_crash_context(reporter, game_setup, sample_view):
    reporter.log_crash(game_setup, {}, sample_view, 3, "White", "move", 2)

    assert reporter.last_crash == {
        'setup': {'seed': 12345, 'scenario': 'Standard', 'options': {}},
        'step': 3,
        'active': 'White',
        'action': 'move',
        'argument': 2,
        'state_file': str(reporter.crash_state_path),
    }


def test_non_json_values_are_stringified(reporter, game_setup):
    reporter.log_crash(game_setup, {"cards": {7}}, None, 0, "White")

    assert load_crash_state(reporter.crash_state_path) == {"cards": "{7}"}


def test_write_failure_does_not_raise(tmp_path, game_setup, caplog):
    # The snapshot path is an existing directory, so opening it fails
    reporter = CrashReporter(tmp_path)

    reporter.log_crash(game_setup, {"turn": 1}, None, 0, "White")

    assert reporter.last_crash['state_file'] is None
    assert "Failed to write crash state to disk" in caplog.text


def test_creates_parent_directory(tmp_path, game_setup):
    reporter = CrashReporter(tmp_path / "artifacts" / "crash-state.json")

    reporter.log_crash(game_setup, {"turn": 1}, None, 0, "White")

    assert (tmp_path / "artifacts" / "crash-state.json").exists()


def test_load_missing_snapshot(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_crash_state(tmp_path / "missing.json")


def test_argument_with_non_string_keys(reporter, game_setup, sample_view, caplog):
    caplog.set_level(logging.INFO)
    argument = {(1, 2): "x"}

    reporter.log_crash(game_setup, {}, sample_view, 0, "White", "place", argument)

    assert "ACTION: place \"{(1, 2): 'x'}\"" in caplog.text
    assert reporter.last_crash['argument'] is argument


def test_circular_argument(reporter, game_setup, sample_view, caplog):
    caplog.set_level(logging.INFO)
    argument = [1]
    argument.append(argument)

    reporter.log_crash(game_setup, {}, sample_view, 0, "White", "place", argument)

    assert "ACTION: place \"[1, [...]]\"" in caplog.text
    assert "Failed to encode list as JSON" in caplog.text


def test_unencodable_state_still_written(reporter, game_setup):
    state = {"board": {(0, 0): "king"}}

    reporter.log_crash(game_setup, state, None, 0, "White")

    assert load_crash_state(reporter.crash_state_path) == repr(state)
