"""
Shared fixtures: a configurable counting game standing in for real rules
"""
import copy
import pytest
from types import SimpleNamespace

from rtt_fuzzer.models import FuzzerConfig


def make_rules(length=3, actions=None, include_actions=True, roles=("White", "Black"),
               scenarios=("Standard",), active="White", initial_state="play",
               fail_on_call=None, resign=True, fuzz_log=None):
    """
    Build a rules namespace for a game that ends after ``length`` actions.

    ``actions`` is the raw actions mapping every view offers (default
    ``{"next": 1}``). ``fail_on_call`` makes the n-th action() call raise.
    """
    calls = []
    views = []

    def setup(seed, scenario, options):
        return {"active": active, "state": initial_state, "count": 0,
                "seed": seed, "scenario": scenario}

    def view(state, role):
        views.append(role)
        v = {"active": state["active"], "state": state["state"], "count": state["count"]}
        if include_actions and state["state"] != "game_over":
            v["actions"] = copy.deepcopy(actions) if actions is not None else {"next": 1}
        return v

    def action(state, role, name, arg):
        calls.append((state["count"], role, name, arg))
        if fail_on_call is not None and len(calls) == fail_on_call:
            raise RuntimeError(f"rules broke on {name}")
        new_state = dict(state, count=state["count"] + 1)
        if new_state["count"] >= length:
            new_state["state"] = "game_over"
        return new_state

    rules = SimpleNamespace(
        roles=list(roles),
        scenarios=list(scenarios),
        setup=setup,
        view=view,
        action=action,
        calls=calls,
        views=views,
    )

    if resign:
        def do_resign(state, role):
            calls.append((state["count"], role, "_resign", None))
            return dict(state, state="game_over", resigned=role)
        rules.resign = do_resign

    if fuzz_log is not None:
        rules.fuzz_log = fuzz_log

    return rules


@pytest.fixture
def config(tmp_path):
    """Default configuration with the crash snapshot under tmp_path"""
    return FuzzerConfig(rules="unused.py", crash_state_path=str(tmp_path / "crash-state.json"))


@pytest.fixture(autouse=True)
def clean_fuzzer_env(monkeypatch):
    """Keep the caller's RTT_* settings out of the tests"""
    for variable in ("RTT_RULES", "MAX_STEPS", "NO_UNDO", "NO_RESIGN", "RND", "RTT_CRASH_STATE"):
        monkeypatch.delenv(variable, raising=False)
