"""
Two-player Nim in the shape the fuzzer expects from a rules module.

Players alternately take 1-3 stones from a single pile; whoever takes the
last stone wins. The first move is open to both players.
"""
import copy

roles = ["First", "Second"]
scenarios = ["Standard", "Long"]

PILE_SIZES = {"Standard": 15, "Long": 40}


def setup(seed, scenario, options):
    return {
        "seed": seed,
        "scenario": scenario,
        "pile": PILE_SIZES[scenario] + seed % 3,
        "active": "Both",
        "state": "take",
        "undo": [],
        "result": None,
    }


def view(state, role):
    v = {"pile": state["pile"], "active": state["active"], "state": state["state"]}
    if state["state"] == "game_over":
        return v
    if state["active"] in ("Both", role):
        v["actions"] = {
            "take": [n for n in (1, 2, 3) if n <= state["pile"]],
            "undo": 1 if state["undo"] else 0,
        }
    else:
        v["actions"] = {}
    return v


def _other(role):
    return roles[1] if role == roles[0] else roles[0]


def action(state, role, name, arg):
    state = copy.deepcopy(state)
    if name == "undo":
        if not state["undo"]:
            raise ValueError("nothing to undo")
        return state["undo"].pop()
    if name != "take":
        raise ValueError(f"unknown action {name}")
    if arg not in (1, 2, 3) or arg > state["pile"]:
        raise ValueError(f"cannot take {arg} from {state['pile']}")

    snapshot = copy.deepcopy(state)
    state["pile"] -= arg
    state["undo"] = [snapshot]
    if state["pile"] == 0:
        state["state"] = "game_over"
        state["result"] = role
    else:
        state["active"] = _other(role)
    return state


def resign(state, role):
    state = copy.deepcopy(state)
    state["state"] = "game_over"
    state["result"] = _other(role)
    return state
