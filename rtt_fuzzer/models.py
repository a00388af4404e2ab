"""
Core data models for the RTT Rules Fuzzer
"""
import math
from collections.abc import Iterable, Mapping, Sized
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


DEFAULT_MAX_STEPS = 2048
DEFAULT_MIN_BYTES = 16
DEFAULT_CRASH_STATE_PATH = "crash-state.json"

# Largest seed handed to setup(); matches the seeds used by the RTT server
MAX_SEED = 2**35 - 31

MULTI_ROLE_SENTINELS = ("Both", "All")
GAME_OVER = "game_over"
UNDO_ACTION = "undo"
RESIGN_ACTION = "_resign"


@dataclass
class FuzzerConfig:
    """Configuration for a fuzzing session"""
    rules: str = "rules.py"
    max_steps: int = DEFAULT_MAX_STEPS
    no_undo: bool = False
    no_resign: bool = False
    random: bool = False
    min_bytes: int = DEFAULT_MIN_BYTES
    crash_state_path: str = DEFAULT_CRASH_STATE_PATH


@dataclass(frozen=True)
class GameSetup:
    """Parameters the initial game state was built from"""
    seed: int
    scenario: Any
    options: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {'seed': self.seed, 'scenario': self.scenario, 'options': dict(self.options)}


class DescriptorKind(Enum):
    """What an action's value in a view means"""
    DISABLED = "disabled"
    FLAG = "flag"
    ARGUMENT_POOL = "argument_pool"


@dataclass(frozen=True)
class Disabled:
    """Action is shown but cannot be taken right now"""
    raw: Any = None
    kind = DescriptorKind.DISABLED


@dataclass(frozen=True)
class Flag:
    """Action is enabled and takes no chosen argument"""
    raw: Any = None
    kind = DescriptorKind.FLAG


@dataclass(frozen=True)
class ArgumentPool:
    """Action is enabled and takes one of the listed arguments"""
    values: tuple
    raw: Any = None
    kind = DescriptorKind.ARGUMENT_POOL

    def has_invalid_value(self) -> bool:
        """
        True when any argument is NaN or None.

        None stands for a missing argument and is rejected like NaN. Values are
        checked, never their positions.
        """
        return any(value is None or (isinstance(value, float) and math.isnan(value))
                   for value in self.values)


def classify_descriptor(raw: Any):
    """
    Classify a raw action value from a view.

    False, numeric zero and empty collections mean disabled. None, other
    booleans, numbers and strings are flags. Mappings offer their keys and
    any other iterable offers its elements as arguments.
    """
    if raw is False:
        return Disabled(raw)
    if raw is None or isinstance(raw, bool):
        return Flag(raw)
    if isinstance(raw, (int, float)):
        return Disabled(raw) if raw == 0 else Flag(raw)
    if isinstance(raw, Sized) and len(raw) == 0:
        return Disabled(raw)
    if isinstance(raw, str):
        return Flag(raw)
    if isinstance(raw, Mapping):
        return ArgumentPool(tuple(raw.keys()), raw)
    if isinstance(raw, Iterable):
        values = tuple(raw)
        return ArgumentPool(values, raw) if values else Disabled(raw)
    return Flag(raw)


@dataclass
class View:
    """A role's projection of the game state for one step"""
    raw: Mapping
    actions: Optional[Dict[str, Any]] = None

    @classmethod
    def from_raw(cls, raw: Mapping) -> 'View':
        raw_actions = raw.get('actions') if raw is not None else None
        if raw_actions is None:
            return cls(raw=raw, actions=None)
        actions = {name: classify_descriptor(value) for name, value in raw_actions.items()}
        return cls(raw=raw, actions=actions)


class TurnState(Enum):
    """States of the turn stepper"""
    INIT = "init"
    RUNNING = "running"
    GAME_OVER = "game_over"
    INSUFFICIENT_INPUT = "insufficient_input"
    BOUND_EXCEEDED = "bound_exceeded"
    NO_ACTIONS = "no_actions"
    INVALID_ARG = "invalid_arg"
    RULES_CRASH = "rules_crash"


@dataclass
class StepRecord:
    """A single accepted action"""
    step: int
    active: Any
    action: str
    argument: Any = None


@dataclass
class RunResult:
    """Result of one fuzz invocation that did not raise"""
    outcome: TurnState
    steps: int
    setup: Optional[GameSetup] = None
    final_state: Any = None
    history: List[StepRecord] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.outcome == TurnState.GAME_OVER
