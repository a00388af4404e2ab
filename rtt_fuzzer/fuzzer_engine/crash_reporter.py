"""
Crash Reporter - Diagnostics and state snapshots for failing steps
"""
import json
import logging
import pprint
from pathlib import Path
from typing import Any, Dict, Optional, Union
from ..interfaces import ICrashReporter
from ..models import DEFAULT_CRASH_STATE_PATH, GameSetup, View


logger = logging.getLogger(__name__)

crash_logger = logging.getLogger('rtt_fuzzer.crash')


class CrashReporter(ICrashReporter):
    """
    Dumps the context of a failing step so it can be investigated later.

    The view and a one-line step summary go to the ``rtt_fuzzer.crash``
    logger, and the full game state is written as JSON to a fixed path,
    replacing any earlier snapshot. Reporting never raises.
    """

    def __init__(self, crash_state_path: Union[str, Path] = DEFAULT_CRASH_STATE_PATH):
        self.crash_state_path = Path(crash_state_path)
        self.last_crash: Optional[Dict[str, Any]] = None

    def log_crash(self, game_setup: GameSetup, state: Any, view: Optional[View], step: int,
                  active: Any, action: Optional[str] = None, argument: Any = None) -> None:
        raw_view = view.raw if view is not None else None

        crash_logger.info("")
        crash_logger.info(f"VIEW {pprint.pformat(raw_view)}")
        if action is not None:
            crash_logger.info(f"STEP={step} ACTIVE={active} ACTION: {action} {_to_json(argument)}")
        else:
            crash_logger.info(f"STEP={step} ACTIVE={active}")

        written = self._write_state_to_disk(state)
        if written:
            crash_logger.info(f"STATE dumped to '{self.crash_state_path}'")

        self.last_crash = {
            'setup': game_setup.to_dict() if game_setup else None,
            'step': step,
            'active': active,
            'action': action,
            'argument': argument,
            'state_file': str(self.crash_state_path) if written else None,
        }

    def _write_state_to_disk(self, state: Any) -> bool:
        """Write the game state snapshot as JSON"""
        try:
            self.crash_state_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.crash_state_path, 'w') as f:
                f.write(_to_json(state))
            return True
        except Exception as e:
            logger.error(f"Failed to write crash state to disk: {e}")
            return False


def _to_json(value: Any) -> str:
    """JSON text for value; values JSON cannot encode are stored as their repr"""
    try:
        return json.dumps(value, default=str)
    except Exception as e:
        logger.error(f"Failed to encode {type(value).__name__} as JSON: {e}")
        return json.dumps(repr(value))


def load_crash_state(path: Union[str, Path] = DEFAULT_CRASH_STATE_PATH) -> Any:
    """Load a game state snapshot written by CrashReporter"""
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Crash state not found: {path}")

    with open(path, 'r') as f:
        return json.load(f)
