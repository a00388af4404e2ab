"""
Turn Stepper - Plays a game to completion with fuzzer-chosen moves

Each step resolves who acts, normalizes the actions the rules offer, picks
an action and argument through the choice provider and applies it. The loop
ends on game over, on exhausted input, or with a classified failure.
"""
import logging
import traceback
from typing import Any, List, Optional, Tuple
from ..interfaces import IChoiceProvider, ICrashReporter, IRulesEngine
from ..models import (
    ArgumentPool, DescriptorKind, Flag, FuzzerConfig, GameSetup, StepRecord, TurnState, View,
    GAME_OVER, MULTI_ROLE_SENTINELS, RESIGN_ACTION, UNDO_ACTION
)
from .error_handler import (
    BoundExceeded, ErrorHandler, FuzzFailure, InputExhausted, InvalidActionArgument,
    NoActionsAvailable, RulesEngineFailure
)

logger = logging.getLogger(__name__)


class TurnStepper:
    """Owns the game loop for one fuzz run"""

    def __init__(self, rules: IRulesEngine, choices: IChoiceProvider, config: FuzzerConfig,
                 crash_reporter: ICrashReporter, error_handler: Optional[ErrorHandler] = None):
        self.rules = rules
        self.choices = choices
        self.config = config
        self.crash_reporter = crash_reporter
        self.error_handler = error_handler or ErrorHandler()

        self.turn_state = TurnState.INIT
        self.step = 0
        self.game_setup: Optional[GameSetup] = None
        self.state: Any = None
        self.history: List[StepRecord] = []

    def has_enough_input(self) -> bool:
        return self.choices.remaining_bytes >= self.config.min_bytes

    def run(self, game_setup: Optional[GameSetup], state: Any) -> TurnState:
        """
        Step the game from ``state`` until it terminates.

        Returns GAME_OVER or INSUFFICIENT_INPUT. Failures are reported and
        raised as FuzzFailure subclasses.
        """
        self.game_setup = game_setup
        self.state = state
        self.step = 0
        self.history = []
        self.turn_state = TurnState.RUNNING

        try:
            while self.turn_state == TurnState.RUNNING:
                self._run_step()
        except InputExhausted as e:
            logger.debug(f"Input exhausted at step {self.step}: {e}")
            self.turn_state = TurnState.INSUFFICIENT_INPUT

        return self.turn_state

    def _run_step(self) -> None:
        if not self.has_enough_input():
            logger.debug(f"Insufficient input to continue at step {self.step}")
            self.turn_state = TurnState.INSUFFICIENT_INPUT
            return

        active = self.resolve_active(self.state)
        view = self.rules.view(self.state, active)

        if self.step > self.config.max_steps:
            self._fail(BoundExceeded, TurnState.BOUND_EXCEEDED,
                       f"Maximum step count (MAX_STEPS={self.config.max_steps}) exceeded", view, active)

        if self.state.get('state') == GAME_OVER:
            logger.debug(f"Game over after {self.step} steps")
            self.turn_state = TurnState.GAME_OVER
            return

        if view.actions is None:
            self._fail(NoActionsAvailable, TurnState.NO_ACTIONS, "No actions defined", view, active)

        actions = self.normalize_actions(view)
        if not actions:
            self._fail(NoActionsAvailable, TurnState.NO_ACTIONS,
                       "No more actions to take (besides undo)", view, active)

        names = [name for name, _ in actions]
        action = self.choices.pick_one(names)
        descriptor = dict(actions)[action]
        argument = self._resolve_argument(action, descriptor, view, active)

        self.rules.fuzz_log({
            'state': self.state,
            'view': view.raw,
            'actions': names,
            'chosen_action': action,
            'args': descriptor.raw,
            'chosen_arg': argument,
        })

        try:
            if action == RESIGN_ACTION:
                new_state = self.rules.resign(self.state, active)
            else:
                new_state = self.rules.action(self.state, active, action, argument)
        except Exception as e:
            self._fail(RulesEngineFailure, TurnState.RULES_CRASH, f"{type(e).__name__}: {e}",
                       view, active, action, argument, cause=e, trace=traceback.format_exc())

        self.history.append(StepRecord(self.step, active, action, argument))
        self.state = new_state
        self.step += 1

    def resolve_active(self, state: Any) -> Any:
        """Pick a concrete role when several may act"""
        active = state.get('active')
        if active in MULTI_ROLE_SENTINELS:
            active = self.choices.pick_one(self.rules.roles)
        return active

    def normalize_actions(self, view: View) -> List[Tuple[str, Any]]:
        """
        Build the choosable actions for a view.

        The list is assembled fresh from the view's actions: ``undo`` is
        dropped when undo is suppressed, ``_resign`` is added when the rules
        support resignation, and disabled actions are removed.
        """
        offer_resign = not self.config.no_resign and self.rules.can_resign

        actions = []
        for name, descriptor in (view.actions or {}).items():
            if name == UNDO_ACTION and self.config.no_undo:
                continue
            if name == RESIGN_ACTION and offer_resign:
                continue
            actions.append((name, descriptor))

        if offer_resign:
            actions.append((RESIGN_ACTION, Flag(1)))

        return [(name, d) for name, d in actions if d.kind != DescriptorKind.DISABLED]

    def _resolve_argument(self, action: str, descriptor: Any, view: View, active: Any) -> Any:
        if not isinstance(descriptor, ArgumentPool):
            return None

        if descriptor.has_invalid_value():
            self._fail(InvalidActionArgument, TurnState.INVALID_ARG,
                       f"Action '{action}' argument has NaN or None value", view, active)

        return self.choices.pick_one(descriptor.values)

    def _fail(self, failure_class, terminal: TurnState, message: str, view: Optional[View],
              active: Any, action: Optional[str] = None, argument: Any = None,
              cause: Optional[BaseException] = None, trace: Optional[str] = None) -> None:
        """Dump diagnostics, record the failure and raise it"""
        self.crash_reporter.log_crash(self.game_setup, self.state, view, self.step, active, action, argument)
        self.turn_state = terminal

        failure: FuzzFailure = failure_class(message, cause=cause, trace=trace, step=self.step)
        self.error_handler.record(failure)
        if cause is not None:
            raise failure from cause
        raise failure
