"""
Main entry point for the RTT Rules Fuzzer
"""
import logging
import random
from typing import Any, Optional
from .interfaces import IRulesEngine
from .models import FuzzerConfig, GameSetup, MAX_SEED, RunResult, TurnState
from .fuzzer_engine import (
    CrashReporter, ErrorHandler, InputExhausted, TurnStepper, make_choice_provider
)
from .rules_engine import load_rules

logger = logging.getLogger(__name__)

# Returned to libFuzzer to reject an input from the corpus
SKIP_INPUT = -1


class RulesFuzzer:
    """Main orchestrator for the RTT Rules Fuzzer"""

    def __init__(self, config: Optional[FuzzerConfig] = None, rules: Optional[IRulesEngine] = None,
                 rng: Optional[random.Random] = None):
        """
        Initialize the fuzzer, loading the rules named by the config unless
        a rules engine is given.
        """
        self.config = config or FuzzerConfig()
        self.rng = rng

        logger.info(f"Loading rtt-fuzzer RTT_RULES='{self.config.rules}' MAX_STEPS={self.config.max_steps}")
        logger.info(f"RANDOM='{self.config.random}' NO_UNDO='{self.config.no_undo}' "
                    f"NO_RESIGN='{self.config.no_resign}'")

        self.rules = rules if rules is not None else load_rules(self.config.rules)
        self.crash_reporter = CrashReporter(self.config.crash_state_path)
        self.error_handler = ErrorHandler()
        self.last_setup: Optional[GameSetup] = None

    def run(self, data: bytes, initial_state: Any = None) -> RunResult:
        """
        Play one game driven by ``data``.

        With ``initial_state`` (for example a crash snapshot) the game
        continues from that state instead of drawing a seed and scenario and
        calling setup.

        Returns a RunResult with outcome GAME_OVER or INSUFFICIENT_INPUT;
        classified failures propagate as FuzzFailure.
        """
        self.last_setup = None
        choices = make_choice_provider(data, randomize=self.config.random, rng=self.rng)

        if choices.remaining_bytes < self.config.min_bytes:
            logger.debug("Insufficient bytes to start")
            return RunResult(outcome=TurnState.INSUFFICIENT_INPUT, steps=0)

        if initial_state is not None:
            logger.debug("Starting from a saved state")
            game_setup = None
            state = initial_state
        else:
            try:
                seed = choices.bounded_integer(1, MAX_SEED)
                scenario = choices.pick_one(self.rules.scenarios)
            except InputExhausted:
                return RunResult(outcome=TurnState.INSUFFICIENT_INPUT, steps=0)

            # TODO: draw rules options from the input once rules declare them
            game_setup = GameSetup(seed=seed, scenario=scenario, options={})
            self.last_setup = game_setup
            logger.debug(f"Game setup: {game_setup}")

            state = self.rules.setup(seed, scenario, dict(game_setup.options))

        stepper = TurnStepper(self.rules, choices, self.config, self.crash_reporter, self.error_handler)
        outcome = stepper.run(game_setup, state)

        return RunResult(
            outcome=outcome,
            steps=stepper.step,
            setup=game_setup,
            final_state=stepper.state,
            history=stepper.history
        )

    def fuzz_one_input(self, data: bytes) -> int:
        """libFuzzer-style target: -1 skips the input, 0 accepts it"""
        result = self.run(data)
        if result.outcome == TurnState.INSUFFICIENT_INPUT:
            return SKIP_INPUT
        return 0
