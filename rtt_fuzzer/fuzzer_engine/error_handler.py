"""
Error Handler - Failure classification for fuzz runs

Every failure is terminal for the run that produced it. Nothing here retries
or recovers; the fuzzing engine decides what to do with a finding.
"""
import logging
from enum import Enum
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


class FailureKind(Enum):
    """Kinds of failures a run can end with"""
    BOUND_EXCEEDED = "bound_exceeded"
    NO_ACTIONS = "no_actions"
    INVALID_ARGUMENT = "invalid_argument"
    RULES_CRASH = "rules_crash"


class FuzzFailure(Exception):
    """A classified failure of a fuzz run"""

    kind: FailureKind = None

    def __init__(self, message: str, kind: Optional[FailureKind] = None,
                 cause: Optional[BaseException] = None, trace: Optional[str] = None,
                 step: Optional[int] = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind
        self.message = message
        self.cause = cause
        self.trace = trace
        self.step = step

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.message}"


class BoundExceeded(FuzzFailure):
    """Step counter passed the configured maximum"""
    kind = FailureKind.BOUND_EXCEEDED


class NoActionsAvailable(FuzzFailure):
    """Game is not over but nothing can be done"""
    kind = FailureKind.NO_ACTIONS


class InvalidActionArgument(FuzzFailure):
    """An argument pool offered by the rules holds NaN"""
    kind = FailureKind.INVALID_ARGUMENT


class RulesEngineFailure(FuzzFailure):
    """The rules raised while applying an action or resignation"""
    kind = FailureKind.RULES_CRASH


class InputExhausted(Exception):
    """
    The fuzz input ran out before a meaningful game could be played.

    Not a failure: the run ends quietly and the input is skipped.
    """


class ErrorHandler:
    """
    Records classified failures for reporting.

    Provides:
    - One log entry per failure
    - Failure history and summary by kind
    """

    def __init__(self):
        self.error_history: List[FuzzFailure] = []

    def record(self, failure: FuzzFailure) -> FuzzFailure:
        """Log a failure and add it to the history, returning it unchanged"""
        log_message = f"[{failure.kind.value}] {failure.message}"
        if failure.step is not None:
            log_message += f" (step: {failure.step})"
        logger.error(log_message)

        if failure.trace:
            logger.error(f"Rules traceback:\n{failure.trace}")

        self.error_history.append(failure)
        return failure

    def get_error_summary(self) -> Dict[str, Any]:
        """Get summary of all failures recorded"""
        errors_by_kind = {}
        for error in self.error_history:
            kind = error.kind.value
            errors_by_kind[kind] = errors_by_kind.get(kind, 0) + 1

        return {
            'total_errors': len(self.error_history),
            'by_kind': errors_by_kind,
            'recent_errors': [
                {'kind': e.kind.value, 'message': e.message, 'step': e.step}
                for e in self.error_history[-10:]
            ]
        }
