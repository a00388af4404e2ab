"""
Rules Engine adapter - Wraps a rules module behind IRulesEngine
"""
import logging
from typing import Any, Sequence
from ..interfaces import IRulesEngine
from ..models import View

logger = logging.getLogger(__name__)

REQUIRED_ATTRIBUTES = ('roles', 'scenarios', 'setup', 'view', 'action')


class RulesEngine(IRulesEngine):
    """
    Adapter over a rules module or object.

    The wrapped rules expose ``roles``, ``scenarios``, ``setup``, ``view`` and
    ``action``, and may expose ``resign`` and ``fuzz_log``. Raw views are
    classified into View objects here, once per call.
    """

    def __init__(self, rules: Any, name: str = None):
        missing = [attr for attr in REQUIRED_ATTRIBUTES if not hasattr(rules, attr)]
        if missing:
            raise ValueError(f"Rules {name or rules!r} missing required attributes: {', '.join(missing)}")

        self.rules = rules
        self.name = name or getattr(rules, '__name__', type(rules).__name__)

    @property
    def roles(self) -> Sequence:
        return list(self.rules.roles)

    @property
    def scenarios(self) -> Sequence:
        return list(self.rules.scenarios)

    @property
    def can_resign(self) -> bool:
        return callable(getattr(self.rules, 'resign', None))

    @property
    def has_fuzz_log(self) -> bool:
        return callable(getattr(self.rules, 'fuzz_log', None))

    def setup(self, seed: int, scenario: Any, options: dict) -> Any:
        return self.rules.setup(seed, scenario, options)

    def view(self, state: Any, role: Any) -> View:
        return View.from_raw(self.rules.view(state, role))

    def action(self, state: Any, role: Any, action: str, argument: Any) -> Any:
        return self.rules.action(state, role, action, argument)

    def resign(self, state: Any, role: Any) -> Any:
        if not self.can_resign:
            raise NotImplementedError(f"Rules {self.name} do not support resignation")
        return self.rules.resign(state, role)

    def fuzz_log(self, context: dict) -> None:
        if self.has_fuzz_log:
            self.rules.fuzz_log(context)
