"""
Base interfaces and abstract classes for all major components
"""
from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence
from .models import GameSetup, View


class IChoiceProvider(ABC):
    """Interface for turning fuzz input into decisions"""

    @abstractmethod
    def bounded_integer(self, min_value: int, max_value: int) -> int:
        """Return an integer in [min_value, max_value]"""
        pass

    @abstractmethod
    def pick_one(self, collection: Sequence) -> Any:
        """Return one element of a non-empty sequence"""
        pass

    @property
    @abstractmethod
    def remaining_bytes(self) -> float:
        """Number of unconsumed input bytes"""
        pass


class IRulesEngine(ABC):
    """Interface for the game rules under test"""

    @property
    @abstractmethod
    def roles(self) -> Sequence:
        """Ordered role identifiers"""
        pass

    @property
    @abstractmethod
    def scenarios(self) -> Sequence:
        """Ordered scenario identifiers"""
        pass

    @abstractmethod
    def setup(self, seed: int, scenario: Any, options: dict) -> Any:
        """Build the initial game state"""
        pass

    @abstractmethod
    def view(self, state: Any, role: Any) -> View:
        """Project the state for a role"""
        pass

    @abstractmethod
    def action(self, state: Any, role: Any, action: str, argument: Any) -> Any:
        """Apply an action and return the new state"""
        pass

    @abstractmethod
    def resign(self, state: Any, role: Any) -> Any:
        """Resign on behalf of a role and return the new state"""
        pass

    @property
    @abstractmethod
    def can_resign(self) -> bool:
        """Whether the rules support resignation"""
        pass

    @abstractmethod
    def fuzz_log(self, context: dict) -> None:
        """Observe a step before it is applied"""
        pass


class ICrashReporter(ABC):
    """Interface for failure diagnostics"""

    @abstractmethod
    def log_crash(self, game_setup: GameSetup, state: Any, view: Optional[View], step: int,
                  active: Any, action: Optional[str] = None, argument: Any = None) -> None:
        """Dump diagnostics for a failing step"""
        pass
