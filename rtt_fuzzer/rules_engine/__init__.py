"""
Rules Engine - Adapter and loader for the game rules under test
"""
from .base import RulesEngine
from .loader import RulesNotFoundError, load_rules

__all__ = [
    'RulesEngine',
    'RulesNotFoundError',
    'load_rules',
]
