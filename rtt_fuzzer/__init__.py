"""
RTT Rules Fuzzer - Deterministic fuzzing driver for turn-based game rules
"""
from .main import RulesFuzzer, SKIP_INPUT

__version__ = "0.1.0"

__all__ = ['RulesFuzzer', 'SKIP_INPUT']
