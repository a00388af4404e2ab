"""
Fuzzer Engine - Choice derivation, turn stepping and failure reporting
"""
from .error_handler import (
    ErrorHandler, FailureKind, FuzzFailure, BoundExceeded, NoActionsAvailable,
    InvalidActionArgument, RulesEngineFailure, InputExhausted
)
from .choice_provider import ByteChoiceProvider, RandomChoiceProvider, make_choice_provider
from .crash_reporter import CrashReporter, load_crash_state
from .turn_stepper import TurnStepper
from .config_loader import load_config_from_env, load_config_file, config_from_dict

__all__ = [
    'TurnStepper',
    'ByteChoiceProvider',
    'RandomChoiceProvider',
    'make_choice_provider',
    'CrashReporter',
    'load_crash_state',
    'ErrorHandler',
    'FailureKind',
    'FuzzFailure',
    'BoundExceeded',
    'NoActionsAvailable',
    'InvalidActionArgument',
    'RulesEngineFailure',
    'InputExhausted',
    'load_config_from_env',
    'load_config_file',
    'config_from_dict',
]
