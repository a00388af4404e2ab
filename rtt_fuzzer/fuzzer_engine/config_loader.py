"""
Config Loader - Builds FuzzerConfig from the environment and config files
"""
import json
import os
import yaml
from dataclasses import fields, replace
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from ..models import DEFAULT_MAX_STEPS, FuzzerConfig


ENV_VARIABLES = {
    'RTT_RULES': 'rules',
    'MAX_STEPS': 'max_steps',
    'NO_UNDO': 'no_undo',
    'NO_RESIGN': 'no_resign',
    'RND': 'random',
    'RTT_CRASH_STATE': 'crash_state_path',
}


def _parse_max_steps(value: Any) -> int:
    """Non-numeric or zero values fall back to the default bound"""
    try:
        max_steps = int(value)
    except (TypeError, ValueError):
        return DEFAULT_MAX_STEPS
    return max_steps or DEFAULT_MAX_STEPS


def load_config_from_env(environ: Optional[Mapping[str, str]] = None,
                         base: Optional[FuzzerConfig] = None) -> FuzzerConfig:
    """Apply RTT_RULES, MAX_STEPS, NO_UNDO, NO_RESIGN, RND and RTT_CRASH_STATE"""
    environ = os.environ if environ is None else environ
    config = base or FuzzerConfig()

    overrides: Dict[str, Any] = {}
    if environ.get('RTT_RULES'):
        overrides['rules'] = environ['RTT_RULES']
    if 'MAX_STEPS' in environ:
        overrides['max_steps'] = _parse_max_steps(environ['MAX_STEPS'])
    for variable in ('NO_UNDO', 'NO_RESIGN', 'RND'):
        if variable in environ:
            overrides[ENV_VARIABLES[variable]] = environ[variable] == 'true'
    if environ.get('RTT_CRASH_STATE'):
        overrides['crash_state_path'] = environ['RTT_CRASH_STATE']

    return replace(config, **overrides)


def load_config_file(config_path: Union[str, Path],
                     base: Optional[FuzzerConfig] = None) -> FuzzerConfig:
    """Load configuration from YAML or JSON file"""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(path, 'r') as f:
        if path.suffix in ['.yaml', '.yml']:
            try:
                data = yaml.safe_load(f)
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML syntax in {config_path}: {e}")
        elif path.suffix == '.json':
            data = json.load(f)
        else:
            raise ValueError(f"Unsupported config format: {path.suffix}")

    return config_from_dict(data or {}, base)


def config_from_dict(data: Mapping[str, Any], base: Optional[FuzzerConfig] = None) -> FuzzerConfig:
    """Overlay a mapping of FuzzerConfig fields onto ``base``"""
    if not isinstance(data, Mapping):
        raise ValueError(f"Configuration must be a mapping, got {type(data).__name__}")

    known = {f.name for f in fields(FuzzerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown configuration keys: {', '.join(unknown)}")

    overrides = dict(data)
    if 'max_steps' in overrides:
        overrides['max_steps'] = _parse_max_steps(overrides['max_steps'])
    if 'min_bytes' in overrides:
        overrides['min_bytes'] = int(overrides['min_bytes'])

    return replace(base or FuzzerConfig(), **overrides)
