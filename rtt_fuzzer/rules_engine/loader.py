"""
Rules loader - Imports a rules module from a file path or module name
"""
import importlib
import importlib.util
import logging
import sys
from pathlib import Path
from typing import Union
from .base import RulesEngine

logger = logging.getLogger(__name__)


class RulesNotFoundError(FileNotFoundError):
    """The configured rules module could not be located"""


def load_rules(location: Union[str, Path]) -> RulesEngine:
    """
    Load rules from a ``.py`` file or a dotted module name.

    Anything ending in ``.py`` or containing a path separator is treated as a
    file path.
    """
    location = str(location)

    if location.endswith('.py') or '/' in location or '\\' in location:
        path = Path(location).expanduser().resolve()
        if not path.exists():
            raise RulesNotFoundError(
                f"Rules file not found: {location}, specify via RTT_RULES environment variable."
            )

        module_name = f"rtt_rules_{path.stem}"
        spec = importlib.util.spec_from_file_location(module_name, path)
        if spec is None or spec.loader is None:
            raise RulesNotFoundError(f"Cannot import rules from {location}")

        module = importlib.util.module_from_spec(spec)
        sys.modules[module_name] = module
        spec.loader.exec_module(module)
        logger.debug(f"Loaded rules from file {path}")
        return RulesEngine(module, name=path.name)

    try:
        module = importlib.import_module(location)
    except ModuleNotFoundError as e:
        raise RulesNotFoundError(
            f"Rules module not found: {location}, specify via RTT_RULES environment variable."
        ) from e

    logger.debug(f"Loaded rules module {location}")
    return RulesEngine(module, name=location)
