"""
Choice Provider - Maps fuzz input onto bounded decisions

Two interchangeable backends:
- ByteChoiceProvider consumes the fuzz input and replays identically
- RandomChoiceProvider ignores the input and draws from a PRNG
"""
import math
import random
from typing import Any, Optional, Sequence

import atheris

from ..interfaces import IChoiceProvider
from .error_handler import InputExhausted


def range_width(min_value: int, max_value: int) -> int:
    """Bytes a draw over [min_value, max_value] consumes: one per 8 bits of range"""
    return ((max_value - min_value).bit_length() + 7) // 8


class ByteChoiceProvider(IChoiceProvider):
    """
    Deterministic choices drawn from a fuzz input through atheris'
    FuzzedDataProvider.

    FuzzedDataProvider quietly returns the range minimum once its input runs
    dry. Here a draw that needs more bytes than remain raises InputExhausted
    instead, so a short input never turns into a padded game.
    """

    def __init__(self, data: bytes):
        self.fdp = atheris.FuzzedDataProvider(bytes(data))

    @property
    def remaining_bytes(self) -> int:
        return self.fdp.remaining_bytes()

    def bounded_integer(self, min_value: int, max_value: int) -> int:
        if min_value > max_value:
            raise ValueError(f"Empty range [{min_value}, {max_value}]")
        if min_value == max_value:
            return min_value

        width = range_width(min_value, max_value)
        remaining = self.fdp.remaining_bytes()
        if width > remaining:
            raise InputExhausted(
                f"Need {width} bytes for range [{min_value}, {max_value}], {remaining} left"
            )

        return self.fdp.ConsumeIntInRange(min_value, max_value)

    def pick_one(self, collection: Sequence) -> Any:
        if len(collection) == 0:
            raise InputExhausted("Cannot pick from an empty collection")
        return collection[self.bounded_integer(1, len(collection)) - 1]


class RandomChoiceProvider(IChoiceProvider):
    """Uniform choices from a PRNG, for exploratory runs"""

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng if rng is not None else random.Random()

    @property
    def remaining_bytes(self) -> float:
        return math.inf

    def bounded_integer(self, min_value: int, max_value: int) -> int:
        if min_value > max_value:
            raise ValueError(f"Empty range [{min_value}, {max_value}]")
        return self.rng.randint(min_value, max_value)

    def pick_one(self, collection: Sequence) -> Any:
        if len(collection) == 0:
            raise InputExhausted("Cannot pick from an empty collection")
        return collection[self.bounded_integer(1, len(collection)) - 1]


def make_choice_provider(data: bytes, randomize: bool = False,
                         rng: Optional[random.Random] = None) -> IChoiceProvider:
    """Create the backend selected by ``randomize``"""
    if randomize:
        return RandomChoiceProvider(rng)
    return ByteChoiceProvider(data)
