"""
Random Source
=============

Injectable randomness for the simulation.

Every random branch in the engine draws from a RandomSource passed in
explicitly. Production uses a numpy Generator; tests pass a seeded one
(reproducible ticks) or a scripted stub that forces specific branches.

Design Rules:
    - No module-level random state anywhere in the engine
    - Same seed => identical run
"""

import logging
from typing import Optional, Protocol, Sequence, TypeVar

import numpy as np


logger = logging.getLogger(__name__)

T = TypeVar("T")


class RandomSource(Protocol):
    """
    Protocol for random sources.

    `numpy.random.Generator` satisfies this protocol directly.
    """

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        ...

    def integers(self, low: int, high: int) -> int:
        """Uniform integer in [low, high)."""
        ...


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """
    Create the engine's random source.

    Args:
        seed: Seed for reproducible runs (None = OS entropy)

    Returns:
        A numpy Generator
    """
    if seed is None:
        logger.info("Random source initialized from OS entropy")
    else:
        logger.info(f"Random source initialized with seed={seed}")
    return np.random.default_rng(seed)


def chance(rng: RandomSource, probability: float) -> bool:
    """True with the given probability."""
    return float(rng.random()) < probability


def pick(rng: RandomSource, items: Sequence[T]) -> T:
    """Uniformly choose one element of a non-empty sequence."""
    return items[int(rng.integers(0, len(items)))]


def uniform(rng: RandomSource, low: float, high: float) -> float:
    """Uniform float in [low, high)."""
    return low + float(rng.random()) * (high - low)
