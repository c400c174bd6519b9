"""
Simulation Module
=================

Randomness and population seeding for the venue simulation.

Exports:
    - RandomSource: Protocol for injectable randomness
    - make_rng: Seeded numpy Generator factory
    - seed_population: Creates the fixed crowd at startup
"""

from event_sentinel.simulation.randomness import (
    RandomSource,
    chance,
    make_rng,
    pick,
    uniform,
)
from event_sentinel.simulation.population import (
    ALCOHOL_ITEMS,
    STADIUM_ITEMS,
    seed_population,
)

__all__ = [
    "RandomSource",
    "chance",
    "make_rng",
    "pick",
    "uniform",
    "ALCOHOL_ITEMS",
    "STADIUM_ITEMS",
    "seed_population",
]
