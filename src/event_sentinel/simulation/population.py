"""
Population Seeding
==================

Creates the fixed crowd at process start.

Agents are created once, in a fixed count, and never destroyed. A restart
re-seeds the whole population from scratch.

Distribution:
    - Credential drawn from a weighted ticket list (mostly general)
    - Vendors spawn in the concourse, everyone else in seating
    - ~8% have 1-3 prior incidents
    - ~5% are pre-watchlisted (high/low evenly)
    - ~15% have a heavy drinking pattern
"""

import logging
from typing import TYPE_CHECKING, List

from event_sentinel.models.agent import (
    Agent,
    AgentHistory,
    AlcoholPattern,
    Credential,
    WatchlistTier,
)
from event_sentinel.simulation.randomness import RandomSource, chance, pick

if TYPE_CHECKING:
    from event_sentinel.geometry.regions import GeofenceIndex


logger = logging.getLogger(__name__)


FIRST_NAMES = [
    "Mike", "John", "Sarah", "Emily", "David", "Chris", "Alex", "Sam",
    "Jordan", "Taylor", "Pat", "Casey", "Morgan", "Drew", "Jamie",
]
LAST_INITIALS = [
    "A", "B", "C", "D", "E", "F", "G", "H", "J",
    "K", "L", "M", "N", "P", "R", "S", "T", "W",
]

# Weighted by repetition
TICKET_TYPES = [
    Credential.GENERAL, Credential.GENERAL, Credential.GENERAL,
    Credential.GENERAL, Credential.GENERAL,
    Credential.VIP, Credential.STAFF, Credential.MEDIA, Credential.VENDOR,
]

STADIUM_ITEMS = [
    "Hot Dog", "Nachos", "Pretzel", "Popcorn", "Soda",
    "Water", "Foam Finger", "Jersey", "Program",
]
ALCOHOL_ITEMS = ["Beer", "Beer", "Hard Seltzer", "Mixed Drink"]

TROUBLESOME_PROBABILITY = 0.08
WATCHLIST_PROBABILITY = 0.05
HEAVY_DRINKER_PROBABILITY = 0.15

FIRST_AGENT_NUMBER = 1000


def _generate_history(rng: RandomSource) -> AgentHistory:
    """Draw an agent's background."""
    troublesome = chance(rng, TROUBLESOME_PROBABILITY)
    watchlisted = chance(rng, WATCHLIST_PROBABILITY)

    if watchlisted:
        watchlist = WatchlistTier.HIGH if chance(rng, 0.5) else WatchlistTier.LOW
    else:
        watchlist = WatchlistTier.NONE

    return AgentHistory(
        prior_incident_count=int(rng.integers(1, 4)) if troublesome else 0,
        watchlist_tier=watchlist,
        alcohol_pattern=(
            AlcoholPattern.HEAVY if chance(rng, HEAVY_DRINKER_PROBABILITY)
            else AlcoholPattern.NORMAL
        ),
    )


def seed_population(
    count: int,
    index: "GeofenceIndex",
    rng: RandomSource,
) -> List[Agent]:
    """
    Create the crowd.

    Args:
        count: Number of agents
        index: Geofence index used to sample legal spawn points
        rng: Random source

    Returns:
        Agents with ids fan-1000, fan-1001, ...
    """
    agents = []
    for i in range(count):
        name = f"{pick(rng, FIRST_NAMES)} {pick(rng, LAST_INITIALS)}."
        credential = pick(rng, TICKET_TYPES)

        if credential == Credential.VENDOR:
            position = index.sample_concourse(rng)
        else:
            position = index.sample_seating(rng)

        agents.append(Agent(
            id=f"fan-{FIRST_AGENT_NUMBER + i}",
            name=name,
            credential=credential,
            position=position,
            target=index.sample_seating(rng),
            history=_generate_history(rng),
        ))

    watchlisted = sum(1 for a in agents if a.history.watchlist_tier != WatchlistTier.NONE)
    logger.info(
        f"Seeded population: agents={count}, watchlisted={watchlisted}, "
        f"staff={sum(1 for a in agents if a.credential == Credential.STAFF)}"
    )
    return agents
