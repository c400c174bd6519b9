"""
Motion Model
============

Advances one agent by one tick.

State machine, evaluated once per agent per tick, in this fixed order:
    1. Containment correction: unprivileged agent inside the exclusion
       zone is teleported to a legal seat and given a fresh target
    2. Target sanitation: unprivileged agent never walks toward a
       forbidden target
    3. Idle hold: idle_ticks > 0 → decrement and stop
    4. Idle onset: small chance (normal behavior only) → loitering, stop
    5. Arrival: within 2 steps of target → new target (concourse-biased
       at halftime)
    6. Step: one step toward target (double when rushing), rejected if it
       lands in the exclusion zone or in VIP space without clearance
    7. Region-visit bookkeeping
    8. Consumption: purchases while inside a concourse region
    9. Behavior relapse: rare flip to rushing / normal

Every branch has a resample fallback, so an agent can never stay outside
the legal position space for more than one tick. Nothing here raises.
"""

import logging
from dataclasses import dataclass, field
from typing import List

from event_sentinel.geometry.regions import GeofenceIndex
from event_sentinel.models.agent import Agent, AlcoholPattern, Behavior, Credential
from event_sentinel.models.geometry import Point, Region, RegionKind
from event_sentinel.models.output import LogType
from event_sentinel.models.phase import Phase
from event_sentinel.observability.event_log import FeedEvent
from event_sentinel.simulation.population import ALCOHOL_ITEMS, STADIUM_ITEMS
from event_sentinel.simulation.randomness import RandomSource, chance, pick


logger = logging.getLogger(__name__)


@dataclass
class MotionParameters:
    """
    Tunables for the motion state machine.

    Loaded from configuration file.
    """

    step_size: float = 8.0

    # Idle behavior
    idle_onset_probability: float = 0.03
    idle_ticks_min: int = 3
    idle_ticks_max: int = 10

    # Targeting
    halftime_concourse_bias: float = 0.5

    # Concessions
    purchase_probability: float = 0.04
    halftime_purchase_probability: float = 0.12
    alcohol_probability: float = 0.4
    heavy_alcohol_probability: float = 0.7
    alcohol_cap: int = 8
    alcohol_alert_threshold: int = 4
    purchase_log_probability: float = 0.3

    # Behavior
    relapse_probability: float = 0.005
    rushing_bias: float = 0.3

    # Feed
    region_entry_log_probability: float = 0.15


@dataclass
class MotionResult:
    """Outcome of advancing one agent."""

    agent: Agent
    moved: bool = False
    corrected: bool = False
    events: List[FeedEvent] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"MotionResult({self.agent.id}, moved={self.moved}, "
            f"corrected={self.corrected}, events={len(self.events)})"
        )


class MotionModel:
    """
    Per-agent motion state machine.

    Reads only the agent passed in and the static geofence index, so
    agents can be advanced independently of each other.
    """

    def __init__(self, index: GeofenceIndex, params: MotionParameters) -> None:
        """
        Initialize the motion model.

        Args:
            index: Geofence index for the venue
            params: Configured tunables
        """
        self.index = index
        self.params = params
        logger.info(
            f"MotionModel initialized: step={params.step_size}, "
            f"idle_onset={params.idle_onset_probability}, "
            f"alcohol_cap={params.alcohol_cap}"
        )

    def advance(self, agent: Agent, phase: Phase, rng: RandomSource) -> MotionResult:
        """
        Advance an agent one tick.

        Args:
            agent: Agent at the end of the previous tick (not modified)
            phase: Current event phase
            rng: Random source

        Returns:
            MotionResult with the advanced copy of the agent
        """
        agent = agent.model_copy(deep=True)
        result = MotionResult(agent=agent)
        restricted = not agent.is_privileged

        # 1. Containment correction
        if restricted and self.index.in_exclusion_zone(agent.position):
            logger.debug(f"Containment correction for {agent.id} at {agent.position}")
            agent.position = self.index.sample_seating(rng)
            agent.target = self.index.sample_seating(rng)
            result.corrected = True

        # 2. Target sanitation
        if restricted and self.index.in_exclusion_zone(agent.target):
            agent.target = self.index.sample_seating(rng)

        # 3. Idle hold
        if agent.idle_ticks > 0:
            agent.idle_ticks -= 1
            return result

        # 4. Idle onset
        if agent.behavior == Behavior.NORMAL and chance(rng, self.params.idle_onset_probability):
            agent.behavior = Behavior.LOITERING
            agent.idle_ticks = int(rng.integers(
                self.params.idle_ticks_min, self.params.idle_ticks_max + 1
            ))
            return result

        # 5-6. Arrival or step
        self._walk(agent, phase, rng, result)

        # 7. Region-visit bookkeeping
        region = self.index.region_at(agent.position)
        if agent.session.record_visit(region.id):
            self._log_region_entry(agent, region, rng, result)

        # 8. Consumption
        if region.kind == RegionKind.CONCOURSE:
            self._consume(agent, phase, rng, result)

        # 9. Behavior relapse
        if chance(rng, self.params.relapse_probability):
            if chance(rng, self.params.rushing_bias):
                agent.behavior = Behavior.RUSHING
            else:
                agent.behavior = Behavior.NORMAL

        return result

    def _walk(
        self,
        agent: Agent,
        phase: Phase,
        rng: RandomSource,
        result: MotionResult,
    ) -> None:
        """Handle arrival, or take one validated step toward the target."""
        step = self.params.step_size
        dx = agent.target.x - agent.position.x
        dy = agent.target.y - agent.position.y
        distance = (dx * dx + dy * dy) ** 0.5

        if distance < step * 2:
            bias = self.params.halftime_concourse_bias if phase == Phase.HALFTIME else 0.0
            agent.target = self.index.sample_target(rng, concourse_bias=bias)
            return

        speed = step * 2 if agent.behavior == Behavior.RUSHING else step
        candidate = Point(
            x=agent.position.x + dx / distance * speed,
            y=agent.position.y + dy / distance * speed,
        )

        if self._step_allowed(agent, candidate):
            agent.position = candidate
            result.moved = True
        else:
            agent.target = self.index.sample_seating(rng)

    def _step_allowed(self, agent: Agent, candidate: Point) -> bool:
        """Reject steps into the exclusion zone or uncleared VIP space."""
        if agent.is_privileged:
            return True
        if self.index.in_exclusion_zone(candidate):
            return False
        if agent.credential != Credential.VIP:
            if self.index.region_at(candidate).kind == RegionKind.VIP:
                return False
        return True

    def _consume(
        self,
        agent: Agent,
        phase: Phase,
        rng: RandomSource,
        result: MotionResult,
    ) -> None:
        """Concession purchases while in the concourse."""
        p = self.params
        purchase = p.halftime_purchase_probability if phase == Phase.HALFTIME else p.purchase_probability
        if not chance(rng, purchase):
            return

        if agent.history.alcohol_pattern == AlcoholPattern.HEAVY:
            wants_alcohol = chance(rng, p.heavy_alcohol_probability)
        else:
            wants_alcohol = chance(rng, p.alcohol_probability)

        if wants_alcohol and agent.session.drinks_consumed < p.alcohol_cap:
            drink = pick(rng, ALCOHOL_ITEMS)
            agent.carried_items.append(drink)
            agent.session.drinks_consumed += 1
            count = agent.session.drinks_consumed

            if count >= p.alcohol_alert_threshold:
                result.events.append(FeedEvent(
                    LogType.ALERT, "Alcohol Alert",
                    f"{agent.name} - {count} drinks purchased", "beer",
                ))
            elif count == 1:
                result.events.append(FeedEvent(
                    LogType.INFO, "Concession", f"{agent.name} purchased {drink}", "shopping",
                ))
            return

        item = pick(rng, STADIUM_ITEMS)
        if item not in agent.carried_items:
            agent.carried_items.append(item)
            if chance(rng, p.purchase_log_probability):
                result.events.append(FeedEvent(
                    LogType.INFO, "Concession", f"{agent.name} purchased {item}", "shopping",
                ))

    def _log_region_entry(
        self,
        agent: Agent,
        region: Region,
        rng: RandomSource,
        result: MotionResult,
    ) -> None:
        """Occasionally note first visits to VIP space and the concourse."""
        if not chance(rng, self.params.region_entry_log_probability):
            return
        if region.kind == RegionKind.VIP and agent.credential == Credential.VIP:
            result.events.append(FeedEvent(
                LogType.INFO, "VIP Access", f"{agent.name} entered {region.name}", "ticket",
            ))
        elif region.kind == RegionKind.CONCOURSE:
            result.events.append(FeedEvent(
                LogType.INFO, "Movement", f"{agent.name} entered concourse area", "footprints",
            ))
