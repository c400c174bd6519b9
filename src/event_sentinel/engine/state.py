"""
Simulation State
================

The single owned value threaded through every tick and every operator
command. Nothing in the engine keeps mutable module-level state.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from event_sentinel.engine.predictions import PredictionQueue
from event_sentinel.models.agent import Agent
from event_sentinel.models.phase import DEFAULT_PHASE_CYCLE, PhaseSpec
from event_sentinel.models.risk import RiskTier
from event_sentinel.observability.event_log import EventLog


@dataclass
class SimulationState:
    """
    Everything the clock advances and the operator surface reads.

    Attributes:
        agents: Crowd, in seeding order
        predictions: Live prediction queue
        log: Operator event feed
        cycle: Phase cycle (wraps after the last entry)
        tick: Ticks executed so far
        phase_index: Index of the current phase in `cycle`
        phase_tick: Ticks spent in the current phase
        system_tier: Aggregate tier published by the last tick
        selected_agent_id: Operator selection (view state only)
        tick_interval_seconds: Simulated seconds per tick
    """

    agents: List[Agent]
    predictions: PredictionQueue
    log: EventLog
    cycle: List[PhaseSpec] = field(default_factory=lambda: list(DEFAULT_PHASE_CYCLE))
    tick: int = 0
    phase_index: int = 0
    phase_tick: int = 0
    system_tier: RiskTier = RiskTier.LOW
    selected_agent_id: Optional[str] = None
    tick_interval_seconds: float = 0.8

    @property
    def phase_spec(self) -> PhaseSpec:
        """Spec of the current phase."""
        return self.cycle[self.phase_index]

    @property
    def sim_time(self) -> float:
        """Simulated seconds elapsed."""
        return round(self.tick * self.tick_interval_seconds, 6)

    def find_agent(self, agent_id: str) -> Optional[Agent]:
        """Look up an agent by id (None if unknown)."""
        for agent in self.agents:
            if agent.id == agent_id:
                return agent
        return None

    def replace_agent(self, agent: Agent) -> bool:
        """Swap in an updated agent with the same id."""
        for i, existing in enumerate(self.agents):
            if existing.id == agent.id:
                self.agents[i] = agent
                return True
        return False
