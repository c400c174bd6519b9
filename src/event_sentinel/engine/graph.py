"""
Simulation Clock
================

LangGraph state machine driving one discrete tick of the venue.

LangGraph is used for CONTROL FLOW only, not LLM reasoning.

Graph Structure:
    START → advance_phase → step_agents → publish → END

    advance_phase: bump the tick counter and the phase timer; move to the
                   next phase (wrapping) when the timer hits its duration
    step_agents:   Motion Model → Risk Scorer → Prediction Generator for
                   every agent, against the previous tick's settled state
    publish:       aggregate system tier, flush feed events to the log

Design Philosophy:
    - One owned SimulationState, threaded through the graph
    - All randomness from one injected Generator (seeded = reproducible)
    - A tick has no external side effects until `publish`
    - Operator commands and ticks are serialized by one lock
"""

import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, TypedDict

import numpy as np
from langgraph.graph import StateGraph, END

from event_sentinel.engine.commands import apply_command
from event_sentinel.engine.motion import MotionModel, MotionParameters
from event_sentinel.engine.predictions import PredictionGenerator, PredictionParameters
from event_sentinel.engine.scoring import RiskScorer, ScoreThresholds
from event_sentinel.engine.state import SimulationState
from event_sentinel.geometry.regions import GeofenceIndex
from event_sentinel.models.agent import Agent, WatchlistTier
from event_sentinel.models.commands import (
    AcknowledgePrediction,
    DismissPrediction,
    SelectAgent,
    ToggleWatchlist,
)
from event_sentinel.models.output import LogType, PhaseStatus, SimulationSnapshot
from event_sentinel.models.phase import DEFAULT_PHASE_CYCLE, PhaseSpec
from event_sentinel.models.risk import RiskTier, system_status_label, system_tier
from event_sentinel.observability.analytics import AnalyticsComputer
from event_sentinel.observability.event_log import EventLog, FeedEvent
from event_sentinel.observability.visualization import HeatmapGenerator
from event_sentinel.simulation.population import seed_population
from event_sentinel.simulation.randomness import make_rng


logger = logging.getLogger(__name__)


class TickGraphState(TypedDict):
    """
    State passed through the tick graph.

    Attributes:
        sim: The owned simulation state
        rng: Random source for this run
        events: Feed events produced during the tick
        corrected: Containment corrections applied this tick
        predictions_created: New live predictions this tick
    """
    sim: SimulationState
    rng: np.random.Generator
    events: List[FeedEvent]
    corrected: int
    predictions_created: int


@dataclass
class TickReport:
    """Summary of one executed tick."""

    tick: int
    phase: str
    system_tier: RiskTier
    corrected: int = 0
    predictions_created: int = 0
    events: List[FeedEvent] = field(default_factory=list)

    def __repr__(self) -> str:
        return (
            f"TickReport(tick={self.tick}, {self.phase}, {self.system_tier.value}, "
            f"corrected={self.corrected}, predictions={self.predictions_created})"
        )


class SimulationEngine:
    """
    LangGraph-based simulation clock for the venue.

    This is a deterministic state machine given its random source:
    - Advances the phase cycle
    - Moves, scores and samples predictions for every agent
    - Publishes the aggregate system tier and the operator feed

    Thread-safe: `tick`, `snapshot` and every operator command take the
    same re-entrant lock, so a command never lands mid-tick.
    """

    def __init__(
        self,
        index: GeofenceIndex,
        motion_params: Optional[MotionParameters] = None,
        thresholds: Optional[ScoreThresholds] = None,
        prediction_params: Optional[PredictionParameters] = None,
        agent_count: int = 150,
        tick_interval_seconds: float = 0.8,
        seed: Optional[int] = None,
        log_capacity: int = 40,
        log_every_n_ticks: int = 50,
        cycle: Optional[List[PhaseSpec]] = None,
        analytics: Optional[AnalyticsComputer] = None,
        service_name: str = "EventSentinel",
    ) -> None:
        """
        Initialize the engine and seed the population.

        Args:
            index: Geofence index for the venue
            motion_params: Motion tunables (uses defaults if None)
            thresholds: Tier boundaries (uses defaults if None)
            prediction_params: Prediction gate and queue settings
            agent_count: Population size
            tick_interval_seconds: Simulated seconds per tick
            seed: Random seed (None = nondeterministic)
            log_capacity: Operator feed size
            log_every_n_ticks: Emit a summary log line every N ticks
            cycle: Phase cycle (uses the default game cycle if None)
            analytics: Analytics computer for snapshots (None = no analytics)
            service_name: Name shown in the startup feed entry
        """
        self.index = index
        self.motion = MotionModel(index, motion_params or MotionParameters())
        self.scorer = RiskScorer(index, thresholds or ScoreThresholds())
        self.generator = PredictionGenerator(prediction_params or PredictionParameters())
        self.analytics = analytics

        self.agent_count = agent_count
        self.tick_interval_seconds = tick_interval_seconds
        self.seed = seed
        self.log_capacity = log_capacity
        self.log_every_n_ticks = log_every_n_ticks
        self.cycle = list(cycle or DEFAULT_PHASE_CYCLE)
        self.service_name = service_name

        self._lock = threading.RLock()
        self._graph = self._build_graph()

        self._rng: np.random.Generator = make_rng(seed)
        self._state: SimulationState = self._create_state()
        self._ticks_in_tier: int = 0

        logger.info(
            f"SimulationEngine initialized: agents={agent_count}, "
            f"tick={tick_interval_seconds}s, seed={seed}"
        )

    @classmethod
    def from_settings(cls, settings) -> "SimulationEngine":
        """
        Build a fully wired engine from loaded configuration.

        Args:
            settings: event_sentinel.config.Settings

        Returns:
            Configured SimulationEngine
        """
        index = GeofenceIndex.from_file(settings.venue.layout_path)
        m = settings.motion
        p = settings.predictions
        tiers = settings.scoring.tiers
        obs = settings.observability

        heatmap = HeatmapGenerator(
            width=index.layout.width,
            height=index.layout.height,
            resolution=obs.heatmap_resolution,
            elevated_score=settings.scoring.high_risk_listing_score,
        )
        analytics = AnalyticsComputer(
            high_risk_score=settings.scoring.high_risk_listing_score,
            proximity_radius=obs.proximity_radius,
            heatmap=heatmap,
        )

        return cls(
            index=index,
            motion_params=MotionParameters(
                step_size=settings.simulation.step_size,
                idle_onset_probability=m.idle_onset_probability,
                idle_ticks_min=m.idle_ticks_min,
                idle_ticks_max=m.idle_ticks_max,
                halftime_concourse_bias=m.halftime_concourse_bias,
                purchase_probability=m.purchase_probability,
                halftime_purchase_probability=m.halftime_purchase_probability,
                alcohol_probability=m.alcohol_probability,
                heavy_alcohol_probability=m.heavy_alcohol_probability,
                alcohol_cap=m.alcohol_cap,
                relapse_probability=m.relapse_probability,
                rushing_bias=m.rushing_bias,
            ),
            thresholds=ScoreThresholds(
                medium=tiers.medium,
                high=tiers.high,
                critical=tiers.critical,
            ),
            prediction_params=PredictionParameters(
                score_gate=p.score_gate,
                sampling_probability=p.sampling_probability,
                escalated_score=p.escalated_score,
                cooldown_seconds=p.cooldown_seconds,
                max_live=p.max_live,
                eviction_policy=p.eviction_policy,
            ),
            agent_count=settings.simulation.agent_count,
            tick_interval_seconds=settings.simulation.tick_interval_seconds,
            seed=settings.simulation.random_seed,
            log_capacity=obs.log_capacity,
            log_every_n_ticks=settings.simulation.log_every_n_ticks,
            analytics=analytics,
        )

    # -------------------------------------------------------------------------
    # Graph
    # -------------------------------------------------------------------------

    def _build_graph(self) -> StateGraph:
        """Build the LangGraph workflow."""
        workflow = StateGraph(TickGraphState)

        workflow.add_node("advance_phase", self._advance_phase_node)
        workflow.add_node("step_agents", self._step_agents_node)
        workflow.add_node("publish", self._publish_node)

        workflow.set_entry_point("advance_phase")
        workflow.add_edge("advance_phase", "step_agents")
        workflow.add_edge("step_agents", "publish")
        workflow.add_edge("publish", END)

        return workflow.compile()

    def _advance_phase_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Bump the clock and wrap the phase cycle."""
        sim = state["sim"]
        events = list(state.get("events", []))

        sim.tick += 1
        sim.phase_tick += 1
        if sim.phase_tick >= sim.phase_spec.duration_ticks:
            previous = sim.phase_spec
            sim.phase_index = (sim.phase_index + 1) % len(sim.cycle)
            sim.phase_tick = 0
            current = sim.phase_spec
            events.append(FeedEvent(
                LogType.INFO, "Game Status", f"{current.label} underway", "activity",
            ))
            logger.info(
                f"PHASE CHANGE: {previous.phase.value} → {current.phase.value} "
                f"(tick {sim.tick})"
            )

        return {"sim": sim, "events": events}

    def _step_agents_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Motion, scoring and prediction sampling for every agent."""
        sim = state["sim"]
        rng = state["rng"]
        events = list(state.get("events", []))
        phase = sim.phase_spec.phase
        now = sim.sim_time

        corrected = 0
        created = 0
        next_agents: List[Agent] = []

        for agent in sim.agents:
            result = self.motion.advance(agent, phase, rng)
            scored = result.agent.with_assessment(self.scorer.score(result.agent, phase))
            if self.generator.consider(scored, sim.predictions, now, rng) is not None:
                created += 1

            corrected += int(result.corrected)
            events.extend(result.events)
            next_agents.append(scored)

        sim.agents = next_agents
        return {
            "sim": sim,
            "events": events,
            "corrected": corrected,
            "predictions_created": created,
        }

    def _publish_node(self, state: TickGraphState) -> Dict[str, Any]:
        """Aggregate the venue tier and flush the tick's feed events."""
        sim = state["sim"]
        events = list(state.get("events", []))

        previous = sim.system_tier
        current = system_tier(a.risk_tier for a in sim.agents)
        if current != previous:
            if current.severity > previous.severity:
                events.append(FeedEvent(
                    LogType.ALERT, "Threat Level",
                    f"Venue status {system_status_label(current)}", "alert",
                ))
                logger.warning(
                    f"SYSTEM TIER CHANGE: {previous.value} → {current.value} "
                    f"(tick {sim.tick})"
                )
            else:
                logger.info(
                    f"System tier change: {previous.value} → {current.value} "
                    f"(tick {sim.tick})"
                )
            self._ticks_in_tier = 0
        else:
            self._ticks_in_tier += 1
        sim.system_tier = current

        sim.log.publish(events, sim.sim_time)

        if sim.tick % self.log_every_n_ticks == 0:
            logger.info(
                f"Engine [tick {sim.tick}]: phase={sim.phase_spec.phase.value}, "
                f"tier={current.value}, predictions={len(sim.predictions)}, "
                f"corrected={state.get('corrected', 0)}"
            )

        return {"sim": sim, "events": events}

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def _create_state(self) -> SimulationState:
        """Seed a fresh population and write the startup feed."""
        agents = seed_population(self.agent_count, self.index, self._rng)
        phase = self.cycle[0].phase
        agents = [a.with_assessment(self.scorer.score(a, phase)) for a in agents]

        state = SimulationState(
            agents=agents,
            predictions=self.generator.new_queue(),
            log=EventLog(capacity=self.log_capacity),
            cycle=self.cycle,
            tick_interval_seconds=self.tick_interval_seconds,
        )
        state.system_tier = system_tier(a.risk_tier for a in agents)

        state.log.record(
            LogType.SYSTEM, "System Online", f"{self.service_name} initialized", "check",
        )
        state.log.record(
            LogType.INFO, "Crowd Analysis", f"Tracking {len(agents)} individuals in venue", "users",
        )
        state.log.record(
            LogType.INFO, "Game Status", f"{self.cycle[0].label} operations active", "activity",
        )
        known = sum(1 for a in agents if a.history.watchlist_tier != WatchlistTier.NONE)
        if known > 0:
            state.log.record(
                LogType.ALERT, "Watchlist Alert", f"{known} known individuals detected in venue", "eye",
            )
        return state

    def tick(self) -> TickReport:
        """
        Execute one tick.

        Returns:
            TickReport summarizing the tick
        """
        with self._lock:
            result = self._graph.invoke({
                "sim": self._state,
                "rng": self._rng,
                "events": [],
                "corrected": 0,
                "predictions_created": 0,
            })
            sim = result["sim"]
            self._state = sim
            return TickReport(
                tick=sim.tick,
                phase=sim.phase_spec.phase.value,
                system_tier=sim.system_tier,
                corrected=result["corrected"],
                predictions_created=result["predictions_created"],
                events=result["events"],
            )

    def run(self, ticks: int) -> TickReport:
        """Execute several ticks, returning the last report."""
        if ticks < 1:
            raise ValueError("ticks must be >= 1")
        report = None
        for _ in range(ticks):
            report = self.tick()
        return report

    def reset(self) -> None:
        """Re-seed the population from scratch (the clock has no persistence)."""
        with self._lock:
            self._rng = make_rng(self.seed)
            self._state = self._create_state()
            self._ticks_in_tier = 0
        logger.info("SimulationEngine reset")

    # -------------------------------------------------------------------------
    # Read side
    # -------------------------------------------------------------------------

    @property
    def state(self) -> SimulationState:
        """The live simulation state. Read under `lock` when mutating."""
        return self._state

    @property
    def lock(self) -> threading.RLock:
        """Lock serializing ticks and commands."""
        return self._lock

    @property
    def system_tier(self) -> RiskTier:
        """Aggregate tier published by the last tick."""
        return self._state.system_tier

    def get_agent(self, agent_id: str) -> Optional[Agent]:
        """Copy of an agent, or None for an unknown id."""
        with self._lock:
            agent = self._state.find_agent(agent_id)
            return agent.model_copy(deep=True) if agent is not None else None

    def phase_status(self) -> PhaseStatus:
        """Current position in the phase cycle."""
        with self._lock:
            sim = self._state
            spec = sim.phase_spec
            return PhaseStatus(
                phase=spec.phase,
                label=spec.label,
                crowd_density=spec.crowd_density,
                tick_in_phase=sim.phase_tick,
                ticks_remaining=max(0, spec.duration_ticks - sim.phase_tick),
            )

    def snapshot(self, include_analytics: bool = True) -> SimulationSnapshot:
        """
        Read-only copy of everything collaborators consume.

        Args:
            include_analytics: Compute derived analytics (heatmap, links)

        Returns:
            SimulationSnapshot
        """
        with self._lock:
            sim = self._state
            agents = [a.model_copy(deep=True) for a in sim.agents]
            analytics = None
            if include_analytics and self.analytics is not None:
                analytics = self.analytics.compute(agents)

            return SimulationSnapshot(
                tick=sim.tick,
                sim_time=sim.sim_time,
                phase=self.phase_status(),
                system_tier=sim.system_tier,
                system_status=system_status_label(sim.system_tier),
                agents=agents,
                predictions=sim.predictions.items(),
                log=sim.log.entries(),
                selected_agent_id=sim.selected_agent_id,
                analytics=analytics,
            )

    # -------------------------------------------------------------------------
    # Operator commands
    # -------------------------------------------------------------------------

    def apply(self, command) -> bool:
        """
        Apply an operator command atomically with respect to ticks.

        Args:
            command: One of the OperatorCommand models

        Returns:
            True if state changed, False for an unknown id
        """
        with self._lock:
            return apply_command(self._state, command, scorer=self.scorer)

    def toggle_watchlist(self, agent_id: str) -> bool:
        """Flip the operator watchlist flag on an agent."""
        return self.apply(ToggleWatchlist(agent_id=agent_id))

    def select_agent(self, agent_id: Optional[str]) -> bool:
        """Select an agent for inspection (None clears)."""
        return self.apply(SelectAgent(agent_id=agent_id))

    def dismiss_prediction(self, prediction_id: str) -> bool:
        """Remove a live prediction."""
        return self.apply(DismissPrediction(prediction_id=prediction_id))

    def acknowledge_prediction(self, prediction_id: str) -> bool:
        """Mark a live prediction as acknowledged."""
        return self.apply(AcknowledgePrediction(prediction_id=prediction_id))

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def get_metrics(self) -> Dict[str, Any]:
        """Get engine metrics for observability."""
        with self._lock:
            sim = self._state
            return {
                "tick": sim.tick,
                "sim_time": sim.sim_time,
                "phase": sim.phase_spec.phase.value,
                "system_tier": sim.system_tier.value,
                "ticks_in_tier": self._ticks_in_tier,
                "agents": len(sim.agents),
                "predictions_generated": self.generator.generated_count,
                "prediction_queue": sim.predictions.metrics(),
                "log": sim.log.metrics(),
                "measured_at": time.time(),
            }
