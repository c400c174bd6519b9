"""
Engine Output Models
====================

This module defines the read-only snapshot the engine exposes to its
collaborators (map renderer, log feed UI, operator dashboards).

The output is structured into three tiers:
    1. Core: tick, phase, aggregate tier, agents, predictions
    2. Feed: bounded operator log of notable occurrences
    3. Analytics: derived counts and spatial aggregates (observability only)

Output Contract (abridged):
    {
        "tick": 412,
        "sim_time": 329.6,
        "phase": {"phase": "HALFTIME", "label": "Halftime", ...},
        "system_tier": "HIGH",
        "system_status": "ELEVATED",
        "agents": [...],
        "predictions": [...],
        "log": [...],
        "selected_agent_id": "fan-1042",
        "analytics": {
            "watchlist_count": 2,
            "alert_count": 1,
            "high_risk_agents": [...],
            "tier_counts": {"LOW": 140, "MEDIUM": 6, "HIGH": 3, "CRITICAL": 1},
            "proximity_links": [...],
            "heatmap": {...}
        }
    }

Design Rules:
    - Snapshots are copies; mutating one never affects the engine
    - `analytics` is observability-only and never feeds back into scoring
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from event_sentinel.models.agent import Agent
from event_sentinel.models.phase import Phase
from event_sentinel.models.prediction import Prediction
from event_sentinel.models.risk import RiskTier


class LogType(str, Enum):
    """Category of an operator log entry."""

    SYSTEM = "system"
    INFO = "info"
    ALERT = "alert"


class LogEntry(BaseModel):
    """
    One notable occurrence in the operator feed.

    Attributes:
        id: Monotonic entry number
        timestamp: Simulated seconds when the entry was recorded
        wall_time: Wall-clock time of day (HH:MM:SS)
        type: Entry category
        title: Short headline
        description: Agent-named detail line
        icon: Icon tag for the rendering surface
    """

    id: int = Field(..., ge=0)
    timestamp: float = Field(..., ge=0.0)
    wall_time: str
    type: LogType
    title: str
    description: str
    icon: str = "activity"


class PhaseStatus(BaseModel):
    """Current position in the phase cycle."""

    phase: Phase
    label: str
    crowd_density: float
    tick_in_phase: int = Field(..., ge=0)
    ticks_remaining: int = Field(..., ge=0)


class HighRiskEntry(BaseModel):
    """Agent listed in the ranked high-risk view."""

    agent_id: str
    name: str
    score: int
    tier: RiskTier


class ProximityLink(BaseModel):
    """Two agents standing close enough to be treated as a group."""

    a: str
    b: str
    distance: float


class RiskHeatmap(BaseModel):
    """
    Risk-weighted occupancy grid over the venue plane.

    Row 0 covers the lowest y band. Elevated agents weigh more than
    others so hot spots show where attention is needed.
    """

    resolution: int
    width: float
    height: float
    max_value: float
    grid: List[List[float]]


class AnalyticsSummary(BaseModel):
    """Derived, observability-only aggregates."""

    watchlist_count: int = Field(default=0, ge=0)
    alert_count: int = Field(default=0, ge=0)
    high_risk_agents: List[HighRiskEntry] = Field(default_factory=list)
    tier_counts: Dict[str, int] = Field(default_factory=dict)
    proximity_links: List[ProximityLink] = Field(default_factory=list)
    heatmap: Optional[RiskHeatmap] = None


class SimulationSnapshot(BaseModel):
    """
    Complete read-only view of the engine after a tick.

    Attributes:
        tick: Number of ticks executed
        sim_time: Simulated seconds elapsed
        phase: Current phase status
        system_tier: Aggregate venue tier (LOW, HIGH or CRITICAL)
        system_status: Operator label (NOMINAL, ELEVATED, CRITICAL)
        agents: All agents
        predictions: Live predictions, newest first (at most 5)
        log: Operator feed, newest first
        selected_agent_id: Current operator selection
        analytics: Derived aggregates
    """

    tick: int = Field(..., ge=0)
    sim_time: float = Field(..., ge=0.0)
    phase: PhaseStatus
    system_tier: RiskTier
    system_status: str
    agents: List[Agent]
    predictions: List[Prediction]
    log: List[LogEntry]
    selected_agent_id: Optional[str] = None
    analytics: Optional[AnalyticsSummary] = None
