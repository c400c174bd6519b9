"""
Data Models
===========

Pydantic models for EventSentinel.

This module re-exports all data models for convenient access.

Models:
    Geometry:
        - Point, Polygon, Rect: Geometric primitives
        - Region, RegionKind: Named venue regions
        - VenueLayout: Complete venue definition

    Agents:
        - Agent: Per-agent simulation record
        - AgentHistory, AgentSession: Background and session state
        - Credential, Behavior, WatchlistTier, AlcoholPattern: Enums

    Risk:
        - RiskTier: LOW / MEDIUM / HIGH / CRITICAL
        - RiskAssessment: Scorer output

    Phases:
        - Phase, PhaseSpec: Event phase cycle

    Predictions:
        - PredictionPattern: Machine-readable pattern codes
        - Prediction: Operator alert

    Commands:
        - ToggleWatchlist, SelectAgent, DismissPrediction,
          AcknowledgePrediction: Operator inputs

    Output:
        - LogEntry: Operator feed entry
        - SimulationSnapshot: Complete read-only engine view
"""

from event_sentinel.models.geometry import (
    OUTSIDE_REGION,
    Point,
    Polygon,
    Rect,
    Region,
    RegionKind,
    VenueLayout,
)
from event_sentinel.models.risk import RiskAssessment, RiskTier
from event_sentinel.models.agent import (
    Agent,
    AgentHistory,
    AgentSession,
    AlcoholPattern,
    Behavior,
    Credential,
    WatchlistTier,
)
from event_sentinel.models.phase import DEFAULT_PHASE_CYCLE, Phase, PhaseSpec
from event_sentinel.models.reason_codes import PredictionPattern
from event_sentinel.models.prediction import Prediction, PredictionAction
from event_sentinel.models.commands import (
    AcknowledgePrediction,
    DismissPrediction,
    OperatorCommand,
    SelectAgent,
    ToggleWatchlist,
)
from event_sentinel.models.output import LogEntry, LogType, SimulationSnapshot

__all__ = [
    # Geometry
    "OUTSIDE_REGION",
    "Point",
    "Polygon",
    "Rect",
    "Region",
    "RegionKind",
    "VenueLayout",
    # Risk
    "RiskAssessment",
    "RiskTier",
    # Agents
    "Agent",
    "AgentHistory",
    "AgentSession",
    "AlcoholPattern",
    "Behavior",
    "Credential",
    "WatchlistTier",
    # Phases
    "DEFAULT_PHASE_CYCLE",
    "Phase",
    "PhaseSpec",
    # Predictions
    "PredictionPattern",
    "Prediction",
    "PredictionAction",
    # Commands
    "AcknowledgePrediction",
    "DismissPrediction",
    "OperatorCommand",
    "SelectAgent",
    "ToggleWatchlist",
    # Output
    "LogEntry",
    "LogType",
    "SimulationSnapshot",
]
