"""
Engine Module
=============

The per-tick simulation core.

Exports:
    - SimulationEngine: LangGraph tick clock and operator command surface
    - MotionModel: Per-agent motion state machine
    - RiskScorer: Pure agent → score/tier/factors function
    - PredictionGenerator / PredictionQueue: Predictive alerts
    - SimulationState: The single owned simulation state value
    - apply_command: Operator command application
"""

from event_sentinel.engine.motion import MotionModel, MotionParameters, MotionResult
from event_sentinel.engine.scoring import RiskScorer, ScoreThresholds
from event_sentinel.engine.predictions import (
    PredictionGenerator,
    PredictionParameters,
    PredictionQueue,
)
from event_sentinel.engine.state import SimulationState
from event_sentinel.engine.commands import apply_command
from event_sentinel.engine.graph import SimulationEngine, TickReport


__all__ = [
    "MotionModel",
    "MotionParameters",
    "MotionResult",
    "RiskScorer",
    "ScoreThresholds",
    "PredictionGenerator",
    "PredictionParameters",
    "PredictionQueue",
    "SimulationState",
    "apply_command",
    "SimulationEngine",
    "TickReport",
]
