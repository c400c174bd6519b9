"""
Event Phase Models
==================

The event runs through a fixed, wrapping cycle of phases:

    PRE_GAME → KICKOFF → Q1 → Q2 → HALFTIME → Q3 → Q4 → POST_GAME → PRE_GAME ...

Each phase has a duration in ticks and an ambient crowd-density hint.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class Phase(str, Enum):
    """Named interval of the event."""

    PRE_GAME = "PRE_GAME"
    KICKOFF = "KICKOFF"
    Q1 = "Q1"
    Q2 = "Q2"
    HALFTIME = "HALFTIME"
    Q3 = "Q3"
    Q4 = "Q4"
    POST_GAME = "POST_GAME"


class PhaseSpec(BaseModel):
    """
    Configuration of one phase in the cycle.

    Attributes:
        phase: Phase identifier
        label: Display label
        duration_ticks: Ticks spent in the phase before advancing
        crowd_density: Ambient crowd-density hint in [0, 1]
    """

    phase: Phase
    label: str
    duration_ticks: int = Field(..., ge=1)
    crowd_density: float = Field(..., ge=0.0, le=1.0)


DEFAULT_PHASE_CYCLE: List[PhaseSpec] = [
    PhaseSpec(phase=Phase.PRE_GAME, label="Pre-Game", duration_ticks=20, crowd_density=0.4),
    PhaseSpec(phase=Phase.KICKOFF, label="Kickoff!", duration_ticks=10, crowd_density=0.95),
    PhaseSpec(phase=Phase.Q1, label="1st Quarter", duration_ticks=40, crowd_density=0.9),
    PhaseSpec(phase=Phase.Q2, label="2nd Quarter", duration_ticks=40, crowd_density=0.88),
    PhaseSpec(phase=Phase.HALFTIME, label="Halftime", duration_ticks=25, crowd_density=0.5),
    PhaseSpec(phase=Phase.Q3, label="3rd Quarter", duration_ticks=40, crowd_density=0.85),
    PhaseSpec(phase=Phase.Q4, label="4th Quarter", duration_ticks=40, crowd_density=0.8),
    PhaseSpec(phase=Phase.POST_GAME, label="Post-Game", duration_ticks=30, crowd_density=0.3),
]
