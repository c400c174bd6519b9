"""
Crowd Agent Models
==================

This module defines the per-agent record advanced by the simulation.

Record Layout:
    - Identity: id, name, credential (fixed at creation)
    - Kinematics: position, target, idle_ticks, behavior
    - Possessions: carried_items
    - History: background set at creation, never changed
    - Session: mutable for the lifetime of the process
    - Derived: risk_score / risk_tier / risk_factors, recomputed every tick

Invariant:
    The derived risk fields are only ever written from a RiskAssessment
    via `Agent.with_assessment`. Nothing mutates them directly.

Unknown enum values (e.g. a credential that does not exist) are coerced to
the least-privileged default instead of failing validation.
"""

from enum import Enum
from typing import Any, List

from pydantic import BaseModel, Field, field_validator

from event_sentinel.models.geometry import Point
from event_sentinel.models.risk import RiskAssessment, RiskTier


class Credential(str, Enum):
    """Ticket / badge type held by an agent."""

    GENERAL = "general"
    VIP = "vip"
    STAFF = "staff"
    MEDIA = "media"
    VENDOR = "vendor"


class Behavior(str, Enum):
    """Current behavioral mode."""

    NORMAL = "normal"
    LOITERING = "loitering"
    RUSHING = "rushing"


class WatchlistTier(str, Enum):
    """Pre-existing watchlist status."""

    NONE = "none"
    LOW = "low"
    HIGH = "high"


class AlcoholPattern(str, Enum):
    """Background drinking pattern."""

    NORMAL = "normal"
    HEAVY = "heavy"


PRIVILEGED_CREDENTIALS = frozenset({Credential.STAFF, Credential.MEDIA})


def _coerce_enum(enum_cls, value: Any, default):
    """Map unknown values to the enum's least-privileged default."""
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return default


class AgentHistory(BaseModel):
    """
    Immutable background of an agent, set at creation.

    Attributes:
        prior_incident_count: Number of recorded prior incidents
        watchlist_tier: Pre-existing watchlist status
        alcohol_pattern: Background drinking pattern
    """

    prior_incident_count: int = Field(default=0, ge=0)
    watchlist_tier: WatchlistTier = Field(default=WatchlistTier.NONE)
    alcohol_pattern: AlcoholPattern = Field(default=AlcoholPattern.NORMAL)

    @field_validator("watchlist_tier", mode="before")
    @classmethod
    def coerce_watchlist(cls, v: Any) -> WatchlistTier:
        return _coerce_enum(WatchlistTier, v, WatchlistTier.NONE)

    @field_validator("alcohol_pattern", mode="before")
    @classmethod
    def coerce_alcohol(cls, v: Any) -> AlcoholPattern:
        return _coerce_enum(AlcoholPattern, v, AlcoholPattern.NORMAL)


class AgentSession(BaseModel):
    """
    Session state accumulated while the process runs.

    Attributes:
        drinks_consumed: Alcohol purchases this session
        regions_visited: Region ids visited, in first-visit order, no repeats
        is_flagged_by_operator: Operator watchlist toggle
    """

    drinks_consumed: int = Field(default=0, ge=0)
    regions_visited: List[str] = Field(default_factory=list)
    is_flagged_by_operator: bool = Field(default=False)

    def record_visit(self, region_id: str) -> bool:
        """Add a region to the visited set. Returns True on first visit."""
        if region_id in self.regions_visited:
            return False
        self.regions_visited.append(region_id)
        return True


class Agent(BaseModel):
    """
    A simulated individual in the venue.

    Attributes:
        id: Stable identifier (e.g. "fan-1042")
        name: Display name
        credential: Ticket / badge type
        position: Current position on the venue plane
        target: Point the agent is walking toward
        idle_ticks: Ticks remaining in a paused state
        behavior: Current behavioral mode
        carried_items: Purchased items (consumables may repeat)
        history: Immutable background
        session: Session state
        risk_score: Derived clamped score
        risk_tier: Derived tier
        risk_factors: Derived contributing factors
    """

    id: str = Field(..., description="Stable agent identifier")
    name: str = Field(..., description="Display name")
    credential: Credential = Field(default=Credential.GENERAL)

    position: Point
    target: Point
    idle_ticks: int = Field(default=0, ge=0)
    behavior: Behavior = Field(default=Behavior.NORMAL)

    carried_items: List[str] = Field(default_factory=list)

    history: AgentHistory = Field(default_factory=AgentHistory)
    session: AgentSession = Field(default_factory=AgentSession)

    risk_score: int = Field(default=0, ge=0, le=100)
    risk_tier: RiskTier = Field(default=RiskTier.LOW)
    risk_factors: List[str] = Field(default_factory=list)

    @field_validator("credential", mode="before")
    @classmethod
    def coerce_credential(cls, v: Any) -> Credential:
        return _coerce_enum(Credential, v, Credential.GENERAL)

    @field_validator("behavior", mode="before")
    @classmethod
    def coerce_behavior(cls, v: Any) -> Behavior:
        return _coerce_enum(Behavior, v, Behavior.NORMAL)

    @property
    def is_privileged(self) -> bool:
        """Staff and media may enter the exclusion zone and VIP space."""
        return self.credential in PRIVILEGED_CREDENTIALS

    def with_assessment(self, assessment: RiskAssessment) -> "Agent":
        """Return a copy carrying the derived risk fields of `assessment`."""
        return self.model_copy(update={
            "risk_score": assessment.value,
            "risk_tier": assessment.tier,
            "risk_factors": list(assessment.factors),
        })
