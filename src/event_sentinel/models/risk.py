"""
Risk Models
===========

Risk tiers and the output of the risk scorer.

Tier mapping (on the clamped score):
    score >= 70  -> CRITICAL
    score >= 45  -> HIGH
    score >= 25  -> MEDIUM
    otherwise    -> LOW
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class RiskTier(str, Enum):
    """
    Discrete risk tiers, ordered by severity.

    Attributes:
        LOW: No intervention needed
        MEDIUM: Worth keeping an eye on
        HIGH: Elevated, monitoring required
        CRITICAL: Intervention recommended
    """

    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def severity(self) -> int:
        """Numeric severity for ordering (LOW=0 .. CRITICAL=3)."""
        return _SEVERITY[self]


_SEVERITY = {
    RiskTier.LOW: 0,
    RiskTier.MEDIUM: 1,
    RiskTier.HIGH: 2,
    RiskTier.CRITICAL: 3,
}


def system_tier(tiers) -> RiskTier:
    """
    Collapse per-agent tiers into the venue-wide alert tier.

    Only CRITICAL and HIGH are elevated states for aggregate purposes;
    everything else collapses to LOW.
    """
    result = RiskTier.LOW
    for tier in tiers:
        if tier == RiskTier.CRITICAL:
            return RiskTier.CRITICAL
        if tier == RiskTier.HIGH:
            result = RiskTier.HIGH
    return result


def system_status_label(tier: RiskTier) -> str:
    """Operator-facing label for the aggregate tier."""
    if tier == RiskTier.CRITICAL:
        return "CRITICAL"
    if tier == RiskTier.HIGH:
        return "ELEVATED"
    return "NOMINAL"


class RiskAssessment(BaseModel):
    """
    Result of scoring one agent in one phase.

    Attributes:
        value: Clamped score in [0, 100]
        tier: Tier derived from the clamped score
        factors: Human-readable reasons, in evaluation order
    """

    value: int = Field(..., ge=0, le=100, description="Clamped risk score")
    tier: RiskTier = Field(..., description="Risk tier for the score")
    factors: List[str] = Field(
        default_factory=list,
        description="Contributing factors in evaluation order",
    )
