"""
Risk Scorer
===========

Deterministic per-agent risk scoring.

Each agent's score is a sum of independent additive contributions,
clamped to [0, 100] as a whole:

    Contribution                              Points   Factor label
    ----------------------------------------  -------  ---------------------------
    Watchlist tier high / low                 35 / 15  HIGH WATCHLIST / Low Watchlist
    Prior incidents                           12 × n   "{n} Prior Incident(s)"
    Heavy alcohol background                  10       Heavy Drinker History
    Session drinks >=6 / >=4 / >=3            30/18/8  Excessive / High / Moderate Alcohol
    Critical region, not staff                45       CRITICAL ZONE VIOLATION
    Restricted region, not staff or media     30       Restricted Zone Access
    VIP region, not vip or staff              20       VIP Zone - No Auth
    Rushing                                   15       Rushing Behavior
    Loitering outside the concourse           10       Loitering
    Operator flag                             5        User Flagged

Drink thresholds are mutually exclusive (highest wins); so are the three
region mismatches, since an agent occupies exactly one region.

Design Rules:
    - Pure: no randomness, no mutation of the agent
    - Idempotent: same agent and phase give identical output
    - Factors listed in evaluation order
"""

import logging
from dataclasses import dataclass
from typing import List, Tuple

from event_sentinel.geometry.regions import GeofenceIndex
from event_sentinel.models.agent import (
    Agent,
    AlcoholPattern,
    Behavior,
    Credential,
    WatchlistTier,
)
from event_sentinel.models.geometry import Region, RegionKind
from event_sentinel.models.phase import Phase
from event_sentinel.models.risk import RiskAssessment, RiskTier


logger = logging.getLogger(__name__)


MAX_SCORE = 100


@dataclass
class ScoreThresholds:
    """
    Tier boundaries (inclusive lower bounds on the clamped score).

    Loaded from configuration file.
    """

    medium: int = 25
    high: int = 45
    critical: int = 70

    def tier_for(self, value: int) -> RiskTier:
        """Map a clamped score to its tier."""
        if value >= self.critical:
            return RiskTier.CRITICAL
        if value >= self.high:
            return RiskTier.HIGH
        if value >= self.medium:
            return RiskTier.MEDIUM
        return RiskTier.LOW


class RiskScorer:
    """
    Pure function object: (agent, phase) → RiskAssessment.

    The current region is resolved through the geofence index from the
    agent's position, so the scorer never trusts a cached region.
    """

    def __init__(self, index: GeofenceIndex, thresholds: ScoreThresholds) -> None:
        """
        Initialize the scorer.

        Args:
            index: Geofence index for region resolution
            thresholds: Tier boundaries
        """
        self.index = index
        self.thresholds = thresholds
        logger.info(
            f"RiskScorer initialized: tiers medium={thresholds.medium}, "
            f"high={thresholds.high}, critical={thresholds.critical}"
        )

    def score(self, agent: Agent, phase: Phase) -> RiskAssessment:
        """
        Score an agent.

        Args:
            agent: Agent to score (not modified)
            phase: Current event phase. No contribution depends on it
                today; it is part of the signature so phase-aware rules
                stay a local change.

        Returns:
            RiskAssessment with clamped value, tier and factor labels
        """
        region = self.index.region_at(agent.position)
        contributions = (
            self._history(agent)
            + self._drinks(agent)
            + self._zone(agent, region)
            + self._behavior(agent, region)
        )
        if agent.session.is_flagged_by_operator:
            contributions.append((5, "User Flagged"))

        raw = sum(points for points, _ in contributions)
        value = max(0, min(MAX_SCORE, raw))

        return RiskAssessment(
            value=value,
            tier=self.thresholds.tier_for(value),
            factors=[label for _, label in contributions],
        )

    def _history(self, agent: Agent) -> List[Tuple[int, str]]:
        history = agent.history
        out = []

        if history.watchlist_tier == WatchlistTier.HIGH:
            out.append((35, "HIGH WATCHLIST"))
        elif history.watchlist_tier == WatchlistTier.LOW:
            out.append((15, "Low Watchlist"))

        if history.prior_incident_count > 0:
            n = history.prior_incident_count
            out.append((12 * n, f"{n} Prior Incident(s)"))

        if history.alcohol_pattern == AlcoholPattern.HEAVY:
            out.append((10, "Heavy Drinker History"))

        return out

    def _drinks(self, agent: Agent) -> List[Tuple[int, str]]:
        drinks = agent.session.drinks_consumed
        if drinks >= 6:
            return [(30, "Excessive Alcohol (6+)")]
        if drinks >= 4:
            return [(18, "High Alcohol (4+)")]
        if drinks >= 3:
            return [(8, "Moderate Alcohol (3+)")]
        return []

    def _zone(self, agent: Agent, region: Region) -> List[Tuple[int, str]]:
        credential = agent.credential

        if region.kind == RegionKind.CRITICAL and credential != Credential.STAFF:
            return [(45, "CRITICAL ZONE VIOLATION")]
        if region.kind == RegionKind.RESTRICTED and credential not in (
            Credential.STAFF, Credential.MEDIA,
        ):
            return [(30, "Restricted Zone Access")]
        if region.kind == RegionKind.VIP and credential not in (
            Credential.VIP, Credential.STAFF,
        ):
            return [(20, "VIP Zone - No Auth")]
        return []

    def _behavior(self, agent: Agent, region: Region) -> List[Tuple[int, str]]:
        if agent.behavior == Behavior.RUSHING:
            return [(15, "Rushing Behavior")]
        if agent.behavior == Behavior.LOITERING and region.kind != RegionKind.CONCOURSE:
            return [(10, "Loitering")]
        return []
