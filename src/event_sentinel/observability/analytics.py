"""
Analytics Module
================

Compute derived analytics from the crowd after a tick.

This module computes analytics for observability ONLY.
Analytics do NOT influence scoring, motion or predictions.

Derived from:
    - Agent risk fields (scores, tiers, operator flags)
    - Agent positions (proximity groups)

NO ENGINE IMPORTS.
"""

import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from event_sentinel.models.agent import Agent
from event_sentinel.models.output import (
    AnalyticsSummary,
    HighRiskEntry,
    ProximityLink,
    RiskHeatmap,
)
from event_sentinel.models.risk import RiskTier


logger = logging.getLogger(__name__)


def tier_histogram(agents: Sequence[Agent]) -> Dict[str, int]:
    """Count agents per risk tier (every tier present, zero if empty)."""
    counts = {tier.value: 0 for tier in RiskTier}
    for agent in agents:
        counts[agent.risk_tier.value] += 1
    return counts


def proximity_links(agents: Sequence[Agent], radius: float) -> List[ProximityLink]:
    """
    Pairs of agents closer than `radius`.

    Vectorized pairwise distances; O(N²) memory, fine for a few hundred
    agents.
    """
    if len(agents) < 2:
        return []

    positions = np.array([[a.position.x, a.position.y] for a in agents], dtype=np.float64)
    diff = positions[:, None, :] - positions[None, :, :]
    dist = np.sqrt((diff ** 2).sum(axis=-1))

    rows, cols = np.nonzero(np.triu(dist < radius, k=1))
    return [
        ProximityLink(
            a=agents[i].id,
            b=agents[j].id,
            distance=round(float(dist[i, j]), 2),
        )
        for i, j in zip(rows.tolist(), cols.tolist())
    ]


class AnalyticsComputer:
    """
    Computes operator analytics from the agent collection.

    Does NOT import engine logic.
    Does NOT feed back into the simulation.
    """

    def __init__(
        self,
        high_risk_score: int = 45,
        proximity_radius: float = 40.0,
        heatmap=None,
    ) -> None:
        """
        Initialize analytics computer.

        Args:
            high_risk_score: Score from which an agent is listed as high risk
            proximity_radius: Distance under which two agents are linked
            heatmap: Optional HeatmapGenerator
        """
        self.high_risk_score = high_risk_score
        self.proximity_radius = proximity_radius
        self.heatmap = heatmap
        logger.info(
            f"AnalyticsComputer initialized: high_risk>={high_risk_score}, "
            f"proximity_radius={proximity_radius}"
        )

    def compute(self, agents: Sequence[Agent]) -> AnalyticsSummary:
        """
        Compute analytics for the current crowd.

        Args:
            agents: Agents after the latest tick

        Returns:
            AnalyticsSummary
        """
        heatmap: Optional[RiskHeatmap] = None
        if self.heatmap is not None:
            heatmap = self.heatmap.generate(agents)

        return AnalyticsSummary(
            watchlist_count=sum(1 for a in agents if a.session.is_flagged_by_operator),
            alert_count=sum(1 for a in agents if a.risk_tier == RiskTier.CRITICAL),
            high_risk_agents=self.high_risk_agents(agents),
            tier_counts=tier_histogram(agents),
            proximity_links=proximity_links(agents, self.proximity_radius),
            heatmap=heatmap,
        )

    def high_risk_agents(self, agents: Sequence[Agent]) -> List[HighRiskEntry]:
        """Agents at or above the listing score, highest score first."""
        ranked = sorted(
            (a for a in agents if a.risk_score >= self.high_risk_score),
            key=lambda a: a.risk_score,
            reverse=True,
        )
        return [
            HighRiskEntry(agent_id=a.id, name=a.name, score=a.risk_score, tier=a.risk_tier)
            for a in ranked
        ]
