"""
Prediction Models
=================

Predictive alerts surfaced to the operator.

A prediction is created by the prediction generator, lives in a bounded
queue, and is destroyed by operator dismissal or by eviction when the
queue overflows.

Output Contract:
    {
        "id": "fan-1042-INTOXICATION_MONITOR-96000",
        "created_at": 96.0,
        "agent_id": "fan-1042",
        "agent_name": "Sarah K.",
        "pattern": "INTOXICATION_MONITOR",
        "confidence": 82,
        "snapshot_factors": ["High Alcohol (4+)"],
        "suggested_action": "Flag for beverage service cutoff",
        "priority": "MEDIUM",
        "icon": "beer",
        "acknowledged": false
    }
"""

from typing import Dict, List

from pydantic import BaseModel, Field

from event_sentinel.models.reason_codes import PredictionPattern
from event_sentinel.models.risk import RiskTier


class PredictionAction(BaseModel):
    """Suggested operator response for a pattern."""

    action: str
    priority: RiskTier
    icon: str = "activity"


DEFAULT_ACTION = PredictionAction(
    action="Monitor situation",
    priority=RiskTier.LOW,
    icon="activity",
)


PREDICTION_ACTIONS: Dict[PredictionPattern, PredictionAction] = {
    PredictionPattern.ZONE_BREACH_IMMINENT: PredictionAction(
        action="Deploy security to perimeter", priority=RiskTier.HIGH, icon="alert",
    ),
    PredictionPattern.ALTERCATION_RISK: PredictionAction(
        action="Alert nearby staff for intervention", priority=RiskTier.HIGH, icon="users",
    ),
    PredictionPattern.FIELD_RUSH_VECTOR: PredictionAction(
        action="Position guards at field access points", priority=RiskTier.CRITICAL, icon="alert",
    ),
    PredictionPattern.INTOXICATION_MONITOR: PredictionAction(
        action="Flag for beverage service cutoff", priority=RiskTier.MEDIUM, icon="beer",
    ),
    PredictionPattern.BEHAVIORAL_PATTERN_MATCH: PredictionAction(
        action="Increase surveillance on subject", priority=RiskTier.MEDIUM, icon="eye",
    ),
    PredictionPattern.ANOMALY_DETECTED: PredictionAction(
        action="Continue monitoring, gather data", priority=RiskTier.LOW, icon="scan",
    ),
}


def action_for(pattern) -> PredictionAction:
    """Look up the action for a pattern, falling back to the default."""
    return PREDICTION_ACTIONS.get(pattern, DEFAULT_ACTION)


class Prediction(BaseModel):
    """
    A generated, deduplicated, prioritized alert.

    Attributes:
        id: Unique prediction id
        created_at: Simulated seconds when the prediction was created
        agent_id: Subject agent id
        agent_name: Subject display name
        pattern: Risk pattern code
        confidence: Confidence in [0, 100]
        snapshot_factors: Subject's risk factors at creation time
        suggested_action: Operator action from the lookup table
        priority: Alert priority from the lookup table
        icon: Icon tag for the rendering surface
        acknowledged: Set by the operator; acknowledged entries do not
            suppress duplicates
    """

    id: str = Field(..., description="Unique prediction id")
    created_at: float = Field(..., ge=0.0, description="Simulated seconds at creation")
    agent_id: str
    agent_name: str
    pattern: PredictionPattern
    confidence: int = Field(..., ge=0, le=100)
    snapshot_factors: List[str] = Field(default_factory=list)
    suggested_action: str
    priority: RiskTier
    icon: str = "activity"
    acknowledged: bool = False
