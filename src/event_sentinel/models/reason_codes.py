"""
Prediction Pattern Codes
========================

Fixed set of machine-readable risk patterns a prediction can carry.

Each prediction has exactly ONE pattern code. The pattern selects the
suggested operator action and the priority of the alert.

Rules:
    - No free-text pattern names
    - Unknown patterns fall back to a generic "monitor" action
"""

from enum import Enum


class PredictionPattern(str, Enum):
    """
    Machine-readable prediction codes.

    Attributes:
        ZONE_BREACH_IMMINENT: Subject likely to enter a forbidden zone
        ALTERCATION_RISK: Subject likely to get into a confrontation
        FIELD_RUSH_VECTOR: Subject on a course toward the field
        INTOXICATION_MONITOR: Subject's drink count warrants a cutoff
        BEHAVIORAL_PATTERN_MATCH: Subject matches prior incident history
        ANOMALY_DETECTED: Elevated score with no more specific pattern
    """

    # Escalated (score >= 60)
    ZONE_BREACH_IMMINENT = "ZONE_BREACH_IMMINENT"
    ALTERCATION_RISK = "ALTERCATION_RISK"
    FIELD_RUSH_VECTOR = "FIELD_RUSH_VECTOR"

    # Specific
    INTOXICATION_MONITOR = "INTOXICATION_MONITOR"
    BEHAVIORAL_PATTERN_MATCH = "BEHAVIORAL_PATTERN_MATCH"

    # Fallback
    ANOMALY_DETECTED = "ANOMALY_DETECTED"


ESCALATED_PATTERNS = (
    PredictionPattern.ZONE_BREACH_IMMINENT,
    PredictionPattern.ALTERCATION_RISK,
    PredictionPattern.FIELD_RUSH_VECTOR,
)
