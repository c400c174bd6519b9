"""
Prediction Generator
====================

Turns elevated agent scores into operator-facing predictive alerts.

This module provides:
    - PredictionGenerator: gated, decision-list pattern selection
    - PredictionQueue: bounded, deduplicated live prediction set

Pattern Decision List (first match wins):
    1. score >= 60        → one of ZONE_BREACH_IMMINENT / ALTERCATION_RISK /
                            FIELD_RUSH_VECTOR, confidence 70 + U(0, 25)
    2. drinks >= 3        → INTOXICATION_MONITOR, confidence 50 + 8 × drinks
    3. prior incidents    → BEHAVIORAL_PATTERN_MATCH, confidence 45 + U(0, 30)
    4. otherwise          → ANOMALY_DETECTED, confidence 40 + U(0, 25)

Confidences are floored to integers and clamped to 100.

Queue Rules:
    - A prediction for an (agent, pattern) pair is suppressed while an
      unacknowledged one for the same pair is younger than the cooldown
    - New predictions are prepended (newest first)
    - Overflow evicts by policy:
        insertion: drop the oldest entries
        priority:  drop the lowest-priority entry, oldest first
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from event_sentinel.models.agent import Agent
from event_sentinel.models.prediction import Prediction, action_for
from event_sentinel.models.reason_codes import ESCALATED_PATTERNS, PredictionPattern
from event_sentinel.simulation.randomness import RandomSource, chance, pick, uniform


logger = logging.getLogger(__name__)


MAX_CONFIDENCE = 100

EVICTION_POLICIES = ("insertion", "priority")


@dataclass
class PredictionParameters:
    """
    Gate, cooldown and queue settings.

    Loaded from configuration file.
    """

    score_gate: int = 40
    sampling_probability: float = 0.04
    escalated_score: int = 60
    cooldown_seconds: float = 10.0
    max_live: int = 5
    eviction_policy: str = "insertion"


class PredictionQueue:
    """
    Bounded live prediction set, newest first.

    Attributes:
        max_live: Maximum live predictions
        policy: Overflow eviction policy
        evicted_count: Predictions dropped on overflow
        suppressed_count: Predictions rejected as duplicates

    Example:
        queue = PredictionQueue(max_live=5, cooldown_seconds=10.0)
        queue.offer(prediction)
        queue.dismiss(prediction.id)
    """

    def __init__(
        self,
        max_live: int = 5,
        cooldown_seconds: float = 10.0,
        policy: str = "insertion",
    ) -> None:
        """
        Initialize the queue.

        Args:
            max_live: Maximum live predictions. Must be >= 1.
            cooldown_seconds: Duplicate suppression window (simulated seconds)
            policy: "insertion" or "priority"
        """
        if max_live < 1:
            raise ValueError("max_live must be >= 1")
        if policy not in EVICTION_POLICIES:
            raise ValueError(f"Unknown eviction policy: {policy}")

        self.max_live = max_live
        self.cooldown_seconds = cooldown_seconds
        self.policy = policy
        self._items: List[Prediction] = []
        self.evicted_count: int = 0
        self.suppressed_count: int = 0

    def __len__(self) -> int:
        return len(self._items)

    def items(self) -> List[Prediction]:
        """Live predictions, newest first."""
        return list(self._items)

    def get(self, prediction_id: str) -> Optional[Prediction]:
        """Look up a live prediction by id."""
        for item in self._items:
            if item.id == prediction_id:
                return item
        return None

    def is_duplicate(
        self,
        agent_id: str,
        pattern: PredictionPattern,
        now: float,
    ) -> bool:
        """True if an unacknowledged twin is still inside the cooldown."""
        for item in self._items:
            if (
                item.agent_id == agent_id
                and item.pattern == pattern
                and not item.acknowledged
                and now - item.created_at < self.cooldown_seconds
            ):
                return True
        return False

    def offer(self, prediction: Prediction) -> bool:
        """
        Insert a prediction unless it duplicates a live one.

        Args:
            prediction: Candidate prediction

        Returns:
            True if the prediction is live after insertion
        """
        if self.is_duplicate(prediction.agent_id, prediction.pattern, prediction.created_at):
            self.suppressed_count += 1
            return False

        self._items.insert(0, prediction)
        while len(self._items) > self.max_live:
            evicted = self._evict()
            self.evicted_count += 1
            logger.debug(f"Evicted prediction {evicted.id} ({self.policy})")

        return self.get(prediction.id) is not None

    def _evict(self) -> Prediction:
        if self.policy == "insertion":
            return self._items.pop()

        # Lowest priority first, then oldest. Items are newest first, so
        # scanning from the tail finds the oldest of equal priority.
        victim = len(self._items) - 1
        for i in range(len(self._items) - 1, -1, -1):
            if self._items[i].priority.severity < self._items[victim].priority.severity:
                victim = i
        return self._items.pop(victim)

    def dismiss(self, prediction_id: str) -> Optional[Prediction]:
        """
        Remove a prediction unconditionally.

        Returns:
            The removed prediction, or None for an unknown id
        """
        for i, item in enumerate(self._items):
            if item.id == prediction_id:
                return self._items.pop(i)
        return None

    def acknowledge(self, prediction_id: str) -> Optional[Prediction]:
        """
        Mark a prediction as acknowledged, keeping it live.

        Returns:
            The updated prediction, or None for an unknown id
        """
        for i, item in enumerate(self._items):
            if item.id == prediction_id:
                updated = item.model_copy(update={"acknowledged": True})
                self._items[i] = updated
                return updated
        return None

    def clear(self) -> int:
        """Drop every live prediction. Returns the number removed."""
        cleared = len(self._items)
        self._items.clear()
        return cleared

    def metrics(self) -> Dict[str, int]:
        """Queue metrics for observability."""
        return {
            "live": len(self._items),
            "max_live": self.max_live,
            "evicted_count": self.evicted_count,
            "suppressed_count": self.suppressed_count,
        }


class PredictionGenerator:
    """
    Gated prediction generator.

    Invoked once per agent per tick after scoring. Generation is
    throttled by a score gate plus a sampling roll, so volume does not
    grow with the population.
    """

    def __init__(self, params: PredictionParameters) -> None:
        """
        Initialize the generator.

        Args:
            params: Gate and queue settings
        """
        self.params = params
        self.generated_count: int = 0
        logger.info(
            f"PredictionGenerator initialized: gate={params.score_gate}, "
            f"sampling={params.sampling_probability}, max_live={params.max_live}, "
            f"policy={params.eviction_policy}"
        )

    def new_queue(self) -> PredictionQueue:
        """Create an empty live queue with the configured bounds."""
        return PredictionQueue(
            max_live=self.params.max_live,
            cooldown_seconds=self.params.cooldown_seconds,
            policy=self.params.eviction_policy,
        )

    def consider(
        self,
        agent: Agent,
        queue: PredictionQueue,
        now: float,
        rng: RandomSource,
    ) -> Optional[Prediction]:
        """
        Maybe create a prediction for an already-scored agent.

        Args:
            agent: Agent carrying this tick's risk fields
            queue: Live prediction queue receiving the result
            now: Simulated seconds
            rng: Random source

        Returns:
            The new live prediction, or None (gated out or duplicate)
        """
        if agent.risk_score < self.params.score_gate:
            return None
        if not chance(rng, self.params.sampling_probability):
            return None

        prediction = self.build(agent, now, rng)
        if not queue.offer(prediction):
            return None

        self.generated_count += 1
        logger.info(
            f"Prediction {prediction.pattern.value} for {agent.id} "
            f"(score={agent.risk_score}, confidence={prediction.confidence})"
        )
        return prediction

    def build(self, agent: Agent, now: float, rng: RandomSource) -> Prediction:
        """Select a pattern for the agent and assemble the prediction."""
        pattern, confidence = self.select_pattern(agent, rng)
        action = action_for(pattern)

        return Prediction(
            id=f"{agent.id}-{pattern.value}-{int(now * 1000)}",
            created_at=now,
            agent_id=agent.id,
            agent_name=agent.name,
            pattern=pattern,
            confidence=min(MAX_CONFIDENCE, confidence),
            snapshot_factors=list(agent.risk_factors),
            suggested_action=action.action,
            priority=action.priority,
            icon=action.icon,
        )

    def select_pattern(self, agent: Agent, rng: RandomSource):
        """
        Run the decision list.

        Returns:
            Tuple of (pattern, unclamped integer confidence)
        """
        if agent.risk_score >= self.params.escalated_score:
            return pick(rng, ESCALATED_PATTERNS), int(70 + uniform(rng, 0, 25))

        drinks = agent.session.drinks_consumed
        if drinks >= 3:
            return PredictionPattern.INTOXICATION_MONITOR, 50 + 8 * drinks

        if agent.history.prior_incident_count > 0:
            return PredictionPattern.BEHAVIORAL_PATTERN_MATCH, int(45 + uniform(rng, 0, 30))

        return PredictionPattern.ANOMALY_DETECTED, int(40 + uniform(rng, 0, 25))
