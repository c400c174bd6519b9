"""
Operator Commands
=================

Explicit state transitions requested from the operator surface.

Commands never fail: an unknown agent or prediction id is a no-op that
returns False and leaves the state untouched. Callers serialize commands
with ticks (the engine holds its lock around both).
"""

import logging
from typing import Optional

from event_sentinel.engine.scoring import RiskScorer
from event_sentinel.engine.state import SimulationState
from event_sentinel.models.commands import (
    AcknowledgePrediction,
    DismissPrediction,
    SelectAgent,
    ToggleWatchlist,
)
from event_sentinel.models.output import LogType


logger = logging.getLogger(__name__)


def apply_command(
    state: SimulationState,
    command,
    scorer: Optional[RiskScorer] = None,
) -> bool:
    """
    Apply one operator command to the state.

    Args:
        state: Simulation state (mutated in place)
        command: One of the OperatorCommand models
        scorer: When given, a watchlist toggle re-scores the agent
            immediately instead of waiting for the next tick

    Returns:
        True if the command changed something
    """
    if isinstance(command, ToggleWatchlist):
        return _toggle_watchlist(state, command.agent_id, scorer)
    if isinstance(command, SelectAgent):
        return _select_agent(state, command.agent_id)
    if isinstance(command, DismissPrediction):
        return _dismiss(state, command.prediction_id)
    if isinstance(command, AcknowledgePrediction):
        return _acknowledge(state, command.prediction_id)

    logger.warning(f"Ignoring unknown command: {command!r}")
    return False


def _toggle_watchlist(
    state: SimulationState,
    agent_id: str,
    scorer: Optional[RiskScorer],
) -> bool:
    agent = state.find_agent(agent_id)
    if agent is None:
        logger.info(f"toggle_watchlist: unknown agent {agent_id}")
        return False

    flagged = not agent.session.is_flagged_by_operator
    session = agent.session.model_copy(update={"is_flagged_by_operator": flagged})
    updated = agent.model_copy(update={"session": session})
    if scorer is not None:
        updated = updated.with_assessment(scorer.score(updated, state.phase_spec.phase))
    state.replace_agent(updated)

    if flagged:
        state.log.record(
            LogType.ALERT, "Watchlist Added",
            f"{agent.name} added to active surveillance", "eye", state.sim_time,
        )
    else:
        state.log.record(
            LogType.INFO, "Watchlist Removed",
            f"{agent.name} removed from surveillance", "check", state.sim_time,
        )
    return True


def _select_agent(state: SimulationState, agent_id: Optional[str]) -> bool:
    if agent_id is None:
        state.selected_agent_id = None
        return True

    agent = state.find_agent(agent_id)
    if agent is None:
        logger.info(f"select_agent: unknown agent {agent_id}")
        return False

    state.selected_agent_id = agent.id
    state.log.record(
        LogType.INFO, "Entity Selected", f"Viewing {agent.name}", "target", state.sim_time,
    )
    return True


def _dismiss(state: SimulationState, prediction_id: str) -> bool:
    removed = state.predictions.dismiss(prediction_id)
    if removed is None:
        logger.info(f"dismiss_prediction: unknown prediction {prediction_id}")
        return False

    state.log.record(
        LogType.INFO, "Prediction Dismissed",
        f"{removed.agent_name} alert dismissed by operator", "check", state.sim_time,
    )
    return True


def _acknowledge(state: SimulationState, prediction_id: str) -> bool:
    updated = state.predictions.acknowledge(prediction_id)
    if updated is None:
        logger.info(f"acknowledge_prediction: unknown prediction {prediction_id}")
        return False

    state.log.record(
        LogType.INFO, "Prediction Acknowledged",
        f"{updated.agent_name} alert acknowledged by operator", "check", state.sim_time,
    )
    return True
