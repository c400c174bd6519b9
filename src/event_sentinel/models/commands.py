"""
Operator Command Schema
=======================

This module defines the commands the operator surface may push back into
the engine.

Commands are explicit state-transition inputs. They are applied between
ticks, never interleaved with one, and a command that references an unknown
agent or prediction id is a no-op rather than an error.

Input Contract:
    {"type": "toggle_watchlist", "agent_id": "fan-1042"}
    {"type": "select_agent", "agent_id": "fan-1042"}
    {"type": "dismiss_prediction", "prediction_id": "fan-1042-ALTERCATION_RISK-12000"}
    {"type": "acknowledge_prediction", "prediction_id": "fan-1042-ALTERCATION_RISK-12000"}

Example:
    from pydantic import TypeAdapter
    from event_sentinel.models.commands import OperatorCommand

    command = TypeAdapter(OperatorCommand).validate_python(
        {"type": "toggle_watchlist", "agent_id": "fan-1042"}
    )
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class ToggleWatchlist(BaseModel):
    """Flip the operator watchlist flag on an agent."""

    type: Literal["toggle_watchlist"] = "toggle_watchlist"
    agent_id: str = Field(..., description="Target agent id")


class SelectAgent(BaseModel):
    """
    Select an agent for inspection.

    Pure view-state: does not affect the simulation. `agent_id=None`
    clears the selection.
    """

    type: Literal["select_agent"] = "select_agent"
    agent_id: Optional[str] = Field(default=None, description="Agent id or None")


class DismissPrediction(BaseModel):
    """Remove a prediction from the live queue."""

    type: Literal["dismiss_prediction"] = "dismiss_prediction"
    prediction_id: str = Field(..., description="Prediction to remove")


class AcknowledgePrediction(BaseModel):
    """Mark a prediction as seen without removing it."""

    type: Literal["acknowledge_prediction"] = "acknowledge_prediction"
    prediction_id: str = Field(..., description="Prediction to acknowledge")


OperatorCommand = Annotated[
    Union[ToggleWatchlist, SelectAgent, DismissPrediction, AcknowledgePrediction],
    Field(discriminator="type"),
]
