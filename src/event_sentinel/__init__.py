"""
EventSentinel
=============

Crowd simulation and predictive risk engine for a bounded event venue.

This package simulates a crowd of agents moving inside a stadium, classifies
each agent's instantaneous risk, and surfaces a ranked stream of predictive
alerts to an operator.

Components:
    - geometry: Geofence index over the static venue layout
    - models: Pydantic data models (agents, regions, predictions, snapshots)
    - engine: Motion model, risk scorer, prediction generator, simulation clock
    - simulation: Injectable randomness and population seeding
    - observability: Operator log feed and derived analytics

Example:
    from event_sentinel.config import settings
    from event_sentinel.engine import SimulationEngine

    engine = SimulationEngine.from_settings(settings)
    engine.tick()
    snapshot = engine.snapshot()
"""

__version__ = "0.1.0"
__author__ = "EventSentinel Project"

__all__ = [
    "__version__",
]
