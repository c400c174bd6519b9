"""
Observability Module
====================

Operator feed, analytics and visualization for EventSentinel.

This module provides:
    - EventLog: Bounded, newest-first operator log feed
    - AnalyticsComputer: Derives counts, rankings and proximity groups
    - HeatmapGenerator: Risk-weighted occupancy grid

DESIGN RULES:
    - Does NOT import engine logic
    - Does NOT influence scoring or motion
"""

from event_sentinel.observability.event_log import EventLog, FeedEvent
from event_sentinel.observability.analytics import (
    AnalyticsComputer,
    proximity_links,
    tier_histogram,
)
from event_sentinel.observability.visualization import HeatmapGenerator


__all__ = [
    "EventLog",
    "FeedEvent",
    "AnalyticsComputer",
    "proximity_links",
    "tier_histogram",
    "HeatmapGenerator",
]
