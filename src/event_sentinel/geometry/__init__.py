"""
Geometry Module
===============

Spatial lookups over the static venue layout.

This module provides the geofence index (point → region, exclusion-zone
checks, legal position sampling) built from the layout loaded at startup.
"""

from event_sentinel.geometry.regions import (
    DEFAULT_LAYOUT_PATH,
    GeofenceIndex,
    load_layout,
    point_in_ring,
)

__all__ = [
    "DEFAULT_LAYOUT_PATH",
    "GeofenceIndex",
    "load_layout",
    "point_in_ring",
]
