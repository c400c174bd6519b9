"""
Test Configuration
==================

Pytest fixtures and test configuration for EventSentinel.
"""

import pytest

from event_sentinel.geometry import GeofenceIndex
from event_sentinel.models.agent import Agent, AgentHistory, AgentSession
from event_sentinel.models.geometry import Point, VenueLayout
from event_sentinel.simulation.randomness import make_rng


def _box(x0, y0, x1, y1):
    """Closed rectangular ring as a layout JSON boundary."""
    return {"vertices": [
        {"x": x0, "y": y0}, {"x": x1, "y": y0},
        {"x": x1, "y": y1}, {"x": x0, "y": y1},
        {"x": x0, "y": y0},
    ]}


class ScriptedRandom:
    """
    RandomSource stub that replays fixed draws.

    `random()` cycles through `values`; `integers(low, high)` returns
    `low` unless an explicit `ints` script is given.
    """

    def __init__(self, values=(0.5,), ints=None):
        self.values = list(values)
        self.ints = list(ints) if ints else None
        self._i = 0
        self._j = 0

    def random(self):
        value = self.values[self._i % len(self.values)]
        self._i += 1
        return value

    def integers(self, low, high):
        if self.ints is None:
            return low
        value = self.ints[self._j % len(self.ints)]
        self._j += 1
        return min(max(value, low), high - 1)


@pytest.fixture
def rng():
    """Seeded numpy Generator."""
    return make_rng(1234)


@pytest.fixture
def scripted_rng():
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def stadium_index():
    """Geofence index over the bundled stadium layout."""
    return GeofenceIndex.from_file()


@pytest.fixture
def zone_layout_data():
    """
    Small 100 x 100 venue where every region kind is reachable.

    Specific zones sit above a catch-all public floor in lookup order:

        vault      critical    (10,10)-(30,30)   priority 0
        backstage  restricted  (40,10)-(60,30)   priority 1
        lounge     vip         (70,10)-(90,30)   priority 2
        hall       concourse   (10,60)-(90,90)   priority 3
        floor      public      (0,0)-(100,100)   priority 4

    Exclusion zone (40,35)-(60,55); seating (5,40)-(35,55); concourse
    spawn (15,65)-(85,85).
    """
    return {
        "venue_id": "test_venue",
        "name": "Test Venue",
        "width": 100,
        "height": 100,
        "regions": [
            {"id": "floor", "name": "Floor", "kind": "public", "priority": 4,
             "boundary": _box(0, 0, 100, 100)},
            {"id": "vault", "name": "Vault", "kind": "critical", "priority": 0,
             "boundary": _box(10, 10, 30, 30)},
            {"id": "backstage", "name": "Backstage", "kind": "restricted", "priority": 1,
             "boundary": _box(40, 10, 60, 30)},
            {"id": "lounge", "name": "Lounge", "kind": "vip", "priority": 2,
             "boundary": _box(70, 10, 90, 30)},
            {"id": "hall", "name": "Hall", "kind": "concourse", "priority": 3,
             "boundary": _box(10, 60, 90, 90)},
        ],
        "exclusion_zone": {"name": "pit", "min_x": 40, "min_y": 35, "max_x": 60, "max_y": 55},
        "seating_areas": [
            {"name": "stands", "min_x": 5, "min_y": 40, "max_x": 35, "max_y": 55},
        ],
        "concourse_areas": [
            {"name": "hall", "min_x": 15, "min_y": 65, "max_x": 85, "max_y": 85},
        ],
    }


@pytest.fixture
def zone_index(zone_layout_data):
    """Geofence index over the small test venue."""
    return GeofenceIndex(VenueLayout.model_validate(zone_layout_data))


@pytest.fixture
def make_agent():
    """
    Agent factory with all-default history and session.

    Keyword arguments override Agent fields; `history` and `session`
    accept plain dicts.
    """
    def _make(**overrides):
        history = overrides.pop("history", {})
        session = overrides.pop("session", {})
        fields = {
            "id": "fan-1000",
            "name": "Sam K.",
            "position": Point(x=20, y=47),
            "target": Point(x=30, y=47),
            "history": AgentHistory(**history) if isinstance(history, dict) else history,
            "session": AgentSession(**session) if isinstance(session, dict) else session,
        }
        fields.update(overrides)
        return Agent(**fields)

    return _make
