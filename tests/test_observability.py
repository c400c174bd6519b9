"""
Observability Tests
===================

Operator feed, analytics and heatmap.
"""

import pytest

from event_sentinel.models.geometry import Point
from event_sentinel.models.output import LogType
from event_sentinel.models.risk import RiskTier
from event_sentinel.observability import (
    AnalyticsComputer,
    EventLog,
    FeedEvent,
    HeatmapGenerator,
    proximity_links,
    tier_histogram,
)


class TestEventLog:
    """Bounded newest-first feed."""

    def test_newest_first(self):
        log = EventLog(capacity=10)
        log.record(LogType.INFO, "First", "one")
        log.record(LogType.ALERT, "Second", "two", "beer", timestamp=1.6)

        entries = log.entries()
        assert [e.title for e in entries] == ["Second", "First"]
        assert entries[0].icon == "beer"
        assert entries[0].timestamp == 1.6
        assert entries[1].icon == "activity"

    def test_drops_oldest_when_full(self):
        log = EventLog(capacity=3)
        for i in range(5):
            log.record(LogType.INFO, f"Entry {i}", "detail")

        assert log.size == 3
        assert [e.title for e in log.entries()] == ["Entry 4", "Entry 3", "Entry 2"]
        assert [e.id for e in log.entries()] == [4, 3, 2]
        assert log.dropped_count == 2
        assert log.total_recorded == 5

    def test_publish_keeps_order(self):
        log = EventLog()
        count = log.publish([
            FeedEvent(LogType.INFO, "Movement", "Sam K. entered concourse area", "footprints"),
            FeedEvent(LogType.ALERT, "Alcohol Alert", "Sam K. - 4 drinks purchased", "beer"),
        ], timestamp=8.0)

        assert count == 2
        assert [e.title for e in log.entries()] == ["Alcohol Alert", "Movement"]
        assert all(e.timestamp == 8.0 for e in log.entries())

    def test_metrics_and_clear(self):
        log = EventLog(capacity=2)
        for _ in range(3):
            log.record(LogType.SYSTEM, "System Online", "up")

        assert log.metrics() == {
            "size": 2,
            "capacity": 2,
            "dropped_count": 1,
            "total_recorded": 3,
        }
        assert log.clear() == 2
        assert log.entries() == []

    def test_invalid_capacity(self):
        with pytest.raises(ValueError):
            EventLog(capacity=0)


@pytest.fixture
def crowd(make_agent):
    return [
        make_agent(id="a", position=Point(x=0, y=0), risk_score=80,
                   risk_tier=RiskTier.CRITICAL, session={"is_flagged_by_operator": True}),
        make_agent(id="b", position=Point(x=30, y=0), risk_score=50, risk_tier=RiskTier.HIGH),
        make_agent(id="c", position=Point(x=100, y=100), risk_score=45, risk_tier=RiskTier.HIGH),
        make_agent(id="d", position=Point(x=200, y=100), risk_score=30, risk_tier=RiskTier.MEDIUM),
    ]


class TestAnalytics:
    """Derived counts and rankings."""

    def test_counts(self, crowd):
        summary = AnalyticsComputer().compute(crowd)

        assert summary.watchlist_count == 1
        assert summary.alert_count == 1
        assert summary.tier_counts == {"LOW": 0, "MEDIUM": 1, "HIGH": 2, "CRITICAL": 1}
        assert summary.heatmap is None

    def test_high_risk_ranking(self, crowd):
        listed = AnalyticsComputer(high_risk_score=45).high_risk_agents(list(reversed(crowd)))
        assert [entry.agent_id for entry in listed] == ["a", "b", "c"]
        assert listed[0].score == 80

    def test_proximity_links(self, crowd):
        links = proximity_links(crowd, radius=40.0)

        assert len(links) == 1
        assert (links[0].a, links[0].b) == ("a", "b")
        assert links[0].distance == 30.0

    def test_proximity_needs_two_agents(self, crowd):
        assert proximity_links(crowd[:1], radius=40.0) == []

    def test_tier_histogram_empty(self):
        assert tier_histogram([]) == {"LOW": 0, "MEDIUM": 0, "HIGH": 0, "CRITICAL": 0}


class TestHeatmap:
    """Risk-weighted occupancy grid."""

    def test_weights_and_bins(self, make_agent):
        agents = [
            make_agent(id="hot", position=Point(x=10, y=10), risk_score=50),
            make_agent(id="calm", position=Point(x=90, y=90), risk_score=10),
            make_agent(id="edge", position=Point(x=100, y=100), risk_score=45),
        ]
        heatmap = HeatmapGenerator(width=100, height=100, resolution=4).generate(agents)

        assert heatmap.resolution == 4
        assert heatmap.grid[0][0] == 3.0
        assert heatmap.grid[3][3] == 2.0
        assert sum(sum(row) for row in heatmap.grid) == 5.0
        assert heatmap.max_value == 3.0

    def test_rows_follow_y(self, make_agent):
        agents = [make_agent(position=Point(x=10, y=90))]
        heatmap = HeatmapGenerator(width=100, height=100, resolution=4).generate(agents)

        assert heatmap.grid[3][0] == 1.0
        assert heatmap.grid[0][3] == 0.0

    def test_empty_crowd(self):
        heatmap = HeatmapGenerator(width=100, height=50, resolution=8).generate([])

        assert heatmap.max_value == 0.0
        assert len(heatmap.grid) == 8
        assert all(v == 0.0 for row in heatmap.grid for v in row)

    def test_attached_to_analytics(self, crowd):
        computer = AnalyticsComputer(heatmap=HeatmapGenerator(width=500, height=350))
        summary = computer.compute(crowd)

        assert summary.heatmap is not None
        assert sum(sum(row) for row in summary.heatmap.grid) == 3 + 3 + 1 + 1
