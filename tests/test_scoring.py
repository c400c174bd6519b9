"""
Risk Scorer Tests
=================

Additive contributions, clamping, tiers and purity.
"""

import pytest

from event_sentinel.engine.scoring import RiskScorer, ScoreThresholds
from event_sentinel.models.agent import Behavior, Credential
from event_sentinel.models.geometry import Point
from event_sentinel.models.phase import Phase
from event_sentinel.models.risk import RiskTier


VAULT = Point(x=20, y=20)       # critical
BACKSTAGE = Point(x=50, y=20)   # restricted
LOUNGE = Point(x=80, y=20)      # vip
HALL = Point(x=50, y=75)        # concourse
STANDS = Point(x=20, y=47)      # public floor


@pytest.fixture
def scorer(zone_index):
    return RiskScorer(zone_index, ScoreThresholds())


class TestEndToEnd:
    """Reference scenarios."""

    def test_watchlisted_repeat_offender_in_critical_zone(self, scorer, make_agent):
        agent = make_agent(
            position=VAULT,
            credential=Credential.GENERAL,
            history={"watchlist_tier": "high", "prior_incident_count": 2},
        )
        result = scorer.score(agent, Phase.Q1)

        assert result.value == 100  # 35 + 24 + 45 = 104, clamped
        assert result.tier == RiskTier.CRITICAL
        assert "HIGH WATCHLIST" in result.factors
        assert "2 Prior Incident(s)" in result.factors
        assert "CRITICAL ZONE VIOLATION" in result.factors

    def test_default_agent_in_public_area(self, scorer, make_agent):
        result = scorer.score(make_agent(position=STANDS), Phase.PRE_GAME)

        assert result.value == 0
        assert result.tier == RiskTier.LOW
        assert result.factors == []

    def test_operator_flag_adds_five(self, scorer, make_agent):
        agent = make_agent(history={"prior_incident_count": 1})
        before = scorer.score(agent, Phase.Q2)

        flagged = agent.model_copy(update={
            "session": agent.session.model_copy(update={"is_flagged_by_operator": True}),
        })
        after = scorer.score(flagged, Phase.Q2)

        assert after.value == before.value + 5
        assert after.factors == before.factors + ["User Flagged"]


class TestContributions:
    """Individual additive terms."""

    @pytest.mark.parametrize("tier,points,label", [
        ("high", 35, "HIGH WATCHLIST"),
        ("low", 15, "Low Watchlist"),
    ])
    def test_watchlist(self, scorer, make_agent, tier, points, label):
        result = scorer.score(make_agent(history={"watchlist_tier": tier}), Phase.Q1)
        assert result.value == points
        assert result.factors == [label]

    def test_prior_incidents_scale_linearly(self, scorer, make_agent):
        result = scorer.score(make_agent(history={"prior_incident_count": 3}), Phase.Q1)
        assert result.value == 36
        assert result.factors == ["3 Prior Incident(s)"]

    def test_heavy_drinker_history(self, scorer, make_agent):
        result = scorer.score(make_agent(history={"alcohol_pattern": "heavy"}), Phase.Q1)
        assert result.value == 10
        assert result.factors == ["Heavy Drinker History"]

    @pytest.mark.parametrize("drinks,points", [
        (0, 0), (2, 0), (3, 8), (4, 18), (5, 18), (6, 30), (8, 30),
    ])
    def test_drink_thresholds_do_not_stack(self, scorer, make_agent, drinks, points):
        result = scorer.score(make_agent(session={"drinks_consumed": drinks}), Phase.Q1)
        assert result.value == points
        assert len(result.factors) == (1 if points else 0)

    @pytest.mark.parametrize("position,credential,points,label", [
        (VAULT, Credential.GENERAL, 45, "CRITICAL ZONE VIOLATION"),
        (VAULT, Credential.MEDIA, 45, "CRITICAL ZONE VIOLATION"),
        (VAULT, Credential.STAFF, 0, None),
        (BACKSTAGE, Credential.VIP, 30, "Restricted Zone Access"),
        (BACKSTAGE, Credential.MEDIA, 0, None),
        (BACKSTAGE, Credential.STAFF, 0, None),
        (LOUNGE, Credential.GENERAL, 20, "VIP Zone - No Auth"),
        (LOUNGE, Credential.VENDOR, 20, "VIP Zone - No Auth"),
        (LOUNGE, Credential.MEDIA, 20, "VIP Zone - No Auth"),
        (LOUNGE, Credential.VIP, 0, None),
        (LOUNGE, Credential.STAFF, 0, None),
        (HALL, Credential.GENERAL, 0, None),
    ])
    def test_region_credential_mismatch(
        self, scorer, make_agent, position, credential, points, label,
    ):
        result = scorer.score(make_agent(position=position, credential=credential), Phase.Q3)
        assert result.value == points
        assert result.factors == ([label] if label else [])

    def test_rushing(self, scorer, make_agent):
        result = scorer.score(make_agent(behavior=Behavior.RUSHING), Phase.Q1)
        assert result.value == 15
        assert result.factors == ["Rushing Behavior"]

    def test_loitering_counts_outside_concourse_only(self, scorer, make_agent):
        seated = scorer.score(make_agent(behavior=Behavior.LOITERING, position=STANDS), Phase.Q1)
        in_hall = scorer.score(make_agent(behavior=Behavior.LOITERING, position=HALL), Phase.Q1)

        assert seated.value == 10
        assert seated.factors == ["Loitering"]
        assert in_hall.value == 0

    def test_factor_order_follows_evaluation(self, scorer, make_agent):
        agent = make_agent(
            position=LOUNGE,
            behavior=Behavior.RUSHING,
            history={"watchlist_tier": "low", "prior_incident_count": 1, "alcohol_pattern": "heavy"},
            session={"drinks_consumed": 4, "is_flagged_by_operator": True},
        )
        result = scorer.score(agent, Phase.HALFTIME)
        assert result.factors == [
            "Low Watchlist",
            "1 Prior Incident(s)",
            "Heavy Drinker History",
            "High Alcohol (4+)",
            "VIP Zone - No Auth",
            "Rushing Behavior",
            "User Flagged",
        ]
        assert result.value == 15 + 12 + 10 + 18 + 20 + 15 + 5


class TestProperties:
    """Clamp, monotonicity, tier consistency, idempotence."""

    def test_clamp_with_everything_firing(self, scorer, make_agent):
        agent = make_agent(
            position=VAULT,
            behavior=Behavior.RUSHING,
            history={"watchlist_tier": "high", "prior_incident_count": 50, "alcohol_pattern": "heavy"},
            session={"drinks_consumed": 8, "is_flagged_by_operator": True},
        )
        result = scorer.score(agent, Phase.Q4)
        assert result.value == 100
        assert result.tier == RiskTier.CRITICAL

    def test_more_drinks_never_lowers_score(self, scorer, make_agent):
        previous = -1
        for drinks in range(0, 9):
            value = scorer.score(make_agent(session={"drinks_consumed": drinks}), Phase.Q1).value
            assert value >= previous
            previous = value

    def test_adding_condition_never_lowers_score(self, scorer, make_agent):
        base = make_agent(history={"prior_incident_count": 1}, session={"drinks_consumed": 2})
        raised = make_agent(history={"prior_incident_count": 1}, session={"drinks_consumed": 4})
        assert scorer.score(raised, Phase.Q1).value >= scorer.score(base, Phase.Q1).value

    @pytest.mark.parametrize("value,tier", [
        (0, RiskTier.LOW), (24, RiskTier.LOW),
        (25, RiskTier.MEDIUM), (44, RiskTier.MEDIUM),
        (45, RiskTier.HIGH), (69, RiskTier.HIGH),
        (70, RiskTier.CRITICAL), (100, RiskTier.CRITICAL),
    ])
    def test_tier_boundaries(self, value, tier):
        assert ScoreThresholds().tier_for(value) == tier

    def test_tier_is_non_decreasing(self):
        thresholds = ScoreThresholds()
        severities = [thresholds.tier_for(v).severity for v in range(0, 101)]
        assert severities == sorted(severities)

    def test_idempotent_and_pure(self, scorer, make_agent):
        agent = make_agent(
            position=BACKSTAGE,
            history={"watchlist_tier": "low"},
            session={"drinks_consumed": 6},
        )
        snapshot = agent.model_dump()

        first = scorer.score(agent, Phase.Q2)
        second = scorer.score(agent, Phase.Q2)

        assert first == second
        assert agent.model_dump() == snapshot

    def test_unknown_enum_values_fall_back_to_defaults(self, scorer, make_agent):
        agent = make_agent(
            position=LOUNGE,
            credential="season-pass",
            behavior="dancing",
            history={"watchlist_tier": "purple", "alcohol_pattern": "?"},
        )
        assert agent.credential == Credential.GENERAL
        assert agent.behavior == Behavior.NORMAL

        result = scorer.score(agent, Phase.Q1)
        assert result.factors == ["VIP Zone - No Auth"]
