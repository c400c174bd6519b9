"""
Motion Model Tests
==================

State machine ordering, containment and consumption.
"""

import pytest

from event_sentinel.engine.motion import MotionModel, MotionParameters
from event_sentinel.models.agent import Behavior, Credential
from event_sentinel.models.geometry import Point
from event_sentinel.models.output import LogType
from event_sentinel.models.phase import Phase
from event_sentinel.simulation.population import seed_population


NEVER = (0.99,)   # every chance() roll fails
ALWAYS = (0.0,)   # every chance() roll succeeds


@pytest.fixture
def motion(zone_index):
    return MotionModel(zone_index, MotionParameters())


def _in_seating(p):
    return 5 <= p.x <= 35 and 40 <= p.y <= 55


class TestContainment:
    """Exclusion zone handling."""

    def test_unprivileged_agent_is_teleported_out(self, motion, make_agent, rng):
        agent = make_agent(position=Point(x=50, y=45), target=Point(x=30, y=47))
        result = motion.advance(agent, Phase.Q1, rng)

        assert result.corrected
        assert not motion.index.in_exclusion_zone(result.agent.position)

    def test_privileged_agent_may_stay(self, motion, make_agent, scripted_rng):
        agent = make_agent(
            credential=Credential.STAFF,
            position=Point(x=50, y=45),
            target=Point(x=50, y=50),
        )
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert not result.corrected
        assert result.agent.position == Point(x=50, y=45)

    def test_forbidden_target_is_resampled(self, motion, make_agent, scripted_rng):
        agent = make_agent(
            position=Point(x=20, y=47),
            target=Point(x=50, y=45),
            idle_ticks=2,
        )
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert not motion.index.in_exclusion_zone(result.agent.target)
        assert _in_seating(result.agent.target)

    def test_step_into_exclusion_is_discarded(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=36, y=45), target=Point(x=80, y=45))
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert not result.moved
        assert result.agent.position == Point(x=36, y=45)
        assert _in_seating(result.agent.target)

    def test_long_run_never_ends_in_exclusion(self, motion, rng):
        agents = seed_population(40, motion.index, rng)
        for _ in range(300):
            agents = [motion.advance(a, Phase.Q1, rng).agent for a in agents]
            for agent in agents:
                if not agent.is_privileged:
                    assert not motion.index.in_exclusion_zone(agent.position)

    def test_stadium_long_run_never_ends_in_exclusion(self, stadium_index, rng):
        model = MotionModel(stadium_index, MotionParameters())
        agents = seed_population(60, stadium_index, rng)
        for tick in range(250):
            phase = Phase.HALFTIME if tick % 50 < 25 else Phase.Q2
            agents = [model.advance(a, phase, rng).agent for a in agents]
            for agent in agents:
                if not agent.is_privileged:
                    assert not stadium_index.in_exclusion_zone(agent.position)


class TestVipSpace:
    """Unprivileged agents may not step into VIP regions."""

    def test_general_admission_is_blocked(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=80, y=36), target=Point(x=80, y=0))
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert not result.moved
        assert result.agent.position == Point(x=80, y=36)

    @pytest.mark.parametrize("credential", [Credential.VIP, Credential.STAFF, Credential.MEDIA])
    def test_cleared_credentials_enter(self, motion, make_agent, scripted_rng, credential):
        agent = make_agent(
            credential=credential,
            position=Point(x=80, y=36),
            target=Point(x=80, y=0),
        )
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert result.moved
        assert result.agent.position == Point(x=80, y=28)
        assert "lounge" in result.agent.session.regions_visited


class TestIdleAndStep:
    """Idle hold, idle onset and stepping."""

    def test_idle_hold_decrements_without_moving(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=10, y=47), target=Point(x=34, y=47), idle_ticks=3)
        result = motion.advance(agent, Phase.Q1, scripted_rng(ALWAYS))

        assert result.agent.idle_ticks == 2
        assert result.agent.position == agent.position

    def test_idle_onset_only_from_normal(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=10, y=47), target=Point(x=34, y=47))
        result = motion.advance(agent, Phase.Q1, scripted_rng(ALWAYS))

        assert result.agent.behavior == Behavior.LOITERING
        assert result.agent.idle_ticks == 3
        assert result.agent.position == agent.position

    def test_step_moves_fixed_distance(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=10, y=47), target=Point(x=34, y=47))
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert result.moved
        assert result.agent.position == Point(x=18, y=47)

    def test_rushing_moves_double(self, motion, make_agent, scripted_rng):
        agent = make_agent(
            behavior=Behavior.RUSHING,
            position=Point(x=10, y=47),
            target=Point(x=34, y=47),
        )
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))
        assert result.agent.position == Point(x=26, y=47)

    def test_arrival_resamples_target(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=20, y=47), target=Point(x=25, y=47))
        result = motion.advance(agent, Phase.Q1, scripted_rng(NEVER))

        assert not result.moved
        assert result.agent.target != agent.target
        assert _in_seating(result.agent.target)

    def test_halftime_arrival_can_head_to_concourse(self, motion, make_agent, scripted_rng):
        agent = make_agent(
            behavior=Behavior.RUSHING,
            position=Point(x=20, y=47),
            target=Point(x=22, y=47),
        )
        result = motion.advance(agent, Phase.HALFTIME, scripted_rng(ALWAYS))
        assert result.agent.target == Point(x=15, y=65)

    def test_input_agent_is_not_mutated(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=10, y=47), target=Point(x=34, y=47))
        before = agent.model_dump()
        motion.advance(agent, Phase.Q1, scripted_rng(NEVER))
        assert agent.model_dump() == before

    def test_first_visit_is_recorded_once(self, motion, make_agent, scripted_rng):
        agent = make_agent(position=Point(x=10, y=47), target=Point(x=34, y=47))
        first = motion.advance(agent, Phase.Q1, scripted_rng(NEVER)).agent
        second = motion.advance(first, Phase.Q1, scripted_rng(NEVER)).agent
        assert second.session.regions_visited == ["floor"]


class TestConsumption:
    """Concourse purchases."""

    def _in_hall(self, make_agent, **overrides):
        return make_agent(
            behavior=Behavior.RUSHING,
            position=Point(x=50, y=75),
            target=Point(x=52, y=75),
            **overrides,
        )

    def test_first_drink_logs_concession(self, motion, make_agent, scripted_rng):
        result = motion.advance(self._in_hall(make_agent), Phase.Q2, scripted_rng(ALWAYS))

        assert result.agent.session.drinks_consumed == 1
        assert result.agent.carried_items == ["Beer"]
        assert [e.title for e in result.events] == ["Movement", "Concession"]

    def test_fourth_drink_raises_alert(self, motion, make_agent, scripted_rng):
        agent = self._in_hall(
            make_agent,
            session={"drinks_consumed": 3, "regions_visited": ["hall"]},
        )
        result = motion.advance(agent, Phase.Q2, scripted_rng(ALWAYS))

        assert result.agent.session.drinks_consumed == 4
        assert len(result.events) == 1
        event = result.events[0]
        assert event.type == LogType.ALERT
        assert event.title == "Alcohol Alert"
        assert event.icon == "beer"
        assert "4 drinks" in event.description

    def test_alcohol_cap_falls_back_to_souvenir(self, motion, make_agent, scripted_rng):
        agent = self._in_hall(
            make_agent,
            session={"drinks_consumed": 8, "regions_visited": ["hall"]},
        )
        result = motion.advance(agent, Phase.Q2, scripted_rng(ALWAYS))

        assert result.agent.session.drinks_consumed == 8
        assert result.agent.carried_items == ["Hot Dog"]

    def test_souvenirs_are_unique(self, motion, make_agent, scripted_rng):
        agent = self._in_hall(
            make_agent,
            carried_items=["Hot Dog"],
            session={"drinks_consumed": 8, "regions_visited": ["hall"]},
        )
        result = motion.advance(agent, Phase.Q2, scripted_rng(ALWAYS))

        assert result.agent.carried_items == ["Hot Dog"]
        assert result.events == []

    def test_no_purchases_outside_concourse(self, motion, make_agent, scripted_rng):
        agent = make_agent(
            behavior=Behavior.RUSHING,
            position=Point(x=20, y=47),
            target=Point(x=22, y=47),
        )
        result = motion.advance(agent, Phase.HALFTIME, scripted_rng(ALWAYS))

        assert result.agent.carried_items == []
        assert result.agent.session.drinks_consumed == 0
