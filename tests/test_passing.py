"""Tests for the passing system: release, flight and arrival."""

import pytest

from scrimmage.core.entities import AgentAttributes, Role
from scrimmage.core.events import EventBus, EventType
from scrimmage.core.phases import PlayPhase
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import DeadBallReason
from scrimmage.systems.passing import (
    PICK_BOUNDS,
    CatchResult,
    PassingSystem,
    interception_probability,
)


DT = 1 / 60


def _fly(passing, state, rng, max_ticks=300):
    """Step the ball until the pass resolves."""
    for _ in range(max_ticks):
        state.clock.advance(DT)
        resolution = passing.update(state, DT, rng)
        if resolution is not None:
            return resolution
    raise AssertionError("Pass never arrived")


def _throw_to(state, passing, receiver, risky=False):
    qb = state.qb_agent
    passing.start_pass(state, origin=qb.pos, destination=receiver.pos, target_id=receiver.id, risky=risky)


class TestRelease:
    """Tests for start_pass and ball following."""

    def test_release_records_passer_and_target(self, make_live_state):
        state = make_live_state("four_verts")
        bus = EventBus()
        passing = PassingSystem(bus)
        wr1 = state.formation.offense[Role.WR1]

        _throw_to(state, passing, wr1, risky=True)

        assert state.ball.in_air
        assert state.resolution.passer_id == Role.QB.value
        assert state.resolution.receiver_id == wr1.id
        throw = bus.get_events_by_type(EventType.THROW)[0]
        assert throw.data["risky"] is True
        assert throw.description == "Risky throw"

    def test_held_ball_follows_carrier(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        qb = state.qb_agent
        qb.pos = qb.pos + Vec2(3, -10)

        assert PassingSystem().update(state, DT, scripted()) is None
        assert state.ball.render_pos == qb.pos


class TestArrival:
    """Tests for resolving a pass when it arrives."""

    def test_catch(self, make_live_state, scripted, park_defense):
        state = make_live_state("four_verts")
        park_defense(state)
        bus = EventBus()
        passing = PassingSystem(bus)
        wr1 = state.formation.offense[Role.WR1]
        wr1.attributes = AgentAttributes(catch=1.2)

        _throw_to(state, passing, wr1)
        resolution = _fly(passing, state, scripted())

        assert resolution.result == CatchResult.CATCH
        assert state.ball.carrier_id == wr1.id
        assert state.phase.phase == PlayPhase.LIVE
        assert bus.get_events_by_type(EventType.CATCH)

    def test_drop_is_incomplete(self, make_live_state, scripted, park_defense):
        state = make_live_state("four_verts")
        park_defense(state)
        passing = PassingSystem()
        wr1 = state.formation.offense[Role.WR1]
        wr1.attributes = AgentAttributes(catch=0.4)

        _throw_to(state, passing, wr1)
        resolution = _fly(passing, state, scripted(default=0.0))

        assert resolution.result == CatchResult.INCOMPLETE
        assert state.resolution.reason == DeadBallReason.INCOMPLETE
        assert state.phase.phase == PlayPhase.DEAD

    def test_interception(self, make_live_state, scripted, park_defense):
        state = make_live_state("four_verts")
        park_defense(state)
        bus = EventBus()
        passing = PassingSystem(bus)
        wr1 = state.formation.offense[Role.WR1]
        cb1 = state.formation.defense[Role.CB1]
        cb1.pos = wr1.pos + Vec2(6, 0)

        _throw_to(state, passing, wr1)
        resolution = _fly(passing, state, scripted(default=0.01))

        assert resolution.result == CatchResult.INTERCEPTION
        assert resolution.defender_id == cb1.id
        assert state.resolution.reason == DeadBallReason.INTERCEPTION
        assert state.resolution.turnover
        assert bus.get_events_by_type(EventType.INTERCEPTION)[0].player_id == cb1.id

    def test_pass_to_non_receiver_falls_incomplete(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        bus = EventBus()
        passing = PassingSystem(bus)
        qb = state.qb_agent
        passing.start_pass(state, qb.pos, qb.pos + Vec2(0, 40), target_id=Role.CB1.value)

        resolution = _fly(passing, state, scripted())
        assert resolution.result == CatchResult.INCOMPLETE
        assert bus.get_events_by_type(EventType.INCOMPLETE)[0].description == "Receiver not found"

    def test_throw_away(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        bus = EventBus()
        passing = PassingSystem(bus)
        qb = state.qb_agent
        passing.start_pass(state, qb.pos, Vec2(418, qb.pos.y + 18), target_id=None)

        assert state.qb.throw_away
        resolution = _fly(passing, state, scripted())
        assert resolution.result == CatchResult.THROW_AWAY
        assert state.resolution.reason == DeadBallReason.THROW_AWAY
        assert bus.get_events_by_type(EventType.THROW_AWAY)


class TestInterceptionOdds:
    """Tests for interception_probability."""

    def test_bounded(self, make_agent):
        qb = make_agent(Role.QB, throw_accuracy=1.3)
        receiver = make_agent(Role.WR1, catch=1.3)
        sharp = make_agent(Role.CB1, awareness=1.3)
        dull = make_agent(Role.CB2, awareness=0.4)

        assert interception_probability(dull, qb, receiver, risky=False) == PICK_BOUNDS[0]
        assert interception_probability(sharp, qb, receiver, risky=True) <= PICK_BOUNDS[1]

    def test_risky_throw_raises_odds(self, make_agent):
        qb = make_agent(Role.QB, throw_accuracy=0.8)
        receiver = make_agent(Role.WR1, catch=0.8)
        defender = make_agent(Role.CB1, awareness=1.0)

        safe = interception_probability(defender, qb, receiver, risky=False)
        risky = interception_probability(defender, qb, receiver, risky=True)
        assert risky == pytest.approx(safe + 0.08)
