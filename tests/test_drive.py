"""Tests for settlement and drive bookkeeping."""

import pytest

from scrimmage.core.entities import Role
from scrimmage.core.field import los_pix_y
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import (
    PLAY_LOG_LIMIT,
    DeadBallReason,
    DriveContext,
    DriveManager,
    ResultCategory,
    round_half_up,
    settle_play,
)


def _settle(make_live_state, reason, drive=None, gain=None, play="inside_zone", carrier=Role.RB):
    """End a play with ``reason``; ``gain`` puts the carrier that many yards past the LOS."""
    state = make_live_state(play, drive=drive or DriveContext())
    if gain is not None:
        agent = state.formation.offense[carrier]
        agent.pos = Vec2(213, los_pix_y(state.drive.los_yards) + gain * 8)
        state.ball.give_to(agent)
    state.end_play(reason, turnover=reason == DeadBallReason.INTERCEPTION)
    return settle_play(state)


class TestSettlement:
    """Tests for settle_play."""

    def test_incomplete_uses_a_down(self, make_live_state):
        outcome = _settle(
            make_live_state, DeadBallReason.INCOMPLETE, DriveContext(2, 7, 40), play="four_verts",
        )
        assert outcome.result == ResultCategory.INCOMPLETE
        assert outcome.yards == 0
        assert outcome.next_drive == DriveContext(3, 7, 40)

    def test_throw_away_is_no_gain(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.THROW_AWAY, play="four_verts")
        assert outcome.result == ResultCategory.THROW_AWAY
        assert outcome.next_drive == DriveContext(2, 10, 25)

    def test_gain_for_first_down(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, gain=12)
        assert outcome.result == ResultCategory.GAIN
        assert outcome.yards == 12
        assert outcome.first_down
        assert outcome.next_drive == DriveContext(1, 10, 37)
        assert outcome.format_summary() == "Inside Zone: Gain (+12 yds), first down"

    def test_loss(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, gain=-3)
        assert outcome.result == ResultCategory.LOSS
        assert outcome.yards == -3
        assert outcome.next_drive == DriveContext(2, 13, 22)

    def test_half_yards_round_up(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, gain=2.5)
        assert outcome.yards == 3

    def test_sack(self, make_live_state):
        outcome = _settle(
            make_live_state, DeadBallReason.SACK, gain=-7, play="four_verts", carrier=Role.QB,
        )
        assert outcome.result == ResultCategory.SACK
        assert outcome.yards == -7
        assert outcome.next_drive == DriveContext(2, 17, 18)

    def test_out_of_bounds_spots_the_ball(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.OUT_OF_BOUNDS, gain=4)
        assert outcome.result == ResultCategory.OUT_OF_BOUNDS
        assert outcome.next_drive == DriveContext(2, 6, 29)

    def test_turnover_on_downs(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, DriveContext(4, 5, 50), gain=2)
        assert outcome.turnover_on_downs
        assert not outcome.first_down
        assert outcome.next_drive == DriveContext()
        assert "turnover on downs" in outcome.format_summary()

    def test_fourth_down_conversion(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, DriveContext(4, 2, 50), gain=2)
        assert outcome.first_down
        assert not outcome.turnover_on_downs
        assert outcome.next_drive == DriveContext(1, 10, 52)

    def test_interception(self, make_live_state):
        outcome = _settle(
            make_live_state, DeadBallReason.INTERCEPTION, DriveContext(3, 8, 60), play="four_verts",
        )
        assert outcome.result == ResultCategory.INTERCEPTION
        assert outcome.turnover
        assert outcome.yards == 0
        assert outcome.next_drive == DriveContext()

    def test_touchdown(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TOUCHDOWN, gain=80)
        assert outcome.result == ResultCategory.TOUCHDOWN
        assert outcome.yards == 75
        assert outcome.end_los == 100
        assert outcome.next_drive == DriveContext()

    def test_goal_to_go(self, make_live_state):
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, DriveContext(1, 10, 85), gain=10)
        assert outcome.first_down
        assert outcome.next_drive == DriveContext(1, 5, 95)

    def test_unfinished_play_cannot_settle(self, make_live_state):
        with pytest.raises(ValueError):
            settle_play(make_live_state())


class TestRounding:
    """Tests for round_half_up."""

    @pytest.mark.parametrize("value,expected", [
        (2.5, 3),
        (2.49, 2),
        (-2.5, -2),
        (-2.51, -3),
        (0.0, 0),
    ])
    def test_round_half_up(self, value, expected):
        assert round_half_up(value) == expected


class TestDriveContext:
    """Tests for DriveContext validation."""

    @pytest.mark.parametrize("kwargs", [
        {"down": 0},
        {"down": 5},
        {"to_go": 0},
        {"los_yards": 0},
        {"los_yards": 100},
    ])
    def test_rejects_impossible_situations(self, kwargs):
        with pytest.raises(ValueError):
            DriveContext(**kwargs)

    def test_defaults(self):
        assert DriveContext() == DriveContext(1, 10, 25)

    def test_format(self):
        assert DriveContext(3, 7, 40).format() == "3rd & 7 at the 40"


class TestDriveManager:
    """Tests for DriveManager."""

    def test_record_advances_context_and_notifies(self, make_live_state):
        seen = []
        manager = DriveManager(on_play_complete=seen.append)
        outcome = _settle(make_live_state, DeadBallReason.TACKLED, gain=4)

        assert manager.record(outcome) == DriveContext(2, 6, 29)
        assert manager.context == DriveContext(2, 6, 29)
        assert seen == [outcome]

    def test_play_log_newest_first_and_bounded(self, make_live_state):
        manager = DriveManager()
        first = _settle(make_live_state, DeadBallReason.INCOMPLETE, play="four_verts")
        last = _settle(make_live_state, DeadBallReason.TACKLED, gain=1)

        for _ in range(PLAY_LOG_LIMIT + 5):
            manager.record(first)
        manager.record(last)

        assert len(manager.play_log) == PLAY_LOG_LIMIT
        assert manager.play_log[0] is last
