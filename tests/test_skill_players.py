"""Tests for receiver, running back and defensive movement."""

import pytest

from scrimmage.ai.ballcarrier_brain import CLOG_RADIUS, choose_run_aim, move_running_back
from scrimmage.ai.defense_brain import CUSHION_X, CUSHION_Y, cover, move_defense, pursue, rush
from scrimmage.ai.receiver_brain import (
    MAX_BACKWARD,
    RUN_RELEASE,
    TE_SEAL_STEP,
    comeback_chance,
    follow_route,
    move_receivers,
    scramble_drill,
)
from scrimmage.core.entities import AgentAttributes, Role
from scrimmage.core.field import FIELD_PIX_W
from scrimmage.core.vec2 import Vec2
from scrimmage.physics import ball_flight
from scrimmage.play_state import WrapRecord
from scrimmage.systems.assignments import initialize_assignments


DT = 1 / 60


def assert_at(pos: Vec2, expected: Vec2) -> None:
    assert pos.x == pytest.approx(expected.x)
    assert pos.y == pytest.approx(expected.y)


class TestReceivers:
    """Tests for WR/TE movement."""

    def test_run_call_release_and_hold(self, make_live_state, scripted):
        state = make_live_state("inside_zone")
        rng = scripted()
        initialize_assignments(state, rng)
        wr1 = state.formation.offense[Role.WR1]
        te = state.formation.offense[Role.TE]

        for _ in range(120):
            move_receivers(state, DT, rng)

        assert_at(wr1.pos, wr1.home + Vec2(0, RUN_RELEASE))
        # TE lines up outside the hole and seals a step further outside
        assert_at(te.pos, te.home + Vec2(TE_SEAL_STEP, RUN_RELEASE))

    def test_follow_route_advances_waypoints(self, make_agent):
        wr = make_agent(Role.WR2, 100, 100, speed=6.0)
        wr.assign_route([Vec2(100, 110), Vec2(120, 110)])

        assert follow_route(wr, 0.1, 1.0, 6.0)
        assert wr.route_index == 1
        for _ in range(20):
            follow_route(wr, 0.1, 1.0, 6.0)
        assert wr.current_target is None
        assert not follow_route(wr, 0.1, 1.0, 6.0)

    def test_comeback_window(self):
        assert comeback_chance(1.0) == 0.0
        assert comeback_chance(2.2) == 0.0
        assert comeback_chance(4.2) == pytest.approx(0.05)
        assert comeback_chance(6.2) == pytest.approx(0.0)
        assert comeback_chance(10.0) == 0.0

    def test_scramble_drill_after_route(self, make_live_state, scripted):
        state = make_live_state("quick_slants")
        rng = scripted()
        initialize_assignments(state, rng)
        wr2 = state.formation.offense[Role.WR2]
        wr2.route_index = len(wr2.targets)

        start_y = wr2.pos.y
        for _ in range(90):
            move_receivers(state, DT, rng)

        drill = state.skill.scramble[wr2.id]
        assert drill.total == pytest.approx(90 * DT)
        assert 20 <= drill.target.x <= FIELD_PIX_W - 20
        # Right sideline lane, past the line of scrimmage
        assert drill.target.x > FIELD_PIX_W / 2
        assert wr2.pos.y > start_y

    def test_comeback_never_drifts_far_backward(self, make_live_state, scripted):
        state = make_live_state("quick_slants")
        initialize_assignments(state, scripted())
        te = state.formation.offense[Role.TE]
        te.route_index = len(te.targets)
        te.pos = Vec2(te.pos.x, state.los_pix_y + 200)
        state.skill.drill_for(te.id).total = 3.0

        # Low draws: every retarget is a comeback toward the quarterback
        rng = scripted(default=0.01)
        start_y = te.pos.y
        for _ in range(30):
            before = te.pos.y
            move_receivers(state, DT, rng)
            assert te.pos.y >= before - MAX_BACKWARD

        assert te.pos.y < start_y
        assert te.pos.y >= start_y - MAX_BACKWARD * 30

    @pytest.mark.parametrize("role, draws, offset", [
        (Role.WR3, [0.5, 0.75], 60.0),
        (Role.WR3, [0.5, 0.5], 0.0),
        (Role.TE, [0.5, 0.25], -20.0),
    ])
    def test_lane_is_drawn_across_the_range(self, make_live_state, scripted, role, draws, offset):
        state = make_live_state("four_verts")
        initialize_assignments(state, scripted())
        agent = state.formation.offense[role]
        qb_x = state.qb_agent.pos.x

        scramble_drill(state, agent, DT, scripted(draws))
        assert state.skill.scramble[agent.id].target.x == pytest.approx(qb_x + offset)

    def test_comeback_spot_is_drawn_across_the_range(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        initialize_assignments(state, scripted())
        wr1 = state.formation.offense[Role.WR1]
        state.skill.drill_for(wr1.id).total = 3.0
        qb_x = state.qb_agent.pos.x

        # First draw takes the comeback, second puts it 30 px right of the QB
        scramble_drill(state, wr1, DT, scripted([0.01, 0.75]))
        assert state.skill.scramble[wr1.id].target.x == pytest.approx(qb_x + 30.0)

    def test_wrapped_carrier_does_not_move(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        rng = scripted()
        initialize_assignments(state, rng)
        wr1 = state.formation.offense[Role.WR1]
        state.ball.give_to(wr1)
        state.tackle.wrap = WrapRecord(wr1.id, "CB1", 0.0, 0.4, wr1.pos)

        start = wr1.pos
        move_receivers(state, DT, rng)
        assert wr1.pos == start


class TestRunningBack:
    """Tests for the running back."""

    def _carry(self, make_live_state, scripted):
        state = make_live_state("inside_zone")
        initialize_assignments(state, scripted())
        rb = state.formation.offense[Role.RB]
        rb.attributes = AgentAttributes(awareness=0.9)
        state.ball.give_to(rb)
        return state, rb

    def test_clear_hole_presses_downhill(self, make_live_state, scripted, park_defense):
        rng = scripted()
        state, rb = self._carry(make_live_state, scripted)
        park_defense(state)
        plan = state.assignments

        aim = choose_run_aim(state, rb, rng)
        assert not aim.clogged
        assert aim.aim.x == pytest.approx(plan.run_hole_x)
        assert aim.aim.y == pytest.approx(max(plan.run_lane_y, rb.pos.y + 14))

    def test_clogged_hole_cuts(self, make_live_state, scripted, park_defense):
        rng = scripted([0.1])
        state, rb = self._carry(make_live_state, scripted)
        park_defense(state)
        plan = state.assignments
        lb = state.formation.defense[Role.LB1]
        lb.pos = Vec2(plan.run_hole_x, plan.run_lane_y + CLOG_RADIUS / 2)

        aim = choose_run_aim(state, rb, rng)
        assert aim.clogged
        # Average read: 16 px cut, 6 px bend, and always at least 14 px downhill
        assert aim.aim.x == pytest.approx(plan.run_hole_x - 16)
        assert aim.aim.y == pytest.approx(max(plan.run_lane_y + 6, rb.pos.y + 14))

    def test_smart_back_cuts_wider(self, make_live_state, scripted, park_defense):
        rng = scripted([0.9])
        state, rb = self._carry(make_live_state, scripted)
        rb.attributes = AgentAttributes(awareness=1.2)
        park_defense(state)
        plan = state.assignments
        state.formation.defense[Role.LB1].pos = Vec2(plan.run_hole_x, plan.run_lane_y)

        aim = choose_run_aim(state, rb, rng)
        assert aim.aim.x == pytest.approx(plan.run_hole_x + 24)

    def test_carrier_moves_and_records_aim(self, make_live_state, scripted, park_defense):
        rng = scripted()
        state, rb = self._carry(make_live_state, scripted)
        park_defense(state)
        start = rb.pos

        move_running_back(state, DT, rng)
        assert state.skill.run_aim is not None
        assert rb.pos.y > start.y

    def test_back_without_ball_runs_checkdown(self, make_live_state, scripted):
        state = make_live_state("slant_flat")
        rng = scripted()
        initialize_assignments(state, rng)
        rb = state.formation.offense[Role.RB]
        target = rb.current_target

        start_dist = rb.pos.distance_to(target)
        move_running_back(state, DT, rng)
        assert rb.pos.distance_to(target) < start_dist


class TestDefense:
    """Tests for rush, pursuit and coverage."""

    def test_free_rusher_goes_after_qb_on_pass(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        dl = state.formation.defense[Role.DT]
        qb = state.qb_agent
        start = dl.pos.distance_to(qb.pos)

        rush(state, DT, scripted())
        assert dl.pos.distance_to(qb.pos) < start

    def test_rusher_chases_back_on_run(self, make_live_state, scripted):
        state = make_live_state("outside_zone")
        dl = state.formation.defense[Role.RE]
        rb = state.formation.offense[Role.RB]
        start = dl.pos.distance_to(rb.pos)

        rush(state, DT, scripted())
        assert dl.pos.distance_to(rb.pos) < start

    def test_engaged_rusher_only_jitters(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        dl = state.formation.defense[Role.DT]
        dl.engaged_with = Role.C.value
        start = dl.pos

        rush(state, DT, scripted([0.0, 1.0]))
        assert abs(dl.pos.x - start.x) <= 2 * DT + 1e-9
        assert abs(dl.pos.y - start.y) <= 1 * DT + 1e-9

    def test_linebackers_never_give_up_depth(self, make_live_state):
        state = make_live_state("four_verts")
        lb = state.formation.defense[Role.LB1]
        start_y = lb.pos.y

        for _ in range(60):
            pursue(state, DT)
            assert lb.pos.y >= start_y - 1e-9

    def test_linebackers_flow_to_pass_destination(self, make_live_state):
        state = make_live_state("four_verts")
        qb = state.qb_agent
        destination = Vec2(60, state.los_pix_y + 120)
        ball_flight.launch(state.ball, qb.pos, destination, target_id="WR1")
        lb = state.formation.defense[Role.LB1]
        start = lb.pos.distance_to(destination)

        pursue(state, DT)
        assert lb.pos.distance_to(destination) < start

    def test_man_coverage_trails_receiver(self, make_live_state):
        state = make_live_state("four_verts")
        cb = state.formation.defense[Role.CB1]
        wr = state.formation.offense[Role.WR1]
        wr.pos = Vec2(wr.pos.x, wr.pos.y + 30)

        for _ in range(120):
            cover(state, DT)

        assert_at(cb.pos, Vec2(wr.pos.x + CUSHION_X, wr.pos.y - CUSHION_Y))

    def test_move_defense_runs_every_group(self, make_live_state, scripted):
        state = make_live_state("four_verts")
        before = {d.id: d.pos for d in state.formation.defenders()}
        move_defense(state, DT, scripted())
        moved = [d.id for d in state.formation.defenders() if d.pos != before[d.id]]
        assert Role.DT.value in moved
        assert Role.CB1.value in moved
