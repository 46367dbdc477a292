"""Running back brain.

Without the ball the back runs his release (checkdown) route. With it he
presses the run hole and lane set by the assignment initializer. If the
hole is clogged he cuts to one side, further when he reads it well;
otherwise he weaves a little, less the smarter he is.
"""

from __future__ import annotations

from scrimmage.core.entities import Agent, Role
from scrimmage.core.field import clamp_x
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState, RunAim
from scrimmage.ai.receiver_brain import follow_route


ROUTE_SPEED = 0.95
ROUTE_TOLERANCE = 7.0
CARRY_SPEED = 1.05

DEFAULT_LANE_DEPTH = 24.0
MIN_PRESS = 14.0
CLOG_RADIUS = 18.0
WEAVE = 10.0


def choose_run_aim(state: PlayState, rb: Agent, rng: PlayRandom) -> RunAim:
    """Pick where the carrier runs this tick."""
    iq = clamp(rb.attributes.awareness, 0.4, 1.3)
    plan = state.assignments
    hole_x = plan.run_hole_x if plan.run_hole_x is not None else rb.pos.x
    lane_y = plan.run_lane_y if plan.run_lane_y is not None else rb.pos.y + DEFAULT_LANE_DEPTH

    hole = Vec2(hole_x, lane_y)
    clogged = any(d.pos.distance_to(hole) < CLOG_RADIUS for d in state.formation.defenders())

    if clogged:
        cut_dir = rng.sign()
        aim = Vec2(
            clamp_x(hole_x + cut_dir * (24 if iq > 1 else 16)),
            max(lane_y + (10 if iq > 1 else 6), rb.pos.y + MIN_PRESS),
        )
    else:
        weave = rng.uniform(-WEAVE, WEAVE) * (1.1 - min(iq, 1.1))
        aim = Vec2(clamp_x(hole_x + weave), max(lane_y, rb.pos.y + MIN_PRESS))

    return RunAim(aim=aim, clogged=clogged)


def move_running_back(state: PlayState, dt: float, rng: PlayRandom) -> None:
    """One tick for the running back."""
    rb = state.formation.offense[Role.RB]
    if not rb.alive or state.is_wrapped(rb):
        return

    if not state.is_carrier(rb):
        follow_route(rb, dt, ROUTE_SPEED, ROUTE_TOLERANCE)
        return

    run_aim = choose_run_aim(state, rb, rng)
    state.skill.run_aim = run_aim
    move_toward(rb, run_aim.aim, dt, CARRY_SPEED)
