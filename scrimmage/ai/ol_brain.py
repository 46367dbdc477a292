"""Offensive line brain.

Each blocker picks the nearest rusher and steps to a spot:

Pass pro:
    Slide to where the rusher's path to the QB crosses the blocker's own
    depth, holding ground (never below the anchor line).

Run block:
    Climb forward and away from the run hole, opening a crease.

Contact starts once the nearest rusher is inside ENGAGE_DIST; from then on
the BlockResolver owns the pair.
"""

from __future__ import annotations

from scrimmage.core.entities import Agent, OL_ROLES
from scrimmage.core.field import FIELD_PIX_W, clamp_x
from scrimmage.core.variance import side_of
from scrimmage.core.vec2 import Vec2
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState
from scrimmage.resolution.blocking import (
    ENGAGE_DIST,
    BlockResolver,
    anchor_y,
    clamp_anchor,
)


THREAT_DIST = 60.0
PASS_STEP = 0.95
PASS_STEP_NO_THREAT = 0.7
RUN_STEP = 1.05
RUN_CLIMB = 8.0


def pass_set_spot(ol: Agent, rusher: Agent, qb: Agent) -> Vec2:
    """Where the rusher's line to the QB crosses the blocker's depth."""
    vy = qb.pos.y - rusher.pos.y
    if vy == 0:
        vy = 1e-3
    t = (ol.pos.y - rusher.pos.y) / vy
    intercept_x = rusher.pos.x + (qb.pos.x - rusher.pos.x) * t
    intercept_x = min(max(intercept_x, 20.0), FIELD_PIX_W - 20.0)
    return Vec2(intercept_x, max(anchor_y(ol), ol.pos.y))


def run_block_spot(ol: Agent, hole_x: float) -> Vec2:
    side = side_of(ol.pos.x - hole_x)
    return Vec2(clamp_x(ol.pos.x + side * RUN_CLIMB), ol.pos.y + RUN_CLIMB)


def move_offensive_line(state: PlayState, dt: float, resolver: BlockResolver) -> None:
    """Step every blocker and start new engagements."""
    qb = state.qb_agent
    run = state.is_run_call

    for role in OL_ROLES:
        ol = state.formation.offense[role]
        clamp_anchor(ol)

        rusher, dist = state.nearest_rusher(ol.pos)
        if rusher is None:
            continue

        if run:
            hole = state.assignments.run_hole_x
            target = run_block_spot(ol, hole if hole is not None else ol.home.x)
            move_toward(ol, target, dt, RUN_STEP)
        else:
            speed = PASS_STEP if dist < THREAT_DIST else PASS_STEP_NO_THREAT
            move_toward(ol, pass_set_spot(ol, rusher, qb), dt, speed)
        clamp_anchor(ol)

        if dist < ENGAGE_DIST:
            resolver.engage(state, ol, rusher)
