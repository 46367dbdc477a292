"""Defense brain - rush, pursuit and man coverage.

Defensive line:
    Locked up with a blocker: hand-fight in place (small jitter).
    Free: go get the back on runs, the quarterback otherwise.

Linebackers:
    Flow to where the ball will land, or to the carrier. They never give
    up depth: a linebacker doesn't step back toward the line to chase.

Secondary:
    Simple man coverage with a trail cushion on an assigned receiver.

Contact with the ball carrier is handled by the TackleResolver.
"""

from __future__ import annotations

from typing import Dict

from scrimmage.core.entities import Role, DL_ROLES, LB_ROLES
from scrimmage.core.variance import PlayRandom
from scrimmage.core.vec2 import Vec2
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState


RUSH_SPEED = 1.0
LB_SPEED = 0.92
LB_UNDERNEATH = 12.0
COVER_SPEED = 0.95
CUSHION_X = 6.0
CUSHION_Y = 10.0

COVERAGE_MAP: Dict[Role, Role] = {
    Role.CB1: Role.WR1,
    Role.CB2: Role.WR2,
    Role.NB: Role.WR3,
    Role.S1: Role.TE,
    Role.S2: Role.WR1,
}


def rush(state: PlayState, dt: float, rng: PlayRandom) -> None:
    """Move the four down linemen."""
    offense = state.formation.offense
    target = offense[Role.RB] if state.is_run_context() else offense[Role.QB]

    for role in DL_ROLES:
        dl = state.formation.defense[role]
        if dl.is_engaged:
            dl.pos = Vec2(
                dl.pos.x + rng.uniform(-2, 2) * dt,
                dl.pos.y + rng.uniform(-1, 1) * dt,
            )
        else:
            move_toward(dl, target.pos, dt, RUSH_SPEED)


def pursue(state: PlayState, dt: float) -> None:
    """Move the linebackers."""
    ball = state.ball
    if ball.in_air and ball.destination is not None:
        target = ball.destination
    else:
        carrier = state.carrier
        target = carrier.pos if carrier is not None else state.qb_agent.pos

    for role in LB_ROLES:
        lb = state.formation.defense[role]
        move_toward(lb, Vec2(target.x, max(lb.pos.y, target.y - LB_UNDERNEATH)), dt, LB_SPEED)


def cover(state: PlayState, dt: float) -> None:
    """Move the secondary in man coverage."""
    offense = state.formation.offense
    for defender_role, receiver_role in COVERAGE_MAP.items():
        defender = state.formation.defense[defender_role]
        receiver = offense[receiver_role]
        shade = CUSHION_X if receiver_role == Role.WR1 else -CUSHION_X
        move_toward(
            defender,
            Vec2(receiver.pos.x + shade, receiver.pos.y - CUSHION_Y),
            dt,
            COVER_SPEED,
        )


def move_defense(state: PlayState, dt: float, rng: PlayRandom) -> None:
    """Rush, pursue and cover for one tick."""
    rush(state, dt, rng)
    pursue(state, dt)
    cover(state, dt)
