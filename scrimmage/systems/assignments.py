"""Assignment initializer.

Runs once, on the first live tick, and turns the play call into concrete
field targets: receiver routes, the back's path, the run hole and lane,
and the quarterback's drop spot and throw clock.

Timing values are on the play clock, which starts at presnap, so a
standard snap already has about 1.2 s on it.
"""

from __future__ import annotations

import logging
from typing import List

from scrimmage.core.entities import Agent, Role, WR_ROLES
from scrimmage.core.field import PX_PER_YARD, RUN_HOLE_MARGIN, clamp_x, yards_to_pix
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2
from scrimmage.play_state import PlayState
from scrimmage.plays.playbook import RouteStep


logger = logging.getLogger(__name__)


DEFAULT_WR_ROUTE = [RouteStep(0, 4)]
DEFAULT_TE_ROUTE = [RouteStep(0, 4)]
DEFAULT_RB_ROUTE = [RouteStep(0, 2)]
DEFAULT_QB_DROP = 3

# Run lane sits this far past the center
RUN_LANE_DEPTH_YARDS = 2.5

# Time-to-throw windows (play clock seconds)
QUICK_TTT = (1.0, 1.7)
STANDARD_TTT = (1.6, 3.0)
TTT_BOUNDS = (0.9, 3.2)
MAX_HOLD_EXTRA = (1.2, 1.9)

QB_IQ_BOUNDS = (0.4, 1.3)


def qb_iq(agent: Agent) -> float:
    """Awareness clamped to the range the decision formulas expect."""
    return clamp(agent.attributes.awareness, *QB_IQ_BOUNDS)


def project_route(start: Vec2, steps: List[RouteStep]) -> List[Vec2]:
    """Turn yard offsets into pixel waypoints relative to ``start``."""
    return [
        Vec2(clamp_x(start.x + step.dx * PX_PER_YARD), start.y + step.dy * PX_PER_YARD)
        for step in steps
    ]


def initialize_assignments(state: PlayState, rng: PlayRandom) -> None:
    """Populate ``state.assignments`` and every skill player's route.

    Idempotent: does nothing once ``routes_initialized`` is set.
    """
    plan = state.assignments
    if plan.routes_initialized:
        return

    call = state.play_call
    offense = state.formation.offense

    for role in WR_ROLES:
        receiver = offense[role]
        steps = call.wr_routes.get(role) or DEFAULT_WR_ROUTE
        receiver.assign_route(project_route(receiver.pos, steps))

    te = offense[Role.TE]
    te.assign_route(project_route(te.pos, call.te_route or DEFAULT_TE_ROUTE))

    rb = offense[Role.RB]
    rb_steps = call.rb_path or call.rb_checkdown or DEFAULT_RB_ROUTE
    plan.rb_targets = project_route(rb.pos, rb_steps)
    if call.is_pass:
        rb.assign_route(plan.rb_targets)

    if call.is_run:
        first = plan.rb_targets[0]
        plan.run_hole_x = clamp_x(first.x, RUN_HOLE_MARGIN)
        plan.run_lane_y = offense[Role.C].pos.y + yards_to_pix(RUN_LANE_DEPTH_YARDS)
    else:
        plan.run_hole_x = None
        plan.run_lane_y = None

    qb = offense[Role.QB]
    iq = qb_iq(qb)
    base = rng.uniform(*QUICK_TTT) if call.quick_game else rng.uniform(*STANDARD_TTT)
    iq_adj = clamp((1 - iq) * 0.4 - (iq - 1) * 0.2, -0.3, 0.3)
    plan.qb_ttt = clamp(base + iq_adj, *TTT_BOUNDS)
    plan.qb_max_hold = plan.qb_ttt + rng.uniform(*MAX_HOLD_EXTRA)

    drop = call.qb_drop if call.qb_drop is not None else DEFAULT_QB_DROP
    plan.qb_drop_target = Vec2(qb.pos.x, qb.pos.y - drop * PX_PER_YARD)

    plan.routes_initialized = True
    logger.debug(
        "%s: ttt=%.2f max_hold=%.2f hole=%s",
        call.name, plan.qb_ttt, plan.qb_max_hold, plan.run_hole_x,
    )
