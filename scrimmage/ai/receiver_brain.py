"""Receiver brain - wide receivers and the tight end.

Three behaviours, in priority order:

1. Run call: release a couple of steps off the line and hold there
   (the tight end seals a step away from the hole).
2. Route: walk the waypoints laid down by the assignment initializer.
3. Scramble drill: once the route is done, find grass. Each receiver
   works his own lane (WR1 the left sideline, WR2 the right, WR3 across
   the field, TE the soft middle), stays past the line of scrimmage, and
   after a while may come back toward the quarterback.

A receiver that is dead or is the wrapped ball carrier doesn't move.
"""

from __future__ import annotations

from scrimmage.core.entities import Agent, Role, WR_ROLES
from scrimmage.core.field import FIELD_PIX_W, clamp_x
from scrimmage.core.variance import PlayRandom, side_of
from scrimmage.core.vec2 import Vec2
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState, ScrambleDrill


# Run call release
RUN_RELEASE = 8.0
WR_RUN_SPEED = 0.9
TE_RUN_SPEED = 0.95
TE_SEAL_STEP = 4.0

# Route running
WR_ROUTE_SPEED = 0.85
TE_ROUTE_SPEED = 0.9
WAYPOINT_TOLERANCE = 6.0

# Scramble drill
DRILL_SPEED = 0.95
DRILL_RETARGET = (0.4, 0.8)
MAX_BACKWARD = 6.0
LANE_JITTER = 18.0
SIDELINE_LANE = 40.0
WR3_LANE_OFFSET = 120.0
TE_LANE_OFFSET = 40.0
COMEBACK_AFTER = 2.2
COMEBACK_CHANCE = 0.10
COMEBACK_DECAY = 4.0
COMEBACK_OFFSET = 60.0


def follow_route(agent: Agent, dt: float, speed_mul: float, tolerance: float) -> bool:
    """Step toward the current waypoint.

    Returns:
        True if the agent still had a waypoint to run this tick
    """
    target = agent.current_target
    if target is None:
        return False
    move_toward(agent, target, dt, speed_mul)
    if agent.pos.distance_to(target) < tolerance:
        agent.route_index += 1
    return True


def comeback_chance(total: float) -> float:
    """Probability of a comeback, zero early then decaying with time."""
    if total <= COMEBACK_AFTER:
        return 0.0
    fade = 1.0 - (total - COMEBACK_AFTER) / COMEBACK_DECAY
    return COMEBACK_CHANCE * max(0.0, fade)


def _lane_x(role: Role, qb: Agent, rng: PlayRandom) -> float:
    if role == Role.WR1:
        return SIDELINE_LANE + rng.uniform(-LANE_JITTER, LANE_JITTER)
    if role == Role.WR2:
        return FIELD_PIX_W - SIDELINE_LANE + rng.uniform(-LANE_JITTER, LANE_JITTER)
    if role == Role.WR3:
        return qb.pos.x + rng.uniform(-WR3_LANE_OFFSET, WR3_LANE_OFFSET)
    return qb.pos.x + rng.uniform(-TE_LANE_OFFSET, TE_LANE_OFFSET)


def _deep_y(agent: Agent, los_y: float, qb: Agent) -> float:
    if agent.role == Role.TE:
        return max(los_y + 14, qb.pos.y + 18, agent.pos.y + 8)
    return max(los_y + 16, qb.pos.y + 30, agent.pos.y + 12)


def scramble_drill(state: PlayState, agent: Agent, dt: float, rng: PlayRandom) -> None:
    """Improvise once the route has run out."""
    drill: ScrambleDrill = state.skill.drill_for(agent.id)
    qb = state.qb_agent
    los_y = state.los_pix_y

    drill.clock += dt
    drill.total += dt

    if drill.target is None or drill.until is None or drill.until <= drill.clock:
        if rng.chance(comeback_chance(drill.total)):
            target = Vec2(
                qb.pos.x + rng.uniform(-COMEBACK_OFFSET, COMEBACK_OFFSET),
                max(los_y + 8, qb.pos.y + 8, agent.pos.y - 10),
            )
        else:
            target = Vec2(_lane_x(agent.role, qb, rng), _deep_y(agent, los_y, qb))
        drill.target = target.with_x(clamp_x(target.x))
        drill.until = drill.clock + rng.uniform(*DRILL_RETARGET)

    target = drill.target
    if target.y < agent.pos.y - MAX_BACKWARD:
        target = target.with_y(agent.pos.y - MAX_BACKWARD)
    move_toward(agent, target, dt, DRILL_SPEED)


def _can_move(state: PlayState, agent: Agent) -> bool:
    return agent.alive and not (state.is_carrier(agent) and state.is_wrapped(agent))


def move_receiver(state: PlayState, agent: Agent, dt: float, rng: PlayRandom) -> None:
    """One tick for a wide receiver."""
    if not _can_move(state, agent):
        return

    if state.is_run_call:
        move_toward(agent, agent.home + Vec2(0, RUN_RELEASE), dt, WR_RUN_SPEED)
        return

    if follow_route(agent, dt, WR_ROUTE_SPEED, WAYPOINT_TOLERANCE):
        return

    scramble_drill(state, agent, dt, rng)


def move_tight_end(state: PlayState, agent: Agent, dt: float, rng: PlayRandom) -> None:
    """One tick for the tight end."""
    if not _can_move(state, agent):
        return

    if state.is_run_call:
        hole = state.assignments.run_hole_x
        seal = side_of(agent.home.x - hole) if hole is not None else 1
        move_toward(agent, agent.home + Vec2(seal * TE_SEAL_STEP, RUN_RELEASE), dt, TE_RUN_SPEED)
        return

    if follow_route(agent, dt, TE_ROUTE_SPEED, WAYPOINT_TOLERANCE):
        return

    scramble_drill(state, agent, dt, rng)


def move_receivers(state: PlayState, dt: float, rng: PlayRandom) -> None:
    """Move WR1-WR3 then the tight end."""
    offense = state.formation.offense
    for role in WR_ROLES:
        move_receiver(state, offense[role], dt, rng)
    move_tight_end(state, offense[Role.TE], dt, rng)
