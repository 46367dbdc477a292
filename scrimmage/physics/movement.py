"""Steering primitive.

Every agent moves through ``move_toward``: a straight-line step at the
agent's top speed scaled by a per-call multiplier, never overshooting the
target. There is no acceleration model and no pathfinding; brains pick
targets, this turns them into positions.
"""

from __future__ import annotations

from scrimmage.core.entities import Agent
from scrimmage.core.vec2 import Vec2


# Attribute speed (yards/sec-ish) to pixels per second
SPEED_SCALE = 30.0


def max_step(agent: Agent, dt: float, speed_mul: float = 1.0) -> float:
    """Furthest the agent may travel this tick."""
    return agent.attributes.speed * SPEED_SCALE * speed_mul * dt


def step_toward(pos: Vec2, target: Vec2, max_distance: float) -> Vec2:
    """Point reached moving from ``pos`` toward ``target`` by at most ``max_distance``."""
    delta = target - pos
    dist = delta.length()
    if dist == 0 or max_distance <= 0:
        return pos
    step = min(dist, max_distance)
    return pos + delta * (step / dist)


def move_toward(agent: Agent, target: Vec2, dt: float, speed_mul: float = 1.0) -> None:
    """Move ``agent`` straight at ``target``.

    Args:
        agent: Agent to move (position is updated in place)
        target: Destination in field pixels
        dt: Tick length in seconds
        speed_mul: Multiplier on the agent's top speed
    """
    agent.pos = step_toward(agent.pos, target, max_step(agent, dt, speed_mul))
