"""Ball flight.

Passes travel in a straight line at a constant speed. Flight progress
``t`` runs from 0 (release) to 1 (arrival); the drawn position is the
linear interpolation between origin and destination. A pass of length L
therefore lands after L / BALL_SPEED seconds.
"""

from __future__ import annotations

from typing import Optional

from scrimmage.core.entities import Ball, BallState
from scrimmage.core.variance import clamp
from scrimmage.core.vec2 import Vec2


# Pixels per second
BALL_SPEED = 420.0


def flight_time(origin: Vec2, destination: Vec2) -> float:
    """Seconds a pass between the two points spends in the air."""
    return max(1.0, origin.distance_to(destination)) / BALL_SPEED


def launch(ball: Ball, origin: Vec2, destination: Vec2, target_id: Optional[str]) -> None:
    """Put the ball in the air. ``target_id`` None marks a throw-away."""
    ball.state = BallState.IN_FLIGHT
    ball.carrier_id = None
    ball.origin = origin
    ball.destination = destination
    ball.target_id = target_id
    ball.t = 0.0
    ball.render_pos = origin


def advance(ball: Ball, dt: float) -> bool:
    """Move an in-flight ball forward one tick.

    Returns:
        True once the ball has arrived (t >= 1)
    """
    assert ball.origin is not None and ball.destination is not None
    dist = max(1.0, ball.origin.distance_to(ball.destination))
    ball.t += dt * BALL_SPEED / dist
    ball.render_pos = ball.origin.lerp(ball.destination, clamp(ball.t, 0.0, 1.0))
    return ball.t >= 1.0
