"""Physics - steering and ball flight."""

from .movement import SPEED_SCALE, move_toward, step_toward
from .ball_flight import BALL_SPEED, flight_time

__all__ = [
    "SPEED_SCALE",
    "move_toward",
    "step_toward",
    "BALL_SPEED",
    "flight_time",
]
