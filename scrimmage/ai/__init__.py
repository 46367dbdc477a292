"""AI brains - per-tick movement and decisions for each position group."""

from .ol_brain import move_offensive_line
from .receiver_brain import move_receivers
from .ballcarrier_brain import move_running_back
from .qb_brain import QBAction, QBDecision, qb_brain
from .defense_brain import move_defense

__all__ = [
    "move_offensive_line",
    "move_receivers",
    "move_running_back",
    "QBAction",
    "QBDecision",
    "qb_brain",
    "move_defense",
]
