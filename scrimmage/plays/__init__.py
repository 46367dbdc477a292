"""Play calls."""

from .playbook import (
    PLAYBOOK,
    PlayCall,
    PlayType,
    RouteStep,
    get_play,
    list_plays,
)

__all__ = [
    "PLAYBOOK",
    "PlayCall",
    "PlayType",
    "RouteStep",
    "get_play",
    "list_plays",
]
