"""Core primitives - vectors, field geometry, entities, phases, clock, events."""

from .vec2 import Vec2
from .clock import Clock
from .entities import Agent, AgentAttributes, Ball, BallState, Formation, Role, Team
from .events import Event, EventBus, EventType
from .phases import InvalidPhaseTransition, PhaseStateMachine, PlayPhase
from .variance import PlayRandom

__all__ = [
    "Vec2",
    "Clock",
    "Agent",
    "AgentAttributes",
    "Ball",
    "BallState",
    "Formation",
    "Role",
    "Team",
    "Event",
    "EventBus",
    "EventType",
    "InvalidPhaseTransition",
    "PhaseStateMachine",
    "PlayPhase",
    "PlayRandom",
]
