"""Passing system.

Handles:
- Handoffs and pass releases decided by the QB brain
- Ball flight each tick
- Resolution on arrival: throw-away, interception, catch or incompletion

A ball that is not in the air follows its carrier.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scrimmage.ai.qb_brain import QBAction, QBDecision
from scrimmage.core.entities import Agent, Role
from scrimmage.core.events import EventBus, EventType
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import DeadBallReason
from scrimmage.physics import ball_flight
from scrimmage.play_state import PlayState


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CONTEST_RADIUS = 14.0   # px - nearest defender inside this may pick it off

PICK_BASE = 0.08
PICK_DEFENDER_IQ = 0.12
PICK_QB_ACCURACY = 0.08
PICK_HANDS = 0.04
PICK_RISKY_BONUS = 0.08
PICK_BOUNDS = (0.02, 0.25)

CATCH_HANDS_WEIGHT = 0.6
CATCH_NOISE = 0.5
CATCH_PENALTY = 0.15
CATCH_THRESHOLD = 0.5


class CatchResult(str, Enum):
    """Outcome when a pass arrives."""
    CATCH = "catch"
    INCOMPLETE = "incomplete"
    INTERCEPTION = "interception"
    THROW_AWAY = "throw_away"


@dataclass
class CatchResolution:
    """Result of a pass arriving."""
    result: CatchResult
    receiver_id: Optional[str] = None
    defender_id: Optional[str] = None
    probability: Optional[float] = None


def interception_probability(defender: Agent, qb: Agent, receiver: Agent, risky: bool) -> float:
    probability = (
        PICK_BASE
        + defender.attributes.awareness * PICK_DEFENDER_IQ
        - qb.attributes.throw_accuracy * PICK_QB_ACCURACY
        - receiver.attributes.catch * PICK_HANDS
    )
    if risky:
        probability += PICK_RISKY_BONUS
    return clamp(probability, *PICK_BOUNDS)


class PassingSystem:
    """Owns the ball between the QB's hands and the next carrier.

    Usage:
        passing = PassingSystem(event_bus)
        passing.apply_decision(state, decision)     # after the QB brain
        passing.update(state, dt, rng)              # ball step each tick
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus

    # =========================================================================
    # QB actions
    # =========================================================================

    def apply_decision(self, state: PlayState, decision: QBDecision) -> None:
        """Carry out what the QB brain decided to do with the ball."""
        qb = state.qb_agent
        if decision.action == QBAction.NONE:
            return
        if decision.action == QBAction.HANDOFF:
            self.handoff(state, qb)
            return
        if decision.releases_ball:
            assert decision.destination is not None
            self.start_pass(
                state,
                origin=qb.pos,
                destination=decision.destination,
                target_id=decision.target_id if decision.action != QBAction.THROW_AWAY else None,
                risky=decision.risky,
            )
            return
        raise ValueError(f"Unhandled QB action: {decision.action}")

    def handoff(self, state: PlayState, qb: Agent) -> None:
        rb = state.formation.offense[Role.RB]
        state.ball.give_to(rb)
        state.qb.handed_off = True
        rb.assign_route(state.assignments.rb_targets)
        self._emit(state, EventType.HANDOFF, qb.id, rb.id, "Handoff")

    def start_pass(
        self,
        state: PlayState,
        origin: Vec2,
        destination: Vec2,
        target_id: Optional[str],
        risky: bool = False,
    ) -> None:
        """Release the ball. ``target_id`` None is a throw-away."""
        qbs = state.qb
        qbs.pass_risky = risky
        qbs.throw_away = target_id is None
        state.resolution.passer_id = state.qb_agent.id
        state.resolution.receiver_id = target_id

        ball_flight.launch(state.ball, origin, destination, target_id)

        if target_id is None:
            self._emit(state, EventType.THROW_AWAY, state.qb_agent.id, None, "Throw away",
                       air_distance=origin.distance_to(destination))
        else:
            self._emit(state, EventType.THROW, state.qb_agent.id, target_id,
                       "Risky throw" if risky else "Pass",
                       air_distance=origin.distance_to(destination), risky=risky)

    # =========================================================================
    # Ball step
    # =========================================================================

    def update(self, state: PlayState, dt: float, rng: PlayRandom) -> Optional[CatchResolution]:
        """Move the ball one tick; resolve the pass if it arrived."""
        ball = state.ball
        if not ball.in_air:
            carrier = state.carrier
            if carrier is not None:
                ball.render_pos = carrier.pos
            return None

        if not ball_flight.advance(ball, dt):
            return None
        return self._resolve_arrival(state, rng)

    def _resolve_arrival(self, state: PlayState, rng: PlayRandom) -> CatchResolution:
        ball = state.ball
        qb = state.qb_agent

        if ball.target_id is None:
            state.end_play(DeadBallReason.THROW_AWAY, description="Throw away")
            return CatchResolution(CatchResult.THROW_AWAY)

        receiver = state.agent(ball.target_id)
        if receiver is None or not receiver.is_offense:
            self._emit(state, EventType.INCOMPLETE, qb.id, ball.target_id, "Receiver not found")
            state.end_play(DeadBallReason.INCOMPLETE, description="Incomplete")
            return CatchResolution(CatchResult.INCOMPLETE, receiver_id=ball.target_id)

        defender, distance = state.nearest_defender(receiver.pos)
        if defender is not None and distance < CONTEST_RADIUS:
            pick = interception_probability(defender, qb, receiver, state.qb.pass_risky)
            if rng.chance(pick):
                self._emit(state, EventType.INTERCEPTION, defender.id, receiver.id,
                           "Intercepted", probability=pick)
                state.end_play(DeadBallReason.INTERCEPTION, description="Interception", turnover=True)
                return CatchResolution(CatchResult.INTERCEPTION, receiver.id, defender.id, pick)

        catch_roll = receiver.attributes.catch * CATCH_HANDS_WEIGHT + rng.random() * CATCH_NOISE - CATCH_PENALTY
        if catch_roll > CATCH_THRESHOLD:
            ball.give_to(receiver)
            self._emit(state, EventType.CATCH, receiver.id, qb.id, "Caught", roll=catch_roll)
            return CatchResolution(CatchResult.CATCH, receiver.id, probability=catch_roll)

        self._emit(state, EventType.INCOMPLETE, qb.id, receiver.id, "Incomplete", roll=catch_roll)
        state.end_play(DeadBallReason.INCOMPLETE, description="Incomplete")
        return CatchResolution(CatchResult.INCOMPLETE, receiver.id, probability=catch_roll)

    def _emit(
        self,
        state: PlayState,
        event_type: EventType,
        player_id: Optional[str],
        target_id: Optional[str],
        description: str,
        **data: object,
    ) -> None:
        logger.debug("%s: %s -> %s %s", event_type.value, player_id, target_id, description)
        if self.event_bus is None:
            return
        self.event_bus.emit_simple(
            event_type,
            tick=state.clock.tick_count,
            time=state.elapsed,
            player_id=player_id,
            target_id=target_id,
            description=description,
            **data,
        )
