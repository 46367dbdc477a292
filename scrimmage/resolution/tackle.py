"""Tackle resolution system.

Contact with the ball carrier is a small state machine:

    FREE ──(defender within CONTACT_RADIUS)──> WRAPPED
    WRAPPED ──(hold time elapses)──> tackled (play over)
                                  └─> broken: burst forward, IMMUNE
    IMMUNE ──(timer expires and carrier has moved on)──> FREE

While WRAPPED the carrier is pinned to the spot where the wrap began.
A carrier breaks at most one tackle per play; the next wrap that
resolves is an automatic tackle. A defender who was just broken is
on cooldown and cannot start a new wrap for a moment.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scrimmage.core.entities import Agent, Role
from scrimmage.core.events import EventBus, EventType
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import DeadBallReason
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState, WrapRecord


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

CONTACT_RADIUS = 8.0            # px - wrap starts inside this range
MIN_DIST_AFTER_BREAK = 12.0     # px the carrier must cover before a new wrap
HOLD_BASE = 0.35                # s
HOLD_JITTER = 0.2               # s
IMMUNITY = 1.1                  # s after a broken tackle
TACKLER_COOLDOWN = 1.6          # s before the broken tackler may wrap again
MAX_BREAKS = 1

TACKLER_CLOSE_SPEED = 1.2
BREAK_BURST = 22.0
BREAK_BURST_SPEED = 7.0

BASE_TACKLE_CHANCE = 0.55
TACKLE_THRESHOLD = 0.5


# =============================================================================
# Data Structures
# =============================================================================

class WrapStatus(str, Enum):
    """Contact state of the current ball carrier."""
    FREE = "free"
    WRAPPED = "wrapped"
    IMMUNE = "immune"


class TackleOutcome(str, Enum):
    """What happened at the contact point this tick."""
    WRAP_STARTED = "wrap_started"
    HOLDING = "holding"
    TACKLED = "tackled"
    SACK = "sack"
    BROKEN = "broken"


@dataclass
class TackleResult:
    """Result of tackle resolution for one tick."""
    outcome: TackleOutcome
    carrier_id: str
    tackler_id: str
    probability: Optional[float] = None

    def format_description(self) -> str:
        if self.outcome == TackleOutcome.SACK:
            return f"{self.carrier_id} sacked by {self.tackler_id}"
        if self.outcome == TackleOutcome.TACKLED:
            return f"{self.carrier_id} tackled by {self.tackler_id}"
        if self.outcome == TackleOutcome.BROKEN:
            return f"{self.carrier_id} broke a tackle by {self.tackler_id}"
        if self.outcome == TackleOutcome.WRAP_STARTED:
            return f"{self.tackler_id} wrapped up {self.carrier_id}"
        return f"{self.tackler_id} holding {self.carrier_id}"


def tackle_chance(tackler: Agent, carrier: Agent, rng: PlayRandom) -> float:
    """Tackle quality: tackler skill against carrier strength and savvy, plus noise."""
    carrier_iq = clamp(carrier.attributes.awareness, 0.4, 1.3)
    return (
        BASE_TACKLE_CHANCE
        + (tackler.attributes.tackle - carrier.attributes.strength) * 0.20
        - (carrier_iq - 1.0) * 0.10
        + rng.uniform(-0.06, 0.06)
    )


# =============================================================================
# Resolver
# =============================================================================

class TackleResolver:
    """Runs the wrap state machine for the ball carrier.

    Usage:
        resolver = TackleResolver(event_bus)
        result = resolver.update(state, dt, rng)   # after defensive movement
        ...
        resolver.freeze_carrier(state)             # last thing each tick
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus

    def status(self, state: PlayState) -> WrapStatus:
        """Contact state of the current carrier."""
        if state.tackle.wrap is not None:
            return WrapStatus.WRAPPED
        if state.elapsed < state.tackle.no_wrap_until:
            return WrapStatus.IMMUNE
        return WrapStatus.FREE

    def update(self, state: PlayState, dt: float, rng: PlayRandom) -> Optional[TackleResult]:
        """Advance contact for one tick. May end the play."""
        if state.ball.in_air:
            return None
        carrier = state.carrier
        if carrier is None:
            return None

        wrap = state.tackle.wrap
        if wrap is not None and wrap.carrier_id == carrier.id:
            return self._resolve_wrap(state, carrier, wrap, dt, rng)
        if wrap is not None:
            # Ball changed hands mid-wrap
            state.tackle.wrap = None

        return self._try_wrap(state, carrier, rng)

    def freeze_carrier(self, state: PlayState) -> None:
        """Pin a wrapped carrier (and the ball) to the wrap spot.

        Runs after every other live component so it overrides any movement
        written earlier in the tick.
        """
        wrap = state.tackle.wrap
        if wrap is None:
            return
        carrier = state.agent(wrap.carrier_id)
        if carrier is None:
            return
        carrier.pos = wrap.lock_pos
        if state.ball.carrier_id == carrier.id:
            state.ball.render_pos = wrap.lock_pos

    # =========================================================================
    # Internals
    # =========================================================================

    def _try_wrap(self, state: PlayState, carrier: Agent, rng: PlayRandom) -> Optional[TackleResult]:
        tackle = state.tackle
        now = state.elapsed

        immune = now < tackle.no_wrap_until
        distance_ok = True
        if tackle.last_break_pos is not None:
            distance_ok = carrier.pos.distance_to(tackle.last_break_pos) >= MIN_DIST_AFTER_BREAK
            if not immune and distance_ok:
                tackle.last_break_pos = None

        if immune or not distance_ok:
            return None

        for defender in state.formation.defenders():
            if now < tackle.cooldowns.get(defender.id, 0.0):
                continue
            if defender.pos.distance_to(carrier.pos) < CONTACT_RADIUS:
                return self._start_wrap(state, carrier, defender, rng)
        return None

    def _start_wrap(
        self, state: PlayState, carrier: Agent, tackler: Agent, rng: PlayRandom,
    ) -> TackleResult:
        state.tackle.wrap = WrapRecord(
            carrier_id=carrier.id,
            tackler_id=tackler.id,
            started_at=state.elapsed,
            hold_duration=HOLD_BASE + rng.uniform(0.0, HOLD_JITTER),
            lock_pos=carrier.pos,
        )
        result = TackleResult(TackleOutcome.WRAP_STARTED, carrier.id, tackler.id)
        self._emit(state, EventType.WRAP_STARTED, result)
        return result

    def _resolve_wrap(
        self,
        state: PlayState,
        carrier: Agent,
        wrap: WrapRecord,
        dt: float,
        rng: PlayRandom,
    ) -> TackleResult:
        tackle = state.tackle
        tackler = state.agent(wrap.tackler_id)
        if tackler is None:
            tackle.wrap = None
            return TackleResult(TackleOutcome.HOLDING, carrier.id, wrap.tackler_id)

        move_toward(tackler, carrier.pos, dt, TACKLER_CLOSE_SPEED)
        carrier.pos = wrap.lock_pos

        if state.elapsed - wrap.started_at < wrap.hold_duration:
            return TackleResult(TackleOutcome.HOLDING, carrier.id, tackler.id)

        tackle.wrap = None
        breaks = tackle.breaks.get(carrier.id, 0)
        if breaks >= MAX_BREAKS:
            return self._finish_tackle(state, carrier, tackler, probability=None)

        chance = tackle_chance(tackler, carrier, rng)
        if chance > TACKLE_THRESHOLD:
            return self._finish_tackle(state, carrier, tackler, probability=chance)

        # Broken tackle
        now = state.elapsed
        tackle.breaks[carrier.id] = breaks + 1
        move_toward(carrier, carrier.pos + Vec2(0, BREAK_BURST), dt, BREAK_BURST_SPEED)
        tackle.no_wrap_until = now + IMMUNITY
        tackle.post_break_until = now + IMMUNITY
        tackle.cooldowns[tackler.id] = now + TACKLER_COOLDOWN
        tackle.last_break_pos = carrier.pos

        result = TackleResult(TackleOutcome.BROKEN, carrier.id, tackler.id, probability=chance)
        self._emit(state, EventType.BROKEN_TACKLE, result)
        return result

    def _finish_tackle(
        self,
        state: PlayState,
        carrier: Agent,
        tackler: Agent,
        probability: Optional[float],
    ) -> TackleResult:
        is_sack = carrier.role == Role.QB
        outcome = TackleOutcome.SACK if is_sack else TackleOutcome.TACKLED
        result = TackleResult(outcome, carrier.id, tackler.id, probability=probability)

        self._emit(state, EventType.SACK if is_sack else EventType.TACKLE, result)
        state.end_play(
            DeadBallReason.SACK if is_sack else DeadBallReason.TACKLED,
            description=result.format_description(),
            tackler_id=tackler.id,
        )
        return result

    def _emit(self, state: PlayState, event_type: EventType, result: TackleResult) -> None:
        logger.debug(result.format_description())
        if self.event_bus is None:
            return
        self.event_bus.emit_simple(
            event_type,
            tick=state.clock.tick_count,
            time=state.elapsed,
            player_id=result.tackler_id,
            target_id=result.carrier_id,
            description=result.format_description(),
            probability=result.probability,
        )
