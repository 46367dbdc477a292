"""Quarterback brain.

Decision Flow:
1. Read pressure from the nearest defensive lineman
2. Leave the pocket (DROP → SCRAMBLE) under immediate pressure or when
   the play clock has run well past time-to-throw
3. Move: settle at the drop spot, or run the current scramble leg
4. Run call: hand off once at the drop spot
5. Pass call, once set (or scrambling) and the clock allows:
   - Walk the read order and throw to the first open receiver
   - Otherwise maybe check down to the back
6. Past max hold: throw it away or force it to the best option

The brain moves the QB itself and returns a QBDecision describing what
happens to the ball. The orchestrator carries the decision out.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from scrimmage.core.entities import Agent, Role, WR_ROLES
from scrimmage.core.field import FIELD_PIX_W, PX_PER_YARD, clamp_x
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2
from scrimmage.physics.movement import move_toward
from scrimmage.play_state import PlayState, QBMoveMode, ScrambleMode
from scrimmage.systems.assignments import qb_iq


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

IMMEDIATE_PRESSURE = 26.0
HEAT_PRESSURE = 38.0
MAX_BACK_EXTRA_YARDS = 6

DROP_SPEED = 0.75
SCRAMBLE_SPEED = {ScrambleMode.FORWARD: 0.78, ScrambleMode.LATERAL: 0.82}

HANDOFF_RADIUS = 6.0
SET_RADIUS = 8.0
SCRAMBLE_AFTER_TTT = 0.7

BASE_THRESHOLD = 0.18
THRESHOLD_BOUNDS = (0.10, 0.20)
PRIMARY_DISCOUNT = 0.02

LEAD_X = 16.0
LEAD_Y = 12.0

SIDELINE_THROW_MARGIN = 8.0
THROW_AWAY_DEPTH = 18.0


# =============================================================================
# Decision
# =============================================================================

class QBAction(str, Enum):
    NONE = "none"
    HANDOFF = "handoff"
    THROW = "throw"
    CHECKDOWN = "checkdown"
    THROW_AWAY = "throw_away"
    FORCED_THROW = "forced_throw"


@dataclass
class QBDecision:
    """What the quarterback does with the ball this tick."""
    action: QBAction = QBAction.NONE
    target_id: Optional[str] = None
    destination: Optional[Vec2] = None
    risky: bool = False
    scramble_started: bool = False
    reasoning: str = ""

    @property
    def releases_ball(self) -> bool:
        return self.action in (
            QBAction.THROW, QBAction.CHECKDOWN, QBAction.THROW_AWAY, QBAction.FORCED_THROW,
        )


@dataclass
class Pressure:
    rusher: Optional[Agent]
    distance: float

    @property
    def immediate(self) -> bool:
        return self.distance < IMMEDIATE_PRESSURE

    @property
    def heat(self) -> bool:
        return self.distance < HEAT_PRESSURE


# =============================================================================
# Read helpers
# =============================================================================

def read_order(state: PlayState) -> List[Role]:
    """Primary first, then WR1-WR3, then the tight end."""
    order: List[Role] = []
    primary = state.play_call.primary
    if primary is not None:
        order.append(primary)
    for role in (*WR_ROLES, Role.TE):
        if role not in order:
            order.append(role)
    return order


def openness_score(state: PlayState, receiver: Agent, rng: PlayRandom) -> float:
    """How open a receiver looks: separation, depth, role and a little noise."""
    _, separation = state.nearest_defender(receiver.pos)
    depth = receiver.pos.y - state.formation.offense[Role.C].pos.y
    if receiver.role in WR_ROLES:
        role_bias = 0.08
    elif receiver.role == Role.TE:
        role_bias = -0.04
    else:
        role_bias = 0.0
    primary_bias = 0.08 if state.play_call.primary == receiver.role else 0.0
    return separation * 0.004 + depth * 0.001 + role_bias + primary_bias + rng.random() * 0.04


def lead_target(origin: Vec2, receiver_pos: Vec2) -> Vec2:
    """Throw ahead of the receiver along the line of the pass."""
    direction = (receiver_pos - origin).normalized()
    return Vec2(receiver_pos.x + direction.x * LEAD_X, receiver_pos.y + direction.y * LEAD_Y)


def throw_threshold(pressure: Pressure, urgency: float) -> float:
    threshold = BASE_THRESHOLD
    if pressure.heat:
        threshold -= 0.04
    if pressure.immediate:
        threshold -= 0.06
    threshold -= 0.08 * urgency
    return clamp(threshold, *THRESHOLD_BOUNDS)


# =============================================================================
# Movement
# =============================================================================

def _lateral_bias(qb: Agent, pressure: Pressure, rng: PlayRandom) -> int:
    """Scramble direction: away from the nearest rusher."""
    if pressure.rusher is None or qb.pos.x == pressure.rusher.pos.x:
        return rng.sign()
    return 1 if qb.pos.x > pressure.rusher.pos.x else -1


def _scramble_leg(
    qb: Agent,
    mode: ScrambleMode,
    direction: int,
    min_y: float,
    x_range: tuple[float, float],
    lateral_depth: tuple[float, float],
    rng: PlayRandom,
) -> Vec2:
    x = clamp_x(qb.pos.x + direction * rng.uniform(*x_range))
    if mode == ScrambleMode.FORWARD:
        depth = rng.uniform(10, 24)
    else:
        depth = rng.uniform(*lateral_depth)
    return Vec2(x, max(min_y, qb.pos.y + depth))


def _move(state: PlayState, qb: Agent, pressure: Pressure, dt: float, rng: PlayRandom) -> bool:
    """Move the QB for this tick. Returns True if a scramble just started."""
    qbs = state.qb
    plan = state.assignments
    drop = plan.qb_drop_target if plan.qb_drop_target is not None else qb.pos
    min_y = drop.y - MAX_BACK_EXTRA_YARDS * PX_PER_YARD
    t = state.elapsed
    bias = _lateral_bias(qb, pressure, rng)
    started = False

    if qbs.move_mode == QBMoveMode.DROP and (
        pressure.immediate or t > plan.qb_ttt + SCRAMBLE_AFTER_TTT
    ):
        qbs.move_mode = QBMoveMode.SCRAMBLE
        qbs.scramble_mode = ScrambleMode.LATERAL if rng.chance(0.7) else ScrambleMode.FORWARD
        qbs.scramble_dir = bias
        qbs.scramble_until = t + rng.uniform(0.45, 0.9)
        qbs.scramble_target = _scramble_leg(
            qb, qbs.scramble_mode, qbs.scramble_dir, min_y, (34, 60), (4, 14), rng,
        )
        started = True

    if qbs.move_mode == QBMoveMode.DROP:
        move_toward(qb, Vec2(drop.x, max(drop.y, min_y)), dt, DROP_SPEED)
    elif qbs.move_mode == QBMoveMode.SCRAMBLE:
        # Rusher level with the QB (dx == 0) counts as crossed
        crossed = (
            pressure.rusher is not None
            and (qb.pos.x - pressure.rusher.pos.x) * qbs.scramble_dir <= 0
        )
        if qbs.scramble_target is None or t > qbs.scramble_until or crossed:
            if pressure.heat and rng.chance(0.8):
                qbs.scramble_mode = ScrambleMode.LATERAL
            qbs.scramble_dir = bias
            qbs.scramble_target = _scramble_leg(
                qb, qbs.scramble_mode or ScrambleMode.LATERAL, qbs.scramble_dir,
                min_y, (34, 68), (4, 16), rng,
            )
            qbs.scramble_until = t + rng.uniform(0.35, 0.75)
        speed = SCRAMBLE_SPEED[qbs.scramble_mode or ScrambleMode.LATERAL]
        move_toward(qb, qbs.scramble_target, dt, speed)
    else:
        raise ValueError(f"Unhandled QB move mode: {qbs.move_mode}")

    return started


# =============================================================================
# Main Brain Function
# =============================================================================

def qb_brain(state: PlayState, dt: float, rng: PlayRandom) -> QBDecision:
    """Run the quarterback for one tick.

    A wrapped QB still reads and can get the ball out; any step he takes
    is undone by the wrap freeze at the end of the tick.
    """
    qb = state.qb_agent
    if not state.is_carrier(qb):
        return QBDecision()

    rusher, distance = state.nearest_rusher(qb.pos)
    pressure = Pressure(rusher, distance)
    scramble_started = _move(state, qb, pressure, dt, rng)

    decision = _ball_decision(state, qb, pressure, rng)
    decision.scramble_started = scramble_started
    if decision.action != QBAction.NONE:
        logger.debug("QB %s -> %s (%s)", decision.action.value, decision.target_id, decision.reasoning)
    return decision


def _ball_decision(state: PlayState, qb: Agent, pressure: Pressure, rng: PlayRandom) -> QBDecision:
    plan = state.assignments
    qbs = state.qb
    offense = state.formation.offense
    drop = plan.qb_drop_target if plan.qb_drop_target is not None else qb.pos

    if state.is_run_call:
        if not qbs.handed_off and qb.pos.distance_to(drop) < HANDOFF_RADIUS:
            return QBDecision(
                action=QBAction.HANDOFF,
                target_id=offense[Role.RB].id,
                reasoning="At mesh point",
            )
        return QBDecision()

    if state.ball.in_air:
        return QBDecision()

    iq = qb_iq(qb)
    t = state.elapsed
    set_or_scrambling = (
        qbs.move_mode == QBMoveMode.SCRAMBLE or qb.pos.distance_to(drop) < SET_RADIUS
    )
    time_ready = max(0.0, t - plan.qb_ttt)
    urgency = clamp(time_ready / 2.0, 0.0, 1.0)
    threshold = throw_threshold(pressure, urgency)

    eligible = set_or_scrambling and (
        time_ready > 0 or pressure.immediate or qbs.move_mode == QBMoveMode.SCRAMBLE
    )

    if eligible:
        primary = state.play_call.primary
        for role in read_order(state):
            receiver = offense[role]
            score = openness_score(state, receiver, rng)
            bar = threshold - (PRIMARY_DISCOUNT if role == primary else 0.0)
            if score > bar:
                jitter = rng.uniform(-0.08, 0.1) * (1.2 - iq)
                return QBDecision(
                    action=QBAction.THROW,
                    target_id=receiver.id,
                    destination=lead_target(qb.pos, receiver.pos),
                    risky=jitter > 0.05,
                    reasoning=f"{role.value} open (score {score:.3f} > {bar:.3f})",
                )

        rb = offense[Role.RB]
        checkdown = clamp(
            0.10 + 0.45 * urgency + (0.15 if pressure.heat else 0.0) - (iq - 1.0) * 0.25,
            0.08, 0.65,
        )
        if rng.chance(checkdown):
            return QBDecision(
                action=QBAction.CHECKDOWN,
                target_id=rb.id,
                destination=lead_target(qb.pos, rb.pos),
                risky=False,
                reasoning="Checkdown to the back",
            )

    if t > plan.qb_max_hold:
        throw_away = clamp(0.55 - (iq - 1.0) * 0.25 + (0.1 if pressure.heat else 0.0), 0.25, 0.8)
        if rng.chance(throw_away):
            sideline_x = (
                FIELD_PIX_W - SIDELINE_THROW_MARGIN if qbs.scramble_dir > 0 else SIDELINE_THROW_MARGIN
            )
            return QBDecision(
                action=QBAction.THROW_AWAY,
                destination=Vec2(sideline_x, qb.pos.y + THROW_AWAY_DEPTH),
                risky=False,
                reasoning="Held too long, throwing it away",
            )

        ranked = sorted(
            (offense[role] for role in read_order(state)),
            key=lambda r: openness_score(state, r, rng),
            reverse=True,
        )
        target = ranked[0] if ranked else offense[Role.RB]
        return QBDecision(
            action=QBAction.FORCED_THROW,
            target_id=target.id,
            destination=lead_target(qb.pos, target.pos),
            risky=True,
            reasoning="Held too long, forcing it",
        )

    return QBDecision()
