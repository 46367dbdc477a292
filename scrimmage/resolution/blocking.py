"""Block Resolution System - Resolves OL vs DL engagements.

The OL brain decides where each blocker steps and when contact starts.
This resolver owns what happens once two linemen are locked up: they are
kept apart, pushed according to technique and play type, and after a
short stalemate either the rusher sheds or the blocker steers him off.

Engagements are exclusive and mutual: an agent is linked to at most one
opponent, and if A is linked to B then B is linked to A.

Anchor rule: a blocker never ends up more than ANCHOR_BACK pixels behind
his presnap spot.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from scrimmage.core.entities import Agent, OL_ROLES, DL_ROLES
from scrimmage.core.events import EventBus, EventType
from scrimmage.core.variance import PlayRandom, clamp, side_of
from scrimmage.core.vec2 import Vec2
from scrimmage.play_state import PlayState


logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

ENGAGE_DIST = 20.0      # Contact starts inside this distance
COLLIDE_DIST = 14.0     # Bodies are kept at least this far apart
ANCHOR_BACK = 8.0       # Deepest a blocker may give ground

# Pass pro: blocker shades toward the rusher's lane
PASS_SHADE_FACTOR = 0.55
PASS_SHADE_MAX = 26.0   # px/s

# Stalemate must last this long on both sides before anyone wins
MIN_ENGAGED_TIME = 0.35
SHED_ODDS = 0.18
OL_WIN_ODDS = -0.22
OL_WIN_CHANCE = 0.25
RUN_ODDS_PENALTY = 0.04

SHED_BURST = 10.0
STEER_ASIDE = 16.0
# Timers restart here after the blocker wins a rep
OL_WIN_RESET_TIME = 0.2


# =============================================================================
# Enums
# =============================================================================

class BlockType(str, Enum):
    """Type of blocking situation."""
    PASS_PRO = "pass_pro"
    RUN_BLOCK = "run_block"


class BlockOutcome(str, Enum):
    """Outcome of a single tick of blocking."""
    HOLDING = "holding"        # Still locked up
    DL_SHED = "dl_shed"        # Rusher beat the block and is free
    OL_WIN = "ol_win"          # Blocker steered the rusher aside
    DISENGAGED = "disengaged"  # Link was broken or one-sided


@dataclass
class BlockResult:
    """Result of block resolution for one pair this tick."""
    ol_id: str
    dl_id: Optional[str]
    outcome: BlockOutcome
    odds: Optional[float] = None


# =============================================================================
# Helpers
# =============================================================================

def anchor_y(ol: Agent) -> float:
    return ol.home.y - ANCHOR_BACK


def clamp_anchor(ol: Agent) -> None:
    """Enforce the anchor rule on a blocker."""
    min_y = anchor_y(ol)
    if ol.pos.y < min_y:
        ol.pos = ol.pos.with_y(min_y)


def block_type_for(state: PlayState) -> BlockType:
    return BlockType.RUN_BLOCK if state.is_run_call else BlockType.PASS_PRO


# =============================================================================
# Resolver
# =============================================================================

class BlockResolver:
    """Resolves OL vs DL blocking engagements.

    Usage:
        resolver = BlockResolver(event_bus)
        resolver.engage(state, ol, dl)            # from the OL brain
        results = resolver.resolve_contacts(state, dt, rng)
    """

    def __init__(self, event_bus: Optional[EventBus] = None):
        self.event_bus = event_bus

    def engage(self, state: PlayState, ol: Agent, dl: Agent) -> bool:
        """Link a blocker and a rusher if neither is tied up elsewhere.

        Returns:
            True when the pair is (now) engaged
        """
        if ol.engaged_with is not None and ol.engaged_with != dl.id:
            return False
        if dl.engaged_with is not None and dl.engaged_with != ol.id:
            return False
        if ol.engaged_with == dl.id and dl.engaged_with == ol.id:
            return True

        ol.engaged_with = dl.id
        dl.engaged_with = ol.id
        self._emit(state, EventType.BLOCK_ENGAGED, ol, dl, "Block engaged")
        return True

    def resolve_contacts(self, state: PlayState, dt: float, rng: PlayRandom) -> list[BlockResult]:
        """Apply one tick of contact forces and win/lose rolls to every engaged pair."""
        results: list[BlockResult] = []
        offense = state.formation.offense
        qb = state.qb_agent
        block_type = block_type_for(state)

        for role in OL_ROLES:
            ol = offense[role]
            if ol.engaged_with is None:
                continue

            dl = state.agent(ol.engaged_with)
            if dl is None or dl.engaged_with != ol.id:
                ol.disengage()
                results.append(BlockResult(ol.id, None, BlockOutcome.DISENGAGED))
                continue

            self._separate(ol, dl)

            tech_ol = ol.attributes.technique
            tech_dl = dl.attributes.technique
            hole_x = self._hole_x(state, qb)

            if block_type == BlockType.PASS_PRO:
                want_x = qb.pos.x + (dl.pos.x - qb.pos.x) * PASS_SHADE_FACTOR
                lateral = clamp((want_x - ol.pos.x) * 2, -PASS_SHADE_MAX, PASS_SHADE_MAX)
                ol.pos = ol.pos.with_x(ol.pos.x + lateral * dt)
                push = (6 + 16 * tech_dl) * 0.5
                to_qb = (qb.pos - dl.pos).normalized()
                dl.pos = dl.pos + to_qb * (push * dt)
            else:
                side = side_of(ol.pos.x - hole_x)
                dl.pos = Vec2(
                    dl.pos.x + side * (14 + 10 * tech_ol) * dt,
                    dl.pos.y + (10 + 10 * tech_ol - 6 * tech_dl) * dt,
                )
                ol.pos = Vec2(ol.pos.x + side * 6 * dt, ol.pos.y + 6 * dt)
            clamp_anchor(ol)

            ol.engaged_time += dt
            dl.engaged_time += dt

            result = BlockResult(ol.id, dl.id, BlockOutcome.HOLDING)
            if ol.engaged_time > MIN_ENGAGED_TIME and dl.engaged_time > MIN_ENGAGED_TIME:
                odds = (tech_dl - tech_ol) * 0.22 + rng.uniform(-0.06, 0.06)
                if block_type == BlockType.RUN_BLOCK:
                    odds -= RUN_ODDS_PENALTY
                result.odds = odds

                if odds > SHED_ODDS:
                    ol.disengage()
                    dl.disengage()
                    to_qb = (qb.pos - dl.pos).normalized()
                    dl.pos = dl.pos + to_qb * SHED_BURST
                    result.outcome = BlockOutcome.DL_SHED
                    self._emit(state, EventType.BLOCK_SHED, dl, ol, "Rusher shed the block", odds=odds)
                elif odds < OL_WIN_ODDS and rng.chance(OL_WIN_CHANCE):
                    side = side_of(dl.pos.x - hole_x)
                    downfield = 8 if block_type == BlockType.RUN_BLOCK else 2
                    dl.pos = Vec2(dl.pos.x + side * STEER_ASIDE, dl.pos.y + downfield)
                    ol.engaged_with = None
                    dl.engaged_with = None
                    ol.engaged_time = OL_WIN_RESET_TIME
                    dl.engaged_time = OL_WIN_RESET_TIME
                    result.outcome = BlockOutcome.OL_WIN
                    self._emit(state, EventType.BLOCK_WON, ol, dl, "Blocker steered rusher aside", odds=odds)
            clamp_anchor(ol)
            results.append(result)

        self._clear_dangling(state)
        return results

    # =========================================================================
    # Internals
    # =========================================================================

    @staticmethod
    def _hole_x(state: PlayState, qb: Agent) -> float:
        hole = state.assignments.run_hole_x
        return hole if hole is not None else qb.pos.x

    @staticmethod
    def _separate(ol: Agent, dl: Agent) -> None:
        """Push overlapping linemen apart to COLLIDE_DIST."""
        delta = dl.pos - ol.pos
        dist = max(1.0, delta.length())
        if dist >= COLLIDE_DIST:
            return
        push = (COLLIDE_DIST - dist) * 0.5
        direction = delta * (1.0 / dist)
        ol.pos = ol.pos - direction * push
        dl.pos = dl.pos + direction * push

    @staticmethod
    def _clear_dangling(state: PlayState) -> None:
        defense = state.formation.defense
        for role in DL_ROLES:
            dl = defense[role]
            if dl.engaged_with is None:
                continue
            ol = state.agent(dl.engaged_with)
            if ol is None or ol.engaged_with != dl.id:
                dl.disengage()

    def _emit(
        self,
        state: PlayState,
        event_type: EventType,
        player: Agent,
        target: Agent,
        description: str,
        **data: float,
    ) -> None:
        logger.debug("%s: %s vs %s", event_type.value, player.id, target.id)
        if self.event_bus is None:
            return
        self.event_bus.emit_simple(
            event_type,
            tick=state.clock.tick_count,
            time=state.elapsed,
            player_id=player.id,
            target_id=target.id,
            description=description,
            **data,
        )
