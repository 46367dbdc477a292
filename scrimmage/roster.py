"""Roster snapshots and presnap alignment.

The engine treats the roster as inbound data; this module builds a
default 22-man snapshot for demos, the CLI and the API, and lines a
formation up at a line of scrimmage before every snap.

Alignment (pixels, LOS = line of scrimmage):
    OL:     five across, 20 px apart, centred, one yard off the ball
    QB/RB:  behind the center at 3 and 5 yards
    TE:     18 px outside the right tackle
    WRs:    both sidelines 40 px in; WR3 in the right slot
    DL:     1.5 yards off the ball, shaded on the tackles and guards
    LBs:    2.5 yards behind the line, 30 px either side of centre
    CBs:    over the outside receivers at 2 yards, NB over the slot at 4
    Safeties: 10 yards deep, 60 px either side of centre
"""

from __future__ import annotations

from typing import Dict, Optional

from scrimmage.core.entities import (
    ATTRIBUTE_RANGES,
    DEFENSE_ROLES,
    OFFENSE_ROLES,
    Agent,
    AgentAttributes,
    Formation,
    Role,
    Team,
)
from scrimmage.core.field import FIELD_PIX_W, yards_to_pix
from scrimmage.core.variance import PlayRandom, clamp
from scrimmage.core.vec2 import Vec2


# Draw ranges before clamping to ATTRIBUTE_RANGES
ATTRIBUTE_DRAWS: Dict[str, tuple[float, float]] = {
    "speed": (4.5, 6.0),
    "acceleration": (10.0, 20.0),
    "agility": (0.6, 1.0),
    "strength": (0.5, 1.0),
    "awareness": (0.5, 1.0),
    "catch": (0.5, 1.0),
    "throw_power": (0.6, 1.0),
    "throw_accuracy": (0.5, 1.0),
    "tackle": (0.5, 1.0),
}

SPEED_BONUS: Dict[Role, float] = {
    Role.WR1: 0.4,
    Role.WR2: 0.3,
    Role.WR3: 0.1,
    Role.RB: 0.25,
    Role.CB1: 0.2,
    Role.CB2: 0.2,
    Role.S1: 0.2,
    Role.S2: 0.2,
}

OL_SPACING = 20.0


def generate_attributes(rng: PlayRandom, speed_bonus: float = 0.0) -> AgentAttributes:
    """Draw one player's attributes."""
    values = {}
    for name, (low, high) in ATTRIBUTE_DRAWS.items():
        value = rng.uniform(low, high)
        if name == "speed":
            value += speed_bonus
        values[name] = clamp(value, *ATTRIBUTE_RANGES[name])
    return AgentAttributes(**values)


def generate_formation(rng: Optional[PlayRandom] = None) -> Formation:
    """Build a default 22-man roster snapshot (not yet aligned)."""
    rng = rng or PlayRandom()
    offense = {
        role: Agent(
            id=role.value,
            role=role,
            team=Team.OFFENSE,
            attributes=generate_attributes(rng, SPEED_BONUS.get(role, 0.0)),
        )
        for role in OFFENSE_ROLES
    }
    defense = {
        role: Agent(
            id=role.value,
            role=role,
            team=Team.DEFENSE,
            attributes=generate_attributes(rng, SPEED_BONUS.get(role, 0.0)),
        )
        for role in DEFENSE_ROLES
    }
    formation = Formation(offense=offense, defense=defense)
    formation.validate()
    return formation


def line_up(formation: Formation, los_y: float) -> Formation:
    """Put every agent at its presnap spot for a snap at pixel row ``los_y``.

    Clears routes, engagements and other per-play agent state.
    """
    formation.validate()
    off = formation.offense
    dfn = formation.defense

    mid_x = round(FIELD_PIX_W / 2)
    start_x = mid_x - 2 * OL_SPACING
    ol_y = los_y - yards_to_pix(1)

    for i, role in enumerate((Role.LT, Role.LG, Role.C, Role.RG, Role.RT)):
        off[role].reset(Vec2(start_x + i * OL_SPACING, ol_y))

    center_x = off[Role.C].pos.x
    right_tackle_x = off[Role.RT].pos.x
    left_tackle_x = off[Role.LT].pos.x

    off[Role.QB].reset(Vec2(center_x, ol_y - yards_to_pix(3)))
    off[Role.RB].reset(Vec2(center_x, ol_y - yards_to_pix(5)))
    off[Role.TE].reset(Vec2(right_tackle_x + 18, ol_y))
    off[Role.WR1].reset(Vec2(40, ol_y))
    off[Role.WR2].reset(Vec2(FIELD_PIX_W - 40, ol_y))
    off[Role.WR3].reset(Vec2(mid_x + 130, ol_y - 30))

    front_y = los_y + yards_to_pix(1.5)
    dfn[Role.LE].reset(Vec2(left_tackle_x - 10, front_y))
    dfn[Role.DT].reset(Vec2(center_x - 22, front_y))
    dfn[Role.RTK].reset(Vec2(center_x + 22, front_y))
    dfn[Role.RE].reset(Vec2(right_tackle_x + 10, front_y))

    lb_y = front_y + yards_to_pix(2.5)
    dfn[Role.LB1].reset(Vec2(mid_x - 30, lb_y))
    dfn[Role.LB2].reset(Vec2(mid_x + 30, lb_y))

    dfn[Role.CB1].reset(Vec2(off[Role.WR1].pos.x, los_y + yards_to_pix(2)))
    dfn[Role.CB2].reset(Vec2(off[Role.WR2].pos.x, los_y + yards_to_pix(2)))
    dfn[Role.NB].reset(Vec2(off[Role.WR3].pos.x, los_y + yards_to_pix(4)))

    safety_y = los_y + yards_to_pix(10)
    dfn[Role.S1].reset(Vec2(mid_x - 60, safety_y))
    dfn[Role.S2].reset(Vec2(mid_x + 60, safety_y))

    return formation
