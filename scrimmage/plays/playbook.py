"""Play calls - the offensive playbook.

A play call is inbound, read-only data for one snap. Route steps are
offsets in yards from the player's presnap spot; they are projected to
field pixels when the play goes live.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from scrimmage.core.entities import Role


class PlayType(str, Enum):
    RUN = "RUN"
    PASS = "PASS"


@dataclass(frozen=True)
class RouteStep:
    """A route waypoint as a yard offset from the presnap spot."""
    dx: float
    dy: float


@dataclass
class PlayCall:
    """An offensive play call.

    Attributes:
        name: Display name
        type: RUN or PASS
        wr_routes: Route steps per wide receiver role
        te_route: Tight end route steps
        rb_path: Run path (RUN) - first step sets the run hole
        rb_checkdown: Release route for the back on passes
        qb_drop: Dropback depth in yards
        quick_game: Shortens the QB's time-to-throw window
        primary: First read in the QB's progression
        play_action: Fake handoff flavour (cosmetic, kept for the log)
    """
    name: str
    type: PlayType
    wr_routes: Dict[Role, List[RouteStep]] = field(default_factory=dict)
    te_route: List[RouteStep] = field(default_factory=list)
    rb_path: List[RouteStep] = field(default_factory=list)
    rb_checkdown: List[RouteStep] = field(default_factory=list)
    qb_drop: Optional[float] = None
    quick_game: bool = False
    primary: Optional[Role] = None
    play_action: bool = False

    @property
    def is_run(self) -> bool:
        return self.type == PlayType.RUN

    @property
    def is_pass(self) -> bool:
        return self.type == PlayType.PASS


def _steps(*pairs: tuple[float, float]) -> List[RouteStep]:
    return [RouteStep(dx, dy) for dx, dy in pairs]


def _all_hitches() -> Dict[Role, List[RouteStep]]:
    return {Role.WR1: _steps((0, 6)), Role.WR2: _steps((-2, 6)), Role.WR3: _steps((2, 6))}


def _all_blocks() -> Dict[Role, List[RouteStep]]:
    return {Role.WR1: _steps((0, 2)), Role.WR2: _steps((-2, 2)), Role.WR3: _steps((2, 2))}


# =============================================================================
# Built-in calls
# =============================================================================

def create_inside_zone() -> PlayCall:
    """Inside Zone - downhill run straight up the A gap."""
    return PlayCall(
        name="Inside Zone",
        type=PlayType.RUN,
        rb_path=_steps((0, 10)),
        wr_routes=_all_hitches(),
        te_route=_steps((0, 6)),
        qb_drop=2,
    )


def create_outside_zone() -> PlayCall:
    """Outside Zone - stretch to the right edge."""
    return PlayCall(
        name="Outside Zone",
        type=PlayType.RUN,
        rb_path=_steps((10, 10)),
        wr_routes=_all_blocks(),
        te_route=_steps((2, 8)),
        qb_drop=1,
    )


def create_slant_flat() -> PlayCall:
    """Slant-Flat - slant outside with the back leaking to the flat."""
    return PlayCall(
        name="Slant Flat",
        type=PlayType.PASS,
        primary=Role.WR1,
        wr_routes={
            Role.WR1: _steps((3, 6)),
            Role.WR2: _steps((-2, 4)),
            Role.WR3: _steps((0, 2)),
        },
        te_route=_steps((-1, 5)),
        rb_checkdown=_steps((2, 2)),
        qb_drop=5,
    )


def create_four_verts() -> PlayCall:
    """Four Verticals - stretch every deep defender."""
    return PlayCall(
        name="Four Verts",
        type=PlayType.PASS,
        primary=Role.WR1,
        wr_routes={
            Role.WR1: _steps((0, 18)),
            Role.WR2: _steps((-5, 18)),
            Role.WR3: _steps((5, 18)),
        },
        te_route=_steps((0, 15)),
        rb_checkdown=_steps((2, 3)),
        qb_drop=7,
    )


def create_pa_crossers() -> PlayCall:
    """Play-action crossers - WR1 and WR2 cross at intermediate depth."""
    return PlayCall(
        name="PA Crossers",
        type=PlayType.PASS,
        primary=Role.WR2,
        wr_routes={
            Role.WR1: _steps((-8, 10)),
            Role.WR2: _steps((8, 12)),
            Role.WR3: _steps((0, 6)),
        },
        te_route=_steps((-3, 8)),
        rb_checkdown=_steps((2, 2)),
        qb_drop=7,
        play_action=True,
    )


def create_quick_slants() -> PlayCall:
    """Quick Slants - three-step timing throw."""
    return PlayCall(
        name="Quick Slants",
        type=PlayType.PASS,
        primary=Role.WR1,
        wr_routes={
            Role.WR1: _steps((3, 4)),
            Role.WR2: _steps((-3, 4)),
            Role.WR3: _steps((-2, 3)),
        },
        te_route=_steps((0, 4)),
        rb_checkdown=_steps((3, 1)),
        qb_drop=3,
        quick_game=True,
    )


PLAYBOOK: Dict[str, PlayCall] = {
    "inside_zone": create_inside_zone(),
    "outside_zone": create_outside_zone(),
    "slant_flat": create_slant_flat(),
    "four_verts": create_four_verts(),
    "pa_crossers": create_pa_crossers(),
    "quick_slants": create_quick_slants(),
}


def get_play(name: str) -> Optional[PlayCall]:
    """Get a play call by key (``"four_verts"``) or display name (``"Four Verts"``)."""
    key = name.strip().lower().replace(" ", "_").replace("-", "_")
    return PLAYBOOK.get(key)


def list_plays() -> List[str]:
    """List all available play keys."""
    return list(PLAYBOOK.keys())
