"""Core entities - Agent, Ball, Formation and supporting types.

Entities are pure data containers. Behavior is implemented in the brains,
resolvers and systems.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional

from .vec2 import Vec2


# =============================================================================
# Enums
# =============================================================================

class Team(str, Enum):
    """Which team an agent is on."""
    OFFENSE = "offense"
    DEFENSE = "defense"


class Role(str, Enum):
    """Formation slot. Each of the 22 slots is filled by exactly one agent."""
    # Offense
    QB = "QB"
    RB = "RB"
    WR1 = "WR1"
    WR2 = "WR2"
    WR3 = "WR3"
    TE = "TE"
    LT = "LT"
    LG = "LG"
    C = "C"
    RG = "RG"
    RT = "RT"

    # Defense
    LE = "LE"
    DT = "DT"
    RTK = "RTK"
    RE = "RE"
    LB1 = "LB1"
    LB2 = "LB2"
    CB1 = "CB1"
    CB2 = "CB2"
    S1 = "S1"
    S2 = "S2"
    NB = "NB"


OFFENSE_ROLES = (
    Role.QB, Role.RB, Role.WR1, Role.WR2, Role.WR3, Role.TE,
    Role.LT, Role.LG, Role.C, Role.RG, Role.RT,
)
DEFENSE_ROLES = (
    Role.LE, Role.DT, Role.RTK, Role.RE, Role.LB1, Role.LB2,
    Role.CB1, Role.CB2, Role.S1, Role.S2, Role.NB,
)

OL_ROLES = (Role.LT, Role.LG, Role.C, Role.RG, Role.RT)
DL_ROLES = (Role.LE, Role.DT, Role.RTK, Role.RE)
LB_ROLES = (Role.LB1, Role.LB2)
WR_ROLES = (Role.WR1, Role.WR2, Role.WR3)


class BallState(str, Enum):
    """Current state of the football."""
    DEAD = "dead"             # Before the snap
    HELD = "held"             # In a carrier's hands
    IN_FLIGHT = "in_flight"   # Thrown


# =============================================================================
# Attributes
# =============================================================================

# (low, high) bounds per attribute; generated values always fall inside.
ATTRIBUTE_RANGES: Dict[str, tuple[float, float]] = {
    "speed": (4.0, 8.0),
    "acceleration": (8.0, 25.0),
    "agility": (0.5, 1.2),
    "strength": (0.5, 1.2),
    "awareness": (0.4, 1.3),
    "catch": (0.4, 1.2),
    "throw_power": (0.5, 1.2),
    "throw_accuracy": (0.4, 1.2),
    "tackle": (0.4, 1.3),
}


@dataclass
class AgentAttributes:
    """Attributes that affect simulation outcomes.

    Speed is in yards per second before scaling. The skill attributes are
    multipliers centred on roughly 1.0: awareness doubles as football IQ,
    technique is derived from awareness and strength.
    """
    speed: float = 5.0
    acceleration: float = 15.0
    agility: float = 0.8
    strength: float = 0.8
    awareness: float = 0.9
    catch: float = 0.9
    throw_power: float = 0.9
    throw_accuracy: float = 0.9
    tackle: float = 0.8

    @property
    def technique(self) -> float:
        """Blocking/shedding technique used in line contact."""
        return self.awareness * 0.6 + self.strength * 0.4


# =============================================================================
# Agent
# =============================================================================

@dataclass
class Agent:
    """One of the 22 players on the field.

    Agents are never destroyed mid-play. ``reset`` puts them back at an
    alignment spot between plays.
    """
    id: str
    role: Role
    team: Team
    pos: Vec2 = field(default_factory=Vec2.zero)
    home: Vec2 = field(default_factory=Vec2.zero)
    attributes: AgentAttributes = field(default_factory=AgentAttributes)

    # Route state
    targets: list[Vec2] = field(default_factory=list)
    route_index: int = 0

    # Line engagement (mutual link by agent id)
    engaged_with: Optional[str] = None
    engaged_time: float = 0.0

    alive: bool = True

    @property
    def is_offense(self) -> bool:
        return self.team == Team.OFFENSE

    @property
    def is_engaged(self) -> bool:
        return self.engaged_with is not None

    @property
    def current_target(self) -> Optional[Vec2]:
        """Next route waypoint, or None when the route is finished."""
        if self.route_index < len(self.targets):
            return self.targets[self.route_index]
        return None

    def assign_route(self, targets: list[Vec2]) -> None:
        self.targets = list(targets)
        self.route_index = 0

    def disengage(self) -> None:
        self.engaged_with = None
        self.engaged_time = 0.0

    def reset(self, pos: Vec2) -> None:
        """Align at ``pos`` and clear all per-play state."""
        self.pos = pos
        self.home = pos
        self.targets = []
        self.route_index = 0
        self.engaged_with = None
        self.engaged_time = 0.0
        self.alive = True

    def format_brief(self) -> str:
        return f"{self.id}@{self.pos}"


# =============================================================================
# Ball
# =============================================================================

@dataclass
class Ball:
    """The football.

    While the play is live exactly one of these holds: the ball is in
    flight, or it has a carrier.
    """
    state: BallState = BallState.DEAD
    carrier_id: Optional[str] = None

    # Flight info (when IN_FLIGHT)
    origin: Optional[Vec2] = None
    destination: Optional[Vec2] = None
    t: float = 0.0
    target_id: Optional[str] = None   # None on a throw-away

    render_pos: Vec2 = field(default_factory=Vec2.zero)

    @property
    def in_air(self) -> bool:
        return self.state == BallState.IN_FLIGHT

    def give_to(self, agent: Agent) -> None:
        self.state = BallState.HELD
        self.carrier_id = agent.id
        self.origin = None
        self.destination = None
        self.t = 0.0
        self.target_id = None
        self.render_pos = agent.pos

    def check_invariant(self) -> None:
        """Raise if the ball is neither cleanly held nor cleanly in flight."""
        if self.state == BallState.IN_FLIGHT:
            if self.carrier_id is not None:
                raise BallStateError(f"Ball in flight but carried by {self.carrier_id}")
            if self.origin is None or self.destination is None:
                raise BallStateError("Ball in flight without origin/destination")
        elif self.state == BallState.HELD:
            if self.carrier_id is None:
                raise BallStateError("Ball held but has no carrier")
        else:
            raise BallStateError("Ball is dead during a live play")


class BallStateError(Exception):
    """Raised when the ball is neither carried nor in flight during a live play."""
    pass


# =============================================================================
# Formation
# =============================================================================

@dataclass
class Formation:
    """The 22 agents of a play, keyed by role.

    This is the roster snapshot handed in by the caller. Positions and route
    state are mutated during the play; the set of agents is not.
    """
    offense: Dict[Role, Agent]
    defense: Dict[Role, Agent]

    def validate(self) -> None:
        """Raise ``MissingRoleError`` unless every role is filled correctly."""
        missing = [r.value for r in OFFENSE_ROLES if r not in self.offense]
        missing += [r.value for r in DEFENSE_ROLES if r not in self.defense]
        if missing:
            raise MissingRoleError(f"Formation is missing roles: {', '.join(missing)}")

        for side, team in ((self.offense, Team.OFFENSE), (self.defense, Team.DEFENSE)):
            for role, agent in side.items():
                if agent.role != role or agent.team != team:
                    raise MissingRoleError(
                        f"Agent {agent.id} ({agent.role.value}/{agent.team.value}) "
                        f"is in the {role.value} slot for {team.value}"
                    )

        ids = [a.id for a in self.all_agents()]
        if len(set(ids)) != len(ids):
            raise MissingRoleError("Agent ids must be unique")

    def __getitem__(self, role: Role) -> Agent:
        if role in self.offense:
            return self.offense[role]
        return self.defense[role]

    def get(self, agent_id: Optional[str]) -> Optional[Agent]:
        """Look up an agent by id."""
        if agent_id is None:
            return None
        for agent in self.all_agents():
            if agent.id == agent_id:
                return agent
        return None

    def all_agents(self) -> Iterator[Agent]:
        yield from self.offense.values()
        yield from self.defense.values()

    def defenders(self) -> list[Agent]:
        """Defenders in formation order."""
        return [self.defense[r] for r in DEFENSE_ROLES if r in self.defense]


class MissingRoleError(ValueError):
    """Raised when a formation does not fill every role exactly once."""
    pass
