"""Play state - the single mutable object shared by every component.

Fields are grouped by the component that owns them. A component only
writes its own group (plus agent positions and the ball, which are the
shared board); reading anything is fine. Every group is created empty for
each new play, so no scratch value survives from one snap to the next.

    phase / clock        Phase controller
    assignments          Assignment initializer
    qb                   Quarterback decision engine
    skill                Skill-player movement and the running back
    tackle               Tackle/wrap state machine
    resolution           Whoever ends the play (via ``end_play``)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from scrimmage.core.clock import Clock
from scrimmage.core.entities import Agent, Ball, Formation, Role, DL_ROLES
from scrimmage.core.field import los_pix_y
from scrimmage.core.phases import PhaseStateMachine, PlayPhase
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import DeadBallReason, DriveContext
from scrimmage.plays.playbook import PlayCall


# =============================================================================
# Enums
# =============================================================================

class QBMoveMode(str, Enum):
    """What the quarterback's feet are doing."""
    DROP = "drop"
    SCRAMBLE = "scramble"


class ScrambleMode(str, Enum):
    """Shape of the current scramble leg."""
    LATERAL = "lateral"
    FORWARD = "forward"


# =============================================================================
# Component-owned groups
# =============================================================================

@dataclass
class AssignmentPlan:
    """Written once on the first live tick; read-only afterwards."""
    routes_initialized: bool = False
    rb_targets: list[Vec2] = field(default_factory=list)
    run_hole_x: Optional[float] = None
    run_lane_y: Optional[float] = None
    qb_ttt: float = 0.0
    qb_max_hold: float = 0.0
    qb_drop_target: Optional[Vec2] = None


@dataclass
class QuarterbackState:
    move_mode: QBMoveMode = QBMoveMode.DROP
    scramble_mode: Optional[ScrambleMode] = None
    scramble_dir: int = 0
    scramble_target: Optional[Vec2] = None
    scramble_until: float = 0.0
    handed_off: bool = False
    pass_risky: bool = False
    throw_away: bool = False


@dataclass
class ScrambleDrill:
    """One receiver's improvisation once his route is finished."""
    clock: float = 0.0
    total: float = 0.0
    until: Optional[float] = None
    target: Optional[Vec2] = None


@dataclass
class RunAim:
    """Where the ball carrier decided to run this tick."""
    aim: Vec2
    clogged: bool


@dataclass
class SkillState:
    scramble: Dict[str, ScrambleDrill] = field(default_factory=dict)
    run_aim: Optional[RunAim] = None

    def drill_for(self, agent_id: str) -> ScrambleDrill:
        if agent_id not in self.scramble:
            self.scramble[agent_id] = ScrambleDrill()
        return self.scramble[agent_id]


@dataclass
class WrapRecord:
    """A defender has hold of the carrier; the carrier is pinned until it resolves."""
    carrier_id: str
    tackler_id: str
    started_at: float
    hold_duration: float
    lock_pos: Vec2


@dataclass
class TackleState:
    wrap: Optional[WrapRecord] = None
    breaks: Dict[str, int] = field(default_factory=dict)
    no_wrap_until: float = 0.0
    post_break_until: float = 0.0
    cooldowns: Dict[str, float] = field(default_factory=dict)
    last_break_pos: Optional[Vec2] = None


@dataclass
class PlayResolution:
    reason: Optional[DeadBallReason] = None
    dead_at: Optional[float] = None
    turnover: bool = False
    passer_id: Optional[str] = None
    receiver_id: Optional[str] = None
    tackler_id: Optional[str] = None


# =============================================================================
# Play State
# =============================================================================

@dataclass
class PlayState:
    """Everything one play needs, from presnap to settlement."""
    play_call: PlayCall
    drive: DriveContext
    formation: Formation

    phase: PhaseStateMachine = field(default_factory=PhaseStateMachine)
    clock: Clock = field(default_factory=Clock)
    ball: Ball = field(default_factory=Ball)

    assignments: AssignmentPlan = field(default_factory=AssignmentPlan)
    qb: QuarterbackState = field(default_factory=QuarterbackState)
    skill: SkillState = field(default_factory=SkillState)
    tackle: TackleState = field(default_factory=TackleState)
    resolution: PlayResolution = field(default_factory=PlayResolution)

    # =========================================================================
    # Time
    # =========================================================================

    @property
    def elapsed(self) -> float:
        return self.clock.current_time

    def live_duration(self) -> float:
        snap = self.clock.time_at("snap")
        dead = self.resolution.dead_at
        if snap is None or dead is None:
            return 0.0
        return dead - snap

    # =========================================================================
    # Lookups
    # =========================================================================

    @property
    def is_live(self) -> bool:
        return self.phase.phase == PlayPhase.LIVE

    @property
    def los_pix_y(self) -> float:
        return los_pix_y(self.drive.los_yards)

    def agent(self, agent_id: Optional[str]) -> Optional[Agent]:
        return self.formation.get(agent_id)

    def role(self, role: Role) -> Agent:
        return self.formation[role]

    @property
    def qb_agent(self) -> Agent:
        return self.formation.offense[Role.QB]

    @property
    def carrier(self) -> Optional[Agent]:
        if self.ball.in_air:
            return None
        return self.formation.get(self.ball.carrier_id)

    def is_carrier(self, agent: Agent) -> bool:
        return not self.ball.in_air and self.ball.carrier_id == agent.id

    def is_wrapped(self, agent: Agent) -> bool:
        wrap = self.tackle.wrap
        return wrap is not None and wrap.carrier_id == agent.id

    @property
    def is_run_call(self) -> bool:
        return self.play_call.is_run

    def is_run_context(self) -> bool:
        """Run call, or the back is carrying the ball on the ground."""
        if self.play_call.is_run:
            return True
        return (not self.ball.in_air
                and self.ball.carrier_id == self.formation.offense[Role.RB].id)

    def ball_position(self) -> Vec2:
        """Where the ball is: render position in flight, else the carrier."""
        if self.ball.in_air:
            return self.ball.render_pos
        carrier = self.carrier
        if carrier is not None:
            return carrier.pos
        return self.ball.render_pos

    def nearest_rusher(self, point: Vec2) -> tuple[Optional[Agent], float]:
        """Closest defensive lineman to ``point`` and its distance."""
        best: Optional[Agent] = None
        best_dist = float("inf")
        for role in DL_ROLES:
            dl = self.formation.defense[role]
            dist = dl.pos.distance_to(point)
            if dist < best_dist:
                best, best_dist = dl, dist
        return best, best_dist

    def nearest_defender(self, point: Vec2) -> tuple[Optional[Agent], float]:
        best: Optional[Agent] = None
        best_dist = float("inf")
        for defender in self.formation.defenders():
            dist = defender.pos.distance_to(point)
            if dist < best_dist:
                best, best_dist = defender, dist
        return best, best_dist

    # =========================================================================
    # Ending the play
    # =========================================================================

    def end_play(
        self,
        reason: DeadBallReason,
        description: str = "",
        turnover: bool = False,
        tackler_id: Optional[str] = None,
    ) -> None:
        """Blow the whistle: record the one terminal reason and go DEAD.

        Raises:
            InvalidPhaseTransition: If the play is not live (already dead)
        """
        self.phase.transition_to(
            PlayPhase.DEAD,
            reason=description or reason.value,
            tick=self.clock.tick_count,
            time=self.elapsed,
        )
        self.resolution.reason = reason
        self.resolution.dead_at = self.elapsed
        self.resolution.turnover = turnover
        if tackler_id is not None:
            self.resolution.tackler_id = tackler_id
        self.clock.mark_event("dead")
