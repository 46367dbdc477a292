"""Drive bookkeeping - settle a finished play into down and distance.

When a play has been dead long enough, the orchestrator hands its state to
``settle_play``. That produces a ``PlayOutcome`` (the single record that
leaves the engine) including the down/distance/LOS for the next snap.
``DriveManager`` keeps the running context and a short play log.

Settlement rules:
    Incomplete / throw-away: no gain, same spot, next down
    Sack / tackle / out of bounds: gain measured from the ball spot
    Interception: turnover, next drive starts at the 25
    Touchdown: gain to the goal line, next drive starts at the 25
    Gain reaching the line to gain: first down
    Fifth down: turnover on downs, next drive starts at the 25
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, List, Optional

from scrimmage.core.events import Event
from scrimmage.core.field import (
    DRIVE_START_LOS,
    ENDZONE_YARDS,
    PLAYING_YARDS_H,
    pix_to_yards,
)
from scrimmage.core.variance import clamp

if TYPE_CHECKING:
    from scrimmage.play_state import PlayState


logger = logging.getLogger(__name__)

PLAY_LOG_LIMIT = 50


# =============================================================================
# Result Types
# =============================================================================

class DeadBallReason(str, Enum):
    """Why the whistle blew. Exactly one is chosen per play."""
    TACKLED = "tackled"
    SACK = "sack"
    INCOMPLETE = "incomplete"
    THROW_AWAY = "throw_away"
    INTERCEPTION = "interception"
    TOUCHDOWN = "touchdown"
    OUT_OF_BOUNDS = "out_of_bounds"


class ResultCategory(str, Enum):
    """Label shown for a settled play."""
    GAIN = "Gain"
    LOSS = "Loss"
    INCOMPLETE = "Incomplete"
    THROW_AWAY = "Throw away"
    SACK = "Sack"
    INTERCEPTION = "Interception"
    TOUCHDOWN = "Touchdown"
    OUT_OF_BOUNDS = "Out of bounds"


_CATEGORY_BY_REASON = {
    DeadBallReason.SACK: ResultCategory.SACK,
    DeadBallReason.INCOMPLETE: ResultCategory.INCOMPLETE,
    DeadBallReason.THROW_AWAY: ResultCategory.THROW_AWAY,
    DeadBallReason.INTERCEPTION: ResultCategory.INTERCEPTION,
    DeadBallReason.TOUCHDOWN: ResultCategory.TOUCHDOWN,
    DeadBallReason.OUT_OF_BOUNDS: ResultCategory.OUT_OF_BOUNDS,
}


@dataclass(frozen=True)
class DriveContext:
    """Down, distance and line of scrimmage for a snap.

    ``los_yards`` is measured from the offense's own goal line (0-100).
    """
    down: int = 1
    to_go: int = 10
    los_yards: float = DRIVE_START_LOS

    def __post_init__(self) -> None:
        if not 1 <= self.down <= 4:
            raise ValueError(f"down must be 1-4, got {self.down}")
        if self.to_go < 1:
            raise ValueError(f"to_go must be at least 1, got {self.to_go}")
        if not 0 < self.los_yards < PLAYING_YARDS_H:
            raise ValueError(f"los_yards must be inside the field, got {self.los_yards}")

    def format(self) -> str:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(self.down, "th")
        return f"{self.down}{suffix} & {self.to_go} at the {self.los_yards:.0f}"


@dataclass
class PlayOutcome:
    """Settled result of one play.

    Attributes:
        play_name: Play call name
        start: Down, distance and LOS at the snap
        result: Category label
        reason: Dead-ball reason that ended the play
        yards: Signed yards gained
        end_los: Ball spot in yards when the play ended
        next_drive: Context for the next snap
    """
    play_name: str
    start: DriveContext
    result: ResultCategory
    reason: DeadBallReason
    yards: int
    end_los: float
    next_drive: DriveContext
    turnover: bool = False
    turnover_on_downs: bool = False
    first_down: bool = False

    passer_id: Optional[str] = None
    receiver_id: Optional[str] = None
    tackler_id: Optional[str] = None

    duration: float = 0.0
    events: List[Event] = field(default_factory=list)

    def format_summary(self) -> str:
        """Format a one-line summary."""
        text = f"{self.play_name}: {self.result.value}"
        if self.result in (ResultCategory.GAIN, ResultCategory.LOSS,
                           ResultCategory.SACK, ResultCategory.OUT_OF_BOUNDS,
                           ResultCategory.TOUCHDOWN):
            text += f" ({self.yards:+d} yds)"
        if self.first_down:
            text += ", first down"
        if self.turnover_on_downs:
            text += " - turnover on downs"
        return text


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


# =============================================================================
# Settlement
# =============================================================================

def settle_play(state: PlayState) -> PlayOutcome:
    """Fold a dead play into down, distance and field position."""
    resolution = state.resolution
    if resolution.reason is None:
        raise ValueError("Cannot settle a play that has not ended")

    start = state.drive
    reason = resolution.reason
    turnover = False
    turnover_on_downs = False
    first_down = False

    if reason in (DeadBallReason.INCOMPLETE, DeadBallReason.THROW_AWAY):
        yards = 0
        end_los = start.los_yards
    elif reason == DeadBallReason.INTERCEPTION:
        yards = 0
        end_los = start.los_yards
        turnover = True
    elif reason == DeadBallReason.TOUCHDOWN:
        yards = round_half_up(PLAYING_YARDS_H - start.los_yards)
        end_los = float(PLAYING_YARDS_H)
    else:
        ball_yards = pix_to_yards(state.ball_position().y) - ENDZONE_YARDS
        yards = round_half_up(ball_yards - start.los_yards)
        end_los = clamp(start.los_yards + yards, 1, 99)

    if turnover or reason == DeadBallReason.TOUCHDOWN:
        next_drive = DriveContext()
    else:
        remaining = start.to_go - yards
        if remaining <= 0:
            first_down = True
            next_drive = DriveContext(
                down=1,
                to_go=max(1, min(10, round_half_up(PLAYING_YARDS_H - end_los))),
                los_yards=end_los,
            )
        elif start.down + 1 > 4:
            turnover_on_downs = True
            next_drive = DriveContext()
        else:
            next_drive = DriveContext(
                down=start.down + 1,
                to_go=max(1, round_half_up(remaining)),
                los_yards=end_los,
            )

    if reason == DeadBallReason.TACKLED:
        result = ResultCategory.GAIN if yards >= 0 else ResultCategory.LOSS
    else:
        result = _CATEGORY_BY_REASON[reason]

    outcome = PlayOutcome(
        play_name=state.play_call.name,
        start=start,
        result=result,
        reason=reason,
        yards=yards,
        end_los=end_los,
        next_drive=next_drive,
        turnover=turnover,
        turnover_on_downs=turnover_on_downs,
        first_down=first_down,
        passer_id=resolution.passer_id,
        receiver_id=resolution.receiver_id,
        tackler_id=resolution.tackler_id,
        duration=state.live_duration(),
    )
    logger.info("%s -> %s", start.format(), outcome.format_summary())
    return outcome


# =============================================================================
# Drive Manager
# =============================================================================

OutcomeCallback = Callable[[PlayOutcome], None]


class DriveManager:
    """Tracks the running drive context and a rolling play log.

    Usage:
        drive = DriveManager(on_play_complete=print)
        drive.record(outcome)
        drive.context   # context for the next snap
    """

    def __init__(
        self,
        context: Optional[DriveContext] = None,
        on_play_complete: Optional[OutcomeCallback] = None,
    ):
        self.context = context or DriveContext()
        self._on_play_complete = on_play_complete
        self._log: List[PlayOutcome] = []

    @property
    def play_log(self) -> List[PlayOutcome]:
        """Most recent plays, newest first."""
        return list(reversed(self._log))

    def record(self, outcome: PlayOutcome) -> DriveContext:
        """Store an outcome and advance to the next snap's context."""
        self._log.append(outcome)
        if len(self._log) > PLAY_LOG_LIMIT:
            del self._log[:-PLAY_LOG_LIMIT]
        self.context = outcome.next_drive

        if self._on_play_complete is not None:
            self._on_play_complete(outcome)
        return self.context
