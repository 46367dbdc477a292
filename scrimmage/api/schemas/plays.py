"""Pydantic schemas for play simulation."""

from typing import Any, Optional

from pydantic import BaseModel, Field

from scrimmage.core.events import Event
from scrimmage.drive import DriveContext, PlayOutcome
from scrimmage.plays.playbook import PlayCall


class PlaybookEntrySchema(BaseModel):
    """One call in the built-in playbook."""

    key: str
    name: str
    type: str
    primary: Optional[str] = None
    quick_game: bool = False
    play_action: bool = False

    @classmethod
    def from_call(cls, key: str, call: PlayCall) -> "PlaybookEntrySchema":
        return cls(
            key=key,
            name=call.name,
            type=call.type.value,
            primary=call.primary.value if call.primary else None,
            quick_game=call.quick_game,
            play_action=call.play_action,
        )


class DriveContextSchema(BaseModel):
    """Down, distance and line of scrimmage (yards from own goal line)."""

    down: int = Field(default=1, ge=1, le=4)
    to_go: int = Field(default=10, ge=1, le=99)
    los_yards: float = Field(default=25, gt=0, lt=100)

    @classmethod
    def from_context(cls, context: DriveContext) -> "DriveContextSchema":
        return cls(down=context.down, to_go=context.to_go, los_yards=context.los_yards)

    def to_context(self) -> DriveContext:
        return DriveContext(down=self.down, to_go=self.to_go, los_yards=self.los_yards)


class EventSchema(BaseModel):
    """One play event."""

    type: str
    tick: int
    time: float
    player_id: Optional[str] = None
    target_id: Optional[str] = None
    description: str = ""
    data: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_event(cls, event: Event) -> "EventSchema":
        return cls(
            type=event.type.value,
            tick=event.tick,
            time=round(event.time, 3),
            player_id=event.player_id,
            target_id=event.target_id,
            description=event.description,
            data=event.data,
        )


class PlayOutcomeSchema(BaseModel):
    """Settled result of one play."""

    play_name: str
    start: DriveContextSchema
    result: str
    reason: str
    yards: int
    end_los: float
    next_drive: DriveContextSchema
    turnover: bool
    turnover_on_downs: bool
    first_down: bool
    passer_id: Optional[str] = None
    receiver_id: Optional[str] = None
    tackler_id: Optional[str] = None
    duration: float
    summary: str
    events: list[EventSchema] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: PlayOutcome, include_events: bool = True) -> "PlayOutcomeSchema":
        return cls(
            play_name=outcome.play_name,
            start=DriveContextSchema.from_context(outcome.start),
            result=outcome.result.value,
            reason=outcome.reason.value,
            yards=outcome.yards,
            end_los=outcome.end_los,
            next_drive=DriveContextSchema.from_context(outcome.next_drive),
            turnover=outcome.turnover,
            turnover_on_downs=outcome.turnover_on_downs,
            first_down=outcome.first_down,
            passer_id=outcome.passer_id,
            receiver_id=outcome.receiver_id,
            tackler_id=outcome.tackler_id,
            duration=round(outcome.duration, 3),
            summary=outcome.format_summary(),
            events=[EventSchema.from_event(e) for e in outcome.events] if include_events else [],
        )


class SimulateRequest(BaseModel):
    """Request to run plays on a drive."""

    seed: Optional[int] = Field(default=None, description="Seed for rosters and every roll")
    plays: int = Field(default=1, ge=1, le=50)
    play: Optional[str] = Field(default=None, description="Call every snap with this play")
    drive: DriveContextSchema = Field(default_factory=DriveContextSchema)
    include_events: bool = Field(default=False)


class SimulateResponse(BaseModel):
    """Outcomes in snap order and the context for the next snap."""

    seed: Optional[int] = None
    outcomes: list[PlayOutcomeSchema]
    next_drive: DriveContextSchema
