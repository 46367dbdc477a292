"""Play events.

Resolvers and the orchestrator publish what happened (snap, throw, wrap,
whistle) on an ``EventBus``. Listeners can follow one event type or all of
them. The bus keeps every event, and each settled outcome carries the
slice of history for its own play.
"""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, DefaultDict, List, Optional


class EventType(str, Enum):
    # Lifecycle
    PHASE_CHANGE = "phase_change"
    SNAP = "snap"
    PLAY_END = "play_end"

    # Ball
    HANDOFF = "handoff"
    THROW = "throw"
    THROW_AWAY = "throw_away"
    CATCH = "catch"
    INCOMPLETE = "incomplete"
    INTERCEPTION = "interception"

    # Quarterback
    SCRAMBLE_INITIATED = "scramble_initiated"
    SACK = "sack"

    # Line play
    BLOCK_ENGAGED = "block_engaged"
    BLOCK_SHED = "block_shed"
    BLOCK_WON = "block_won"

    # Contact
    WRAP_STARTED = "wrap_started"
    BROKEN_TACKLE = "broken_tackle"
    TACKLE = "tackle"

    # Whistles from the dead-ball check
    OUT_OF_BOUNDS = "out_of_bounds"
    TOUCHDOWN = "touchdown"


@dataclass
class Event:
    """Something that happened at a given tick.

    ``player_id`` is who did it (passer, tackler, ball carrier) and
    ``target_id`` who it was done to or for. ``data`` holds event-specific
    numbers such as probabilities or the ball spot.
    """
    type: EventType
    tick: int
    time: float
    player_id: Optional[str] = None
    target_id: Optional[str] = None
    data: dict[str, Any] = field(default_factory=dict)
    description: str = ""

    def __str__(self) -> str:
        text = f"[{self.time:.2f}s] {self.type.value}"
        if self.player_id:
            text += f" by {self.player_id}"
        if self.target_id:
            text += f" -> {self.target_id}"
        if self.description:
            text += f" - {self.description}"
        return text


EventHandler = Callable[[Event], None]


class EventBus:
    """Publish/subscribe hub with a full history.

    Usage:
        bus = EventBus()
        bus.subscribe(EventType.TACKLE, credit_tackle)
        bus.emit_simple(EventType.SNAP, tick=61, time=1.02, player_id="QB")
    """

    def __init__(self) -> None:
        self._by_type: DefaultDict[EventType, List[EventHandler]] = defaultdict(list)
        self._catch_all: List[EventHandler] = []
        self._history: List[Event] = []

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._by_type[event_type].append(handler)

    def subscribe_all(self, handler: EventHandler) -> None:
        self._catch_all.append(handler)

    def emit(self, event: Event) -> None:
        self._history.append(event)
        for handler in (*self._by_type[event.type], *self._catch_all):
            handler(event)

    def emit_simple(
        self,
        event_type: EventType,
        tick: int,
        time: float,
        player_id: Optional[str] = None,
        target_id: Optional[str] = None,
        description: str = "",
        **data: Any,
    ) -> Event:
        """Build an ``Event`` from keyword arguments and emit it."""
        event = Event(event_type, tick, time, player_id, target_id, data, description)
        self.emit(event)
        return event

    @property
    def history(self) -> List[Event]:
        return self._history

    def get_events_by_type(self, event_type: EventType) -> List[Event]:
        return [e for e in self._history if e.type == event_type]

    def __len__(self) -> int:
        return len(self._history)

    def __bool__(self) -> bool:
        # A bus with no history yet is still a bus
        return True
