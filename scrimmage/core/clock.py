"""Per-play clock.

Time only moves when the host loop calls ``advance(dt)``; nothing here
reads the wall clock. Components compare against named marks ("snap",
"dead") instead of keeping their own timers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class Clock:
    """Seconds and steps since the play state was built."""
    current_time: float = 0.0
    tick_count: int = 0

    _marks: Dict[str, float] = field(default_factory=dict)

    def advance(self, dt: float) -> float:
        self.current_time += dt
        self.tick_count += 1
        return dt

    def mark_event(self, name: str) -> None:
        """Remember the current time under ``name`` (a later mark overwrites)."""
        self._marks[name] = self.current_time

    def time_at(self, name: str) -> Optional[float]:
        return self._marks.get(name)

    def time_since(self, name: str) -> Optional[float]:
        """Seconds since the mark, or None if it was never set."""
        at = self._marks.get(name)
        if at is None:
            return None
        return self.current_time - at

    def __repr__(self) -> str:
        return f"Clock({self.current_time:.3f}s, tick {self.tick_count})"
