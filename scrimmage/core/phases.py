"""Play phases and the state machine that guards them.

    PRESNAP ──(presnap delay)──> POSTSNAP ──(postsnap delay)──> LIVE
    LIVE ──(whistle: tackle, sack, incompletion, TD, ...)──> DEAD

The orchestrator decides *when* to move on; this module only decides
*whether* a move is legal. DEAD is terminal: settlement throws the play
state away and the next snap starts from a fresh PRESNAP machine, so a
play can go dead exactly once.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, FrozenSet, List


class PlayPhase(str, Enum):
    PRESNAP = "presnap"      # Aligned, waiting for the snap
    POSTSNAP = "postsnap"    # QB has the ball, nobody released yet
    LIVE = "live"            # Every component runs each tick
    DEAD = "dead"            # Whistle blown, waiting for settlement


VALID_TRANSITIONS: Dict[PlayPhase, FrozenSet[PlayPhase]] = {
    PlayPhase.PRESNAP: frozenset({PlayPhase.POSTSNAP}),
    PlayPhase.POSTSNAP: frozenset({PlayPhase.LIVE}),
    PlayPhase.LIVE: frozenset({PlayPhase.DEAD}),
    PlayPhase.DEAD: frozenset(),
}


class InvalidPhaseTransition(Exception):
    """A phase change that skips, repeats or reverses a phase."""
    pass


@dataclass(frozen=True)
class PhaseTransition:
    from_phase: PlayPhase
    to_phase: PlayPhase
    reason: str
    tick: int
    time: float


TransitionCallback = Callable[[PhaseTransition], None]


class PhaseStateMachine:
    """Current phase plus the log of how the play got there.

    Usage:
        fsm = PhaseStateMachine()
        fsm.on_transition(publish)
        fsm.transition_to(PlayPhase.POSTSNAP, reason="snap", tick=61, time=1.02)
    """

    def __init__(self, initial_phase: PlayPhase = PlayPhase.PRESNAP):
        self._phase = initial_phase
        self._log: List[PhaseTransition] = []
        self._listeners: List[TransitionCallback] = []

    @property
    def phase(self) -> PlayPhase:
        return self._phase

    @property
    def history(self) -> List[PhaseTransition]:
        """Transitions so far, oldest first (a copy)."""
        return list(self._log)

    @property
    def is_live(self) -> bool:
        return self._phase == PlayPhase.LIVE

    @property
    def is_dead(self) -> bool:
        return self._phase == PlayPhase.DEAD

    def can_transition_to(self, target: PlayPhase) -> bool:
        return target in VALID_TRANSITIONS[self._phase]

    def on_transition(self, callback: TransitionCallback) -> None:
        self._listeners.append(callback)

    def transition_to(
        self,
        target: PlayPhase,
        reason: str = "",
        tick: int = 0,
        time: float = 0.0,
    ) -> PhaseTransition:
        """Move to ``target`` and notify listeners.

        Raises:
            InvalidPhaseTransition: If ``target`` does not directly follow the current phase
        """
        if not self.can_transition_to(target):
            allowed = ", ".join(p.value for p in VALID_TRANSITIONS[self._phase]) or "nothing"
            raise InvalidPhaseTransition(
                f"{self._phase.value} -> {target.value} is not allowed (next: {allowed})"
            )

        transition = PhaseTransition(self._phase, target, reason, tick, time)
        self._phase = target
        self._log.append(transition)
        for listener in self._listeners:
            listener(transition)
        return transition
