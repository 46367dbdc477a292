"""Orchestrator - the live-play loop.

The orchestrator owns the drive, the current play state and the
resolvers, and advances everything one fixed step at a time.

Play Lifecycle:
    1. PRESNAP  - Formation aligned at the line of scrimmage
    2. POSTSNAP - Ball snapped to the QB, nobody moves yet
    3. LIVE     - Every component runs each tick in a fixed order
    4. DEAD     - Whistle blown; after a short delay the play is settled
                  and a fresh play is set up for the next snap

Live tick order:
    assignments -> offensive line -> block contacts -> receivers
    -> quarterback (+ handoff/throw) -> running back -> defense
    -> tackles -> ball flight -> wrap freeze -> dead-ball check

Once the play goes dead, nothing later in the order runs.

Usage:
    orch = Orchestrator(generate_formation(rng), rng=rng)
    outcome = orch.run_play()
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional

from scrimmage.ai.ballcarrier_brain import move_running_back
from scrimmage.ai.defense_brain import move_defense
from scrimmage.ai.ol_brain import move_offensive_line
from scrimmage.ai.qb_brain import qb_brain
from scrimmage.ai.receiver_brain import move_receivers
from scrimmage.config import EngineConfig, get_config
from scrimmage.core.entities import Formation, Role
from scrimmage.core.events import EventBus, EventType
from scrimmage.core.field import is_in_end_zone, is_out_of_bounds
from scrimmage.core.phases import PhaseTransition, PlayPhase
from scrimmage.core.variance import PlayRandom
from scrimmage.drive import (
    DeadBallReason,
    DriveContext,
    DriveManager,
    OutcomeCallback,
    PlayOutcome,
    settle_play,
)
from scrimmage.play_state import PlayState
from scrimmage.plays.playbook import PLAYBOOK, PlayCall
from scrimmage.resolution.blocking import BlockResolver
from scrimmage.resolution.tackle import TackleResolver
from scrimmage.roster import line_up
from scrimmage.systems.assignments import initialize_assignments
from scrimmage.systems.passing import PassingSystem


logger = logging.getLogger(__name__)


PlayCaller = Callable[[DriveContext, PlayRandom], PlayCall]


class PlayStalledError(RuntimeError):
    """Raised when a play does not settle within its tick budget."""
    pass


def random_play_call(context: DriveContext, rng: PlayRandom) -> PlayCall:
    """Default play caller: any call from the built-in playbook."""
    return rng.choice(list(PLAYBOOK.values()))


# =============================================================================
# Dead-ball check
# =============================================================================

def check_dead_ball(state: PlayState, event_bus: Optional[EventBus] = None) -> Optional[DeadBallReason]:
    """End the play if the carried ball crossed the goal line or a sideline.

    A ball in the air is never checked. Touchdown wins over out of bounds.
    """
    if not state.is_live or state.ball.in_air:
        return None
    carrier = state.carrier
    if carrier is None:
        return None

    spot = state.ball_position()
    if is_in_end_zone(spot.y):
        reason, event_type, description = DeadBallReason.TOUCHDOWN, EventType.TOUCHDOWN, "Touchdown"
    elif is_out_of_bounds(spot.x):
        reason, event_type, description = (
            DeadBallReason.OUT_OF_BOUNDS, EventType.OUT_OF_BOUNDS, "Out of bounds",
        )
    else:
        return None

    if event_bus is not None:
        event_bus.emit_simple(
            event_type,
            tick=state.clock.tick_count,
            time=state.elapsed,
            player_id=carrier.id,
            description=description,
            x=spot.x,
            y=spot.y,
        )
    state.end_play(reason, description=description)
    return reason


# =============================================================================
# Orchestrator
# =============================================================================

class Orchestrator:
    """Runs plays back to back on one drive.

    Args:
        formation: The 22 agents; reused (and realigned) for every play
        drive: Down, distance and LOS for the first snap
        config: Engine timing; defaults to the environment config
        rng: Random source for every roll; defaults to ``PlayRandom(config.seed)``
        play_caller: Picks the call for each snap
        event_bus: Receives every play event
        on_play_complete: Called with each settled ``PlayOutcome``
    """

    def __init__(
        self,
        formation: Formation,
        drive: Optional[DriveContext] = None,
        config: Optional[EngineConfig] = None,
        rng: Optional[PlayRandom] = None,
        play_caller: Optional[PlayCaller] = None,
        event_bus: Optional[EventBus] = None,
        on_play_complete: Optional[OutcomeCallback] = None,
    ):
        self.config = config or get_config()
        errors = self.config.validate()
        if errors:
            raise ValueError(f"Invalid engine config: {'; '.join(errors)}")

        formation.validate()
        self.formation = formation
        self.rng = rng or PlayRandom(self.config.seed)
        self.event_bus = event_bus if event_bus is not None else EventBus()
        self.drive = DriveManager(drive, on_play_complete)
        self._play_caller = play_caller or random_play_call

        # Systems
        self.block_resolver = BlockResolver(self.event_bus)
        self.tackle_resolver = TackleResolver(self.event_bus)
        self.passing_system = PassingSystem(self.event_bus)

        self._event_start = 0
        self.state = self.new_play()

    # =========================================================================
    # Setup
    # =========================================================================

    def new_play(self, play_call: Optional[PlayCall] = None) -> PlayState:
        """Line up for the next snap and replace the current play state."""
        context = self.drive.context
        call = play_call or self._play_caller(context, self.rng)

        state = PlayState(play_call=call, drive=context, formation=self.formation)
        line_up(self.formation, state.los_pix_y)
        state.ball.render_pos = self.formation.offense[Role.C].pos
        state.phase.on_transition(self._on_phase_change)

        self.state = state
        self._event_start = len(self.event_bus)
        logger.info("Lined up: %s, %s", context.format(), call.name)
        return state

    def _on_phase_change(self, transition: PhaseTransition) -> None:
        self.event_bus.emit_simple(
            EventType.PHASE_CHANGE,
            tick=transition.tick,
            time=transition.time,
            description=f"{transition.from_phase.value} -> {transition.to_phase.value}",
            from_phase=transition.from_phase.value,
            to_phase=transition.to_phase.value,
            reason=transition.reason,
        )

    @property
    def phase(self) -> PlayPhase:
        return self.state.phase.phase

    # =========================================================================
    # Main loop
    # =========================================================================

    def step(self, dt: float) -> Optional[PlayOutcome]:
        """Advance the current play by ``dt`` seconds.

        Returns:
            The settled outcome if the play was settled during this step
        """
        state = self.state
        state.clock.advance(dt)
        phase = state.phase.phase

        if phase == PlayPhase.PRESNAP:
            if state.elapsed > self.config.presnap_delay:
                self._snap(state)
        elif phase == PlayPhase.POSTSNAP:
            if state.elapsed > self.config.postsnap_delay:
                state.phase.transition_to(
                    PlayPhase.LIVE, reason="live", tick=state.clock.tick_count, time=state.elapsed,
                )
                state.clock.mark_event("snap")
                self._run_live(state, dt)
        elif phase == PlayPhase.LIVE:
            self._run_live(state, dt)
        elif phase == PlayPhase.DEAD:
            dead_at = state.resolution.dead_at
            if dead_at is not None and state.elapsed > dead_at + self.config.dead_ball_delay:
                return self._settle(state)
        else:
            raise ValueError(f"Unhandled play phase: {phase}")
        return None

    def run_play(self, max_ticks: Optional[int] = None) -> PlayOutcome:
        """Step at the configured tick rate until the current play settles.

        Raises:
            PlayStalledError: If the play has not settled after ``max_ticks``
        """
        limit = max_ticks if max_ticks is not None else self.config.max_ticks
        call = self.state.play_call.name
        for _ in range(limit):
            outcome = self.step(self.config.tick_rate)
            if outcome is not None:
                return outcome
        raise PlayStalledError(
            f"{call} did not settle within {limit} ticks (phase {self.phase.value})"
        )

    def run_plays(self, count: int, max_ticks: Optional[int] = None) -> List[PlayOutcome]:
        """Run ``count`` plays in a row on the running drive."""
        return [self.run_play(max_ticks) for _ in range(count)]

    # =========================================================================
    # Phases
    # =========================================================================

    def _snap(self, state: PlayState) -> None:
        qb = self.formation.offense[Role.QB]
        state.phase.transition_to(
            PlayPhase.POSTSNAP, reason="snap", tick=state.clock.tick_count, time=state.elapsed,
        )
        state.ball.give_to(qb)
        self.event_bus.emit_simple(
            EventType.SNAP,
            tick=state.clock.tick_count,
            time=state.elapsed,
            player_id=qb.id,
            description=f"Snap: {state.play_call.name}",
        )
        logger.info("Snap: %s", state.play_call.name)

    def _run_live(self, state: PlayState, dt: float) -> None:
        """Run every live component once, in order, stopping at the whistle."""
        rng = self.rng

        initialize_assignments(state, rng)
        state.ball.check_invariant()

        move_offensive_line(state, dt, self.block_resolver)
        self.block_resolver.resolve_contacts(state, dt, rng)
        move_receivers(state, dt, rng)

        decision = qb_brain(state, dt, rng)
        if decision.scramble_started:
            self.event_bus.emit_simple(
                EventType.SCRAMBLE_INITIATED,
                tick=state.clock.tick_count,
                time=state.elapsed,
                player_id=state.qb_agent.id,
                description="QB leaves the pocket",
                mode=state.qb.scramble_mode.value if state.qb.scramble_mode else None,
            )
        self.passing_system.apply_decision(state, decision)

        move_running_back(state, dt, rng)
        move_defense(state, dt, rng)

        if not state.ball.in_air:
            self.tackle_resolver.update(state, dt, rng)
            if not state.is_live:
                return

        self.passing_system.update(state, dt, rng)
        if not state.is_live:
            return

        self.tackle_resolver.freeze_carrier(state)
        check_dead_ball(state, self.event_bus)

    def _settle(self, state: PlayState) -> PlayOutcome:
        outcome = settle_play(state)
        self.event_bus.emit_simple(
            EventType.PLAY_END,
            tick=state.clock.tick_count,
            time=state.elapsed,
            description=outcome.format_summary(),
            result=outcome.result.value,
            yards=outcome.yards,
        )
        outcome.events = list(self.event_bus.history[self._event_start:])
        self.drive.record(outcome)
        self.new_play()
        return outcome
