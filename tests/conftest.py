"""Shared pytest fixtures for Scrimmage tests."""

from typing import Callable, Optional, Sequence

import pytest

from scrimmage.config import EngineConfig
from scrimmage.core.entities import DEFENSE_ROLES, Agent, AgentAttributes, Formation, Role, Team
from scrimmage.core.phases import PlayPhase
from scrimmage.core.variance import PlayRandom
from scrimmage.core.vec2 import Vec2
from scrimmage.drive import DriveContext
from scrimmage.play_state import PlayState
from scrimmage.plays.playbook import get_play
from scrimmage.roster import generate_formation, line_up


# =============================================================================
# Randomness
# =============================================================================


class ScriptedRandom(PlayRandom):
    """PlayRandom double that returns scripted draws.

    Values are handed out in order; once they run out every draw returns
    ``default``. Every derived draw (uniform, chance, sign, choice) goes
    through ``random()``, so this scripts all of them.
    """

    def __init__(self, values: Sequence[float] = (), default: float = 0.5):
        super().__init__(seed=0)
        self.values = list(values)
        self.default = default
        self.calls = 0

    def random(self) -> float:
        self.calls += 1
        if self.values:
            return self.values.pop(0)
        return self.default


@pytest.fixture
def scripted() -> Callable[..., ScriptedRandom]:
    """Factory for scripted random sources."""
    return ScriptedRandom


@pytest.fixture
def rng() -> PlayRandom:
    return PlayRandom(seed=7)


# =============================================================================
# Agents and formations
# =============================================================================


def _make_agent(role: Role, x: float = 0.0, y: float = 0.0, **attrs: float) -> Agent:
    """Create an agent at (x, y) with default attributes plus overrides."""
    team = Team.DEFENSE if role in DEFENSE_ROLES else Team.OFFENSE
    pos = Vec2(x, y)
    return Agent(
        id=role.value,
        role=role,
        team=team,
        pos=pos,
        home=pos,
        attributes=AgentAttributes(**attrs),
    )


@pytest.fixture
def make_agent() -> Callable[..., Agent]:
    return _make_agent


@pytest.fixture
def formation() -> Formation:
    """Default 22-man roster (not aligned)."""
    return generate_formation(PlayRandom(seed=1))


@pytest.fixture
def config() -> EngineConfig:
    """Engine config with the stock timings, independent of the environment."""
    return EngineConfig(
        tick_rate=1 / 60,
        seed=None,
        presnap_delay=1.0,
        postsnap_delay=1.2,
        dead_ball_delay=1.2,
        max_ticks=6000,
        log_level="INFO",
    )


# =============================================================================
# Play states
# =============================================================================


def _make_live_state(
    play: str = "four_verts",
    formation: Optional[Formation] = None,
    drive: Optional[DriveContext] = None,
) -> PlayState:
    """A play state aligned, snapped and just gone LIVE (time 0)."""
    formation = formation or generate_formation(PlayRandom(seed=1))
    call = get_play(play)
    assert call is not None
    state = PlayState(play_call=call, drive=drive or DriveContext(), formation=formation)
    line_up(formation, state.los_pix_y)
    state.ball.give_to(formation.offense[Role.QB])
    state.phase.transition_to(PlayPhase.POSTSNAP)
    state.phase.transition_to(PlayPhase.LIVE)
    state.clock.mark_event("snap")
    return state


@pytest.fixture
def make_live_state() -> Callable[..., PlayState]:
    return _make_live_state


def clear_defense(state: PlayState, y: float = 900.0) -> None:
    """Park every defender deep in the end zone, far from the action."""
    for i, defender in enumerate(state.formation.defenders()):
        defender.pos = Vec2(40 + i * 30, y)


@pytest.fixture
def park_defense() -> Callable[..., None]:
    return clear_defense
