"""Randomness for the play engine.

Every random draw made during a play goes through a ``PlayRandom`` that is
handed to each component call. Nothing in the engine touches the global
``random`` module, so a seed fully determines a play.

Usage:
    rng = PlayRandom(seed=42)
    if rng.chance(0.25):
        ...
    offset = rng.uniform(34, 60) * rng.sign()
"""

from __future__ import annotations

import random
from typing import Optional, Sequence, TypeVar


T = TypeVar("T")


class PlayRandom:
    """Seedable random source.

    ``uniform``, ``chance``, ``sign`` and ``choice`` are all derived from
    ``random()``. A test double only needs to override that one method to
    script every outcome.
    """

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        """Uniform float in [0, 1)."""
        return self._rng.random()

    def uniform(self, low: float, high: float) -> float:
        return low + (high - low) * self.random()

    def chance(self, probability: float) -> bool:
        """True with the given probability."""
        return self.random() < probability

    def sign(self) -> int:
        """-1 or +1 with equal odds."""
        return -1 if self.random() < 0.5 else 1

    def choice(self, items: Sequence[T]) -> T:
        if not items:
            raise ValueError("Cannot choose from an empty sequence")
        index = min(int(self.random() * len(items)), len(items) - 1)
        return items[index]

    def __repr__(self) -> str:
        return f"PlayRandom(seed={self.seed})"


# =============================================================================
# Helpers
# =============================================================================

def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range."""
    return max(min_val, min(max_val, value))


def side_of(value: float) -> int:
    """Sign of ``value`` where zero counts as +1."""
    return -1 if value < 0 else 1
