"""Field-pixel points and offsets.

Origin is the offense's own end line at the left sideline. +X runs toward
the right sideline, +Y runs downfield toward the end zone being attacked.
One yard is 8 pixels.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


EPSILON = 1e-4


@dataclass(frozen=True, slots=True)
class Vec2:
    """Immutable point (or offset) on the field, in pixels."""
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def zero(cls) -> Vec2:
        return cls(0.0, 0.0)

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def __add__(self, other: Vec2) -> Vec2:
        return Vec2(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Vec2) -> Vec2:
        return Vec2(self.x - other.x, self.y - other.y)

    def __mul__(self, scalar: float) -> Vec2:
        return Vec2(self.x * scalar, self.y * scalar)

    # =========================================================================
    # Geometry
    # =========================================================================

    def length(self) -> float:
        return math.hypot(self.x, self.y)

    def distance_to(self, other: Vec2) -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def normalized(self) -> Vec2:
        """Unit vector, or zero for a (near) zero-length vector."""
        length = self.length()
        if length < EPSILON:
            return Vec2.zero()
        return Vec2(self.x / length, self.y / length)

    def lerp(self, other: Vec2, t: float) -> Vec2:
        """Point ``t`` of the way from here to ``other``."""
        return Vec2(self.x + (other.x - self.x) * t, self.y + (other.y - self.y) * t)

    def with_x(self, x: float) -> Vec2:
        return Vec2(x, self.y)

    def with_y(self, y: float) -> Vec2:
        return Vec2(self.x, y)

    def __repr__(self) -> str:
        return f"Vec2({self.x:.2f}, {self.y:.2f})"
