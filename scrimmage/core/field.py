"""Field geometry and unit conversion.

The engine works in field pixels at a fixed scale of 8 pixels per yard.
The offense always attacks +Y; yard lines are measured from the offense's
own goal line, so the line of scrimmage at "the 25" sits at
(10 + 25) * 8 = 280 px from the offense's end line.
"""

from __future__ import annotations

from scrimmage.core.variance import clamp


# =============================================================================
# Constants
# =============================================================================

PX_PER_YARD = 8

FIELD_YARDS_W = 53.3
PLAYING_YARDS_H = 100
ENDZONE_YARDS = 10
FIELD_YARDS_H = PLAYING_YARDS_H + 2 * ENDZONE_YARDS

FIELD_PIX_W = round(FIELD_YARDS_W * PX_PER_YARD)    # 426
FIELD_PIX_H = FIELD_YARDS_H * PX_PER_YARD           # 960

# Waypoints stay this far inside the sidelines
ROUTE_MARGIN = 20
# Run hole is kept off the sidelines
RUN_HOLE_MARGIN = 24
# Ball closer than this to a sideline is out of bounds
OUT_OF_BOUNDS_MARGIN = 10

# Offense's goal line to score on, in absolute yards from the end line
GOAL_LINE_YARDS = ENDZONE_YARDS + PLAYING_YARDS_H

# Where a new drive starts (touchback)
DRIVE_START_LOS = 25


# =============================================================================
# Conversions
# =============================================================================

def yards_to_pix(yards: float) -> float:
    return yards * PX_PER_YARD


def pix_to_yards(pix: float) -> float:
    return pix / PX_PER_YARD


def los_pix_y(los_yards: float) -> float:
    """Pixel Y of a line of scrimmage given in yards from the offense's goal line."""
    return yards_to_pix(ENDZONE_YARDS + los_yards)


def clamp_x(x: float, margin: float = ROUTE_MARGIN) -> float:
    """Keep an X coordinate at least ``margin`` pixels inside both sidelines."""
    return clamp(x, margin, FIELD_PIX_W - margin)


def is_out_of_bounds(x: float) -> bool:
    return x < OUT_OF_BOUNDS_MARGIN or x > FIELD_PIX_W - OUT_OF_BOUNDS_MARGIN


def is_in_end_zone(y: float) -> bool:
    return pix_to_yards(y) >= GOAL_LINE_YARDS
