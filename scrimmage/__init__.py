"""Scrimmage - live-play engine for American football.

A play runs PRESNAP -> POSTSNAP -> LIVE -> DEAD on a fixed time step:
- Single coordinate system (field pixels, 8 px per yard, +Y downfield)
- One mutable play state, grouped by owning component
- Injectable seeded randomness for reproducible plays
"""

__version__ = "0.1.0"
