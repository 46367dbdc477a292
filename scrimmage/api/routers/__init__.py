"""API routers for different resource types."""

from scrimmage.api.routers.plays import router as plays_router

__all__ = [
    "plays_router",
]
