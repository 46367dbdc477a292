"""Pydantic schemas for API request/response models."""

from scrimmage.api.schemas.plays import (
    DriveContextSchema,
    EventSchema,
    PlaybookEntrySchema,
    PlayOutcomeSchema,
    SimulateRequest,
    SimulateResponse,
)

__all__ = [
    "DriveContextSchema",
    "EventSchema",
    "PlaybookEntrySchema",
    "PlayOutcomeSchema",
    "SimulateRequest",
    "SimulateResponse",
]
