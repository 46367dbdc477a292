"""REST API router for running plays."""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException

from scrimmage.api.schemas.plays import (
    DriveContextSchema,
    PlaybookEntrySchema,
    PlayOutcomeSchema,
    SimulateRequest,
    SimulateResponse,
)
from scrimmage.config import get_config
from scrimmage.core.variance import PlayRandom
from scrimmage.orchestrator import Orchestrator, PlayCaller, PlayStalledError
from scrimmage.plays.playbook import PLAYBOOK, get_play
from scrimmage.roster import generate_formation

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/plays", tags=["plays"])


@router.get("/playbook", response_model=list[PlaybookEntrySchema])
async def get_playbook() -> list[PlaybookEntrySchema]:
    """List the built-in play calls."""
    return [PlaybookEntrySchema.from_call(key, call) for key, call in PLAYBOOK.items()]


@router.post("/simulate", response_model=SimulateResponse)
def simulate_plays(request: Optional[SimulateRequest] = None) -> SimulateResponse:
    """Run one or more plays on a fresh roster and return the settled outcomes."""
    if request is None:
        request = SimulateRequest()

    play_caller: Optional[PlayCaller] = None
    if request.play is not None:
        call = get_play(request.play)
        if call is None:
            raise HTTPException(status_code=404, detail=f"Play not found: {request.play}")

        def fixed_call(context, rng):
            return call

        play_caller = fixed_call

    rng = PlayRandom(request.seed)
    orchestrator = Orchestrator(
        generate_formation(rng),
        drive=request.drive.to_context(),
        config=get_config(),
        rng=rng,
        play_caller=play_caller,
    )

    try:
        outcomes = orchestrator.run_plays(request.plays)
    except PlayStalledError as e:
        logger.error("Simulation stalled: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    return SimulateResponse(
        seed=request.seed,
        outcomes=[PlayOutcomeSchema.from_outcome(o, request.include_events) for o in outcomes],
        next_drive=DriveContextSchema.from_context(orchestrator.drive.context),
    )
