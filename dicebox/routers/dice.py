"""Dice rolling and health check routes."""

from __future__ import annotations

from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from dicebox.dependencies import get_random_source
from dicebox.expression import RollMode
from dicebox.rng import RandomSource
from dicebox.schemas import HealthResponse, RollRequest, RollResponse
from dicebox.service import roll

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="healthy", timestamp=datetime.now(timezone.utc))


@router.post("/dice/roll", response_model=RollResponse, response_model_exclude_none=True)
def roll_dice(
    body: RollRequest,
    source: RandomSource = Depends(get_random_source),
) -> RollResponse:
    """Roll a dice expression, optionally with advantage or disadvantage.

    Dicebox errors raised here are rendered by the handlers in main.py.
    """
    record = roll(body.expression, body.advantage_mode or RollMode.none, source=source)
    return RollResponse.from_record(record)
