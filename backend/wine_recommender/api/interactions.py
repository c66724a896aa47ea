"""Interaction API endpoints"""

from fastapi import APIRouter, Depends, Request, Response, status
from typing import List

from ..config import settings
from ..schemas.interaction import InteractionCreate, InteractionRecord, InteractionResponse
from ..services.engine import RecommendationEngine
from ..utils.dependencies import get_engine
from ..utils.rate_limit import limiter

router = APIRouter()


@router.post("", response_model=InteractionResponse, status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.INTERACTION_RATE_LIMIT)
async def create_interaction(
    request: Request,
    response: Response,
    interaction: InteractionCreate,
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Record a user interaction with a wine

    Interactions with wines missing from the session's catalog are accepted
    but ignored (202, `recorded=false`).
    """
    record = await engine.record_interaction(interaction.item_id, interaction.kind)

    if record is None:
        response.status_code = status.HTTP_202_ACCEPTED
        return InteractionResponse(recorded=False)

    return InteractionResponse(recorded=True, interaction=record)


@router.get("", response_model=List[InteractionRecord])
async def list_interactions(engine: RecommendationEngine = Depends(get_engine)):
    """Get the session's interaction log, oldest first"""
    return engine.get_interactions()
