"""Recommendation API endpoints"""

from fastapi import APIRouter, Depends, Query
from typing import List, Optional
from datetime import datetime, timezone

from ..schemas.item import Item, ScoredItem
from ..schemas.recommendation import RecommendationResponse, RecommendationView
from ..services.engine import RecommendationEngine
from ..utils.dependencies import get_engine

router = APIRouter()


def _response(
    engine: RecommendationEngine,
    view: RecommendationView,
    items: List[Item],
    **extra: Optional[str]
) -> RecommendationResponse:
    return RecommendationResponse(
        session_id=engine.session_id,
        view=view,
        items=[item if isinstance(item, ScoredItem) else ScoredItem.from_item(item) for item in items],
        generated_at=datetime.now(timezone.utc),
        **extra
    )


@router.get("/personalized", response_model=RecommendationResponse)
async def get_personalized(
    limit: int = Query(10, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_engine)
):
    """
    Get personalized recommendations

    Wines outside the session's price band, below its minimum rating or of a
    disliked variety are never returned.
    """
    items = await engine.get_personalized(limit)
    return _response(engine, RecommendationView.PERSONALIZED, items)


@router.get("/similar/{item_id}", response_model=RecommendationResponse)
async def get_similar(
    item_id: str,
    limit: int = Query(4, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get wines similar to a specific wine (empty for unknown wines)"""
    items = await engine.get_similar(item_id, limit)
    return _response(engine, RecommendationView.SIMILAR, items, source_item_id=item_id)


@router.get("/trending", response_model=RecommendationResponse)
async def get_trending(
    limit: int = Query(6, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get wines with the most activity in the last 30 days"""
    items = await engine.get_trending(limit)
    return _response(engine, RecommendationView.TRENDING, items)


@router.get("/seasonal", response_model=RecommendationResponse)
async def get_seasonal(
    limit: int = Query(6, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get wines suited to the current season"""
    items = await engine.get_seasonal(limit)
    return _response(engine, RecommendationView.SEASONAL, items)


@router.get("/meal-pairing", response_model=RecommendationResponse)
async def get_meal_pairing(
    meal: str = Query(..., min_length=1, max_length=200, description="Meal or cuisine, e.g. 'grilled steak'"),
    limit: int = Query(6, ge=1, le=100),
    engine: RecommendationEngine = Depends(get_engine)
):
    """Get wines pairing with a meal"""
    items = await engine.get_meal_pairing(meal, limit)
    return _response(engine, RecommendationView.MEAL_PAIRING, items, meal=meal)
