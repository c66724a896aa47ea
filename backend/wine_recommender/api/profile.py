"""Taste profile and preference API endpoints"""

from fastapi import APIRouter, Depends

from ..schemas.profile import PreferenceSet, PreferenceUpdate, ProfileResponse
from ..services.engine import RecommendationEngine
from ..utils.dependencies import get_engine

router = APIRouter()


@router.get("/profile", response_model=ProfileResponse)
async def get_profile(engine: RecommendationEngine = Depends(get_engine)):
    """Get the learned taste profile and current preferences"""
    return ProfileResponse(
        session_id=engine.session_id,
        taste_profile=engine.get_taste_profile(),
        preferences=engine.get_preferences()
    )


@router.put("/preferences", response_model=PreferenceSet)
async def update_preferences(
    update: PreferenceUpdate,
    engine: RecommendationEngine = Depends(get_engine)
):
    """Apply the storefront filter form (price band, minimum rating, variety, region)"""
    return await engine.update_preferences(update)
