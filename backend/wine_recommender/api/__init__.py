"""API routes"""

from fastapi import APIRouter
from .recommendations import router as recommendations_router
from .interactions import router as interactions_router
from .profile import router as profile_router

api_router = APIRouter()

api_router.include_router(
    recommendations_router,
    prefix="/sessions/{session_id}/recommendations",
    tags=["recommendations"]
)
api_router.include_router(
    interactions_router,
    prefix="/sessions/{session_id}/interactions",
    tags=["interactions"]
)
api_router.include_router(profile_router, prefix="/sessions/{session_id}", tags=["profile"])
