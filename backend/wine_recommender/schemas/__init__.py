"""Pydantic schemas for engine state and request/response validation"""

from .item import Item, ScoredItem
from .interaction import (
    InteractionKind,
    InteractionCreate,
    InteractionRecord,
    InteractionResponse,
)
from .profile import (
    TasteParameters,
    TasteProfile,
    PriceRange,
    PreferenceSet,
    PreferenceUpdate,
    ProfileResponse,
)
from .recommendation import RecommendationView, RecommendationResponse

__all__ = [
    "Item",
    "ScoredItem",
    "InteractionKind",
    "InteractionCreate",
    "InteractionRecord",
    "InteractionResponse",
    "TasteParameters",
    "TasteProfile",
    "PriceRange",
    "PreferenceSet",
    "PreferenceUpdate",
    "ProfileResponse",
    "RecommendationView",
    "RecommendationResponse",
]
