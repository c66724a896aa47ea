"""Recommendation schemas"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from enum import Enum

from .item import ScoredItem


class RecommendationView(str, Enum):
    """Recommendation panels exposed to the storefront"""

    PERSONALIZED = "personalized"
    SIMILAR = "similar"
    TRENDING = "trending"
    SEASONAL = "seasonal"
    MEAL_PAIRING = "meal_pairing"


class RecommendationResponse(BaseModel):
    """Schema for a ranked recommendation list"""

    session_id: str
    view: RecommendationView
    items: List[ScoredItem]
    generated_at: datetime
    source_item_id: Optional[str] = None
    meal: Optional[str] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
