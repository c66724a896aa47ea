"""Taste profile and preference schemas"""

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel
from typing import Dict, List, Optional

from ..config import settings


# Python names of the taste parameters, in persisted order
TASTE_PARAMETERS = (
    "sweetness",
    "acidity",
    "tannin",
    "body",
    "fruit_forward",
    "earthiness",
    "oakiness",
)


class CamelModel(BaseModel):
    """Base schema persisted and served with camelCase keys"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        validate_assignment = True


class TasteParameters(CamelModel):
    """Normalized flavor preferences, 0 (less) to 1 (more)"""

    sweetness: float = Field(default=0.5, ge=0, le=1)  # 0 dry, 1 sweet
    acidity: float = Field(default=0.5, ge=0, le=1)
    tannin: float = Field(default=0.5, ge=0, le=1)  # 0 soft, 1 firm
    body: float = Field(default=0.5, ge=0, le=1)  # 0 light, 1 full
    fruit_forward: float = Field(default=0.5, ge=0, le=1)
    earthiness: float = Field(default=0.5, ge=0, le=1)
    oakiness: float = Field(default=0.5, ge=0, le=1)

    def as_dict(self) -> Dict[str, float]:
        return {name: getattr(self, name) for name in TASTE_PARAMETERS}


class TasteProfile(CamelModel):
    """Learned taste vector plus recently liked variety tags"""

    params: TasteParameters = Field(default_factory=TasteParameters)
    preferred_tags: List[str] = Field(default_factory=list)


class PriceRange(CamelModel):
    """Inclusive price band"""

    min: float = Field(default_factory=lambda: settings.DEFAULT_PRICE_MIN, ge=0)
    max: float = Field(default_factory=lambda: settings.DEFAULT_PRICE_MAX, ge=0)

    @model_validator(mode="after")
    def _check_bounds(self) -> "PriceRange":
        if self.min > self.max:
            raise ValueError("price range min must not exceed max")
        return self

    def contains(self, price: Optional[float]) -> bool:
        """Items without a price are never excluded by the band"""
        if price is None:
            return True
        return self.min <= price <= self.max


class PreferenceSet(CamelModel):
    """User-declared filters and the categories/regions learned from behavior"""

    min_quality: float = Field(default_factory=lambda: settings.DEFAULT_MIN_QUALITY, ge=0, le=100)
    price_range: PriceRange = Field(default_factory=PriceRange)
    preferred_categories: List[str] = Field(default_factory=list)
    preferred_regions: List[str] = Field(default_factory=list)
    preferred_styles: List[str] = Field(default_factory=list)
    disliked_categories: List[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_exclusive(self) -> "PreferenceSet":
        overlap = set(self.preferred_categories) & set(self.disliked_categories)
        if overlap:
            raise ValueError(f"categories both preferred and disliked: {sorted(overlap)}")
        return self

    def prefer_category(self, category: str) -> bool:
        """Add to preferred categories, dropping it from the disliked set"""
        changed = False
        if category in self.disliked_categories:
            self.disliked_categories.remove(category)
            changed = True
        if category not in self.preferred_categories:
            self.preferred_categories.append(category)
            changed = True
        return changed

    def dislike_category(self, category: str) -> bool:
        """Add to disliked categories, dropping it from the preferred set"""
        changed = False
        if category in self.preferred_categories:
            self.preferred_categories.remove(category)
            changed = True
        if category not in self.disliked_categories:
            self.disliked_categories.append(category)
            changed = True
        return changed

    def prefer_region(self, region: str) -> bool:
        if region in self.preferred_regions:
            return False
        self.preferred_regions.append(region)
        return True

    def prefer_style(self, style: str) -> bool:
        if style in self.preferred_styles:
            return False
        self.preferred_styles.append(style)
        return True


class PreferenceUpdate(CamelModel):
    """Explicit filter submission from the storefront"""

    min_quality: Optional[float] = Field(None, ge=0, le=100)
    price_range: Optional[PriceRange] = None
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    region: Optional[str] = Field(None, min_length=1)
    style: Optional[str] = Field(None, min_length=1)


class ProfileResponse(CamelModel):
    """Schema for the session profile response"""

    session_id: str
    taste_profile: TasteProfile
    preferences: PreferenceSet
