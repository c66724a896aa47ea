"""Item schemas"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, Optional


class Item(BaseModel):
    """A wine from the catalog snapshot, immutable for the session"""

    id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1, max_length=500)
    producer: Optional[str] = None
    category: Optional[str] = Field(None, max_length=100)  # grape variety
    region: Optional[str] = None
    country: Optional[str] = None
    quality_score: float = Field(default=0, ge=0, le=100)
    price: Optional[float] = Field(None, ge=0)
    description: Optional[str] = None
    style: Optional[str] = None  # red, white, rosé, sparkling, dessert

    class Config:
        frozen = True
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @field_validator("style", mode="before")
    @classmethod
    def _normalize_style(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or None
        return value

    @classmethod
    def from_catalog_record(cls, record: Dict[str, Any]) -> "Item":
        """
        Build an item from a marketplace wine record

        Args:
            record: Wine as returned by the catalog service
                (id, title, winery, variety, region_1, country, points,
                price, description, type)

        Returns:
            Item instance

        Raises:
            ValidationError: If the record lacks an id/title or has
                out-of-range values
        """
        return cls(
            id=record.get("id"),
            title=record.get("title"),
            producer=record.get("winery"),
            category=record.get("variety"),
            region=record.get("region_1"),
            country=record.get("country"),
            quality_score=record.get("points") or 0,
            price=record.get("price"),
            description=record.get("description"),
            style=record.get("type"),
        )


class ScoredItem(Item):
    """Item with a score derived for one query, never persisted"""

    relevance_score: Optional[float] = None
    similarity_score: Optional[float] = None

    @classmethod
    def from_item(cls, item: Item, **scores: float) -> "ScoredItem":
        return cls(**item.model_dump(), **scores)
