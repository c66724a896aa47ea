"""Interaction schemas"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Optional
from datetime import datetime, timezone
from enum import Enum


class InteractionKind(str, Enum):
    """User actions recorded against catalog items"""

    VIEWED = "viewed"
    ADDED_TO_CART = "added_to_cart"
    REMOVED_FROM_CART = "removed_from_cart"
    FAVORITED = "favorited"
    UNFAVORITED = "unfavorited"
    PURCHASED = "purchased"
    RATED_HIGH = "rated_high"
    RATED_LOW = "rated_low"

    @property
    def is_positive(self) -> bool:
        """Interactions that merge the item into the preferred sets"""
        return self in POSITIVE_KINDS

    @property
    def is_strongly_negative(self) -> bool:
        """Interactions that mark the item's category as disliked"""
        return self in NEGATIVE_KINDS


POSITIVE_KINDS = frozenset({
    InteractionKind.ADDED_TO_CART,
    InteractionKind.FAVORITED,
    InteractionKind.PURCHASED,
    InteractionKind.RATED_HIGH,
})

NEGATIVE_KINDS = frozenset({
    InteractionKind.RATED_LOW,
    InteractionKind.REMOVED_FROM_CART,
})


class InteractionBase(BaseModel):
    """Base interaction schema"""

    item_id: str = Field(..., min_length=1)
    kind: InteractionKind

    class Config:
        alias_generator = to_camel
        populate_by_name = True

    @field_validator("item_id", mode="before")
    @classmethod
    def _coerce_item_id(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value


class InteractionCreate(InteractionBase):
    """Schema for recording an interaction"""

    pass


class InteractionRecord(InteractionBase):
    """A timestamped entry of the interaction log"""

    timestamp: datetime

    class Config:
        frozen = True

    @field_validator("timestamp")
    @classmethod
    def _assume_utc(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class InteractionResponse(BaseModel):
    """Schema for the result of recording an interaction"""

    recorded: bool
    interaction: Optional[InteractionRecord] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True
