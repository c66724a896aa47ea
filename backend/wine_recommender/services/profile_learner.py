"""Learning the taste profile and preferences from interactions"""

from typing import Dict, Optional

from ..config import settings
from ..schemas.interaction import InteractionKind
from ..schemas.item import Item
from ..schemas.profile import PreferenceSet, TasteProfile
from .state_store import SessionStateRepository
from .taste import interpolate, normalize_tag, target_vector
from ..utils.logging import get_logger

logger = get_logger(__name__)

# Step size toward the item's archetype; negative moves away from it
LEARNING_WEIGHTS: Dict[InteractionKind, float] = {
    InteractionKind.VIEWED: 0.02,
    InteractionKind.ADDED_TO_CART: 0.10,
    InteractionKind.PURCHASED: 0.20,
    InteractionKind.FAVORITED: 0.15,
    InteractionKind.RATED_HIGH: 0.20,
    InteractionKind.RATED_LOW: -0.10,
    InteractionKind.REMOVED_FROM_CART: -0.05,
    InteractionKind.UNFAVORITED: -0.05,
}


class ProfileLearner:
    """
    Applies one interaction to the TasteProfile and PreferenceSet

    Each interaction is a single interpolation step toward (or away from)
    the item's archetypal vector. History is never replayed, so the result
    depends on interaction order.
    """

    def __init__(
        self,
        profile: TasteProfile,
        preferences: PreferenceSet,
        repository: SessionStateRepository,
        tags_limit: Optional[int] = None
    ):
        self.profile = profile
        self.preferences = preferences
        self.repository = repository
        self.tags_limit = tags_limit or settings.PREFERRED_TAGS_LIMIT

    def learn(self, item: Item, kind: InteractionKind) -> None:
        """Update both structures for one interaction and persist them"""

        weight = LEARNING_WEIGHTS[kind]

        self._adjust_taste(item, weight)
        self._update_tags(item, weight)
        self._update_preferences(item, kind)

        self.repository.save_taste_profile(self.profile)
        self.repository.save_preferences(self.preferences)

        logger.debug(
            "Updated taste profile",
            item_id=item.id,
            kind=kind.value,
            weight=weight,
            params=self.profile.params.as_dict()
        )

    def _adjust_taste(self, item: Item, weight: float) -> None:
        params = self.profile.params
        for name, target in target_vector(item).items():
            setattr(params, name, interpolate(getattr(params, name), target, weight))

    def _update_tags(self, item: Item, weight: float) -> None:
        tag = normalize_tag(item.category)
        if weight <= 0 or tag is None or tag in self.profile.preferred_tags:
            return

        self.profile.preferred_tags.append(tag)
        while len(self.profile.preferred_tags) > self.tags_limit:
            self.profile.preferred_tags.pop(0)

    def _update_preferences(self, item: Item, kind: InteractionKind) -> None:
        if kind.is_positive:
            if item.category:
                self.preferences.prefer_category(item.category)
            if item.region:
                self.preferences.prefer_region(item.region)

        elif kind.is_strongly_negative and item.category:
            if self.preferences.dislike_category(item.category):
                logger.info("Category disliked", category=item.category, kind=kind.value)
