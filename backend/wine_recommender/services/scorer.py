"""Relevance scoring of catalog items against a user's state"""

import random
from typing import Dict, Optional, Sequence

from ..config import settings
from ..schemas.interaction import InteractionKind, InteractionRecord
from ..schemas.item import Item
from ..schemas.profile import PreferenceSet, TasteProfile
from .catalog import CatalogStore
from .taste import normalize_tag, target_vector, taste_similarity

# Score contribution of each past interaction with the same item
INTERACTION_BOOSTS: Dict[InteractionKind, float] = {
    InteractionKind.VIEWED: 0.1,
    InteractionKind.ADDED_TO_CART: 0.5,
    InteractionKind.PURCHASED: 1.0,
    InteractionKind.FAVORITED: 0.8,
    InteractionKind.RATED_HIGH: 1.0,
    InteractionKind.RATED_LOW: -2.0,
    InteractionKind.REMOVED_FROM_CART: -0.3,
    InteractionKind.UNFAVORITED: -0.3,
}

# Positive interactions carried over to other items of the same variety
CARRY_OVER_KINDS = frozenset({
    InteractionKind.PURCHASED,
    InteractionKind.FAVORITED,
    InteractionKind.RATED_HIGH,
})
CARRY_OVER_BOOST = 0.2

QUALITY_DIVISOR = 20.0  # 0..100 points -> 0..5
PREFERRED_CATEGORY_BOOST = 2.0
PREFERRED_REGION_BOOST = 1.5
TASTE_MATCH_WEIGHT = 3.0
PREFERRED_TAG_BONUS = 0.2


class RecommendationScorer:
    """
    Combines quality, declared preferences, taste match and interaction
    history into one relevance score

    score = quality / 20
          + 2.0 if the variety is preferred
          + 1.5 if the region is preferred
          + 3.0 * taste_match
          + interaction_boost
          + uniform(0, jitter)

    The jitter term is drawn from an injectable random source so that
    rankings can be pinned (seeded Random) or made deterministic (jitter=0).
    """

    def __init__(
        self,
        catalog: CatalogStore,
        random_source: Optional[random.Random] = None,
        jitter: Optional[float] = None
    ):
        self.catalog = catalog
        self.random = random_source or random.Random()
        self.jitter = settings.EXPLORATION_JITTER if jitter is None else jitter

    def passes_filters(self, item: Item, preferences: PreferenceSet) -> bool:
        """Hard constraints applied before scoring"""
        if item.category and item.category in preferences.disliked_categories:
            return False
        if item.quality_score < preferences.min_quality:
            return False
        return preferences.price_range.contains(item.price)

    def score(
        self,
        item: Item,
        profile: TasteProfile,
        preferences: PreferenceSet,
        interactions: Sequence[InteractionRecord]
    ) -> float:
        score = item.quality_score / QUALITY_DIVISOR

        if item.category and item.category in preferences.preferred_categories:
            score += PREFERRED_CATEGORY_BOOST

        if item.region and item.region in preferences.preferred_regions:
            score += PREFERRED_REGION_BOOST

        score += TASTE_MATCH_WEIGHT * self.taste_match(item, profile)
        score += self.interaction_boost(item, interactions)
        score += self._jitter()

        return score

    def taste_match(self, item: Item, profile: TasteProfile) -> float:
        """Closeness of the profile to the item's archetype, in [0, 1]"""
        match = taste_similarity(profile.params, target_vector(item))

        tag = normalize_tag(item.category)
        if tag is not None and tag in profile.preferred_tags:
            match += PREFERRED_TAG_BONUS

        return max(0.0, min(1.0, match))

    def interaction_boost(self, item: Item, interactions: Sequence[InteractionRecord]) -> float:
        boost = 0.0

        for record in interactions:
            if record.item_id == item.id:
                boost += INTERACTION_BOOSTS[record.kind]
            elif item.category and record.kind in CARRY_OVER_KINDS:
                other = self.catalog.find_by_id(record.item_id)
                if other is not None and other.category == item.category:
                    boost += CARRY_OVER_BOOST

        return boost

    def _jitter(self) -> float:
        if self.jitter <= 0:
            return 0.0
        return self.random.uniform(0, self.jitter)
