"""Read-only recommendation views over the current engine state"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, NamedTuple, Optional, Sequence, Tuple

from ..config import settings
from ..exceptions import UnknownItem
from ..schemas.interaction import InteractionKind, InteractionRecord
from ..schemas.item import Item, ScoredItem
from ..schemas.profile import PreferenceSet, TasteProfile
from .catalog import CatalogStore
from .scorer import RecommendationScorer
from .similarity import SimilarityEngine
from ..utils.logging import get_logger
from ..utils.metrics import track_view_time

logger = get_logger(__name__)


class Pairing(NamedTuple):
    """Variety keywords (substring match) and styles (exact match)"""

    categories: Tuple[str, ...]
    styles: Tuple[str, ...]


# Weighted interaction counts for trending; other kinds do not count
TRENDING_WEIGHTS: Dict[InteractionKind, int] = {
    InteractionKind.VIEWED: 1,
    InteractionKind.ADDED_TO_CART: 3,
    InteractionKind.PURCHASED: 5,
    InteractionKind.FAVORITED: 3,
}

SEASONAL_PAIRINGS: Dict[str, Pairing] = {
    # Light reds, aromatic whites
    "spring": Pairing(("pinot noir", "riesling", "sauvignon blanc", "rosé"), ()),
    # Crisp whites, rosés
    "summer": Pairing(("pinot grigio", "sauvignon blanc", "rosé"), ("white", "rosé")),
    # Medium-bodied reds, fuller whites
    "fall": Pairing(("merlot", "syrah", "zinfandel", "chardonnay"), ()),
    # Full-bodied reds, fortified
    "winter": Pairing(("cabernet", "malbec", "shiraz", "port"), ()),
}

MEAL_PAIRINGS: Dict[str, Pairing] = {
    "beef": Pairing(("cabernet sauvignon", "malbec", "syrah", "merlot"), ("red",)),
    "steak": Pairing(("cabernet sauvignon", "malbec", "syrah"), ("red",)),
    "lamb": Pairing(("cabernet sauvignon", "syrah", "merlot", "pinot noir"), ("red",)),
    "pork": Pairing(("pinot noir", "merlot", "zinfandel", "chardonnay"), ("red", "white")),
    "chicken": Pairing(("chardonnay", "pinot noir", "sauvignon blanc", "riesling"), ("red", "white")),
    "turkey": Pairing(("pinot noir", "zinfandel", "chardonnay", "riesling"), ("red", "white")),
    "fish": Pairing(("sauvignon blanc", "pinot grigio", "chardonnay", "albariño"), ("white",)),
    "salmon": Pairing(("pinot noir", "chardonnay", "rosé"), ("red", "white", "rosé")),
    "seafood": Pairing(("sauvignon blanc", "pinot grigio", "albariño", "champagne"), ("white", "sparkling")),
    "pasta": Pairing(("sangiovese", "nebbiolo", "pinot noir", "chardonnay"), ("red", "white")),
    "pizza": Pairing(("sangiovese", "barbera", "zinfandel"), ("red",)),
    "cheese": Pairing(("cabernet sauvignon", "chardonnay", "champagne", "port"), ("red", "white", "sparkling", "dessert")),
    "dessert": Pairing(("moscato", "riesling", "port", "sauternes"), ("dessert", "white")),
    "chocolate": Pairing(("port", "cabernet sauvignon", "zinfandel"), ("dessert", "red")),
    "spicy": Pairing(("riesling", "gewürztraminer", "zinfandel"), ("white", "red")),
    "vegetarian": Pairing(("pinot noir", "sauvignon blanc", "riesling"), ("red", "white")),
}

DEFAULT_MEAL_PAIRING = Pairing(
    ("cabernet sauvignon", "chardonnay", "pinot noir", "sauvignon blanc"),
    ("red", "white"),
)


def season_for_month(month_index: int) -> str:
    """Season of a zero-based month index (0 = January)"""
    if 2 <= month_index <= 4:
        return "spring"
    if 5 <= month_index <= 7:
        return "summer"
    if 8 <= month_index <= 10:
        return "fall"
    return "winter"


def match_meal(meal: str) -> Pairing:
    """
    Pick the pairing for a free-text meal description

    Dictionary keys are matched as case-insensitive substrings; the longest
    matching key wins (first in dictionary order on equal length). Falls
    back to the general pairing.
    """
    text = meal.lower()
    matches = [key for key in MEAL_PAIRINGS if key in text]
    if not matches:
        return DEFAULT_MEAL_PAIRING

    best = max(matches, key=len)
    return MEAL_PAIRINGS[best]


def matches_pairing(item: Item, pairing: Pairing) -> bool:
    variety = (item.category or "").lower()
    if variety and any(keyword in variety for keyword in pairing.categories):
        return True
    return item.style is not None and item.style in pairing.styles


def by_quality(items: Iterable[Item]) -> List[Item]:
    return sorted(items, key=lambda item: item.quality_score, reverse=True)


class RecommendationViews:
    """
    Query functions backing the recommendation panels

    All views read the current catalog, profile, preferences and log and
    never mutate them.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        scorer: RecommendationScorer,
        similarity_engine: SimilarityEngine,
        trending_window_days: Optional[int] = None
    ):
        self.catalog = catalog
        self.scorer = scorer
        self.similarity_engine = similarity_engine
        self.trending_window = timedelta(days=trending_window_days or settings.TRENDING_WINDOW_DAYS)

    @track_view_time("personalized")
    def personalized(
        self,
        profile: TasteProfile,
        preferences: PreferenceSet,
        interactions: Sequence[InteractionRecord],
        limit: int
    ) -> List[ScoredItem]:
        """Top items by relevance among those passing the hard filters"""
        if limit <= 0:
            return []

        candidates = [item for item in self.catalog.items if self.scorer.passes_filters(item, preferences)]

        scored = [
            ScoredItem.from_item(
                item,
                relevance_score=self.scorer.score(item, profile, preferences, interactions)
            )
            for item in candidates
        ]
        scored.sort(key=lambda s: s.relevance_score, reverse=True)

        logger.debug(
            "Ranked personalized candidates",
            catalog_size=len(self.catalog),
            candidates=len(candidates)
        )

        return scored[:limit]

    @track_view_time("similar")
    def similar(self, item_id: str, limit: int) -> List[ScoredItem]:
        try:
            source = self.catalog.get(item_id)
        except UnknownItem:
            logger.info("Similar items requested for unknown item", item_id=item_id)
            return []

        return self.similarity_engine.find_similar(source, self.catalog.items, limit)

    @track_view_time("trending")
    def trending(self, interactions: Sequence[InteractionRecord], limit: int, now: datetime) -> List[Item]:
        """Items ranked by weighted interaction counts in the trailing window"""
        if limit <= 0:
            return []

        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        cutoff = now - self.trending_window
        counts: Dict[str, int] = {}

        for record in interactions:
            if record.timestamp < cutoff:
                continue
            weight = TRENDING_WEIGHTS.get(record.kind, 0)
            if weight:
                counts[record.item_id] = counts.get(record.item_id, 0) + weight

        trending = [
            self.catalog.find_by_id(item_id)
            for item_id in counts
            if item_id in self.catalog
        ]
        trending.sort(key=lambda item: (counts[item.id], item.quality_score), reverse=True)

        return self._pad_with_top_quality(trending, limit)

    @track_view_time("seasonal")
    def seasonal(self, limit: int, now: datetime) -> List[Item]:
        """Highest-rated wines for the season of `now`"""
        if limit <= 0:
            return []

        season = season_for_month(now.month - 1)
        pairing = SEASONAL_PAIRINGS[season]

        seasonal = by_quality(item for item in self.catalog.items if matches_pairing(item, pairing))

        logger.debug("Selected seasonal wines", season=season, matches=len(seasonal))

        return self._pad_with_top_quality(seasonal, limit)

    @track_view_time("meal_pairing")
    def meal_pairing(self, meal: str, limit: int) -> List[Item]:
        """Highest-rated wines matching the pairing for a meal description"""
        if limit <= 0 or not meal or not meal.strip():
            return []

        pairing = match_meal(meal)
        matches = by_quality(item for item in self.catalog.items if matches_pairing(item, pairing))

        return matches[:limit]

    def _pad_with_top_quality(self, selected: List[Item], limit: int) -> List[Item]:
        """Fill up to `limit` with the best-rated items not already selected"""
        result = selected[:limit]
        if len(result) >= limit:
            return result

        seen = {item.id for item in result}
        for item in by_quality(self.catalog.items):
            if len(result) >= limit:
                break
            if item.id not in seen:
                result.append(item)
                seen.add(item.id)

        return result
