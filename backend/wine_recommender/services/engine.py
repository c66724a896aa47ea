"""Per-session recommendation engine"""

import random
from datetime import datetime
from typing import Callable, List, Optional, Union

from ..config import settings
from ..schemas.interaction import InteractionKind, InteractionRecord
from ..schemas.item import Item, ScoredItem
from ..schemas.profile import PreferenceSet, PreferenceUpdate, TasteProfile
from .catalog import CatalogSource, CatalogStore
from .interaction_log import InteractionLog, utcnow
from .profile_learner import ProfileLearner
from .scorer import RecommendationScorer
from .similarity import SimilarityEngine
from .state_store import SessionStateRepository, StateStore
from .views import RecommendationViews
from ..utils.logging import get_logger
from ..utils.metrics import record_interaction, record_recommendations

logger = get_logger(__name__)


class RecommendationEngine:
    """
    Recommendation engine owning one session's state

    Built from an injected catalog source and state store; instances share
    nothing, so several engines (users, tests) can coexist. State is loaded
    from the store on construction, the catalog on `initialize()` or lazily
    on the first query. Every mutation is written back synchronously, one at
    a time, in interaction order.
    """

    def __init__(
        self,
        catalog_source: CatalogSource,
        state_store: StateStore,
        session_id: str = "default",
        random_source: Optional[random.Random] = None,
        jitter: Optional[float] = None,
        clock: Optional[Callable[[], datetime]] = None,
        namespace: Optional[str] = None
    ):
        self.session_id = session_id
        self.clock = clock or utcnow
        self.logger = logger.bind(session_id=session_id)

        self.catalog = CatalogStore(catalog_source)
        self.repository = SessionStateRepository(state_store, session_id, namespace)

        self.taste_profile = self.repository.load_taste_profile()
        self.preferences = self.repository.load_preferences()
        self.interaction_log = InteractionLog(self.catalog, self.repository, clock=self.clock)

        self.learner = ProfileLearner(self.taste_profile, self.preferences, self.repository)
        self.similarity_engine = SimilarityEngine()
        self.scorer = RecommendationScorer(self.catalog, random_source, jitter)
        self.views = RecommendationViews(self.catalog, self.scorer, self.similarity_engine)

    async def initialize(self) -> None:
        """Load the catalog if it has not been loaded for this session"""
        await self.catalog.ensure_loaded()
        self.logger.info(
            "Wine recommendation engine initialized",
            catalog_size=len(self.catalog),
            degraded=self.catalog.degraded,
            persistence=self.repository.persistence_enabled
        )

    async def reload_catalog(self) -> List[Item]:
        """Replace the catalog snapshot with a fresh fetch"""
        return await self.catalog.load()

    # Query surface

    async def get_personalized(self, limit: Optional[int] = None) -> List[ScoredItem]:
        await self.catalog.ensure_loaded()
        limit = settings.DEFAULT_PERSONALIZED_LIMIT if limit is None else limit

        items = self.views.personalized(
            self.taste_profile,
            self.preferences,
            self.interaction_log.records,
            limit
        )
        record_recommendations("personalized", len(items))
        return items

    async def get_similar(self, item_id: str, limit: Optional[int] = None) -> List[ScoredItem]:
        await self.catalog.ensure_loaded()
        limit = settings.DEFAULT_SIMILAR_LIMIT if limit is None else limit

        items = self.views.similar(item_id, limit)
        record_recommendations("similar", len(items))
        return items

    async def get_trending(self, limit: Optional[int] = None) -> List[Item]:
        await self.catalog.ensure_loaded()
        limit = settings.DEFAULT_LIST_LIMIT if limit is None else limit

        items = self.views.trending(self.interaction_log.records, limit, self.clock())
        record_recommendations("trending", len(items))
        return items

    async def get_seasonal(self, limit: Optional[int] = None) -> List[Item]:
        await self.catalog.ensure_loaded()
        limit = settings.DEFAULT_LIST_LIMIT if limit is None else limit

        items = self.views.seasonal(limit, self.clock())
        record_recommendations("seasonal", len(items))
        return items

    async def get_meal_pairing(self, meal: str, limit: Optional[int] = None) -> List[Item]:
        await self.catalog.ensure_loaded()
        limit = settings.DEFAULT_LIST_LIMIT if limit is None else limit

        items = self.views.meal_pairing(meal, limit)
        record_recommendations("meal_pairing", len(items))
        return items

    # Mutations

    async def record_interaction(
        self,
        item_id: str,
        kind: Union[InteractionKind, str],
        timestamp: Optional[datetime] = None
    ) -> Optional[InteractionRecord]:
        """
        Record a user action and learn from it

        Args:
            item_id: Catalog item id
            kind: Interaction kind
            timestamp: Event time (defaults to now)

        Returns:
            The stored record, or None if the item is not in the catalog

        Raises:
            ValueError: If kind is not a known interaction kind
        """
        kind = InteractionKind(kind)
        await self.catalog.ensure_loaded()

        record = self.interaction_log.record(item_id, kind, timestamp)
        if record is None:
            return None

        self.learner.learn(self.catalog.get(item_id), kind)
        record_interaction(kind.value)

        self.logger.info("Interaction recorded", item_id=item_id, kind=kind.value)

        return record

    async def update_preferences(self, update: PreferenceUpdate) -> PreferenceSet:
        """Apply an explicit filter submission and persist it"""
        if update.min_quality is not None:
            self.preferences.min_quality = update.min_quality
        if update.price_range is not None:
            self.preferences.price_range = update.price_range.model_copy()
        if update.category:
            self.preferences.prefer_category(update.category)
        if update.region:
            self.preferences.prefer_region(update.region)
        if update.style:
            self.preferences.prefer_style(update.style)

        self.repository.save_preferences(self.preferences)

        self.logger.info("Preferences updated", **update.model_dump(exclude_none=True, mode="json"))

        return self.get_preferences()

    # Introspection

    def get_taste_profile(self) -> TasteProfile:
        return self.taste_profile.model_copy(deep=True)

    def get_preferences(self) -> PreferenceSet:
        return self.preferences.model_copy(deep=True)

    def get_interactions(self) -> List[InteractionRecord]:
        return self.interaction_log.records
