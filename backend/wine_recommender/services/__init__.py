"""Recommendation services"""

from .catalog import CatalogSource, HttpCatalogSource, StaticCatalogSource, CatalogStore
from .state_store import StateStore, InMemoryStateStore, RedisStateStore, SessionStateRepository
from .interaction_log import InteractionLog
from .profile_learner import ProfileLearner
from .similarity import SimilarityEngine
from .scorer import RecommendationScorer
from .views import RecommendationViews
from .engine import RecommendationEngine

__all__ = [
    "CatalogSource",
    "HttpCatalogSource",
    "StaticCatalogSource",
    "CatalogStore",
    "StateStore",
    "InMemoryStateStore",
    "RedisStateStore",
    "SessionStateRepository",
    "InteractionLog",
    "ProfileLearner",
    "SimilarityEngine",
    "RecommendationScorer",
    "RecommendationViews",
    "RecommendationEngine",
]
