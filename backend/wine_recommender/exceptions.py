"""Error taxonomy for the recommendation engine

Every error below is recovered inside the engine. Recommendations are an
enhancement of the storefront, so failures degrade the panels (empty or
quality-sorted lists) instead of reaching the caller.
"""


class RecommendationError(Exception):
    """Base class for recommendation engine errors"""


class CatalogUnavailable(RecommendationError):
    """The catalog collaborator could not supply the item list"""


class PersistenceReadError(RecommendationError):
    """Persisted state is corrupt or the store could not be read"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to read state '{key}': {reason}")
        self.key = key
        self.reason = reason


class PersistenceWriteError(RecommendationError):
    """The store rejected a write"""

    def __init__(self, key: str, reason: str):
        super().__init__(f"Failed to write state '{key}': {reason}")
        self.key = key
        self.reason = reason


class UnknownItem(RecommendationError):
    """An item id that is not part of the current catalog snapshot"""

    def __init__(self, item_id: str):
        super().__init__(f"Item not in catalog: {item_id}")
        self.item_id = item_id
