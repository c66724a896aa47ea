"""Pairwise item similarity"""

from typing import Iterable, List

from ..schemas.item import Item, ScoredItem


class SimilarityEngine:
    """
    Heuristic similarity between two catalog items

    Symmetric weighted sum of shared variety, shared region, price closeness
    and quality closeness. Higher is more similar; there is no fixed upper
    bound and no triangle inequality.
    """

    CATEGORY_WEIGHT = 3.0
    REGION_WEIGHT = 2.0
    PRICE_WEIGHT = 1.5
    QUALITY_WEIGHT = 1.5

    def similarity(self, a: Item, b: Item) -> float:
        score = 0.0

        if a.category and a.category == b.category:
            score += self.CATEGORY_WEIGHT

        if a.region and a.region == b.region:
            score += self.REGION_WEIGHT

        score += (1 - self._price_difference(a, b)) * self.PRICE_WEIGHT
        score += (1 - abs(a.quality_score - b.quality_score) / 100) * self.QUALITY_WEIGHT

        return score

    @staticmethod
    def _price_difference(a: Item, b: Item) -> float:
        """Relative price gap in [0, 1]; 1 (no bonus) when a price is missing"""
        if a.price is None or b.price is None:
            return 1.0

        highest = max(a.price, b.price)
        if highest == 0:
            return 0.0

        return abs(a.price - b.price) / highest

    def find_similar(self, item: Item, catalog: Iterable[Item], limit: int) -> List[ScoredItem]:
        """
        Rank catalog items by similarity to `item`

        Args:
            item: Source item (never included in the result)
            catalog: Candidate items
            limit: Maximum number of items to return

        Returns:
            Items sorted by descending similarity, ties broken by higher
            quality score
        """
        if limit <= 0:
            return []

        scored = [
            ScoredItem.from_item(candidate, similarity_score=self.similarity(item, candidate))
            for candidate in catalog
            if candidate.id != item.id
        ]

        scored.sort(key=lambda s: (s.similarity_score, s.quality_score), reverse=True)

        return scored[:limit]
