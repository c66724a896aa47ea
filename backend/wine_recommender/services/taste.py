"""Archetypal taste vectors shared by profile learning and taste matching"""

import numpy as np
from typing import Dict, Optional, Tuple

from ..schemas.item import Item
from ..schemas.profile import TasteParameters

# Characteristic parameters of each wine style
STYLE_ARCHETYPES: Dict[str, Dict[str, float]] = {
    "red": {"tannin": 0.7, "body": 0.7, "earthiness": 0.6, "sweetness": 0.3},
    "white": {"acidity": 0.7, "tannin": 0.2, "body": 0.4, "fruit_forward": 0.6},
    "sparkling": {"acidity": 0.8, "body": 0.3, "sweetness": 0.5},
    "dessert": {"sweetness": 0.9, "body": 0.7},
}

# Grape varieties refine the style vector; first matching keyword group wins
VARIETY_ARCHETYPES: Tuple[Tuple[Tuple[str, ...], Dict[str, float]], ...] = (
    (("cabernet", "merlot", "syrah"), {"tannin": 0.7, "body": 0.8}),
    (("pinot noir",), {"tannin": 0.4, "body": 0.5, "fruit_forward": 0.7}),
    (("chardonnay",), {"body": 0.6, "oakiness": 0.6}),
    (("sauvignon blanc", "riesling"), {"acidity": 0.8, "fruit_forward": 0.7}),
)

# Match reported for items with no archetype at all
NEUTRAL_MATCH = 0.5


def normalize_tag(value: Optional[str]) -> Optional[str]:
    """Lower-cased, stripped tag or None for blank values"""
    if not value:
        return None
    return value.strip().lower() or None


def target_vector(item: Item) -> Dict[str, float]:
    """
    Derive the archetypal taste vector of an item

    The style archetype is overlaid with the variety archetype, the variety
    taking precedence on shared parameters. Unknown style and variety give
    an empty vector.
    """
    target = dict(STYLE_ARCHETYPES.get(item.style or "", {}))

    variety = normalize_tag(item.category)
    if variety:
        for keywords, params in VARIETY_ARCHETYPES:
            if any(keyword in variety for keyword in keywords):
                target.update(params)
                break

    return target


def interpolate(current: float, target: float, weight: float) -> float:
    """One exponential-moving-average step toward target, clamped to [0, 1]"""
    value = current + (target - current) * weight
    return max(0.0, min(1.0, value))


def taste_similarity(params: TasteParameters, target: Dict[str, float]) -> float:
    """
    Similarity between a taste profile and an archetype, in [0, 1]

    Computed as 1 - mean absolute difference over the parameters the
    archetype defines.
    """
    if not target:
        return NEUTRAL_MATCH

    names = list(target)
    user = np.array([getattr(params, name) for name in names], dtype=float)
    archetype = np.array([target[name] for name in names], dtype=float)

    return float(1.0 - np.mean(np.abs(user - archetype)))
