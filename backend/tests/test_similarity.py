"""Tests for the similarity engine"""

import pytest

from wine_recommender.schemas import Item
from wine_recommender.services.similarity import SimilarityEngine


@pytest.fixture
def engine():
    return SimilarityEngine()


@pytest.fixture
def catalog():
    return [
        Item(id="A", title="Estate Red", category="red", region="Napa Valley", quality_score=90, price=40),
        Item(id="B", title="Reserve Red", category="red", region="Napa Valley", quality_score=95, price=45),
        Item(id="C", title="Coastal White", category="white", region="Sonoma", quality_score=80, price=20),
        Item(id="D", title="Hillside Red", category="red", region="Paso Robles", quality_score=92, price=None),
        Item(id="E", title="Valley Red", category="red", region="Paso Robles", quality_score=94, price=None),
    ]


def test_similarity_formula(engine, catalog):
    """Test the weighted sum of shared attributes"""

    a, b = catalog[0], catalog[1]
    expected = 3 + 2 + (1 - 5 / 45) * 1.5 + (1 - 5 / 100) * 1.5

    assert engine.similarity(a, b) == pytest.approx(expected)


def test_similarity_is_symmetric(engine, catalog):
    """Test that similarity(a, b) == similarity(b, a)"""

    for a in catalog:
        for b in catalog:
            assert engine.similarity(a, b) == pytest.approx(engine.similarity(b, a))


def test_missing_price_gives_no_price_bonus(engine, catalog):
    """Test that an absent price counts as maximal price difference"""

    d, e = catalog[3], catalog[4]
    expected = 3 + 2 + 0 + (1 - 2 / 100) * 1.5

    assert engine.similarity(d, e) == pytest.approx(expected)


def test_unrelated_items_score_lower(engine, catalog):
    """Test that shared variety and region dominate"""

    a, b, c = catalog[0], catalog[1], catalog[2]

    assert engine.similarity(a, b) > engine.similarity(a, c)


def test_find_similar_excludes_source(engine, catalog):
    """Test that the source item is never returned"""

    for item in catalog:
        similar = engine.find_similar(item, catalog, limit=10)
        assert item.id not in [s.id for s in similar]
        assert len(similar) == len(catalog) - 1


def test_find_similar_ordering_and_limit(engine, catalog):
    """Test non-increasing similarity and the limit"""

    similar = engine.find_similar(catalog[0], catalog, limit=3)
    scores = [s.similarity_score for s in similar]

    assert len(similar) == 3
    assert scores == sorted(scores, reverse=True)
    assert similar[0].id == "B"


def test_find_similar_ties_prefer_quality(engine):
    """Test that equal similarity is broken by quality score"""

    source = Item(id="s", title="Source", category="Merlot", quality_score=90, price=30)
    low = Item(id="low", title="Low", category="Merlot", quality_score=88, price=30)
    high = Item(id="high", title="High", category="Merlot", quality_score=92, price=30)

    similar = engine.find_similar(source, [source, low, high], limit=2)

    assert similar[0].similarity_score == pytest.approx(similar[1].similarity_score)
    assert [s.id for s in similar] == ["high", "low"]


def test_find_similar_non_positive_limit(engine, catalog):
    assert engine.find_similar(catalog[0], catalog, limit=0) == []
