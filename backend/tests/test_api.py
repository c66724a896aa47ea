"""Tests for API endpoints"""

import pytest
from fastapi.testclient import TestClient

from wine_recommender.main import app
from wine_recommender.schemas import Item
from wine_recommender.services.catalog import StaticCatalogSource
from wine_recommender.services.state_store import InMemoryStateStore
from wine_recommender.utils.dependencies import EngineRegistry, get_registry

WINES = [
    Item(id="A", title="Estate Red", category="Cabernet Sauvignon", style="red", region="Napa Valley", quality_score=90, price=40),
    Item(id="B", title="Reserve Red", category="Cabernet Sauvignon", style="red", region="Napa Valley", quality_score=95, price=45),
    Item(id="C", title="Coastal White", category="Sauvignon Blanc", style="white", region="Sonoma", quality_score=80, price=20),
]

BASE = "/api/v1/sessions/tab-1"


@pytest.fixture
def state_store():
    return InMemoryStateStore()


@pytest.fixture
def test_registry(state_store):
    """Engine registry over a static catalog and in-memory state, without jitter"""

    engines = EngineRegistry(lambda: StaticCatalogSource(WINES), state_store, jitter=0)
    app.dependency_overrides[get_registry] = lambda: engines

    yield engines

    app.dependency_overrides.clear()


@pytest.fixture
def client(test_registry):
    """Create a test client"""
    return TestClient(app)


def test_root_endpoint(client):
    """Test root endpoint"""

    response = client.get("/")
    assert response.status_code == 200
    assert "message" in response.json()


def test_personalized(client):
    """Test personalized recommendations for a fresh session"""

    response = client.get(f"{BASE}/recommendations/personalized")
    assert response.status_code == 200

    data = response.json()
    assert data["sessionId"] == "tab-1"
    assert data["view"] == "personalized"
    assert [item["id"] for item in data["items"]] == ["B", "A"]
    assert "relevanceScore" in data["items"][0]


def test_personalized_limit_validation(client):
    """Test out-of-range limits"""

    assert client.get(f"{BASE}/recommendations/personalized?limit=0").status_code == 422
    assert client.get(f"{BASE}/recommendations/personalized?limit=101").status_code == 422


def test_record_interaction(client, state_store):
    """Test recording an interaction"""

    response = client.post(f"{BASE}/interactions", json={"itemId": "B", "kind": "purchased"})
    assert response.status_code == 201

    data = response.json()
    assert data["recorded"] is True
    assert data["interaction"]["itemId"] == "B"
    assert data["interaction"]["kind"] == "purchased"
    assert "cduv:tab-1:interaction-log" in state_store.data

    log = client.get(f"{BASE}/interactions").json()
    assert [entry["itemId"] for entry in log] == ["B"]


def test_record_interaction_unknown_item(client):
    """Test that interactions with unknown wines are accepted and ignored"""

    response = client.post(f"{BASE}/interactions", json={"itemId": "missing", "kind": "viewed"})
    assert response.status_code == 202
    assert response.json() == {"recorded": False, "interaction": None}

    assert client.get(f"{BASE}/interactions").json() == []


@pytest.mark.parametrize("payload", [
    {"itemId": "A", "kind": "shared"},
    {"itemId": "A"},
    {"kind": "viewed"},
])
def test_record_interaction_invalid(client, payload):
    response = client.post(f"{BASE}/interactions", json=payload)
    assert response.status_code == 422


def test_profile_learns_from_interactions(client):
    """Test that the profile reflects recorded interactions"""

    for _ in range(3):
        client.post(f"{BASE}/interactions", json={"itemId": "B", "kind": "purchased"})

    response = client.get(f"{BASE}/profile")
    assert response.status_code == 200

    data = response.json()
    assert data["sessionId"] == "tab-1"
    assert data["preferences"]["preferredCategories"] == ["Cabernet Sauvignon"]
    assert data["tasteProfile"]["preferredTags"] == ["cabernet sauvignon"]
    assert data["tasteProfile"]["params"]["tannin"] > 0.5


def test_update_preferences(client):
    """Test applying the filter form"""

    response = client.put(
        f"{BASE}/preferences",
        json={"minQuality": 75, "priceRange": {"min": 0, "max": 30}}
    )
    assert response.status_code == 200
    assert response.json()["minQuality"] == 75

    items = client.get(f"{BASE}/recommendations/personalized").json()["items"]
    assert [item["id"] for item in items] == ["C"]


def test_update_preferences_invalid_range(client):
    response = client.put(f"{BASE}/preferences", json={"priceRange": {"min": 50, "max": 10}})
    assert response.status_code == 422


def test_similar(client):
    response = client.get(f"{BASE}/recommendations/similar/A?limit=1")
    assert response.status_code == 200

    data = response.json()
    assert data["sourceItemId"] == "A"
    assert [item["id"] for item in data["items"]] == ["B"]
    assert data["items"][0]["similarityScore"] > 0


def test_similar_unknown_item(client):
    response = client.get(f"{BASE}/recommendations/similar/missing")
    assert response.status_code == 200
    assert response.json()["items"] == []


def test_meal_pairing(client):
    response = client.get(f"{BASE}/recommendations/meal-pairing", params={"meal": "grilled steak"})
    assert response.status_code == 200

    data = response.json()
    assert data["meal"] == "grilled steak"
    assert [item["id"] for item in data["items"]] == ["B", "A"]


def test_meal_pairing_requires_meal(client):
    response = client.get(f"{BASE}/recommendations/meal-pairing")
    assert response.status_code == 422


def test_trending_and_seasonal(client):
    """Test that the list views always fill from the catalog"""

    trending = client.get(f"{BASE}/recommendations/trending").json()
    assert [item["id"] for item in trending["items"]] == ["B", "A", "C"]

    seasonal = client.get(f"{BASE}/recommendations/seasonal?limit=2").json()
    assert seasonal["view"] == "seasonal"
    assert len(seasonal["items"]) == 2


def test_sessions_are_independent(client):
    """Test that two session ids get separate engines"""

    client.post(f"{BASE}/interactions", json={"itemId": "A", "kind": "favorited"})

    other = client.get("/api/v1/sessions/tab-2/interactions").json()
    assert other == []
