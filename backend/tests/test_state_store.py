"""Tests for persisted state stores and the session repository"""

import json
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock
from redis.exceptions import ConnectionError as RedisConnectionError

from wine_recommender.exceptions import PersistenceReadError, PersistenceWriteError
from wine_recommender.schemas import InteractionKind, InteractionRecord, PriceRange, PreferenceSet, TasteProfile
from wine_recommender.services.state_store import (
    InMemoryStateStore,
    RedisStateStore,
    SessionStateRepository,
    StateStore,
)


class FailingWriteStore(InMemoryStateStore):
    """Store that accepts reads but rejects every write"""

    def write_state(self, key, value):
        raise PersistenceWriteError(key, "quota exceeded")


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def repository(store):
    return SessionStateRepository(store, session_id="user-1", namespace="test")


def test_in_memory_store_round_trip(store):
    """Test writing and reading JSON values"""

    store.write_state("key", {"a": [1, 2, 3]})

    assert store.read_state("key") == {"a": [1, 2, 3]}
    assert store.read_state("missing") is None


def test_in_memory_store_corrupt_value():
    """Test that corrupt JSON is a read error"""

    store = InMemoryStateStore({"key": "{not json"})

    with pytest.raises(PersistenceReadError):
        store.read_state("key")


def test_in_memory_store_unserializable_value(store):
    """Test that values that are not JSON are a write error"""

    with pytest.raises(PersistenceWriteError):
        store.write_state("key", {"when": datetime.now()})


def test_keys_are_namespaced_per_session(repository):
    """Test key layout"""

    assert repository.key("taste-profile") == "test:user-1:taste-profile"


def test_defaults_when_nothing_persisted(repository):
    """Test loading a fresh session"""

    assert repository.load_taste_profile() == TasteProfile()
    assert repository.load_preferences() == PreferenceSet()
    assert repository.load_interactions() == []
    assert repository.persistence_enabled


def test_state_round_trip(store, repository):
    """Test that persisting then reloading yields identical structures"""

    profile = TasteProfile()
    profile.params.tannin = 0.72
    profile.params.fruit_forward = 0.31
    profile.preferred_tags.extend(["merlot", "pinot noir"])

    preferences = PreferenceSet(
        min_quality=88,
        price_range=PriceRange(min=15, max=120),
        preferred_categories=["Merlot"],
        preferred_regions=["Bordeaux"],
        disliked_categories=["Riesling"],
    )

    start = datetime(2026, 9, 1, tzinfo=timezone.utc)
    records = [
        InteractionRecord(item_id="w1", kind=InteractionKind.VIEWED, timestamp=start),
        InteractionRecord(item_id="w2", kind=InteractionKind.PURCHASED, timestamp=start + timedelta(hours=1)),
    ]

    assert repository.save_taste_profile(profile)
    assert repository.save_preferences(preferences)
    assert repository.save_interactions(records)

    reloaded = SessionStateRepository(store, session_id="user-1", namespace="test")

    assert reloaded.load_taste_profile() == profile
    assert reloaded.load_preferences() == preferences
    assert reloaded.load_interactions() == records


def test_persisted_json_shapes(store, repository):
    """Test the stored JSON uses the documented camelCase shapes"""

    repository.save_taste_profile(TasteProfile())
    repository.save_preferences(PreferenceSet())

    profile_data = json.loads(store.data["test:user-1:taste-profile"])
    preference_data = json.loads(store.data["test:user-1:preference-set"])

    assert "fruitForward" in profile_data["params"]
    assert profile_data["preferredTags"] == []
    assert preference_data["minQuality"] == 85
    assert preference_data["priceRange"] == {"min": 0, "max": 500}


def test_sessions_are_isolated(store):
    """Test that two sessions never read each other's state"""

    first = SessionStateRepository(store, session_id="alice", namespace="test")
    second = SessionStateRepository(store, session_id="bob", namespace="test")

    first.save_preferences(PreferenceSet(min_quality=95))

    assert second.load_preferences().min_quality == 85


def test_corrupt_state_falls_back_to_defaults():
    """Test that a corrupt value yields defaults and disables persistence"""

    store = InMemoryStateStore({"test:user-1:taste-profile": "{broken"})
    repository = SessionStateRepository(store, session_id="user-1", namespace="test")

    assert repository.load_taste_profile() == TasteProfile()
    assert not repository.persistence_enabled

    # Writes are skipped for the rest of the session
    assert not repository.save_preferences(PreferenceSet(min_quality=90))
    assert "test:user-1:preference-set" not in store.data


def test_invalid_structure_falls_back_to_defaults():
    """Test that well-formed JSON with an invalid shape is treated as corrupt"""

    store = InMemoryStateStore({
        "test:user-1:taste-profile": json.dumps({"params": {"sweetness": 4}, "preferredTags": []}),
    })
    repository = SessionStateRepository(store, session_id="user-1", namespace="test")

    assert repository.load_taste_profile() == TasteProfile()
    assert not repository.persistence_enabled


def test_write_failure_disables_persistence():
    """Test that a failed write keeps the session running in memory"""

    repository = SessionStateRepository(FailingWriteStore(), session_id="user-1", namespace="test")

    assert not repository.save_taste_profile(TasteProfile())
    assert not repository.persistence_enabled


def test_state_store_is_abstract():
    """Test that StateStore cannot be used directly"""

    with pytest.raises(TypeError):
        StateStore()


def test_redis_store_read_write():
    """Test the Redis-backed store against a mocked client"""

    client = MagicMock()
    client.get.return_value = json.dumps({"minQuality": 90})

    store = RedisStateStore(redis_client=client)

    assert store.read_state("cduv:s:preference-set") == {"minQuality": 90}
    client.get.assert_called_once_with("cduv:s:preference-set")

    store.write_state("cduv:s:preference-set", {"minQuality": 92})
    client.set.assert_called_once_with("cduv:s:preference-set", json.dumps({"minQuality": 92}))


def test_redis_store_missing_key():
    """Test reading a key that was never written"""

    client = MagicMock()
    client.get.return_value = None

    assert RedisStateStore(redis_client=client).read_state("key") is None


def test_redis_store_errors():
    """Test that Redis failures map onto persistence errors"""

    client = MagicMock()
    client.get.side_effect = RedisConnectionError("connection refused")
    client.set.side_effect = RedisConnectionError("connection refused")
    client.ping.side_effect = RedisConnectionError("connection refused")

    store = RedisStateStore(redis_client=client)

    with pytest.raises(PersistenceReadError):
        store.read_state("key")

    with pytest.raises(PersistenceWriteError):
        store.write_state("key", {"a": 1})

    assert store.health_check() is False
