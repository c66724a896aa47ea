"""Persisted state collaborators and the session state repository"""

import json
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List, Optional, TypeVar

from pydantic import TypeAdapter, ValidationError
from redis import Redis
from redis.exceptions import RedisError

from ..config import settings
from ..exceptions import PersistenceReadError, PersistenceWriteError
from ..schemas.interaction import InteractionRecord
from ..schemas.profile import PreferenceSet, TasteProfile
from ..utils.logging import get_logger
from ..utils.metrics import record_persistence_error

logger = get_logger(__name__)

T = TypeVar("T")

TASTE_PROFILE_KEY = "taste-profile"
PREFERENCE_SET_KEY = "preference-set"
INTERACTION_LOG_KEY = "interaction-log"

_interaction_list = TypeAdapter(List[InteractionRecord])


class StateStore(ABC):
    """Key/value JSON storage supplied by the persistence collaborator"""

    @abstractmethod
    def read_state(self, key: str) -> Optional[Any]:
        """
        Read a JSON value

        Returns:
            Decoded value, or None if the key was never written

        Raises:
            PersistenceReadError: If the value is corrupt or the store fails
        """
        raise NotImplementedError

    @abstractmethod
    def write_state(self, key: str, value: Any) -> None:
        """
        Write a JSON value, replacing any previous one

        Raises:
            PersistenceWriteError: If the value cannot be stored
        """
        raise NotImplementedError


def _decode(key: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError as e:
        raise PersistenceReadError(key, f"invalid JSON: {e}") from e


def _encode(key: str, value: Any) -> str:
    try:
        return json.dumps(value)
    except (TypeError, ValueError) as e:
        raise PersistenceWriteError(key, f"value is not JSON serializable: {e}") from e


class InMemoryStateStore(StateStore):
    """Process-local store holding serialized JSON, like browser local storage"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.data: Dict[str, str] = dict(initial or {})

    def read_state(self, key: str) -> Optional[Any]:
        raw = self.data.get(key)
        if raw is None:
            return None
        return _decode(key, raw)

    def write_state(self, key: str, value: Any) -> None:
        self.data[key] = _encode(key, value)


class RedisStateStore(StateStore):
    """Store backed by Redis string keys"""

    def __init__(self, redis_client: Optional[Redis] = None):
        self.redis = redis_client or Redis(
            host=settings.REDIS_HOST,
            port=settings.REDIS_PORT,
            db=settings.REDIS_DB,
            password=settings.REDIS_PASSWORD,
            decode_responses=True
        )

    def read_state(self, key: str) -> Optional[Any]:
        try:
            raw = self.redis.get(key)
        except RedisError as e:
            raise PersistenceReadError(key, str(e)) from e

        if raw is None:
            return None
        return _decode(key, raw)

    def write_state(self, key: str, value: Any) -> None:
        payload = _encode(key, value)
        try:
            self.redis.set(key, payload)
        except RedisError as e:
            raise PersistenceWriteError(key, str(e)) from e

    def health_check(self) -> bool:
        try:
            return bool(self.redis.ping())
        except RedisError:
            return False


class SessionStateRepository:
    """
    Loads and saves one session's engine state through a StateStore

    Keys are namespaced per session: `<namespace>:<session_id>:<name>`.
    Any read or write failure falls back to in-memory state and disables
    persistence for the remainder of the session.
    """

    def __init__(self, store: StateStore, session_id: str = "default", namespace: Optional[str] = None):
        self.store = store
        self.session_id = session_id
        self.namespace = namespace or settings.STATE_NAMESPACE
        self.persistence_enabled = True

    def key(self, name: str) -> str:
        return f"{self.namespace}:{self.session_id}:{name}"

    # Loading

    def load_taste_profile(self) -> TasteProfile:
        return self._load(TASTE_PROFILE_KEY, TasteProfile.model_validate, TasteProfile)

    def load_preferences(self) -> PreferenceSet:
        return self._load(PREFERENCE_SET_KEY, PreferenceSet.model_validate, PreferenceSet)

    def load_interactions(self) -> List[InteractionRecord]:
        return self._load(INTERACTION_LOG_KEY, _interaction_list.validate_python, list)

    # Saving

    def save_taste_profile(self, profile: TasteProfile) -> bool:
        return self._save(TASTE_PROFILE_KEY, profile.model_dump(mode="json", by_alias=True))

    def save_preferences(self, preferences: PreferenceSet) -> bool:
        return self._save(PREFERENCE_SET_KEY, preferences.model_dump(mode="json", by_alias=True))

    def save_interactions(self, records: List[InteractionRecord]) -> bool:
        return self._save(
            INTERACTION_LOG_KEY,
            [record.model_dump(mode="json", by_alias=True) for record in records]
        )

    # Helpers

    def _load(self, name: str, parse: Callable[[Any], T], default: Callable[[], T]) -> T:
        if not self.persistence_enabled:
            return default()

        key = self.key(name)
        try:
            raw = self.store.read_state(key)
            if raw is None:
                return default()
            try:
                return parse(raw)
            except ValidationError as e:
                raise PersistenceReadError(key, f"invalid structure: {e.error_count()} errors") from e
        except PersistenceReadError as e:
            logger.warning(
                "Persisted state unreadable, using defaults",
                session_id=self.session_id,
                key=key,
                error=e.reason
            )
            record_persistence_error("read")
            self.persistence_enabled = False
            return default()

    def _save(self, name: str, value: Any) -> bool:
        if not self.persistence_enabled:
            return False

        key = self.key(name)
        try:
            self.store.write_state(key, value)
            return True
        except PersistenceWriteError as e:
            logger.warning(
                "Persisting state failed, continuing in memory",
                session_id=self.session_id,
                key=key,
                error=e.reason
            )
            record_persistence_error("write")
            self.persistence_enabled = False
            return False
