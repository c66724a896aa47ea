"""Engine dependencies for FastAPI"""

import asyncio
from collections import OrderedDict
from fastapi import Depends
from typing import Any, Callable, Dict, Optional

from ..config import settings
from ..services.catalog import CatalogSource, HttpCatalogSource
from ..services.engine import RecommendationEngine
from ..services.state_store import RedisStateStore, StateStore
from .logging import bind_request_context, get_logger

logger = get_logger(__name__)


class EngineRegistry:
    """
    One RecommendationEngine per storefront session

    Engines are created on first use and initialized (catalog loaded) before
    being handed out. Concurrent first requests for a session wait on a
    per-session lock and share one engine. At most `max_sessions` engines are
    kept; the least recently used one is dropped first and its state is
    reloaded from the store on the session's next request.
    """

    def __init__(
        self,
        catalog_source_factory: Optional[Callable[[], CatalogSource]] = None,
        state_store: Optional[StateStore] = None,
        max_sessions: Optional[int] = None,
        **engine_options: Any
    ):
        self.catalog_source_factory = catalog_source_factory or HttpCatalogSource
        self._state_store = state_store
        self.max_sessions = max_sessions or settings.MAX_SESSIONS
        self.engine_options = engine_options
        self._engines: "OrderedDict[str, RecommendationEngine]" = OrderedDict()
        self._locks: Dict[str, asyncio.Lock] = {}

    @property
    def state_store(self) -> StateStore:
        if self._state_store is None:
            self._state_store = RedisStateStore()
        return self._state_store

    async def get(self, session_id: str) -> RecommendationEngine:
        engine = self._lookup(session_id)
        if engine is not None:
            return engine

        lock = self._locks.setdefault(session_id, asyncio.Lock())
        async with lock:
            try:
                engine = self._lookup(session_id)
                if engine is None:
                    engine = await self._create(session_id)
            finally:
                self._locks.pop(session_id, None)

        return engine

    async def _create(self, session_id: str) -> RecommendationEngine:
        engine = RecommendationEngine(
            self.catalog_source_factory(),
            self.state_store,
            session_id=session_id,
            **self.engine_options
        )
        await engine.initialize()

        self._engines[session_id] = engine
        self._evict()
        logger.info("Created recommendation engine", session_id=session_id, sessions=len(self._engines))

        return engine

    def discard(self, session_id: str) -> None:
        self._engines.pop(session_id, None)

    def _lookup(self, session_id: str) -> Optional[RecommendationEngine]:
        engine = self._engines.get(session_id)
        if engine is not None:
            self._engines.move_to_end(session_id)
        return engine

    def _evict(self) -> None:
        while len(self._engines) > self.max_sessions:
            session_id = next(iter(self._engines))
            self.discard(session_id)
            logger.info("Evicted recommendation engine", session_id=session_id)

    def __contains__(self, session_id: object) -> bool:
        return session_id in self._engines

    def __len__(self) -> int:
        return len(self._engines)


registry = EngineRegistry()


def get_registry() -> EngineRegistry:
    """Engine registry dependency (overridden in tests)"""
    return registry


async def get_engine(
    session_id: str,
    engines: EngineRegistry = Depends(get_registry)
) -> RecommendationEngine:
    """Engine owning the session named in the request path"""
    bind_request_context(session_id=session_id)
    return await engines.get(session_id)
