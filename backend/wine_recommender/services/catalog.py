"""Catalog collaborators and the per-session catalog snapshot"""

import httpx
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Optional
from pydantic import ValidationError

from ..config import settings
from ..exceptions import CatalogUnavailable, UnknownItem
from ..schemas.item import Item
from ..utils.logging import get_logger
from ..utils.metrics import record_catalog_failure

logger = get_logger(__name__)


class CatalogSource(ABC):
    """Supplies the wine list; implemented by the external catalog service"""

    @abstractmethod
    async def load_catalog(self) -> List[Item]:
        """
        Fetch the full item list

        Raises:
            CatalogUnavailable: If the catalog cannot be fetched
        """
        raise NotImplementedError


class StaticCatalogSource(CatalogSource):
    """Catalog backed by an in-memory list (fixtures, offline use)"""

    def __init__(self, items: Iterable[Item]):
        self.items = list(items)

    async def load_catalog(self) -> List[Item]:
        return list(self.items)


class HttpCatalogSource(CatalogSource):
    """
    Catalog fetched from the marketplace wine listing endpoint

    Expects `{"wines": [...]}` (or a bare list) of marketplace wine records.
    """

    def __init__(
        self,
        url: Optional[str] = None,
        limit: Optional[int] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.url = url or settings.CATALOG_URL
        self.limit = limit or settings.CATALOG_LIMIT
        self.timeout = timeout or settings.CATALOG_TIMEOUT
        self.transport = transport

    async def load_catalog(self) -> List[Item]:
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.get(self.url, params={"limit": self.limit})
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPError as e:
            raise CatalogUnavailable(f"Failed to fetch wine data: {e}") from e
        except ValueError as e:
            raise CatalogUnavailable(f"Catalog response is not JSON: {e}") from e

        records = payload.get("wines") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise CatalogUnavailable("Catalog response has no wine list")

        return self._parse_records(records)

    def _parse_records(self, records: List[Any]) -> List[Item]:
        items = []
        skipped = 0

        for record in records:
            if not isinstance(record, dict):
                skipped += 1
                continue
            try:
                items.append(Item.from_catalog_record(record))
            except ValidationError as e:
                skipped += 1
                logger.debug("Skipped invalid catalog record", record_id=record.get("id"), error=str(e))

        if skipped:
            logger.warning("Skipped invalid catalog records", skipped=skipped, loaded=len(items))

        return items


class CatalogStore:
    """
    In-memory item list for one session

    Populated once (on engine init or lazily on the first query) and
    read-only afterwards. A failed fetch leaves an empty, degraded catalog
    so that every query stays callable.
    """

    def __init__(self, source: CatalogSource):
        self.source = source
        self._items: List[Item] = []
        self._index: Dict[str, Item] = {}
        self.loaded = False
        self.degraded = False

    async def load(self) -> List[Item]:
        """Fetch the catalog, replacing the current snapshot"""

        try:
            items = await self.source.load_catalog()
            self.degraded = False
        except CatalogUnavailable as e:
            logger.warning("Catalog unavailable, using empty catalog", error=str(e))
            record_catalog_failure()
            items = []
            self.degraded = True

        index: Dict[str, Item] = {}
        for item in items:
            # First occurrence wins on duplicate ids
            index.setdefault(item.id, item)

        self._index = index
        self._items = list(index.values())
        self.loaded = True

        logger.info("Loaded wines for recommendation engine", count=len(self._items))

        return list(self._items)

    async def ensure_loaded(self) -> None:
        if not self.loaded:
            await self.load()

    @property
    def items(self) -> List[Item]:
        return list(self._items)

    def find_by_id(self, item_id: str) -> Optional[Item]:
        return self._index.get(item_id)

    def get(self, item_id: str) -> Item:
        """
        Get an item from the current snapshot

        Raises:
            UnknownItem: If the id is not in the catalog
        """
        item = self._index.get(item_id)
        if item is None:
            raise UnknownItem(item_id)
        return item

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._index

    def __len__(self) -> int:
        return len(self._items)
