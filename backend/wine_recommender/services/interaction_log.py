"""Append-only, size-bounded interaction history"""

from datetime import datetime, timezone
from typing import Callable, List, Optional, Union

from ..config import settings
from ..exceptions import UnknownItem
from ..schemas.interaction import InteractionKind, InteractionRecord
from .catalog import CatalogStore
from .state_store import SessionStateRepository
from ..utils.logging import get_logger

logger = get_logger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InteractionLog:
    """
    Most recent user interactions, oldest first

    Keeps at most `limit` records (oldest dropped first) and persists the
    whole log after every append. Timestamps are non-decreasing in insertion
    order.
    """

    def __init__(
        self,
        catalog: CatalogStore,
        repository: SessionStateRepository,
        limit: Optional[int] = None,
        clock: Optional[Callable[[], datetime]] = None
    ):
        self.catalog = catalog
        self.repository = repository
        self.limit = limit or settings.INTERACTION_LOG_LIMIT
        self.clock = clock or utcnow
        self._records = self._restore(repository.load_interactions())

    def _restore(self, records: List[InteractionRecord]) -> List[InteractionRecord]:
        ordered = sorted(records, key=lambda record: record.timestamp)
        return ordered[-self.limit:]

    def record(
        self,
        item_id: str,
        kind: Union[InteractionKind, str],
        timestamp: Optional[datetime] = None
    ) -> Optional[InteractionRecord]:
        """
        Append an interaction and persist the log

        Args:
            item_id: Catalog item id
            kind: Interaction kind
            timestamp: Event time (defaults to now)

        Returns:
            The stored record, or None when the item is not in the current
            catalog snapshot

        Raises:
            ValueError: If kind is not a known interaction kind
        """
        kind = InteractionKind(kind)

        try:
            self.catalog.get(item_id)
        except UnknownItem:
            logger.info("Ignored interaction for unknown item", item_id=item_id, kind=kind.value)
            return None

        timestamp = timestamp or self.clock()
        if timestamp.tzinfo is None:
            timestamp = timestamp.replace(tzinfo=timezone.utc)

        if self._records and timestamp < self._records[-1].timestamp:
            logger.debug("Clamped out-of-order interaction timestamp", item_id=item_id)
            timestamp = self._records[-1].timestamp

        record = InteractionRecord(item_id=item_id, kind=kind, timestamp=timestamp)
        self._records.append(record)
        del self._records[:-self.limit]

        self.repository.save_interactions(self._records)

        return record

    @property
    def records(self) -> List[InteractionRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)
