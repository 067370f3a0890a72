"""
Time-bounded cache over the feedback log collection.

Writes go straight to the document store and invalidate the cache; reads are
served from the cached, timestamp-sorted snapshot while it is fresh.
"""

import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional, Union

from eintsofia.domain.models.feedback import FeedbackLog
from eintsofia.infrastructure.constants.llm_constants import (
    FEEDBACK_CACHE_TTL_SECONDS,
    FEEDBACK_COLLECTION,
)
from eintsofia.infrastructure.persistence.document_store import DocumentStore
from eintsofia.utils.timezone_utils import EPOCH, parse_timestamp

logger = logging.getLogger(__name__)


class FeedbackSnapshotCache:
    """
    Holds one sorted snapshot and the time it was captured.

    Times are plain numbers from the owner's clock (``time.monotonic`` by
    default), which keeps the cache testable with a fake clock.
    """

    def __init__(self, ttl_seconds: float = FEEDBACK_CACHE_TTL_SECONDS):
        self.ttl_seconds = ttl_seconds
        self._entries: Optional[List[FeedbackLog]] = None
        self._captured_at: Optional[float] = None

    @property
    def entries(self) -> Optional[List[FeedbackLog]]:
        return self._entries

    def capture(self, entries: List[FeedbackLog], now: float) -> None:
        self._entries = entries
        self._captured_at = now

    def invalidate(self) -> None:
        self._entries = None
        self._captured_at = None

    def is_fresh(self, now: float) -> bool:
        if self._entries is None or self._captured_at is None:
            return False
        return (now - self._captured_at) < self.ttl_seconds


class FeedbackCache:
    """Feedback log writer and cached reader."""

    def __init__(
        self,
        document_store: DocumentStore,
        cache: Optional[FeedbackSnapshotCache] = None,
        clock: Callable[[], float] = time.monotonic,
        ttl_seconds: float = FEEDBACK_CACHE_TTL_SECONDS,
    ):
        self.document_store = document_store
        self.cache = cache if cache is not None else FeedbackSnapshotCache(ttl_seconds)
        self.clock = clock
        self._lock = threading.Lock()
        # Bumped on every write; a fetch that overlapped a write must not be cached
        self._generation = 0

    async def record(self, entry: Union[FeedbackLog, Dict[str, Any]]) -> str:
        """
        Append a feedback entry and invalidate the cache.

        Absent fields are dropped before writing; the store assigns the
        timestamp.

        Returns:
            The stored entry id
        """
        if not isinstance(entry, FeedbackLog):
            entry = FeedbackLog.model_validate(entry)

        document = entry.model_dump(
            mode="json", exclude_none=True, exclude={"id", "timestamp"}
        )
        doc_id = await self.document_store.add(FEEDBACK_COLLECTION, document)

        with self._lock:
            self._generation += 1
            self.cache.invalidate()

        logger.info(
            f"Recorded feedback {doc_id} for section '{entry.section}' ({entry.rating})"
        )
        return doc_id

    async def list(self, force_refresh: bool = False) -> List[FeedbackLog]:
        """
        All feedback entries, newest first.

        Served from cache when fresh unless ``force_refresh`` is set.
        """
        with self._lock:
            if force_refresh:
                self.cache.invalidate()
            elif self.cache.is_fresh(self.clock()):
                return self.cache.entries
            generation = self._generation

        documents = await self.document_store.query(FEEDBACK_COLLECTION)
        entries = [self._to_entry(doc) for doc in documents]
        entries.sort(key=lambda e: e.timestamp, reverse=True)

        with self._lock:
            if generation == self._generation:
                self.cache.capture(entries, self.clock())
            else:
                logger.debug("Feedback written during fetch; not caching this snapshot")

        logger.info(f"Fetched {len(entries)} feedback entries")
        return entries

    @staticmethod
    def _to_entry(document: Dict[str, Any]) -> FeedbackLog:
        data = dict(document)
        data["timestamp"] = parse_timestamp(data.get("timestamp")) or EPOCH
        return FeedbackLog.model_validate(data)
