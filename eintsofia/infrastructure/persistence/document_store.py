"""
Append-only document store.

Collections of JSON documents with a server-assigned ``timestamp``. The
SQLAlchemy implementation backs the API; the in-memory one is used by tests and
local tooling.
"""

import asyncio
import copy
import itertools
import logging
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from eintsofia.models import Document
from eintsofia.utils.timezone_utils import EPOCH, ensure_utc, parse_timestamp, utc_now

logger = logging.getLogger(__name__)


class DocumentStoreError(Exception):
    """Raised when the backing store fails to read or write."""
    pass


def _matches(document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
    if not filters:
        return True
    return all(document.get(key) == value for key, value in filters.items())


def _sort_key(document: Dict[str, Any]) -> datetime:
    return parse_timestamp(document.get("timestamp")) or EPOCH


class DocumentStore(ABC):
    @abstractmethod
    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        """
        Append ``document`` to ``collection``.

        The store assigns ``timestamp``; any caller-supplied value is replaced.

        Returns:
            The new document id
        """

    @abstractmethod
    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        since: Optional[datetime] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        """
        Read documents of ``collection``, equality-filtered on payload keys,
        optionally no older than ``since``, ordered by timestamp.

        Each returned dict carries ``id`` and ``timestamp`` (which may be None
        for documents written without one).
        """


class InMemoryDocumentStore(DocumentStore):
    def __init__(
        self,
        initial: Optional[Dict[str, List[Dict[str, Any]]]] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self._clock = clock
        self._ids = itertools.count(1)
        self._collections: Dict[str, List[Dict[str, Any]]] = {}
        self.query_count = 0
        for collection, documents in (initial or {}).items():
            for document in documents:
                # Seeded documents keep their timestamp as given, even if absent
                stored = copy.deepcopy(document)
                stored.setdefault("id", str(next(self._ids)))
                self._collections.setdefault(collection, []).append(stored)

    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        doc_id = str(next(self._ids))
        stored = copy.deepcopy(document)
        stored["id"] = doc_id
        stored["timestamp"] = self._clock()
        self._collections.setdefault(collection, []).append(stored)
        return doc_id

    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        since: Optional[datetime] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        self.query_count += 1
        documents = [
            copy.deepcopy(doc)
            for doc in self._collections.get(collection, [])
            if _matches(doc, filters)
            and (since is None or _sort_key(doc) >= ensure_utc(since))
        ]
        documents.sort(key=_sort_key, reverse=descending)
        return documents


class SQLAlchemyDocumentStore(DocumentStore):
    """
    Document store over the ``documents`` table.

    Sessions are opened per call from ``session_factory``; the synchronous
    work runs in a worker thread so the event loop is not blocked.
    """

    def __init__(self, session_factory: Callable[[], Session]):
        self._session_factory = session_factory

    @staticmethod
    def _to_dict(row: Document) -> Dict[str, Any]:
        document = dict(row.payload or {})
        document["id"] = str(row.id)
        document["timestamp"] = ensure_utc(row.created_at)
        return document

    def _add_sync(self, collection: str, document: Dict[str, Any]) -> str:
        payload = {k: v for k, v in document.items() if k not in ("id", "timestamp")}
        session = self._session_factory()
        try:
            row = Document(collection=collection, payload=payload, created_at=utc_now())
            session.add(row)
            session.commit()
            session.refresh(row)
            return str(row.id)
        except SQLAlchemyError as e:
            session.rollback()
            logger.error(f"Failed to add document to {collection}: {e}", exc_info=True)
            raise DocumentStoreError(f"Failed to add document to {collection}") from e
        finally:
            session.close()

    def _query_sync(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]],
        since: Optional[datetime],
        descending: bool,
    ) -> List[Dict[str, Any]]:
        session = self._session_factory()
        try:
            q = session.query(Document).filter(Document.collection == collection)
            if since is not None:
                q = q.filter(Document.created_at >= ensure_utc(since))
            order = Document.created_at.desc() if descending else Document.created_at.asc()
            rows = q.order_by(order, Document.id.desc() if descending else Document.id.asc()).all()
            # Payload filters are applied here to stay portable across JSON dialects
            return [doc for doc in (self._to_dict(r) for r in rows) if _matches(doc, filters)]
        except SQLAlchemyError as e:
            logger.error(f"Failed to query {collection}: {e}", exc_info=True)
            raise DocumentStoreError(f"Failed to query {collection}") from e
        finally:
            session.close()

    async def add(self, collection: str, document: Dict[str, Any]) -> str:
        return await asyncio.to_thread(self._add_sync, collection, document)

    async def query(
        self,
        collection: str,
        filters: Optional[Dict[str, Any]] = None,
        since: Optional[datetime] = None,
        descending: bool = True,
    ) -> List[Dict[str, Any]]:
        return await asyncio.to_thread(
            self._query_sync, collection, filters, since, descending
        )
