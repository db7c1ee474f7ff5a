"""Insight text cache for BlockPlane.

A small key-value capability injected into the insight session. Reads
and writes never raise: a storage failure is logged and treated as a
miss, so generated text is still shown even when it cannot be stored.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timezone
from typing import Any, Dict, Optional
import inspect

import structlog
from firebase_admin import firestore

from config.settings import settings
from services.formatting import format_number

logger = structlog.get_logger(__name__)

CACHE_KEY_PREFIX = "insightv2"


def build_cache_key(
    material_id: Any,
    lis: Optional[float] = None,
    ris: Optional[float] = None,
    cpi: Optional[float] = None,
) -> str:
    """Cache key for one material's scores, e.g. ``insightv2:42:12.00:78.00:—``.

    Scores are fixed to two decimals so that a re-scored material gets
    a fresh entry.
    """
    segments = [str(material_id), format_number(lis, 2), format_number(ris, 2), format_number(cpi, 2)]
    return f"{CACHE_KEY_PREFIX}:{':'.join(segments)}"


class InsightCache(ABC):
    """Key-value store for generated insight text."""

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """Return the cached text, or None on a miss or storage failure."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store text; storage failures are logged and ignored."""


class InMemoryInsightCache(InsightCache):
    """Process-local cache, used in tests and local serving."""

    def __init__(self):
        self._entries: Dict[str, str] = {}

    def __len__(self) -> int:
        return len(self._entries)

    async def get(self, key: str) -> Optional[str]:
        return self._entries.get(key)

    async def set(self, key: str, value: str) -> None:
        self._entries[key] = value


class FirestoreInsightCache(InsightCache):
    """Cache backed by a Firestore collection, one document per key.

    Note: Firebase Admin SDK for Python is synchronous. Methods are
    async for interface compatibility but operations are sync.
    """

    def __init__(self, db=None, collection: Optional[str] = None):
        """Initialize FirestoreInsightCache.

        Args:
            db: Optional Firestore client. If not provided, uses default.
            collection: Collection name (default from settings).
        """
        self._db = db
        self.collection = collection or settings.insight_cache_collection

    @property
    def db(self):
        """Get Firestore client (lazy initialization)."""
        if self._db is None:
            self._db = firestore.client()
        return self._db

    async def _maybe_await(self, result: Any) -> Any:
        """Await result if it is awaitable (supports AsyncMock in unit tests)."""
        if inspect.isawaitable(result):
            return await result
        return result

    @staticmethod
    def _document_id(key: str) -> str:
        # Document ids cannot contain "/"
        return key.replace("/", "_")

    def _document(self, key: str):
        return self.db.collection(self.collection).document(self._document_id(key))

    async def get(self, key: str) -> Optional[str]:
        try:
            doc = await self._maybe_await(self._document(key).get())
            if not doc.exists:
                return None
            data = doc.to_dict() or {}
            text = data.get("text")
            return text if isinstance(text, str) and text else None
        except Exception as e:
            logger.warning("insight_cache_read_failed", key=key, error=str(e))
            return None

    async def set(self, key: str, value: str) -> None:
        try:
            await self._maybe_await(self._document(key).set({
                "key": key,
                "text": value,
                "updatedAt": datetime.now(timezone.utc),
            }))
        except Exception as e:
            logger.warning("insight_cache_write_failed", key=key, error=str(e))
