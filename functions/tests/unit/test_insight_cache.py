"""Unit tests for the insight text cache."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from services.insight_cache import (
    FirestoreInsightCache,
    InMemoryInsightCache,
    build_cache_key,
)


class TestCacheKey:

    def test_fixed_precision(self):
        assert build_cache_key(42, 12, 78.456, 9.1) == "insightv2:42:12.00:78.46:9.10"

    def test_missing_scores(self):
        assert build_cache_key("clt", None, 50) == "insightv2:clt:—:50.00:—"

    def test_equal_rounded_scores_share_a_key(self):
        assert build_cache_key(1, 12.001, 78, 9.1) == build_cache_key(1, 12.0, 78.0, 9.1)


class TestInMemoryCache:

    @pytest.mark.asyncio
    async def test_get_and_set(self):
        cache = InMemoryInsightCache()

        assert await cache.get("k") is None
        await cache.set("k", "text")

        assert await cache.get("k") == "text"
        assert len(cache) == 1


class TestFirestoreCache:

    @pytest.mark.asyncio
    async def test_read_hit(self, mock_firestore_client):
        cache = FirestoreInsightCache(db=mock_firestore_client, collection="insightCache")

        assert await cache.get("insightv2:1:10.00:20.00:30.00") == "Cached insight text"
        mock_firestore_client.collection.assert_called_with("insightCache")

    @pytest.mark.asyncio
    async def test_read_miss(self, mock_firestore_client):
        document = mock_firestore_client.collection.return_value.document.return_value
        document.get = AsyncMock(return_value=MagicMock(exists=False))

        cache = FirestoreInsightCache(db=mock_firestore_client)

        assert await cache.get("k") is None

    @pytest.mark.asyncio
    async def test_write(self, mock_firestore_client):
        cache = FirestoreInsightCache(db=mock_firestore_client)

        await cache.set("insightv2:a/b", "Generated")

        collection = mock_firestore_client.collection.return_value
        collection.document.assert_called_with("insightv2:a_b")
        stored = collection.document.return_value.set.call_args.args[0]
        assert stored["key"] == "insightv2:a/b"
        assert stored["text"] == "Generated"
        assert "updatedAt" in stored

    @pytest.mark.asyncio
    async def test_storage_failures_degrade_to_miss(self):
        db = MagicMock()
        db.collection.side_effect = RuntimeError("firestore unavailable")
        cache = FirestoreInsightCache(db=db)

        assert await cache.get("k") is None
        await cache.set("k", "text")  # does not raise

    @pytest.mark.asyncio
    async def test_sync_client(self):
        db = MagicMock()
        document = db.collection.return_value.document.return_value
        document.get.return_value = MagicMock(exists=True, to_dict=lambda: {"text": "sync text"})

        cache = FirestoreInsightCache(db=db)

        assert await cache.get("k") == "sync text"
