"""
Unit tests for rate limiter storage backends.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock, patch

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from service_ratelimiter.app.ratelimit.storage import (
    MemoryStorageBackend, RedisStorageBackend, StorageBackend
)


class TestMemoryStorageBackend:
    """Test cases for MemoryStorageBackend."""

    @pytest.fixture
    def storage(self):
        """Create MemoryStorageBackend instance."""
        return MemoryStorageBackend()

    def test_satisfies_capability(self, storage):
        assert isinstance(storage, StorageBackend)

    @pytest.mark.asyncio
    async def test_increment_within_window(self, storage):
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1000.2):
            assert await storage.increment_accesses("ip:127.0.0.1") == 1
            assert await storage.increment_accesses("ip:127.0.0.1") == 2
            assert await storage.increment_accesses("ip:10.0.0.1") == 1

    @pytest.mark.asyncio
    async def test_increment_resets_in_new_window(self, storage):
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1000.2):
            await storage.increment_accesses("key")
            await storage.increment_accesses("key")
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1001.5):
            assert await storage.increment_accesses("key") == 1

    @pytest.mark.asyncio
    async def test_stale_windows_are_pruned(self, storage):
        """Test that counters from past windows do not accumulate."""
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1000.2):
            for i in range(1000):
                await storage.increment_accesses(f"ip-{i}")
        assert len(storage._accesses) == 1000

        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1001.5):
            await storage.increment_accesses("ip-new")

        assert list(storage._accesses) == ["ip-new"]

    @pytest.mark.asyncio
    async def test_longer_windows_survive_pruning(self, storage):
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1200.0):
            await storage.increment_accesses("slow", window_seconds=60)
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1230.0):
            await storage.increment_accesses("fast")
            assert await storage.increment_accesses("slow", window_seconds=60) == 2

    @pytest.mark.asyncio
    async def test_expired_blocks_are_pruned(self, storage):
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1000.0):
            await storage.add_block("key", 500)
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1002.0):
            await storage.increment_accesses("other")
        assert storage._blocks == {}

    @pytest.mark.asyncio
    async def test_block_lifecycle(self, storage):
        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1000.0):
            assert await storage.get_block("key") is None
            blocked_until = await storage.add_block("key", 500)
            assert blocked_until == pytest.approx(1000.5)
            assert await storage.get_block("key") == pytest.approx(1000.5)

        with patch("service_ratelimiter.app.ratelimit.storage.time.time", return_value=1001.0):
            assert await storage.get_block("key") is None


class TestRedisStorageBackend:
    """Test cases for RedisStorageBackend."""

    @pytest.fixture
    def storage(self):
        """Create RedisStorageBackend instance."""
        return RedisStorageBackend("localhost:6380", "secret", 2)

    def test_satisfies_capability(self, storage):
        assert isinstance(storage, StorageBackend)

    @pytest.mark.asyncio
    async def test_client_built_from_address(self, storage):
        """Test that the client is created lazily from address, password and db."""
        client = await storage._get_redis()
        kwargs = client.connection_pool.connection_kwargs

        assert kwargs["host"] == "localhost"
        assert kwargs["port"] == 6380
        assert kwargs["password"] == "secret"
        assert kwargs["db"] == 2
        assert await storage._get_redis() is client

    @pytest.mark.asyncio
    async def test_client_built_from_ipv6_address(self):
        storage = RedisStorageBackend("[::1]:6379", "", 1)
        client = await storage._get_redis()
        kwargs = client.connection_pool.connection_kwargs

        assert kwargs["host"] == "::1"
        assert kwargs["port"] == 6379
        assert kwargs["db"] == 1
        assert kwargs.get("password") is None

    def test_make_key(self, storage):
        assert storage._make_key("block", "ip:1.2.3.4") == "rate_limit:block:ip:1.2.3.4"

    @pytest.mark.asyncio
    async def test_increment_accesses(self, storage):
        with patch.object(storage, '_get_redis', new_callable=AsyncMock) as mock_get_redis:
            mock_redis = MagicMock()
            mock_get_redis.return_value = mock_redis

            mock_pipeline = MagicMock()
            mock_pipeline.execute = AsyncMock(return_value=[3, True])
            mock_redis.pipeline.return_value.__aenter__.return_value = mock_pipeline

            result = await storage.increment_accesses("ip:127.0.0.1")

            assert result == 3
            mock_pipeline.incr.assert_called_once()
            mock_pipeline.expire.assert_called_once()

    @pytest.mark.asyncio
    async def test_get_block(self, storage):
        with patch.object(storage, '_get_redis', new_callable=AsyncMock) as mock_get_redis:
            mock_redis = AsyncMock()
            mock_get_redis.return_value = mock_redis

            mock_redis.get.return_value = "1700000000.25"
            assert await storage.get_block("key") == 1700000000.25

            mock_redis.get.return_value = None
            assert await storage.get_block("key") is None

    @pytest.mark.asyncio
    async def test_add_block(self, storage):
        with patch.object(storage, '_get_redis', new_callable=AsyncMock) as mock_get_redis:
            mock_redis = AsyncMock()
            mock_get_redis.return_value = mock_redis

            await storage.add_block("key", 1500)

            args, kwargs = mock_redis.set.call_args
            assert args[0] == "rate_limit:block:key"
            assert kwargs["px"] == 1500

    @pytest.mark.asyncio
    async def test_close(self, storage):
        mock_redis = AsyncMock()
        storage._redis = mock_redis

        await storage.close()

        mock_redis.aclose.assert_awaited_once()
        assert storage._redis is None
