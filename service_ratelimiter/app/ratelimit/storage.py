"""
Storage backends for the rate limiter.

A backend records request attempts per key within a time window and keeps
the blocked-until state of keys that exceeded their policy. The decision
logic that consumes these operations lives outside this package.
"""

import threading
import time
from typing import Dict, Optional, Protocol, Tuple, runtime_checkable

import redis.asyncio as redis

from shared.logging import get_logger


@runtime_checkable
class StorageBackend(Protocol):
    """Capability consumed by the admission-control component."""

    kind: str

    async def increment_accesses(self, key: str, window_seconds: int = 1) -> int:
        """Record one attempt and return the count in the active window."""
        ...

    async def get_block(self, key: str) -> Optional[float]:
        """Return the epoch time ``key`` is blocked until, if blocked."""
        ...

    async def add_block(self, key: str, block_milliseconds: int) -> float:
        """Block ``key`` for ``block_milliseconds`` and return the expiry."""
        ...


class MemoryStorageBackend:
    """In-process backend, the default when nothing else is configured."""

    kind = "memory"

    def __init__(self):
        self.logger = get_logger("ratelimiter.storage.memory")
        self._lock = threading.Lock()
        # key -> (window index, count, window end)
        self._accesses: Dict[str, Tuple[int, int, float]] = {}
        self._blocks: Dict[str, float] = {}
        self._last_prune = 0

    async def increment_accesses(self, key: str, window_seconds: int = 1) -> int:
        now = time.time()
        window_seconds = max(1, window_seconds)
        window = int(now) // window_seconds
        with self._lock:
            self._prune_locked(now)
            start, count, _ = self._accesses.get(key, (window, 0, 0.0))
            if start != window:
                count = 0
            count += 1
            self._accesses[key] = (window, count, float((window + 1) * window_seconds))
        return count

    def _prune_locked(self, now: float) -> None:
        """Drop counters and blocks whose window has passed, at most once a second."""
        if int(now) == self._last_prune:
            return
        self._last_prune = int(now)
        stale = [key for key, (_, _, ends_at) in self._accesses.items() if ends_at <= now]
        for key in stale:
            del self._accesses[key]
        expired = [key for key, blocked_until in self._blocks.items() if blocked_until <= now]
        for key in expired:
            del self._blocks[key]

    async def get_block(self, key: str) -> Optional[float]:
        now = time.time()
        with self._lock:
            blocked_until = self._blocks.get(key)
            if blocked_until is not None and blocked_until <= now:
                del self._blocks[key]
                return None
        return blocked_until

    async def add_block(self, key: str, block_milliseconds: int) -> float:
        blocked_until = time.time() + block_milliseconds / 1000
        with self._lock:
            self._blocks[key] = blocked_until
        self.logger.debug("Key blocked", key=key, block_milliseconds=block_milliseconds)
        return blocked_until


class RedisStorageBackend:
    """Distributed backend using Redis counters with expiry."""

    kind = "redis"

    def __init__(self, address: str, password: str = "", db: int = 0):
        self.address = address
        self.password = password
        self.db = db
        self.logger = get_logger("ratelimiter.storage.redis")
        self._redis: Optional[redis.Redis] = None

    async def _get_redis(self) -> redis.Redis:
        """Get Redis connection."""
        if self._redis is None:
            self._redis = redis.from_url(
                f"redis://{self.address}/{self.db}",
                password=self.password or None,
                decode_responses=True
            )
        return self._redis

    def _make_key(self, kind: str, key: str) -> str:
        """Generate rate limit key."""
        return f"rate_limit:{kind}:{key}"

    async def increment_accesses(self, key: str, window_seconds: int = 1) -> int:
        redis_client = await self._get_redis()
        window = int(time.time()) // max(1, window_seconds)
        counter_key = self._make_key("accesses", f"{key}:{window}")

        async with redis_client.pipeline() as pipeline:
            pipeline.incr(counter_key)
            pipeline.expire(counter_key, window_seconds + 1)
            results = await pipeline.execute()

        return int(results[0])

    async def get_block(self, key: str) -> Optional[float]:
        redis_client = await self._get_redis()
        value = await redis_client.get(self._make_key("block", key))
        if value is None:
            return None
        if isinstance(value, bytes):
            value = value.decode("utf-8")
        return float(value)

    async def add_block(self, key: str, block_milliseconds: int) -> float:
        redis_client = await self._get_redis()
        blocked_until = time.time() + block_milliseconds / 1000
        await redis_client.set(
            self._make_key("block", key),
            str(blocked_until),
            px=max(1, block_milliseconds)
        )
        self.logger.info("Key blocked", key=key, block_milliseconds=block_milliseconds)
        return blocked_until

    async def close(self):
        """Close the Redis connection."""
        if self._redis is not None:
            await self._redis.aclose()
            self._redis = None
