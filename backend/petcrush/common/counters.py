"""Rate-limit counters: Redis primary, in-memory fallback.

Counters are best-effort. Losing them on restart only resets throttling
windows, so the in-memory store is an acceptable fallback.
"""

import logging
import time
from typing import Dict, Optional, Tuple

from petcrush.common.exceptions import RateLimited

logger = logging.getLogger(__name__)


class CounterStore:
    """Fixed-window counter store interface.

    Key convention: ``petcrush:{domain}:{operation}:{identifier}``
    """

    async def incr(self, key: str, window_seconds: int) -> Tuple[int, int]:
        """Increment *key* and return ``(count, seconds_until_reset)``."""
        raise NotImplementedError

    async def reset(self, key: str) -> None:
        raise NotImplementedError


class InMemoryCounterStore(CounterStore):
    """Process-local counters; reset on restart. Expired keys are swept every ``sweep_interval`` seconds."""

    def __init__(self, clock=time.monotonic, sweep_interval: float = 60.0):
        self._clock = clock
        self._counters: Dict[str, Dict[str, float]] = {}  # key -> {"count": int, "expires": float}
        self._sweep_interval = sweep_interval
        self._next_sweep = clock() + sweep_interval

    @property
    def size(self) -> int:
        return len(self._counters)

    def _sweep(self, now: float) -> None:
        expired = [key for key, entry in self._counters.items() if entry["expires"] <= now]
        for key in expired:
            del self._counters[key]
        self._next_sweep = now + self._sweep_interval

    async def incr(self, key: str, window_seconds: int) -> Tuple[int, int]:
        now = self._clock()
        if now >= self._next_sweep:
            self._sweep(now)
        entry = self._counters.get(key)
        if entry is None or entry["expires"] <= now:
            entry = {"count": 0, "expires": now + window_seconds}
            self._counters[key] = entry
        entry["count"] += 1
        return int(entry["count"]), max(int(entry["expires"] - now), 1)

    async def reset(self, key: str) -> None:
        self._counters.pop(key, None)


class RedisCounterStore(CounterStore):
    """INCR + EXPIRE on Redis, degrading to the in-memory store on errors."""

    def __init__(self, redis_client, fallback: Optional[InMemoryCounterStore] = None):
        self._redis = redis_client
        self._fallback = fallback or InMemoryCounterStore()

    async def incr(self, key: str, window_seconds: int) -> Tuple[int, int]:
        try:
            count = await self._redis.incr(key)
            if count == 1:
                await self._redis.expire(key, window_seconds)
            ttl = await self._redis.ttl(key)
            if ttl is None or ttl < 0:
                await self._redis.expire(key, window_seconds)
                ttl = window_seconds
            return int(count), int(ttl)
        except Exception as e:
            logger.debug(f"Redis INCR failed for {key}: {e}")
            return await self._fallback.incr(key, window_seconds)

    async def reset(self, key: str) -> None:
        try:
            await self._redis.delete(key)
        except Exception as e:
            logger.debug(f"Redis DELETE failed for {key}: {e}")
        await self._fallback.reset(key)


class RateLimiter:
    """Throttles an operation per identifier within a fixed window."""

    def __init__(self, store: CounterStore, prefix: str, limit: int, window_seconds: int):
        self.store = store
        self.prefix = prefix
        self.limit = limit
        self.window_seconds = window_seconds

    def _key(self, identifier: str) -> str:
        return f"{self.prefix}:{identifier}"

    async def hit(self, identifier: str) -> int:
        """Count one attempt; raise ``RateLimited`` once over the limit."""
        count, retry_after = await self.store.incr(self._key(identifier), self.window_seconds)
        if count > self.limit:
            logger.info(f"Rate limit hit for {self.prefix} ({count}/{self.limit})")
            raise RateLimited(retry_after=retry_after)
        return count

    async def reset(self, identifier: str) -> None:
        await self.store.reset(self._key(identifier))


# ---------------------------------------------------------------------------
# Singleton
# ---------------------------------------------------------------------------

_counter_store: Optional[CounterStore] = None


def init_counter_store(redis_client=None) -> CounterStore:
    """Initialize the global CounterStore (called during app startup)."""
    global _counter_store
    _counter_store = RedisCounterStore(redis_client) if redis_client is not None else InMemoryCounterStore()
    logger.info(
        "CounterStore initialized (%s)",
        "Redis + in-memory" if redis_client is not None else "in-memory only",
    )
    return _counter_store


def get_counter_store() -> CounterStore:
    """Return the global CounterStore instance (lazy-init if needed)."""
    global _counter_store
    if _counter_store is None:
        _counter_store = InMemoryCounterStore()
        logger.warning("CounterStore accessed before init, using in-memory only")
    return _counter_store
