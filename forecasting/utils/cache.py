"""
Validation result cache.

Implements:
- TTL-bounded cache of `ValidationResult` keyed by symbol
- Redis backend when a URL is configured, in-memory otherwise
- Single-flight recompute: at most one concurrent computation per symbol

The cache only saves latency; a fresh validation never depends on it.
"""

import fnmatch
import json
import logging
import threading
import time
from collections.abc import Callable

import redis

from forecasting.data.models import ValidationResult

logger = logging.getLogger(__name__)


class ValidationCache:
    """Symbol-keyed validation cache with a time-to-live.

    Falls back to an in-memory dict if Redis is not configured or
    unreachable.
    """

    key_prefix = "validation"

    def __init__(
        self,
        ttl_seconds: int = 300,
        redis_url: str | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._redis: "redis.Redis | None" = None
        self._memory_cache: dict[str, tuple[float, ValidationResult]] = {}
        self._memory_lock = threading.Lock()
        self._key_locks: dict[str, threading.Lock] = {}
        self._key_locks_guard = threading.Lock()

        if redis_url:
            try:
                self._redis = redis.from_url(
                    redis_url,
                    decode_responses=True,
                    socket_timeout=5,
                )
                self._redis.ping()
                logger.info("Connected to Redis at %s", redis_url)
            except (redis.RedisError, ValueError):
                logger.warning("Cannot connect to Redis at %s. Using in-memory cache.", redis_url)
                self._redis = None

    @property
    def backend(self) -> str:
        return "redis" if self._redis is not None else "memory"

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get(self, symbol: str) -> ValidationResult | None:
        """Return the cached result for ``symbol`` if it has not expired."""
        key = self._key(symbol)
        if self._redis is not None:
            try:
                val = self._redis.get(key)
                if val is not None:
                    return ValidationResult.from_dict(json.loads(val))
                return None
            except redis.RedisError:
                logger.warning("Redis GET failed for key %s", key)

        with self._memory_lock:
            entry = self._memory_cache.get(key)
            if entry is None:
                return None
            expires_at, result = entry
            if self._clock() >= expires_at:
                del self._memory_cache[key]
                return None
            return result

    def set(self, symbol: str, result: ValidationResult) -> None:
        """Store ``result`` for ``symbol`` with the configured TTL."""
        key = self._key(symbol)
        if self._redis is not None:
            try:
                self._redis.setex(key, self._ttl, json.dumps(result.to_dict()))
                return
            except redis.RedisError:
                logger.warning("Redis SET failed for key %s", key)

        with self._memory_lock:
            self._memory_cache[key] = (self._clock() + self._ttl, result)

    def invalidate(self, symbol: str | None = None) -> int:
        """Drop the entry for ``symbol``, or every entry when None.

        Returns:
            Number of keys invalidated.
        """
        pattern = self._key(symbol) if symbol else f"{self.key_prefix}:*"
        self._drop_locks(symbol)
        if self._redis is not None:
            try:
                keys = list(self._redis.scan_iter(match=pattern))
                if keys:
                    self._redis.delete(*keys)
                return len(keys)
            except redis.RedisError:
                logger.warning("Redis DELETE failed for pattern %s", pattern)

        with self._memory_lock:
            to_delete = [k for k in self._memory_cache if fnmatch.fnmatch(k, pattern)]
            for k in to_delete:
                del self._memory_cache[k]
        return len(to_delete)

    def get_or_compute(
        self,
        symbol: str,
        compute: Callable[[], ValidationResult],
    ) -> ValidationResult:
        """Return the cached result, computing and storing it on a miss.

        Concurrent callers for the same symbol wait for the first one's
        computation instead of repeating it.
        """
        cached = self.get(symbol)
        if cached is not None:
            logger.debug("[Cache HIT] %s", symbol)
            return cached

        with self._lock_for(symbol):
            cached = self.get(symbol)
            if cached is not None:
                logger.debug("[Cache HIT after wait] %s", symbol)
                return cached

            logger.debug("[Cache MISS] %s, recomputing", symbol)
            result = compute()
            self.set(symbol, result)
            return result

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _key(self, symbol: str) -> str:
        return f"{self.key_prefix}:{symbol}"

    def _lock_for(self, symbol: str) -> threading.Lock:
        with self._key_locks_guard:
            lock = self._key_locks.get(symbol)
            if lock is None:
                lock = self._key_locks[symbol] = threading.Lock()
            return lock

    def _drop_locks(self, symbol: str | None) -> None:
        with self._key_locks_guard:
            if symbol:
                self._key_locks.pop(symbol, None)
            else:
                self._key_locks.clear()
