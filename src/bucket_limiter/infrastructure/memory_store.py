from __future__ import annotations

import asyncio
import time
from typing import Callable, Optional


class InMemoryCounterStore:
    """
    Minimal async in-process counter store for local/dev and tests.
    **Not shared across processes**; use RedisCounterStore for distributed callers.

    Old window slices are never read again, so expired buckets are swept every
    `sweep_every` increments. `clock` is injectable so expiry can be driven without sleeping.
    """
    def __init__(self, clock: Optional[Callable[[], float]] = None, sweep_every: int = 100) -> None:
        if sweep_every < 1:
            raise ValueError("sweep_every must be >= 1")
        self._clock = clock or time.time
        self._sweep_every = sweep_every
        self._increments = 0
        self._data: dict[str, int] = {}
        self._exp: dict[str, float] = {}
        self._lock = asyncio.Lock()

    async def atomic_increment_with_expiry(self, bucket_key: str, amount: int, ttl_seconds: int) -> int:
        async with self._lock:
            self._increments += 1
            if self._increments % self._sweep_every == 0:
                self._sweep()
            else:
                self._purge_if_needed(bucket_key)
            if bucket_key not in self._data:
                self._data[bucket_key] = 0
                self._exp[bucket_key] = self._clock() + ttl_seconds
            self._data[bucket_key] += amount
            return self._data[bucket_key]

    async def current_count(self, bucket_key: str) -> int:
        async with self._lock:
            self._purge_if_needed(bucket_key)
            return self._data.get(bucket_key, 0)

    async def ttl(self, bucket_key: str) -> int:
        async with self._lock:
            self._purge_if_needed(bucket_key)
            exp = self._exp.get(bucket_key)
            if exp is None:
                return -2
            return max(0, int(exp - self._clock()))

    def _purge_if_needed(self, key: str) -> None:
        exp = self._exp.get(key)
        if exp is not None and self._clock() >= exp:
            self._data.pop(key, None)
            self._exp.pop(key, None)

    def _sweep(self) -> None:
        now = self._clock()
        for key in [k for k, exp in self._exp.items() if now >= exp]:
            self._data.pop(key, None)
            self._exp.pop(key, None)

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        async with self._lock:
            self._data.clear()
            self._exp.clear()
