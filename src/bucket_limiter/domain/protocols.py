"""
Counter store protocol (abstract interface)
Contract for every backend that hosts rate-limit buckets
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CounterStore(Protocol):
    """
    Shared store of expiring counters.

    The store is the only synchronization point between limiter instances, so
    `atomic_increment_with_expiry` MUST be a single indivisible operation on the
    backend (server-side script or transaction), never a client-side read-then-write.
    Failures surface as `StoreUnavailableError`.
    """

    async def atomic_increment_with_expiry(self, bucket_key: str, amount: int, ttl_seconds: int) -> int:
        """
        Create the bucket at 0 with `ttl_seconds` expiry if absent, add `amount`,
        and return the post-increment count.

        Args:
            bucket_key: Fully built bucket key
            amount: Cost to add (>= 1)
            ttl_seconds: Expiry applied only when the bucket is created

        Returns:
            Count after the increment
        """
        ...

    async def current_count(self, bucket_key: str) -> int:
        """
        Read a bucket without mutating it.

        Returns:
            Current count, or 0 if the bucket does not exist or has expired
        """
        ...

    async def ping(self) -> bool:
        """
        Returns:
            True if the store is reachable
        """
        ...

    async def close(self) -> None:
        """Release connections held by the store."""
        ...
