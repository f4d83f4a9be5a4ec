"""
Redis Counter Store
Async Redis-backed buckets; increment-and-expire runs as one server-side Lua script
"""
from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import redis.asyncio as redis
from redis.asyncio import Redis
from redis.exceptions import NoScriptError, RedisError

from bucket_limiter.exceptions import StoreUnavailableError
from bucket_limiter.infrastructure.observability import get_logger

logger = get_logger(__name__)


class RedisCounterStore:
    """
    Counter store on a shared Redis.

    Every limiter process pointing at the same Redis shares the same buckets.
    The client is built without retry-on-timeout: an increment whose reply was
    lost may already have been applied, and replaying it would double count.

    Attributes:
        redis: Async Redis client
    """

    # ---------- atomic increment ----------

    _INCREMENT_LUA = """
    -- KEYS[1] = bucket key
    -- ARGV[1] = amount
    -- ARGV[2] = ttl seconds (applied on creation only)
    local c = redis.call('INCRBY', KEYS[1], tonumber(ARGV[1]))
    if redis.call('TTL', KEYS[1]) < 0 then
      redis.call('EXPIRE', KEYS[1], tonumber(ARGV[2]))
    end
    return c
    """

    def __init__(self, client: Redis) -> None:
        self.redis = client
        self._increment_sha: Optional[str] = None

    # ---------- construction ----------

    @classmethod
    def from_url(
        cls,
        url: str,
        *,
        socket_timeout: float = 5.0,
        socket_connect_timeout: float = 5.0,
        max_connections: int = 100,
    ) -> RedisCounterStore:
        # NOTE: from_url is sync; do NOT await it
        client = redis.from_url(
            url,
            encoding="utf-8",
            decode_responses=True,
            health_check_interval=30,
            socket_connect_timeout=socket_connect_timeout,
            socket_timeout=socket_timeout,
            retry_on_timeout=False,
            max_connections=max_connections,
        )
        return cls(client)

    @classmethod
    def from_config(cls, host: str, port: int = 6379, db: int = 0, **kwargs: Any) -> RedisCounterStore:
        return cls.from_url(f"redis://{host}:{port}/{db}", **kwargs)

    # ---------- low-level helpers ----------

    async def _guard(self, bucket_key: str, fn: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await fn()
        except RedisError as e:
            logger.error("Redis operation failed", bucket_key=bucket_key, error=str(e))
            raise StoreUnavailableError(
                f"Redis error: {e}", details={"bucket_key": bucket_key}
            ) from e

    async def load_scripts(self) -> None:
        """Preload the increment script so later calls can use EVALSHA."""
        self._increment_sha = await self._guard(
            "", lambda: self.redis.script_load(self._INCREMENT_LUA)
        )
        logger.info("Loaded limiter script", sha=self._increment_sha)

    # ---------- CounterStore ----------

    async def atomic_increment_with_expiry(self, bucket_key: str, amount: int, ttl_seconds: int) -> int:
        """
        INCRBY + EXPIRE-on-creation in one script execution.

        Falls back to EVAL only on NOSCRIPT (script cache flushed or never
        loaded); a NOSCRIPT reply guarantees nothing ran, so this is not a retry.
        """
        async def _run() -> Any:
            if self._increment_sha is not None:
                try:
                    return await self.redis.evalsha(self._increment_sha, 1, bucket_key, amount, ttl_seconds)  # type: ignore[misc]
                except NoScriptError:
                    self._increment_sha = None
            return await self.redis.eval(self._INCREMENT_LUA, 1, bucket_key, amount, ttl_seconds)  # type: ignore[misc]

        count = await self._guard(bucket_key, _run)
        return int(count)

    async def current_count(self, bucket_key: str) -> int:
        raw = await self._guard(bucket_key, lambda: self.redis.get(bucket_key))
        return int(raw) if raw is not None else 0

    async def ttl(self, bucket_key: str) -> int:
        """Remaining TTL in seconds; -2 if the bucket does not exist."""
        return int(await self._guard(bucket_key, lambda: self.redis.ttl(bucket_key)))

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except RedisError as e:
            logger.warning("Redis ping failed", error=str(e))
            return False

    async def close(self) -> None:
        await self.redis.aclose()
