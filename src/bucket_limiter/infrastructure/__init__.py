"""
Limiter infrastructure
Counter store backends and observability
"""
from bucket_limiter.infrastructure.memory_store import InMemoryCounterStore
from bucket_limiter.infrastructure.redis_store import RedisCounterStore

__all__ = [
    "InMemoryCounterStore",
    "RedisCounterStore",
]
