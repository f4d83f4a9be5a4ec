# src/bucket_limiter/dependencies.py
"""Wiring: build stores and limiters from Settings."""
from __future__ import annotations

from typing import Optional

from bucket_limiter.application.limiter import Limiter
from bucket_limiter.config import Settings, get_settings
from bucket_limiter.infrastructure.redis_store import RedisCounterStore


def build_store(settings: Settings) -> RedisCounterStore:
    return RedisCounterStore.from_url(
        settings.redis_url,
        socket_timeout=settings.socket_timeout,
        socket_connect_timeout=settings.socket_connect_timeout,
        max_connections=settings.max_connections,
    )


def build_limiter(settings: Optional[Settings] = None) -> Limiter:
    settings = settings or get_settings()
    return Limiter(
        build_store(settings),
        key_prefix=settings.key_prefix,
        operation_timeout=settings.operation_timeout,
        default_rules=settings.default_rules,
    )
