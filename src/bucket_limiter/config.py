"""
Centralized configuration for the limiter.

- Frozen dataclass validated in __post_init__.
- Loads from OS env; a .env file in the working directory is read first (python-dotenv).
- Cached singleton via functools.lru_cache.
- The Redis URL is never logged in clear (it may carry a password).
"""

from __future__ import annotations

import functools
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from urllib.parse import urlparse

from dotenv import load_dotenv

from bucket_limiter.domain.rule import Rule, parse_rules
from bucket_limiter.exceptions import InvalidRuleError
from bucket_limiter.infrastructure.observability import get_logger


# ------------------------------------------------------------------------------
# Helpers
# ------------------------------------------------------------------------------
def _get_env_str(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    v = os.getenv(key, default)
    if required and (v is None or str(v).strip() == ""):
        raise ValueError(f"Missing required env var: {key}")
    return v


def _get_env_bool(key: str, default: bool = False) -> bool:
    v = os.getenv(key)
    if v is None:
        return default
    v = v.strip().lower()
    return v in {"1", "true", "t", "yes", "y", "on"}


def _get_env_int(key: str, default: int) -> int:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    try:
        return int(v)
    except ValueError:
        raise ValueError(f"Env var {key} must be an integer")


def _get_env_float(key: str, default: Optional[float]) -> Optional[float]:
    v = os.getenv(key)
    if v is None or v.strip() == "":
        return default
    try:
        return float(v)
    except ValueError:
        raise ValueError(f"Env var {key} must be a number")


def _validate_url(value: str, *, key: str, allowed_schemes: tuple[str, ...]) -> str:
    parsed = urlparse(value)
    if parsed.scheme not in allowed_schemes or not parsed.netloc:
        raise ValueError(f"{key} must be a valid URL with scheme in {allowed_schemes}")
    return value


def _mask_url(value: str) -> str:
    parsed = urlparse(value)
    if parsed.password:
        return value.replace(f":{parsed.password}@", ":***@")
    return value


# ------------------------------------------------------------------------------
# Settings dataclass (immutable)
# ------------------------------------------------------------------------------
DEFAULT_RULES = "10/10s,600/1h,10000/1d"


@dataclass(frozen=True)
class Settings:
    # Store
    redis_url: str = "redis://localhost:6379/0"
    key_prefix: str = "limiter"
    socket_timeout: float = 5.0
    socket_connect_timeout: float = 5.0
    max_connections: int = 100

    # Limiter
    operation_timeout: Optional[float] = None
    default_rules_text: str = DEFAULT_RULES

    # Observability
    log_level: str = "INFO"
    log_json: bool = True

    # Derived (filled in __post_init__)
    default_rules: tuple[Rule, ...] = field(init=False)

    def __post_init__(self) -> None:
        _validate_url(self.redis_url, key="LIMITER_REDIS_URL", allowed_schemes=("redis", "rediss"))

        if not self.key_prefix or not self.key_prefix.strip(":").strip():
            raise ValueError("LIMITER_KEY_PREFIX must be non-empty")
        object.__setattr__(self, "key_prefix", self.key_prefix.strip(":"))

        if self.socket_timeout <= 0 or self.socket_connect_timeout <= 0:
            raise ValueError("LIMITER_SOCKET_TIMEOUT and LIMITER_CONNECT_TIMEOUT must be > 0")
        if self.max_connections <= 0:
            raise ValueError("LIMITER_MAX_CONNECTIONS must be > 0")
        if self.operation_timeout is not None and self.operation_timeout <= 0:
            raise ValueError("LIMITER_OPERATION_TIMEOUT must be > 0 when set")

        # InvalidRuleError on malformed notation or an empty list
        rules = parse_rules(self.default_rules_text)
        if not rules:
            raise InvalidRuleError(
                "LIMITER_DEFAULT_RULES must name at least one rule",
                details={"rules": self.default_rules_text},
            )
        object.__setattr__(self, "default_rules", rules)

        if not re.fullmatch(r"(?i)DEBUG|INFO|WARNING|ERROR|CRITICAL", self.log_level.strip()):
            raise ValueError("LOG_LEVEL must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")

    # Safe dict (for debug prints without secrets)
    def safe_dict(self) -> dict:
        return {
            "redis_url": _mask_url(self.redis_url),
            "key_prefix": self.key_prefix,
            "socket_timeout": self.socket_timeout,
            "socket_connect_timeout": self.socket_connect_timeout,
            "max_connections": self.max_connections,
            "operation_timeout": self.operation_timeout,
            "default_rules": [str(r) for r in self.default_rules],
            "log_level": self.log_level,
            "log_json": self.log_json,
        }


# ------------------------------------------------------------------------------
# Loader (singleton)
# ------------------------------------------------------------------------------
_logger = get_logger(__name__)


def load_settings(env_file: Optional[Path] = None) -> Settings:
    """Build Settings from the environment, reading `env_file` (default ./.env) first."""
    env_path = env_file or Path.cwd() / ".env"
    if env_path.exists():
        load_dotenv(dotenv_path=str(env_path), override=False)

    return Settings(
        redis_url=_get_env_str("LIMITER_REDIS_URL", "redis://localhost:6379/0") or "redis://localhost:6379/0",
        key_prefix=_get_env_str("LIMITER_KEY_PREFIX", "limiter") or "limiter",
        socket_timeout=_get_env_float("LIMITER_SOCKET_TIMEOUT", 5.0),
        socket_connect_timeout=_get_env_float("LIMITER_CONNECT_TIMEOUT", 5.0),
        max_connections=_get_env_int("LIMITER_MAX_CONNECTIONS", 100),
        operation_timeout=_get_env_float("LIMITER_OPERATION_TIMEOUT", None),
        default_rules_text=_get_env_str("LIMITER_DEFAULT_RULES", DEFAULT_RULES) or DEFAULT_RULES,
        log_level=_get_env_str("LOG_LEVEL", "INFO") or "INFO",
        log_json=_get_env_bool("LOG_JSON", True),
    )


@functools.lru_cache(maxsize=1)
def get_settings() -> Settings:
    settings = load_settings()
    _logger.info("Settings loaded", settings=settings.safe_dict())
    return settings
