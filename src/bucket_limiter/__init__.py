"""
bucket_limiter: multi-rule fixed-window rate limiting on a shared Redis.

    limiter = Limiter(RedisCounterStore.from_url("redis://localhost:6379/0"))
    decision = await limiter.consume("search:GET", [Rule(10, 10), Rule(3600, 600)])
"""
from bucket_limiter.application import Limiter
from bucket_limiter.config import Settings, get_settings, load_settings
from bucket_limiter.dependencies import build_limiter, build_store
from bucket_limiter.domain import Admit, CounterStore, Decision, Reject, Rule, RuleOutcome, parse_rules
from bucket_limiter.exceptions import InvalidRuleError, LimiterError, StoreUnavailableError
from bucket_limiter.infrastructure import InMemoryCounterStore, RedisCounterStore
from bucket_limiter.infrastructure.observability import configure_logging, get_logger

__all__ = [
    "Admit",
    "CounterStore",
    "Decision",
    "InMemoryCounterStore",
    "InvalidRuleError",
    "Limiter",
    "LimiterError",
    "RedisCounterStore",
    "Reject",
    "Rule",
    "RuleOutcome",
    "Settings",
    "StoreUnavailableError",
    "build_limiter",
    "build_store",
    "configure_logging",
    "get_logger",
    "get_settings",
    "load_settings",
    "parse_rules",
]
