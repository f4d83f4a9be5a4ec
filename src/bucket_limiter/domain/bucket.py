"""
Fixed-window bucket arithmetic.
Time is cut into consecutive slices of `window_seconds`; every call in one slice shares a counter.
"""
from __future__ import annotations

import math

from bucket_limiter.domain.rule import Rule


def slice_index(now: float, window_seconds: int) -> int:
    return math.floor(now / window_seconds)


def bucket_key(prefix: str, key: str, rule: Rule, now: float) -> str:
    # "<prefix>:<key>:<window>:<limit>:<slice>"; cost is per call, not part of the budget's identity
    return f"{prefix}:{key}:{rule.window_seconds}:{rule.limit}:{slice_index(now, rule.window_seconds)}"


def budget_id(rule: Rule) -> tuple[int, int]:
    """Rules with equal (window, limit) share one bucket."""
    return (rule.window_seconds, rule.limit)


def seconds_until_reset(rule: Rule, now: float) -> float:
    """Time left in the current slice of `rule`; always in (0, window_seconds]."""
    return rule.window_seconds - (now % rule.window_seconds)
