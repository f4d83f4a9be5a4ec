# src/bucket_limiter/application/limiter.py

from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Callable, Optional, Sequence, TypeVar

from bucket_limiter.domain.bucket import budget_id, bucket_key, seconds_until_reset
from bucket_limiter.domain.decision import Admit, Decision, Reject, RuleOutcome
from bucket_limiter.domain.protocols import CounterStore
from bucket_limiter.domain.rule import Rule
from bucket_limiter.exceptions import InvalidRuleError, StoreUnavailableError
from bucket_limiter.infrastructure.observability import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class Limiter:
    """
    Fixed-window limiter enforcing several rules jointly against one key.

    Strategy:
    - One bucket per (key, window, limit, window slice), living in the shared store
    - Each rule's increment is a single atomic store call (no read-then-write)
    - EVERY rule is incremented on every call, even after an earlier rule is
      already violated; attempted traffic always counts against coarser windows
    - The call is admitted only if no rule's post-increment count exceeds its limit

    The limiter keeps no per-call state, so one instance can serve concurrent
    callers. Store failures raise StoreUnavailableError and never become a Reject;
    whether to fail open or closed is the caller's decision.
    """

    def __init__(
        self,
        store: CounterStore,
        *,
        key_prefix: str = "limiter",
        clock: Optional[Callable[[], float]] = None,
        operation_timeout: Optional[float] = None,
        default_rules: Sequence[Rule] = (),
    ) -> None:
        self._store = store
        self._prefix = key_prefix
        self._clock = clock or time.time
        self._timeout = operation_timeout
        self._default_rules = tuple(default_rules)

    @property
    def store(self) -> CounterStore:
        return self._store

    @property
    def default_rules(self) -> tuple[Rule, ...]:
        return self._default_rules

    async def consume(self, key: str, rules: Sequence[Rule]) -> Decision:
        """
        Charge every rule's cost against `key` and decide.

        Args:
            key: Subject being limited, e.g. "endpoint:method"
            rules: Non-empty ordered rules; order only decides which violation is reported

        Returns:
            Admit, or Reject naming the first violated rule

        Raises:
            InvalidRuleError: empty key, empty rule set, or two rules with the same window and limit
            StoreUnavailableError: an increment did not complete; `applied` lists
                the rules already charged
        """
        self._validate(key, rules)
        now = self._clock()

        outcomes: list[RuleOutcome] = []
        for index, rule in enumerate(rules):
            bk = bucket_key(self._prefix, key, rule, now)
            try:
                count = await self._call(
                    bk, self._store.atomic_increment_with_expiry(bk, rule.cost, rule.window_seconds)
                )
            except StoreUnavailableError as e:
                applied = list(range(index))
                logger.error(
                    "Store unavailable during consume",
                    key=key,
                    rule=str(rule),
                    bucket_key=bk,
                    applied=applied,
                    error=e.message,
                )
                raise StoreUnavailableError(e.message, applied=applied, details=e.details) from e
            outcomes.append(RuleOutcome(rule, bk, count, seconds_until_reset(rule, now)))

        return self._decide(key, tuple(outcomes))

    async def consume_default(self, key: str) -> Decision:
        """`consume` with the rules this limiter was configured with (LIMITER_DEFAULT_RULES)."""
        if not self._default_rules:
            raise InvalidRuleError("limiter has no default rules configured", details={"key": key})
        return await self.consume(key, self._default_rules)

    async def consume_one(self, key: str, window_seconds: int, limit: int, cost: int = 1) -> Decision:
        """Single ad-hoc rule shortcut: `consume(key, [Rule(window_seconds, limit, cost)])`."""
        return await self.consume(key, [Rule(window_seconds, limit, cost)])

    async def usage(self, key: str, rules: Sequence[Rule]) -> list[int]:
        """
        Current window count per rule, without charging anything.
        Informational only: the value can change before the caller acts on it.
        """
        self._validate(key, rules)
        now = self._clock()
        counts = []
        for rule in rules:
            bk = bucket_key(self._prefix, key, rule, now)
            counts.append(await self._call(bk, self._store.current_count(bk)))
        return counts

    # ---------- internals ----------

    @staticmethod
    def _validate(key: str, rules: Sequence[Rule]) -> None:
        if not key:
            raise InvalidRuleError("key must be a non-empty string")
        if not rules:
            raise InvalidRuleError("at least one rule is required", details={"key": key})
        seen: dict[tuple[int, int], int] = {}
        for i, rule in enumerate(rules):
            if not isinstance(rule, Rule):
                raise InvalidRuleError(f"rules[{i}] is not a Rule", details={"type": type(rule).__name__})
            # same bucket would be charged twice per call
            first = seen.setdefault(budget_id(rule), i)
            if first != i:
                raise InvalidRuleError(
                    f"rules[{i}] repeats the window and limit of rules[{first}]",
                    details={"rule": str(rule)},
                )

    async def _call(self, bk: str, call: Awaitable[T]) -> T:
        if self._timeout is None:
            return await call
        try:
            return await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            # an increment may or may not have landed; surface it, never replay it
            raise StoreUnavailableError(
                f"store did not answer within {self._timeout}s",
                details={"bucket_key": bk, "timeout": self._timeout},
            ) from e

    def _decide(self, key: str, outcomes: tuple[RuleOutcome, ...]) -> Decision:
        for index, outcome in enumerate(outcomes):
            if outcome.violated:
                logger.warning(
                    "Rate limit exceeded",
                    key=key,
                    rule=str(outcome.rule),
                    rule_index=index,
                    count=outcome.count,
                    limit=outcome.rule.limit,
                )
                return Reject(
                    rule_index=index,
                    count=outcome.count,
                    limit=outcome.rule.limit,
                    retry_after=outcome.reset_after,
                    outcomes=outcomes,
                )

        logger.debug("Request admitted", key=key, counts=[o.count for o in outcomes])
        return Admit(outcomes=outcomes)
