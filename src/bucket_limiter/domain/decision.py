from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from bucket_limiter.domain.rule import Rule


@dataclass(frozen=True, slots=True)
class RuleOutcome:
    """Post-increment state of one rule's bucket for a single consume call."""
    rule: Rule
    bucket_key: str
    count: int
    reset_after: float

    @property
    def violated(self) -> bool:
        return self.count > self.rule.limit

    @property
    def remaining(self) -> int:
        return max(0, self.rule.limit - self.count)


@dataclass(frozen=True, slots=True)
class Admit:
    outcomes: tuple[RuleOutcome, ...] = ()

    allowed = True

    @property
    def remaining(self) -> int:
        """Smallest headroom left across all rules."""
        return min((o.remaining for o in self.outcomes), default=0)


@dataclass(frozen=True, slots=True)
class Reject:
    """
    The request exceeded at least one rule. `rule_index` is the position of the
    first violated rule in the caller's sequence; `retry_after` is the time left
    in that rule's current window.
    """
    rule_index: int
    count: int
    limit: int
    retry_after: float
    outcomes: tuple[RuleOutcome, ...] = ()

    allowed = False

    @property
    def violated_indices(self) -> list[int]:
        return [i for i, o in enumerate(self.outcomes) if o.violated]


Decision = Union[Admit, Reject]
