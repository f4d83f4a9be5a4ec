from bucket_limiter.domain.decision import Admit, Decision, Reject, RuleOutcome
from bucket_limiter.domain.protocols import CounterStore
from bucket_limiter.domain.rule import Rule, parse_rules

__all__ = [
    "Admit",
    "CounterStore",
    "Decision",
    "Reject",
    "Rule",
    "RuleOutcome",
    "parse_rules",
]
