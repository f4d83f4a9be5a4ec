from __future__ import annotations

import re
from dataclasses import dataclass

from bucket_limiter.exceptions import InvalidRuleError


_RULE_RE = re.compile(r"^\s*(\d+)\s*/\s*(\d+)\s*([smhd]?)\s*(?:\*\s*(\d+))?\s*$", re.IGNORECASE)
_UNIT_SECONDS = {"": 1, "s": 1, "m": 60, "h": 3600, "d": 86400}


@dataclass(frozen=True, slots=True)
class Rule:
    """
    One fixed-window constraint: at most `limit` cost units per `window_seconds`.
    A single call costing more than `limit` is legal and always rejected.
    """
    window_seconds: int
    limit: int
    cost: int = 1

    def __post_init__(self) -> None:
        for name in ("window_seconds", "limit", "cost"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRuleError(f"{name} must be an integer", details={name: value})
        if self.window_seconds <= 0:
            raise InvalidRuleError("window_seconds must be > 0", details={"window_seconds": self.window_seconds})
        if self.limit <= 0:
            raise InvalidRuleError("limit must be > 0", details={"limit": self.limit})
        if self.cost < 1:
            raise InvalidRuleError("cost must be >= 1", details={"cost": self.cost})

    @classmethod
    def parse(cls, text: str) -> Rule:
        """Parse `"<limit>/<window>[s|m|h|d][*<cost>]"`, e.g. `"600/1h"` or `"5/1m*2"`."""
        m = _RULE_RE.match(text or "")
        if not m:
            raise InvalidRuleError(f"cannot parse rule {text!r}", details={"rule": text})
        limit, window, unit, cost = m.groups()
        return cls(
            window_seconds=int(window) * _UNIT_SECONDS[unit.lower()],
            limit=int(limit),
            cost=int(cost) if cost else 1,
        )

    def __str__(self) -> str:
        base = f"{self.limit}/{self.window_seconds}s"
        return base if self.cost == 1 else f"{base}*{self.cost}"


def parse_rules(text: str) -> tuple[Rule, ...]:
    """Parse a comma-separated rule list; blank entries are ignored."""
    return tuple(Rule.parse(part) for part in text.split(",") if part.strip())
