from typing import Any, Dict, Optional


# ───────────────────────── Base & Limiter Exceptions ─────────────────────────
class LimiterError(Exception):
    """Base class for limiter errors. A rejected request is NOT an error; see `Reject`."""
    code: str = "limiter_error"
    message: str
    details: Optional[Dict[str, Any]]

    def __init__(
        self,
        message: str = "",
        *,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message or self.__class__.__name__)
        if code is not None:
            self.code = code
        self.message = message or self.__class__.__name__
        self.details = details


class InvalidRuleError(LimiterError):
    # malformed rule or empty rule set; never retried
    code = "invalid_rule"


class StoreUnavailableError(LimiterError):
    """
    The store could not complete an increment (connection lost, timeout, script error).

    `applied` lists the positions of rules whose increments completed before the
    failure; those increments are durable and will not be rolled back.
    """
    code = "store_unavailable"

    def __init__(
        self,
        message: str = "",
        *,
        applied: Optional[list[int]] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.applied: list[int] = list(applied or [])
        merged = dict(details or {})
        merged["applied"] = self.applied
        super().__init__(message, details=merged)
