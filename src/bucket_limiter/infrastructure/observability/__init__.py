"""
Limiter observability
Structured logging
"""
from bucket_limiter.infrastructure.observability.logger import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "get_logger",
]
