from bucket_limiter.application.limiter import Limiter

__all__ = ["Limiter"]
