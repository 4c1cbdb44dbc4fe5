"""Resilience patterns for throttled event services."""

from .retry import DEFAULT_RATE_LIMIT_DELAY, RateLimitRetryPolicy

__all__ = [
    "DEFAULT_RATE_LIMIT_DELAY",
    "RateLimitRetryPolicy",
]
