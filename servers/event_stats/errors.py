"""Exception types raised by the event fetchers."""

from typing import Optional


class EventStatsError(Exception):
    """Base class for all fetcher errors."""


class TransportError(EventStatsError):
    """Raised when a service answers with a non-2xx status."""

    def __init__(self, status_code: int, url: str, body: Optional[str] = None):
        super().__init__(f"HTTP {status_code} for {url}")
        self.status_code = status_code
        self.url = url
        self.body = body


class RateLimitedError(TransportError):
    """Raised when a service answers with 429 Too Many Requests."""


class ConfigurationError(EventStatsError):
    """Raised when a client cannot be built from the given configuration."""
