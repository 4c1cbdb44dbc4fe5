"""
Event Statistics Fetchers

Pulls complete event listings from:
- connpass (offset/total pagination)
- Doorkeeper (page-number pagination, 429 pause-and-retry)
- Facebook graph (next-link pagination)

Records are returned exactly as each service sends them.
"""

from .config import ClientConfig
from .errors import ConfigurationError, EventStatsError, RateLimitedError, TransportError
from .sources import ConnpassEvents, DoorkeeperEvents, FacebookEvents

__version__ = "1.0.0"

__all__ = [
    "ClientConfig",
    "ConfigurationError",
    "ConnpassEvents",
    "DoorkeeperEvents",
    "EventStatsError",
    "FacebookEvents",
    "RateLimitedError",
    "TransportError",
]
