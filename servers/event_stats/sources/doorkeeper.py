"""
Doorkeeper ticketing platform.

Needs a bearer token (DOORKEEPER_API_TOKEN). Listings return 25 wrapped
events per page and answer 429 when the caller is throttled.
"""

from datetime import datetime
from typing import Optional

from ..client import ApiClient
from ..config import ClientConfig
from ..errors import ConfigurationError
from ..models import DoorkeeperParams, EventRecord, check_window
from ..pagination import PageNumberPagination, PaginationStrategy
from ..resilience import RateLimitRetryPolicy
from .base import EventSource, localize

DOORKEEPER_ENDPOINT = "https://api.doorkeeper.jp"
DEFAULT_SINCE = datetime(2010, 7, 1)


class DoorkeeperEvents(EventSource):
    """Search and list Doorkeeper events."""

    source = "doorkeeper"

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[ApiClient] = None,
        retry_policy: Optional[RateLimitRetryPolicy] = None,
    ):
        config = config or ClientConfig.from_env()
        if not config.doorkeeper_api_token:
            raise ConfigurationError("DOORKEEPER_API_TOKEN not configured")

        self.tz = config.tzinfo()
        super().__init__(config, client)
        self.retry_policy = retry_policy or RateLimitRetryPolicy.from_config(config)
        self.strategy: PaginationStrategy = PageNumberPagination(self.client, self.retry_policy)

    def _build_client(self) -> ApiClient:
        return ApiClient(
            DOORKEEPER_ENDPOINT,
            self.config,
            headers={"Authorization": f"Bearer {self.config.doorkeeper_api_token}"},
        )

    @property
    def default_since(self) -> datetime:
        return DEFAULT_SINCE.replace(tzinfo=self.tz)

    @property
    def default_until(self) -> datetime:
        """End of the current day in the configured zone."""
        return datetime.now(self.tz).replace(hour=23, minute=59, second=59, microsecond=999999)

    def search(self, keyword: str) -> list[EventRecord]:
        """Return one page of events matching keyword, with group details."""
        started = datetime.now()
        part = self.client.get(
            "events",
            {"q": keyword, "since": self.default_since.isoformat(), "expand": "group"},
        )
        events = [item["event"] for item in part]
        self._log_fetched("search", events, started)
        return events

    def fetch_events(
        self,
        group_id: str,
        since_at: Optional[datetime] = None,
        until_at: Optional[datetime] = None,
    ) -> list[EventRecord]:
        """Fetch every event a group published within a time window.

        Args:
            group_id: Doorkeeper group name or id
            since_at: Window start, defaults to 2010-07-01
            until_at: Window end, defaults to the end of today

        Returns:
            Events in the order the service listed them
        """
        since_at = localize(since_at, self.tz)
        until_at = localize(until_at, self.tz)
        check_window(since_at, until_at)

        params = DoorkeeperParams(
            group_id=str(group_id),
            since_at=since_at or self.default_since,
            until_at=until_at or self.default_until,
        )
        started = datetime.now()
        events = self.strategy.fetch_all(params)
        self._log_fetched("fetch_events", events, started)
        return events
