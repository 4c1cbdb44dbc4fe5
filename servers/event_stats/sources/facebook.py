"""
Facebook graph events.

Needs an access token (FACEBOOK_ACCESS_TOKEN). Collections carry a
``paging.next`` link to the following page.
"""

from datetime import datetime
from typing import Optional

from ..client import ApiClient
from ..config import ClientConfig
from ..errors import ConfigurationError
from ..models import EventRecord, FacebookParams
from ..pagination import CursorPagination, PaginationStrategy
from ..resilience import RateLimitRetryPolicy
from .base import EventSource, localize

GRAPH_API_VERSION = "v19.0"
FACEBOOK_ENDPOINT = f"https://graph.facebook.com/{GRAPH_API_VERSION}"
EVENT_FIELDS = ("attending_count", "start_time", "owner")
PAGE_LIMIT = 100


class FacebookEvents(EventSource):
    """Search and list events of a Facebook group or page."""

    source = "facebook"

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        client: Optional[ApiClient] = None,
        retry_policy: Optional[RateLimitRetryPolicy] = None,
    ):
        """Initialize the facade.

        Args:
            config: Shared configuration, read from env when omitted
            client: Pre-built client, mostly for tests
            retry_policy: Applied to each page request when given; by
                default graph errors, 429 included, abort the fetch
        """
        config = config or ClientConfig.from_env()
        if not config.facebook_access_token:
            raise ConfigurationError("FACEBOOK_ACCESS_TOKEN not configured")

        self.tz = config.tzinfo()
        super().__init__(config, client)
        self.strategy: PaginationStrategy = CursorPagination(
            self.client, fields=EVENT_FIELDS, limit=PAGE_LIMIT, retry_policy=retry_policy
        )

    def _build_client(self) -> ApiClient:
        return ApiClient(
            FACEBOOK_ENDPOINT,
            self.config,
            params={"access_token": self.config.facebook_access_token},
        )

    def search(self, keyword: str) -> list[EventRecord]:
        """Return one page of public events matching keyword."""
        started = datetime.now()
        body = self.client.get(
            "search",
            {"q": keyword, "type": "event", "fields": ",".join(EVENT_FIELDS), "limit": PAGE_LIMIT},
        )
        events = list(body.get("data", []))
        self._log_fetched("search", events, started)
        return events

    def fetch_events(
        self,
        group_id: str,
        since_at: Optional[datetime] = None,
        until_at: Optional[datetime] = None,
    ) -> list[EventRecord]:
        """Fetch every event of a group; omitted bounds are not sent at all."""
        params = FacebookParams(
            group_id=str(group_id),
            since_at=localize(since_at, self.tz),
            until_at=localize(until_at, self.tz),
        )
        started = datetime.now()
        events = self.strategy.fetch_all(params)
        self._log_fetched("fetch_events", events, started)
        return events
