"""
connpass event directory.

Public API, no credential. Listings page by 1-based ``start`` with at most
100 results per request and report ``results_available`` as the total.
"""

from datetime import datetime
from typing import Optional

from ..client import ApiClient
from ..config import ClientConfig
from ..models import ConnpassParams, EventRecord
from ..pagination import OffsetPagination, PaginationStrategy
from .base import EventSource

CONNPASS_ENDPOINT = "https://connpass.com/api/v1"
PAGE_SIZE = 100


class ConnpassEvents(EventSource):
    """Search and list connpass events."""

    source = "connpass"

    def __init__(self, config: Optional[ClientConfig] = None, client: Optional[ApiClient] = None):
        super().__init__(config or ClientConfig.from_env(), client)
        self.strategy: PaginationStrategy = OffsetPagination(
            self.client, path="event/", page_size=PAGE_SIZE
        )

    def _build_client(self) -> ApiClient:
        return ApiClient(CONNPASS_ENDPOINT, self.config)

    def search(self, keyword: str) -> list[EventRecord]:
        """Return the first 100 events matching keyword. Does not paginate."""
        started = datetime.now()
        body = self.client.get("event/", {"keyword": keyword, "count": PAGE_SIZE})
        events = list(body["events"])
        self._log_fetched("search", events, started)
        return events

    def fetch_events(self, series_id: int, yyyymm: Optional[str] = None) -> list[EventRecord]:
        """Fetch every event of a series (group), optionally within one month.

        Args:
            series_id: connpass series id
            yyyymm: Month filter such as "201907"

        Returns:
            Events in the order the service listed them
        """
        params = ConnpassParams(series_id=series_id, yyyymm=yyyymm)
        started = datetime.now()
        events = self.strategy.fetch_all(params)
        self._log_fetched("fetch_events", events, started)
        return events
