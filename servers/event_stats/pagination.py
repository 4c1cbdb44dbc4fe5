"""
Pagination strategies, one per continuation protocol.

Each strategy drives repeated GETs through an ApiClient until its own
termination rule fires and returns the events in arrival order:
- OffsetPagination: 1-based start index + server-reported total (connpass)
- PageNumberPagination: page counter, 25 items per page (Doorkeeper)
- CursorPagination: opaque "next" links (Facebook graph)

The strategies share no state machine, only the loop shape. All loop state
lives in local variables of a single fetch_all call.
"""

from datetime import datetime
from typing import Any, Optional, Protocol

import structlog

from .client import ApiClient
from .models import ConnpassParams, DoorkeeperParams, EventRecord, FacebookParams
from .resilience import RateLimitRetryPolicy

logger = structlog.get_logger()


class PaginationStrategy(Protocol):
    """Anything that can assemble a complete result set."""

    def fetch_all(self, params: Any) -> list[EventRecord]:
        ...


def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


class OffsetPagination:
    """Walk a listing by start index until the reported total is covered."""

    def __init__(self, client: ApiClient, path: str = "event/", page_size: int = 100):
        self.client = client
        self.path = path
        self.page_size = page_size

    def fetch_all(self, params: ConnpassParams) -> list[EventRecord]:
        start = 1
        pages = 0
        events: list[EventRecord] = []

        while True:
            query: dict[str, Any] = {
                "series_id": params.series_id,
                "start": start,
                "count": self.page_size,
            }
            if params.yyyymm:
                query["ym"] = params.yyyymm

            part = self.client.get(self.path, query)
            pages += 1
            returned = part["results_returned"]
            logger.debug(
                "page_fetched",
                strategy="offset",
                start=start,
                results_returned=returned,
                results_available=part.get("results_available"),
            )

            if returned == 0:
                break

            events.extend(part["events"])

            # Short page: compare the server's declared count, not len(events)
            if returned < self.page_size:
                break

            if start + self.page_size > part["results_available"]:
                break

            start += self.page_size

        logger.info("pagination_finished", strategy="offset", pages=pages, count=len(events))
        return events


class PageNumberPagination:
    """Walk a listing page by page until a short or empty page arrives.

    Every page request runs under the retry policy, so a 429 pauses and
    re-sends that same page. Other errors abort the whole fetch.
    """

    def __init__(
        self,
        client: ApiClient,
        retry_policy: RateLimitRetryPolicy,
        page_size: int = 25,
    ):
        self.client = client
        self.retry_policy = retry_policy
        self.page_size = page_size  # fixed by the service, not sent

    def fetch_all(self, params: DoorkeeperParams) -> list[EventRecord]:
        path = f"groups/{params.group_id}/events"
        page = 1
        events: list[EventRecord] = []

        while True:
            query = {
                "page": page,
                "since": _isoformat(params.since_at),
                "until": _isoformat(params.until_at),
            }
            part = self.retry_policy.execute(lambda: self.client.get(path, query))
            logger.debug("page_fetched", strategy="page_number", page=page, size=len(part))

            if not part:
                break

            events.extend(item["event"] for item in part)

            if len(part) < self.page_size:
                break

            page += 1

        logger.info("pagination_finished", strategy="page_number", pages=page, count=len(events))
        return events


class CursorPagination:
    """Follow server-provided "next" links until none is left."""

    def __init__(
        self,
        client: ApiClient,
        fields: tuple[str, ...] = ("attending_count", "start_time", "owner"),
        limit: int = 100,
        retry_policy: Optional[RateLimitRetryPolicy] = None,
    ):
        self.client = client
        self.fields = fields
        self.limit = limit
        self.retry_policy = retry_policy

    def _get(self, path: str, query: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        if self.retry_policy is None:
            return self.client.get(path, query)
        return self.retry_policy.execute(lambda: self.client.get(path, query))

    def fetch_all(self, params: FacebookParams) -> list[EventRecord]:
        query: dict[str, Any] = {"fields": ",".join(self.fields), "limit": self.limit}
        if params.since_at is not None:
            query["since"] = _isoformat(params.since_at)
        if params.until_at is not None:
            query["until"] = _isoformat(params.until_at)

        collection = self._get(f"{params.group_id}/events", query)
        pages = 1
        events: list[EventRecord] = list(collection.get("data", []))

        while collection.get("data") and collection.get("paging", {}).get("next"):
            collection = self._get(collection["paging"]["next"])
            pages += 1
            logger.debug("page_fetched", strategy="cursor", page=pages, size=len(collection.get("data", [])))
            events.extend(collection.get("data", []))

        logger.info("pagination_finished", strategy="cursor", pages=pages, count=len(events))
        return events
