"""Shared pytest fixtures for event fetcher tests."""

from typing import Any, Callable, Optional

import httpx
import pytest
import structlog

from servers.event_stats.client import ApiClient
from servers.event_stats.config import ClientConfig
from servers.event_stats.resilience import RateLimitRetryPolicy


class FakeService:
    """httpx MockTransport handler replaying queued responses in order."""

    def __init__(self):
        self.responses: list[httpx.Response] = []
        self.requests: list[httpx.Request] = []

    def queue(self, *responses: httpx.Response) -> "FakeService":
        self.responses.extend(responses)
        return self

    def queue_json(self, *bodies: Any) -> "FakeService":
        return self.queue(*(httpx.Response(200, json=body) for body in bodies))

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"Unexpected request: {request.url}")
        return self.responses.pop(0)

    def client(
        self,
        endpoint: str = "https://api.example.test",
        config: Optional[ClientConfig] = None,
        **kwargs: Any,
    ) -> ApiClient:
        return ApiClient(
            endpoint,
            config or ClientConfig(),
            transport=httpx.MockTransport(self),
            **kwargs,
        )

    def params(self, index: int) -> httpx.QueryParams:
        return self.requests[index].url.params


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def fake_service() -> FakeService:
    """Provide an empty fake service."""
    return FakeService()


@pytest.fixture
def config() -> ClientConfig:
    """Provide a config carrying both credentials."""
    return ClientConfig(
        doorkeeper_api_token="dk-token",
        facebook_access_token="fb-token",
        time_zone="Asia/Tokyo",
    )


@pytest.fixture
def sleeps() -> list[float]:
    """Collect the delays a retry policy asked to sleep for."""
    return []


@pytest.fixture
def retry_policy(sleeps: list[float]) -> RateLimitRetryPolicy:
    """Provide a 60 second retry policy that records instead of sleeping."""
    return RateLimitRetryPolicy(delay=60.0, sleep=sleeps.append)


@pytest.fixture
def connpass_page() -> Callable[..., dict]:
    """Build a connpass listing page starting at a 1-based index."""

    def build(start: int, returned: int, available: int, items: Optional[int] = None) -> dict:
        count = returned if items is None else items
        return {
            "results_returned": returned,
            "results_available": available,
            "results_start": start,
            "events": [
                {"event_id": start + i, "title": f"Event {start + i}"} for i in range(count)
            ],
        }

    return build


@pytest.fixture
def doorkeeper_page() -> Callable[..., list]:
    """Build a Doorkeeper page of wrapped events."""

    def build(size: int, first_id: int = 1) -> list:
        return [
            {"event": {"id": first_id + i, "title": f"Meetup {first_id + i}"}}
            for i in range(size)
        ]

    return build


@pytest.fixture
def facebook_collection() -> Callable[..., dict]:
    """Build a graph collection, optionally pointing at a next page."""

    def build(size: int, first_id: int = 1, next_url: Optional[str] = None) -> dict:
        body: dict[str, Any] = {
            "data": [
                {"id": str(first_id + i), "attending_count": i, "start_time": "2019-07-01T19:00:00+0900"}
                for i in range(size)
            ],
            "paging": {"cursors": {"before": "b", "after": "a"}},
        }
        if next_url:
            body["paging"]["next"] = next_url
        return body

    return build
