"""Tests for the rate-limit pause-and-retry policy."""

import time

import pytest
from structlog.testing import capture_logs

from servers.event_stats.config import ClientConfig
from servers.event_stats.errors import RateLimitedError, TransportError
from servers.event_stats.resilience import DEFAULT_RATE_LIMIT_DELAY, RateLimitRetryPolicy


def throttled() -> RateLimitedError:
    return RateLimitedError(429, "https://api.doorkeeper.jp/groups/x/events?page=1")


class TestRateLimitRetryPolicy:
    """Tests for RateLimitRetryPolicy.execute."""

    def test_returns_on_success(self, retry_policy: RateLimitRetryPolicy, sleeps: list[float]):
        """Should return the result without pausing."""
        assert retry_policy.execute(lambda: "ok") == "ok"
        assert sleeps == []

    def test_retries_while_rate_limited(self, retry_policy: RateLimitRetryPolicy, sleeps: list[float]):
        """Should pause and re-run the same operation after each 429."""
        call_count = 0

        def fetch_page():
            nonlocal call_count
            call_count += 1
            if call_count <= 3:
                raise throttled()
            return ["page"]

        assert retry_policy.execute(fetch_page) == ["page"]
        assert call_count == 4
        assert sleeps == [60.0, 60.0, 60.0]

    def test_other_status_propagates_immediately(
        self, retry_policy: RateLimitRetryPolicy, sleeps: list[float]
    ):
        """Should not retry a non-429 status."""
        call_count = 0

        def fetch_page():
            nonlocal call_count
            call_count += 1
            raise TransportError(503, "https://api.doorkeeper.jp/events")

        with pytest.raises(TransportError) as exc_info:
            retry_policy.execute(fetch_page)

        assert exc_info.value.status_code == 503
        assert call_count == 1
        assert sleeps == []

    def test_unrelated_errors_propagate(self, retry_policy: RateLimitRetryPolicy, sleeps: list[float]):
        """Should not swallow errors that are not transport errors."""

        def broken():
            raise KeyError("event")

        with pytest.raises(KeyError):
            retry_policy.execute(broken)
        assert sleeps == []

    def test_logs_each_pause(self, retry_policy: RateLimitRetryPolicy):
        """Should emit a rate_limited warning per throttled attempt."""
        outcomes = [throttled(), throttled(), "done"]

        def fetch_page():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        with capture_logs() as logs:
            retry_policy.execute(fetch_page)

        warnings = [entry for entry in logs if entry["event"] == "rate_limited"]
        assert [entry["attempt"] for entry in warnings] == [1, 2]
        assert all(entry["log_level"] == "warning" for entry in warnings)
        assert warnings[0]["delay"] == 60.0
        assert "retry_at" in warnings[0]


class TestRetryPolicyConstruction:
    """Tests for policy defaults and config wiring."""

    def test_defaults(self):
        """Should pause 60 seconds with a real blocking sleep by default."""
        policy = RateLimitRetryPolicy()
        assert policy.delay == DEFAULT_RATE_LIMIT_DELAY == 60.0
        assert policy.sleep is time.sleep

    def test_from_config(self, sleeps: list[float]):
        """Should take its delay from the shared config."""
        policy = RateLimitRetryPolicy.from_config(
            ClientConfig(rate_limit_delay=5.0), sleep=sleeps.append
        )
        outcomes = [throttled(), "ok"]

        def fetch_page():
            outcome = outcomes.pop(0)
            if isinstance(outcome, Exception):
                raise outcome
            return outcome

        assert policy.execute(fetch_page) == "ok"
        assert sleeps == [5.0]
