"""Pause-and-retry handling for rate-limited API calls."""

import time
from datetime import datetime, timedelta
from typing import Callable, TypeVar

import structlog

from ..config import ClientConfig
from ..errors import RateLimitedError

logger = structlog.get_logger()

T = TypeVar("T")

DEFAULT_RATE_LIMIT_DELAY = 60.0


class RateLimitRetryPolicy:
    """Retry an operation for as long as the service answers 429.

    The same operation is re-run from the beginning after each pause. There
    is no attempt cap; any error other than RateLimitedError propagates
    immediately.
    """

    def __init__(
        self,
        delay: float = DEFAULT_RATE_LIMIT_DELAY,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """Initialize the policy.

        Args:
            delay: Seconds to pause after each rate-limited attempt
            sleep: Blocking sleep function, substituted in tests
        """
        self.delay = delay
        self.sleep = sleep

    @classmethod
    def from_config(
        cls, config: ClientConfig, sleep: Callable[[float], None] = time.sleep
    ) -> "RateLimitRetryPolicy":
        return cls(delay=config.rate_limit_delay, sleep=sleep)

    def execute(self, operation: Callable[[], T]) -> T:
        """Run operation, pausing and retrying while it is rate limited.

        Args:
            operation: Zero-argument callable performing one request

        Returns:
            Result of the first attempt that is not rate limited
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                return operation()
            except RateLimitedError as e:
                logger.warning(
                    "rate_limited",
                    url=e.url,
                    attempt=attempt,
                    delay=self.delay,
                    retry_at=(datetime.now() + timedelta(seconds=self.delay)).isoformat(),
                )
                self.sleep(self.delay)
