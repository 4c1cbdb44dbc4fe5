"""Shared plumbing for the per-service facades."""

from datetime import datetime, tzinfo
from typing import Any, Optional

import structlog

from ..client import ApiClient
from ..config import ClientConfig
from ..models import EventRecord

logger = structlog.get_logger()


def localize(value: Optional[datetime], zone: tzinfo) -> Optional[datetime]:
    """Attach the configured zone to naive datetimes."""
    if value is None or value.tzinfo is not None:
        return value
    return value.replace(tzinfo=zone)


class EventSource:
    """Binds one ApiClient to a service and closes it when owned."""

    source = "unknown"

    def __init__(self, config: ClientConfig, client: Optional[ApiClient]):
        self.config = config
        self._owns_client = client is None
        self.client = client or self._build_client()

    def _build_client(self) -> ApiClient:
        raise NotImplementedError

    def _log_fetched(self, operation: str, events: list[EventRecord], started: datetime) -> None:
        duration_ms = int((datetime.now() - started).total_seconds() * 1000)
        logger.info(
            "events_fetched",
            source=self.source,
            operation=operation,
            count=len(events),
            duration_ms=duration_ms,
        )

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
