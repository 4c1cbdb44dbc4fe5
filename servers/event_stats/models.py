"""
Pydantic models for fetch parameters.

Event records themselves are left as the raw mappings each service returns:
- EventRecord: one service-native event, never inspected here
- ConnpassParams: series + optional month for the directory service
- DoorkeeperParams: group + closed time window for the ticketing service
- FacebookParams: group + optional time window for the social graph
"""

from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

EventRecord = dict[str, Any]


def check_window(since_at: Optional[datetime], until_at: Optional[datetime]) -> None:
    """Reject a window whose start is later than its end."""
    if since_at is not None and until_at is not None and since_at > until_at:
        raise ValueError("since_at must not be later than until_at")


class ConnpassParams(BaseModel):
    """What to fetch from connpass."""

    model_config = ConfigDict(frozen=True)

    series_id: int
    yyyymm: Optional[str] = Field(default=None, pattern=r"^\d{6}$")


class DoorkeeperParams(BaseModel):
    """What to fetch from Doorkeeper. Both bounds are always sent.

    The window is not checked here: a caller-given start after the
    defaulted end is a valid request that simply lists no events.
    """

    model_config = ConfigDict(frozen=True)

    group_id: str
    since_at: datetime
    until_at: datetime


class FacebookParams(BaseModel):
    """What to fetch from the Facebook graph. Absent bounds are not sent."""

    model_config = ConfigDict(frozen=True)

    group_id: str
    since_at: Optional[datetime] = None
    until_at: Optional[datetime] = None

    @model_validator(mode="after")
    def _check_window(self):
        check_window(self.since_at, self.until_at)
        return self
