"""
Shared client configuration.

One ClientConfig is built per process (usually via ``from_env``) and handed
to every client constructor. It is frozen: flipping the debug flag means
building a new config with ``model_copy(update={"debug": True})``.
"""

import os
from datetime import tzinfo
from typing import Any, Optional

from dateutil import tz
from pydantic import BaseModel, ConfigDict, Field

from .errors import ConfigurationError

TRUTHY = {"1", "true", "yes", "on"}


class ClientConfig(BaseModel):
    """Settings shared by all service clients."""

    model_config = ConfigDict(frozen=True)

    debug: bool = False  # log every request/response
    timeout: float = Field(default=30.0, gt=0)
    doorkeeper_api_token: Optional[str] = None
    facebook_access_token: Optional[str] = None
    rate_limit_delay: float = Field(default=60.0, ge=0)
    time_zone: str = "Asia/Tokyo"

    @classmethod
    def from_env(cls, **overrides: Any) -> "ClientConfig":
        """Build a config from process environment variables.

        Args:
            **overrides: Explicit field values, taking precedence over env

        Returns:
            ClientConfig instance
        """
        values: dict[str, Any] = {
            "debug": os.environ.get("EVENT_STATS_DEBUG", "").strip().lower() in TRUTHY,
            "doorkeeper_api_token": os.environ.get("DOORKEEPER_API_TOKEN") or None,
            "facebook_access_token": os.environ.get("FACEBOOK_ACCESS_TOKEN") or None,
        }
        time_zone = os.environ.get("EVENT_STATS_TIME_ZONE")
        if time_zone:
            values["time_zone"] = time_zone

        values.update(overrides)
        return cls(**values)

    def tzinfo(self) -> tzinfo:
        """Resolve the configured time zone."""
        zone = tz.gettz(self.time_zone)
        if zone is None:
            raise ConfigurationError(f"Unknown time zone: {self.time_zone}")
        return zone
