"""
Thin synchronous HTTP transport shared by all service facades.

Each ApiClient is bound to one service endpoint. It sends GET requests,
decodes JSON bodies and turns non-2xx responses into TransportError
(RateLimitedError for 429) so the pagination loops can react to them.
"""

import re
from typing import Any, Optional

import httpx
import structlog

from .config import ClientConfig
from .errors import RateLimitedError, TransportError

logger = structlog.get_logger()

JSON_CONTENT_TYPE = re.compile(r"^application/[\w.+-]*json\b", re.IGNORECASE)
REDACTED_PARAMS = ("access_token",)


def _redact(url: httpx.URL) -> str:
    for name in REDACTED_PARAMS:
        if name in url.params:
            url = url.copy_set_param(name, "[redacted]")
    return str(url)


def _log_request(request: httpx.Request) -> None:
    logger.info("http_request", method=request.method, url=_redact(request.url))


def _log_response(response: httpx.Response) -> None:
    logger.info(
        "http_response",
        method=response.request.method,
        url=_redact(response.request.url),
        status=response.status_code,
        content_type=response.headers.get("content-type"),
    )


class ApiClient:
    """GET-only JSON client bound to a single endpoint."""

    def __init__(
        self,
        endpoint: str,
        config: ClientConfig,
        headers: Optional[dict[str, str]] = None,
        params: Optional[dict[str, Any]] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        """Initialize the client.

        Args:
            endpoint: Base URL that relative paths are joined onto
            config: Shared client configuration
            headers: Extra headers sent with every request (auth)
            params: Query parameters sent with every request
            transport: Custom httpx transport (tests use MockTransport)
        """
        self.endpoint = endpoint
        event_hooks: dict[str, list] = {"request": [], "response": []}
        if config.debug:
            event_hooks = {"request": [_log_request], "response": [_log_response]}

        self._http = httpx.Client(
            base_url=endpoint,
            headers=headers,
            params=params,
            timeout=config.timeout,
            event_hooks=event_hooks,
            transport=transport,
        )

    def get(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        """Send a GET request and return the decoded body.

        Args:
            path: Path relative to the endpoint, or an absolute URL
            params: Query parameters; None values are not sent

        Returns:
            Decoded JSON for application/*json responses, text otherwise

        Raises:
            RateLimitedError: On HTTP 429
            TransportError: On any other non-2xx status
        """
        query = {k: v for k, v in (params or {}).items() if v is not None}

        url = httpx.URL(path)
        if url.is_absolute_url and url.params:
            # The link keeps its own query (cursor included); its values win
            query.update(url.params.items())
            path = str(url.copy_with(params={}))

        response = self._http.get(path, params=query)

        if not response.is_success:
            error_class = RateLimitedError if response.status_code == 429 else TransportError
            raise error_class(
                response.status_code, _redact(response.request.url), response.text
            )

        content_type = response.headers.get("content-type", "")
        if JSON_CONTENT_TYPE.match(content_type):
            return response.json()
        return response.text

    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ApiClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()
