"""Fetch API documentation over HTTP.

:class:`HttpFetcher` wraps :class:`httpx.Client`. A non-success status
becomes :class:`~universal_api.exceptions.NetworkError`; transport-level
failures (``httpx.RequestError``: DNS, timeouts, refused connections)
propagate unchanged. Nothing is retried.
"""

import logging

import httpx

from universal_api import __version__
from universal_api.exceptions import NetworkError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_USER_AGENT = f"universal-api/{__version__}"


class HttpFetcher:
    """Turns a URL into ``(content_type, body)``.

    Args:
        timeout: Request timeout in seconds.
        user_agent: ``User-Agent`` header sent with every request.
        transport: Optional httpx transport, e.g. ``httpx.MockTransport``
            in tests.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        transport: httpx.BaseTransport | None = None,
    ):
        self.timeout = timeout
        self.user_agent = user_agent
        self._transport = transport

    def fetch(self, url: str) -> tuple[str, bytes]:
        with httpx.Client(
            timeout=self.timeout,
            follow_redirects=True,
            headers={"User-Agent": self.user_agent},
            transport=self._transport,
        ) as client:
            response = client.get(url)

        logger.debug("GET %s -> %d", url, response.status_code)
        if not response.is_success:
            raise NetworkError(response.status_code, url)
        return response.headers.get("content-type", ""), response.content
