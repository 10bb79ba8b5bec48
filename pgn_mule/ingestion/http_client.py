"""
Upstream HTTP fetch for polled sources.

Provides:
- FetchResult: status code, body text and error of one GET
- UpstreamClient: async client sending the fixed cookie and user agent

Failures are returned, not raised: the poll scheduler appends a snapshot
and re-arms after every fetch regardless of outcome, so errors are
retried on the next cycle instead of here.
"""

import logging
from dataclasses import dataclass
from typing import Any

import httpx

from pgn_mule.config.settings import get_settings
from pgn_mule.errors import TransientFetchError

logger = logging.getLogger(__name__)


@dataclass
class FetchResult:
    """Outcome of a single upstream GET."""

    status_code: int | None
    body: str
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code == 200

    @property
    def outcome(self) -> str:
        """Metric label: ok, empty, not_found, http_error or network_error."""
        if self.status_code is None:
            return "network_error"
        if self.status_code == 404:
            return "not_found"
        if self.status_code != 200:
            return "http_error"
        return "ok" if self.body else "empty"


class UpstreamClient:
    """
    Async HTTP client for upstream PGN URLs.

    Example:
        async with UpstreamClient() as client:
            result = await client.fetch("https://example.com/live.pgn")
    """

    def __init__(
        self,
        cookie: str | None = None,
        user_agent: str | None = None,
        timeout: float | None = None,
    ):
        """
        Initialize upstream client.

        Args:
            cookie: Cookie header sent with every request
            user_agent: User-Agent header sent with every request
            timeout: Request timeout in seconds
        """
        settings = get_settings()
        self.cookie = settings.upstream_cookie if cookie is None else cookie
        self.user_agent = user_agent or settings.upstream_user_agent
        self.timeout = timeout or settings.upstream_timeout_seconds
        self._client: httpx.AsyncClient | None = None

    async def __aenter__(self) -> "UpstreamClient":
        """Enter async context manager, create client."""
        await self.open()
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        """Exit async context manager, close client."""
        await self.close()

    async def open(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, follow_redirects=True)

    async def close(self) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def headers(self) -> dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.cookie:
            headers["Cookie"] = self.cookie
        return headers

    async def fetch(self, url: str) -> FetchResult:
        """
        GET url once.

        Returns:
            FetchResult; network failures and non-200/404 statuses carry a
            TransientFetchError in ``error``.
        """
        if not self._client:
            raise RuntimeError("UpstreamClient must be opened before fetching")

        try:
            response = await self._client.get(url, headers=self.headers)
        except httpx.HTTPError as e:
            return FetchResult(
                status_code=None,
                body="",
                error=TransientFetchError(f"{type(e).__name__}: {e}"),
            )

        error = None
        if response.status_code not in (200, 404):
            error = TransientFetchError(
                f"Upstream returned status {response.status_code}",
                status_code=response.status_code,
            )
        return FetchResult(status_code=response.status_code, body=response.text, error=error)
