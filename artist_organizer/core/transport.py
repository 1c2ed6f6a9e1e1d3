"""Rate-limited access to the Spotify Web API over httpx."""
import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import httpx

from artist_organizer.config import DEFAULT_RETRY_AFTER_SEC, HTTP_TIMEOUT_SEC, MAX_RETRIES, SPOTIFY_API_BASE
from artist_organizer.core.errors import RemoteError, TransportExhausted

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[Any]]


def build_client(transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """AsyncClient rooted at the Web API; relative paths resolve against it."""
    return httpx.AsyncClient(base_url=SPOTIFY_API_BASE, timeout=HTTP_TIMEOUT_SEC, transport=transport)


def _retry_after(response: httpx.Response) -> int:
    raw = response.headers.get("Retry-After")
    if not raw:
        return DEFAULT_RETRY_AFTER_SEC
    try:
        return max(0, int(raw))
    except ValueError:
        return DEFAULT_RETRY_AFTER_SEC


class RateLimitedTransport:
    """Issues authorized requests and waits out 429 responses.

    Only throttling is interpreted here. Every other status, errors included,
    is handed back to the caller untouched.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        access_token: str,
        max_retries: int = MAX_RETRIES,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        self.client = client
        self.access_token = access_token
        self.max_retries = max_retries
        self._sleep = sleep

    async def call(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        headers = dict(kwargs.pop("headers", None) or {})
        headers["Authorization"] = f"Bearer {self.access_token}"

        retry_after: Optional[int] = None
        for attempt in range(1, self.max_retries + 1):
            response = await self.client.request(method, url, headers=headers, **kwargs)
            if response.status_code != 429:
                return response

            retry_after = _retry_after(response)
            if attempt == self.max_retries:
                break
            logger.warning(
                "Rate limited on %s %s (attempt %d/%d), waiting %ss",
                method, url, attempt, self.max_retries, retry_after,
            )
            await self._sleep(retry_after)

        logger.error("Giving up on %s %s after %d throttled attempts", method, url, self.max_retries)
        raise TransportExhausted(url, self.max_retries, retry_after)

    async def close(self) -> None:
        await self.client.aclose()


def ensure_ok(response: httpx.Response) -> httpx.Response:
    """Raise RemoteError for any non-2xx response, otherwise return it."""
    if response.is_success:
        return response
    raise RemoteError(response.status_code, str(response.request.url), response.text)
