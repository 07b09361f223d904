"""Widget HTML fetching - lazy, fetched once, retried on transient errors."""

import asyncio
import logging

import httpx
from tenacity import (
    AsyncRetrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from toolflow.domain.errors import ResourceFetchError

logger = logging.getLogger(__name__)


def join_url(base_url: str, path: str) -> str:
    """Join base URL and path without doubling the slash."""
    return f"{base_url.rstrip('/')}{path}"


class HtmlFetcher:
    """Fetches a widget's HTML on first use and shares it across registrations.

    A failed fetch is not cached; the next `get()` tries again.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 10.0,
        retries: int = 3,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.url = url
        self._timeout = timeout
        self._retries = retries
        self._transport = transport
        self._html: str | None = None
        self._lock = asyncio.Lock()

    async def get(self) -> str:
        if self._html is not None:
            return self._html
        async with self._lock:
            if self._html is None:
                self._html = await self._fetch()
        return self._html

    async def _fetch(self) -> str:
        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception_type((httpx.TimeoutException, httpx.NetworkError)),
                stop=stop_after_attempt(self._retries),
                wait=wait_exponential(multiplier=1, min=1, max=10),
                reraise=True,
            ):
                with attempt:
                    async with httpx.AsyncClient(
                        timeout=self._timeout,
                        follow_redirects=True,
                        transport=self._transport,
                    ) as client:
                        resp = await client.get(self.url)
                        resp.raise_for_status()
                        return resp.text
        except httpx.HTTPStatusError as e:
            logger.warning("Widget HTML fetch %s returned %s", self.url, e.response.status_code)
            raise ResourceFetchError(f"Fetching {self.url} failed with status {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.warning("Widget HTML fetch %s failed: %s", self.url, e)
            raise ResourceFetchError(f"Fetching {self.url} failed: {e}") from e
        raise ResourceFetchError(f"Fetching {self.url} failed")
