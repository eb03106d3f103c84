"""IPFS gateway content fetcher."""

import asyncio
from dataclasses import dataclass

import httpx

from gateway.core.errors import FetchError
from gateway.core.logging import get_logger
from gateway.core.metrics import FETCHES_TOTAL

logger = get_logger(__name__)

DEFAULT_FETCH_TIMEOUT = 25.0


@dataclass(frozen=True)
class FetchedContent:
    """Buffered gateway response."""

    body: bytes
    content_type: str | None


class ContentFetcher:
    """Fetch content from an IPFS HTTP gateway.

    The fetcher shares one ``httpx.AsyncClient`` across requests. Each fetch
    is bounded by ``timeout`` from connect to the last body byte. The whole
    body is buffered; nothing is returned on failure.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        base_url: str,
        timeout: float = DEFAULT_FETCH_TIMEOUT,
    ) -> None:
        self.client = client
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def url_for(self, b58hash: str) -> str:
        return f"{self.base_url}/ipfs/{b58hash}"

    async def fetch(self, b58hash: str) -> FetchedContent:
        """Fetch the content addressed by ``b58hash``.

        Args:
            b58hash: Base58 multihash identifier

        Returns:
            The buffered body and its content type

        Raises:
            FetchError: On transport error, timeout or non-success status
        """
        url = self.url_for(b58hash)
        try:
            response = await asyncio.wait_for(
                self.client.get(url, timeout=httpx.Timeout(self.timeout)),
                timeout=self.timeout,
            )
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            FETCHES_TOTAL.labels(outcome="timeout").inc()
            raise FetchError(f"timed out fetching {url} after {self.timeout}s") from exc
        except httpx.HTTPStatusError as exc:
            FETCHES_TOTAL.labels(outcome="error").inc()
            raise FetchError(
                f"gateway returned {exc.response.status_code} for {url}"
            ) from exc
        except httpx.HTTPError as exc:
            FETCHES_TOTAL.labels(outcome="error").inc()
            raise FetchError(f"error fetching {url}: {exc}") from exc

        FETCHES_TOTAL.labels(outcome="success").inc()
        logger.debug(
            "content_fetched",
            hash=b58hash,
            size=len(response.content),
            content_type=response.headers.get("content-type"),
        )
        return FetchedContent(
            body=response.content,
            content_type=response.headers.get("content-type"),
        )
