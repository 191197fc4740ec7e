"""RSS headline fetcher.

Supports RSS 2.0 and Atom documents through feedparser.
"""

import asyncio
import io
import time

import feedparser
import httpx
from loguru import logger

from newsgate.core.config import settings
from newsgate.modules.feeds.domain.exceptions import (
    FeedDecodeError,
    FetchTimeoutError,
    FetchTransportError,
    RemoteStatusError,
)
from newsgate.modules.feeds.domain.fetcher import NO_HEADLINES, HeadlineFetcher
from newsgate.modules.feeds.domain.text import clean_headline


class RSSHeadlineFetcher(HeadlineFetcher):
    """Fetch a feed over HTTP and reduce it to cleaned headline strings."""

    ACCEPT = "application/rss+xml, application/atom+xml, application/xml, text/xml, */*"

    def __init__(
        self,
        *,
        user_agent: str | None = None,
        body_snippet_bytes: int | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.user_agent = user_agent or settings.FETCHER_USER_AGENT
        self.body_snippet_bytes = (
            settings.BODY_SNIPPET_BYTES
            if body_snippet_bytes is None
            else body_snippet_bytes
        )
        self._transport = transport

    async def fetch(self, url: str, timeout: float, limit: int) -> list[str]:
        start_time = time.time()
        try:
            async with asyncio.timeout(timeout):
                content = await self._download(url, timeout)
        except (TimeoutError, httpx.TimeoutException) as e:
            logger.warning(f"RSS fetch timeout for {url}: {e!r}")
            raise FetchTimeoutError(url, timeout) from e
        except httpx.InvalidURL as e:
            raise FetchTransportError(f"invalid URL {url!r}: {e}") from e
        except httpx.HTTPError as e:
            logger.warning(f"RSS fetch transport error for {url}: {e!r}")
            raise FetchTransportError(str(e) or type(e).__name__) from e

        headlines = self.parse_headlines(content, limit)
        duration_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"Fetched {len(headlines)} headlines from {url} in {duration_ms}ms")
        return headlines

    async def _download(self, url: str, timeout: float) -> bytes:
        async with httpx.AsyncClient(
            timeout=timeout,
            follow_redirects=True,
            transport=self._transport,
        ) as client:
            async with client.stream(
                "GET",
                url,
                headers={"User-Agent": self.user_agent, "Accept": self.ACCEPT},
            ) as response:
                if not response.is_success:
                    snippet = await self._read_snippet(response)
                    logger.warning(
                        f"RSS fetch HTTP error for {url}: {response.status_code}"
                    )
                    raise RemoteStatusError(response.status_code, snippet)
                return await response.aread()

    async def _read_snippet(self, response: httpx.Response) -> bytes:
        snippet = b""
        async for chunk in response.aiter_bytes():
            snippet += chunk
            if len(snippet) >= self.body_snippet_bytes:
                break
        return snippet[: self.body_snippet_bytes]

    @staticmethod
    def parse_headlines(content: bytes | str, limit: int) -> list[str]:
        """Decode a feed document into at most ``limit`` cleaned titles.

        Raises:
            FeedDecodeError: the document is neither RSS nor Atom.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        # A stream, so feedparser never treats the body as a path or URL.
        feed = feedparser.parse(io.BytesIO(content))
        if not feed.entries and (feed.get("bozo") or not feed.get("version")):
            reason = feed.get("bozo_exception") or "not an RSS or Atom document"
            raise FeedDecodeError(f"Invalid feed document: {reason}")

        headlines: list[str] = []
        for entry in feed.entries:
            title = clean_headline(entry.get("title"))
            if not title:
                continue
            headlines.append(title)
            if len(headlines) >= limit:
                break

        if not headlines:
            return [NO_HEADLINES]
        return headlines
