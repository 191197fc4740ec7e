"""Headline retrieval for rendering, with failures folded into the headline list."""

from newsgate.core.config import settings
from newsgate.core.infrastructure.logging import SessionEvents
from newsgate.modules.feeds.domain.exceptions import FetchError
from newsgate.modules.feeds.domain.fetcher import HeadlineFetcher


class HeadlineService:
    """Fetch headlines for the current feed; never raises for fetch failures."""

    def __init__(
        self,
        fetcher: HeadlineFetcher,
        *,
        timeout: float | None = None,
        limit: int | None = None,
    ):
        self.fetcher = fetcher
        self.timeout = timeout or settings.HTTP_TIMEOUT_SEC
        self.limit = limit or settings.MAX_HEADLINES

    async def headlines_for(self, url: str) -> list[str]:
        """Return up to ``limit`` headlines, or one diagnostic line on failure."""
        try:
            return await self.fetcher.fetch(url, self.timeout, self.limit)
        except FetchError as e:
            SessionEvents.feed_fetch_failed(
                url=url, error_code=e.error_code, error=e.message
            )
            return [f"Error fetching feed: {e.message}"]
