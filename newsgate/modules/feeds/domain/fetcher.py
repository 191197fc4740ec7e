"""Headline fetcher port."""

from abc import ABC, abstractmethod

NO_HEADLINES = "(No headlines found)"


class HeadlineFetcher(ABC):
    """Port for retrieving sanitised headlines from a feed URL."""

    @abstractmethod
    async def fetch(self, url: str, timeout: float, limit: int) -> list[str]:
        """Retrieve up to ``limit`` headlines.

        Never returns an empty list: a feed without usable titles yields
        ``[NO_HEADLINES]``.

        Raises:
            FetchError: retrieval or decoding failed.
        """
        pass
