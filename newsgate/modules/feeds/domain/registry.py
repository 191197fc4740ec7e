"""Feed source registry.

One registry exists per process. Every session reads and changes the same current
feed, so all access to the current value goes through a lock.
"""

import threading
from collections.abc import Iterable

from newsgate.modules.feeds.domain.exceptions import EmptyRegistryError, FeedIndexError


class FeedRegistry:
    """Ordered feed URLs plus the shared current selection."""

    def __init__(self, urls: Iterable[str]):
        self._urls: tuple[str, ...] = tuple(urls)
        self._lock = threading.Lock()
        self._current: str | None = self._urls[0] if self._urls else None

    @property
    def urls(self) -> tuple[str, ...]:
        """Configured feeds in configuration order."""
        return self._urls

    def __len__(self) -> int:
        return len(self._urls)

    def current(self) -> str:
        """Return the currently selected feed URL."""
        with self._lock:
            if self._current is None:
                raise EmptyRegistryError()
            return self._current

    def select_by_index(self, index: int) -> str:
        """Make the configured feed at ``index`` current.

        Raises:
            FeedIndexError: index is outside ``[0, len)``; the selection is unchanged.
        """
        if not 0 <= index < len(self._urls):
            raise FeedIndexError(str(index), len(self._urls))
        url = self._urls[index]
        with self._lock:
            self._current = url
        return url

    def select_by_choice(self, choice: str) -> str:
        """Parse a typed feed number and select it."""
        text = choice.strip()
        try:
            index = int(text)
        except ValueError:
            raise FeedIndexError(text, len(self._urls)) from None
        return self.select_by_index(index)

    def select_by_literal(self, url: str) -> str:
        """Make an arbitrary URL current without adding it to the configured list."""
        url = url.strip()
        with self._lock:
            self._current = url
        return url
