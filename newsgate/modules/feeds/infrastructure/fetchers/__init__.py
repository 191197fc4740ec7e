"""Headline fetchers."""

from newsgate.modules.feeds.infrastructure.fetchers.rss import RSSHeadlineFetcher

__all__ = ["RSSHeadlineFetcher"]
