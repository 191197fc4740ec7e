"""
pytest configuration and shared fixtures.

Usage:
    # run everything
    pytest

    # only the session state machine
    pytest tests/unit/test_state_machine.py
"""

import pytest

from newsgate.modules.feeds.domain.registry import FeedRegistry
from newsgate.modules.sessions.application.headlines import HeadlineService
from tests.fakes import StubFetcher


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def feed_urls() -> list[str]:
    return ["http://a", "http://b"]


@pytest.fixture
def registry(feed_urls: list[str]) -> FeedRegistry:
    return FeedRegistry(feed_urls)


@pytest.fixture
def stub_fetcher() -> StubFetcher:
    return StubFetcher()


@pytest.fixture
def headline_service(stub_fetcher: StubFetcher) -> HeadlineService:
    return HeadlineService(stub_fetcher, timeout=10.0, limit=18)
