"""Feed-list file loading tests."""

from pathlib import Path

import pytest

from newsgate.core.domain.exceptions import ConfigError
from newsgate.modules.feeds.infrastructure.feed_file import load_feed_urls


def test_load_feed_urls(tmp_path: Path) -> None:
    path = tmp_path / "rssfeed.url"
    path.write_text(
        "https://example.com/a.xml\n\n  https://example.com/b.xml  \n# disabled\n",
        encoding="utf-8",
    )

    assert load_feed_urls(path) == [
        "https://example.com/a.xml",
        "https://example.com/b.xml",
    ]


def test_missing_file_is_config_error(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="Cannot read feed list"):
        load_feed_urls(tmp_path / "missing.url")


def test_file_without_urls_is_config_error(tmp_path: Path) -> None:
    path = tmp_path / "rssfeed.url"
    path.write_text("\n# nothing here\n   \n", encoding="utf-8")

    with pytest.raises(ConfigError, match="contains no URLs"):
        load_feed_urls(str(path))
