"""Feed-list file loading."""

from pathlib import Path

from loguru import logger

from newsgate.core.domain.exceptions import ConfigError


def load_feed_urls(path: str | Path) -> list[str]:
    """Read a newline-separated list of feed URLs.

    Blank lines and lines starting with ``#`` are skipped.

    Raises:
        ConfigError: the file cannot be read or lists no URLs.
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read feed list {path}: {e}") from e

    urls = []
    for line in content.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue
        urls.append(line)

    if not urls:
        raise ConfigError(f"Feed list {path} contains no URLs")

    logger.info(f"Loaded {len(urls)} feed URLs from {path}")
    return urls
