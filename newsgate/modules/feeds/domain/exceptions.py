"""Feed domain exceptions."""

from newsgate.core.domain.exceptions import ConfigError, DomainException
from newsgate.modules.feeds.domain.text import replace_controls


class EmptyRegistryError(ConfigError):
    """Raised when the feed registry has no configured URLs."""

    error_code = "EMPTY_REGISTRY"

    def __init__(self):
        super().__init__("No feed URLs are configured")


class FeedIndexError(DomainException, IndexError):
    """Raised when a feed choice does not name a configured feed."""

    error_code = "FEED_INDEX_OUT_OF_RANGE"

    def __init__(self, choice: str, size: int):
        self.choice = choice
        self.size = size
        if size:
            message = f"Feed #{choice} does not exist, choose 0-{size - 1}"
        else:
            message = f"Feed #{choice} does not exist, no feeds are configured"
        super().__init__(message)


class FetchError(DomainException):
    """Base class for headline retrieval failures."""

    error_code = "FETCH_ERROR"


class FetchTimeoutError(FetchError):
    """Raised when retrieval exceeds its time budget."""

    error_code = "FETCH_TIMEOUT"

    def __init__(self, url: str, timeout: float):
        self.url = url
        self.timeout = timeout
        super().__init__(f"timed out after {timeout:g}s")


class RemoteStatusError(FetchError):
    """Raised when the feed endpoint answers with a non-success status."""

    error_code = "FETCH_REMOTE_STATUS"

    def __init__(self, status: int, body_snippet: bytes = b""):
        self.status = status
        self.body_snippet = body_snippet
        text = body_snippet.decode("utf-8", errors="replace")
        detail = replace_controls(text).strip()
        message = f"HTTP {status}"
        if detail:
            message = f"HTTP {status}: {detail}"
        super().__init__(message)


class FeedDecodeError(FetchError):
    """Raised when the response is not a usable RSS/Atom document."""

    error_code = "FETCH_DECODE"


class FetchTransportError(FetchError):
    """Raised for connection-level failures (DNS, refused, reset, TLS)."""

    error_code = "FETCH_TRANSPORT"
