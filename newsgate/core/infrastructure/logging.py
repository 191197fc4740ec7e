"""Logging setup for the gateway.

loguru carries operational messages (listener, fetch timings, protocol
warnings). structlog carries the session event stream: one record per
connection milestone, rendered for humans locally and as JSON elsewhere.
"""

import sys
from typing import Any

import structlog
from loguru import logger

from newsgate.core.config import settings

CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{line}</cyan> - "
    "<level>{message}</level>"
)
FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{line} - {message}"


def setup_logging(level: str | None = None) -> None:
    """Install loguru sinks and the structlog pipeline.

    ``level`` overrides ``settings.LOG_LEVEL``; unknown names fall back to INFO.
    """
    level = _normalize_level(level or settings.LOG_LEVEL)
    _configure_loguru(level)
    _configure_structlog(level)
    logger.debug(f"Logging ready ({level}, environment={settings.ENVIRONMENT})")


def _normalize_level(name: str) -> str:
    name = name.upper()
    try:
        logger.level(name)
    except ValueError:
        return "INFO"
    return name


def _configure_loguru(level: str) -> None:
    logger.remove()
    logger.add(sys.stderr, level=level, format=CONSOLE_FORMAT, colorize=True)

    # Outside local runs keep a daily file next to the console output.
    if settings.ENVIRONMENT != "local":
        logger.add(
            "logs/newsgate_{time:YYYY-MM-DD}.log",
            rotation="00:00",
            retention="14 days",
            level="INFO",
            format=FILE_FORMAT,
            enqueue=True,
        )


def _configure_structlog(level: str) -> None:
    if settings.ENVIRONMENT == "local":
        renderer: Any = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.CallsiteParameterAdder(
                [
                    structlog.processors.CallsiteParameter.MODULE,
                    structlog.processors.CallsiteParameter.FUNC_NAME,
                    structlog.processors.CallsiteParameter.LINENO,
                ],
                additional_ignores=[__name__],
            ),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(logger.level(level).no),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


# ============================================================================
# Session events
# ============================================================================


class SessionEvents:
    """Structured records for connection milestones.

    Every record carries ``category`` so a log shipper can split transport,
    selection and fetch events without parsing messages::

        SessionEvents.feed_selected(peer="10.0.0.5:51544", url="https://...", via="index")
    """

    @staticmethod
    def _emit(level: str, event: str, category: str, **fields: Any) -> None:
        log = structlog.get_logger("newsgate.session")
        getattr(log, level)(event, category=category, **fields)

    @classmethod
    def session_started(cls, peer: str, **extra: Any) -> None:
        cls._emit("info", "session_started", "session", peer=peer, **extra)

    @classmethod
    def session_ended(cls, peer: str, reason: str, **extra: Any) -> None:
        cls._emit("info", "session_ended", "session", peer=peer, reason=reason, **extra)

    @classmethod
    def negotiation_failed(cls, peer: str, error: str, **extra: Any) -> None:
        """A client connected but never reached 3270 block mode."""
        cls._emit("warning", "negotiation_failed", "transport", peer=peer, error=error, **extra)

    @classmethod
    def feed_selected(cls, peer: str, url: str, via: str, **extra: Any) -> None:
        """The shared current feed changed. ``via`` is ``index`` or ``literal``."""
        cls._emit("info", "feed_selected", "selection", peer=peer, url=url, via=via, **extra)

    @classmethod
    def feed_selection_rejected(cls, peer: str, choice: str, **extra: Any) -> None:
        cls._emit(
            "warning", "feed_selection_rejected", "selection", peer=peer, choice=choice, **extra
        )

    @classmethod
    def feed_fetch_failed(cls, url: str, error_code: str, error: str, **extra: Any) -> None:
        """A fetch failed and was shown to the user as a diagnostic headline."""
        cls._emit(
            "warning",
            "feed_fetch_failed",
            "fetch",
            url=url,
            error_code=error_code,
            error=error,
            **extra,
        )
