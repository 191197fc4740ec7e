"""newsgate - TN3270 RSS headline gateway entry point."""

import argparse
import asyncio
import sys

from loguru import logger

from newsgate.core.config import settings
from newsgate.core.domain.exceptions import ConfigError
from newsgate.core.infrastructure.logging import setup_logging
from newsgate.modules.feeds.domain.registry import FeedRegistry
from newsgate.modules.feeds.infrastructure.feed_file import load_feed_urls
from newsgate.modules.feeds.infrastructure.fetchers import RSSHeadlineFetcher
from newsgate.modules.sessions.application.headlines import HeadlineService
from newsgate.modules.sessions.interfaces.server import GatewayServer


def port_number(value: str) -> int:
    """argparse type for a TCP port in 1-65535."""
    try:
        port = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid port: {value!r}") from None
    if not 1 <= port <= 65535:
        raise argparse.ArgumentTypeError(f"port out of range 1-65535: {port}")
    return port


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog=settings.PROJECT_NAME,
        description="Serve RSS headlines to 3270 terminals",
    )
    parser.add_argument(
        "-port",
        "--port",
        type=port_number,
        default=settings.LISTEN_PORT,
        help=f"Listen on port (default: {settings.LISTEN_PORT})",
    )
    parser.add_argument(
        "-host",
        "--host",
        default=settings.LISTEN_HOST,
        help="Listen address (default: all interfaces)",
    )
    parser.add_argument(
        "-feeds",
        "--feeds",
        default=settings.FEED_URL_FILE,
        help=f"Feed URL list, one per line (default: {settings.FEED_URL_FILE})",
    )
    return parser.parse_args(argv)


def build_server(args: argparse.Namespace) -> GatewayServer:
    """Wire registry, fetcher and server from parsed arguments.

    Raises:
        ConfigError: the feed list is unreadable or empty.
    """
    registry = FeedRegistry(load_feed_urls(args.feeds))
    headlines = HeadlineService(
        RSSHeadlineFetcher(),
        timeout=settings.HTTP_TIMEOUT_SEC,
        limit=settings.MAX_HEADLINES,
    )
    return GatewayServer(registry, headlines, host=args.host, port=args.port)


async def serve(server: GatewayServer) -> None:
    await server.start()
    await server.serve_forever()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging()
    logger.info(f"Starting 3270 RSS server on {args.host or '*'}:{args.port} ...")

    try:
        server = build_server(args)
    except ConfigError as e:
        logger.error(f"Configuration error: {e.message}")
        return 1

    try:
        asyncio.run(serve(server))
    except OSError as e:
        logger.error(f"listen: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
