"""TCP listener: one task per accepted terminal connection."""

import asyncio
from collections.abc import Awaitable, Callable

from loguru import logger

from newsgate.core.infrastructure.logging import SessionEvents
from newsgate.modules.feeds.domain.registry import FeedRegistry
from newsgate.modules.screens.domain.exceptions import TransportNegotiationError
from newsgate.modules.screens.infrastructure.tn3270.transport import TN3270Transport
from newsgate.modules.sessions.application.headlines import HeadlineService
from newsgate.modules.sessions.application.state_machine import FeedSession

Negotiator = Callable[
    [asyncio.StreamReader, asyncio.StreamWriter], Awaitable[TN3270Transport]
]


class GatewayServer:
    """Accepts connections and runs an independent FeedSession for each."""

    def __init__(
        self,
        registry: FeedRegistry,
        headlines: HeadlineService,
        *,
        host: str = "",
        port: int = 7300,
        negotiate: Negotiator = TN3270Transport.negotiate,
    ):
        self.registry = registry
        self.headlines = headlines
        self.host = host
        self.port = port
        self._negotiate = negotiate
        self._server: asyncio.Server | None = None

    async def handle_connection(
        self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter
    ) -> None:
        peername = writer.get_extra_info("peername")
        peer = f"{peername[0]}:{peername[1]}" if peername else "unknown"
        logger.info(f"Connection from {peer}")

        transport: TN3270Transport | None = None
        try:
            transport = await self._negotiate(reader, writer)
            session = FeedSession(transport, self.registry, self.headlines, peer=peer)
            await session.run()
        except TransportNegotiationError as e:
            SessionEvents.negotiation_failed(peer=peer, error=e.message)
        except Exception:
            logger.exception(f"Session with {peer} failed")
        finally:
            if transport is not None:
                await transport.close()
            else:
                writer.close()
            logger.info(f"Connection from {peer} closed")

    async def start(self) -> asyncio.Server:
        """Bind the listening socket. Raises OSError when the port is unavailable."""
        self._server = await asyncio.start_server(
            self.handle_connection, host=self.host or None, port=self.port
        )
        sockets = ", ".join(str(s.getsockname()) for s in self._server.sockets)
        logger.info(f"Listening on {sockets}")
        return self._server

    async def serve_forever(self) -> None:
        server = self._server or await self.start()
        async with server:
            await server.serve_forever()

    async def close(self) -> None:
        if self._server is not None:
            self._server.close()
            await self._server.wait_closed()
            self._server = None
