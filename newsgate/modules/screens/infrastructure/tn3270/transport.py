"""TN3270 implementation of the screen transport port."""

import asyncio
from collections.abc import Collection, Mapping

from loguru import logger

from newsgate.modules.screens.domain.entities import (
    CommandSignal,
    Screen,
    ScreenResponse,
)
from newsgate.modules.screens.domain.exceptions import (
    RenderExchangeError,
    TransportNegotiationError,
)
from newsgate.modules.screens.infrastructure.tn3270.codec import (
    decode_response,
    encode_screen,
    input_addresses,
    signal_for_aid,
)
from newsgate.modules.screens.infrastructure.tn3270.telnet import TelnetConnection

NEGOTIATION_TIMEOUT_SEC = 10.0


class TN3270Transport:
    """Renders screens on a negotiated 3270 terminal and reads back its input."""

    def __init__(self, connection: TelnetConnection):
        self.connection = connection

    @property
    def peer(self) -> str:
        return self.connection.peer

    @classmethod
    async def negotiate(
        cls,
        reader: asyncio.StreamReader,
        writer: asyncio.StreamWriter,
        timeout: float = NEGOTIATION_TIMEOUT_SEC,
    ) -> "TN3270Transport":
        """Negotiate TN3270 on a fresh connection.

        Raises:
            TransportNegotiationError: the client is not a usable 3270 terminal.
        """
        connection = TelnetConnection(reader, writer)
        try:
            async with asyncio.timeout(timeout):
                await connection.negotiate()
        except TimeoutError as e:
            raise TransportNegotiationError(
                f"negotiation timed out after {timeout:g}s"
            ) from e
        return cls(connection)

    async def render(
        self,
        screen: Screen,
        *,
        command_signals: Collection[CommandSignal],
        exit_signals: Collection[CommandSignal],
        cursor: tuple[int, int],
        values: Mapping[str, str] | None = None,
    ) -> ScreenResponse:
        addresses = input_addresses(screen)
        current = {
            item.name: (values or {}).get(item.name, item.content or "")
            for item in screen.fields
            if item.write and item.name
        }

        while True:
            try:
                await self.connection.write_record(encode_screen(screen, cursor, current))
                record = await self.connection.read_record()
                inbound = decode_response(record)
            except (EOFError, OSError) as e:
                raise RenderExchangeError(f"connection lost: {e}") from e
            except ValueError as e:
                raise RenderExchangeError(f"malformed response: {e}") from e

            signal = signal_for_aid(inbound.aid)
            if signal in exit_signals:
                return ScreenResponse(signal=signal, values=dict(current))

            for address, text in inbound.fields.items():
                name = addresses.get(address)
                if name is not None:
                    current[name] = text

            if signal in command_signals:
                return ScreenResponse(signal=signal, values=dict(current))

            logger.debug(
                f"Ignoring AID 0x{inbound.aid:02x} from {self.peer}, redisplaying"
            )

    async def close(self) -> None:
        await self.connection.close()
