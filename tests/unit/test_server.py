"""Gateway server tests."""

import asyncio

import pytest

from newsgate.modules.screens.domain.entities import CommandSignal
from newsgate.modules.screens.domain.exceptions import TransportNegotiationError
from newsgate.modules.screens.infrastructure.tn3270 import codec
from newsgate.modules.screens.infrastructure.tn3270.telnet import (
    DO,
    EOR,
    IAC,
    OPT_BINARY,
    OPT_EOR,
    OPT_TTYPE,
    SB,
    SE,
    TTYPE_IS,
    WILL,
)
from newsgate.modules.sessions.interfaces.server import GatewayServer
from tests.fakes import FakeWriter, ScriptedTransport, make_reader, respond

pytestmark = pytest.mark.anyio


class ClosingTransport(ScriptedTransport):
    def __init__(self, responses) -> None:
        super().__init__(responses)
        self.closed = False

    async def close(self) -> None:
        self.closed = True


async def test_negotiation_failure_closes_connection(registry, headline_service):
    async def refuse(reader, writer):
        raise TransportNegotiationError("client refused option 24")

    server = GatewayServer(registry, headline_service, negotiate=refuse)
    writer = FakeWriter()

    await server.handle_connection(make_reader(), writer)

    assert writer.closed


async def test_unexpected_negotiation_error_closes_connection(
    registry, headline_service
):
    async def crash(reader, writer):
        raise RuntimeError("telnet parser bug")

    server = GatewayServer(registry, headline_service, negotiate=crash)
    writer = FakeWriter()

    await server.handle_connection(make_reader(), writer)

    assert writer.closed


async def test_session_runs_and_transport_is_closed(
    registry, headline_service, stub_fetcher
):
    transport = ClosingTransport([respond(CommandSignal.EXIT)])

    async def accept(reader, writer):
        return transport

    server = GatewayServer(registry, headline_service, negotiate=accept)

    await server.handle_connection(make_reader(), FakeWriter())

    assert transport.closed
    assert len(transport.rendered) == 1
    assert stub_fetcher.calls[0][0] == "http://a"


async def test_unexpected_session_error_still_closes(registry, headline_service):
    transport = ClosingTransport([RuntimeError("boom")])

    async def accept(reader, writer):
        return transport

    server = GatewayServer(registry, headline_service, negotiate=accept)

    await server.handle_connection(make_reader(), FakeWriter())

    assert transport.closed


async def test_tn3270_client_round_trip(registry, headline_service):
    server = GatewayServer(registry, headline_service, host="127.0.0.1", port=0)
    listener = await server.start()
    port = listener.sockets[0].getsockname()[1]

    try:
        reader, writer = await asyncio.open_connection("127.0.0.1", port)

        assert await reader.readexactly(3) == bytes([IAC, DO, OPT_TTYPE])
        writer.write(bytes([IAC, WILL, OPT_TTYPE]))
        await writer.drain()
        await reader.readexactly(6)
        writer.write(
            bytes([IAC, SB, OPT_TTYPE, TTYPE_IS]) + b"IBM-3278-2" + bytes([IAC, SE])
        )
        await writer.drain()
        await reader.readexactly(12)
        writer.write(
            bytes(
                [
                    IAC, WILL, OPT_EOR, IAC, DO, OPT_EOR,
                    IAC, WILL, OPT_BINARY, IAC, DO, OPT_BINARY,
                ]
            )
        )
        await writer.drain()

        screen = await asyncio.wait_for(reader.readuntil(bytes([IAC, EOR])), 5)
        assert screen[0] == codec.CMD_ERASE_WRITE
        assert "Headline from http://a".encode(codec.CODEPAGE) in screen

        writer.write(bytes([codec.AID_CLEAR, IAC, EOR]))
        await writer.drain()

        assert await asyncio.wait_for(reader.read(), 5) == b""
        writer.close()
    finally:
        await server.close()
