"""Telnet framing for TN3270: option negotiation and EOR-delimited records."""

import asyncio

from loguru import logger

from newsgate.modules.screens.domain.exceptions import TransportNegotiationError

IAC = 0xFF
DONT = 0xFE
DO = 0xFD
WONT = 0xFC
WILL = 0xFB
SB = 0xFA
SE = 0xF0
EOR = 0xEF

OPT_BINARY = 0x00
OPT_TTYPE = 0x18
OPT_EOR = 0x19

TTYPE_IS = 0x00
TTYPE_SEND = 0x01

READ_CHUNK = 4096


class TelnetConnection:
    """Byte-level telnet view of an accepted client connection."""

    def __init__(self, reader: asyncio.StreamReader, writer: asyncio.StreamWriter):
        self.reader = reader
        self.writer = writer
        self.terminal_type: str | None = None
        self._buffer = bytearray()

    @property
    def peer(self) -> str:
        info = self.writer.get_extra_info("peername")
        if isinstance(info, tuple) and len(info) >= 2:
            return f"{info[0]}:{info[1]}"
        return str(info or "unknown")

    async def _next_byte(self) -> int:
        if not self._buffer:
            chunk = await self.reader.read(READ_CHUNK)
            if not chunk:
                raise EOFError("connection closed by peer")
            self._buffer += chunk
        byte = self._buffer[0]
        del self._buffer[0]
        return byte

    async def _read_subnegotiation(self) -> bytes:
        payload = bytearray()
        while True:
            byte = await self._next_byte()
            if byte != IAC:
                payload.append(byte)
                continue
            nxt = await self._next_byte()
            if nxt == SE:
                return bytes(payload)
            payload.append(nxt)

    async def _read_command(self) -> tuple[int, int | None, bytes]:
        """Read one telnet command during negotiation."""
        byte = await self._next_byte()
        if byte != IAC:
            raise TransportNegotiationError(
                f"expected telnet command, got data byte 0x{byte:02x}"
            )
        command = await self._next_byte()
        if command in (DO, DONT, WILL, WONT):
            return command, await self._next_byte(), b""
        if command == SB:
            payload = await self._read_subnegotiation()
            option = payload[0] if payload else None
            return command, option, payload[1:]
        return command, None, b""

    async def _send(self, data: bytes) -> None:
        self.writer.write(data)
        await self.writer.drain()

    async def _expect(self, command: int, option: int) -> None:
        got_command, got_option, _ = await self._read_command()
        if (got_command, got_option) != (command, option):
            raise TransportNegotiationError(
                f"client refused option {option}: answered "
                f"{got_command}/{got_option}"
            )

    async def negotiate(self) -> str:
        """Bring the client into 3270 block mode and return its terminal type."""
        try:
            await self._send(bytes([IAC, DO, OPT_TTYPE]))
            await self._expect(WILL, OPT_TTYPE)

            await self._send(bytes([IAC, SB, OPT_TTYPE, TTYPE_SEND, IAC, SE]))
            command, option, payload = await self._read_command()
            if command != SB or option != OPT_TTYPE or not payload:
                raise TransportNegotiationError("no terminal type received")
            if payload[0] != TTYPE_IS:
                raise TransportNegotiationError("malformed terminal type reply")
            terminal_type = payload[1:].decode("ascii", errors="replace")
            if not terminal_type.upper().startswith("IBM-"):
                raise TransportNegotiationError(
                    f"terminal type {terminal_type!r} is not a 3270"
                )

            await self._send(
                bytes(
                    [
                        IAC, DO, OPT_EOR, IAC, WILL, OPT_EOR,
                        IAC, DO, OPT_BINARY, IAC, WILL, OPT_BINARY,
                    ]
                )
            )
            pending = {(WILL, OPT_EOR), (DO, OPT_EOR), (WILL, OPT_BINARY), (DO, OPT_BINARY)}
            while pending:
                command, option, _ = await self._read_command()
                if (command, option) not in pending:
                    raise TransportNegotiationError(
                        f"client refused binary/EOR mode: {command}/{option}"
                    )
                pending.discard((command, option))
        except (EOFError, OSError) as e:
            raise TransportNegotiationError(f"connection lost: {e}") from e

        self.terminal_type = terminal_type
        logger.debug(f"Negotiated TN3270 with {self.peer} as {terminal_type}")
        return terminal_type

    async def read_record(self) -> bytes:
        """Read one EOR-terminated record, dropping embedded telnet commands."""
        data = bytearray()
        while True:
            byte = await self._next_byte()
            if byte != IAC:
                data.append(byte)
                continue
            command = await self._next_byte()
            if command == IAC:
                data.append(IAC)
            elif command == EOR:
                return bytes(data)
            elif command in (DO, DONT, WILL, WONT):
                await self._next_byte()
            elif command == SB:
                await self._read_subnegotiation()

    async def write_record(self, payload: bytes) -> None:
        """Send ``payload`` with IAC doubled and an EOR terminator."""
        await self._send(payload.replace(b"\xff", b"\xff\xff") + bytes([IAC, EOR]))

    async def close(self) -> None:
        if self.writer.is_closing():
            return
        self.writer.close()
        try:
            await self.writer.wait_closed()
        except OSError as e:
            logger.debug(f"Error while closing {self.peer}: {e}")
