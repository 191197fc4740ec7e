"""3270 data stream encoding and decoding.

Covers the subset needed for full-screen block mode: Erase/Write with field
orders outbound, Read Modified responses inbound. Text is EBCDIC code page 037.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field

from newsgate.modules.screens.domain.entities import (
    SCREEN_COLS,
    SCREEN_ROWS,
    Color,
    CommandSignal,
    Highlighting,
    Screen,
    ScreenField,
)

CODEPAGE = "cp037"
BUFFER_SIZE = SCREEN_ROWS * SCREEN_COLS

# Commands and write control character
CMD_ERASE_WRITE = 0xF5
WCC_RESET_RESTORE = 0xC3  # reset, restore keyboard, reset MDT

# Orders
ORDER_SF = 0x1D
ORDER_SFE = 0x29
ORDER_SBA = 0x11
ORDER_IC = 0x13

# Field attribute bits
FA_PROTECTED = 0x20
FA_NUMERIC = 0x10
FA_INTENSE = 0x08
FA_MDT = 0x01

# Extended attribute types
XA_BASIC = 0xC0
XA_HIGHLIGHTING = 0x41
XA_COLOR = 0x42

COLOR_CODES: dict[Color, int] = {
    Color.DEFAULT: 0x00,
    Color.BLUE: 0xF1,
    Color.RED: 0xF2,
    Color.PINK: 0xF3,
    Color.GREEN: 0xF4,
    Color.TURQUOISE: 0xF5,
    Color.YELLOW: 0xF6,
    Color.WHITE: 0xF7,
}

HIGHLIGHT_CODES: dict[Highlighting, int] = {
    Highlighting.DEFAULT: 0x00,
    Highlighting.BLINK: 0xF1,
    Highlighting.REVERSE: 0xF2,
    Highlighting.UNDERSCORE: 0xF4,
}

# Attention identifiers
AID_NONE = 0x60
AID_ENTER = 0x7D
AID_CLEAR = 0x6D
AID_PA1 = 0x6C
AID_PA2 = 0x6E
AID_PA3 = 0x6B
AID_PF = {
    1: 0xF1, 2: 0xF2, 3: 0xF3, 4: 0xF4, 5: 0xF5, 6: 0xF6,
    7: 0xF7, 8: 0xF8, 9: 0xF9, 10: 0x7A, 11: 0x7B, 12: 0x7C,
}
SHORT_READ_AIDS = frozenset({AID_CLEAR, AID_PA1, AID_PA2, AID_PA3})

AID_SIGNALS: dict[int, CommandSignal] = {
    AID_ENTER: CommandSignal.CONFIRM,
    AID_PF[3]: CommandSignal.EXIT,
    AID_PF[4]: CommandSignal.SWITCH_FEED,
    AID_CLEAR: CommandSignal.CLEAR,
}

# 6-bit values as graphic EBCDIC bytes, used for 12-bit addresses and attributes.
SIX_BIT_CODES = bytes([
    0x40, 0xC1, 0xC2, 0xC3, 0xC4, 0xC5, 0xC6, 0xC7,
    0xC8, 0xC9, 0x4A, 0x4B, 0x4C, 0x4D, 0x4E, 0x4F,
    0x50, 0xD1, 0xD2, 0xD3, 0xD4, 0xD5, 0xD6, 0xD7,
    0xD8, 0xD9, 0x5A, 0x5B, 0x5C, 0x5D, 0x5E, 0x5F,
    0x60, 0x61, 0xE2, 0xE3, 0xE4, 0xE5, 0xE6, 0xE7,
    0xE8, 0xE9, 0x6A, 0x6B, 0x6C, 0x6D, 0x6E, 0x6F,
    0xF0, 0xF1, 0xF2, 0xF3, 0xF4, 0xF5, 0xF6, 0xF7,
    0xF8, 0xF9, 0x7A, 0x7B, 0x7C, 0x7D, 0x7E, 0x7F,
])


def signal_for_aid(aid: int) -> CommandSignal:
    return AID_SIGNALS.get(aid, CommandSignal.UNSUPPORTED)


def buffer_address(row: int, col: int) -> int:
    return (row * SCREEN_COLS + col) % BUFFER_SIZE


def encode_address(address: int) -> bytes:
    """Encode a buffer address in 12-bit form."""
    if not 0 <= address < BUFFER_SIZE:
        raise ValueError(f"buffer address {address} outside 0-{BUFFER_SIZE - 1}")
    return bytes([SIX_BIT_CODES[(address >> 6) & 0x3F], SIX_BIT_CODES[address & 0x3F]])


def decode_address(high: int, low: int) -> int:
    """Decode a 12-bit or 14-bit buffer address."""
    if high & 0xC0 == 0:
        return ((high & 0x3F) << 8) | low
    return ((high & 0x3F) << 6) | (low & 0x3F)


def field_attribute(item: ScreenField, modified: bool = False) -> int:
    """Build the field attribute byte for ``item``."""
    value = 0
    if not item.write:
        value |= FA_PROTECTED
    if item.numeric or item.autoskip:
        value |= FA_NUMERIC
    if item.intense:
        value |= FA_INTENSE
    if modified:
        value |= FA_MDT
    return SIX_BIT_CODES[value & 0x3F]


def _start_field(item: ScreenField, modified: bool) -> bytes:
    attribute = field_attribute(item, modified)
    extended = []
    if item.highlighting != Highlighting.DEFAULT:
        extended.append((XA_HIGHLIGHTING, HIGHLIGHT_CODES[item.highlighting]))
    if item.color != Color.DEFAULT:
        extended.append((XA_COLOR, COLOR_CODES[item.color]))
    if not extended:
        return bytes([ORDER_SF, attribute])

    out = bytearray([ORDER_SFE, len(extended) + 1, XA_BASIC, attribute])
    for kind, value in extended:
        out += bytes([kind, value])
    return bytes(out)


# Bytes below 0x40 are orders and controls in a 3270 data stream, never text.
_CONTROL_TO_SPACE = bytes.maketrans(bytes(range(0x40)), b"\x40" * 0x40)


def encode_text(text: str) -> bytes:
    """Encode field text to EBCDIC, blanking anything that would act as an order."""
    return text.encode(CODEPAGE, errors="replace").translate(_CONTROL_TO_SPACE)


def encode_screen(
    screen: Screen,
    cursor: tuple[int, int],
    values: Mapping[str, str] | None = None,
) -> bytes:
    """Encode an Erase/Write data stream for ``screen``.

    ``values`` overrides the content of writable fields by name; such fields are
    sent modified so that unchanged values are still returned on the next read.
    """
    values = values or {}
    out = bytearray([CMD_ERASE_WRITE, WCC_RESET_RESTORE])
    for item in screen.fields:
        content = item.content or ""
        if item.write and item.name and values.get(item.name):
            content = values[item.name]
        modified = bool(item.write and content)

        out.append(ORDER_SBA)
        out += encode_address(buffer_address(item.row, item.col))
        out += _start_field(item, modified)
        if content:
            out += encode_text(content)

    out.append(ORDER_SBA)
    out += encode_address(buffer_address(*cursor))
    out.append(ORDER_IC)
    return bytes(out)


@dataclass(frozen=True)
class InboundRecord:
    """A parsed Read Modified response."""

    aid: int
    cursor: int | None = None
    fields: dict[int, str] = field(default_factory=dict)


def decode_response(record: bytes) -> InboundRecord:
    """Parse AID, cursor and modified-field data from an inbound record.

    Field data is keyed by the buffer address of its first character.
    """
    if not record:
        raise ValueError("empty inbound record")

    aid = record[0]
    if aid in SHORT_READ_AIDS or len(record) < 3:
        return InboundRecord(aid=aid)

    cursor = decode_address(record[1], record[2])
    fields: dict[int, str] = {}
    address: int | None = None
    data = bytearray()
    i = 3
    while i < len(record):
        byte = record[i]
        if byte == ORDER_SBA:
            if i + 2 >= len(record):
                raise ValueError("truncated set buffer address order")
            if address is not None:
                fields[address] = _field_text(data)
            address = decode_address(record[i + 1], record[i + 2])
            data = bytearray()
            i += 3
            continue
        data.append(byte)
        i += 1
    if address is not None:
        fields[address] = _field_text(data)
    return InboundRecord(aid=aid, cursor=cursor, fields=fields)


def _field_text(data: bytes) -> str:
    return data.decode(CODEPAGE).replace("\x00", "")


def input_addresses(screen: Screen) -> dict[int, str]:
    """Map the first data address of each named writable field to its name."""
    return {
        buffer_address(item.row, item.col + 1): item.name
        for item in screen.fields
        if item.write and item.name
    }
