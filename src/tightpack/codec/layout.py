"""Fixed-size little-endian layout of primitive values.

Booleans, 8-bit integers and floats have a fixed width on the wire;
characters are the low three bytes of their codepoint. Everything here is a
pure transform between Python values and bytes.
"""

from __future__ import annotations

import struct

CHAR_WIDTH = 3
MAX_SCALAR = 0x10FFFF
_SURROGATES = range(0xD800, 0xE000)

_F32 = struct.Struct("<f")
_F64 = struct.Struct("<d")


def pack_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def unpack_bool(data: bytes) -> bool | None:
    """Return the boolean stored in ``data``, or None if the byte is not 0 or 1."""
    byte = data[0]
    if byte == 0:
        return False
    if byte == 1:
        return True
    return None


def pack_u8(value: int) -> bytes:
    return value.to_bytes(1, "little")


def pack_i8(value: int) -> bytes:
    return value.to_bytes(1, "little", signed=True)


def unpack_u8(data: bytes) -> int:
    return data[0]


def unpack_i8(data: bytes) -> int:
    return int.from_bytes(data[:1], "little", signed=True)


def pack_f32(value: float) -> bytes:
    """Pack an IEEE 754 single-precision float.

    Raises:
        OverflowError: If value is finite but out of f32 range
    """
    return _F32.pack(value)


def unpack_f32(data: bytes) -> float:
    return _F32.unpack(data)[0]


def pack_f64(value: float) -> bytes:
    return _F64.pack(value)


def unpack_f64(data: bytes) -> float:
    return _F64.unpack(data)[0]


def pack_char(ch: str) -> bytes:
    """Pack a single character as the low three bytes of its codepoint.

    Codepoints of 2**24 and above would be truncated; Python strings never
    hold one.
    """
    return (ord(ch) & 0xFFFFFF).to_bytes(CHAR_WIDTH, "little")


def unpack_codepoint(data: bytes) -> int:
    """Zero-extend three little-endian bytes to a codepoint."""
    return int.from_bytes(data[:CHAR_WIDTH], "little")


def is_scalar_value(codepoint: int) -> bool:
    """True if ``codepoint`` is a Unicode scalar value (not a surrogate, <= U+10FFFF)."""
    return 0 <= codepoint <= MAX_SCALAR and codepoint not in _SURROGATES
