"""Variable-length unsigned integer codec.

The length of an encoded value is announced by the number of leading one
bits in its first byte::

    0xxxxxxx                    7 bits   (1 byte)
    10xxxxxx X                 14 bits   (2 bytes)
    110xxxxx XX                21 bits   (3 bytes)
    1110xxxx XXX               28 bits   (4 bytes)
    11110xxx XXXX              35 bits   (5 bytes)
    111110xx XXXXX             42 bits   (6 bytes)
    1111110x XXXXXX            49 bits   (7 bytes)
    11111110 XXXXXXX           56 bits   (8 bytes)
    11111111 XXXXXXXX          64 bits   (9 bytes)

``x`` is a value bit and ``X`` a value byte; value bits are big-endian
across the whole group. The 128-bit form shares the first eight classes and
replaces the last one with ``11111111`` followed by 16 value bytes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .stream import ByteSink, ByteSource

U64_MAX = (1 << 64) - 1
U128_MAX = (1 << 128) - 1

# Largest value that fits one of the prefixed classes (8 bytes, 56 bits).
_PREFIXED_MAX = (1 << 56) - 1
_ALL_ONES = 0xFF


def _prefixed_length(value: int) -> int:
    """Byte count of the prefixed class holding ``value`` (1-8)."""
    nbits = max(value.bit_length(), 1)
    return (nbits + 6) // 7


def _pack_prefixed(value: int) -> bytes:
    length = _prefixed_length(value)
    encoded = bytearray(value.to_bytes(length, "big"))
    # length - 1 leading one bits, then a zero bit
    encoded[0] |= (_ALL_ONES << (9 - length)) & _ALL_ONES
    return bytes(encoded)


def _leading_ones(byte: int) -> int:
    return 8 - (byte ^ _ALL_ONES).bit_length()


def varint_bytes(value: int) -> bytes:
    """Return the canonical varint encoding of an unsigned 64-bit value.

    Args:
        value: Integer in the range 0 to 2**64 - 1

    Returns:
        Encoded bytes (1-9 bytes)

    Raises:
        ValueError: If value is negative or wider than 64 bits

    Example:
        >>> varint_bytes(1024)
        b'\\x84\\x00'
    """
    if value < 0 or value > U64_MAX:
        raise ValueError(f"varint requires a value in [0, 2**64 - 1], got {value}")

    if value <= _PREFIXED_MAX:
        return _pack_prefixed(value)
    return bytes((_ALL_ONES,)) + value.to_bytes(8, "big")


def varint128_bytes(value: int) -> bytes:
    """Return the canonical 128-bit varint encoding of ``value``.

    Values up to 56 bits use the same classes as :func:`varint_bytes`; anything
    larger is ``0xFF`` followed by 16 big-endian bytes.

    Raises:
        ValueError: If value is negative or wider than 128 bits
    """
    if value < 0 or value > U128_MAX:
        raise ValueError(f"varint128 requires a value in [0, 2**128 - 1], got {value}")

    if value <= _PREFIXED_MAX:
        return _pack_prefixed(value)
    return bytes((_ALL_ONES,)) + value.to_bytes(16, "big")


def varint_size(value: int) -> int:
    """Return the encoded length of a 64-bit varint without encoding it."""
    if value < 0 or value > U64_MAX:
        raise ValueError(f"varint requires a value in [0, 2**64 - 1], got {value}")
    return _prefixed_length(value) if value <= _PREFIXED_MAX else 9


def varint_size128(value: int) -> int:
    """Return the encoded length of a 128-bit varint without encoding it."""
    if value < 0 or value > U128_MAX:
        raise ValueError(f"varint128 requires a value in [0, 2**128 - 1], got {value}")
    return _prefixed_length(value) if value <= _PREFIXED_MAX else 17


def encode_varint(sink: ByteSink, value: int) -> None:
    """Write ``value`` to ``sink`` as a 64-bit varint."""
    sink.write(varint_bytes(value))


def encode_varint128(sink: ByteSink, value: int) -> None:
    """Write ``value`` to ``sink`` as a 128-bit varint."""
    sink.write(varint128_bytes(value))


def _decode(source: ByteSource, full_width: int) -> int:
    head = source.read_byte()
    extra = _leading_ones(head)

    if extra == 8:
        return int.from_bytes(source.read_exact(full_width), "big")

    high = head & (_ALL_ONES >> (extra + 1))
    if extra == 0:
        return high
    return (high << (8 * extra)) | int.from_bytes(source.read_exact(extra), "big")


def decode_varint(source: ByteSource) -> int:
    """Read a 64-bit varint from ``source``.

    Every first byte is valid; the only failure is running out of input.

    Raises:
        TruncatedInputError: If the source ends inside the varint
    """
    return _decode(source, 8)


def decode_varint128(source: ByteSource) -> int:
    """Read a 128-bit varint from ``source``.

    Raises:
        TruncatedInputError: If the source ends inside the varint
    """
    return _decode(source, 16)
