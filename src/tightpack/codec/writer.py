"""Writer engine.

The Writer turns a caller-driven traversal (primitive emits and compound
builders) into bytes. Every call writes straight to the sink; the only state
is the sink itself and the element counters kept by open compounds.
"""

from __future__ import annotations

import struct
from types import TracebackType
from typing import Optional

from ..exceptions import EncodeError, LengthRequiredError
from . import layout
from .protocol import Encodable
from .stream import ByteSink
from .varint import U64_MAX, encode_varint
from .zigzag import zigzag

U32_MAX = (1 << 32) - 1


def _check_unsigned(value: int, bits: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodeError(f"u{bits}: expected int, got {type(value).__name__}")
    if value < 0 or value >= (1 << bits):
        raise EncodeError(f"u{bits}: value {value} out of bounds [0, {(1 << bits) - 1}]")


def _check_int(value: int, bits: int) -> None:
    if not isinstance(value, int) or isinstance(value, bool):
        raise EncodeError(f"i{bits}: expected int, got {type(value).__name__}")


class Compound:
    """Builder for the elements of a sequence, map, tuple, struct or variant.

    Elements are written as soon as they are emitted. When the compound was
    opened with a known count, :meth:`end` verifies that exactly that many
    elements (or map entries) were written.

    Example:
        >>> with writer.begin_seq(2) as seq:
        ...     seq.element(first)
        ...     seq.element(second)
    """

    def __init__(self, writer: Writer, kind: str, length: int) -> None:
        self._writer = writer
        self._kind = kind
        self._length = length
        self._count = 0
        self._pending_key = False

    @property
    def writer(self) -> Writer:
        """The Writer elements are emitted to."""
        return self._writer

    def element(self, value: Encodable) -> None:
        """Emit one element (or one struct/tuple field)."""
        value.tightpack_encode(self._writer)
        self._count += 1

    def key(self, key: Encodable) -> None:
        """Emit the key of the next map entry."""
        if self._pending_key:
            raise EncodeError(f"{self._kind}: key emitted twice without a value")
        key.tightpack_encode(self._writer)
        self._pending_key = True

    def value(self, value: Encodable) -> None:
        """Emit the value of the current map entry."""
        if not self._pending_key:
            raise EncodeError(f"{self._kind}: value emitted without a key")
        value.tightpack_encode(self._writer)
        self._pending_key = False
        self._count += 1

    def entry(self, key: Encodable, value: Encodable) -> None:
        """Emit a whole map entry."""
        self.key(key)
        self.value(value)

    def skip(self, count: int = 1) -> None:
        """Record elements written directly through the Writer."""
        self._count += count

    def end(self) -> None:
        """Close the compound.

        Raises:
            EncodeError: If the number of emitted elements differs from the declared count
        """
        if self._pending_key:
            raise EncodeError(f"{self._kind}: map key without a value")
        if self._count != self._length:
            raise EncodeError(
                f"{self._kind}: declared {self._length} elements, emitted {self._count}"
            )

    def __enter__(self) -> Compound:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            self.end()


class Writer:
    """Emits values to a ByteSink following the tightpack wire format.

    Example:
        >>> buf = io.BytesIO()
        >>> writer = Writer(ByteSink(buf))
        >>> writer.emit_u8(1)
        >>> writer.emit_u16(1024)
        >>> writer.end()
        >>> buf.getvalue()
        b'\\x01\\x84\\x00'
    """

    def __init__(self, sink: ByteSink) -> None:
        self.sink = sink

    def end(self) -> None:
        """Signal the end of the encode; flushes the sink, adds no framing."""
        self.sink.flush()

    def emit(self, value: Encodable) -> None:
        """Emit any Encodable value."""
        value.tightpack_encode(self)

    # Primitives

    def emit_bool(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise EncodeError(f"bool: expected bool, got {type(value).__name__}")
        self.sink.write(layout.pack_bool(value))

    def emit_i8(self, value: int) -> None:
        _check_int(value, 8)
        if value < -128 or value > 127:
            raise EncodeError(f"i8: value {value} out of bounds [-128, 127]")
        self.sink.write(layout.pack_i8(value))

    def _emit_zigzag(self, value: int, bits: int) -> None:
        _check_int(value, bits)
        try:
            mapped = zigzag(value, bits)
        except ValueError as e:
            raise EncodeError(str(e)) from e
        if bits == 128:
            self._emit_split128(mapped)
        else:
            encode_varint(self.sink, mapped)

    def emit_i16(self, value: int) -> None:
        self._emit_zigzag(value, 16)

    def emit_i32(self, value: int) -> None:
        self._emit_zigzag(value, 32)

    def emit_i64(self, value: int) -> None:
        self._emit_zigzag(value, 64)

    def emit_i128(self, value: int) -> None:
        self._emit_zigzag(value, 128)

    def emit_u8(self, value: int) -> None:
        _check_unsigned(value, 8)
        self.sink.write(layout.pack_u8(value))

    def emit_u16(self, value: int) -> None:
        _check_unsigned(value, 16)
        encode_varint(self.sink, value)

    def emit_u32(self, value: int) -> None:
        _check_unsigned(value, 32)
        encode_varint(self.sink, value)

    def emit_u64(self, value: int) -> None:
        _check_unsigned(value, 64)
        encode_varint(self.sink, value)

    def emit_u128(self, value: int) -> None:
        _check_unsigned(value, 128)
        self._emit_split128(value)

    def _emit_split128(self, value: int) -> None:
        # lower half first, then upper half
        encode_varint(self.sink, value & U64_MAX)
        encode_varint(self.sink, value >> 64)

    def emit_f32(self, value: float) -> None:
        try:
            self.sink.write(layout.pack_f32(value))
        except (OverflowError, TypeError, struct.error) as e:
            raise EncodeError(f"f32: cannot pack {value!r}: {e}") from e

    def emit_f64(self, value: float) -> None:
        try:
            self.sink.write(layout.pack_f64(value))
        except (TypeError, struct.error) as e:
            raise EncodeError(f"f64: cannot pack {value!r}: {e}") from e

    def emit_char(self, value: str) -> None:
        if not isinstance(value, str) or len(value) != 1:
            raise EncodeError(f"char: expected a single character, got {value!r}")
        if not layout.is_scalar_value(ord(value)):
            raise EncodeError(f"char: {ord(value):#x} is not a Unicode scalar value")
        self.sink.write(layout.pack_char(value))

    def emit_str(self, value: str) -> None:
        if not isinstance(value, str):
            raise EncodeError(f"str: expected str, got {type(value).__name__}")
        try:
            data = value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise EncodeError(f"str: not encodable as UTF-8: {e}") from e
        encode_varint(self.sink, len(data))
        self.sink.write(data)

    def emit_bytes(self, value: bytes) -> None:
        if not isinstance(value, (bytes, bytearray, memoryview)):
            raise EncodeError(f"bytes: expected bytes, got {type(value).__name__}")
        data = bytes(value)
        encode_varint(self.sink, len(data))
        self.sink.write(data)

    def emit_option_none(self) -> None:
        self.sink.write_byte(0)

    def emit_option_some(self, value: Encodable) -> None:
        self.sink.write_byte(1)
        value.tightpack_encode(self)

    def emit_unit(self) -> None:
        pass

    # Compounds

    def _begin_counted(self, kind: str, length: int | None) -> Compound:
        if length is None:
            raise LengthRequiredError(f"{kind}: element count required up front")
        if length < 0 or length > U64_MAX:
            raise EncodeError(f"{kind}: invalid length {length}")
        encode_varint(self.sink, length)
        return Compound(self, kind, length)

    def begin_seq(self, length: int | None) -> Compound:
        """Start a sequence; writes the element count.

        Raises:
            LengthRequiredError: If ``length`` is None
        """
        return self._begin_counted("seq", length)

    def begin_map(self, length: int | None) -> Compound:
        """Start a map; writes the entry count.

        Raises:
            LengthRequiredError: If ``length`` is None
        """
        return self._begin_counted("map", length)

    def begin_tuple(self, arity: int) -> Compound:
        """Start a fixed-arity tuple; writes nothing."""
        return Compound(self, "tuple", arity)

    def begin_struct(self, field_count: int) -> Compound:
        """Start a struct; writes nothing, fields are positional."""
        return Compound(self, "struct", field_count)

    def begin_variant(self, index: int, arity: int = 0) -> Compound:
        """Start a tagged-union value; writes the variant index.

        The payload is laid out like a tuple of ``arity`` fields.
        """
        if not isinstance(index, int) or index < 0 or index > U32_MAX:
            raise EncodeError(f"variant: index {index!r} out of bounds [0, {U32_MAX}]")
        encode_varint(self.sink, index)
        return Compound(self, "variant", arity)
