"""Unit tests for the Writer engine."""

from __future__ import annotations

import io

import pytest

from tightpack import EncodeError, LengthRequiredError, Writer


class U8Value:
    """Minimal Encodable wrapping a u8."""

    def __init__(self, value: int) -> None:
        self.value = value

    def tightpack_encode(self, writer: Writer) -> None:
        writer.emit_u8(self.value)


class FlushCountingBuffer(io.BytesIO):
    """BytesIO that records flush calls."""

    flushes = 0

    def flush(self) -> None:
        self.flushes += 1
        super().flush()


class TestPrimitives:
    """Test primitive emitters."""

    def test_bool(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Booleans are one byte, 0 or 1."""
        writer.emit_bool(False)
        writer.emit_bool(True)
        assert buffer.getvalue() == b"\x00\x01"

    def test_bool_type(self, writer: Writer) -> None:
        """Only real booleans are accepted."""
        with pytest.raises(EncodeError, match="expected bool"):
            writer.emit_bool(1)  # type: ignore[arg-type]

    def test_u8_i8_raw(self, writer: Writer, buffer: io.BytesIO) -> None:
        """8-bit integers are stored raw."""
        writer.emit_u8(255)
        writer.emit_i8(-1)
        writer.emit_i8(-128)
        assert buffer.getvalue() == b"\xff\xff\x80"

    def test_unsigned_varints(self, writer: Writer, buffer: io.BytesIO) -> None:
        """u16/u32/u64 use the varint codec."""
        writer.emit_u16(1024)
        writer.emit_u32(127)
        writer.emit_u64(128)
        assert buffer.getvalue() == b"\x84\x00\x7f\x80\x80"

    def test_signed_zigzag(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Wider signed integers are zigzag varints."""
        writer.emit_i16(-1)
        writer.emit_i32(1)
        writer.emit_i64(-2)
        assert buffer.getvalue() == b"\x01\x02\x03"

    def test_u128_split(self, writer: Writer, buffer: io.BytesIO) -> None:
        """u128 is written as lower then upper 64-bit varints."""
        writer.emit_u128((5 << 64) | 7)
        assert buffer.getvalue() == b"\x07\x05"

    def test_i128_split(self, writer: Writer, buffer: io.BytesIO) -> None:
        """i128 is zigzagged, then split."""
        writer.emit_i128(-1)
        assert buffer.getvalue() == b"\x01\x00"

    @pytest.mark.parametrize(
        ("method", "value"),
        [
            ("emit_u8", 256),
            ("emit_u8", -1),
            ("emit_u16", 1 << 16),
            ("emit_u32", 1 << 32),
            ("emit_u64", 1 << 64),
            ("emit_u128", 1 << 128),
            ("emit_i8", 128),
            ("emit_i16", 1 << 15),
            ("emit_i32", -(1 << 31) - 1),
            ("emit_i64", 1 << 63),
        ],
    )
    def test_integer_bounds(self, writer: Writer, method: str, value: int) -> None:
        """Integers outside the width are rejected."""
        with pytest.raises(EncodeError):
            getattr(writer, method)(value)

    def test_floats_little_endian(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Floats are IEEE 754 little-endian."""
        writer.emit_f32(1.5)
        writer.emit_f64(-2.0)
        assert buffer.getvalue() == b"\x00\x00\xc0\x3f" + b"\x00" * 7 + b"\xc0"

    def test_f32_overflow(self, writer: Writer) -> None:
        """Finite values beyond f32 range are rejected."""
        with pytest.raises(EncodeError, match="f32"):
            writer.emit_f32(1e300)

    def test_char(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Characters are the low three bytes of the codepoint."""
        writer.emit_char("A")
        writer.emit_char("語")
        writer.emit_char("\U0001f337")
        assert buffer.getvalue() == b"\x41\x00\x00" + b"\x9e\x8a\x00" + b"\x37\xf3\x01"

    def test_char_surrogate(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Lone surrogates are not Unicode scalar values and are rejected."""
        with pytest.raises(EncodeError, match="0xd800 is not a Unicode scalar value"):
            writer.emit_char("\ud800")
        assert buffer.getvalue() == b""

    def test_char_length(self, writer: Writer) -> None:
        """A char is exactly one character."""
        with pytest.raises(EncodeError, match="single character"):
            writer.emit_char("ab")

    def test_str_and_bytes(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Blobs are a varint length then raw bytes."""
        writer.emit_str("hé")
        writer.emit_bytes(b"\x00\xff")
        assert buffer.getvalue() == b"\x03h\xc3\xa9" + b"\x02\x00\xff"

    def test_option(self, writer: Writer, buffer: io.BytesIO) -> None:
        """None is one zero byte; Some is 1 followed by the value."""
        writer.emit_option_none()
        writer.emit_option_some(U8Value(123))
        assert buffer.getvalue() == b"\x00\x01\x7b"

    def test_unit(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Unit writes nothing."""
        writer.emit_unit()
        assert buffer.getvalue() == b""

    def test_end_flushes(self) -> None:
        """end() flushes the sink without adding framing."""
        from tightpack import ByteSink

        buf = FlushCountingBuffer()
        writer = Writer(ByteSink(buf))
        writer.emit_u8(9)
        writer.end()
        assert buf.flushes == 1
        assert buf.getvalue() == b"\x09"


class TestCompounds:
    """Test compound builders."""

    def test_seq(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Sequences are prefixed with their element count."""
        with writer.begin_seq(3) as seq:
            for value in (1, 2, 3):
                seq.element(U8Value(value))
        assert buffer.getvalue() == b"\x03\x01\x02\x03"

    def test_seq_requires_length(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Sequences of unknown length cannot be encoded."""
        with pytest.raises(LengthRequiredError):
            writer.begin_seq(None)
        with pytest.raises(LengthRequiredError):
            writer.begin_map(None)
        assert buffer.getvalue() == b""

    def test_map(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Map entries interleave key then value."""
        with writer.begin_map(2) as entries:
            entries.entry(U8Value(1), U8Value(10))
            entries.key(U8Value(2))
            entries.value(U8Value(20))
        assert buffer.getvalue() == b"\x02\x01\x0a\x02\x14"

    def test_map_value_without_key(self, writer: Writer) -> None:
        """Values must follow a key."""
        entries = writer.begin_map(1)
        with pytest.raises(EncodeError, match="without a key"):
            entries.value(U8Value(1))

    def test_tuple_has_no_prefix(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Tuples and structs write only their fields."""
        with writer.begin_tuple(2) as tup:
            tup.element(U8Value(1))
            tup.element(U8Value(2))
        with writer.begin_struct(0):
            pass
        assert buffer.getvalue() == b"\x01\x02"

    def test_variant(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Variants write their index, then the payload."""
        with writer.begin_variant(200, 1) as payload:
            payload.element(U8Value(7))
        assert buffer.getvalue() == b"\x80\xc8\x07"

    def test_variant_index_bounds(self, writer: Writer) -> None:
        """Variant indices are limited to 32 bits."""
        with pytest.raises(EncodeError, match="variant"):
            writer.begin_variant(1 << 32)

    def test_count_mismatch(self, writer: Writer) -> None:
        """Emitting fewer elements than declared fails on end()."""
        with pytest.raises(EncodeError, match="declared 2 elements, emitted 1"):
            with writer.begin_seq(2) as seq:
                seq.element(U8Value(1))

    def test_direct_writes_with_skip(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Elements written straight to the Writer are recorded with skip()."""
        with writer.begin_tuple(2) as tup:
            tup.writer.emit_u8(1)
            tup.writer.emit_str("x")
            tup.skip(2)
        assert buffer.getvalue() == b"\x01\x01x"

    def test_nested(self, writer: Writer, buffer: io.BytesIO) -> None:
        """Compounds nest recursively."""

        class Pair:
            def tightpack_encode(self, w: Writer) -> None:
                with w.begin_tuple(2) as tup:
                    tup.element(U8Value(4))
                    tup.element(U8Value(5))

        with writer.begin_seq(2) as seq:
            seq.element(Pair())
            seq.element(Pair())
        assert buffer.getvalue() == b"\x02\x04\x05\x04\x05"
