"""Unit tests for byte sink/source adapters."""

from __future__ import annotations

import io

import pytest

from tightpack import ByteSink, ByteSource, StreamError, TruncatedInputError
from tightpack.codec.stream import CountingSink


class DribbleReader(io.RawIOBase):
    """Binary stream that returns at most one byte per read."""

    def __init__(self, data: bytes) -> None:
        self._data = data
        self._pos = 0

    def readable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        if self._pos >= len(self._data) or size == 0:
            return b""
        chunk = self._data[self._pos : self._pos + 1]
        self._pos += 1
        return chunk


class BrokenStream(io.RawIOBase):
    """Binary stream whose every operation fails."""

    def readable(self) -> bool:
        return True

    def writable(self) -> bool:
        return True

    def read(self, size: int = -1) -> bytes:
        raise OSError("device unplugged")

    def write(self, data: bytes) -> int:  # type: ignore[override]
        raise OSError("disk full")


class TestByteSink:
    """Test ByteSink functionality."""

    def test_write_and_count(self) -> None:
        """Bytes are passed through and counted."""
        buf = io.BytesIO()
        sink = ByteSink(buf)
        sink.write(b"\x01\x02")
        sink.write_byte(3)
        sink.flush()

        assert buf.getvalue() == b"\x01\x02\x03"
        assert sink.bytes_written() == 3

    def test_write_failure(self) -> None:
        """I/O failures surface as StreamError."""
        sink = ByteSink(BrokenStream())
        with pytest.raises(StreamError, match="disk full"):
            sink.write(b"\x00")

    def test_counting_sink(self) -> None:
        """CountingSink only counts."""
        sink = CountingSink()
        sink.write(b"abc")
        sink.write_byte(0)
        assert sink.bytes_written() == 4


class TestByteSource:
    """Test ByteSource functionality."""

    def test_read_exact(self) -> None:
        """Exact reads advance the position."""
        source = ByteSource(b"\x01\x02\x03")
        assert source.read_exact(2) == b"\x01\x02"
        assert source.read_byte() == 3
        assert source.position() == 3

    def test_zero_length_read(self) -> None:
        """Reading zero bytes never touches the stream."""
        assert ByteSource(b"").read_exact(0) == b""

    def test_short_reads_are_completed(self) -> None:
        """Partial reads from the stream are stitched together."""
        source = ByteSource(DribbleReader(b"abcdef"))
        assert source.read_exact(4) == b"abcd"
        assert source.read_exact(2) == b"ef"

    def test_truncated(self) -> None:
        """Running out of input raises TruncatedInputError."""
        source = ByteSource(b"\x01\x02")
        with pytest.raises(TruncatedInputError, match="need 3 bytes, have 2"):
            source.read_exact(3)

    def test_truncated_dribble(self) -> None:
        """Truncation is detected across short reads too."""
        source = ByteSource(DribbleReader(b"ab"))
        with pytest.raises(TruncatedInputError):
            source.read_exact(3)

    def test_at_end(self) -> None:
        """at_end reports exhaustion."""
        source = ByteSource(b"\x01")
        assert source.at_end() is False
        assert source.at_end() is True

    def test_read_failure(self) -> None:
        """I/O failures surface as StreamError."""
        source = ByteSource(BrokenStream())
        with pytest.raises(StreamError, match="device unplugged"):
            source.read_exact(1)

    def test_accepts_buffers(self) -> None:
        """bytearray and memoryview inputs are copied into a stream."""
        assert ByteSource(bytearray(b"xy")).read_exact(2) == b"xy"
        assert ByteSource(memoryview(b"xy")).read_exact(2) == b"xy"
