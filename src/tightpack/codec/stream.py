"""Byte sink and source adapters.

This module wraps binary file-like objects so the engines can write and read
exact byte counts. Short reads are retried until the request is satisfied or
the source reports end-of-input, which becomes a TruncatedInputError.
"""

from __future__ import annotations

import io
from typing import BinaryIO, Union

from ..exceptions import StreamError, TruncatedInputError

BytesLike = Union[bytes, bytearray, memoryview]


class ByteSink:
    """Writes bytes straight through to a binary file-like object.

    Example:
        >>> buf = io.BytesIO()
        >>> sink = ByteSink(buf)
        >>> sink.write(b"\\x01\\x02")
        >>> sink.flush()
        >>> buf.getvalue()
        b'\\x01\\x02'
    """

    def __init__(self, fp: BinaryIO) -> None:
        """Initialize a sink over ``fp``.

        Args:
            fp: Any object with ``write(bytes)``; ``flush()`` is used if present
        """
        self._fp = fp
        self._written = 0

    def write(self, data: BytesLike) -> None:
        """Write all of ``data`` to the underlying object.

        Raises:
            StreamError: If the underlying write fails
        """
        try:
            self._fp.write(data)
        except OSError as e:
            raise StreamError(f"write failed after {self._written} bytes: {e}") from e
        self._written += len(data)

    def write_byte(self, value: int) -> None:
        """Write a single byte (0-255)."""
        self.write(bytes((value,)))

    def flush(self) -> None:
        """Flush the underlying object if it supports flushing.

        Raises:
            StreamError: If the underlying flush fails
        """
        flush = getattr(self._fp, "flush", None)
        if flush is None:
            return
        try:
            flush()
        except OSError as e:
            raise StreamError(f"flush failed: {e}") from e

    def bytes_written(self) -> int:
        """Return the number of bytes written so far."""
        return self._written


class CountingSink(ByteSink):
    """A sink that discards its input and only counts bytes."""

    def __init__(self) -> None:
        super().__init__(io.BytesIO())

    def write(self, data: BytesLike) -> None:
        self._written += len(data)

    def flush(self) -> None:
        pass


class ByteSource:
    """Reads exact byte counts from a binary file-like object or a buffer.

    Example:
        >>> source = ByteSource(b"\\x01\\x02\\x03")
        >>> source.read_exact(2)
        b'\\x01\\x02'
        >>> source.position()
        2
    """

    def __init__(self, data: BytesLike | BinaryIO) -> None:
        """Initialize a source.

        Args:
            data: Byte buffer, or any object with ``read(n)``
        """
        if isinstance(data, (bytes, bytearray, memoryview)):
            self._fp: BinaryIO = io.BytesIO(bytes(data))
        else:
            self._fp = data
        self._position = 0

    def _read(self, size: int) -> bytes:
        try:
            chunk = self._fp.read(size)
        except OSError as e:
            raise StreamError(f"read failed at byte {self._position}: {e}") from e
        return chunk or b""

    def read_exact(self, size: int) -> bytes:
        """Read exactly ``size`` bytes.

        Args:
            size: Number of bytes to read

        Returns:
            The bytes read

        Raises:
            TruncatedInputError: If the source ends first
            StreamError: If the underlying read fails
        """
        if size == 0:
            return b""

        chunk = self._read(size)
        if len(chunk) < size:
            parts = [chunk]
            got = len(chunk)
            while got < size:
                more = self._read(size - got)
                if not more:
                    self._position += got
                    raise TruncatedInputError(
                        f"Truncated input: need {size} bytes, have {got} "
                        f"(at byte {self._position})"
                    )
                parts.append(more)
                got += len(more)
            chunk = b"".join(parts)

        self._position += size
        return chunk

    def read_byte(self) -> int:
        """Read a single byte and return it as an integer."""
        return self.read_exact(1)[0]

    def at_end(self) -> bool:
        """Try to read one more byte and report whether the source was exhausted.

        A byte that is read is consumed; this is only meaningful as the last
        operation on a source.
        """
        chunk = self._read(1)
        if chunk:
            self._position += 1
            return False
        return True

    def position(self) -> int:
        """Return the number of bytes consumed so far."""
        return self._position
