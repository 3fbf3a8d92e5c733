"""Reader engine.

The Reader is the dual of the Writer: for each shape request from the
consumer it pulls exactly the bytes that shape needs from the source and
returns the decoded value. There is no lookahead and no backtracking.
"""

from __future__ import annotations

from typing import Callable, Iterator, NoReturn, TypeVar

from ..exceptions import InvalidValueError, TrailingDataError, UnsupportedOperationError
from . import layout
from .stream import ByteSource
from .varint import decode_varint
from .zigzag import unzigzag

T = TypeVar("T")
K = TypeVar("K")
V = TypeVar("V")


class SeqAccess:
    """Yields a fixed number of elements, then reports exhaustion.

    Returned by :meth:`Reader.read_seq` (count read from the stream) and by
    :meth:`Reader.read_tuple` / :meth:`Reader.read_struct` (count supplied by
    the caller).
    """

    def __init__(self, reader: Reader, length: int) -> None:
        self._reader = reader
        self._remaining = length

    def __len__(self) -> int:
        return self._remaining

    @property
    def reader(self) -> Reader:
        return self._reader

    def has_next(self) -> bool:
        return self._remaining > 0

    def next_element(self, read: Callable[[Reader], T]) -> T:
        """Decode the next element with ``read``.

        Raises:
            IndexError: If every element has already been consumed
        """
        if self._remaining <= 0:
            raise IndexError("sequence exhausted")
        self._remaining -= 1
        return read(self._reader)

    def elements(self, read: Callable[[Reader], T]) -> Iterator[T]:
        """Decode every remaining element with ``read``."""
        while self._remaining > 0:
            yield self.next_element(read)


class MapAccess:
    """Yields a fixed number of key/value entries, then reports exhaustion."""

    def __init__(self, reader: Reader, length: int) -> None:
        self._reader = reader
        self._remaining = length

    def __len__(self) -> int:
        return self._remaining

    def has_next(self) -> bool:
        return self._remaining > 0

    def next_entry(
        self, read_key: Callable[[Reader], K], read_value: Callable[[Reader], V]
    ) -> tuple[K, V]:
        """Decode the next key, then its value.

        Raises:
            IndexError: If every entry has already been consumed
        """
        if self._remaining <= 0:
            raise IndexError("map exhausted")
        self._remaining -= 1
        key = read_key(self._reader)
        return key, read_value(self._reader)

    def entries(
        self, read_key: Callable[[Reader], K], read_value: Callable[[Reader], V]
    ) -> Iterator[tuple[K, V]]:
        """Decode every remaining entry."""
        while self._remaining > 0:
            yield self.next_entry(read_key, read_value)


class Reader:
    """Decodes values from a ByteSource following the tightpack wire format.

    Example:
        >>> reader = Reader(ByteSource(b"\\x01\\x84\\x00\\x02"))
        >>> reader.read_u8(), reader.read_u16(), reader.read_u8()
        (1, 1024, 2)
        >>> reader.end()
    """

    def __init__(self, source: ByteSource, max_length: int | None = None) -> None:
        """Initialize a reader.

        Args:
            source: Byte source to read from
            max_length: Optional bound on declared string/bytes/sequence/map
                lengths; unbounded when None
        """
        self.source = source
        self.max_length = max_length

    def end(self) -> None:
        """Confirm that the source holds no bytes after the decoded value.

        Raises:
            TrailingDataError: If any byte could still be read
        """
        if not self.source.at_end():
            raise TrailingDataError(
                f"Decode finished but input bytes left (at byte {self.source.position() - 1})"
            )

    def _read_length(self, kind: str) -> int:
        length = decode_varint(self.source)
        if self.max_length is not None and length > self.max_length:
            raise InvalidValueError(
                f"{kind}: declared length {length} exceeds max_length={self.max_length}"
            )
        return length

    def _read_unsigned(self, bits: int) -> int:
        value = decode_varint(self.source)
        if value >= (1 << bits):
            raise InvalidValueError(f"u{bits}: decoded value {value} exceeds max {(1 << bits) - 1}")
        return value

    def _read_split128(self) -> int:
        lower = decode_varint(self.source)
        upper = decode_varint(self.source)
        return (upper << 64) | lower

    # Primitives

    def read_bool(self) -> bool:
        data = self.source.read_exact(1)
        value = layout.unpack_bool(data)
        if value is None:
            raise InvalidValueError(f"bool: invalid value {data[0]}, expected 0 or 1")
        return value

    def read_i8(self) -> int:
        return layout.unpack_i8(self.source.read_exact(1))

    def read_i16(self) -> int:
        return unzigzag(self._read_unsigned(16))

    def read_i32(self) -> int:
        return unzigzag(self._read_unsigned(32))

    def read_i64(self) -> int:
        return unzigzag(decode_varint(self.source))

    def read_i128(self) -> int:
        return unzigzag(self._read_split128())

    def read_u8(self) -> int:
        return layout.unpack_u8(self.source.read_exact(1))

    def read_u16(self) -> int:
        return self._read_unsigned(16)

    def read_u32(self) -> int:
        return self._read_unsigned(32)

    def read_u64(self) -> int:
        return decode_varint(self.source)

    def read_u128(self) -> int:
        return self._read_split128()

    def read_f32(self) -> float:
        return layout.unpack_f32(self.source.read_exact(4))

    def read_f64(self) -> float:
        return layout.unpack_f64(self.source.read_exact(8))

    def read_char(self) -> str:
        codepoint = layout.unpack_codepoint(self.source.read_exact(layout.CHAR_WIDTH))
        if not layout.is_scalar_value(codepoint):
            raise InvalidValueError(f"char: {codepoint:#x} is not a Unicode scalar value")
        return chr(codepoint)

    def read_str(self) -> str:
        raw = self.source.read_exact(self._read_length("str"))
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidValueError(f"str: invalid UTF-8 sequence: {e}") from e

    def read_bytes(self) -> bytes:
        return self.source.read_exact(self._read_length("bytes"))

    def read_option(self) -> bool:
        """Read an option tag; True means a value follows."""
        tag = self.source.read_byte()
        if tag == 0:
            return False
        if tag == 1:
            return True
        raise InvalidValueError(f"option: invalid tag {tag}, expected None (0) or Some (1)")

    def read_unit(self) -> None:
        return None

    # Compounds

    def read_seq(self) -> SeqAccess:
        return SeqAccess(self, self._read_length("seq"))

    def read_map(self) -> MapAccess:
        return MapAccess(self, self._read_length("map"))

    def read_tuple(self, arity: int) -> SeqAccess:
        return SeqAccess(self, arity)

    def read_struct(self, field_count: int) -> SeqAccess:
        return SeqAccess(self, field_count)

    def read_variant(self) -> int:
        """Read a variant index; checking it against the union is the caller's job."""
        return decode_varint(self.source)

    # Requests this format cannot satisfy

    def read_any(self) -> NoReturn:
        raise UnsupportedOperationError("read_any is unsupported: the format carries no type tags")

    def read_identifier(self) -> NoReturn:
        raise UnsupportedOperationError(
            "read_identifier is unsupported: field identity is positional"
        )

    def read_ignored(self) -> NoReturn:
        raise UnsupportedOperationError(
            "read_ignored is unsupported: skipping requires knowing the shape"
        )
