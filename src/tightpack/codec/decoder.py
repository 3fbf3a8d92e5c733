"""Compact binary decoder.

This module provides the decode() and decode_from() entry points that
rebuild a typed value from the tightpack wire format.
"""

from __future__ import annotations

import logging
from typing import Any, BinaryIO, TypeVar, overload

from .reader import Reader
from .schema import resolve_type
from .stream import ByteSource, BytesLike

logger = logging.getLogger(__name__)

T = TypeVar("T")


@overload
def decode_from(tp: type[T], source: BinaryIO, *, max_length: int | None = None) -> T: ...


@overload
def decode_from(tp: Any, source: BinaryIO, *, max_length: int | None = None) -> Any: ...


def decode_from(tp: Any, source: BinaryIO, *, max_length: int | None = None) -> Any:
    """Decode one value of type ``tp`` from a binary file-like object.

    The source must hold nothing after the value: a trailing byte fails the
    call even if the value itself decoded cleanly.

    Args:
        tp: Type annotation of the expected value
        source: Object with ``read(n)``
        max_length: Optional bound on declared string/bytes/sequence/map lengths

    Returns:
        The decoded value

    Raises:
        SchemaError: If ``tp`` cannot be mapped onto the wire format
        TruncatedInputError: If the source ends early
        InvalidValueError: If a decoded value violates its type's domain
        TrailingDataError: If bytes remain after the value
        CustomError: If the decoded fields fail model validation
    """
    return _decode(tp, ByteSource(source), max_length)


@overload
def decode(tp: type[T], data: BytesLike, *, max_length: int | None = None) -> T: ...


@overload
def decode(tp: Any, data: BytesLike, *, max_length: int | None = None) -> Any: ...


def decode(tp: Any, data: BytesLike, *, max_length: int | None = None) -> Any:
    """Decode compact binary data to a value of type ``tp``.

    Args:
        tp: Type annotation or message class to decode to
        data: Binary data holding exactly one encoded value
        max_length: Optional bound on declared string/bytes/sequence/map lengths

    Returns:
        Decoded value

    Raises:
        DecodeError: If data is truncated, malformed or has trailing bytes

    Examples:
        ```python
        from tightpack import U8, U16, decode

        decode(tuple[U8, U16, U8], b"\\x01\\x84\\x00\\x02")  # (1, 1024, 2)
        decode(Status, data)
        ```
    """
    return _decode(tp, ByteSource(data), max_length)


def _decode(tp: Any, source: ByteSource, max_length: int | None) -> Any:
    spec = resolve_type(tp)
    reader = Reader(source, max_length=max_length)

    value = spec.read(reader)
    reader.end()

    logger.debug("decoded %s from %d bytes", spec.describe(), source.position())
    return value
