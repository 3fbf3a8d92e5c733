"""Compact binary encoder.

This module provides the encode() and encode_to() entry points that turn a
typed value into the tightpack wire format.
"""

from __future__ import annotations

import io
import logging
from typing import Any, BinaryIO

from pydantic import BaseModel

from ..exceptions import EncodeError, SchemaError
from .protocol import is_encodable
from .schema import NoneType, Primitive, PrimitiveSpec, TypeSpec, resolve_type, struct_spec
from .stream import ByteSink
from .writer import Writer

logger = logging.getLogger(__name__)

_INFERRED = {
    bool: Primitive.BOOL,
    float: Primitive.F64,
    str: Primitive.STR,
    bytes: Primitive.BYTES,
    bytearray: Primitive.BYTES,
    NoneType: Primitive.UNIT,
}


def infer_spec(value: Any) -> TypeSpec | None:
    """Pick a spec from the value's own type when no annotation is given.

    Returns None for Encodable values, which drive the Writer themselves.
    """
    if is_encodable(value) and not isinstance(value, type):
        return None

    kind = _INFERRED.get(type(value))
    if kind is not None:
        return PrimitiveSpec(kind)

    if isinstance(value, BaseModel):
        return struct_spec(type(value))

    raise SchemaError(
        f"Cannot infer a wire type for {type(value).__name__}; pass tp= "
        f"(e.g. encode(1024, U16) or encode([1, 2], list[U8]))"
    )


def _check_max_bytes(value: Any, size: int) -> None:
    max_bytes = getattr(type(value), "tightpack_max_bytes", None)
    if max_bytes is not None and size > max_bytes:
        raise EncodeError(
            f"Encoded message size ({size} bytes) exceeds tightpack_max_bytes={max_bytes}"
        )


def encode_to(sink: BinaryIO, value: Any, tp: Any = None) -> None:
    """Encode ``value`` into a binary file-like object and flush it.

    No framing is added: one call writes exactly the value's encoding.

    Args:
        sink: Object with ``write(bytes)`` (and optionally ``flush()``)
        value: Value to encode
        tp: Type annotation describing ``value``; inferred when omitted for
            bool, float, str, bytes, None, pydantic models and Encodable values

    Raises:
        SchemaError: If ``tp`` cannot be mapped onto the wire format
        EncodeError: If a value does not fit its declared type
        StreamError: If the sink fails
    """
    byte_sink = ByteSink(sink)
    writer = Writer(byte_sink)

    spec = resolve_type(tp) if tp is not None else infer_spec(value)
    if spec is None:
        writer.emit(value)
    else:
        spec.write(writer, value)

    _check_max_bytes(value, byte_sink.bytes_written())
    writer.end()

    logger.debug("encoded %s in %d bytes", type(value).__name__, byte_sink.bytes_written())


def encode(value: Any, tp: Any = None) -> bytes:
    """Encode a value to compact binary format.

    Fields are written in declaration order; fixed-width primitives are
    little-endian and every length, index and wide integer is a varint.

    Args:
        value: Value to encode
        tp: Optional type annotation (required for bare ints and containers)

    Returns:
        Compact binary representation

    Raises:
        SchemaError: If the type cannot be mapped onto the wire format
        EncodeError: If a value is invalid or out of bounds

    Examples:
        ```python
        from tightpack import BaseMessage, U8, U16, encode

        encode((1, 1024, 2), tuple[U8, U16, U8])   # b"\\x01\\x84\\x00\\x02"

        class Status(BaseMessage):
            vehicle_id: U8
            active: bool

        encode(Status(vehicle_id=42, active=True))  # b"\\x2a\\x01"
        ```
    """
    buf = io.BytesIO()
    encode_to(buf, value, tp)
    return buf.getvalue()
