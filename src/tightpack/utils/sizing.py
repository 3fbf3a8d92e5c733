"""Message size calculation utilities.

This module provides functions to calculate the encoded size of values
without materialising the encoded bytes. Because lengths and most integers
are varints, sizes depend on the values themselves, not only on the schema.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel

from ..codec.encoder import infer_spec
from ..codec.schema import resolve_type, struct_spec
from ..codec.stream import CountingSink
from ..codec.varint import varint_size
from ..codec.writer import Writer
from ..exceptions import SchemaError

__all__ = ["encoded_size", "field_sizes", "varint_size"]


def encoded_size(value: Any, tp: Any = None) -> int:
    """Calculate the encoded size of a value in bytes.

    Args:
        value: Value to measure
        tp: Optional type annotation, as for encode()

    Returns:
        Size in bytes

    Raises:
        SchemaError: If the type cannot be mapped onto the wire format
        EncodeError: If the value does not fit its type

    Example:
        >>> encoded_size((1, 1024, 2), tuple[U8, U16, U8])
        4
    """
    sink = CountingSink()
    writer = Writer(sink)

    spec = resolve_type(tp) if tp is not None else infer_spec(value)
    if spec is None:
        writer.emit(value)
    else:
        spec.write(writer, value)
    return sink.bytes_written()


def field_sizes(message: BaseModel) -> dict[str, int]:
    """Get the encoded size in bytes of each field of a message instance.

    Args:
        message: Message instance to analyze

    Returns:
        Dictionary mapping field names to their size in bytes

    Example:
        >>> field_sizes(Status(vehicle_id=42, depth_cm=1500))
        {'vehicle_id': 1, 'depth_cm': 2}
    """
    if not isinstance(message, BaseModel):
        raise SchemaError(f"field_sizes needs a message instance, got {type(message).__name__}")

    sizes: dict[str, int] = {}
    for name, spec in struct_spec(type(message)).fields:
        sink = CountingSink()
        spec.write(Writer(sink), getattr(message, name))
        sizes[name] = sink.bytes_written()
    return sizes
