"""Field type helpers and utilities.

This module provides the sized type aliases used to declare message fields
and the tagged_union() helper for sum types. Every alias carries Pydantic
range constraints, so out-of-range values are rejected when a message is
built, and a Primitive marker that tells the codec which wire layout to use.
"""

from __future__ import annotations

from typing import Annotated, Any, Union

from pydantic import Field

from ..codec.schema import Primitive, VariantTable

# Unsigned integers: u8 is one raw byte, the rest are varints
U8 = Annotated[int, Field(ge=0, le=(1 << 8) - 1), Primitive.U8]
U16 = Annotated[int, Field(ge=0, le=(1 << 16) - 1), Primitive.U16]
U32 = Annotated[int, Field(ge=0, le=(1 << 32) - 1), Primitive.U32]
U64 = Annotated[int, Field(ge=0, le=(1 << 64) - 1), Primitive.U64]
U128 = Annotated[int, Field(ge=0, le=(1 << 128) - 1), Primitive.U128]

# Signed integers: i8 is one raw byte, the rest are zigzag varints
I8 = Annotated[int, Field(ge=-(1 << 7), le=(1 << 7) - 1), Primitive.I8]
I16 = Annotated[int, Field(ge=-(1 << 15), le=(1 << 15) - 1), Primitive.I16]
I32 = Annotated[int, Field(ge=-(1 << 31), le=(1 << 31) - 1), Primitive.I32]
I64 = Annotated[int, Field(ge=-(1 << 63), le=(1 << 63) - 1), Primitive.I64]
I128 = Annotated[int, Field(ge=-(1 << 127), le=(1 << 127) - 1), Primitive.I128]

F32 = Annotated[float, Primitive.F32]
F64 = Annotated[float, Primitive.F64]

Char = Annotated[str, Field(min_length=1, max_length=1), Primitive.CHAR]


def tagged_union(*variants: Any) -> Any:
    """Build a tagged-union annotation with an explicit variant table.

    The position of each variant is its index on the wire, so appending new
    variants keeps existing indices stable while reordering does not.

    Args:
        *variants: Variant types in index order. Pydantic models carry struct
            payloads, ``None`` is a unit variant, any other supported type is
            a single-value payload.

    Returns:
        ``Annotated[Union[...], VariantTable(...)]`` usable as a field type or as
        the ``tp`` argument of encode()/decode()

    Example:
        >>> class Circle(BaseMessage):
        ...     radius: F32
        >>> class Square(BaseMessage):
        ...     side: F32
        >>> Shape = tagged_union(Circle, Square)
        >>> class Drawing(BaseMessage):
        ...     shapes: list[Shape]
    """
    table = VariantTable(*variants)
    return Annotated[Union[table.variants], table]
