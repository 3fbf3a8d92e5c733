"""tightpack: compact binary encoding for typed Python values

A Python library for a dense, schema-less binary format. Values are laid out
in declaration order with no field names, no type tags and no framing;
integers and lengths use a prefix varint whose first byte announces its own
length. Both sides must share the same type definitions.

Key Features:
- Pydantic-based message modeling
- Sized integer types (U8..U128, I8..I128) with zigzag varints for signed values
- Sequences, maps, tuples, options and tagged unions, composed recursively
- Explicit Writer/Reader engines for hand-written encoders
- Strict decoding: truncation, bad values and trailing bytes are all errors

Quick Start:
    >>> from tightpack import BaseMessage, U8, U16, decode, encode
    >>>
    >>> class StatusReport(BaseMessage):
    ...     vehicle_id: U8
    ...     depth_cm: U16
    ...     active: bool
    >>>
    >>> msg = StatusReport(vehicle_id=42, depth_cm=1500, active=True)
    >>> data = encode(msg)
    >>> decoded = decode(StatusReport, data)
"""

from __future__ import annotations

from .codec import (
    ByteSink,
    ByteSource,
    Compound,
    Decodable,
    Encodable,
    MapAccess,
    Reader,
    SeqAccess,
    VariantTable,
    Writer,
    decode,
    decode_from,
    decode_varint,
    decode_varint128,
    encode,
    encode_to,
    encode_varint,
    encode_varint128,
    unzigzag,
    zigzag,
)
from .exceptions import (
    CustomError,
    DecodeError,
    EncodeError,
    InvalidValueError,
    LengthRequiredError,
    SchemaError,
    StreamError,
    TightpackError,
    TrailingDataError,
    TruncatedInputError,
    UnsupportedOperationError,
)
from .models import (
    F32,
    F64,
    I8,
    I16,
    I32,
    I64,
    I128,
    U8,
    U16,
    U32,
    U64,
    U128,
    BaseMessage,
    Char,
    tagged_union,
)
from .utils import encoded_size, field_sizes, varint_size

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseMessage",
    "encode",
    "encode_to",
    "decode",
    "decode_from",
    # Field types
    "U8",
    "U16",
    "U32",
    "U64",
    "U128",
    "I8",
    "I16",
    "I32",
    "I64",
    "I128",
    "F32",
    "F64",
    "Char",
    "tagged_union",
    "VariantTable",
    # Engines
    "Writer",
    "Compound",
    "Reader",
    "SeqAccess",
    "MapAccess",
    "ByteSink",
    "ByteSource",
    "Encodable",
    "Decodable",
    # Varint / zigzag
    "encode_varint",
    "decode_varint",
    "encode_varint128",
    "decode_varint128",
    "zigzag",
    "unzigzag",
    # Exceptions
    "TightpackError",
    "SchemaError",
    "EncodeError",
    "LengthRequiredError",
    "DecodeError",
    "TruncatedInputError",
    "InvalidValueError",
    "UnsupportedOperationError",
    "TrailingDataError",
    "StreamError",
    "CustomError",
    # Sizing
    "encoded_size",
    "field_sizes",
    "varint_size",
    # Version
    "__version__",
]
