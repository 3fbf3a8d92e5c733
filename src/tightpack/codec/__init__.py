"""Compact binary codec for tightpack.

This module provides the varint codec, the Writer/Reader engines and the
encode/decode entry points built on them.
"""

from __future__ import annotations

from .decoder import decode, decode_from
from .encoder import encode, encode_to
from .protocol import Decodable, Encodable
from .reader import MapAccess, Reader, SeqAccess
from .schema import Primitive, TypeSpec, VariantTable, resolve_type
from .stream import ByteSink, ByteSource
from .varint import (
    decode_varint,
    decode_varint128,
    encode_varint,
    encode_varint128,
    varint_size,
    varint_size128,
)
from .writer import Compound, Writer
from .zigzag import unzigzag, zigzag

__all__ = [
    "encode",
    "encode_to",
    "decode",
    "decode_from",
    "Encodable",
    "Decodable",
    "Writer",
    "Compound",
    "Reader",
    "SeqAccess",
    "MapAccess",
    "ByteSink",
    "ByteSource",
    "Primitive",
    "TypeSpec",
    "VariantTable",
    "resolve_type",
    "encode_varint",
    "decode_varint",
    "encode_varint128",
    "decode_varint128",
    "varint_size",
    "varint_size128",
    "zigzag",
    "unzigzag",
]
