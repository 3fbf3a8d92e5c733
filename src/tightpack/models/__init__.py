"""Pydantic message modeling for tightpack.

This module provides the BaseMessage class and the sized field types for
defining compact binary messages using Pydantic.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import (
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
    Char,
    tagged_union,
)

__all__ = [
    "BaseMessage",
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
]
