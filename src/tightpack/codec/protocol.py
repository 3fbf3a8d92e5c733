"""Traversal interfaces connecting Python types to the engines.

An Encodable value drives a Writer through an ordered sequence of emit calls;
a Decodable type issues the matching shape requests to a Reader and rebuilds
itself. Field identity is positional, so both sides must agree on the order.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TypeVar, runtime_checkable

if TYPE_CHECKING:
    from .reader import Reader
    from .writer import Writer

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class Encodable(Protocol):
    """A value that knows how to emit itself to a Writer."""

    def tightpack_encode(self, writer: Writer) -> None: ...


@runtime_checkable
class Decodable(Protocol[T_co]):
    """A type that knows how to rebuild an instance from a Reader.

    Implemented as a classmethod on the decoded type.
    """

    def tightpack_decode(self, reader: Reader) -> T_co: ...


def is_encodable(obj: object) -> bool:
    return callable(getattr(obj, "tightpack_encode", None))


def is_decodable(tp: object) -> bool:
    return callable(getattr(tp, "tightpack_decode", None))
