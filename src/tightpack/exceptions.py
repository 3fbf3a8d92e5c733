"""Exception hierarchy for tightpack.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from TightpackError for easy catching of any tightpack-specific error.
"""

from __future__ import annotations


class TightpackError(Exception):
    """Base exception for all tightpack errors."""

    pass


class SchemaError(TightpackError):
    """Raised when a type cannot be mapped onto the wire format.

    Examples:
        - Plain ``int`` without a width annotation
        - Union without an explicit variant table
        - Unsupported annotation (e.g. ``typing.Any``)
    """

    pass


class EncodeError(TightpackError):
    """Raised when encoding a value fails.

    Examples:
        - Integer out of range for its declared width
        - Value type not present in a variant table
        - Compound element count differs from the declared count
        - Message exceeds tightpack_max_bytes
    """

    pass


class LengthRequiredError(EncodeError):
    """Raised when a sequence or map is started without a known element count.

    The format has no terminator byte, so dynamically sized compounds must
    announce their length up front.
    """

    pass


class DecodeError(TightpackError):
    """Base class for failures while decoding binary data."""

    pass


class TruncatedInputError(DecodeError):
    """Raised when the source ends before a field is complete."""

    pass


class InvalidValueError(DecodeError):
    """Raised when a decoded value violates a width or domain constraint.

    Examples:
        - u16/u32 varint larger than the target width
        - Boolean or option tag outside {0, 1}
        - Character that is not a Unicode scalar value
        - Non UTF-8 bytes where a string was expected
        - Unknown variant index
    """

    pass


class UnsupportedOperationError(DecodeError):
    """Raised for decode requests that need a self-describing format.

    The wire format carries no type tags, so asking the reader to discover
    a value's shape from content alone is a programming error.
    """

    pass


class TrailingDataError(DecodeError):
    """Raised when bytes remain after a complete top-level value."""

    pass


class StreamError(TightpackError):
    """Raised when the underlying sink or source reports an I/O failure."""

    pass


class CustomError(TightpackError):
    """Raised by type-level validation outside the wire format itself.

    Examples:
        - pydantic rejects the fields decoded for a message
        - A user ``tightpack_decode`` implementation reports bad data
    """

    @classmethod
    def custom(cls, msg: object) -> CustomError:
        """Build an error from any printable message."""
        return cls(str(msg))
