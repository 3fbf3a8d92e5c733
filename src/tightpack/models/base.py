"""Base message class and tightpack-specific Pydantic configuration.

This module provides the BaseMessage class that tightpack messages should inherit from.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

from pydantic import BaseModel, ConfigDict

from ..codec.schema import struct_spec

if TYPE_CHECKING:
    from typing_extensions import Self

    from ..codec.reader import Reader
    from ..codec.writer import Writer


class BaseMessage(BaseModel):
    """Base class for all tightpack messages.

    Fields are encoded positionally in declaration order; field names never
    reach the wire. Integer fields need a width (``U8``..``U128``,
    ``I8``..``I128``) so the codec knows how to lay them out.

    tightpack-specific options can be configured as ClassVar attributes:

    Example:
        >>> from typing import ClassVar, Optional
        >>> class StatusReport(BaseMessage):
        ...     vehicle_id: U8
        ...     depth_cm: U16
        ...     battery_pct: U8
        ...
        ...     tightpack_max_bytes: ClassVar[Optional[int]] = 16

    Attributes:
        tightpack_max_bytes: Maximum encoded size in bytes (optional, checked on encode)
    """

    model_config = ConfigDict(
        strict=False,
        arbitrary_types_allowed=True,
        validate_assignment=True,
        extra="forbid",
    )

    tightpack_max_bytes: ClassVar[int | None] = None

    def tightpack_encode(self, writer: Writer) -> None:
        """Emit this message's fields, in declaration order, to ``writer``."""
        struct_spec(type(self)).write(writer, self)

    @classmethod
    def tightpack_decode(cls, reader: Reader) -> Self:
        """Read one message of this class from ``reader``."""
        return struct_spec(cls).read(reader)
