"""Unit tests for size calculation utilities."""

from __future__ import annotations

import pytest

from tightpack import (
    U8,
    U16,
    BaseMessage,
    SchemaError,
    encode,
    encoded_size,
    field_sizes,
    varint_size,
)


class Status(BaseMessage):
    """Simple status report."""

    vehicle_id: U8
    depth_cm: U16
    callsign: str


class TestEncodedSize:
    """Test encoded_size."""

    def test_matches_encode(self) -> None:
        """The computed size equals the length of the encoding."""
        msg = Status(vehicle_id=1, depth_cm=1500, callsign="alpha")
        assert encoded_size(msg) == len(encode(msg)) == 1 + 2 + 6

    def test_with_annotation(self) -> None:
        """Annotated values are sized like encode() would size them."""
        assert encoded_size((1, 1024, 2), tuple[U8, U16, U8]) == 4
        assert encoded_size([1] * 200, list[U8]) == 2 + 200

    def test_value_dependent(self) -> None:
        """Varint fields grow with their value."""
        small = Status(vehicle_id=1, depth_cm=1, callsign="")
        large = Status(vehicle_id=1, depth_cm=60000, callsign="")
        assert encoded_size(large) - encoded_size(small) == 2

    def test_requires_width(self) -> None:
        """Bare ints cannot be sized."""
        with pytest.raises(SchemaError):
            encoded_size(5)


class TestFieldSizes:
    """Test field_sizes."""

    def test_per_field(self) -> None:
        """Each field reports its own encoded size."""
        msg = Status(vehicle_id=42, depth_cm=1500, callsign="abc")
        sizes = field_sizes(msg)

        assert sizes == {"vehicle_id": 1, "depth_cm": 2, "callsign": 4}
        assert sum(sizes.values()) == encoded_size(msg)

    def test_needs_message(self) -> None:
        """Non-message values are rejected."""
        with pytest.raises(SchemaError):
            field_sizes("abc")  # type: ignore[arg-type]


class TestVarintSize:
    """Test the varint_size re-export."""

    @pytest.mark.parametrize(
        ("value", "size"), [(0, 1), (127, 1), (128, 2), (16384, 3), (2**56, 9)]
    )
    def test_sizes(self, value: int, size: int) -> None:
        """Sizes follow the prefix-length buckets."""
        assert varint_size(value) == size
