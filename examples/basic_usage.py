#!/usr/bin/env python3
"""Basic usage example for tightpack.

This example demonstrates:
1. Defining a message with Pydantic and sized field types
2. Encoding to compact binary format
3. Decoding back to a Pydantic model
4. Calculating per-field sizes
5. Driving the Writer/Reader engines by hand
"""

from __future__ import annotations

import io
from typing import Optional

from pydantic import Field

from tightpack import (
    I16,
    U8,
    U16,
    BaseMessage,
    ByteSink,
    ByteSource,
    Reader,
    Writer,
    decode,
    encode,
    field_sizes,
    tagged_union,
)


class Waypoint(BaseMessage):
    """Navigation waypoint."""

    name: str
    depth_cm: U16


class Surface(BaseMessage):
    """Surface and wait for pickup."""

    beacon: bool


Command = tagged_union(Waypoint, Surface, None)


class StatusReport(BaseMessage):
    """Vehicle status report.

    Integer fields declare a width; small values still take only one byte.
    """

    vehicle_id: U8 = Field(description="Vehicle ID (0-255)")
    depth_cm: U16 = Field(le=10000, description="Depth in centimeters (0-100m)")
    battery_pct: U8 = Field(le=100, description="Battery percentage (0-100)")
    heading_deg: I16 = Field(ge=-180, le=180, description="Heading in degrees")
    active: bool = Field(description="Vehicle active flag")
    note: Optional[str] = None
    next_command: Command = None


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("tightpack Basic Usage Example")
    print("=" * 60)
    print()

    # Create a message instance
    print("1. Creating a status report message...")
    msg = StatusReport(
        vehicle_id=42,
        depth_cm=2500,
        battery_pct=87,
        heading_deg=-45,
        active=True,
        next_command=Waypoint(name="wp1", depth_cm=500),
    )
    print(f"   {msg!r}")
    print()

    # Analyze field sizes
    print("2. Analyzing field sizes...")
    sizes = field_sizes(msg)
    for field_name, nbytes in sizes.items():
        print(f"   {field_name}: {nbytes} bytes")
    print(f"   Total: {sum(sizes.values())} bytes")
    print()

    # Encode the message
    print("3. Encoding to compact binary format...")
    encoded_data = encode(msg)
    print(f"   Encoded size: {len(encoded_data)} bytes")
    print(f"   Hex: {encoded_data.hex(' ')}")
    print()

    # Decode the message
    print("4. Decoding from binary...")
    decoded_msg = decode(StatusReport, encoded_data)
    if decoded_msg == msg:
        print("   ✓ Round-trip successful! Messages match.")
    else:
        print("   ✗ Round-trip failed! Messages don't match.")
    print()

    # Compare to naive encoding
    print("5. Comparing to naive JSON encoding...")
    json_bytes = msg.model_dump_json().encode("utf-8")
    print(f"   tightpack size: {len(encoded_data)} bytes")
    print(f"   JSON size: {len(json_bytes)} bytes")
    print(f"   Compression ratio: {len(json_bytes) / len(encoded_data):.1f}x")
    print()

    # Use the engines directly
    print("6. Writing and reading by hand...")
    buf = io.BytesIO()
    writer = Writer(ByteSink(buf))
    writer.emit_u8(1)
    writer.emit_u16(1024)
    writer.emit_u8(2)
    writer.end()
    print(f"   (1, 1024, 2) -> {buf.getvalue().hex(' ')}")

    reader = Reader(ByteSource(buf.getvalue()))
    values = (reader.read_u8(), reader.read_u16(), reader.read_u8())
    reader.end()
    print(f"   {buf.getvalue().hex(' ')} -> {values}")
    print()

    print("=" * 60)
    print("Example complete!")
    print("=" * 60)


if __name__ == "__main__":
    main()
