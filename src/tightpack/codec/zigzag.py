"""Zigzag mapping between signed and unsigned integers.

Small magnitudes map to small unsigned values regardless of sign
(0 -> 0, -1 -> 1, 1 -> 2, -2 -> 3, ...), which keeps them short once
varint encoded.
"""

from __future__ import annotations


def signed_bounds(bits: int) -> tuple[int, int]:
    """Return the inclusive (min, max) range of a signed integer of ``bits`` width."""
    return -(1 << (bits - 1)), (1 << (bits - 1)) - 1


def zigzag(value: int, bits: int) -> int:
    """Map a signed integer onto the unsigned integer of the same width.

    Args:
        value: Signed integer
        bits: Width of the signed type (16, 32, 64 or 128)

    Returns:
        Unsigned integer in [0, 2**bits - 1]

    Raises:
        ValueError: If value does not fit a signed integer of ``bits`` width
    """
    lo, hi = signed_bounds(bits)
    if value < lo or value > hi:
        raise ValueError(f"Value {value} doesn't fit in i{bits} (range: {lo} to {hi})")

    if value >= 0:
        return value << 1
    return ((-value - 1) << 1) | 1


def unzigzag(value: int) -> int:
    """Inverse of :func:`zigzag`."""
    if value & 1:
        return -(value >> 1) - 1
    return value >> 1
