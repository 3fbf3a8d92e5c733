"""Unit tests for the zigzag mapping."""

from __future__ import annotations

import pytest

from tightpack import unzigzag, zigzag
from tightpack.codec.zigzag import signed_bounds


class TestZigzag:
    """Test signed/unsigned mapping."""

    def test_small_values(self) -> None:
        """Small magnitudes map to small unsigned values."""
        assert zigzag(0, 64) == 0
        assert zigzag(-1, 64) == 1
        assert zigzag(1, 64) == 2
        assert zigzag(-2, 64) == 3
        assert zigzag(2, 64) == 4

    @pytest.mark.parametrize("bits", [16, 32, 64, 128])
    def test_extremes(self, bits: int) -> None:
        """The signed range maps onto the full unsigned range of the width."""
        lo, hi = signed_bounds(bits)
        assert zigzag(hi, bits) == (1 << bits) - 2
        assert zigzag(lo, bits) == (1 << bits) - 1

    @pytest.mark.parametrize("bits", [16, 32, 64, 128])
    def test_inverse(self, bits: int) -> None:
        """unzigzag undoes zigzag at the edges of every width."""
        lo, hi = signed_bounds(bits)
        for value in (lo, lo + 1, -1, 0, 1, hi - 1, hi):
            assert unzigzag(zigzag(value, bits)) == value

    def test_out_of_range(self) -> None:
        """Values outside the signed width are rejected."""
        with pytest.raises(ValueError, match="doesn't fit"):
            zigzag(1 << 15, 16)
        with pytest.raises(ValueError, match="doesn't fit"):
            zigzag(-(1 << 15) - 1, 16)
