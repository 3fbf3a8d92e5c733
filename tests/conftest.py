"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import io
from typing import Callable

import pytest

from tightpack import ByteSink, ByteSource, Reader, Writer


@pytest.fixture
def buffer() -> io.BytesIO:
    """Empty in-memory binary stream."""
    return io.BytesIO()


@pytest.fixture
def writer(buffer: io.BytesIO) -> Writer:
    """Writer over the ``buffer`` fixture."""
    return Writer(ByteSink(buffer))


@pytest.fixture
def reader_for() -> Callable[[bytes], Reader]:
    """Factory building a Reader over a byte string."""

    def make(data: bytes, max_length: int | None = None) -> Reader:
        return Reader(ByteSource(data), max_length=max_length)

    return make
