"""Offset validation helpers shared across buffer services."""

from __future__ import annotations

from .sync import BufferValidationError


def ensure_offset(length: int, offset: int) -> int:
    if offset < 0 or offset > length:
        raise BufferValidationError(
            f"Offset {offset} outside buffer of length {length}", offset=offset
        )
    return offset


def ensure_range(length: int, begin: int, end: int) -> tuple[int, int]:
    ensure_offset(length, begin)
    ensure_offset(length, end)
    if begin > end:
        raise BufferValidationError(
            f"Range [{begin}, {end}) is reversed", offset=begin
        )
    return begin, end


def clamp_offset(length: int, offset: int) -> int:
    return max(0, min(offset, length))

