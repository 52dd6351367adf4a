"""Line boundary helpers for a flat buffer that may contain newlines."""

from __future__ import annotations


def line_bounds(text: str, cursor: int) -> tuple[int, int]:
    """Return ``(start, end)`` of the line holding ``cursor``.

    ``start`` is one past the last newline before the cursor (or 0). ``end``
    is one past the first newline at or after the cursor (or the length), so
    the terminating newline belongs to the line.
    """

    newline = text.rfind("\n", 0, max(cursor, 0))
    start = newline + 1 if newline != -1 else 0
    newline = text.find("\n", max(cursor, 0))
    end = newline + 1 if newline != -1 else len(text)
    return start, end


def line_content_bounds(text: str, cursor: int) -> tuple[int, int]:
    """Like ``line_bounds`` but without the terminating newline."""

    start, end = line_bounds(text, cursor)
    if end > start and text[end - 1 : end] == "\n":
        end -= 1
    return start, end


def whole_line_delete_bounds(text: str, cursor: int) -> tuple[int, int]:
    """Span removed by ``dd``: the line plus exactly one adjacent newline."""

    start, end = line_bounds(text, cursor)
    if start > 0:
        start -= 1
        if end < len(text):
            end -= 1
    return start, end


def line_change_bounds(text: str, cursor: int) -> tuple[int, int]:
    """Span removed by ``cc``: the line content, keeping its newline."""

    start, end = line_bounds(text, cursor)
    if end < len(text):
        end -= 1
    return start, end


def normal_cursor(text: str, cursor: int) -> int:
    """Nearest offset a Normal-mode cursor may rest on.

    The cursor sits on a character: never past the last one, and never on a
    line's newline unless the line is empty.
    """

    offset = max(0, min(cursor, len(text) - 1))
    if text[offset : offset + 1] == "\n" and offset > 0 and text[offset - 1] != "\n":
        offset -= 1
    return offset


__all__ = [
    "normal_cursor",
    "line_bounds",
    "line_content_bounds",
    "line_change_bounds",
    "whole_line_delete_bounds",
]
