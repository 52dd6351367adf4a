"""Cursor and mark offsets tracked for a line buffer."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class BufferState:
    """Mutable cursor + mark offsets tied to a LineBuffer revision.

    Both offsets index into the flat buffer text. ``mark`` is only
    meaningful while a Visual selection or pending range is active.
    """

    cursor: int = 0
    mark: int = 0

    def set_cursor(self, offset: int) -> None:
        self.cursor = offset

    def set_mark(self, offset: int) -> None:
        self.mark = offset

    def span(self) -> tuple[int, int]:
        """Return ``(begin, end)`` between mark and cursor, normalized forward."""

        if self.mark > self.cursor:
            return self.cursor, self.mark
        return self.mark, self.cursor
