"""Balanced-delimiter search around the cursor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional

from .pairs import DEFAULT_PAIRS, MOVE_AROUND_OPENERS, SurroundPairs


@dataclass(frozen=True, slots=True)
class SurroundSpan:
    """Offsets of an open delimiter and its matching close delimiter."""

    begin: int
    end: int
    open: str
    close: str

    def inner(self) -> tuple[int, int]:
        return self.begin + 1, self.end

    def outer(self) -> tuple[int, int]:
        return self.begin, self.end + 1

    def scoped(self, scope: str) -> tuple[int, int]:
        return self.inner() if scope == "inner" else self.outer()


def substr_pos(text: str, needle: str, start: int, *, forward: bool = True) -> int:
    """First offset of ``needle`` scanning from ``start`` (inclusive), or -1."""

    if forward:
        return text.find(needle, max(start, 0))
    if start < 0:
        return -1
    return text.rfind(needle, 0, start + len(needle))


def search_surround(
    text: str,
    cursor: int,
    delimiter: str,
    *,
    pairs: SurroundPairs = DEFAULT_PAIRS,
) -> Optional[SurroundSpan]:
    """Find the delimiter pair enclosing ``cursor``.

    The open character is searched backward and the close character forward,
    both starting on the cursor. When both land on the same offset the cursor
    sits on a delimiter: the close is searched again from the next offset,
    and failing that backward from the previous one with the roles swapped.
    """

    open_char, close_char = pairs.pair(delimiter)
    begin = substr_pos(text, open_char, cursor, forward=False)
    end = substr_pos(text, close_char, cursor, forward=True)
    if begin == end and begin != -1:
        end = substr_pos(text, close_char, cursor + 1, forward=True)
        if end == -1:
            end = substr_pos(text, close_char, cursor - 1, forward=False)
            if end != -1:
                begin, end = end, begin
    if begin == -1 or end == -1:
        return None
    return SurroundSpan(begin=begin, end=end, open=open_char, close=close_char)


def move_around_target(
    text: str,
    cursor: int,
    *,
    pairs: SurroundPairs = DEFAULT_PAIRS,
    openers: Iterable[str] = MOVE_AROUND_OPENERS,
) -> Optional[int]:
    """Offset ``%`` jumps to: the other end of the nearest enclosing pair."""

    candidates = tuple(openers)
    for offset in range(min(cursor, len(text) - 1), -1, -1):
        found = next((char for char in candidates if text.startswith(char, offset)), None)
        if found is None:
            continue
        span = search_surround(text, cursor, found, pairs=pairs)
        if span is None:
            continue
        if span.begin <= cursor < span.begin + len(span.open):
            return span.end
        return span.begin
    return None


__all__ = ["SurroundSpan", "move_around_target", "search_surround", "substr_pos"]
