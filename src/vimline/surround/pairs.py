"""Bidirectional open/close delimiter mapping."""

from __future__ import annotations

from typing import Dict, Iterable, Optional

DEFAULT_DELIMITERS: tuple[tuple[str, str], ...] = (
    ("(", ")"),
    ("[", "]"),
    ("{", "}"),
    ("<", ">"),
    ("'", "'"),
    ('"', '"'),
    ("`", "`"),
    (" ", " "),
)

# Characters tried, in order, when looking for the structure around the cursor.
MOVE_AROUND_OPENERS: tuple[str, ...] = ("'", '"', "`", "(", "[", "{", "<")


class SurroundPairs:
    """Maps any delimiter to its ``(open, close)`` pair.

    Quote-like delimiters pair with themselves. Unknown characters are
    treated as self-paired, so ``cs"*`` wraps the body in asterisks.
    """

    def __init__(self, pairs: Iterable[tuple[str, str]] = DEFAULT_DELIMITERS) -> None:
        self._open_to_close: Dict[str, str] = {}
        self._close_to_open: Dict[str, str] = {}
        for open_char, close_char in pairs:
            self.add(open_char, close_char)

    def add(self, open_char: str, close_char: str) -> None:
        if len(open_char) != 1 or len(close_char) != 1:
            raise ValueError("delimiters must be single characters")
        self._open_to_close[open_char] = close_char
        self._close_to_open[close_char] = open_char

    def pair(self, delimiter: str) -> tuple[str, str]:
        if delimiter in self._open_to_close:
            return delimiter, self._open_to_close[delimiter]
        if delimiter in self._close_to_open:
            return self._close_to_open[delimiter], delimiter
        return delimiter, delimiter

    def counterpart(self, delimiter: str) -> Optional[str]:
        if delimiter in self._open_to_close:
            return self._open_to_close[delimiter]
        return self._close_to_open.get(delimiter)

    def is_delimiter(self, char: str) -> bool:
        return char in self._open_to_close or char in self._close_to_open

    def is_self_paired(self, delimiter: str) -> bool:
        open_char, close_char = self.pair(delimiter)
        return open_char == close_char


DEFAULT_PAIRS = SurroundPairs()


__all__ = ["DEFAULT_DELIMITERS", "DEFAULT_PAIRS", "MOVE_AROUND_OPENERS", "SurroundPairs"]
