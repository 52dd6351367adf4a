"""Pure vi cursor motions over a flat line buffer.

Every function takes the buffer text and a cursor offset and returns the new
offset (or a ``(begin, end)`` span for the word selections). Find motions
return -1 when the target character is not on the current line.
"""

from __future__ import annotations

from vimline.buffer.lines import line_bounds, line_content_bounds

SPACE, WORD, PUNCT = 0, 1, 2


def char_class(char: str) -> int:
    if char.isspace():
        return SPACE
    if char.isalnum() or char == "_":
        return WORD
    return PUNCT


def backward_char(text: str, index: int) -> int:
    start, _ = line_bounds(text, index)
    return max(index - 1, start)


def forward_char(text: str, index: int) -> int:
    _, end = line_content_bounds(text, index)
    return min(index + 1, end)


def beginning_of_line(text: str, index: int) -> int:
    return line_bounds(text, index)[0]


def end_of_line(text: str, index: int) -> int:
    """Offset just past the last character of the line."""

    return line_content_bounds(text, index)[1]


def vi_end_of_line(text: str, index: int) -> int:
    """Offset of the last character of the line (``$``)."""

    start, end = line_content_bounds(text, index)
    return max(end - 1, start)


def first_non_blank(text: str, index: int) -> int:
    start, end = line_content_bounds(text, index)
    offset = start
    while offset < end and text[offset] in " \t":
        offset += 1
    return offset


def up_line(text: str, index: int) -> int:
    """Same column on the previous line; unchanged on the first line."""

    start, _ = line_bounds(text, index)
    if start == 0:
        return index
    column = index - start
    prev_start, prev_end = line_content_bounds(text, start - 1)
    return min(prev_start + column, prev_end)


def down_line(text: str, index: int) -> int:
    """Same column on the next line; unchanged on the last line."""

    start, end = line_bounds(text, index)
    if text[end - 1 : end] != "\n":
        return index
    column = index - start
    next_start, next_end = line_content_bounds(text, end)
    return min(next_start + column, next_end)


def forward_word(text: str, index: int) -> int:
    """Start of the next word (``w``)."""

    length = len(text)
    if index >= length:
        return length
    kind = char_class(text[index])
    if kind != SPACE:
        while index < length and char_class(text[index]) == kind:
            index += 1
    while index < length and char_class(text[index]) == SPACE:
        index += 1
    return index


def forward_word_end(text: str, index: int) -> int:
    """Last character of the current or next word (``e``)."""

    length = len(text)
    index += 1
    while index < length and char_class(text[index]) == SPACE:
        index += 1
    if index >= length:
        return max(length - 1, 0)
    kind = char_class(text[index])
    while index + 1 < length and char_class(text[index + 1]) == kind:
        index += 1
    return index


def backward_word(text: str, index: int) -> int:
    """Start of the current or previous word (``b``)."""

    index = min(index, len(text)) - 1
    while index > 0 and char_class(text[index]) == SPACE:
        index -= 1
    if index <= 0:
        return 0
    kind = char_class(text[index])
    while index > 0 and char_class(text[index - 1]) == kind:
        index -= 1
    return index


def is_word_end(text: str, index: int) -> bool:
    if index >= len(text) or char_class(text[index]) == SPACE:
        return False
    if index + 1 >= len(text):
        return True
    return char_class(text[index + 1]) != char_class(text[index])


def find_next_char(text: str, index: int, char: str) -> int:
    _, end = line_content_bounds(text, index)
    return text.find(char, index + 1, end)


def find_prev_char(text: str, index: int, char: str) -> int:
    start, _ = line_bounds(text, index)
    if index <= start:
        return -1
    return text.rfind(char, start, index)


def find_next_char_skip(text: str, index: int, char: str) -> int:
    found = find_next_char(text, index, char)
    return found - 1 if found > 0 else found


def find_prev_char_skip(text: str, index: int, char: str) -> int:
    found = find_prev_char(text, index, char)
    return found + 1 if found >= 0 else found


def select_in_word(text: str, index: int) -> tuple[int, int]:
    """Half-open span of the run of same-class characters under ``index``."""

    if not text:
        return 0, 0
    index = min(index, len(text) - 1)
    kind = char_class(text[index])
    begin = index
    while begin > 0 and char_class(text[begin - 1]) == kind and text[begin - 1] != "\n":
        begin -= 1
    end = index + 1
    while end < len(text) and char_class(text[end]) == kind and text[end] != "\n":
        end += 1
    return begin, end


def select_a_word(text: str, index: int) -> tuple[int, int]:
    """Word plus its trailing blanks, or leading blanks when none trail."""

    begin, end = select_in_word(text, index)
    if begin == end:
        return begin, end
    if char_class(text[begin]) == SPACE:
        return begin, select_in_word(text, end)[1] if end < len(text) else end
    trailing = end
    while trailing < len(text) and text[trailing] in " \t":
        trailing += 1
    if trailing > end:
        return begin, trailing
    leading = begin
    while leading > 0 and text[leading - 1] in " \t":
        leading -= 1
    return leading, end


__all__ = [
    "backward_char",
    "backward_word",
    "beginning_of_line",
    "char_class",
    "down_line",
    "end_of_line",
    "find_next_char",
    "find_next_char_skip",
    "find_prev_char",
    "find_prev_char_skip",
    "first_non_blank",
    "forward_char",
    "forward_word",
    "forward_word_end",
    "is_word_end",
    "select_a_word",
    "select_in_word",
    "up_line",
    "vi_end_of_line",
]
