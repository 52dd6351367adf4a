import pytest

from vimline.buffer import (
    line_bounds,
    line_change_bounds,
    line_content_bounds,
    normal_cursor,
    whole_line_delete_bounds,
)
from vimline.host import motions


@pytest.mark.parametrize(
    ("text", "index", "expected"),
    [
        ("hello world", 0, 6),
        ("hello world", 6, 11),
        ("foo.bar", 0, 3),
        ("foo.bar", 3, 4),
        ("a   b", 1, 4),
        ("", 0, 0),
    ],
)
def test_forward_word(text: str, index: int, expected: int) -> None:
    assert motions.forward_word(text, index) == expected


def test_forward_word_end() -> None:
    assert motions.forward_word_end("one two", 0) == 2
    assert motions.forward_word_end("one two", 2) == 6
    assert motions.forward_word_end("one", 2) == 2


def test_backward_word() -> None:
    assert motions.backward_word("hello world", 8) == 6
    assert motions.backward_word("hello world", 6) == 0
    assert motions.backward_word("foo.bar", 4) == 3
    assert motions.backward_word("abc", 0) == 0


def test_line_motions() -> None:
    text = "  abc\ndef"

    assert motions.first_non_blank(text, 4) == 2
    assert motions.beginning_of_line(text, 8) == 6
    assert motions.end_of_line(text, 0) == 5
    assert motions.vi_end_of_line(text, 0) == 4
    assert motions.vi_end_of_line("ab\n\ncd", 3) == 3


def test_char_motions_stay_on_line() -> None:
    text = "ab\ncd"

    assert motions.forward_char(text, 1) == 2
    assert motions.forward_char(text, 2) == 2
    assert motions.backward_char(text, 3) == 3
    assert motions.backward_char(text, 4) == 3


def test_up_and_down_line_keep_column() -> None:
    text = "abc\nde\nfghi"

    assert motions.down_line(text, 2) == 6
    assert motions.down_line(text, 5) == 8
    assert motions.down_line(text, 9) == 9
    assert motions.up_line(text, 10) == 6
    assert motions.up_line(text, 1) == 1


def test_find_char_motions() -> None:
    text = "a,b,c\nx,y"

    assert motions.find_next_char(text, 0, ",") == 1
    assert motions.find_next_char(text, 3, ",") == -1
    assert motions.find_next_char(text, 0, "x") == -1
    assert motions.find_prev_char(text, 4, ",") == 3
    assert motions.find_prev_char(text, 7, ",") == -1
    assert motions.find_next_char_skip(text, 0, "b") == 1
    assert motions.find_prev_char_skip(text, 4, "a") == 1
    assert motions.find_prev_char_skip(text, 4, "z") == -1


def test_word_selections() -> None:
    assert motions.select_in_word("hello world", 7) == (6, 11)
    assert motions.select_in_word("hello world", 5) == (5, 6)
    assert motions.select_a_word("hello world", 1) == (0, 6)
    assert motions.select_a_word("hello world", 7) == (5, 11)
    assert motions.select_a_word("a  b", 1) == (1, 4)
    assert motions.select_in_word("", 0) == (0, 0)


def test_is_word_end() -> None:
    assert motions.is_word_end("ab cd", 1)
    assert not motions.is_word_end("ab cd", 0)
    assert not motions.is_word_end("ab cd", 2)
    assert motions.is_word_end("ab", 1)


def test_char_class() -> None:
    assert motions.char_class(" ") == motions.SPACE
    assert motions.char_class("_") == motions.WORD
    assert motions.char_class("(") == motions.PUNCT


@pytest.mark.parametrize(
    ("text", "cursor", "expected"),
    [
        ("abc", 3, 2),
        ("abc", 1, 1),
        ("ab\ncd", 2, 1),
        ("ab\n\ncd", 3, 3),
        ("", 0, 0),
        ("\n", 0, 0),
    ],
)
def test_normal_cursor(text: str, cursor: int, expected: int) -> None:
    assert normal_cursor(text, cursor) == expected


def test_line_bounds_helpers() -> None:
    text = "one\ntwo\nthree"

    assert line_bounds(text, 5) == (4, 8)
    assert line_content_bounds(text, 5) == (4, 7)
    assert whole_line_delete_bounds(text, 5) == (3, 7)
    assert whole_line_delete_bounds(text, 1) == (0, 4)
    assert whole_line_delete_bounds(text, 10) == (7, 13)
    assert line_change_bounds(text, 5) == (4, 7)
    assert line_change_bounds(text, 10) == (8, 13)
