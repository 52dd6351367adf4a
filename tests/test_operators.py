from __future__ import annotations

from typing import Any, List, Optional

import pytest

from vimline.buffer import BufferDelta, RegisterValue
from vimline.host import ScriptedKeySource
from vimline.host.driver import run_keys
from vimline.modes import ModeResult
from vimline.modes.mode_manager import ModeManager, create_default_manager


def make_normal(text: str, cursor: int, **kwargs: Any) -> ModeManager:
    manager = create_default_manager(text, cursor=cursor, **kwargs)
    press(manager, "^[")
    return manager


def press(manager: ModeManager, *script: Optional[str]) -> List[ModeResult]:
    return run_keys(manager, ScriptedKeySource(script))


def state(manager: ModeManager) -> tuple[str, int, str]:
    buffer = manager.context.buffer
    return buffer.text, buffer.cursor, manager.mode_state.name


def test_delete_word() -> None:
    manager = make_normal("hello world", 0)

    press(manager, "dw")

    assert state(manager) == ("world", 0, "normal")
    assert manager.context.register.text == "hello "
    assert manager.context.register.value.type == "character"


def test_change_word_then_type() -> None:
    manager = make_normal("one two three", 0)

    press(manager, "cw")
    assert state(manager) == (" two three", 0, "insert")
    press(manager, "1", "^[")

    assert state(manager) == ("1 two three", 1, "normal")
    assert manager.context.register.text == "one"


def test_change_word_on_last_character_of_word() -> None:
    manager = make_normal("ab cd", 1)

    press(manager, "cw")

    assert state(manager) == ("a cd", 1, "insert")


def test_change_word_on_blank_uses_plain_motion() -> None:
    manager = make_normal("ab  cd", 2)

    press(manager, "cw")

    assert state(manager) == ("abcd", 2, "insert")


@pytest.mark.parametrize(
    ("text", "cursor", "keys", "expected", "register"),
    [
        ("one two", 0, "de", " two", "one"),
        ("abc def", 4, "d$", "abc ", "def"),
        ("abc def", 4, "d0", "def", "abc "),
        ("abc def", 5, "db", "abc ef", "d"),
        ("  abc", 4, "d^", "  c", "ab"),
        ("abc", 1, "dl", "ac", "b"),
        ("abc", 1, "dh", "bc", "a"),
        ("hello world", 1, "daw", "world", "hello "),
        ("hello world", 7, "diw", "hello ", "world"),
    ],
)
def test_delete_motions(
    text: str, cursor: int, keys: str, expected: str, register: str
) -> None:
    manager = make_normal(text, cursor)

    press(manager, keys)

    assert manager.context.buffer.text == expected
    assert manager.context.register.text == register


def test_delete_to_end_of_line_keeps_newline() -> None:
    manager = make_normal("abc\ndef", 1)

    press(manager, "d$")

    assert manager.context.buffer.text == "a\ndef"
    assert manager.context.buffer.cursor == 0


def test_delete_down_line() -> None:
    manager = make_normal("ab\ncd", 0)

    press(manager, "dj")

    assert manager.context.buffer.text == "cd"


def test_yank_motion_moves_to_range_start() -> None:
    manager = make_normal("hello world", 6)

    press(manager, "yb")

    assert state(manager) == ("hello world", 0, "normal")
    assert manager.context.register.text == "hello "


def test_change_inner_word() -> None:
    manager = make_normal("hello world", 7)

    press(manager, "ciw", "there")

    assert state(manager) == ("hello there", 11, "insert")


def test_delete_line_middle() -> None:
    manager = make_normal("one\ntwo\nthree", 5)

    press(manager, "dd")

    assert state(manager) == ("one\nthree", 4, "normal")
    assert manager.context.register.value.text == "two"
    assert manager.context.register.value.type == "line"


def test_delete_first_line() -> None:
    manager = make_normal("one\ntwo", 1)

    press(manager, "dd")

    assert state(manager) == ("two", 0, "normal")
    assert manager.context.register.text == "one"


def test_delete_last_line() -> None:
    manager = make_normal("one\ntwo", 5)

    press(manager, "dd")

    assert state(manager) == ("one", 0, "normal")
    assert manager.context.register.text == "two"


def test_delete_only_line() -> None:
    manager = make_normal("abc", 1)

    press(manager, "dd")

    assert state(manager) == ("", 0, "normal")
    assert manager.context.register.text == "abc"


def test_delete_line_in_empty_buffer_is_noop() -> None:
    manager = make_normal("", 0)

    results = press(manager, "dd")

    assert results[-1].status == "noop"
    assert manager.context.buffer.text == ""


def test_delete_empty_middle_line() -> None:
    manager = make_normal("one\n\ntwo", 4)

    press(manager, "dd")

    assert manager.context.buffer.text == "one\ntwo"
    assert manager.context.register.text == ""
    assert manager.context.register.value.type == "line"


def test_change_line_keeps_newline() -> None:
    manager = make_normal("one\ntwo\nthree", 5)

    press(manager, "cc", "2")

    assert state(manager) == ("one\n2\nthree", 5, "insert")
    assert manager.context.register.value.text == "two"
    assert manager.context.register.value.type == "line"


def test_yank_line_then_put() -> None:
    manager = make_normal("one\ntwo\nthree", 5)

    press(manager, "yy")
    assert state(manager) == ("one\ntwo\nthree", 5, "normal")
    press(manager, "p")

    assert manager.context.buffer.text == "one\ntwo\ntwo\nthree"
    assert manager.context.buffer.cursor == 8


def test_put_character_register() -> None:
    manager = make_normal("abc", 0)

    press(manager, "x", "p")

    assert manager.context.buffer.text == "bac"
    press(manager, "P")
    assert manager.context.buffer.text == "baac"


def test_delete_find_char() -> None:
    manager = make_normal("a,b,c", 0)

    results = press(manager, "df")
    assert results[-1].status == "prompt"
    press(manager, ",")

    assert manager.context.buffer.text == "b,c"
    assert manager.context.register.text == "a,"


def test_delete_till_char() -> None:
    manager = make_normal("a,b,c", 0)

    press(manager, "dt,")

    assert manager.context.buffer.text == ",b,c"


def test_delete_find_prev_char_is_exclusive() -> None:
    manager = make_normal("a,b,c", 4)

    press(manager, "dF,")

    assert manager.context.buffer.text == "a,bc"
    assert manager.context.register.text == ","


def test_find_char_not_found_aborts() -> None:
    manager = make_normal("abc", 0)

    results = press(manager, "dfz")

    assert results[-1].status == "noop"
    assert manager.context.buffer.text == "abc"


def test_find_char_escape_cancels() -> None:
    manager = make_normal("abc", 0)

    results = press(manager, "df", "^[")

    assert results[-1].status == "cancelled"
    assert manager.context.buffer.text == "abc"
    assert manager.context.prompt is None


def test_unknown_motion_is_ignored() -> None:
    manager = make_normal("abc", 0)

    results = press(manager, "dz")

    assert results[-1].status == "noop"
    assert manager.context.buffer.text == "abc"
    assert manager.mode_state.name == "normal"


def test_operator_emits_event() -> None:
    manager = make_normal("hello world", 0)
    seen: list[object] = []
    manager.context.bus.subscribe("operator.delete", seen.append)

    press(manager, "dw")

    assert seen == [{"range": (0, 6), "text": "hello ", "type": "character"}]


LINES = "one\ntwo\nthree"
RANGE_TEXT = 'x (ab) "c"\nde'
RANGE_EVENTS = (
    "operator.yank",
    "operator.delete",
    "operator.change",
    "visual.yank",
    "visual.delete",
    "visual.change",
)


def record_ranges(manager: ModeManager) -> List[tuple[tuple[int, int], int]]:
    """Collect each operator range with the buffer length right after it ran."""

    seen: List[tuple[tuple[int, int], int]] = []
    buffer = manager.context.buffer
    for name in RANGE_EVENTS:
        manager.context.bus.subscribe(
            name, lambda payload: seen.append((payload["range"], buffer.length))
        )
    return seen


@pytest.mark.parametrize(
    ("keys", "expected_text", "expected_mode"),
    [
        ("yy", LINES, "normal"),
        ("dd", "one\nthree", "normal"),
        ("cc", "one\n\nthree", "insert"),
    ],
)
@pytest.mark.parametrize("cursor", [4, 5, 6])
def test_doubled_operators_ignore_column(
    keys: str, expected_text: str, expected_mode: str, cursor: int
) -> None:
    manager = make_normal(LINES, cursor)
    seen = record_ranges(manager)

    press(manager, keys)

    text, final_cursor, mode = state(manager)
    assert (text, mode) == (expected_text, expected_mode)
    assert final_cursor == (cursor if keys == "yy" else 4)
    assert [found for found, _ in seen] == [(4, 7)]
    assert manager.context.register.value.text == "two"
    assert manager.context.register.value.type == "line"


@pytest.mark.parametrize(
    "script",
    [
        ("dw",),
        ("de",),
        ("db",),
        ("d$",),
        ("d0",),
        ("d^",),
        ("dl",),
        ("dh",),
        ("dj",),
        ("dk",),
        ("cw",),
        ("ce",),
        ("yw",),
        ("y$",),
        ("diw",),
        ("daw",),
        ("di(",),
        ("da)",),
        ('yi"',),
        ('ca"',),
        ("yy",),
        ("dd",),
        ("cc",),
        ("df", "c"),
        ("dT", "x"),
    ],
)
def test_operator_ranges_stay_in_bounds(script: tuple[str, ...]) -> None:
    ranges: List[tuple[tuple[int, int], int]] = []
    for cursor in range(len(RANGE_TEXT)):
        manager = make_normal(RANGE_TEXT, cursor)
        seen = record_ranges(manager)

        press(manager, *script)

        buffer = manager.context.buffer
        for (begin, end), length_after in seen:
            assert 0 <= begin <= end <= len(RANGE_TEXT)
            assert begin <= length_after
        assert 0 <= buffer.cursor <= buffer.length
        assert 0 <= buffer.mark <= buffer.length
        ranges.extend(seen)

    assert ranges


@pytest.mark.parametrize("operator", ["y", "d", "c"])
def test_visual_operator_ranges_stay_in_bounds(operator: str) -> None:
    length = len(RANGE_TEXT)
    for mark in range(0, length, 3):
        for cursor in range(length + 1):
            manager = make_normal(RANGE_TEXT, mark)
            seen = record_ranges(manager)
            press(manager, "v")
            manager.context.buffer.set_cursor(cursor)

            # ``y`` also starts ``ys<d>``, so let the key timeout settle it.
            press(manager, operator, None)

            assert seen
            for (begin, end), length_after in seen:
                assert 0 <= begin <= end <= length
                assert begin <= length_after
            buffer = manager.context.buffer
            assert 0 <= buffer.cursor <= buffer.length


def test_change_listener_sees_delete_word() -> None:
    manager = make_normal("hello world", 0)
    deltas: List[BufferDelta] = []
    manager.context.buffer.on_change(deltas.append)

    press(manager, "dw")

    assert len(deltas) == 1
    delta = deltas[0]
    assert (delta.begin, delta.end) == (0, 6)
    assert (delta.removed, delta.inserted) == ("hello ", "")
    assert delta.label == "operator_delete"
    assert (delta.before_text, delta.after_text) == ("hello world", "world")
    assert (delta.cursor_before, delta.cursor_after) == (6, 0)


def test_yank_notifies_register_subscribers() -> None:
    manager = make_normal("hello world", 7)
    values: List[RegisterValue] = []
    manager.context.register.subscribe(values.append)

    press(manager, "yiw")
    press(manager, "yy")

    assert values == [
        RegisterValue(text="world"),
        RegisterValue(text="hello world", type="line"),
    ]
