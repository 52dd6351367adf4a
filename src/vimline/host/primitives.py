"""Host line-editor primitives invoked by name.

The overlay never reimplements the host's own widgets; it asks for them by
id through ``HostPrimitives.invoke``. ``BuiltinPrimitives`` is a standalone
implementation with the usual vi semantics, used by the demo app and tests.
Primitives that only make sense inside a real host (undo, history search,
accept-line) are forwarded as ``host.<id>`` events.
"""

from __future__ import annotations

from typing import Callable, Dict, Optional, Protocol, runtime_checkable

from vimline.buffer import LineBuffer
from vimline.buffer.lines import line_bounds, line_content_bounds
from vimline.runtime import telemetry

from . import motions

HostEmitter = Callable[[str, object], None]


class UnknownPrimitiveError(KeyError):
    """Raised when a primitive id is not known to the host."""


@runtime_checkable
class HostPrimitives(Protocol):
    def invoke(self, action_id: str, *args: object) -> object:
        """Run the host primitive ``action_id``."""

    def supports(self, action_id: str) -> bool:
        """Whether ``action_id`` can be invoked."""


_CURSOR_MOTIONS: Dict[str, Callable[[str, int], int]] = {
    "vi-backward-char": motions.backward_char,
    "vi-forward-char": motions.forward_char,
    "backward-char": motions.backward_char,
    "forward-char": motions.forward_char,
    "up-line": motions.up_line,
    "down-line": motions.down_line,
    "vi-forward-word": motions.forward_word,
    "vi-forward-word-end": motions.forward_word_end,
    "vi-backward-word": motions.backward_word,
    "vi-beginning-of-line": motions.beginning_of_line,
    "beginning-of-line": motions.beginning_of_line,
    "vi-first-non-blank": motions.first_non_blank,
    "vi-end-of-line": motions.vi_end_of_line,
    "end-of-line": motions.end_of_line,
}

_FIND_MOTIONS: Dict[str, Callable[[str, int, str], int]] = {
    "vi-find-next-char": motions.find_next_char,
    "vi-find-prev-char": motions.find_prev_char,
    "vi-find-next-char-skip": motions.find_next_char_skip,
    "vi-find-prev-char-skip": motions.find_prev_char_skip,
}

_SELECTIONS: Dict[str, Callable[[str, int], tuple[int, int]]] = {
    "select-in-word": motions.select_in_word,
    "select-a-word": motions.select_a_word,
}

# Forwarded to the host unchanged.
_HOST_EVENTS = frozenset(
    {
        "undo",
        "redo",
        "history-incremental-search-backward",
        "history-incremental-search-forward",
        "accept-line",
        "redisplay",
    }
)


class BuiltinPrimitives:
    """Vi-semantics primitives operating directly on a ``LineBuffer``."""

    def __init__(self, buffer: LineBuffer, *, emit: Optional[HostEmitter] = None) -> None:
        self.buffer = buffer
        self._emit = emit
        self.logger = telemetry.get_logger("vimline.host")
        self._editing: Dict[str, Callable[..., object]] = {
            "self-insert": self._self_insert,
            "backward-delete-char": self._backward_delete_char,
            "backward-kill-word": self._backward_kill_word,
            "vi-delete-char": self._delete_char,
            "vi-put-after": self._put_after,
            "vi-put-before": self._put_before,
            "vi-open-line-below": self._open_line_below,
            "vi-open-line-above": self._open_line_above,
            "up-line-or-history": self._up_line_or_history,
            "down-line-or-history": self._down_line_or_history,
        }

    def bind_emitter(self, emit: HostEmitter) -> None:
        self._emit = emit

    def supports(self, action_id: str) -> bool:
        return (
            action_id in _CURSOR_MOTIONS
            or action_id in _FIND_MOTIONS
            or action_id in _SELECTIONS
            or action_id in _HOST_EVENTS
            or action_id in self._editing
        )

    def invoke(self, action_id: str, *args: object) -> object:
        text = self.buffer.text
        cursor = self.buffer.cursor

        motion = _CURSOR_MOTIONS.get(action_id)
        if motion is not None:
            return self.buffer.set_cursor(motion(text, cursor))

        find = _FIND_MOTIONS.get(action_id)
        if find is not None:
            (target,) = args
            offset = find(text, cursor, str(target))
            if offset < 0:
                return None
            return self.buffer.set_cursor(offset)

        selection = _SELECTIONS.get(action_id)
        if selection is not None:
            begin, end = selection(text, cursor)
            self.buffer.set_mark(begin)
            self.buffer.set_cursor(end)
            return begin, end

        if action_id in _HOST_EVENTS:
            self._forward(action_id, {"cursor": cursor})
            return None

        handler = self._editing.get(action_id)
        if handler is None:
            raise UnknownPrimitiveError(action_id)
        return handler(*args)

    def _forward(self, action_id: str, payload: dict[str, object]) -> None:
        telemetry.record_event("host.primitive", data={"id": action_id})
        if self._emit is not None:
            self._emit(f"host.{action_id}", payload)

    def _self_insert(self, char: str) -> None:
        self.buffer.insert_text(char)

    def _backward_delete_char(self) -> None:
        cursor = self.buffer.cursor
        if cursor > 0:
            self.buffer.replace_range(cursor - 1, cursor, "", label="backward_delete_char")

    def _backward_kill_word(self) -> None:
        cursor = self.buffer.cursor
        begin = motions.backward_word(self.buffer.text, cursor)
        if begin < cursor:
            self.buffer.register.yank(self.buffer.text[begin:cursor])
            self.buffer.replace_range(begin, cursor, "", label="backward_kill_word")

    def _delete_char(self) -> None:
        cursor = self.buffer.cursor
        _, end = line_content_bounds(self.buffer.text, cursor)
        if cursor < end:
            self.buffer.register.yank(self.buffer.text[cursor : cursor + 1])
            self.buffer.replace_range(cursor, cursor + 1, "", label="delete_char", cursor=cursor)

    def _put_after(self) -> None:
        value = self.buffer.register.value
        if not value.text:
            return
        text = self.buffer.text
        cursor = self.buffer.cursor
        if value.type == "line":
            _, end = line_content_bounds(text, cursor)
            self.buffer.replace_range(end, end, "\n" + value.text, label="put_after", cursor=end + 1)
            return
        offset = min(cursor + 1, len(text)) if text else 0
        self.buffer.replace_range(
            offset, offset, value.text, label="put_after", cursor=offset + len(value.text) - 1
        )

    def _put_before(self) -> None:
        value = self.buffer.register.value
        if not value.text:
            return
        cursor = self.buffer.cursor
        if value.type == "line":
            start, _ = line_bounds(self.buffer.text, cursor)
            self.buffer.replace_range(start, start, value.text + "\n", label="put_before", cursor=start)
            return
        self.buffer.replace_range(
            cursor, cursor, value.text, label="put_before", cursor=cursor + len(value.text) - 1
        )

    def _open_line_below(self) -> None:
        _, end = line_content_bounds(self.buffer.text, self.buffer.cursor)
        self.buffer.replace_range(end, end, "\n", label="open_line_below")

    def _open_line_above(self) -> None:
        start, _ = line_bounds(self.buffer.text, self.buffer.cursor)
        self.buffer.replace_range(start, start, "\n", label="open_line_above", cursor=start)

    def _up_line_or_history(self) -> None:
        cursor = self.buffer.cursor
        target = motions.up_line(self.buffer.text, cursor)
        if target == cursor:
            self._forward("up-history", {"cursor": cursor})
            return
        self.buffer.set_cursor(target)

    def _down_line_or_history(self) -> None:
        cursor = self.buffer.cursor
        target = motions.down_line(self.buffer.text, cursor)
        if target == cursor:
            self._forward("down-history", {"cursor": cursor})
            return
        self.buffer.set_cursor(target)


__all__ = ["BuiltinPrimitives", "HostEmitter", "HostPrimitives", "UnknownPrimitiveError"]
