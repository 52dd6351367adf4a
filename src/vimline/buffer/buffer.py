"""Line buffer façade combining text, cursor/mark state and the register."""

from __future__ import annotations

from contextlib import AbstractContextManager
from dataclasses import dataclass
from typing import Callable, ContextManager, List, Optional

from vimline.runtime import telemetry

from .registers import Register
from .state import BufferState
from .sync import BufferMirror
from .validation import clamp_offset, ensure_range

ChangeListener = Callable[["BufferDelta"], None]


@dataclass(slots=True)
class BufferView:
    version: int
    text: str
    cursor: int
    mark: int


@dataclass(slots=True)
class BufferDelta:
    version: int
    label: str
    begin: int
    end: int
    removed: str
    inserted: str
    before_text: str
    after_text: str
    cursor_before: int
    cursor_after: int


class LineBuffer:
    """The single mutable edit line (which may itself hold newlines).

    All mutation goes through ``replace_range``; listeners registered with
    ``on_change`` receive a ``BufferDelta`` per mutation, which is how a
    host keeps its own undo history in step.
    """

    def __init__(
        self,
        text: str = "",
        *,
        name: str = "default",
        state: Optional[BufferState] = None,
        register: Optional[Register] = None,
    ) -> None:
        self.name = name
        self._text = text
        self.version = 0
        self.state = state or BufferState()
        self.register = register or Register()
        self._listeners: List[ChangeListener] = []
        self.state.cursor = clamp_offset(len(text), self.state.cursor)
        self.state.mark = clamp_offset(len(text), self.state.mark)

    @classmethod
    def from_text(
        cls, text: str, *, cursor: int = 0, name: str = "default"
    ) -> "LineBuffer":
        return cls(text, name=name, state=BufferState(cursor=cursor, mark=cursor))

    @property
    def text(self) -> str:
        return self._text

    @property
    def length(self) -> int:
        return len(self._text)

    @property
    def cursor(self) -> int:
        return self.state.cursor

    @property
    def mark(self) -> int:
        return self.state.mark

    def set_cursor(self, offset: int) -> int:
        self.state.set_cursor(clamp_offset(len(self._text), offset))
        return self.state.cursor

    def set_mark(self, offset: int) -> int:
        self.state.set_mark(clamp_offset(len(self._text), offset))
        return self.state.mark

    def char_at(self, offset: int) -> str:
        if 0 <= offset < len(self._text):
            return self._text[offset]
        return ""

    def on_change(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def snapshot(self) -> BufferView:
        return BufferView(
            version=self.version,
            text=self._text,
            cursor=self.state.cursor,
            mark=self.state.mark,
        )

    def mirror(self, *, attributes: Optional[dict[str, str]] = None) -> BufferMirror:
        return BufferMirror(
            text=self._text,
            cursor=self.state.cursor,
            mark=self.state.mark,
            attributes=dict(attributes or {}),
        )

    def reset(self, text: str = "", *, cursor: Optional[int] = None) -> None:
        """Start over with new content; used at the start of an edit session."""

        self._text = text
        self.version += 1
        offset = len(text) if cursor is None else clamp_offset(len(text), cursor)
        self.state.cursor = offset
        self.state.mark = offset

    def replace_range(
        self,
        begin: int,
        end: int,
        text: str,
        *,
        label: str,
        cursor: Optional[int] = None,
    ) -> BufferDelta:
        begin, end = ensure_range(len(self._text), begin, end)
        with Transaction(self, label) as tx:
            before_text = self._text
            cursor_before = self.state.cursor
            removed = before_text[begin:end]
            self._text = before_text[:begin] + text + before_text[end:]
            self.version += 1
            target = begin + len(text) if cursor is None else cursor
            self.state.cursor = clamp_offset(len(self._text), target)
            self.state.mark = clamp_offset(len(self._text), self.state.mark)
            delta = BufferDelta(
                version=self.version,
                label=label,
                begin=begin,
                end=end,
                removed=removed,
                inserted=text,
                before_text=before_text,
                after_text=self._text,
                cursor_before=cursor_before,
                cursor_after=self.state.cursor,
            )
            tx.commit(delta)
        return delta

    def insert_text(self, text: str, *, offset: Optional[int] = None) -> BufferDelta:
        position = self.state.cursor if offset is None else offset
        return self.replace_range(position, position, text, label="insert_text")

    def get_text_range(self, begin: int, end: int) -> str:
        if begin > end:
            begin, end = end, begin
        begin, end = ensure_range(len(self._text), begin, end)
        return self._text[begin:end]


class Transaction(AbstractContextManager["Transaction"]):
    def __init__(self, buffer: LineBuffer, label: str) -> None:
        self.buffer = buffer
        self.label = label
        self._span_cm: Optional[ContextManager[object]] = None

    def __enter__(self) -> "Transaction":
        self._span_cm = telemetry.span(
            name=f"buffer::{self.label}",
            component=True,
            metadata={"buffer": self.buffer.name},
        )
        self._span_cm.__enter__()
        return self

    def commit(self, delta: BufferDelta) -> None:
        for listener in list(self.buffer._listeners):
            listener(delta)

    def __exit__(self, exc_type, exc, tb) -> bool:
        if self._span_cm is not None:
            self._span_cm.__exit__(exc_type, exc, tb)
        return False
