"""Operators and selection helpers for Visual mode.

The selection is the half-open span between the mark (set on entering
Visual mode) and the cursor.
"""

from __future__ import annotations

from vimline.keymaps import ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult, SelectOrigin

from .operator import apply_range


def _selection(context: ModeContext) -> tuple[int, int]:
    return context.buffer.state.span()


def _still_selected(
    context: ModeContext, origin: SelectOrigin, mark: int, cursor: int
) -> bool:
    return origin.version == context.buffer.version and origin.selection == (mark, cursor)


def remember_origin(
    context: ModeContext, cursor: int, mark: int, selection: tuple[int, int]
) -> None:
    """Record where a text-object selection started.

    ``cursor`` and ``mark`` are the offsets before the selection was made.
    Selecting again straight after a selection keeps the first origin.
    """

    previous = context.select_origin
    if previous is not None and _still_selected(context, previous, mark, cursor):
        cursor, mark = previous.cursor, previous.mark
    context.select_origin = SelectOrigin(
        cursor=cursor, mark=mark, selection=selection, version=context.buffer.version
    )


def cancel_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Visual ``^[``: leave Visual mode.

    An untouched text-object selection puts the cursor and mark back where
    they were before it was made.
    """

    del match
    buffer = context.buffer
    origin = context.select_origin
    if origin is not None and _still_selected(context, origin, buffer.mark, buffer.cursor):
        buffer.set_mark(origin.mark)
        buffer.set_cursor(origin.cursor)
    return ModeResult(consumed=True, switch_to="normal", message="exit_to_normal")


def yank_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    begin, end = _selection(context)
    text = buffer.get_text_range(begin, end)
    if begin != end:
        buffer.register.yank(text)
    context.bus.emit("visual.yank", {"range": (begin, end), "text": text})
    return ModeResult(
        consumed=True, switch_to="normal", status="visual_yank", message="yank"
    )


def delete_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    begin, end = _selection(context)
    context.bus.emit("visual.delete", {"range": (begin, end)})
    outcome = apply_range(context, "delete", begin, end)
    outcome.switch_to = "normal"
    return outcome


def change_selection(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    begin, end = _selection(context)
    context.bus.emit("visual.change", {"range": (begin, end)})
    return apply_range(context, "change", begin, end)


def select_word(context: ModeContext, match: ResolutionMatch, *, primitive: str) -> ModeResult:
    """``iw``/``aw``: select the word under the cursor."""

    del match
    buffer = context.buffer
    cursor, mark = buffer.cursor, buffer.mark
    begin, end = context.host.invoke(primitive)  # type: ignore[misc]
    remember_origin(context, cursor, mark, (buffer.mark, buffer.cursor))
    context.bus.emit("visual.selection", {"mark": begin, "cursor": end})
    return ModeResult(consumed=True, status="visual_select")


def swap_anchor(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``o``: exchange the selection anchor and the cursor."""

    del match
    buffer = context.buffer
    mark, cursor = buffer.mark, buffer.cursor
    buffer.set_mark(cursor)
    buffer.set_cursor(mark)
    context.bus.emit("visual.selection", {"mark": buffer.mark, "cursor": buffer.cursor})
    return ModeResult(consumed=True, status="visual_swap")


__all__ = [
    "cancel_selection",
    "change_selection",
    "delete_selection",
    "remember_origin",
    "select_word",
    "swap_anchor",
    "yank_selection",
]
