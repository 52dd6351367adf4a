"""Emacs-style editing keys available in Insert mode."""

from __future__ import annotations

from vimline.buffer import line_change_bounds
from vimline.keymaps import ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult


def forward_kill_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``^K``: drop everything after the cursor."""

    del match
    buffer = context.buffer
    cursor = buffer.cursor
    if cursor < buffer.length:
        buffer.replace_range(cursor, buffer.length, "", label="forward_kill_line", cursor=cursor)
    return ModeResult(consumed=True, message="forward_kill_line")


def backward_kill_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Drop everything before the cursor and move to the start."""

    del match
    buffer = context.buffer
    if buffer.cursor > 0:
        buffer.replace_range(0, buffer.cursor, "", label="backward_kill_line", cursor=0)
    return ModeResult(consumed=True, message="backward_kill_line")


def kill_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Cut the current line into the register, keeping its newline."""

    del match
    buffer = context.buffer
    begin, end = line_change_bounds(buffer.text, buffer.cursor)
    buffer.register.yank(buffer.text[begin:end], register_type="line")
    buffer.replace_range(begin, end, "", label="kill_line", cursor=begin)
    buffer.set_mark(begin)
    return ModeResult(consumed=True, message="kill_line")


def viins_undo(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``^U``: kill before the cursor, or the whole line with the legacy option."""

    if context.options.insert_mode_legacy_undo:
        return kill_line(context, match)
    return backward_kill_line(context, match)


def paste_register(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``^Y``: insert the register contents at the cursor."""

    del match
    text = context.register.text
    if text:
        context.buffer.insert_text(text)
    return ModeResult(consumed=True, message="paste")


__all__ = [
    "backward_kill_line",
    "forward_kill_line",
    "kill_line",
    "paste_register",
    "viins_undo",
]
