"""Surround engine actions: select, add, change and delete delimiter pairs."""

from __future__ import annotations

from functools import partial
from typing import Optional

from vimline.keymaps import KeyStroke, ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult
from vimline.runtime import telemetry
from vimline.surround import (
    DEFAULT_PAIRS,
    PendingSurroundOp,
    SurroundPairs,
    SurroundSpan,
    decode_surround,
    move_around_target,
    search_surround,
)

from .operator import apply_range
from .visual import remember_origin


def _pairs(context: ModeContext) -> SurroundPairs:
    pairs = context.extras.get("surround_pairs")
    return pairs if isinstance(pairs, SurroundPairs) else DEFAULT_PAIRS


def _search(context: ModeContext, op: PendingSurroundOp) -> Optional[SurroundSpan]:
    buffer = context.buffer
    with telemetry.span(
        "surround::search",
        component="surround",
        metadata={"delimiter": op.delimiter, "action": op.action},
    ) as handle:
        span = search_surround(
            buffer.text, buffer.cursor, op.delimiter, pairs=_pairs(context)
        )
        handle.add_metadata("found", span is not None)
        return span


def _decode(match: ResolutionMatch) -> Optional[PendingSurroundOp]:
    return decode_surround(match.keys)


def select_surround(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Visual ``i<d>``/``a<d>``: select the body, or the body and delimiters."""

    op = _decode(match)
    span = _search(context, op) if op else None
    if op is None or span is None:
        return ModeResult(consumed=True, switch_to="normal", status="surround_miss")
    begin, end = span.scoped(op.scope or "inner")
    buffer = context.buffer
    remember_origin(context, buffer.cursor, buffer.mark, (begin, end))
    buffer.set_mark(begin)
    buffer.set_cursor(end)
    context.bus.emit("visual.selection", {"mark": begin, "cursor": end})
    return ModeResult(consumed=True, switch_to="visual", status="visual_select")


def add_surround(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Wrap the selection in a delimiter pair; the body is left untouched."""

    op = _decode(match)
    if op is None:
        return ModeResult(consumed=True, switch_to="normal", status="surround_miss")
    buffer = context.buffer
    begin, end = buffer.state.span()
    open_char, close_char = _pairs(context).pair(op.delimiter)
    body = buffer.text[begin:end]
    buffer.replace_range(
        begin, end, f"{open_char}{body}{close_char}", label="surround_add", cursor=begin
    )
    context.bus.emit("surround.add", {"range": (begin, end), "delimiter": op.delimiter})
    return ModeResult(consumed=True, switch_to="normal", message="surround_add")


def change_surround(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Highlight the pair found around the cursor and ask for its replacement."""

    op = _decode(match)
    span = _search(context, op) if op else None
    if span is None:
        return ModeResult(consumed=True, status="surround_miss")
    context.bus.emit(
        "surround.highlight",
        {
            "offsets": (span.begin, span.end),
            "color": context.options.region_highlight,
        },
    )
    return context.ask("surround-replace", partial(_replace_delimiters, span=span))


def _replace_delimiters(
    context: ModeContext, key: Optional[KeyStroke], *, span: SurroundSpan
) -> ModeResult:
    context.bus.emit("surround.unhighlight", {"offsets": (span.begin, span.end)})
    if key is None or not key.is_printable:
        return ModeResult(consumed=True, status="cancelled", message="surround_change")
    buffer = context.buffer
    open_char, close_char = _pairs(context).pair(key.value)
    body = buffer.text[span.begin + 1 : span.end]
    buffer.replace_range(
        span.begin,
        span.end + 1,
        f"{open_char}{body}{close_char}",
        label="surround_change",
        cursor=span.begin,
    )
    context.bus.emit(
        "surround.change", {"range": (span.begin, span.end + 1), "delimiter": key.value}
    )
    return ModeResult(consumed=True, message="surround_change")


def delete_surround(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """Drop the delimiter pair around the cursor and keep the body."""

    op = _decode(match)
    span = _search(context, op) if op else None
    if span is None:
        return ModeResult(consumed=True, status="surround_miss")
    buffer = context.buffer
    body = buffer.text[span.begin + 1 : span.end]
    buffer.replace_range(
        span.begin, span.end + 1, body, label="surround_delete", cursor=span.begin
    )
    context.bus.emit("surround.delete", {"range": (span.begin, span.end + 1)})
    return ModeResult(consumed=True, message="surround_delete")


def surround_text_object(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``{c,d,y}{i,a}<d>``: run the operator over the scoped span."""

    op = _decode(match)
    span = _search(context, op) if op else None
    if op is None or span is None:
        return ModeResult(consumed=True, switch_to="normal", status="surround_miss")
    begin, end = span.scoped(op.scope or "inner")
    if begin == end:
        context.buffer.register.yank("")
    return apply_range(context, op.action, begin, end)


def move_around_surround(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    """``%``: jump between the open and close delimiter around the cursor."""

    del match
    buffer = context.buffer
    target = move_around_target(buffer.text, buffer.cursor, pairs=_pairs(context))
    if target is None:
        return ModeResult(consumed=True, status="surround_miss")
    buffer.set_cursor(target)
    return ModeResult(consumed=True, message="move_around")


__all__ = [
    "add_surround",
    "change_surround",
    "delete_surround",
    "move_around_surround",
    "select_surround",
    "surround_text_object",
]
