"""Operator-motion engine: yank/delete/change over a motion or whole line.

Ranges are half-open ``[begin, end)`` with ``begin <= end``. The mark is set
to the cursor before the motion runs; the range is then spanned by the mark
and the post-motion cursor. Inclusive motions (``e``, ``$``, ``f``, ``t``)
extend the end by one character.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import partial
from typing import Dict, Optional

from vimline.buffer import line_change_bounds, line_content_bounds, whole_line_delete_bounds
from vimline.buffer.registers import RegisterType
from vimline.host import motions
from vimline.keymaps import KeySequence, KeyStroke, ResolutionMatch
from vimline.modes.base_mode import ModeContext, ModeResult
from vimline.runtime import telemetry

OPERATOR_KEYS: Dict[str, str] = {"y": "yank", "d": "delete", "c": "change"}


@dataclass(frozen=True, slots=True)
class MotionSpec:
    primitive: str
    inclusive: bool = False


_MOTIONS: Dict[str, MotionSpec] = {
    "^": MotionSpec("vi-first-non-blank"),
    "$": MotionSpec("vi-end-of-line", inclusive=True),
    "0": MotionSpec("vi-beginning-of-line"),
    " ": MotionSpec("vi-forward-char"),
    "h": MotionSpec("vi-backward-char"),
    "j": MotionSpec("down-line"),
    "k": MotionSpec("up-line"),
    "l": MotionSpec("vi-forward-char"),
    "w": MotionSpec("vi-forward-word"),
    "e": MotionSpec("vi-forward-word-end", inclusive=True),
    "b": MotionSpec("vi-backward-word"),
}

_FIND_MOTIONS: Dict[str, MotionSpec] = {
    "f": MotionSpec("vi-find-next-char", inclusive=True),
    "F": MotionSpec("vi-find-prev-char"),
    "t": MotionSpec("vi-find-next-char-skip", inclusive=True),
    "T": MotionSpec("vi-find-prev-char-skip"),
}

_SELECTIONS: Dict[str, str] = {
    "iw": "select-in-word",
    "aw": "select-a-word",
}


def apply_operator(context: ModeContext, keys: KeySequence) -> ModeResult:
    """Run the operator in ``keys[0]`` over the motion in the remaining keys."""

    if len(keys) < 2 or not all(stroke.is_printable for stroke in keys):
        return _aborted("unknown_motion")
    operator = OPERATOR_KEYS.get(keys[0].value)
    if operator is None:
        return _aborted("unknown_operator")
    motion = "".join(stroke.value for stroke in keys.strokes[1:])

    find = _FIND_MOTIONS.get(motion)
    if find is not None:
        return context.ask(
            find.primitive, partial(_finish_find, operator=operator, spec=find)
        )

    with telemetry.span(
        "operator::range",
        component="operator",
        metadata={"operator": operator, "motion": motion},
    ) as handle:
        span = _motion_range(context, operator, motion)
        if span is None:
            handle.add_metadata("status", "unknown_motion")
            return _aborted("unknown_motion")
        return apply_range(context, operator, *span)


def apply_range(
    context: ModeContext,
    operator: str,
    begin: int,
    end: int,
    *,
    register_type: RegisterType = "character",
    cursor: Optional[int] = None,
    removal: Optional[tuple[int, int]] = None,
) -> ModeResult:
    """Apply ``operator`` to ``[begin, end)``.

    ``removal`` overrides the span actually deleted (whole-line deletes take
    an adjacent newline the register does not keep).
    """

    buffer = context.buffer
    if begin > end:
        begin, end = end, begin
    if begin == end and removal is None and operator != "change":
        return ModeResult(consumed=True, status="noop", message="empty_range")

    text = buffer.get_text_range(begin, end)
    if operator != "change" or begin != end:
        buffer.register.yank(text, register_type=register_type)

    if operator == "yank":
        buffer.set_cursor(begin if cursor is None else cursor)
    else:
        remove_begin, remove_end = removal or (begin, end)
        buffer.replace_range(
            remove_begin,
            remove_end,
            "",
            label=f"operator_{operator}",
            cursor=remove_begin if cursor is None else cursor,
        )
    buffer.set_mark(buffer.cursor)

    context.bus.emit(
        f"operator.{operator}",
        {"range": (begin, end), "text": text, "type": register_type},
    )
    if operator == "change":
        return ModeResult(
            consumed=True, switch_to="insert", variant="insert", message=operator
        )
    return ModeResult(consumed=True, message=operator)


def yank_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    begin, end = line_content_bounds(buffer.text, buffer.cursor)
    text = buffer.text[begin:end]
    buffer.register.yank(text, register_type="line")
    context.bus.emit("operator.yank", {"range": (begin, end), "text": text, "type": "line"})
    return ModeResult(consumed=True, message="yank_line")


def delete_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    text = buffer.text
    begin, end = whole_line_delete_bounds(text, buffer.cursor)
    content_begin, content_end = line_content_bounds(text, buffer.cursor)
    if begin == end:
        return _aborted("empty_line")
    remaining = len(text) - (end - begin)
    landing = begin + 1 if begin > 0 else begin
    landing = max(0, min(landing, remaining - 1))
    result = apply_range(
        context,
        "delete",
        content_begin,
        content_end,
        register_type="line",
        removal=(begin, end),
        cursor=landing,
    )
    buffer.set_cursor(motions.beginning_of_line(buffer.text, buffer.cursor))
    return result


def change_line(context: ModeContext, match: ResolutionMatch) -> ModeResult:
    del match
    buffer = context.buffer
    begin, end = line_change_bounds(buffer.text, buffer.cursor)
    return apply_range(context, "change", begin, end, register_type="line")


def _motion_range(
    context: ModeContext, operator: str, motion: str
) -> Optional[tuple[int, int]]:
    buffer = context.buffer
    text = buffer.text
    origin = buffer.cursor
    buffer.set_mark(origin)

    selection = _SELECTIONS.get(motion)
    if selection is not None:
        begin, end = context.host.invoke(selection)  # type: ignore[misc]
        return begin, end

    on_word = motions.char_class(buffer.char_at(origin) or " ") != motions.SPACE
    if operator == "change" and motion == "w" and on_word:
        # ``cw`` on a word changes to the end of that word only.
        if motions.is_word_end(text, origin):
            return origin, origin + 1
        motion = "e"

    spec = _MOTIONS.get(motion)
    if spec is None:
        return None
    context.host.invoke(spec.primitive)
    return _span(text, origin, buffer.cursor, spec.inclusive)


def _span(text: str, origin: int, target: int, inclusive: bool) -> tuple[int, int]:
    begin, end = min(origin, target), max(origin, target)
    if inclusive and end < len(text) and text[end] != "\n":
        end += 1
    return begin, end


def _finish_find(
    context: ModeContext,
    key: Optional[KeyStroke],
    *,
    operator: str,
    spec: MotionSpec,
) -> ModeResult:
    if key is None or not key.is_printable:
        return ModeResult(consumed=True, status="cancelled", message=operator)
    buffer = context.buffer
    origin = buffer.cursor
    buffer.set_mark(origin)
    if context.host.invoke(spec.primitive, key.value) is None:
        return _aborted("char_not_found")
    begin, end = _span(buffer.text, origin, buffer.cursor, spec.inclusive)
    return apply_range(context, operator, begin, end)


def _aborted(reason: str) -> ModeResult:
    return ModeResult(consumed=True, status="noop", message=reason)


__all__ = [
    "MotionSpec",
    "OPERATOR_KEYS",
    "apply_operator",
    "apply_range",
    "change_line",
    "delete_line",
    "yank_line",
]
